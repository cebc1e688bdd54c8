"""
Shared pytest fixtures.

Collaborators are `AsyncMock` objects shaped like the Protocols in
`core.interfaces.collaborators`; adapter tests use `httpx.MockTransport`.
"""

from datetime import datetime, timezone
from unittest.mock import AsyncMock, MagicMock

import pytest

from core.config import AppSettings
from core.domain.models import DocumentationOrganization, DomainRecord, MailContact
from core.services.alert_pipeline import Collaborators


@pytest.fixture
def settings() -> AppSettings:
    """Settings isolated from the developer's environment and .env file."""
    return AppSettings(
        _env_file=None,
        autotask_user="api@example.com",
        autotask_secret="secret",
        autotask_integration_code="INTEGRATION",
        itg_api_key="itg-key",
        ticket_queue_id=29683,
        ticket_issue_type=12,
        ticket_sub_issue_type=240,
        ticket_sla_id=1,
        email_from=MailContact(email="bridge@example.com", name="Expiry Bridge"),
        email_to=MailContact(email="support@example.com", name="Support"),
        email_api_endpoint="https://mail.example/send",
        email_api_key="mail-key",
    )


@pytest.fixture
def psa() -> MagicMock:
    mock = MagicMock()
    mock.probe = AsyncMock(return_value="200 - OK")
    mock.query = AsyncMock(return_value=[])
    mock.create = AsyncMock(return_value={"itemId": 9001})
    return mock


@pytest.fixture
def documentation() -> MagicMock:
    mock = MagicMock()
    mock.find_organization = AsyncMock(
        return_value=DocumentationOrganization(id="42", name="Acme Corp", short_name="ACME")
    )
    mock.list_domains = AsyncMock(return_value=[])
    mock.list_ssl_expirations = AsyncMock(return_value=[])
    return mock


@pytest.fixture
def mailer() -> MagicMock:
    mock = MagicMock()
    mock.send = AsyncMock(return_value=None)
    return mock


@pytest.fixture
def inspector() -> MagicMock:
    mock = MagicMock()
    mock.resolve_ip = AsyncMock(return_value="203.0.113.10")
    mock.lookup_issuer = AsyncMock(return_value="DigiCert Inc")
    return mock


@pytest.fixture
def collaborators(psa, documentation, mailer, inspector) -> Collaborators:
    return Collaborators(psa=psa, documentation=documentation, mailer=mailer, inspector=inspector)


@pytest.fixture
def acme_domain() -> DomainRecord:
    return DomainRecord(
        name="acme.com",
        expires_on=datetime(2025, 5, 1, tzinfo=timezone.utc),
        registrar_name="Tucows",
        notes=None,
    )
