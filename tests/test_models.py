"""
Tests for domain models: alert validation, date handling and payloads.
"""

from datetime import datetime, timezone

import pytest

from core.domain.models import (
    AlertKind,
    BillingEntity,
    DomainRecord,
    EmailMessage,
    ExpiryAlert,
    MailContact,
    TicketDraft,
    format_long_date,
    parse_expiry_date,
)
from core.errors import UnsupportedAlertTypeError


class TestExpiryAlert:
    def test_from_params_domain(self):
        alert = ExpiryAlert.from_params(
            {
                "testType": "Domain Expiry",
                "organizationName": "Acme Corp",
                "resourceName": "acme.com",
                "resourceTimeToExpiry": "14 days",
                "resourceUrl": "https://itg.example/domains/1",
            }
        )

        assert alert.kind is AlertKind.DOMAIN
        assert alert.organization_name == "Acme Corp"
        assert alert.time_to_expiry == "14 days"

    def test_missing_free_text_defaults_to_empty(self):
        alert = ExpiryAlert.from_params({"testType": "SSL Expiry"})

        assert alert.kind is AlertKind.SSL_CERTIFICATE
        assert alert.resource_name == ""

    @pytest.mark.parametrize("test_type", [None, "", "domain expiry", "Password Expiry"])
    def test_unsupported_type_raises(self, test_type):
        with pytest.raises(UnsupportedAlertTypeError) as exc_info:
            ExpiryAlert.from_params({"testType": test_type})

        assert str(exc_info.value) == f"Test Type '{test_type}' is not supported. Exiting..."

    def test_acknowledgment_with_resource(self):
        alert = ExpiryAlert(
            kind=AlertKind.DOMAIN,
            organization_name="Acme Corp",
            resource_name="acme.com",
            time_to_expiry="14 days",
            resource_url="https://itg.example/domains/1",
        )

        assert alert.acknowledgment() == (
            "Test: 'Domain Expiry' on 'acme.com' was triggered. Org: Acme Corp"
            " \n Time to Expiry: 14 days \n Url: https://itg.example/domains/1"
        )

    def test_acknowledgment_without_resource(self):
        alert = ExpiryAlert(kind=AlertKind.DOMAIN)

        assert alert.acknowledgment() == "This HTTP triggered function executed successfully."


class TestDates:
    def test_date_only_is_utc_midnight(self):
        assert parse_expiry_date("2025-05-01") == datetime(2025, 5, 1, tzinfo=timezone.utc)

    def test_iso_with_z(self):
        assert parse_expiry_date("2025-05-01T12:30:00Z") == datetime(2025, 5, 1, 12, 30, tzinfo=timezone.utc)

    @pytest.mark.parametrize("value", [None, "", "not a date", 12345])
    def test_unparseable_is_none(self, value):
        assert parse_expiry_date(value) is None

    def test_domain_record_parses_expiry(self):
        record = DomainRecord(name="acme.com", expires_on="2025-05-01")

        assert record.expires_on == datetime(2025, 5, 1, tzinfo=timezone.utc)

    def test_long_date_format(self):
        assert format_long_date(datetime(2025, 5, 1, tzinfo=timezone.utc)) == "Thursday, May 1, 2025"

    def test_long_date_september_abbreviation(self):
        assert format_long_date(datetime(2025, 9, 2, tzinfo=timezone.utc)) == "Tuesday, Sep 2, 2025"


class TestBillingEntity:
    def test_parses_psa_row(self):
        entity = BillingEntity.model_validate(
            {"id": 7, "companyName": "Acme Corporation", "companyNumber": None, "isActive": True}
        )

        assert entity.name == "Acme Corporation"
        assert entity.number == ""
        assert not entity.is_sentinel

    def test_sentinel(self):
        assert BillingEntity.sentinel().id == 0
        assert BillingEntity.sentinel().is_sentinel


class TestPayloads:
    def _draft(self, **overrides) -> TicketDraft:
        values = dict(
            company_id=7,
            location_id=10,
            contract_id=None,
            priority=3,
            status=1,
            queue_id=1,
            issue_type=2,
            sub_issue_type=3,
            sla_id=4,
            title="Domain Expiring: acme.com",
            description="desc",
        )
        values.update(overrides)
        return TicketDraft(**values)

    def test_ticket_payload_without_due_date(self):
        payload = self._draft().to_payload()

        assert "DueDateTime" not in payload
        assert payload["ContractID"] is None
        assert payload["CompanyLocationID"] == 10

    def test_ticket_payload_with_due_date(self):
        payload = self._draft(due_date=datetime(2025, 5, 1, tzinfo=timezone.utc)).to_payload()

        assert payload["DueDateTime"] == "2025-05-01T00:00:00Z"

    def test_email_converts_newlines(self):
        message = EmailMessage.from_plaintext(
            sender=MailContact(email="a@example.com", name="A"),
            recipients=[MailContact(email="b@example.com", name="B")],
            subject="Subject",
            body="line one\nline two\r\nline three",
        )

        payload = message.to_payload()
        assert payload["HTMLContent"] == "line one<br />line two<br />line three"
        assert payload["From"] == {"Email": "a@example.com", "Name": "A"}
        assert payload["To"] == [{"Email": "b@example.com", "Name": "B"}]

    def test_email_escapes_markup_in_notes(self):
        message = EmailMessage.from_plaintext(
            sender=MailContact(email="a@example.com", name="A"),
            recipients=[MailContact(email="b@example.com", name="B")],
            subject="Subject",
            body="Notes: <script>alert(1)</script> & more\nOwner: Bob's team",
        )

        assert message.html_content == (
            "Notes: &lt;script&gt;alert(1)&lt;/script&gt; &amp; more<br />Owner: Bob's team"
        )
