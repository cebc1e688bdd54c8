"""Construcción de los adaptadores concretos a partir de la configuración."""

from __future__ import annotations

from adapters.autotask import AutotaskClient
from adapters.email_api import EmailApiSender
from adapters.host_inspector import SocketHostInspector
from adapters.itglue import ITGlueClient
from core.config import AppSettings
from core.services.alert_pipeline import Collaborators


def build_collaborators(settings: AppSettings) -> Collaborators:
    return Collaborators(
        psa=AutotaskClient(settings),
        documentation=ITGlueClient(settings),
        mailer=EmailApiSender(settings),
        inspector=SocketHostInspector(settings),
    )
