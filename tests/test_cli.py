"""
Tests for the Typer CLI (`send`, `doctor`).
"""

from unittest.mock import patch

from typer.testing import CliRunner

from cli.main import app

runner = CliRunner()


def test_send_processes_alert(settings, collaborators):
    with patch("cli.main.AppSettings", return_value=settings), patch(
        "cli.main.build_collaborators", return_value=collaborators
    ):
        result = runner.invoke(
            app,
            ["send", "--type", "Domain Expiry", "-o", "Acme Corp", "-r", "acme.com", "-e", "14 days", "--no-banner"],
        )

    assert result.exit_code == 0
    assert "ticket_created" in result.output
    collaborators.psa.create.assert_awaited_once()


def test_send_unsupported_type_exits_1(settings, collaborators):
    with patch("cli.main.AppSettings", return_value=settings), patch(
        "cli.main.build_collaborators", return_value=collaborators
    ):
        result = runner.invoke(app, ["send", "--type", "Warranty Expiry", "--no-banner"])

    assert result.exit_code == 1
    assert "rejected" in result.output
    collaborators.psa.probe.assert_not_awaited()


def test_doctor_offline_with_complete_config(settings):
    with patch("cli.doctor.AppSettings", return_value=settings):
        result = runner.invoke(app, ["doctor", "run", "--offline"])

    assert result.exit_code == 0
    assert "All required variables set" in result.output


def test_doctor_offline_reports_missing(settings):
    settings.itg_api_key = None

    with patch("cli.doctor.AppSettings", return_value=settings):
        result = runner.invoke(app, ["doctor", "run", "--offline"])

    assert result.exit_code == 1
    assert "ITG_API_KEY" in result.output
