"""Doctor command for environment diagnostics."""

from __future__ import annotations

import asyncio

import typer
from rich.console import Console
from rich.table import Table

from adapters.autotask import AutotaskClient
from adapters.itglue import ITGlueClient
from core.config import AppSettings
from core.errors import DocumentationApiError, PsaApiError

app = typer.Typer(no_args_is_help=True, help="Environment diagnostics and configuration checks.")

_console = Console()


async def _check_psa(settings: AppSettings) -> tuple[bool, str]:
    try:
        status = await AutotaskClient(settings).probe()
        return True, status
    except PsaApiError as exc:
        if exc.is_unauthorized:
            return False, f"API Key Unauthorized. ({exc.detail})"
        return False, exc.detail
    except Exception as exc:
        return False, str(exc)


async def _check_documentation(settings: AppSettings) -> tuple[bool, str]:
    try:
        await ITGlueClient(settings).find_organization("doctor")
        return True, "OK"
    except DocumentationApiError as exc:
        return False, str(exc)
    except Exception as exc:
        return False, str(exc)


@app.command()
def run(
    offline: bool = typer.Option(False, "--offline", help="Only check configuration, no network calls."),
) -> None:
    """Run baseline diagnostics and show recommended fixes."""

    settings = AppSettings()

    table = Table(title="ITG Expiry Bridge Doctor")
    table.add_column("Check", style="bright_green", no_wrap=True)
    table.add_column("Status", style="white")
    table.add_column("Details", style="dim")

    missing = settings.missing_required()
    if missing:
        table.add_row("Config", "FAIL", "Missing: " + ", ".join(missing))
    else:
        table.add_row("Config", "OK", "All required variables set")
    table.add_row("Ignored issuer", "OK", settings.ignored_certificate_issuer)
    table.add_row("Ignore marker", "OK", settings.ignore_alerts_marker)
    table.add_row(
        "PSA probe",
        "OK" if settings.verify_psa_connectivity else "SKIPPED",
        "Enabled" if settings.verify_psa_connectivity else "VERIFY_PSA_CONNECTIVITY=false",
    )

    ok_psa = ok_docs = True
    if not offline:
        ok_psa, detail_psa = asyncio.run(_check_psa(settings))
        table.add_row("Autotask API", "OK" if ok_psa else "FAIL", detail_psa)

        ok_docs, detail_docs = asyncio.run(_check_documentation(settings))
        table.add_row("IT Glue API", "OK" if ok_docs else "FAIL", detail_docs)

    _console.print(table)

    if missing or not ok_psa or not ok_docs:
        _console.print(
            "\n[yellow]Note:[/yellow] Without a working Autotask connection tickets are created against company 0;"
            " without IT Glue the ticket carries no expiry details."
        )
        raise typer.Exit(code=1)
