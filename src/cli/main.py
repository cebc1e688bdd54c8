"""CLI principal (Typer).

Comandos:
- `send`: procesa una alerta desde la terminal con el mismo pipeline que el
  trigger HTTP (útil para reenviar una alerta perdida).
- `serve`: levanta la API FastAPI con uvicorn.
- `doctor`: diagnósticos de configuración y conectividad.
"""

from __future__ import annotations

import asyncio

import typer
from rich.console import Console

from adapters.collaborators import build_collaborators
from cli import doctor
from cli.ui_components import build_result_table, print_banner
from core.config import AppSettings
from core.logging_setup import configure_logging
from core.services.alert_pipeline import handle_request

app = typer.Typer(no_args_is_help=True, help="IT Glue expiry alerts → Autotask tickets.")
app.add_typer(doctor.app, name="doctor")

_console = Console()


@app.command()
def send(
    test_type: str = typer.Option(..., "--type", "-t", help="'Domain Expiry' or 'SSL Expiry'."),
    organization: str = typer.Option("", "--organization", "-o", help="Organization name as shown in IT Glue."),
    resource: str = typer.Option("", "--resource", "-r", help="Domain or certificate name."),
    expiry: str = typer.Option("", "--expiry", "-e", help="Time to expiry, e.g. '14 days'."),
    url: str = typer.Option("", "--url", "-u", help="IT Glue URL of the resource."),
    no_banner: bool = typer.Option(False, "--no-banner", help="Do not print the banner."),
) -> None:
    """Process one expiry alert and print the outcome."""

    settings = AppSettings()
    configure_logging(settings.log_level)
    if not no_banner:
        print_banner(_console)

    params = {
        "testType": test_type,
        "organizationName": organization,
        "resourceName": resource,
        "resourceTimeToExpiry": expiry,
        "resourceUrl": url,
    }
    result = asyncio.run(
        handle_request(params, settings=settings, collaborators=build_collaborators(settings))
    )
    _console.print(build_result_table(result))

    if result.status_code >= 400:
        raise typer.Exit(code=1)


@app.command()
def serve(
    host: str = typer.Option("0.0.0.0", "--host", help="Bind address."),
    port: int = typer.Option(7071, "--port", help="Bind port."),
) -> None:
    """Run the HTTP trigger with uvicorn."""

    import uvicorn  # noqa: PLC0415

    from api.app import create_app  # noqa: PLC0415

    uvicorn.run(create_app(), host=host, port=port)


def run() -> None:
    app()


if __name__ == "__main__":
    run()
