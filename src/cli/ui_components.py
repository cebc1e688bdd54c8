"""Componentes de UI para CLI (Rich).

Por qué separar componentes:
- Evita mezclar lógica de comandos con detalles visuales.
- Permite reutilizar tablas/paneles en `send` y `doctor`.
"""

from __future__ import annotations

from rich.align import Align
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from core.domain.models import AlertOutcome, PipelineResult

_OUTCOME_STYLES: dict[AlertOutcome, str] = {
    AlertOutcome.TICKET_CREATED: "green",
    AlertOutcome.EMAIL_FALLBACK_SENT: "yellow",
    AlertOutcome.IGNORED_MARKER: "cyan",
    AlertOutcome.IGNORED_FREE_CA: "cyan",
    AlertOutcome.FALLBACK_FAILED: "red",
    AlertOutcome.REJECTED: "red",
}


def print_banner(console: Console) -> None:
    title = Text("ITG Expiry Bridge", style="bold cyan")
    subtitle = Text("IT Glue expirations → Autotask tickets", style="dim")
    body = Align.center(Text.assemble(title, "\n", subtitle), vertical="middle")
    console.print(Panel(body, border_style="cyan", padding=(1, 4)))


def build_result_table(result: PipelineResult) -> Table:
    """Tabla Rich con el resultado de procesar una alerta."""

    style = _OUTCOME_STYLES.get(result.outcome, "white")
    table = Table(title="Alert Result")
    table.add_column("Field", style="cyan", no_wrap=True)
    table.add_column("Value", style="white")
    table.add_row("Outcome", Text(result.outcome.value, style=style))
    table.add_row("Status", str(result.status_code))
    table.add_row("Company ID", "-" if result.entity_id is None else str(result.entity_id))
    table.add_row("Ticket ID", "-" if result.ticket_id is None else str(result.ticket_id))
    table.add_row("Response", result.body)
    return table
