"""Configuración de logging (stdlib + Rich).

Los módulos usan `logging.getLogger(__name__)`; este módulo solo instala el
handler una vez por proceso (API, CLI o tests).
"""

from __future__ import annotations

import logging

from rich.logging import RichHandler

_CONFIGURED = False


def configure_logging(level: str | int = "INFO") -> None:
    """Instala un `RichHandler` en el logger raíz (idempotente)."""

    global _CONFIGURED

    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO

    root = logging.getLogger()
    root.setLevel(level)
    if _CONFIGURED:
        return

    handler = RichHandler(rich_tracebacks=True, show_path=False, markup=False)
    handler.setFormatter(logging.Formatter("%(name)s: %(message)s"))
    root.addHandler(handler)

    # httpx registra cada request a INFO; demasiado ruido para una alerta.
    logging.getLogger("httpx").setLevel(logging.WARNING)
    _CONFIGURED = True
