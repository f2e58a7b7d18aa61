"""Configuración de logging.

Los módulos usan `logging.getLogger(__name__)`; aquí solo se instala el
handler (Rich, a stderr) una vez, desde la CLI.
"""

from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler

_ROOT_LOGGERS = ("core", "adapters", "cli")


def configure_logging(level: str = "WARNING") -> None:
    """Instala un `RichHandler` en los loggers del proyecto.

    Es idempotente: llamadas repetidas solo cambian el nivel.
    """

    resolved = logging.getLevelName(level.upper())
    if not isinstance(resolved, int):
        resolved = logging.WARNING

    for name in _ROOT_LOGGERS:
        logger = logging.getLogger(name)
        logger.setLevel(resolved)
        if not any(isinstance(h, RichHandler) for h in logger.handlers):
            handler = RichHandler(
                console=Console(stderr=True),
                show_path=False,
                rich_tracebacks=False,
            )
            handler.setFormatter(logging.Formatter("%(name)s: %(message)s"))
            logger.addHandler(handler)
