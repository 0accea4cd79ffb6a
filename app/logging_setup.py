"""Configuración del logging raíz para la automatización."""

from __future__ import annotations

import logging

from settings import LOG_LEVEL


logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
_MARKER = "_m365_auth_handler"


def setup_logging(level: str | int | None = None) -> None:
    """Añade un único handler de consola al logger raíz y fija el nivel."""

    root = logging.getLogger()
    requested = level if level is not None else LOG_LEVEL
    try:
        root.setLevel(requested)
    except (TypeError, ValueError):
        root.setLevel(logging.INFO)
    else:
        requested = None

    if not any(getattr(handler, _MARKER, False) for handler in root.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        setattr(handler, _MARKER, True)
        root.addHandler(handler)

        # Playwright y asyncio son muy verbosos en DEBUG.
        logging.getLogger("asyncio").setLevel(logging.WARNING)

    if requested is not None:
        logger.warning("Nivel de log desconocido %r, se usa INFO", requested)


__all__ = ["LOG_FORMAT", "setup_logging"]
