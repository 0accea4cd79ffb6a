"""Punto de entrada de línea de comandos para la preparación global."""

from __future__ import annotations

import argparse
import asyncio
import logging
from typing import Sequence

from playwright.async_api import Error as PlaywrightError

from browser.errors import ValidationError

from .bootstrap import run


logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="m365-auth-setup",
        description="Inicia sesión en Microsoft 365 y guarda la sesión para los tests E2E.",
    )
    parser.add_argument(
        "--storage-state",
        default=None,
        help="Ruta del archivo de sesión (por defecto M365_STORAGE_STATE o login/auth.json)",
    )
    parser.add_argument(
        "--headed",
        action="store_true",
        help="Muestra el navegador en lugar de ejecutarlo en modo headless",
    )
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Ejecuta la preparación en un loop de asyncio y devuelve el código de salida."""

    args = build_parser().parse_args(argv)
    headless = False if args.headed else None

    try:
        asyncio.run(run(storage_state=args.storage_state, headless=headless))
    except ValidationError as exc:
        logger.error("Configuración incompleta: %s", exc)
        return 1
    except PlaywrightError as exc:
        logger.error("Microsoft authentication failed: %s", exc)
        return 1

    return 0


__all__ = ["build_parser", "main"]
