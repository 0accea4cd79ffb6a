"""Preparación global: inicia sesión una vez y guarda la sesión para los tests."""

from __future__ import annotations

import logging
from pathlib import Path

from app.config import AppSettings, load_app_settings
from app.logging_setup import setup_logging
from browser.login import authenticate_with
from browser.session import launch_browser, save_storage_state


logger = logging.getLogger(__name__)


async def run(
    settings: AppSettings | None = None,
    *,
    storage_state: str | Path | None = None,
    headless: bool | None = None,
) -> Path:
    """Autentica en Microsoft 365 y deja la sesión en ``storage_state``.

    Los tests E2E reutilizan ese archivo para no repetir el inicio de sesión.
    El navegador se cierra siempre, incluso si la autenticación falla.
    """

    setup_logging()

    settings = settings or load_app_settings()
    # Validamos antes de lanzar Chromium para fallar rápido con una configuración incompleta.
    credentials = settings.credentials().validate()
    target = Path(storage_state) if storage_state else settings.storage_state_path
    headless = settings.headless if headless is None else headless

    session = await launch_browser(headless=headless)
    try:
        outcome = await authenticate_with(
            session.page,
            credentials,
            element_timeout_ms=settings.element_timeout_ms,
            settle_delay_ms=settings.settle_delay_ms,
        )
        logger.debug("MFA outcome: %s", outcome.value)
        return await save_storage_state(session.context, target)
    finally:
        await session.close()


__all__ = ["run"]
