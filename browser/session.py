from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from playwright.async_api import Browser, BrowserContext, Page, Playwright, async_playwright


logger = logging.getLogger(__name__)


@dataclass
class BrowserSession:
    """Agrupa Playwright, el navegador y la página abierta para su limpieza."""

    playwright: Playwright
    browser: Browser
    context: BrowserContext
    page: Page

    async def close(self) -> None:
        """Cierra el navegador y detiene Playwright sin ocultar el error original."""

        try:
            await self.browser.close()
        except Exception as close_error:
            logger.warning("Advertencia al cerrar el navegador: %s", close_error)
        finally:
            try:
                # Garantizamos la liberación del proceso auxiliar de Playwright.
                await self.playwright.stop()
            except Exception as stop_error:
                logger.warning("Advertencia al detener Playwright: %s", stop_error)


async def launch_browser(*, headless: bool = True) -> BrowserSession:
    """Lanza Chromium con un contexto limpio y una pestaña lista para usar."""

    pw = await async_playwright().start()
    browser: Browser | None = None
    try:
        browser = await pw.chromium.launch(headless=headless)
        context = await browser.new_context()
        page = await context.new_page()
    except BaseException:
        try:
            if browser is not None:
                await browser.close()
        except Exception as close_error:
            logger.warning("Advertencia al cerrar el navegador: %s", close_error)
        finally:
            await pw.stop()
        raise

    return BrowserSession(playwright=pw, browser=browser, context=context, page=page)


async def save_storage_state(context: BrowserContext, path: str | Path) -> Path:
    """Guarda cookies y almacenamiento del contexto autenticado en ``path``."""

    target = Path(path)
    target.parent.mkdir(parents=True, exist_ok=True)
    await context.storage_state(path=target)
    logger.info("Session saved to %s", target.as_posix())
    return target


__all__ = ["BrowserSession", "launch_browser", "save_storage_state"]
