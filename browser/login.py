"""Rutinas de autenticación para Playwright contra el inicio de sesión de Microsoft."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum

from playwright.async_api import Error as PlaywrightError, Page

from .errors import require_non_empty
from .totp import generate_microsoft_totp


logger = logging.getLogger(__name__)


ELEMENT_TIMEOUT_MS = 2000
SETTLE_DELAY_MS = 1000

EMAIL_INPUT_SELECTOR = "input[type=email]"
PASSWORD_INPUT_SELECTOR = "input[type=password]"
SUBMIT_SELECTOR = "input[type=submit]"
NEXT_BUTTON_NAME = "Next"
SIGN_IN_ANOTHER_WAY_SELECTOR = "a#signInAnotherWay"
OTP_METHOD_SELECTOR = "div[data-value='PhoneAppOTP']"
OTP_INPUT_SELECTOR = "input#idTxtBx_SAOTCC_OTC"
STAY_SIGNED_IN_SELECTOR = "input[type=submit][value=Yes]"


class MfaOutcome(Enum):
    """Resultado de la rama opcional de verificación en dos pasos."""

    NOT_REQUESTED = "not_requested"
    COMPLETED = "completed"
    SKIPPED = "skipped"


@dataclass(frozen=True)
class Credentials:
    """Datos de acceso de una ejecución; no se persisten."""

    username: str
    password: str
    page_url: str
    otp_secret: str | None = None

    def __repr__(self) -> str:
        return f"Credentials(username={self.username!r}, page_url={self.page_url!r})"

    def validate(self) -> "Credentials":
        require_non_empty(self.username, "username")
        require_non_empty(self.password, "password")
        require_non_empty(self.page_url, "page_url")
        return self


async def _fill_when_visible(page: Page, selector: str, value: str, timeout: float) -> None:
    locator = page.locator(selector)
    await locator.wait_for(state="visible", timeout=timeout)
    await locator.fill(value)


async def _complete_mfa(
    page: Page,
    username: str,
    otp_secret: str,
    *,
    timeout: float,
) -> MfaOutcome:
    """Elige el código de verificación como método alternativo y lo envía.

    Microsoft no siempre pide el segundo factor (depende de la confianza del
    dispositivo), así que cualquier fallo aquí equivale a "no hacía falta".
    """

    try:
        other_way = page.locator(SIGN_IN_ANOTHER_WAY_SELECTOR)
        await other_way.wait_for(state="visible", timeout=timeout)
        await other_way.click()

        otp_method = page.locator(OTP_METHOD_SELECTOR)
        await otp_method.wait_for(state="visible", timeout=timeout)
        await otp_method.click()

        code = generate_microsoft_totp(username, otp_secret)

        otp_input = await page.wait_for_selector(
            OTP_INPUT_SELECTOR, state="visible", timeout=timeout
        )
        await otp_input.fill(code)
        await page.locator(SUBMIT_SELECTOR).click()
    except (PlaywrightError, ValueError) as exc:
        logger.info("MFA potentially not needed, continuing. %s", exc)
        return MfaOutcome.SKIPPED

    logger.info("Verification code submitted")
    return MfaOutcome.COMPLETED


async def authenticate(
    page: Page,
    username: str,
    password: str,
    page_url: str,
    otp_secret: str | None = None,
    *,
    element_timeout_ms: float = ELEMENT_TIMEOUT_MS,
    settle_delay_ms: float = SETTLE_DELAY_MS,
) -> MfaOutcome:
    """Completa el flujo de inicio de sesión de Microsoft en ``page``.

    Valida los datos antes de navegar. Los elementos obligatorios (correo,
    contraseña) propagan ``TimeoutError`` si no aparecen; la rama de MFA sólo
    se intenta con ``otp_secret`` y nunca propaga errores.
    """

    Credentials(username, password, page_url).validate()

    logger.info("Navigating to: %s", page_url)
    await page.goto(page_url)

    logger.info("Signing in as %s", username)
    await _fill_when_visible(page, EMAIL_INPUT_SELECTOR, username, element_timeout_ms)
    await page.get_by_role("button", name=NEXT_BUTTON_NAME).click()

    await _fill_when_visible(page, PASSWORD_INPUT_SELECTOR, password, element_timeout_ms)
    await page.locator(SUBMIT_SELECTOR).click()

    outcome = MfaOutcome.NOT_REQUESTED
    if otp_secret:
        logger.info("OTP secret provided, checking if MFA is needed.")
        outcome = await _complete_mfa(
            page, username, otp_secret, timeout=element_timeout_ms
        )

    # Damos tiempo a que aparezca el aviso "¿Quiere mantener la sesión iniciada?".
    await page.wait_for_timeout(settle_delay_ms)
    stay_signed_in = page.locator(STAY_SIGNED_IN_SELECTOR)
    if await stay_signed_in.count() > 0:
        logger.info("'Stay signed in' set to Yes")
        await stay_signed_in.click()

    logger.info("Microsoft authentication successful")
    return outcome


async def authenticate_with(
    page: Page,
    credentials: Credentials,
    *,
    element_timeout_ms: float = ELEMENT_TIMEOUT_MS,
    settle_delay_ms: float = SETTLE_DELAY_MS,
) -> MfaOutcome:
    """Atajo de :func:`authenticate` a partir de un :class:`Credentials`."""

    return await authenticate(
        page,
        credentials.username,
        credentials.password,
        credentials.page_url,
        credentials.otp_secret,
        element_timeout_ms=element_timeout_ms,
        settle_delay_ms=settle_delay_ms,
    )


__all__ = [
    "Credentials",
    "ELEMENT_TIMEOUT_MS",
    "MfaOutcome",
    "SETTLE_DELAY_MS",
    "authenticate",
    "authenticate_with",
]
