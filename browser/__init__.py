"""Adaptadores de navegador (Playwright): inicio de sesión y suplantación."""

from .errors import ValidationError
from .impersonation import ImpersonationHelper, create_impersonation_helper
from .login import Credentials, MfaOutcome, authenticate, authenticate_with
from .session import BrowserSession, launch_browser, save_storage_state
from .totp import generate_microsoft_totp

__all__ = [
    "BrowserSession",
    "Credentials",
    "ImpersonationHelper",
    "MfaOutcome",
    "ValidationError",
    "authenticate",
    "authenticate_with",
    "create_impersonation_helper",
    "generate_microsoft_totp",
    "launch_browser",
    "save_storage_state",
]
