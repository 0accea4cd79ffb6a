"""Carga y normalización de variables de configuración basadas en ``.env``."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable

from dotenv import find_dotenv, load_dotenv

# ---------------------------------------------------------------------------
# Carga automática de archivos ``.env``
# ---------------------------------------------------------------------------
env_loaded_from: str | None = None

env_path = find_dotenv(usecwd=True)
if not env_path:
    candidate = Path(__file__).resolve().parents[1] / ".env"
    if candidate.exists():
        env_path = str(candidate)

if env_path:
    # Las variables reales del entorno (p. ej. las del pipeline) tienen prioridad.
    load_dotenv(env_path, override=False)
    env_loaded_from = env_path


def _get_any(keys: Iterable[str] | str, default: str) -> str:
    """Devuelve el primer valor no vacío encontrado en ``keys``."""

    if isinstance(keys, (list, tuple, set)):
        for key in keys:
            value = os.getenv(key)
            if value is not None and str(value).strip():
                return value
        return default
    return os.getenv(keys, default)


def getenv(key: str, default: str = "") -> str:
    return _get_any([key], default)


def getint(key: str, default: int) -> int:
    return int(getenv(key, str(default)))


def getbool(key: str, default: bool = False) -> bool:
    val = getenv(key, str(default))
    return str(val).strip().lower() in {"1", "true", "yes", "on"}


DEFAULT_STORAGE_STATE = "login/auth.json"


@dataclass(frozen=True)
class AuthConfig:
    """Configuración del inicio de sesión de Microsoft 365 y del navegador."""

    page_url: str
    username: str
    password: str
    otp_secret: str
    storage_state: str
    headless: bool
    element_timeout_ms: int
    settle_delay_ms: int


def load_auth_config() -> AuthConfig:
    """Lee las variables ``M365_*`` en el momento de la llamada."""

    return AuthConfig(
        page_url=getenv("M365_PAGE_URL").strip(),
        username=getenv("M365_USERNAME").strip(),
        password=getenv("M365_PASSWORD"),
        otp_secret=getenv("M365_OTP_SECRET").strip(),
        storage_state=getenv("M365_STORAGE_STATE", DEFAULT_STORAGE_STATE).strip(),
        headless=getbool("M365_HEADLESS", True),
        element_timeout_ms=getint("M365_ELEMENT_TIMEOUT_MS", 2000),
        settle_delay_ms=getint("M365_SETTLE_DELAY_MS", 1000),
    )


LOG_LEVEL: str = _get_any(["LOG_LEVEL"], "INFO").strip().upper()
