"""Adaptador ligero sobre ``settings`` para la capa de aplicación."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any

from browser.errors import ValidationError
from browser.login import Credentials
from settings import load_auth_config


@dataclass
class AppSettings:
    """Vista parcial de ``settings`` con sólo los atributos usados por la app."""

    _source: Any

    @property
    def page_url(self) -> str:
        return getattr(self._source, "page_url", "")

    @property
    def username(self) -> str:
        return getattr(self._source, "username", "")

    @property
    def password(self) -> str:
        return getattr(self._source, "password", "")

    @property
    def otp_secret(self) -> str | None:
        return getattr(self._source, "otp_secret", "") or None

    @property
    def storage_state_path(self) -> Path:
        return Path(getattr(self._source, "storage_state", "") or "login/auth.json")

    @property
    def headless(self) -> bool:
        return bool(getattr(self._source, "headless", True))

    def credentials(self) -> Credentials:
        """Arma las credenciales; un secreto OTP vacío desactiva la rama de MFA."""

        return Credentials(
            username=self.username,
            password=self.password,
            page_url=self.page_url,
            otp_secret=self.otp_secret,
        )

    def __getattr__(self, item: str) -> Any:
        return getattr(self._source, item)


def load_app_settings() -> AppSettings:
    """Construye una instancia de :class:`AppSettings` con el entorno actual."""

    try:
        source = load_auth_config()
    except ValueError as exc:
        raise ValidationError(f"invalid M365_* configuration: {exc}") from exc
    return AppSettings(source)


__all__ = ["AppSettings", "load_app_settings"]
