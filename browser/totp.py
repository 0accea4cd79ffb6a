"""Generación de códigos TOTP compatibles con Microsoft Authenticator."""

from __future__ import annotations

import hashlib
from datetime import datetime

from pyotp import TOTP

from .errors import require_non_empty


MICROSOFT_ISSUER = "Microsoft"
TOTP_DIGITS = 6
TOTP_PERIOD = 30


def _normalize_secret(otp_secret: str) -> str:
    # Las apps de autenticación muestran el secreto en bloques separados por espacios.
    return "".join(otp_secret.split()).upper()


def build_microsoft_totp(username: str, otp_secret: str) -> TOTP:
    """Construye el generador con los parámetros estándar (SHA-1, 6 dígitos, 30 s)."""

    require_non_empty(otp_secret, "otp_secret")

    return TOTP(
        _normalize_secret(otp_secret),
        digits=TOTP_DIGITS,
        digest=hashlib.sha1,
        name=username,
        issuer=MICROSOFT_ISSUER,
        interval=TOTP_PERIOD,
    )


def generate_microsoft_totp(
    username: str,
    otp_secret: str,
    *,
    for_time: datetime | int | None = None,
) -> str:
    """Devuelve el código de 6 dígitos vigente (o el de ``for_time``).

    No se guarda nada entre llamadas: dos invocaciones dentro de la misma
    ventana de 30 segundos producen el mismo código.
    """

    totp = build_microsoft_totp(username, otp_secret)
    if for_time is None:
        return totp.now()
    return totp.at(for_time)


def provisioning_uri(username: str, otp_secret: str) -> str:
    """URI ``otpauth://`` para registrar la cuenta de pruebas en un autenticador."""

    return build_microsoft_totp(username, otp_secret).provisioning_uri()


__all__ = [
    "MICROSOFT_ISSUER",
    "TOTP_DIGITS",
    "TOTP_PERIOD",
    "build_microsoft_totp",
    "generate_microsoft_totp",
    "provisioning_uri",
]
