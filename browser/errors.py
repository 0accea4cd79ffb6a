"""Errores compartidos por los adaptadores de navegador."""

from __future__ import annotations


class ValidationError(ValueError):
    """Un parámetro obligatorio llegó vacío o sólo con espacios."""

    pass


def require_non_empty(value: str | None, name: str) -> str:
    """Devuelve ``value`` si contiene texto útil; si no, lanza :class:`ValidationError`."""

    if value is None or not str(value).strip():
        raise ValidationError(f"{name} is required and cannot be empty")
    return value


__all__ = ["ValidationError", "require_non_empty"]
