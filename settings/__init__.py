"""Accesos directos a la configuración de la aplicación."""

from .settings import (
    DEFAULT_STORAGE_STATE,
    LOG_LEVEL,
    AuthConfig,
    env_loaded_from,
    getbool,
    getenv,
    getint,
    load_auth_config,
)

__all__ = [
    "AuthConfig",
    "DEFAULT_STORAGE_STATE",
    "LOG_LEVEL",
    "env_loaded_from",
    "getbool",
    "getenv",
    "getint",
    "load_auth_config",
]
