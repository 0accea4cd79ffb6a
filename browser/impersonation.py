"""Suplantación de usuarios de Dynamics 365 mediante cabeceras inyectadas por Playwright."""

from __future__ import annotations

import logging

from playwright.async_api import Page, Route

from .errors import require_non_empty


logger = logging.getLogger(__name__)


API_ROUTE_PATTERN = "**/api/data/**"
CALLER_OBJECT_ID_HEADER = "CallerObjectId"
CALLER_ID_HEADER = "MSCRMCallerID"


class ImpersonationHelper:
    """Mantiene la cabecera de suplantación activa para una página.

    Como mucho hay una cabecera a la vez; la última llamada gana. Mientras
    haya cabecera, la página tiene registrada una ruta sobre
    ``API_ROUTE_PATTERN``; sin cabecera, la ruta se elimina.
    """

    def __init__(self, page: Page) -> None:
        self._page = page
        self._headers: dict[str, str] = {}
        self._route_installed = False

    @classmethod
    def create(cls, page: Page) -> "ImpersonationHelper":
        return cls(page)

    async def impersonate_by_directory_object_id(self, object_id: str) -> None:
        """Suplanta al usuario por su Object ID de Microsoft Entra (Azure AD)."""

        require_non_empty(object_id, "Azure AD Object ID")
        logger.info(
            "Setting up impersonation for user with Azure AD Object ID: %s", object_id
        )
        await self._replace_headers({CALLER_OBJECT_ID_HEADER: object_id})

    async def impersonate_by_user_id(self, user_id: str) -> None:
        """Suplanta al usuario por su ``systemuserid`` de Dynamics (método heredado)."""

        require_non_empty(user_id, "systemUserId")
        logger.info("Setting up impersonation for user with System ID: %s", user_id)
        await self._replace_headers({CALLER_ID_HEADER: user_id})

    async def stop_impersonation(self) -> None:
        """Vuelve al usuario autenticado originalmente."""

        logger.info("Stopping impersonation - returning to original user")
        await self._replace_headers({})

    def is_active(self) -> bool:
        return bool(self._headers)

    def get_headers(self) -> dict[str, str]:
        return dict(self._headers)

    async def _replace_headers(self, headers: dict[str, str]) -> None:
        """Ajusta la ruta y sólo entonces publica ``headers``.

        Si Playwright falla al registrar o quitar la ruta, el estado anterior
        queda intacto. El manejador lee ``self._headers`` en cada petición, así
        que cambiar de identidad no requiere volver a registrarlo.
        """

        if not headers:
            # ``unroute`` sin manejador es idempotente aunque no haya nada registrado.
            await self._page.unroute(API_ROUTE_PATTERN)
            self._route_installed = False
        elif not self._route_installed:
            await self._page.route(API_ROUTE_PATTERN, self._inject_headers)
            self._route_installed = True

        self._headers = headers

    async def _inject_headers(self, route: Route) -> None:
        headers = self._headers
        if not headers:
            await route.continue_()
            return

        await route.continue_(headers=merge_headers(route.request.headers, headers))


def merge_headers(original: dict[str, str], overrides: dict[str, str]) -> dict[str, str]:
    """Superpone ``overrides`` sobre ``original``; las cabeceras HTTP no distinguen mayúsculas."""

    override_keys = {key.lower() for key in overrides}
    merged = {
        key: value for key, value in original.items() if key.lower() not in override_keys
    }
    merged.update(overrides)
    return merged


def create_impersonation_helper(page: Page) -> ImpersonationHelper:
    return ImpersonationHelper.create(page)


__all__ = [
    "API_ROUTE_PATTERN",
    "CALLER_ID_HEADER",
    "CALLER_OBJECT_ID_HEADER",
    "ImpersonationHelper",
    "create_impersonation_helper",
    "merge_headers",
]
