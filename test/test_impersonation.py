import asyncio

import pytest

from browser.errors import ValidationError
from browser.impersonation import (
    API_ROUTE_PATTERN,
    ImpersonationHelper,
    create_impersonation_helper,
    merge_headers,
)


class DummyRequest:
    def __init__(self, headers):
        self.headers = headers


class DummyRoute:
    def __init__(self, headers):
        self.request = DummyRequest(headers)
        self.continued = []

    async def continue_(self, headers=None):
        self.continued.append(headers)


class DummyPage:
    def __init__(self):
        self.handlers = {}
        self.calls = []

    async def route(self, pattern, handler):
        self.calls.append(("route", pattern))
        self.handlers.setdefault(pattern, []).append(handler)

    async def unroute(self, pattern, handler=None):
        self.calls.append(("unroute", pattern))
        self.handlers.pop(pattern, None)

    def send(self, headers):
        """Simula una petición a la API y devuelve las cabeceras con las que sale."""

        route = DummyRoute(headers)
        for handler in self.handlers.get(API_ROUTE_PATTERN, []):
            asyncio.run(handler(route))
        if not route.continued:
            return dict(headers)
        return route.continued[-1] if route.continued[-1] is not None else dict(headers)


def test_impersonate_by_directory_object_id_injects_header():
    page = DummyPage()
    helper = ImpersonationHelper(page)

    asyncio.run(helper.impersonate_by_directory_object_id("abc"))

    assert helper.get_headers() == {"CallerObjectId": "abc"}
    assert helper.is_active()
    assert len(page.handlers[API_ROUTE_PATTERN]) == 1
    assert page.send({"accept": "application/json", "callerobjectid": "old"}) == {
        "accept": "application/json",
        "CallerObjectId": "abc",
    }


def test_switching_identity_keeps_single_header_and_rule():
    page = DummyPage()
    helper = ImpersonationHelper(page)

    asyncio.run(helper.impersonate_by_directory_object_id("abc"))
    asyncio.run(helper.impersonate_by_user_id("00000000-0000-0000-0000-000000000001"))

    assert helper.get_headers() == {"MSCRMCallerID": "00000000-0000-0000-0000-000000000001"}
    assert len(page.handlers[API_ROUTE_PATTERN]) == 1
    assert page.send({"accept": "*/*"}) == {
        "accept": "*/*",
        "MSCRMCallerID": "00000000-0000-0000-0000-000000000001",
    }


def test_stop_impersonation_removes_rule():
    page = DummyPage()
    helper = ImpersonationHelper(page)

    asyncio.run(helper.impersonate_by_user_id("user-1"))
    asyncio.run(helper.stop_impersonation())

    assert not helper.is_active()
    assert helper.get_headers() == {}
    assert API_ROUTE_PATTERN not in page.handlers
    assert page.calls[-1] == ("unroute", API_ROUTE_PATTERN)
    assert page.send({"accept": "*/*"}) == {"accept": "*/*"}


def test_stop_without_active_impersonation_is_harmless():
    page = DummyPage()
    helper = ImpersonationHelper(page)

    asyncio.run(helper.stop_impersonation())

    assert not helper.is_active()
    assert page.calls == [("unroute", API_ROUTE_PATTERN)]


def test_reactivating_after_stop_registers_rule_again():
    page = DummyPage()
    helper = ImpersonationHelper(page)

    asyncio.run(helper.impersonate_by_user_id("user-1"))
    asyncio.run(helper.stop_impersonation())
    asyncio.run(helper.impersonate_by_directory_object_id("abc"))

    assert page.calls.count(("route", API_ROUTE_PATTERN)) == 2
    assert page.send({})["CallerObjectId"] == "abc"


def test_stale_handler_does_not_mutate_after_stop():
    page = DummyPage()
    helper = ImpersonationHelper(page)

    asyncio.run(helper.impersonate_by_user_id("user-1"))
    handler = page.handlers[API_ROUTE_PATTERN][0]
    asyncio.run(helper.stop_impersonation())

    route = DummyRoute({"accept": "*/*"})
    asyncio.run(handler(route))

    assert route.continued == [None]


@pytest.mark.parametrize("value", ["", "   "])
def test_blank_id_is_rejected_and_state_kept(value):
    page = DummyPage()
    helper = ImpersonationHelper(page)
    asyncio.run(helper.impersonate_by_directory_object_id("abc"))
    calls_before = list(page.calls)

    with pytest.raises(ValidationError):
        asyncio.run(helper.impersonate_by_user_id(value))
    with pytest.raises(ValidationError):
        asyncio.run(helper.impersonate_by_directory_object_id(value))

    assert helper.get_headers() == {"CallerObjectId": "abc"}
    assert page.calls == calls_before


def test_header_set_never_exceeds_one_entry():
    page = DummyPage()
    helper = ImpersonationHelper(page)
    steps = [
        lambda: helper.impersonate_by_user_id("u1"),
        lambda: helper.impersonate_by_directory_object_id("o1"),
        lambda: helper.stop_impersonation(),
        lambda: helper.impersonate_by_directory_object_id("o2"),
        lambda: helper.impersonate_by_user_id("u2"),
        lambda: helper.impersonate_by_user_id("u3"),
        lambda: helper.stop_impersonation(),
        lambda: helper.stop_impersonation(),
    ]

    for step in steps:
        asyncio.run(step())
        assert len(helper.get_headers()) <= 1
        assert helper.is_active() == (API_ROUTE_PATTERN in page.handlers)


def test_get_headers_returns_copy():
    helper = ImpersonationHelper(DummyPage())
    asyncio.run(helper.impersonate_by_directory_object_id("abc"))

    headers = helper.get_headers()
    headers["CallerObjectId"] = "tampered"
    headers["MSCRMCallerID"] = "extra"

    assert helper.get_headers() == {"CallerObjectId": "abc"}


def test_merge_headers_overrides_case_insensitively():
    merged = merge_headers(
        {"Accept": "application/json", "mscrmcallerid": "old", "prefer": "odata"},
        {"MSCRMCallerID": "new"},
    )

    assert merged == {"Accept": "application/json", "prefer": "odata", "MSCRMCallerID": "new"}


def test_create_impersonation_helper_returns_inactive_helper():
    helper = create_impersonation_helper(DummyPage())

    assert isinstance(helper, ImpersonationHelper)
    assert not helper.is_active()


class FailingRoutePage(DummyPage):
    async def route(self, pattern, handler):
        raise RuntimeError("Target page, context or browser has been closed")


def test_failed_route_registration_keeps_helper_inactive():
    helper = ImpersonationHelper(FailingRoutePage())

    with pytest.raises(RuntimeError):
        asyncio.run(helper.impersonate_by_user_id("u1"))

    assert not helper.is_active()
    assert helper.get_headers() == {}


def test_failed_unroute_keeps_previous_identity():
    page = DummyPage()
    helper = ImpersonationHelper(page)
    asyncio.run(helper.impersonate_by_directory_object_id("abc"))

    async def failing_unroute(pattern, handler=None):
        raise RuntimeError("Target page, context or browser has been closed")

    page.unroute = failing_unroute

    with pytest.raises(RuntimeError):
        asyncio.run(helper.stop_impersonation())

    assert helper.get_headers() == {"CallerObjectId": "abc"}
    assert API_ROUTE_PATTERN in page.handlers
