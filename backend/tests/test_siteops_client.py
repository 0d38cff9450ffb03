import pytest
import requests

from siteops_client import ApiError, QueryCache, SiteOpsApiClient


class FakeResponse:
    def __init__(self, status_code, payload=None, text=""):
        self.status_code = status_code
        self._payload = payload
        self.text = text

    def json(self):
        if self._payload is None:
            raise ValueError("no json")
        return self._payload


class FakeSession:
    """Answers requests from a {(method, path): response} table and records every call."""

    def __init__(self, routes=None, error=None):
        self.routes = dict(routes or {})
        self.calls = []
        self.error = error

    def request(self, method, url, json=None, params=None, headers=None, timeout=None):
        path = url.split("http://api.test", 1)[1]
        self.calls.append((method, path, json, params, headers))
        if self.error is not None:
            raise self.error
        resp = self.routes.get((method, path))
        if resp is None:
            return FakeResponse(404, {"detail": "Page not found", "path": path})
        return resp


def _client(routes=None, token="t0k3n"):
    return SiteOpsApiClient(base_url="http://api.test/", token=token, session=FakeSession(routes))


def test_blank_email_makes_no_request():
    client = _client(token=None)
    assert client.request_code("   ") is False
    assert client.session.calls == []
    assert client.toasts[-1].variant == "destructive"
    assert client.toasts[-1].description == "Please enter your email address"


def test_request_code_toasts_success():
    client = _client({("POST", "/auth/otp/request"): FakeResponse(200, {"message": "ok", "email": "a@b.co"})}, token=None)
    assert client.request_code(" a@b.co ") is True
    assert client.session.calls[0][2] == {"email": "a@b.co"}
    assert client.toasts[-1].title == "OTP Sent"


def test_wrong_code_leaves_client_unauthenticated():
    routes = {("POST", "/auth/otp/verify"): FakeResponse(400, {"detail": "Invalid verification code"})}
    client = _client(routes, token=None)

    assert client.verify_code("a@b.co", "000000") is False
    assert client.is_authenticated is False
    assert client.toasts[-1].description == "Invalid verification code"


def test_blank_code_makes_no_request():
    client = _client(token=None)
    assert client.verify_code("a@b.co", "") is False
    assert client.session.calls == []


def test_valid_code_stores_token_and_sends_it():
    routes = {
        ("POST", "/auth/otp/verify"): FakeResponse(200, {"access_token": "jwt", "token_type": "bearer"}),
        ("GET", "/users"): FakeResponse(200, []),
    }
    client = _client(routes, token=None)

    assert client.verify_code("a@b.co", "123456") is True
    assert client.is_authenticated
    assert client.toasts[-1].description == "Successfully logged in!"

    client.list_rows("users")
    assert client.session.calls[-1][4]["Authorization"] == "Bearer jwt"

    client.sign_out()
    assert not client.is_authenticated
    assert len(client.cache) == 0


def test_queries_are_cached_by_key():
    client = _client({("GET", "/sites"): FakeResponse(200, [{"id": "s1"}])})

    first = client.list_rows("sites", q="tower")
    second = client.list_rows("sites", q="tower")
    client.list_rows("sites", q="villa")

    assert first == second == [{"id": "s1"}]
    assert [c[3] for c in client.session.calls] == [{"q": "tower"}, {"q": "villa"}]


def test_successful_mutation_invalidates_its_page():
    client = _client(
        {
            ("GET", "/sites"): FakeResponse(200, []),
            ("GET", "/users"): FakeResponse(200, []),
            ("POST", "/sites"): FakeResponse(201, {"id": "s2", "name": "Tower"}),
        }
    )
    client.list_rows("sites")
    client.list_rows("users")

    created = client.create_row("sites", {"name": "Tower"})

    assert created["id"] == "s2"
    assert all(k[0] != "sites" for k in client.cache.keys())
    assert any(k[0] == "users" for k in client.cache.keys())
    assert client.toasts[-1].description == "Site created successfully"


def test_failed_mutation_toasts_and_keeps_cache():
    client = _client(
        {
            ("GET", "/user-site-assignments"): FakeResponse(200, [{"id": "a1"}]),
            ("POST", "/user-site-assignments"): FakeResponse(409, {"detail": "User is already assigned to this site"}),
        }
    )
    client.list_rows("user-site-assignments")
    before = client.cache.keys()

    assert client.create_row("user-site-assignments", {"user_id": "u", "site_id": "s"}) is None

    assert client.cache.keys() == before
    toast = client.toasts[-1]
    assert toast.variant == "destructive"
    assert toast.title == "Failed to create assignment"
    assert toast.description == "User is already assigned to this site"


def test_inventory_write_refetches_stock_summary():
    client = _client(
        {
            ("GET", "/inventory/sites/s1/stock-summary"): FakeResponse(200, [{"item_id": "A", "current_stock": 5}]),
            ("POST", "/inventory/transactions"): FakeResponse(201, {"id": "t9"}),
        }
    )
    client.site_stock_summary("s1")
    client.record_inventory_transaction(item_id="A", site_id="s1", transaction_type="out", quantity=1)
    client.site_stock_summary("s1")

    gets = [c for c in client.session.calls if c[0] == "GET"]
    assert len(gets) == 2


def test_stock_summary_falls_back_to_local_summary():
    log = [
        {"id": "3", "item_id": "A", "new_stock": 3, "created_at": "2026-10-02T10:00:00Z", "item": {"name": "Cement"}},
        {"id": "2", "item_id": "B", "new_stock": 9, "created_at": "2026-10-02T09:00:00Z", "item": {"name": "Steel"}},
        {"id": "1", "item_id": "A", "new_stock": 5, "created_at": "2026-10-01T09:00:00Z", "item": {"name": "Cement"}},
    ]
    client = _client({("GET", "/inventory/transactions"): FakeResponse(200, log)})

    summary = client.site_stock_summary("s1")

    assert [(s["item_name"], s["current_stock"]) for s in summary] == [("Cement", 3.0), ("Steel", 9.0)]
    assert client.session.calls[-1][3] == {"site_id": "s1"}


def test_unknown_site_is_not_masked_by_the_fallback():
    client = _client({("GET", "/inventory/sites/s1/stock-summary"): FakeResponse(404, {"detail": "Site not found"})})
    with pytest.raises(ApiError) as err:
        client.site_stock_summary("s1")
    assert err.value.status_code == 404


def test_error_without_json_body():
    client = _client({("GET", "/sites"): FakeResponse(500, None, text="boom")})
    with pytest.raises(ApiError) as err:
        client.list_rows("sites")
    assert err.value.detail == "boom"


def test_cache_invalidation_by_prefix():
    cache = QueryCache()
    cache.set(("inventory", "items", ()), 1)
    cache.set(("inventory", "sites", "s1", "stock-summary"), 2)
    cache.set(("sites", ()), 3)

    assert cache.invalidate(("inventory",)) == 2
    assert cache.keys() == [("sites", ())]


def test_unreachable_server_toasts_instead_of_raising():
    client = _client(token=None)
    client.session.error = requests.ConnectionError("connection refused")

    assert client.delete_row("sites", "s1") is None
    assert client.toasts[-1].variant == "destructive"
    assert client.toasts[-1].title == "Failed to delete site"
    assert "connection refused" in client.toasts[-1].description

    assert client.request_code("a@b.co") is False
    assert client.verify_code("a@b.co", "123456") is False
    assert not client.is_authenticated

    with pytest.raises(ApiError) as err:
        client.list_rows("sites")
    assert err.value.status_code == 0


def test_success_without_json_body_is_an_error():
    client = _client({("POST", "/sites"): FakeResponse(200, None, text="<html>")})
    assert client.create_row("sites", {"name": "Tower"}) is None
    assert client.toasts[-1].variant == "destructive"


def test_status_toasts():
    client = _client(
        {
            ("PATCH", "/bookings/b1/status"): FakeResponse(200, {"id": "b1", "status": "confirmed"}),
            ("PATCH", "/material-requests/m1/status"): FakeResponse(200, {"id": "m1", "status": "approved"}),
        }
    )
    client.update_status("bookings", "b1", "confirmed")
    assert client.toasts[-1].description == "Booking status updated successfully"

    client.update_status("material-requests", "m1", "approved")
    assert client.toasts[-1].description == "Status updated successfully"
