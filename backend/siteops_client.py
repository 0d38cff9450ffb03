"""
siteops_client.py

A small synchronous client for the SiteOps admin API, for scripts and bots
that drive the back office instead of the browser.

What it provides:
- Email one-time-code sign-in (request a code, exchange it for a bearer token)
- A query cache keyed by query identity, invalidated after writes
- A toast log: every mutation records a success or failure notification
- Page helpers for every dashboard page

Environment variables expected:
- SITEOPS_API_URL: e.g. "https://your-domain.com/api"

Optional:
- SITEOPS_API_TOKEN: pre-seeded bearer token (otherwise sign in with a code)

Dependencies:
- requests (pip install requests)
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Tuple

import requests

from core.stock import sort_newest_first, summarize_stock


class ApiError(RuntimeError):
    def __init__(self, status_code: int, detail: str):
        super().__init__(f"{status_code}: {detail}")
        self.status_code = status_code
        self.detail = detail


@dataclass
class Toast:
    title: str
    description: str = ""
    # "default" | "destructive"
    variant: str = "default"


class QueryCache:
    """Results keyed by tuples; invalidation drops every key under a prefix."""

    def __init__(self):
        self._data: Dict[Tuple, Any] = {}

    def __contains__(self, key: Tuple) -> bool:
        return key in self._data

    def __len__(self) -> int:
        return len(self._data)

    def get(self, key: Tuple, default: Any = None) -> Any:
        return self._data.get(key, default)

    def set(self, key: Tuple, value: Any) -> None:
        self._data[key] = value

    def keys(self) -> List[Tuple]:
        return list(self._data)

    def invalidate(self, prefix: Tuple) -> int:
        stale = [k for k in self._data if k[: len(prefix)] == prefix]
        for k in stale:
            del self._data[k]
        return len(stale)

    def clear(self) -> None:
        self._data.clear()


# page path -> label used in toasts
PAGES: Dict[str, str] = {
    "users": "User",
    "sites": "Site",
    "activities": "Activity",
    "inventory/items": "Inventory item",
    "inventory/transactions": "Inventory transaction",
    "material-requests": "Material request",
    "bookings": "Booking",
    "message-logs": "Message log",
    "sessions": "Session",
    "employee-otps": "Employee OTP",
    "user-site-assignments": "Assignment",
    "vendors": "Vendor",
    "materials": "Material",
    "authorized-persons": "Authorized person",
    "purchase-orders": "Purchase order",
    "customer-inquiries": "Customer inquiry",
    "invoices": "Invoice",
}

# Pages whose status toast names the row kind
STATUS_UPDATED: Dict[str, str] = {
    "bookings": "Booking status updated successfully",
}


def _page_key(page: str) -> Tuple:
    return tuple(p for p in page.strip("/").split("/") if p)


def _params_key(params: Optional[Dict[str, Any]]) -> Tuple:
    return tuple(sorted((k, str(v)) for k, v in (params or {}).items() if v is not None))


@dataclass
class SiteOpsApiClient:
    base_url: str
    token: Optional[str] = None
    timeout: float = 60
    session: requests.Session = field(default_factory=requests.Session)
    cache: QueryCache = field(default_factory=QueryCache)
    toasts: List[Toast] = field(default_factory=list)

    def _headers(self) -> Dict[str, str]:
        headers = {"Accept": "application/json"}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    def _toast(self, title: str, description: str = "", variant: str = "default") -> None:
        self.toasts.append(Toast(title=title, description=description, variant=variant))

    def _request(self, method: str, path: str, *, json: Any = None, params: Dict[str, Any] | None = None) -> Any:
        url = f"{self.base_url.rstrip('/')}/{path.lstrip('/')}"
        try:
            resp = self.session.request(
                method,
                url,
                json=json,
                params={k: v for k, v in (params or {}).items() if v is not None} or None,
                headers=self._headers(),
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            # No status to report when the server was never reached
            raise ApiError(0, str(e)) from e

        if resp.status_code >= 400:
            try:
                detail = resp.json().get("detail", resp.text)
            except ValueError:
                detail = resp.text
            raise ApiError(resp.status_code, detail if isinstance(detail, str) else str(detail))

        if resp.status_code == 204:
            return None
        try:
            return resp.json()
        except ValueError as e:
            raise ApiError(resp.status_code, f"Invalid JSON response from {path}") from e

    # ----------------------------
    # Sign-in
    # ----------------------------

    @property
    def is_authenticated(self) -> bool:
        return bool(self.token)

    def request_code(self, email: str) -> bool:
        """
        Calls: POST /auth/otp/request

        A blank address is rejected here, without a request.
        """
        email = (email or "").strip()
        if not email:
            self._toast("Error", "Please enter your email address", "destructive")
            return False
        try:
            self._request("POST", "/auth/otp/request", json={"email": email})
        except ApiError as e:
            self._toast("Error", e.detail, "destructive")
            return False
        self._toast("OTP Sent", "Check your email for the verification code")
        return True

    def verify_code(self, email: str, code: str) -> bool:
        """Calls: POST /auth/otp/verify; stores the bearer token on success."""
        email = (email or "").strip()
        code = (code or "").strip()
        if not email:
            self._toast("Error", "Please enter your email address", "destructive")
            return False
        if not code:
            self._toast("Error", "Please enter the verification code", "destructive")
            return False
        try:
            data = self._request("POST", "/auth/otp/verify", json={"email": email, "code": code})
        except ApiError as e:
            self._toast("Error", e.detail, "destructive")
            return False

        token = (data or {}).get("access_token")
        if not token:
            self._toast("Error", "Sign-in response missing access token", "destructive")
            return False
        self.token = token
        self._toast("Success", "Successfully logged in!")
        return True

    def sign_out(self) -> None:
        # JWTs are stateless; dropping the token is the sign-out
        self.token = None
        self.cache.clear()

    # ----------------------------
    # Queries and mutations
    # ----------------------------

    def query(self, key: Tuple, path: str, params: Optional[Dict[str, Any]] = None, *, refresh: bool = False) -> Any:
        """GET `path`, served from the cache while `key` is present."""
        if not refresh and key in self.cache:
            return self.cache.get(key)
        data = self._request("GET", path, params=params)
        self.cache.set(key, data)
        return data

    def mutate(
        self,
        method: str,
        path: str,
        *,
        json: Any = None,
        invalidate: Iterable[Tuple] = (),
        success: str = "Saved successfully",
        failure: str = "Failed to save",
    ) -> Any:
        """
        Send a write. Success drops every cached key under the `invalidate`
        prefixes and records a success toast; an ApiError records an error toast,
        leaves the cache untouched and returns None.
        """
        try:
            data = self._request(method, path, json=json)
        except ApiError as e:
            self._toast(failure, e.detail, "destructive")
            return None

        for prefix in invalidate:
            self.cache.invalidate(prefix)
        # Counts on the dashboard move with every write
        self.cache.invalidate(("dashboard",))
        self._toast("Success", success)
        return data if data is not None else True

    # ----------------------------
    # Page helpers
    # ----------------------------

    def dashboard_stats(self) -> Any:
        return self.query(("dashboard",), "/")

    def list_rows(self, page: str, q: Optional[str] = None, **filters: Any) -> Any:
        params = dict(filters, q=q)
        return self.query(_page_key(page) + (_params_key(params),), f"/{page}", params)

    def get_row(self, page: str, row_id: Any) -> Any:
        return self.query(_page_key(page) + (str(row_id),), f"/{page}/{row_id}")

    def create_row(self, page: str, payload: Dict[str, Any]) -> Any:
        label = PAGES[page]
        return self.mutate(
            "POST",
            f"/{page}",
            json=payload,
            invalidate=[_page_key(page)[:1]],
            success=f"{label} created successfully",
            failure=f"Failed to create {label.lower()}",
        )

    def update_row(self, page: str, row_id: Any, payload: Dict[str, Any]) -> Any:
        label = PAGES[page]
        return self.mutate(
            "PATCH",
            f"/{page}/{row_id}",
            json=payload,
            invalidate=[_page_key(page)[:1]],
            success=f"{label} updated successfully",
            failure=f"Failed to update {label.lower()}",
        )

    def update_status(self, page: str, row_id: Any, status: str) -> Any:
        label = PAGES[page]
        return self.mutate(
            "PATCH",
            f"/{page}/{row_id}/status",
            json={"status": status},
            invalidate=[_page_key(page)[:1]],
            success=STATUS_UPDATED.get(page, "Status updated successfully"),
            failure=f"Failed to update {label.lower()} status",
        )

    def delete_row(self, page: str, row_id: Any) -> Any:
        label = PAGES[page]
        return self.mutate(
            "DELETE",
            f"/{page}/{row_id}",
            invalidate=[_page_key(page)[:1]],
            success=f"{label} deleted successfully",
            failure=f"Failed to delete {label.lower()}",
        )

    def reset_session(self, phone: str) -> Any:
        return self.delete_row("sessions", phone)

    def record_inventory_transaction(
        self,
        *,
        item_id: str,
        site_id: str,
        transaction_type: str,  # "in" | "out" | "adjustment"
        quantity: float,
        notes: Optional[str] = None,
        image_key: Optional[str] = None,
    ) -> Any:
        """Calls: POST /inventory/transactions; stock summaries are refetched afterwards."""
        payload = {
            "item_id": item_id,
            "site_id": site_id,
            "transaction_type": transaction_type,
            "quantity": quantity,
            "notes": notes,
            "image_key": image_key,
        }
        return self.mutate(
            "POST",
            "/inventory/transactions",
            json=payload,
            invalidate=[("inventory",)],
            success="Inventory transaction recorded successfully",
            failure="Failed to record inventory transaction",
        )

    def create_purchase_order(self, payload: Dict[str, Any]) -> Any:
        """Calls: POST /purchase-orders with the line items in `payload["items"]`."""
        return self.mutate(
            "POST",
            "/purchase-orders",
            json=payload,
            invalidate=[("purchase-orders",)],
            success="Purchase order created successfully",
            failure="Failed to create purchase order",
        )

    def site_stock_summary(self, site_id: str) -> List[Dict[str, Any]]:
        """
        Calls: GET /inventory/sites/{site_id}/stock-summary

        Backends without the endpoint (404/501) are handled by summarising the
        site's transaction log here.
        """
        key = ("inventory", "sites", str(site_id), "stock-summary")
        try:
            return self.query(key, f"/inventory/sites/{site_id}/stock-summary")
        except ApiError as e:
            if e.status_code not in (404, 501) or e.detail == "Site not found":
                raise

        rows = self.list_rows("inventory/transactions", site_id=site_id)
        summary = [s.as_dict() for s in summarize_stock(sort_newest_first(rows)).values()]
        self.cache.set(key, summary)
        return summary


def make_client_from_env() -> SiteOpsApiClient:
    base_url = os.getenv("SITEOPS_API_URL", "").strip()
    token = os.getenv("SITEOPS_API_TOKEN", "").strip() or None

    if not base_url:
        raise RuntimeError("Missing SITEOPS_API_URL")

    return SiteOpsApiClient(base_url=base_url, token=token)


# -----------------------------------------------------------------------------
# Minimal "manual test" usage
# -----------------------------------------------------------------------------

if __name__ == "__main__":
    client = make_client_from_env()

    # Example: sign in with an emailed code
    # client.request_code("admin@example.com")
    # client.verify_code("admin@example.com", input("Code: "))

    # Example: current stock at a site
    # print(client.site_stock_summary("00000000-0000-0000-0000-000000000000"))

    print("OK: client configured. Uncomment examples to run.")
