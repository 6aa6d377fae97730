import logging

import httpx
from pydantic_core import to_jsonable_python

from .session import SessionState

logger = logging.getLogger(__name__)


class ApiError(Exception):
    def __init__(self, status_code: int, message: str):
        self.status_code = status_code
        self.message = message
        super().__init__(message)


def _server_message(response: httpx.Response) -> str | None:
    try:
        body = response.json()
    except ValueError:
        return None
    if isinstance(body, dict) and body.get("message"):
        return str(body["message"])
    return None


class FinanceClient:
    """Talks to the finance backend over HTTP on behalf of one session."""

    def __init__(self, http: httpx.Client, session: SessionState):
        self.http = http
        self.session = session

    def _headers(self) -> dict:
        if not self.session.token:
            return {}
        return {"Authorization": f"Bearer {self.session.token}"}

    def _request(self, method: str, url: str, *, fallback: str, **kwargs):
        if "json" in kwargs:
            kwargs["json"] = to_jsonable_python(kwargs["json"])
        try:
            response = self.http.request(method, url, headers=self._headers(), **kwargs)
        except httpx.HTTPError as exc:
            logger.warning("%s %s failed: %s", method, url, exc)
            raise ApiError(0, fallback) from exc
        if response.is_error:
            raise ApiError(response.status_code, _server_message(response) or fallback)
        return response.json()

    def register(
        self,
        name: str,
        email: str,
        password: str,
        dob=None,
        phone: str | None = None,
    ) -> dict:
        payload = {"name": name, "email": email, "password": password}
        if dob is not None:
            payload["dob"] = dob
        if phone is not None:
            payload["phone"] = phone
        body = self._request(
            "POST", "/api/auth/signup", json=payload, fallback="Registration failed"
        )
        self.session.save(body["token"], body["user"])
        return body["user"]

    def login(self, email: str, password: str) -> dict:
        body = self._request(
            "POST",
            "/api/auth/login",
            json={"email": email, "password": password},
            fallback="Login failed",
        )
        self.session.save(body["token"], body["user"])
        return body["user"]

    def logout(self) -> None:
        self.session.clear()

    def me(self) -> dict:
        user = self._request("GET", "/api/auth/me", fallback="Failed to load profile")
        self.session.set_user(user)
        return user

    def update_profile(self, **fields) -> dict:
        user = self._request(
            "PATCH", "/api/auth/me", json=fields, fallback="Update failed"
        )
        self.session.set_user(user)
        return user

    def list_transactions(
        self,
        *,
        category: str | None = None,
        txn_type: str | None = None,
        start=None,
        end=None,
        search: str | None = None,
    ) -> list[dict]:
        params = {
            "category": category,
            "type": txn_type,
            "from": start,
            "to": end,
            "search": search,
        }
        params = {k: str(v) for k, v in params.items() if v}
        return self._request(
            "GET",
            "/api/transactions",
            params=params,
            fallback="Failed to load transactions",
        )

    def create_transaction(self, payload: dict) -> dict:
        return self._request(
            "POST",
            "/api/transactions",
            json=payload,
            fallback="Failed to save transaction",
        )

    def update_transaction(self, txn_id: str, payload: dict) -> dict:
        return self._request(
            "PATCH",
            f"/api/transactions/{txn_id}",
            json=payload,
            fallback="Failed to save transaction",
        )

    def delete_transaction(self, txn_id: str) -> dict:
        return self._request(
            "DELETE",
            f"/api/transactions/{txn_id}",
            fallback="Failed to delete transaction",
        )
