# wallet/client.py
from __future__ import annotations

import logging
import time
from typing import Any, Dict, Optional

import httpx

from wallet.config import Settings, get_settings
from wallet.errors import ApiError, NetworkError, Unauthorized
from wallet.observability import log_exchange
from wallet.security import AuthSession

logger = logging.getLogger("wallet.client")


def build_http_client(settings: Optional[Settings] = None) -> httpx.Client:
    """One pooled HTTP client for the configured backend."""
    settings = settings or get_settings()
    client = httpx.Client(
        base_url=settings.api_base,
        timeout=settings.api_timeout,
        headers={"Content-Type": "application/json"},
    )
    # Log which backend is actually in use (helps avoid "which server?" confusion).
    logger.info("API base URL in use: %s", client.base_url)
    return client


def _json_or_none(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return None


def _error_message(response: httpx.Response, data: Any) -> str:
    if isinstance(data, dict) and data.get("message"):
        return str(data["message"])
    return f"HTTP {response.status_code}: {response.reason_phrase}"


class ApiClient:
    """
    Thin JSON-over-HTTP wrapper:
    - adds the bearer token from the session
    - turns 401 into Unauthorized (and expires the session if we had a token)
    - turns other failures into ApiError / NetworkError
    """

    def __init__(self, http: httpx.Client, session: Optional[AuthSession] = None):
        self.http = http
        self.session = session or AuthSession()

    def request(
        self,
        method: str,
        path: str,
        *,
        json: Any = None,
        params: Optional[Dict[str, Any]] = None,
    ) -> Any:
        had_token = self.session.is_authenticated
        query = {k: v for k, v in (params or {}).items() if v is not None}
        request = self.http.build_request(
            method,
            path,
            json=json,
            params=query or None,
            headers=self.session.auth_headers(),
        )

        started = time.perf_counter()
        user_id = self.session.active_user_id
        try:
            response = self.http.send(request)
        except httpx.TransportError as ex:
            log_exchange(request, None, started, user_id)
            raise NetworkError(str(ex) or "Network error") from ex
        log_exchange(request, response.status_code, started, user_id)

        if response.status_code == 401:
            data = _json_or_none(response)
            if had_token:
                self.session.expire()
            raise Unauthorized(_error_message(response, data), 401, data)

        if not response.is_success:
            data = _json_or_none(response)
            raise ApiError(_error_message(response, data), response.status_code, data)

        try:
            return response.json()
        except ValueError:
            raise ApiError(
                "Invalid JSON in response", response.status_code, response.text
            ) from None

    def get(self, path: str, params: Optional[Dict[str, Any]] = None) -> Any:
        return self.request("GET", path, params=params)

    def post(self, path: str, json: Any = None) -> Any:
        return self.request("POST", path, json=json)

    def put(self, path: str, json: Any = None) -> Any:
        return self.request("PUT", path, json=json)

    def patch(self, path: str, json: Any = None) -> Any:
        return self.request("PATCH", path, json=json)

    def delete(self, path: str) -> Any:
        return self.request("DELETE", path)

    def close(self) -> None:
        self.http.close()

    def __enter__(self) -> "ApiClient":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()
