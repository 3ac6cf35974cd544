from __future__ import annotations

import logging
from typing import Any, Callable, Dict, Optional

import requests

from .errors import ApiError

LOGGER = logging.getLogger(__name__)

PROTECTED_PREFIX = "/v1/"
VERSION_PATH = "/v1/version"
AUTH_EXEMPT_PATHS = ("/iam/login", "/iam/logout")


class ApiClient:
    """
    Thin wrapper around ``requests.Session`` for the catalog's HTTP surface.

    Requests under ``/v1/`` carry the bearer token when one is configured.
    A 401 on anything but the login/logout calls is reported through
    ``on_auth_failure``; the response itself is always returned to the caller.
    """

    def __init__(
        self,
        base_url: str,
        token: Optional[str] = None,
        on_auth_failure: Optional[Callable[[requests.Response], None]] = None,
        session: Optional[requests.Session] = None,
        timeout: float = 30.0,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.token = token
        self.on_auth_failure = on_auth_failure
        self.session = session or requests.Session()
        self.timeout = timeout

    def _headers(self, path: str, headers: Optional[Dict[str, str]] = None) -> Dict[str, str]:
        merged = dict(headers or {})
        if self.token and path.startswith(PROTECTED_PREFIX):
            merged["Authorization"] = f"Bearer {self.token}"
        return merged

    def _handle_unauthorized(self, path: str, response: requests.Response) -> None:
        if any(exempt in path for exempt in AUTH_EXEMPT_PATHS):
            return
        if self.on_auth_failure is not None:
            self.on_auth_failure(response)
        else:
            LOGGER.warning("Auth required (401) for %s", path)

    def request(self, method: str, path: str, **kwargs: Any) -> requests.Response:
        kwargs["headers"] = self._headers(path, kwargs.get("headers"))
        kwargs.setdefault("timeout", self.timeout)
        response = self.session.request(method, f"{self.base_url}{path}", **kwargs)
        if response.status_code == 401:
            self._handle_unauthorized(path, response)
        return response

    def get(self, path: str, **kwargs: Any) -> requests.Response:
        return self.request("GET", path, **kwargs)

    def fetch_version(self) -> str:
        try:
            response = self.get(VERSION_PATH)
            response.raise_for_status()
            data = response.json()
        except requests.RequestException as exc:
            raise ApiError(f"Failed to fetch version: {exc}") from exc
        except ValueError as exc:
            raise ApiError(f"Version endpoint returned invalid JSON: {exc}") from exc
        version = data.get("version") if isinstance(data, dict) else None
        if not isinstance(version, str):
            raise ApiError(f"Version endpoint returned no version: {data!r}")
        return version[1:] if version.startswith("v") else version
