"""
HTTP transport over requests. Adds the X-API-Key header to every call and turns
non-2xx responses into TransportError.
"""

from __future__ import annotations
import logging
from typing import Any, Optional

import requests

from trader_sync.core.errors import TransportError
from trader_sync.transport.base import Transport

logger = logging.getLogger("trader_sync.transport")


class HttpTransport(Transport):
    """JSON-over-HTTP client for the remote trader."""

    def __init__(
        self,
        base_url: str,
        api_key: str = "",
        timeout: float = 15.0,
        session: Optional[requests.Session] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._api_key = api_key
        self._session = session or requests.Session()
        logger.info("Transport: %s (API key %s)", self.base_url, "SET" if api_key else "NOT SET")

    def _headers(self) -> dict[str, str]:
        if not self._api_key:
            logger.warning("API key is not set; set TRADER_API_KEY. Sending request without it.")
        return {"Content-Type": "application/json", "X-API-Key": self._api_key}

    def _url(self, path: str) -> str:
        return f"{self.base_url}/{path.lstrip('/')}"

    def _request(self, method: str, path: str, body: Optional[dict] = None) -> Any:
        url = self._url(path)
        try:
            r = self._session.request(
                method, url, headers=self._headers(), json=body, timeout=self.timeout
            )
        except requests.RequestException as e:
            logger.warning("%s %s failed: %s", method, path, e)
            raise TransportError(None, reason=str(e)) from e
        if not r.ok:
            text = r.text or ""
            logger.warning("%s %s -> %s %s", method, path, r.status_code, text[:200])
            raise TransportError(r.status_code, reason=r.reason or "", body=text)
        content_type = r.headers.get("content-type", "")
        if "application/json" not in content_type:
            return {}
        try:
            return r.json()
        except ValueError as e:
            raise TransportError(r.status_code, reason="invalid JSON body", body=(r.text or "")[:200]) from e

    def get_json(self, path: str) -> Any:
        return self._request("GET", path)

    def post_json(self, path: str, body: Optional[dict] = None) -> Any:
        return self._request("POST", path, body)

    def close(self) -> None:
        self._session.close()
