from typing import Any, Optional
import logging
import os

import httpx

logger = logging.getLogger(__name__)

API_URL = os.getenv("API_URL", "http://localhost:3000")
API_TIMEOUT = float(os.getenv("API_TIMEOUT", "5.0"))


class ApiError(Exception):
    """Non-2xx answer from the API, or a body that is not JSON."""

    def __init__(self, message: str, status_code: Optional[int] = None, payload: Optional[dict] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.payload = payload or {}

    @property
    def code(self) -> Optional[str]:
        return self.payload.get("code")


class ApiClient:
    def __init__(self, base_url: str = API_URL, timeout: float = API_TIMEOUT, http: Optional[httpx.Client] = None):
        self.base_url = base_url
        self.http = http or httpx.Client(base_url=base_url, timeout=timeout)

    def close(self):
        self.http.close()

    def get(self, endpoint: str, params: Optional[dict] = None) -> Any:
        return self._request("GET", endpoint, params=params)

    def post(self, endpoint: str, data: Any) -> Any:
        return self._request("POST", endpoint, json=data)

    def put(self, endpoint: str, data: Any) -> Any:
        return self._request("PUT", endpoint, json=data)

    def patch(self, endpoint: str, data: Any) -> Any:
        return self._request("PATCH", endpoint, json=data)

    def delete(self, endpoint: str) -> Any:
        return self._request("DELETE", endpoint)

    def _request(self, method: str, endpoint: str, **kwargs) -> Any:
        try:
            response = self.http.request(method, endpoint, **kwargs)
        except httpx.TransportError as e:
            logger.error(f"Network request failed: {method} {endpoint}: {e}")
            raise

        try:
            body = response.json()
        except ValueError:
            logger.error(f"Invalid server response for {method} {endpoint}: {response.text[:200]}")
            raise ApiError("Invalid server response", status_code=response.status_code)

        if response.is_error:
            payload = body if isinstance(body, dict) else {}
            message = payload.get("message") or payload.get("error") or f"API Error: {response.reason_phrase}"
            raise ApiError(message, status_code=response.status_code, payload=payload)
        return body
