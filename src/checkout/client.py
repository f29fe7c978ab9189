"""Thin JSON client for the storefront backend API.

The backend answers with ``{"success": bool, "data": ..., "message": ...}``.
Transport failures, non-2xx statuses and ``success: false`` bodies all surface
as ``ApiError`` carrying the most useful message available.
"""

import requests
import structlog

from checkout.config import ApiSettings

logger = structlog.get_logger(__name__)


class ApiError(Exception):
    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


def _error_message(response) -> str:
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict):
        for key in ("message", "error"):
            if isinstance(body.get(key), str) and body[key]:
                return body[key]
    return f"HTTP {response.status_code}: {response.reason}"


class ApiClient:
    def __init__(self, settings: ApiSettings | None = None, session: requests.Session | None = None) -> None:
        self.settings = settings or ApiSettings.from_env()
        self.session = session or requests.Session()
        self.session.headers.update({"Content-Type": "application/json"})
        if self.settings.access_token:
            self.session.headers["Authorization"] = f"Bearer {self.settings.access_token}"

    def post(self, path: str, payload: dict) -> dict:
        url = f"{self.settings.base_url}{path}"
        logger.debug("API request", method="POST", url=url)

        try:
            response = self.session.post(url, json=payload, timeout=self.settings.timeout)
        except requests.RequestException as exc:
            logger.warning("API request failed", url=url, error=str(exc))
            raise ApiError(f"Network error: {exc}") from exc

        logger.debug("API response", url=url, status=response.status_code)

        if not response.ok:
            raise ApiError(_error_message(response), status_code=response.status_code)

        try:
            body = response.json()
        except ValueError as exc:
            raise ApiError("Malformed response from server", status_code=response.status_code) from exc

        if isinstance(body, dict) and body.get("success") is False:
            raise ApiError(body.get("message") or "Request was not successful", status_code=response.status_code)
        return body
