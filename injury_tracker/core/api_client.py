"""Shared gateway to the injury-tracking REST backend.

All repositories reuse this client for request + error classification.
"""

import logging
from typing import Any

import requests

from injury_tracker.core.config import settings
from injury_tracker.core.errors import ApiError, ErrorKind

logger = logging.getLogger(__name__)


def classify_status(status_code: int) -> ErrorKind:
    """Map a non-2xx status code onto an ErrorKind."""
    if status_code == 401:
        return ErrorKind.unauthorized
    if status_code == 404:
        return ErrorKind.not_found
    if status_code >= 500:
        return ErrorKind.server_error
    return ErrorKind.client_error


def classify_exception(exc: Exception) -> ErrorKind:
    """Map an exception raised while sending a request onto an ErrorKind."""
    # Construction faults first: InvalidURL and friends subclass RequestException.
    if isinstance(
        exc,
        (
            requests.exceptions.MissingSchema,
            requests.exceptions.InvalidSchema,
            requests.exceptions.InvalidURL,
            requests.exceptions.InvalidHeader,
            requests.exceptions.URLRequired,
            requests.exceptions.InvalidJSONError,
            TypeError,
            ValueError,
        ),
    ):
        return ErrorKind.request_setup
    if isinstance(
        exc, (requests.exceptions.ConnectionError, requests.exceptions.Timeout)
    ):
        return ErrorKind.connectivity
    return ErrorKind.unclassified


def _decode(response: requests.Response) -> Any:
    """Decode a JSON body; empty bodies decode to None, non-JSON to text."""
    if not response.content:
        return None
    try:
        return response.json()
    except ValueError:
        return response.text


class ApiClient:
    """
    Thin wrapper over a requests.Session bound to one base endpoint.

    Every call returns the decoded response body or raises ApiError.
    """

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        session: requests.Session | None = None,
    ) -> None:
        self.base_url = (base_url or settings.API_BASE_URL).rstrip("/")
        self.timeout = timeout if timeout is not None else settings.API_REQUEST_TIMEOUT
        self.session = session or requests.Session()
        self.session.headers.update({"Content-Type": "application/json"})

    def url_for(self, path: str) -> str:
        return f"{self.base_url}/{path.lstrip('/')}"

    def request(
        self,
        method: str,
        path: str,
        *,
        json: Any = None,
        params: dict[str, Any] | None = None,
    ) -> Any:
        url = self.url_for(path)
        try:
            response = self.session.request(
                method, url, json=json, params=params, timeout=self.timeout
            )
        except Exception as exc:
            kind = classify_exception(exc)
            logger.error("API %s %s failed before a response (%s): %s", method, url, kind, exc)
            raise ApiError(kind, str(exc), method=method, url=url) from exc

        if not response.ok:
            kind = classify_status(response.status_code)
            body = _decode(response)
            logger.error(
                "API %s %s responded %d (%s): %s",
                method,
                url,
                response.status_code,
                kind,
                body,
            )
            raise ApiError(
                kind,
                f"{method} {url} returned {response.status_code}",
                status_code=response.status_code,
                body=body,
                method=method,
                url=url,
            )

        return _decode(response)

    def get(self, path: str, params: dict[str, Any] | None = None) -> Any:
        return self.request("GET", path, params=params)

    def post(self, path: str, payload: Any) -> Any:
        return self.request("POST", path, json=payload)

    def put(self, path: str, payload: Any) -> Any:
        return self.request("PUT", path, json=payload)

    def delete(self, path: str) -> Any:
        return self.request("DELETE", path)

    def close(self) -> None:
        self.session.close()


client = ApiClient()


def get_api_client() -> ApiClient:
    """FastAPI dependency returning the process-wide gateway client."""
    return client
