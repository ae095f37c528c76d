"""
HTTP Client - Timeout-bounded HTTP requests for nodes.

All HTTP calls MUST use timeouts (nodes run synchronously inside host workers).
This module provides a thin wrapper around requests that classifies
failures into the node error taxonomy:

- RemoteApiError: the API answered with a non-2xx status (body attached)
- TransportError: no usable response (connection reset, DNS, ...)
- NodeTimeoutError: the request exceeded its timeout
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import requests
from requests.exceptions import RequestException, Timeout

from .basenode import NodeApiError, NodeOperationError


logger = logging.getLogger(__name__)

# Default timeout in seconds
DEFAULT_TIMEOUT = 30.0


class TransportError(NodeOperationError):
    """Raised when a request produced no response."""

    def __init__(
        self,
        message: str,
        url: Optional[str] = None,
        method: Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self.url = url
        self.method = method


class NodeTimeoutError(TransportError):
    """Raised when an HTTP request times out."""

    def __init__(self, message: str, timeout: float, url: str, method: Optional[str] = None):
        super().__init__(message, url=url, method=method)
        self.timeout = timeout


class RemoteApiError(NodeApiError):
    """Non-2xx response from the remote API."""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        response_body: Any = None,
        url: Optional[str] = None,
        method: Optional[str] = None,
    ) -> None:
        super().__init__(message, status_code=status_code, response_body=response_body)
        self.url = url
        self.method = method


def _error_message(body: Any, fallback: str) -> str:
    """Pick a human-readable message out of a structured error body."""
    if isinstance(body, dict):
        for key in ("message", "error", "detail"):
            value = body.get(key)
            if isinstance(value, str) and value:
                return value
            if isinstance(value, dict) and isinstance(value.get("message"), str):
                return value["message"]
    return fallback


class HttpResponse:
    """
    Wrapper for HTTP response with convenient accessors.
    """

    def __init__(self, response: requests.Response):
        self._response = response

    @property
    def status_code(self) -> int:
        return self._response.status_code

    @property
    def headers(self) -> Dict[str, str]:
        return dict(self._response.headers)

    @property
    def text(self) -> str:
        return self._response.text

    @property
    def ok(self) -> bool:
        """True if status code is 2xx."""
        return 200 <= self.status_code < 300

    def json(self) -> Any:
        """
        Parse response as JSON.

        An empty body (e.g. 204) parses to an empty dict.
        """
        if not self._response.content:
            return {}
        try:
            return self._response.json()
        except ValueError as e:
            raise RemoteApiError(
                message=f"Invalid JSON in response (HTTP {self.status_code})",
                status_code=self.status_code,
                response_body=self.text[:1000],
                url=str(self._response.url),
                method=self._method,
            ) from e

    @property
    def _method(self) -> Optional[str]:
        request = getattr(self._response, "request", None)
        return request.method if request is not None else None

    def raise_for_status(self) -> None:
        """Raise RemoteApiError if status code indicates error."""
        if self.ok:
            return

        try:
            body: Any = self._response.json()
        except ValueError:
            body = self.text[:1000] if self.text else None

        raise RemoteApiError(
            message=_error_message(body, f"HTTP {self.status_code}: {self._response.reason}"),
            status_code=self.status_code,
            response_body=body,
            url=str(self._response.url),
            method=self._method,
        )


class HttpClient:
    """
    HTTP client with timeout enforcement.

    Every request carries an explicit timeout.

    Usage:
        client = HttpClient(timeout=10)
        response = client.request("GET", "https://api.example.com/users")
        response.raise_for_status()
        data = response.json()
    """

    def __init__(
        self,
        timeout: float = DEFAULT_TIMEOUT,
        default_headers: Optional[Dict[str, str]] = None,
        session: Optional[requests.Session] = None,
    ):
        """
        Initialize HTTP client.

        Args:
            timeout: Default timeout in seconds (REQUIRED)
            default_headers: Headers to include in all requests
            session: Optional requests session (connection pooling)
        """
        if timeout <= 0:
            raise ValueError("timeout must be positive")
        self.timeout = timeout
        self.headers: Dict[str, str] = dict(default_headers or {})
        self._session = session

    def request(
        self,
        method: str,
        url: str,
        json: Any = None,
        headers: Optional[Dict[str, str]] = None,
        timeout: Optional[float] = None,
    ) -> HttpResponse:
        """
        Make HTTP request with timeout enforcement.

        Args:
            method: HTTP method (GET, POST, ...)
            url: Absolute URL, query string included
            json: JSON body (auto-serialized)
            headers: Additional headers (merged with defaults)
            timeout: Override default timeout

        Returns:
            HttpResponse wrapper

        Raises:
            NodeTimeoutError: If request times out
            TransportError: If no response was received
        """
        request_headers = {**self.headers, **(headers or {})}
        request_timeout = timeout or self.timeout
        sender = self._session.request if self._session is not None else requests.request

        logger.debug(f"{method} {url}")

        try:
            response = sender(
                method=method,
                url=url,
                json=json,
                headers=request_headers,
                timeout=request_timeout,
            )
        except Timeout as e:
            raise NodeTimeoutError(
                message=f"Request timed out after {request_timeout}s",
                timeout=request_timeout,
                url=url,
                method=method,
            ) from e
        except RequestException as e:
            raise TransportError(
                message=f"Request failed: {e}",
                url=url,
                method=method,
            ) from e

        return HttpResponse(response)

    def request_json(
        self,
        method: str,
        url: str,
        json: Any = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> Any:
        """Send a request, raise on non-2xx and return the parsed body."""
        response = self.request(method, url, json=json, headers=headers)
        response.raise_for_status()
        return response.json()


__all__ = [
    "DEFAULT_TIMEOUT",
    "HttpClient",
    "HttpResponse",
    "NodeTimeoutError",
    "RemoteApiError",
    "TransportError",
]
