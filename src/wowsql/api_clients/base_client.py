"""Base WOWSQL API Client.

Provides the HTTP request executor shared by the database, storage and auth
clients: bearer authentication, query/body serialization, JSON decoding and
mapping of failed requests to typed exceptions.
"""

import json
import logging
from typing import Any, Dict, Mapping, Optional, Tuple

import httpx

from ..exceptions import WOWSQLError

logger = logging.getLogger(__name__)

# Error body fields holding a human-readable message, tried in order
ERROR_MESSAGE_FIELDS: Tuple[str, ...] = ("detail", "message", "error")

BODY_METHODS = frozenset({"POST", "PATCH", "PUT"})


def extract_error_message(payload: Mapping[str, Any]) -> Optional[str]:
    """Return the first message-like field of an error body, if any."""
    for field_name in ERROR_MESSAGE_FIELDS:
        value = payload.get(field_name)
        if value:
            return value if isinstance(value, str) else json.dumps(value)
    return None


def decode_error_body(response: httpx.Response) -> Dict[str, Any]:
    """Decode an error response body, falling back to an empty mapping."""
    try:
        payload = response.json()
    except ValueError:
        return {}
    return payload if isinstance(payload, dict) else {}


class WOWSQLBaseClient:
    """HTTP request executor for one WOWSQL API base URL.

    Subclasses choose the exception raised for failures by overriding
    ``_build_error``. Exactly one network attempt is made per call.
    """

    def __init__(
        self,
        base_url: str,
        api_key: str,
        timeout: float = 30,
        json_content_type: bool = True,
        http_client: Optional[httpx.Client] = None,
    ):
        """Initialize base API client.

        Args:
            base_url: API base URL every request path is appended to
            api_key: API key sent as bearer token
            timeout: Per-request timeout in seconds
            json_content_type: Send ``Content-Type: application/json`` by default
            http_client: Caller-owned httpx client (custom transport, proxies).
                It is pointed at ``base_url`` with the client's headers and
                timeout, and is left open by ``close()``.
        """
        if not api_key:
            raise ValueError("api_key cannot be empty")

        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.timeout = timeout
        self._json_content_type = json_content_type
        self._session: Optional[httpx.Client] = None
        self._owns_session = http_client is None

        if http_client is not None:
            http_client.base_url = httpx.URL(self.base_url)
            http_client.headers.update(self.get_request_headers())
            http_client.timeout = httpx.Timeout(self.timeout)
            self._session = http_client

    @property
    def session(self) -> httpx.Client:
        """Get or create the HTTP session."""
        if self._session is None or self._session.is_closed:
            self._session = httpx.Client(
                base_url=self.base_url,
                timeout=self.timeout,
                headers=self.get_request_headers(),
                follow_redirects=True,
            )
            self._owns_session = True
        return self._session

    def get_auth_headers(self) -> Dict[str, str]:
        """Get authentication headers."""
        return {"Authorization": f"Bearer {self.api_key}"}

    def get_request_headers(self) -> Dict[str, str]:
        """Get default headers for every request."""
        headers = self.get_auth_headers()
        if self._json_content_type:
            headers["Content-Type"] = "application/json"
        return headers

    def _build_error(
        self,
        message: str,
        status_code: Optional[int] = None,
        payload: Optional[Dict[str, Any]] = None,
    ) -> WOWSQLError:
        """Create the exception raised for a failed request."""
        return WOWSQLError(message, status_code, payload)

    def _request(
        self,
        method: str,
        path: str,
        params: Optional[Mapping[str, Any]] = None,
        json_body: Optional[Any] = None,
        files: Optional[Mapping[str, Any]] = None,
        data: Optional[Mapping[str, Any]] = None,
    ) -> Any:
        """Make an authenticated request and return the decoded JSON body.

        Args:
            method: HTTP method (GET, POST, PATCH, PUT, DELETE)
            path: API path relative to the base URL
            params: Flat query parameters; ``None`` values are dropped
            json_body: JSON body, sent only for POST/PATCH/PUT
            files: Multipart file parts (uploads); needs a client created
                with ``json_content_type=False``
            data: Multipart form fields sent along with ``files``

        Returns:
            Decoded JSON response; ``{}`` for an empty body

        Raises:
            WOWSQLError: Or the subclass chosen by ``_build_error``
        """
        method = method.upper()
        request_kwargs: Dict[str, Any] = {}

        if params:
            query = {k: v for k, v in params.items() if v is not None}
            if query:
                request_kwargs["params"] = query

        if method in BODY_METHODS:
            if files is not None:
                request_kwargs["files"] = files
                if data:
                    request_kwargs["data"] = data
            elif json_body is not None:
                request_kwargs["json"] = json_body

        logger.debug(f"{method} {path}")

        try:
            response = self.session.request(method, path, **request_kwargs)
        except httpx.TimeoutException as e:
            logger.warning(f"{method} {path} timed out after {self.timeout}s")
            raise self._build_error(f"Request failed: {e}") from e
        except httpx.HTTPError as e:
            logger.warning(f"{method} {path} failed: {e}")
            raise self._build_error(f"Request failed: {e}") from e

        if response.status_code >= 400:
            payload = decode_error_body(response)
            message = (
                extract_error_message(payload)
                or f"Request failed with status {response.status_code}"
            )
            logger.debug(f"{method} {path} returned {response.status_code}: {message}")
            raise self._build_error(message, response.status_code, payload)

        if not response.content:
            return {}

        try:
            return response.json()
        except ValueError as e:
            raise self._build_error(
                f"Invalid JSON response from {method} {path}",
                response.status_code,
            ) from e

    def close(self) -> None:
        """Close the HTTP session unless it was supplied by the caller."""
        if not self._owns_session:
            return
        if self._session is not None and not self._session.is_closed:
            self._session.close()

    def __enter__(self):
        """Context manager entry."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit."""
        self.close()
