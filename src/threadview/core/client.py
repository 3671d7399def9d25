"""HTTP client for the remote comment collection.

Every call returns the decoded (and unwrapped) payload or raises a
``CommentServiceError`` subclass carrying a message fit for display.
"""

import json
import logging
import os
from typing import Any, Dict, Mapping, Optional
from urllib.parse import urlparse

import httpx
from dotenv import load_dotenv
from pydantic import TypeAdapter, ValidationError

from threadview.core.models import Forest, NewComment
from threadview.core.view_state import FetchRequest

logger = logging.getLogger(__name__)

API_PATH = "/api/v1/comments"
DEFAULT_API_URL = "http://localhost:8080"

_FOREST_ADAPTER: TypeAdapter[Forest] = TypeAdapter(Forest)

# ============================================================================
# Errors
# ============================================================================


class CommentServiceError(Exception):
    """Base class for failures talking to the comment service."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class DecodeFailure(CommentServiceError):
    """The response body could not be decoded into the expected shape."""


class RequestFailure(CommentServiceError):
    """The service answered with a non-success status, or never answered."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


# ============================================================================
# Configuration
# ============================================================================


def init_client_env(dotenv_path: Optional[str] = None) -> None:
    """Load environment variables for the service connection.

    Args:
        dotenv_path: Optional path to a specific .env file to load.
    """
    load_dotenv(dotenv_path=dotenv_path)


class ServiceConfig:
    """Configuration for the comment service connection."""

    def __init__(self) -> None:
        self.base_url: str = os.environ.get("THREADVIEW_API_URL", DEFAULT_API_URL).rstrip("/")
        self.timeout: float = float(os.environ.get("THREADVIEW_HTTP_TIMEOUT", "30"))
        verify_env = os.environ.get("THREADVIEW_HTTP_VERIFY", "true").lower()
        self.verify: bool = verify_env not in {"0", "false", "no"}

    def validate(self) -> None:
        """Validate the configured values."""
        parsed = urlparse(self.base_url)
        if parsed.scheme not in ("http", "https") or not parsed.netloc:
            raise ValueError(
                f"THREADVIEW_API_URL must be an http(s) URL, got {self.base_url!r}. "
                f"Please set it in your environment or .env file."
            )
        if self.timeout <= 0:
            raise ValueError("THREADVIEW_HTTP_TIMEOUT must be positive")


# ============================================================================
# Client
# ============================================================================


class CommentsClient:
    """Client for the ``/api/v1/comments`` collection.

    No retries and no caching: each call is exactly one HTTP request.
    """

    def __init__(
        self,
        base_url: str = DEFAULT_API_URL,
        timeout: float = 30.0,
        verify: bool = True,
        http_client: Optional[httpx.Client] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self._owns_http = http_client is None
        self._http = http_client or httpx.Client(
            base_url=self.base_url, timeout=timeout, verify=verify
        )

    @classmethod
    def from_env(cls, dotenv_path: Optional[str] = None) -> "CommentsClient":
        """Build a client from THREADVIEW_* environment variables."""
        init_client_env(dotenv_path)
        config = ServiceConfig()
        config.validate()
        logger.info(f"Comment service client configured for {config.base_url}")
        return cls(config.base_url, timeout=config.timeout, verify=config.verify)

    def close(self) -> None:
        if self._owns_http:
            self._http.close()

    def __enter__(self) -> "CommentsClient":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def request(
        self,
        method: str,
        path: str,
        params: Optional[Mapping[str, Any]] = None,
        body: Optional[Dict[str, Any]] = None,
    ) -> Any:
        """Perform one request and return the unwrapped payload.

        Raises:
            DecodeFailure: If a body is present but is not valid JSON.
            RequestFailure: On a non-2xx status or a transport error.
        """
        logger.debug(f"{method} {path} params={dict(params or {})}")
        try:
            response = self._http.request(method, path, params=params, json=body)
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            logger.warning(f"{method} {path} failed: {e}")
            raise RequestFailure(f"Request failed: {e}") from e

        return decode_response(response)

    def list_forest(self, fetch: FetchRequest) -> Forest:
        """Fetch the comment forest described by ``fetch``."""
        payload = self.request("GET", API_PATH, params=fetch.query_params())
        if payload is None:
            return []
        try:
            return _FOREST_ADAPTER.validate_python(payload)
        except ValidationError as e:
            logger.warning(f"Unexpected forest payload: {e}")
            raise DecodeFailure("Unexpected response shape") from e

    def create_comment(self, comment: NewComment) -> Any:
        """Create a comment (or a reply when ``parent_id`` is set).

        Returns:
            The service payload, the new comment id.
        """
        return self.request("POST", API_PATH, body=comment.to_payload())

    def delete_comment(self, comment_id: int) -> None:
        """Delete a comment; the service removes its replies as well."""
        self.request("DELETE", f"{API_PATH}/{comment_id}")


def decode_response(response: httpx.Response) -> Any:
    """Decode, classify and unwrap a service response."""
    text = response.text
    data: Any = None
    if text:
        try:
            data = json.loads(text)
        except ValueError as e:
            logger.warning(f"Undecodable response body (status {response.status_code})")
            raise DecodeFailure("Invalid JSON response") from e

    if not response.is_success:
        if isinstance(data, dict) and data.get("error"):
            message = str(data["error"])
        else:
            message = f"{response.status_code} {response.reason_phrase}"
        logger.warning(f"Service returned {response.status_code}: {message}")
        raise RequestFailure(message, status_code=response.status_code)

    if isinstance(data, dict) and "result" in data:
        return data["result"]
    return data
