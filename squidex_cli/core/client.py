"""
Core HTTP client for the Squidex gateway (ap-games-api).

Handles configuration, request/response, retries with exponential backoff,
and hands every terminal failure to the error classifier.
"""

import http.client
import json
import logging
import os
import time
import urllib.error
import urllib.request
from collections.abc import Callable
from dataclasses import dataclass, field, replace
from typing import Any

from squidex_cli.core.errors import (
    ConfigError,
    ErrorKind,
    SquidexError,
    TransportError,
    classify_error,
)
from squidex_cli.core.retry import DEFAULT_RETRIES, DEFAULT_RETRY_DELAY, RetryPolicy
from squidex_cli.core.urls import UrlBuilder

logger = logging.getLogger(__name__)

# Configuration
DEFAULT_TIMEOUT = 30


@dataclass
class ClientConfig:
    """
    Connection settings for a client instance.

    Attributes:
        api_base_url: Base URL of the ap-games-api gateway
            (e.g. "http://localhost:8200")
        timeout: Request timeout in seconds
        retries: Maximum number of retries after the first attempt
        retry_delay: Base backoff delay in seconds
        headers: Extra headers sent with every request

    """

    api_base_url: str
    timeout: float = DEFAULT_TIMEOUT
    retries: int = DEFAULT_RETRIES
    retry_delay: float = DEFAULT_RETRY_DELAY
    headers: dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_env(cls, **overrides: Any) -> "ClientConfig":
        """
        Build a config from SQUIDEX_* environment variables.

        Keyword overrides that are not None win over the environment.

        Raises:
            ConfigError: If no base URL is configured or a number is malformed

        """
        values: dict[str, Any] = {
            "api_base_url": os.environ.get("SQUIDEX_API_BASE_URL"),
            "timeout": _env_number("SQUIDEX_TIMEOUT", float),
            "retries": _env_number("SQUIDEX_RETRIES", int),
            "retry_delay": _env_number("SQUIDEX_RETRY_DELAY", float),
        }
        values.update({k: v for k, v in overrides.items() if v is not None})
        values = {k: v for k, v in values.items() if v is not None}

        if not values.get("api_base_url"):
            raise ConfigError("SQUIDEX_API_BASE_URL environment variable not set")
        return cls(**values)

    def copy(self) -> "ClientConfig":
        """Return a copy with its own headers dict."""
        return replace(self, headers=dict(self.headers))


def _env_number(name: str, cast: Callable[[str], Any]) -> Any:
    raw = os.environ.get(name)
    if raw is None or raw == "":
        return None
    try:
        return cast(raw)
    except ValueError:
        raise ConfigError(f"Invalid value for {name}: {raw!r}")


class APIClient:
    """
    Low-level HTTP client for the Squidex gateway.

    Handles:
    - HTTP methods (GET, POST, PUT, PATCH, DELETE)
    - JSON request/response bodies
    - Retries of retryable failures with exponential backoff
    - Classification of terminal failures into SquidexError
    """

    def __init__(
        self,
        config: ClientConfig,
        sleep: Callable[[float], None] = time.sleep,
    ):
        """
        Initialize the API client.

        Args:
            config: Connection settings
            sleep: Function used to wait between retries

        """
        self.config = config
        self.urls = UrlBuilder(config.api_base_url)
        self.retry_policy = RetryPolicy(retries=config.retries, base_delay=config.retry_delay)
        self._sleep = sleep

    def _send(
        self,
        method: str,
        url: str,
        data: Any = None,
        headers: dict[str, str] | None = None,
    ) -> Any:
        """
        Perform a single HTTP attempt.

        Returns:
            Parsed JSON response, or None for an empty body

        Raises:
            TransportError: On HTTP or connection failures
            SquidexError: On an unparseable success response

        """
        request_headers = {
            "Content-Type": "application/json",
            "Accept": "application/json",
            **self.config.headers,
            **(headers or {}),
        }
        body = json.dumps(data).encode("utf-8") if data is not None else None

        logger.debug("%s %s", method, url)
        try:
            req = urllib.request.Request(url, data=body, headers=request_headers, method=method)
            with urllib.request.urlopen(req, timeout=self.config.timeout) as response:
                raw = response.read()

        except urllib.error.HTTPError as e:
            raise TransportError(str(e), status=e.code, body=_read_error_body(e), cause=e)

        except urllib.error.URLError as e:
            raise TransportError(f"Connection error: {e.reason}", cause=e)

        except TimeoutError as e:
            raise TransportError(f"Request timed out after {self.config.timeout} seconds", cause=e)

        except OSError as e:
            raise TransportError(f"Connection error: {e}", cause=e)

        # Truncated or malformed HTTP responses (IncompleteRead, BadStatusLine, ...)
        except http.client.HTTPException as e:
            raise TransportError(f"Connection error: {type(e).__name__}: {e}", cause=e)

        if not raw:
            return None
        try:
            return json.loads(raw.decode("utf-8"))
        except UnicodeDecodeError as e:
            raise SquidexError(ErrorKind.UNCLASSIFIED, f"Response is not valid UTF-8: {e}", details={"body": raw})
        except json.JSONDecodeError as e:
            raise SquidexError(ErrorKind.UNCLASSIFIED, f"Invalid JSON response: {e}", details={"body": raw.decode("utf-8")})

    def request(
        self,
        method: str,
        path: str,
        params: dict[str, Any] | None = None,
        data: Any = None,
        headers: dict[str, str] | None = None,
    ) -> Any:
        """
        Make an HTTP request, retrying retryable failures.

        Args:
            method: HTTP method
            path: API path (e.g., /squidex/content/questions)
            params: Query parameters; None values are dropped
            data: JSON request body
            headers: Extra headers for this request

        Returns:
            Parsed JSON response

        Raises:
            SquidexError: On any failure, once retries are exhausted

        """
        url = self.urls.build(path, params)
        attempt = 0
        while True:
            try:
                return self._send(method, url, data, headers)
            except TransportError as e:
                attempt += 1
                if not self.retry_policy.should_retry(attempt, e):
                    classify_error(e)
                delay = self.retry_policy.delay(attempt)
                logger.warning(
                    "%s %s failed (%s), retry %d/%d in %.2fs",
                    method,
                    url,
                    e.message,
                    attempt,
                    self.retry_policy.retries,
                    delay,
                )
                self._sleep(delay)

    # =========================================================================
    # HTTP Methods
    # =========================================================================

    def get(self, path: str, params: dict[str, Any] | None = None) -> Any:
        """Make a GET request."""
        return self.request("GET", path, params=params)

    def post(self, path: str, data: Any = None, params: dict[str, Any] | None = None) -> Any:
        """Make a POST request."""
        return self.request("POST", path, params=params, data=data)

    def put(
        self,
        path: str,
        data: Any = None,
        headers: dict[str, str] | None = None,
    ) -> Any:
        """Make a PUT request."""
        return self.request("PUT", path, data=data, headers=headers)

    def patch(
        self,
        path: str,
        data: Any = None,
        headers: dict[str, str] | None = None,
    ) -> Any:
        """Make a PATCH request."""
        return self.request("PATCH", path, data=data, headers=headers)

    def delete(self, path: str, params: dict[str, Any] | None = None) -> Any:
        """Make a DELETE request."""
        return self.request("DELETE", path, params=params)


def _read_error_body(error: urllib.error.HTTPError) -> Any:
    """Read an error response body as JSON, falling back to text."""
    try:
        raw = error.read().decode("utf-8")
    except (OSError, UnicodeDecodeError):
        return None
    if not raw:
        return None
    try:
        return json.loads(raw)
    except json.JSONDecodeError:
        return raw
