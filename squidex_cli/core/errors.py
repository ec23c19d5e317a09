"""
Error taxonomy and classification for the Squidex gateway client.

Every failure that leaves the transport goes through classify_error(), which
turns it into a single SquidexError carrying a kind discriminant, the HTTP
status (if any), a message, optional details and a retryable flag.
"""

from enum import Enum
from typing import Any, NoReturn


class CLIError(Exception):
    """Base error class for CLI and SDK errors."""

    def __init__(self, message: str, details: Any = None):
        super().__init__(message)
        self.message = message
        self.details = details

    def to_dict(self) -> dict[str, Any]:
        """Convert to dict for JSON output."""
        result: dict[str, Any] = {"error": self.message}
        if self.details:
            result["details"] = self.details
        return result


class ValidationError(CLIError):
    """Validation error for local input/data issues (not API errors)."""


class ConfigError(CLIError):
    """Missing or invalid client configuration."""


# =============================================================================
# Classified errors
# =============================================================================


class ErrorKind(str, Enum):
    """Kinds of classified API failures."""

    AUTH = "auth"
    NOT_FOUND = "not_found"
    VALIDATION = "validation"
    RATE_LIMIT = "rate_limit"
    SERVER_RETRYABLE = "server_retryable"
    UNCLASSIFIED = "unclassified"
    NETWORK = "network"


class SquidexError(CLIError):
    """
    A classified API failure.

    Callers branch on ``kind`` rather than on the exception type:

        try:
            client.content.get("questions", "abc")
        except SquidexError as e:
            if e.kind is ErrorKind.NOT_FOUND:
                ...

    """

    def __init__(
        self,
        kind: ErrorKind,
        message: str,
        status: int | None = None,
        details: Any = None,
        retryable: bool = False,
    ):
        super().__init__(message, details)
        self.kind = kind
        self.status = status
        self.retryable = retryable

    def __repr__(self) -> str:
        return f"SquidexError(kind={self.kind.value!r}, status={self.status!r}, message={self.message!r})"

    def to_dict(self) -> dict[str, Any]:
        """Convert to dict for JSON output."""
        result = super().to_dict()
        result["kind"] = self.kind.value
        if self.status:
            result["status"] = self.status
        result["retryable"] = self.retryable
        return result


class TransportError(Exception):
    """
    Raw failure of a single HTTP attempt, before classification.

    ``status`` is None when no response was received at all (DNS failure,
    refused connection, timeout).
    """

    def __init__(
        self,
        message: str,
        status: int | None = None,
        body: Any = None,
        cause: BaseException | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.status = status
        self.body = body
        self.cause = cause


# status -> (kind, retryable, default message)
STATUS_TABLE: dict[int, tuple[ErrorKind, bool, str]] = {
    401: (ErrorKind.AUTH, False, "Authentication failed"),
    403: (ErrorKind.AUTH, False, "Authentication failed"),
    404: (ErrorKind.NOT_FOUND, False, "Resource not found"),
    400: (ErrorKind.VALIDATION, False, "Validation error"),
    429: (ErrorKind.RATE_LIMIT, True, "Rate limit exceeded"),
    500: (ErrorKind.SERVER_RETRYABLE, True, "Server error"),
    502: (ErrorKind.SERVER_RETRYABLE, True, "Server error"),
    503: (ErrorKind.SERVER_RETRYABLE, True, "Server error"),
    504: (ErrorKind.SERVER_RETRYABLE, True, "Server error"),
}

NETWORK_ERROR_MESSAGE = "Network error: No response from server"


# =============================================================================
# Body inspection
# =============================================================================


def extract_error_message(body: Any) -> str | None:
    """
    Pull a human-readable message out of an error response body.

    Handles plain strings, {"message": "..."}, {"error": "..."},
    {"error": {"message": "..."}} and {"details": [...]} shapes.
    """
    if not body:
        return None

    if isinstance(body, str):
        return body

    if not isinstance(body, dict):
        return None

    message = body.get("message")
    if isinstance(message, str):
        return message

    error = body.get("error")
    if isinstance(error, str):
        return error
    if isinstance(error, dict) and isinstance(error.get("message"), str):
        return error["message"]

    details = body.get("details")
    if isinstance(details, list):
        parts = []
        for item in details:
            if isinstance(item, str):
                parts.append(item)
            elif isinstance(item, dict) and isinstance(item.get("message"), str):
                parts.append(item["message"])
            else:
                parts.append(str(item))
        return ", ".join(parts)

    return None


def _body_details(body: Any) -> dict[str, Any] | None:
    if not body:
        return None
    if isinstance(body, str):
        return {"message": body}
    if isinstance(body, dict):
        return body
    return None


def _cause_code(cause: BaseException | None) -> str:
    if cause is None:
        return ""
    errno = getattr(cause, "errno", None)
    if errno is not None:
        return str(errno)
    reason = getattr(cause, "reason", None)
    if isinstance(reason, BaseException):
        return _cause_code(reason) or type(reason).__name__
    return type(cause).__name__


# =============================================================================
# Classification
# =============================================================================


def classify_transport_error(error: TransportError) -> SquidexError:
    """Map a raw transport failure onto the error taxonomy."""
    if error.status is None:
        return SquidexError(
            ErrorKind.NETWORK,
            NETWORK_ERROR_MESSAGE,
            details={"message": error.message, "code": _cause_code(error.cause)},
            retryable=True,
        )

    message = extract_error_message(error.body) or error.message
    details = _body_details(error.body)

    kind, retryable, default_message = STATUS_TABLE.get(
        error.status, (ErrorKind.UNCLASSIFIED, False, "Unknown error")
    )
    return SquidexError(
        kind,
        message or default_message,
        status=error.status,
        details=details,
        retryable=retryable,
    )


def classify_error(error: BaseException) -> NoReturn:
    """
    Raise the classified form of ``error``.

    Already-classified errors are re-raised unchanged. Transport failures are
    mapped by status code. Anything else becomes an UNCLASSIFIED error.

    Raises:
        SquidexError: always

    """
    if isinstance(error, SquidexError):
        raise error

    if isinstance(error, TransportError):
        raise classify_transport_error(error) from error

    raise SquidexError(
        ErrorKind.UNCLASSIFIED,
        str(error) or "Unknown error occurred",
        details={"exception": error},
        retryable=False,
    ) from error


def is_retryable(error: BaseException) -> bool:
    """Check whether a failure may be retried."""
    if isinstance(error, SquidexError):
        return error.retryable

    if isinstance(error, TransportError):
        status = error.status
        return status is None or status == 429 or status >= 500

    return False
