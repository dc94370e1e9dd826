import json
from collections.abc import Generator
from contextlib import contextmanager
from typing import Any

import httpx
import pydantic

EXIT_GENERIC = 1
EXIT_USAGE = 2
EXIT_AUTH = 3
EXIT_NOT_FOUND = 4
EXIT_FORBIDDEN = 5
EXIT_RATE_LIMITED = 6
EXIT_SERVER = 7
EXIT_NETWORK = 8


class DeelError(Exception):
    """Base exception for all deelcli errors."""

    exit_code = EXIT_GENERIC
    suggestions: tuple[str, ...] = ("An unexpected error occurred",)

    def __init__(self, message: str, original_error: Exception | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.original_error = original_error


class ConfigError(DeelError):
    """Raised when required configuration (e.g. the API token) is missing or invalid."""

    exit_code = EXIT_AUTH
    suggestions = (
        "No API token configured",
        "Set DEEL_TOKEN or pass --token",
    )


class APIError(DeelError):
    """Raised when the Deel API answers with an error status."""

    suggestions = ("Deel's API rejected the request",)

    def __init__(
        self, status_code: int, message: str, original_error: Exception | None = None
    ) -> None:
        super().__init__(f"API error {status_code}: {message}", original_error)
        self.status_code = status_code
        self.api_message = message


class AuthenticationError(APIError):
    """Raised on 401 responses."""

    exit_code = EXIT_AUTH
    suggestions = (
        "Your API token may be expired or invalid",
        "Generate a new token in the Deel developer center and set DEEL_TOKEN",
    )


class PermissionDeniedError(APIError):
    """Raised on 403 responses."""

    exit_code = EXIT_FORBIDDEN
    suggestions = (
        "Your API token doesn't have permission for this action",
        "You may need to generate a new token with additional scopes",
    )


class NotFoundError(APIError):
    """Raised on 404 responses."""

    exit_code = EXIT_NOT_FOUND
    suggestions = ("The resource was not found",)


class ValidationError(APIError):
    """Raised on 400 and 422 responses."""

    suggestions = (
        "The request data was invalid",
        "Check required fields and formats",
    )


class RateLimitError(APIError):
    """Raised on 429 responses."""

    exit_code = EXIT_RATE_LIMITED
    suggestions = (
        "You've hit Deel's rate limit",
        "Wait a few seconds and try again",
    )


class ServerError(APIError):
    """Raised on 5xx responses."""

    exit_code = EXIT_SERVER
    suggestions = (
        "Deel's API returned an error",
        "Check status.deel.com for outages",
        "Try again in a few minutes",
    )


class NetworkError(DeelError):
    """Raised when the API cannot be reached."""

    exit_code = EXIT_NETWORK
    suggestions = (
        "Could not connect to Deel's API",
        "Check your internet connection",
        "If using a proxy/VPN, ensure api.letsdeel.com is accessible",
    )


class RequestTimeoutError(NetworkError):
    """Raised when a request to the API times out."""

    def __init__(
        self, message: str = "Request timed out", original_error: Exception | None = None
    ) -> None:
        super().__init__(message, original_error)


class ResponseParseError(DeelError):
    """Raised when a response body is not JSON or does not match the expected shape."""

    def __init__(self, message: str, original_error: Exception | None = None) -> None:
        super().__init__(f"failed to parse response: {message}", original_error)


class LegalEntityNotFoundError(DeelError):
    """Raised when --entity names a legal entity the organization does not have."""

    exit_code = EXIT_NOT_FOUND
    suggestions = ("Check the ID or name against the organization's legal entities",)

    def __init__(self, entity: str) -> None:
        super().__init__(f"legal entity {entity} not found")
        self.entity = entity


class PaginationLimitError(DeelError):
    """Raised when --all aggregation reaches the page safety limit with pages still pending."""

    suggestions = (
        "The collection is too large to fetch with --all",
        "Use --limit and --cursor to page through it manually",
    )

    def __init__(self, max_pages: int) -> None:
        super().__init__(
            f"pagination safety limit reached after {max_pages} pages; "
            "use --limit and --cursor to paginate manually instead of --all"
        )
        self.max_pages = max_pages


_STATUS_ERRORS: dict[int, type[APIError]] = {
    400: ValidationError,
    401: AuthenticationError,
    403: PermissionDeniedError,
    404: NotFoundError,
    422: ValidationError,
    429: RateLimitError,
}


def error_for_status(
    status_code: int, message: str, original_error: Exception | None = None
) -> APIError:
    """Builds the APIError subclass matching an HTTP status code."""
    if status_code >= 500:
        return ServerError(status_code, message, original_error)
    error_cls = _STATUS_ERRORS.get(status_code, APIError)
    return error_cls(status_code, message, original_error)


def extract_api_message(response: httpx.Response) -> str:
    """
    Pulls a human-readable message out of an error body.

    Understands {"error": ...}, {"message": ...} and the nested
    {"errors": {"errors": [{"message": ...}]}} shape; falls back to the raw text.
    """
    text = response.text
    try:
        body: Any = json.loads(text)
    except ValueError:
        return text or response.reason_phrase

    if isinstance(body, dict):
        for key in ("error", "message"):
            value = body.get(key)
            if isinstance(value, str) and value:
                return value

        nested = body.get("errors")
        if isinstance(nested, dict):
            entries = nested.get("errors") or []
            messages = [
                e["message"] for e in entries if isinstance(e, dict) and e.get("message")
            ]
            if len(messages) == 1:
                return messages[0]
            if messages:
                return f"{len(messages)} errors: {messages}"

    return text or response.reason_phrase


@contextmanager
def handle_http_errors(operation: str | None = None) -> Generator[None, None, None]:
    """
    Context manager that catches httpx and pydantic failures
    and raises the appropriate DeelError subclass.

    Args:
        operation: Optional description used in network error messages

    Usage:
        with handle_http_errors(operation="listing contracts"):
            response = http.get(...)
            response.raise_for_status()
    """
    try:
        yield
    except httpx.HTTPStatusError as e:
        raise error_for_status(
            e.response.status_code, extract_api_message(e.response), original_error=e
        ) from e
    except httpx.TimeoutException as e:
        target = f" while {operation}" if operation else ""
        raise RequestTimeoutError(message=f"Request timed out{target}", original_error=e) from e
    except httpx.TransportError as e:
        raise NetworkError(message=f"Could not reach the Deel API: {e}", original_error=e) from e
    except json.JSONDecodeError as e:
        raise ResponseParseError(str(e), original_error=e) from e
    except pydantic.ValidationError as e:
        raise ResponseParseError(
            f"{e.error_count()} invalid field(s) in {e.title}", original_error=e
        ) from e
