__version__ = "0.1.0"

from .client import DeelClient  # noqa: E402
from .commands import CursorListConfig, add_cursor_list_command  # noqa: E402
from .config import Settings  # noqa: E402
from .exceptions import (  # noqa: E402
    APIError,
    AuthenticationError,
    ConfigError,
    LegalEntityNotFoundError,
    DeelError,
    NetworkError,
    NotFoundError,
    PaginationLimitError,
    PermissionDeniedError,
    RateLimitError,
    RequestTimeoutError,
    ResponseParseError,
    ServerError,
    ValidationError,
)
from .output import Formatter, output_list  # noqa: E402
from .pagination import MAX_PAGES, AggregationResult, Page, aggregate  # noqa: E402

__all__ = [
    "__version__",
    "DeelClient",
    "Settings",
    # Pagination
    "Page",
    "AggregationResult",
    "aggregate",
    "MAX_PAGES",
    # Commands and output
    "CursorListConfig",
    "add_cursor_list_command",
    "Formatter",
    "output_list",
    # Exceptions
    "DeelError",
    "ConfigError",
    "APIError",
    "AuthenticationError",
    "PermissionDeniedError",
    "NotFoundError",
    "ValidationError",
    "RateLimitError",
    "ServerError",
    "NetworkError",
    "RequestTimeoutError",
    "ResponseParseError",
    "LegalEntityNotFoundError",
    "PaginationLimitError",
]
