"""
Builder for cursor-paginated list commands.

Each list command is described by one CursorListConfig and registered with
add_cursor_list_command(), which gives it its own --limit/--cursor/--all flags.
"""

import argparse
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from functools import partial
from typing import TYPE_CHECKING, Generic, TypeVar

from ._logging import logger
from .output import Formatter, output_list
from .pagination import DEFAULT_PAGE_SIZE, Page, aggregate

if TYPE_CHECKING:
    from .client import DeelClient

T = TypeVar("T")


@dataclass
class CursorListConfig(Generic[T]):
    """
    Describes one list command.

    Attributes:
        name: Subcommand name, e.g. "list"
        help: One-line help text
        operation: Verb phrase used in error messages, e.g. "listing contracts"
        fetch: Fetches one page: (client, args, cursor, limit) -> Page
        headers: Table column headers
        row: Projects one item onto a row of strings, one per header
        empty_message: Printed instead of a table when nothing is returned
        default_limit: Default for --limit
        add_arguments: Registers resource-specific flags on the subparser
        filter_items: Client-side filter applied after fetching: (client, items, args) -> items
        epilog: Usage examples shown in --help
    """

    name: str
    help: str
    operation: str
    fetch: Callable[["DeelClient", argparse.Namespace, str, int], Page[T]]
    headers: Sequence[str]
    row: Callable[[T], Sequence[str]]
    empty_message: str
    default_limit: int = DEFAULT_PAGE_SIZE
    add_arguments: Callable[[argparse.ArgumentParser], None] | None = None
    filter_items: Callable[["DeelClient", list[T], argparse.Namespace], list[T]] | None = None
    epilog: str | None = None
    aliases: list[str] = field(default_factory=list)


def positive_int(value: str) -> int:
    """argparse type for --limit."""
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid integer value: '{value}'") from None
    if number < 1:
        raise argparse.ArgumentTypeError(f"must be at least 1, got {number}")
    return number


def non_empty(value: str) -> str:
    """argparse type for ID flags that cannot be blank."""
    value = value.strip()
    if not value:
        raise argparse.ArgumentTypeError("must not be empty")
    return value


def add_cursor_list_command(
    subparsers: "argparse._SubParsersAction[argparse.ArgumentParser]",
    config: CursorListConfig[T],
) -> argparse.ArgumentParser:
    """
    Registers a list command built from config.

    The handler is stored on the namespace as `handler` and is invoked by the
    CLI as handler(args, client, formatter).
    """
    parser = subparsers.add_parser(
        config.name,
        aliases=config.aliases,
        help=config.help,
        description=config.help,
        epilog=config.epilog,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--limit",
        type=positive_int,
        default=config.default_limit,
        help=f"Page size (default: {config.default_limit})",
    )
    parser.add_argument("--cursor", default="", help="Cursor of the page to start from")
    parser.add_argument(
        "--all",
        dest="all_pages",
        action="store_true",
        help="Fetch every page and print the combined result",
    )
    if config.add_arguments is not None:
        config.add_arguments(parser)
    parser.set_defaults(handler=partial(run_cursor_list, config), operation=config.operation)
    return parser


def run_cursor_list(
    config: CursorListConfig[T],
    args: argparse.Namespace,
    client: "DeelClient",
    formatter: Formatter,
) -> int:
    """Fetches one page or every page, filters, and renders the result."""

    def fetch_page(cursor: str, limit: int) -> Page[T]:
        return config.fetch(client, args, cursor, limit)

    result = aggregate(fetch_page, args.all_pages, args.cursor, args.limit)

    if config.filter_items is not None:
        before = len(result.items)
        result.items = config.filter_items(client, result.items, args)
        logger.debug(
            "Applied client-side filter",
            extra={"operation": config.operation, "before": before, "after": len(result.items)},
        )

    output_list(formatter, result, config.empty_message, config.headers, config.row)
    return 0
