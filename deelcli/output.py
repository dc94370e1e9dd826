"""
Output formatting for deelcli.

Text mode renders aligned tables on stdout. JSON mode keeps stdout
machine-readable: tables become JSON documents and informational messages move
to stderr.
"""

import json
import sys
from collections.abc import Callable, Sequence
from typing import Any, TextIO, TypeVar

from pydantic import BaseModel

from .config import OUTPUT_JSON, OUTPUT_TEXT
from .pagination import AggregationResult

T = TypeVar("T")

MORE_RESULTS_HINT = (
    "# More results available. Use --cursor with --limit to page manually, "
    "or --all to fetch everything."
)


def to_jsonable(value: Any) -> Any:
    """Converts pydantic models (and lists of them) into JSON-ready structures."""
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json")
    if isinstance(value, (list, tuple)):
        return [to_jsonable(v) for v in value]
    if isinstance(value, dict):
        return {k: to_jsonable(v) for k, v in value.items()}
    return value


class Table:
    """A plain-text table with left-aligned columns sized to their widest cell."""

    def __init__(self, formatter: "Formatter", headers: Sequence[str]) -> None:
        self.formatter = formatter
        self.headers = list(headers)
        self.rows: list[list[str]] = []
        self.widths = [len(h) for h in self.headers]

    def add_row(self, *values: str) -> None:
        row = [str(v) for v in values[: len(self.headers)]]
        # Short rows are padded so every column lines up
        row.extend([""] * (len(self.headers) - len(row)))
        for i, cell in enumerate(row):
            self.widths[i] = max(self.widths[i], len(cell))
        self.rows.append(row)

    def render(self) -> None:
        for row in [self.headers, *self.rows]:
            line = "  ".join(cell.ljust(self.widths[i]) for i, cell in enumerate(row))
            self.formatter.write(line.rstrip())


class Formatter:
    """Writes command results in the selected output format."""

    def __init__(
        self,
        out: TextIO | None = None,
        err: TextIO | None = None,
        output_format: str = OUTPUT_TEXT,
    ) -> None:
        self.out = out if out is not None else sys.stdout
        self.err = err if err is not None else sys.stderr
        self.output_format = output_format

    @property
    def is_json(self) -> bool:
        return self.output_format == OUTPUT_JSON

    def write(self, line: str) -> None:
        print(line, file=self.out)

    def print_text(self, text: str) -> None:
        """Prints an informational line; goes to stderr in JSON mode."""
        print(text, file=self.err if self.is_json else self.out)

    def print_hint(self, text: str) -> None:
        print(text, file=self.err)

    def print_error(self, text: str) -> None:
        print(text, file=self.err)

    def print_json(self, data: Any) -> None:
        print(json.dumps(to_jsonable(data), indent=2), file=self.out)

    def new_table(self, *headers: str) -> Table:
        return Table(self, headers)


def output_list(
    formatter: Formatter,
    result: AggregationResult[T],
    empty_message: str,
    headers: Sequence[str],
    row: Callable[[T], Sequence[str]],
) -> None:
    """
    Renders a list command result.

    JSON mode always emits {"items", "total", "next_cursor"} with the cursor
    cleared. In text mode an empty result prints only empty_message, otherwise a
    table followed by the more-results hint (and the cursor to resume from) when
    the page was not the last one.
    """
    if formatter.is_json:
        formatter.print_json({"items": result.items, "total": result.total, "next_cursor": ""})
        return

    if not result.items:
        formatter.print_text(empty_message)
        return

    table = formatter.new_table(*headers)
    for item in result.items:
        table.add_row(*row(item))
    table.render()

    if result.has_more:
        formatter.print_hint(MORE_RESULTS_HINT)
        if result.next_cursor:
            formatter.print_hint(f"# Next cursor: {result.next_cursor}")
