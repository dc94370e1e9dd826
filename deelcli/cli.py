import argparse
from collections.abc import Callable, Mapping
from typing import TextIO

from . import __version__
from ._logging import configure_cli_logging, logger
from .client import DeelClient
from .config import OUTPUT_FORMATS, OUTPUT_TEXT, Settings
from .exceptions import DeelError
from .output import Formatter
from .resources import register_commands

EXIT_INTERRUPTED = 130

ClientFactory = Callable[[Settings], DeelClient]


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="deel",
        description="Command-line client for the Deel HR and payroll API",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument(
        "-o",
        "--output",
        choices=OUTPUT_FORMATS,
        default=None,
        help="Output format (default: text, or DEEL_OUTPUT)",
    )
    parser.add_argument("--token", default=None, help="API token (default: DEEL_TOKEN)")
    parser.add_argument("--base-url", default=None, help="API base URL (default: DEEL_BASE_URL)")
    parser.add_argument(
        "--timeout", type=float, default=None, help="Request timeout in seconds (default: 30)"
    )
    parser.add_argument(
        "--debug", action="store_true", default=None, help="Log requests and pagination to stderr"
    )

    subparsers = parser.add_subparsers(dest="resource", metavar="<resource>")
    subparsers.required = True
    register_commands(subparsers)
    return parser


def report_error(formatter: Formatter, error: DeelError, operation: str | None) -> None:
    """Prints an error and its suggestions to stderr."""
    prefix = f"failed {operation}: " if operation else ""
    formatter.print_error(f"Error: {prefix}{error.message}")
    for suggestion in error.suggestions:
        formatter.print_error(f"  - {suggestion}")


def main(
    argv: list[str] | None = None,
    client_factory: ClientFactory | None = None,
    stdout: TextIO | None = None,
    stderr: TextIO | None = None,
    environ: Mapping[str, str] | None = None,
) -> int:
    """
    Entry point of the `deel` command.

    Returns the process exit code: 0 on success, otherwise the exit_code of the
    DeelError that ended the command. Usage errors exit through argparse (2).
    """
    args = build_parser().parse_args(argv)
    formatter = Formatter(stdout, stderr, OUTPUT_TEXT)
    operation = getattr(args, "operation", None)

    try:
        settings = Settings.from_env(environ).with_overrides(
            token=args.token,
            base_url=args.base_url,
            output=args.output,
            timeout=args.timeout,
            debug=args.debug,
        )
        formatter.output_format = settings.output
        configure_cli_logging(settings.debug, formatter.err)
        logger.debug("Running command", extra={"operation": operation, "settings": repr(settings)})

        factory = client_factory or DeelClient.from_settings
        with factory(settings) as client:
            return args.handler(args, client, formatter)
    except DeelError as e:
        report_error(formatter, e, operation)
        return e.exit_code
    except KeyboardInterrupt:
        formatter.print_error("Interrupted")
        return EXIT_INTERRUPTED
