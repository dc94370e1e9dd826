import hashlib
import logging

# Create the library logger
logger = logging.getLogger("deelcli")

# Add NullHandler to prevent "No handlers could be found" warnings
# if the application doesn't configure logging.
logger.addHandler(logging.NullHandler())

_CLI_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

# Stream handler attached by --debug, if any
_cli_handler: logging.Handler | None = None


def redact(value: str | None) -> str:
    """Short SHA-256 fingerprint of a token or cursor; "-" when empty."""
    if not value:
        return "-"
    return hashlib.sha256(value.encode("utf-8")).hexdigest()[:8]


def configure_cli_logging(debug: bool, stream=None) -> None:
    """Attach a stream handler to the package logger when --debug is set."""
    global _cli_handler
    if not debug or _cli_handler is not None:
        return
    _cli_handler = logging.StreamHandler(stream)
    _cli_handler.setFormatter(logging.Formatter(_CLI_FORMAT))
    logger.addHandler(_cli_handler)
    logger.setLevel(logging.DEBUG)


def remove_cli_logging() -> None:
    """Detach the --debug handler and restore the default level."""
    global _cli_handler
    if _cli_handler is not None:
        logger.removeHandler(_cli_handler)
        _cli_handler = None
    logger.setLevel(logging.NOTSET)
