import os
from collections.abc import Mapping
from dataclasses import dataclass, replace
from typing import Any

from .exceptions import ConfigError

DEFAULT_BASE_URL = "https://api.letsdeel.com"
DEFAULT_TIMEOUT = 30.0
DEFAULT_MAX_RETRIES = 3

OUTPUT_TEXT = "text"
OUTPUT_JSON = "json"
OUTPUT_FORMATS = (OUTPUT_TEXT, OUTPUT_JSON)

ENV_TOKEN = "DEEL_TOKEN"
ENV_BASE_URL = "DEEL_BASE_URL"
ENV_OUTPUT = "DEEL_OUTPUT"
ENV_TIMEOUT = "DEEL_TIMEOUT"
ENV_DEBUG = "DEEL_DEBUG"

_TRUTHY = {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class Settings:
    """
    Runtime configuration for the client and the CLI.

    Built from the environment, then overridden by command-line flags.
    """

    token: str = ""
    base_url: str = DEFAULT_BASE_URL
    output: str = OUTPUT_TEXT
    timeout: float = DEFAULT_TIMEOUT
    max_retries: int = DEFAULT_MAX_RETRIES
    debug: bool = False

    def __post_init__(self) -> None:
        if self.output not in OUTPUT_FORMATS:
            raise ConfigError(
                f"Invalid output format '{self.output}', expected one of {', '.join(OUTPUT_FORMATS)}"
            )
        if self.timeout <= 0:
            raise ConfigError(f"Timeout must be positive, got {self.timeout}")
        if self.max_retries < 0:
            raise ConfigError(f"max_retries cannot be negative, got {self.max_retries}")

    def __repr__(self) -> str:
        token = "<redacted>" if self.token else "''"
        return (
            f"Settings(token={token}, base_url={self.base_url!r}, output={self.output!r}, "
            f"timeout={self.timeout!r}, max_retries={self.max_retries!r}, debug={self.debug!r})"
        )

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "Settings":
        """
        Reads settings from DEEL_* environment variables.

        Args:
            environ: Mapping to read from (defaults to os.environ)

        Raises:
            ConfigError: If a value cannot be parsed
        """
        env = os.environ if environ is None else environ

        timeout_raw = env.get(ENV_TIMEOUT, "")
        try:
            timeout = float(timeout_raw) if timeout_raw else DEFAULT_TIMEOUT
        except ValueError as e:
            raise ConfigError(f"{ENV_TIMEOUT} must be a number, got '{timeout_raw}'", e) from e

        return cls(
            token=env.get(ENV_TOKEN, "").strip(),
            base_url=env.get(ENV_BASE_URL, "") or DEFAULT_BASE_URL,
            output=(env.get(ENV_OUTPUT, "") or OUTPUT_TEXT).lower(),
            timeout=timeout,
            debug=env.get(ENV_DEBUG, "").lower() in _TRUTHY,
        )

    def with_overrides(self, **overrides: Any) -> "Settings":
        """Returns a copy with every non-None override applied."""
        changes = {k: v for k, v in overrides.items() if v is not None}
        return replace(self, **changes)

    def require_token(self) -> str:
        """Returns the API token or raises ConfigError when none is set."""
        if not self.token:
            raise ConfigError(f"No API token found; set {ENV_TOKEN} or pass --token")
        return self.token
