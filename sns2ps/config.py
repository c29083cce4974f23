"""Process configuration read from the environment."""

import os
from collections.abc import Mapping
from dataclasses import dataclass, replace

from sns2ps.exceptions import ConfigurationError

DEFAULT_PORT = 8080
DEFAULT_BASE_URL = "https://shootnscoreit.com/api/ipsc/match/"
DEFAULT_TIMEOUT = 30.0

TRUE_VALUES = frozenset({"1", "true", "yes", "on", "live"})


@dataclass(frozen=True)
class Settings:
    """Immutable process settings.

    Built once at startup and handed to the components that need it, so
    nothing reads the environment ad hoc.
    """

    port: int = DEFAULT_PORT
    live_mode: bool = False
    base_url: str = DEFAULT_BASE_URL
    timeout: float = DEFAULT_TIMEOUT

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "Settings":
        """Builds settings from environment variables.

        Args:
            environ: Mapping to read from (defaults to ``os.environ``).

        Returns:
            The parsed Settings.

        Raises:
            ConfigurationError: If PORT or SNS_TIMEOUT is malformed.
        """
        env = os.environ if environ is None else environ
        return cls(
            port=parse_port(env.get("PORT", "")),
            live_mode=parse_live_mode(env.get("LIVE_MODE", "")),
            base_url=env.get("SNS_BASE_URL") or DEFAULT_BASE_URL,
            timeout=parse_timeout(env.get("SNS_TIMEOUT", "")),
        )

    def with_overrides(self, **overrides: object) -> "Settings":
        """Returns a copy with every non-None override applied."""
        changes = {k: v for k, v in overrides.items() if v is not None}
        return replace(self, **changes) if changes else self


def parse_port(value: str) -> int:
    if not value:
        return DEFAULT_PORT
    try:
        port = int(value)
    except ValueError:
        raise ConfigurationError(
            f"Invalid port: {value!r}",
            parameter="PORT",
            expected_format="integer between 1 and 65535",
            example="8080",
        ) from None
    if not 0 < port < 65536:
        raise ConfigurationError(
            f"Port out of range: {port}",
            parameter="PORT",
            expected_format="integer between 1 and 65535",
            example="8080",
        )
    return port


def parse_live_mode(value: str) -> bool:
    """Dummy mode unless LIVE_MODE is explicitly truthy."""
    return value.strip().lower() in TRUE_VALUES


def parse_timeout(value: str) -> float:
    if not value:
        return DEFAULT_TIMEOUT
    try:
        timeout = float(value)
    except ValueError:
        timeout = -1.0
    if timeout <= 0:
        raise ConfigurationError(
            f"Invalid timeout: {value!r}",
            parameter="SNS_TIMEOUT",
            expected_format="positive number of seconds",
            example="30",
        )
    return timeout
