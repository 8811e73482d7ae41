import math
import os
from dataclasses import dataclass, field
from typing import Callable, Mapping, Optional, TypeVar

from .errors import ConfigurationError

T = TypeVar("T")

DEFAULT_BASE_URL = "https://api.wavespeed.ai/api/v2/"
DEFAULT_POLL_INTERVAL = 0.5
DEFAULT_TIMEOUT = 60.0
DEFAULT_MAX_RETRIES = 3

API_KEY_ENV = "WAVESPEED_API_KEY"
BASE_URL_ENV = "WAVESPEED_BASE_URL"
POLL_INTERVAL_ENV = "WAVESPEED_POLL_INTERVAL"
TIMEOUT_ENV = "WAVESPEED_TIMEOUT"
MAX_RETRIES_ENV = "WAVESPEED_MAX_RETRIES"


def resolve_value(
    explicit: Optional[T],
    environ: Mapping[str, str],
    var_name: str,
    default: T,
    cast: Callable[[str], T],
) -> T:
    """Explicit argument wins, then the environment, then the built-in default."""
    if explicit is not None:
        return explicit
    raw = environ.get(var_name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return cast(raw)
    except (TypeError, ValueError):
        return default


def positive_float(raw: str) -> float:
    value = float(raw)
    if not math.isfinite(value) or value <= 0:
        raise ValueError(f"expected a positive finite number, got {raw!r}")
    return value


def non_negative_int(raw: str) -> int:
    value = int(raw)
    if value < 0:
        raise ValueError(f"expected a non-negative integer, got {raw!r}")
    return value


@dataclass(frozen=True)
class Settings:
    api_key: str = field(repr=False)
    base_url: str = DEFAULT_BASE_URL
    poll_interval: float = DEFAULT_POLL_INTERVAL
    timeout: float = DEFAULT_TIMEOUT
    max_retries: int = DEFAULT_MAX_RETRIES

    def __post_init__(self) -> None:
        if not self.api_key:
            raise ConfigurationError(
                "API key is required. Provide it as a parameter or set the "
                f"{API_KEY_ENV} environment variable."
            )
        if not self.base_url:
            raise ConfigurationError("base_url must not be empty")
        if not math.isfinite(self.poll_interval) or self.poll_interval <= 0:
            raise ConfigurationError("poll_interval must be a positive finite number")
        if not math.isfinite(self.timeout) or self.timeout <= 0:
            raise ConfigurationError("timeout must be a positive finite number")
        if self.max_retries < 0:
            raise ConfigurationError("max_retries cannot be negative")


def get_settings(
    api_key: str | None = None,
    *,
    base_url: str | None = None,
    poll_interval: float | None = None,
    timeout: float | None = None,
    max_retries: int | None = None,
    environ: Mapping[str, str] | None = None,
) -> Settings:
    # Read the environment at call time so a client picks up the current values.
    # Out-of-range environment values fall back to the defaults like unparseable ones;
    # explicit arguments are validated by Settings and raise.
    env = os.environ if environ is None else environ
    return Settings(
        api_key=resolve_value(api_key or None, env, API_KEY_ENV, "", str),
        base_url=resolve_value(base_url, env, BASE_URL_ENV, DEFAULT_BASE_URL, str),
        poll_interval=resolve_value(poll_interval, env, POLL_INTERVAL_ENV, DEFAULT_POLL_INTERVAL, positive_float),
        timeout=resolve_value(timeout, env, TIMEOUT_ENV, DEFAULT_TIMEOUT, positive_float),
        max_retries=resolve_value(max_retries, env, MAX_RETRIES_ENV, DEFAULT_MAX_RETRIES, non_negative_int),
    )
