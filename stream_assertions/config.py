"""
Defaults for publisher assertions.

Values are read once from the environment and cached:

- ``STREAM_ASSERTIONS_TIMEOUT``: default timeout in seconds (1.0)
- ``STREAM_ASSERTIONS_DESCRIPTION``: default failure description
- ``STREAM_ASSERTIONS_TIMEOUT_MULTIPLIER``: factor applied to every timeout,
  e.g. 3 on slow CI runners (1.0)
"""
import logging
import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Mapping, Optional

__all__ = [
    "AssertionSettings",
    "DEFAULT_TIMEOUT",
    "DEFAULT_DESCRIPTION",
    "load_settings",
    "get_settings",
]

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 1.0
DEFAULT_DESCRIPTION = "Publisher published expected values"

ENV_TIMEOUT = "STREAM_ASSERTIONS_TIMEOUT"
ENV_DESCRIPTION = "STREAM_ASSERTIONS_DESCRIPTION"
ENV_TIMEOUT_MULTIPLIER = "STREAM_ASSERTIONS_TIMEOUT_MULTIPLIER"


@dataclass(frozen=True)
class AssertionSettings:
    default_timeout: float = DEFAULT_TIMEOUT
    default_description: str = DEFAULT_DESCRIPTION
    timeout_multiplier: float = 1.0

    def effective_timeout(self, timeout: Optional[float]) -> float:
        base = self.default_timeout if timeout is None else timeout
        if base <= 0:
            raise ValueError(f"timeout must be greater than 0, got: {base}")
        return base * self.timeout_multiplier


def _positive_float(environ: Mapping[str, str], name: str, default: float) -> float:
    raw = environ.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = float(raw)
    except ValueError:
        raise ValueError(f"{name} must be a number, got: {raw!r}") from None
    if value <= 0:
        raise ValueError(f"{name} must be greater than 0, got: {raw!r}")
    return value


def load_settings(environ: Optional[Mapping[str, str]] = None) -> AssertionSettings:
    environ = os.environ if environ is None else environ
    settings = AssertionSettings(
        default_timeout=_positive_float(environ, ENV_TIMEOUT, DEFAULT_TIMEOUT),
        default_description=environ.get(ENV_DESCRIPTION) or DEFAULT_DESCRIPTION,
        timeout_multiplier=_positive_float(environ, ENV_TIMEOUT_MULTIPLIER, 1.0),
    )
    logger.debug("Loaded %s", settings)
    return settings


@lru_cache(maxsize=1)
def get_settings() -> AssertionSettings:
    """Process-wide settings. ``get_settings.cache_clear()`` re-reads the environment."""
    return load_settings()
