"""Runtime settings for tubeport.

Settings are resolved in two steps: :func:`load_settings` reads the
``TUBEPORT_*`` environment variables over built-in defaults, then the
CLI applies its flags with :meth:`Settings.with_overrides`.  A
:class:`Settings` instance always holds a valid configuration.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any

from tubeport.core.models import Backend
from tubeport.exceptions import ConfigurationError

ENV_DATA_DIR = "TUBEPORT_DATA_DIR"
ENV_BACKEND = "TUBEPORT_BACKEND"
ENV_BACKEND_FALLBACK = "TUBEPORT_BACKEND_FALLBACK"
ENV_INVIDIOUS_INSTANCE = "TUBEPORT_INVIDIOUS_INSTANCE"
ENV_REQUEST_TIMEOUT = "TUBEPORT_REQUEST_TIMEOUT"

DEFAULT_INVIDIOUS_INSTANCE = "https://yewtu.be"
DEFAULT_REQUEST_TIMEOUT = 10.0

PROFILES_FILENAME = "profiles.db"
HISTORY_FILENAME = "history.db"

_TRUE = frozenset({"1", "true", "yes", "on"})
_FALSE = frozenset({"0", "false", "no", "off"})


def default_data_dir() -> Path:
    """The desktop application's user-data directory."""
    return Path.home() / ".config" / "FreeTube"


@dataclass(frozen=True, slots=True)
class Settings:
    """Validated runtime configuration."""

    data_dir: Path
    backend_preference: Backend = Backend.LOCAL
    backend_fallback: bool = True
    invidious_instance: str = DEFAULT_INVIDIOUS_INSTANCE
    request_timeout: float = DEFAULT_REQUEST_TIMEOUT

    @property
    def profiles_path(self) -> Path:
        return self.data_dir / PROFILES_FILENAME

    @property
    def history_path(self) -> Path:
        return self.data_dir / HISTORY_FILENAME

    def with_overrides(self, **overrides: Any) -> Settings:
        """Return a copy with every non-``None`` override applied."""
        changes = {key: value for key, value in overrides.items() if value is not None}
        return replace(self, **changes)


# ---------------------------------------------------------------------------
# Parsers
# ---------------------------------------------------------------------------

def parse_backend(value: str) -> Backend:
    try:
        return Backend(value.strip().lower())
    except ValueError as exc:
        choices = ", ".join(b.value for b in Backend)
        raise ConfigurationError(
            f"Unknown backend: {value!r}",
            hint=f"Choose one of: {choices}",
        ) from exc


def parse_bool(name: str, value: str) -> bool:
    normalized = value.strip().lower()
    if normalized in _TRUE:
        return True
    if normalized in _FALSE:
        return False
    raise ConfigurationError(
        f"{name} must be a boolean, got {value!r}",
        hint="Use true/false, yes/no, on/off or 1/0.",
    )


def parse_timeout(name: str, value: str) -> float:
    try:
        timeout = float(value)
    except ValueError as exc:
        raise ConfigurationError(f"{name} must be a number, got {value!r}") from exc
    if timeout <= 0:
        raise ConfigurationError(f"{name} must be positive, got {value!r}")
    return timeout


def normalize_instance(value: str) -> str:
    instance = value.strip().rstrip("/")
    if not instance.startswith(("http://", "https://")):
        raise ConfigurationError(
            f"Invalid Invidious instance: {value!r}",
            hint="Instance URLs must start with http:// or https://",
        )
    return instance


# ---------------------------------------------------------------------------
# Public entry point
# ---------------------------------------------------------------------------

def load_settings(environ: Mapping[str, str] | None = None) -> Settings:
    """Build :class:`Settings` from *environ* (default ``os.environ``).

    Raises
    ------
    ConfigurationError
        If any ``TUBEPORT_*`` variable holds an unparseable value.
    """
    env = os.environ if environ is None else environ

    data_dir = Path(env[ENV_DATA_DIR]).expanduser() if env.get(ENV_DATA_DIR) else default_data_dir()
    settings = Settings(data_dir=data_dir)

    if env.get(ENV_BACKEND):
        settings = replace(settings, backend_preference=parse_backend(env[ENV_BACKEND]))
    if env.get(ENV_BACKEND_FALLBACK):
        settings = replace(
            settings,
            backend_fallback=parse_bool(ENV_BACKEND_FALLBACK, env[ENV_BACKEND_FALLBACK]),
        )
    if env.get(ENV_INVIDIOUS_INSTANCE):
        settings = replace(
            settings,
            invidious_instance=normalize_instance(env[ENV_INVIDIOUS_INSTANCE]),
        )
    if env.get(ENV_REQUEST_TIMEOUT):
        settings = replace(
            settings,
            request_timeout=parse_timeout(ENV_REQUEST_TIMEOUT, env[ENV_REQUEST_TIMEOUT]),
        )
    return settings
