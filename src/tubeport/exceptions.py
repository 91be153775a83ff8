"""Custom exception hierarchy for tubeport.

All exceptions that cross layer boundaries must inherit from
:class:`TubeportError`.  Raw third-party exceptions (``requests``,
``yt_dlp``, ``OSError``, ``json``) must NEVER propagate beyond the
infrastructure layer — they are caught there and re-raised as a typed
subclass defined here.

Hierarchy
---------
TubeportError
├── FormatError
├── FileAccessError
├── RecordValidationError
├── ResolutionError
├── EnvironmentError
└── ConfigurationError
"""

from __future__ import annotations


class TubeportError(Exception):
    """Base exception for all tubeport errors.

    Every user-visible error condition must map to a subclass of this
    exception so that the CLI error boundary can render a clean message
    without leaking internal stack traces.
    """

    def __init__(self, message: str, *, hint: str | None = None) -> None:
        super().__init__(message)
        self.hint: str | None = hint
        """Optional actionable guidance shown below the error message."""


# --- Batch-fatal errors ----------------------------------------------------

class FormatError(TubeportError):
    """Raised when an import file cannot be decoded as its declared format."""


class FileAccessError(TubeportError):
    """Raised when a file cannot be read or written."""


# --- Per-item errors -------------------------------------------------------

class RecordValidationError(TubeportError):
    """Raised when a single record has the wrong shape.

    Never fatal to a batch: the orchestrator reports it and skips the
    record.
    """


class ResolutionError(TubeportError):
    """Raised by a channel-info backend that could not resolve a channel."""


# --- Environment / settings ------------------------------------------------

class EnvironmentError(TubeportError):
    """Raised when a required runtime dependency is not available."""


class ConfigurationError(TubeportError):
    """Raised when a settings value cannot be parsed."""
