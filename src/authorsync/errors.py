"""Exception hierarchy for authorsync.

The resolution engine itself only ever raises :class:`EmptyInputError`;
the remaining classes belong to the configuration and input adapters.
"""

from pathlib import Path
from typing import Optional, Union


class AuthorsyncError(Exception):
    """Base class for all authorsync errors."""


class EmptyInputError(AuthorsyncError, ValueError):
    """Raised when an operation that needs at least one identity gets none."""


class ConfigurationError(AuthorsyncError):
    """Raised when a configuration file is missing, unreadable or invalid."""

    def __init__(
        self,
        message: str,
        config_path: Optional[Union[Path, str]] = None,
        suggestion: Optional[str] = None,
    ) -> None:
        self.config_path = Path(config_path) if config_path else None
        self.suggestion = suggestion

        full_message = message
        if self.config_path:
            full_message = f"{message}\n📁 File: {self.config_path}"
        if suggestion:
            full_message += f"\n💡 {suggestion}"
        super().__init__(full_message)


class InputFormatError(AuthorsyncError):
    """Raised when an identity list or mailmap cannot be parsed."""

    def __init__(self, message: str, source: Optional[str] = None) -> None:
        self.source = source
        if source:
            message = f"{message} (source: {source})"
        super().__init__(message)
