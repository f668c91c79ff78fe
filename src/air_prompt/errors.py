"""
Error types for the air prompt tool.

Every failure the tool reports on purpose derives from ``AirError``. Template
problems derive from ``TemplateError`` and carry the offending reference, path
or variable names so the CLI can print a one-line message and pick an exit code.
"""

from pathlib import Path
from typing import Iterable, Optional


class AirError(Exception):
    """Base class for errors raised by air."""


class TemplateError(AirError):
    """Base class for include and placeholder errors."""


class PathResolutionError(TemplateError):
    """An include reference could not be turned into a path."""

    def __init__(self, reference: str, reason: str):
        self.reference = reference
        super().__init__(f"cannot resolve include path {reference!r}: {reason}")


class PathEscapeError(TemplateError):
    """An include path resolves outside the project directory."""

    def __init__(self, reference: str, path: Path, root: Path):
        self.reference = reference
        self.path = path
        self.root = root
        super().__init__(f"include path {reference!r} is outside the project directory ({root})")


class CircularIncludeError(TemplateError):
    """A file includes one of the files that is including it."""

    def __init__(self, reference: str, path: Path):
        self.reference = reference
        self.path = path
        super().__init__(f"circular include detected: {reference!r} ({path})")


class FileReadError(TemplateError):
    """A template or included file could not be read."""

    def __init__(self, path: Path, reason: str):
        self.path = path
        super().__init__(f"cannot read {path}: {reason}")


class MissingVariablesError(TemplateError):
    """Placeholders without a value and without a default."""

    def __init__(self, names: Iterable[str]):
        self.names = sorted(set(names))
        super().__init__("undefined variables without defaults: " + ", ".join(self.names))


class ConfigError(AirError, ValueError):
    """Invalid frontmatter or configuration value."""


class GenerationError(AirError):
    """The generation request failed or returned no usable text."""

    def __init__(self, message: str, finish_reason: Optional[str] = None):
        self.finish_reason = finish_reason
        super().__init__(message)
