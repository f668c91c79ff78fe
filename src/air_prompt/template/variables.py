"""
Placeholder substitution and variable merging.

Placeholders are written ``{{name}}`` or ``{{name|default}}``. Values are
looked up in a single flat mapping built with ``merge_variables`` from the
process environment, the frontmatter ``variables`` block and ``--var`` flags,
in that order of increasing precedence.
"""

import os
import re
from dataclasses import dataclass
from typing import Mapping, Optional

from .. import get_logger
from ..errors import MissingVariablesError

logger = get_logger(__name__)

PLACEHOLDER_PATTERN = re.compile(r"\{\{([A-Za-z_][A-Za-z0-9_]*)(?:\|([^}]*))?\}\}")


@dataclass(frozen=True)
class Placeholder:
    """A placeholder occurrence in template text."""

    name: str
    default: Optional[str]
    start: int
    end: int

    @property
    def has_default(self) -> bool:
        # An empty default after the pipe still counts
        return self.default is not None


def find_placeholders(text: str) -> list[Placeholder]:
    """Return every placeholder in ``text`` in order of appearance."""
    return [
        Placeholder(match.group(1), match.group(2), match.start(), match.end())
        for match in PLACEHOLDER_PATTERN.finditer(text)
    ]


def substitute_variables(text: str, variables: Mapping[str, str]) -> str:
    """Replace placeholders in ``text`` with values from ``variables``.

    Substituted values are inserted verbatim and are not scanned again.
    All placeholders without a value or default are collected before failing,
    so a single run reports every missing name.

    Args:
        text: Template text
        variables: Variable name to value mapping

    Returns:
        Text with all placeholders replaced

    Raises:
        MissingVariablesError: If any placeholder has no value and no default
    """
    missing: dict[str, None] = {}

    def replace(match: "re.Match[str]") -> str:
        name, default = match.group(1), match.group(2)
        if name in variables:
            return str(variables[name])
        if default is not None:
            return default
        missing[name] = None
        return match.group(0)

    result = PLACEHOLDER_PATTERN.sub(replace, text)
    if missing:
        raise MissingVariablesError(missing)
    return result


def merge_variables(*sources: Optional[Mapping[str, str]]) -> dict[str, str]:
    """Merge variable sources, later sources overriding earlier ones.

    ``None`` sources are skipped. A key missing from a later source never
    removes the value set by an earlier one.
    """
    merged: dict[str, str] = {}
    for source in sources:
        if source:
            merged.update(source)
    return merged


def environment_variables(environ: Optional[Mapping[str, str]] = None) -> dict[str, str]:
    """Snapshot the process environment as a variable source."""
    return dict(os.environ if environ is None else environ)
