"""
Template engine for air prompts.

Two passes turn a template file into prompt text:

- include expansion: ``{{include "path"}}`` directives are replaced by the
  expanded content of the referenced file, with cycle detection and a check
  that every included file stays inside the project directory
- placeholder substitution: ``{{name}}`` and ``{{name|default}}`` are filled
  from a merged variable mapping, and all missing names are reported at once

Frontmatter is split off between the two passes, so included files may
contribute to it.
"""

from .includes import (
    INCLUDE_PATTERN,
    InclusionContext,
    expand_file,
    expand_includes,
    read_template_file,
)
from .paths import check_within_root, resolve_include_path
from .variables import (
    PLACEHOLDER_PATTERN,
    Placeholder,
    environment_variables,
    find_placeholders,
    merge_variables,
    substitute_variables,
)


__all__ = [
    # Include expansion
    "INCLUDE_PATTERN",
    "InclusionContext",
    "expand_file",
    "expand_includes",
    "read_template_file",
    # Paths
    "check_within_root",
    "resolve_include_path",
    # Placeholders
    "PLACEHOLDER_PATTERN",
    "Placeholder",
    "environment_variables",
    "find_placeholders",
    "merge_variables",
    "substitute_variables",
]
