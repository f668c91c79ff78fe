"""
Include expansion for prompt templates.

``{{include "path"}}`` directives are replaced by the expanded content of the
referenced file. Expansion is a depth-first walk: each included file is
expanded in its own directory before it is spliced into its parent, and the
text around a directive is copied through as-is.

A file may be included any number of times from unrelated branches, but a file
that is still being expanded higher up the stack may not be included again.
"""

import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Optional, Union

from .. import get_logger
from ..errors import CircularIncludeError, FileReadError
from .paths import check_within_root, resolve_include_path

logger = get_logger(__name__)

INCLUDE_PATTERN = re.compile(r'\{\{include\s+"([^"]+)"\}\}')


def read_template_file(path: Path) -> str:
    """Read a template file as UTF-8 text.

    Raises:
        FileReadError: If the file cannot be opened or decoded
    """
    try:
        with open(path, "r", encoding="utf-8") as f:
            return f.read()
    except (OSError, UnicodeDecodeError) as e:
        raise FileReadError(path, getattr(e, "strerror", None) or str(e)) from e


@dataclass
class InclusionContext:
    """Traversal state for one top-level expansion.

    ``visited`` holds the canonical paths of the files on the current
    expansion stack, and ``base_dir`` is the directory relative includes are
    resolved against. Build a new context for every top-level template.
    """

    base_dir: Path
    root: Path = field(default_factory=Path.cwd)
    visited: set[Path] = field(default_factory=set)
    reader: Callable[[Path], str] = read_template_file

    @classmethod
    def for_file(
        cls, template_path: Union[str, Path], root: Optional[Union[str, Path]] = None
    ) -> "InclusionContext":
        """Create a context for expanding ``template_path``.

        The template itself is marked as visited so that a file including its
        own includer is reported at the first back-edge.
        """
        path = Path(template_path).resolve()
        context = cls(base_dir=path.parent, root=Path(root or Path.cwd()).resolve())
        context.visited.add(path)
        return context

    def expand_included(self, path: Path) -> str:
        """Read ``path`` and expand it in its own directory."""
        self.visited.add(path)
        previous_base_dir = self.base_dir
        try:
            content = self.reader(path)
            self.base_dir = path.parent
            return expand_includes(content, self)
        finally:
            self.base_dir = previous_base_dir
            self.visited.discard(path)


def expand_includes(text: str, context: InclusionContext) -> str:
    """Replace every include directive in ``text`` with the included content.

    Args:
        text: Template text
        context: Traversal state, shared by the whole recursive expansion

    Returns:
        Text with all include directives expanded

    Raises:
        PathResolutionError: If a reference cannot be resolved
        PathEscapeError: If a reference leaves the project root
        CircularIncludeError: If a reference points at a file being expanded
        FileReadError: If an included file cannot be read
    """
    parts: list[str] = []
    position = 0

    while True:
        match = INCLUDE_PATTERN.search(text, position)
        if match is None:
            parts.append(text[position:])
            break

        parts.append(text[position : match.start()])
        reference = match.group(1)

        path = resolve_include_path(reference, context.base_dir)
        check_within_root(path, context.root, reference)
        if path in context.visited:
            raise CircularIncludeError(reference, path)

        logger.debug("Including %s (%s)", reference, path)
        parts.append(context.expand_included(path))
        position = match.end()

    return "".join(parts)


def expand_file(template_path: Union[str, Path], root: Optional[Union[str, Path]] = None) -> str:
    """Read a template file and expand its includes.

    Args:
        template_path: Path of the top-level template
        root: Directory includes must stay in (defaults to the working directory)

    Returns:
        Template content with all includes expanded
    """
    context = InclusionContext.for_file(template_path, root)
    content = context.reader(Path(template_path).resolve())
    return expand_includes(content, context)
