"""
Include path resolution.

Include references are resolved against the directory of the file that
contains them and canonicalized before any check is made, so that ``..``
segments, absolute paths and symlinks cannot be used to leave the project
directory.
"""

import os
from pathlib import Path
from typing import Union

from ..errors import PathEscapeError, PathResolutionError

PathLike = Union[str, os.PathLike]


def resolve_include_path(reference: str, base_dir: PathLike) -> Path:
    """Turn an include reference into a canonical absolute path.

    Args:
        reference: Path text from an include directive
        base_dir: Directory of the including file

    Returns:
        Absolute path with ``.``, ``..`` and symlinks resolved

    Raises:
        PathResolutionError: If the operating system cannot resolve the path
    """
    try:
        path = Path(reference)
        if not path.is_absolute():
            path = Path(base_dir) / path
        return path.resolve()
    except (OSError, RuntimeError, ValueError) as e:
        raise PathResolutionError(reference, str(e)) from e


def check_within_root(path: Path, root: PathLike, reference: str = "") -> None:
    """Ensure a canonical path lies inside the project root.

    Raises:
        PathEscapeError: If ``path`` is outside ``root``
        PathResolutionError: If the two paths cannot be related at all
    """
    reference = reference or str(path)
    try:
        canonical_root = Path(root).resolve()
        relative = os.path.relpath(path, canonical_root)
    except (OSError, RuntimeError, ValueError) as e:
        # relpath fails across Windows drives
        raise PathResolutionError(reference, str(e)) from e

    first = relative.split(os.sep, 1)[0]
    if first == os.pardir:
        raise PathEscapeError(reference, path, canonical_root)
