"""air - render markdown prompt templates and send them to a hosted LLM.

This package turns a markdown file into a single generation request. Templates
may pull in other files with ``{{include "path"}}``, carry an optional YAML
frontmatter block with model settings, and use ``{{name}}`` or
``{{name|default}}`` placeholders that are filled from the environment, the
frontmatter ``variables`` block and ``--var`` flags.

Main components:
- template: include expansion and placeholder substitution
- config: frontmatter parsing and validation
- client: OpenAI-compatible generation client
- cli: the ``air`` command
"""

import logging
from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("air-prompt")
except PackageNotFoundError:
    __version__ = "unknown"


def get_logger(name: str) -> logging.Logger:
    """Return the logger for a module of this package."""
    return logging.getLogger(name)


def configure_logging(verbose: bool = False) -> None:
    """Send log records to stderr, with debug output when verbose."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
    )
    # Keep HTTP client chatter out of debug output
    for noisy in ("httpx", "httpcore", "openai"):
        logging.getLogger(noisy).setLevel(logging.WARNING)
