"""
Frontmatter configuration for air templates.

A template may start with a YAML block delimited by ``---`` lines::

    ---
    model: gemini-2.0-flash-001
    temperature: 0.2
    variables:
      language: French
    ---
    Translate {{text}} into {{language}}.

The block is parsed into a ``PromptConfig``; the rest of the file is the
prompt body.
"""

from dataclasses import dataclass, field
from typing import Any, Optional

import yaml

from . import get_logger
from .errors import ConfigError
from .schema import check_schema

logger = get_logger(__name__)

DEFAULT_TEMPERATURE = 0.0
DEFAULT_TOP_P = 0.95
DEFAULT_MAX_TOKENS = 8192
DEFAULT_RESPONSE_MIME_TYPE = "text/plain"

FRONTMATTER_PREFIX = "---\n"
FRONTMATTER_DELIMITER = "\n---\n"

# Frontmatter key -> PromptConfig field
_FIELD_KEYS = {
    "model": "model",
    "temperature": "temperature",
    "topP": "top_p",
    "maxTokens": "max_tokens",
    "responseMimeType": "response_mime_type",
    "variables": "variables",
    "responseSchema": "response_schema",
}

# Accepted for compatibility with older templates but not used
_IGNORED_KEYS = frozenset(["safetySettings"])


@dataclass
class PromptConfig:
    """Model settings and variables declared in a template's frontmatter."""

    model: Optional[str] = None
    temperature: Optional[float] = None
    top_p: Optional[float] = None
    max_tokens: Optional[int] = None
    response_mime_type: Optional[str] = None
    variables: dict[str, str] = field(default_factory=dict)
    response_schema: Optional[dict[str, Any]] = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "PromptConfig":
        """Build a config from parsed frontmatter.

        Args:
            data: Mapping with the camelCase frontmatter keys

        Returns:
            PromptConfig with known keys applied

        Raises:
            ConfigError: If ``variables`` is not a mapping
        """
        values: dict[str, Any] = {}
        for key, value in data.items():
            if key in _FIELD_KEYS:
                values[_FIELD_KEYS[key]] = value
            elif key in _IGNORED_KEYS:
                logger.warning("Ignoring unsupported frontmatter key: %s", key)
            else:
                logger.warning("Unknown frontmatter key: %s", key)

        variables = values.pop("variables", None) or {}
        if not isinstance(variables, dict):
            raise ConfigError("variables: expected a mapping of names to values")
        values["variables"] = {
            str(name): "" if value is None else str(value) for name, value in variables.items()
        }
        return cls(**values)

    def validate(self) -> None:
        """Check value ranges and the response schema.

        Raises:
            ConfigError: On the first invalid setting
        """
        if self.model is not None and (not isinstance(self.model, str) or not self.model.strip()):
            raise ConfigError("model: expected a non-empty string")
        if self.temperature is not None:
            _check_number("temperature", self.temperature, 0.0, 2.0)
        if self.top_p is not None:
            _check_number("topP", self.top_p, 0.0, 1.0)
        if self.max_tokens is not None:
            if isinstance(self.max_tokens, bool) or not isinstance(self.max_tokens, int):
                raise ConfigError("maxTokens: expected an integer")
            if self.max_tokens <= 0:
                raise ConfigError(f"maxTokens: must be positive, got {self.max_tokens}")
        if self.response_mime_type is not None and not isinstance(self.response_mime_type, str):
            raise ConfigError("responseMimeType: expected a string")
        if self.response_schema is not None:
            try:
                check_schema(self.response_schema)
            except ConfigError as e:
                raise ConfigError(f"responseSchema: {e}") from e

    def temperature_or_default(self) -> float:
        return DEFAULT_TEMPERATURE if self.temperature is None else float(self.temperature)

    def top_p_or_default(self) -> float:
        return DEFAULT_TOP_P if self.top_p is None else float(self.top_p)

    def max_tokens_or_default(self) -> int:
        return DEFAULT_MAX_TOKENS if self.max_tokens is None else self.max_tokens

    def response_mime_type_or_default(self) -> str:
        return self.response_mime_type or DEFAULT_RESPONSE_MIME_TYPE


def _check_number(name: str, value: Any, low: float, high: float) -> None:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ConfigError(f"{name}: expected a number")
    if not low <= value <= high:
        raise ConfigError(f"{name}: must be between {low} and {high}, got {value}")


def parse_frontmatter(content: str) -> tuple[PromptConfig, str]:
    """Split a template into its configuration and body.

    Args:
        content: Template text, includes already expanded

    Returns:
        Tuple of (config, body). Without frontmatter the config is empty and
        the body is the whole content.

    Raises:
        ConfigError: If the block is not closed or is not a YAML mapping
    """
    content = content.replace("\r\n", "\n")
    if not content.startswith(FRONTMATTER_PREFIX):
        return PromptConfig(), content

    rest = content[len(FRONTMATTER_PREFIX) :]
    if rest.startswith(FRONTMATTER_PREFIX):
        # Empty block
        yaml_content, body = "", rest[len(FRONTMATTER_PREFIX) :]
    else:
        end = rest.find(FRONTMATTER_DELIMITER)
        if end == -1:
            raise ConfigError("invalid frontmatter: missing closing ---")
        yaml_content = rest[:end]
        body = rest[end + len(FRONTMATTER_DELIMITER) :]

    try:
        data = yaml.safe_load(yaml_content) if yaml_content.strip() else {}
    except yaml.YAMLError as e:
        raise ConfigError(f"failed to parse YAML frontmatter: {e}") from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigError("invalid frontmatter: expected a YAML mapping")

    return PromptConfig.from_dict(data), body.strip()
