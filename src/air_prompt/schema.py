"""
JSON response schema helpers.

A template can declare a ``responseSchema`` in its frontmatter. The schema is
checked when the configuration is validated, sent to the API as a structured
output request, and used to validate the returned text.
"""

import json
from typing import Any

import jsonschema
from jsonschema import Draft202012Validator

from .errors import ConfigError


def check_schema(schema: dict[str, Any]) -> None:
    """Raise ``ConfigError`` if ``schema`` is not a valid JSON schema."""
    if not isinstance(schema, dict):
        raise ConfigError(f"invalid JSON schema: expected a mapping, got {type(schema).__name__}")
    try:
        Draft202012Validator.check_schema(schema)
    except jsonschema.SchemaError as e:
        raise ConfigError(f"invalid JSON schema: {e.message}") from e


def build_response_format(schema: dict[str, Any], name: str = "response") -> dict[str, Any]:
    """Build the chat-completions ``response_format`` for a JSON schema."""
    return {
        "type": "json_schema",
        "json_schema": {"name": name, "schema": schema},
    }


def validate_response(text: str, schema: dict[str, Any]) -> None:
    """Validate a JSON response against ``schema``.

    Raises:
        ValueError: If ``text`` is not JSON
        jsonschema.ValidationError: If the data does not match the schema
    """
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise ValueError(f"response is not valid JSON: {e}") from e
    Draft202012Validator(schema).validate(data)


def format_response(text: str) -> str:
    """Pretty-print ``text`` if it is JSON, otherwise return it unchanged."""
    try:
        data = json.loads(text)
    except json.JSONDecodeError:
        return text
    return json.dumps(data, indent=2, ensure_ascii=False)
