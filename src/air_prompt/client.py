"""
Generation client for air prompts.

This module provides the AirClient class, which sends a rendered prompt to an
OpenAI-compatible chat-completions endpoint and returns the generated text.

Features:
- Provider defaults for base URL, model and API key variable
- Model parameters taken from the template frontmatter
- Structured JSON output when the template declares a response schema
- Response validation against that schema (mismatches are logged, not raised)
"""

import os
from dataclasses import dataclass, field
from typing import Any, Optional

import jsonschema
import openai

from . import get_logger
from .config import PromptConfig
from .errors import GenerationError
from .providers import (
    DEFAULT_PROVIDER,
    get_api_key_env_vars,
    get_base_url,
    get_default_model,
)
from .schema import build_response_format, validate_response

logger = get_logger(__name__)


@dataclass
class GenerationResult:
    """Text returned by the model together with request metadata."""

    text: str
    model: str
    finish_reason: str = "stop"
    usage: dict[str, int] = field(default_factory=dict)


@dataclass
class AirClient:
    """Client for a single generation request."""

    provider: str = DEFAULT_PROVIDER
    api_key: Optional[str] = None
    base_url: Optional[str] = None
    verbose: bool = False

    def __post_init__(self) -> None:
        if self.base_url is None:
            self.base_url = get_base_url(self.provider)

    def _resolve_api_key(self) -> str:
        """Return the configured key or the provider's environment variable."""
        if self.api_key:
            return self.api_key

        env_vars = get_api_key_env_vars(self.provider)
        for name in env_vars:
            value = os.environ.get(name)
            if value:
                return value

        raise GenerationError(
            f"No API key provided. Set {' or '.join(env_vars)} or pass --token."
        )

    def _get_provider_client(self) -> openai.OpenAI:
        return openai.OpenAI(api_key=self._resolve_api_key(), base_url=self.base_url)

    def build_request(self, prompt: str, config: PromptConfig) -> dict[str, Any]:
        """Build chat-completions parameters for ``prompt``."""
        request_params: dict[str, Any] = {
            "model": config.model or get_default_model(self.provider),
            "messages": [{"role": "user", "content": prompt}],
            "temperature": config.temperature_or_default(),
            "top_p": config.top_p_or_default(),
            "max_completion_tokens": config.max_tokens_or_default(),
        }

        if config.response_schema is not None:
            request_params["response_format"] = build_response_format(config.response_schema)
        elif config.response_mime_type_or_default() == "application/json":
            request_params["response_format"] = {"type": "json_object"}

        return request_params

    def _extract_response_content(self, response: Any) -> tuple[str, str]:
        """Extract content and finish reason from the response."""
        if not getattr(response, "choices", None):
            raise GenerationError("No response candidates from model")

        choice = response.choices[0]
        content = choice.message.content or ""
        finish_reason = choice.finish_reason or "unknown"
        return content, finish_reason

    def _get_usage_info(self, response: Any) -> dict[str, int]:
        """Extract usage information from the response."""
        usage = getattr(response, "usage", None)
        if not usage:
            return {"prompt_tokens": 0, "completion_tokens": 0, "total_tokens": 0}
        return {
            "prompt_tokens": usage.prompt_tokens or 0,
            "completion_tokens": usage.completion_tokens or 0,
            "total_tokens": usage.total_tokens or 0,
        }

    def generate(self, prompt: str, config: Optional[PromptConfig] = None) -> GenerationResult:
        """Send ``prompt`` to the model and return the generated text.

        Args:
            prompt: Fully rendered prompt text
            config: Frontmatter configuration (defaults apply when omitted)

        Returns:
            GenerationResult with the text, model name and token usage

        Raises:
            GenerationError: If the request fails or returns no usable text
        """
        config = config or PromptConfig()
        client = self._get_provider_client()
        request_params = self.build_request(prompt, config)

        if self.verbose:
            logger.debug(
                "Making request with provider: %s, model: %s, temperature: %s",
                self.provider,
                request_params["model"],
                request_params["temperature"],
            )
            logger.debug("Prompt: %s...", prompt[:100])

        try:
            response = client.chat.completions.create(**request_params)
        except openai.OpenAIError as e:
            raise GenerationError(f"Generating content failed: {e}") from e

        content, finish_reason = self._extract_response_content(response)

        if finish_reason == "length":
            raise GenerationError(
                f"Output was truncated due to max_tokens limit ({request_params['max_completion_tokens']}).\n"
                "Please increase maxTokens in the frontmatter.",
                finish_reason=finish_reason,
            )
        if not content:
            raise GenerationError("No text content in response", finish_reason=finish_reason)

        if config.response_schema is not None:
            try:
                validate_response(content, config.response_schema)
            except (ValueError, jsonschema.ValidationError) as e:
                message = e.message if isinstance(e, jsonschema.ValidationError) else str(e)
                logger.warning("Response does not match schema: %s", message)

        return GenerationResult(
            text=content,
            model=request_params["model"],
            finish_reason=finish_reason,
            usage=self._get_usage_info(response),
        )
