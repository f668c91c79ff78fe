"""
Provider defaults for OpenAI-compatible generation endpoints.
"""

from typing import Optional

DEFAULT_PROVIDER = "gemini"

BASE_URLS: dict[str, Optional[str]] = {
    "openai": None,  # Uses default OpenAI base URL
    "gemini": "https://generativelanguage.googleapis.com/v1beta/openai/",
    "anthropic": "https://api.anthropic.com/v1",
    "nim": "https://integrate.api.nvidia.com/v1",
}

DEFAULT_MODELS = {
    "openai": "gpt-4o-mini",
    "gemini": "gemini-2.0-flash-001",
    "anthropic": "claude-3-5-sonnet-20241022",
    "nim": "meta/llama3-70b-instruct",
}

# Checked in order; the first variable that is set wins
API_KEY_ENV_VARS = {
    "openai": ("OPENAI_API_KEY",),
    "gemini": ("GEMINI_API_KEY", "GOOGLE_API_KEY"),
    "anthropic": ("ANTHROPIC_API_KEY",),
    "nim": ("NVIDIA_API_KEY",),
}


def get_supported_providers() -> list[str]:
    """List provider names accepted by ``--provider``."""
    return list(BASE_URLS)


def get_base_url(provider: str) -> Optional[str]:
    return BASE_URLS.get(provider)


def get_default_model(provider: str) -> str:
    return DEFAULT_MODELS.get(provider, DEFAULT_MODELS[DEFAULT_PROVIDER])


def get_api_key_env_vars(provider: str) -> tuple[str, ...]:
    return API_KEY_ENV_VARS.get(provider, ("OPENAI_API_KEY",))
