"""
Pytest configuration and fixtures for air prompt tests.

Provides template trees on disk, mock OpenAI responses and environment setup.
"""

from pathlib import Path
from unittest.mock import MagicMock, Mock

import pytest


class TemplateProject:
    """A project directory that tests can populate with template files."""

    def __init__(self, root: Path):
        self.root = root

    def write(self, name: str, content: str) -> Path:
        path = self.root / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
        return path


@pytest.fixture
def project(tmp_path, monkeypatch):
    """Project directory that is also the working directory."""
    root = tmp_path / "project"
    root.mkdir()
    monkeypatch.chdir(root)
    return TemplateProject(root.resolve())


def make_response(content, finish_reason="stop", prompt_tokens=100, completion_tokens=150):
    """Build a mock chat-completions response."""
    mock_response = Mock()
    mock_response.choices = [
        Mock(message=Mock(content=content), finish_reason=finish_reason)
    ]
    mock_response.usage = Mock(
        prompt_tokens=prompt_tokens,
        completion_tokens=completion_tokens,
        total_tokens=prompt_tokens + completion_tokens,
    )
    return mock_response


@pytest.fixture
def mock_openai_response():
    """Mock successful response."""
    return make_response("Bonjour le monde")


@pytest.fixture
def mock_json_response():
    """Mock response with a JSON body."""
    return make_response('{"greeting": "hello", "count": 2}')


@pytest.fixture
def mock_truncated_response():
    """Mock response that was truncated (finish_reason='length')."""
    return make_response("Partial resp", finish_reason="length", completion_tokens=8192)


@pytest.fixture
def mock_openai_client(mock_openai_response):
    """Mock OpenAI client with successful response."""
    mock_client = MagicMock()
    mock_client.chat.completions.create.return_value = mock_openai_response
    return mock_client


@pytest.fixture
def test_api_key():
    """Test API key for mocking."""
    return "test-api-key-12345"


@pytest.fixture
def clean_api_keys(monkeypatch):
    """Remove provider API keys from the environment."""
    for name in (
        "OPENAI_API_KEY",
        "GEMINI_API_KEY",
        "GOOGLE_API_KEY",
        "ANTHROPIC_API_KEY",
        "NVIDIA_API_KEY",
    ):
        monkeypatch.delenv(name, raising=False)
