"""
Tests for the generation client, with the OpenAI client mocked out.
"""

import logging
from unittest.mock import MagicMock, patch

import openai
import pytest

from air_prompt.client import AirClient, GenerationResult
from air_prompt.config import PromptConfig
from air_prompt.errors import GenerationError

from .conftest import make_response

OPENAI_PATCH_PATH = "air_prompt.client.openai.OpenAI"


class TestAirClient:
    """Test request building and response handling."""

    def test_provider_base_url_default(self):
        assert AirClient(provider="gemini").base_url == (
            "https://generativelanguage.googleapis.com/v1beta/openai/"
        )
        assert AirClient(provider="openai").base_url is None
        assert AirClient(provider="nim", base_url="http://localhost:8000/v1").base_url == (
            "http://localhost:8000/v1"
        )

    def test_build_request_defaults(self):
        params = AirClient(provider="gemini").build_request("Hi", PromptConfig())

        assert params["model"] == "gemini-2.0-flash-001"
        assert params["messages"] == [{"role": "user", "content": "Hi"}]
        assert params["temperature"] == 0.0
        assert params["top_p"] == 0.95
        assert params["max_completion_tokens"] == 8192
        assert "response_format" not in params

    def test_build_request_from_config(self):
        config = PromptConfig(model="gpt-4o", temperature=0.3, top_p=0.5, max_tokens=99)
        params = AirClient(provider="openai").build_request("Hi", config)

        assert params["model"] == "gpt-4o"
        assert params["temperature"] == 0.3
        assert params["top_p"] == 0.5
        assert params["max_completion_tokens"] == 99

    def test_build_request_json_mime_type(self):
        config = PromptConfig(response_mime_type="application/json")
        params = AirClient().build_request("Hi", config)
        assert params["response_format"] == {"type": "json_object"}

    def test_build_request_schema(self):
        schema = {"type": "object"}
        params = AirClient().build_request("Hi", PromptConfig(response_schema=schema))
        assert params["response_format"]["type"] == "json_schema"
        assert params["response_format"]["json_schema"]["schema"] == schema

    def test_generate_success(self, mock_openai_client, test_api_key):
        with patch(OPENAI_PATCH_PATH, return_value=mock_openai_client) as mock_constructor:
            client = AirClient(provider="openai", api_key=test_api_key)
            result = client.generate("Translate hello world")

        mock_constructor.assert_called_once_with(api_key=test_api_key, base_url=None)
        assert isinstance(result, GenerationResult)
        assert result.text == "Bonjour le monde"
        assert result.model == "gpt-4o-mini"
        assert result.usage == {
            "prompt_tokens": 100,
            "completion_tokens": 150,
            "total_tokens": 250,
        }

    def test_api_key_from_environment(self, mock_openai_client, clean_api_keys, monkeypatch):
        monkeypatch.setenv("GOOGLE_API_KEY", "google-key")

        with patch(OPENAI_PATCH_PATH, return_value=mock_openai_client) as mock_constructor:
            AirClient(provider="gemini").generate("Hi")

        assert mock_constructor.call_args.kwargs["api_key"] == "google-key"

    def test_api_key_missing(self, clean_api_keys):
        with pytest.raises(GenerationError, match="No API key provided"):
            AirClient(provider="gemini").generate("Hi")

    def test_truncated_response(self, mock_truncated_response, test_api_key):
        mock_client = MagicMock()
        mock_client.chat.completions.create.return_value = mock_truncated_response

        with patch(OPENAI_PATCH_PATH, return_value=mock_client):
            with pytest.raises(GenerationError, match="truncated") as exc_info:
                AirClient(api_key=test_api_key).generate("Hi")

        assert exc_info.value.finish_reason == "length"

    def test_no_choices(self, test_api_key):
        mock_client = MagicMock()
        response = make_response("unused")
        response.choices = []
        mock_client.chat.completions.create.return_value = response

        with patch(OPENAI_PATCH_PATH, return_value=mock_client):
            with pytest.raises(GenerationError, match="No response candidates"):
                AirClient(api_key=test_api_key).generate("Hi")

    def test_empty_text(self, test_api_key):
        mock_client = MagicMock()
        mock_client.chat.completions.create.return_value = make_response(None)

        with patch(OPENAI_PATCH_PATH, return_value=mock_client):
            with pytest.raises(GenerationError, match="No text content"):
                AirClient(api_key=test_api_key).generate("Hi")

    def test_api_error_is_wrapped(self, test_api_key):
        mock_client = MagicMock()
        mock_client.chat.completions.create.side_effect = openai.OpenAIError("boom")

        with patch(OPENAI_PATCH_PATH, return_value=mock_client):
            with pytest.raises(GenerationError, match="boom"):
                AirClient(api_key=test_api_key).generate("Hi")

    def test_schema_mismatch_only_warns(self, test_api_key, caplog):
        mock_client = MagicMock()
        mock_client.chat.completions.create.return_value = make_response('{"count": 1}')
        config = PromptConfig(
            response_schema={"type": "object", "required": ["greeting"]}
        )

        with patch(OPENAI_PATCH_PATH, return_value=mock_client):
            with caplog.at_level(logging.WARNING):
                result = AirClient(api_key=test_api_key).generate("Hi", config)

        assert result.text == '{"count": 1}'
        assert "does not match schema" in caplog.text

    def test_schema_match_is_quiet(self, mock_json_response, test_api_key, caplog):
        mock_client = MagicMock()
        mock_client.chat.completions.create.return_value = mock_json_response
        config = PromptConfig(
            response_schema={"type": "object", "required": ["greeting"]}
        )

        with patch(OPENAI_PATCH_PATH, return_value=mock_client):
            with caplog.at_level(logging.WARNING):
                AirClient(api_key=test_api_key).generate("Hi", config)

        assert "does not match schema" not in caplog.text
