"""Unit tests for translation backends."""

import asyncio

import pytest
from unittest.mock import AsyncMock, MagicMock, Mock, patch

from voicetranslator.exceptions import TranslationError
from voicetranslator.translation import (
    AsyncFallbackTranslator,
    ChatGPTTranslationEngine,
    FallbackTranslator,
    MockTranslator,
)


def mock_aiohttp_session(status: int, json_body=None, text_body: str = ""):
    """Build a patched aiohttp.ClientSession returning one canned response."""
    response = MagicMock()
    response.status = status
    response.json = AsyncMock(return_value=json_body)
    response.text = AsyncMock(return_value=text_body)

    post_context = MagicMock()
    post_context.__aenter__ = AsyncMock(return_value=response)
    post_context.__aexit__ = AsyncMock(return_value=False)

    session = MagicMock()
    session.post = MagicMock(return_value=post_context)

    session_context = MagicMock()
    session_context.__aenter__ = AsyncMock(return_value=session)
    session_context.__aexit__ = AsyncMock(return_value=False)
    return session_context, session


@pytest.mark.unit
class TestMockTranslator:

    def test_marks_text_as_translated(self):
        assert MockTranslator().translate("hallo") == "hallo (Translated to English)"

    def test_target_language_in_marker(self):
        assert MockTranslator("German").translate("hallo") == "hallo (Translated to German)"

    def test_empty_text_stays_empty(self):
        assert MockTranslator().translate("") == ""


@pytest.mark.unit
class TestFallbackTranslator:

    def test_passes_through_result(self):
        backend = Mock()
        backend.translate.return_value = "hello"

        assert FallbackTranslator(backend)("hallo") == "hello"
        backend.translate.assert_called_once_with("hallo")

    def test_failure_returns_original_text(self):
        backend = Mock()
        backend.translate.side_effect = TranslationError("boom")

        assert FallbackTranslator(backend).translate("hallo") == "hallo"

    def test_async_failure_returns_original_text(self):
        backend = Mock()
        backend.translate = AsyncMock(side_effect=RuntimeError("timeout"))

        assert asyncio.run(AsyncFallbackTranslator(backend)("hallo")) == "hallo"

    def test_async_passes_through_result(self):
        backend = Mock()
        backend.translate = AsyncMock(return_value="hello")

        assert asyncio.run(AsyncFallbackTranslator(backend).translate("hallo")) == "hello"


@pytest.mark.unit
class TestChatGPTTranslationEngine:

    def test_translate_returns_message_content(self):
        engine = ChatGPTTranslationEngine(api_key="test-key")
        body = {"choices": [{"message": {"content": "  hello world \n"}}]}
        session_context, session = mock_aiohttp_session(200, json_body=body)

        with patch("voicetranslator.translation.chatgpt_engine.aiohttp.ClientSession",
                   return_value=session_context):
            result = asyncio.run(engine.translate("hallo wereld"))

        assert result == "hello world"
        _, kwargs = session.post.call_args
        assert kwargs["headers"]["Authorization"] == "Bearer test-key"
        assert kwargs["json"]["model"] == "gpt-4o-mini"
        assert "hallo wereld" in kwargs["json"]["messages"][0]["content"]

    def test_api_error_raises_translation_error(self):
        engine = ChatGPTTranslationEngine(api_key="test-key")
        session_context, _ = mock_aiohttp_session(429, text_body="rate limited")

        with patch("voicetranslator.translation.chatgpt_engine.aiohttp.ClientSession",
                   return_value=session_context):
            with pytest.raises(TranslationError, match="429"):
                asyncio.run(engine.translate("hallo"))

    def test_blank_text_skips_request(self):
        engine = ChatGPTTranslationEngine(api_key="test-key")

        with patch("voicetranslator.translation.chatgpt_engine.aiohttp.ClientSession") as client:
            assert asyncio.run(engine.translate("  ")) == "  "
            client.assert_not_called()

    def test_prompt_names_languages(self):
        engine = ChatGPTTranslationEngine(api_key="k", source_language="Dutch", target_language="French")

        prompt = engine.build_prompt("dag")

        assert "Dutch" in prompt
        assert "French" in prompt
        assert prompt.endswith("dag")
