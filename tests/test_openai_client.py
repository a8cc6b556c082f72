"""Tests for the OpenAI-backed assistant client (SDK mocked)."""

import base64
from unittest.mock import MagicMock, patch

import httpx
import pytest
from openai import APIError

from studyhub.integrations.openai_client import (
    CHAT_MODEL,
    THINKING_MODEL,
    TTS_MAX_CHARS,
    AssistantClient,
    AssistantError,
    AssistantNotConfiguredError,
)


def _api_error(message="boom"):
    return APIError(message, request=httpx.Request("POST", "https://api.openai.com/v1/test"), body=None)


def _completion(content):
    response = MagicMock()
    response.choices = [MagicMock(message=MagicMock(content=content))]
    return response


@pytest.fixture
def sdk():
    with patch("studyhub.integrations.openai_client.OpenAI") as openai_cls:
        yield openai_cls.return_value


@pytest.fixture
def assistant(sdk):
    return AssistantClient(api_key="test-key")


def test_not_configured(monkeypatch):
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)
    client = AssistantClient()

    assert not client.configured
    with pytest.raises(AssistantNotConfiguredError):
        client.chat("hi")
    with pytest.raises(AssistantNotConfiguredError):
        client.insights({}, 0)


class TestChat:

    def test_reply_with_speech(self, assistant, sdk):
        sdk.chat.completions.create.return_value = _completion("  Study math first.  ")
        sdk.audio.speech.create.return_value.read.return_value = b"RIFF"

        text, audio = assistant.chat("What next?", history=[{"role": "model", "text": "Hello"}])

        assert text == "Study math first."
        assert audio == base64.b64encode(b"RIFF").decode("ascii")

        kwargs = sdk.chat.completions.create.call_args.kwargs
        assert kwargs["model"] == CHAT_MODEL
        roles = [m["role"] for m in kwargs["messages"]]
        assert roles == ["system", "assistant", "user"]
        assert kwargs["messages"][-1]["content"] == [{"type": "text", "text": "What next?"}]

    def test_thinking_model_and_image(self, assistant, sdk):
        sdk.chat.completions.create.return_value = _completion("ok")

        assistant.chat(None, use_thinking=True, image_part="AAAA")

        kwargs = sdk.chat.completions.create.call_args.kwargs
        assert kwargs["model"] == THINKING_MODEL
        content = kwargs["messages"][-1]["content"]
        assert content == [{"type": "image_url", "image_url": {"url": "data:image/jpeg;base64,AAAA"}}]

    def test_empty_reply_falls_back(self, assistant, sdk):
        sdk.chat.completions.create.return_value = _completion(None)
        text, _ = assistant.chat("hi")
        assert text == "I couldn't generate a text response."

    def test_speech_failure_keeps_text(self, assistant, sdk):
        sdk.chat.completions.create.return_value = _completion("ok")
        sdk.audio.speech.create.side_effect = RuntimeError("tts down")

        assert assistant.chat("hi") == ("ok", None)

    def test_speech_is_truncated(self, assistant, sdk):
        sdk.audio.speech.create.return_value.read.return_value = b"x"
        assistant.speak("a" * (TTS_MAX_CHARS + 100))

        assert len(sdk.audio.speech.create.call_args.kwargs["input"]) == TTS_MAX_CHARS

    def test_api_error(self, assistant, sdk):
        sdk.chat.completions.create.side_effect = _api_error()

        with pytest.raises(AssistantError):
            assistant.chat("hi")


class TestMedia:

    def test_transcribe(self, assistant, sdk):
        sdk.audio.transcriptions.create.return_value = MagicMock(text="hello")
        audio = base64.b64encode(b"RIFF").decode("ascii")

        assert assistant.transcribe(audio) == "hello"
        file_arg = sdk.audio.transcriptions.create.call_args.kwargs["file"]
        assert file_arg[1] == b"RIFF"

    def test_transcribe_bad_base64(self, assistant):
        with pytest.raises(AssistantError):
            assistant.transcribe("abc")

    def test_generate_image_maps_size_and_quality(self, assistant, sdk):
        sdk.images.generate.return_value = MagicMock(data=[MagicMock(b64_json="PNGDATA")])

        url = assistant.generate_image("a tidy desk", aspect_ratio="16:9", size="4K")

        assert url == "data:image/png;base64,PNGDATA"
        kwargs = sdk.images.generate.call_args.kwargs
        assert kwargs["size"] == "1536x1024"
        assert kwargs["quality"] == "high"

    def test_generate_image_without_data(self, assistant, sdk):
        sdk.images.generate.return_value = MagicMock(data=[])
        with pytest.raises(AssistantError):
            assistant.generate_image("a tidy desk")

    def test_edit_image(self, assistant, sdk):
        sdk.images.edit.return_value = MagicMock(data=[MagicMock(b64_json="EDITED")])
        source = base64.b64encode(b"PNG").decode("ascii")

        assert assistant.edit_image(source, "brighter") == "data:image/png;base64,EDITED"

    def test_edit_image_api_error(self, assistant, sdk):
        sdk.images.edit.side_effect = _api_error()
        with pytest.raises(AssistantError):
            assistant.edit_image(base64.b64encode(b"PNG").decode("ascii"), "brighter")


def test_insights_prompt(assistant, sdk):
    sdk.chat.completions.create.return_value = _completion("1. a\n2. b\n3. c")

    text = assistant.insights({"hoursToday": 4.5}, 3)

    assert text.startswith("1. a")
    prompt = sdk.chat.completions.create.call_args.kwargs["messages"][0]["content"]
    assert prompt == 'Analyze: {"hoursToday": 4.5}. Tasks: 3. Give 3 short tips.'
