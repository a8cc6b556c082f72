"""OpenAI API integration for StudyHub.

Backs the dashboard's assistant panel: chat (with optional image input and a
spoken reply), audio transcription, image generation/editing and short
performance insights.
"""

import os
import json
import base64
import logging
from typing import Dict, List, Optional, Tuple
from openai import OpenAI, APIError
from dotenv import load_dotenv

load_dotenv()

logger = logging.getLogger(__name__)

# Models
CHAT_MODEL = os.getenv("OPENAI_CHAT_MODEL", "gpt-4o-mini")
THINKING_MODEL = os.getenv("OPENAI_THINKING_MODEL", "o4-mini")
TTS_MODEL = "gpt-4o-mini-tts"
TTS_VOICE = "alloy"
TRANSCRIBE_MODEL = "whisper-1"
IMAGE_MODEL = "gpt-image-1"

# Only the start of a reply is spoken
TTS_MAX_CHARS = 500

SYSTEM_PROMPT = (
    "You are a study coach inside a personal study planner. "
    "Help the user plan study sessions, stay focused and review their progress."
)

INSIGHTS_PROMPT_TEMPLATE = "Analyze: {stats}. Tasks: {task_count}. Give 3 short tips."

# Aspect ratio -> closest supported output size
IMAGE_SIZES = {
    "1:1": "1024x1024",
    "3:4": "1024x1536",
    "9:16": "1024x1536",
    "4:3": "1536x1024",
    "16:9": "1536x1024",
}

# Requested resolution tier -> output quality
IMAGE_QUALITY = {
    "1K": "low",
    "2K": "medium",
    "4K": "high",
}


class AssistantNotConfiguredError(RuntimeError):
    """Raised when no OpenAI API key is configured."""


class AssistantError(RuntimeError):
    """Raised when the OpenAI API call fails or returns nothing usable."""


class AssistantClient:
    """Client for OpenAI API integration."""

    def __init__(self, api_key: Optional[str] = None):
        """Initialize OpenAI client.

        Args:
            api_key: OpenAI API key. If None, reads from OPENAI_API_KEY environment variable.
        """
        self.api_key = api_key or os.getenv("OPENAI_API_KEY")
        self.client = None

        if self.api_key:
            self.client = OpenAI(api_key=self.api_key)
        else:
            logger.warning("OPENAI_API_KEY not found in environment. Assistant endpoints will not be available.")

    @property
    def configured(self) -> bool:
        return self.client is not None

    def _require_client(self) -> OpenAI:
        if not self.client:
            raise AssistantNotConfiguredError("Backend is missing OPENAI_API_KEY. Set it in the environment or .env.")
        return self.client

    def chat(
        self,
        message: Optional[str],
        history: Optional[List[Dict[str, str]]] = None,
        use_thinking: bool = False,
        image_part: Optional[str] = None,
    ) -> Tuple[str, Optional[str]]:
        """Send a chat turn.

        Args:
            message: User text (may be empty when only an image is sent)
            history: Prior turns as {"role": "user"|"model", "text": ...}
            use_thinking: Use the slower reasoning model
            image_part: Base64 JPEG attached to the turn

        Returns:
            Tuple of (reply text, base64 WAV of the spoken reply or None)
        """
        client = self._require_client()

        messages = [{"role": "system", "content": SYSTEM_PROMPT}]
        for turn in history or []:
            role = "assistant" if turn.get("role") == "model" else "user"
            messages.append({"role": role, "content": turn.get("text", "")})

        content = []
        if image_part:
            content.append({"type": "image_url", "image_url": {"url": f"data:image/jpeg;base64,{image_part}"}})
        if message:
            content.append({"type": "text", "text": message})
        messages.append({"role": "user", "content": content})

        try:
            response = client.chat.completions.create(
                model=THINKING_MODEL if use_thinking else CHAT_MODEL,
                messages=messages,
            )
        except APIError as e:
            self._log_api_error(e, "chat")
            raise AssistantError("Failed to process chat request") from e

        text = (response.choices[0].message.content or "").strip() or "I couldn't generate a text response."
        return text, self.speak(text)

    def speak(self, text: str) -> Optional[str]:
        """Synthesize speech for the start of ``text``; None on failure."""
        client = self._require_client()
        try:
            speech = client.audio.speech.create(
                model=TTS_MODEL,
                voice=TTS_VOICE,
                input=text[:TTS_MAX_CHARS],
                response_format="wav",
            )
            return base64.b64encode(speech.read()).decode("ascii")
        except Exception as e:
            # Speech is optional; the text reply is still returned.
            logger.warning(f"TTS generation failed: {type(e).__name__}")
            return None

    def transcribe(self, base64_audio: str) -> str:
        """Transcribe base64 WAV audio."""
        client = self._require_client()
        try:
            audio_bytes = base64.b64decode(base64_audio)
            result = client.audio.transcriptions.create(
                model=TRANSCRIBE_MODEL,
                file=("audio.wav", audio_bytes, "audio/wav"),
            )
        except (APIError, ValueError) as e:
            logger.error(f"Transcription failed: {type(e).__name__}")
            raise AssistantError("Failed to transcribe audio") from e
        return result.text or ""

    def generate_image(self, prompt: str, aspect_ratio: str = "1:1", size: str = "1K") -> str:
        """Generate an image and return it as a PNG data URL."""
        client = self._require_client()
        try:
            result = client.images.generate(
                model=IMAGE_MODEL,
                prompt=prompt,
                size=IMAGE_SIZES.get(aspect_ratio, "1024x1024"),
                quality=IMAGE_QUALITY.get(size, "medium"),
                n=1,
            )
        except APIError as e:
            self._log_api_error(e, "image generation")
            raise AssistantError("Failed to generate image") from e
        return self._first_image_url(result, "No image data returned")

    def edit_image(self, base64_image: str, prompt: str) -> str:
        """Edit a base64 PNG according to ``prompt`` and return a PNG data URL."""
        client = self._require_client()
        try:
            result = client.images.edit(
                model=IMAGE_MODEL,
                image=("image.png", base64.b64decode(base64_image), "image/png"),
                prompt=prompt,
            )
        except (APIError, ValueError) as e:
            logger.error(f"Image edit failed: {type(e).__name__}")
            raise AssistantError("Failed to edit image") from e
        return self._first_image_url(result, "No edited image returned")

    def insights(self, stats: Optional[dict], task_count: int) -> str:
        """Ask for three short tips based on the user's stats."""
        client = self._require_client()
        prompt = INSIGHTS_PROMPT_TEMPLATE.format(stats=json.dumps(stats), task_count=task_count)
        try:
            response = client.chat.completions.create(
                model=CHAT_MODEL,
                messages=[{"role": "user", "content": prompt}],
                temperature=0.5,
                max_tokens=300,
            )
        except APIError as e:
            self._log_api_error(e, "insights")
            raise AssistantError("Failed to generate insights") from e
        return (response.choices[0].message.content or "").strip() or "No insights available."

    @staticmethod
    def _first_image_url(result, missing_message: str) -> str:
        for item in result.data or []:
            if getattr(item, "b64_json", None):
                return f"data:image/png;base64,{item.b64_json}"
        raise AssistantError(missing_message)

    @staticmethod
    def _log_api_error(e: APIError, operation: str) -> None:
        # Don't log the full error message as it might contain sensitive info
        error_code = getattr(e, "code", None)
        status_code = getattr(e, "status_code", None)
        if error_code == "insufficient_quota":
            logger.warning(f"OpenAI API quota insufficient for {operation}.")
        elif status_code == 429:
            logger.warning(f"OpenAI API rate limit exceeded for {operation}.")
        else:
            logger.error(f"OpenAI API error during {operation}: {status_code or 'unknown'} ({error_code or 'unknown'})")
