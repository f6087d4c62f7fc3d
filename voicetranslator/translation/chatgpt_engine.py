"""ChatGPT translation engine."""

import logging
import aiohttp

from ..exceptions import TranslationError

logger = logging.getLogger(__name__)


class ChatGPTTranslationEngine:
    """Translates transcript lines through the OpenAI chat completions API."""

    def __init__(self,
                 api_key: str,
                 model: str = "gpt-4o-mini",
                 source_language: str = "Dutch",
                 target_language: str = "English"):
        """Initialize ChatGPT translation engine.

        Args:
            api_key: OpenAI API key
            model: ChatGPT model to use for translation
            source_language: Language spoken into the recognizer
            target_language: Language to translate into
        """
        self.api_key = api_key
        self.model = model
        self.source_language = source_language
        self.target_language = target_language
        self.base_url = "https://api.openai.com/v1/chat/completions"

        logger.info(f"ChatGPTTranslationEngine initialized with model: {model} "
                    f"({source_language} -> {target_language})")

    def build_prompt(self, text: str) -> str:
        return (f"Translate the following {self.source_language} speech transcript into "
                f"{self.target_language}. The transcript may be an unfinished sentence. "
                f"Reply with the translation only.\n\n{text}")

    async def translate(self, text: str, temperature: float = 0.0, max_tokens: int = 500) -> str:
        """Translate one line of transcript.

        Raises:
            TranslationError: If the API call fails
        """
        if not text.strip():
            return text

        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json"
        }

        data = {
            "model": self.model,
            "messages": [
                {
                    "role": "user",
                    "content": self.build_prompt(text)
                }
            ],
            "temperature": temperature,
            "max_tokens": max_tokens
        }

        async with aiohttp.ClientSession() as session:
            async with session.post(self.base_url, headers=headers, json=data) as response:
                if response.status != 200:
                    error_text = await response.text()
                    raise TranslationError(f"ChatGPT API error: {response.status} - {error_text}")

                result = await response.json()
                return result["choices"][0]["message"]["content"].strip()
