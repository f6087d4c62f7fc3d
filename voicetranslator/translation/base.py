"""Translator protocols and fallback wrappers."""

import logging
from typing import Protocol

logger = logging.getLogger(__name__)


class Translator(Protocol):
    """Synchronous translation backend."""

    def translate(self, text: str) -> str:
        ...


class AsyncTranslator(Protocol):
    """Asynchronous translation backend."""

    async def translate(self, text: str) -> str:
        ...


class FallbackTranslator:
    """Makes a translator total by returning the original text on failure."""

    def __init__(self, translator: Translator):
        self.translator = translator

    def __call__(self, text: str) -> str:
        return self.translate(text)

    def translate(self, text: str) -> str:
        try:
            return self.translator.translate(text)
        except Exception as e:
            logger.warning(f"Translation failed, falling back to original text: {e}")
            return text


class AsyncFallbackTranslator:
    """Async counterpart of FallbackTranslator."""

    def __init__(self, translator: AsyncTranslator):
        self.translator = translator

    async def __call__(self, text: str) -> str:
        return await self.translate(text)

    async def translate(self, text: str) -> str:
        try:
            return await self.translator.translate(text)
        except Exception as e:
            logger.warning(f"Async translation failed, falling back to original text: {e}")
            return text
