"""Translation backends for VoiceTranslator."""

from .base import Translator, AsyncTranslator, FallbackTranslator, AsyncFallbackTranslator
from .mock import MockTranslator
from .chatgpt_engine import ChatGPTTranslationEngine

__all__ = [
    "Translator",
    "AsyncTranslator",
    "FallbackTranslator",
    "AsyncFallbackTranslator",
    "MockTranslator",
    "ChatGPTTranslationEngine",
]
