"""Placeholder translator used when no translation service is configured."""


class MockTranslator:
    """Marks text as translated without calling any service."""

    def __init__(self, target_language: str = "English"):
        self.target_language = target_language

    def translate(self, text: str) -> str:
        if not text:
            return text
        return f"{text} (Translated to {self.target_language})"
