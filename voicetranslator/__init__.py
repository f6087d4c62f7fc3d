"""VoiceTranslator - live speech-to-text line buffering with translation."""

__version__ = "0.1.0"
