"""Data models for the VoiceTranslator application."""

from .fragments import FragmentEvent, RecognitionErrorEvent
from .transcript import Line, LineState, BufferOperation, TranscriptSnapshot
from .session import SessionState

__all__ = [
    "FragmentEvent",
    "RecognitionErrorEvent",
    "Line",
    "LineState",
    "BufferOperation",
    "TranscriptSnapshot",
    "SessionState",
]
