"""Presentation of transcript snapshots."""

from .transcript_screen import TranscriptScreen

__all__ = ["TranscriptScreen"]
