"""Recognition-side event models."""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class FragmentEvent:
    """One incremental hypothesis from the recognition source.

    The transcript is the recognizer's current best guess for the latest
    utterance and replaces, rather than extends, the previous hypothesis.
    """
    transcript: str
    timestamp: int  # Monotonic milliseconds when the event was received


@dataclass(frozen=True)
class RecognitionErrorEvent:
    """Error reported by the recognition source."""
    error: str  # e.g. "not-allowed", "no-speech", "unsupported"
    timestamp: Optional[int] = None

    @property
    def message(self) -> str:
        if self.error == "unsupported":
            return "Speech recognition not supported in this browser"
        return f"Error occurred in recognition: {self.error}"
