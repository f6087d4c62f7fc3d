"""Transcript line and snapshot models."""

from dataclasses import dataclass
from enum import Enum
from typing import Tuple


class LineState(Enum):
    """Lifecycle of a transcript line."""
    OPEN = "open"
    CLOSED = "closed"


@dataclass
class Line:
    """One row of reconstructed transcript, paired across languages."""
    index: int
    source_text: str
    translated_text: str
    state: LineState = LineState.OPEN

    @property
    def is_open(self) -> bool:
        return self.state is LineState.OPEN


@dataclass(frozen=True)
class BufferOperation:
    """A single mutation applied to the dual buffer."""
    kind: str  # "append" | "replace"
    index: int
    source_text: str
    translated_text: str


@dataclass(frozen=True)
class TranscriptSnapshot:
    """Read-only view of both line sequences in commit order."""
    source_lines: Tuple[str, ...] = ()
    translated_lines: Tuple[str, ...] = ()

    @property
    def source_text(self) -> str:
        return "\n".join(self.source_lines)

    @property
    def translated_text(self) -> str:
        return "\n".join(self.translated_lines)

    @property
    def line_count(self) -> int:
        return len(self.source_lines)

    @property
    def is_empty(self) -> bool:
        return not self.source_lines
