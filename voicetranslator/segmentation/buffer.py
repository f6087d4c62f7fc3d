"""Dual (source/translated) line buffer.

Lines are stored as an explicit indexed sequence so that a transcript which
itself contains a line break can never shift the boundary of another line.
"""

import logging
import threading
from dataclasses import replace
from typing import List, Tuple

from ..exceptions import InvalidStateError
from ..models.transcript import Line, LineState, TranscriptSnapshot

logger = logging.getLogger(__name__)


class DualBuffer:
    """Holds source and translated lines in lockstep by line index."""

    def __init__(self):
        self._lines: List[Line] = []
        self._next_index = 0

        # Presentation may read snapshots from another thread
        self.lock = threading.RLock()

    def __len__(self) -> int:
        with self.lock:
            return len(self._lines)

    def clear(self) -> None:
        """Empty both line sequences and reset the next index to 0."""
        with self.lock:
            self._lines.clear()
            self._next_index = 0
        logger.debug("DualBuffer cleared")

    def append_line(self, source_text: str, translated_text: str) -> int:
        """Open a new line at the next index.

        Any line that is still open is closed first.

        Args:
            source_text: Recognized text in the source language
            translated_text: Translation of ``source_text``

        Returns:
            Index of the new line
        """
        with self.lock:
            if self._lines and self._lines[-1].is_open:
                self._lines[-1].state = LineState.CLOSED
            index = self._next_index
            self._lines.append(Line(index=index,
                                    source_text=source_text,
                                    translated_text=translated_text))
            self._next_index += 1
        logger.debug(f"Appended line {index}: {source_text[:50]!r}")
        return index

    def replace_last_line(self, source_text: str, translated_text: str) -> int:
        """Overwrite the text of the line with the highest index.

        Returns:
            Index of the replaced line

        Raises:
            InvalidStateError: If there is no line yet or the last line is closed
        """
        with self.lock:
            if not self._lines:
                raise InvalidStateError("replace_last_line called before any line was appended")
            line = self._lines[-1]
            if not line.is_open:
                raise InvalidStateError(f"Line {line.index} is closed and cannot be revised")
            line.source_text = source_text
            line.translated_text = translated_text
            index = line.index
        logger.debug(f"Replaced line {index}: {source_text[:50]!r}")
        return index

    def close_last_line(self) -> bool:
        """Close the last line if it is open.

        Returns:
            True if a line was closed
        """
        with self.lock:
            if not self._lines or not self._lines[-1].is_open:
                return False
            self._lines[-1].state = LineState.CLOSED
            logger.debug(f"Closed line {self._lines[-1].index}")
            return True

    def lines(self) -> Tuple[Line, ...]:
        """Copies of all lines in commit order."""
        with self.lock:
            return tuple(replace(line) for line in self._lines)

    def snapshot(self) -> TranscriptSnapshot:
        """Immutable view of both sequences in commit order."""
        with self.lock:
            return TranscriptSnapshot(
                source_lines=tuple(line.source_text for line in self._lines),
                translated_lines=tuple(line.translated_text for line in self._lines),
            )
