"""Pause-based segmentation of streaming recognition fragments.

Recognizers re-emit a growing hypothesis for the same utterance on every
partial-result tick and never say when an utterance ends. The only signal
available is the time since the previous tick:

 - gap <= pause threshold: the fragment revises the open line (replace)
 - gap >  pause threshold: the open line is frozen and a new line starts

A gap exactly equal to the threshold is a continuation.
"""

import logging
from typing import Callable, Optional, Tuple

from ..exceptions import InvalidStateError
from ..models.fragments import FragmentEvent
from ..models.session import SessionState
from ..models.transcript import BufferOperation
from .buffer import DualBuffer

logger = logging.getLogger(__name__)

# Maximum gap between fragments still considered the same utterance
PAUSE_THRESHOLD_MS = 1200

APPEND = "append"
REPLACE = "replace"


class SegmentationEngine:
    """Turns fragment events into append/replace operations on a DualBuffer."""

    def __init__(self,
                 buffer: DualBuffer,
                 translate: Callable[[str], str],
                 pause_threshold_ms: int = PAUSE_THRESHOLD_MS):
        """Initialize segmentation engine.

        Args:
            buffer: Buffer receiving line operations
            translate: Total, synchronous translation function
            pause_threshold_ms: Largest gap treated as the same utterance
        """
        self.buffer = buffer
        self.translate = translate
        self.pause_threshold_ms = pause_threshold_ms
        self._session: Optional[SessionState] = None

        logger.info(f"SegmentationEngine initialized with pause threshold {pause_threshold_ms}ms")

    @property
    def is_active(self) -> bool:
        return self._session is not None

    @property
    def session(self) -> Optional[SessionState]:
        return self._session

    def start(self) -> None:
        """Start a new session with an empty buffer.

        Raises:
            InvalidStateError: If a session is already active
        """
        if self._session is not None:
            raise InvalidStateError("A session is already active; call stop() first")
        self._session = SessionState()
        self.buffer.clear()
        logger.info("Segmentation session started")

    def stop(self) -> None:
        """Close the open line, if any, and end the session."""
        if self._session is None:
            logger.debug("stop() called with no active session")
            return
        if self._session.has_open_line:
            self._close_open_line()
            self._session.active_line_index = None
        self._session = None
        logger.info(f"Segmentation session stopped with {len(self.buffer)} lines")

    def on_fragment(self, event: FragmentEvent) -> Optional[BufferOperation]:
        """Apply one fragment event.

        Returns:
            The buffer operation emitted, or None if no session is active
        """
        if self._session is None:
            logger.warning(f"Ignoring fragment at t={event.timestamp} with no active session")
            return None

        # Translate before touching session state
        translated = self._translate(event.transcript)
        kind = self._segment(event)
        if kind == APPEND:
            index = self.buffer.append_line(event.transcript, translated)
            self._session.active_line_index = index
        else:
            index = self.buffer.replace_last_line(event.transcript, translated)
        return BufferOperation(kind=kind,
                               index=index,
                               source_text=event.transcript,
                               translated_text=translated)

    def _translate(self, text: str) -> str:
        try:
            return self.translate(text)
        except Exception as e:
            logger.warning(f"Translation failed, keeping original text: {e}")
            return text

    def _segment(self, event: FragmentEvent) -> Optional[str]:
        """Decide between a new line and a revision, updating session timing."""
        session = self._session
        if session is None:
            logger.warning(f"Ignoring fragment at t={event.timestamp} with no active session")
            return None

        kind, gap = self._classify(session, event.timestamp)
        if kind == APPEND:
            # append_line freezes the previous line
            session.active_line_index = None
        session.last_fragment_timestamp = event.timestamp

        logger.debug(f"Fragment t={event.timestamp} gap={gap} -> {kind}: {event.transcript[:50]!r}")
        return kind

    def _classify(self, session: SessionState, timestamp: int) -> Tuple[str, Optional[int]]:
        if session.last_fragment_timestamp is None or not session.has_open_line:
            return APPEND, None
        gap = timestamp - session.last_fragment_timestamp
        if gap < 0:
            logger.warning(f"Fragment timestamp went backwards by {-gap}ms; treating as continuation")
        if gap > self.pause_threshold_ms:
            return APPEND, gap
        return REPLACE, gap

    def _close_open_line(self) -> None:
        self.buffer.close_last_line()
