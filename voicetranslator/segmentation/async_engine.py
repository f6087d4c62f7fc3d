"""Segmentation with an asynchronous translation backend.

The segmentation decision is made as soon as a fragment arrives, but the
buffer update is queued until its translation resolves. Updates are applied
strictly in the order their fragments were processed. When a translation
resolves for a revision that a newer revision of the same line has already
superseded, it is discarded, so a slow translation never overwrites newer
text and never lands on a later line. Updates still queued when a new
session starts are dropped.
"""

import asyncio
import logging
from collections import deque
from dataclasses import dataclass
from typing import Awaitable, Callable, Deque, Optional

from ..models.fragments import FragmentEvent
from ..models.transcript import BufferOperation
from .buffer import DualBuffer
from .engine import APPEND, PAUSE_THRESHOLD_MS, REPLACE, SegmentationEngine

logger = logging.getLogger(__name__)

CLOSE = "close"


@dataclass
class PendingUpdate:
    """A buffer update waiting for its translation."""
    kind: str  # "append" | "replace" | "close"
    line_index: int
    revision: int
    generation: int
    source_text: str = ""
    translation: Optional["asyncio.Future[str]"] = None


class AsyncSegmentationEngine(SegmentationEngine):
    """SegmentationEngine whose translations resolve asynchronously.

    ``on_fragment`` and ``stop`` must be called from within a running event
    loop. Use ``drain()`` to wait until every queued update has been applied.
    """

    def __init__(self,
                 buffer: DualBuffer,
                 translate_async: Callable[[str], Awaitable[str]],
                 pause_threshold_ms: int = PAUSE_THRESHOLD_MS):
        super().__init__(buffer, translate=None, pause_threshold_ms=pause_threshold_ms)
        self.translate_async = translate_async

        self._pending: Deque[PendingUpdate] = deque()
        self._latest_revision = {}  # line index -> newest queued revision
        self._lines_opened = 0
        self._revision = 0
        self._generation = 0  # bumped by start(); older updates are dropped
        self._flusher: Optional[asyncio.Task] = None

        # Discarded stale translations, for diagnostics
        self.discarded_count = 0

    def start(self) -> None:
        super().start()
        self._generation += 1
        if self._pending:
            logger.warning(f"Dropping {len(self._pending)} updates left over from the previous session")
            for update in self._pending:
                if update.translation is not None:
                    update.translation.cancel()
        self._lines_opened = 0
        self._latest_revision.clear()

    def on_fragment(self, event: FragmentEvent) -> Optional[BufferOperation]:
        """Queue the update for one fragment.

        Returns:
            None; the operation is applied once its translation resolves
        """
        kind = self._segment(event)
        if kind is None:
            return None

        if kind == APPEND:
            line_index = self._lines_opened
            self._lines_opened += 1
            self._session.active_line_index = line_index
        else:
            line_index = self._session.active_line_index

        self._revision += 1
        self._latest_revision[line_index] = self._revision
        update = PendingUpdate(kind=kind,
                               line_index=line_index,
                               revision=self._revision,
                               generation=self._generation,
                               source_text=event.transcript,
                               translation=asyncio.ensure_future(self.translate_async(event.transcript)))
        self._enqueue(update)
        return None

    def _close_open_line(self) -> None:
        self._revision += 1
        self._enqueue(PendingUpdate(kind=CLOSE,
                                    line_index=self._session.active_line_index,
                                    revision=self._revision,
                                    generation=self._generation))

    async def drain(self) -> None:
        """Wait until every queued update has been applied."""
        if self._flusher is not None:
            await self._flusher

    @property
    def pending_count(self) -> int:
        return len(self._pending)

    def _enqueue(self, update: PendingUpdate) -> None:
        self._pending.append(update)
        if self._flusher is None or self._flusher.done():
            self._flusher = asyncio.ensure_future(self._flush())

    async def _flush(self) -> None:
        while self._pending:
            update = self._pending[0]
            if update.generation != self._generation:
                self._pending.popleft()
                self.discarded_count += 1
                logger.debug(f"Dropping {update.kind} for line {update.line_index} from a previous session")
                continue

            if update.kind == CLOSE:
                self._pending.popleft()
                self.buffer.close_last_line()
                continue

            try:
                translated = await update.translation
            except asyncio.CancelledError:
                if not update.translation.cancelled():
                    raise
                # Cancelled by start(); dropped by the generation check below
                translated = update.source_text
            except Exception as e:
                logger.warning(f"Translation failed for line {update.line_index}, using original text: {e}")
                translated = update.source_text
            self._pending.popleft()

            if update.generation != self._generation:
                self.discarded_count += 1
                logger.debug(f"Dropping translation for line {update.line_index} from a previous session")
                continue

            if update.kind == REPLACE and self._is_superseded(update):
                self.discarded_count += 1
                logger.debug(f"Discarding stale translation for line {update.line_index} "
                             f"(revision {update.revision})")
                continue

            self._apply(update, translated)

    def _is_superseded(self, update: PendingUpdate) -> bool:
        return self._latest_revision.get(update.line_index, update.revision) > update.revision

    def _apply(self, update: PendingUpdate, translated: str) -> None:
        if update.kind == APPEND:
            index = self.buffer.append_line(update.source_text, translated)
            if index != update.line_index:
                logger.error(f"Line index drift: expected {update.line_index}, buffer assigned {index}")
        else:
            self.buffer.replace_last_line(update.source_text, translated)
