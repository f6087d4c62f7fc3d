"""Single-consumer queue feeding recognition events into the segmentation engine."""

import logging
import queue
import threading
from typing import NamedTuple, Optional

from pubsub import pub

from ..models.fragments import FragmentEvent, RecognitionErrorEvent
from ..segmentation.engine import SegmentationEngine
from .publisher import topic_names

logger = logging.getLogger(__name__)

FRAGMENT = "fragment"
ERROR = "error"
END = "end"
START = "start"
STOP = "stop"


class ChannelMessage(NamedTuple):
    """A message waiting to be processed by the worker thread."""
    kind: str
    event: object = None


class FragmentConsumer:
    """Processes recognition events one at a time, in arrival order.

    pubsub delivers messages on the publisher's thread; they are only queued
    there. A single worker thread drains the queue, so the engine is never
    entered re-entrantly or from two threads at once.
    """

    def __init__(self, engine: SegmentationEngine, topic_prefix: str = "recognition"):
        """Initialize fragment consumer.

        Args:
            engine: Segmentation engine driven by this consumer
            topic_prefix: Prefix for the fragment, error and end topics
        """
        self.engine = engine
        self.topics = topic_names(topic_prefix)

        self.task_queue: "queue.Queue[Optional[ChannelMessage]]" = queue.Queue()
        self.last_error: Optional[RecognitionErrorEvent] = None
        self.processed_count = 0

        self.shutdown_event = threading.Event()
        self.worker_thread = threading.Thread(target=self._worker_loop)
        self.worker_thread.name = f"fragment_consumer_{topic_prefix}"
        self.worker_thread.daemon = True

        pub.subscribe(self._on_fragment, self.topics["fragment"])
        pub.subscribe(self._on_error, self.topics["error"])
        pub.subscribe(self._on_end, self.topics["end"])

        self.worker_thread.start()
        logger.info(f"FragmentConsumer initialized - subscribed to {topic_prefix}.*")

    def start(self) -> None:
        """Queue a session start behind any pending events.

        The previous recognition error is cleared when the start is processed.
        """
        self._put(ChannelMessage(START))

    def stop(self) -> None:
        """Queue a session stop behind any pending events."""
        self._put(ChannelMessage(STOP))

    def wait_idle(self, timeout: Optional[float] = None) -> bool:
        """Block until every queued message has been processed.

        Returns:
            True if the queue drained before the timeout
        """
        done = threading.Event()

        def _join():
            self.task_queue.join()
            done.set()

        threading.Thread(target=_join, daemon=True).start()
        return done.wait(timeout)

    def _on_fragment(self, event: FragmentEvent) -> None:
        self._put(ChannelMessage(FRAGMENT, event))

    def _on_error(self, event: RecognitionErrorEvent) -> None:
        self._put(ChannelMessage(ERROR, event))

    def _on_end(self) -> None:
        self._put(ChannelMessage(END))

    def _put(self, message: ChannelMessage) -> None:
        if self.shutdown_event.is_set():
            logger.debug(f"Dropping {message.kind} message after shutdown")
            return
        self.task_queue.put(message)

    def _worker_loop(self) -> None:
        thread_name = threading.current_thread().name
        logger.debug(f"Worker thread {thread_name} starting")

        while True:
            message = self.task_queue.get()

            if message is None:
                logger.debug(f"Worker {thread_name} received sentinel, exiting.")
                self.task_queue.task_done()
                break

            try:
                self._handle(message)
            except Exception as e:
                logger.error(f"Unhandled exception processing {message.kind} message: {e}", exc_info=True)
            finally:
                self.task_queue.task_done()

        logger.debug(f"Worker thread {thread_name} exiting.")

    def _handle(self, message: ChannelMessage) -> None:
        if message.kind == FRAGMENT:
            self.engine.on_fragment(message.event)
            self.processed_count += 1
        elif message.kind == ERROR:
            # Recognition errors are surfaced only; engine state is left alone
            self.last_error = message.event
            logger.warning(message.event.message)
        elif message.kind == START:
            self.last_error = None
            self.engine.start()
        elif message.kind in (END, STOP):
            self.engine.stop()

    def shutdown(self, timeout: float = 5.0) -> bool:
        """Drain pending messages, stop the worker and unsubscribe.

        Args:
            timeout: Maximum time to wait for the worker to finish

        Returns:
            True if shutdown completed successfully
        """
        logger.info("Shutting down FragmentConsumer...")
        for topic, listener in ((self.topics["fragment"], self._on_fragment),
                                (self.topics["error"], self._on_error),
                                (self.topics["end"], self._on_end)):
            try:
                pub.unsubscribe(listener, topic)
            except Exception as e:
                logger.warning(f"Error during unsubscribe from {topic}: {e}")

        self.shutdown_event.set()
        self.task_queue.put(None)
        self.worker_thread.join(timeout)

        completed = not self.worker_thread.is_alive()
        if completed:
            logger.info("FragmentConsumer shutdown complete")
        else:
            logger.warning(f"FragmentConsumer worker did not exit within {timeout}s")
        return completed
