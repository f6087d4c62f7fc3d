"""Fragment publisher module for pub/sub event publishing."""

import logging
from pubsub import pub

from ..models.fragments import FragmentEvent, RecognitionErrorEvent

logger = logging.getLogger(__name__)


def topic_names(prefix: str = "recognition") -> dict:
    """Topic names used on the recognition channel."""
    return {
        "fragment": f"{prefix}.fragment",
        "error": f"{prefix}.error",
        "end": f"{prefix}.end",
    }


class FragmentPublisher:
    """Publishes recognition events using pubsub.pub.

    The recognizer-facing side of the channel. ``publish_end`` is the explicit
    termination signal and is distinct from a pause in speech.
    """

    def __init__(self, topic_prefix: str = "recognition"):
        """Initialize fragment publisher.

        Args:
            topic_prefix: Prefix for the fragment, error and end topics
        """
        self.topics = topic_names(topic_prefix)
        logger.info(f"FragmentPublisher initialized with topic prefix: {topic_prefix}")

    def publish_fragment(self, event: FragmentEvent) -> None:
        pub.sendMessage(self.topics["fragment"], event=event)
        logger.debug(f"Published fragment t={event.timestamp}: {event.transcript[:50]!r}")

    def publish_error(self, event: RecognitionErrorEvent) -> None:
        pub.sendMessage(self.topics["error"], event=event)
        logger.debug(f"Published recognition error: {event.error}")

    def publish_end(self) -> None:
        pub.sendMessage(self.topics["end"])
        logger.debug("Published end of recognition stream")
