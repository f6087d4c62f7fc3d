"""Recognition event channel: publisher, consumer and replay source."""

from .publisher import FragmentPublisher, topic_names
from .consumer import FragmentConsumer
from .replay import ReplayScript, load_replay

__all__ = [
    "FragmentPublisher",
    "FragmentConsumer",
    "ReplayScript",
    "load_replay",
    "topic_names",
]
