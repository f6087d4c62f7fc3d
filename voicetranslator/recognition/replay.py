"""Recorded recognition streams used as a stand-in recognition source."""

import logging
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Union

import yaml

from ..exceptions import ConfigurationError
from ..models.fragments import FragmentEvent, RecognitionErrorEvent
from .publisher import FragmentPublisher

logger = logging.getLogger(__name__)

ReplayItem = Union[FragmentEvent, RecognitionErrorEvent]


@dataclass
class ReplayScript:
    """Ordered recognition events loaded from a replay file."""
    items: List[ReplayItem] = field(default_factory=list)

    @property
    def fragments(self) -> List[FragmentEvent]:
        return [item for item in self.items if isinstance(item, FragmentEvent)]

    def play(self, publisher: FragmentPublisher, realtime: bool = False) -> None:
        """Publish every event followed by the end signal.

        Args:
            publisher: Publisher to send events through
            realtime: Sleep between fragments according to their timestamps
        """
        previous = None
        for item in self.items:
            if isinstance(item, RecognitionErrorEvent):
                publisher.publish_error(item)
                continue
            if realtime and previous is not None:
                time.sleep(max(0, item.timestamp - previous) / 1000.0)
            previous = item.timestamp
            publisher.publish_fragment(item)
        publisher.publish_end()


def load_replay(path: str) -> ReplayScript:
    """Load a replay file.

    The file holds an ``events`` list whose entries are either
    ``{transcript: str, timestamp: int}`` or ``{error: str}``.

    Raises:
        ConfigurationError: If the file is missing or malformed
    """
    replay_file = Path(path)
    if not replay_file.exists():
        raise ConfigurationError(f"Replay file not found: {replay_file}")

    try:
        with open(replay_file, 'r', encoding='utf-8') as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML in replay file: {e}")

    items: List[ReplayItem] = []
    for i, entry in enumerate(data.get("events", [])):
        if "error" in entry:
            items.append(RecognitionErrorEvent(error=str(entry["error"]),
                                               timestamp=entry.get("timestamp")))
        elif "timestamp" in entry:
            items.append(FragmentEvent(transcript=str(entry.get("transcript") or ""),
                                       timestamp=int(entry["timestamp"])))
        else:
            raise ConfigurationError(f"Replay event {i} has neither 'error' nor 'timestamp'")

    logger.info(f"Loaded {len(items)} replay events from {replay_file}")
    return ReplayScript(items=items)
