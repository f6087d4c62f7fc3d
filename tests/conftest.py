"""Pytest configuration and fixtures for VoiceTranslator tests."""

import pytest
import tempfile
import itertools
import logging
from pathlib import Path

from voicetranslator.models.fragments import FragmentEvent
from voicetranslator.segmentation import DualBuffer, SegmentationEngine
from voicetranslator.translation import FallbackTranslator, MockTranslator


# Configure logging for tests
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

_topic_counter = itertools.count()


def pytest_configure(config):
    config.addinivalue_line("markers", "unit: fast tests without external services")


@pytest.fixture
def temp_data_dir():
    """Create temporary directory for test data."""
    with tempfile.TemporaryDirectory() as temp_dir:
        yield temp_dir


@pytest.fixture
def buffer():
    return DualBuffer()


@pytest.fixture
def translate():
    """Mock translation function, wrapped the way the application wraps it."""
    return FallbackTranslator(MockTranslator("English"))


@pytest.fixture
def engine(buffer, translate):
    """Engine with a 1000ms threshold and a started session."""
    engine = SegmentationEngine(buffer, translate, pause_threshold_ms=1000)
    engine.start()
    return engine


@pytest.fixture
def topic_prefix():
    """Unique pub/sub topic prefix so subscriptions never leak between tests."""
    return f"test{next(_topic_counter)}.recognition"


@pytest.fixture
def fragments():
    """Build fragment events from (transcript, timestamp) pairs."""
    def build(*pairs):
        return [FragmentEvent(transcript=text, timestamp=ts) for text, ts in pairs]
    return build


@pytest.fixture
def write_yaml(temp_data_dir):
    """Write a YAML document into the temporary directory and return its path."""
    def write(name: str, content: str) -> str:
        path = Path(temp_data_dir) / name
        path.write_text(content, encoding="utf-8")
        return str(path)
    return write
