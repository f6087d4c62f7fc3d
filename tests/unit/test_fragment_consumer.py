"""Unit tests for the recognition channel (publisher + consumer)."""

import threading

import pytest

from voicetranslator.models.fragments import FragmentEvent, RecognitionErrorEvent
from voicetranslator.recognition import FragmentConsumer, FragmentPublisher
from voicetranslator.segmentation import SegmentationEngine


@pytest.fixture
def channel(buffer, translate, topic_prefix):
    engine = SegmentationEngine(buffer, translate, pause_threshold_ms=1000)
    consumer = FragmentConsumer(engine, topic_prefix)
    publisher = FragmentPublisher(topic_prefix)
    yield engine, consumer, publisher
    consumer.shutdown(timeout=5.0)


@pytest.mark.unit
class TestFragmentConsumer:

    def test_fragments_reach_engine_in_order(self, channel, buffer):
        engine, consumer, publisher = channel
        consumer.start()

        for text, ts in (("hallo", 0), ("hallo wereld", 500), ("dag", 2000), ("dag allemaal", 2300)):
            publisher.publish_fragment(FragmentEvent(text, ts))

        assert consumer.wait_idle(timeout=5.0)
        assert buffer.snapshot().source_lines == ("hallo wereld", "dag allemaal")
        assert consumer.processed_count == 4

    def test_end_signal_stops_session(self, channel, buffer):
        engine, consumer, publisher = channel
        consumer.start()

        publisher.publish_fragment(FragmentEvent("hallo", 0))
        publisher.publish_end()

        assert consumer.wait_idle(timeout=5.0)
        assert not engine.is_active
        assert buffer.snapshot().source_lines == ("hallo",)

    def test_error_is_recorded_without_touching_engine(self, channel, buffer):
        engine, consumer, publisher = channel
        consumer.start()

        publisher.publish_fragment(FragmentEvent("hallo", 0))
        publisher.publish_error(RecognitionErrorEvent("no-speech", 400))
        publisher.publish_fragment(FragmentEvent("hallo wereld", 800))

        assert consumer.wait_idle(timeout=5.0)
        assert consumer.last_error.message == "Error occurred in recognition: no-speech"
        assert engine.is_active
        assert engine.session.last_fragment_timestamp == 800
        assert buffer.snapshot().source_lines == ("hallo wereld",)

    def test_start_clears_previous_error(self, channel):
        engine, consumer, publisher = channel
        consumer.start()
        publisher.publish_error(RecognitionErrorEvent("not-allowed"))
        publisher.publish_end()
        assert consumer.wait_idle(timeout=5.0)
        assert consumer.last_error is not None

        consumer.start()
        assert consumer.wait_idle(timeout=5.0)

        assert consumer.last_error is None
        assert engine.is_active

    def test_stop_is_safe_without_session(self, channel):
        engine, consumer, publisher = channel

        consumer.stop()
        consumer.stop()

        assert consumer.wait_idle(timeout=5.0)
        assert not engine.is_active

    def test_engine_runs_only_on_worker_thread(self, buffer, topic_prefix):
        seen_threads = set()

        def translate(text):
            seen_threads.add(threading.current_thread().name)
            return text

        engine = SegmentationEngine(buffer, translate)
        consumer = FragmentConsumer(engine, topic_prefix)
        publisher = FragmentPublisher(topic_prefix)
        try:
            consumer.start()
            for i in range(20):
                publisher.publish_fragment(FragmentEvent(f"tekst {i}", i * 100))
            assert consumer.wait_idle(timeout=5.0)
        finally:
            consumer.shutdown(timeout=5.0)

        assert seen_threads == {consumer.worker_thread.name}
        assert buffer.snapshot().source_lines == ("tekst 19",)

    def test_shutdown_drains_and_unsubscribes(self, buffer, translate, topic_prefix):
        engine = SegmentationEngine(buffer, translate)
        consumer = FragmentConsumer(engine, topic_prefix)
        publisher = FragmentPublisher(topic_prefix)
        consumer.start()

        publisher.publish_fragment(FragmentEvent("hallo", 0))
        assert consumer.shutdown(timeout=5.0)

        publisher.publish_fragment(FragmentEvent("na afsluiten", 100))
        assert buffer.snapshot().source_lines == ("hallo",)
        assert not consumer.worker_thread.is_alive()

    def test_restart_is_ordered_behind_queued_fragments(self, channel, buffer):
        engine, consumer, publisher = channel
        consumer.start()
        for i in range(2000):
            publisher.publish_fragment(FragmentEvent(f"oud {i}", i * 100))

        consumer.stop()
        consumer.start()
        publisher.publish_fragment(FragmentEvent("nieuw", 0))

        assert consumer.wait_idle(timeout=10.0)
        assert engine.is_active
        assert buffer.snapshot().source_lines == ("nieuw",)
        assert consumer.processed_count == 2001

    def test_start_runs_on_worker_thread(self, channel):
        engine, consumer, publisher = channel
        started_on = []
        original_start = engine.start

        def recording_start():
            started_on.append(threading.current_thread().name)
            original_start()

        engine.start = recording_start
        consumer.start()

        assert consumer.wait_idle(timeout=5.0)
        assert started_on == [consumer.worker_thread.name]
