"""Main application entry point for VoiceTranslator."""

import sys
import asyncio
import argparse
import logging
from pathlib import Path
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

from voicetranslator.models.fragments import RecognitionErrorEvent
from voicetranslator.recognition import FragmentConsumer, FragmentPublisher, ReplayScript, load_replay
from voicetranslator.segmentation import AsyncSegmentationEngine, DualBuffer, SegmentationEngine
from voicetranslator.translation import (
    AsyncFallbackTranslator,
    ChatGPTTranslationEngine,
    FallbackTranslator,
    MockTranslator,
)
from voicetranslator.ui import TranscriptScreen

from .config import LoggingSettings, VoiceTranslatorConfig

logger = logging.getLogger(__name__)


class Server:

    def __init__(self,
                 config_path: Optional[str],
                 log_level: Optional[str] = None,
                 pause_threshold_ms: Optional[int] = None):
        # Load configuration
        self.config = VoiceTranslatorConfig(config_path)
        if pause_threshold_ms is not None:
            self.config.set('segmentation.pause_threshold_ms', pause_threshold_ms)
        self.settings = self.config.get_settings()

        self.console = Console()
        # Command line level wins over the configured one
        setup_logging(self.settings.logging, log_level, self.console)

        self.buffer = DualBuffer()
        self.last_error: Optional[RecognitionErrorEvent] = None
        self.screen = TranscriptScreen(
            self.console,
            source_title=f"{self.settings.translation.source_language} (Original)",
            target_title=f"{self.settings.translation.target_language} (Translated)",
        )

    def init(self):
        logger.info("Initializing services...")

        threshold = self.settings.segmentation.pause_threshold_ms
        translation = self.settings.translation
        logger.info(f"Recognition language: {self.settings.recognition.language}; "
                    f"translation: {translation.engine} -> {translation.target_language}; "
                    f"pause threshold: {threshold}ms")

        if translation.engine == "chatgpt":
            backend = ChatGPTTranslationEngine(
                api_key=self.config.get_openai_api_key(),
                model=translation.model,
                source_language=translation.source_language,
                target_language=translation.target_language,
            )
            self.engine = AsyncSegmentationEngine(self.buffer, AsyncFallbackTranslator(backend), threshold)
            self.publisher = None
            self.consumer = None
        else:
            translator = FallbackTranslator(MockTranslator(translation.target_language))
            self.engine = SegmentationEngine(self.buffer, translator, threshold)
            prefix = self.settings.recognition.topic_prefix
            self.publisher = FragmentPublisher(prefix)
            self.consumer = FragmentConsumer(self.engine, prefix)

    def run(self, replay_path: str, realtime: bool = False):
        script = load_replay(replay_path)
        try:
            if isinstance(self.engine, AsyncSegmentationEngine):
                asyncio.run(self._run_async(script, realtime))
            else:
                self.consumer.start()
                script.play(self.publisher, realtime=realtime)
                self.consumer.wait_idle(timeout=30.0)
                self.last_error = self.consumer.last_error
        finally:
            self.cleanup()

        self.screen.render(self.buffer.snapshot(), self.last_error)

    async def _run_async(self, script: ReplayScript, realtime: bool):
        self.engine.start()
        previous = None
        try:
            for item in script.items:
                if isinstance(item, RecognitionErrorEvent):
                    self.last_error = item
                    logger.warning(item.message)
                    continue
                if realtime and previous is not None:
                    await asyncio.sleep(max(0, item.timestamp - previous) / 1000.0)
                previous = item.timestamp
                self.engine.on_fragment(item)
        finally:
            self.engine.stop()
            await self.engine.drain()
        logger.info(f"Discarded {self.engine.discarded_count} stale translations")

    def cleanup(self):
        if self.consumer is not None:
            self.consumer.shutdown()
            self.engine.stop()


def setup_logging(settings: LoggingSettings,
                  level: Optional[str] = None,
                  console: Optional[Console] = None) -> Path:
    """Install file and console handlers on the root logger.

    The file always receives DEBUG detail. Warnings and above also go to the
    rich console unless ``settings.console_output`` is off.

    Returns:
        Path of the log file
    """
    log_file = Path(settings.file_path)
    log_file.parent.mkdir(parents=True, exist_ok=True)

    file_handler = logging.FileHandler(log_file, encoding="utf-8")
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(funcName)s:%(lineno)d - %(message)s'
    ))

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.setLevel((level or settings.level).upper())
    root_logger.addHandler(file_handler)

    if settings.console_output:
        console_handler = RichHandler(console=console, show_path=False)
        console_handler.setLevel(logging.WARNING)
        root_logger.addHandler(console_handler)

    logger.info(f"Logging to {log_file} at level {logging.getLevelName(root_logger.level)}")
    return log_file


def main() -> None:
    """Main entry point for VoiceTranslator."""
    parser = argparse.ArgumentParser(
        description="VoiceTranslator - live transcript with line-by-line translation",
        epilog="Replay files list events as {transcript, timestamp} or {error} entries"
    )

    parser.add_argument(
        "--config",
        type=str,
        help="Path to configuration YAML file (default: built-in defaults)"
    )

    parser.add_argument(
        "--replay",
        type=str,
        required=True,
        help="Path to a recorded recognition stream (YAML)"
    )

    parser.add_argument(
        "--log-level",
        type=str,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Set logging level (overrides config)"
    )

    parser.add_argument(
        "--pause-threshold",
        type=int,
        help="Pause threshold in milliseconds (overrides config)"
    )

    parser.add_argument(
        "--realtime",
        action="store_true",
        help="Replay fragments with their original timing"
    )

    parser.add_argument(
        "--version",
        action="version",
        version="VoiceTranslator v0.1.0"
    )

    args = parser.parse_args()

    try:
        server = Server(args.config, args.log_level, args.pause_threshold)
        server.init()
        server.run(args.replay, realtime=args.realtime)
    except KeyboardInterrupt:
        print("\nGoodbye!")
    except Exception as e:
        print(f"Error: {e}")
        logging.error(f"Application error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
