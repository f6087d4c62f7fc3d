"""Simple YAML configuration loader for VoiceTranslator."""

import os
import yaml
from pathlib import Path
from typing import Dict, Any, Optional, Literal
import logging

from pydantic import BaseModel, Field, ValidationError

from ..exceptions import ConfigurationError
from ..segmentation.engine import PAUSE_THRESHOLD_MS

logger = logging.getLogger(__name__)


class RecognitionSettings(BaseModel):
    language: str = "nl-NL"
    topic_prefix: str = "recognition"


class SegmentationSettings(BaseModel):
    pause_threshold_ms: int = Field(default=PAUSE_THRESHOLD_MS, ge=1000, le=1400)


class TranslationSettings(BaseModel):
    engine: Literal["mock", "chatgpt"] = "mock"
    source_language: str = "Dutch"
    target_language: str = "English"
    openai_api_key: Optional[str] = None
    model: str = "gpt-4o-mini"


class LoggingSettings(BaseModel):
    level: str = "INFO"
    file_path: str = "data/logs/voicetranslator.log"
    console_output: bool = True


class VoiceTranslatorSettings(BaseModel):
    recognition: RecognitionSettings = Field(default_factory=RecognitionSettings)
    segmentation: SegmentationSettings = Field(default_factory=SegmentationSettings)
    translation: TranslationSettings = Field(default_factory=TranslationSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)


class VoiceTranslatorConfig:
    """VoiceTranslator configuration loader."""

    def __init__(self, config_path: Optional[str] = None):
        """Initialize configuration loader.

        Args:
            config_path: Path to YAML config file. If None, built-in defaults are used.
        """
        if config_path is None:
            self.config_file = None
            self.config: Dict[str, Any] = {}
            logger.info("No configuration file given, using defaults")
            return

        self.config_file = Path(config_path)

        if not self.config_file.exists():
            raise FileNotFoundError(f"Configuration file not found: {self.config_file}")

        logger.info(f"Loading configuration from: {self.config_file}")
        self.config = self._load_config()

    def _load_config(self) -> Dict[str, Any]:
        """Load and parse YAML configuration file."""
        try:
            with open(self.config_file, 'r', encoding='utf-8') as f:
                config = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML in configuration file: {e}")

        if not config:
            raise ConfigurationError("Configuration file is empty")
        if not isinstance(config, dict):
            raise ConfigurationError("Configuration file must contain a mapping")

        self._resolve_paths(config)

        logger.info("Configuration loaded successfully")
        return config

    def _resolve_paths(self, config: Dict[str, Any]) -> None:
        """Resolve relative paths in configuration relative to config file location."""
        config_dir = self.config_file.parent

        if 'logging' in config and 'file_path' in config['logging']:
            log_path = config['logging']['file_path']
            if not os.path.isabs(log_path):
                config['logging']['file_path'] = str(config_dir / log_path)

    def get(self, key_path: str, default: Any = None) -> Any:
        """Get configuration value using dot notation (e.g., 'translation.engine').

        Args:
            key_path: Dot-separated key path
            default: Default value if key not found

        Returns:
            Configuration value or default
        """
        keys = key_path.split('.')
        value = self.config

        for key in keys:
            if isinstance(value, dict) and key in value:
                value = value[key]
            else:
                return default

        return value

    def set(self, key_path: str, value: Any) -> None:
        """Set configuration value using dot notation.

        Args:
            key_path: Dot-separated path to config value (e.g., 'segmentation.pause_threshold_ms')
            value: Value to set
        """
        keys = key_path.split('.')
        config_dict = self.config

        for key in keys[:-1]:
            if key not in config_dict:
                config_dict[key] = {}
            config_dict = config_dict[key]

        config_dict[keys[-1]] = value
        logger.debug(f"Configuration key '{key_path}' set to: {value}")

    def get_settings(self) -> VoiceTranslatorSettings:
        """Validate the configuration into typed settings.

        Raises:
            ConfigurationError: If a value is out of range or of the wrong type
        """
        try:
            return VoiceTranslatorSettings.model_validate(self.config)
        except ValidationError as e:
            raise ConfigurationError(f"Invalid configuration: {e}")

    def get_openai_api_key(self) -> str:
        """Get OpenAI API key - CRASHES if not found."""
        api_key = self.get('translation.openai_api_key') or os.environ.get("OPENAI_API_KEY")
        if not api_key:
            raise ConfigurationError("OpenAI API key not configured (translation.openai_api_key or OPENAI_API_KEY)")
        return api_key
