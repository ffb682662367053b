"""
Config Manager

Loads config.yaml (falling back to factory defaults) and exposes typed
configuration sections.
"""

import yaml
from pathlib import Path
from typing import Any, Dict, Optional

from models.config import StripConfig, PlaybackConfig, LoggingConfig
from models.enums import LogLevel
from models.errors import ConfigurationError
from utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.CONFIG)

SRC_DIR = Path(__file__).resolve().parent.parent


class ConfigManager:
    """
    Main configuration manager

    Example:
        config = ConfigManager()
        config.load()

        strip_cfg = config.strip_config(port="/dev/ttyACM0")
        delay = config.playback.default_delay
    """

    def __init__(self, config_path="config/config.yaml", defaults_path="config/factory_defaults.yaml"):
        """
        Args:
            config_path: Path to main config.yaml (relative paths resolve against src/)
            defaults_path: Path to factory defaults fallback
        """
        self.config_path = self._resolve(config_path)
        self.factory_defaults_path = self._resolve(defaults_path)
        self.data: Dict[str, Any] = {}

    @staticmethod
    def _resolve(path) -> Path:
        path = Path(path)
        return path if path.is_absolute() else SRC_DIR / path

    def load(self) -> Dict[str, Any]:
        """
        Load YAML configuration.

        Falls back to the factory defaults when config.yaml cannot be read
        or parsed.

        Returns:
            Config data dict
        """
        try:
            self.data = self._read(self.config_path)
            log.info("Configuration loaded", path=str(self.config_path))
        except (OSError, yaml.YAMLError) as ex:
            log.error("Failed to load config.yaml", error=str(ex), error_type=type(ex).__name__)
            log.warn("Falling back to factory defaults")
            self.data = self._read(self.factory_defaults_path)

        return self.data

    @staticmethod
    def _read(path: Path) -> Dict[str, Any]:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
        if not isinstance(data, dict):
            raise ConfigurationError(
                f"{path.name} must contain a mapping", code="INVALID_CONFIG", path=str(path)
            )
        return data

    def _section(self, name: str) -> Dict[str, Any]:
        section = self.data.get(name) or {}
        if not isinstance(section, dict):
            raise ConfigurationError(f"'{name}' must be a mapping", code="INVALID_CONFIG")
        return section

    # ========================================================================
    # TYPED SECTIONS
    # ========================================================================

    def strip_config(self, port: Optional[str] = None, pixel_count: Optional[int] = None) -> StripConfig:
        """
        Build the strip settings, command-line overrides taking precedence.

        Raises:
            ConfigurationError: missing port, or invalid numeric values
        """
        section = self._section("strip")
        port = port or section.get("port")
        if not port:
            raise ConfigurationError("serial port is not configured", code="INVALID_CONFIG")

        try:
            config = StripConfig(
                port=str(port),
                pixel_count=int(pixel_count if pixel_count is not None else section.get("pixel_count", 0)),
                baudrate=int(section.get("baudrate", StripConfig.baudrate)),
                read_timeout=float(section.get("read_timeout", StripConfig.read_timeout)),
            )
        except (TypeError, ValueError) as ex:
            raise ConfigurationError(f"invalid strip configuration: {ex}", code="INVALID_CONFIG") from ex

        if config.pixel_count <= 0:
            raise ConfigurationError(pixel_count=config.pixel_count)
        return config

    @property
    def playback(self) -> PlaybackConfig:
        section = self._section("playback")
        try:
            delay = float(section.get("default_delay", PlaybackConfig.default_delay))
        except (TypeError, ValueError) as ex:
            raise ConfigurationError(f"invalid default_delay: {ex}", code="INVALID_CONFIG") from ex
        if delay < 0:
            raise ConfigurationError("default_delay cannot be negative", code="INVALID_CONFIG")
        return PlaybackConfig(default_delay=delay)

    @property
    def logging(self) -> LoggingConfig:
        section = self._section("logging")
        level_name = str(section.get("level", LoggingConfig.level.name)).upper()
        try:
            level = LogLevel[level_name]
        except KeyError:
            raise ConfigurationError(f"unknown log level: {level_name}", code="INVALID_CONFIG")
        return LoggingConfig(level=level, use_colors=bool(section.get("use_colors", True)))
