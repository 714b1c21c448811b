"""
Config Manager

Loads config.yaml into typed AppConfig dataclasses. Every key is optional:
missing sections, missing keys and unknown values fall back to defaults with
a warning, so a broken config never stops the tool from starting.
"""

from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml

from models.config import AppConfig, DeviceConfig, LoggingConfig, UIConfig
from models.enums import DeviceBackend, LogLevel
from utils.enum_helper import EnumHelper
from utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.CONFIG)

DEFAULT_CONFIG_PATH = "config/config.yaml"

LOG_LEVEL_ALIASES = {"WARNING": LogLevel.WARN}


class ConfigManager:
    """
    Main configuration manager

    Example:
        config = ConfigManager().load()                 # src/config/config.yaml
        config = ConfigManager("~/uvcctl.yaml").load()  # user file

        config.device.backend    # DeviceBackend.UVC
        config.ui.bar_width      # 24
    """

    def __init__(self, config_path: Optional[Union[str, Path]] = None):
        """
        Args:
            config_path: User config file (relative to the working directory);
                None uses config/config.yaml next to the sources
        """
        if config_path is None:
            src_dir = Path(__file__).parent.parent
            self.config_path = src_dir / DEFAULT_CONFIG_PATH
        else:
            self.config_path = Path(config_path).expanduser()
        self.explicit = config_path is not None

        self.data: Dict[str, Any] = {}
        self.config = AppConfig()

    def load(self) -> AppConfig:
        """
        Read and parse the YAML file

        Returns:
            Complete AppConfig (defaults where the file is silent)
        """
        self.data = self._read_file()

        self.config = AppConfig(
            device=self._parse_device(self._section("device")),
            ui=self._parse_ui(self._section("ui")),
            logging=self._parse_logging(self._section("logging")),
        )

        log.info(
            "Configuration loaded",
            path=str(self.config_path),
            backend=self.config.device.backend.name,
            log_level=self.config.logging.level.name
        )
        return self.config

    def _read_file(self) -> Dict[str, Any]:
        try:
            with open(self.config_path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except FileNotFoundError:
            # Warn only for a path given explicitly
            report = log.warn if self.explicit else log.info
            report("Config file not found, using defaults", path=str(self.config_path))
            return {}
        except (OSError, yaml.YAMLError) as ex:
            log.error("Failed to load config file, using defaults", error=str(ex), error_type=type(ex).__name__)
            return {}

        if data is None:
            return {}
        if not isinstance(data, dict):
            log.warn("Config root is not a mapping, using defaults", path=str(self.config_path))
            return {}
        return data

    def _section(self, name: str) -> Dict[str, Any]:
        section = self.data.get(name) or {}
        if not isinstance(section, dict):
            log.warn(f"Config section '{name}' is not a mapping, using defaults")
            return {}
        return section

    # ===== Sections =====

    def _parse_device(self, raw: Dict[str, Any]) -> DeviceConfig:
        defaults = DeviceConfig()
        return DeviceConfig(
            backend=self._enum(raw, "backend", DeviceBackend, defaults.backend),
            vendor_id=self._usb_id(raw, "vendor_id"),
            product_id=self._usb_id(raw, "product_id"),
            index=self._int(raw, "index", defaults.index, minimum=0),
            detach_kernel_driver=self._bool(raw, "detach_kernel_driver", defaults.detach_kernel_driver),
        )

    def _parse_ui(self, raw: Dict[str, Any]) -> UIConfig:
        defaults = UIConfig()
        return UIConfig(
            bar_width=self._int(raw, "bar_width", defaults.bar_width, minimum=4),
            clear_screen=self._bool(raw, "clear_screen", defaults.clear_screen),
            colors=self._bool(raw, "colors", defaults.colors),
        )

    def _parse_logging(self, raw: Dict[str, Any]) -> LoggingConfig:
        defaults = LoggingConfig()
        file = raw.get("file")
        return LoggingConfig(
            level=self._enum(raw, "level", LogLevel, defaults.level, LOG_LEVEL_ALIASES),
            colors=self._bool(raw, "colors", defaults.colors),
            file=str(file) if file else None,
        )

    # ===== Values =====

    def _enum(self, raw, key, enum_class, default, aliases=None):
        if key not in raw:
            return default
        try:
            return EnumHelper.from_string(enum_class, raw[key], aliases=aliases)
        except ValueError as ex:
            log.warn(f"Invalid '{key}', using {default.name.lower()}", error=str(ex))
            return default

    def _int(self, raw, key, default: int, minimum: int) -> int:
        value = raw.get(key, default)
        if isinstance(value, bool) or not isinstance(value, int) or value < minimum:
            log.warn(f"Invalid '{key}', using {default}", value=value, minimum=minimum)
            return default
        return value

    def _bool(self, raw, key, default: bool) -> bool:
        value = raw.get(key, default)
        if not isinstance(value, bool):
            log.warn(f"Invalid '{key}', using {default}", value=value)
            return default
        return value

    def _usb_id(self, raw, key) -> Optional[int]:
        """USB ids as int (0x046d in YAML) or string ("046d", "0x046d")"""
        value = raw.get(key)
        if value is None:
            return None
        try:
            parsed = value if isinstance(value, int) else int(str(value), 16)
        except ValueError:
            log.warn(f"Invalid '{key}', ignoring", value=value)
            return None
        if not 0 <= parsed <= 0xFFFF:
            log.warn(f"'{key}' out of range, ignoring", value=value)
            return None
        return parsed
