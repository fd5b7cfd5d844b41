"""In-memory key/value store for dashboard settings."""

import logging
from typing import Dict, List, Optional

from ..models.setting import Setting, SettingCreate

logger = logging.getLogger(__name__)

PRINTER_TYPE = "printerType"
PRINTER_IP = "printerIp"
PRINTER_PORT = "printerPort"
PRINTER_NAME = "printerName"
AUDIO_ENABLED = "audioEnabled"
AUDIO_VOLUME = "audioVolume"
WEBHOOK_SECRET = "webhookSecret"


def default_settings(
    printer_ip: str = "192.168.1.100",
    printer_port: int = 9100,
    printer_name: str = "Kitchen Printer",
) -> Dict[str, str]:
    """Values the store starts with and returns to on reset."""
    return {
        PRINTER_TYPE: "network",
        PRINTER_IP: printer_ip,
        PRINTER_PORT: str(printer_port),
        PRINTER_NAME: printer_name,
        AUDIO_ENABLED: "true",
        AUDIO_VOLUME: "80",
        WEBHOOK_SECRET: "",
    }


class SettingsStore:
    """Settings keyed by name, each with a stable integer id.

    Saving an existing key keeps its id and replaces the value.
    """

    def __init__(self, defaults: Optional[Dict[str, str]] = None):
        self.defaults = dict(defaults if defaults is not None else default_settings())
        self._settings: Dict[str, Setting] = {}
        self._next_id = 1
        self._seed()

    def _seed(self) -> None:
        for key, value in self.defaults.items():
            if key not in self._settings:
                self._settings[key] = Setting(id=self._next_id, key=key, value=value)
                self._next_id += 1

    def list_settings(self) -> List[Setting]:
        return list(self._settings.values())

    def get_setting(self, key: str) -> Optional[Setting]:
        return self._settings.get(key)

    def get_value(self, key: str, default: Optional[str] = None) -> Optional[str]:
        setting = self._settings.get(key)
        return setting.value if setting is not None else default

    def set_setting(self, data: SettingCreate) -> Setting:
        existing = self._settings.get(data.key)
        if existing is not None:
            setting = existing.model_copy(update={"value": data.value})
        else:
            setting = Setting(id=self._next_id, key=data.key, value=data.value)
            self._next_id += 1
        self._settings[data.key] = setting
        logger.info(f"Setting {data.key} saved")
        return setting

    def reset(self) -> List[Setting]:
        """Drop every stored value and reseed the defaults."""
        self._settings.clear()
        self._next_id = 1
        self._seed()
        logger.info("Settings reset to defaults")
        return self.list_settings()
