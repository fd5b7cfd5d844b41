"""Stored setting models."""

from .setting import Setting, SettingCreate, SettingsReset

__all__ = [
    "Setting",
    "SettingCreate",
    "SettingsReset",
]
