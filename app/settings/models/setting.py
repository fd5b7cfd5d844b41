"""Pydantic models for key/value dashboard settings."""

from typing import List

from pydantic import BaseModel, Field


class SettingCreate(BaseModel):
    """Request model for saving one setting."""
    key: str = Field(..., min_length=1, description="Setting name, e.g. printerIp")
    value: str = Field(..., description="Setting value, always stored as a string")


class Setting(SettingCreate):
    id: int


class SettingsReset(BaseModel):
    message: str
    settings: List[Setting]
