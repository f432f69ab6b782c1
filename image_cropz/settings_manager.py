from __future__ import annotations

import json
import os
from typing import Any

from .logger import get_logger
from .ops.crop_geometry import clamp
from .ops.crop_model import CropConstraints

_logger = get_logger("settings")

IMAGE_TYPES = ("jpeg", "png")


class SettingsManager:
    def __init__(self, settings_path: str):
        self.settings_path = settings_path
        self._settings: dict[str, Any] = {}
        self.load()

    DEFAULTS: dict[str, Any] = {
        "min_width": 0.0,
        "min_height": 0.0,
        "max_width": 100.0,
        "max_height": 100.0,
        "keep_selection": False,
        "disabled": False,
        "image_type_after_crop": "jpeg",
    }

    def load(self) -> None:
        try:
            if os.path.exists(self.settings_path):
                with open(self.settings_path, encoding="utf-8") as f:
                    data = json.load(f)
                    if isinstance(data, dict):
                        self._settings = data
                        _logger.debug("settings loaded: %s", self.settings_path)
                        return
        except (OSError, ValueError) as e:
            _logger.warning("settings load failed: %s", e)
        self._settings = {}

    def save(self) -> None:
        try:
            parent = os.path.dirname(self.settings_path)
            if parent:
                os.makedirs(parent, exist_ok=True)
            with open(self.settings_path, "w", encoding="utf-8") as f:
                json.dump(self._settings, f, ensure_ascii=False, indent=2)
            _logger.debug("settings saved: %s", self.settings_path)
        except OSError as e:
            _logger.error("settings save failed: %s", e)

    def get(self, key: str, default: Any = None) -> Any:
        if key in self._settings:
            return self._settings[key]
        if default is not None:
            return default
        return self.DEFAULTS.get(key)

    def has(self, key: str) -> bool:
        return key in self._settings

    def set(self, key: str, value: Any) -> None:
        self._settings[key] = value
        self.save()

    @property
    def data(self) -> dict[str, Any]:
        return self._settings

    def _percent(self, key: str) -> float:
        try:
            return clamp(float(self.get(key)), 0.0, 100.0)
        except (TypeError, ValueError):
            _logger.warning("invalid %s in settings: %r", key, self.get(key))
            return float(self.DEFAULTS[key])

    @property
    def constraints(self) -> CropConstraints:
        return CropConstraints(
            min_width=self._percent("min_width"),
            min_height=self._percent("min_height"),
            max_width=self._percent("max_width"),
            max_height=self._percent("max_height"),
        )

    @property
    def keep_selection(self) -> bool:
        return bool(self.get("keep_selection", False))

    @property
    def disabled(self) -> bool:
        return bool(self.get("disabled", False))

    @property
    def image_type_after_crop(self) -> str:
        val = str(self.get("image_type_after_crop") or "jpeg").lower()
        if val not in IMAGE_TYPES:
            _logger.warning("unsupported image_type_after_crop: %s", val)
            return "jpeg"
        return val
