from __future__ import annotations

import json
from pathlib import Path

from image_cropz.ops.crop_model import CropConstraints
from image_cropz.settings_manager import SettingsManager


def test_defaults_without_file(tmp_path: Path) -> None:
    sm = SettingsManager(str(tmp_path / "settings.json"))

    assert sm.data == {}
    assert sm.constraints == CropConstraints()
    assert sm.keep_selection is False
    assert sm.disabled is False
    assert sm.image_type_after_crop == "jpeg"


def test_set_persists_and_reloads(tmp_path: Path) -> None:
    settings_path = tmp_path / "nested" / "settings.json"
    sm = SettingsManager(str(settings_path))
    sm.set("keep_selection", True)
    sm.set("min_width", 10)

    assert settings_path.exists()
    reloaded = SettingsManager(str(settings_path))
    assert reloaded.has("keep_selection")
    assert reloaded.keep_selection is True
    assert reloaded.constraints.min_width == 10.0


def test_constraints_are_clamped_and_validated(tmp_path: Path) -> None:
    settings_path = tmp_path / "settings.json"
    settings_path.write_text(
        json.dumps({"min_width": -5, "max_width": 250, "min_height": "abc", "max_height": "40"}),
        encoding="utf-8",
    )
    sm = SettingsManager(str(settings_path))

    assert sm.constraints == CropConstraints(min_width=0.0, min_height=0.0, max_width=100.0, max_height=40.0)


def test_corrupt_file_falls_back_to_defaults(tmp_path: Path) -> None:
    settings_path = tmp_path / "settings.json"
    settings_path.write_text("{not json", encoding="utf-8")

    sm = SettingsManager(str(settings_path))
    assert sm.data == {}
    assert sm.get("max_height") == 100.0


def test_image_type_after_crop(tmp_path: Path) -> None:
    sm = SettingsManager(str(tmp_path / "settings.json"))
    sm.set("image_type_after_crop", "PNG")
    assert sm.image_type_after_crop == "png"

    sm.set("image_type_after_crop", "gif")
    assert sm.image_type_after_crop == "jpeg"
