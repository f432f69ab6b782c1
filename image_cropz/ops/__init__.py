"""Crop engine: pure geometry, drag sessions and the gesture engine.

Nothing in this package imports Qt; host adapters live in
`image_cropz.crop` and `image_cropz.app`.
"""
from __future__ import annotations

from .crop_controller import drag_crop, nudge_crop, resize_crop
from .crop_engine import CropEngine
from .crop_geometry import clamp, contain_crop, inverse_ord, make_aspect_crop, pixel_crop, resolve_crop
from .crop_model import (
    NUDGE_STEP,
    ArrowKey,
    Crop,
    CropConstraints,
    ImageFrame,
    Ordinal,
    PixelCrop,
    is_crop_valid,
)
from .crop_session import DragSession, start_crop_drag, start_new_crop

__all__ = [
    "NUDGE_STEP",
    "ArrowKey",
    "Crop",
    "CropConstraints",
    "CropEngine",
    "DragSession",
    "ImageFrame",
    "Ordinal",
    "PixelCrop",
    "clamp",
    "contain_crop",
    "drag_crop",
    "inverse_ord",
    "is_crop_valid",
    "make_aspect_crop",
    "nudge_crop",
    "pixel_crop",
    "resize_crop",
    "resolve_crop",
    "start_crop_drag",
    "start_new_crop",
]
