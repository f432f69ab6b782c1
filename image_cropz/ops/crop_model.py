"""Value types shared by the crop engine.

All crop coordinates are percentages (0..100) of the displayed image.
"""

from __future__ import annotations

import enum
import math
from dataclasses import dataclass

NUDGE_STEP = 0.2


class ArrowKey(enum.IntEnum):
    """Key codes recognised for nudging."""

    LEFT = 37
    UP = 38
    RIGHT = 39
    DOWN = 40


class Ordinal(str, enum.Enum):
    """The 8 compass-named resize handles."""

    N = "n"
    NE = "ne"
    E = "e"
    SE = "se"
    S = "s"
    SW = "sw"
    W = "w"
    NW = "nw"

    @property
    def x_inversed(self) -> bool:
        return self in _X_INVERSED

    @property
    def y_inversed(self) -> bool:
        return self in _Y_INVERSED


X_ORDS = frozenset({Ordinal.E, Ordinal.W})
Y_ORDS = frozenset({Ordinal.N, Ordinal.S})
XY_ORDS = frozenset({Ordinal.NW, Ordinal.NE, Ordinal.SE, Ordinal.SW})

_X_INVERSED = frozenset({Ordinal.NW, Ordinal.W, Ordinal.SW})
_Y_INVERSED = frozenset({Ordinal.NW, Ordinal.N, Ordinal.NE})


@dataclass(frozen=True, slots=True)
class Crop:
    """Percent crop rect. A zero width/height means "not set"."""

    x: float = 0.0
    y: float = 0.0
    width: float = 0.0
    height: float = 0.0
    aspect: float | None = None

    @property
    def x2(self) -> float:
        return self.x + self.width

    @property
    def y2(self) -> float:
        return self.y + self.height


def is_crop_valid(crop: Crop | None) -> bool:
    return bool(crop is not None and crop.width and crop.height)


@dataclass(frozen=True, slots=True)
class ImageFrame:
    """Where the image is drawn and how large its source is.

    ``left``/``top`` are the offset of the displayed image in the same
    coordinate space as pointer events; ``width``/``height`` its displayed
    size. ``natural_width``/``natural_height`` default to the displayed size.
    """

    width: float
    height: float
    left: float = 0.0
    top: float = 0.0
    natural_width: int | None = None
    natural_height: int | None = None

    @property
    def source_width(self) -> float:
        return self.width if self.natural_width is None else self.natural_width

    @property
    def source_height(self) -> float:
        return self.height if self.natural_height is None else self.natural_height

    @property
    def aspect(self) -> float:
        return _ratio(self.width, self.height)

    @property
    def natural_aspect(self) -> float:
        return _ratio(self.source_width, self.source_height)

    @property
    def is_empty(self) -> bool:
        return self.width <= 0 or self.height <= 0


def _ratio(w: float, h: float) -> float:
    if not h or not math.isfinite(w) or not math.isfinite(h):
        return math.nan
    return float(w) / float(h)


@dataclass(frozen=True, slots=True)
class PixelCrop:
    """Integer crop rect in source-image pixels."""

    x: int
    y: int
    width: int
    height: int

    def as_tuple(self) -> tuple[int, int, int, int]:
        """Return (left, top, width, height)."""
        return (self.x, self.y, self.width, self.height)


@dataclass(frozen=True, slots=True)
class CropConstraints:
    """Size limits in percent of the image."""

    min_width: float = 0.0
    min_height: float = 0.0
    max_width: float = 100.0
    max_height: float = 100.0
