"""Stateless crop geometry helpers.

Nothing here raises for out-of-range numbers: bad input is clamped or passed
through unchanged.
"""

from __future__ import annotations

import math
from dataclasses import replace

from .crop_model import Crop, ImageFrame, Ordinal, PixelCrop

_INVERSE_ORD: dict[Ordinal, Ordinal] = {
    Ordinal.N: Ordinal.S,
    Ordinal.NE: Ordinal.SW,
    Ordinal.E: Ordinal.W,
    Ordinal.SE: Ordinal.NW,
    Ordinal.S: Ordinal.N,
    Ordinal.SW: Ordinal.NE,
    Ordinal.W: Ordinal.E,
    Ordinal.NW: Ordinal.SE,
}


def clamp(value: float, lo: float, hi: float) -> float:
    return min(max(value, lo), hi)


def inverse_ord(ord: Ordinal) -> Ordinal:
    """Return the handle diametrically opposite to ``ord``."""
    return _INVERSE_ORD[ord]


def _round_half_up(v: float) -> int:
    return int(math.floor(v + 0.5))


def make_aspect_crop(crop: Crop, image_aspect: float) -> Crop:
    """Fill in the missing width or height of ``crop`` from its aspect.

    ``image_aspect`` is the image's width/height; it converts between the two
    percent axes, which are measured against different pixel lengths.
    """
    aspect = crop.aspect
    if aspect is None or not math.isfinite(aspect) or not aspect or not math.isfinite(image_aspect):
        return crop

    width = crop.width
    height = crop.height

    if crop.width:
        height = (crop.width / aspect) * image_aspect
    if crop.height:
        width = height * (aspect / image_aspect)

    # Keep the completed rect on the image; y first, then x.
    if crop.y + height > 100:
        height = 100 - crop.y
        width = (height * aspect) / image_aspect

    if crop.x + width > 100:
        width = 100 - crop.x
        height = (width / aspect) * image_aspect

    return replace(crop, width=width, height=height)


def resolve_crop(crop: Crop | None, frame: ImageFrame) -> Crop | None:
    """Complete an aspect-only crop against the image's natural aspect.

    Returns ``crop`` itself when there is nothing to resolve.
    """
    if crop is not None and crop.aspect and bool(crop.width) != bool(crop.height):
        return make_aspect_crop(crop, frame.natural_aspect)
    return crop


def pixel_crop(frame: ImageFrame | None, crop: Crop | None) -> PixelCrop | None:
    """Convert a percent crop into source pixels.

    Origin and size are rounded half-up; the size is then clamped so the rect
    never extends past the image.
    """
    if frame is None or crop is None:
        return None

    src_w = frame.source_width
    src_h = frame.source_height
    x = _round_half_up(src_w * (crop.x / 100))
    y = _round_half_up(src_h * (crop.y / 100))
    width = _round_half_up(src_w * (crop.width / 100))
    height = _round_half_up(src_h * (crop.height / 100))

    return PixelCrop(
        x=x,
        y=y,
        width=int(clamp(width, 0, int(src_w) - x)),
        height=int(clamp(height, 0, int(src_h) - y)),
    )


def contain_crop(previous: Crop, crop: Crop, image_aspect: float) -> Crop:
    """Clip ``crop`` to the image, shrinking from the side that overflowed.

    With an aspect set, the other axis is re-derived after a clip and the
    origin is pinned so the anchored corner stays put. The result always lies
    within 0..100 on both axes.
    """
    x, y, width, height = crop.x, crop.y, crop.width, crop.height

    # Don't let the crop grow on the opposite side when hitting an x boundary.
    x_adjusted = False
    if x + width > 100:
        width = crop.width + (100 - crop.x2)
        x = crop.x + (100 - (crop.x + width))
        x_adjusted = True
    elif x < 0:
        width = crop.x2
        x = 0
        x_adjusted = True

    if x_adjusted and crop.aspect:
        height = (width / crop.aspect) * image_aspect
        # Sizing upwards: pin y where it would meet the boundary.
        if previous.y > y:
            y = crop.y + (crop.height - height)

    y_adjusted = False
    if y + height > 100:
        height = crop.height + (100 - crop.y2)
        y = crop.y + (100 - (crop.y + height))
        y_adjusted = True
    elif y < 0:
        height = crop.y2
        y = 0
        y_adjusted = True

    if y_adjusted and crop.aspect:
        width = (height * crop.aspect) / image_aspect
        # Sizing leftwards: pin x where it would meet the boundary. After an x
        # clip, x only differs from crop.x by rounding noise.
        if not x_adjusted and x < crop.x:
            x = crop.x + (crop.width - width)

    return replace(
        crop,
        x=clamp(x, 0, max(100 - width, 0)),
        y=clamp(y, 0, max(100 - height, 0)),
        width=width,
        height=height,
    )
