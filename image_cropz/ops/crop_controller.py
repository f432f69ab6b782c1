"""Drag, resize and nudge math for the crop engine.

Every function takes the current crop and session and returns new values;
nothing is mutated.
"""

from __future__ import annotations

from dataclasses import replace

from .crop_geometry import clamp, contain_crop, inverse_ord
from .crop_model import (
    NUDGE_STEP,
    X_ORDS,
    XY_ORDS,
    Y_ORDS,
    ArrowKey,
    Crop,
    CropConstraints,
    ImageFrame,
    Ordinal,
    is_crop_valid,
)
from .crop_session import DragSession

_NUDGE_DELTAS: dict[int, tuple[float, float]] = {
    ArrowKey.LEFT: (-NUDGE_STEP, 0.0),
    ArrowKey.RIGHT: (NUDGE_STEP, 0.0),
    ArrowKey.UP: (0.0, -NUDGE_STEP),
    ArrowKey.DOWN: (0.0, NUDGE_STEP),
}


def drag_crop(session: DragSession, crop: Crop) -> Crop:
    """Translate the start rect by the session delta, keeping it on the image."""
    return replace(
        crop,
        x=clamp(session.crop_start_x + session.x_diff_pc, 0, 100 - crop.width),
        y=clamp(session.crop_start_y + session.y_diff_pc, 0, 100 - crop.height),
    )


def new_size(
    session: DragSession,
    crop: Crop,
    frame: ImageFrame,
    constraints: CropConstraints,
) -> tuple[float, float]:
    """Width and height for the current (already inversion-adjusted) delta."""
    image_aspect = frame.aspect

    width = session.crop_start_width + session.x_diff_pc
    if session.x_cross_over:
        width = abs(width)
    width = clamp(width, constraints.min_width, constraints.max_width)

    if crop.aspect:
        height = (width / crop.aspect) * image_aspect
    else:
        height = session.crop_start_height + session.y_diff_pc

    if session.y_cross_over:
        # Once inverted the height can't grow past where the crop started.
        height = min(abs(height), session.crop_start_y)

    height = clamp(height, constraints.min_height, constraints.max_height)

    if crop.aspect:
        width = clamp((height * crop.aspect) / image_aspect, 0, 100)

    return width, height


def cross_over_check(session: DragSession) -> DragSession:
    """Flip the per-axis cross-over flags when the far edge passes the anchor."""
    x_cross_over = session.x_cross_over
    x_signed = -abs(session.crop_start_width) - session.x_diff_pc
    if (not x_cross_over and x_signed >= 0) or (x_cross_over and x_signed <= 0):
        x_cross_over = not x_cross_over

    y_cross_over = session.y_cross_over
    y_signed = -abs(session.crop_start_height) - session.y_diff_pc
    if (not y_cross_over and y_signed >= 0) or (y_cross_over and y_signed <= 0):
        y_cross_over = not y_cross_over

    swap_x = x_cross_over != session.start_x_cross_over
    swap_y = y_cross_over != session.start_y_cross_over
    ord = session.ord

    return replace(
        session,
        x_cross_over=x_cross_over,
        y_cross_over=y_cross_over,
        inversed_x_ord=inverse_ord(ord) if swap_x and ord is not None else None,
        inversed_y_ord=inverse_ord(ord) if swap_y and ord is not None else None,
    )


def resize_crop(
    session: DragSession,
    crop: Crop,
    frame: ImageFrame,
    constraints: CropConstraints,
) -> tuple[Crop, DragSession]:
    """Resize ``crop`` from the session's handle.

    ``crop`` is the last committed crop; it supplies the aspect and the
    reference edges used while an axis is crossed over.
    """
    # For inversed handles shift the delta so the same formula applies.
    x_diff = session.x_diff_pc
    y_diff = session.y_diff_pc
    if session.x_inversed:
        x_diff -= session.crop_start_width * 2
    if session.y_inversed:
        y_diff -= session.crop_start_height * 2
    session = replace(session, x_diff_pc=x_diff, y_diff_pc=y_diff)

    width, height = new_size(session, crop, frame, constraints)

    # Keep the anchored edge visually still as the size grows inverted.
    new_x = session.crop_start_x
    new_y = session.crop_start_y

    if session.x_cross_over:
        new_x = crop.x + (crop.width - width)

    if session.y_cross_over:
        # Continuity heuristic: removes the jump when crossing diagonally and
        # keeps fast sw->ne aspect drags on track. Not a geometric identity.
        if session.last_y_cross_over is False:
            new_y = crop.y - height
        else:
            new_y = crop.y + (crop.height - height)

    contained = contain_crop(
        crop,
        Crop(x=new_x, y=new_y, width=width, height=height, aspect=crop.aspect),
        frame.aspect,
    )

    ord = session.ord
    if crop.aspect or ord in XY_ORDS:
        next_crop = replace(
            crop,
            x=contained.x,
            y=contained.y,
            width=contained.width,
            height=contained.height,
        )
    elif ord in X_ORDS:
        next_crop = replace(crop, x=contained.x, width=contained.width)
    elif ord in Y_ORDS:
        next_crop = replace(crop, y=contained.y, height=contained.height)
    else:
        next_crop = crop

    session = replace(session, last_y_cross_over=session.y_cross_over)
    return next_crop, cross_over_check(session)


def straighten_y_path(session: DragSession, frame: ImageFrame, client_x: float) -> float:
    """Project the pointer onto the start rect's diagonal for aspect resizes.

    Returns the y the pointer would have on that line at ``client_x``.
    """
    offset_left, offset_top = session.crop_offset or (frame.left, frame.top)
    start_width = (session.crop_start_width / 100) * frame.width
    start_height = (session.crop_start_height / 100) * frame.height

    if session.ord in (Ordinal.NW, Ordinal.SE):
        k = start_height / start_width
        d = offset_top - offset_left * k
    else:
        k = -start_height / start_width
        d = offset_top + (start_height - offset_left * k)

    return k * client_x + d


def nudge_crop(crop: Crop | None, key: int) -> Crop | None:
    """Move a valid crop one step for an arrow key.

    Returns None when the crop is invalid or the key isn't an arrow.
    """
    if crop is None or not is_crop_valid(crop):
        return None
    delta = _NUDGE_DELTAS.get(int(key))
    if delta is None:
        return None

    dx, dy = delta
    return replace(
        crop,
        x=clamp(crop.x + dx, 0, 100 - crop.width),
        y=clamp(crop.y + dy, 0, 100 - crop.height),
    )
