"""Drag/resize session captured between pointer-down and pointer-up.

A session is immutable; every pointer move produces a new one.
"""

from __future__ import annotations

from dataclasses import dataclass, replace

from .crop_model import Crop, ImageFrame, Ordinal


@dataclass(frozen=True, slots=True)
class DragSession:
    client_start_x: float
    client_start_y: float
    # Anchor of the gesture: for an inversed axis this is the far edge.
    crop_start_x: float
    crop_start_y: float
    crop_start_width: float
    crop_start_height: float
    x_inversed: bool = False
    y_inversed: bool = False
    x_cross_over: bool = False
    y_cross_over: bool = False
    start_x_cross_over: bool = False
    start_y_cross_over: bool = False
    is_resize: bool = True
    ord: Ordinal | None = None
    # Pixel position of the crop's top-left; only set for aspect-locked crops.
    crop_offset: tuple[float, float] | None = None
    x_diff_pc: float = 0.0
    y_diff_pc: float = 0.0
    last_y_cross_over: bool | None = None
    inversed_x_ord: Ordinal | None = None
    inversed_y_ord: Ordinal | None = None
    moved: bool = False

    @property
    def effective_ord(self) -> Ordinal | None:
        """Handle the pointer is effectively dragging after any cross-over."""
        return self.inversed_x_ord or self.inversed_y_ord or self.ord


def client_to_percent(frame: ImageFrame, client_x: float, client_y: float) -> tuple[float, float]:
    return (
        (client_x - frame.left) / frame.width * 100,
        (client_y - frame.top) / frame.height * 100,
    )


def start_new_crop(
    crop: Crop | None, frame: ImageFrame, client_x: float, client_y: float
) -> tuple[Crop, DragSession]:
    """Begin drawing a fresh selection at the pointer.

    The new crop is zero-sized and keeps the aspect of ``crop``. The gesture
    is always a resize from the ``nw`` handle.
    """
    x_pc, y_pc = client_to_percent(frame, client_x, client_y)
    next_crop = Crop(
        x=x_pc,
        y=y_pc,
        width=0.0,
        height=0.0,
        aspect=crop.aspect if crop is not None else None,
    )
    session = DragSession(
        client_start_x=client_x,
        client_start_y=client_y,
        crop_start_x=next_crop.x,
        crop_start_y=next_crop.y,
        crop_start_width=next_crop.width,
        crop_start_height=next_crop.height,
        is_resize=True,
        ord=Ordinal.NW,
    )
    return next_crop, session


def start_crop_drag(
    crop: Crop,
    frame: ImageFrame,
    client_x: float,
    client_y: float,
    ord: Ordinal | None = None,
) -> DragSession:
    """Begin resizing ``crop`` from handle ``ord``, or moving it when ``ord`` is None."""
    x_inversed = ord is not None and ord.x_inversed
    y_inversed = ord is not None and ord.y_inversed

    crop_offset = None
    if crop.aspect:
        crop_offset = (
            frame.left + crop.x / 100 * frame.width,
            frame.top + crop.y / 100 * frame.height,
        )

    return DragSession(
        client_start_x=client_x,
        client_start_y=client_y,
        crop_start_x=crop.x + crop.width if x_inversed else crop.x,
        crop_start_y=crop.y + crop.height if y_inversed else crop.y,
        crop_start_width=crop.width,
        crop_start_height=crop.height,
        x_inversed=x_inversed,
        y_inversed=y_inversed,
        x_cross_over=x_inversed,
        y_cross_over=y_inversed,
        start_x_cross_over=x_inversed,
        start_y_cross_over=y_inversed,
        is_resize=ord is not None,
        ord=ord,
        crop_offset=crop_offset,
    )


def with_pointer(session: DragSession, frame: ImageFrame, client_x: float, client_y: float) -> DragSession:
    """Record the percent delta from the gesture start to the pointer."""
    return replace(
        session,
        x_diff_pc=(client_x - session.client_start_x) / frame.width * 100,
        y_diff_pc=(client_y - session.client_start_y) / frame.height * 100,
        moved=True,
    )
