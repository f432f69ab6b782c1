"""Crop interaction engine.

Owns the single active drag session and turns host events into crop updates.
The host owns the committed crop: every call receives the current crop and
frame, and new crops are reported through callbacks within the same call.
"""

from __future__ import annotations

from collections.abc import Callable

from image_cropz.logger import get_logger

from .crop_controller import drag_crop, nudge_crop, resize_crop, straighten_y_path
from .crop_geometry import pixel_crop, resolve_crop
from .crop_model import Crop, CropConstraints, ImageFrame, Ordinal, PixelCrop, is_crop_valid
from .crop_session import DragSession, start_crop_drag, start_new_crop, with_pointer

_logger = get_logger("crop_engine")

ChangeCallback = Callable[[Crop], None]
CompleteCallback = Callable[[Crop, PixelCrop | None], None]
ImageLoadedCallback = Callable[[ImageFrame, PixelCrop | None], None]


def _noop(*_args: object) -> None:
    return None


class CropEngine:
    """Event-driven crop gesture engine.

    Callbacks:
    - on_change(crop): every move, nudge and resolve.
    - on_complete(crop, pixel_crop): pointer-up, nudge and resolve.
    - on_image_loaded(frame, pixel_crop): after ``image_loaded``.
    - on_drag_start() / on_drag_end(): gesture boundaries.
    """

    def __init__(
        self,
        *,
        on_change: ChangeCallback,
        on_complete: CompleteCallback | None = None,
        on_image_loaded: ImageLoadedCallback | None = None,
        on_drag_start: Callable[[], None] | None = None,
        on_drag_end: Callable[[], None] | None = None,
        constraints: CropConstraints | None = None,
        disabled: bool = False,
        keep_selection: bool = False,
    ) -> None:
        self._on_change = on_change
        self._on_complete = on_complete or _noop
        self._on_image_loaded = on_image_loaded or _noop
        self._on_drag_start = on_drag_start or _noop
        self._on_drag_end = on_drag_end or _noop

        self.constraints = constraints or CropConstraints()
        self.disabled = bool(disabled)
        self.keep_selection = bool(keep_selection)

        self._session: DragSession | None = None

    @property
    def session(self) -> DragSession | None:
        return self._session

    @property
    def is_active(self) -> bool:
        return self._session is not None

    @property
    def effective_ord(self) -> Ordinal | None:
        return self._session.effective_ord if self._session is not None else None

    # ---- image / crop lifecycle ----
    def image_loaded(self, crop: Crop | None, frame: ImageFrame) -> Crop | None:
        resolved = self.crop_updated(crop, frame)
        self._on_image_loaded(frame, pixel_crop(frame, resolved))
        return resolved

    def crop_updated(self, crop: Crop | None, frame: ImageFrame) -> Crop | None:
        """Resolve an aspect-only crop; reports it when anything changed."""
        resolved = resolve_crop(crop, frame)
        if resolved is not crop and resolved is not None:
            _logger.debug("crop resolved: %s -> %s", crop, resolved)
            self._on_change(resolved)
            self._on_complete(resolved, pixel_crop(frame, resolved))
        return resolved

    # ---- pointer gestures ----
    def pointer_down_on_image(self, crop: Crop | None, frame: ImageFrame, client_x: float, client_y: float) -> bool:
        """Start drawing a new selection. Returns True if a session began."""
        if self.disabled or (self.keep_selection and is_crop_valid(crop)):
            return False
        if frame.is_empty or self._session is not None:
            return False

        next_crop, self._session = start_new_crop(crop, frame, client_x, client_y)
        _logger.debug("new selection at %.2f,%.2f", next_crop.x, next_crop.y)
        self._on_change(next_crop)
        return True

    def pointer_down_on_crop(
        self,
        crop: Crop | None,
        frame: ImageFrame,
        client_x: float,
        client_y: float,
        ord: Ordinal | None = None,
    ) -> bool:
        """Start resizing from ``ord``, or moving the crop when ``ord`` is None."""
        if self.disabled or crop is None or not is_crop_valid(crop):
            return False
        if frame.is_empty or self._session is not None:
            return False

        self._session = start_crop_drag(crop, frame, client_x, client_y, ord)
        _logger.debug("crop %s started: ord=%s", "resize" if ord else "move", ord.value if ord else None)
        return True

    def pointer_move(self, crop: Crop | None, frame: ImageFrame, client_x: float, client_y: float) -> Crop | None:
        session = self._session
        if self.disabled or session is None or crop is None or frame.is_empty:
            return None

        if not session.moved:
            self._on_drag_start()

        if session.is_resize and crop.aspect and session.crop_offset and session.crop_start_width:
            client_y = straighten_y_path(session, frame, client_x)

        session = with_pointer(session, frame, client_x, client_y)
        if session.is_resize:
            next_crop, session = resize_crop(session, crop, frame, self.constraints)
        else:
            next_crop = drag_crop(session, crop)

        self._session = session
        self._on_change(next_crop)
        return next_crop

    def pointer_up(self, crop: Crop | None, frame: ImageFrame | None) -> bool:
        """Finish the gesture and report the final crop. Returns True if one was active."""
        self._on_drag_end()
        if self.disabled or self._session is None:
            return False

        self._session = None
        _logger.debug("crop gesture completed: %s", crop)
        if crop is not None:
            self._on_complete(crop, pixel_crop(frame, crop))
        return True

    def cancel(self) -> bool:
        """Drop the active session without reporting a completed crop."""
        if self._session is None:
            return False
        self._session = None
        _logger.debug("crop gesture cancelled")
        self._on_drag_end()
        return True

    # ---- keyboard ----
    def key_down(self, crop: Crop | None, frame: ImageFrame | None, key: int) -> Crop | None:
        """Nudge the crop for an arrow key; returns the nudged crop or None."""
        if self.disabled:
            return None
        next_crop = nudge_crop(crop, key)
        if next_crop is None:
            return None

        self._on_change(next_crop)
        self._on_complete(next_crop, pixel_crop(frame, next_crop))
        return next_crop
