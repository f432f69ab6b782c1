from __future__ import annotations

from PySide6.QtCore import Property, QObject, Signal

from image_cropz.ops.crop_model import Crop


class CropState(QObject):
    """Host-owned crop bound by the crop UI.

    Design:
    - The committed crop is stored in percent (0..100) of the displayed image.
    - The engine never holds this object; it receives `crop()` and its results
      are written back through `_set_crop`.
    - `aspect` of 0.0 on the Qt side means free (no constraint).
    """

    activeChanged = Signal(bool)
    disabledChanged = Signal(bool)
    keepSelectionChanged = Signal(bool)

    rectXChanged = Signal(float)
    rectYChanged = Signal(float)
    rectWChanged = Signal(float)
    rectHChanged = Signal(float)
    aspectChanged = Signal(float)

    cropChanged = Signal(object)

    def __init__(self, parent: QObject | None = None) -> None:
        super().__init__(parent)
        self._active = False
        self._disabled = False
        self._keep_selection = False
        self._has_crop = False

        self._x = 0.0
        self._y = 0.0
        self._w = 0.0
        self._h = 0.0
        self._aspect = 0.0

    # ---- read-only properties (mutate via helpers) ----
    def _get_active(self) -> bool:
        return bool(self._active)

    active = Property(bool, _get_active, notify=activeChanged)  # type: ignore[arg-type]

    def _get_disabled(self) -> bool:
        return bool(self._disabled)

    disabled = Property(bool, _get_disabled, notify=disabledChanged)  # type: ignore[arg-type]

    def _get_keep_selection(self) -> bool:
        return bool(self._keep_selection)

    keepSelection = Property(bool, _get_keep_selection, notify=keepSelectionChanged)  # type: ignore[arg-type]

    def _get_x(self) -> float:
        return float(self._x)

    rectX = Property(float, _get_x, notify=rectXChanged)  # type: ignore[arg-type]

    def _get_y(self) -> float:
        return float(self._y)

    rectY = Property(float, _get_y, notify=rectYChanged)  # type: ignore[arg-type]

    def _get_w(self) -> float:
        return float(self._w)

    rectW = Property(float, _get_w, notify=rectWChanged)  # type: ignore[arg-type]

    def _get_h(self) -> float:
        return float(self._h)

    rectH = Property(float, _get_h, notify=rectHChanged)  # type: ignore[arg-type]

    def _get_aspect(self) -> float:
        return float(self._aspect)

    aspect = Property(float, _get_aspect, notify=aspectChanged)  # type: ignore[arg-type]

    def crop(self) -> Crop | None:
        """Return the committed crop, or None when no crop was ever set."""
        if not self._has_crop:
            return None
        return Crop(
            x=self._x,
            y=self._y,
            width=self._w,
            height=self._h,
            aspect=self._aspect or None,
        )

    # ---- mutation helpers ----
    def _set_active(self, value: bool) -> None:
        v = bool(value)
        if v == self._active:
            return
        self._active = v
        self.activeChanged.emit(v)

    def _set_disabled(self, value: bool) -> None:
        v = bool(value)
        if v == self._disabled:
            return
        self._disabled = v
        self.disabledChanged.emit(v)

    def _set_keep_selection(self, value: bool) -> None:
        v = bool(value)
        if v == self._keep_selection:
            return
        self._keep_selection = v
        self.keepSelectionChanged.emit(v)

    def _set_crop(self, crop: Crop | None) -> None:
        if crop is None:
            if self._has_crop:
                self._has_crop = False
                self._set_rect(0.0, 0.0, 0.0, 0.0)
                self.cropChanged.emit(None)
            return

        changed = not self._has_crop or crop != self.crop()
        self._has_crop = True
        self._set_rect(crop.x, crop.y, crop.width, crop.height)
        self._set_aspect(crop.aspect or 0.0)
        if changed:
            self.cropChanged.emit(crop)

    def _set_rect(self, x: float, y: float, w: float, h: float) -> None:
        nx = float(x)
        ny = float(y)
        nw = float(w)
        nh = float(h)

        if nx != self._x:
            self._x = nx
            self.rectXChanged.emit(nx)
        if ny != self._y:
            self._y = ny
            self.rectYChanged.emit(ny)
        if nw != self._w:
            self._w = nw
            self.rectWChanged.emit(nw)
        if nh != self._h:
            self._h = nh
            self.rectHChanged.emit(nh)

    def _set_aspect(self, value: float) -> None:
        r = float(value)
        if r == self._aspect:
            return
        self._aspect = r
        self.aspectChanged.emit(r)
