"""Crop selection widget.

Paints an image with its crop selection and feeds mouse/keyboard input to
`CropEngine`. The committed crop lives in a `CropState`.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from PySide6.QtCore import QPointF, QRectF, Qt, Signal
from PySide6.QtGui import QBrush, QColor, QCursor, QPainter, QPainterPath, QPen, QPixmap
from PySide6.QtWidgets import QSizePolicy, QWidget

from image_cropz.app.state.crop_state import CropState
from image_cropz.logger import get_logger
from image_cropz.ops.crop_engine import CropEngine
from image_cropz.ops.crop_model import (
    ArrowKey,
    Crop,
    CropConstraints,
    ImageFrame,
    Ordinal,
    PixelCrop,
    is_crop_valid,
)

if TYPE_CHECKING:
    from PySide6.QtGui import QFocusEvent, QKeyEvent, QMouseEvent, QPaintEvent

_logger = get_logger("ui_crop")

_KEY_MAP = {
    int(Qt.Key.Key_Left): ArrowKey.LEFT,
    int(Qt.Key.Key_Up): ArrowKey.UP,
    int(Qt.Key.Key_Right): ArrowKey.RIGHT,
    int(Qt.Key.Key_Down): ArrowKey.DOWN,
}

_CURSOR_MAP = {
    Ordinal.NW: Qt.CursorShape.SizeFDiagCursor,
    Ordinal.N: Qt.CursorShape.SizeVerCursor,
    Ordinal.NE: Qt.CursorShape.SizeBDiagCursor,
    Ordinal.E: Qt.CursorShape.SizeHorCursor,
    Ordinal.SE: Qt.CursorShape.SizeFDiagCursor,
    Ordinal.S: Qt.CursorShape.SizeVerCursor,
    Ordinal.SW: Qt.CursorShape.SizeBDiagCursor,
    Ordinal.W: Qt.CursorShape.SizeHorCursor,
}


class CropWidget(QWidget):
    """Image view with an interactive crop selection.

    Signals mirror the engine callbacks:
    - cropChanged(Crop) on every move/nudge/resolve
    - cropCompleted(Crop, PixelCrop | None) when a gesture or nudge finishes
    - imageLoaded(ImageFrame, PixelCrop | None) after `set_pixmap`
    """

    cropChanged = Signal(object)
    cropCompleted = Signal(object, object)
    imageLoaded = Signal(object, object)
    dragStarted = Signal()
    dragEnded = Signal()

    HANDLE_SIZE = 10
    HIT_PADDING = 6.0

    def __init__(
        self,
        parent: QWidget | None = None,
        *,
        state: CropState | None = None,
        constraints: CropConstraints | None = None,
    ) -> None:
        super().__init__(parent)
        self._state = state or CropState(self)
        self._pixmap = QPixmap()
        self._engine = CropEngine(
            on_change=self._on_engine_change,
            on_complete=self._on_engine_complete,
            on_image_loaded=self._on_engine_image_loaded,
            on_drag_start=self.dragStarted.emit,
            on_drag_end=self.dragEnded.emit,
            constraints=constraints,
            disabled=self._state._get_disabled(),
            keep_selection=self._state._get_keep_selection(),
        )

        self.setFocusPolicy(Qt.FocusPolicy.StrongFocus)
        self.setMouseTracking(True)
        self.setSizePolicy(QSizePolicy.Policy.Expanding, QSizePolicy.Policy.Expanding)
        self._state.cropChanged.connect(lambda _crop: self.update())

    # ---- accessors ----
    @property
    def state(self) -> CropState:
        return self._state

    @property
    def engine(self) -> CropEngine:
        return self._engine

    def pixmap(self) -> QPixmap:
        return self._pixmap

    def crop(self) -> Crop | None:
        return self._state.crop()

    def set_pixmap(self, pixmap: QPixmap) -> None:
        """Show ``pixmap`` and resolve the current crop against it."""
        self._engine.cancel()
        self._state._set_active(False)
        self._pixmap = QPixmap(pixmap)
        self.update()
        frame = self.frame()
        if frame is None:
            _logger.debug("set_pixmap: empty pixmap or widget, skipping image_loaded")
            return
        self._engine.image_loaded(self.crop(), frame)

    def set_crop(self, crop: Crop | None) -> None:
        """Replace the committed crop (host assignment)."""
        self._state._set_crop(crop)
        frame = self.frame()
        if frame is not None:
            self._engine.crop_updated(self.crop(), frame)
        self.update()

    def set_disabled(self, value: bool) -> None:
        self._engine.disabled = bool(value)
        self._state._set_disabled(value)
        if value:
            self._engine.cancel()
            self._state._set_active(False)
        self.update()

    def set_keep_selection(self, value: bool) -> None:
        self._engine.keep_selection = bool(value)
        self._state._set_keep_selection(value)

    def set_constraints(self, constraints: CropConstraints) -> None:
        self._engine.constraints = constraints

    # ---- geometry ----
    def image_rect(self) -> QRectF:
        """Where the pixmap is drawn: fitted to the widget and centred."""
        if self._pixmap.isNull() or self.width() <= 0 or self.height() <= 0:
            return QRectF()
        pw = float(self._pixmap.width())
        ph = float(self._pixmap.height())
        scale = min(self.width() / pw, self.height() / ph)
        w = pw * scale
        h = ph * scale
        return QRectF((self.width() - w) / 2.0, (self.height() - h) / 2.0, w, h)

    def frame(self) -> ImageFrame | None:
        rect = self.image_rect()
        if rect.isEmpty():
            return None
        return ImageFrame(
            width=rect.width(),
            height=rect.height(),
            left=rect.left(),
            top=rect.top(),
            natural_width=self._pixmap.width(),
            natural_height=self._pixmap.height(),
        )

    def selection_rect(self) -> QRectF | None:
        crop = self.crop()
        rect = self.image_rect()
        if crop is None or rect.isEmpty():
            return None
        return QRectF(
            rect.left() + crop.x / 100.0 * rect.width(),
            rect.top() + crop.y / 100.0 * rect.height(),
            crop.width / 100.0 * rect.width(),
            crop.height / 100.0 * rect.height(),
        )

    def handle_points(self) -> dict[Ordinal, QPointF]:
        sel = self.selection_rect()
        if sel is None:
            return {}
        cx = sel.center().x()
        cy = sel.center().y()
        return {
            Ordinal.NW: sel.topLeft(),
            Ordinal.N: QPointF(cx, sel.top()),
            Ordinal.NE: sel.topRight(),
            Ordinal.E: QPointF(sel.right(), cy),
            Ordinal.SE: sel.bottomRight(),
            Ordinal.S: QPointF(cx, sel.bottom()),
            Ordinal.SW: sel.bottomLeft(),
            Ordinal.W: QPointF(sel.left(), cy),
        }

    def hit_test(self, pos: QPointF) -> tuple[bool, Ordinal | None]:
        """Return (on_selection, handle) for a widget position.

        Handles and the four edge bars resize; the interior moves.
        """
        if self._engine.disabled or not is_crop_valid(self.crop()):
            return False, None
        sel = self.selection_rect()
        if sel is None:
            return False, None

        reach = self.HANDLE_SIZE / 2.0 + self.HIT_PADDING / 2.0
        for ord, pt in self.handle_points().items():
            if abs(pos.x() - pt.x()) <= reach and abs(pos.y() - pt.y()) <= reach:
                return True, ord

        pad = self.HIT_PADDING
        within_x = sel.left() - pad <= pos.x() <= sel.right() + pad
        within_y = sel.top() - pad <= pos.y() <= sel.bottom() + pad
        if within_x and abs(pos.y() - sel.top()) <= pad:
            return True, Ordinal.N
        if within_x and abs(pos.y() - sel.bottom()) <= pad:
            return True, Ordinal.S
        if within_y and abs(pos.x() - sel.left()) <= pad:
            return True, Ordinal.W
        if within_y and abs(pos.x() - sel.right()) <= pad:
            return True, Ordinal.E

        if sel.contains(pos):
            return True, None
        return False, None

    # ---- engine callbacks ----
    def _on_engine_change(self, crop: Crop) -> None:
        self._state._set_crop(crop)
        self.cropChanged.emit(crop)
        self.update()

    def _on_engine_complete(self, crop: Crop, pixel_crop: PixelCrop | None) -> None:
        self.cropCompleted.emit(crop, pixel_crop)

    def _on_engine_image_loaded(self, frame: ImageFrame, pixel_crop: PixelCrop | None) -> None:
        self.imageLoaded.emit(frame, pixel_crop)

    # ---- Qt events ----
    def mousePressEvent(self, event: QMouseEvent) -> None:  # type: ignore[override]
        if event.button() != Qt.MouseButton.LeftButton:
            super().mousePressEvent(event)
            return
        frame = self.frame()
        if frame is None or self._engine.disabled:
            return

        # Focus for nudging with the arrow keys.
        self.setFocus(Qt.FocusReason.MouseFocusReason)
        pos = event.position()
        crop = self.crop()

        on_selection, ord = self.hit_test(pos)
        if on_selection:
            started = self._engine.pointer_down_on_crop(crop, frame, pos.x(), pos.y(), ord)
        elif self.image_rect().contains(pos):
            started = self._engine.pointer_down_on_image(crop, frame, pos.x(), pos.y())
        else:
            started = False

        if started:
            self._state._set_active(True)
            self._update_cursor(pos)
            event.accept()

    def mouseMoveEvent(self, event: QMouseEvent) -> None:  # type: ignore[override]
        pos = event.position()
        if self._engine.is_active:
            frame = self.frame()
            if frame is not None:
                self._engine.pointer_move(self.crop(), frame, pos.x(), pos.y())
            event.accept()
        self._update_cursor(pos)

    def mouseReleaseEvent(self, event: QMouseEvent) -> None:  # type: ignore[override]
        if event.button() != Qt.MouseButton.LeftButton:
            super().mouseReleaseEvent(event)
            return
        if self._engine.is_active:
            self._engine.pointer_up(self.crop(), self.frame())
            self._state._set_active(False)
            event.accept()
        self._update_cursor(event.position())

    def keyPressEvent(self, event: QKeyEvent) -> None:  # type: ignore[override]
        key = _KEY_MAP.get(int(event.key()))
        if key is not None and self._engine.key_down(self.crop(), self.frame(), key) is not None:
            event.accept()
            return
        super().keyPressEvent(event)

    def focusOutEvent(self, event: QFocusEvent) -> None:  # type: ignore[override]
        if self._engine.cancel():
            self._state._set_active(False)
        super().focusOutEvent(event)

    def _update_cursor(self, pos: QPointF) -> None:
        if self._engine.disabled:
            self.unsetCursor()
            return
        if self._engine.is_active:
            ord = self._engine.effective_ord
            shape = _CURSOR_MAP.get(ord, Qt.CursorShape.SizeAllCursor) if ord else Qt.CursorShape.SizeAllCursor
            self.setCursor(QCursor(shape))
            return
        on_selection, ord = self.hit_test(pos)
        if on_selection:
            self.setCursor(QCursor(_CURSOR_MAP[ord] if ord else Qt.CursorShape.SizeAllCursor))
        elif self.image_rect().contains(pos):
            self.setCursor(QCursor(Qt.CursorShape.CrossCursor))
        else:
            self.unsetCursor()

    # ---- painting ----
    def paintEvent(self, event: QPaintEvent) -> None:  # type: ignore[override]
        painter = QPainter(self)
        try:
            painter.setRenderHint(QPainter.RenderHint.SmoothPixmapTransform, True)
            img_rect = self.image_rect()
            if img_rect.isEmpty():
                return
            painter.drawPixmap(img_rect, self._pixmap, QRectF(self._pixmap.rect()))

            crop = self.crop()
            shade = QColor(0, 0, 0, 128)
            if not is_crop_valid(crop):
                # Nothing selected yet while drawing: shade the whole image.
                if self._state._get_active():
                    painter.fillRect(img_rect, shade)
                return

            sel = self.selection_rect()
            if sel is None:
                return
            outside = QPainterPath()
            outside.addRect(img_rect)
            outside.addRect(sel)
            outside.setFillRule(Qt.FillRule.OddEvenFill)
            painter.fillPath(outside, shade)

            pen = QPen(QColor(255, 255, 255, 220), 1, Qt.PenStyle.DashLine)
            painter.setPen(pen)
            painter.setBrush(Qt.BrushStyle.NoBrush)
            painter.drawRect(sel)

            if self._engine.disabled:
                return
            half = self.HANDLE_SIZE / 2.0
            painter.setPen(QPen(QColor(0, 0, 0, 255), 1))
            painter.setBrush(QBrush(QColor(255, 255, 255, 255)))
            for pt in self.handle_points().values():
                painter.drawRect(QRectF(pt.x() - half, pt.y() - half, self.HANDLE_SIZE, self.HANDLE_SIZE))
        finally:
            painter.end()
