"""CropWidget input handling, driven by direct event-handler calls."""

from __future__ import annotations

import pytest

pytest.importorskip("PySide6")

from PySide6.QtCore import QEvent, QPointF, Qt
from PySide6.QtGui import QColor, QFocusEvent, QKeyEvent, QMouseEvent, QPixmap

from image_cropz.crop.ui_crop import CropWidget
from image_cropz.ops.crop_model import Crop, Ordinal, PixelCrop


def _mouse(kind: QEvent.Type, x: float, y: float, button=Qt.MouseButton.LeftButton) -> QMouseEvent:
    buttons = Qt.MouseButton.NoButton if kind == QEvent.Type.MouseButtonRelease else Qt.MouseButton.LeftButton
    pos = QPointF(x, y)
    return QMouseEvent(kind, pos, pos, button, buttons, Qt.KeyboardModifier.NoModifier)


def _press(w: CropWidget, x: float, y: float) -> None:
    w.mousePressEvent(_mouse(QEvent.Type.MouseButtonPress, x, y))


def _move(w: CropWidget, x: float, y: float) -> None:
    w.mouseMoveEvent(_mouse(QEvent.Type.MouseMove, x, y, Qt.MouseButton.NoButton))


def _release(w: CropWidget, x: float, y: float) -> None:
    w.mouseReleaseEvent(_mouse(QEvent.Type.MouseButtonRelease, x, y))


def _xywh(crop: Crop | None) -> tuple[float, float, float, float]:
    assert crop is not None
    return (crop.x, crop.y, crop.width, crop.height)


@pytest.fixture
def widget(qtbot):
    w = CropWidget()
    qtbot.addWidget(w)
    # Same size as the pixmap so the image fills the widget exactly.
    w.resize(200, 100)
    pix = QPixmap(200, 100)
    pix.fill(QColor(40, 80, 120))
    w.set_pixmap(pix)
    return w


def test_image_rect_fits_and_centres(qtbot) -> None:
    w = CropWidget()
    qtbot.addWidget(w)
    w.resize(400, 400)
    assert w.frame() is None

    w.set_pixmap(QPixmap(200, 100))
    rect = w.image_rect()
    assert (rect.left(), rect.top(), rect.width(), rect.height()) == (0.0, 100.0, 400.0, 200.0)

    frame = w.frame()
    assert frame is not None
    assert (frame.natural_width, frame.natural_height) == (200, 100)


def test_set_pixmap_reports_image_loaded(qtbot) -> None:
    w = CropWidget()
    qtbot.addWidget(w)
    w.resize(200, 100)
    w.set_crop(Crop(x=10, y=10, width=50, height=50))

    loaded: list[tuple[object, object]] = []
    w.imageLoaded.connect(lambda frame, px: loaded.append((frame, px)))
    w.set_pixmap(QPixmap(200, 100))

    assert len(loaded) == 1
    assert loaded[0][1] == PixelCrop(20, 10, 100, 50)


def test_draw_new_selection(widget: CropWidget) -> None:
    completed: list[tuple[object, object]] = []
    events: list[str] = []
    widget.cropCompleted.connect(lambda c, px: completed.append((c, px)))
    widget.dragStarted.connect(lambda: events.append("start"))
    widget.dragEnded.connect(lambda: events.append("end"))

    _press(widget, 40, 20)
    assert widget.state.active is True
    assert _xywh(widget.crop()) == (20, 20, 0, 0)

    _move(widget, 80, 40)
    _move(widget, 120, 60)
    _release(widget, 120, 60)

    assert widget.state.active is False
    assert _xywh(widget.crop()) == pytest.approx((20, 20, 40, 40))
    assert events == ["start", "end"]
    assert completed[-1][1] == PixelCrop(40, 20, 80, 40)


def test_drag_moves_selection(widget: CropWidget) -> None:
    widget.set_crop(Crop(x=20, y=20, width=40, height=40))

    _press(widget, 80, 40)
    _move(widget, 100, 50)
    _release(widget, 100, 50)

    assert _xywh(widget.crop()) == pytest.approx((30, 30, 40, 40))


def test_resize_from_edge_bar(widget: CropWidget) -> None:
    widget.set_crop(Crop(x=20, y=20, width=40, height=40))

    # Bottom edge, away from any corner handle.
    _press(widget, 100, 60)
    assert widget.engine.effective_ord is Ordinal.S
    _move(widget, 100, 80)
    _release(widget, 100, 80)

    assert _xywh(widget.crop()) == pytest.approx((20, 20, 40, 60))


@pytest.mark.parametrize(
    ("pos", "expected"),
    [
        ((120, 60), (True, Ordinal.SE)),
        ((40, 20), (True, Ordinal.NW)),
        ((80, 20), (True, Ordinal.N)),
        ((100, 20), (True, Ordinal.N)),
        ((120, 50), (True, Ordinal.E)),
        ((80, 40), (True, None)),
        ((10, 90), (False, None)),
    ],
)
def test_hit_test(widget: CropWidget, pos: tuple[float, float], expected) -> None:
    widget.set_crop(Crop(x=20, y=20, width=40, height=40))
    assert widget.hit_test(QPointF(*pos)) == expected


def test_arrow_keys_nudge(widget: CropWidget) -> None:
    widget.set_crop(Crop(x=20, y=20, width=40, height=40))
    completed: list[object] = []
    widget.cropCompleted.connect(lambda c, _px: completed.append(c))

    event = QKeyEvent(QEvent.Type.KeyPress, Qt.Key.Key_Right, Qt.KeyboardModifier.NoModifier)
    widget.keyPressEvent(event)

    assert _xywh(widget.crop()) == pytest.approx((20.2, 20, 40, 40))
    assert len(completed) == 1


def test_set_crop_resolves_aspect(widget: CropWidget) -> None:
    completed: list[tuple[object, object]] = []
    widget.cropCompleted.connect(lambda c, px: completed.append((c, px)))

    widget.set_crop(Crop(width=50, aspect=2))

    crop = widget.crop()
    assert _xywh(crop) == pytest.approx((0, 0, 50, 50))
    assert crop is not None and crop.aspect == 2
    assert completed[-1][1] == PixelCrop(0, 0, 100, 50)


def test_disabled_ignores_pointer(widget: CropWidget) -> None:
    widget.set_crop(Crop(x=20, y=20, width=40, height=40))
    widget.set_disabled(True)

    assert widget.hit_test(QPointF(80, 40)) == (False, None)
    _press(widget, 80, 40)
    assert not widget.engine.is_active
    assert widget.state.disabled is True


def test_keep_selection_blocks_new_selection(widget: CropWidget) -> None:
    widget.set_crop(Crop(x=20, y=20, width=40, height=40))
    widget.set_keep_selection(True)

    # Outside the selection but on the image.
    _press(widget, 180, 90)
    assert not widget.engine.is_active
    assert _xywh(widget.crop()) == (20, 20, 40, 40)


def test_focus_out_cancels_gesture(widget: CropWidget) -> None:
    widget.set_crop(Crop(x=20, y=20, width=40, height=40))
    completed: list[object] = []
    widget.cropCompleted.connect(lambda c, _px: completed.append(c))

    _press(widget, 80, 40)
    assert widget.state.active is True

    widget.focusOutEvent(QFocusEvent(QEvent.Type.FocusOut, Qt.FocusReason.OtherFocusReason))

    assert widget.state.active is False
    assert not widget.engine.is_active
    assert completed == []


def test_paint_does_not_raise(widget: CropWidget) -> None:
    widget.set_crop(Crop(x=20, y=20, width=40, height=40))
    img = widget.grab()
    assert not img.isNull()
