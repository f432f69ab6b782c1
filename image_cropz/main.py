import argparse
import os
import sys
from pathlib import Path

from PySide6.QtGui import QPixmap
from PySide6.QtWidgets import QApplication, QMainWindow, QMessageBox

from image_cropz.crop import IMAGE_SUFFIXES, apply_crop_to_file, crop_data_url, encode_crop
from image_cropz.crop.ui_crop import CropWidget
from image_cropz.logger import get_logger, setup_logger
from image_cropz.ops.crop_model import Crop, PixelCrop
from image_cropz.settings_manager import SettingsManager

# --- CLI logging options -----------------------------------------------------
# To prevent Qt from exiting due to unknown options, we preemptively parse
# our own options, reflect them in environment variables (IMAGE_CROPZ_LOG_LEVEL,
# IMAGE_CROPZ_LOG_CATS), and remove them from sys.argv.


def _apply_cli_logging_options(argv: list[str]) -> list[str]:
    parser = argparse.ArgumentParser(description="Image Cropz", add_help=False)
    parser.add_argument("--log-level", help="Set log level")
    parser.add_argument("--log-cats", help="Set log categories")
    args, remaining = parser.parse_known_args(argv[1:])
    if args.log_level:
        os.environ["IMAGE_CROPZ_LOG_LEVEL"] = args.log_level
    if args.log_cats:
        os.environ["IMAGE_CROPZ_LOG_CATS"] = args.log_cats
    return [argv[0], *remaining]


logger = get_logger("main")
_BASE_DIR = Path(getattr(sys, "_MEIPASS", Path(__file__).resolve().parent))

# Initial selection shown when an image is opened.
DEFAULT_CROP = Crop(x=10, y=10, width=80, height=80)


class CropWindow(QMainWindow):
    def __init__(
        self,
        image_path: str,
        settings: SettingsManager,
        output_path: str | None = None,
        print_data_url: bool = False,
    ):
        super().__init__()
        self.setWindowTitle(f"Image Cropz - {Path(image_path).name}")
        self.image_path = image_path
        self.output_path = output_path
        self.print_data_url = print_data_url
        self._settings_manager = settings

        self.crop_widget = CropWidget(self, constraints=settings.constraints)
        self.crop_widget.set_keep_selection(settings.keep_selection)
        self.crop_widget.set_disabled(settings.disabled)
        self.crop_widget.cropCompleted.connect(self._on_crop_completed)
        self.crop_widget.imageLoaded.connect(self._on_image_loaded)
        self.setCentralWidget(self.crop_widget)

    def load(self, initial_crop: Crop | None) -> bool:
        pixmap = QPixmap(self.image_path)
        if pixmap.isNull():
            logger.error("failed to load image: %s", self.image_path)
            return False
        self.crop_widget.state._set_crop(initial_crop)
        self.crop_widget.set_pixmap(pixmap)
        return True

    def _on_image_loaded(self, frame, pixel_crop: PixelCrop | None) -> None:
        logger.info(
            "image loaded: %s %dx%d crop=%s", self.image_path, frame.source_width, frame.source_height, pixel_crop
        )
        self._export(pixel_crop)

    def _on_crop_completed(self, crop: Crop, pixel_crop: PixelCrop | None) -> None:
        logger.info(
            "crop completed: x=%.2f y=%.2f w=%.2f h=%.2f px=%s",
            crop.x,
            crop.y,
            crop.width,
            crop.height,
            pixel_crop.as_tuple() if pixel_crop else None,
        )
        self._export(pixel_crop)

    def output_target(self) -> Path | None:
        """Where crops are written; a suffix-less path gets the configured type's suffix."""
        if not self.output_path:
            return None
        target = Path(self.output_path)
        if not target.suffix:
            target = target.with_suffix(IMAGE_SUFFIXES[self._settings_manager.image_type_after_crop])
        return target

    def _export(self, pixel_crop: PixelCrop | None) -> None:
        target = self.output_target()
        if target is None and not self.print_data_url:
            return
        if pixel_crop is None or pixel_crop.width <= 0 or pixel_crop.height <= 0:
            return
        image_type = self._settings_manager.image_type_after_crop
        try:
            if target is not None:
                if target == Path(self.output_path or ""):
                    apply_crop_to_file(self.image_path, pixel_crop, str(target))
                else:
                    target.write_bytes(encode_crop(self.image_path, pixel_crop, image_type))
                    logger.info("Crop saved: %s", target)
            if self.print_data_url:
                print(crop_data_url(self.image_path, pixel_crop, image_type), flush=True)
        except Exception as e:
            logger.error("failed to export crop: %s", e, exc_info=True)
            QMessageBox.critical(self, "Save Failed", f"Failed to save cropped image:\n{e}")


def run(argv: list[str] | None = None) -> int:
    """Application entrypoint (packaging-friendly)."""
    if argv is None:
        argv = sys.argv
    argv = _apply_cli_logging_options(argv)
    # Re-read IMAGE_CROPZ_LOG_* now that the CLI may have set them.
    setup_logger()

    parser = argparse.ArgumentParser(prog="image-cropz", description="Select a crop region of an image")
    parser.add_argument("image", help="Image file to crop")
    parser.add_argument(
        "--output",
        "-o",
        help="Write each cropped region here; a path without suffix uses image_type_after_crop",
    )
    parser.add_argument("--aspect", type=float, default=None, help="Lock the crop to width/height")
    parser.add_argument("--keep-selection", action="store_true", help="Don't start a new selection over an existing one")
    parser.add_argument("--data-url", action="store_true", help="Print each cropped region as a data: URL")
    parser.add_argument("--settings", default=str(_BASE_DIR / "settings.json"), help="Settings file")
    args, qt_args = parser.parse_known_args(argv[1:])

    settings = SettingsManager(args.settings)
    if args.keep_selection:
        settings.data["keep_selection"] = True

    initial = DEFAULT_CROP
    if args.aspect and args.aspect > 0:
        # Let the engine derive height from width and the image's aspect.
        initial = Crop(x=DEFAULT_CROP.x, y=DEFAULT_CROP.y, width=DEFAULT_CROP.width, aspect=args.aspect)

    app = QApplication([argv[0], *qt_args])
    window = CropWindow(args.image, settings, output_path=args.output, print_data_url=args.data_url)
    if not window.load(initial):
        return 1
    window.resize(1024, 768)
    window.show()
    return app.exec()


if __name__ == "__main__":
    sys.exit(run())
