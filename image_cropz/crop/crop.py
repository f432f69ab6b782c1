"""Image crop export using pyvips.

Pure functions for cutting a pixel crop out of a source image, no Qt
dependencies.
"""

import base64
import contextlib
from typing import Any

from image_cropz.logger import get_logger
from image_cropz.ops.crop_model import PixelCrop

_logger = get_logger("crop")

try:
    import pyvips  # type: ignore
except Exception:
    pyvips = None  # type: ignore
    _logger.warning("pyvips is not available; crop export will raise ImportError when used")

IMAGE_SUFFIXES = {
    "jpeg": ".jpg",
    "png": ".png",
}
_MIME_TYPE = {
    "jpeg": "image/jpeg",
    "png": "image/png",
}


def _get_pyvips_module() -> Any:
    """Return the pyvips module or raise ImportError if unavailable."""
    if pyvips is None:
        _logger.error("pyvips requested but not available")
        raise ImportError("pyvips is not available")
    return pyvips


def _as_tuple(crop: PixelCrop | tuple[int, int, int, int]) -> tuple[int, int, int, int]:
    if isinstance(crop, PixelCrop):
        return crop.as_tuple()
    left, top, width, height = crop
    return int(left), int(top), int(width), int(height)


def validate_crop_bounds(img_width: int, img_height: int, crop: PixelCrop | tuple[int, int, int, int]) -> bool:
    """Validate that crop rectangle is within image bounds.

    Args:
        img_width: Source image width
        img_height: Source image height
        crop: PixelCrop or (left, top, width, height)

    Returns:
        True if crop is valid, False otherwise
    """
    left, top, width, height = _as_tuple(crop)
    if left < 0 or top < 0:
        return False
    if width <= 0 or height <= 0:
        return False
    if left + width > img_width:
        return False
    return not top + height > img_height


def _load_cropped(source_path: str, crop: PixelCrop | tuple[int, int, int, int]) -> Any:
    vips = _get_pyvips_module()

    # Configure pyvips caches to avoid memory growth
    with contextlib.suppress(Exception):
        vips.cache_set_max(0)
        vips.cache_set_max_mem(0)
        vips.cache_set_max_files(0)

    try:
        image = vips.Image.new_from_file(source_path, access="sequential")
    except Exception as e:
        _logger.error("Failed to open source image %s: %s", source_path, e, exc_info=True)
        raise

    if not validate_crop_bounds(image.width, image.height, crop):
        _logger.error("Crop bounds %s invalid for image size %dx%d", crop, image.width, image.height)
        raise ValueError(f"Crop bounds {crop} invalid for image size {image.width}x{image.height}")

    left, top, width, height = _as_tuple(crop)
    return image.crop(left, top, width, height)


def apply_crop_to_file(source_path: str, crop: PixelCrop | tuple[int, int, int, int], output_path: str) -> str:
    """Crop image and save to file.

    Args:
        source_path: Path to source image file
        crop: crop rectangle in source image pixels
        output_path: Path to save cropped image; the suffix picks the format

    Returns:
        Path to saved file (same as output_path)
    """
    _logger.debug("Cropping %s: crop=%s -> %s", source_path, crop, output_path)
    cropped = _load_cropped(source_path, crop)
    try:
        cropped.write_to_file(output_path)
    except Exception as e:
        _logger.error("Error writing crop %s -> %s: %s", source_path, output_path, e, exc_info=True)
        raise

    _logger.info("Crop saved: %s", output_path)
    return output_path


def encode_crop(source_path: str, crop: PixelCrop | tuple[int, int, int, int], image_type: str = "jpeg") -> bytes:
    """Return the cropped region encoded as ``image_type`` (jpeg or png)."""
    suffix = IMAGE_SUFFIXES.get(str(image_type).lower())
    if suffix is None:
        raise ValueError(f"Unsupported image type: {image_type}")

    cropped = _load_cropped(source_path, crop)
    try:
        data = cropped.write_to_buffer(suffix)
    except Exception as e:
        _logger.error("Error encoding crop of %s as %s: %s", source_path, image_type, e, exc_info=True)
        raise
    # Normalize to bytes in case pyvips returns a memoryview-like object
    return bytes(data)


def crop_data_url(source_path: str, crop: PixelCrop | tuple[int, int, int, int], image_type: str = "jpeg") -> str:
    """Return the cropped region as a ``data:`` URL."""
    data = encode_crop(source_path, crop, image_type)
    mime = _MIME_TYPE[str(image_type).lower()]
    return f"data:{mime};base64,{base64.b64encode(data).decode('ascii')}"
