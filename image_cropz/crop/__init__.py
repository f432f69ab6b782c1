"""Crop export API.

Only the pyvips helpers live here; the Qt widget is imported directly:
    - `from image_cropz.crop.ui_crop import CropWidget`
"""

from .crop import (
    IMAGE_SUFFIXES,
    _get_pyvips_module,
    apply_crop_to_file,
    crop_data_url,
    encode_crop,
    validate_crop_bounds,
)

__all__ = [
    "IMAGE_SUFFIXES",
    "_get_pyvips_module",
    "apply_crop_to_file",
    "crop_data_url",
    "encode_crop",
    "validate_crop_bounds",
]
