"""Interactive rectangular crop selection.

`image_cropz.ops` holds the Qt-free crop engine; `image_cropz.crop` the
PySide6 widget and pyvips export; `image_cropz.app` the bindable state.
"""

__version__ = "0.3.0"
