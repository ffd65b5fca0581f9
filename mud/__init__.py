from __future__ import annotations

from .color import Color, color_to_hex, distance, parse_hex_color, parse_palette  # noqa: F401
from .dithers import apply_dither, rasterize  # noqa: F401
from .palette import MAX_PALETTE_SIZE, PaletteStore  # noqa: F401
from .resolver import NearestColorResolver, brute_force_nearest  # noqa: F401
from .utils.loader import load_image, save_image  # noqa: F401

__version__ = "0.1.0"

__all__ = [
    "Color",
    "color_to_hex",
    "distance",
    "parse_hex_color",
    "parse_palette",
    "apply_dither",
    "rasterize",
    "MAX_PALETTE_SIZE",
    "PaletteStore",
    "NearestColorResolver",
    "brute_force_nearest",
    "load_image",
    "save_image",
]
