"""Image loading and saving utilities using Pillow, with NumPy arrays.

Dithering runs on NumPy arrays only. These helpers convert between Pillow
images and ``uint8`` RGBA (or RGB) arrays for IO.
"""
from __future__ import annotations

from pathlib import Path
from typing import Union

import numpy as np
from PIL import Image


Array = np.ndarray


def load_image(path: Union[str, Path]) -> Array:
    """Load an image file into an RGBA NumPy array (uint8).

    Parameters
    ----------
    path : str | Path
        Path to an image supported by Pillow.

    Returns
    -------
    np.ndarray
        Array of shape (H, W, 4), dtype=uint8. The alpha channel is carried
        along but ignored by the dithering.
    """
    p = Path(path)
    with Image.open(p) as im:
        im = im.convert("RGBA")
        arr = np.array(im, dtype=np.uint8)
    return arr


def save_image(arr: Array, path: Union[str, Path]) -> None:
    """Save an RGBA or RGB NumPy array (uint8) to an image file via Pillow.

    Parameters
    ----------
    arr : np.ndarray
        Array of shape (H, W, 4) or (H, W, 3), dtype=uint8.
    path : str | Path
        Output file path. The format is inferred from the extension.
    """
    if not isinstance(arr, np.ndarray):
        raise TypeError("arr must be a NumPy array")
    if arr.dtype != np.uint8:
        raise TypeError("arr must have dtype=uint8")
    if arr.ndim != 3 or arr.shape[2] not in (3, 4):
        raise ValueError("arr must have shape (H, W, 3) or (H, W, 4)")

    p = Path(path)
    # Pillow infers RGB / RGBA from the trailing dimension.
    im = Image.fromarray(np.ascontiguousarray(arr))
    im.save(p)
