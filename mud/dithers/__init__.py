"""Palette dithering entry-point.

Exported API
------------
- apply_dither(image_array, palette, jit=True)
- rasterize(buffer, palette, jit=True)

Implementation notes
--------------------
The only method is Floyd–Steinberg error diffusion onto a caller-supplied
palette of 1..255 colors. ``apply_dither`` validates and copies its input;
``rasterize`` works in place on a buffer the caller owns.
"""
from __future__ import annotations

from typing import Iterable, Union

import numpy as np

from ..palette import ColorLike, PaletteStore
from .floyd import diffuse_error, rasterize

Array = np.ndarray


def apply_dither(
    image_array: Array,
    palette: Union[PaletteStore, Iterable[ColorLike]],
    *,
    jit: bool = True,
) -> Array:
    """Return a dithered copy of ``image_array`` restricted to ``palette``.

    Parameters
    ----------
    image_array : np.ndarray
        RGBA (H, W, 4) or RGB (H, W, 3) array, dtype=uint8. Alpha is ignored
        on input and set to 255 on output.
    palette : PaletteStore | iterable of colors
        A prepared store, or colors / hex tokens to build one from.
    jit : bool
        Use the Numba kernel (default) or the reference Python walk.

    Returns
    -------
    np.ndarray
        Dithered array with the same shape, dtype=uint8.
    """
    if (
        not isinstance(image_array, np.ndarray)
        or image_array.ndim != 3
        or image_array.shape[2] not in (3, 4)
    ):
        raise ValueError("image_array must have shape (H, W, 3) or (H, W, 4)")
    if image_array.dtype != np.uint8:
        raise TypeError("image_array must have dtype=uint8")

    store = palette if isinstance(palette, PaletteStore) else PaletteStore.from_colors(palette)
    work = np.ascontiguousarray(image_array).copy()
    rasterize(work, store, jit=jit)
    return work


__all__ = ["apply_dither", "rasterize", "diffuse_error"]
