"""Floyd–Steinberg error diffusion onto a fixed palette.

Two implementations of the same raster walk live here and produce
bit-identical buffers:

- a Numba-compiled kernel (default) that keeps the resolver cache in locals;
- a reference Python walk driven by :class:`~mud.resolver.NearestColorResolver`.

Both use integer arithmetic throughout: the quantization error is a signed
int per channel, each neighbor receives ``(err * weight) >> 4`` (an arithmetic
shift, so negative values round toward negative infinity), and the result is
clamped to [0, 255] after the shift.
"""
from __future__ import annotations

import logging
from typing import Sequence

import numpy as np
from numba import njit

from ..palette import MAX_RADIUS, PaletteStore
from ..resolver import NearestColorResolver

logger = logging.getLogger(__name__)

Array = np.ndarray

# Floyd–Steinberg kernel (normalized by 16):
#      *  7
#   3  5  1
RIGHT, BELOW_LEFT, BELOW, BELOW_RIGHT = 7, 3, 5, 1


def diffuse_error(buffer: Array, y: int, x: int, err: Sequence[int], weight: int) -> None:
    """Add ``(err * weight) >> 4`` to pixel (y, x), clamping each channel.

    Stamps alpha 255 when the buffer has a fourth channel.
    """
    px = buffer[y, x]
    for ch in range(3):
        v = int(px[ch]) + ((int(err[ch]) * weight) >> 4)
        px[ch] = 0 if v < 0 else 255 if v > 255 else v
    if buffer.shape[2] == 4:
        px[3] = 255


def _floyd_python(buffer: Array, palette: PaletteStore) -> None:
    H, W, C = buffer.shape
    resolver = NearestColorResolver(palette)
    for y in range(H):
        for x in range(W):
            px = buffer[y, x]
            orig = (int(px[0]), int(px[1]), int(px[2]))
            c = resolver.resolve(orig)
            err = (orig[0] - c[0], orig[1] - c[1], orig[2] - c[2])

            px[:3] = c
            if C == 4:
                px[3] = 255

            if x + 1 < W:
                diffuse_error(buffer, y, x + 1, err, RIGHT)
            if y + 1 < H:
                if x > 0:
                    diffuse_error(buffer, y + 1, x - 1, err, BELOW_LEFT)
                diffuse_error(buffer, y + 1, x, err, BELOW)
                if x + 1 < W:
                    diffuse_error(buffer, y + 1, x + 1, err, BELOW_RIGHT)
    resolver.log_stats()


@njit(cache=True)
def _clamp_u8(v):
    if v > 255:
        return 255
    if v < 0:
        return 0
    return v


@njit(cache=True)
def _apply(work, y, x, e0, e1, e2, weight):
    work[y, x, 0] = _clamp_u8(np.int64(work[y, x, 0]) + ((e0 * weight) >> 4))
    work[y, x, 1] = _clamp_u8(np.int64(work[y, x, 1]) + ((e1 * weight) >> 4))
    work[y, x, 2] = _clamp_u8(np.int64(work[y, x, 2]) + ((e2 * weight) >> 4))
    if work.shape[2] == 4:
        work[y, x, 3] = 255


@njit(cache=True)
def _floyd_impl(work, pal, radii, max_radius):
    H, W, C = work.shape
    P = pal.shape[0]
    ci = 0
    cr = radii[0]
    for y in range(H):
        for x in range(W):
            o0 = np.int64(work[y, x, 0])
            o1 = np.int64(work[y, x, 1])
            o2 = np.int64(work[y, x, 2])

            d0 = o0 - pal[ci, 0]
            d1 = o1 - pal[ci, 1]
            d2 = o2 - pal[ci, 2]
            if d0 * d0 + d1 * d1 + d2 * d2 >= cr:
                best = 0
                best_d = max_radius
                for i in range(P):
                    d0 = o0 - pal[i, 0]
                    d1 = o1 - pal[i, 1]
                    d2 = o2 - pal[i, 2]
                    d = d0 * d0 + d1 * d1 + d2 * d2
                    if d < best_d:
                        best = i
                        best_d = d
                ci = best
                cr = radii[best]

            n0 = pal[ci, 0]
            n1 = pal[ci, 1]
            n2 = pal[ci, 2]
            work[y, x, 0] = n0
            work[y, x, 1] = n1
            work[y, x, 2] = n2
            if C == 4:
                work[y, x, 3] = 255
            e0 = o0 - n0
            e1 = o1 - n1
            e2 = o2 - n2

            if x + 1 < W:
                _apply(work, y, x + 1, e0, e1, e2, 7)
            if y + 1 < H:
                if x > 0:
                    _apply(work, y + 1, x - 1, e0, e1, e2, 3)
                _apply(work, y + 1, x, e0, e1, e2, 5)
                if x + 1 < W:
                    _apply(work, y + 1, x + 1, e0, e1, e2, 1)


def rasterize(buffer: Array, palette: PaletteStore, *, jit: bool = True) -> None:
    """Dither ``buffer`` in place onto ``palette``.

    Parameters
    ----------
    buffer : np.ndarray
        Image of shape (H, W, 4) or (H, W, 3), dtype=uint8. Overwritten pixel
        by pixel in raster order; a fourth channel ends up fully opaque.
    palette : PaletteStore
        Target colors with their radius tables.
    jit : bool
        Use the compiled kernel. ``False`` runs the reference Python walk.
    """
    H, W, _ = buffer.shape
    if H == 0 or W == 0:
        return
    if jit:
        pal = palette.as_array()
        radii = np.array(palette.radii, dtype=np.int64)
        _floyd_impl(buffer, pal, radii, np.int64(MAX_RADIUS))
    else:
        _floyd_python(buffer, palette)
    logger.debug("dithered %dx%d onto %d colors (jit=%s)", W, H, len(palette), jit)


__all__ = ["rasterize", "diffuse_error", "RIGHT", "BELOW_LEFT", "BELOW", "BELOW_RIGHT"]
