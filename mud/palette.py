"""Palette store with per-color exclusive radii.

A :class:`PaletteStore` is built once, before any pixel is processed, and is
read-only afterwards. Besides the ordered colors it carries two parallel
tables:

- ``sibling_distances[i]``: squared distance from entry ``i`` to its nearest
  other entry.
- ``radii[i]``: the exclusive radius, ``ceil(sibling_distances[i] / 4)``, i.e.
  the squared half-distance to the nearest sibling. Any color ``p`` with
  ``distance(p, colors[i]) < radii[i]`` is strictly closer to entry ``i`` than
  to any other entry, so the nearest-color search may stop there.

A single-entry palette gets :data:`MAX_RADIUS` in both tables.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, List, Sequence, Tuple, Union

import numpy as np

from .color import Color, color_to_hex, parse_hex_color

logger = logging.getLogger(__name__)

MAX_PALETTE_SIZE = 255
MAX_RADIUS = 2**31 - 1

ColorLike = Union[Color, Sequence[int], str]


def _coerce_color(value: ColorLike) -> Color:
    if isinstance(value, str):
        return parse_hex_color(value)
    if len(value) < 3:
        raise ValueError("palette colors need three channels")
    r, g, b = (int(v) for v in value[:3])
    for ch in (r, g, b):
        if not 0 <= ch <= 255:
            raise ValueError(f"channel value out of range: {ch}")
    return Color(r, g, b)


def _dedupe(colors: Iterable[Color]) -> List[Color]:
    seen = set()
    out: List[Color] = []
    for c in colors:
        if c not in seen:
            seen.add(c)
            out.append(c)
    return out


def sibling_distance_table(rgb: np.ndarray) -> np.ndarray:
    """Squared distance from each row of ``rgb`` (P, 3) to its nearest other row.

    Returns an ``int64`` array of length P. With a single row the result is
    ``[MAX_RADIUS]``.
    """
    n = rgb.shape[0]
    if n == 1:
        return np.array([MAX_RADIUS], dtype=np.int64)
    diff = rgb[:, None, :] - rgb[None, :, :]
    d = np.einsum("ijk,ijk->ij", diff, diff)
    np.fill_diagonal(d, MAX_RADIUS)
    return d.min(axis=1).astype(np.int64)


def exclusive_radii(sibling: np.ndarray) -> np.ndarray:
    """Squared half-distance per entry, rounded up.

    For integer distances ``d < ceil(s / 4)`` holds exactly when ``4 * d < s``.
    """
    radii = -(-sibling // 4)
    radii[sibling >= MAX_RADIUS] = MAX_RADIUS
    return radii.astype(np.int64)


@dataclass(frozen=True, eq=False)
class PaletteStore:
    """Ordered, deduplicated palette plus its precomputed radius tables."""

    colors: Tuple[Color, ...]
    sibling_distances: np.ndarray
    radii: np.ndarray

    @classmethod
    def from_colors(cls, colors: Iterable[ColorLike]) -> "PaletteStore":
        """Build the store from colors or hex tokens.

        Duplicates are dropped (first occurrence wins, order is kept).

        Raises
        ------
        ValueError
            If the palette is empty or has more than 255 distinct colors.
        """
        unique = _dedupe(_coerce_color(c) for c in colors)
        if not unique:
            raise ValueError("palette must contain at least one color")
        if len(unique) > MAX_PALETTE_SIZE:
            raise ValueError(
                f"palette has {len(unique)} colors; at most {MAX_PALETTE_SIZE} are supported"
            )

        rgb = np.array(unique, dtype=np.int64).reshape(-1, 3)
        sibling = sibling_distance_table(rgb)
        radii = exclusive_radii(sibling)
        sibling.setflags(write=False)
        radii.setflags(write=False)

        store = cls(colors=tuple(unique), sibling_distances=sibling, radii=radii)
        if logger.isEnabledFor(logging.DEBUG):
            for c, s, r in zip(unique, sibling.tolist(), radii.tolist()):
                logger.debug("palette %s sibling=%d radius=%d", color_to_hex(c), s, r)
        return store

    def __len__(self) -> int:
        return len(self.colors)

    def __getitem__(self, index: int) -> Color:
        return self.colors[index]

    def as_array(self) -> np.ndarray:
        """Palette as an ``int64`` array of shape (P, 3)."""
        return np.array(self.colors, dtype=np.int64).reshape(-1, 3)


__all__ = [
    "MAX_PALETTE_SIZE",
    "MAX_RADIUS",
    "PaletteStore",
    "sibling_distance_table",
    "exclusive_radii",
]
