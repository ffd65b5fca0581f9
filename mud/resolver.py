"""Nearest palette color lookup with a single-entry cache.

The resolver remembers the last palette entry it returned together with that
entry's exclusive radius. A query that lands strictly inside the radius is
answered from the cache; anything else triggers a full scan of the palette.
Because the radius is a half-distance bound the cache never changes the
answer, only how fast it is found.

One resolver belongs to one rasterization run. Do not share an instance
between images processed concurrently.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Sequence

import numpy as np

from .color import Color, distance
from .palette import PaletteStore

logger = logging.getLogger(__name__)


@dataclass
class ResolverCache:
    """Index of the last resolved palette entry and its exclusive radius."""

    index: int
    radius: int


def brute_force_nearest(colors: Sequence[Color], color: Color) -> int:
    """Index of the nearest entry by linear scan; the earliest entry wins ties."""
    best = 0
    best_dist = None
    for i, p in enumerate(colors):
        d = distance(color, p)
        if best_dist is None or d < best_dist:
            best = i
            best_dist = d
    return best


class NearestColorResolver:
    """Map arbitrary colors to the closest entry of a :class:`PaletteStore`."""

    def __init__(self, palette: PaletteStore) -> None:
        self.palette = palette
        self._rgb = palette.as_array()
        self._radii = [int(r) for r in palette.radii]
        self.cache = ResolverCache(index=0, radius=self._radii[0])
        self.hits = 0
        self.misses = 0

    def _scan(self, color: Sequence[int]) -> int:
        diff = self._rgb - np.asarray(color[:3], dtype=np.int64)
        d = np.einsum("ij,ij->i", diff, diff)
        # argmin returns the first minimum, which is the tie-break we want.
        return int(np.argmin(d))

    def resolve_index(self, color: Sequence[int]) -> int:
        """Palette index of the entry nearest to ``color``."""
        cache = self.cache
        if distance(color, self.palette.colors[cache.index]) < cache.radius:
            self.hits += 1
            return cache.index

        self.misses += 1
        idx = self._scan(color)
        cache.index = idx
        cache.radius = self._radii[idx]
        return idx

    def resolve(self, color: Sequence[int]) -> Color:
        """Palette color nearest to ``color``."""
        return self.palette.colors[self.resolve_index(color)]

    def log_stats(self) -> None:
        total = self.hits + self.misses
        if total:
            logger.debug(
                "resolver: %d lookups, %d cache hits (%.1f%%), %d scans",
                total,
                self.hits,
                100.0 * self.hits / total,
                self.misses,
            )


__all__ = ["ResolverCache", "NearestColorResolver", "brute_force_nearest"]
