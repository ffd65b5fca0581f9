"""Tests for nearest-color resolution and radius pruning."""

import numpy as np

from mud.color import Color, distance
from mud.palette import PaletteStore
from mud.resolver import NearestColorResolver, brute_force_nearest


def _random_store(rng, n):
    return PaletteStore.from_colors(rng.integers(0, 256, size=(n, 3)).tolist())


class TestResolverCorrectness:
    def test_matches_brute_force_on_random_colors(self, rng):
        for n in (1, 2, 3, 8, 40, 255):
            store = _random_store(rng, n)
            resolver = NearestColorResolver(store)
            for c in rng.integers(0, 256, size=(500, 3)).tolist():
                assert resolver.resolve_index(c) == brute_force_nearest(store.colors, c)

    def test_matches_brute_force_on_photographic_walk(self, rng):
        # Small steps keep hitting the cache, which is the case worth checking.
        store = _random_store(rng, 16)
        resolver = NearestColorResolver(store)
        c = np.array([128, 128, 128])
        for step in rng.integers(-6, 7, size=(3000, 3)):
            c = np.clip(c + step, 0, 255)
            q = c.tolist()
            assert resolver.resolve(q) == store.colors[brute_force_nearest(store.colors, q)]
        assert resolver.hits > 0
        assert resolver.misses > 0

    def test_close_palette_entries(self, rng):
        store = PaletteStore.from_colors([(100, 100, 100), (101, 100, 100), (100, 102, 100), (99, 99, 99)])
        resolver = NearestColorResolver(store)
        for c in rng.integers(95, 106, size=(1000, 3)).tolist():
            assert resolver.resolve_index(c) == brute_force_nearest(store.colors, c)

    def test_tie_goes_to_earliest_entry(self):
        store = PaletteStore.from_colors([(0, 0, 0), (2, 0, 0)])
        assert NearestColorResolver(store).resolve((1, 0, 0)) == Color(0, 0, 0)

        store = PaletteStore.from_colors([(2, 0, 0), (0, 0, 0)])
        assert NearestColorResolver(store).resolve((1, 0, 0)) == Color(2, 0, 0)

    def test_tie_after_cache_moved(self):
        store = PaletteStore.from_colors([(0, 0, 0), (2, 0, 0)])
        resolver = NearestColorResolver(store)
        assert resolver.resolve((2, 0, 0)) == Color(2, 0, 0)
        assert resolver.resolve((1, 0, 0)) == Color(0, 0, 0)

    def test_single_color_palette(self, rng):
        store = PaletteStore.from_colors(["#336699"])
        resolver = NearestColorResolver(store)
        for c in rng.integers(0, 256, size=(100, 3)).tolist():
            assert resolver.resolve(c) == Color(0x33, 0x66, 0x99)
        assert resolver.misses == 0
        assert resolver.hits == 100

    def test_brute_force_scan(self):
        colors = [Color(0, 0, 0), Color(255, 255, 255), Color(250, 0, 0)]
        assert brute_force_nearest(colors, Color(200, 10, 10)) == 2
        assert brute_force_nearest(colors, Color(10, 10, 10)) == 0


class TestCache:
    def test_starts_at_first_entry(self, bw_palette):
        resolver = NearestColorResolver(bw_palette)
        assert resolver.cache.index == 0
        assert resolver.cache.radius == int(bw_palette.radii[0])

    def test_hits_and_misses(self, bw_palette):
        resolver = NearestColorResolver(bw_palette)
        assert resolver.resolve((10, 10, 10)) == Color(0, 0, 0)
        assert resolver.resolve((12, 10, 10)) == Color(0, 0, 0)
        assert (resolver.hits, resolver.misses) == (2, 0)

        assert resolver.resolve((250, 250, 250)) == Color(255, 255, 255)
        assert (resolver.hits, resolver.misses) == (2, 1)
        assert resolver.cache.index == 1

        assert resolver.resolve((240, 240, 240)) == Color(255, 255, 255)
        assert (resolver.hits, resolver.misses) == (3, 1)

    def test_exact_palette_colors_always_hit_after_scan(self, small_palette):
        resolver = NearestColorResolver(small_palette)
        for c in small_palette.colors:
            assert resolver.resolve(c) == c
            assert resolver.resolve(c) == c
        assert resolver.hits >= len(small_palette)


class TestRadiusSoundness:
    def test_points_inside_radius_resolve_to_that_entry(self, rng):
        for n in (2, 5, 30, 120):
            store = _random_store(rng, n)
            radii = store.radii.tolist()
            for p in rng.integers(0, 256, size=(2000, 3)).tolist():
                for i, entry in enumerate(store.colors):
                    if distance(p, entry) < radii[i]:
                        assert brute_force_nearest(store.colors, p) == i

    def test_points_near_each_entry(self, rng):
        store = _random_store(rng, 12)
        radii = store.radii.tolist()
        for i, entry in enumerate(store.colors):
            offsets = rng.integers(-12, 13, size=(300, 3))
            for p in np.clip(np.array(entry) + offsets, 0, 255).tolist():
                if distance(p, entry) < radii[i]:
                    assert brute_force_nearest(store.colors, p) == i

    def test_boundary_point_is_not_inside(self):
        # Midpoint of two entries sits exactly on the half-distance boundary.
        store = PaletteStore.from_colors([(0, 0, 0), (4, 0, 0)])
        assert distance((2, 0, 0), store.colors[0]) == store.radii[0]
