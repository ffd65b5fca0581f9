import numpy as np
import pytest

from mud.palette import PaletteStore


@pytest.fixture
def rng():
    return np.random.default_rng(1234)


@pytest.fixture
def bw_palette():
    return PaletteStore.from_colors([(0, 0, 0), (255, 255, 255)])


@pytest.fixture
def small_palette():
    return PaletteStore.from_colors(
        ["#000000", "#ffffff", "#ff0000", "#00ff00", "#0000ff", "#808080", "#ffcc00"]
    )


def random_rgba(rng, h, w):
    img = rng.integers(0, 256, size=(h, w, 4), dtype=np.uint8)
    img[..., 3] = 255
    return img
