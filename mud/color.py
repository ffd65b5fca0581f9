"""Colors, the squared RGB distance, and hex palette tokens.

Alpha never takes part in any of this: a :class:`Color` is three 8-bit
channels and the distance is the plain sum of squared channel differences.
"""
from __future__ import annotations

from typing import Iterable, List, NamedTuple

_HEX_DIGITS = frozenset("0123456789abcdef")


class Color(NamedTuple):
    """Immutable 8-bit RGB triple."""

    r: int
    g: int
    b: int


# 3 * 255**2; fits comfortably in 32 bits.
MAX_DISTANCE = 195075


def distance(a: Color, b: Color) -> int:
    """Squared Euclidean distance between two colors in RGB space.

    Symmetric and zero only when all three channels match. Channels are
    converted to Python ints so ``uint8`` inputs cannot wrap around.
    """
    dr = int(a[0]) - int(b[0])
    dg = int(a[1]) - int(b[1])
    db = int(a[2]) - int(b[2])
    return dr * dr + dg * dg + db * db


def parse_hex_color(token: str) -> Color:
    """Parse ``'#RRGGBB'`` or ``'RRGGBB'`` (case-insensitive) into a Color.

    Raises
    ------
    ValueError
        If the token is not exactly six hex digits after an optional ``#``.
        Eight-digit tokens carrying alpha are rejected.
    """
    s = token.strip().lower()
    if s.startswith("#"):
        s = s[1:]
    if len(s) != 6 or not set(s) <= _HEX_DIGITS:
        raise ValueError(f"invalid color {token!r}: expected #RRGGBB")
    return Color(int(s[0:2], 16), int(s[2:4], 16), int(s[4:6], 16))


def parse_palette(tokens: Iterable[str]) -> List[Color]:
    """Parse a sequence of hex tokens, keeping their order."""
    return [parse_hex_color(t) for t in tokens]


def color_to_hex(color: Color) -> str:
    """Color to lowercase ``'#rrggbb'``."""
    return f"#{color[0]:02x}{color[1]:02x}{color[2]:02x}"


__all__ = [
    "Color",
    "MAX_DISTANCE",
    "distance",
    "parse_hex_color",
    "parse_palette",
    "color_to_hex",
]
