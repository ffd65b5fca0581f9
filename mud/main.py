"""Command-line entry point for mud.

Loads an image, restricts it to the palette given on the command line with
Floyd–Steinberg error diffusion, and saves the result. Alpha is dropped:
every output pixel is fully opaque.

All processing occurs on NumPy arrays; Pillow is used only for loading and
saving.

Usage example:
    python -m mud.main input.png output.png "#000000" "#ffffff" ff0000
"""
from __future__ import annotations

import argparse
import logging
import time
from pathlib import Path
from typing import Optional

from .color import parse_palette
from .dithers import apply_dither
from .palette import MAX_PALETTE_SIZE, PaletteStore
from .utils.loader import load_image, save_image

logger = logging.getLogger(__name__)


def parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    """Parse command-line arguments.

    Parameters
    ----------
    argv : list[str] | None
        Optional list of arguments for testing. If None, uses sys.argv.

    Returns
    -------
    argparse.Namespace
        Parsed arguments.
    """
    parser = argparse.ArgumentParser(
        prog="mud",
        description=(
            "Dither an image onto a fixed palette of up to 255 colors "
            "using Floyd–Steinberg error diffusion."
        ),
    )

    parser.add_argument("input", help="Path to input image file")
    parser.add_argument("output", help="Path to output image file")
    parser.add_argument(
        "colors",
        nargs="+",
        metavar="COLOR",
        help="Palette colors as hex RGB, e.g. '#1a2b3c' or 1a2b3c",
    )
    parser.add_argument(
        "--no-jit",
        dest="jit",
        action="store_false",
        help="Use the reference Python implementation instead of the compiled kernel.",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Log palette and resolver details"
    )

    return parser.parse_args(argv)


def validate_args(ns: argparse.Namespace) -> None:
    """Validate argument values and raise ValueError for invalid inputs.

    Parameters
    ----------
    ns : argparse.Namespace
        Parsed CLI arguments.
    """
    if len(ns.colors) > MAX_PALETTE_SIZE:
        raise ValueError(f"at most {MAX_PALETTE_SIZE} palette colors are supported")
    # Raises on the first malformed token.
    parse_palette(ns.colors)
    if not Path(ns.input).exists():
        raise ValueError(f"Input file not found: {ns.input}")


def configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s" if verbose else "%(message)s",
    )


def main(argv: Optional[list[str]] = None) -> int:
    """Main entry function for the CLI.

    Parameters
    ----------
    argv : list[str] | None
        Optional list of arguments for testing.

    Returns
    -------
    int
        Exit status code: 0 on success, 2 for argument errors, 1 when the
        image cannot be read or written.
    """
    args = parse_args(argv)
    configure_logging(args.verbose)
    try:
        validate_args(args)
        palette = PaletteStore.from_colors(parse_palette(args.colors))
    except ValueError as e:
        logger.error("Argument error: %s", e)
        return 2

    try:
        img = load_image(args.input)
    except OSError as e:
        logger.error("fatal error: cannot read %s: %s", args.input, e)
        return 1

    h, w = img.shape[:2]
    t0 = time.perf_counter()
    out = apply_dither(img, palette, jit=args.jit)
    logger.info(
        "Dithered %dx%d image onto %d colors in %.3fs", w, h, len(palette), time.perf_counter() - t0
    )

    try:
        save_image(out, args.output)
    except (OSError, ValueError) as e:
        logger.error("fatal error: cannot write %s: %s", args.output, e)
        return 1
    logger.info("Wrote %s", args.output)
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
