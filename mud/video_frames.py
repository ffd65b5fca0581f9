"""Dither a video into a PNG frame sequence.

Reads frames via OpenCV, converts them to RGB NumPy arrays, dithers each one
onto the palette and writes PNGs into an output directory.

The palette store is built once and shared read-only; every frame gets its
own rasterization run (and so its own resolver cache). This is sequential
and simple: good for offline batch processing.
"""
from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import Optional

import cv2
import numpy as np
from PIL import Image

from .color import parse_palette
from .dithers import apply_dither
from .main import configure_logging
from .palette import PaletteStore

logger = logging.getLogger(__name__)


def process_frame(frame_rgb: np.ndarray, palette: PaletteStore, jit: bool = True) -> np.ndarray:
    """Dither a single RGB frame; returns a new (H, W, 3) uint8 array."""
    return apply_dither(frame_rgb, palette, jit=jit)


def parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(prog="mud-frames", description="Dither video frames to PNG onto a fixed palette")
    p.add_argument("-i", "--input", required=True, help="Input video path")
    p.add_argument("-o", "--outdir", required=True, help="Output directory for PNG frames")
    p.add_argument("colors", nargs="+", metavar="COLOR", help="Palette colors as hex RGB")
    p.add_argument("--start", type=int, default=0, help="Start frame index (default 0)")
    p.add_argument("--end", type=int, default=None, help="End frame index (exclusive). Default: till end")
    p.add_argument("--no-jit", dest="jit", action="store_false", help="Use the reference Python walk")
    p.add_argument("-v", "--verbose", action="store_true", help="Log per-frame details")
    return p.parse_args(argv)


def main(argv: Optional[list[str]] = None) -> int:
    args = parse_args(argv)
    configure_logging(args.verbose)
    try:
        palette = PaletteStore.from_colors(parse_palette(args.colors))
    except ValueError as e:
        logger.error("Argument error: %s", e)
        return 2

    cap = cv2.VideoCapture(str(args.input))
    if not cap.isOpened():
        logger.error("Failed to open video: %s", args.input)
        return 2

    outdir = Path(args.outdir)
    outdir.mkdir(parents=True, exist_ok=True)

    idx = 0
    written = 0
    start = int(args.start)
    end = None if args.end is None else int(args.end)

    try:
        while True:
            ok, frame_bgr = cap.read()
            if not ok:
                break
            if idx < start:
                idx += 1
                continue
            if end is not None and idx >= end:
                break

            frame_rgb = cv2.cvtColor(frame_bgr, cv2.COLOR_BGR2RGB)
            out = process_frame(frame_rgb, palette, jit=args.jit)

            png_path = outdir / f"frame_{idx:06d}.png"
            Image.fromarray(out).save(png_path)
            logger.debug("frame %d -> %s", idx, png_path)
            written += 1
            idx += 1
    finally:
        cap.release()

    logger.info("Wrote %d frames to %s", written, outdir)
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
