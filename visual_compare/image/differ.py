"""Pixel diff — compares a baseline and an actual image with Pillow."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Protocol

from PIL import Image

from visual_compare.models.comparison import DiffResult
from visual_compare.models.geometry import Rectangle
from visual_compare.models.options import CompareOptions

logger = logging.getLogger(__name__)

ERROR_COLOR = (255, 0, 255, 255)
# Per-channel tolerance; anti-aliased edges and font rendering need more room
DEFAULT_TOLERANCE = 16
ANTIALIASING_TOLERANCE = 40


class ImageDiffer(Protocol):
    def compare(self, baseline_path: Path, actual_path: Path, options: CompareOptions) -> DiffResult:
        ...


def _in_rectangles(x: int, y: int, rectangles: list[Rectangle]) -> bool:
    for r in rectangles:
        if r.x <= x < r.x + r.width and r.y <= y < r.y + r.height:
            return True
    return False


def _luminance(pixel: tuple) -> float:
    r, g, b = pixel[:3]
    return 0.3 * r + 0.59 * g + 0.11 * b


def _pad(img: Image.Image, size: tuple[int, int]) -> Image.Image:
    if img.size == size:
        return img
    canvas = Image.new("RGBA", size, (0, 0, 0, 0))
    canvas.paste(img, (0, 0))
    return canvas


class PixelDiffer:
    """Per-pixel comparison honoring ignore rectangles and the ignore flags.

    Images of different sizes are compared over the larger area; pixels
    outside the smaller image count as transparent.
    """

    def compare(self, baseline_path: Path, actual_path: Path, options: CompareOptions) -> DiffResult:
        with Image.open(baseline_path) as b, Image.open(actual_path) as a:
            baseline = b.convert("RGBA")
            actual = a.convert("RGBA")

        size = (max(baseline.width, actual.width), max(baseline.height, actual.height))
        baseline = _pad(baseline, size)
        actual = _pad(actual, size)
        width, height = size
        total = width * height
        if total == 0:
            return DiffResult(mismatch_percentage=0.0)

        tolerance = ANTIALIASING_TOLERANCE if options.ignore_antialiasing else DEFAULT_TOLERANCE
        diff_image = actual.copy()
        diff_pixels = diff_image.load()
        baseline_pixels = baseline.load()
        actual_pixels = actual.load()

        mismatched = 0
        for y in range(height):
            for x in range(width):
                if options.ignore_rectangles and _in_rectangles(x, y, options.ignore_rectangles):
                    continue
                bp, ap = baseline_pixels[x, y], actual_pixels[x, y]
                if options.ignore_transparent_pixel and (bp[3] < 255 or ap[3] < 255):
                    continue
                if options.ignore_colors:
                    differs = abs(_luminance(bp) - _luminance(ap)) > tolerance or abs(bp[3] - ap[3]) > tolerance
                else:
                    differs = any(abs(c1 - c2) > tolerance for c1, c2 in zip(bp, ap))
                if differs:
                    mismatched += 1
                    diff_pixels[x, y] = ERROR_COLOR

        mismatch = round(mismatched / total * 100, 2)
        logger.debug("Compared %s to %s: %d/%d pixels differ", baseline_path, actual_path, mismatched, total)
        return DiffResult(mismatch_percentage=mismatch, diff_image=diff_image)
