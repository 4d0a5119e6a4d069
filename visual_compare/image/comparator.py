"""Comparator — builds the comparison options, runs the diff and stores diff images."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path

from visual_compare.errors import ComparisonError
from visual_compare.image.differ import ImageDiffer
from visual_compare.image.rectangles import calculate_dpr_rectangle
from visual_compare.models.config import OsOffsets
from visual_compare.models.geometry import InstanceGeometry, Rectangle, SaveType
from visual_compare.models.options import CheckScreenOptions, CompareOptions
from visual_compare.utils.platform import is_android, is_ios, is_mobile

logger = logging.getLogger(__name__)


def determine_status_bar_block_out(
    geometry: InstanceGeometry,
    block_out_status_bar: bool,
    save_type: SaveType,
    android_offsets: OsOffsets,
    ios_offsets: OsOffsets,
) -> Rectangle | None:
    """Return the status bar rectangle in device pixels, or None when not applicable."""
    platform = geometry.platform_name
    if not (is_mobile(platform) and block_out_status_bar):
        return None
    if not ((geometry.native_web_screenshot and save_type == SaveType.SCREEN) or is_ios(platform)):
        return None
    status_bar_height = android_offsets.status_bar if is_android(platform) else ios_offsets.status_bar
    return calculate_dpr_rectangle(
        Rectangle(x=0, y=0, width=geometry.browser_width, height=status_bar_height),
        geometry.device_pixel_ratio,
    )


def build_compare_options(
    options: CheckScreenOptions,
    geometry: InstanceGeometry,
    save_type: SaveType,
    android_offsets: OsOffsets,
    ios_offsets: OsOffsets,
) -> CompareOptions:
    """Translate check options into diff options.

    When the status bar is blocked out, its rectangle replaces the caller's
    block-out regions instead of being added to them.
    """
    ignore_rectangles = list(options.block_out)
    status_bar = determine_status_bar_block_out(
        geometry, options.block_out_status_bar, save_type, android_offsets, ios_offsets
    )
    if status_bar is not None:
        ignore_rectangles = [status_bar]
    return CompareOptions(
        ignore_antialiasing=options.ignore_antialiasing,
        ignore_colors=options.ignore_colors,
        ignore_transparent_pixel=options.ignore_transparent_pixel,
        ignore_rectangles=ignore_rectangles,
    )


async def execute_image_comparison(
    differ: ImageDiffer,
    actual_path: Path,
    baseline_path: Path,
    diff_path: Path,
    compare_options: CompareOptions,
    debug: bool = False,
) -> tuple[float, Path | None]:
    """Run the diff and return (mismatch percentage, diff path if one was written)."""
    if debug:
        logger.info("Compare options: %s", compare_options.model_dump())

    try:
        result = await asyncio.to_thread(differ.compare, baseline_path, actual_path, compare_options)
    except Exception as e:
        raise ComparisonError(f"Image comparison failed: {e}") from e

    mismatch = float(result.mismatch_percentage)
    written: Path | None = None
    if (mismatch > 0 or debug) and result.diff_image is not None:
        diff_path.parent.mkdir(parents=True, exist_ok=True)
        await asyncio.to_thread(result.diff_image.save, diff_path, "PNG")
        written = diff_path
        logger.info("Saved diff image to %s (mismatch %.2f%%)", diff_path, mismatch)
    return mismatch, written
