"""Baseline resolver — makes sure a baseline exists before comparing."""

from __future__ import annotations

import logging
import shutil
from pathlib import Path

from visual_compare.errors import BaselineCopyError, BaselineMissingError

logger = logging.getLogger(__name__)


def check_image_exists(
    actual_folder: Path,
    baseline_folder: Path,
    file_name: str,
    auto_save_baseline: bool,
) -> bool:
    """Return True when the actual image was autosaved as the new baseline.

    Raises BaselineMissingError when there is no baseline and autosaving is
    off, and BaselineCopyError when the copy fails.
    """
    baseline_path = baseline_folder / file_name
    if baseline_path.exists():
        return False

    if not auto_save_baseline:
        raise BaselineMissingError(str(baseline_path))

    try:
        baseline_path.parent.mkdir(parents=True, exist_ok=True)
        shutil.copy2(actual_folder / file_name, baseline_path)
    except OSError as e:
        raise BaselineCopyError(e) from e
    logger.info("Autosaved the image to %s", baseline_path)
    return True
