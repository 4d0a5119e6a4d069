"""Comparison result data structures."""

from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict


class DiffResult(BaseModel):
    """Output of the image diff algorithm."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    mismatch_percentage: float
    diff_image: Optional[Any] = None  # PIL.Image.Image when produced


class ComparisonResult(BaseModel):
    file_name: str
    actual_path: str
    baseline_path: str
    diff_path: Optional[str] = None  # only set when a diff image was written
    mismatch_percentage: float = 0.0
    auto_saved: bool = False
