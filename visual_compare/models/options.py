"""Per-call option structures for saving and checking screens."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field

from visual_compare.models.geometry import Rectangle


class SaveScreenOptions(BaseModel):
    disable_css_animation: bool = False
    hide_scroll_bars: bool = True


class CheckScreenOptions(BaseModel):
    block_out: list[Rectangle] = Field(default_factory=list)
    block_out_status_bar: bool = False
    disable_css_animation: bool = False
    ignore_antialiasing: bool = False
    ignore_colors: bool = False
    ignore_transparent_pixel: bool = False


class CompareOptions(BaseModel):
    """Options handed to the image diff algorithm."""
    ignore_antialiasing: bool = False
    ignore_colors: bool = False
    ignore_transparent_pixel: bool = False
    ignore_rectangles: list[Rectangle] = Field(default_factory=list)


def init_save_screen_options(
    disable_css_animation: bool,
    hide_scroll_bars: bool,
    overrides: Optional[dict] = None,
) -> SaveScreenOptions:
    """Build save options from configured defaults plus per-call overrides.

    Override values of ``None`` are treated as "not given".
    """
    values = {
        "disable_css_animation": disable_css_animation,
        "hide_scroll_bars": hide_scroll_bars,
    }
    values.update({k: v for k, v in (overrides or {}).items() if v is not None})
    return SaveScreenOptions(**values)


def init_check_screen_options(
    block_out_status_bar: bool,
    disable_css_animation: bool,
    ignore_antialiasing: bool,
    ignore_colors: bool,
    ignore_transparent_pixel: bool,
    overrides: Optional[dict] = None,
) -> CheckScreenOptions:
    """Build check options from configured defaults plus per-call overrides."""
    values = {
        "block_out_status_bar": block_out_status_bar,
        "disable_css_animation": disable_css_animation,
        "ignore_antialiasing": ignore_antialiasing,
        "ignore_colors": ignore_colors,
        "ignore_transparent_pixel": ignore_transparent_pixel,
    }
    values.update({k: v for k, v in (overrides or {}).items() if v is not None})
    return CheckScreenOptions(**values)
