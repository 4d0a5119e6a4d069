"""Configuration models for the image comparison pipeline."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from visual_compare.errors import ConfigurationError

DEFAULT_FILE_FORMAT_STRING = "{tag}-{browserName}-{width}x{height}-dpr-{dpr}"
ACTUAL_FOLDER = "actual"
DIFF_FOLDER = "diff"
TEMP_FULLSCREENSHOT_FOLDER = "tempFullScreen"


class OsOffsets(BaseModel):
    """Heights (in CSS pixels) of the OS and browser chrome on a mobile device."""

    model_config = ConfigDict(frozen=True)

    status_bar: int
    address_bar: int
    address_bar_scrolled: int
    tool_bar: int


class OffsetOverrides(BaseModel):
    """Partial override of an OsOffsets record; unset fields keep the default."""
    status_bar: Optional[int] = None
    address_bar: Optional[int] = None
    address_bar_scrolled: Optional[int] = None
    tool_bar: Optional[int] = None


ANDROID_DEFAULT_OFFSETS = OsOffsets(status_bar=24, address_bar=56, address_bar_scrolled=0, tool_bar=48)
IOS_DEFAULT_OFFSETS = OsOffsets(status_bar=20, address_bar=44, address_bar_scrolled=19, tool_bar=44)


def merge_offsets(defaults: OsOffsets, overrides: OffsetOverrides | None) -> OsOffsets:
    """Merge overrides over defaults field by field."""
    if overrides is None:
        return defaults
    return OsOffsets(
        status_bar=defaults.status_bar if overrides.status_bar is None else overrides.status_bar,
        address_bar=defaults.address_bar if overrides.address_bar is None else overrides.address_bar,
        address_bar_scrolled=(
            defaults.address_bar_scrolled
            if overrides.address_bar_scrolled is None
            else overrides.address_bar_scrolled
        ),
        tool_bar=defaults.tool_bar if overrides.tool_bar is None else overrides.tool_bar,
    )


class ViewportConfig(BaseModel):
    width: int = 1280
    height: int = 720


class CapabilitiesConfig(BaseModel):
    """Mobile declarations the Playwright adapter reports as session capabilities."""
    platform_name: str = ""
    device_name: str = ""
    native_web_screenshot: Optional[bool] = None
    log_name: str = ""
    name: str = ""


class ComparisonConfig(BaseModel):
    # Folders
    baseline_folder: str
    screenshot_path: str

    # Baseline handling
    auto_save_baseline: bool = False
    debug: bool = False

    # Page normalization
    disable_css_animation: bool = False
    hide_scroll_bars: bool = True

    # Naming
    format_image_name: str = DEFAULT_FILE_FORMAT_STRING

    # Mobile
    native_web_screenshot: bool = False
    block_out_status_bar: bool = False
    test_in_browser: bool = False
    android_offsets: OffsetOverrides = Field(default_factory=OffsetOverrides)
    ios_offsets: OffsetOverrides = Field(default_factory=OffsetOverrides)
    address_bar_shadow_padding: int = 6
    tool_bar_shadow_padding: int = 6

    # Firefox screenshots are always 1x, regardless of window.devicePixelRatio
    device_pixel_ratio: float = Field(default=1, gt=0)

    # Comparison
    ignore_antialiasing: bool = False
    ignore_colors: bool = False
    ignore_transparent_pixel: bool = False

    # CLI / Playwright
    browser: str = "chromium"
    viewport: ViewportConfig = Field(default_factory=ViewportConfig)
    capabilities: CapabilitiesConfig = Field(default_factory=CapabilitiesConfig)

    @model_validator(mode="before")
    @classmethod
    def require_folders(cls, data):
        if isinstance(data, dict):
            for key in ("baseline_folder", "screenshot_path"):
                if not data.get(key):
                    raise ConfigurationError(f"Image {key} not given.")
        return data

    @property
    def resolved_android_offsets(self) -> OsOffsets:
        return merge_offsets(ANDROID_DEFAULT_OFFSETS, self.android_offsets)

    @property
    def resolved_ios_offsets(self) -> OsOffsets:
        return merge_offsets(IOS_DEFAULT_OFFSETS, self.ios_offsets)

    @property
    def actual_folder(self) -> Path:
        return Path(self.screenshot_path) / ACTUAL_FOLDER

    @property
    def diff_folder(self) -> Path:
        return Path(self.screenshot_path) / DIFF_FOLDER

    @property
    def temp_full_screen_folder(self) -> Path:
        return Path(self.screenshot_path) / TEMP_FULLSCREENSHOT_FOLDER

    @classmethod
    def load(cls, path: str | Path) -> "ComparisonConfig":
        """Load config from a JSON file."""
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")
        with open(path) as f:
            data = json.load(f)
        return cls(**data)

    def save(self, path: str | Path) -> None:
        """Save config to a JSON file."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w") as f:
            json.dump(self.model_dump(), f, indent=2)
