"""Geometry data structures: rectangles, capabilities and resolved instance data."""

from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class SaveType(str, Enum):
    SCREEN = "screen"
    ELEMENT = "element"
    FULL_PAGE = "full_page"


class Rectangle(BaseModel):
    """A rectangle in logical (CSS) or device pixels, depending on context."""

    model_config = ConfigDict(frozen=True)

    x: float = 0
    y: float = 0
    width: float = 0
    height: float = 0


class SessionCapabilities(BaseModel):
    """Capabilities reported by the automation session."""

    browser_name: str = ""
    platform_name: str = ""
    device_name: str = ""
    native_web_screenshot: Optional[bool] = None
    log_name: str = ""
    name: str = ""

    @field_validator("browser_name", "platform_name", "device_name", mode="before")
    @classmethod
    def lower_case(cls, v):
        if v is None:
            return ""
        return v.lower() if isinstance(v, str) else v

    @field_validator("log_name", "name", mode="before")
    @classmethod
    def none_to_empty(cls, v):
        return "" if v is None else v


class BrowserData(BaseModel):
    """Raw measurements taken inside the live page."""

    browser_height: float
    browser_width: float
    device_pixel_ratio: float = Field(gt=0)
    full_page_height: float
    full_page_width: float
    view_port_height: float
    view_port_width: float


class InstanceGeometry(BaseModel):
    """Normalized geometry of one browser/device instance, resolved once per capture."""

    model_config = ConfigDict(frozen=True)

    browser_name: str = ""
    platform_name: str = ""
    device_name: str = ""
    log_name: str = ""
    name: str = ""
    test_in_browser: bool = False
    native_web_screenshot: bool = False
    address_bar_shadow_padding: float = 0
    tool_bar_shadow_padding: float = 0

    device_pixel_ratio: float = Field(default=1, gt=0)
    browser_width: float = 0
    browser_height: float = 0
    view_port_width: float = 0
    view_port_height: float = 0
    full_page_width: float = 0
    full_page_height: float = 0
