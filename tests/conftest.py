"""Pytest configuration and shared fixtures."""

import base64
import io
from pathlib import Path
from typing import Any
from unittest.mock import AsyncMock, Mock

import pytest
from PIL import Image

from visual_compare.models.config import ComparisonConfig
from visual_compare.models.geometry import InstanceGeometry


# ============================================================================
# Image Fixtures
# ============================================================================


def make_png(width: int, height: int, color=(255, 255, 255, 255)) -> bytes:
    """Create an in-memory PNG of a single colour."""
    buf = io.BytesIO()
    Image.new("RGBA", (width, height), color).save(buf, format="PNG")
    return buf.getvalue()


def write_png(path: Path, width: int, height: int, color=(255, 255, 255, 255)) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(make_png(width, height, color))
    return path


# ============================================================================
# Driver Fixtures
# ============================================================================


def default_browser_data(**overrides: Any) -> dict[str, Any]:
    data = {
        "browser_height": 800,
        "browser_width": 1280,
        "device_pixel_ratio": 1,
        "full_page_height": 2400,
        "full_page_width": 1280,
        "view_port_height": 700,
        "view_port_width": 1265,
    }
    data.update(overrides)
    return data


def make_driver(
    capabilities: dict[str, Any] | None = None,
    browser_data: dict[str, Any] | None = None,
    screenshot: bytes | None = None,
) -> Mock:
    """Build a mock automation driver.

    The browser data script is recognised by its use of scrollHeight; every
    other page script (the CSS injection) returns None.
    """
    caps = {"browser_name": "chrome"} if capabilities is None else capabilities
    data = default_browser_data() if browser_data is None else browser_data
    png = screenshot if screenshot is not None else make_png(1265, 700)

    driver = Mock()
    driver.get_session_capabilities = AsyncMock(return_value=caps)
    driver.run_page_script = AsyncMock(
        side_effect=lambda script, args: data if "scrollHeight" in script else None
    )
    driver.capture_screenshot = AsyncMock(return_value=base64.b64encode(png).decode("ascii"))
    return driver


@pytest.fixture
def driver() -> Mock:
    return make_driver()


# ============================================================================
# Configuration Fixtures
# ============================================================================


@pytest.fixture
def comparison_config(tmp_path: Path) -> ComparisonConfig:
    """Create a comparison configuration rooted in a temp directory."""
    return ComparisonConfig(
        baseline_folder=str(tmp_path / "baseline"),
        screenshot_path=str(tmp_path / "screenshots"),
    )


@pytest.fixture
def desktop_geometry() -> InstanceGeometry:
    return InstanceGeometry(
        browser_name="chrome",
        test_in_browser=True,
        device_pixel_ratio=2,
        browser_width=1280,
        browser_height=800,
        view_port_width=1265,
        view_port_height=700,
        full_page_width=1280,
        full_page_height=2400,
    )


@pytest.fixture
def ios_geometry() -> InstanceGeometry:
    return InstanceGeometry(
        browser_name="safari",
        platform_name="ios",
        device_name="iphone x",
        test_in_browser=True,
        device_pixel_ratio=3,
        browser_width=375,
        browser_height=812,
        view_port_width=375,
        view_port_height=635,
    )
