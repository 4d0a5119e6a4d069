"""Capture & crop — decodes a raw screenshot and writes the cropped actual image."""

from __future__ import annotations

import base64
import io
import logging
import struct
from pathlib import Path

from PIL import Image

from visual_compare.errors import InstanceQueryError
from visual_compare.image.rectangles import calculate_dpr_rectangle
from visual_compare.instance.driver import AutomationDriver
from visual_compare.models.geometry import InstanceGeometry, Rectangle

logger = logging.getLogger(__name__)

# PNG signature (8) + IHDR length (4) + "IHDR" (4) + width (4) -> height at 20
PNG_HEIGHT_OFFSET = 20
PNG_SIGNATURE = b"\x89PNG\r\n\x1a\n"


async def get_buffered_screenshot(driver: AutomationDriver) -> bytes:
    return base64.b64decode(await driver.capture_screenshot())


def read_png_height(buffer: bytes) -> int:
    """Read the intrinsic pixel height from the PNG IHDR chunk."""
    if not buffer.startswith(PNG_SIGNATURE):
        raise InstanceQueryError("Screenshot payload is not a PNG image")
    if len(buffer) < PNG_HEIGHT_OFFSET + 4:
        raise InstanceQueryError("Screenshot payload is too short to be a PNG image")
    return struct.unpack(">I", buffer[PNG_HEIGHT_OFFSET:PNG_HEIGHT_OFFSET + 4])[0]


def determine_screen_rectangle(buffer: bytes, geometry: InstanceGeometry) -> Rectangle:
    """Compute the crop rectangle in device pixels.

    Some drivers return a capture taller than the viewport (native screenshots,
    stitched pages), so the height is the larger of the two.
    """
    screenshot_height = read_png_height(buffer) / geometry.device_pixel_ratio
    rectangle = Rectangle(
        x=0,
        y=0,
        width=geometry.view_port_width,
        height=max(screenshot_height, geometry.view_port_height),
    )
    return calculate_dpr_rectangle(rectangle, geometry.device_pixel_ratio)


def crop_image(source: bytes, rectangle: Rectangle, output_path: Path) -> Path:
    """Crop ``source`` to the device pixel ``rectangle`` and save it as PNG."""
    output_path.parent.mkdir(parents=True, exist_ok=True)
    box = (
        round(rectangle.x),
        round(rectangle.y),
        round(rectangle.x + rectangle.width),
        round(rectangle.y + rectangle.height),
    )
    with Image.open(io.BytesIO(source)) as img:
        img.crop(box).save(output_path, format="PNG")
    return output_path


def save_cropped_screenshot(
    buffer: bytes,
    rectangle: Rectangle,
    folder: Path,
    file_name: str,
) -> Path:
    path = folder / file_name
    logger.debug("Cropping screenshot to %s -> %s", rectangle, path)
    return crop_image(buffer, rectangle, path)
