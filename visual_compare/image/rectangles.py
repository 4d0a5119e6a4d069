"""Device pixel ratio scaling for rectangles."""

from __future__ import annotations

from visual_compare.models.geometry import Rectangle


def calculate_dpr_rectangle(rectangle: Rectangle, device_pixel_ratio: float) -> Rectangle:
    """Return a copy of ``rectangle`` with every field multiplied by the ratio.

    Scaling an already scaled rectangle scales it again.
    """
    return Rectangle(
        x=rectangle.x * device_pixel_ratio,
        y=rectangle.y * device_pixel_ratio,
        width=rectangle.width * device_pixel_ratio,
        height=rectangle.height * device_pixel_ratio,
    )
