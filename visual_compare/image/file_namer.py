"""File namer — formats baseline/actual/diff file names from a template."""

from __future__ import annotations

import re

from visual_compare.models.geometry import InstanceGeometry
from visual_compare.utils.platform import is_mobile

_WORD_RE = re.compile(r"[A-Za-z0-9]+")


def camel_case(value: str) -> str:
    """'Chrome latest - Win10' -> 'chromeLatestWin10'"""
    words = _WORD_RE.findall(value)
    if not words:
        return ""
    first, rest = words[0], words[1:]
    return first.lower() + "".join(w[:1].upper() + w[1:] for w in rest)


def _format_value(value) -> str:
    if isinstance(value, float):
        return str(int(value)) if value.is_integer() else repr(value)
    return str(value)


def file_name_tokens(geometry: InstanceGeometry, tag: str) -> dict[str, str]:
    mobile = is_mobile(geometry.platform_name)
    if mobile and geometry.test_in_browser:
        mobile_token = geometry.browser_name
    elif mobile:
        mobile_token = "app"
    else:
        mobile_token = ""
    return {
        "browserName": geometry.browser_name,
        "deviceName": geometry.device_name,
        "dpr": _format_value(geometry.device_pixel_ratio),
        "height": _format_value(geometry.browser_height),
        "logName": camel_case(geometry.log_name),
        "mobile": mobile_token,
        "name": geometry.name,
        "tag": tag,
        "width": _format_value(geometry.browser_width),
    }


def format_file_name(format_string: str, tokens: dict[str, str]) -> str:
    """Substitute ``{token}`` placeholders and append ``.png``.

    Placeholders without a value in ``tokens`` are left in place.
    """
    file_name = format_string
    for key, value in tokens.items():
        file_name = file_name.replace(f"{{{key}}}", value)
    return f"{file_name}.png"


def format_instance_file_name(format_string: str, geometry: InstanceGeometry, tag: str) -> str:
    return format_file_name(format_string, file_name_tokens(geometry, tag))
