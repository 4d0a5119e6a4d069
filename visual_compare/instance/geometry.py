"""Geometry resolver — turns live instance measurements into an InstanceGeometry."""

from __future__ import annotations

import logging
from typing import Optional

from pydantic import ValidationError

from visual_compare.errors import InstanceQueryError
from visual_compare.instance.driver import AutomationDriver
from visual_compare.models.geometry import BrowserData, InstanceGeometry, SaveType, SessionCapabilities
from visual_compare.utils.platform import is_android, is_firefox, is_ios, is_mobile

logger = logging.getLogger(__name__)

# Width comes from document.body.clientWidth so the scrollbar is not included.
# Firefox returns screenshots in 1x dimensions even on high density screens,
# so its ratio is the configured default instead of window.devicePixelRatio.
_BROWSER_DATA_SCRIPT = """
(args) => {
    const fullPageHeight = document.body.scrollHeight
        - (args.addressBarShadowPadding + args.toolBarShadowPadding);
    const fullPageWidth = document.body.scrollWidth;
    const devicePixelRatio = args.isFirefox ? args.defaultDevicePixelRatio : window.devicePixelRatio;
    const viewPortWidth = document.body.clientWidth;
    const viewPortHeight = window.innerHeight;
    const height = args.isMobile ? window.screen.height : window.outerHeight;
    const width = args.isMobile ? window.screen.width : window.outerWidth;
    return {
        browser_height: height !== 0 ? height : viewPortHeight,
        browser_width: width !== 0 ? width : viewPortWidth,
        device_pixel_ratio: devicePixelRatio,
        full_page_height: fullPageHeight,
        full_page_width: fullPageWidth,
        view_port_height: viewPortHeight,
        view_port_width: viewPortWidth,
    };
}
"""


def resolve_native_web_screenshot(explicit: Optional[bool], capability: Optional[bool]) -> bool:
    """Decide whether the driver returns native (chrome included) screenshots.

    An explicit ``True`` from the caller always wins. An explicit ``False``
    or no value at all is overruled by the session capability, so the
    capability can only switch the feature on.
    """
    if explicit:
        return True
    return bool(capability)


def resolve_shadow_paddings(
    platform_name: str,
    native_web_screenshot: bool,
    save_type: SaveType,
    test_in_browser: bool,
    address_bar_shadow_padding: float,
    tool_bar_shadow_padding: float,
) -> tuple[float, float]:
    """Return (address bar, tool bar) paddings; both are 0 outside a mobile browser."""
    test_in_mobile_browser = save_type != SaveType.SCREEN and is_mobile(platform_name) and test_in_browser
    address_bar = (
        address_bar_shadow_padding
        if test_in_mobile_browser and ((native_web_screenshot and is_android(platform_name)) or is_ios(platform_name))
        else 0
    )
    tool_bar = tool_bar_shadow_padding if test_in_mobile_browser and is_ios(platform_name) else 0
    return address_bar, tool_bar


async def get_session_capabilities(driver: AutomationDriver) -> SessionCapabilities:
    payload = await driver.get_session_capabilities()
    if not isinstance(payload, dict):
        raise InstanceQueryError(f"Unexpected capabilities payload: {payload!r}")
    try:
        return SessionCapabilities(**payload)
    except ValidationError as e:
        raise InstanceQueryError(f"Malformed capabilities payload: {e}") from e


async def get_browser_data(
    driver: AutomationDriver,
    browser_name: str,
    platform_name: str,
    default_device_pixel_ratio: float,
    address_bar_shadow_padding: float,
    tool_bar_shadow_padding: float,
) -> BrowserData:
    """Measure the browser, viewport and document inside the live page."""
    raw = await driver.run_page_script(
        _BROWSER_DATA_SCRIPT,
        {
            "addressBarShadowPadding": address_bar_shadow_padding,
            "defaultDevicePixelRatio": default_device_pixel_ratio,
            "isFirefox": is_firefox(browser_name),
            "isMobile": is_mobile(platform_name),
            "toolBarShadowPadding": tool_bar_shadow_padding,
        },
    )
    if not isinstance(raw, dict):
        raise InstanceQueryError(f"Unexpected browser data payload: {raw!r}")
    try:
        return BrowserData(**raw)
    except ValidationError as e:
        raise InstanceQueryError(f"Malformed browser data payload: {e}") from e


async def get_current_instance_data(
    driver: AutomationDriver,
    save_type: SaveType,
    device_pixel_ratio: float,
    test_in_browser: bool,
    native_web_screenshot: Optional[bool],
    address_bar_shadow_padding: float,
    tool_bar_shadow_padding: float,
) -> InstanceGeometry:
    """Query the live instance and resolve its geometry.

    Driver failures propagate unchanged; payloads that cannot be parsed raise
    InstanceQueryError.
    """
    caps = await get_session_capabilities(driver)
    native = resolve_native_web_screenshot(native_web_screenshot, caps.native_web_screenshot)
    address_bar, tool_bar = resolve_shadow_paddings(
        caps.platform_name,
        native,
        save_type,
        test_in_browser,
        address_bar_shadow_padding,
        tool_bar_shadow_padding,
    )

    data = await get_browser_data(
        driver,
        browser_name=caps.browser_name,
        platform_name=caps.platform_name,
        default_device_pixel_ratio=device_pixel_ratio,
        address_bar_shadow_padding=address_bar,
        tool_bar_shadow_padding=tool_bar,
    )

    geometry = build_instance_geometry(caps, data, native, address_bar, tool_bar, device_pixel_ratio)
    logger.debug("Resolved instance geometry: %s", geometry)
    return geometry


def build_instance_geometry(
    caps: SessionCapabilities,
    data: BrowserData,
    native_web_screenshot: bool,
    address_bar_shadow_padding: float,
    tool_bar_shadow_padding: float,
    default_device_pixel_ratio: float,
) -> InstanceGeometry:
    # The page script already applies these rules; they are repeated here so
    # drivers that measure without running the script get the same geometry.
    dpr = default_device_pixel_ratio if is_firefox(caps.browser_name) else data.device_pixel_ratio
    return InstanceGeometry(
        browser_name=caps.browser_name,
        platform_name=caps.platform_name,
        device_name=caps.device_name,
        log_name=caps.log_name,
        name=caps.name,
        test_in_browser=caps.browser_name != "",
        native_web_screenshot=native_web_screenshot,
        address_bar_shadow_padding=address_bar_shadow_padding,
        tool_bar_shadow_padding=tool_bar_shadow_padding,
        device_pixel_ratio=dpr,
        browser_width=data.browser_width if data.browser_width != 0 else data.view_port_width,
        browser_height=data.browser_height if data.browser_height != 0 else data.view_port_height,
        view_port_width=data.view_port_width,
        view_port_height=data.view_port_height,
        full_page_width=data.full_page_width,
        full_page_height=data.full_page_height,
    )
