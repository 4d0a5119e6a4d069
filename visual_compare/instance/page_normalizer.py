"""Page normalizer — injects CSS that makes a page stable for screenshots."""

from __future__ import annotations

import logging

from visual_compare.instance.driver import AutomationDriver

logger = logging.getLogger(__name__)

ANIMATION_CSS = (
    "* {"
    "-webkit-transition-duration: 0s !important;"
    "transition-duration: 0s !important;"
    "-webkit-animation-duration: 0s !important;"
    "animation-duration: 0s !important;"
    "}"
)
SCROLLBAR_CSS = "*::-webkit-scrollbar { display: none !important; }"

_APPEND_STYLE_SCRIPT = """
(css) => {
    const head = document.head || document.getElementsByTagName('head')[0];
    const style = document.createElement('style');
    style.type = 'text/css';
    style.appendChild(document.createTextNode(css));
    head.appendChild(style);
}
"""


def build_custom_css(
    disable_css_animation: bool,
    hide_scroll_bars: bool,
    address_bar_shadow_padding: float,
    tool_bar_shadow_padding: float,
) -> str:
    css = ""
    if disable_css_animation:
        css += ANIMATION_CSS
    if hide_scroll_bars:
        css += SCROLLBAR_CSS
    if address_bar_shadow_padding:
        css += f"body{{padding-top: {_px(address_bar_shadow_padding)}px !important}}"
    if tool_bar_shadow_padding:
        css += f"body{{padding-bottom: {_px(tool_bar_shadow_padding)}px !important}}"
    return css


def _px(value: float) -> str:
    return f"{value:g}"


async def set_custom_css(
    driver: AutomationDriver,
    disable_css_animation: bool,
    hide_scroll_bars: bool,
    address_bar_shadow_padding: float,
    tool_bar_shadow_padding: float,
) -> None:
    """Append a fresh <style> element to the page. Must run before the screenshot."""
    css = build_custom_css(disable_css_animation, hide_scroll_bars, address_bar_shadow_padding, tool_bar_shadow_padding)
    logger.debug("Injecting custom CSS: %s", css or "<empty>")
    await driver.run_page_script(_APPEND_STYLE_SCRIPT, css)
