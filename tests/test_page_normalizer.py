"""Tests for the page normalizer CSS injection."""

import pytest

from conftest import make_driver
from visual_compare.instance.page_normalizer import (
    ANIMATION_CSS,
    SCROLLBAR_CSS,
    build_custom_css,
    set_custom_css,
)


class TestBuildCustomCss:

    def test_nothing_requested(self):
        assert build_custom_css(False, False, 0, 0) == ""

    def test_disable_animation(self):
        css = build_custom_css(True, False, 0, 0)
        assert css == ANIMATION_CSS
        assert "animation-duration: 0s !important" in css
        assert "transition-duration: 0s !important" in css

    def test_hide_scrollbars(self):
        assert build_custom_css(False, True, 0, 0) == SCROLLBAR_CSS

    def test_paddings_only_when_non_zero(self):
        css = build_custom_css(False, False, 6, 0)
        assert "padding-top: 6px" in css
        assert "padding-bottom" not in css

        css = build_custom_css(False, False, 0, 8)
        assert "padding-bottom: 8px" in css
        assert "padding-top" not in css


class TestSetCustomCss:

    @pytest.mark.asyncio
    async def test_injects_style_element(self):
        driver = make_driver()
        await set_custom_css(driver, True, True, 6, 6)

        script, css = driver.run_page_script.call_args.args
        assert "createElement('style')" in script
        assert ANIMATION_CSS in css
        assert SCROLLBAR_CSS in css
        assert "padding-top: 6px" in css

    @pytest.mark.asyncio
    async def test_each_call_appends_a_new_style(self):
        driver = make_driver()
        await set_custom_css(driver, False, True, 0, 0)
        await set_custom_css(driver, False, True, 0, 0)
        assert driver.run_page_script.await_count == 2
