"""Image comparison — saves and checks screens against stored baselines."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Optional

from visual_compare.errors import ConfigurationError
from visual_compare.image.baseline import check_image_exists
from visual_compare.image.capture import determine_screen_rectangle, get_buffered_screenshot, save_cropped_screenshot
from visual_compare.image.comparator import build_compare_options, execute_image_comparison
from visual_compare.image.differ import ImageDiffer, PixelDiffer
from visual_compare.image.file_namer import format_instance_file_name
from visual_compare.instance.driver import AutomationDriver
from visual_compare.instance.geometry import get_current_instance_data
from visual_compare.instance.page_normalizer import set_custom_css
from visual_compare.models.comparison import ComparisonResult
from visual_compare.models.config import ComparisonConfig
from visual_compare.models.geometry import InstanceGeometry, Rectangle, SaveType
from visual_compare.models.options import init_check_screen_options, init_save_screen_options

logger = logging.getLogger(__name__)


class ImageComparison:
    """Captures screens through an automation driver and diffs them against baselines.

    Concurrent captures must use distinct tags; nothing here locks the
    actual, baseline or diff folders.
    """

    def __init__(
        self,
        config: ComparisonConfig,
        driver: AutomationDriver,
        differ: ImageDiffer | None = None,
    ):
        if not config.baseline_folder:
            raise ConfigurationError("Image baseline_folder not given.")
        if not config.screenshot_path:
            raise ConfigurationError("Image screenshot_path not given.")

        self.config = config
        self.driver = driver
        self.differ = differ or PixelDiffer()

        self.baseline_folder = Path(config.baseline_folder)
        self.actual_folder = config.actual_folder
        self.diff_folder = config.diff_folder
        self.android_offsets = config.resolved_android_offsets
        self.ios_offsets = config.resolved_ios_offsets

        self.actual_folder.mkdir(parents=True, exist_ok=True)
        self.baseline_folder.mkdir(parents=True, exist_ok=True)
        self.diff_folder.mkdir(parents=True, exist_ok=True)
        if config.debug:
            config.temp_full_screen_folder.mkdir(parents=True, exist_ok=True)

    async def get_instance_data(self, save_type: SaveType = SaveType.SCREEN) -> InstanceGeometry:
        return await get_current_instance_data(
            self.driver,
            save_type=save_type,
            device_pixel_ratio=self.config.device_pixel_ratio,
            test_in_browser=self.config.test_in_browser,
            native_web_screenshot=self.config.native_web_screenshot,
            address_bar_shadow_padding=self.config.address_bar_shadow_padding,
            tool_bar_shadow_padding=self.config.tool_bar_shadow_padding,
        )

    async def save_screen(
        self,
        tag: str,
        disable_css_animation: Optional[bool] = None,
        hide_scroll_bars: Optional[bool] = None,
        instance: InstanceGeometry | None = None,
    ) -> Path:
        """Capture the viewport and store it in the actual folder. Returns the image path."""
        options = init_save_screen_options(
            self.config.disable_css_animation,
            self.config.hide_scroll_bars,
            {"disable_css_animation": disable_css_animation, "hide_scroll_bars": hide_scroll_bars},
        )
        geometry = instance or await self.get_instance_data(SaveType.SCREEN)

        await set_custom_css(
            self.driver,
            disable_css_animation=options.disable_css_animation,
            hide_scroll_bars=options.hide_scroll_bars,
            address_bar_shadow_padding=geometry.address_bar_shadow_padding,
            tool_bar_shadow_padding=geometry.tool_bar_shadow_padding,
        )

        buffer = await get_buffered_screenshot(self.driver)
        rectangle = determine_screen_rectangle(buffer, geometry)
        file_name = format_instance_file_name(self.config.format_image_name, geometry, tag)
        return await asyncio.to_thread(save_cropped_screenshot, buffer, rectangle, self.actual_folder, file_name)

    async def check_screen(
        self,
        tag: str,
        block_out: list[Rectangle] | None = None,
        block_out_status_bar: Optional[bool] = None,
        disable_css_animation: Optional[bool] = None,
        ignore_antialiasing: Optional[bool] = None,
        ignore_colors: Optional[bool] = None,
        ignore_transparent_pixel: Optional[bool] = None,
    ) -> ComparisonResult:
        """Capture the viewport and compare it with its baseline.

        A missing baseline is autosaved when ``auto_save_baseline`` is on;
        that run returns without comparing.
        """
        options = init_check_screen_options(
            self.config.block_out_status_bar,
            self.config.disable_css_animation,
            self.config.ignore_antialiasing,
            self.config.ignore_colors,
            self.config.ignore_transparent_pixel,
            {
                "block_out": block_out,
                "block_out_status_bar": block_out_status_bar,
                "disable_css_animation": disable_css_animation,
                "ignore_antialiasing": ignore_antialiasing,
                "ignore_colors": ignore_colors,
                "ignore_transparent_pixel": ignore_transparent_pixel,
            },
        )
        geometry = await self.get_instance_data(SaveType.SCREEN)
        actual_path = await self.save_screen(
            tag,
            disable_css_animation=options.disable_css_animation,
            hide_scroll_bars=self.config.hide_scroll_bars,
            instance=geometry,
        )
        file_name = actual_path.name
        baseline_path = self.baseline_folder / file_name
        diff_path = self.diff_folder / file_name

        auto_saved = await asyncio.to_thread(
            check_image_exists,
            self.actual_folder, self.baseline_folder, file_name, self.config.auto_save_baseline
        )
        if auto_saved:
            return ComparisonResult(
                file_name=file_name,
                actual_path=str(actual_path),
                baseline_path=str(baseline_path),
                auto_saved=True,
            )

        compare_options = build_compare_options(
            options, geometry, SaveType.SCREEN, self.android_offsets, self.ios_offsets
        )
        mismatch, written = await execute_image_comparison(
            self.differ, actual_path, baseline_path, diff_path, compare_options, debug=self.config.debug
        )
        logger.info("Compared %s: %.2f%% mismatch", file_name, mismatch)
        return ComparisonResult(
            file_name=file_name,
            actual_path=str(actual_path),
            baseline_path=str(baseline_path),
            diff_path=str(written) if written else None,
            mismatch_percentage=mismatch,
        )
