"""End-to-end tests for ImageComparison with a mocked automation driver."""

import threading
from unittest.mock import AsyncMock, Mock, patch

import pytest
from PIL import Image

from conftest import default_browser_data, make_driver, make_png, write_png
from visual_compare.errors import BaselineMissingError, ConfigurationError
from visual_compare.image.baseline import check_image_exists
from visual_compare.image.capture import save_cropped_screenshot
from visual_compare.image.differ import PixelDiffer
from visual_compare.image_comparison import ImageComparison
from visual_compare.models.comparison import DiffResult
from visual_compare.models.geometry import Rectangle
from visual_compare.instance.page_normalizer import ANIMATION_CSS

FILE_NAME = "home-chrome-1280x800-dpr-1.png"


class TestImageComparisonInit:

    def test_missing_baseline_folder(self, comparison_config):
        comparison_config.baseline_folder = ""
        with pytest.raises(ConfigurationError, match="baseline_folder"):
            ImageComparison(comparison_config, make_driver())

    def test_missing_screenshot_path(self, comparison_config):
        comparison_config.screenshot_path = ""
        with pytest.raises(ConfigurationError, match="screenshot_path"):
            ImageComparison(comparison_config, make_driver())

    def test_creates_folders(self, comparison_config, tmp_path):
        ImageComparison(comparison_config, make_driver())
        assert (tmp_path / "baseline").is_dir()
        assert (tmp_path / "screenshots" / "actual").is_dir()
        assert (tmp_path / "screenshots" / "diff").is_dir()
        assert not (tmp_path / "screenshots" / "tempFullScreen").exists()

    def test_debug_creates_temp_folder(self, comparison_config, tmp_path):
        comparison_config.debug = True
        ImageComparison(comparison_config, make_driver())
        assert (tmp_path / "screenshots" / "tempFullScreen").is_dir()

    def test_default_differ(self, comparison_config):
        assert isinstance(ImageComparison(comparison_config, make_driver()).differ, PixelDiffer)


class TestSaveScreen:

    @pytest.mark.asyncio
    async def test_writes_cropped_actual(self, comparison_config, tmp_path):
        comparison = ImageComparison(comparison_config, make_driver(screenshot=make_png(1280, 700)))

        path = await comparison.save_screen("home")

        assert path == tmp_path / "screenshots" / "actual" / FILE_NAME
        with Image.open(path) as img:
            # cropped to the viewport width, scrollbar excluded
            assert img.size == (1265, 700)

    @pytest.mark.asyncio
    async def test_high_dpr_crop(self, comparison_config):
        driver = make_driver(
            browser_data=default_browser_data(device_pixel_ratio=2, view_port_width=400, view_port_height=300),
            screenshot=make_png(820, 600),
        )
        comparison = ImageComparison(comparison_config, driver)

        path = await comparison.save_screen("home")

        assert path.name == "home-chrome-1280x800-dpr-2.png"
        with Image.open(path) as img:
            assert img.size == (800, 600)

    @pytest.mark.asyncio
    async def test_css_injected_before_screenshot(self, comparison_config):
        events = []
        driver = make_driver()
        data = default_browser_data()

        async def run_page_script(script, args):
            events.append("script")
            return data if "scrollHeight" in script else None

        screenshot = driver.capture_screenshot.return_value

        async def capture():
            events.append("screenshot")
            return screenshot

        driver.run_page_script = AsyncMock(side_effect=run_page_script)
        driver.capture_screenshot = AsyncMock(side_effect=capture)

        await ImageComparison(comparison_config, driver).save_screen("home")

        assert events == ["script", "script", "screenshot"]

    @pytest.mark.asyncio
    async def test_per_call_override(self, comparison_config):
        driver = make_driver()
        await ImageComparison(comparison_config, driver).save_screen("home", disable_css_animation=True)

        _, css = driver.run_page_script.call_args_list[-1].args
        assert ANIMATION_CSS in css


class TestCheckScreen:

    @pytest.mark.asyncio
    async def test_missing_baseline_fails(self, comparison_config, tmp_path):
        comparison = ImageComparison(comparison_config, make_driver())

        with pytest.raises(BaselineMissingError):
            await comparison.check_screen("home")

        assert not (tmp_path / "baseline" / FILE_NAME).exists()
        assert list((tmp_path / "screenshots" / "diff").iterdir()) == []

    @pytest.mark.asyncio
    async def test_autosave_creates_baseline(self, comparison_config, tmp_path):
        comparison_config.auto_save_baseline = True
        differ = Mock()
        comparison = ImageComparison(comparison_config, make_driver(), differ=differ)

        result = await comparison.check_screen("home")

        assert result.auto_saved is True
        assert result.diff_path is None
        assert (tmp_path / "baseline" / FILE_NAME).exists()
        assert list((tmp_path / "screenshots" / "diff").iterdir()) == []
        differ.compare.assert_not_called()

    @pytest.mark.asyncio
    async def test_identical_baseline(self, comparison_config, tmp_path):
        write_png(tmp_path / "baseline" / FILE_NAME, 1265, 700)
        comparison = ImageComparison(comparison_config, make_driver())

        result = await comparison.check_screen("home")

        assert result.mismatch_percentage == 0
        assert result.auto_saved is False
        assert result.diff_path is None
        assert not (tmp_path / "screenshots" / "diff" / FILE_NAME).exists()

    @pytest.mark.asyncio
    async def test_changed_page_writes_diff(self, comparison_config, tmp_path):
        write_png(tmp_path / "baseline" / FILE_NAME, 1265, 700, (0, 0, 0, 255))
        comparison = ImageComparison(comparison_config, make_driver())

        result = await comparison.check_screen("home")

        assert result.mismatch_percentage == 100.0
        assert result.diff_path == str(tmp_path / "screenshots" / "diff" / FILE_NAME)
        assert (tmp_path / "screenshots" / "diff" / FILE_NAME).exists()

    @pytest.mark.asyncio
    async def test_options_reach_differ(self, comparison_config, tmp_path):
        write_png(tmp_path / "baseline" / FILE_NAME, 1265, 700)
        differ = Mock()
        differ.compare = Mock(return_value=DiffResult(mismatch_percentage=0))
        comparison_config.ignore_antialiasing = True
        comparison = ImageComparison(comparison_config, make_driver(), differ=differ)
        block_out = [Rectangle(x=10, y=132, width=100, height=50)]

        await comparison.check_screen("home", block_out=block_out, ignore_colors=True)

        options = differ.compare.call_args.args[2]
        assert options.ignore_rectangles == block_out
        assert options.ignore_antialiasing is True
        assert options.ignore_colors is True
        assert options.ignore_transparent_pixel is False

    @pytest.mark.asyncio
    async def test_ios_status_bar_replaces_block_out(self, comparison_config, tmp_path):
        driver = make_driver(
            capabilities={"browser_name": "safari", "platform_name": "iOS"},
            browser_data=default_browser_data(
                browser_width=375, browser_height=812, device_pixel_ratio=2,
                view_port_width=375, view_port_height=635,
            ),
            screenshot=make_png(750, 1270),
        )
        file_name = "home-safari-375x812-dpr-2.png"
        write_png(tmp_path / "baseline" / file_name, 750, 1270)
        differ = Mock()
        differ.compare = Mock(return_value=DiffResult(mismatch_percentage=0))
        comparison = ImageComparison(comparison_config, driver, differ=differ)

        await comparison.check_screen(
            "home",
            block_out=[Rectangle(x=10, y=132, width=100, height=50)],
            block_out_status_bar=True,
        )

        options = differ.compare.call_args.args[2]
        assert options.ignore_rectangles == [Rectangle(x=0, y=0, width=750, height=40)]

    @pytest.mark.asyncio
    async def test_geometry_queried_once(self, comparison_config, tmp_path):
        write_png(tmp_path / "baseline" / FILE_NAME, 1265, 700)
        driver = make_driver()

        await ImageComparison(comparison_config, driver).check_screen("home")

        driver.get_session_capabilities.assert_awaited_once()


class TestFileIoOffLoop:

    @pytest.mark.asyncio
    async def test_crop_and_baseline_copy_run_in_worker_threads(self, comparison_config):
        comparison_config.auto_save_baseline = True
        loop_thread = threading.get_ident()
        seen = {}

        def record(name, func):
            def wrapper(*args):
                seen[name] = threading.get_ident()
                return func(*args)
            return wrapper

        with patch(
            "visual_compare.image_comparison.save_cropped_screenshot",
            side_effect=record("crop", save_cropped_screenshot),
        ), patch(
            "visual_compare.image_comparison.check_image_exists",
            side_effect=record("baseline", check_image_exists),
        ):
            result = await ImageComparison(comparison_config, make_driver()).check_screen("home")

        assert result.auto_saved is True
        assert seen["crop"] != loop_thread
        assert seen["baseline"] != loop_thread
