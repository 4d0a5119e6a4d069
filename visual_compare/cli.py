"""CLI entry point for visual comparison."""

from __future__ import annotations

import asyncio
import logging
import sys
from pathlib import Path

import click
from playwright.async_api import async_playwright
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from visual_compare.errors import BaselineMissingError, VisualCompareError
from visual_compare.image_comparison import ImageComparison
from visual_compare.instance.driver import PlaywrightDriver
from visual_compare.models.comparison import ComparisonResult
from visual_compare.models.config import ComparisonConfig
from visual_compare.models.geometry import Rectangle

console = Console()


def setup_logging(verbose: bool = False) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, rich_tracebacks=True)],
    )


def parse_block_out(value: str) -> Rectangle:
    """Parse 'x,y,width,height' into a Rectangle."""
    parts = value.split(",")
    if len(parts) != 4:
        raise click.BadParameter(f"Expected x,y,width,height, got '{value}'")
    try:
        x, y, width, height = (float(p) for p in parts)
    except ValueError:
        raise click.BadParameter(f"Block-out values must be numbers: '{value}'")
    return Rectangle(x=x, y=y, width=width, height=height)


def load_config(path: str) -> ComparisonConfig:
    try:
        return ComparisonConfig.load(path)
    except FileNotFoundError:
        console.print(f"[red]Config file not found: {path}[/red]")
        console.print("Run 'visual-compare init' to create a default config.")
        sys.exit(1)
    except VisualCompareError as e:
        console.print(f"[red]{e}[/red]")
        sys.exit(1)


async def _run_on_page(cfg: ComparisonConfig, url: str, action):
    async with async_playwright() as p:
        browser_type = getattr(p, cfg.browser)
        browser = await browser_type.launch()
        try:
            context = await browser.new_context(
                viewport={"width": cfg.viewport.width, "height": cfg.viewport.height}
            )
            page = await context.new_page()
            await page.goto(url, wait_until="networkidle")
            comparison = ImageComparison(cfg, PlaywrightDriver(page, cfg.capabilities))
            return await action(comparison)
        finally:
            await browser.close()


def print_result(result: ComparisonResult) -> None:
    table = Table(title="Comparison Result")
    table.add_column("Metric", style="bold")
    table.add_column("Value")
    table.add_row("File", result.file_name)
    table.add_row("Actual", result.actual_path)
    table.add_row("Baseline", result.baseline_path)
    if result.auto_saved:
        table.add_row("Status", "[yellow]Baseline autosaved[/yellow]")
    else:
        color = "green" if result.mismatch_percentage == 0 else "red"
        table.add_row("Mismatch", f"[{color}]{result.mismatch_percentage:.2f}%[/{color}]")
        if result.diff_path:
            table.add_row("Diff", result.diff_path)
    console.print(table)


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
def cli(verbose: bool) -> None:
    """Visual regression testing against stored baseline images"""
    setup_logging(verbose)


@cli.command()
@click.option("--baseline-folder", default="./baseline", help="Folder holding baseline images")
@click.option("--screenshot-path", default="./screenshots", help="Folder for actual and diff images")
@click.option("--config", "-c", default="visual-config.json", help="Config file path")
def init(baseline_folder: str, screenshot_path: str, config: str) -> None:
    """Create a default configuration file."""
    config_path = Path(config)
    if config_path.exists():
        if not click.confirm(f"{config_path} already exists. Overwrite?"):
            return

    cfg = ComparisonConfig(baseline_folder=baseline_folder, screenshot_path=screenshot_path)
    cfg.save(config_path)
    console.print(f"[green]Created {config_path}[/green]")
    console.print("\nYou can now capture a first baseline with:")
    console.print("  [blue]visual-compare check https://example.com --tag home[/blue]")


@cli.command()
@click.argument("url")
@click.option("--tag", "-t", required=True, help="Tag used in the image file name")
@click.option("--config", "-c", default="visual-config.json", help="Config file path")
def save(url: str, tag: str, config: str) -> None:
    """Save a screenshot of URL to the actual folder."""
    cfg = load_config(config)
    try:
        path = asyncio.run(_run_on_page(cfg, url, lambda c: c.save_screen(tag)))
    except VisualCompareError as e:
        console.print(f"[red]{e}[/red]")
        sys.exit(1)
    console.print(f"[green]Saved:[/green] {path}")


@cli.command()
@click.argument("url")
@click.option("--tag", "-t", required=True, help="Tag used in the image file name")
@click.option("--block-out", "block_out", multiple=True, help="Region to ignore as x,y,width,height")
@click.option("--block-out-status-bar/--no-block-out-status-bar", default=None, help="Ignore the mobile status bar")
@click.option("--tolerance", default=0.0, type=float, help="Allowed mismatch percentage")
@click.option("--config", "-c", default="visual-config.json", help="Config file path")
def check(
    url: str,
    tag: str,
    block_out: tuple[str, ...],
    block_out_status_bar: bool | None,
    tolerance: float,
    config: str,
) -> None:
    """Compare a screenshot of URL with its baseline."""
    cfg = load_config(config)
    rectangles = [parse_block_out(v) for v in block_out]

    async def action(comparison: ImageComparison) -> ComparisonResult:
        return await comparison.check_screen(
            tag,
            block_out=rectangles or None,
            block_out_status_bar=block_out_status_bar,
        )

    try:
        result = asyncio.run(_run_on_page(cfg, url, action))
    except BaselineMissingError as e:
        console.print(f"[yellow]{e}[/yellow]")
        sys.exit(1)
    except VisualCompareError as e:
        console.print(f"[red]{e}[/red]")
        sys.exit(1)

    print_result(result)
    if result.mismatch_percentage > tolerance:
        sys.exit(1)


if __name__ == "__main__":
    cli()
