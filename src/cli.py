"""CLI entry point for the visual verdict pipeline."""

from __future__ import annotations

import asyncio
import logging
import sys
from pathlib import Path
from typing import Optional

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from src.diff.perceptual import PillowDiffClient
from src.models.config import ScreenshotConfig
from src.models.screenshot import SuiteContext
from src.models.verdict import Verdict
from src.session import VisualTestSession
from src.verdict.page_setup import noop_setup

console = Console()

DEFAULT_CONFIG = "visual-config.json"


def setup_logging(verbose: bool = False) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, rich_tracebacks=True)],
    )


def _load_config(path: str) -> ScreenshotConfig:
    try:
        return ScreenshotConfig.load(path)
    except FileNotFoundError:
        console.print(f"[red]Config file not found: {path}[/red]")
        console.print("Run 'visual-verdict init' to create a default config.")
        sys.exit(1)


def _print_verdict(label: str, verdict: Verdict) -> None:
    if verdict.passed:
        console.print(f"[bold green]PASS[/bold green] {label}")
        return
    console.print(f"[bold red]FAIL[/bold red] {label} [dim]({verdict.kind.value})[/dim]")
    console.print(verdict.diagnostic, markup=False, highlight=False)


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
def cli(verbose: bool) -> None:
    """Visual regression verdicts for rendered web pages"""
    setup_logging(verbose)


@cli.command()
@click.option("--base-url", "-u", prompt="Base URL", help="URL relative page paths resolve against")
def init(base_url: str) -> None:
    """Create a default configuration file."""
    config_path = Path(DEFAULT_CONFIG)
    if config_path.exists():
        if not click.confirm(f"{DEFAULT_CONFIG} already exists. Overwrite?"):
            return

    cfg = ScreenshotConfig(base_url=base_url)
    cfg.save(config_path)
    console.print(f"[green]Created {config_path}[/green]")
    console.print("\nCapture and compare a page with:")
    console.print("  [blue]visual-verdict capture /some/page homepage[/blue]")


@cli.command()
@click.argument("url")
@click.argument("name")
@click.option("--selector", "-s", default=None, help="Capture only this element")
@click.option("--suite-dir", "-d", default=".", help="Suite directory holding the screenshot folders")
@click.option("--suite-title", "-t", default="", help="Suite title used to prefix screenshot names")
@click.option("--config", "-c", default=DEFAULT_CONFIG, help="Config file path")
def capture(url: str, name: str, selector: Optional[str], suite_dir: str, suite_title: str, config: str) -> None:
    """Render URL and compare it with the accepted screenshot NAME."""
    cfg = _load_config(config)
    suite = SuiteContext(title=suite_title, base_directory=Path(suite_dir))

    async def _load(renderer):
        await renderer.load(url)

    async def _run() -> tuple[str, Verdict, Optional[Path]]:
        async with VisualTestSession(cfg, suite) as session:
            engine = session.screenshots
            if suite_title:
                label = engine.baseline_name(name)
                verdict = await engine.verify_named(name, label, _load, selector)
            else:
                label = name
                verdict = await engine.verify(name, name, _load, selector)
            return label, verdict, session.write_diff_viewer()

    label, verdict, viewer = asyncio.run(_run())
    _print_verdict(label, verdict)
    if viewer:
        console.print(f"  Diff viewer: [blue]{viewer}[/blue]")
    if not verdict.passed:
        sys.exit(1)


@cli.command()
@click.argument("url")
@click.argument("selector")
@click.option("--absent", is_flag=True, help="Assert the element is NOT on the page")
@click.option("--screenshot", "screen_name", default=None, help="Save a debug screenshot under this name")
@click.option("--suite-dir", "-d", default=".", help="Suite directory holding the screenshot folders")
@click.option("--suite-title", "-t", default="cli", help="Suite title used to prefix screenshot names")
@click.option("--config", "-c", default=DEFAULT_CONFIG, help="Config file path")
def contains(
    url: str, selector: str, absent: bool, screen_name: Optional[str],
    suite_dir: str, suite_title: str, config: str,
) -> None:
    """Check that URL contains (or, with --absent, lacks) SELECTOR."""
    cfg = _load_config(config)
    suite = SuiteContext(title=suite_title, base_directory=Path(suite_dir))

    async def _run() -> Verdict:
        async with VisualTestSession(cfg, suite) as session:
            return await session.containment.verify_contains(
                url, selector, noop_setup, screen_name, expect_present=not absent,
            )

    verdict = asyncio.run(_run())
    _print_verdict(selector, verdict)
    if not verdict.passed:
        sys.exit(1)


@cli.command()
@click.argument("image_a", type=click.Path(exists=True, dir_okay=False))
@click.argument("image_b", type=click.Path(exists=True, dir_okay=False))
@click.option("--output", "-o", default=None, help="Write a diff image to this path")
def diff(image_a: str, image_b: str, output: Optional[str]) -> None:
    """Print the mismatch percentage between two images."""
    client = PillowDiffClient()
    path_a, path_b = Path(image_a), Path(image_b)
    result = asyncio.run(client.compare(path_a.resolve().as_uri(), path_b.resolve().as_uri()))

    table = Table(title="Perceptual diff")
    table.add_column("Metric", style="bold")
    table.add_column("Value")
    table.add_row("Image A", str(path_a))
    table.add_row("Image B", str(path_b))
    color = "green" if result.percentage == 0 else "red"
    table.add_row("Mismatch", f"[{color}]{result.percentage}%[/{color}]")
    console.print(table)

    if output:
        written = client.write_diff_image(path_a, path_b, Path(output))
        console.print(f"  Diff image: [blue]{written}[/blue]")


if __name__ == "__main__":
    cli()
