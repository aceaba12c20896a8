"""openviz CLI — render chart specifications and inspect chat text."""

from __future__ import annotations

import dataclasses
import json
import logging

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from .config import DEFAULT_SETTINGS
from .core.extractor import ChartSegment
from .pipeline import Pipeline
from .renderers import render_chart
from .renderers.container import ChartCard
from .renderers.themes import get_theme, list_themes
from .view import ChartView

console = Console()


def _setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(name)s] %(levelname)s: %(message)s",
        datefmt="%H:%M:%S",
    )


def _print_card(card: ChartCard) -> None:
    if card.kind != "chart" or card.plan is None:
        console.print(f"[yellow]⚠ {escape(card.message or card.kind)}[/]")
        return

    plan = card.plan
    console.print(f"[bold]{escape(card.title)}[/] [dim]({plan.chart_type}, {plan.width:g}×{plan.height:g}px)[/]")
    if card.zoom_options:
        zooms = " ".join(
            f"[reverse]{o.label}[/reverse]" if o.active else o.label for o in card.zoom_options
        )
        console.print(f"  zoom: {zooms}")

    table = Table(show_header=True, header_style="bold")
    table.add_column("Element")
    table.add_column("Count", justify="right")
    for name in ("points", "rects", "paths", "guides", "texts", "rows", "legend"):
        items = getattr(plan, name)
        if items:
            table.add_row(name, str(len(items)))
    console.print(table)

    if plan.ticks:
        console.print(f"  ticks: {', '.join(f'{t:g}' for t in plan.ticks)}")
    if plan.labels:
        console.print(f"  labels: {escape(', '.join(label or '·' for label in plan.labels))}")
    if card.insight:
        console.print(f"  [italic]{escape(card.insight)}[/]")


@click.group()
@click.version_option(version="0.1.0", prog_name="openviz")
@click.option("-v", "--verbose", is_flag=True, default=False, help="Verbose logging.")
def main(verbose: bool):
    """openviz — turn declarative chart specifications into draw plans."""
    _setup_logging(verbose)


_theme_option = click.option(
    "--theme",
    "theme_name",
    envvar="OPENVIZ_THEME",
    type=click.Choice([t.name for t in list_themes()], case_sensitive=False),
    default="dark",
    help="Color theme (or set OPENVIZ_THEME).",
)
_width_option = click.option(
    "-w", "--width",
    envvar="OPENVIZ_WIDTH",
    type=click.FloatRange(min=1),
    default=320.0,
    help="Chart width in pixels (or set OPENVIZ_WIDTH).",
)


@main.command()
@click.argument("spec_file", type=click.File("r", encoding="utf-8"))
@_width_option
@_theme_option
@click.option("--json", "as_json", is_flag=True, default=False, help="Dump the full card as JSON.")
def render(spec_file, width: float, theme_name: str, as_json: bool):
    """Render a chart specification (JSON file, or - for stdin)."""
    card = render_chart(spec_file.read(), width, get_theme(theme_name))
    if as_json:
        click.echo(json.dumps(dataclasses.asdict(card), indent=2, default=str))
    else:
        _print_card(card)


@main.command()
@click.argument("text_file", type=click.File("r", encoding="utf-8"))
@_width_option
@_theme_option
def extract(text_file, width: float, theme_name: str):
    """Split chat text into prose and chart segments."""
    pipeline = Pipeline(get_theme(theme_name), width)
    parts = pipeline.render_text(text_file.read())
    if not parts:
        console.print("[dim]No segments.[/]")
        return
    for i, part in enumerate(parts, 1):
        if isinstance(part.segment, ChartSegment):
            console.print(f"[bold blue]#{i} chart[/]")
            _print_card(part.card)
        else:
            preview = part.segment.text.strip().replace("\n", " ")
            console.print(f"[bold]#{i} prose[/] [dim]{escape(preview[:72])}[/]")


@main.command()
@click.argument("spec_file", type=click.File("r", encoding="utf-8"))
@click.argument("x", type=float)
@click.argument("y", type=float)
@_width_option
@_theme_option
def hit(spec_file, x: float, y: float, width: float, theme_name: str):
    """Resolve the tooltip for a tap at (X, Y)."""
    view = ChartView(spec_file.read(), width, get_theme(theme_name))
    state = view.press(x, y)
    view.close()
    if state is None:
        console.print(f"[dim]No element within {DEFAULT_SETTINGS.hit_radius:g}px.[/]")
        return
    console.print(
        f"[bold]{escape(state.label)}[/]: {state.value:g} "
        f"[dim](at {state.anchor_x:.1f}, {state.anchor_y:.1f}; color {state.color})[/]"
    )


@main.command()
def themes():
    """List the available color themes."""
    table = Table(show_header=True, header_style="bold")
    table.add_column("Name")
    table.add_column("Display name")
    table.add_column("Accent")
    table.add_column("Description")
    for t in list_themes():
        accent = t.hex("accent")
        table.add_row(t.name, t.display_name, f"[{accent}]■[/] {accent}", t.description)
    console.print(table)


if __name__ == "__main__":
    main()
