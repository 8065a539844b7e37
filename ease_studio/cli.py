"""CLI for Ease Studio - presets, normalization and stored curves.

Usage:
    python -m ease_studio.cli presets
    python -m ease_studio.cli normalize "M0,500 C63,309 141,163 220,89 316,-1 409,-0.499 500,0"
    python -m ease_studio.cli sample "M0,0,C0.126,0.382,0.282,0.674,0.44,0.822,0.632,1.002,0.818,1.001,1,1"
    python -m ease_studio.cli curve set chat_list opacity power2.out
    python -m ease_studio.cli curve get chat_list opacity
    python -m ease_studio.cli preview chat_list opacity --cycles 1
"""

import asyncio
from pathlib import Path as FilePath

import typer
from rich import box
from rich.console import Console
from rich.table import Table

from ease_studio.config import settings
from ease_studio.evaluator import build_evaluator
from ease_studio.logging_config import setup_logging
from ease_studio.normalizer import normalize_path, parse_normalized_curve
from ease_studio.path_model import CurvePath, PathError
from ease_studio.presets import PRESETS, preset_for_component
from ease_studio.session import EaseSession
from ease_studio.store import JsonCurveStore

app = typer.Typer(
    name="ease-studio",
    help="CLI for Ease Studio",
    add_completion=False,
)
console = Console()

StoreOption = typer.Option(None, "--store", "-s", help="Curve store JSON file")


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log to stderr"),
) -> None:
    """Author and preview easing curves."""
    if verbose:
        setup_logging()


def _store(path: FilePath | None) -> JsonCurveStore:
    return JsonCurveStore(path or settings.store_path)


def _load_grid_path(source: str) -> CurvePath:
    """Accept a preset name or a grid path string."""
    if source in PRESETS:
        return CurvePath.create_default(source)
    return CurvePath.from_path_string(source)


# =============================================================================
# Curve Math Commands
# =============================================================================


@app.command("presets")
def presets_list() -> None:
    """List preset curves."""
    table = Table(title="Presets", box=box.ROUNDED)
    table.add_column("Name", style="cyan")
    table.add_column("Grid path", style="dim")
    for name, d in PRESETS.items():
        table.add_row(name, d)
    console.print(table)


@app.command("normalize")
def normalize(
    source: str = typer.Argument(..., help="Grid path string or preset name"),
) -> None:
    """Normalize a grid path into a unit-space curve string."""
    try:
        path = _load_grid_path(source)
    except PathError as e:
        console.print(f"[red]Malformed path: {e}[/red]")
        raise typer.Exit(1) from e

    result = normalize_path(path)
    if not result.valid:
        reason = result.validation.reason.value if result.validation.reason else "unknown"
        console.print(f"[red]Invalid curve: {reason}[/red]")
        if result.curve_string:
            console.print(result.curve_string, soft_wrap=True)
        raise typer.Exit(1)

    console.print(result.curve_string, soft_wrap=True)


@app.command("sample")
def sample(
    curve: str = typer.Argument(..., help="Unit-space curve string"),
    steps: int = typer.Option(10, "--steps", "-n", help="Number of intervals"),
) -> None:
    """Evaluate a curve at evenly spaced times."""
    if steps < 1:
        console.print("[red]Steps must be at least 1[/red]")
        raise typer.Exit(1)

    try:
        evaluator = build_evaluator(parse_normalized_curve(curve))
    except PathError as e:
        console.print(f"[red]Malformed curve: {e}[/red]")
        raise typer.Exit(1) from e

    table = Table(box=box.SIMPLE)
    table.add_column("t", justify="right")
    table.add_column("value", justify="right", style="green")
    for i in range(steps + 1):
        t = i / steps
        table.add_row(f"{t:.2f}", f"{evaluator(t):.4f}")
    console.print(table)


# =============================================================================
# Stored Curve Commands
# =============================================================================

curve_app = typer.Typer(help="Manage stored curves per component and property")
app.add_typer(curve_app, name="curve")


@curve_app.command("get")
def curve_get(
    component: str = typer.Argument(..., help="Component identifier"),
    prop: str = typer.Argument(..., help="Animated property"),
    store: FilePath | None = StoreOption,
) -> None:
    """Show the stored curve, or the component default."""
    curve = _store(store).get(component, prop)
    if curve is None:
        preset = preset_for_component(component)
        console.print(f"[yellow]No stored curve, default preset: {preset}[/yellow]")
        return
    console.print(curve.to_string(), soft_wrap=True)


@curve_app.command("set")
def curve_set(
    component: str = typer.Argument(..., help="Component identifier"),
    prop: str = typer.Argument(..., help="Animated property"),
    source: str = typer.Argument(..., help="Grid path string or preset name"),
    store: FilePath | None = StoreOption,
) -> None:
    """Normalize a grid path and store it. Invalid curves are refused."""
    try:
        path = _load_grid_path(source)
    except PathError as e:
        console.print(f"[red]Malformed path: {e}[/red]")
        raise typer.Exit(1) from e

    result = normalize_path(path)
    if result.curve is None:
        console.print("[red]Refusing to store an invalid curve[/red]")
        raise typer.Exit(1)

    _store(store).set(component, prop, result.curve)
    console.print(
        f"[green]Stored {component}.{prop}:[/green] {result.curve.to_string()}", soft_wrap=True
    )


@curve_app.command("reset")
def curve_reset(
    component: str = typer.Argument(..., help="Component identifier"),
    prop: str = typer.Argument(..., help="Animated property"),
    store: FilePath | None = StoreOption,
) -> None:
    """Delete a stored curve so the component default applies again."""
    if _store(store).delete(component, prop):
        console.print(f"[green]Reset {component}.{prop}[/green]")
    else:
        console.print(f"[yellow]Nothing stored for {component}.{prop}[/yellow]")


@curve_app.command("list")
def curve_list(store: FilePath | None = StoreOption) -> None:
    """List all stored curves."""
    entries = _store(store).items()
    if not entries:
        console.print("[yellow]No stored curves[/yellow]")
        return

    table = Table(title="Stored curves", box=box.ROUNDED)
    table.add_column("Component", style="cyan")
    table.add_column("Property", style="cyan")
    table.add_column("Curve")
    for component, prop, text in entries:
        table.add_row(component, prop, text)
    console.print(table)


# =============================================================================
# Preview
# =============================================================================


async def _preview_async(session: EaseSession, cycles: int, fps: int) -> None:
    frame_delay = 1.0 / fps
    frames = 0
    async with session:
        while session.animation.cycle < cycles:
            state = session.tick()
            frames += 1
            console.print(
                f"progress: [green]{state.progress:.2f}[/green]  "
                f"value: [green]{round(abs(state.value))}[/green]"
            )
            await asyncio.sleep(frame_delay)
    console.print(f"[dim]{frames} frames[/dim]")


@app.command("preview")
def preview(
    component: str = typer.Argument(..., help="Component identifier"),
    prop: str = typer.Argument(..., help="Animated property"),
    cycles: int = typer.Option(1, "--cycles", "-c", help="Cycles to play"),
    fps: int = typer.Option(10, "--fps", help="Frames per second"),
    duration: float = typer.Option(
        settings.preview_duration, "--duration", "-d", help="Seconds per cycle"
    ),
    store: FilePath | None = StoreOption,
) -> None:
    """Play the stored (or default) curve in the terminal."""
    if cycles < 1 or fps < 1:
        console.print("[red]Cycles and fps must be at least 1[/red]")
        raise typer.Exit(1)

    session = EaseSession(component, prop, store=_store(store), duration=duration)
    console.print(f"[cyan]{component}.{prop}[/cyan] {session.ease_string}", soft_wrap=True)
    asyncio.run(_preview_async(session, cycles, fps))


if __name__ == "__main__":
    app()
