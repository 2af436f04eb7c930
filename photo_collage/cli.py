"""Rich command-line interface powered by Typer."""

from __future__ import annotations

import logging
import time
from pathlib import Path

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from photo_collage.assembler import assemble, plan_grid
from photo_collage.catalog import (
    PhotoRecord,
    brightness_histogram,
    missing_brightness_ranges,
    prepare_catalog,
)
from photo_collage.config import CollageConfig
from photo_collage.image_io import load_raster, new_canvas, save_raster, to_greyscale
from photo_collage.usage import DuplicateAssignmentError

app = typer.Typer(
    name="photo-collage",
    help="Build greyscale photo collages that reproduce a motive's brightness.",
    add_completion=False,
    rich_markup_mode="rich",
)
console = Console()

# Failures that abort a run with a message instead of a traceback
_FATAL = (OSError, ValueError, AssertionError, DuplicateAssignmentError)


def _setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, show_path=False, markup=False)],
    )


def _abort(exc: BaseException) -> typer.Exit:
    console.print(f"[bold red]Collage aborted:[/bold red] {escape(str(exc))}")
    return typer.Exit(1)


def _print_collection_stats(records: list[PhotoRecord]) -> None:
    histogram = brightness_histogram(records)
    table = Table(title=f"Collection contains {len(records)} tiles")
    table.add_column("Brightness", justify="right")
    table.add_column("Photos", justify="right")
    for value, count in enumerate(histogram):
        if count:
            table.add_row(str(value), str(int(count)))
    console.print(table)

    gaps = missing_brightness_ranges(histogram)
    if gaps:
        ranges = ", ".join(f"{lo}" if lo == hi else f"{lo}-{hi}" for lo, hi in gaps)
        console.print(f"[yellow]No photos with brightness:[/yellow] {ranges}")


# Defaults come from CollageConfig - single source of truth
_DEFAULTS = CollageConfig()


# -- build command -----------------------------------------------------

@app.command()
def build(
    motive_path: Path = typer.Option(
        _DEFAULTS.motive_path, "--motive", "-m", help="Blueprint image",
    ),
    photo_dir: Path = typer.Option(
        _DEFAULTS.photo_dir, "--photos", "-p", help="Folder with candidate photos",
    ),
    canvas_path: Path = typer.Option(
        _DEFAULTS.canvas_path, "--output", "-o", help="Collage output file",
    ),
    motive_grey_path: Path | None = typer.Option(
        _DEFAULTS.motive_grey_path, "--motive-grey",
        help="Where to save the greyscale motive",
    ),
    save_motive_grey: bool = typer.Option(
        True, "--save-motive-grey/--no-save-motive-grey",
        help="Persist the greyscale motive",
    ),
    target_width: int = typer.Option(
        _DEFAULTS.target_width, "--width", "-w", help="Canvas width in pixels",
    ),
    tiles_per_row: int = typer.Option(
        _DEFAULTS.tiles_per_row, "--tiles", "-t", help="Photos per row",
    ),
    reuse: bool = typer.Option(
        _DEFAULTS.reuse_photos, "--reuse/--no-reuse",
        help="Allow photos to appear more than once",
    ),
    refill: bool = typer.Option(
        _DEFAULTS.refill_pool, "--refill/--no-refill",
        help="Without reuse, start over with all photos once each was placed",
    ),
    radius: int = typer.Option(
        _DEFAULTS.search_radius, "--radius", "-r",
        help="Cells around a tile in which the same photo may not reappear",
    ),
    big_miss: int = typer.Option(
        _DEFAULTS.big_miss_threshold, "--big-miss",
        help="Brightness delta reported as a big miss",
    ),
    cache_dir_name: str = typer.Option(
        _DEFAULTS.cache_dir_name, "--cache-dir", help="Cache sub-folder name",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
) -> None:
    """Build a collage of PHOTOS that looks like MOTIVE."""
    _setup_logging(verbose)
    logger = logging.getLogger("photo_collage")

    cfg = CollageConfig(
        motive_path=motive_path,
        motive_grey_path=motive_grey_path if save_motive_grey else None,
        canvas_path=canvas_path,
        photo_dir=photo_dir,
        cache_dir_name=cache_dir_name,
        target_width=target_width,
        tiles_per_row=tiles_per_row,
        reuse_photos=reuse,
        refill_pool=refill,
        search_radius=radius,
        big_miss_threshold=big_miss,
    )

    console.print(Panel.fit(
        f"[bold]PHOTO COLLAGE[/bold]\n"
        f"Motive: {cfg.motive_path}  |  Photos: {cfg.photo_dir}\n"
        f"Canvas width: {cfg.target_width}  |  Tiles per row: {cfg.tiles_per_row}\n"
        f"Reuse: {cfg.reuse_photos}  |  Radius: {cfg.search_radius}",
        border_style="cyan",
    ))
    t0 = time.perf_counter()

    try:
        motive = to_greyscale(load_raster(cfg.motive_path))
        if cfg.motive_grey_path is not None:
            save_raster(cfg.motive_grey_path, motive)

        photos = prepare_catalog(
            cfg.photo_dir,
            cfg.tile_size,
            cache_dir=cfg.cache_dir,
            grey_suffix=cfg.grey_suffix,
            alt_suffix=cfg.grey_alt_suffix,
            extensions=cfg.SUPPORTED_EXTENSIONS,
        )
        h, w = motive.shape[:2]
        plan = plan_grid(w, h, cfg.target_width, cfg.tiles_per_row)
        logger.info(
            "Grid %dx%d, %d px per tile, canvas %dx%d",
            plan.columns, plan.rows, plan.tile_size_target,
            plan.canvas_width, plan.canvas_height,
        )

        canvas, stats = assemble(
            motive,
            photos,
            plan.columns,
            plan.rows,
            plan.tile_size_source,
            plan.tile_size_target,
            proximity_radius=cfg.search_radius,
            reuse_allowed=cfg.reuse_photos,
            big_miss_threshold=cfg.big_miss_threshold,
            canvas=new_canvas(plan.canvas_width, plan.canvas_height),
            refill_pool=cfg.refill_pool,
        )
        save_raster(cfg.canvas_path, canvas)
    except _FATAL as exc:
        raise _abort(exc) from exc

    _print_collection_stats(photos)
    elapsed = time.perf_counter() - t0
    console.print(Panel.fit(
        f"[bold green]DONE[/bold green] - {cfg.canvas_path}\n"
        f"In total matched {stats.cells} cells. Hits: {stats.hits}  "
        f"Big misses: {stats.big_misses}\n"
        f"[dim]Relaxed: {stats.relaxed}  Refills: {stats.refills}"
        f"  time={elapsed:.1f}s[/dim]",
        border_style="green",
    ))


# -- catalog command ---------------------------------------------------

@app.command()
def catalog(
    photo_dir: Path = typer.Option(
        _DEFAULTS.photo_dir, "--photos", "-p", help="Folder with candidate photos",
    ),
    target_width: int = typer.Option(_DEFAULTS.target_width, "--width", "-w"),
    tiles_per_row: int = typer.Option(_DEFAULTS.tiles_per_row, "--tiles", "-t"),
    cache_dir_name: str = typer.Option(_DEFAULTS.cache_dir_name, "--cache-dir"),
    verbose: bool = typer.Option(False, "--verbose", "-v"),
) -> None:
    """Convert and cache PHOTOS, then show how their brightness is spread."""
    _setup_logging(verbose)

    cfg = CollageConfig(
        photo_dir=photo_dir,
        cache_dir_name=cache_dir_name,
        target_width=target_width,
        tiles_per_row=tiles_per_row,
    )
    try:
        photos = prepare_catalog(
            cfg.photo_dir,
            cfg.tile_size,
            cache_dir=cfg.cache_dir,
            grey_suffix=cfg.grey_suffix,
            alt_suffix=cfg.grey_alt_suffix,
            extensions=cfg.SUPPORTED_EXTENSIONS,
        )
    except _FATAL as exc:
        raise _abort(exc) from exc

    _print_collection_stats(photos)


if __name__ == "__main__":
    app()
