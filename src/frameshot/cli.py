"""CLI entry point for frameshot.

Usage:
    frameshot run configs/batch.yaml              # Run a batch file
    frameshot grab URL@FRAME [URL@FRAME ...]      # Run inputs given inline
    frameshot name URL [URL ...]                  # Show derived image filenames
    frameshot schema                              # Print the batch file JSON schema
"""

from __future__ import annotations

import json
from enum import Enum
from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console
from rich.table import Table

from frameshot.core.logging import setup_logging

app = typer.Typer(name="frameshot", help="Extract one frame per remote video into a ZIP archive")
console = Console()

DEFAULT_OUTPUT = Path("images.zip")


class EngineName(str, Enum):
    ffmpeg = "ffmpeg"
    opencv = "opencv"


def _print_report(report) -> None:
    table = Table(title=f"Archive: {report.archive_path} ({report.archive_size} bytes)")
    table.add_column("#", style="dim")
    table.add_column("Image", style="cyan")
    table.add_column("Source", style="green")
    table.add_column("Frame", style="yellow")
    table.add_column("Bytes", style="dim")

    for i, image in enumerate(report.batch.results, 1):
        table.add_row(str(i), image.filename, image.source_url, str(image.frame_index), str(len(image.data)))
    console.print(table)

    for failure in report.batch.failures:
        console.print(f"[red]Failed ({failure.stage}):[/red] {failure.describe()}")

    summary = f"{report.batch.succeeded} extracted, {report.batch.failed} failed"
    style = "green" if report.batch.ok else "yellow"
    console.print(f"[{style}]{summary}[/{style}]")


@app.command()
def run(
    config: Path = typer.Argument(..., exists=True, dir_okay=False, help="Batch YAML file"),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Override the archive path"),
    workers: Optional[int] = typer.Option(None, "--workers", "-w", min=1, help="Override worker count"),
    log_level: str = typer.Option("INFO", help="Logging level"),
) -> None:
    """Run a batch file and write the archive."""
    setup_logging(log_level)
    from frameshot.core.job_runner import run_batch_file

    report = run_batch_file(config, output=output, workers=workers)
    _print_report(report)
    if not report.batch.ok:
        raise typer.Exit(1)


@app.command()
def grab(
    inputs: List[str] = typer.Argument(..., help="Video URLs, optionally suffixed with @FRAME"),
    output: Path = typer.Option(DEFAULT_OUTPUT, "--output", "-o", help="Archive path"),
    workers: int = typer.Option(1, "--workers", "-w", min=1, help="Concurrent videos"),
    engine: EngineName = typer.Option(EngineName.ffmpeg, help="Decoding engine"),
    log_level: str = typer.Option("INFO", help="Logging level"),
) -> None:
    """Extract frames for inputs given on the command line."""
    setup_logging(log_level)
    from frameshot.core.contracts import BatchFile
    from frameshot.core.job_runner import parse_input_spec, run_job

    job = BatchFile(
        inputs=[parse_input_spec(spec) for spec in inputs],
        output=output,
        workers=workers,
        extract={"engine": engine.value},
    )
    report = run_job(job)
    _print_report(report)
    if not report.batch.ok:
        raise typer.Exit(1)


@app.command()
def name(urls: List[str] = typer.Argument(..., help="Video URLs")) -> None:
    """Show the image filename each URL maps to."""
    from frameshot.utils.naming import derive_image_filename

    for url in urls:
        console.print(f"{url} -> [cyan]{derive_image_filename(url)}[/cyan]")


@app.command()
def schema() -> None:
    """Print the JSON schema of batch files."""
    from frameshot.core.contracts import BatchFile

    console.print_json(json.dumps(BatchFile.model_json_schema()))


if __name__ == "__main__":
    app()
