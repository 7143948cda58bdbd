"""
CLI Utilities - Shared helper functions for command line operations.

This module provides formatted printing, job file loading and the small
asyncio session used by commands to drive the scheduler.
"""

import asyncio
from pathlib import Path
from typing import List, Optional

import click
from pydantic import ValidationError

from ..config import load_layout_settings
from ..core.errors import InvalidFormatError
from ..core.types import JobRecord, LayoutOptions
from ..ingest import load_jobs, sample_jobs
from ..scheduler import LayoutScheduler


def echo_success(message: str) -> None:
    """
    Print a success message with a green checkmark.

    Args:
        message (str): The message to display.
    """
    click.echo(click.style(f"✅ {message}", fg="green"), err=True)


def echo_error(message: str) -> None:
    """
    Print an error message with a red cross.

    Args:
        message (str): The error message to display.
    """
    click.echo(click.style(f"❌ {message}", fg="red"), err=True)


def echo_warning(message: str) -> None:
    """Print a warning message with a yellow alert symbol."""
    click.echo(click.style(f"⚠️  {message}", fg="yellow"), err=True)


def echo_info(message: str) -> None:
    """Print an informational message, dimmed."""
    click.echo(click.style(f"   {message}", dim=True), err=True)


def load_records(job_file: Optional[str]) -> Optional[List[JobRecord]]:
    """
    Load job records from a JSON file, or the sample pipeline when no file
    is given.

    Returns:
        Optional[List[JobRecord]]: The records, or None if loading failed.
    """
    if job_file is None:
        echo_info("No job file given, using the sample pipeline")
        return sample_jobs()

    try:
        return load_jobs(Path(job_file))
    except InvalidFormatError as e:
        echo_error(str(e))
        return None


def resolve_options(
    config_path: Optional[str],
    direction: Optional[str],
    algorithm: Optional[str],
    spacing: Optional[float],
) -> Optional[LayoutOptions]:
    """
    Merge config file settings with command line flags (flags win).

    Returns:
        Optional[LayoutOptions]: The options, or None if they are invalid.
    """
    try:
        settings = load_layout_settings(Path(config_path) if config_path else None)
        base = LayoutOptions.model_validate(settings)
        return base.with_changes(direction=direction, algorithm=algorithm, spacing=spacing)
    except (ValidationError, ValueError) as e:
        echo_error(f"Invalid layout options: {e}")
        return None


def run_session(records: List[JobRecord], options: LayoutOptions) -> LayoutScheduler:
    """Lay out records through a scheduler and return it once idle."""

    async def _session() -> LayoutScheduler:
        scheduler = LayoutScheduler(options=options)
        scheduler.request_layout(records)
        await scheduler.wait_idle()
        scheduler.close()
        return scheduler

    return asyncio.run(_session())
