"""
Search Command - Resolve a job by name and show the resulting highlight.
"""

import json
import sys

import click
from rich.console import Console
from rich.table import Table

from ..utils import echo_warning, load_records, resolve_options, run_session

console = Console()


@click.command()
@click.argument("job_file", type=click.Path(exists=True, dir_okay=False))
@click.argument("term")
@click.option("--json", "json_mode", is_flag=True, help="Output match and overrides as JSON")
def search(job_file: str, term: str, json_mode: bool):
    """
    Find a job: exact id first, then the first id containing TERM.

    Exits with status 1 when nothing matches.
    """
    records = load_records(job_file)
    if records is None:
        sys.exit(1)
    options = resolve_options(None, None, None, None)
    if options is None:
        sys.exit(1)

    scheduler = run_session(records, options)
    node = scheduler.search_now(term)
    overrides = scheduler.highlight.overrides

    if json_mode:
        click.echo(json.dumps({
            "meta": {"status": "success" if node else "no_match"},
            "data": {
                "match": node.id if node else None,
                "position": node.position.model_dump() if node else None,
                "overrides": {nid: o.model_dump() for nid, o in overrides.items()},
            },
        }))
        if node is None:
            sys.exit(1)
        return

    if node is None:
        echo_warning(f"No job matches '{term}'")
        sys.exit(1)

    console.print(f"[bold green]{node.id}[/bold green] at ({node.position.x:.1f}, {node.position.y:.1f})")

    table = Table()
    table.add_column("Job", style="cyan")
    table.add_column("Opacity", justify="right")
    table.add_column("Emphasis")
    for nid, override in overrides.items():
        table.add_row(nid, f"{override.opacity:.1f}", "yes" if override.emphasis else "")
    console.print(table)
