"""
Layout Command - Compute node positions for a job file.

Writes the renderer-facing {nodes, edges} document to a file, prints it to
stdout wrapped in the standard envelope, or shows a table of positions.
"""

import json
import sys
from pathlib import Path
from typing import Optional

import click
from rich.console import Console
from rich.table import Table

from ...core.types import LayoutAlgorithmKind, LayoutDirection
from ..utils import echo_info, echo_success, echo_warning, load_records, resolve_options, run_session

console = Console()

DIRECTION_CHOICES = [d.value for d in LayoutDirection] + ["TB", "BT", "LR", "RL"]
ALGORITHM_CHOICES = [k.value for k in LayoutAlgorithmKind] + ["mrtree"]


@click.command()
@click.argument("job_file", required=False, type=click.Path(exists=True, dir_okay=False))
@click.option("-d", "--direction", type=click.Choice(DIRECTION_CHOICES, case_sensitive=False), help="Flow direction of dependency depth")
@click.option("-a", "--algorithm", type=click.Choice(ALGORITHM_CHOICES, case_sensitive=False), help="Layout strategy")
@click.option("-s", "--spacing", type=float, help="Gap between nodes (layers get 1.5x)")
@click.option("-o", "--output", type=click.Path(dir_okay=False), help="Write {nodes, edges} JSON to this file")
@click.option("--config", "config_path", type=click.Path(dir_okay=False), help="YAML config (default .jobgraph/config.yaml)")
@click.option("--json", "json_mode", is_flag=True, help="Output layout as JSON to stdout")
def layout(
    job_file: Optional[str],
    direction: Optional[str],
    algorithm: Optional[str],
    spacing: Optional[float],
    output: Optional[str],
    config_path: Optional[str],
    json_mode: bool,
):
    """
    Lay out a job dependency file.

    \b
    Examples:
      jobgraph layout jobs.json
      jobgraph layout jobs.json -d LR -a tree -o layout.json
    """
    records = load_records(job_file)
    if records is None:
        sys.exit(1)

    options = resolve_options(config_path, direction, algorithm, spacing)
    if options is None:
        sys.exit(1)

    result = run_session(records, options).result
    if result.used_fallback:
        echo_warning(f"'{options.kind.value}' layout failed; nodes placed on a grid")

    if json_mode:
        click.echo(json.dumps({
            "meta": {
                "status": "success",
                "algorithm": result.algorithm,
                "fallback": result.used_fallback,
            },
            "data": result.to_dict(),
        }))
        return

    if output:
        output_path = Path(output)
        output_path.write_text(json.dumps(result.to_dict(), indent=2))
        echo_success(f"Generated: {output_path}")
        echo_info(f"{len(result.nodes)} jobs, {len(result.edges)} dependencies")
        return

    table = Table(title=f"Layout ({result.algorithm}, {options.direction.value})")
    table.add_column("Job", style="cyan")
    table.add_column("X", justify="right")
    table.add_column("Y", justify="right")
    for node in result.nodes:
        table.add_row(node.id, f"{node.position.x:.1f}", f"{node.position.y:.1f}")
    console.print(table)
    echo_info(f"{len(result.nodes)} jobs, {len(result.edges)} dependencies")
