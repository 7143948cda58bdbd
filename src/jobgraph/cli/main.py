"""
jobgraph CLI - Main entry point.

This module registers all CLI commands. Each command is implemented
in its own module under cli/commands/.
"""

import logging

import click

from .commands import layout, search


@click.group()
@click.version_option(package_name="jobgraph")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
def main(verbose: bool):
    """jobgraph: Job Dependency Graph Layout.

    Positions jobs and their dependencies for rendering, and resolves
    searches against the laid-out graph.

    \b
    Quick Start:
      jobgraph layout jobs.json --output layout.json
      jobgraph layout jobs.json -d LR -a tree
      jobgraph search jobs.json deploy
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(name)s %(message)s",
        datefmt="[%X]",
    )


main.add_command(layout.layout)
main.add_command(search.search)

if __name__ == "__main__":
    main()
