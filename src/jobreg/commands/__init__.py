"""Subcommand modules for jobreg.

Provides register_commands(), which uses deferred imports to keep
``jobreg --help`` fast.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register the three entity groups and ``init`` on the root CLI group."""
    from jobreg.commands.application import app
    from jobreg.commands.cluster import cluster
    from jobreg.commands.command import command
    from jobreg.commands.init_cmd import init_cmd

    cli.add_command(init_cmd)
    cli.add_command(app)
    cli.add_command(command)
    cli.add_command(cluster)
