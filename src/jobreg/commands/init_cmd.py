"""Command: registry initialization (named init_cmd to avoid shadowing builtins)."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from jobreg.commands._base import JobregCommand

if TYPE_CHECKING:
    from jobreg.commands._context import AppContext

_INIT_EXAMPLES = """\
  jobreg init
  jobreg --root /srv/jobreg init
  JOBREG_DATABASE__PATH=/tmp/registry.db jobreg init"""


@click.command("init", cls=JobregCommand, examples=_INIT_EXAMPLES)
@click.pass_obj
def init_cmd(app: AppContext) -> None:
    """Create the registry database if it does not exist."""
    from jobreg.services.init import InitService

    app.emit(InitService(app.registry).init_registry())
