"""Command group: ``jobreg app``."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from jobreg.commands._base import JobregCommand
from jobreg.commands.entity import KindCommands, build_entity_group
from jobreg.domain.types import EntityKind

if TYPE_CHECKING:
    from jobreg.commands._context import AppContext
    from jobreg.services.entities import EntityService


def _service() -> type[EntityService]:
    from jobreg.services.application import ApplicationService

    return ApplicationService


APPLICATIONS = KindCommands(kind=EntityKind.APPLICATION, group_name="app", service=_service)

app = build_entity_group(
    APPLICATIONS,
    help_text="Manage applications.",
    examples="""\
  jobreg app create --id app1 --name tez --user tgianos --version 1.2.3 --status ACTIVE
  jobreg app list --tag prod --user tgianos
  jobreg app tags add app1 yarn
  jobreg app commands app1""",
)


@app.command("commands", cls=JobregCommand)
@click.argument("application_id")
@click.pass_obj
def commands(ctx: AppContext, application_id: str) -> None:
    """List the commands that belong to an application."""
    from jobreg.services.application import ApplicationService

    ctx.emit(ApplicationService(ctx.registry).get_commands(application_id))
