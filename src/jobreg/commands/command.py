"""Command group: ``jobreg command``."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from jobreg.commands._base import JobregCommand, JobregGroup
from jobreg.commands.entity import KindCommands, build_entity_group
from jobreg.domain.types import EntityKind

if TYPE_CHECKING:
    from jobreg.commands._context import AppContext
    from jobreg.services.entities import EntityService


def _service() -> type[EntityService]:
    from jobreg.services.command import CommandService

    return CommandService


def _options(creating: bool) -> list[click.Option]:
    options = [
        click.Option(["--executable"], required=creating, help="Executable the command runs."),
        click.Option(["--job-type"], default=None, help="Kind of job the command runs."),
    ]
    if creating:
        # Owner changes after creation go through `jobreg command app set`.
        options.append(
            click.Option(["--application-id"], default=None, help="Owning application.")
        )
    return options


COMMANDS = KindCommands(
    kind=EntityKind.COMMAND, group_name="command", service=_service, extra_options=_options
)

command = build_entity_group(
    COMMANDS,
    help_text="Manage commands.",
    examples="""\
  jobreg command create --id command1 --name pig_13_prod --user tgianos \\
      --version 1.2.3 --status ACTIVE --executable pig --application-id app1
  jobreg command app set command1 app2
  jobreg command clusters command1""",
)


@command.command("clusters", cls=JobregCommand)
@click.argument("command_id")
@click.pass_obj
def clusters(ctx: AppContext, command_id: str) -> None:
    """List the clusters a command belongs to."""
    from jobreg.services.command import CommandService

    ctx.emit(CommandService(ctx.registry).get_clusters(command_id))


@command.group("app", cls=JobregGroup)
def owner() -> None:
    """Show or change the application a command belongs to."""


@owner.command("show")
@click.argument("command_id")
@click.pass_obj
def show_owner(ctx: AppContext, command_id: str) -> None:
    """Show the owning application."""
    from jobreg.services.command import CommandService

    ctx.emit(CommandService(ctx.registry).get_application(command_id))


@owner.command("set")
@click.argument("command_id")
@click.argument("application_id")
@click.pass_obj
def set_owner(ctx: AppContext, command_id: str, application_id: str) -> None:
    """Make APPLICATION_ID the owner, replacing any previous one."""
    from jobreg.services.command import CommandService

    ctx.emit(CommandService(ctx.registry).set_application(command_id, application_id))


@owner.command("remove")
@click.argument("command_id")
@click.pass_obj
def remove_owner(ctx: AppContext, command_id: str) -> None:
    """Detach the command from its application."""
    from jobreg.services.command import CommandService

    ctx.emit(CommandService(ctx.registry).remove_application(command_id))
