"""Command group: ``jobreg cluster``."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from jobreg.commands._base import JobregGroup
from jobreg.commands.entity import KindCommands, build_entity_group
from jobreg.domain.types import EntityKind

if TYPE_CHECKING:
    from jobreg.commands._context import AppContext
    from jobreg.services.cluster import ClusterService
    from jobreg.services.entities import EntityService


def _service() -> type[EntityService]:
    from jobreg.services.cluster import ClusterService

    return ClusterService


def _options(creating: bool) -> list[click.Option]:
    return [click.Option(["--cluster-type"], default=None, help="Cluster type, e.g. yarn.")]


CLUSTERS = KindCommands(
    kind=EntityKind.CLUSTER, group_name="cluster", service=_service, extra_options=_options
)

cluster = build_entity_group(
    CLUSTERS,
    help_text="Manage clusters.",
    examples="""\
  jobreg cluster create --id cluster1 --name h2prod --user tgianos --version 2.4.0 \\
      --status UP --cluster-type yarn
  jobreg cluster commands add cluster1 command1 command2
  jobreg cluster commands show cluster1""",
)


def _clusters(ctx: AppContext) -> ClusterService:
    from jobreg.services.cluster import ClusterService

    return ClusterService(ctx.registry)


@cluster.group(
    "commands",
    cls=JobregGroup,
    examples="""\
  jobreg cluster commands show cluster1
  jobreg cluster commands add cluster1 command1 command2
  jobreg cluster commands set cluster1 command2 command1
  jobreg cluster commands remove cluster1 command1
  jobreg cluster commands clear cluster1""",
)
def commands() -> None:
    """Manage the ordered list of commands a cluster offers."""


@commands.command("show")
@click.argument("cluster_id")
@click.pass_obj
def show(ctx: AppContext, cluster_id: str) -> None:
    """List commands in cluster order."""
    ctx.emit(_clusters(ctx).get_commands(cluster_id))


@commands.command("add")
@click.argument("cluster_id")
@click.argument("command_ids", nargs=-1, required=True)
@click.pass_obj
def add(ctx: AppContext, cluster_id: str, command_ids: tuple[str, ...]) -> None:
    """Append commands to the end of the list."""
    ctx.emit(_clusters(ctx).add_commands(cluster_id, command_ids))


@commands.command("set")
@click.argument("cluster_id")
@click.argument("command_ids", nargs=-1)
@click.pass_obj
def set_cmd(ctx: AppContext, cluster_id: str, command_ids: tuple[str, ...]) -> None:
    """Replace the list with COMMAND_IDS, in that order."""
    ctx.emit(_clusters(ctx).replace_commands(cluster_id, command_ids))


@commands.command("remove")
@click.argument("cluster_id")
@click.argument("command_id")
@click.pass_obj
def remove(ctx: AppContext, cluster_id: str, command_id: str) -> None:
    """Take one command out of the cluster."""
    ctx.emit(_clusters(ctx).remove_command(cluster_id, command_id))


@commands.command("clear")
@click.argument("cluster_id")
@click.pass_obj
def clear(ctx: AppContext, cluster_id: str) -> None:
    """Remove every command from the cluster."""
    ctx.emit(_clusters(ctx).remove_all_commands(cluster_id))
