"""Shared command builders for the ``app``, ``command``, and ``cluster`` groups.

Each kind gets the same CRUD commands (create, get, list, update, delete,
delete-all) and one subgroup per attribute set (tags, configs, jars).
Kind-specific scalar fields are supplied as extra Click options.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, TypeVar

import click
import pydantic

from jobreg.commands._base import JobregCommand, JobregGroup
from jobreg.domain.entities import ENTITY_TYPES, PATCH_TYPES
from jobreg.domain.types import STATUS_TYPES, AttributeName, EntityKind
from jobreg.services.query import SORT_KEYS

if TYPE_CHECKING:
    from jobreg.commands._context import AppContext
    from jobreg.services.entities import EntityService

OptionFactory = Callable[[bool], list[click.Option]]


@dataclass(frozen=True)
class KindCommands:
    """How one entity kind is exposed on the command line.

    ``extra_options`` builds the kind-specific options; its argument is
    True for ``create`` (where required fields are enforced) and False
    for ``update``.
    """

    kind: EntityKind
    group_name: str
    service: Callable[[], type[EntityService]]
    extra_options: OptionFactory = field(default=lambda creating: [])

    @property
    def statuses(self) -> list[str]:
        return [member.value for member in STATUS_TYPES[self.kind]]


def build_entity_group(cmds: KindCommands, *, help_text: str, examples: str) -> JobregGroup:
    group = JobregGroup(cmds.group_name, help=help_text, examples=examples)
    for command in (
        _create(cmds),
        _get(cmds),
        _list(cmds),
        _update(cmds),
        _delete(cmds),
        _delete_all(cmds),
    ):
        group.add_command(command)
    for attr in AttributeName:
        group.add_command(_attribute_group(cmds, attr))
    return group


def _service(app: AppContext, cmds: KindCommands) -> EntityService:
    return cmds.service()(app.registry)


M = TypeVar("M", bound=pydantic.BaseModel)


def build_model(model: type[M], values: dict[str, Any]) -> M:
    """Construct *model* from option values, reporting bad input as a usage error."""
    try:
        return model(**values)
    except pydantic.ValidationError as exc:
        problems = "; ".join(
            f"{'.'.join(str(loc) for loc in err['loc']) or model.__name__}: {err['msg']}"
            for err in exc.errors()
        )
        raise click.UsageError(f"Invalid {model.__name__}: {problems}") from exc


def _extra_values(cmds: KindCommands, kwargs: dict[str, Any], creating: bool) -> dict[str, Any]:
    names = {option.name for option in cmds.extra_options(creating)}
    return {name: kwargs[name] for name in names if name is not None}


# ── CRUD ──────────────────────────────────────────────────────────────


def _create(cmds: KindCommands) -> click.Command:
    @click.command(
        "create",
        examples=(
            f"  jobreg {cmds.group_name} create --name NAME --user USER --version 1.0 "
            f"--status {cmds.statuses[0]} --tag prod"
        ),
        cls=JobregCommand,
    )
    @click.option("--id", "entity_id", default=None, help="Explicit id (generated if omitted).")
    @click.option("--name", required=True)
    @click.option("--user", required=True)
    @click.option("--version", required=True)
    @click.option(
        "--status", required=True, type=click.Choice(cmds.statuses, case_sensitive=False)
    )
    @click.option("--tag", "tags", multiple=True, help="Tag (repeatable).")
    @click.option("--config", "configs", multiple=True, help="Config reference (repeatable).")
    @click.option("--jar", "jars", multiple=True, help="Jar reference (repeatable).")
    @click.pass_obj
    def create(
        app: AppContext,
        entity_id: str | None,
        name: str,
        user: str,
        version: str,
        status: str,
        tags: tuple[str, ...],
        configs: tuple[str, ...],
        jars: tuple[str, ...],
        **extra: Any,
    ) -> None:
        entity = build_model(
            ENTITY_TYPES[cmds.kind],
            {
                "id": entity_id,
                "name": name,
                "user": user,
                "version": version,
                "status": status.upper(),
                "tags": frozenset(tags),
                "configs": frozenset(configs),
                "jars": frozenset(jars),
                **_extra_values(cmds, extra, creating=True),
            },
        )
        app.emit(_service(app, cmds).create(entity))

    create.help = f"Register a new {cmds.kind}."
    create.params[:0] = cmds.extra_options(True)
    return create


def _get(cmds: KindCommands) -> click.Command:
    @click.command("get", cls=JobregCommand)
    @click.argument("entity_id")
    @click.pass_obj
    def get(app: AppContext, entity_id: str) -> None:
        app.emit(_service(app, cmds).get(entity_id))

    get.help = f"Show one {cmds.kind}."
    return get


def _list(cmds: KindCommands) -> click.Command:
    @click.command(
        "list",
        cls=JobregCommand,
        examples=(
            f"  jobreg {cmds.group_name} list --tag prod --tag yarn\n"
            f"  jobreg {cmds.group_name} list --user tgianos --order-by name --asc\n"
            f"  jobreg {cmds.group_name} list --page 1 --page-size 10"
        ),
    )
    @click.option("--name", default=None, help="Exact name.")
    @click.option("--user", default=None, help="Exact user.")
    @click.option("--tag", "tags", multiple=True, help="Required tag (repeatable, all must match).")
    @click.option(
        "--status",
        "statuses",
        multiple=True,
        type=click.Choice(cmds.statuses, case_sensitive=False),
        help="Allowed status (repeatable, any may match).",
    )
    @click.option("--min-updated", default=None, help="Earliest updated timestamp (ISO 8601).")
    @click.option("--max-updated", default=None, help="Latest updated timestamp (ISO 8601).")
    @click.option("--page", default=0, show_default=True, help="Zero-based page index.")
    @click.option("--page-size", type=int, default=None, help="Rows per page.")
    @click.option("--order-by", type=click.Choice(list(SORT_KEYS)), default=None)
    @click.option("--asc", is_flag=True, help="Ascending order (default is descending).")
    @click.pass_obj
    def list_cmd(
        app: AppContext,
        name: str | None,
        user: str | None,
        tags: tuple[str, ...],
        statuses: tuple[str, ...],
        min_updated: str | None,
        max_updated: str | None,
        page: int,
        page_size: int | None,
        order_by: str | None,
        asc: bool,
    ) -> None:
        app.emit(
            _service(app, cmds).find(
                name=name,
                user=user,
                tags=list(tags),
                statuses=list(statuses),
                min_updated=min_updated,
                max_updated=max_updated,
                page=page,
                page_size=page_size,
                order_by=order_by,
                descending=not asc,
            )
        )

    list_cmd.help = f"Search {cmds.kind}s, most recently updated first."
    return list_cmd


def _update(cmds: KindCommands) -> click.Command:
    @click.command(
        "update",
        cls=JobregCommand,
        examples=f"  jobreg {cmds.group_name} update ID --version 2.0 --tag prod --tag yarn",
    )
    @click.argument("entity_id")
    @click.option("--name", default=None)
    @click.option("--user", default=None)
    @click.option("--version", default=None)
    @click.option("--status", default=None, type=click.Choice(cmds.statuses, case_sensitive=False))
    @click.option("--tag", "tags", multiple=True, help="Replace tags (repeatable).")
    @click.option("--config", "configs", multiple=True, help="Replace configs (repeatable).")
    @click.option("--jar", "jars", multiple=True, help="Replace jars (repeatable).")
    @click.pass_obj
    def update(
        app: AppContext,
        entity_id: str,
        name: str | None,
        user: str | None,
        version: str | None,
        status: str | None,
        tags: tuple[str, ...],
        configs: tuple[str, ...],
        jars: tuple[str, ...],
        **extra: Any,
    ) -> None:
        changes: dict[str, Any] = {
            "name": name,
            "user": user,
            "version": version,
            "status": status.upper() if status else None,
            "tags": frozenset(tags) if tags else None,
            "configs": frozenset(configs) if configs else None,
            "jars": frozenset(jars) if jars else None,
            **_extra_values(cmds, extra, creating=False),
        }
        changes = {key: value for key, value in changes.items() if value is not None}
        if not changes:
            click.echo("No changes specified. Use --help for options.", err=True)
            raise SystemExit(1)

        patch = build_model(PATCH_TYPES[cmds.kind], changes)
        app.emit(_service(app, cmds).update(entity_id, patch))

    update.help = f"Change fields of a {cmds.kind}; set options replace the whole set."
    update.params[1:1] = cmds.extra_options(False)
    return update


def _delete(cmds: KindCommands) -> click.Command:
    @click.command("delete", cls=JobregCommand)
    @click.argument("entity_id")
    @click.pass_obj
    def delete(app: AppContext, entity_id: str) -> None:
        app.emit(_service(app, cmds).delete(entity_id))

    delete.help = f"Delete one {cmds.kind}, detaching anything that references it."
    return delete


def _delete_all(cmds: KindCommands) -> click.Command:
    @click.command("delete-all", cls=JobregCommand)
    @click.option("--yes", is_flag=True, help="Skip the confirmation prompt.")
    @click.pass_obj
    def delete_all(app: AppContext, yes: bool) -> None:
        if not yes:
            click.confirm(f"Delete every {cmds.kind}?", abort=True)
        app.emit(_service(app, cmds).delete_all())

    delete_all.help = f"Delete every {cmds.kind}."
    return delete_all


# ── Attribute sets ────────────────────────────────────────────────────


def _attribute_group(cmds: KindCommands, attr: AttributeName) -> JobregGroup:
    group = JobregGroup(
        attr.value,
        help=f"Manage the {attr.value} of a {cmds.kind}.",
        examples=(
            f"  jobreg {cmds.group_name} {attr.value} show ID\n"
            f"  jobreg {cmds.group_name} {attr.value} add ID a b\n"
            f"  jobreg {cmds.group_name} {attr.value} set ID a\n"
            f"  jobreg {cmds.group_name} {attr.value} remove ID a\n"
            f"  jobreg {cmds.group_name} {attr.value} clear ID"
        ),
    )

    @group.command("show")
    @click.argument("entity_id")
    @click.pass_obj
    def show(app: AppContext, entity_id: str) -> None:
        """List the members."""
        app.emit(_service(app, cmds).get_attribute(entity_id, attr))

    @group.command("add")
    @click.argument("entity_id")
    @click.argument("values", nargs=-1, required=True)
    @click.pass_obj
    def add(app: AppContext, entity_id: str, values: tuple[str, ...]) -> None:
        """Add members, keeping the existing ones."""
        app.emit(_service(app, cmds).add_attribute(entity_id, attr, values))

    @group.command("set")
    @click.argument("entity_id")
    @click.argument("values", nargs=-1)
    @click.pass_obj
    def set_cmd(app: AppContext, entity_id: str, values: tuple[str, ...]) -> None:
        """Replace all members with VALUES."""
        app.emit(_service(app, cmds).replace_attribute(entity_id, attr, values))

    @group.command("remove")
    @click.argument("entity_id")
    @click.argument("value")
    @click.pass_obj
    def remove(app: AppContext, entity_id: str, value: str) -> None:
        """Remove one member."""
        app.emit(_service(app, cmds).remove_attribute(entity_id, attr, value))

    @group.command("clear")
    @click.argument("entity_id")
    @click.pass_obj
    def clear(app: AppContext, entity_id: str) -> None:
        """Remove every member (tags keep the id and name)."""
        app.emit(_service(app, cmds).remove_all_attribute(entity_id, attr))

    return group
