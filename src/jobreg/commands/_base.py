"""Click classes shared by every jobreg command and group.

Help text stays to one screen; worked invocations (``jobreg cluster
commands add cluster1 command1 command2`` and the like) live behind a
per-command ``--examples`` flag instead.
"""

from __future__ import annotations

from typing import Any

import click


def examples_option(examples: str) -> click.Option:
    """Eager ``--examples`` flag that prints *examples* and exits 0.

    Being eager, it fires before required options such as ``--name`` or
    ``--executable`` are checked, and before any registry is opened.
    """

    def print_and_exit(ctx: click.Context, _param: click.Parameter, value: bool) -> None:
        if value:
            click.echo(f"Examples for '{ctx.command_path}':\n\n{examples}")
            ctx.exit(0)

    return click.Option(
        ["--examples"],
        is_flag=True,
        expose_value=False,
        is_eager=True,
        callback=print_and_exit,
        help="Show usage examples.",
    )


class JobregCommand(click.Command):
    """A leaf command (``create``, ``tags add``, ...) with optional examples."""

    def __init__(self, *args: Any, examples: str | None = None, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.examples = examples
        if examples:
            self.params.append(examples_option(examples))


class JobregGroup(click.Group):
    """A command group (``app``, ``cluster commands``, ``command tags``, ...).

    ``@group.command`` builds JobregCommand and ``@group.group`` builds
    another JobregGroup, so nested levels all take ``examples=``.
    """

    command_class = JobregCommand
    group_class = type

    def __init__(self, *args: Any, examples: str | None = None, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.examples = examples
        if examples:
            self.params.append(examples_option(examples))
