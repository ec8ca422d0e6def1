"""AppContext: shared Click context for all commands.

Created once by the root CLI group and passed to every subcommand via
``@click.pass_obj``. Owns lazy Registry construction and result
emission (stdout/stderr routing and exit codes).
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from jobreg.output.formatters import format_result

if TYPE_CHECKING:
    from jobreg.config.settings import RegistrySettings
    from jobreg.infrastructure.registry import Registry
    from jobreg.services.result import ServiceResult


class AppContext:
    """Shared context flowing through Click's command hierarchy.

    The registry is created on first use so ``--help`` and ``--version``
    never touch the database.
    """

    def __init__(self, settings: RegistrySettings) -> None:
        self.settings = settings
        self._registry: Registry | None = None

        from jobreg.config.logging import configure_logging

        configure_logging(verbose=settings.verbose, log_json=settings.log_json)

        if settings.verbose:
            from jobreg.services.telemetry import enable_telemetry

            enable_telemetry()

    @property
    def registry(self) -> Registry:
        """The registry instance (created lazily on first access)."""
        if self._registry is None:
            from jobreg.infrastructure.registry import Registry

            self._registry = Registry(self.settings)
        return self._registry

    def close(self) -> None:
        if self._registry is not None:
            self._registry.close()
            self._registry = None

    def emit(self, result: ServiceResult) -> None:
        """Format and output a ServiceResult with correct exit semantics.

        * Success: writes to stdout and returns. Warnings go to stderr
          so they don't pollute piped output.
        * Failure: writes to stderr and exits with code 1.
        """
        output = format_result(
            result,
            json_output=self.settings.json_output,
            quiet=self.settings.quiet,
            verbose=self.settings.verbose,
        )
        if result.ok:
            click.echo(output)
            # In JSON mode, warnings are already in the serialized payload.
            if not self.settings.json_output:
                for warning in result.warnings:
                    click.echo(f"WARNING: {warning}", err=True)
        else:
            click.echo(output, err=True)
            raise SystemExit(1)
