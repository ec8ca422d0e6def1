"""Rich/JSON output selection.

The CLI renders ServiceResult for humans (Rich tables and panels) or
machines (``--json``). This module picks the mode; the per-shape
rendering lives in :mod:`jobreg.output.renderers`.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from jobreg.output.renderers import render_quiet, render_result

if TYPE_CHECKING:
    from jobreg.services.result import ServiceResult


def format_result(
    result: ServiceResult,
    *,
    json_output: bool = False,
    quiet: bool = False,
    verbose: bool = False,
) -> str:
    """Format a ServiceResult for display.

    Args:
        result: The service result to format.
        json_output: Return the full result as indented JSON.
        quiet: Return ids or members only.
        verbose: Include timestamps, error detail, and telemetry.
    """
    if json_output:
        return result.model_dump_json(indent=2)
    if quiet:
        return render_quiet(result)
    return render_result(result, verbose=verbose)
