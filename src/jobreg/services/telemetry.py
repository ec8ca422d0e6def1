"""Telemetry: the @traced decorator for public service methods.

Near-zero overhead when disabled (single ContextVar.get per call).
When enabled via --verbose, each traced call is timed, logged as a
``span.complete`` event, and its duration is injected into
``ServiceResult.meta["telemetry"]``.
"""

from __future__ import annotations

import functools
import time
from collections.abc import Callable
from contextvars import ContextVar
from typing import ParamSpec, TypeVar

import structlog

from jobreg.services.result import ServiceResult

_verbose_enabled: ContextVar[bool] = ContextVar("_verbose_enabled", default=False)

_P = ParamSpec("_P")
_R = TypeVar("_R")


def _log_span(name: str, duration_ms: float, *, ok: bool) -> None:
    log = structlog.get_logger("jobreg.telemetry")
    log.debug("span.complete", span_name=name, duration_ms=duration_ms, ok=ok)


def traced(func: Callable[_P, _R]) -> Callable[_P, _R]:  # noqa: UP047
    """Decorator: time a service method and record the span on its ServiceResult."""

    @functools.wraps(func)
    def wrapper(*args: _P.args, **kwargs: _P.kwargs) -> _R:
        if not _verbose_enabled.get():
            return func(*args, **kwargs)

        start = time.perf_counter()
        try:
            result = func(*args, **kwargs)
        except Exception:
            _log_span(func.__qualname__, _elapsed_ms(start), ok=False)
            raise

        duration_ms = _elapsed_ms(start)
        if isinstance(result, ServiceResult):
            span = {"name": func.__qualname__, "duration_ms": duration_ms}
            meta = {**(result.meta or {}), "telemetry": span}
            _log_span(func.__qualname__, duration_ms, ok=result.ok)
            return result.model_copy(update={"meta": meta})  # type: ignore[return-value]
        _log_span(func.__qualname__, duration_ms, ok=True)
        return result

    return wrapper


def _elapsed_ms(start: float) -> float:
    return round((time.perf_counter() - start) * 1000, 2)


def enable_telemetry() -> None:
    """Enable verbose telemetry (called by AppContext at startup)."""
    _verbose_enabled.set(True)


def disable_telemetry() -> None:
    _verbose_enabled.set(False)


def telemetry_enabled() -> bool:
    return _verbose_enabled.get()
