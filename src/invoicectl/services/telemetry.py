"""Operation tracing for ``--verbose``.

A traced service call records one :class:`OperationTrace`: its total
duration and the flat list of pipeline stages it passed through
(``validate``, ``persist``, ``revalidate``, ``query``). Stages do not
nest; the pipeline is a straight line.

Tracing is off unless the CLI enables it. When off, ``@traced`` and
:func:`stage` cost a single ContextVar read. When on, the finished trace
is logged through structlog and attached to ``ServiceResult.meta["trace"]``.
"""

from __future__ import annotations

import functools
import time
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass, field
from typing import Any, ParamSpec, TypeVar

import structlog

from invoicectl.services.result import ServiceResult

TRACE_META_KEY = "trace"

_tracing: ContextVar[bool] = ContextVar("invoicectl_tracing", default=False)
_active: ContextVar[OperationTrace | None] = ContextVar("invoicectl_active_trace", default=None)


def _elapsed_ms(started: float, ended: float | None) -> float:
    if ended is None:
        return 0.0
    return round((ended - started) * 1000, 2)


@dataclass
class Stage:
    """One pipeline stage within an operation."""

    name: str
    started: float = field(default_factory=time.perf_counter)
    ended: float | None = None
    notes: dict[str, Any] = field(default_factory=dict)

    def note(self, key: str, value: Any) -> None:
        self.notes[key] = value

    def as_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {
            "name": self.name,
            "duration_ms": _elapsed_ms(self.started, self.ended),
        }
        if self.notes:
            out["notes"] = dict(self.notes)
        return out


@dataclass
class OperationTrace:
    """Timing for one service operation and its stages."""

    op: str
    started: float = field(default_factory=time.perf_counter)
    ended: float | None = None
    stages: list[Stage] = field(default_factory=list)

    @property
    def duration_ms(self) -> float:
        return _elapsed_ms(self.started, self.ended)

    def as_dict(self) -> dict[str, Any]:
        return {
            "op": self.op,
            "duration_ms": self.duration_ms,
            "stages": [s.as_dict() for s in self.stages],
        }


@contextmanager
def stage(name: str) -> Iterator[Stage | None]:
    """Record a pipeline stage on the running operation.

    Yields None when tracing is off or no traced operation is running.
    """
    trace = _active.get() if _tracing.get() else None
    if trace is None:
        yield None
        return

    current = Stage(name=name)
    trace.stages.append(current)
    try:
        yield current
    finally:
        current.ended = time.perf_counter()


_P = ParamSpec("_P")
_R = TypeVar("_R")


def traced(func: Callable[_P, _R]) -> Callable[_P, _R]:  # noqa: UP047
    """Decorator: trace a service operation when tracing is on.

    A traced call made inside another traced call joins the outer
    operation's trace instead of starting its own.
    """

    @functools.wraps(func)
    def wrapper(*args: _P.args, **kwargs: _P.kwargs) -> _R:
        if not _tracing.get() or _active.get() is not None:
            return func(*args, **kwargs)

        trace = OperationTrace(op=func.__qualname__)
        token = _active.set(trace)
        ok = False
        try:
            result = func(*args, **kwargs)
            ok = result.ok if isinstance(result, ServiceResult) else True
        finally:
            trace.ended = time.perf_counter()
            _active.reset(token)
            structlog.get_logger("invoicectl.telemetry").debug(
                "operation.traced",
                op=trace.op,
                duration_ms=trace.duration_ms,
                stages=[s.name for s in trace.stages],
                ok=ok,
            )

        if isinstance(result, ServiceResult):
            meta = {**(result.meta or {}), TRACE_META_KEY: trace.as_dict()}
            return result.model_copy(update={"meta": meta})  # type: ignore[return-value]
        return result

    return wrapper


def enable_tracing() -> None:
    """Turn tracing on for the current context (``--verbose``)."""
    _tracing.set(True)


def disable_tracing() -> None:
    _tracing.set(False)
    _active.set(None)
