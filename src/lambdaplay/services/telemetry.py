"""Span timing for service calls.

Off by default; ``--verbose`` switches it on. While on, each ``@traced``
call records a :class:`Span`. Nested traced calls and ``trace_span``
blocks hang off the enclosing span, and the outermost tree is attached
to the returned ServiceResult under ``meta["telemetry"]``.

While off, the only cost per call is one ContextVar lookup.
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

from lambdaplay.services.result import ServiceResult

log = structlog.get_logger("lambdaplay.telemetry")

_enabled: ContextVar[bool] = ContextVar("lambdaplay_telemetry", default=False)
_current_span: ContextVar[Span | None] = ContextVar("lambdaplay_span", default=None)

_P = ParamSpec("_P")
_R = TypeVar("_R")


@dataclass
class Span:
    """One timed region. ``finished`` stays None while the region is open."""

    name: str
    started: float = field(default_factory=time.perf_counter)
    finished: float | None = None
    children: list[Span] = field(default_factory=list)
    annotations: dict[str, Any] = field(default_factory=dict)

    @property
    def duration_ms(self) -> float:
        if self.finished is None:
            return 0.0
        return (self.finished - self.started) * 1000

    def end(self) -> None:
        self.finished = time.perf_counter()

    def annotate(self, key: str, value: Any) -> None:
        self.annotations[key] = value

    def to_dict(self) -> dict[str, Any]:
        tree: dict[str, Any] = {"name": self.name, "duration_ms": round(self.duration_ms, 2)}
        if self.annotations:
            tree["annotations"] = dict(self.annotations)
        if self.children:
            tree["children"] = [child.to_dict() for child in self.children]
        return tree


@contextmanager
def _open(name: str) -> Iterator[Span]:
    span = Span(name=name)
    parent = _current_span.get()
    if parent is not None:
        parent.children.append(span)
    token = _current_span.set(span)
    try:
        yield span
    finally:
        span.end()
        _current_span.reset(token)


@contextmanager
def trace_span(name: str) -> Iterator[Span | None]:
    """Time a block as a child of the active span.

    Yields None when telemetry is off or nothing is being traced.
    """
    if not _enabled.get() or _current_span.get() is None:
        yield None
        return
    with _open(name) as span:
        yield span


def traced(func: Callable[_P, _R]) -> Callable[_P, _R]:  # noqa: UP047
    """Record a span around *func* and attach the tree to its ServiceResult."""

    @functools.wraps(func)
    def wrapper(*args: _P.args, **kwargs: _P.kwargs) -> _R:
        if not _enabled.get():
            return func(*args, **kwargs)

        outermost = _current_span.get() is None
        failed = True
        with _open(func.__qualname__) as span:
            try:
                result = func(*args, **kwargs)
                failed = False
            finally:
                log.debug(
                    "span.complete",
                    span_name=span.name,
                    failed=failed,
                    children=len(span.children),
                )

        if outermost and isinstance(result, ServiceResult):
            meta = {**(result.meta or {}), "telemetry": span.to_dict()}
            return result.model_copy(update={"meta": meta})  # type: ignore[return-value]
        return result

    return wrapper


def enable_telemetry() -> None:
    _enabled.set(True)


def disable_telemetry() -> None:
    _enabled.set(False)


def get_current_span() -> Span | None:
    """The active span, for annotating from inside a traced call."""
    if not _enabled.get():
        return None
    return _current_span.get()
