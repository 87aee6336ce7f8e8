"""Log correlation context: trace ids plus the package currently being indexed."""

from __future__ import annotations

from contextlib import contextmanager
from contextvars import ContextVar
from typing import TYPE_CHECKING
from uuid import uuid4


if TYPE_CHECKING:
    from collections.abc import Generator

# Copied into worker threads by asyncio.to_thread, so rankings keep their trace ids
trace_context: ContextVar[dict | None] = ContextVar("trace_context", default=None)


def get_trace_context() -> dict:
    """Current correlation fields; a fresh trace id is minted on first use."""
    ctx = trace_context.get()
    if ctx is None or not ctx.get("trace_id"):
        ctx = {"span_id": uuid4().hex[:16], **(ctx or {}), "trace_id": uuid4().hex}
        trace_context.set(ctx)
    return ctx


def set_trace_context(trace_id: str, span_id: str, **extra: object) -> None:
    trace_context.set({"trace_id": trace_id, "span_id": span_id, **extra})


def update_span_id(span_id: str) -> None:
    """Point log records at a new span while keeping the trace and package."""
    ctx = trace_context.get() or {}
    trace_context.set({**ctx, "span_id": span_id})


@contextmanager
def package_context(package_id: str) -> Generator[dict, None, None]:
    """Tag every log record emitted inside the block with ``package_id``."""
    token = trace_context.set({**get_trace_context(), "package": package_id})
    try:
        yield trace_context.get()
    finally:
        trace_context.reset(token)
