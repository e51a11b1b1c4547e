from __future__ import annotations

from contextlib import contextmanager
from typing import Any
import time

from .instrumentation import Cat
from .session import FormSession


def _emit_phase(
    session: FormSession,
    *,
    level: str,
    msg: str,
    cat: Cat,
    ctx: dict[str, Any],
) -> None:
    session.emit_signal(cat, msg, level=level, **ctx)


@contextmanager
def phase_timer(
    session: FormSession | None,
    label: str,
    *,
    cat: Cat = Cat.NAV,
    ctx: dict[str, Any] | None = None,
    slow_s: float = 30.0,
):
    if session is None:
        raise RuntimeError("phase_timer requires an active FormSession")
    start = time.perf_counter()
    merged_ctx: dict[str, Any] = {"a": label}
    if ctx:
        merged_ctx.update(ctx)
    _emit_phase(session, level="info", msg=f"START phase: {label}", cat=cat, ctx=merged_ctx)
    try:
        yield
    finally:
        elapsed = time.perf_counter() - start
        merged_ctx["elapsed_s"] = round(elapsed, 3)
        _emit_phase(
            session,
            level="warning" if elapsed >= slow_s else "info",
            msg=f"END phase: {label} ({elapsed:.2f} seconds)",
            cat=cat,
            ctx=merged_ctx,
        )
