"""
hr_engines.tracer -- HR_ENGINE_TRACE records for pure engine calls.

``@traced_engine`` logs one record per successful call of a pure engine:
engine name and version, a fingerprint of the inputs that determine the
result, the wall time taken and the wrapped function's name.  A failing
call logs nothing here; its exception propagates unchanged.

The fingerprint is a 16 hex-char SHA-256 prefix over ``name=value`` pairs
of the selected parameters, whether they were passed positionally or by
keyword.  Enum members hash as their value, so ``ApproverRole.HR`` and
``"hr"`` fingerprint identically.
"""

from __future__ import annotations

import functools
import hashlib
import inspect
import logging
import time
from collections.abc import Callable, Mapping
from decimal import Decimal
from enum import Enum
from typing import Any

_logger = logging.getLogger("hr_kernel.engines.tracer")

TRACE_MESSAGE = "HR_ENGINE_TRACE"


@functools.singledispatch
def _canonical(value: Any) -> str:
    return str(value)


@_canonical.register(type(None))
def _(value) -> str:
    return "null"


@_canonical.register
def _(value: Enum) -> str:
    return str(value.value)


@_canonical.register
def _(value: Decimal) -> str:
    # 15000 and 15000.00 describe the same amount
    return str(value.normalize())


@_canonical.register(list)
@_canonical.register(tuple)
def _(value) -> str:
    return "[" + ",".join(_canonical(v) for v in value) + "]"


@_canonical.register
def _(value: dict) -> str:
    items = sorted(value.items(), key=lambda kv: str(kv[0]))
    return "{" + ",".join(f"{k}:{_canonical(v)}" for k, v in items) + "}"


def compute_input_fingerprint(
    fingerprint_fields: tuple[str, ...],
    arguments: Mapping[str, Any],
) -> str:
    """Fingerprint of ``arguments`` restricted to ``fingerprint_fields``.

    Missing fields count as ``null``.
    """
    canonical = "|".join(
        f"{name}={_canonical(arguments.get(name))}" for name in fingerprint_fields
    )
    return hashlib.sha256(canonical.encode("utf-8")).hexdigest()[:16]


def traced_engine(
    engine_name: str,
    engine_version: str,
    fingerprint_fields: tuple[str, ...] = (),
) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
    """Wrap a pure engine function so each call emits ``HR_ENGINE_TRACE``."""

    def decorator(func: Callable[..., Any]) -> Callable[..., Any]:
        signature = inspect.signature(func)

        @functools.wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            fingerprint = ""
            if fingerprint_fields:
                bound = signature.bind_partial(*args, **kwargs)
                fingerprint = compute_input_fingerprint(fingerprint_fields, bound.arguments)

            started = time.perf_counter()
            result = func(*args, **kwargs)
            elapsed_ms = (time.perf_counter() - started) * 1000

            _logger.info(
                TRACE_MESSAGE,
                extra={
                    "trace_type": TRACE_MESSAGE,
                    "engine_name": engine_name,
                    "engine_version": engine_version,
                    "input_fingerprint": fingerprint,
                    "duration_ms": round(elapsed_ms, 2),
                    "function": func.__qualname__,
                },
            )
            return result

        return wrapper

    return decorator
