"""
Tracer selection and span attribute helpers (OpenTelemetry API).
"""

from __future__ import annotations

import json
from typing import Any

from opentelemetry import trace

from .ports import TracerPort

TRACER_NAME = "toolstep"
TOOL_CALL_OPERATION = "toolstep.tool_call"


def get_tracer(
    *, is_enabled: bool = False, tracer: TracerPort | None = None
) -> TracerPort:
    """Return ``tracer`` when given, the global OTel tracer when enabled, else a no-op."""
    if not is_enabled:
        return trace.NoOpTracer()
    if tracer is not None:
        return tracer
    return trace.get_tracer(TRACER_NAME)


def assemble_operation_name(
    *, operation_id: str, function_id: str | None = None
) -> dict[str, str]:
    attributes = {
        "operation.name": f"{operation_id}{f' {function_id}' if function_id else ''}",
        "resource.name": function_id or operation_id,
        "toolstep.operation_id": operation_id,
    }
    if function_id:
        attributes["toolstep.telemetry.function_id"] = function_id
    return attributes


def to_attribute(value: Any) -> str:
    """JSON-encode ``value`` for a span attribute."""
    try:
        return json.dumps(value, ensure_ascii=False, default=str)
    except (TypeError, ValueError):
        return repr(value)
