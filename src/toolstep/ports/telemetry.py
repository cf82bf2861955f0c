"""
Port definitions for tracing and event output.

The tracer shape matches the OpenTelemetry API so an OTel tracer can be
passed straight through.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Protocol


class SpanPort(Protocol):
    def set_attributes(self, attributes: Mapping[str, Any]) -> None: ...

    def set_status(self, status: Any, description: str | None = None) -> None: ...

    def record_exception(self, exception: BaseException) -> None: ...

    def end(self) -> None: ...


class TracerPort(Protocol):
    def start_span(self, name: str) -> SpanPort: ...


class EventWriterPort(Protocol):
    def write(self, event: Any) -> None: ...


class StreamStatePort(Protocol):
    def serialize(self) -> dict[str, Any]: ...


__all__ = ["EventWriterPort", "SpanPort", "StreamStatePort", "TracerPort"]
