"""Failure taxonomy for reading and parsing OS telemetry sources."""

from __future__ import annotations


class TelemetryError(RuntimeError):
    """Base class for every failure confined to a single metric."""


class SourceUnavailable(TelemetryError):
    pass


class EncodingError(TelemetryError):
    pass


class FieldMissing(TelemetryError):
    pass


class LabelNotFound(TelemetryError):
    def __init__(self, label: str) -> None:
        super().__init__(f"label {label!r} not found")
        self.label = label


class ParseError(TelemetryError):
    pass
