"""Raspberry Pi telemetry sources, parsers, and delta tracking for pitemp."""

from .delta import LoadDeltaTracker, compute_delta
from .errors import EncodingError, FieldMissing, LabelNotFound, ParseError, SourceUnavailable, TelemetryError
from .fields import FieldExtractor
from .models import CpuLoadSnapshot, CycleResult, LoadDelta, MemoryUsage, MetricResult, RawSample
from .provider import METRICS, TelemetryProvider, TelemetrySources, default_sources
from .sources import CommandSource, FileSource

__all__ = [
    "METRICS",
    "CommandSource",
    "CpuLoadSnapshot",
    "CycleResult",
    "EncodingError",
    "FieldExtractor",
    "FieldMissing",
    "FileSource",
    "LabelNotFound",
    "LoadDelta",
    "LoadDeltaTracker",
    "MemoryUsage",
    "MetricResult",
    "ParseError",
    "RawSample",
    "SourceUnavailable",
    "TelemetryError",
    "TelemetryProvider",
    "TelemetrySources",
    "compute_delta",
    "default_sources",
]
