"""Per-metric parsers turning raw source text into numbers."""

from __future__ import annotations

import math
import re

from .errors import ParseError
from .fields import TABULAR_FIELDS, TEMPERATURE_FIELDS, FieldExtractor
from .models import CpuLoadSnapshot, MemoryUsage

_CORE_LABEL_RE = re.compile(r"^cpu(\d+)$")


def _to_float(token: str, what: str) -> float:
    try:
        value = float(token)
    except ValueError:
        raise ParseError(f"{what}: {token!r} is not a number") from None
    if not math.isfinite(value):
        raise ParseError(f"{what}: {token!r} is not a finite number")
    return value


def _to_int(token: str, what: str) -> int:
    try:
        return int(token)
    except ValueError:
        raise ParseError(f"{what}: {token!r} is not an integer") from None


def kb_to_mb(kb: int) -> int:
    """Round half to even, in integers so huge counters cannot overflow a float."""
    mb, rest = divmod(kb, 1000)
    if rest > 500 or (rest == 500 and mb % 2):
        mb += 1
    return mb


def parse_gpu_temp(text: str) -> float:
    """``temp=45.6'C`` -> ``45.6`` (vcgencmd already reports degrees Celsius)."""
    return _to_float(TEMPERATURE_FIELDS.positional(text, 1), "gpu temperature")


def parse_cpu_temp(text: str) -> float:
    """Thermal zone millidegrees (``45678\\n``) -> degrees Celsius (``45.678``)."""
    tokens = text.split()
    if not tokens:
        raise ParseError("cpu temperature: source is empty")
    return _to_float(tokens[0], "cpu temperature") / 1000.0


def parse_meminfo(text: str) -> MemoryUsage:
    tokens = TABULAR_FIELDS.split(text)
    total_kb = _to_int(FieldExtractor.after_label(tokens, "MemTotal:"), "MemTotal")
    available_kb = _to_int(FieldExtractor.after_label(tokens, "MemAvailable:"), "MemAvailable")

    total_mb = max(kb_to_mb(total_kb), 0)
    used_mb = max(total_mb - kb_to_mb(available_kb), 0)
    return MemoryUsage(used_mb=used_mb, total_mb=total_mb)


def discover_cores(tokens: list[str]) -> list[str]:
    found = {int(m.group(1)) for m in map(_CORE_LABEL_RE.match, tokens) if m}
    return [f"cpu{n}" for n in sorted(found)]


def parse_cpu_stat(text: str, cores: int | None = None) -> CpuLoadSnapshot:
    """Read the first tick field of the aggregate ``cpu`` line and of each core line.

    ``cores`` is the number of ``cpuN`` lines the board is expected to report; a
    missing one raises ``LabelNotFound``. With ``cores=None`` whatever core lines
    are present are used.
    """
    tokens = TABULAR_FIELDS.split(text)
    counters = {"total": _to_int(FieldExtractor.after_label(tokens, "cpu"), "cpu")}

    labels = discover_cores(tokens) if cores is None else [f"cpu{n}" for n in range(cores)]
    for label in labels:
        counters[label] = _to_int(FieldExtractor.after_label(tokens, label), label)
    return CpuLoadSnapshot(counters=counters)
