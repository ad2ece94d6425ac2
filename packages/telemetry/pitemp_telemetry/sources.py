"""Raw text readers for OS-exposed telemetry sources."""

from __future__ import annotations

import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol, Sequence

from .errors import EncodingError, SourceUnavailable
from .models import RawSample

GPU_TEMP_COMMAND = "gpu-temp-command"
CPU_TEMP_FILE = "cpu-temp-file"
MEMINFO_FILE = "meminfo-file"
STAT_FILE = "stat-file"


class TextSource(Protocol):
    source_id: str

    def read(self) -> RawSample: ...


def _decode(source_id: str, payload: bytes) -> RawSample:
    try:
        return RawSample(source_id=source_id, text=payload.decode("utf-8"))
    except UnicodeDecodeError as exc:
        raise EncodingError(f"{source_id}: output is not valid UTF-8 ({exc.reason})") from exc


@dataclass(frozen=True)
class FileSource:
    """A pseudo-file such as ``/proc/meminfo``, read whole on every call."""

    source_id: str
    path: Path

    def read(self) -> RawSample:
        try:
            payload = Path(self.path).read_bytes()
        except OSError as exc:
            raise SourceUnavailable(f"{self.source_id}: cannot read {self.path}: {exc.strerror or exc}") from exc
        return _decode(self.source_id, payload)


@dataclass(frozen=True)
class CommandSource:
    """An external command whose stdout is the sample, e.g. ``vcgencmd measure_temp``."""

    source_id: str
    argv: Sequence[str]
    timeout_s: float | None = None

    def read(self) -> RawSample:
        try:
            result = subprocess.run(
                list(self.argv),
                capture_output=True,
                timeout=self.timeout_s,
                check=False,
            )
        except (OSError, subprocess.SubprocessError) as exc:
            raise SourceUnavailable(f"{self.source_id}: cannot run {self.argv[0]!r}: {exc}") from exc

        if result.returncode != 0 and not result.stdout.strip():
            stderr = result.stderr.decode("utf-8", errors="replace").strip()
            raise SourceUnavailable(f"{self.source_id}: exit status {result.returncode}: {stderr or 'no output'}")
        return _decode(self.source_id, result.stdout)
