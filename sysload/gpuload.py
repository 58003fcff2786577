"""GPU load sampling from the V3D driver's statistics files."""

from __future__ import annotations

import re
from collections.abc import Iterable, Sequence
from pathlib import Path

STATS_PATHS = (
    "/sys/devices/platform/axi/1002000000.v3d/gpu_stats",
    "/sys/devices/platform/v3dbus/fec00000.v3d/gpu_stats",
)
USAGE_PATHS = (
    "/sys/kernel/debug/dri/0/gpu_usage",
    "/sys/kernel/debug/dri/1/gpu_usage",
)
QUEUE_COUNT = 5

_STATS_QUEUES = ("bin", "render", "tfu", "csd", "cache_clean")
_USAGE_QUEUES = ("v3d_bin", "v3d_ren", "v3d_tfu", "v3d_csd", "v3d_cac")
_PREFIX = 7

_STATS_LINE = re.compile(r"\s*(\S+)\s+([+-]?\d+)\s+([+-]?\d+)\s+([+-]?\d+)")
_TIMESTAMP_LINE = re.compile(r"timestamp;\s*([+-]?\d+)")
_USAGE_FIELDS = re.compile(r";\s*([+-]?\d+);\s*([+-]?\d+);\s*([+-]?\d+)")


def _queue_index(name: str, queues: Sequence[str]) -> int | None:
    key = name[:_PREFIX]
    return next((index for index, queue in enumerate(queues) if queue[:_PREFIX] == key), None)


def _read_lines(paths: Iterable[str | Path]) -> list[str] | None:
    for path in paths:
        try:
            with open(path, encoding="ascii", errors="replace") as stats:
                return stats.readlines()
        except OSError:
            continue
    return None


class GpuMonitor:
    """Tracks per-queue GPU run time between samples."""

    def __init__(
        self,
        stats_paths: Iterable[str | Path] = STATS_PATHS,
        usage_paths: Iterable[str | Path] = USAGE_PATHS,
    ) -> None:
        self.stats_paths = tuple(stats_paths)
        self.usage_paths = tuple(usage_paths)
        self.last_val = [0] * QUEUE_COUNT
        self.last_timestamp = 0

    def _record(self, loads: list[float], index: int, runtime: int, elapsed: int) -> None:
        if self.last_val[index] == 0:
            loads[index] = 0.0
        elif elapsed:
            loads[index] = (runtime - self.last_val[index]) / elapsed
        self.last_val[index] = runtime

    def process_stats(self, lines: Iterable[str]) -> float:
        """Update from ``gpu_stats`` lines and return the busiest queue's load fraction."""
        loads = [0.0] * QUEUE_COUNT
        elapsed = 0
        for line in lines:
            match = _STATS_LINE.match(line)
            if not match:
                continue
            timestamp = int(match.group(2))
            runtime = int(match.group(4))
            if self.last_timestamp < timestamp:
                elapsed = timestamp - self.last_timestamp
                self.last_timestamp = timestamp
            index = _queue_index(match.group(1), _STATS_QUEUES)
            if index is not None:
                self._record(loads, index, runtime, elapsed)
        return max(0.0, *loads)

    def process_usage(self, lines: Iterable[str]) -> float:
        """Update from ``gpu_usage`` lines and return the busiest queue's load fraction."""
        loads = [0.0] * QUEUE_COUNT
        elapsed = 0
        for line in lines:
            stamp = _TIMESTAMP_LINE.match(line)
            if stamp:
                timestamp = int(stamp.group(1))
                elapsed = timestamp - self.last_timestamp
                self.last_timestamp = timestamp
                continue
            separator = line.find(";")
            if separator < 0:
                continue
            fields = _USAGE_FIELDS.match(line, separator)
            if not fields:
                continue
            index = _queue_index(line, _USAGE_QUEUES)
            if index is not None:
                self._record(loads, index, int(fields.group(2)), elapsed)
        return max(0.0, *loads)

    def sample(self) -> float:
        """Return the GPU load in percent since the previous sample."""
        lines = _read_lines(self.stats_paths)
        if lines is not None:
            return 100.0 * self.process_stats(lines)
        lines = _read_lines(self.usage_paths)
        if lines is not None:
            return 100.0 * self.process_usage(lines)
        raise FileNotFoundError("no GPU statistics file is available")