"""CPU load sampling from the kernel's /proc/stat counters."""

from __future__ import annotations

import itertools
from dataclasses import dataclass
from pathlib import Path

PROC_STAT = "/proc/stat"
MAXCPU = 64
COLSEP = "\t"

# user, nice, system, idle, iowait, irq, softirq come before steal
_FIELDS_BEFORE_STEAL = 7
_GUEST_POSITION = 8


@dataclass(frozen=True)
class CpuTimes:
    """Cumulative jiffy counters of one ``cpu`` line of /proc/stat."""

    user: int = 0
    nice: int = 0
    system: int = 0
    idle: int = 0
    iowait: int = 0
    irq: int = 0
    softirq: int = 0
    guest: int = 0

    @property
    def used(self) -> int:
        """Busy time; steal time is neither busy nor free and is left out."""
        return self.user + self.nice + self.system + self.irq + self.softirq + self.guest

    @property
    def total(self) -> int:
        """Busy time plus idle and I/O wait time."""
        return self.used + self.idle + self.iowait


def parse_cpu_line(line: str) -> CpuTimes:
    """Parse a ``cpu`` line; counters that are missing count as zero."""
    values = list(itertools.takewhile(str.isdigit, line.split()[1:]))
    numbers = [int(value) for value in values]
    guest = numbers[_GUEST_POSITION] if len(numbers) > _GUEST_POSITION else 0
    return CpuTimes(*numbers[:_FIELDS_BEFORE_STEAL], guest=guest)


class CpuMonitor:
    """Tracks CPU counters between samples and reports load in percent."""

    def __init__(self, stat_path: str | Path = PROC_STAT) -> None:
        self.stat_path = Path(stat_path)
        self._old_used = [0] * MAXCPU
        self._old_total = [0] * MAXCPU

    def update(self, index: int, times: CpuTimes) -> float:
        """Record new counters for CPU ``index`` and return its load since the last call."""
        if not 0 <= index < MAXCPU:
            raise ValueError(f"cpu index {index} out of range 0..{MAXCPU - 1}")
        elapsed = times.total - self._old_total[index]
        load = 100.0 * (times.used - self._old_used[index]) / elapsed if elapsed else 0.0
        self._old_used[index] = times.used
        self._old_total[index] = times.total
        return load

    def sample(self, per_core: bool = False) -> list[float]:
        """Read the stat file and return the overall load, or one load per core."""
        with self.stat_path.open(encoding="ascii", errors="replace") as stat:
            first = stat.readline()
            if not first:
                raise ValueError(f"{self.stat_path} is empty")
            if not per_core:
                return [self.update(0, parse_cpu_line(first))]
            cpu_lines = itertools.takewhile(lambda line: line.startswith("cpu"), stat)
            return [
                self.update(index, parse_cpu_line(line))
                for index, line in enumerate(cpu_lines)
            ]