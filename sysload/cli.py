"""Command line entry point printing one row of load figures per second."""

from __future__ import annotations

import argparse
import itertools
import time
from collections.abc import Iterable, Sequence

from sysload.cpuload import COLSEP, PROC_STAT, CpuMonitor
from sysload.gpuload import GpuMonitor
from sysload.vcgencmd import GencmdError, read_temp

_INTERVAL_MS = 1000


def format_row(values: Iterable[float]) -> str:
    """Format values with two decimals, separated by the column separator."""
    return COLSEP.join(f"{value:.2f}" for value in values)


def msleep(msec: int) -> None:
    """Sleep for ``msec`` milliseconds."""
    if msec < 0:
        raise ValueError("sleep time must not be negative")
    time.sleep(msec / 1000)


def _count(text: str) -> int:
    value = int(text)
    if value < 0:
        raise argparse.ArgumentTypeError("count must not be negative")
    return value


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="sysload",
        description="Print CPU load, GPU load and SoC temperature once a second.",
    )
    parser.add_argument(
        "-n", "--count", type=_count, default=None,
        help="number of rows to print (default: run until interrupted)",
    )
    parser.add_argument("--stat-file", default=PROC_STAT, help="CPU statistics file")
    return parser


def _cpu_field(cpu: CpuMonitor) -> str:
    try:
        return format_row(cpu.sample(per_core=False))
    except (OSError, ValueError):
        return ""


def _gpu_field(gpu: GpuMonitor) -> str:
    try:
        return format_row([gpu.sample()])
    except OSError:
        return ""


def _temp_field() -> str:
    try:
        return format_row([read_temp()])
    except (OSError, ValueError, GencmdError):
        return ""


def _available(probe) -> bool:
    try:
        probe()
    except (OSError, ValueError, GencmdError):
        return False
    return True


def main(argv: Sequence[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)

    cpu = CpuMonitor(args.stat_file)
    _available(lambda: cpu.sample(per_core=False))
    gpu = GpuMonitor()
    with_gpu = _available(gpu.sample)
    with_temp = _available(read_temp)

    rows = range(args.count) if args.count is not None else itertools.count()
    try:
        for _ in rows:
            msleep(_INTERVAL_MS)
            fields = [_cpu_field(cpu)]
            if with_gpu:
                fields.append(_gpu_field(gpu))
            if with_temp:
                fields.append(_temp_field())
            print(COLSEP.join(fields), flush=True)
    except KeyboardInterrupt:
        pass
    return 0


if __name__ == "__main__":
    raise SystemExit(main())