# sysload

A small Linux load logger. Once a second it prints one line of
tab-separated numbers:

1. overall CPU usage in percent, read from `/proc/stat` (or the file given
   with `--stat-file`);
2. GPU usage in percent, when a V3D GPU statistics file is readable
   (`gpu_stats` under `/sys/devices/platform`, or `gpu_usage` under
   `/sys/kernel/debug/dri`, as on a Raspberry Pi);
3. SoC temperature in degrees Celsius, when the VideoCore mailbox device
   `/dev/vcio` answers the `measure_temp` request.

Each number is printed with two decimals. The GPU and temperature columns
appear only when a first probe at start-up succeeds; on machines without
them you get the CPU column alone. If a reading fails later on, its column
is left empty for that line.

## Installation

```
pip install .
```

## Usage

```
sysload [-n COUNT] [--stat-file PATH]
```

- `-n`, `--count` — print this many lines and stop. Without it the
  program runs until interrupted with Ctrl+C.
- `--stat-file` — read CPU counters from this file instead of `/proc/stat`.

Example output on a Raspberry Pi:

```
3.27	0.00	48.15
1.75	2.41	48.69
```

Redirect the output to a file to keep a log, or pipe it into a plotting
tool. The command exits with status 0.

## Library use

```python
from sysload.cpuload import CpuMonitor
from sysload.gpuload import GpuMonitor
from sysload.vcgencmd import read_temp

cpu = CpuMonitor("/proc/stat")
cpu.sample()              # first call sets the baseline
# ... later ...
print(cpu.sample())       # [overall usage in percent]
print(cpu.sample(per_core=True))  # one value per "cpu" line after the first

gpu = GpuMonitor()
gpu.sample()              # GPU usage in percent; raises FileNotFoundError
                          # when no statistics file can be read

print(read_temp())        # degrees Celsius
```

Other pieces:

- `sysload.cpuload.parse_cpu_line(line)` turns a `cpu` line into a
  `CpuTimes` record (`used` and `total` properties; steal time is counted
  as neither). `CpuMonitor.update(index, times)` returns the load for one
  CPU slot (0 to 63) since its previous update.
- `GpuMonitor.process_stats(lines)` and `GpuMonitor.process_usage(lines)`
  take the lines of a `gpu_stats` or `gpu_usage` file and return the
  busiest queue's load as a fraction, keeping counters for the next call.
- `sysload.vcgencmd.Mailbox` is a context manager around the mailbox
  device; `Mailbox.gencmd(command)` sends a command and returns the text
  answer, raising `GencmdError` on a failed ioctl or an error code.
  `build_gencmd_message`, `parse_gencmd_response` and `parse_temperature`
  build and read the raw messages.
- `sysload.cli.format_row(values)` joins values with tabs, two decimals
  each.

## What it does not do

The command prints only the overall CPU figure; per-core figures are
available through `CpuMonitor.sample(per_core=True)` but not from the
command line. There is no configurable interval, no averaging and no
storage of past readings beyond what the output redirection keeps.

## Running the tests

```
pip install .[test]
pytest
```