import pytest

from sysload.gpuload import GpuMonitor


def _stats(timestamp, bin_runtime, render_runtime):
    return [
        "queue timestamp jobs runtime\n",
        f"bin {timestamp} 3 {bin_runtime}\n",
        f"render {timestamp} 4 {render_runtime}\n",
        f"tfu {timestamp} 0 0\n",
        f"csd {timestamp} 0 0\n",
        f"cache_clean {timestamp} 0 0\n",
    ]


def _usage(timestamp, bin_runtime, render_runtime):
    return [
        f"timestamp;{timestamp};\n",
        f"v3d_bin;1;{bin_runtime};0;\n",
        f"v3d_ren;1;{render_runtime};0;\n",
    ]


def test_first_stats_sample_is_zero():
    gpu = GpuMonitor((), ())
    assert gpu.process_stats(_stats(1000, 100, 100)) == 0.0
    assert gpu.last_val[:2] == [100, 100]
    assert gpu.last_timestamp == 1000


def test_stats_load_is_max_queue_fraction():
    gpu = GpuMonitor((), ())
    gpu.process_stats(_stats(1000, 100, 100))
    assert gpu.process_stats(_stats(2000, 100, 600)) == pytest.approx(0.5)


def test_stats_timestamp_never_goes_back():
    gpu = GpuMonitor((), ())
    gpu.process_stats(_stats(2000, 10, 10))
    gpu.process_stats(_stats(1000, 20, 20))
    assert gpu.last_timestamp == 2000
    assert gpu.last_val[:2] == [20, 20]


def test_stats_unknown_queue_ignored():
    gpu = GpuMonitor((), ())
    gpu.process_stats(["foo 1000 1 100\n", "renderer 1000 1 100\n"])
    assert gpu.last_val == [0, 0, 0, 0, 0]


def test_stats_cache_queue_matches_on_prefix():
    gpu = GpuMonitor((), ())
    gpu.process_stats(["cache_cl 1000 1 100\n"])
    gpu.process_stats(["cache_cl 2000 1 1100\n"])
    assert gpu.last_val[4] == 1100


def test_first_usage_sample_is_zero():
    gpu = GpuMonitor((), ())
    assert gpu.process_usage(_usage(1000, 100, 200)) == 0.0
    assert gpu.last_val[:2] == [100, 200]


def test_usage_load_is_max_queue_fraction():
    gpu = GpuMonitor((), ())
    gpu.process_usage(_usage(1000, 100, 200))
    assert gpu.process_usage(_usage(2000, 900, 400)) == pytest.approx(0.8)


def test_usage_line_without_separator_ignored():
    gpu = GpuMonitor((), ())
    gpu.process_usage(["v3d_bin no separators here\n"])
    assert gpu.last_val == [0, 0, 0, 0, 0]


def test_sample_falls_back_to_usage(tmp_path):
    usage = tmp_path / "gpu_usage"
    gpu = GpuMonitor([tmp_path / "absent"], [usage])
    reference = GpuMonitor((), ())
    usage.write_text("".join(_usage(1000, 100, 200)))
    gpu.sample()
    reference.process_usage(_usage(1000, 100, 200))
    usage.write_text("".join(_usage(3000, 500, 300)))
    expected = 100.0 * reference.process_usage(_usage(3000, 500, 300))
    assert gpu.sample() == pytest.approx(expected)


def test_sample_prefers_stats(tmp_path):
    stats = tmp_path / "gpu_stats"
    usage = tmp_path / "gpu_usage"
    stats.write_text("".join(_stats(1000, 11, 22)))
    usage.write_text("".join(_usage(1000, 33, 44)))
    gpu = GpuMonitor([stats], [usage])
    gpu.sample()
    assert gpu.last_val[:2] == [11, 22]


def test_sample_without_files_raises(tmp_path):
    gpu = GpuMonitor([tmp_path / "a"], [tmp_path / "b"])
    with pytest.raises(FileNotFoundError):
        gpu.sample()