import sys
import tempfile
import unittest
from pathlib import Path

ROOT = Path(__file__).resolve().parents[2]
sys.path.insert(0, str(ROOT / "packages" / "telemetry"))

from pitemp_telemetry.delta import LoadDeltaTracker
from pitemp_telemetry.errors import LabelNotFound
from pitemp_telemetry.provider import TelemetryProvider, default_sources

MEMINFO = "MemTotal:        8000000 kB\nMemFree:         5000000 kB\nMemAvailable:    6000000 kB\n"


def _stat(total, cores=(250, 251, 249, 250), skip=None):
    lines = [f"cpu  {total} 20 300 40000 10 0 5 0 0 0"]
    for n, value in enumerate(cores):
        if n != skip:
            lines.append(f"cpu{n} {value} 5 75 10000 2 0 1 0 0 0")
    lines.append("ctxt 987654")
    return "\n".join(lines) + "\n"


class TelemetryProviderTests(unittest.TestCase):
    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.root = Path(self._tmp.name)
        self.cpu_temp = self.root / "temp"
        self.meminfo = self.root / "meminfo"
        self.stat = self.root / "stat"
        self.cpu_temp.write_text("45678\n", encoding="utf-8")
        self.meminfo.write_text(MEMINFO, encoding="utf-8")
        self.stat.write_text(_stat(1000), encoding="utf-8")

    def tearDown(self):
        self._tmp.cleanup()

    def _provider(self, gpu_command=None, core_count=4):
        gpu_command = gpu_command or [sys.executable, "-c", "print(\"temp=45.6'C\")"]
        sources = default_sources(
            gpu_command=gpu_command,
            cpu_temp_path=self.cpu_temp,
            meminfo_path=self.meminfo,
            stat_path=self.stat,
        )
        return TelemetryProvider(sources, core_count=core_count)

    def test_end_to_end_two_cycles(self):
        provider = self._provider()
        tracker = LoadDeltaTracker()

        first = provider.poll(tracker, cycle=1)
        self.assertEqual(first.failures, {})
        self.assertAlmostEqual(first.gpu_temp, 45.6)
        self.assertAlmostEqual(first.cpu_temp, 45.678)
        self.assertEqual(first.ram_used_mb, 2000)
        self.assertEqual(first.ram_total_mb, 8000)
        self.assertIsNone(first.cpu_total_delta)
        self.assertTrue(first.cpu_baseline)
        self.assertEqual(first.cpu_core_deltas, {})
        self.assertEqual(first.cpu_core_values["cpu1"], 251)

        self.stat.write_text(_stat(1200, cores=(300, 260, 249, 250)), encoding="utf-8")
        second = provider.poll(tracker, cycle=2)
        self.assertEqual(second.cycle, 2)
        self.assertEqual(second.cpu_total_delta, 200)
        self.assertFalse(second.cpu_baseline)
        self.assertEqual(second.cpu_core_deltas, {"cpu0": 50, "cpu1": 9, "cpu2": 0, "cpu3": 0})

    def test_missing_core_is_confined_to_cpu_load(self):
        self.stat.write_text(_stat(1000, skip=2), encoding="utf-8")
        provider = self._provider()
        tracker = LoadDeltaTracker()

        with self.assertLogs("pitemp.telemetry", level="WARNING") as logs:
            result = provider.poll(tracker)

        self.assertEqual(set(result.failures), {"cpu_load"})
        self.assertIn("cpu2", result.failures["cpu_load"])
        self.assertIsNone(result.cpu_total_delta)
        self.assertEqual(result.cpu_core_values, {})
        self.assertAlmostEqual(result.gpu_temp, 45.6)
        self.assertEqual(result.ram_used_mb, 2000)
        self.assertIsNone(tracker.previous)
        self.assertTrue(any("cpu_load" in line for line in logs.output))

        read = provider.read_cpu_load()
        self.assertIsInstance(read.error, LabelNotFound)

    def test_every_source_failing_still_returns_result(self):
        for path in (self.cpu_temp, self.meminfo, self.stat):
            path.unlink()
        provider = self._provider(gpu_command=["/nonexistent/bin/vcgencmd", "measure_temp"])

        with self.assertLogs("pitemp.telemetry", level="WARNING"):
            result = provider.poll(LoadDeltaTracker())

        self.assertTrue(result.degraded)
        self.assertEqual(set(result.failures), {"gpu_temp", "cpu_temp", "ram", "cpu_load"})
        self.assertIsNone(result.gpu_temp)
        self.assertIsNone(result.cpu_temp)
        self.assertIsNone(result.ram_total_mb)

    def test_failed_read_keeps_previous_baseline(self):
        provider = self._provider()
        tracker = LoadDeltaTracker()
        provider.poll(tracker)

        self.stat.write_text("garbage\n", encoding="utf-8")
        with self.assertLogs("pitemp.telemetry", level="WARNING"):
            provider.poll(tracker)
        self.assertEqual(tracker.previous.total, 1000)

        self.stat.write_text(_stat(1500), encoding="utf-8")
        self.assertEqual(provider.poll(tracker).cpu_total_delta, 500)

    def test_oversized_meminfo_does_not_escape_poll(self):
        self.meminfo.write_text("MemTotal: 1" + "0" * 400 + " kB\nMemAvailable: 1000 kB\n", encoding="utf-8")
        result = self._provider().poll(LoadDeltaTracker())
        self.assertNotIn("ram", result.failures)
        self.assertEqual(result.ram_total_mb, 10**397)

    def test_unknown_metric(self):
        with self.assertRaises(ValueError):
            self._provider().read("fan")


if __name__ == "__main__":
    unittest.main()
