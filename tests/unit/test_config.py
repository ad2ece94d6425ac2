import json
import sys
import tempfile
import unittest
from pathlib import Path

ROOT = Path(__file__).resolve().parents[2]
sys.path.insert(0, str(ROOT / "packages" / "core"))
sys.path.insert(0, str(ROOT / "packages" / "telemetry"))

from pitemp_core.config import AppConfig, load_config, normalize_interval, save_config


class ConfigTests(unittest.TestCase):
    def test_load_default_when_missing(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "missing.json"
            cfg = load_config(path)
            self.assertIsInstance(cfg, AppConfig)
            self.assertEqual(cfg.poll.interval_s, 2)
            self.assertEqual(cfg.sources.gpu_command, ["vcgencmd", "measure_temp"])
            self.assertEqual(cfg.sources.core_count, 4)
            self.assertIsNone(cfg.sources.command_timeout_s)

    def test_save_and_reload(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "config.json"
            cfg = load_config(path)
            cfg.poll.interval_s = 5
            cfg.sources.stat_path = "/tmp/stat"
            cfg.display.clear_screen = False
            save_config(cfg, path)
            reloaded = load_config(path)
            self.assertEqual(reloaded.poll.interval_s, 5)
            self.assertEqual(reloaded.sources.stat_path, "/tmp/stat")
            self.assertFalse(reloaded.display.clear_screen)

    def test_invalid_values_are_normalized(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "config.json"
            raw = {
                "poll": {"interval_s": -3},
                "sources": {"gpu_command": "vcgencmd measure_temp", "core_count": "two", "command_timeout_s": 0},
                "unknown": {"x": 1},
            }
            path.write_text(json.dumps(raw), encoding="utf-8")
            cfg = load_config(path)
            self.assertEqual(cfg.poll.interval_s, 2)
            self.assertEqual(cfg.sources.gpu_command, ["vcgencmd", "measure_temp"])
            self.assertEqual(cfg.sources.core_count, 4)
            self.assertIsNone(cfg.sources.command_timeout_s)

    def test_wrong_types_fall_back_to_defaults(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "config.json"
            raw = {
                "config_version": "latest",
                "poll": {"interval_s": "often"},
                "sources": {"gpu_command": 42, "stat_path": None, "core_count": float("inf")},
                "display": {"clear_screen": 0},
                "diagnostics": {"keep_log_files": "many"},
                "performance": {"cpu_percent_max": "low", "rss_mb_max": [1]},
            }
            path.write_text(json.dumps(raw), encoding="utf-8")
            cfg = load_config(path)
            self.assertEqual(cfg.config_version, 1)
            self.assertEqual(cfg.poll.interval_s, 2)
            self.assertEqual(cfg.sources.gpu_command, ["vcgencmd", "measure_temp"])
            self.assertEqual(cfg.sources.stat_path, "/proc/stat")
            self.assertEqual(cfg.sources.core_count, 4)
            self.assertFalse(cfg.display.clear_screen)
            self.assertEqual(cfg.diagnostics.keep_log_files, 7)
            self.assertEqual(cfg.performance.cpu_percent_max, 5.0)
            self.assertEqual(cfg.performance.rss_mb_max, 64.0)

    def test_corrupt_file_gives_defaults(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "config.json"
            path.write_text("{not json", encoding="utf-8")
            self.assertEqual(load_config(path), AppConfig())

    def test_normalize_interval(self):
        self.assertEqual(normalize_interval("5\n"), 5)
        self.assertEqual(normalize_interval(7), 7)
        for raw in ("", "0", "-1", "abc", "2.5", None, True):
            self.assertEqual(normalize_interval(raw), 2)


if __name__ == "__main__":
    unittest.main()
