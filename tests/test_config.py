import contextlib
import io
import tempfile
import unittest
from pathlib import Path

from monkmode.config.config import load_config, session_config_from, validate_config
from monkmode.models import TimeoutPolicy


class ConfigTests(unittest.TestCase):
    def test_packaged_defaults(self) -> None:
        cfg = validate_config(load_config())
        self.assertEqual(cfg["session"]["question_duration"], 5)
        self.assertEqual(cfg["session"]["answer_duration"], 5)
        self.assertFalse(cfg["session"]["shuffle"])
        self.assertEqual(cfg["session"]["mode"], "treadmill")
        self.assertEqual(cfg["reader"]["pause_max"], 4.5)
        self.assertFalse(cfg["ui"]["explain"])

    def test_invalid_values_fall_back_with_warning(self) -> None:
        raw = {
            "session": {"question_duration": 0, "answer_duration": "x", "mode": "dance", "unjudged_timeout": "nope"},
            "reader": {"pause_min": 5.0, "pause_max": 2.0, "pause_base": -1},
            "ui": None,
        }
        out = io.StringIO()
        with contextlib.redirect_stdout(out):
            cfg = validate_config(raw)
        self.assertEqual(cfg["session"]["question_duration"], 5)
        self.assertEqual(cfg["session"]["answer_duration"], 5)
        self.assertEqual(cfg["session"]["mode"], "treadmill")
        self.assertEqual(cfg["session"]["unjudged_timeout"], "miss")
        self.assertEqual((cfg["reader"]["pause_min"], cfg["reader"]["pause_max"]), (2.0, 5.0))
        self.assertEqual(cfg["reader"]["pause_base"], 1.0)
        self.assertEqual(cfg["ui"], {"explain": False})
        self.assertIn("WARNING:", out.getvalue())

    def test_yaml_file_and_overrides(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "cfg.yml"
            path.write_text("session:\n  question_duration: 3\n  shuffle: true\n  unjudged_timeout: skip\n", encoding="utf-8")
            cfg = validate_config(load_config(str(path)))
        config = session_config_from(cfg, {"answer_duration": 7, "question_duration": None})
        self.assertEqual(config.question_duration, 3)
        self.assertEqual(config.answer_duration, 7)
        self.assertTrue(config.shuffle)
        self.assertEqual(config.unjudged_timeout, TimeoutPolicy.SKIP)

    def test_missing_file_exits(self) -> None:
        err = io.StringIO()
        with contextlib.redirect_stderr(err), self.assertRaises(SystemExit):
            load_config("/nonexistent/monkmode.yml")
        self.assertIn("ERROR:", err.getvalue())


if __name__ == "__main__":
    unittest.main()
