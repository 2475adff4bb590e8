import tempfile
import unittest
from pathlib import Path

from rubik_steps.config import DEFAULT_CONFIG, SolverConfig, load_config


class TestSolverConfig(unittest.TestCase):
    def _write(self, td, text):
        path = Path(td) / "solver.yaml"
        path.write_text(text, encoding="utf-8")
        return path

    def test_defaults(self):
        self.assertEqual(DEFAULT_CONFIG.max_depth(0), 8)
        self.assertEqual(DEFAULT_CONFIG.max_depth(3), 6)
        self.assertEqual(DEFAULT_CONFIG.scramble_turns, 25)
        out = DEFAULT_CONFIG.to_dict()
        self.assertEqual(out["stage_max_depths"], [8, 10, 10, 6, 7, 7, 7])
        self.assertEqual(out["max_search_nodes"], 200_000)

    def test_load_partial_yaml(self):
        with tempfile.TemporaryDirectory() as td:
            path = self._write(td, "corner_guard: 12\nstage_max_depths: [5, 6, 6, 4, 4, 4, 4]\n")
            config = load_config(path)
        self.assertEqual(config.corner_guard, 12)
        self.assertEqual(config.stage_max_depths, (5, 6, 6, 4, 4, 4, 4))
        self.assertEqual(config.middle_guard, DEFAULT_CONFIG.middle_guard)

    def test_empty_file_keeps_defaults(self):
        with tempfile.TemporaryDirectory() as td:
            config = load_config(self._write(td, ""))
        self.assertEqual(config, DEFAULT_CONFIG)

    def test_unknown_key(self):
        with tempfile.TemporaryDirectory() as td:
            path = self._write(td, "corner_guard: 3\nlearning_rate: 0.1\n")
            with self.assertRaisesRegex(ValueError, "learning_rate"):
                load_config(path)

    def test_not_a_mapping(self):
        with tempfile.TemporaryDirectory() as td:
            path = self._write(td, "- 1\n- 2\n")
            with self.assertRaises(ValueError):
                load_config(path)

    def test_bad_values(self):
        with self.assertRaises(ValueError):
            SolverConfig(stage_max_depths=(1, 2, 3))
        with self.assertRaises(ValueError):
            SolverConfig(stage_max_depths=(8, 10, 10, -1, 7, 7, 7))
        with self.assertRaises(ValueError):
            SolverConfig(last_layer_guard=0)
        with self.assertRaises(ValueError):
            SolverConfig(scramble_turns=-1)


if __name__ == "__main__":
    unittest.main()
