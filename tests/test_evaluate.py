import argparse
import json
import tempfile
import unittest
from collections import Counter
from pathlib import Path

import numpy as np

from rubik_steps.evaluate import _aggregate_metrics, build_parser, run_evaluation


class TestEvaluate(unittest.TestCase):
    def test_parser_defaults(self):
        args = build_parser().parse_args([])
        self.assertEqual(args.shuffles, 100)
        self.assertEqual(args.turns, 25)
        self.assertIsNone(args.seed)
        self.assertEqual(args.full_solver, "on")
        self.assertEqual(args.output_prefix, "stage_eval")
        self.assertEqual(args.progress, "on")

    def test_metrics_aggregation(self):
        solved = np.array([True, False, True, True], dtype=bool)
        tokens = np.array([4, 0, 8, 6], dtype=np.int64)
        oversolved = np.array([False, False, True, False], dtype=bool)
        m = _aggregate_metrics(2, solved, tokens, oversolved, Counter({"greedy": 2, "prefix": 1}), 1.5)
        self.assertEqual(m.stage, 2)
        self.assertEqual(m.title, "Middle Layer Edges")
        self.assertEqual(m.attempts, 4)
        self.assertEqual(m.solved_count, 3)
        self.assertEqual(m.failed_count, 1)
        self.assertAlmostEqual(m.success_rate, 0.75, places=6)
        self.assertAlmostEqual(m.tokens_min, 4.0, places=6)
        self.assertAlmostEqual(m.tokens_mean, 6.0, places=6)
        self.assertAlmostEqual(m.tokens_max, 8.0, places=6)
        self.assertEqual(m.oversolve_count, 1)
        self.assertEqual(m.strategies, {"greedy": 2, "prefix": 1})

    def test_metrics_without_attempts(self):
        empty = np.array([], dtype=bool)
        m = _aggregate_metrics(5, empty, np.array([], dtype=np.int64), empty, Counter(), 0.0)
        self.assertEqual(m.attempts, 0)
        self.assertEqual(m.success_rate, 0.0)
        self.assertIsNone(m.tokens_mean)

    def test_smoke_evaluation_writes_artifacts(self):
        with tempfile.TemporaryDirectory() as td:
            args = argparse.Namespace(
                shuffles=2,
                turns=3,
                seed=7,
                config=None,
                full_solver="off",
                output_dir=str(Path(td) / "out"),
                output_prefix="smoke",
                progress="off",
            )
            out = run_evaluation(args)
            self.assertTrue(Path(out["sr_plot"]).exists())
            self.assertTrue(Path(out["tokens_plot"]).exists())
            self.assertTrue(Path(out["csv"]).exists())
            self.assertEqual(len(out["metrics"]), 7)
            self.assertEqual(out["walkthroughs_solved"], 2)
            with open(out["json"], encoding="utf-8") as f:
                payload = json.load(f)
            self.assertEqual(payload["config"]["shuffles"], 2)
            self.assertEqual(len(payload["metrics"]), 7)

    def test_invalid_shuffles(self):
        args = build_parser().parse_args(["--shuffles", "0", "--full-solver", "off"])
        with self.assertRaises(ValueError):
            run_evaluation(args)


if __name__ == "__main__":
    unittest.main()
