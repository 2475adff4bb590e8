"""Batch evaluation of the stage chains over random shuffles."""

from __future__ import annotations

import argparse
import csv
import json
import time
from collections import Counter
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import matplotlib
import matplotlib.pyplot as plt
import numpy as np
from tqdm import tqdm

from rubik_facelets.algebra import FullSolver, KociembaSolver, apply_tokens, scramble
from rubik_facelets.goals import FINAL_STAGE, N_STAGES, SolvedReference

from .config import DEFAULT_CONFIG, SolverConfig, load_config
from .solver import solve_stage
from .stages import STAGES

matplotlib.use("Agg")


@dataclass
class StageMetrics:
    stage: int
    title: str
    attempts: int
    solved_count: int
    failed_count: int
    success_rate: float
    tokens_min: float | None
    tokens_mean: float | None
    tokens_max: float | None
    oversolve_count: int
    strategies: dict[str, int] = field(default_factory=dict)
    eval_time_sec: float = 0.0

    def to_dict(self) -> dict[str, Any]:
        return {
            "stage": self.stage,
            "title": self.title,
            "attempts": self.attempts,
            "solved_count": self.solved_count,
            "failed_count": self.failed_count,
            "success_rate": self.success_rate,
            "tokens_min": self.tokens_min,
            "tokens_mean": self.tokens_mean,
            "tokens_max": self.tokens_max,
            "oversolve_count": self.oversolve_count,
            "strategies": dict(self.strategies),
            "eval_time_sec": self.eval_time_sec,
        }


def _aggregate_metrics(
    stage: int,
    solved: np.ndarray,
    tokens: np.ndarray,
    oversolved: np.ndarray,
    strategies: Counter,
    eval_time_sec: float,
) -> StageMetrics:
    solved = np.asarray(solved, dtype=bool)
    tokens = np.asarray(tokens, dtype=np.int64)
    oversolved = np.asarray(oversolved, dtype=bool)
    attempts = int(solved.size)
    solved_count = int(solved.sum())
    success_rate = float(solved_count / attempts) if attempts > 0 else 0.0

    if solved_count > 0:
        solved_tokens = tokens[solved]
        tokens_min = float(np.min(solved_tokens))
        tokens_mean = float(np.mean(solved_tokens))
        tokens_max = float(np.max(solved_tokens))
    else:
        tokens_min = None
        tokens_mean = None
        tokens_max = None

    return StageMetrics(
        stage=stage,
        title=STAGES[stage].title,
        attempts=attempts,
        solved_count=solved_count,
        failed_count=attempts - solved_count,
        success_rate=success_rate,
        tokens_min=tokens_min,
        tokens_mean=tokens_mean,
        tokens_max=tokens_max,
        oversolve_count=int(oversolved.sum()),
        strategies=dict(strategies),
        eval_time_sec=float(eval_time_sec),
    )


def _fmt_opt(v: float | None) -> str:
    return "N/A" if v is None else f"{v:.2f}"


def _print_header() -> None:
    print("stage | success_rate | solved/total | tokens(min/mean/max) | oversolved | strategies", flush=True)


def _print_row(m: StageMetrics) -> None:
    tokens = f"{_fmt_opt(m.tokens_min)}/{_fmt_opt(m.tokens_mean)}/{_fmt_opt(m.tokens_max)}"
    strategies = ",".join(f"{name}={count}" for name, count in sorted(m.strategies.items()))
    print(
        f"{m.stage:5d} | "
        f"{m.success_rate:12.4f} | "
        f"{m.solved_count:6d}/{m.attempts:<5d} | "
        f"{tokens:20s} | "
        f"{m.oversolve_count:10d} | "
        f"{strategies}",
        flush=True,
    )


def _plot_metrics(metrics: list[StageMetrics], output_dir: Path, prefix: str) -> tuple[Path, Path]:
    stages = np.array([m.stage for m in metrics], dtype=np.int64)
    sr = np.array([m.success_rate for m in metrics], dtype=np.float64)
    tok_min = np.array([np.nan if m.tokens_min is None else m.tokens_min for m in metrics], dtype=np.float64)
    tok_mean = np.array([np.nan if m.tokens_mean is None else m.tokens_mean for m in metrics], dtype=np.float64)
    tok_max = np.array([np.nan if m.tokens_max is None else m.tokens_max for m in metrics], dtype=np.float64)

    fig1 = plt.figure(figsize=(10, 5))
    ax1 = fig1.add_subplot(111)
    ax1.bar(stages, sr, color="tab:green", alpha=0.8)
    ax1.set_title("Stage Evaluation: Success Rate per Stage")
    ax1.set_xlabel("Stage")
    ax1.set_ylabel("Success rate")
    ax1.set_ylim(0.0, 1.0)
    ax1.set_xticks(stages)
    ax1.grid(True, axis="y", alpha=0.3)
    sr_path = output_dir / f"{prefix}_success_rate.png"
    fig1.tight_layout()
    fig1.savefig(sr_path, dpi=160)
    plt.close(fig1)

    fig2 = plt.figure(figsize=(11, 6))
    ax2 = fig2.add_subplot(111)
    ax2.plot(stages, tok_min, marker="o", linewidth=1.8, label="Tokens min")
    ax2.plot(stages, tok_mean, marker="o", linewidth=1.8, label="Tokens mean")
    ax2.plot(stages, tok_max, marker="o", linewidth=1.8, label="Tokens max")
    ax2.set_title("Stage Evaluation: Sequence Length Statistics")
    ax2.set_xlabel("Stage")
    ax2.set_ylabel("Tokens")
    ax2.set_xticks(stages)
    ax2.grid(True, alpha=0.3)
    ax2.legend(loc="best")
    tokens_path = output_dir / f"{prefix}_tokens_stats.png"
    fig2.tight_layout()
    fig2.savefig(tokens_path, dpi=160)
    plt.close(fig2)

    return sr_path, tokens_path


def _save_reports(
    metrics: list[StageMetrics],
    output_dir: Path,
    prefix: str,
    args: argparse.Namespace,
    config: SolverConfig,
    walkthroughs_solved: int,
) -> tuple[Path, Path]:
    csv_path = output_dir / f"{prefix}_metrics.csv"
    json_path = output_dir / f"{prefix}_metrics.json"

    fieldnames = [
        "stage",
        "title",
        "attempts",
        "solved_count",
        "failed_count",
        "success_rate",
        "tokens_min",
        "tokens_mean",
        "tokens_max",
        "oversolve_count",
        "strategies",
        "eval_time_sec",
    ]
    with csv_path.open("w", newline="", encoding="utf-8") as f:
        writer = csv.DictWriter(f, fieldnames=fieldnames)
        writer.writeheader()
        for m in metrics:
            row = m.to_dict()
            row["strategies"] = json.dumps(row["strategies"], sort_keys=True)
            writer.writerow(row)

    payload = {
        "config": {
            "shuffles": int(args.shuffles),
            "turns": int(args.turns),
            "seed": args.seed,
            "full_solver": args.full_solver,
            "progress": args.progress,
            "solver": config.to_dict(),
        },
        "walkthroughs_solved": int(walkthroughs_solved),
        "metrics": [m.to_dict() for m in metrics],
    }
    with json_path.open("w", encoding="utf-8") as f:
        json.dump(payload, f, indent=2)

    return csv_path, json_path


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="Batch evaluation of the guided stage solver over random shuffles")
    p.add_argument("--shuffles", type=int, default=100)
    p.add_argument("--turns", type=int, default=DEFAULT_CONFIG.scramble_turns)
    p.add_argument("--seed", type=int, default=None)
    p.add_argument("--config", default=None, help="YAML file with solver bounds")
    p.add_argument("--full-solver", default="on", choices=["on", "off"])
    p.add_argument("--output-dir", default="eval_reports")
    p.add_argument("--output-prefix", default="stage_eval")
    p.add_argument("--progress", default="on", choices=["on", "off"])
    return p


def run_evaluation(args: argparse.Namespace, full_solver: FullSolver | None = None) -> dict[str, Any]:
    if args.shuffles < 1:
        raise ValueError("--shuffles must be >= 1")
    if args.turns < 0:
        raise ValueError("--turns must be >= 0")

    config = load_config(args.config) if args.config else DEFAULT_CONFIG
    if full_solver is None and args.full_solver == "on":
        full_solver = KociembaSolver()
    reference = SolvedReference.get()
    rng = np.random.default_rng(args.seed)

    output_dir = Path(args.output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    print(
        "evaluation_init "
        f"shuffles={args.shuffles} turns={args.turns} seed={args.seed} "
        f"full_solver={args.full_solver} max_search_nodes={config.max_search_nodes}",
        flush=True,
    )

    n = int(args.shuffles)
    solved = np.zeros((N_STAGES, n), dtype=bool)
    tokens = np.zeros((N_STAGES, n), dtype=np.int64)
    oversolved = np.zeros((N_STAGES, n), dtype=bool)
    attempted = np.zeros((N_STAGES, n), dtype=bool)
    strategies = [Counter() for _ in range(N_STAGES)]
    stage_time = np.zeros((N_STAGES,), dtype=np.float64)
    walkthroughs_solved = 0

    shuffle_iter = range(n)
    if args.progress == "on":
        shuffle_iter = tqdm(shuffle_iter, desc="shuffles", unit="shuffle", mininterval=1.0, leave=False)

    for i in shuffle_iter:
        state = apply_tokens(reference, scramble(int(args.turns), rng=rng))
        for stage in range(N_STAGES):
            t0 = time.perf_counter()
            solution = solve_stage(stage, state, reference, full_solver, config)
            stage_time[stage] += time.perf_counter() - t0
            attempted[stage, i] = True
            if solution is None:
                break
            solved[stage, i] = True
            tokens[stage, i] = len(solution.tokens)
            # A final-stage sequence always completes the cube.
            oversolved[stage, i] = solution.notice is not None and stage < FINAL_STAGE
            strategies[stage][solution.strategy] += 1
            state = apply_tokens(state, solution.tokens)
        if state == reference:
            walkthroughs_solved += 1

    _print_header()
    metrics: list[StageMetrics] = []
    for stage in range(N_STAGES):
        mask = attempted[stage]
        m = _aggregate_metrics(
            stage,
            solved[stage][mask],
            tokens[stage][mask],
            oversolved[stage][mask],
            strategies[stage],
            float(stage_time[stage]),
        )
        metrics.append(m)
        _print_row(m)

    sr_path, tokens_path = _plot_metrics(metrics, output_dir, args.output_prefix)
    csv_path, json_path = _save_reports(metrics, output_dir, args.output_prefix, args, config, walkthroughs_solved)

    print(
        "evaluation_summary "
        f"walkthroughs_solved={walkthroughs_solved}/{n} "
        f"sr_plot={sr_path} tokens_plot={tokens_path} csv={csv_path} json={json_path}",
        flush=True,
    )

    return {
        "metrics": metrics,
        "walkthroughs_solved": walkthroughs_solved,
        "sr_plot": sr_path,
        "tokens_plot": tokens_path,
        "csv": csv_path,
        "json": json_path,
    }


def main() -> None:
    args = build_parser().parse_args()
    run_evaluation(args)


if __name__ == "__main__":
    main()
