"""CLI entrypoint for the guided stage solver."""

from __future__ import annotations

import argparse

from tqdm import tqdm

from rubik_facelets.algebra import CubeAlgebra, scramble
from rubik_facelets.geometry import CubeModel
from rubik_facelets.goals import N_STAGES
from rubik_facelets.state_codec import extract, validate_state

from .config import DEFAULT_CONFIG, load_config
from .session import StepGuide


class _AlgebraHost:
    """Plays tokens on a bare facelet string (used with --state)."""

    def __init__(self, state: str):
        self.cube = CubeAlgebra(state)

    def play(self, tokens) -> None:
        self.cube.apply(tokens)

    def read(self) -> str | None:
        return self.cube.to_string()


class _GeometryHost:
    """Plays tokens on the cubie model and reads it back through the extractor."""

    def __init__(self):
        self.model = CubeModel()

    def play(self, tokens) -> None:
        self.model.play(tokens)

    def read(self) -> str | None:
        return extract(self.model.stickers())


def _load_state(state: str | None, state_file: str | None) -> str | None:
    if state and state_file:
        raise ValueError("Use only one of --state or --state-file")
    if state:
        return validate_state(state.strip())
    if state_file:
        with open(state_file, "r", encoding="utf-8") as f:
            return validate_state(f.read().strip())
    return None


def _make_host(args: argparse.Namespace) -> _AlgebraHost | _GeometryHost:
    initial = _load_state(args.state, args.state_file)
    if initial is not None:
        return _AlgebraHost(initial)
    host = _GeometryHost()
    tokens = scramble(args.turns, seed=args.seed)
    host.play(tokens)
    print(f"shuffle seed={args.seed} turns={args.turns} moves={' '.join(tokens)}", flush=True)
    return host


def _print_outcome(outcome, describe: dict) -> None:
    tokens = "-" if outcome.tokens is None else (" ".join(outcome.tokens) or "(none)")
    print(f"step {describe['index']}/{describe['total']} {describe['title']}: {tokens}", flush=True)
    print(f"  status: {outcome.status}", flush=True)
    if outcome.notice:
        print(f"  notice: {outcome.notice}", flush=True)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Guided beginner-method stage solver for the 3x3 cube")
    sub = parser.add_subparsers(dest="mode", required=True)

    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("--state", type=str, default=None, help="54-symbol facelet string (URFDLB order)")
    common.add_argument("--state-file", type=str, default=None)
    common.add_argument("--seed", type=int, default=None)
    common.add_argument("--turns", type=int, default=DEFAULT_CONFIG.scramble_turns)
    common.add_argument("--config", type=str, default=None, help="YAML file with solver bounds")
    common.add_argument("--quiet", action="store_true", help="Hide strategy log lines")

    sub.add_parser("walkthrough", parents=[common], help="Run stages 0..6 in order")
    stage = sub.add_parser("stage", parents=[common], help="Solve a single stage")
    stage.add_argument("--stage", type=int, required=True, choices=range(N_STAGES))

    return parser


def run_walkthrough(guide: StepGuide, host) -> bool:
    bar = tqdm(range(N_STAGES), desc="stages", unit="stage", leave=False)
    guide.progress_bar = bar
    try:
        for _ in bar:
            stage = guide.current_stage
            describe = guide.describe_step(stage)
            outcome = guide.request_step(host.read(), stage)
            if outcome.tokens is None:
                bar.write(f"step {describe['index']}/{describe['total']} {describe['title']}: {outcome.status}")
                return False
            host.play(outcome.tokens)
            guide.finish_step(host.read())
            bar.write(
                f"step {describe['index']}/{describe['total']} {describe['title']}: "
                f"{' '.join(outcome.tokens) or '(none)'}"
            )
            if outcome.notice:
                bar.write(f"  notice: {outcome.notice}")
            if not outcome.tokens and stage < N_STAGES - 1:
                guide.next_step()
    finally:
        guide.progress_bar = None
        bar.close()
    final = host.read()
    solved = final is not None and final == guide.reference
    print(f"walkthrough_done solved={solved}", flush=True)
    return solved


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    config = load_config(args.config) if args.config else DEFAULT_CONFIG
    guide = StepGuide(config=config, verbose=not args.quiet)
    host = _make_host(args)

    if args.mode == "walkthrough":
        return 0 if run_walkthrough(guide, host) else 1

    if args.mode == "stage":
        outcome = guide.request_step(host.read(), args.stage)
        _print_outcome(outcome, guide.describe_step(args.stage))
        return 0 if outcome.ok else 1

    parser.error(f"Unsupported mode: {args.mode}")
    return 2


if __name__ == "__main__":
    raise SystemExit(main())
