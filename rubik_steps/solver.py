"""Per-stage strategy chains."""

from __future__ import annotations

from functools import partial
from typing import Callable

from rubik_facelets.algebra import ForeignSolverFailure, FullSolver, apply_tokens
from rubik_facelets.goals import N_STAGES, solved_up_to
from rubik_facelets.state_codec import validate_state

from .config import DEFAULT_CONFIG, SolverConfig
from .greedy import solve_first_layer_corners, solve_middle_layer
from .last_layer import (
    solve_last_layer_corners,
    solve_last_layer_cross,
    solve_last_layer_edges,
    solve_last_layer_face,
)
from .oversolve import check_oversolve
from .search import find_cross_solution, find_solver_prefix, search_by_moves, search_with_macros
from .types import SearchExhausted, StageSolution

Strategy = Callable[[str, str], list]

_CASE_SOLVERS = {
    3: solve_last_layer_cross,
    4: solve_last_layer_face,
    5: solve_last_layer_corners,
    6: solve_last_layer_edges,
}


def _prefix(stage: int, full_solver: FullSolver | None, allow_next_solved: bool):
    def run(state: str, reference: str) -> list[str]:
        if full_solver is None:
            raise SearchExhausted("No full solver available")
        return find_solver_prefix(stage, state, reference, full_solver, allow_next_solved=allow_next_solved)

    return run


def strategy_chain(
    stage: int,
    full_solver: FullSolver | None = None,
    config: SolverConfig = DEFAULT_CONFIG,
) -> list[tuple[str, Strategy]]:
    """Ordered (name, strategy) pairs tried for ``stage``."""
    if stage == 0:
        return [
            ("iddfs", lambda s, r: find_cross_solution(s, r, config.max_depth(0))),
            ("prefix_overshoot", _prefix(0, full_solver, True)),
        ]
    if stage == 1:
        return [
            ("greedy", partial(solve_first_layer_corners, config=config)),
            ("moves", partial(search_by_moves, 1, config=config)),
            ("macros", partial(search_with_macros, 1, config=config)),
            ("prefix_overshoot", _prefix(1, full_solver, True)),
        ]
    if stage == 2:
        return [
            ("greedy", partial(solve_middle_layer, config=config)),
            ("prefix", _prefix(2, full_solver, False)),
            ("prefix_overshoot", _prefix(2, full_solver, True)),
        ]
    if stage in _CASE_SOLVERS:
        return [
            ("cases", partial(_CASE_SOLVERS[stage], config=config)),
            ("macros", partial(search_with_macros, stage, config=config)),
            ("prefix_overshoot", _prefix(stage, full_solver, True)),
        ]
    raise ValueError(f"Stage must be an integer in range 0..{N_STAGES - 1}")


def solve_stage(
    stage: int,
    state: str,
    reference: str,
    full_solver: FullSolver | None = None,
    config: SolverConfig = DEFAULT_CONFIG,
    log: Callable[[str], None] | None = None,
) -> StageSolution | None:
    """Run the stage's chain until one strategy reaches the goal.

    Returns None when every strategy exhausts. Every accepted sequence is
    replayed and checked against the goal before it is returned.
    """
    chain = strategy_chain(stage, full_solver, config)
    state = validate_state(state)

    if solved_up_to(stage, state, reference):
        return StageSolution(stage=stage, tokens=[], strategy="already_solved")

    for name, strategy in chain:
        try:
            tokens = list(strategy(state, reference))
        except SearchExhausted as exc:
            if log is not None:
                log(f"strategy_exhausted stage={stage} strategy={name} reason={exc}")
            continue
        except ForeignSolverFailure as exc:
            if log is not None:
                log(f"full_solver_failed stage={stage} strategy={name} reason={exc}")
            continue

        if not solved_up_to(stage, apply_tokens(state, tokens), reference):
            if log is not None:
                log(f"strategy_rejected stage={stage} strategy={name} tokens={len(tokens)}")
            continue

        notice = check_oversolve(stage, state, tokens, reference)
        if log is not None:
            log(f"stage_solved stage={stage} strategy={name} tokens={len(tokens)}")
        return StageSolution(stage=stage, tokens=tokens, strategy=name, notice=notice)

    return None
