"""Guided walkthrough session: current stage, pending notice and status text."""

from __future__ import annotations

from datetime import datetime

from tqdm import tqdm

from rubik_facelets.algebra import ForeignSolverFailure, FullSolver, KociembaSolver
from rubik_facelets.goals import FINAL_STAGE, N_STAGES, SolvedReference, solved_through
from rubik_facelets.state_codec import StateValidationError

from .config import DEFAULT_CONFIG, SolverConfig
from .solver import solve_stage
from .stages import STAGES
from .types import StepOutcome

STATUS_READY = "Ready"
STATUS_SEARCHING = "Searching..."
STATUS_ALREADY_SOLVED_STEP = "Step already solved. Use Next to continue."
STATUS_NOT_ISOLATED = "Could not isolate this step. Try again."
STATUS_ALREADY_SOLVED = "Already solved"
STATUS_SOLVER_FAILED = "Solver failed"


class StepGuide:
    """Owns the walkthrough state a host drives step by step.

    ``request_step`` searches the current stage and remembers it as pending;
    the host plays the tokens back and reports the settled state through
    ``finish_step``, which advances to the next stage once the pending one
    holds and surfaces any oversolve notice.
    """

    def __init__(
        self,
        full_solver: FullSolver | None = None,
        config: SolverConfig = DEFAULT_CONFIG,
        reference: str | None = None,
        verbose: bool = True,
    ):
        self.full_solver = full_solver if full_solver is not None else KociembaSolver()
        self.config = config
        self.reference = SolvedReference.capture(reference)
        self.verbose = verbose
        self.progress_bar: tqdm | None = None
        self.current_stage = 0
        self.algorithm_overrides = [""] * N_STAGES
        self.status = STATUS_READY
        self._pending_advance: int | None = None
        self._pending_notice: str | None = None

    def _log(self, message: str) -> None:
        if not self.verbose:
            return
        ts = datetime.now().strftime("%H:%M:%S")
        text = f"[{ts}] {message}"
        if self.progress_bar is not None:
            self.progress_bar.write(text)
        else:
            print(text, flush=True)

    @property
    def pending(self) -> bool:
        return self._pending_advance is not None

    def algorithm_text(self, index: int | None = None) -> str:
        index = self.current_stage if index is None else index
        return self.algorithm_overrides[index] or STAGES[index].algorithm or "No fixed algorithm."

    def describe_step(self, index: int | None = None) -> dict:
        index = self.current_stage if index is None else index
        step = STAGES[index]
        return {
            "index": index + 1,
            "total": N_STAGES,
            "title": step.title,
            "goal": step.goal,
            "algorithm": self.algorithm_text(index),
        }

    def next_step(self) -> int:
        self.current_stage = (self.current_stage + 1) % N_STAGES
        return self.current_stage

    def prev_step(self) -> int:
        self.current_stage = (self.current_stage - 1 + N_STAGES) % N_STAGES
        return self.current_stage

    def request_step(self, state: str | None, stage: int | None = None) -> StepOutcome:
        """Search tokens for ``stage`` (default: the current one) from ``state``.

        A ``None`` state means the geometry could not be read cleanly; no
        solver runs in that case.
        """
        stage = self.current_stage if stage is None else stage
        self._pending_notice = None
        self._pending_advance = None
        attempts: list[str] = []

        if state is None:
            self.status = STATUS_NOT_ISOLATED
            self._log(f"step_indeterminate stage={stage}")
            return StepOutcome(stage=stage, tokens=None, status=self.status)

        def record(message: str) -> None:
            attempts.append(message)
            self._log(message)

        self.status = STATUS_SEARCHING
        try:
            solution = solve_stage(stage, state, self.reference, self.full_solver, self.config, log=record)
        except StateValidationError as exc:
            self._log(f"step_invalid_state stage={stage} reason={exc}")
            solution = None

        if solution is None:
            self.status = STATUS_NOT_ISOLATED
            return StepOutcome(stage=stage, tokens=None, status=self.status, attempts=attempts)
        if not solution.tokens:
            self.status = STATUS_ALREADY_SOLVED_STEP
            return StepOutcome(stage=stage, tokens=[], status=self.status, attempts=attempts)

        self._pending_notice = solution.notice
        self.algorithm_overrides[stage] = " ".join(solution.tokens)
        self._pending_advance = stage
        self.status = f"Queued {len(solution.tokens)}"
        return StepOutcome(
            stage=stage,
            tokens=list(solution.tokens),
            status=self.status,
            notice=solution.notice,
            attempts=attempts,
        )

    def finish_step(self, settled_state: str | None) -> int:
        """Accept the settled state after playback; returns the current stage."""
        stage = self._pending_advance
        notice = self._pending_notice
        self._pending_advance = None
        self._pending_notice = None
        if stage is None or settled_state is None:
            return self.current_stage

        if solved_through(stage, settled_state, self.reference) and stage < FINAL_STAGE:
            self.current_stage = stage + 1
            self._log(f"step_advanced from={stage} to={self.current_stage}")
        self.status = notice if notice else STATUS_READY
        return self.current_stage

    def solve_all(self, state: str | None) -> StepOutcome:
        """Whole-puzzle solve with the full solver."""
        self._pending_advance = None
        self._pending_notice = None
        if state is None:
            self.status = STATUS_SOLVER_FAILED
            return StepOutcome(stage=self.current_stage, tokens=None, status=self.status)

        try:
            tokens = self.full_solver.solve(state)
        except ForeignSolverFailure as exc:
            if state == self.reference:
                self.status = STATUS_ALREADY_SOLVED
                return StepOutcome(stage=self.current_stage, tokens=[], status=self.status)
            self._log(f"solve_failed reason={exc}")
            self.status = STATUS_SOLVER_FAILED
            return StepOutcome(stage=self.current_stage, tokens=None, status=self.status)

        self.status = f"Queued {len(tokens)}"
        self._log(f"solve_queued tokens={len(tokens)}")
        return StepOutcome(stage=self.current_stage, tokens=tokens, status=self.status)

    def reset(self, reference: str | None = None) -> None:
        """Hard reset: recapture the reference and start over at stage 0."""
        self.reference = SolvedReference.recapture(reference)
        self.current_stage = 0
        self.algorithm_overrides = [""] * N_STAGES
        self._pending_advance = None
        self._pending_notice = None
        self.status = STATUS_READY
