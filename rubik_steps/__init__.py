"""Guided seven-stage beginner-method solver for the 3x3 cube."""

from .config import DEFAULT_CONFIG, SolverConfig, load_config
from .oversolve import check_oversolve
from .session import StepGuide
from .solver import solve_stage
from .stages import STAGES
from .types import SearchExhausted, StageSolution, StepOutcome

__all__ = [
    "DEFAULT_CONFIG",
    "SolverConfig",
    "load_config",
    "check_oversolve",
    "StepGuide",
    "solve_stage",
    "STAGES",
    "SearchExhausted",
    "StageSolution",
    "StepOutcome",
]
