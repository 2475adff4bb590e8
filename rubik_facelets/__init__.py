"""Facelet model for the 3x3 cube: codec, move algebra and stage goals."""

from .algebra import CubeAlgebra, ForeignSolverFailure, KociembaSolver, invert_token
from .goals import SolvedReference, solved_through, solved_up_to
from .state_codec import StateValidationError, extract, remap, remap_tokens

__all__ = [
    "CubeAlgebra",
    "ForeignSolverFailure",
    "KociembaSolver",
    "invert_token",
    "SolvedReference",
    "solved_through",
    "solved_up_to",
    "StateValidationError",
    "extract",
    "remap",
    "remap_tokens",
]
