"""Advisory check for sequences that finish more than the requested stage."""

from __future__ import annotations

from rubik_facelets.algebra import apply_tokens
from rubik_facelets.goals import FINAL_STAGE, solved_through

COMPLETES_CUBE_NOTICE = (
    "This sequence completes the cube. The remaining steps are already solved for this shuffle. "
    "Shuffle for a full walkthrough."
)
COMPLETES_NEXT_NOTICE = (
    "This sequence also completes the next step because the last layer is already aligned in this shuffle."
)


def check_oversolve(stage: int, state_before: str, tokens, reference: str) -> str | None:
    """Notice text when ``tokens`` also solve a later stage, else None."""
    tokens = list(tokens)
    if not tokens:
        return None
    after = apply_tokens(state_before, tokens)
    if solved_through(FINAL_STAGE, after, reference):
        return COMPLETES_CUBE_NOTICE
    if stage < FINAL_STAGE and solved_through(stage + 1, after, reference):
        return COMPLETES_NEXT_NOTICE
    return None
