"""Per-stage goal predicates against the captured solved reference."""

from __future__ import annotations

from .moves import STATE_SIZE, face_index, solved_state
from .state_codec import validate_state

FINAL_STAGE = 6
N_STAGES = FINAL_STAGE + 1

SIDE_FACES = ("F", "R", "B", "L")

# U edge facelet paired with the side facelet of the same edge.
CROSS_PAIRS = (
    (face_index("U", 1), face_index("B", 1)),
    (face_index("U", 3), face_index("L", 1)),
    (face_index("U", 5), face_index("R", 1)),
    (face_index("U", 7), face_index("F", 1)),
)

_U_FACE = tuple(face_index("U", i) for i in range(9))
_D_FACE = tuple(face_index("D", i) for i in range(9))


def _side_rows(rows: int) -> tuple[int, ...]:
    return tuple(face_index(face, i) for i in range(rows * 3) for face in SIDE_FACES)


_LAST_EDGE_SIDES = tuple(face_index(face, 7) for face in SIDE_FACES)

STAGE_FACELETS: tuple[tuple[int, ...], ...] = (
    tuple(u for u, _ in CROSS_PAIRS) + tuple(s for _, s in CROSS_PAIRS),
    _U_FACE + _side_rows(1),
    _U_FACE + _side_rows(2),
    tuple(face_index("D", i) for i in (1, 3, 5, 7)),
    _D_FACE,
    tuple(i for i in range(STATE_SIZE) if i not in _LAST_EDGE_SIDES),
    tuple(range(STATE_SIZE)),
)


def _check_stage(stage: int) -> None:
    if not isinstance(stage, int) or stage < 0 or stage > FINAL_STAGE:
        raise ValueError(f"Stage must be an integer in range 0..{FINAL_STAGE}")


def all_match(state: str, reference: str, indices) -> bool:
    return all(state[i] == reference[i] for i in indices)


def solved_through(stage: int, state: str, reference: str) -> bool:
    """True when the facelets owned by ``stage`` all match the reference."""
    _check_stage(stage)
    if stage == FINAL_STAGE:
        return state == reference
    return all_match(state, reference, STAGE_FACELETS[stage])


def solved_up_to(stage: int, state: str, reference: str) -> bool:
    _check_stage(stage)
    return all(solved_through(k, state, reference) for k in range(stage + 1))


def stage_goal_reached(stage: int, state: str, reference: str) -> bool:
    """Solved up to ``stage`` without also having finished the stage after it."""
    if not solved_up_to(stage, state, reference):
        return False
    if stage < FINAL_STAGE:
        return not solved_through(stage + 1, state, reference)
    return True


def cross_correct_count(state: str, reference: str) -> int:
    return sum(1 for u, s in CROSS_PAIRS if state[u] == reference[u] and state[s] == reference[s])


def first_unsolved_stage(state: str, reference: str) -> int | None:
    for stage in range(N_STAGES):
        if not solved_through(stage, state, reference):
            return stage
    return None


class SolvedReference:
    """Process-wide solved reference; written once, recaptured only on hard reset."""

    _value: str | None = None

    @classmethod
    def capture(cls, state: str | None = None) -> str:
        if cls._value is None:
            cls._value = validate_state(state if state is not None else solved_state())
        return cls._value

    @classmethod
    def recapture(cls, state: str | None = None) -> str:
        cls._value = None
        return cls.capture(state)

    @classmethod
    def get(cls) -> str:
        return cls.capture()
