"""Search bounds for the stage solvers, optionally loaded from YAML."""

from __future__ import annotations

from dataclasses import asdict, dataclass, fields
from pathlib import Path

import yaml


@dataclass(frozen=True)
class SolverConfig:
    # Maximum depth per stage for the macro and atomic searches; stage 0 also uses it for IDDFS.
    stage_max_depths: tuple[int, ...] = (8, 10, 10, 6, 7, 7, 7)
    corner_guard: int = 60
    corner_insert_repeats: int = 4
    middle_guard: int = 60
    cross_orient_guard: int = 6
    last_layer_guard: int = 8
    # Node budget for the breadth-first searches, on top of the depth bound.
    max_search_nodes: int = 200_000
    scramble_turns: int = 25

    def __post_init__(self):
        if len(self.stage_max_depths) != 7:
            raise ValueError("stage_max_depths must list one depth per stage (7 values)")
        if any(int(d) < 0 for d in self.stage_max_depths):
            raise ValueError("stage_max_depths must be non-negative")
        for name in (
            "corner_guard",
            "corner_insert_repeats",
            "middle_guard",
            "cross_orient_guard",
            "last_layer_guard",
            "max_search_nodes",
        ):
            if int(getattr(self, name)) < 1:
                raise ValueError(f"{name} must be >= 1")
        if int(self.scramble_turns) < 0:
            raise ValueError("scramble_turns must be >= 0")

    def max_depth(self, stage: int) -> int:
        return int(self.stage_max_depths[stage])

    def to_dict(self) -> dict:
        out = asdict(self)
        out["stage_max_depths"] = list(self.stage_max_depths)
        return out


DEFAULT_CONFIG = SolverConfig()


def load_config(path: str | Path) -> SolverConfig:
    """Load solver bounds from YAML; missing keys keep their defaults."""
    with open(path, encoding="utf-8") as f:
        raw = yaml.safe_load(f) or {}
    if not isinstance(raw, dict):
        raise ValueError(f"Config file {path} must contain a mapping")

    known = {f.name for f in fields(SolverConfig)}
    unknown = sorted(set(raw) - known)
    if unknown:
        raise ValueError(f"Unknown config keys: {', '.join(unknown)}")

    if "stage_max_depths" in raw:
        raw["stage_max_depths"] = tuple(int(v) for v in raw["stage_max_depths"])
    return SolverConfig(**raw)
