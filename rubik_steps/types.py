"""Shared dataclasses and error types for the stage solvers."""

from __future__ import annotations

from dataclasses import dataclass, field


class SearchExhausted(RuntimeError):
    """A strategy reached its depth or guard bound without meeting the goal."""


@dataclass(frozen=True)
class StageInfo:
    title: str
    goal: str
    algorithm: str


@dataclass
class StageSolution:
    stage: int
    tokens: list[str]
    strategy: str
    notice: str | None = None


@dataclass
class StepOutcome:
    stage: int
    tokens: list[str] | None
    status: str
    notice: str | None = None
    attempts: list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.tokens is not None
