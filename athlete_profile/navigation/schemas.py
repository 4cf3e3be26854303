"""
schemas.py — NavigationGate data contracts.

Defines:
  - Step, STEPS        (the fixed, ordered wizard steps)
  - Severity, ValidationIssue  (single {field, issue} message attached to a step)
  - StepReport         (all issues for one step, collected in a single pass)
  - GateSnapshot       (current_step / furthest_unlocked / per-step validity)
  - SubmitResult       (outcome of the terminal submit action)
"""
from __future__ import annotations

from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class Step(str, Enum):
    personal_info = "PERSONAL INFO"
    sports_stats = "SPORTS STATS"
    bio = "BIO"
    participation = "PARTICIPATION"
    achievements = "ACHIEVEMENTS"
    media = "MEDIA"

    @property
    def position(self) -> int:
        return STEPS.index(self)


STEPS: tuple[Step, ...] = tuple(Step)
FINAL_STEP: Step = STEPS[-1]


class Severity(str, Enum):
    blocking = "blocking"      # prevents go_next / submit
    advisory = "advisory"      # shown, never blocks


class ValidationIssue(BaseModel):
    """Single field-level validation message."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    field: Optional[str] = None   # ProfileState attribute or sub-form name
    issue: str                     # Human-readable description of the problem
    severity: Severity = Severity.blocking


class StepReport(BaseModel):
    model_config = ConfigDict(extra="forbid")

    step: Step
    issues: List[ValidationIssue] = Field(default_factory=list)

    @property
    def blocking(self) -> List[ValidationIssue]:
        return [i for i in self.issues if i.severity is Severity.blocking]

    @property
    def advisories(self) -> List[ValidationIssue]:
        return [i for i in self.issues if i.severity is Severity.advisory]

    @property
    def is_valid(self) -> bool:
        return not self.blocking


class GateSnapshot(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    current_step: int
    furthest_unlocked: int
    validity: Dict[Step, bool]

    @property
    def current(self) -> Step:
        return STEPS[self.current_step]

    def can_jump_to(self, step: Step) -> bool:
        return step.position <= self.furthest_unlocked


class SubmitResult(BaseModel):
    model_config = ConfigDict(extra="forbid")

    accepted: bool
    profile_id: Optional[str] = None
    issues: List[ValidationIssue] = Field(default_factory=list)


__all__ = [
    "Step",
    "STEPS",
    "FINAL_STEP",
    "Severity",
    "ValidationIssue",
    "StepReport",
    "GateSnapshot",
    "SubmitResult",
]
