"""
gate.py — NavigationGate: the wizard's step state machine.

State:
  current_step       index into STEPS
  furthest_unlocked  highest index ever validly reached (never decreases)

Transitions:
  go_next()      only when the CURRENT step's predicate holds; clamps at the
                 final step (returns False there — submit is the way forward)
  go_previous()  always legal; clamps at 0; furthest_unlocked untouched
  jump_to(step)  only when step.position <= furthest_unlocked; unknown or
                 out-of-range targets are rejected, never raised
  reset()        back to (0, 0) — used when the store discards its state

The gate owns no profile data. Validity comes from the predicate it was built
with, evaluated fresh on every call.
"""
from __future__ import annotations

import logging
from typing import Callable, Optional, Union

from athlete_profile.navigation.schemas import FINAL_STEP, STEPS, GateSnapshot, Step

logger = logging.getLogger(__name__)

StepPredicate = Callable[[Step], bool]


def _position_of(step: Union[Step, int, str]) -> Optional[int]:
    if isinstance(step, Step):
        return step.position
    if isinstance(step, bool):
        return None
    if isinstance(step, int):
        return step if 0 <= step < len(STEPS) else None
    try:
        return Step(step).position
    except ValueError:
        return None


class NavigationGate:
    def __init__(self, is_step_valid: StepPredicate) -> None:
        self._is_step_valid = is_step_valid
        self.current_step = 0
        self.furthest_unlocked = 0

    @property
    def current(self) -> Step:
        return STEPS[self.current_step]

    @property
    def is_on_final_step(self) -> bool:
        return self.current is FINAL_STEP

    def go_next(self) -> bool:
        if self.is_on_final_step:
            return False
        if not self._is_step_valid(self.current):
            logger.info("Navigation blocked step=%s", self.current.value)
            return False

        self.current_step = min(self.current_step + 1, len(STEPS) - 1)
        self.furthest_unlocked = max(self.furthest_unlocked, self.current_step)
        logger.info(
            "Advanced to step=%s furthest_unlocked=%d",
            self.current.value,
            self.furthest_unlocked,
        )
        return True

    def go_previous(self) -> bool:
        if self.current_step == 0:
            return False
        self.current_step -= 1
        logger.info("Moved back to step=%s", self.current.value)
        return True

    def jump_to(self, step: Union[Step, int, str]) -> bool:
        """Step, step name or index. Unknown or locked targets are rejected."""
        target = _position_of(step)
        if target is None:
            logger.info("Jump rejected unknown target=%r", step)
            return False
        if target > self.furthest_unlocked:
            logger.info(
                "Jump rejected target=%s furthest_unlocked=%d",
                STEPS[target].value,
                self.furthest_unlocked,
            )
            return False
        self.current_step = target
        return True

    def reset(self) -> None:
        self.current_step = 0
        self.furthest_unlocked = 0

    def snapshot(self) -> GateSnapshot:
        return GateSnapshot(
            current_step=self.current_step,
            furthest_unlocked=self.furthest_unlocked,
            validity={step: self._is_step_valid(step) for step in STEPS},
        )


__all__ = ["NavigationGate", "StepPredicate"]
