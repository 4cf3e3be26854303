"""
schemas.py — DerivedMetrics output contracts.

Defines:
  - Tone             (semantic display colour, renderer maps to CSS/theme)
  - BMIReading       (value / status / tone — unset when inputs are missing)
  - ConsistencyStatus, ConsistencyCheck  (per-sport W/L/D vs matches verdict)
"""
from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict


class Tone(str, Enum):
    neutral = "neutral"
    positive = "positive"
    warning = "warning"
    alert = "alert"


class BMIReading(BaseModel):
    """
    BMI derived from height/weight/units.

    value is None when either input is absent or <= 0; status is then ""
    and tone is neutral.
    """
    model_config = ConfigDict(extra="forbid", frozen=True)

    value: Optional[float] = None
    status: str = ""
    tone: Tone = Tone.neutral

    @property
    def is_set(self) -> bool:
        return self.value is not None


class ConsistencyStatus(str, Enum):
    error = "error"        # W+L+D > matches — blocks SPORTS STATS
    warning = "warning"    # W+L+D < matches — informational only
    success = "success"    # W+L+D == matches


class ConsistencyCheck(BaseModel):
    """Win/loss/draw consistency for one sport. status None ⇒ matches == 0."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    sport: Optional[str] = None
    status: Optional[ConsistencyStatus] = None
    message: Optional[str] = None
    matches: int = 0
    wins: int = 0
    loss: int = 0
    draws: int = 0

    @property
    def total(self) -> int:
        return self.wins + self.loss + self.draws

    @property
    def blocks_navigation(self) -> bool:
        return self.status is ConsistencyStatus.error


__all__ = ["Tone", "BMIReading", "ConsistencyStatus", "ConsistencyCheck"]
