"""
Derived metrics — BMI and per-sport win/loss/draw consistency.
Pure Python, deterministic. Same input → same output, no hidden state.

Text parsing mirrors what a browser number input hands over:
  - measurements parse as leading decimals ("72.5" → 72.5, "" → None)
  - stat counts parse as leading non-negative integers ("12" → 12, "6.5" → 6,
    "" / "abc" / "-3" → 0)
"""
from __future__ import annotations

import math
import re
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional

from athlete_profile.metrics.schemas import BMIReading, ConsistencyCheck, ConsistencyStatus, Tone
from athlete_profile.profile.catalog import StatField
from athlete_profile.profile.schemas import HeightUnit, SportStats, WeightUnit

# ===========================================================================
# CONVERSION CONSTANTS
# ===========================================================================

CM_PER_M = 100
M_PER_FT = 0.3048
KG_PER_LB = 0.453592

# ===========================================================================
# BMI BANDS — inclusive lower bound, exclusive upper bound
# ===========================================================================

BMI_UNDERWEIGHT_MAX = 18.5
BMI_NORMAL_MAX      = 25.0
BMI_OVERWEIGHT_MAX  = 30.0

BMI_BANDS: list[tuple[float, str, Tone]] = [
    (BMI_UNDERWEIGHT_MAX, "Underweight", Tone.alert),
    (BMI_NORMAL_MAX,      "Normal",      Tone.positive),
    (BMI_OVERWEIGHT_MAX,  "Overweight",  Tone.warning),
    (float("inf"),        "Obesity",     Tone.alert),
]

_DECIMAL_RE = re.compile(r"\s*([+-]?(?:[0-9]+\.?[0-9]*|\.[0-9]+))")
_COUNT_RE = re.compile(r"\s*[+]?([0-9]+)")


# ===========================================================================
# PARSING HELPERS
# ===========================================================================

def parse_measure(text: Optional[str]) -> Optional[float]:
    """Leading decimal of text, or None when there is none."""
    if not text:
        return None
    match = _DECIMAL_RE.match(text)
    return float(match.group(1)) if match else None


def parse_count(text: Optional[str]) -> int:
    """Leading non-negative integer of text; 0 when absent or unparseable."""
    if not text:
        return 0
    match = _COUNT_RE.match(text)
    return int(match.group(1)) if match else 0


def round_half_up(value: float, places: int = 0) -> float:
    """Round the exact binary value half-up (0.25 → 0.3), not half-even."""
    quantum = Decimal(1).scaleb(-places)
    return float(Decimal(value).quantize(quantum, rounding=ROUND_HALF_UP))


# ===========================================================================
# BMI
# ===========================================================================

def height_in_meters(height: float, unit: HeightUnit) -> float:
    return height / CM_PER_M if unit is HeightUnit.cm else height * M_PER_FT


def weight_in_kg(weight: float, unit: WeightUnit) -> float:
    return weight if unit is WeightUnit.kg else weight * KG_PER_LB


def classify_bmi(value: float) -> tuple[str, Tone]:
    for ceiling, status, tone in BMI_BANDS:
        if value < ceiling:
            return status, tone
    return BMI_BANDS[-1][1], BMI_BANDS[-1][2]


def compute_bmi(
    height: Optional[str],
    height_unit: HeightUnit,
    weight: Optional[str],
    weight_unit: WeightUnit,
) -> BMIReading:
    """
    BMI = kg / m², rounded half-up to one decimal, then banded.
    Either input absent or <= 0 → unset reading (no value, neutral tone).
    """
    h = parse_measure(height)
    w = parse_measure(weight)
    if h is None or w is None or h <= 0 or w <= 0:
        return BMIReading()

    meters = height_in_meters(h, HeightUnit(height_unit))
    kilograms = weight_in_kg(w, WeightUnit(weight_unit))
    raw = kilograms / (meters * meters)
    if not math.isfinite(raw):
        return BMIReading()
    value = round_half_up(raw, 1)
    status, tone = classify_bmi(value)
    return BMIReading(value=value, status=status, tone=tone)


# ===========================================================================
# WIN / LOSS / DRAW CONSISTENCY
# ===========================================================================

def check_consistency(stats: Optional[SportStats], sport: Optional[str] = None) -> ConsistencyCheck:
    """
    Compare wins + loss + draws against matchesPlayed for ONE sport.

    matches == 0 → unset (no message); total > matches → error (blocks the
    SPORTS STATS step); total < matches → warning; equal → success.
    """
    if stats is None:
        return ConsistencyCheck(sport=sport)

    matches = parse_count(stats.get(StatField.matches_played))
    wins = parse_count(stats.get(StatField.wins))
    loss = parse_count(stats.get(StatField.loss))
    draws = parse_count(stats.get(StatField.draws))
    total = wins + loss + draws
    counts = dict(sport=sport or stats.sport, matches=matches, wins=wins, loss=loss, draws=draws)

    if matches == 0:
        return ConsistencyCheck(**counts)

    if total > matches:
        return ConsistencyCheck(
            status=ConsistencyStatus.error,
            message=(
                f"Math Error: Wins({wins}) + Loss({loss}) + Draws({draws}) = {total}. "
                f"This exceeds Matches Played ({matches})."
            ),
            **counts,
        )
    if total < matches:
        return ConsistencyCheck(
            status=ConsistencyStatus.warning,
            message=(
                f"Note: The sum of results ({total}) is less than Matches Played ({matches}). "
                "Some games are unaccounted for."
            ),
            **counts,
        )
    return ConsistencyCheck(
        status=ConsistencyStatus.success,
        message=f"Perfect! Wins + Loss + Draws equals Matches Played ({matches}).",
        **counts,
    )


# ===========================================================================
# WIN RATE
# ===========================================================================

def win_rate_label(stats: Optional[SportStats]) -> str:
    """wins / matchesPlayed as a rounded percentage; "0%" when matches is 0."""
    if stats is None:
        return "0%"
    matches = parse_count(stats.get(StatField.matches_played))
    if matches == 0:
        return "0%"
    wins = parse_count(stats.get(StatField.wins))
    return f"{int(round_half_up(wins / matches * 100))}%"


__all__ = [
    "CM_PER_M",
    "M_PER_FT",
    "KG_PER_LB",
    "BMI_UNDERWEIGHT_MAX",
    "BMI_NORMAL_MAX",
    "BMI_OVERWEIGHT_MAX",
    "parse_measure",
    "parse_count",
    "round_half_up",
    "classify_bmi",
    "compute_bmi",
    "check_consistency",
    "win_rate_label",
]
