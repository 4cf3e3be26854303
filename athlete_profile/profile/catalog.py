"""
catalog.py — Fixed vocabularies for the profile wizard.

Defines:
  - COUNTRIES            (nationality ↔ dialling code ↔ phone length bounds)
  - AVAILABLE_SPORTS     (the only sport names a profile may select)
  - AVAILABLE_LANGUAGES
  - StatField + SPORT_STAT_SCHEMAS  (one declared stat variant per sport)

Lookups never raise: an unknown nationality resolves to the first country,
an unknown sport resolves to the default stats sport's schema.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from athlete_profile.config import settings


# ---------------------------------------------------------------------------
# Countries
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Country:
    name: str
    nationality: str
    code: str
    min_len: int
    max_len: int
    placeholder: str

    @property
    def length_label(self) -> str:
        """'10' when the bounds coincide, '10-11' otherwise."""
        if self.min_len == self.max_len:
            return str(self.min_len)
        return f"{self.min_len}-{self.max_len}"


COUNTRIES: tuple[Country, ...] = (
    Country("India",        "Indian",        "+91", 10, 10, "9876543210"),
    Country("USA",          "American",      "+1",  10, 10, "2025550123"),
    Country("UK",           "British",       "+44", 10, 11, "7911123456"),
    Country("Australia",    "Australian",    "+61",  9,  9, "412345678"),
    Country("Canada",       "Canadian",      "+1",  10, 10, "4165550199"),
    Country("Germany",      "German",        "+49", 10, 11, "15223456789"),
    Country("France",       "French",        "+33",  9,  9, "612345678"),
    Country("Japan",        "Japanese",      "+81", 10, 10, "9012345678"),
    Country("China",        "Chinese",       "+86", 11, 11, "13800138000"),
    Country("Brazil",       "Brazilian",     "+55", 10, 11, "11912345678"),
    Country("South Africa", "South African", "+27",  9,  9, "721234567"),
)


def country_for_nationality(nationality: Optional[str]) -> Country:
    """Selected country for a nationality; falls back to the first entry."""
    for country in COUNTRIES:
        if country.nationality == nationality:
            return country
    return COUNTRIES[0]


# ---------------------------------------------------------------------------
# Sports & languages
# ---------------------------------------------------------------------------

AVAILABLE_SPORTS: tuple[str, ...] = ("Badminton", "Cricket", "Football", "Tennis", "Squash")

AVAILABLE_LANGUAGES: tuple[str, ...] = (
    "English", "Hindi", "Spanish", "French", "German", "Mandarin", "Arabic",
    "Russian", "Portuguese", "Bengali", "Marathi", "Telugu", "Tamil", "Urdu",
)


# ---------------------------------------------------------------------------
# Per-sport stat schemas
# ---------------------------------------------------------------------------

class StatField(str, Enum):
    matches_played = "matchesPlayed"
    wins = "wins"
    loss = "loss"
    draws = "draws"
    aces = "aces"
    smash_winners = "smashWinners"
    runs_scored = "runsScored"
    wickets_taken = "wicketsTaken"
    goals_scored = "goalsScored"
    assists = "assists"


@dataclass(frozen=True)
class StatSpec:
    field: StatField
    label: str
    short_label: str
    tooltip: Optional[str] = None


@dataclass(frozen=True)
class StatSchema:
    """Declared stat variant for one sport: shared W/L/D block + a sport pair."""
    sport: str
    fields: tuple[StatSpec, ...]

    @property
    def field_names(self) -> frozenset[StatField]:
        return frozenset(entry.field for entry in self.fields)

    @property
    def specific(self) -> tuple[StatSpec, ...]:
        """Sport-specific fields (everything after the shared block)."""
        return self.fields[len(_SHARED):]


_SHARED: tuple[StatSpec, ...] = (
    StatSpec(StatField.matches_played, "Matches Played", "Matches"),
    StatSpec(StatField.wins,           "Wins",           "Wins"),
    StatSpec(StatField.loss,           "Loss",           "Loss"),
    StatSpec(StatField.draws,          "Draws/Tie",      "Draws"),
)

_RACQUET: tuple[StatSpec, ...] = (
    StatSpec(StatField.aces, "Aces", "Aces",
             "A legal serve that is not touched by the receiver."),
    StatSpec(StatField.smash_winners, "Smash Winners", "Smash W.",
             "Winning points scored directly from a smash."),
)

_CRICKET: tuple[StatSpec, ...] = (
    StatSpec(StatField.runs_scored, "Total Runs", "Runs",
             "Total runs scored in the season/career."),
    StatSpec(StatField.wickets_taken, "Wickets Taken", "Wickets",
             "Total wickets taken as a bowler."),
)

_FOOTBALL: tuple[StatSpec, ...] = (
    StatSpec(StatField.goals_scored, "Goals Scored", "Goals", "Total goals scored."),
    StatSpec(StatField.assists, "Assists", "Assists", "Passes that directly led to a goal."),
)

SPORT_STAT_SCHEMAS: dict[str, StatSchema] = {
    "Badminton": StatSchema("Badminton", _SHARED + _RACQUET),
    "Tennis":    StatSchema("Tennis",    _SHARED + _RACQUET),
    "Squash":    StatSchema("Squash",    _SHARED + _RACQUET),
    "Cricket":   StatSchema("Cricket",   _SHARED + _CRICKET),
    "Football":  StatSchema("Football",  _SHARED + _FOOTBALL),
}


def stat_schema_for(sport: Optional[str]) -> StatSchema:
    """Stat variant for a sport; unknown sports use the default stats sport."""
    if sport in SPORT_STAT_SCHEMAS:
        return SPORT_STAT_SCHEMAS[sport]
    return SPORT_STAT_SCHEMAS[settings.default_stats_sport]


__all__ = [
    "Country",
    "COUNTRIES",
    "country_for_nationality",
    "AVAILABLE_SPORTS",
    "AVAILABLE_LANGUAGES",
    "StatField",
    "StatSpec",
    "StatSchema",
    "SPORT_STAT_SCHEMAS",
    "stat_schema_for",
]
