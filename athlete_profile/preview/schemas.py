"""
schemas.py — PreviewProjection view models.

Defines:
  - PlayerCard        (identity, physical block, BMI, agility bars, photo)
  - StatLine, SportStatsView   (one selected sport's aggregate + consistency)
  - TimelineEntry     (participation, ascending by date, with result rank)
  - TrophyEntry       (achievement, descending by date)
  - ScoutReport       (bio, languages, tags, descriptions, social links)
  - MediaGroup, EventHighlight, MediaGallery
  - ProfilePreview    (one tab context's preview: title + its sections)
  - ProfileSummary    (every section at once)

All view models are display-ready: ages and win rates are already labelled,
empty optional text is already "N/A" where the card shows it.
"""
from __future__ import annotations

from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from athlete_profile.editors.media import PreviewKind
from athlete_profile.metrics.schemas import BMIReading, ConsistencyCheck
from athlete_profile.navigation.schemas import Step
from athlete_profile.profile.schemas import (
    MediaItem,
    MediaType,
    TournamentLevel,
    TournamentResult,
)


class PlayerCard(BaseModel):
    model_config = ConfigDict(extra="forbid")

    full_name: str
    nationality: str
    country_code: str
    gender: str
    age: Optional[int] = None        # None = unknown (absent / invalid / future DOB)
    age_label: str                   # "N/A" when age is unknown
    height: str
    height_unit: str
    weight: str
    weight_unit: str
    bmi: BMIReading
    agility_rating: Optional[int] = None
    agility_bars: List[bool]         # five bars, filled up to the rating
    dominant_hand: str
    wingspan: str
    contact_no: str
    email: str
    sports: List[str]
    profile_picture_url: Optional[str] = None
    identity_document_kind: PreviewKind = PreviewKind.none


class StatLine(BaseModel):
    model_config = ConfigDict(extra="forbid")

    label: str
    value: str


class SportStatsView(BaseModel):
    model_config = ConfigDict(extra="forbid")

    sport: str
    matches: int
    wins: int
    loss: int
    draws: int
    win_rate: str                    # "67%" — "0%" when no matches
    specific: List[StatLine]         # sport-specific pair, e.g. Aces / Smash W.
    consistency: ConsistencyCheck


class TimelineEntry(BaseModel):
    model_config = ConfigDict(extra="forbid")

    id: str
    tournament_name: str
    level: Optional[TournamentLevel] = None
    date: str
    location: str
    result: Optional[TournamentResult] = None
    result_rank: int                 # 1 = Winner … 5 = Participant / unknown
    story: str
    media_count: int


class TrophyEntry(BaseModel):
    model_config = ConfigDict(extra="forbid")

    id: str
    title: str
    organization: str
    date: str
    description: str
    certificate_url: Optional[str] = None
    certificate_kind: PreviewKind = PreviewKind.none


class ScoutReport(BaseModel):
    model_config = ConfigDict(extra="forbid")

    bio: str
    languages: List[str]
    strengths: List[str]
    weaknesses: List[str]
    strength_description: str
    weakness_description: str
    social_links: Dict[str, str]     # only platforms with a link


class MediaGroup(BaseModel):
    model_config = ConfigDict(extra="forbid")

    type: MediaType
    count: int
    items: List[MediaItem] = Field(default_factory=list)


class EventHighlight(BaseModel):
    model_config = ConfigDict(extra="forbid")

    id: str
    tournament_name: str
    date: str
    story: str
    media: List[MediaItem] = Field(default_factory=list)


class MediaGallery(BaseModel):
    model_config = ConfigDict(extra="forbid")

    player_journey: str
    groups: List[MediaGroup]
    total: int
    highlights: List[EventHighlight]


class ProfilePreview(BaseModel):
    """Preview for one tab context. Sections the context does not show are None."""
    model_config = ConfigDict(extra="forbid")

    context: Step
    title: str
    card: Optional[PlayerCard] = None
    sports_stats: Optional[List[SportStatsView]] = None
    timeline: Optional[List[TimelineEntry]] = None
    trophies: Optional[List[TrophyEntry]] = None
    scout_report: Optional[ScoutReport] = None
    media: Optional[MediaGallery] = None


class ProfileSummary(BaseModel):
    model_config = ConfigDict(extra="forbid")

    profile_id: str
    card: PlayerCard
    sports_stats: List[SportStatsView]
    timeline: List[TimelineEntry]
    trophies: List[TrophyEntry]
    scout_report: ScoutReport
    media: MediaGallery


__all__ = [
    "PlayerCard",
    "StatLine",
    "SportStatsView",
    "TimelineEntry",
    "TrophyEntry",
    "ScoutReport",
    "MediaGroup",
    "EventHighlight",
    "MediaGallery",
    "ProfilePreview",
    "ProfileSummary",
]
