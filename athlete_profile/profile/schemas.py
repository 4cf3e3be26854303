"""
schemas.py — ProfileState Pydantic v2 data contracts.

Defines:
  - HeightUnit, WeightUnit, TournamentLevel, TournamentResult, MediaType enums
  - MediaHandle      (opaque file reference: name, url, MIME type, optional reader)
  - MediaItem, ParticipationRecord, AchievementRecord  (collection records)
  - SportStats       (one sport's stat values, text pending validation)
  - Units, SocialLinks
  - ProfileState     (the single owned record every component reads)

Every text field the user types into stays a str — numeric-ness is checked
at read time by DerivedMetrics, never at write time, so half-typed input
("", "1.") never blocks editing.

Record identities are uuid4 strings assigned by default_factory; they are
stable once assigned and the editors never reuse a removed one.
"""
from __future__ import annotations

import uuid
from enum import Enum
from typing import Callable, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr

from athlete_profile.config import settings
from athlete_profile.metrics.schemas import BMIReading
from athlete_profile.profile.catalog import StatField, country_for_nationality


def new_id() -> str:
    return str(uuid.uuid4())


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------

class HeightUnit(str, Enum):
    cm = "cm"
    ft = "ft"


class WeightUnit(str, Enum):
    kg = "kg"
    lbs = "lbs"


class TournamentLevel(str, Enum):
    inter_college = "Inter-College"
    district = "District"
    state = "State"
    national = "National"
    international = "International"


class TournamentResult(str, Enum):
    winner = "Winner"
    runner_up = "Runner Up"
    semi_finalist = "Semi-Finalist"
    quarter_finalist = "Quarter-Finalist"
    participant = "Participant"


class MediaType(str, Enum):
    image = "image"
    video = "video"
    link = "link"
    certificate = "certificate"


# ---------------------------------------------------------------------------
# Media handle — opaque reference supplied by the file-picking collaborator
# ---------------------------------------------------------------------------

class MediaHandle(BaseModel):
    """
    Opaque reference to a file's bytes/location.

    The engine never assumes url is a browser object URL; resolve() hands the
    address back to whoever renders it and read() pulls the bytes through the
    reader the collaborator attached (if any).
    """
    model_config = ConfigDict(extra="forbid")

    name: str
    url: str
    mime_type: str = ""
    size: Optional[int] = None

    _reader: Optional[Callable[[], bytes]] = PrivateAttr(default=None)

    @classmethod
    def with_reader(
        cls,
        name: str,
        url: str,
        mime_type: str,
        reader: Callable[[], bytes],
        size: Optional[int] = None,
    ) -> "MediaHandle":
        handle = cls(name=name, url=url, mime_type=mime_type, size=size)
        handle._reader = reader
        return handle

    def resolve(self) -> str:
        return self.url

    def read(self) -> bytes:
        if self._reader is None:
            raise LookupError(f"Media handle '{self.name}' has no byte reader attached")
        return self._reader()

    @property
    def is_image(self) -> bool:
        return self.mime_type.startswith("image/")

    @property
    def is_pdf(self) -> bool:
        return self.mime_type == "application/pdf"


# ---------------------------------------------------------------------------
# Collection records
# ---------------------------------------------------------------------------

class MediaItem(BaseModel):
    model_config = ConfigDict(extra="forbid")

    id: str = Field(default_factory=new_id)
    type: MediaType
    url: str
    caption: Optional[str] = None
    thumbnail: Optional[str] = None
    handle: Optional[MediaHandle] = None


class ParticipationRecord(BaseModel):
    """
    One tournament entry. level/result/date stay optional so an open add
    sub-form can hold a partially filled draft; save() enforces them.
    """
    model_config = ConfigDict(extra="forbid")

    id: str = Field(default_factory=new_id)
    tournament_name: str = ""
    level: Optional[TournamentLevel] = None
    date: str = ""                   # ISO yyyy-mm-dd
    location: str = ""
    result: Optional[TournamentResult] = None
    story: str = ""
    media: List[MediaItem] = Field(default_factory=list)


class AchievementRecord(BaseModel):
    model_config = ConfigDict(extra="forbid")

    id: str = Field(default_factory=new_id)
    title: str = ""
    organization: str = ""
    date: str = ""                   # ISO yyyy-mm-dd
    description: str = ""
    certificate: Optional[MediaHandle] = None


# ---------------------------------------------------------------------------
# Sport statistics
# ---------------------------------------------------------------------------

class SportStats(BaseModel):
    """Raw text values for one sport, keyed by the sport's declared StatFields."""
    model_config = ConfigDict(extra="forbid")

    sport: str
    values: Dict[StatField, str] = Field(default_factory=dict)

    def get(self, field: StatField) -> str:
        return self.values.get(field, "")


# ---------------------------------------------------------------------------
# Small value groups
# ---------------------------------------------------------------------------

class Units(BaseModel):
    model_config = ConfigDict(extra="forbid", validate_assignment=True)

    height: HeightUnit = HeightUnit.cm
    weight: WeightUnit = WeightUnit.kg


class SocialLinks(BaseModel):
    model_config = ConfigDict(extra="forbid", validate_assignment=True)

    facebook: str = ""
    instagram: str = ""
    twitter: str = ""
    linkedin: str = ""


def _default_country_code() -> str:
    return country_for_nationality(settings.default_nationality).code


# ---------------------------------------------------------------------------
# ProfileState — the canonical form state
# ---------------------------------------------------------------------------

class ProfileState(BaseModel):
    """
    Every field the wizard collects, plus the BMI derived cache.

    validate_assignment=True so a programmatic write of the wrong type (an
    unknown enum value, agility 7) fails loudly at the setter boundary.
    """
    model_config = ConfigDict(extra="forbid", validate_assignment=True)

    profile_id: str = Field(default_factory=new_id)

    # --- Identity / contact ---
    full_name: str = ""
    dob: str = ""                    # ISO yyyy-mm-dd, as typed
    contact_no: str = ""
    nationality: str = Field(default_factory=lambda: settings.default_nationality)
    country_code: str = Field(default_factory=_default_country_code)
    email: str = ""
    gender: str = ""
    address: str = ""

    # --- Physical ---
    height: str = ""
    weight: str = ""
    units: Units = Field(default_factory=Units)
    dominant_hand: str = ""
    has_disability: bool = False
    disability_desc: str = ""
    wingspan: str = ""
    agility_rating: Optional[int] = Field(default=None, ge=1, le=5)

    # --- Sports ---
    sports: List[str] = Field(default_factory=list)
    stats_sport: Optional[str] = None          # sport currently shown in SPORTS STATS
    sport_stats: Dict[str, SportStats] = Field(default_factory=dict)

    # --- Bio ---
    bio: str = ""
    languages: List[str] = Field(default_factory=list)
    strengths: List[str] = Field(default_factory=list)
    weaknesses: List[str] = Field(default_factory=list)
    strength_description: str = ""
    weakness_description: str = ""
    social_links: SocialLinks = Field(default_factory=SocialLinks)

    # --- Collections ---
    participations: List[ParticipationRecord] = Field(default_factory=list)
    achievements: List[AchievementRecord] = Field(default_factory=list)
    media: List[MediaItem] = Field(default_factory=list)
    player_journey: str = ""

    # --- Singular files ---
    identity_document: Optional[MediaHandle] = None
    profile_picture: Optional[MediaHandle] = None

    # --- Derived cache (recomputed after every physical-field mutation) ---
    bmi: BMIReading = Field(default_factory=BMIReading)

    def viewed_sport(self) -> Optional[str]:
        """
        Sport whose stats the SPORTS STATS tab shows: the explicitly chosen
        one while it is still selected, else the first selected sport.
        Stats of deselected sports are never surfaced here.
        """
        if self.stats_sport in self.sports:
            return self.stats_sport
        return self.sports[0] if self.sports else None

    def find_participation(self, participation_id: str) -> Optional[ParticipationRecord]:
        for record in self.participations:
            if record.id == participation_id:
                return record
        return None


__all__ = [
    "new_id",
    "HeightUnit",
    "WeightUnit",
    "TournamentLevel",
    "TournamentResult",
    "MediaType",
    "MediaHandle",
    "MediaItem",
    "ParticipationRecord",
    "AchievementRecord",
    "SportStats",
    "Units",
    "SocialLinks",
    "ProfileState",
]
