"""
projection.py — PreviewProjection: read-only, display-ready views of ProfileState.

Pure read path. Nothing here assigns to the state or its records; every list
is sorted as a copy.

Rules:
  - age: full calendar years as of `today`; DOB == today → 0; absent, invalid
    or future DOB → None with the "N/A" label (never raises)
  - participations: ascending by date; achievements: descending by date;
    records without a valid date sort last in both orders (stable otherwise)
  - win rate: wins / matchesPlayed as a rounded percentage, "0%" at 0 matches
  - only SELECTED sports are projected; stats of deselected sports stay hidden
"""
from __future__ import annotations

import logging
from datetime import date
from typing import Optional

from athlete_profile.editors.media import preview_kind
from athlete_profile.metrics.derived import check_consistency, parse_count, win_rate_label
from athlete_profile.navigation.schemas import Step
from athlete_profile.navigation.validator import parse_iso_date
from athlete_profile.preview.schemas import (
    EventHighlight,
    MediaGallery,
    MediaGroup,
    PlayerCard,
    ProfilePreview,
    ProfileSummary,
    ScoutReport,
    SportStatsView,
    StatLine,
    TimelineEntry,
    TrophyEntry,
)
from athlete_profile.profile.catalog import StatField, stat_schema_for
from athlete_profile.profile.schemas import (
    AchievementRecord,
    MediaType,
    ParticipationRecord,
    ProfileState,
    TournamentResult,
)

logger = logging.getLogger(__name__)

UNKNOWN = "N/A"
AGILITY_SCALE = 5

PREVIEW_TITLES: dict[Step, str] = {
    Step.participation: "Career Timeline",
    Step.achievements: "Trophy Cabinet",
    Step.bio: "Scout Report",
}
DEFAULT_PREVIEW_TITLE = "Player Card"

RESULT_RANKS: dict[TournamentResult, int] = {
    TournamentResult.winner: 1,
    TournamentResult.runner_up: 2,
    TournamentResult.semi_finalist: 3,
    TournamentResult.quarter_finalist: 4,
    TournamentResult.participant: 5,
}


def preview_title(context: Step) -> str:
    return PREVIEW_TITLES.get(context, DEFAULT_PREVIEW_TITLE)


# ---------------------------------------------------------------------------
# Age
# ---------------------------------------------------------------------------

def compute_age(dob: Optional[str], today: date) -> Optional[int]:
    """Whole years between dob and today; None when unknown."""
    born = parse_iso_date(dob)
    if born is None or born > today:
        return None
    before_birthday = (today.month, today.day) < (born.month, born.day)
    return today.year - born.year - int(before_birthday)


def age_label(age: Optional[int]) -> str:
    return UNKNOWN if age is None else str(age)


# ---------------------------------------------------------------------------
# Sections
# ---------------------------------------------------------------------------

def build_player_card(state: ProfileState, today: date) -> PlayerCard:
    age = compute_age(state.dob, today)
    rating = state.agility_rating or 0
    return PlayerCard(
        full_name=state.full_name,
        nationality=state.nationality,
        country_code=state.country_code,
        gender=state.gender or UNKNOWN,
        age=age,
        age_label=age_label(age),
        height=state.height,
        height_unit=state.units.height.value,
        weight=state.weight,
        weight_unit=state.units.weight.value,
        bmi=state.bmi,
        agility_rating=state.agility_rating,
        agility_bars=[bar <= rating for bar in range(1, AGILITY_SCALE + 1)],
        dominant_hand=state.dominant_hand,
        wingspan=state.wingspan,
        contact_no=state.contact_no,
        email=state.email,
        sports=list(state.sports),
        profile_picture_url=state.profile_picture.resolve() if state.profile_picture else None,
        identity_document_kind=preview_kind(state.identity_document),
    )


def build_sport_stats(state: ProfileState, sport: str) -> SportStatsView:
    stats = state.sport_stats.get(sport)
    consistency = check_consistency(stats, sport)
    specific = [
        StatLine(label=entry.short_label, value=(stats.get(entry.field) if stats else "") or "0")
        for entry in stat_schema_for(sport).specific
    ]
    return SportStatsView(
        sport=sport,
        matches=parse_count(stats.get(StatField.matches_played)) if stats else 0,
        wins=consistency.wins,
        loss=consistency.loss,
        draws=consistency.draws,
        win_rate=win_rate_label(stats),
        specific=specific,
        consistency=consistency,
    )


def build_all_sport_stats(state: ProfileState) -> list[SportStatsView]:
    return [build_sport_stats(state, sport) for sport in state.sports]


def _by_date(records, newest_first: bool):
    dated = [(parse_iso_date(r.date), r) for r in records]
    known = sorted((p for p in dated if p[0] is not None), key=lambda p: p[0], reverse=newest_first)
    unknown = [p for p in dated if p[0] is None]
    return [r for _, r in known + unknown]


def build_timeline(participations: list[ParticipationRecord]) -> list[TimelineEntry]:
    return [
        TimelineEntry(
            id=p.id,
            tournament_name=p.tournament_name,
            level=p.level,
            date=p.date,
            location=p.location or UNKNOWN,
            result=p.result,
            result_rank=RESULT_RANKS.get(p.result, len(RESULT_RANKS)),
            story=p.story,
            media_count=len(p.media),
        )
        for p in _by_date(participations, newest_first=False)
    ]


def build_trophies(achievements: list[AchievementRecord]) -> list[TrophyEntry]:
    return [
        TrophyEntry(
            id=a.id,
            title=a.title,
            organization=a.organization,
            date=a.date,
            description=a.description,
            certificate_url=a.certificate.resolve() if a.certificate else None,
            certificate_kind=preview_kind(a.certificate),
        )
        for a in _by_date(achievements, newest_first=True)
    ]


def build_scout_report(state: ProfileState) -> ScoutReport:
    links = state.social_links.model_dump()
    return ScoutReport(
        bio=state.bio,
        languages=list(state.languages),
        strengths=list(state.strengths),
        weaknesses=list(state.weaknesses),
        strength_description=state.strength_description,
        weakness_description=state.weakness_description,
        social_links={platform: url for platform, url in links.items() if url},
    )


def build_media_gallery(state: ProfileState) -> MediaGallery:
    groups = []
    for media_type in MediaType:
        items = [m.model_copy(deep=True) for m in state.media if m.type is media_type]
        groups.append(MediaGroup(type=media_type, count=len(items), items=items))

    highlights = [
        EventHighlight(
            id=p.id,
            tournament_name=p.tournament_name,
            date=p.date,
            story=p.story,
            media=[m.model_copy(deep=True) for m in p.media],
        )
        for p in _by_date(state.participations, newest_first=False)
        if p.story.strip() or p.media
    ]
    return MediaGallery(
        player_journey=state.player_journey,
        groups=groups,
        total=len(state.media),
        highlights=highlights,
    )


# ---------------------------------------------------------------------------
# Entry points
# ---------------------------------------------------------------------------

def build_preview(state: ProfileState, context: Step, today: date) -> ProfilePreview:
    """
    Preview for the tab the user is on.

    Args:
        state: Current ProfileState (read only).
        context: The tab whose preview layout to produce.
        today: Reference date for the age calculation.
    """
    context = Step(context)
    preview = ProfilePreview(context=context, title=preview_title(context))

    if context is Step.participation:
        preview.timeline = build_timeline(state.participations)
    elif context is Step.achievements:
        preview.trophies = build_trophies(state.achievements)
    elif context is Step.bio:
        preview.scout_report = build_scout_report(state)
    elif context is Step.media:
        preview.card = build_player_card(state, today)
        preview.media = build_media_gallery(state)
    else:
        preview.card = build_player_card(state, today)
        preview.sports_stats = build_all_sport_stats(state)

    logger.debug("Built preview context=%s profile_id=%s", context.value, state.profile_id)
    return preview


def build_summary(state: ProfileState, today: date) -> ProfileSummary:
    """Every preview section at once — the full profile summary page."""
    return ProfileSummary(
        profile_id=state.profile_id,
        card=build_player_card(state, today),
        sports_stats=build_all_sport_stats(state),
        timeline=build_timeline(state.participations),
        trophies=build_trophies(state.achievements),
        scout_report=build_scout_report(state),
        media=build_media_gallery(state),
    )


__all__ = [
    "UNKNOWN",
    "PREVIEW_TITLES",
    "DEFAULT_PREVIEW_TITLE",
    "RESULT_RANKS",
    "preview_title",
    "compute_age",
    "age_label",
    "build_player_card",
    "build_sport_stats",
    "build_all_sport_stats",
    "build_timeline",
    "build_trophies",
    "build_scout_report",
    "build_media_gallery",
    "build_preview",
    "build_summary",
]
