"""
Step validator — per-step validity predicates for the profile wizard.

Every predicate runs against the CURRENT ProfileState (never cached across
mutations) and collects every violation in a single pass, so the renderer
always shows the complete, up-to-date message set for a step.

Rules enforced:
  PERSONAL INFO  name (letters/spaces), DOB (present, valid, not future),
                 contact number length per nationality, gender, email format,
                 ≥1 sport, address, identity document, height > 0, weight > 0,
                 dominant hand
  SPORTS STATS   viewed sport's W+L+D must not exceed matches played
                 (under-count is advisory only)
  BIO            bio, ≥1 language, strength + weakness descriptions
                 (bio nearing the character cap is advisory only)
  PARTICIPATION  no add/edit sub-form left open
  ACHIEVEMENTS   no add/edit sub-form left open
  MEDIA          always valid — submit is the only forward action

Messages never contain field VALUES, only field names.
"""
from __future__ import annotations

import logging
import re
from datetime import date
from typing import AbstractSet, Optional

from athlete_profile.config import settings
from athlete_profile.metrics.derived import check_consistency, parse_measure
from athlete_profile.metrics.schemas import ConsistencyStatus
from athlete_profile.navigation.schemas import Severity, Step, StepReport, ValidationIssue
from athlete_profile.profile.catalog import country_for_nationality
from athlete_profile.profile.schemas import ProfileState

logger = logging.getLogger(__name__)

EMAIL_RE = re.compile(r"[^\s@]+@[^\s@]+\.[^\s@]+")
NAME_RE = re.compile(r"[A-Za-z ]+")
PHONE_RE = re.compile(r"[0-9]+")


def parse_iso_date(text: Optional[str]) -> Optional[date]:
    """yyyy-mm-dd → date; None for empty or malformed text."""
    if not text:
        return None
    try:
        return date.fromisoformat(text.strip())
    except ValueError:
        return None


def _blocking(field: str, issue: str) -> ValidationIssue:
    return ValidationIssue(field=field, issue=issue, severity=Severity.blocking)


def _advisory(field: str, issue: str) -> ValidationIssue:
    return ValidationIssue(field=field, issue=issue, severity=Severity.advisory)


# ---------------------------------------------------------------------------
# PERSONAL INFO
# ---------------------------------------------------------------------------

def validate_personal_info(state: ProfileState, today: date) -> list[ValidationIssue]:
    issues: list[ValidationIssue] = []

    name = state.full_name.strip()
    if not name:
        issues.append(_blocking("full_name", "Full Name is required"))
    elif not NAME_RE.fullmatch(name):
        issues.append(_blocking("full_name", "Full Name may contain only letters and spaces"))

    if not state.dob:
        issues.append(_blocking("dob", "Date of Birth is required"))
    else:
        dob = parse_iso_date(state.dob)
        if dob is None:
            issues.append(_blocking("dob", "Date of Birth is not a valid date"))
        elif dob > today:
            issues.append(_blocking("dob", "Date of Birth cannot be in the future"))

    country = country_for_nationality(state.nationality)
    if not state.contact_no:
        issues.append(_blocking("contact_no", "Contact Number is required"))
    elif not (
        PHONE_RE.fullmatch(state.contact_no)
        and country.min_len <= len(state.contact_no) <= country.max_len
    ):
        issues.append(_blocking(
            "contact_no",
            f"Phone number for {country.name} must be {country.length_label} digits.",
        ))

    if not state.gender:
        issues.append(_blocking("gender", "Gender is required"))

    if not state.email:
        issues.append(_blocking("email", "Email is required"))
    elif not EMAIL_RE.fullmatch(state.email):
        issues.append(_blocking("email", "Invalid Email Address"))

    if not state.sports:
        issues.append(_blocking("sports", "Select at least one Sport"))

    if not state.address.strip():
        issues.append(_blocking("address", "Address is required"))

    if state.identity_document is None:
        issues.append(_blocking("identity_document", "Identity Proof is required"))

    height = parse_measure(state.height)
    if height is None or height <= 0:
        issues.append(_blocking("height", "Valid Height is required"))
    weight = parse_measure(state.weight)
    if weight is None or weight <= 0:
        issues.append(_blocking("weight", "Valid Weight is required"))

    if not state.dominant_hand:
        issues.append(_blocking("dominant_hand", "Dominant Hand is required"))

    return issues


# ---------------------------------------------------------------------------
# SPORTS STATS
# ---------------------------------------------------------------------------

def validate_sports_stats(state: ProfileState) -> list[ValidationIssue]:
    """Only the viewed sport's own numbers count — never a global aggregate."""
    sport = state.viewed_sport()
    if sport is None:
        return []

    check = check_consistency(state.sport_stats.get(sport), sport)
    if check.status is ConsistencyStatus.error:
        return [_blocking(f"sport_stats.{sport}", check.message or "")]
    if check.status is ConsistencyStatus.warning:
        return [_advisory(f"sport_stats.{sport}", check.message or "")]
    return []


# ---------------------------------------------------------------------------
# BIO
# ---------------------------------------------------------------------------

def validate_bio(state: ProfileState) -> list[ValidationIssue]:
    issues: list[ValidationIssue] = []

    if not state.bio.strip():
        issues.append(_blocking("bio", "Bio is required."))
    elif len(state.bio) >= settings.bio_advisory_threshold:
        issues.append(_advisory(
            "bio",
            f"Bio is nearing the {settings.bio_character_limit} character limit "
            f"({len(state.bio)} / {settings.bio_character_limit}).",
        ))

    if not state.languages:
        issues.append(_blocking("languages", "Select at least one language."))
    if not state.strength_description.strip():
        issues.append(_blocking("strength_description", "Strength Description is required."))
    if not state.weakness_description.strip():
        issues.append(_blocking("weakness_description", "Weakness Description is required."))

    return issues


# ---------------------------------------------------------------------------
# PARTICIPATION / ACHIEVEMENTS
# ---------------------------------------------------------------------------

def validate_no_open_form(step: Step, open_forms: AbstractSet[Step]) -> list[ValidationIssue]:
    if step in open_forms:
        return [_blocking(
            step.name,
            "Save or cancel the entry you are editing before continuing.",
        )]
    return []


# ---------------------------------------------------------------------------
# Dispatcher
# ---------------------------------------------------------------------------

def validate_step(
    step: Step,
    state: ProfileState,
    *,
    today: date,
    open_forms: AbstractSet[Step] = frozenset(),
) -> StepReport:
    """
    Re-derive the full issue list for one step.

    Args:
        step: The wizard step to evaluate.
        state: Current ProfileState.
        today: Reference date for "not in the future" checks.
        open_forms: Steps whose add/edit sub-form is currently open.
    """
    if step is Step.personal_info:
        issues = validate_personal_info(state, today)
    elif step is Step.sports_stats:
        issues = validate_sports_stats(state)
    elif step is Step.bio:
        issues = validate_bio(state)
    elif step in (Step.participation, Step.achievements):
        issues = validate_no_open_form(step, open_forms)
    else:
        issues = []

    report = StepReport(step=step, issues=issues)
    if not report.is_valid:
        # Log only the step and count — messages may echo user choices
        logger.debug(
            "Step validation failed step=%s blocking=%d advisory=%d",
            step.value,
            len(report.blocking),
            len(report.advisories),
        )
    return report


__all__ = [
    "EMAIL_RE",
    "NAME_RE",
    "PHONE_RE",
    "parse_iso_date",
    "validate_personal_info",
    "validate_sports_stats",
    "validate_bio",
    "validate_no_open_form",
    "validate_step",
]
