"""
fields.py — Explicit field-to-attribute map for ProfileState setters.

Every scalar field a tab can write is a ProfileField member; its FieldRule
decides whether a raw input value is accepted at all (identity-sensitive
fields reject bad keystrokes outright) and how it is normalised before the
write. Type errors (agility 7, an unknown unit) still surface as
pydantic.ValidationError from ProfileState's validate_assignment.
"""
from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, List, Optional

from athlete_profile.config import settings
from athlete_profile.profile.catalog import country_for_nationality
from athlete_profile.profile.schemas import ProfileState, SocialLinks

logger = logging.getLogger(__name__)

NAME_INPUT_RE = re.compile(r"[A-Za-z ]*")
DIGITS_INPUT_RE = re.compile(r"[0-9]*")


class ProfileField(str, Enum):
    full_name = "full_name"
    dob = "dob"
    contact_no = "contact_no"
    nationality = "nationality"
    email = "email"
    gender = "gender"
    address = "address"
    height = "height"
    weight = "weight"
    dominant_hand = "dominant_hand"
    has_disability = "has_disability"
    disability_desc = "disability_desc"
    wingspan = "wingspan"
    agility_rating = "agility_rating"
    bio = "bio"
    strength_description = "strength_description"
    weakness_description = "weakness_description"


class TagList(str, Enum):
    strengths = "strengths"
    weaknesses = "weaknesses"


class Measure(str, Enum):
    height = "height"
    weight = "weight"


@dataclass(frozen=True)
class FieldRule:
    accepts: Optional[Callable[[Any], bool]] = None
    normalize: Optional[Callable[[Any], Any]] = None


def _matches(pattern: re.Pattern) -> Callable[[Any], bool]:
    return lambda value: isinstance(value, str) and bool(pattern.fullmatch(value))


def _truncate_bio(text: str) -> str:
    return text[: settings.bio_character_limit]


FIELD_RULES: dict[ProfileField, FieldRule] = {
    ProfileField.full_name: FieldRule(accepts=_matches(NAME_INPUT_RE)),
    ProfileField.contact_no: FieldRule(accepts=_matches(DIGITS_INPUT_RE)),
    ProfileField.bio: FieldRule(normalize=_truncate_bio),
}


def apply_field(state: ProfileState, field: ProfileField | str, value: Any) -> bool:
    """
    Write one scalar field. Returns False (state unchanged) when the input is
    rejected at the acceptance boundary.

    Raises:
        ValueError: unknown field name.
        pydantic.ValidationError: value of the wrong type or out of range.
    """
    field = ProfileField(field)
    rule = FIELD_RULES.get(field, FieldRule())

    if rule.accepts is not None and not rule.accepts(value):
        logger.debug("Rejected input field=%s", field.value)
        return False
    if rule.normalize is not None:
        value = rule.normalize(value)

    if field is ProfileField.nationality:
        set_nationality(state, value)
    else:
        setattr(state, field.value, value)
    return True


def set_nationality(state: ProfileState, nationality: str) -> None:
    """Nationality drives the dialling code and the phone length bounds."""
    state.nationality = nationality
    state.country_code = country_for_nationality(nationality).code


def set_unit(state: ProfileState, measure: Measure | str, unit: str) -> None:
    setattr(state.units, Measure(measure).value, unit)


def set_social_link(state: ProfileState, platform: str, url: str) -> None:
    if platform not in SocialLinks.model_fields:
        raise ValueError(f"Unknown social platform '{platform}'")
    setattr(state.social_links, platform, url)


# ---------------------------------------------------------------------------
# Set-like lists (sports, languages, strength/weakness tags)
# ---------------------------------------------------------------------------

def toggle_member(items: List[str], value: str) -> bool:
    """Add value if absent, remove it if present. Returns True if now present."""
    if value in items:
        items.remove(value)
        return False
    items.append(value)
    return True


def tag_list(state: ProfileState, list_name: TagList | str) -> List[str]:
    return getattr(state, TagList(list_name).value)


def add_tag(state: ProfileState, list_name: TagList | str, tag: str) -> bool:
    """Tag input commit (Enter / comma): trimmed, empty and duplicates ignored."""
    tag = tag.strip()
    tags = tag_list(state, list_name)
    if not tag or tag in tags:
        return False
    tags.append(tag)
    return True


def remove_tag(state: ProfileState, list_name: TagList | str, tag: str) -> bool:
    tags = tag_list(state, list_name)
    if tag not in tags:
        return False
    tags.remove(tag)
    return True


__all__ = [
    "NAME_INPUT_RE",
    "DIGITS_INPUT_RE",
    "ProfileField",
    "TagList",
    "Measure",
    "FieldRule",
    "FIELD_RULES",
    "apply_field",
    "set_nationality",
    "set_unit",
    "set_social_link",
    "toggle_member",
    "tag_list",
    "add_tag",
    "remove_tag",
]
