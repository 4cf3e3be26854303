"""
ProfileStore integration tests — setters, derived recompute, gating and submit.

Groups:
  1. Field setters and acceptance rules
  2. Sports selection and per-sport stats
  3. Singular files
  4. End-to-end wizard scenarios driven by the demo profiles
"""
from __future__ import annotations

import pydantic
import pytest

from athlete_profile.config import settings
from athlete_profile.editors.media import UploadRejected
from athlete_profile.metrics.schemas import ConsistencyStatus
from athlete_profile.navigation.schemas import Step
from athlete_profile.profile.fields import ProfileField
from athlete_profile.profile.schemas import MediaHandle, ProfileState, TournamentLevel, TournamentResult
from athlete_profile.store import ProfileStore
from athlete_profile.tests.demo_profiles import (
    DEMO_PROFILES,
    PDF_BYTES,
    PNG_BYTES,
    fill_profile,
    fixed_clock,
)


@pytest.fixture
def store() -> ProfileStore:
    return ProfileStore(clock=fixed_clock)


# ===========================================================================
# TEST GROUP 1: Field setters
# ===========================================================================

def test_name_rejects_non_letters(store: ProfileStore) -> None:
    assert store.set_field(ProfileField.full_name, "Aarav")
    assert store.set_field(ProfileField.full_name, "Aarav7") is False
    assert store.state.full_name == "Aarav"


def test_phone_rejects_non_digits(store: ProfileStore) -> None:
    assert store.set_field("contact_no", "98765")
    assert store.set_field("contact_no", "98765-") is False
    assert store.state.contact_no == "98765"


@pytest.mark.parametrize(
    "field, value",
    [
        ("contact_no", "987654321\n"),    # 9 digits + newline = 10 chars
        ("contact_no", "٩٨٧٦٥٤٣٢١٠"),     # Arabic-Indic digits
        ("full_name", "Aarav\n"),
        ("full_name", "Aarav\tSharma"),
    ],
)
def test_keystroke_rules_accept_ascii_only(store: ProfileStore, field: str, value: str) -> None:
    assert store.set_field(field, value) is False
    assert getattr(store.state, field) == ""


def test_nine_digit_phone_never_passes_personal_info(store: ProfileStore) -> None:
    fill_profile(store, "aarav")
    store.state.contact_no = "987654321\n"
    assert "contact_no" in {i.field for i in store.step_report(Step.personal_info).blocking}


def test_unknown_field_raises(store: ProfileStore) -> None:
    with pytest.raises(ValueError):
        store.set_field("shoe_size", "9")


def test_agility_out_of_range_raises(store: ProfileStore) -> None:
    assert store.set_field("agility_rating", 5)
    with pytest.raises(pydantic.ValidationError):
        store.set_field("agility_rating", 7)
    assert store.state.agility_rating == 5


def test_nationality_sets_dialling_code(store: ProfileStore) -> None:
    assert store.state.country_code == "+91"
    store.set_field("nationality", "Japanese")
    assert store.state.country_code == "+81"


def test_bio_truncated_at_limit(store: ProfileStore) -> None:
    store.set_field("bio", "y" * (settings.bio_character_limit + 40))
    assert len(store.state.bio) == settings.bio_character_limit


def test_bmi_recomputed_after_each_physical_edit(store: ProfileStore) -> None:
    assert not store.bmi.is_set
    store.set_field("height", "180")
    assert not store.bmi.is_set
    store.set_field("weight", "75")
    assert store.bmi.value == pytest.approx(23.1)
    assert store.bmi.status == "Normal"

    store.set_unit("weight", "lbs")       # 75 lbs = 34.02 kg → 10.5
    assert store.bmi.value == pytest.approx(10.5)
    assert store.bmi.status == "Underweight"

    store.set_field("height", "")
    assert not store.bmi.is_set


def test_invalid_unit_raises(store: ProfileStore) -> None:
    with pytest.raises(pydantic.ValidationError):
        store.set_unit("height", "inches")


def test_social_links(store: ProfileStore) -> None:
    store.set_social_link("linkedin", "https://linkedin.com/in/aarav")
    assert store.state.social_links.linkedin == "https://linkedin.com/in/aarav"
    with pytest.raises(ValueError):
        store.set_social_link("myspace", "https://myspace.com/aarav")


def test_tags(store: ProfileStore) -> None:
    assert store.add_tag("strengths", "  Smash ")
    assert store.add_tag("strengths", "Smash") is False
    assert store.add_tag("strengths", "   ") is False
    assert store.toggle_tag("strengths", "Defence")
    assert store.state.strengths == ["Smash", "Defence"]
    assert store.toggle_tag("strengths", "Defence") is False
    assert store.remove_tag("strengths", "Smash")
    assert store.state.strengths == []


def test_toggle_language(store: ProfileStore) -> None:
    assert store.toggle_language("Tamil")
    assert store.toggle_language("Klingon") is False
    assert store.state.languages == ["Tamil"]
    assert store.toggle_language("Tamil") is False
    assert store.state.languages == []


# ===========================================================================
# TEST GROUP 2: Sports and stats
# ===========================================================================

def test_stat_write_creates_nested_entry_without_numeric_check(store: ProfileStore) -> None:
    store.toggle_sport("Cricket")
    assert "Cricket" not in store.state.sport_stats

    assert store.set_stat_field("Cricket", "runsScored", "")
    assert store.set_stat_field("Cricket", "runsScored", "4a")
    assert store.state.sport_stats["Cricket"].values == {"runsScored": "4a"}


def test_stat_write_rejected_for_unselected_sport_or_foreign_field(store: ProfileStore) -> None:
    assert store.set_stat_field("Cricket", "wins", "1") is False
    store.toggle_sport("Cricket")
    assert store.set_stat_field("Cricket", "aces", "3") is False
    assert store.set_stat_field("Cricket", "homeRuns", "3") is False
    assert store.state.sport_stats == {}


def test_unknown_sport_rejected(store: ProfileStore) -> None:
    assert store.toggle_sport("Quidditch") is False
    assert store.state.sports == []


def test_deselected_sport_stats_are_orphaned_not_deleted(store: ProfileStore) -> None:
    store.toggle_sport("Cricket")
    store.toggle_sport("Football")
    store.set_stat_field("Cricket", "matchesPlayed", "4")
    store.set_stat_field("Football", "matchesPlayed", "6")

    assert store.toggle_sport("Football") is False

    assert "Football" in store.state.sport_stats
    assert store.state.sport_stats["Football"].get("matchesPlayed") == "6"
    assert store.select_stats_sport("Football") is False
    assert [v.sport for v in store.preview(Step.sports_stats).sports_stats] == ["Cricket"]

    store.toggle_sport("Football")
    assert store.state.sport_stats["Football"].get("matchesPlayed") == "6"


def test_consistency_follows_viewed_sport(store: ProfileStore) -> None:
    store.toggle_sport("Cricket")
    store.toggle_sport("Football")
    store.set_stat_field("Cricket", "matchesPlayed", "5")
    store.set_stat_field("Cricket", "wins", "9")
    store.set_stat_field("Football", "matchesPlayed", "5")
    store.set_stat_field("Football", "wins", "5")

    assert store.consistency().status is ConsistencyStatus.error          # first selected
    assert store.select_stats_sport("Football")
    assert store.consistency().status is ConsistencyStatus.success
    assert store.is_step_valid(Step.sports_stats)


# ===========================================================================
# TEST GROUP 3: Singular files
# ===========================================================================

def test_profile_picture_is_singular(store: ProfileStore) -> None:
    first = MediaHandle(name="a.jpg", url="memory://a", mime_type="image/jpeg")
    second = MediaHandle(name="b.jpg", url="memory://b", mime_type="image/jpeg")

    store.set_profile_picture(first)
    store.set_profile_picture(second)
    assert store.state.profile_picture is second

    store.clear_profile_picture()
    assert store.state.profile_picture is None


def test_identity_document_replaced(store: ProfileStore) -> None:
    store.set_identity_document(MediaHandle(name="a.pdf", url="memory://a", mime_type="application/pdf"))
    store.set_identity_document(MediaHandle(name="b.png", url="memory://b", mime_type="image/png"))
    assert store.state.identity_document.name == "b.png"


# ===========================================================================
# TEST GROUP 4: End-to-end scenarios
# ===========================================================================

@pytest.mark.parametrize("name", list(DEMO_PROFILES))
def test_demo_profile_derived_values(store: ProfileStore, name: str) -> None:
    fill_profile(store, name)
    expected = DEMO_PROFILES[name]["expected"]

    assert store.bmi.value == pytest.approx(expected["bmi"])
    assert store.bmi.status == expected["bmi_status"]
    summary = store.summary()
    assert summary.card.age == expected["age"]
    assert summary.sports_stats[0].win_rate == expected["win_rate"]
    assert all(store.validity().values())


def test_wizard_gating_end_to_end(store: ProfileStore) -> None:
    assert store.go_next() is False                 # empty personal info

    fill_profile(store, "aarav")
    store.set_stat_field("Badminton", "draws", "2")  # 6 + 3 + 2 > 10
    assert store.go_next()
    assert store.gate_snapshot().furthest_unlocked == 1

    assert store.go_next() is False
    assert store.gate.current_step == 1
    assert not store.step_report(Step.sports_stats).is_valid

    store.set_stat_field("Badminton", "draws", "1")
    assert store.go_next()
    assert store.gate.current is Step.bio


def test_open_participation_form_blocks_leaving_tab(store: ProfileStore) -> None:
    fill_profile(store, "aarav")
    for _ in range(3):
        assert store.go_next()
    assert store.gate.current is Step.participation

    store.participation_form.begin_add()
    assert store.go_next() is False

    store.participation_form.stage(
        tournament_name="State Open",
        level=TournamentLevel.state,
        date="2024-09-01",
        result=TournamentResult.winner,
    )
    assert store.participation_form.save() == []
    assert store.go_next()
    assert len(store.state.participations) == 1


def test_submit_only_from_final_step(store: ProfileStore) -> None:
    fill_profile(store, "aarav")
    result = store.submit()
    assert result.accepted is False
    assert store.state.full_name == "Aarav Sharma"


def test_submit_requires_every_step_valid(store: ProfileStore) -> None:
    fill_profile(store, "aarav")
    for _ in range(5):
        assert store.go_next()
    store.jump_to(Step.personal_info)
    store.set_field("email", "not-an-email")
    store.jump_to(Step.media)

    result = store.submit()

    assert result.accepted is False
    assert [i.field for i in result.issues] == ["email"]


def test_submit_emits_copy_and_discards_state(store: ProfileStore) -> None:
    received: list[ProfileState] = []
    store.on_complete(received.append)
    fill_profile(store, "meera")
    store.media.add_link("https://drive.google.com/file/d/abc")
    for _ in range(5):
        assert store.go_next()
    submitted_id = store.state.profile_id

    result = store.submit()

    assert result.accepted
    assert result.profile_id == submitted_id
    assert len(received) == 1
    assert received[0].full_name == "Meera Patel"
    assert received[0].media[0].caption == "Drive Link"
    assert received[0].bmi.value == pytest.approx(20.1)

    assert store.state.profile_id != submitted_id
    assert store.state.full_name == ""
    assert store.gate.current_step == 0
    assert store.gate.furthest_unlocked == 0


def test_failing_listener_still_discards_submitted_session(store: ProfileStore) -> None:
    def broken(_: ProfileState) -> None:
        raise RuntimeError("downstream unavailable")

    store.on_complete(broken)
    fill_profile(store, "aarav")
    for _ in range(5):
        assert store.go_next()
    submitted_id = store.state.profile_id

    with pytest.raises(RuntimeError):
        store.submit()

    assert store.state.profile_id != submitted_id
    assert store.state.full_name == ""
    assert store.gate.current_step == 0


def test_jump_to_illegal_index_is_rejected_quietly(store: ProfileStore) -> None:
    assert store.jump_to(3) is False
    assert store.jump_to(99) is False
    assert store.gate.current is Step.personal_info


def test_snapshot_is_detached_copy(store: ProfileStore) -> None:
    store.toggle_sport("Tennis")
    snapshot = store.snapshot()
    snapshot.sports.append("Squash")
    assert store.state.sports == ["Tennis"]


def test_profile_picture_upload_accepts_images_only(store: ProfileStore) -> None:
    pytest.importorskip("magic")

    with pytest.raises(UploadRejected):
        store.upload_profile_picture("scan.pdf", PDF_BYTES)
    assert store.state.profile_picture is None

    handle = store.upload_profile_picture("me.png", PNG_BYTES)
    assert store.state.profile_picture is handle

    store.upload_identity_document("passport.pdf", PDF_BYTES)
    assert store.preview(Step.personal_info).card.identity_document_kind.value == "pdf"
