"""
Collection editor tests — identities, in-place edits and sub-form saves.

Groups:
  1. RecordCollection add / remove / update
  2. SubForm edit → cancel round trip and edit → save
  3. Required-field rules
"""
from __future__ import annotations

import pydantic
import pytest

from athlete_profile.editors.collections import (
    RecordCollection,
    SubForm,
    achievement_required,
    participation_required,
)
from athlete_profile.profile.schemas import (
    AchievementRecord,
    ParticipationRecord,
    ProfileState,
    TournamentLevel,
    TournamentResult,
)
from athlete_profile.tests.demo_profiles import TODAY, fixed_clock


def _participations(state: ProfileState) -> RecordCollection[ParticipationRecord]:
    return RecordCollection("participations", ParticipationRecord, lambda: state.participations)


def _seeded() -> tuple[ProfileState, RecordCollection[ParticipationRecord]]:
    state = ProfileState()
    collection = _participations(state)
    for name, day in (("City Open", "2023-02-10"), ("State Cup", "2024-05-01"), ("Nationals", "2024-11-20")):
        collection.add(
            tournament_name=name,
            level=TournamentLevel.state,
            date=day,
            location="Pune",
            result=TournamentResult.winner,
        )
    return state, collection


# ===========================================================================
# TEST GROUP 1: RecordCollection
# ===========================================================================

def test_add_assigns_fresh_unique_ids() -> None:
    state, collection = _seeded()
    ids = collection.ids()
    assert len(ids) == 3
    assert len(set(ids)) == 3
    assert [p.tournament_name for p in state.participations] == ["City Open", "State Cup", "Nationals"]


def test_add_keeps_caller_supplied_id() -> None:
    state = ProfileState()
    collection = _participations(state)
    stored = collection.add(ParticipationRecord(id="p-1", tournament_name="Open"))
    assert stored is not None
    assert stored.id == "p-1"


def test_add_rejects_duplicate_id() -> None:
    state = ProfileState()
    collection = _participations(state)
    collection.add(ParticipationRecord(id="p-1"))
    assert collection.add(ParticipationRecord(id="p-1")) is None
    assert len(state.participations) == 1


def test_removed_id_is_never_reused() -> None:
    state = ProfileState()
    collection = _participations(state)
    collection.add(ParticipationRecord(id="p-1"))
    assert collection.remove("p-1")
    assert collection.add(ParticipationRecord(id="p-1")) is None
    assert state.participations == []


def test_remove_unknown_id_is_noop() -> None:
    state, collection = _seeded()
    before = state.model_dump()["participations"]
    assert collection.remove("missing") is False
    assert collection.remove("missing") is False
    assert state.model_dump()["participations"] == before


def test_update_merges_partial_fields_in_place() -> None:
    state, collection = _seeded()
    target = state.participations[1]

    updated = collection.update(target.id, location="Mumbai")

    assert updated is not None
    assert state.participations[1].id == target.id
    assert state.participations[1].location == "Mumbai"
    assert state.participations[1].tournament_name == "State Cup"


def test_update_rejects_unknown_field() -> None:
    state, collection = _seeded()
    with pytest.raises(pydantic.ValidationError):
        collection.update(state.participations[0].id, prize_money="100")


def test_update_to_new_id_retires_old_one() -> None:
    state, collection = _seeded()
    old_id = state.participations[0].id

    assert collection.update(old_id, id="renamed") is not None
    assert state.participations[0].id == "renamed"
    assert not collection.is_available(old_id)


def test_update_unknown_id_returns_none() -> None:
    _, collection = _seeded()
    assert collection.update("missing", location="Goa") is None


def test_add_wrong_record_type_raises() -> None:
    state = ProfileState()
    collection = _participations(state)
    with pytest.raises(TypeError):
        collection.add(AchievementRecord(title="Gold"))


# ===========================================================================
# TEST GROUP 2: SubForm
# ===========================================================================

def test_edit_then_cancel_restores_verbatim() -> None:
    state, collection = _seeded()
    form = SubForm(collection, participation_required, fixed_clock)
    before = state.model_dump()["participations"]
    target_id = state.participations[1].id

    form.begin_edit(target_id)
    assert len(state.participations) == 2          # detached while editing
    form.stage(tournament_name="Renamed", location="Delhi")
    form.cancel()

    assert state.model_dump()["participations"] == before
    assert state.participations[1].id == target_id
    assert not form.is_open


def test_edit_cancel_does_not_retire_id() -> None:
    state, collection = _seeded()
    form = SubForm(collection, participation_required, fixed_clock)
    target_id = state.participations[0].id

    form.begin_edit(target_id)
    form.cancel()

    assert collection.get(target_id) is not None
    assert collection.remove(target_id)


def test_edit_then_save_keeps_identity_and_position() -> None:
    state, collection = _seeded()
    form = SubForm(collection, participation_required, fixed_clock)
    target_id = state.participations[1].id

    form.begin_edit(target_id)
    form.stage(location="Chennai")
    assert form.save() == []

    assert state.participations[1].id == target_id
    assert state.participations[1].location == "Chennai"
    assert not form.is_open


def test_edit_save_with_new_id_retires_old_one() -> None:
    state, collection = _seeded()
    form = SubForm(collection, participation_required, fixed_clock)
    old_id = state.participations[1].id

    form.begin_edit(old_id)
    form.stage(id="renamed")
    assert form.save() == []

    assert state.participations[1].id == "renamed"
    assert collection.add(ParticipationRecord(id=old_id)) is None
    assert len(state.participations) == 3


def test_begin_add_then_save_appends() -> None:
    state, collection = _seeded()
    form = SubForm(collection, participation_required, fixed_clock)

    draft = form.begin_add()
    assert draft is not None
    assert form.is_open
    form.stage(
        tournament_name="Zonal Meet",
        level=TournamentLevel.district,
        date="2025-01-05",
        result=TournamentResult.participant,
    )
    assert form.save() == []

    assert state.participations[-1].tournament_name == "Zonal Meet"
    assert state.participations[-1].id == draft.id


def test_save_with_missing_fields_keeps_form_open() -> None:
    state, collection = _seeded()
    form = SubForm(collection, participation_required, fixed_clock)
    form.begin_add()

    issues = form.save()

    assert {i.field for i in issues} == {"tournament_name", "level", "date", "result"}
    assert form.is_open
    assert len(state.participations) == 3


def test_cancel_new_draft_discards_it() -> None:
    state, collection = _seeded()
    form = SubForm(collection, participation_required, fixed_clock)
    form.begin_add()
    form.cancel()
    assert not form.is_open
    assert len(state.participations) == 3


def test_only_one_sub_form_session_at_a_time() -> None:
    state, collection = _seeded()
    form = SubForm(collection, participation_required, fixed_clock)
    form.begin_add()
    assert form.begin_add() is None
    assert form.begin_edit(state.participations[0].id) is None
    assert len(state.participations) == 3


def test_stage_without_open_form_raises() -> None:
    _, collection = _seeded()
    form = SubForm(collection, participation_required, fixed_clock)
    with pytest.raises(RuntimeError):
        form.stage(location="Goa")


# ===========================================================================
# TEST GROUP 3: Required-field rules
# ===========================================================================

def test_participation_date_cannot_be_in_future() -> None:
    record = ParticipationRecord(
        tournament_name="Future Cup",
        level=TournamentLevel.national,
        date="2025-06-16",
        result=TournamentResult.winner,
    )
    issues = participation_required(record, TODAY)
    assert [i.field for i in issues] == ["date"]


def test_participation_dated_today_is_accepted() -> None:
    record = ParticipationRecord(
        tournament_name="Today Cup",
        level=TournamentLevel.national,
        date=TODAY.isoformat(),
        result=TournamentResult.winner,
    )
    assert participation_required(record, TODAY) == []


def test_achievement_requires_title_organization_date() -> None:
    issues = achievement_required(AchievementRecord(), TODAY)
    assert {i.field for i in issues} == {"title", "organization", "date"}

    record = AchievementRecord(title="Best Player", organization="State Association", date="2024-03-01")
    assert achievement_required(record, TODAY) == []
