"""
store.py — ProfileStore: the single owned facade over the profile wizard.

Every tab renderer reads and writes through this object — no renderer
touches ProfileState, the gate or the editors' internals directly.

Design principles:
  - One ProfileState per session, mutated in place, discarded on submit
  - Derived state (BMI) is recomputed explicitly at the end of every mutating
    call, so readers never observe a stale cache
  - Step validity is never cached: every gate decision re-runs the validator
  - Logs only profile_id / record ids / step names / counts — never names,
    e-mails, phone numbers, addresses or bio text
"""
from __future__ import annotations

import logging
from datetime import date
from typing import Any, Callable, Optional

from athlete_profile.config import settings
from athlete_profile.editors.collections import (
    RecordCollection,
    SubForm,
    achievement_required,
    participation_required,
)
from athlete_profile.editors.media import (
    GENERAL_CONTEXT,
    IDENTITY_MIMES,
    IMAGE_MIMES,
    MediaEditor,
    handle_from_bytes,
)
from athlete_profile.metrics.derived import check_consistency, compute_bmi
from athlete_profile.metrics.schemas import BMIReading, ConsistencyCheck
from athlete_profile.navigation.gate import NavigationGate
from athlete_profile.navigation.schemas import (
    STEPS,
    GateSnapshot,
    Step,
    StepReport,
    SubmitResult,
    ValidationIssue,
)
from athlete_profile.navigation.validator import validate_step
from athlete_profile.preview.projection import build_preview, build_summary
from athlete_profile.preview.schemas import ProfilePreview, ProfileSummary
from athlete_profile.profile import fields
from athlete_profile.profile.catalog import (
    AVAILABLE_LANGUAGES,
    AVAILABLE_SPORTS,
    SPORT_STAT_SCHEMAS,
    StatField,
)
from athlete_profile.profile.schemas import (
    AchievementRecord,
    MediaHandle,
    ParticipationRecord,
    ProfileState,
    SportStats,
)

logger = logging.getLogger(__name__)

CompletionListener = Callable[[ProfileState], None]


class ProfileStore:
    def __init__(self, clock: Callable[[], date] = date.today) -> None:
        self._clock = clock
        self._listeners: list[CompletionListener] = []
        self.gate = NavigationGate(self.is_step_valid)
        self._start()

    def _start(self) -> None:
        """Fresh session: new state, new editors (new retired-id sets), gate at 0."""
        self.state = ProfileState()
        self.participations: RecordCollection[ParticipationRecord] = RecordCollection(
            "participations", ParticipationRecord, lambda: self.state.participations
        )
        self.achievements: RecordCollection[AchievementRecord] = RecordCollection(
            "achievements", AchievementRecord, lambda: self.state.achievements
        )
        self.media = MediaEditor(lambda: self.state)
        self.participation_form = SubForm(self.participations, participation_required, self._clock)
        self.achievement_form = SubForm(self.achievements, achievement_required, self._clock)
        self.gate.reset()
        self._recompute()
        logger.info("Started profile session profile_id=%s", self.state.profile_id)

    def _recompute(self) -> None:
        self.state.bmi = compute_bmi(
            self.state.height,
            self.state.units.height,
            self.state.weight,
            self.state.units.weight,
        )

    # ---------------------------------------------------------------------------
    # Read accessors
    # ---------------------------------------------------------------------------

    def snapshot(self) -> ProfileState:
        """Deep copy of the current state — safe to hand to collaborators."""
        return self.state.model_copy(deep=True)

    @property
    def bmi(self) -> BMIReading:
        return self.state.bmi

    def consistency(self, sport: Optional[str] = None) -> ConsistencyCheck:
        """Consistency of one sport's numbers (default: the viewed sport)."""
        sport = sport or self.state.viewed_sport()
        if sport is None:
            return ConsistencyCheck()
        return check_consistency(self.state.sport_stats.get(sport), sport)

    def preview(self, context: Optional[Step] = None) -> ProfilePreview:
        return build_preview(self.state, context or self.gate.current, self._clock())

    def summary(self) -> ProfileSummary:
        return build_summary(self.state, self._clock())

    # ---------------------------------------------------------------------------
    # Scalar fields
    # ---------------------------------------------------------------------------

    def set_field(self, field: fields.ProfileField | str, value: Any) -> bool:
        accepted = fields.apply_field(self.state, field, value)
        self._recompute()
        return accepted

    def set_unit(self, measure: fields.Measure | str, unit: str) -> None:
        fields.set_unit(self.state, measure, unit)
        self._recompute()

    def set_social_link(self, platform: str, url: str) -> None:
        fields.set_social_link(self.state, platform, url)

    # ---------------------------------------------------------------------------
    # Selections and tags
    # ---------------------------------------------------------------------------

    def toggle_sport(self, sport: str) -> bool:
        """
        Select / deselect a sport. Deselecting keeps its stats entry (orphaned,
        never shown) so reselecting brings the numbers back.
        """
        if sport not in AVAILABLE_SPORTS:
            logger.warning("Rejected unknown sport sport=%s", sport)
            return False
        selected = fields.toggle_member(self.state.sports, sport)
        logger.info("Sport %s sport=%s", "selected" if selected else "deselected", sport)
        self._recompute()
        return selected

    def select_stats_sport(self, sport: str) -> bool:
        """Choose which selected sport the SPORTS STATS tab shows."""
        if sport not in self.state.sports:
            logger.warning("Rejected stats view for unselected sport sport=%s", sport)
            return False
        self.state.stats_sport = sport
        return True

    def toggle_language(self, language: str) -> bool:
        if language not in AVAILABLE_LANGUAGES:
            logger.warning("Rejected unknown language")
            return False
        return fields.toggle_member(self.state.languages, language)

    def toggle_tag(self, list_name: fields.TagList | str, tag: str) -> bool:
        return fields.toggle_member(fields.tag_list(self.state, list_name), tag)

    def add_tag(self, list_name: fields.TagList | str, tag: str) -> bool:
        return fields.add_tag(self.state, list_name, tag)

    def remove_tag(self, list_name: fields.TagList | str, tag: str) -> bool:
        return fields.remove_tag(self.state, list_name, tag)

    # ---------------------------------------------------------------------------
    # Per-sport statistics
    # ---------------------------------------------------------------------------

    def set_stat_field(self, sport: str, field: StatField | str, value: str) -> bool:
        """
        Write one stat for one sport, creating the sport's entry on first write.
        The text is stored as typed — numeric checks happen at read time.
        """
        if sport not in self.state.sports or sport not in SPORT_STAT_SCHEMAS:
            logger.warning("Rejected stat write for unselected sport sport=%s", sport)
            return False
        try:
            stat = StatField(field)
        except ValueError:
            logger.warning("Rejected unknown stat field sport=%s", sport)
            return False
        if stat not in SPORT_STAT_SCHEMAS[sport].field_names:
            logger.warning("Rejected stat field outside schema sport=%s field=%s", sport, stat.value)
            return False

        entry = self.state.sport_stats.get(sport)
        if entry is None:
            entry = self.state.sport_stats[sport] = SportStats(sport=sport)
        entry.values[stat] = value
        self._recompute()
        return True

    # ---------------------------------------------------------------------------
    # Singular files and stories
    # ---------------------------------------------------------------------------

    def set_profile_picture(self, handle: MediaHandle) -> None:
        self.state.profile_picture = handle

    def clear_profile_picture(self) -> None:
        self.state.profile_picture = None

    def set_identity_document(self, handle: MediaHandle) -> None:
        self.state.identity_document = handle

    def upload_profile_picture(self, name: str, contents: bytes) -> MediaHandle:
        """JPEG / PNG only. Raises UploadRejected."""
        handle = handle_from_bytes(name, contents, IMAGE_MIMES)
        self.set_profile_picture(handle)
        return handle

    def upload_identity_document(self, name: str, contents: bytes) -> MediaHandle:
        """PDF / JPEG / PNG. Raises UploadRejected."""
        handle = handle_from_bytes(name, contents, IDENTITY_MIMES)
        self.set_identity_document(handle)
        return handle

    def set_story(self, text: str, context: str = GENERAL_CONTEXT) -> bool:
        """Player journey (general context) or one participation's story."""
        return self.media.set_story(text, context)

    # ---------------------------------------------------------------------------
    # Validation and navigation
    # ---------------------------------------------------------------------------

    def open_forms(self) -> frozenset[Step]:
        opened = set()
        if self.participation_form.is_open:
            opened.add(Step.participation)
        if self.achievement_form.is_open:
            opened.add(Step.achievements)
        return frozenset(opened)

    def step_report(self, step: Step) -> StepReport:
        return validate_step(step, self.state, today=self._clock(), open_forms=self.open_forms())

    def is_step_valid(self, step: Step) -> bool:
        return self.step_report(step).is_valid

    def validity(self) -> dict[Step, bool]:
        return {step: self.is_step_valid(step) for step in STEPS}

    def gate_snapshot(self) -> GateSnapshot:
        return self.gate.snapshot()

    def go_next(self) -> bool:
        return self.gate.go_next()

    def go_previous(self) -> bool:
        return self.gate.go_previous()

    def jump_to(self, step: Step | int | str) -> bool:
        return self.gate.jump_to(step)

    # ---------------------------------------------------------------------------
    # Submission
    # ---------------------------------------------------------------------------

    def on_complete(self, listener: CompletionListener) -> None:
        """Register a collaborator that receives the submitted profile."""
        self._listeners.append(listener)

    def submit(self) -> SubmitResult:
        """
        Terminal action. Legal only on the final step with every step valid;
        each listener gets its own deep copy, then the session is discarded.
        """
        profile_id = self.state.profile_id
        if not self.gate.is_on_final_step:
            logger.info("Submit rejected off final step profile_id=%s step=%s", profile_id, self.gate.current.value)
            return SubmitResult(
                accepted=False,
                profile_id=profile_id,
                issues=[ValidationIssue(issue="Submit is only available from the final step.")],
            )

        issues = [issue for step in STEPS for issue in self.step_report(step).blocking]
        if issues:
            logger.info("Submit rejected profile_id=%s blocking=%d", profile_id, len(issues))
            return SubmitResult(accepted=False, profile_id=profile_id, issues=issues)

        logger.info(
            "Profile submitted profile_id=%s app_version=%s participations=%d achievements=%d media=%d",
            profile_id,
            settings.app_version,
            len(self.state.participations),
            len(self.state.achievements),
            len(self.state.media),
        )
        # A raising listener propagates, but the accepted session is still discarded
        try:
            for listener in list(self._listeners):
                listener(self.snapshot())
        finally:
            self._start()
        return SubmitResult(accepted=True, profile_id=profile_id)


__all__ = ["CompletionListener", "ProfileStore"]
