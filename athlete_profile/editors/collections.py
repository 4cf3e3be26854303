"""
collections.py — CollectionEditors for participations, achievements and media.

Two layers:
  RecordCollection  add / remove / update over one list living inside
                    ProfileState (the list is fetched through a getter on every
                    call, so the collection follows the store across resets)
  SubForm           the add/edit staging area a tab opens: begin_add() or
                    begin_edit(id) → stage(...) → save() | cancel()

Identity rules:
  - add() assigns a fresh uuid when the record has none
  - an identity is unique within its collection
  - a removed identity is retired and never accepted again
  - begin_edit() DETACHES the record (not a removal — its id is not retired)
    and cancel() puts the original object back at its original position
"""
from __future__ import annotations

import logging
from datetime import date
from typing import Any, Callable, Generic, List, Optional, Set, Type, TypeVar

from pydantic import BaseModel

from athlete_profile.navigation.schemas import Severity, ValidationIssue
from athlete_profile.navigation.validator import parse_iso_date
from athlete_profile.profile.schemas import AchievementRecord, ParticipationRecord

logger = logging.getLogger(__name__)

R = TypeVar("R", bound=BaseModel)


def merge_record(record: R, fields: dict[str, Any]) -> R:
    """
    Validate record + fields into a NEW record of the same type.

    Field values are taken as attributes (not model_dump()) so nested
    MediaHandle instances keep their attached readers. Unknown field names
    raise pydantic.ValidationError (extra="forbid").
    """
    record_type = type(record)
    data = {name: getattr(record, name) for name in record_type.model_fields}
    data.update(fields)
    return record_type.model_validate(data)


class RecordCollection(Generic[R]):
    def __init__(
        self,
        name: str,
        record_type: Type[R],
        items: Callable[[], List[R]],
        retired: Optional[Set[str]] = None,
    ) -> None:
        self.name = name
        self.record_type = record_type
        self._items = items
        self._retired: Set[str] = retired if retired is not None else set()

    # ---- reads --------------------------------------------------------------

    @property
    def records(self) -> List[R]:
        return self._items()

    def ids(self) -> list[str]:
        return [r.id for r in self.records]  # type: ignore[attr-defined]

    def index_of(self, record_id: str) -> Optional[int]:
        for index, record in enumerate(self.records):
            if record.id == record_id:  # type: ignore[attr-defined]
                return index
        return None

    def get(self, record_id: str) -> Optional[R]:
        index = self.index_of(record_id)
        return None if index is None else self.records[index]

    def is_available(self, record_id: str) -> bool:
        """True if record_id is neither in use nor retired."""
        return record_id not in self._retired and self.index_of(record_id) is None

    # ---- writes -------------------------------------------------------------

    def add(self, record: Optional[R] = None, **fields: Any) -> Optional[R]:
        """
        Append a record (or one built from fields). Returns the stored record,
        or None when its identity is already used or retired.
        """
        if record is None:
            record = self.record_type(**fields)
        elif fields:
            record = merge_record(record, fields)
        elif not isinstance(record, self.record_type):
            raise TypeError(f"{self.name} holds {self.record_type.__name__}, got {type(record).__name__}")

        return self.insert(len(self.records), record)

    def insert(self, index: int, record: R) -> Optional[R]:
        record_id = record.id  # type: ignore[attr-defined]
        if not self.is_available(record_id):
            logger.warning("Rejected duplicate or retired id collection=%s id=%s", self.name, record_id)
            return None
        self.records.insert(index, record)
        logger.info("Added record collection=%s id=%s", self.name, record_id)
        return record

    def retire(self, record_id: str) -> None:
        """record_id can never be inserted into this collection again."""
        self._retired.add(record_id)

    def remove(self, record_id: str) -> bool:
        """Delete and retire record_id. Unknown ids are a no-op (idempotent)."""
        index = self.index_of(record_id)
        if index is None:
            return False
        del self.records[index]
        self.retire(record_id)
        logger.info("Removed record collection=%s id=%s", self.name, record_id)
        return True

    def update(self, record_id: str, **fields: Any) -> Optional[R]:
        """
        Replace record_id in place with record + fields. Changing the id is
        allowed only to an available identity; the old one is retired.
        """
        index = self.index_of(record_id)
        if index is None:
            return None
        updated = merge_record(self.records[index], fields)
        new_id = updated.id  # type: ignore[attr-defined]
        if new_id != record_id:
            if not self.is_available(new_id):
                logger.warning("Rejected id change collection=%s id=%s", self.name, record_id)
                return None
            self.retire(record_id)
        self.records[index] = updated
        return updated

    def detach(self, record_id: str) -> Optional[tuple[int, R]]:
        """Take a record out WITHOUT retiring its id (edit-in-place staging)."""
        index = self.index_of(record_id)
        if index is None:
            return None
        return index, self.records.pop(index)

    def restore(self, index: int, record: R) -> None:
        """Put a detached record back verbatim at its original position."""
        self.records.insert(min(index, len(self.records)), record)


# ---------------------------------------------------------------------------
# Required-field rules for sub-form saves
# ---------------------------------------------------------------------------

RequiredFields = Callable[[Any, date], list[ValidationIssue]]


def _missing(field: str, label: str) -> ValidationIssue:
    return ValidationIssue(field=field, issue=f"{label} is required.", severity=Severity.blocking)


def participation_required(record: ParticipationRecord, today: date) -> list[ValidationIssue]:
    issues: list[ValidationIssue] = []
    if not record.tournament_name.strip():
        issues.append(_missing("tournament_name", "Tournament Name"))
    if record.level is None:
        issues.append(_missing("level", "Level"))
    if not record.date:
        issues.append(_missing("date", "Date"))
    else:
        played = parse_iso_date(record.date)
        if played is None:
            issues.append(ValidationIssue(field="date", issue="Date is not a valid date."))
        elif played > today:
            issues.append(ValidationIssue(field="date", issue="Tournament date cannot be in the future."))
    if record.result is None:
        issues.append(_missing("result", "Result"))
    return issues


def achievement_required(record: AchievementRecord, today: date) -> list[ValidationIssue]:
    issues: list[ValidationIssue] = []
    if not record.title.strip():
        issues.append(_missing("title", "Title"))
    if not record.organization.strip():
        issues.append(_missing("organization", "Organization"))
    if not record.date:
        issues.append(_missing("date", "Date"))
    elif parse_iso_date(record.date) is None:
        issues.append(ValidationIssue(field="date", issue="Date is not a valid date."))
    return issues


# ---------------------------------------------------------------------------
# SubForm — add/edit staging area
# ---------------------------------------------------------------------------

class SubForm(Generic[R]):
    """
    The "add new entry" panel of a collection tab.

    While is_open is True the owning step is invalid, which forces an explicit
    save() or cancel() before the user can leave the tab forward.
    """

    def __init__(
        self,
        collection: RecordCollection[R],
        required: RequiredFields,
        clock: Callable[[], date],
    ) -> None:
        self.collection = collection
        self._required = required
        self._clock = clock
        self.draft: Optional[R] = None
        self._origin: Optional[tuple[int, R]] = None

    @property
    def is_open(self) -> bool:
        return self.draft is not None

    @property
    def is_editing(self) -> bool:
        return self._origin is not None

    def begin_add(self, **fields: Any) -> Optional[R]:
        if self.is_open:
            logger.info("Sub-form already open collection=%s", self.collection.name)
            return None
        self.draft = self.collection.record_type(**fields)
        return self.draft

    def begin_edit(self, record_id: str) -> Optional[R]:
        if self.is_open:
            logger.info("Sub-form already open collection=%s", self.collection.name)
            return None
        detached = self.collection.detach(record_id)
        if detached is None:
            return None
        self._origin = detached
        self.draft = detached[1].model_copy(deep=True)
        logger.info("Editing record collection=%s id=%s", self.collection.name, record_id)
        return self.draft

    def stage(self, **fields: Any) -> R:
        """Apply field edits to the draft (validated, not yet committed)."""
        if self.draft is None:
            raise RuntimeError(f"No open {self.collection.name} sub-form to stage into")
        self.draft = merge_record(self.draft, fields)
        return self.draft

    def save(self) -> list[ValidationIssue]:
        """
        Commit the draft. Returns the blocking issues (form stays open) or an
        empty list once the record is back in the collection.
        """
        if self.draft is None:
            return []

        issues = self._required(self.draft, self._clock())
        if issues:
            return issues

        position = self._origin[0] if self._origin else len(self.collection.records)
        if self.collection.insert(position, self.draft) is None:
            return [ValidationIssue(field="id", issue="This entry's identity is already in use.")]
        if self._origin and self._origin[1].id != self.draft.id:
            self.collection.retire(self._origin[1].id)
        self._close()
        return []

    def cancel(self) -> None:
        """Drop the draft; an edited record goes back exactly as it was."""
        if self._origin is not None:
            index, original = self._origin
            self.collection.restore(index, original)
            logger.info("Edit cancelled collection=%s id=%s", self.collection.name, original.id)  # type: ignore[attr-defined]
        self._close()

    def _close(self) -> None:
        self.draft = None
        self._origin = None


__all__ = [
    "merge_record",
    "RecordCollection",
    "RequiredFields",
    "participation_required",
    "achievement_required",
    "SubForm",
]
