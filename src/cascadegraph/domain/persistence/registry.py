"""Ordered collection of subjects assembled for one persistence call."""

from __future__ import annotations

from typing import TYPE_CHECKING, overload

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator

    from .subject import Subject


class SubjectRegistry:
    """Append-only, insertion-ordered list of subjects.

    At most one subject exists per logical entity. Lookups try reference
    equality first (indexed by ``id(entity)``) and fall back to the metadata's
    comparator among subjects of the same entity type.
    """

    def __init__(self) -> None:
        self._subjects: list[Subject] = []
        self._by_entity_id: dict[int, Subject] = {}

    def __len__(self) -> int:
        return len(self._subjects)

    def __iter__(self) -> Iterator[Subject]:
        return iter(self._subjects)

    @overload
    def __getitem__(self, index: int) -> Subject: ...
    @overload
    def __getitem__(self, index: slice) -> list[Subject]: ...
    def __getitem__(self, index: int | slice) -> Subject | list[Subject]:
        return self._subjects[index]

    def __contains__(self, subject: object) -> bool:
        return any(existing is subject for existing in self._subjects)

    def append(self, subject: Subject) -> None:
        self._subjects.append(subject)
        if subject.entity is not None:
            self._by_entity_id.setdefault(id(subject.entity), subject)

    def find_by_persist_entity_like(self, target: type, entity: object) -> Subject | None:
        """Return the subject that already holds ``entity`` (or an equal one)."""

        subject = self._by_entity_id.get(id(entity))
        if subject is not None and subject.entity is entity:
            return subject

        for subject in self._subjects:
            if subject.entity is None:
                continue
            if subject.entity is entity:
                return subject
            if subject.metadata.target is target and subject.metadata.compare_entities(
                subject.entity_with_fulfilled_ids, entity
            ):
                return subject
        return None

    def subjects_for(self, target: type) -> tuple[Subject, ...]:
        return self._select(lambda subject: subject.metadata.target is target)

    @property
    def insertable(self) -> tuple[Subject, ...]:
        return self._select(lambda subject: subject.can_be_inserted)

    @property
    def updatable(self) -> tuple[Subject, ...]:
        return self._select(lambda subject: subject.can_be_updated)

    @property
    def soft_removable(self) -> tuple[Subject, ...]:
        return self._select(lambda subject: subject.can_be_soft_removed)

    @property
    def recoverable(self) -> tuple[Subject, ...]:
        return self._select(lambda subject: subject.can_be_recovered)

    @property
    def removable(self) -> tuple[Subject, ...]:
        return self._select(lambda subject: subject.must_be_removed)

    def _select(self, predicate: Callable[[Subject], bool]) -> tuple[Subject, ...]:
        return tuple(subject for subject in self._subjects if predicate(subject))
