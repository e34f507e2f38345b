"""Cascade expansion of subjects.

Starting from one subject, every entity reachable through relations that
declare a cascade for the requested operation becomes a subject of its own.
Entities already present in the registry are not visited again; their
permissions are strengthened instead. That lookup is also what terminates the
walk on cyclic object graphs.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, time, timedelta
from decimal import Decimal
from enum import Enum
from typing import TYPE_CHECKING, Final
from uuid import UUID

from .operations import AllowedOperation, OperationType, cascade_permissions
from .subject import Subject

if TYPE_CHECKING:
    from collections.abc import Iterator

    from .metadata import RelationValue
    from .registry import SubjectRegistry

log = logging.getLogger(__name__)

_BARE_VALUE_TYPES: Final = (
    str,
    bytes,
    bytearray,
    int,
    float,
    complex,
    Decimal,
    UUID,
    date,
    time,
    timedelta,
    Enum,
)


def is_entity_like(value: object) -> bool:
    """Whether a relation value is an object that can be cascaded into.

    Bare keys (``post.category = 3``) carry no nested entity.
    """

    return value is not None and not isinstance(value, _BARE_VALUE_TYPES)


@dataclass(slots=True)
class _Frame:
    subject: Subject
    relation_values: Iterator[RelationValue]
    allowed_operations: AllowedOperation | None


class CascadesSubjectBuilder:
    """Builds the cascade tree of a subject into a shared registry."""

    def __init__(self, registry: SubjectRegistry) -> None:
        self.registry = registry

    def build(
        self,
        subject: Subject,
        operation_type: OperationType | str,
        allowed_operations: AllowedOperation | str | None = None,
    ) -> None:
        """Expand ``subject``'s cascades into the registry.

        ``allowed_operations`` narrows save cascades of the subject's direct
        relations only; subjects found further down get full save semantics.
        Subjects are appended in depth-first pre-order, the order a recursive
        walk would produce.
        """

        operation = OperationType(operation_type)
        allowed = AllowedOperation(allowed_operations) if allowed_operations is not None else None

        stack = [self._frame(subject, allowed)]
        while stack:
            frame = stack[-1]
            relation_value = next(frame.relation_values, None)
            if relation_value is None:
                stack.pop()
                continue

            created = self._visit(frame, relation_value, operation)
            if created is not None:
                stack.append(self._frame(created, None))

    def _frame(self, subject: Subject, allowed: AllowedOperation | None) -> _Frame:
        # entity and metadata presence are preconditions of build()
        entity = subject.entity
        values = subject.metadata.extract_relation_values(entity, subject.metadata.relations)
        return _Frame(subject=subject, relation_values=iter(values), allowed_operations=allowed)

    def _visit(
        self,
        frame: _Frame,
        relation_value: RelationValue,
        operation: OperationType,
    ) -> Subject | None:
        relation, related_entity, related_metadata = relation_value
        if related_entity is None or not relation.cascades_anything:
            return None
        if not is_entity_like(related_entity):
            return None

        permissions = cascade_permissions(relation, operation, frame.allowed_operations)

        existing = self.registry.find_by_persist_entity_like(
            related_metadata.target, related_entity
        )
        if existing is not None:
            existing.strengthen(permissions)
            log.debug(
                "Merged %s cascade via %s.%s into existing %s subject",
                operation,
                frame.subject.metadata.name,
                relation.property_name,
                related_metadata.name,
            )
            return None

        created = Subject.create(
            metadata=related_metadata,
            entity=related_entity,
            permissions=permissions,
            parent_subject=frame.subject,
        )
        self.registry.append(created)
        log.debug(
            "Cascaded %s via %s.%s to new %s subject",
            operation,
            frame.subject.metadata.name,
            relation.property_name,
            related_metadata.name,
        )
        return created
