"""Subject collection for one persistence call."""

from __future__ import annotations

import logging
from collections.abc import Iterator, Sequence
from collections.abc import Set as AbstractSet
from typing import TYPE_CHECKING, Protocol

from .cascades import CascadesSubjectBuilder
from .operations import AllowedOperation, OperationType, root_permissions
from .registry import SubjectRegistry
from .subject import Subject

if TYPE_CHECKING:
    from collections.abc import Iterable

    from .metadata import EntityMetadata

log = logging.getLogger(__name__)


class MetadataLookup(Protocol):
    """Anything that can resolve the metadata of an entity instance."""

    def metadata_for(self, target: object) -> EntityMetadata: ...


def build_subjects(
    entities: object | Iterable[object],
    operation_type: OperationType | str,
    *,
    metadata: MetadataLookup,
    allowed_operations: AllowedOperation | str | None = None,
    registry: SubjectRegistry | None = None,
) -> SubjectRegistry:
    """Collect the subjects touched by persisting ``entities``.

    ``entities`` is one entity or a sequence, set or iterator of them. Each entity
    becomes a root subject (merged with an existing one when the same entity
    is passed twice) and its cascades are expanded afterwards, so roots always
    precede cascaded subjects in the registry.
    """

    operation = OperationType(operation_type)
    subjects = registry if registry is not None else SubjectRegistry()
    roots = _register_roots(
        _as_entity_list(entities),
        operation,
        allowed_operations,
        metadata=metadata,
        registry=subjects,
    )

    builder = CascadesSubjectBuilder(subjects)
    for root in roots:
        builder.build(root, operation, allowed_operations)

    log.info(
        "Collected %d subject(s) from %d root(s) for %s",
        len(subjects),
        len(roots),
        operation,
    )
    return subjects


def _as_entity_list(entities: object | Iterable[object]) -> list[object]:
    # mappings (dict entities) are neither sequences nor sets, so stay single
    if isinstance(entities, (Sequence, AbstractSet, Iterator)) and not isinstance(
        entities, (str, bytes, bytearray)
    ):
        return list(entities)
    return [entities]


def _register_roots(
    entities: list[object],
    operation: OperationType,
    allowed_operations: AllowedOperation | str | None,
    *,
    metadata: MetadataLookup,
    registry: SubjectRegistry,
) -> list[Subject]:
    permissions = root_permissions(operation, allowed_operations)
    roots: list[Subject] = []
    for entity in entities:
        entity_metadata = metadata.metadata_for(entity)
        existing = registry.find_by_persist_entity_like(entity_metadata.target, entity)
        if existing is not None:
            existing.strengthen(permissions)
            existing.must_be_removed = existing.must_be_removed or operation is OperationType.REMOVE
            if existing not in roots:
                roots.append(existing)
            continue

        subject = Subject.create(
            metadata=entity_metadata,
            entity=entity,
            permissions=permissions,
            must_be_removed=operation is OperationType.REMOVE,
        )
        registry.append(subject)
        roots.append(subject)
    return roots
