from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from cascadegraph.domain.persistence import (
    MetadataRegistry,
    OperationType,
    Subject,
    SubjectRegistry,
    root_permissions,
)

if TYPE_CHECKING:
    from collections.abc import Callable


@pytest.fixture
def subjects() -> SubjectRegistry:
    return SubjectRegistry()


@pytest.fixture
def add_root(subjects: SubjectRegistry) -> Callable[[MetadataRegistry, object, str], Subject]:
    """Register ``entity`` as a root subject the way a persistence call would."""

    def factory(
        metadata: MetadataRegistry,
        entity: object,
        operation: str = OperationType.SAVE,
    ) -> Subject:
        subject = Subject.create(
            metadata=metadata.metadata_for(entity),
            entity=entity,
            permissions=root_permissions(operation),
            must_be_removed=operation == OperationType.REMOVE,
        )
        subjects.append(subject)
        return subject

    return factory
