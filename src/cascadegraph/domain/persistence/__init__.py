"""Subject graph construction for persistence operations."""

from __future__ import annotations

from .cascades import CascadesSubjectBuilder, is_entity_like
from .metadata import (
    EntityMetadata,
    MetadataRegistry,
    RelationMetadata,
    RelationType,
    RelationValue,
    UnknownEntityError,
    read_attribute,
)
from .operations import (
    AllowedOperation,
    CascadeOption,
    OperationType,
    Permissions,
    can_cascade_insert,
    can_cascade_recover,
    can_cascade_soft_remove,
    can_cascade_update,
    cascade_options,
    cascade_permissions,
    root_permissions,
)
from .planner import MetadataLookup, build_subjects
from .registry import SubjectRegistry
from .subject import Subject

__all__ = [
    "AllowedOperation",
    "CascadeOption",
    "CascadesSubjectBuilder",
    "EntityMetadata",
    "MetadataLookup",
    "MetadataRegistry",
    "OperationType",
    "Permissions",
    "RelationMetadata",
    "RelationType",
    "RelationValue",
    "Subject",
    "SubjectRegistry",
    "UnknownEntityError",
    "build_subjects",
    "can_cascade_insert",
    "can_cascade_recover",
    "can_cascade_soft_remove",
    "can_cascade_update",
    "cascade_options",
    "cascade_permissions",
    "is_entity_like",
    "read_attribute",
    "root_permissions",
]
