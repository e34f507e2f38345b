"""SQLAlchemy adapter package for cascadegraph."""

from __future__ import annotations

from .metadata import (
    CASCADE_INFO_KEY,
    SqlAlchemyEntityMetadata,
    SqlAlchemyMetadataRegistry,
    cascade_for,
    relation_type_for,
)

__all__ = [
    "CASCADE_INFO_KEY",
    "SqlAlchemyEntityMetadata",
    "SqlAlchemyMetadataRegistry",
    "cascade_for",
    "relation_type_for",
]
