"""Entity metadata derived from SQLAlchemy mappers."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from sqlalchemy import inspect
from sqlalchemy.exc import NoInspectionAvailable
from sqlalchemy.orm import Mapper, RelationshipDirection

from cascadegraph.domain.persistence import (
    CascadeOption,
    EntityMetadata,
    RelationMetadata,
    RelationType,
    UnknownEntityError,
    cascade_options,
)

if TYPE_CHECKING:
    from sqlalchemy.orm import RelationshipProperty

log = logging.getLogger(__name__)

CASCADE_INFO_KEY = "cascade"


@dataclass(eq=False, kw_only=True)
class SqlAlchemyEntityMetadata(EntityMetadata):
    """Metadata of a mapped class.

    Relation values are read from the instance's loaded state only, so no lazy
    load is ever emitted while cascades are expanded.
    """

    mapper: Mapper[Any]

    def get_relation_value(self, entity: object, relation: RelationMetadata) -> object:
        return inspect(entity).dict.get(relation.property_name)


class SqlAlchemyMetadataRegistry:
    """Builds and caches ``SqlAlchemyEntityMetadata`` per mapped class."""

    def __init__(self) -> None:
        self._metadata_by_mapper: dict[Mapper[Any], SqlAlchemyEntityMetadata] = {}

    def metadata_for(self, target: object) -> SqlAlchemyEntityMetadata:
        try:
            mapper = inspect(target if isinstance(target, type) else type(target))
        except NoInspectionAvailable as exc:
            raise UnknownEntityError(target) from exc
        if not isinstance(mapper, Mapper):
            raise UnknownEntityError(target)
        return self._metadata_for_mapper(mapper)

    def _metadata_for_mapper(self, mapper: Mapper[Any]) -> SqlAlchemyEntityMetadata:
        metadata = self._metadata_by_mapper.get(mapper)
        if metadata is not None:
            return metadata

        metadata = SqlAlchemyEntityMetadata(
            target=mapper.class_,
            primary_attributes=tuple(
                mapper.get_property_by_column(column).key for column in mapper.primary_key
            ),
            mapper=mapper,
        )
        # cache before walking relationships so self-referencing mappers resolve
        self._metadata_by_mapper[mapper] = metadata
        for prop in mapper.relationships:
            metadata.add_relation(self._relation_for(prop))
        log.debug(
            "Derived metadata for %s with %d relation(s)",
            metadata.name,
            len(metadata.relations),
        )
        return metadata

    def _relation_for(self, prop: RelationshipProperty[Any]) -> RelationMetadata:
        related_mapper = prop.mapper
        return RelationMetadata(
            property_name=prop.key,
            relation_type=relation_type_for(prop),
            cascade=cascade_for(prop),
            _resolve_target=lambda: self._metadata_for_mapper(related_mapper),
        )


def relation_type_for(prop: RelationshipProperty[Any]) -> RelationType:
    if prop.direction is RelationshipDirection.MANYTOMANY:
        return RelationType.MANY_TO_MANY
    if prop.direction is RelationshipDirection.ONETOMANY:
        return RelationType.ONE_TO_MANY if prop.uselist else RelationType.ONE_TO_ONE
    return RelationType.MANY_TO_ONE


def cascade_for(prop: RelationshipProperty[Any]) -> frozenset[CascadeOption]:
    """Cascade options of a relationship.

    ``save-update`` maps to insert and update, ``delete`` to remove, soft-remove
    and recover. ``info={"cascade": ...}`` on the relationship replaces the
    derived options entirely.
    """

    if CASCADE_INFO_KEY in prop.info:
        return cascade_options(prop.info[CASCADE_INFO_KEY])

    options: set[CascadeOption] = set()
    if prop.cascade.save_update:
        options.update((CascadeOption.INSERT, CascadeOption.UPDATE))
    if prop.cascade.delete:
        options.update(
            (CascadeOption.REMOVE, CascadeOption.SOFT_REMOVE, CascadeOption.RECOVER)
        )
    return frozenset(options)
