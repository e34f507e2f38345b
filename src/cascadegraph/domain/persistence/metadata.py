"""Entity and relation metadata consulted while expanding cascades.

``EntityMetadata`` is the collaborator the cascade builder talks to: it knows an
entity type's relations, how to read the related values off an instance and how
to decide whether two instances denote the same row. Cardinality is hidden
behind ``extract_relation_values``; callers only ever see a flat list of
``(relation, value, related metadata)`` triples.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import StrEnum
from types import SimpleNamespace
from typing import TYPE_CHECKING, Any, TypeAlias

from .operations import CascadeOption, cascade_options

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable


def read_attribute(entity: object, name: str) -> Any:
    """Read a field off an entity object or a plain mapping entity."""

    if isinstance(entity, Mapping):
        return entity.get(name)
    return getattr(entity, name, None)


class UnknownEntityError(LookupError):
    """Raised when no metadata has been declared for an entity type."""

    def __init__(self, target: object) -> None:
        self.target = target
        name = getattr(target, "__qualname__", repr(target))
        super().__init__(f"No entity metadata registered for {name}")


class RelationType(StrEnum):
    ONE_TO_ONE = "one-to-one"
    MANY_TO_ONE = "many-to-one"
    ONE_TO_MANY = "one-to-many"
    MANY_TO_MANY = "many-to-many"

    @property
    def is_to_many(self) -> bool:
        return self in (RelationType.ONE_TO_MANY, RelationType.MANY_TO_MANY)


RelationValue: TypeAlias = "tuple[RelationMetadata, object, EntityMetadata]"


@dataclass(eq=False, kw_only=True)
class RelationMetadata:
    """One declared association and its cascade policy."""

    property_name: str
    relation_type: RelationType
    cascade: frozenset[CascadeOption] = field(default_factory=frozenset[CascadeOption])
    _resolve_target: Callable[[], EntityMetadata] = field(repr=False)

    @property
    def inverse_entity_metadata(self) -> EntityMetadata:
        """Metadata of the related type, resolved on access."""
        return self._resolve_target()

    @property
    def is_to_many(self) -> bool:
        return self.relation_type.is_to_many

    @property
    def is_cascade_insert(self) -> bool:
        return CascadeOption.INSERT in self.cascade

    @property
    def is_cascade_update(self) -> bool:
        return CascadeOption.UPDATE in self.cascade

    @property
    def is_cascade_remove(self) -> bool:
        return CascadeOption.REMOVE in self.cascade

    @property
    def is_cascade_soft_remove(self) -> bool:
        return CascadeOption.SOFT_REMOVE in self.cascade

    @property
    def is_cascade_recover(self) -> bool:
        return CascadeOption.RECOVER in self.cascade

    @property
    def cascades_anything(self) -> bool:
        # remove cascades are executed elsewhere and never propagate here
        return (
            self.is_cascade_insert
            or self.is_cascade_update
            or self.is_cascade_soft_remove
            or self.is_cascade_recover
        )


@dataclass(eq=False, kw_only=True)
class EntityMetadata:
    """Relations and identity rules of one entity type."""

    target: type
    primary_attributes: tuple[str, ...] = ("id",)
    relations: list[RelationMetadata] = field(default_factory=list[RelationMetadata])

    @property
    def name(self) -> str:
        return self.target.__name__

    def add_relation(self, relation: RelationMetadata) -> None:
        self.relations.append(relation)

    def find_relation(self, property_name: str) -> RelationMetadata | None:
        for relation in self.relations:
            if relation.property_name == property_name:
                return relation
        return None

    def get_relation_value(self, entity: object, relation: RelationMetadata) -> object:
        return read_attribute(entity, relation.property_name)

    def extract_relation_values(
        self,
        entity: object,
        relations: Iterable[RelationMetadata] | None = None,
    ) -> list[RelationValue]:
        """Pair every populated relation value with its relation and target metadata.

        To-many relations contribute one triple per element (mapping collections
        contribute their values). To-one relations contribute the raw field
        value, which may be ``None`` or a bare key.
        """

        values: list[RelationValue] = []
        for relation in self.relations if relations is None else relations:
            value = self.get_relation_value(entity, relation)
            related_metadata = relation.inverse_entity_metadata
            if relation.is_to_many:
                if value is None:
                    continue
                items = value.values() if isinstance(value, Mapping) else value
                values.extend((relation, item, related_metadata) for item in items)
            else:
                values.append((relation, value, related_metadata))
        return values

    def primary_values(self, entity: object) -> dict[str, Any]:
        return {name: read_attribute(entity, name) for name in self.primary_attributes}

    def get_entity_id_map(self, entity: object) -> dict[str, Any] | None:
        """Primary attribute values, or ``None`` while any of them is unset."""

        values = self.primary_values(entity)
        if any(value is None for value in values.values()):
            return None
        return values

    def compare_entities(self, first: object, second: object) -> bool:
        """Whether two instances denote the same row (by primary key)."""

        first_ids = self.get_entity_id_map(first)
        if first_ids is None:
            return False
        return first_ids == self.get_entity_id_map(second)

    def with_identifier(self, entity: object, identifier: Mapping[str, Any]) -> object:
        """Identity view of ``entity`` with generated ``identifier`` values applied."""

        values = self.primary_values(entity)
        values.update(
            (name, value)
            for name, value in identifier.items()
            if name in values and value is not None
        )
        return SimpleNamespace(**values)


class MetadataRegistry:
    """Declared entity metadata, keyed by entity class."""

    def __init__(self) -> None:
        self._metadata_by_target: dict[type, EntityMetadata] = {}

    def __contains__(self, target: object) -> bool:
        return self._lookup(target) is not None

    def register(
        self,
        target: type,
        *,
        primary_attributes: tuple[str, ...] = ("id",),
    ) -> EntityMetadata:
        metadata = self._metadata_by_target.get(target)
        if metadata is None:
            metadata = EntityMetadata(target=target, primary_attributes=primary_attributes)
            self._metadata_by_target[target] = metadata
        return metadata

    def relate(
        self,
        source: type,
        property_name: str,
        target: type,
        *,
        relation_type: RelationType | str = RelationType.MANY_TO_ONE,
        cascade: bool | Iterable[CascadeOption | str] | None = None,
    ) -> RelationMetadata:
        """Declare a relation from ``source`` to ``target``.

        The target does not need to be registered yet; it is looked up the first
        time the relation is traversed.
        """

        relation = RelationMetadata(
            property_name=property_name,
            relation_type=RelationType(relation_type),
            cascade=cascade_options(cascade),
            _resolve_target=lambda: self.metadata_for(target),
        )
        self.metadata_for(source).add_relation(relation)
        return relation

    def metadata_for(self, target: object) -> EntityMetadata:
        """Metadata for an entity class or an instance of one."""

        metadata = self._lookup(target)
        if metadata is None:
            raise UnknownEntityError(target)
        return metadata

    def _lookup(self, target: object) -> EntityMetadata | None:
        cls = target if isinstance(target, type) else type(target)
        for klass in cls.__mro__:
            metadata = self._metadata_by_target.get(klass)
            if metadata is not None:
                return metadata
        return None
