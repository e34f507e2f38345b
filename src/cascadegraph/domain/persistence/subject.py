"""Subjects: units of pending persistence work for one entity instance."""

from __future__ import annotations

import weakref
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from .operations import Permissions

if TYPE_CHECKING:
    from collections.abc import Mapping

    from .metadata import EntityMetadata


@dataclass(eq=False, kw_only=True)
class Subject:
    """One entity scheduled for persistence plus what may be done with it.

    Permission flags only ever strengthen while subjects are being collected;
    use ``strengthen`` to merge further intent into an existing subject.
    """

    metadata: EntityMetadata
    entity: object | None = None
    can_be_inserted: bool = False
    can_be_updated: bool = False
    can_be_soft_removed: bool = False
    can_be_recovered: bool = False
    must_be_removed: bool = False
    identifier: Mapping[str, Any] | None = None
    _parent_ref: weakref.ref[Subject] | None = field(default=None, init=False, repr=False)

    @classmethod
    def create(
        cls,
        *,
        metadata: EntityMetadata,
        entity: object,
        permissions: Permissions,
        parent_subject: Subject | None = None,
        must_be_removed: bool = False,
    ) -> Subject:
        subject = cls(
            metadata=metadata,
            entity=entity,
            can_be_inserted=permissions.can_be_inserted,
            can_be_updated=permissions.can_be_updated,
            can_be_soft_removed=permissions.can_be_soft_removed,
            can_be_recovered=permissions.can_be_recovered,
            must_be_removed=must_be_removed,
        )
        subject.parent_subject = parent_subject
        return subject

    @property
    def parent_subject(self) -> Subject | None:
        """Subject whose relation led to this one (``None`` for roots)."""
        if self._parent_ref is None:
            return None
        return self._parent_ref()

    @parent_subject.setter
    def parent_subject(self, parent: Subject | None) -> None:
        self._parent_ref = weakref.ref(parent) if parent is not None else None

    @property
    def entity_with_fulfilled_ids(self) -> object | None:
        if self.entity is None or self.identifier is None:
            return self.entity
        return self.metadata.with_identifier(self.entity, self.identifier)

    @property
    def permissions(self) -> Permissions:
        return Permissions(
            can_be_inserted=self.can_be_inserted,
            can_be_updated=self.can_be_updated,
            can_be_soft_removed=self.can_be_soft_removed,
            can_be_recovered=self.can_be_recovered,
        )

    @property
    def has_any_permission(self) -> bool:
        return self.must_be_removed or self.permissions.has_any()

    def strengthen(self, permissions: Permissions) -> None:
        """Merge incoming permissions; flags that are already set stay set."""

        if not self.can_be_inserted:
            self.can_be_inserted = permissions.can_be_inserted
        if not self.can_be_updated:
            self.can_be_updated = permissions.can_be_updated
        if not self.can_be_soft_removed:
            self.can_be_soft_removed = permissions.can_be_soft_removed
        if not self.can_be_recovered:
            self.can_be_recovered = permissions.can_be_recovered
