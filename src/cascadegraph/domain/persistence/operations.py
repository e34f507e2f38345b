"""Operation vocabulary and cascade eligibility rules.

Every permission a cascaded subject receives is derived here from three inputs:
the relation's declared cascade flags, the operation the caller is performing,
and an optional insert/update narrowing of ``save``. Only one flag can be driven
per operation; ``save`` is the only operation that splits further.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from collections.abc import Iterable


class OperationType(StrEnum):
    """Top-level persistence action requested by the caller."""

    SAVE = "save"
    REMOVE = "remove"
    SOFT_REMOVE = "soft-remove"
    RECOVER = "recover"


class AllowedOperation(StrEnum):
    """Narrowing of ``save`` cascades to strictly inserts or strictly updates."""

    INSERT = "insert"
    UPDATE = "update"


class CascadeOption(StrEnum):
    """Cascade capabilities a relation can declare."""

    INSERT = "insert"
    UPDATE = "update"
    REMOVE = "remove"
    SOFT_REMOVE = "soft-remove"
    RECOVER = "recover"


def cascade_options(
    cascade: bool | Iterable[CascadeOption | str] | None,
) -> frozenset[CascadeOption]:
    """Normalise a relation's cascade declaration into a set of options.

    ``True`` enables every option, ``False``/``None`` none of them.
    """

    if cascade is None or cascade is False:
        return frozenset()
    if cascade is True:
        return frozenset(CascadeOption)
    if isinstance(cascade, str):
        return frozenset({CascadeOption(cascade)})
    return frozenset(CascadeOption(option) for option in cascade)


class CascadeFlags(Protocol):
    """Cascade flags of a relation, as read by the eligibility rules."""

    @property
    def is_cascade_insert(self) -> bool: ...

    @property
    def is_cascade_update(self) -> bool: ...

    @property
    def is_cascade_soft_remove(self) -> bool: ...

    @property
    def is_cascade_recover(self) -> bool: ...


@dataclass(frozen=True, slots=True)
class Permissions:
    """Which operations a subject may undergo."""

    can_be_inserted: bool = False
    can_be_updated: bool = False
    can_be_soft_removed: bool = False
    can_be_recovered: bool = False

    def __or__(self, other: Permissions) -> Permissions:
        return Permissions(
            can_be_inserted=self.can_be_inserted or other.can_be_inserted,
            can_be_updated=self.can_be_updated or other.can_be_updated,
            can_be_soft_removed=self.can_be_soft_removed or other.can_be_soft_removed,
            can_be_recovered=self.can_be_recovered or other.can_be_recovered,
        )

    def has_any(self) -> bool:
        """Whether at least one operation is permitted."""
        return (
            self.can_be_inserted
            or self.can_be_updated
            or self.can_be_soft_removed
            or self.can_be_recovered
        )


def _coerce(
    operation: OperationType | str, allowed: AllowedOperation | str | None
) -> tuple[OperationType, AllowedOperation | None]:
    resolved_allowed = AllowedOperation(allowed) if allowed is not None else None
    return OperationType(operation), resolved_allowed


def _save_allows(
    operation: OperationType, allowed: AllowedOperation | None, wanted: AllowedOperation
) -> bool:
    if operation is not OperationType.SAVE:
        return False
    return allowed is None or allowed is wanted


def can_cascade_insert(
    relation: CascadeFlags,
    operation: OperationType | str,
    allowed: AllowedOperation | str | None = None,
) -> bool:
    operation, allowed = _coerce(operation, allowed)
    return relation.is_cascade_insert and _save_allows(operation, allowed, AllowedOperation.INSERT)


def can_cascade_update(
    relation: CascadeFlags,
    operation: OperationType | str,
    allowed: AllowedOperation | str | None = None,
) -> bool:
    operation, allowed = _coerce(operation, allowed)
    return relation.is_cascade_update and _save_allows(operation, allowed, AllowedOperation.UPDATE)


def can_cascade_soft_remove(relation: CascadeFlags, operation: OperationType | str) -> bool:
    return relation.is_cascade_soft_remove and OperationType(operation) is OperationType.SOFT_REMOVE


def can_cascade_recover(relation: CascadeFlags, operation: OperationType | str) -> bool:
    return relation.is_cascade_recover and OperationType(operation) is OperationType.RECOVER


def cascade_permissions(
    relation: CascadeFlags,
    operation: OperationType | str,
    allowed: AllowedOperation | str | None = None,
) -> Permissions:
    """Permissions a subject reached through ``relation`` receives for ``operation``."""

    return Permissions(
        can_be_inserted=can_cascade_insert(relation, operation, allowed),
        can_be_updated=can_cascade_update(relation, operation, allowed),
        can_be_soft_removed=can_cascade_soft_remove(relation, operation),
        can_be_recovered=can_cascade_recover(relation, operation),
    )


def root_permissions(
    operation: OperationType | str,
    allowed: AllowedOperation | str | None = None,
) -> Permissions:
    """Permissions of an entity handed directly to a persistence call."""

    operation, allowed = _coerce(operation, allowed)
    return Permissions(
        can_be_inserted=_save_allows(operation, allowed, AllowedOperation.INSERT),
        can_be_updated=_save_allows(operation, allowed, AllowedOperation.UPDATE),
        can_be_soft_removed=operation is OperationType.SOFT_REMOVE,
        can_be_recovered=operation is OperationType.RECOVER,
    )
