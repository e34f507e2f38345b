from __future__ import annotations

from dataclasses import dataclass

import pytest

from cascadegraph.domain.persistence import (
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


@dataclass(frozen=True)
class _Flags:
    is_cascade_insert: bool = False
    is_cascade_update: bool = False
    is_cascade_soft_remove: bool = False
    is_cascade_recover: bool = False


ALL = _Flags(
    is_cascade_insert=True,
    is_cascade_update=True,
    is_cascade_soft_remove=True,
    is_cascade_recover=True,
)


@pytest.mark.parametrize(
    ("operation", "allowed", "expected"),
    [
        ("save", None, True),
        ("save", "insert", True),
        ("save", "update", False),
        ("remove", None, False),
        ("soft-remove", None, False),
        ("recover", "insert", False),
    ],
)
def test_insert_eligibility(operation: str, allowed: str | None, expected: bool) -> None:
    assert can_cascade_insert(ALL, operation, allowed) is expected
    assert can_cascade_insert(_Flags(), operation, allowed) is False


@pytest.mark.parametrize(
    ("operation", "allowed", "expected"),
    [
        ("save", None, True),
        ("save", "insert", False),
        ("save", "update", True),
        ("remove", "update", False),
        ("recover", None, False),
    ],
)
def test_update_eligibility(operation: str, allowed: str | None, expected: bool) -> None:
    assert can_cascade_update(ALL, operation, allowed) is expected
    assert can_cascade_update(_Flags(is_cascade_insert=True), operation, allowed) is False


def test_soft_remove_and_recover_follow_their_own_operation_only() -> None:
    assert can_cascade_soft_remove(ALL, OperationType.SOFT_REMOVE)
    assert not can_cascade_soft_remove(ALL, OperationType.RECOVER)
    assert not can_cascade_soft_remove(_Flags(), OperationType.SOFT_REMOVE)
    assert can_cascade_recover(ALL, "recover")
    assert not can_cascade_recover(ALL, "save")
    assert not can_cascade_recover(_Flags(is_cascade_soft_remove=True), "recover")


@pytest.mark.parametrize("operation", list(OperationType))
@pytest.mark.parametrize("allowed", [None, *AllowedOperation])
def test_at_most_one_operation_channel_is_driven(
    operation: OperationType, allowed: AllowedOperation | None
) -> None:
    permissions = cascade_permissions(ALL, operation, allowed)

    save_flags = permissions.can_be_inserted or permissions.can_be_updated
    channels = [save_flags, permissions.can_be_soft_removed, permissions.can_be_recovered]
    assert sum(channels) <= 1
    assert save_flags == (operation is OperationType.SAVE)


def test_root_permissions() -> None:
    assert root_permissions("save") == Permissions(can_be_inserted=True, can_be_updated=True)
    assert root_permissions("save", "update") == Permissions(can_be_updated=True)
    assert root_permissions("soft-remove") == Permissions(can_be_soft_removed=True)
    assert root_permissions("recover") == Permissions(can_be_recovered=True)
    assert root_permissions("remove") == Permissions()


def test_permissions_or_combines_each_flag() -> None:
    combined = Permissions(can_be_inserted=True) | Permissions(can_be_recovered=True)

    assert combined == Permissions(can_be_inserted=True, can_be_recovered=True)
    assert combined.has_any()
    assert not Permissions().has_any()


@pytest.mark.parametrize(
    ("declared", "expected"),
    [
        (None, frozenset()),
        (False, frozenset()),
        (True, frozenset(CascadeOption)),
        ("insert", frozenset({CascadeOption.INSERT})),
        (
            ["update", CascadeOption.SOFT_REMOVE],
            frozenset({CascadeOption.UPDATE, CascadeOption.SOFT_REMOVE}),
        ),
    ],
)
def test_cascade_options(declared: object, expected: frozenset[CascadeOption]) -> None:
    assert cascade_options(declared) == expected  # type: ignore[arg-type]


def test_unknown_values_are_rejected() -> None:
    with pytest.raises(ValueError, match="delete"):
        cascade_options(["delete"])
    with pytest.raises(ValueError, match="upsert"):
        cascade_permissions(ALL, "upsert")
    with pytest.raises(ValueError, match="merge"):
        root_permissions("save", "merge")
