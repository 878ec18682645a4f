"""
Unit tests for AliasManager.

Covers:
    - add alias: happy path, flattening, nesting rejection, validation, conflicts
    - remove alias: list/pointer cleanup, idempotence, refusal to touch
      slots that are not aliases of the given primary
"""

import pytest

from relink_platform.errors import Conflict, InvalidInput, NotFound
from relink_platform.records.codec import AliasPointer, LinkRecord


@pytest.fixture
def primary(manager):
    manager.create_link("https://example.com", link_id="primary")
    return "primary"


def test_add_alias_writes_pointer_and_list(manager, primary):
    body = manager.add_alias(primary, "short")
    assert body["aliases"] == ["short"]
    assert manager.links.read("short") == AliasPointer(alias_of="primary")


def test_add_alias_trims_input(manager, primary):
    assert manager.add_alias(primary, "  short  ")["aliases"] == ["short"]


def test_two_aliases_resolve_to_primary(manager, primary):
    manager.add_alias(primary, "x")
    manager.add_alias(primary, "y")
    expected = manager.resolve(primary)
    for alias_id in ("x", "y"):
        assert manager.resolve(alias_id) == expected
        assert manager.links.read(alias_id).alias_of == primary


def test_add_alias_to_missing_primary(manager):
    with pytest.raises(NotFound):
        manager.add_alias("ghost", "x")


def test_add_alias_to_alias_is_rejected(manager, primary):
    manager.add_alias(primary, "x")
    with pytest.raises(InvalidInput, match="Cannot add alias to an alias"):
        manager.add_alias("x", "y")
    assert manager.links.read("y") is None


@pytest.mark.parametrize("alias", [None, "", "   ", "bad alias", "a" * 51])
def test_add_alias_validates_candidate(manager, primary, alias):
    with pytest.raises(InvalidInput, match="Alias ID must be 1-50 chars"):
        manager.add_alias(primary, alias)


def test_add_alias_conflict_with_canonical(manager, primary):
    manager.create_link("https://other.example", link_id="other")
    with pytest.raises(Conflict):
        manager.add_alias(primary, "other")


def test_add_alias_conflict_with_own_id(manager, primary):
    with pytest.raises(Conflict):
        manager.add_alias(primary, primary)


def test_remove_alias(manager, primary):
    manager.add_alias(primary, "x")
    manager.add_alias(primary, "y")
    body = manager.remove_alias(primary, "x")
    assert body["aliases"] == ["y"]
    assert manager.links.read("x") is None
    assert manager.resolve("x") is None


def test_remove_last_alias_drops_aliases_field(manager, primary):
    manager.add_alias(primary, "x")
    body = manager.remove_alias(primary, "x")
    assert "aliases" not in body


def test_remove_unlisted_alias_is_silent(manager, primary):
    body = manager.remove_alias(primary, "never-added")
    assert "aliases" not in body


def test_remove_unlisted_pointer_to_primary_is_deleted(manager, primary):
    manager.links.write("stray", AliasPointer(alias_of=primary))
    manager.remove_alias(primary, "stray")
    assert manager.links.read("stray") is None


def test_remove_alias_missing_primary(manager):
    with pytest.raises(NotFound):
        manager.remove_alias("ghost", "x")


def test_remove_alias_primary_is_alias(manager, primary):
    manager.add_alias(primary, "x")
    with pytest.raises(NotFound):
        manager.remove_alias("x", "anything")


def test_remove_alias_refuses_canonical_slot(manager, primary):
    manager.create_link("https://other.example", link_id="other")
    with pytest.raises(InvalidInput):
        manager.remove_alias(primary, "other")
    assert isinstance(manager.links.read("other"), LinkRecord)


def test_remove_alias_refuses_foreign_alias(manager, primary):
    manager.create_link("https://other.example", link_id="other")
    manager.add_alias("other", "theirs")
    with pytest.raises(InvalidInput):
        manager.remove_alias(primary, "theirs")
    assert manager.resolve("theirs").canonical_id == "other"
