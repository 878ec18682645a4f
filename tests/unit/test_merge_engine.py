"""
Unit tests for MergeEngine.

Duplicates are seeded straight into the store (as an import would leave
them), since create itself auto-merges.

Covers:
    - oldest-wins grouping and alias list accumulation
    - transitive re-pointing of a duplicate's own aliases
    - scoping, idempotence, stable tie-break, merged count semantics
"""

from typing import Iterable

import pytest

from relink_platform.records.codec import AliasPointer, LinkRecord


def seed(manager, link_id: str, url: str, created_at: int, aliases: Iterable[str] = ()):
    manager.links.write(link_id, LinkRecord(url=url, created_at=created_at, aliases=list(aliases)))
    for alias_id in aliases:
        manager.links.write(alias_id, AliasPointer(alias_of=link_id))


def assert_alias_invariants(manager):
    """Every listed alias points back at its owner; no pointer chains or danglers."""
    canonical = dict(manager.links.scan_canonical())
    for owner_id, record in canonical.items():
        for alias_id in record.aliases:
            assert manager.links.read(alias_id) == AliasPointer(alias_of=owner_id)
    for key in manager.storage.list_keys("link:"):
        slot = manager.links.read(key[len("link:"):])
        if isinstance(slot, AliasPointer):
            assert slot.alias_of in canonical


def test_merge_oldest_wins(manager):
    seed(manager, "A", "https://u.example", 1)
    seed(manager, "B", "https://u.example", 2)
    seed(manager, "C", "https://v.example", 3)

    assert manager.merge() == 1

    assert manager.links.read("A").aliases == ["B"]
    assert manager.links.read("B") == AliasPointer(alias_of="A")
    assert manager.resolve("B").canonical_id == "A"
    assert manager.links.read("C") == LinkRecord(url="https://v.example", created_at=3)
    assert_alias_invariants(manager)


def test_merge_primary_is_oldest_regardless_of_key_order(manager):
    seed(manager, "a-newer", "https://u.example", 50)
    seed(manager, "z-older", "https://u.example", 10)
    manager.merge()
    assert manager.resolve("a-newer").canonical_id == "z-older"


def test_merge_counts_duplicates_not_groups(manager):
    for i, link_id in enumerate(["a1", "a2", "a3"]):
        seed(manager, link_id, "https://a.example", i)
    for i, link_id in enumerate(["b1", "b2"]):
        seed(manager, link_id, "https://b.example", i)
    assert manager.merge() == 3
    assert manager.links.read("a1").aliases == ["a2", "a3"]
    assert manager.links.read("b1").aliases == ["b2"]


def test_merge_repoints_aliases_of_duplicates(manager):
    seed(manager, "keep", "https://u.example", 1, aliases=["k1"])
    seed(manager, "dup", "https://u.example", 2, aliases=["d1", "d2"])

    assert manager.merge() == 1

    assert manager.links.read("keep").aliases == ["k1", "dup", "d1", "d2"]
    for alias_id in ("dup", "d1", "d2", "k1"):
        assert manager.links.read(alias_id) == AliasPointer(alias_of="keep")
    assert_alias_invariants(manager)


def test_merge_tie_break_keeps_scan_order(manager):
    seed(manager, "beta", "https://u.example", 5)
    seed(manager, "alpha", "https://u.example", 5)
    manager.merge()
    # key order: alpha before beta
    assert manager.resolve("beta").canonical_id == "alpha"


def test_merge_is_idempotent(manager):
    seed(manager, "A", "https://u.example", 1)
    seed(manager, "B", "https://u.example", 2)
    assert manager.merge() == 1
    snapshot = dict(manager.storage.entries)
    assert manager.merge() == 0
    assert manager.storage.entries == snapshot


def test_merge_scope_limits_candidates(manager):
    seed(manager, "A", "https://u.example", 1)
    seed(manager, "B", "https://u.example", 2)
    seed(manager, "C", "https://u.example", 3)

    assert manager.merge(["B", "C"]) == 1
    assert isinstance(manager.links.read("A"), LinkRecord)
    assert manager.links.read("B").aliases == ["C"]
    assert manager.resolve("C").canonical_id == "B"


def test_merge_scope_ignores_alias_ids(manager):
    seed(manager, "A", "https://u.example", 1, aliases=["a1"])
    seed(manager, "B", "https://u.example", 2)
    assert manager.merge(["a1", "B"]) == 0


def test_merge_empty_scope_merges_nothing(manager):
    seed(manager, "A", "https://u.example", 1)
    seed(manager, "B", "https://u.example", 2)
    assert manager.merge([]) == 0


def test_merge_empty_store(manager):
    assert manager.merge() == 0


def test_merged_links_then_delete_primary_cascades(manager):
    seed(manager, "A", "https://u.example", 1)
    seed(manager, "B", "https://u.example", 2, aliases=["b1"])
    manager.merge()
    manager.delete_link("A")
    for link_id in ("A", "B", "b1"):
        assert manager.resolve(link_id) is None
    assert manager.storage.list_keys("link:") == []


@pytest.mark.parametrize("count", [2, 7])
def test_merge_large_group(manager, count):
    for i in range(count):
        seed(manager, f"id{i}", "https://u.example", i)
    assert manager.merge() == count - 1
    assert len(manager.list_links()) == 1
    assert_alias_invariants(manager)
