"""
Typed access to the `link:` key space.

Wraps a BaseStorage so the resolver, registry, alias manager and merge
engine read and write decoded slot records instead of raw JSON strings.
Every method is a single store call except `scan_canonical`, which reads
each listed key in turn (O(total link count)).
"""

from typing import Iterable, Iterator, Optional, Tuple

from ..records.codec import (
    LINK_PREFIX,
    LinkRecord,
    SlotRecord,
    decode,
    encode,
    id_from_key,
    link_key,
)
from ..storage.base import BaseStorage


class LinkStore:
    def __init__(self, storage: BaseStorage):
        self.storage = storage

    def read(self, link_id: str) -> Optional[SlotRecord]:
        key = link_key(link_id)
        raw = self.storage.get(key)
        if raw is None:
            return None
        return decode(raw, key)

    def exists(self, link_id: str) -> bool:
        return self.storage.get(link_key(link_id)) is not None

    def write(self, link_id: str, record: SlotRecord) -> None:
        self.storage.put(link_key(link_id), encode(record))

    def delete(self, link_id: str) -> None:
        self.storage.delete(link_key(link_id))

    def scan_canonical(self, scope: Optional[Iterable[str]] = None) -> Iterator[Tuple[str, LinkRecord]]:
        """
        Yield (id, record) for every canonical link, in key order.

        Args:
            scope: When given, only IDs in this collection are read. Alias
                   pointers are skipped whether or not they are in scope.
        """
        wanted = set(scope) if scope is not None else None
        for key in self.storage.list_keys(LINK_PREFIX):
            link_id = id_from_key(key)
            if wanted is not None and link_id not in wanted:
                continue
            raw = self.storage.get(key)
            if raw is None:
                # Deleted between list and get.
                continue
            record = decode(raw, key)
            if isinstance(record, LinkRecord):
                yield link_id, record
