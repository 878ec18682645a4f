"""
Resolver: maps any identifier to its canonical link.

An identifier slot holds either a canonical LinkRecord or an AliasPointer.
Resolution follows at most one indirection. An alias whose target is missing
(dangling) resolves to nothing, like an unknown ID. An alias pointing at
another alias is never followed further.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from ..errors import NotFound
from ..records.codec import AliasPointer, LinkRecord
from .link_store import LinkStore

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class Resolved:
    canonical_id: str
    record: LinkRecord


class Resolver:
    def __init__(self, links: LinkStore):
        self.links = links

    def resolve(self, link_id: str) -> Optional[Resolved]:
        """Return the canonical link for `link_id`, or None. Read-only."""
        slot = self.links.read(link_id)
        if slot is None:
            log.debug("resolve miss: %s", link_id)
            return None
        if isinstance(slot, AliasPointer):
            target = self.links.read(slot.alias_of)
            if not isinstance(target, LinkRecord):
                log.debug("dangling alias %s -> %s", link_id, slot.alias_of)
                return None
            return Resolved(canonical_id=slot.alias_of, record=target)
        return Resolved(canonical_id=link_id, record=slot)

    def require(self, link_id: str) -> Resolved:
        """Like `resolve`, but raises NotFound instead of returning None."""
        resolved = self.resolve(link_id)
        if resolved is None:
            raise NotFound("Not found")
        return resolved
