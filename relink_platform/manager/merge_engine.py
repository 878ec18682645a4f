"""
MergeEngine: collapse canonical links that share a destination URL.

For each group of canonical links with the same exact `url`:
    - the oldest (`createdAt` ascending, ties kept in key order) stays primary;
    - every other member is rewritten as an alias pointer to the primary;
    - aliases the duplicate owned are re-pointed straight at the primary, so
      no alias ever points at another alias;
    - the primary is written once with the accumulated alias list.

The scan is not transactional. A failure midway leaves finished groups
consistent and the rest untouched; running merge again picks them up. A
second run over already-merged data finds nothing to do.

LLM Prompt Example:
    "Show how to consolidate duplicate rows in a key-value store into one
    canonical entry plus redirect pointers, flattening transitive references."
"""

import logging
from dataclasses import replace
from typing import Dict, Iterable, List, Optional, Tuple

from ..records.codec import AliasPointer, LinkRecord
from .link_store import LinkStore

log = logging.getLogger(__name__)


class MergeEngine:
    def __init__(self, links: LinkStore):
        self.links = links

    def _group_by_url(self, scope: Optional[Iterable[str]]) -> Dict[str, List[Tuple[str, LinkRecord]]]:
        groups: Dict[str, List[Tuple[str, LinkRecord]]] = {}
        for link_id, record in self.links.scan_canonical(scope):
            groups.setdefault(record.url, []).append((link_id, record))
        return groups

    def merge(self, scope_ids: Optional[Iterable[str]] = None) -> int:
        """
        Merge duplicate canonical links.

        Args:
            scope_ids: Restrict candidates to these canonical IDs. None means
                       every canonical link; an empty collection merges nothing.

        Returns:
            int: Number of duplicates absorbed (not number of groups).
        """
        merged = 0
        for url, group in self._group_by_url(scope_ids).items():
            if len(group) < 2:
                continue
            # list.sort is stable: equal createdAt keeps scan order.
            group.sort(key=lambda item: item[1].created_at)
            primary_id, primary = group[0]
            aliases = list(primary.aliases)

            for dup_id, dup in group[1:]:
                pointer = AliasPointer(alias_of=primary_id)
                self.links.write(dup_id, pointer)
                for alias_id in dup.aliases:
                    self.links.write(alias_id, pointer)
                aliases.append(dup_id)
                aliases.extend(dup.aliases)
                merged += 1

            self.links.write(primary_id, replace(primary, aliases=aliases))
            log.info("merged %d duplicate(s) of %s into %s", len(group) - 1, url, primary_id)

        log.info("merge finished: %d duplicate(s) absorbed", merged)
        return merged
