"""
LinkRegistry: create, update, delete and list canonical links.

Responsibilities:
    - Validate URLs and identifiers (explicit or generated)
    - Reject identifier collisions
    - Auto-merge on create: a new ID whose URL already has a canonical link
      becomes an alias of that link instead of a second canonical
    - Keep alias pointers consistent when a link or alias is deleted

Design notes:
    - No cross-key transactions exist underneath. Create is read-then-write,
      so two concurrent creates of the same ID can both pass the existence
      check and the last write wins.
    - Update resolves through aliases and never changes alias membership.
    - Delete is idempotent: unknown IDs succeed silently.

LLM Prompt Example:
    "Explain how auto-merge on create keeps one canonical record per
    destination URL while still honouring the identifier the caller asked for."
"""

import logging
import time
from dataclasses import replace
from typing import Any, Callable, Dict, List, Optional

from ..errors import Conflict
from ..records.codec import AliasPointer, LinkRecord, to_response
from .id_strategies import BaseIdStrategy, RandomStrategy
from .link_store import LinkStore
from .resolver import Resolver
from .validation import (
    Number,
    build_record,
    parse_interstitial,
    parse_redirect_delay,
    validate_id,
    validate_url,
)

log = logging.getLogger(__name__)

MAX_ID_ATTEMPTS = 5


def epoch_millis() -> int:
    return int(time.time() * 1000)


class LinkRegistry:
    def __init__(
        self,
        links: LinkStore,
        resolver: Resolver,
        id_strategy: Optional[BaseIdStrategy] = None,
        clock: Callable[[], int] = epoch_millis,
    ):
        """
        Args:
            links (LinkStore): Typed access to the `link:` key space.
            resolver (Resolver): Used by update to follow alias indirection.
            id_strategy (Optional[BaseIdStrategy]): Generator for omitted IDs.
            clock (Callable[[], int]): Current time in epoch milliseconds.
        """
        self.links = links
        self.resolver = resolver
        self.id_strategy = id_strategy or RandomStrategy()
        self.clock = clock

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------
    def _claim_id(self, link_id: Optional[str]) -> str:
        """Return a free identifier: the requested one, or a generated one."""
        requested = (link_id or "").strip()
        if requested:
            validate_id(requested)
            if self.links.exists(requested):
                raise Conflict("ID already exists")
            return requested

        for _ in range(MAX_ID_ATTEMPTS):
            candidate = self.id_strategy.generate()
            if not self.links.exists(candidate):
                return candidate
            log.debug("generated ID %s already taken, retrying", candidate)
        raise Conflict("Could not generate a free ID")

    def find_by_url(self, url: str) -> Optional[str]:
        """Return the ID of a canonical link with exactly this URL, if any."""
        for link_id, record in self.links.scan_canonical():
            if record.url == url:
                return link_id
        return None

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------
    def create(
        self,
        url: Optional[str],
        link_id: Optional[str] = None,
        title: Optional[str] = None,
        description: Optional[str] = None,
        interstitial: Optional[str] = None,
        redirect_delay: Optional[Number] = None,
    ) -> Dict[str, Any]:
        """
        Create a canonical link, or merge into an existing one.

        Rules:
            - URL must be absolute; ID (if given) must match [A-Za-z0-9_-]{1,50}.
            - An omitted ID is generated (6 lowercase alphanumerics by default).
            - The ID must not already exist (Conflict).
            - If a canonical link with the same URL exists, the ID becomes an
              alias of it and the response is that canonical link with
              `merged=True` and `aliasId=<id>`. Payload display fields are
              ignored in that case.

        Returns:
            dict: The created link, or the merged canonical link.

        Raises:
            InvalidInput, Conflict
        """
        validate_url(url)
        # Display fields are dropped on auto-merge but must still be well-formed.
        parse_interstitial(interstitial)
        parse_redirect_delay(redirect_delay)
        new_id = self._claim_id(link_id)

        existing_id = self.find_by_url(url)
        if existing_id is not None:
            existing = self.links.read(existing_id)
            if isinstance(existing, LinkRecord):
                self.links.write(new_id, AliasPointer(alias_of=existing_id))
                updated = replace(existing, aliases=existing.aliases + [new_id])
                self.links.write(existing_id, updated)
                log.info("auto-merged %s into %s (%s)", new_id, existing_id, url)
                body = to_response(existing_id, updated)
                body.update(merged=True, aliasId=new_id)
                return body

        record = build_record(url, self.clock(), title, description, interstitial, redirect_delay)
        self.links.write(new_id, record)
        log.info("created link %s -> %s", new_id, url)
        return to_response(new_id, record)

    def get(self, link_id: str) -> Dict[str, Any]:
        """Return the canonical link `link_id` resolves to (NotFound otherwise)."""
        resolved = self.resolver.require(link_id)
        return to_response(resolved.canonical_id, resolved.record)

    def update(
        self,
        link_id: str,
        url: Optional[str],
        title: Optional[str] = None,
        description: Optional[str] = None,
        interstitial: Optional[str] = None,
        redirect_delay: Optional[Number] = None,
    ) -> Dict[str, Any]:
        """
        Replace the fields of the canonical link `link_id` resolves to.

        `createdAt` and the alias list are carried over unchanged; every other
        field is rebuilt from the payload, so omitted optionals are cleared.
        """
        resolved = self.resolver.require(link_id)
        current = resolved.record
        updated = build_record(url, current.created_at, title, description, interstitial, redirect_delay)
        updated.aliases = list(current.aliases)
        self.links.write(resolved.canonical_id, updated)
        return to_response(resolved.canonical_id, updated)

    def delete(self, link_id: str) -> None:
        """
        Delete an identifier slot.

        - Alias pointer: the alias is also dropped from its canonical's list.
        - Canonical link: every listed alias pointer is deleted too.
        - Missing: nothing happens.
        """
        slot = self.links.read(link_id)
        if isinstance(slot, AliasPointer):
            owner = self.links.read(slot.alias_of)
            if isinstance(owner, LinkRecord):
                remaining = [a for a in owner.aliases if a != link_id]
                self.links.write(slot.alias_of, replace(owner, aliases=remaining))
        elif isinstance(slot, LinkRecord):
            for alias_id in slot.aliases:
                self.links.delete(alias_id)
            if slot.aliases:
                log.info("deleted %d alias(es) of %s", len(slot.aliases), link_id)
        self.links.delete(link_id)

    def list(self) -> List[Dict[str, Any]]:
        """Return every canonical link (alias pointers excluded), in key order."""
        return [to_response(link_id, record) for link_id, record in self.links.scan_canonical()]
