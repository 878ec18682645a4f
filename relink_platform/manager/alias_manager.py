"""
AliasManager: manual aliases on canonical links.

Keeps both sides of the relationship in step: the alias pointer record at
`link:<alias>` and the alias list stored on the canonical record. Aliases
always target a canonical link directly; aliasing an alias is rejected so
chains never grow past one hop.
"""

import logging
from dataclasses import replace
from typing import Any, Dict, Optional

from ..errors import Conflict, InvalidInput, NotFound
from ..records.codec import AliasPointer, LinkRecord, to_response
from .link_store import LinkStore
from .validation import validate_id

log = logging.getLogger(__name__)


class AliasManager:
    def __init__(self, links: LinkStore):
        self.links = links

    def _primary(self, primary_id: str) -> LinkRecord:
        slot = self.links.read(primary_id)
        if slot is None:
            raise NotFound("Not found")
        if isinstance(slot, AliasPointer):
            raise InvalidInput("Cannot add alias to an alias")
        return slot

    def add_alias(self, primary_id: str, alias: Optional[str]) -> Dict[str, Any]:
        """
        Point a new identifier at the canonical link `primary_id`.

        Raises:
            NotFound: `primary_id` does not exist.
            InvalidInput: `primary_id` is an alias, or `alias` is malformed.
            Conflict: `alias` is already taken.
        """
        primary = self._primary(primary_id)
        clean = validate_id((alias or "").strip(), label="Alias ID")
        if self.links.exists(clean):
            raise Conflict("ID already exists")

        self.links.write(clean, AliasPointer(alias_of=primary_id))
        aliases = primary.aliases if clean in primary.aliases else primary.aliases + [clean]
        updated = replace(primary, aliases=aliases)
        self.links.write(primary_id, updated)
        log.info("added alias %s -> %s", clean, primary_id)
        return to_response(primary_id, updated)

    def remove_alias(self, primary_id: str, alias_id: str) -> Dict[str, Any]:
        """
        Detach `alias_id` from the canonical link `primary_id` and free it.

        The alias slot is deleted even when it was missing from the list.
        Removing an alias that no longer exists is not an error. A slot that
        holds a canonical link, or an alias of a different link, is left alone
        and reported as InvalidInput.
        """
        slot = self.links.read(primary_id)
        if not isinstance(slot, LinkRecord):
            raise NotFound("Not found")

        target = self.links.read(alias_id)
        # Stricter than a blind delete: freeing another link's slot here would
        # orphan its aliases or leave a stale entry in its alias list.
        if isinstance(target, LinkRecord) or (
            isinstance(target, AliasPointer) and target.alias_of != primary_id
        ):
            raise InvalidInput(f"{alias_id} is not an alias of {primary_id}")

        self.links.delete(alias_id)
        updated = replace(slot, aliases=[a for a in slot.aliases if a != alias_id])
        self.links.write(primary_id, updated)
        log.info("removed alias %s from %s", alias_id, primary_id)
        return to_response(primary_id, updated)
