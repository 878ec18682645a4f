"""
Link record codec for Relink.

Every identifier lives under one key, `link:<id>`, and that slot holds exactly
one of two variants:

    LinkRecord    {"url", "createdAt", "title"?, "description"?,
                   "interstitial"?, "redirectDelay"?, "aliases"?}
    AliasPointer  {"aliasOf": "<canonical id>"}

The variant is told apart by the presence of `aliasOf`. Store values are JSON
with the camelCase field names the HTTP API also uses, so a raw dump of the
store reads the same as API responses.

LLM Prompt Example:
    "Show how to model a tagged union over a single key namespace with
    dataclasses, decoding on a marker field instead of a type column."
"""

import json
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Union

from ..errors import StorageError

LINK_PREFIX = "link:"


def link_key(link_id: str) -> str:
    """Return the store key for an identifier slot."""
    return f"{LINK_PREFIX}{link_id}"


def id_from_key(key: str) -> str:
    return key[len(LINK_PREFIX):]


@dataclass
class LinkRecord:
    """A canonical link: owns a destination and its display overrides.

    `interstitial` is tri-state: True (always), False (never), None (defer to
    the global config). `redirect_delay` None likewise defers to the global
    config. `aliases` is an insertion-ordered set of alias IDs.
    """

    url: str
    created_at: int
    title: Optional[str] = None
    description: Optional[str] = None
    interstitial: Optional[bool] = None
    redirect_delay: Optional[float] = None
    aliases: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class AliasPointer:
    """An identifier that redirects to the canonical link `alias_of`."""

    alias_of: str


SlotRecord = Union[LinkRecord, AliasPointer]


def encode(record: SlotRecord) -> str:
    """Serialize a slot record to its JSON store value.

    Unset optional fields are omitted rather than written as null.
    """
    if isinstance(record, AliasPointer):
        return json.dumps({"aliasOf": record.alias_of})

    data: Dict[str, Any] = {"url": record.url, "createdAt": record.created_at}
    if record.title:
        data["title"] = record.title
    if record.description:
        data["description"] = record.description
    if record.interstitial is not None:
        data["interstitial"] = record.interstitial
    if record.redirect_delay is not None:
        data["redirectDelay"] = record.redirect_delay
    if record.aliases:
        data["aliases"] = list(record.aliases)
    return json.dumps(data)


def decode(raw: str, key: str = "?") -> SlotRecord:
    """Parse a store value into a LinkRecord or AliasPointer.

    Raises:
        StorageError: If the value is not a JSON object of either variant.
    """
    try:
        data = json.loads(raw)
    except ValueError as exc:
        raise StorageError(f"Corrupt record under {key!r}") from exc
    if not isinstance(data, dict):
        raise StorageError(f"Corrupt record under {key!r}")

    if "aliasOf" in data:
        return AliasPointer(alias_of=str(data["aliasOf"]))

    if "url" not in data:
        raise StorageError(f"Corrupt record under {key!r}: missing url")
    return LinkRecord(
        url=data["url"],
        created_at=int(data.get("createdAt", 0)),
        title=data.get("title") or None,
        description=data.get("description") or None,
        interstitial=data.get("interstitial"),
        redirect_delay=data.get("redirectDelay"),
        aliases=list(data.get("aliases") or []),
    )


def to_response(link_id: str, record: LinkRecord) -> Dict[str, Any]:
    """
    Build the public JSON representation of a canonical link.

    `id`, `url` and `createdAt` are always present; every other field only
    appears when set (never as null), and `aliases` only when non-empty.
    """
    out: Dict[str, Any] = {"id": link_id, "url": record.url, "createdAt": record.created_at}
    if record.title:
        out["title"] = record.title
    if record.description:
        out["description"] = record.description
    if record.interstitial is not None:
        out["interstitial"] = record.interstitial
    if record.redirect_delay is not None:
        out["redirectDelay"] = record.redirect_delay
    if record.aliases:
        out["aliases"] = list(record.aliases)
    return out
