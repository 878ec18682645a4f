"""
Input validation and payload-to-record rules shared by create and update.
"""

import re
from typing import Optional, Union
from urllib.parse import urlparse

from ..errors import InvalidInput
from ..records.codec import LinkRecord

ID_PATTERN = re.compile(r"[A-Za-z0-9_-]{1,50}")
SCHEME_PATTERN = re.compile(r"[A-Za-z][A-Za-z0-9+.-]*")
HOST_SCHEMES = {"http", "https", "ws", "wss", "ftp"}

# Payload value -> stored tri-state (None = defer to global config)
INTERSTITIAL_MODES = {"default": None, "always": True, "never": False}

Number = Union[int, float]


def validate_id(link_id: str, label: str = "ID") -> str:
    """
    Check an identifier against the slot charset and length.

    Raises:
        InvalidInput: If the ID is empty, longer than 50 chars, or uses
                      characters outside a-z, A-Z, 0-9, '_' and '-'.
    """
    if not isinstance(link_id, str) or not ID_PATTERN.fullmatch(link_id):
        raise InvalidInput(f"{label} must be 1-50 chars: a-z, A-Z, 0-9, _ or -")
    return link_id


def validate_url(url: Optional[str]) -> str:
    """
    Require a syntactically valid absolute URL.

    Any scheme is accepted (`mailto:x@y`, `file:///p`); the network schemes
    in HOST_SCHEMES additionally need a host.

    Raises:
        InvalidInput: "URL required" when missing, "Invalid URL" when malformed.
    """
    if not url:
        raise InvalidInput("URL required")
    if not isinstance(url, str):
        raise InvalidInput("Invalid URL")
    try:
        parsed = urlparse(url)
        parsed.port  # raises ValueError on a malformed port
    except ValueError:
        raise InvalidInput("Invalid URL")
    if not SCHEME_PATTERN.fullmatch(parsed.scheme):
        raise InvalidInput("Invalid URL")
    if parsed.scheme in HOST_SCHEMES:
        if not parsed.hostname:
            raise InvalidInput("Invalid URL")
    elif not (parsed.netloc or parsed.path):
        raise InvalidInput("Invalid URL")
    return url


def parse_interstitial(mode: Optional[str]) -> Optional[bool]:
    if mode is None:
        return None
    if mode not in INTERSTITIAL_MODES:
        raise InvalidInput("interstitial must be one of: default, always, never")
    return INTERSTITIAL_MODES[mode]


def parse_redirect_delay(value: Optional[Number]) -> Optional[Number]:
    """Clamp a numeric delay to >= 0; None means unset."""
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise InvalidInput("redirectDelay must be a number")
    return max(0, value)


def build_record(
    url: Optional[str],
    created_at: int,
    title: Optional[str] = None,
    description: Optional[str] = None,
    interstitial: Optional[str] = None,
    redirect_delay: Optional[Number] = None,
) -> LinkRecord:
    """
    Build a canonical record from a create/update payload.

    Empty title/description are dropped; `interstitial` is only stored for
    "always"/"never"; `redirect_delay` only when a number was given.
    Aliases are never set here.
    """
    return LinkRecord(
        url=validate_url(url),
        created_at=created_at,
        title=title or None,
        description=description or None,
        interstitial=parse_interstitial(interstitial),
        redirect_delay=parse_redirect_delay(redirect_delay),
    )
