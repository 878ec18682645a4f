"""
Global interstitial settings record.

Stored as a single JSON object under `__config__`. Missing fields (or a
missing record) fall back to DEFAULT_CONFIG, so readers always get a
complete config.
"""

import json
from dataclasses import asdict, dataclass
from typing import Any, Dict

from ..errors import StorageError

CONFIG_KEY = "__config__"


@dataclass
class GlobalConfig:
    defaultInterstitial: bool = False
    interstitialTitle: str = "You are being redirected"
    interstitialDescription: str = "You are about to visit an external website."
    redirectDelay: float = 0  # seconds; 0 = no auto-redirect

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


DEFAULT_CONFIG = GlobalConfig()

_FIELDS = set(DEFAULT_CONFIG.to_dict())


def decode_config(raw: str) -> GlobalConfig:
    """Merge a stored (possibly partial) config over the defaults."""
    try:
        data = json.loads(raw)
    except ValueError as exc:
        raise StorageError(f"Corrupt record under {CONFIG_KEY!r}") from exc
    merged = DEFAULT_CONFIG.to_dict()
    if isinstance(data, dict):
        merged.update({k: v for k, v in data.items() if k in _FIELDS})
    return GlobalConfig(**merged)


def encode_config(config: GlobalConfig) -> str:
    return json.dumps(config.to_dict())
