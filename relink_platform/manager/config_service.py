"""
ConfigService: read and update the global interstitial settings.

The record lives in the same store as links. Reads always return a complete
config (stored fields merged over defaults); writes merge a partial update
over the current config and persist the whole record.
"""

import logging
from typing import Any, Dict

from ..errors import InvalidInput
from ..records.global_config import CONFIG_KEY, DEFAULT_CONFIG, GlobalConfig, decode_config, encode_config
from ..storage.base import BaseStorage

log = logging.getLogger(__name__)

_VALIDATORS = {
    "defaultInterstitial": lambda v: isinstance(v, bool),
    "interstitialTitle": lambda v: isinstance(v, str),
    "interstitialDescription": lambda v: isinstance(v, str),
    "redirectDelay": lambda v: isinstance(v, (int, float)) and not isinstance(v, bool) and v >= 0,
}


class ConfigService:
    def __init__(self, storage: BaseStorage):
        self.storage = storage

    def get_config(self) -> GlobalConfig:
        raw = self.storage.get(CONFIG_KEY)
        if raw is None:
            return GlobalConfig(**DEFAULT_CONFIG.to_dict())
        return decode_config(raw)

    def update_config(self, changes: Dict[str, Any]) -> GlobalConfig:
        """
        Apply a partial update. Unknown keys are ignored.

        Raises:
            InvalidInput: If a known field has the wrong type, or
                          `redirectDelay` is negative.
        """
        current = self.get_config().to_dict()
        for name, value in changes.items():
            check = _VALIDATORS.get(name)
            if check is None:
                continue
            if not check(value):
                raise InvalidInput(f"Invalid value for {name}")
            current[name] = value
        updated = GlobalConfig(**current)
        self.storage.put(CONFIG_KEY, encode_config(updated))
        log.info("global config updated: %s", sorted(k for k in changes if k in _VALIDATORS))
        return updated
