"""
Strategies for generated link identifiers.

Provided strategies:
- RandomStrategy: random lowercase alphanumeric ID of a fixed length
  (default from settings.ID_LENGTH, 6 unless overridden)

Generated IDs are not guaranteed unique; the registry checks the store and
retries a bounded number of times.
"""

import secrets
import string
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Dict, Optional, Type

from ..config import settings

ID_ALPHABET = string.ascii_lowercase + string.digits


class BaseIdStrategy(ABC):
    """Abstract base for ID generation strategies."""

    @abstractmethod
    def generate(self) -> str:  # pragma: no cover
        raise NotImplementedError


@dataclass(frozen=True)
class RandomStrategy(BaseIdStrategy):
    """Uniform random IDs over [a-z0-9] from the `secrets` CSPRNG."""

    length: int = 6

    def generate(self) -> str:
        return "".join(secrets.choice(ID_ALPHABET) for _ in range(self.length))


STRATEGY_REGISTRY: Dict[str, Type[BaseIdStrategy]] = {
    "random": RandomStrategy,
}


def get_id_strategy(name: Optional[str] = None) -> BaseIdStrategy:
    """Resolve a strategy by name (default "random"), wired from settings."""
    key = (name or "random").strip().lower()
    cls = STRATEGY_REGISTRY.get(key)
    if cls is None:
        raise ValueError(f"Unknown ID strategy: {key!r}")
    return cls(length=settings.ID_LENGTH)
