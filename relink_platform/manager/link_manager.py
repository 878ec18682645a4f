"""
LinkManager module for Relink.

Responsibilities:
    - Wire the resolver, registry, alias manager and merge engine to one store
    - Offer the operations the HTTP layer calls (one method per route)
    - Produce the public resolve view, with global-config fallbacks

Design notes:
    - Everything reads and writes the key-value store directly; nothing is
      cached between calls, so any number of app workers can share a store.
    - Storage, ID strategy and clock are injected for tests.

LLM Prompt Example:
    "Show how a thin facade can compose small single-purpose services
    (resolver, registry, alias manager, merge engine) over a shared store."
"""

from typing import Any, Callable, Dict, Iterable, List, Optional

from ..errors import NotFound
from ..storage.base import BaseStorage
from .alias_manager import AliasManager
from .config_service import ConfigService
from .id_strategies import BaseIdStrategy, get_id_strategy
from .link_registry import LinkRegistry, epoch_millis
from .link_store import LinkStore
from .merge_engine import MergeEngine
from .resolver import Resolved, Resolver
from .validation import Number


class LinkManager:
    def __init__(
        self,
        storage: BaseStorage,
        id_strategy: Optional[BaseIdStrategy] = None,
        clock: Callable[[], int] = epoch_millis,
    ):
        self.storage = storage
        self.links = LinkStore(storage)
        self.resolver = Resolver(self.links)
        self.registry = LinkRegistry(
            self.links, self.resolver, id_strategy=id_strategy or get_id_strategy(), clock=clock
        )
        self.aliases = AliasManager(self.links)
        self.merger = MergeEngine(self.links)
        self.config = ConfigService(storage)

    # ---------------------------------------------------------------------
    # Read path
    # ---------------------------------------------------------------------
    def resolve(self, link_id: str) -> Optional[Resolved]:
        return self.resolver.resolve(link_id)

    def resolve_view(self, link_id: str) -> Dict[str, Any]:
        """
        Return what the interstitial page needs for `link_id`.

        `title`, `description`, `redirectDelay` and `interstitial` fall back
        to the global config when the link leaves them unset.

        Raises:
            NotFound: If `link_id` does not resolve.
        """
        resolved = self.resolver.resolve(link_id)
        if resolved is None:
            raise NotFound("Not found")
        record = resolved.record
        config = self.config.get_config()
        return {
            "url": record.url,
            "title": record.title if record.title is not None else config.interstitialTitle,
            "description": (
                record.description if record.description is not None else config.interstitialDescription
            ),
            "redirectDelay": (
                record.redirect_delay if record.redirect_delay is not None else config.redirectDelay
            ),
            "interstitial": (
                record.interstitial if record.interstitial is not None else config.defaultInterstitial
            ),
        }

    # ---------------------------------------------------------------------
    # Links
    # ---------------------------------------------------------------------
    def list_links(self) -> List[Dict[str, Any]]:
        return self.registry.list()

    def get_link(self, link_id: str) -> Dict[str, Any]:
        return self.registry.get(link_id)

    def create_link(
        self,
        url: Optional[str],
        link_id: Optional[str] = None,
        title: Optional[str] = None,
        description: Optional[str] = None,
        interstitial: Optional[str] = None,
        redirect_delay: Optional[Number] = None,
    ) -> Dict[str, Any]:
        return self.registry.create(url, link_id, title, description, interstitial, redirect_delay)

    def update_link(
        self,
        link_id: str,
        url: Optional[str],
        title: Optional[str] = None,
        description: Optional[str] = None,
        interstitial: Optional[str] = None,
        redirect_delay: Optional[Number] = None,
    ) -> Dict[str, Any]:
        return self.registry.update(link_id, url, title, description, interstitial, redirect_delay)

    def delete_link(self, link_id: str) -> None:
        self.registry.delete(link_id)

    # ---------------------------------------------------------------------
    # Aliases & merge
    # ---------------------------------------------------------------------
    def add_alias(self, primary_id: str, alias: Optional[str]) -> Dict[str, Any]:
        return self.aliases.add_alias(primary_id, alias)

    def remove_alias(self, primary_id: str, alias_id: str) -> Dict[str, Any]:
        return self.aliases.remove_alias(primary_id, alias_id)

    def merge(self, scope_ids: Optional[Iterable[str]] = None) -> int:
        return self.merger.merge(scope_ids)
