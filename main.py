"""
Main API module for Relink.

Responsibilities:
    - Expose the admin JSON API for links, aliases, merge and global config
    - Expose the public resolve endpoint and the short-link entry point
    - Expose first-time setup, login/logout and password change
    - Render every failure as {"error": "..."} with a meaningful status

Architecture:
    - App Factory pattern (create_app) for test isolation and DI.
    - In-memory storage by default; PostgreSQL via RELINK_STORAGE_BACKEND=postgres.
    - LinkManager owns link semantics; AuthService owns credentials and sessions.
      Routes only translate HTTP to those calls.

LLM Prompt Example:
    "Explain how to structure a FastAPI service with an application factory,
    injected dependencies, and a clean separation between API and business logic."
"""

import logging
from typing import Any, Callable, Dict, List, Optional, Union

from fastapi import Depends, FastAPI, Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, RedirectResponse
from pydantic import BaseModel
from starlette.exceptions import HTTPException as StarletteHTTPException

from auth.dependencies import bearer_token, require_admin
from auth.schemas import OkOut, PasswordChangeIn, PasswordIn, StatusOut, TokenOut
from auth.service import AuthService
from relink_platform.config import settings
from relink_platform.errors import RelinkError
from relink_platform.manager.id_strategies import BaseIdStrategy
from relink_platform.manager.link_manager import LinkManager
from relink_platform.storage.base import BaseStorage
from relink_platform.storage.storage_factory import get_storage


class LinkIn(BaseModel):
    """Create/update payload. `interstitial` is "default" | "always" | "never"."""
    id: Optional[str] = None
    url: Optional[str] = None
    title: Optional[str] = None
    description: Optional[str] = None
    interstitial: Optional[str] = None
    redirectDelay: Optional[Union[int, float]] = None


class AliasIn(BaseModel):
    alias: Optional[str] = None


class MergeIn(BaseModel):
    ids: Optional[List[str]] = None


class ConfigIn(BaseModel):
    defaultInterstitial: Optional[bool] = None
    interstitialTitle: Optional[str] = None
    interstitialDescription: Optional[str] = None
    redirectDelay: Optional[Union[int, float]] = None


def create_app(
    storage: Optional[BaseStorage] = None,
    id_strategy: Optional[BaseIdStrategy] = None,
    clock: Optional[Callable[[], int]] = None,
    no_token: Optional[bool] = None,
) -> FastAPI:
    """
    Factory function to build and configure a new FastAPI app instance.

    Args:
        storage: Key-value backend; defaults to `get_storage()` (env-selected).
        id_strategy: Generator for omitted link IDs.
        clock: Epoch-milliseconds time source for `createdAt`.
        no_token: Skip admin token checks; defaults to RELINK_NO_TOKEN.

    Returns:
        FastAPI: A fully configured application with its own storage.

    Why an app factory?
        - Enables per-test isolation in pytest.
        - Lets tests inject a store, clock or ID strategy without patching.
    """
    app = FastAPI(
        title="Relink",
        description="URL shortener with aliases, duplicate merging and interstitial pages",
        docs_url="/docs",
    )
    log = logging.getLogger("relink")

    if not logging.getLogger().handlers:
        logging.basicConfig(level=settings.LOG_LEVEL)

    # ----------------------------------------------------------------
    # Per-app instances (isolated for tests, swappable for production)
    # ----------------------------------------------------------------
    store = storage if storage is not None else get_storage()
    manager_kwargs: Dict[str, Any] = {"id_strategy": id_strategy}
    if clock is not None:
        manager_kwargs["clock"] = clock
    links = LinkManager(store, **manager_kwargs)
    auth = AuthService(store, no_token=settings.NO_TOKEN if no_token is None else no_token)

    app.state.manager = links
    app.state.auth = auth
    log.info("Relink storage backend: %s", type(store).__name__)

    # ----------------------------------------------------------------
    # Error rendering
    # ----------------------------------------------------------------
    @app.exception_handler(RelinkError)
    async def _relink_error(request: Request, exc: RelinkError) -> JSONResponse:
        if exc.status_code >= 500:
            log.error("%s %s failed: %s", request.method, request.url.path, exc.message)
        return JSONResponse({"error": exc.message}, status_code=exc.status_code)

    @app.exception_handler(RequestValidationError)
    async def _validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
        return JSONResponse({"error": "Invalid request body"}, status_code=400)

    @app.exception_handler(StarletteHTTPException)
    async def _http_error(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        return JSONResponse({"error": str(exc.detail)}, status_code=exc.status_code)

    # Health check
    @app.get("/health")
    def health():
        return {"status": "ok"}

    # ----------------------------------------------------------------
    # Public routes
    # ----------------------------------------------------------------
    @app.get("/api/status", response_model=StatusOut)
    def status():
        return auth.status()

    @app.post("/api/setup", response_model=OkOut)
    def setup(body: PasswordIn):
        auth.setup(body.password)
        return {"ok": True}

    @app.post("/api/auth", response_model=TokenOut)
    def login(body: PasswordIn):
        return {"token": auth.login(body.password)}

    @app.post("/api/logout", response_model=OkOut)
    def logout(token: Optional[str] = Depends(bearer_token)):
        auth.logout(token)
        return {"ok": True}

    @app.get("/api/resolve/{link_id}")
    def resolve(link_id: str) -> Dict[str, Any]:
        """
        Resolve an ID (canonical or alias) for the interstitial page.

        Display fields the link leaves unset come from the global config.
        """
        return links.resolve_view(link_id)

    # ----------------------------------------------------------------
    # Admin routes
    # ----------------------------------------------------------------
    admin = [Depends(require_admin)]

    @app.post("/api/password", response_model=OkOut, dependencies=admin)
    def change_password(body: PasswordChangeIn):
        auth.change_password(body.currentPassword, body.newPassword)
        return {"ok": True}

    @app.get("/api/config", dependencies=admin)
    def get_config() -> Dict[str, Any]:
        return links.config.get_config().to_dict()

    @app.put("/api/config", dependencies=admin)
    def put_config(body: ConfigIn) -> Dict[str, Any]:
        return links.config.update_config(body.model_dump(exclude_unset=True)).to_dict()

    @app.get("/api/links", dependencies=admin)
    def list_links() -> List[Dict[str, Any]]:
        return links.list_links()

    @app.post("/api/links", status_code=201, dependencies=admin)
    def create_link(body: LinkIn) -> Dict[str, Any]:
        """
        Create a link. If the URL already has a canonical link, the requested
        ID becomes its alias and the response carries `merged` and `aliasId`.
        """
        return links.create_link(
            body.url,
            link_id=body.id,
            title=body.title,
            description=body.description,
            interstitial=body.interstitial,
            redirect_delay=body.redirectDelay,
        )

    @app.get("/api/links/{link_id}", dependencies=admin)
    def get_link(link_id: str) -> Dict[str, Any]:
        return links.get_link(link_id)

    @app.put("/api/links/{link_id}", dependencies=admin)
    def update_link(link_id: str, body: LinkIn) -> Dict[str, Any]:
        return links.update_link(
            link_id,
            body.url,
            title=body.title,
            description=body.description,
            interstitial=body.interstitial,
            redirect_delay=body.redirectDelay,
        )

    @app.delete("/api/links/{link_id}", response_model=OkOut, dependencies=admin)
    def delete_link(link_id: str):
        links.delete_link(link_id)
        return {"ok": True}

    @app.post("/api/links/{link_id}/aliases", dependencies=admin)
    def add_alias(link_id: str, body: AliasIn) -> Dict[str, Any]:
        return links.add_alias(link_id, body.alias)

    @app.delete("/api/links/{link_id}/aliases/{alias_id}", dependencies=admin)
    def remove_alias(link_id: str, alias_id: str) -> Dict[str, Any]:
        return links.remove_alias(link_id, alias_id)

    @app.post("/api/merge", dependencies=admin)
    def merge(body: Optional[MergeIn] = None) -> Dict[str, int]:
        """Merge duplicate canonical links; `ids` limits the candidates."""
        scope = body.ids if body is not None else None
        return {"merged": links.merge(scope)}

    # ----------------------------------------------------------------
    # Short-link entry point (registered last: it matches any single segment)
    # ----------------------------------------------------------------
    @app.get("/{link_id}")
    def follow(link_id: str) -> Response:
        """
        Redirect (302) when the effective interstitial setting is off;
        otherwise return the interstitial view for the page to render.
        """
        view = links.resolve_view(link_id)
        if not view["interstitial"]:
            return RedirectResponse(url=view["url"], status_code=302)
        return JSONResponse(view)

    return app


# `uvicorn main:app --reload` and `from main import app` continue to work.
app = create_app()
