"""
FastAPI entrypoint.

This file focuses on:
- routing
- request/response handling
- wiring together settings + store + fetcher + controller + templates

All behavior lives in the controller; routes only translate HTTP into its
operations and render snapshots.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, Optional

from fastapi import FastAPI, Request, HTTPException, Query
from fastapi.responses import HTMLResponse, JSONResponse
from fastapi.templating import Jinja2Templates

from . import display
from .controller import Fetcher, SearchController, SearchStatus, WidgetSnapshot
from .db import make_engine, make_session_factory
from .errors import NothingDisplayedError
from .persistent_list import PersistentList
from .schemas import SearchRequest, SelectRequest
from .settings import Settings, get_settings
from .storage import KeyValueStore, SqlKeyValueStore
from .weather_clients import WeatherFetcher

logger = logging.getLogger(__name__)

TEMPLATES_DIR = Path(__file__).parent / "templates"


def snapshot_to_dict(snapshot: WidgetSnapshot) -> Dict[str, Any]:
    """Convert a controller snapshot -> dict for JSON/templates."""
    state = snapshot.state
    return {
        "state": {
            "status": state.status.value,
            "record": state.record.model_dump() if state.record else None,
            "message": state.message,
        },
        "search_term": snapshot.search_term,
        "favorites": [r.model_dump() for r in snapshot.favorites],
        "history": [r.model_dump() for r in snapshot.history],
    }


def create_app(
    settings: Optional[Settings] = None,
    fetcher: Optional[Fetcher] = None,
    store: Optional[KeyValueStore] = None,
) -> FastAPI:
    settings = settings or get_settings()
    logging.basicConfig(level=settings.log_level)

    if store is None:
        store = SqlKeyValueStore(make_session_factory(make_engine(settings.sqlite_path)))
    if fetcher is None:
        fetcher = WeatherFetcher.from_settings(settings)

    controller = SearchController.from_settings(settings, fetcher, store)
    logger.info(
        "Loaded %d favorites and %d history entries",
        len(controller.favorites),
        len(controller.history),
    )

    app = FastAPI(title=settings.app_name)
    app.state.controller = controller

    templates = Jinja2Templates(directory=str(TEMPLATES_DIR))
    templates.env.globals.update(
        weather_icon=display.weather_icon,
        temperature_label=display.temperature_label,
        temperature_theme=display.temperature_theme,
        forecast_date_label=display.forecast_date_label,
    )

    def select_stored(stored: PersistentList, name: str) -> Dict[str, Any]:
        record = stored.find(name)
        if record is None:
            raise HTTPException(status_code=404, detail="Record not found")
        controller.select(record)
        return snapshot_to_dict(controller.snapshot())

    # -------------------------
    # UI routes
    # -------------------------

    def render_page(request: Request, status_code: int = 200):
        return templates.TemplateResponse(
            request,
            "index.html",
            {
                "app_name": settings.app_name,
                "snapshot": controller.snapshot(),
            },
            status_code=status_code,
        )

    @app.get("/", response_class=HTMLResponse)
    async def home(request: Request):
        """Search box, current city, forecast, favorites and history."""
        return render_page(request)

    @app.get("/search", response_class=HTMLResponse)
    async def search_page(request: Request, term: str = Query("")):
        """Target of the page's search form. Renders the same page, with 400 on error."""
        state = await controller.submit(term)
        return render_page(request, status_code=400 if state.status is SearchStatus.ERROR else 200)

    # -------------------------
    # Widget APIs
    # -------------------------

    @app.get("/api/state")
    async def api_state():
        return snapshot_to_dict(controller.snapshot())

    @app.post("/api/search")
    async def api_search(payload: SearchRequest):
        """Confirm a search. Error state is reported with status 400."""
        state = await controller.submit(payload.term)
        body = snapshot_to_dict(controller.snapshot())
        if state.status is SearchStatus.ERROR:
            return JSONResponse(body, status_code=400)
        return body

    @app.post("/api/favorites")
    async def api_add_favorite():
        """Save the displayed city."""
        try:
            controller.add_to_favorites()
        except NothingDisplayedError as e:
            raise HTTPException(status_code=409, detail=str(e))
        return snapshot_to_dict(controller.snapshot())

    @app.delete("/api/favorites/{name:path}")
    async def api_remove_favorite(name: str):
        controller.remove_from_favorites(name)
        return snapshot_to_dict(controller.snapshot())

    @app.post("/api/favorites/select")
    async def api_select_favorite(payload: SelectRequest):
        return select_stored(controller.favorites, payload.name)

    @app.delete("/api/history/{name:path}")
    async def api_delete_history(name: str):
        controller.delete_from_history(name)
        return snapshot_to_dict(controller.snapshot())

    @app.post("/api/history/select")
    async def api_select_history(payload: SelectRequest):
        return select_stored(controller.history, payload.name)

    return app
