"""Summary: FastAPI application for Quiet Quotes.

Importance: Exposes the context signal, quotes, and preferences to page clients.
Alternatives: Use a CLI-only workflow or a different web framework.
"""

from __future__ import annotations

import dataclasses
import logging
from typing import Any

from fastapi import Depends, FastAPI, Header, HTTPException
from pydantic import BaseModel, Field

from quietquotes.app import build_context
from quietquotes.background import handle_message
from quietquotes.config import AppConfig
from quietquotes.models import CONTEXT_KEY, Category
from quietquotes.monitor import ContextMonitor
from quietquotes.preferences import InvalidPreferenceError, InvalidShortcutError
from quietquotes.sources import StaticContentSource, detect_site
from quietquotes.storage.kv_store import LOCAL, KeyValueStore


class ClassifyRequest(BaseModel):
    """Summary: Request payload for ad-hoc classification.

    Importance: Lets clients inspect scores without touching stored context.
    Alternatives: Classify only through the monitor.
    """

    text: str


class ObserveRequest(BaseModel):
    """Summary: Request payload carrying the visible blocks of a chat page.

    Importance: Feeds the context monitor for one host.
    Alternatives: Scrape pages server-side.
    """

    hostname: str
    blocks: list[str] = Field(default_factory=list)
    flush: bool = False


class ContextUpdateRequest(BaseModel):
    """Summary: Request payload for overriding the stored context.

    Importance: Supports manual context selection from settings.
    Alternatives: Only allow the monitor to write the context.
    """

    category: str


class PreferencesUpdateRequest(BaseModel):
    """Summary: Request payload for preference updates.

    Importance: Keeps partial updates explicit for API clients.
    Alternatives: Replace the whole preference document.
    """

    values: dict[str, Any]


class ShortcutCreateRequest(BaseModel):
    """Summary: Request payload for pinning a shortcut.

    Importance: Validation happens in the shortcut service.
    Alternatives: Validate URLs with a pydantic URL type.
    """

    url: str
    title: str = ""


def create_app(config: AppConfig, store: KeyValueStore | None = None) -> FastAPI:
    """Summary: Create a FastAPI app wired to Quiet Quotes components.

    Importance: Ensures the API layer shares the same configuration and storage.
    Alternatives: Instantiate services globally outside the factory.
    """

    if not logging.getLogger().handlers:
        logging.basicConfig(level=config.log_level, format="%(levelname)s %(name)s: %(message)s")
    app = FastAPI(title="Quiet Quotes API", version="0.1.0")
    context = build_context(config, store=store)
    monitors: dict[str, ContextMonitor] = {}

    def require_api_key(x_api_key: str | None = Header(default=None)) -> None:
        """Summary: Enforce API key authentication when configured.

        Importance: Adds a minimal security layer for local and private deployments.
        Alternatives: Use OAuth or session-based authentication.
        """

        if not config.api_key:
            return
        if x_api_key != config.api_key:
            raise HTTPException(status_code=401, detail="Invalid API key")

    def pump_timers() -> None:
        # Requests are the only ticks the server gets, so due debounced writes run here.
        context.timers.run_due()

    guarded = [Depends(require_api_key), Depends(pump_timers)]

    @app.get("/health")
    def health() -> dict[str, str]:
        """Summary: Health check endpoint.

        Importance: Supports uptime checks in local deployments.
        Alternatives: Use a metrics endpoint only.
        """

        return {"status": "ok"}

    @app.post("/classify", dependencies=guarded)
    def classify(payload: ClassifyRequest) -> dict[str, Any]:
        """Summary: Classify text and return per-category scores.

        Importance: Makes the keyword evidence visible for debugging.
        Alternatives: Return only the label.
        """

        text = payload.text.lower()
        category = context.classifier.classify(text)
        scores = context.classifier.score(text)
        return {
            "category": category.value,
            "scores": {item.value: value for item, value in scores.items()},
        }

    @app.post("/context/observe", dependencies=guarded)
    def observe(payload: ObserveRequest) -> dict[str, Any]:
        """Summary: Feed visible chat blocks to the monitor for a host.

        Importance: Unrecognized hosts are accepted but never classified.
        Alternatives: Reject unknown hosts with an error.
        """

        site = detect_site(payload.hostname)
        if site is None:
            return {"recognized": False, "category": None, "pending": False}
        monitor = monitors.get(site.name)
        if monitor is None:
            monitor = context.monitor_for(StaticContentSource(site=site))
            monitors[site.name] = monitor
        monitor.source.replace(payload.blocks)
        category = monitor.process()
        flushed = monitor.flush() if payload.flush else False
        return {
            "recognized": True,
            "category": category.value if category else None,
            "pending": not flushed and category is not None,
        }

    @app.get("/context", dependencies=guarded)
    def get_context() -> dict[str, Any]:
        """Summary: Return the stored context category.

        Importance: Mirrors the GET_CONTEXT runtime message.
        Alternatives: Let clients read storage directly.
        """

        return handle_message(context.store, {"type": "GET_CONTEXT"}) or {}

    @app.put("/context", dependencies=guarded)
    def put_context(payload: ContextUpdateRequest) -> dict[str, Any]:
        """Summary: Override the stored context category.

        Importance: Keeps stored values within the enumerated set.
        Alternatives: Store any label and parse it at read time.
        """

        try:
            category = Category(payload.category.lower())
        except ValueError as exc:
            raise HTTPException(status_code=400, detail="Unknown category") from exc
        context.store.set(LOCAL, {CONTEXT_KEY: category.value})
        return {"category": category.value}

    @app.get("/quote", dependencies=guarded)
    def quote() -> dict[str, Any]:
        """Summary: Select a quote for the current context.

        Importance: Serves the main new tab content.
        Alternatives: Return the whole corpus to the client.
        """

        view = context.new_tab()
        view.open()
        selected = view.state.quote
        view.close()
        return {
            "quote": selected.text,
            "author": selected.author,
            "category": view.state.category.value,
            "indicator": view.context_indicator(),
        }

    @app.get("/newtab", dependencies=guarded)
    def newtab() -> dict[str, Any]:
        """Summary: Return the full new tab snapshot.

        Importance: Gives thin clients everything they need in one call.
        Alternatives: Compose the page from several endpoints.
        """

        view = context.new_tab()
        snapshot = view.open()
        view.close()
        return dataclasses.asdict(snapshot)

    @app.get("/preferences", dependencies=guarded)
    def get_preferences() -> dict[str, Any]:
        return context.preferences.load()

    @app.put("/preferences", dependencies=guarded)
    def put_preferences(payload: PreferencesUpdateRequest) -> dict[str, Any]:
        """Summary: Validate and store preference updates.

        Importance: Invalid input is rejected without partial writes.
        Alternatives: Store valid keys and ignore the rest.
        """

        try:
            return context.preferences.save(payload.values)
        except InvalidPreferenceError as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc

    @app.get("/shortcuts", dependencies=guarded)
    def list_shortcuts() -> list[dict[str, str]]:
        return [item.to_record() for item in context.shortcuts.list_shortcuts()]

    @app.post("/shortcuts", dependencies=guarded)
    def add_shortcut(payload: ShortcutCreateRequest) -> dict[str, str]:
        """Summary: Pin a shortcut.

        Importance: Malformed URLs are rejected at the boundary.
        Alternatives: Accept any URL string.
        """

        try:
            return context.shortcuts.add(payload.title, payload.url).to_record()
        except InvalidShortcutError as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc

    @app.delete("/shortcuts", dependencies=guarded)
    def remove_shortcut(url: str) -> dict[str, str]:
        try:
            removed = context.shortcuts.remove(url)
        except InvalidShortcutError as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc
        if not removed:
            raise HTTPException(status_code=404, detail="Shortcut not found")
        return {"status": "ok"}

    @app.get("/badge", dependencies=guarded)
    def badge() -> dict[str, str]:
        return dataclasses.asdict(context.badge_sink.current)

    return app


def create_default_app() -> FastAPI:
    """Summary: Build the app from environment configuration.

    Importance: Entry point for `uvicorn --factory quietquotes.api:create_default_app`.
    Alternatives: Build the app at import time.
    """

    return create_app(AppConfig.from_env())
