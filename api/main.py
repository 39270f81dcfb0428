"""Dashboard API - FastAPI service for the earthquake dashboard.

Carries the user controls (time window, minimum magnitude, manual
refresh, auto-refresh toggle) and serves the three current views. The
refresh pipeline runs on the server's event loop.
"""

import asyncio
import logging
import os
from contextlib import asynccontextmanager
from typing import Any, Callable

from fastapi import FastAPI, HTTPException, Request, Response
from fastapi.responses import HTMLResponse
from pydantic import BaseModel

from src.dashboard import Dashboard
from src.shell.config_loader import load_config

logging.basicConfig(level=os.environ.get("LOG_LEVEL", "INFO").upper())
logger = logging.getLogger(__name__)


# ===== Request Models =====

class ControlsUpdate(BaseModel):
    time_window: str | None = None
    min_magnitude: str | None = None


# ===== App Factory =====

def _default_dashboard() -> Dashboard:
    return Dashboard(load_config())


def create_app(dashboard_factory: Callable[[], Dashboard] = _default_dashboard) -> FastAPI:
    """Build the API around a dashboard created at startup."""

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        dashboard = dashboard_factory()
        app.state.dashboard = dashboard
        dashboard.start()
        logger.info("Dashboard started")
        try:
            yield
        finally:
            await dashboard.close()
            logger.info("Dashboard stopped")

    app = FastAPI(
        title="Earthquake Dashboard API",
        description="Live USGS earthquake chart, map and table",
        version="1.0.0",
        lifespan=lifespan,
    )

    def _dashboard(request: Request) -> Dashboard:
        return request.app.state.dashboard

    def _status_payload(dashboard: Dashboard) -> dict[str, Any]:
        status = dashboard.state.status
        result = dashboard.orchestrator.last_result
        return {
            "status": status.message,
            "pulsing": status.pulsing,
            "state": dashboard.scheduler.state.value,
            "auto_refresh": dashboard.scheduler.auto_refresh,
            "controls": {
                "time_window": dashboard.controls.time_window,
                "min_magnitude": dashboard.controls.min_magnitude,
            },
            "last_cycle": None if result is None else {
                "success": result.success,
                "events_fetched": result.events_fetched,
                "error": result.error,
            },
        }

    # ===== Controls =====

    @app.get("/api/status")
    async def get_status(request: Request) -> dict[str, Any]:
        """Current status line, scheduler state and control values."""
        return _status_payload(_dashboard(request))

    @app.post("/api/refresh")
    async def refresh(request: Request) -> dict[str, Any]:
        """Manual refresh. Queued if a refresh is already running."""
        started = _dashboard(request).scheduler.trigger()
        return {"started": started, "queued": not started}

    @app.put("/api/controls")
    async def update_controls(request: Request, body: ControlsUpdate) -> dict[str, Any]:
        """Change the selectors; like a selector change, this refreshes."""
        if body.time_window is None and body.min_magnitude is None:
            raise HTTPException(status_code=400, detail="No control values given")

        dashboard = _dashboard(request)
        started = dashboard.update_controls(
            time_window=body.time_window,
            min_magnitude=body.min_magnitude,
        )
        payload = _status_payload(dashboard)
        payload["started"] = started
        return payload

    @app.post("/api/auto-refresh")
    async def toggle_auto_refresh(request: Request) -> dict[str, Any]:
        """Toggle periodic refresh."""
        enabled = _dashboard(request).scheduler.toggle_auto_refresh()
        return {"auto_refresh": enabled}

    # ===== Views =====

    @app.get("/api/map.png")
    async def get_map(request: Request) -> Response:
        """Current map as PNG."""
        widget = _dashboard(request).map_widget
        snapshot = widget.snapshot()
        result = await asyncio.to_thread(widget.render_png, snapshot)
        if not result.success or result.image_bytes is None:
            raise HTTPException(status_code=502, detail=f"Map rendering failed: {result.error}")
        return Response(content=result.image_bytes, media_type="image/png")

    @app.get("/api/markers")
    async def get_markers(request: Request) -> list[dict[str, Any]]:
        """Current map markers with their popup text."""
        return [
            {
                "id": m.event_id,
                "latitude": m.latitude,
                "longitude": m.longitude,
                "radius": m.radius,
                "color": m.fill_color,
                "popup": m.popup_text,
            }
            for m in _dashboard(request).map_widget.markers
        ]

    @app.get("/api/chart", response_class=HTMLResponse)
    async def get_chart(request: Request) -> str:
        """Current chart as an HTML fragment."""
        return _dashboard(request).chart_widget.to_html()

    @app.get("/api/table", response_class=HTMLResponse)
    async def get_table(request: Request) -> str:
        """Current table body as HTML."""
        return _dashboard(request).table_widget.to_html()

    @app.get("/health")
    async def health() -> dict[str, str]:
        return {"status": "ok"}

    return app


app = create_app()
