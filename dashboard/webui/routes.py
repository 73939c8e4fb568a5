from __future__ import annotations

from fastapi import APIRouter
from fastapi.responses import HTMLResponse, JSONResponse

from dashboard.errors import EmptyTokenError
from dashboard.session import DashboardSession
from dashboard.webui.templates import DASHBOARD_INDEX_HTML


def create_dashboard_router(session: DashboardSession) -> APIRouter:
    """Create the router serving the dashboard page plus its JSON actions."""
    router = APIRouter()

    @router.get("/", response_class=HTMLResponse, include_in_schema=False)
    async def dashboard_index() -> HTMLResponse:
        return HTMLResponse(content=DASHBOARD_INDEX_HTML)

    @router.get("/dashboard", response_class=HTMLResponse, include_in_schema=False)
    async def dashboard_page() -> HTMLResponse:
        return HTMLResponse(content=DASHBOARD_INDEX_HTML)

    @router.get("/health")
    async def dashboard_health():
        return session.health()

    @router.get("/api/state")
    async def dashboard_state():
        return session.snapshot()

    @router.post("/api/token")
    async def dashboard_submit_token(payload: dict | None = None):
        try:
            await session.submit_token((payload or {}).get("token"))
        except EmptyTokenError as e:
            return JSONResponse({"error": str(e), "state": session.snapshot()}, status_code=400)
        return session.snapshot()

    @router.delete("/api/token")
    async def dashboard_clear_token():
        session.clear_token()
        return session.snapshot()

    @router.post("/api/refresh")
    async def dashboard_refresh():
        await session.refresh()
        return session.snapshot()

    return router
