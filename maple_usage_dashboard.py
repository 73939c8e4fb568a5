from contextlib import asynccontextmanager

from dotenv import load_dotenv
from fastapi import FastAPI

from dashboard.config import dlog, load_settings
from dashboard.session import DashboardSession
from dashboard.webui.routes import create_dashboard_router


load_dotenv()
settings = load_settings()
session = DashboardSession(settings)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Restore a saved token and start the status poller; both schedules stop on exit.
    await session.start()
    dlog("dashboard_started", session.health())
    try:
        yield
    finally:
        await session.shutdown()


app = FastAPI(lifespan=lifespan)
app.include_router(create_dashboard_router(session))


if __name__ == "__main__":
    # Convenience for local runs: python maple_usage_dashboard.py --dashboard-debug
    import uvicorn

    uvicorn.run("maple_usage_dashboard:app", host=settings.host, port=settings.port, reload=False)
