from __future__ import annotations

import asyncio
import time
from datetime import datetime
from typing import Any, Callable, Dict, Optional

from dashboard.api_client import MapleApiClient
from dashboard.chart import build_chart, summarize_usage
from dashboard.config import DashboardSettings, dlog, elog
from dashboard.errors import ApiRequestError, EmptyTokenError
from dashboard.models import KeyUsageSnapshot, ServiceStatus, UsageHistory
from dashboard.rendering import (
    StatusIndicator,
    render_global_stats,
    render_rate_card,
    render_totals,
    render_user_info,
)
from dashboard.scheduler import ScheduledTask
from dashboard.status_poller import StatusPoller
from dashboard.token_store import TokenStore
from dashboard.view import DashboardView


class DashboardSession:
    """Owns the token, the cached service snapshot, both schedules and the view.

    Constructed once per process. Each fetch cycle records the generation it
    started in; ``submit_token`` and ``clear_token`` advance the generation so
    responses that land afterwards are dropped instead of rendered.
    """

    def __init__(
        self,
        settings: DashboardSettings,
        *,
        client: Optional[MapleApiClient] = None,
        token_store: Optional[TokenStore] = None,
        clock: Callable[[], float] = time.monotonic,
        now: Callable[[], datetime] = datetime.now,
    ) -> None:
        self.settings = settings
        self.client = client or MapleApiClient(base_url=settings.api_base, timeout=settings.request_timeout)
        self.token_store = token_store or TokenStore(path=settings.token_file)
        self.view = DashboardView(clock=clock)
        self._now = now
        self.start_time = time.time()
        self.service_status: Optional[ServiceStatus] = None
        self.generation = 0
        self.status_poller = StatusPoller(
            self.client,
            self.view,
            interval=settings.status_poll_interval,
            on_status=self._on_service_status,
        )
        self.refresh_task = ScheduledTask("usage-refresh", settings.usage_refresh_interval, self.fetch_cycle)
        self.restore_task: Optional[asyncio.Task] = None

    @property
    def token(self) -> Optional[str]:
        return self.token_store.token

    # ---------- lifecycle ----------
    async def start(self) -> None:
        # The poller must not wait on the restored token's first fetch cycle.
        self.status_poller.start()
        self.restore_task = asyncio.get_running_loop().create_task(self.restore(), name="token-restore")

    async def shutdown(self) -> None:
        if self.restore_task is not None and not self.restore_task.done():
            self.restore_task.cancel()
        self.refresh_task.stop()
        self.status_poller.stop()
        await self.client.aclose()

    # ---------- token actions ----------
    async def restore(self) -> bool:
        token = self.token_store.restore()
        if not token:
            return False
        self.view.token_input = token
        await self.fetch_cycle()
        return True

    async def submit_token(self, raw: Optional[str]) -> bool:
        try:
            token = self.token_store.submit(raw)
        except EmptyTokenError as e:
            self.view.show_error(str(e), self.settings.error_banner_seconds)
            raise
        self.generation += 1
        self.view.token_input = token
        self.view.loading = True
        try:
            return await self.fetch_cycle()
        finally:
            self.view.loading = False

    def clear_token(self) -> None:
        self.token_store.clear()
        self.generation += 1
        self.view.token_input = ""
        self.view.hide_dashboard()
        self.view.status = StatusIndicator("idle", "")
        self.refresh_task.stop()
        self.service_status = None
        dlog("token_cleared", {"generation": self.generation})

    async def refresh(self) -> bool:
        return await self.fetch_cycle()

    # ---------- fetch cycle ----------
    async def fetch_cycle(self) -> bool:
        token = self.token
        if not token:
            return False
        generation = self.generation
        self.view.status = StatusIndicator("loading", "Loading...")

        try:
            key_info, history = await self.client.get_usage(token)
        except asyncio.CancelledError:
            if generation == self.generation and self.view.status.state == "loading":
                self.view.status = StatusIndicator("idle", "")
            raise
        except ApiRequestError as e:
            return self._fail(generation, str(e), e)

        try:
            if generation != self.generation:
                dlog("fetch_cycle_discarded", {"started": generation, "current": self.generation})
                return False
            self.render(key_info, history)
        except ApiRequestError as e:
            return self._fail(generation, str(e), e)
        except (ValueError, TypeError) as e:
            return self._fail(generation, "Unexpected response from API.", e)

        self.view.show_dashboard()
        self.view.hide_error()
        self.view.status = StatusIndicator("active", "Live")
        if self.refresh_task.start():
            dlog("usage_refresh_armed", {"interval": self.refresh_task.interval})
        return True

    def _fail(self, generation: int, message: str, error: Exception) -> bool:
        if generation != self.generation:
            dlog("fetch_cycle_discarded", {"started": generation, "current": self.generation, "error": str(error)})
            return False
        self.view.show_error(message, self.settings.error_banner_seconds)
        self.view.status = StatusIndicator("error", "Error")
        elog("fetch_cycle_failed", {"error": str(error), "status_code": getattr(error, "status_code", None)})
        return False

    def render(self, key_info: KeyUsageSnapshot, history: UsageHistory) -> None:
        """Rebuild every usage region from one pair of responses.

        All panels are computed before any is assigned, so a payload that
        fails to render leaves the previous content in place.
        """
        user_info = render_user_info(key_info)
        rate_cards = {
            "rpm": render_rate_card("rpm", key_info.rpm, key_info.rpm_used, "RPM"),
            "rpd": render_rate_card("rpd", key_info.rpd, key_info.rpd_used, "RPD"),
        }
        totals = render_totals(key_info)
        global_stats = render_global_stats(self.service_status) if self.service_status else None
        summary = summarize_usage(history.data)

        self.view.user_info = user_info
        if global_stats is not None:
            self.view.global_stats = global_stats
        self.view.rate_cards = rate_cards
        self.view.totals = totals
        self.render_chart(history, summary)
        self.view.last_updated = f"Last updated: {self._now():%Y-%m-%d %H:%M:%S}"

    def render_chart(self, history: UsageHistory, summary=None) -> None:
        self.view.chart = build_chart(history.labels, history.data, previous=self.view.chart)
        self.view.chart_summary = summary if summary is not None else summarize_usage(history.data)

    def _on_service_status(self, status: ServiceStatus) -> None:
        self.service_status = status
        if self.view.visible:
            self.view.global_stats = render_global_stats(status)

    # ---------- introspection ----------
    def snapshot(self) -> Dict[str, Any]:
        return self.view.to_dict()

    def health(self) -> Dict[str, Any]:
        return {
            "status": "ok",
            "uptime_seconds": int(time.time() - self.start_time),
            "api_base": self.client.base_url,
            "token_present": self.token_store.has_token,
            "tasks": [self.status_poller.task.status(), self.refresh_task.status()],
        }
