from __future__ import annotations

from typing import Callable, Optional

from dashboard.api_client import MapleApiClient
from dashboard.config import dlog, elog
from dashboard.errors import ApiRequestError
from dashboard.models import ServiceStatus
from dashboard.rendering import render_service_offline, render_service_online
from dashboard.scheduler import ScheduledTask
from dashboard.view import DashboardView


class StatusPoller:
    """Polls the unauthenticated service root and keeps the status badge current.

    Independent of the token: it starts with the session and runs until
    shutdown. A failed check downgrades the badge to offline and is retried
    on the next tick.
    """

    def __init__(
        self,
        client: MapleApiClient,
        view: DashboardView,
        interval: float = 60.0,
        on_status: Optional[Callable[[ServiceStatus], None]] = None,
    ) -> None:
        self.client = client
        self.view = view
        self.on_status = on_status
        self.task = ScheduledTask("service-status", interval, self.check_once)

    async def check_once(self) -> Optional[ServiceStatus]:
        try:
            status = await self.client.get_status()
            self.view.service = render_service_online(status)
            if self.on_status is not None:
                self.on_status(status)
        except ApiRequestError as e:
            self.view.service = render_service_offline()
            elog("service_status_check_failed", {"endpoint": e.endpoint, "status_code": e.status_code, "error": str(e)})
            return None
        except (ValueError, TypeError) as e:
            self.view.service = render_service_offline()
            elog("service_status_check_failed", {"endpoint": "/", "error": f"Unexpected status payload: {e}"})
            return None

        dlog("service_status", {"status": status.status, "environment": status.environment})
        return status

    def start(self) -> bool:
        return self.task.start(run_immediately=True)

    def stop(self) -> None:
        self.task.stop()
