from typing import Optional


class DashboardError(Exception):
    """Base class for errors surfaced in the dashboard error banner."""


class EmptyTokenError(DashboardError):
    def __init__(self, message: str = "Please enter your API token") -> None:
        super().__init__(message)


class ApiRequestError(DashboardError):
    def __init__(self, message: str, *, status_code: Optional[int] = None, endpoint: Optional[str] = None) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.endpoint = endpoint


class NetworkError(ApiRequestError):
    """The request never produced an HTTP response (DNS, refused, timeout)."""
