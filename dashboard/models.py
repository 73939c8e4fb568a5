from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Union

from dashboard.errors import ApiRequestError


UNLIMITED = "unlimited"

RateValue = Union[int, float, str]


def _require(payload: Any, keys: List[str], endpoint: str) -> Dict[str, Any]:
    if not isinstance(payload, dict):
        raise ApiRequestError(f"Malformed response from {endpoint}: expected an object.", endpoint=endpoint)
    missing = [k for k in keys if k not in payload]
    if missing:
        raise ApiRequestError(
            f"Malformed response from {endpoint}: missing {', '.join(missing)}.",
            endpoint=endpoint,
        )
    return payload


@dataclass
class KeyUsageSnapshot:
    username: str
    plan: str
    admin: bool
    banned: bool
    rpm: RateValue
    rpm_used: RateValue
    rpd: RateValue
    rpd_used: RateValue
    total_usage: int
    total_tokens_used: Union[int, str]
    ban_reason: Optional[str] = None
    ban_expires: Optional[str] = None

    @classmethod
    def from_json(cls, payload: Any) -> "KeyUsageSnapshot":
        data = _require(
            payload,
            ["username", "plan", "rpm", "rpm_used", "rpd", "rpd_used", "total_usage", "total_tokens_used"],
            "/v1/key-info",
        )
        return cls(
            username=str(data["username"]),
            plan=str(data["plan"]),
            admin=bool(data.get("admin", False)),
            banned=bool(data.get("banned", False)),
            rpm=data["rpm"],
            rpm_used=data["rpm_used"],
            rpd=data["rpd"],
            rpd_used=data["rpd_used"],
            total_usage=data["total_usage"],
            total_tokens_used=data["total_tokens_used"],
            ban_reason=data.get("ban_reason"),
            ban_expires=data.get("ban_expires"),
        )


@dataclass
class UsageHistory:
    labels: List[str] = field(default_factory=list)
    data: List[Union[int, float]] = field(default_factory=list)

    @classmethod
    def from_json(cls, payload: Any) -> "UsageHistory":
        body = _require(payload, ["labels", "data"], "/v1/usage-history")
        labels = body["labels"]
        data = body["data"]
        if not isinstance(labels, list) or not isinstance(data, list):
            raise ApiRequestError("Malformed response from /v1/usage-history: labels and data must be lists.",
                                  endpoint="/v1/usage-history")
        if len(labels) != len(data):
            raise ApiRequestError(
                f"Malformed response from /v1/usage-history: {len(labels)} labels for {len(data)} values.",
                endpoint="/v1/usage-history",
            )
        return cls(labels=[str(label) for label in labels], data=list(data))


@dataclass
class ServiceStatus:
    status: str
    requests: int
    environment: str
    total_tokens_used: Union[int, str] = 0
    endpoints: List[str] = field(default_factory=list)

    @classmethod
    def from_json(cls, payload: Any) -> "ServiceStatus":
        data = _require(payload, ["status", "requests", "environment"], "/")
        return cls(
            status=str(data["status"]),
            requests=data["requests"],
            environment=str(data["environment"]),
            total_tokens_used=data.get("total_tokens_used") or 0,
            endpoints=[str(e) for e in (data.get("endpoints") or [])],
        )
