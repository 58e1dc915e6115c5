"""Lightweight reachability probe for IP Office appliances."""

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import TYPE_CHECKING

import httpx

if TYPE_CHECKING:
    from neuroglia.hosting.web import WebApplicationBuilder

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class ReachabilityResult:
    """Outcome of one probe."""

    reachable: bool
    status_code: int | None
    checked_at: datetime

    def to_dict(self) -> dict:
        return {
            "reachable": self.reachable,
            "statusCode": self.status_code,
            "checkedAt": self.checked_at.isoformat(),
        }


def normalize_probe_url(host: str) -> str:
    host = host.strip()
    if host.startswith("http://") or host.startswith("https://"):
        return host
    return f"https://{host}"


class IpoReachabilityProbe:
    """Checks whether the appliance web listener answers at all.

    Unlike the management API client, no session is opened and the probe
    targets the host as stored (default port), following redirects.
    """

    def __init__(
        self,
        timeout: float = 2.5,
        verify_ssl: bool = False,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.timeout = timeout
        self.verify_ssl = verify_ssl
        self._transport = transport

    async def check_async(self, host: str) -> ReachabilityResult:
        """Send a HEAD request to the host; never raises."""
        url = normalize_probe_url(host)
        try:
            async with httpx.AsyncClient(
                verify=self.verify_ssl,
                timeout=self.timeout,
                follow_redirects=True,
                transport=self._transport,
            ) as client:
                response = await client.head(url)
            return ReachabilityResult(
                reachable=response.is_success,
                status_code=response.status_code,
                checked_at=datetime.now(timezone.utc),
            )
        except httpx.HTTPError as e:
            log.debug(f"IP Office host {host} is unreachable: {e}")
            return ReachabilityResult(reachable=False, status_code=None, checked_at=datetime.now(timezone.utc))

    @staticmethod
    def configure(builder: "WebApplicationBuilder") -> None:
        """Register the reachability probe as a singleton in the DI container."""
        from application.settings import app_settings

        probe = IpoReachabilityProbe(timeout=app_settings.ipo_reachability_timeout)
        builder.services.add_singleton(IpoReachabilityProbe, singleton=probe)
