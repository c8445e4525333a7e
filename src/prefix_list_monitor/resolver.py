"""Public IP detection via a plain-text HTTP endpoint (ipify by default)."""

import ipaddress
import logging

import requests

from prefix_list_monitor.errors import NetworkError

logger = logging.getLogger(__name__)

DEFAULT_IP_SERVICE_URL = "https://api.ipify.org"
USER_AGENT = "prefix-list-monitor"


class IpResolver:
    """Fetches the caller's public IPv4 address. No retries; the reconciler owns retry policy."""

    def __init__(
        self,
        url: str = DEFAULT_IP_SERVICE_URL,
        timeout: float = 10.0,
        session: requests.Session | None = None,
    ):
        self.url = url
        self.timeout = timeout
        self._session = session or requests.Session()

    def resolve(self) -> str:
        """Get current public IP address.

        Returns:
            Public IPv4 address, whitespace-trimmed

        Raises:
            NetworkError: Endpoint unreachable, non-2xx status, or body is not an IPv4 literal
        """
        try:
            resp = self._session.get(
                self.url,
                timeout=self.timeout,
                headers={"User-Agent": USER_AGENT},
            )
            resp.raise_for_status()
            body = resp.text.strip()
        except requests.RequestException as e:
            raise NetworkError(f"Failed to fetch current IP from {self.url}: {e}") from e

        try:
            ip = str(ipaddress.IPv4Address(body))
        except ValueError as e:
            raise NetworkError(f"Invalid IP address received from {self.url}: {body[:64]!r}") from e

        logger.debug("Detected current IP: %s", ip)
        return ip
