from typing import Any
import asyncio
import json
import aiohttp

from clusterwatch.core.config import PollerConfig
from clusterwatch.core.exceptions import BadResponse, HostTimeout, HostUnreachable, MalformedPayload
from clusterwatch.core.models import Host
from clusterwatch.core.protocols import APIAdapter
from clusterwatch.utils.logger import LoggerSetup


class AgentClient(APIAdapter):
    """
    Async client for the per-host metrics agents.

    One request per call, no retries: a failed host is simply re-polled on
    the next cycle. Every failure is raised as a HostFetchError subclass.
    """

    def __init__(self, config: PollerConfig | None = None):
        self._config = config or PollerConfig()
        self._session: aiohttp.ClientSession | None = None
        self._session_lock = asyncio.Lock()
        self.logger = LoggerSetup.setup(__class__.__name__)

    def url_for(self, host: Host) -> str:
        """Metrics endpoint URL for a host"""
        return f"{self._config.scheme}://{host.address}{self._config.path}"

    async def _create_session(self) -> aiohttp.ClientSession:
        """Create new session for agent requests"""
        return aiohttp.ClientSession(
            headers={'Accept': 'application/json'}
        )

    async def _request(self, method: str, url: str, **kwargs: Any) -> Any:
        """
        Make one request and decode its JSON body.

        The timeout applies to this request only; expiry cancels it without
        touching requests to other hosts.
        """
        session = await self._get_session()
        timeout = aiohttp.ClientTimeout(total=self._config.timeout)

        try:
            async with session.request(method, url, timeout=timeout, **kwargs) as response:
                if not 200 <= response.status < 300:
                    raise BadResponse(response.status)
                body = await response.text()
        except asyncio.TimeoutError as e:
            # Checked before ClientError: ServerTimeoutError is both
            raise HostTimeout(f"No response within {self._config.timeout_ms}ms") from e
        except aiohttp.ClientError as e:
            raise HostUnreachable(f"{type(e).__name__}: {e}") from e

        try:
            return json.loads(body)
        except ValueError as e:
            raise MalformedPayload(f"Response is not JSON: {e}") from e

    async def fetch_system(self, host: Host) -> Any:
        """
        Fetch the raw metrics document of a host.

        Args:
            host: Host to query
        Returns:
            Decoded JSON body, not yet normalized
        Raises:
            HostTimeout: no complete response within the timeout
            BadResponse: non-2xx status
            HostUnreachable: DNS, connection or TLS failure
            MalformedPayload: body is not JSON
        """
        url = self.url_for(host)
        self.logger.debug(f"Fetching {url}")
        return await self._request('GET', url)
