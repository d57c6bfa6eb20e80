from types import MappingProxyType
from typing import Mapping, Sequence
import asyncio
import time

from clusterwatch.clients.agent import AgentClient
from clusterwatch.core.config import PollerConfig
from clusterwatch.core.enums import HostErrorKind
from clusterwatch.core.exceptions import HostFetchError
from clusterwatch.core.models import Host, HostStatus, NetworkHistoryPoint
from clusterwatch.metrics.history import NetworkHistory
from clusterwatch.metrics.normalizer import normalize
from clusterwatch.utils.logger import LoggerSetup
from clusterwatch.utils.time import get_local_datetime
from .monitor_metrics import PollerMetrics


class ClusterPoller:
    """
    Runs poll cycles: fetch every host concurrently, normalize, publish.

    Features:
    - Per-host fan-out; a slow host only costs its own timeout
    - Every per-host failure becomes an error marker, never an exception
    - Network samples fed into a bounded per-host history
    - Status mapping replaced wholesale once all hosts settle
    """

    def __init__(self,
                 config: PollerConfig | None = None,
                 client: AgentClient | None = None,
                 history: NetworkHistory | None = None,
                 metrics: PollerMetrics | None = None):
        self._config = config or PollerConfig()
        self.client = client or AgentClient(self._config)
        self.history = history or NetworkHistory(self._config.history_capacity)
        self.metrics = metrics or PollerMetrics()

        self._statuses: Mapping[str, HostStatus] = MappingProxyType({})
        self._cycles = 0
        self._last_cycle_seconds = 0.0
        self.logger = LoggerSetup.setup(__class__.__name__)

    @property
    def statuses(self) -> Mapping[str, HostStatus]:
        """Read-only status mapping of the last completed cycle"""
        return self._statuses

    @property
    def cycles(self) -> int:
        return self._cycles

    @property
    def last_cycle_seconds(self) -> float:
        return self._last_cycle_seconds

    async def poll_once(self, hosts: Sequence[Host]) -> Mapping[str, HostStatus]:
        """
        Run one full poll cycle.

        Args:
            hosts: Hosts to poll, in display order
        Returns:
            Mapping of host_id to HostStatus covering every host, in the
            order given
        """
        started = time.perf_counter()
        results = await asyncio.gather(*(self._poll_host(host) for host in hosts))

        self._statuses = MappingProxyType({status.host_id: status for status in results})
        self._last_cycle_seconds = time.perf_counter() - started
        self._cycles += 1

        self.metrics.poll_cycles.inc()
        self.metrics.poll_cycle_duration.observe(self._last_cycle_seconds)
        online = sum(1 for status in results if status.online)
        self.logger.debug(
            f"Poll cycle {self._cycles}: {online}/{len(results)} hosts online "
            f"in {self._last_cycle_seconds:.3f}s"
        )
        return self._statuses

    async def _poll_host(self, host: Host) -> HostStatus:
        """Observe one host; all failures end up as error markers"""
        host_id = host.host_id
        try:
            raw = await self.client.fetch_system(host)
            snapshot = normalize(raw)
        except HostFetchError as e:
            status = HostStatus.failure(host_id, e.kind, str(e))
        except Exception as e:
            # Anything else escaping normalization is a payload problem
            status = HostStatus.failure(
                host_id,
                HostErrorKind.MALFORMED_PAYLOAD,
                f"{type(e).__name__}: {e}"
            )
        else:
            status = HostStatus.success(host_id, snapshot)
            if snapshot.network is not None:
                self.history.append(host_id, NetworkHistoryPoint(
                    timestamp=get_local_datetime(),
                    download_mbps=snapshot.network.download_mbps,
                    upload_mbps=snapshot.network.upload_mbps
                ))
                self.metrics.history_points.labels(host=host_id).set(len(self.history.read(host_id)))

        self._log_transition(host, self._statuses.get(host_id), status)
        if status.error is not None:
            self.metrics.host_errors.labels(host=host_id, kind=status.error.kind.value).inc()
        self.metrics.host_online.labels(host=host_id).set(1 if status.online else 0)
        return status

    def _log_transition(self, host: Host, previous: HostStatus | None, status: HostStatus) -> None:
        """Warn when a host goes offline or changes failure; repeats go to debug"""
        if status.error is None:
            if previous is not None and not previous.online:
                self.logger.info(f"{host.name} ({host.host_id}) back online")
            return

        message = f"{host.name} ({host.host_id}) offline: {status.error.kind.value} - {status.error.detail}"
        if previous is None or previous.online or previous.error.kind != status.error.kind:
            self.logger.warning(message)
        else:
            self.logger.debug(message)

    def prune_history(self) -> None:
        """Trim every known host's history back to capacity"""
        self.history.prune_all()
        for host_id in self.history.hosts():
            self.metrics.history_points.labels(host=host_id).set(len(self.history.read(host_id)))

    def reset(self) -> None:
        """Discard statuses and history"""
        self._statuses = MappingProxyType({})
        self.history.clear()

    async def cleanup(self) -> None:
        await self.client.cleanup()
