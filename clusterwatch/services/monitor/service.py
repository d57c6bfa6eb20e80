from types import MappingProxyType
from typing import Mapping, Sequence
import asyncio
import time

from clusterwatch.core.config import PollerConfig
from clusterwatch.core.enums import ServiceStatus
from clusterwatch.core.hosts import DEFAULT_HOSTS
from clusterwatch.core.models import Host, HostStatus, NetworkHistoryPoint
from clusterwatch.core.protocols import Service
from clusterwatch.utils.logger import LoggerSetup
from clusterwatch.utils.time import format_time_difference, get_current_timestamp
from .poller import ClusterPoller


class ClusterMonitorService(Service):
    """
    Drives the cluster poller on two independent cadences.

    Features:
    - Poll loop: one cycle immediately, then every poll interval
    - Prune loop: trims network history every prune interval
    - Read-only status and history snapshots for presentation
    - Errors inside a cycle are logged; loops never die on them
    """

    def __init__(self,
                 config: PollerConfig | None = None,
                 hosts: Sequence[Host] = DEFAULT_HOSTS,
                 poller: ClusterPoller | None = None):
        self._config = config or PollerConfig()
        self.hosts: tuple[Host, ...] = tuple(hosts)
        self.poller = poller or ClusterPoller(self._config)

        # Service state
        self._status = ServiceStatus.STOPPED
        self._start_time = get_current_timestamp()
        self._last_update: int | None = None
        self._poll_task: asyncio.Task | None = None
        self._prune_task: asyncio.Task | None = None
        self._running = False
        self._failed_cycles = 0

        self.logger = LoggerSetup.setup(__class__.__name__)

    @property
    def status(self) -> ServiceStatus:
        return self._status

    @property
    def last_update(self) -> int | None:
        """Millisecond timestamp of the last completed cycle"""
        return self._last_update

    def get_statuses(self) -> Mapping[str, HostStatus]:
        return self.poller.statuses

    def get_history(self) -> Mapping[str, tuple[NetworkHistoryPoint, ...]]:
        return MappingProxyType(self.poller.history.snapshot(host.host_id for host in self.hosts))

    def get_host(self, host_id: str) -> Host | None:
        return next((host for host in self.hosts if host.host_id == host_id), None)

    async def start(self) -> None:
        """Start both periodic loops"""
        if self._running:
            return
        try:
            self._status = ServiceStatus.STARTING
            self.logger.info(f"Starting cluster monitor for {len(self.hosts)} hosts")

            self._running = True
            self._start_time = get_current_timestamp()
            self._poll_task = asyncio.create_task(self._poll_loop())
            self._prune_task = asyncio.create_task(self._prune_loop())

            self._status = ServiceStatus.RUNNING
            self.logger.info("Cluster monitor started successfully")

        except Exception as e:
            self._status = ServiceStatus.ERROR
            self.logger.error(f"Failed to start cluster monitor: {e}")
            raise

    async def stop(self) -> None:
        """Stop both loops, abandon in-flight requests and discard state"""
        try:
            self._status = ServiceStatus.STOPPING
            self.logger.info("Stopping cluster monitor")

            self._running = False
            for task in (self._poll_task, self._prune_task):
                if task:
                    task.cancel()
                    try:
                        await task
                    except asyncio.CancelledError:
                        pass
            self._poll_task = None
            self._prune_task = None

            await self.poller.cleanup()
            self.poller.reset()
            self._last_update = None

            self._status = ServiceStatus.STOPPED
            self.logger.info("Cluster monitor stopped successfully")

        except Exception as e:
            self._status = ServiceStatus.ERROR
            self.logger.error(f"Error stopping cluster monitor: {e}")
            raise

    async def poll_now(self) -> Mapping[str, HostStatus]:
        """Run one poll cycle outside the schedule"""
        statuses = await self.poller.poll_once(self.hosts)
        self._last_update = get_current_timestamp()
        return statuses

    async def _poll_loop(self) -> None:
        """Poll on a fixed cadence, sleeping only what is left of the interval"""
        interval = self._config.poll_interval
        while self._running:
            started = time.monotonic()
            try:
                await self.poll_now()
            except Exception as e:
                self._failed_cycles += 1
                self.logger.error(f"Error in poll cycle: {e}")

            elapsed = time.monotonic() - started
            await asyncio.sleep(max(0.0, interval - elapsed))

    async def _prune_loop(self) -> None:
        """Trim network history on its own cadence"""
        while self._running:
            await asyncio.sleep(self._config.prune_interval)
            try:
                self.poller.prune_history()
            except Exception as e:
                self.logger.error(f"Error pruning network history: {e}")

    def get_service_status(self) -> str:
        """
        Generate detailed service status report.

        Returns:
            str: Multi-line status report including:
                - Service state
                - Per-host availability
                - Cycle statistics
        """
        uptime = get_current_timestamp() - self._start_time if self._running else 0
        status_lines = [
            "Cluster Monitor Status:",
            f"Status: {self._status.value}",
            f"Uptime: {format_time_difference(uptime)}",
            f"Poll cycles: {self.poller.cycles} (failed: {self._failed_cycles})",
            f"Last cycle: {self.poller.last_cycle_seconds:.3f}s",
            "",
            "Hosts:"
        ]

        statuses = self.poller.statuses
        for host in self.hosts:
            status = statuses.get(host.host_id)
            if status is None:
                state = "pending"
            elif status.online:
                state = "online"
            else:
                state = f"offline ({status.error.kind.value})"
            points = len(self.poller.history.read(host.host_id))
            status_lines.append(f"  {host.name} [{host.host_id}]: {state}, {points} history points")

        return "\n".join(status_lines)
