from typing import Iterable

from clusterwatch.core.models import NetworkHistoryPoint

DEFAULT_CAPACITY = 30


class NetworkHistory:
    """
    Per-host bounded FIFO of network throughput samples.

    Each host's samples are held in an immutable tuple that is replaced
    wholesale on append and prune, so readers only ever see complete
    sequences. Histories are independent; there is no global cap.
    """

    def __init__(self, capacity: int = DEFAULT_CAPACITY):
        if capacity <= 0:
            raise ValueError("History capacity must be positive")
        self._capacity = capacity
        self._points: dict[str, tuple[NetworkHistoryPoint, ...]] = {}

    @property
    def capacity(self) -> int:
        return self._capacity

    def append(self, host_id: str, point: NetworkHistoryPoint) -> None:
        """Add a sample, evicting the oldest ones beyond capacity"""
        current = self._points.get(host_id, ())
        self._points[host_id] = (*current, point)[-self._capacity:]

    def prune(self, host_id: str) -> None:
        """Trim a host back to capacity; no-op when already within it"""
        current = self._points.get(host_id)
        if current is not None and len(current) > self._capacity:
            self._points[host_id] = current[-self._capacity:]

    def prune_all(self) -> None:
        for host_id in self.hosts():
            self.prune(host_id)

    def read(self, host_id: str) -> tuple[NetworkHistoryPoint, ...]:
        """Samples for a host, oldest first; empty for an unknown host"""
        return self._points.get(host_id, ())

    def hosts(self) -> list[str]:
        return list(self._points)

    def snapshot(self, host_ids: Iterable[str] | None = None) -> dict[str, tuple[NetworkHistoryPoint, ...]]:
        """Read-only copy of all (or the given) histories"""
        if host_ids is None:
            return dict(self._points)
        return {host_id: self.read(host_id) for host_id in host_ids}

    def clear(self) -> None:
        self._points = {}

    def __len__(self) -> int:
        return len(self._points)
