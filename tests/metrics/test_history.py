# tests/metrics/test_history.py
from datetime import datetime, timedelta

import pytest

from clusterwatch.core.models import NetworkHistoryPoint
from clusterwatch.metrics.history import NetworkHistory

BASE_TIME = datetime(2024, 5, 1, 12, 0, 0)


def _point(i: int) -> NetworkHistoryPoint:
    return NetworkHistoryPoint(
        timestamp=BASE_TIME + timedelta(seconds=i),
        download_mbps=float(i),
        upload_mbps=i / 2
    )

def test_keeps_most_recent_thirty():
    history = NetworkHistory()
    points = [_point(i) for i in range(1, 32)]
    for point in points:
        history.append("node1", point)

    stored = history.read("node1")
    assert len(stored) == 30
    assert stored[-1] == points[30]
    assert points[0] not in stored
    assert list(stored) == points[1:]

def test_never_exceeds_capacity():
    history = NetworkHistory(capacity=5)
    for i in range(50):
        history.append("node1", _point(i))
        assert len(history.read("node1")) <= 5
    assert [p.download_mbps for p in history.read("node1")] == [45, 46, 47, 48, 49]

def test_unknown_host_reads_empty():
    assert NetworkHistory().read("nowhere") == ()

def test_hosts_are_independent():
    history = NetworkHistory(capacity=3)
    for i in range(5):
        history.append("a", _point(i))
    history.append("b", _point(100))

    assert len(history.read("a")) == 3
    assert history.read("b") == (_point(100),)
    assert sorted(history.hosts()) == ["a", "b"]

def test_prune_trims_overfull_history():
    history = NetworkHistory(capacity=3)
    # Simulate a writer that skipped trimming
    history._points["a"] = tuple(_point(i) for i in range(6))

    history.prune("a")
    assert [p.download_mbps for p in history.read("a")] == [3, 4, 5]

    history.prune("a")
    assert [p.download_mbps for p in history.read("a")] == [3, 4, 5]

def test_prune_within_capacity_is_noop():
    history = NetworkHistory(capacity=3)
    history.append("a", _point(1))
    before = history.read("a")

    history.prune("a")
    history.prune("missing")

    assert history.read("a") is before
    assert history.read("missing") == ()

def test_prune_all():
    history = NetworkHistory(capacity=2)
    history._points["a"] = tuple(_point(i) for i in range(4))
    history._points["b"] = tuple(_point(i) for i in range(3))

    history.prune_all()
    assert len(history.read("a")) == 2
    assert len(history.read("b")) == 2

def test_snapshot_is_detached():
    history = NetworkHistory()
    history.append("a", _point(1))
    snapshot = history.snapshot()

    history.append("a", _point(2))
    assert len(snapshot["a"]) == 1
    assert history.snapshot(["a", "x"]) == {"a": history.read("a"), "x": ()}

def test_clear():
    history = NetworkHistory()
    history.append("a", _point(1))
    history.clear()
    assert len(history) == 0
    assert history.read("a") == ()

def test_invalid_capacity():
    with pytest.raises(ValueError):
        NetworkHistory(capacity=0)

def test_point_label_and_precision():
    point = NetworkHistoryPoint(timestamp=datetime(2024, 5, 1, 9, 5, 7, 123456))
    assert point.timestamp.microsecond == 0
    assert point.label == "09:05:07"
    assert point.model_dump(mode="json")["label"] == "09:05:07"
