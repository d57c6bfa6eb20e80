from prometheus_client import Counter, Gauge, Histogram, CollectorRegistry


class PollerMetrics:
    """
    Prometheus metrics definitions for the cluster poller.

    Metrics:
    - Poll cycles completed and their duration
    - Host observation errors by kind
    - Per-host online state
    - History buffer sizes
    """

    def __init__(self):
        self.registry = CollectorRegistry()

        self.poll_cycles = Counter(
            'clusterwatch_poll_cycles_total',
            'Total number of completed poll cycles',
            registry=self.registry
        )

        self.poll_cycle_duration = Histogram(
            'clusterwatch_poll_cycle_duration_seconds',
            'Wall time of one poll cycle across all hosts',
            buckets=(0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0),
            registry=self.registry
        )

        self.host_errors = Counter(
            'clusterwatch_host_errors_total',
            'Failed host observations by host and error kind',
            ['host', 'kind'],
            registry=self.registry
        )

        self.host_online = Gauge(
            'clusterwatch_host_online',
            'Host reachability in the last cycle (1 = online, 0 = offline)',
            ['host'],
            registry=self.registry
        )

        self.history_points = Gauge(
            'clusterwatch_history_points',
            'Network history samples currently held per host',
            ['host'],
            registry=self.registry
        )
