from .poller import ClusterPoller
from .service import ClusterMonitorService

__all__ = [
    'ClusterPoller',
    'ClusterMonitorService'
]
