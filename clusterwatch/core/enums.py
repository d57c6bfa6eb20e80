from enum import Enum


class PlatformKind(str, Enum):
    """Hardware family of a monitored host"""
    X86 = "x86"
    ARM = "arm"


class HostErrorKind(str, Enum):
    """Diagnostic classification of a failed host observation"""
    TIMEOUT = "timeout"
    UNREACHABLE = "unreachable"
    BAD_RESPONSE = "bad-response"
    MALFORMED_PAYLOAD = "malformed-payload"


class TemperatureKind(str, Enum):
    """Temperature sensor layouts reported by the agents"""
    X86 = "x86"
    ARM = "arm"
    UNKNOWN = "unknown"


class ServiceStatus(str, Enum):
    """Service statuses"""
    STARTING = "starting"
    RUNNING = "running"
    STOPPING = "stopping"
    STOPPED = "stopped"
    ERROR = "error"


class UsageLevel(str, Enum):
    """Load bands used to color usage gauges"""
    NORMAL = "normal"
    WARNING = "warning"
    CRITICAL = "critical"


class TemperatureLevel(str, Enum):
    """Heat bands used to color temperature readouts"""
    UNKNOWN = "unknown"
    NORMAL = "normal"
    WARM = "warm"
    HOT = "hot"
    CRITICAL = "critical"
