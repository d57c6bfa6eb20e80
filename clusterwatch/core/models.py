from datetime import datetime
from typing import Annotated, Any, Literal, Union
from pydantic import (
    BaseModel,
    Field,
    ConfigDict,
    computed_field,
    field_validator,
    model_validator
)
from .enums import HostErrorKind, PlatformKind, TemperatureKind
from clusterwatch.utils.numbers import is_number, round2
from clusterwatch.utils.time import format_clock, get_current_timestamp

# Sentinel some agents send instead of null for a missing sensor
MISSING_READING = "N/A"


def _require_number(value: Any) -> int | float:
    if not is_number(value):
        raise ValueError(f"Expected a number, got {value!r}")
    return value

def _rounded(value: Any) -> float:
    return round2(_require_number(value))

def _reading(value: Any) -> float | None:
    """Optional sensor reading: None means the sensor is absent, not zero"""
    if value is None or value == MISSING_READING:
        return None
    return _rounded(value)


class Host(BaseModel):
    """Static descriptor of one monitored machine"""
    model_config = ConfigDict(frozen=True)

    name: str = Field(..., min_length=1, description="Display name", examples=["RuthServer"])
    address: str = Field(..., min_length=1, description="Host[:port] of the metrics agent")
    platform: PlatformKind = Field(..., description="Hardware family")

    @property
    def host_id(self) -> str:
        """Key used for the status and history mappings"""
        return self.address


class _Section(BaseModel):
    """Base for payload sections: frozen, raw agent key names accepted as aliases"""
    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        extra='ignore'
    )


class CpuInfo(_Section):
    usage_percent: float = Field(..., alias='usage')
    core_count: int = Field(..., alias='cores')
    temperature_c: float | None = Field(None, alias='temperature')

    @field_validator('usage_percent', mode='before')
    def round_usage(cls, value: Any) -> float:
        return _rounded(value)

    @field_validator('core_count', mode='before')
    def validate_cores(cls, value: Any) -> int | float:
        return _require_number(value)

    @field_validator('temperature_c', mode='before')
    def round_temperature(cls, value: Any) -> float | None:
        return _reading(value)


class MemoryInfo(_Section):
    used_mb: float = Field(..., alias='used')
    total_mb: float = Field(..., alias='total')
    percent: float = Field(..., alias='percentage')

    @field_validator('used_mb', 'percent', mode='before')
    def round_values(cls, value: Any) -> float:
        return _rounded(value)

    @field_validator('total_mb', mode='before')
    def validate_total(cls, value: Any) -> int | float:
        return _require_number(value)


class DiskInfo(_Section):
    used_gb: float = Field(..., alias='used')
    total_gb: float = Field(..., alias='total')
    percent: float = Field(..., alias='percentage')

    @field_validator('used_gb', 'percent', mode='before')
    def round_values(cls, value: Any) -> float:
        return _rounded(value)

    @field_validator('total_gb', mode='before')
    def validate_total(cls, value: Any) -> int | float:
        return _require_number(value)


class ErrorRates(_Section):
    """Interface error rates as percent strings, e.g. '0.02'"""
    rx: str
    tx: str

    @field_validator('rx', 'tx', mode='before')
    def validate_rate(cls, value: Any) -> str:
        if isinstance(value, str):
            return value
        if is_number(value):
            return f"{round2(value):.2f}"
        raise ValueError(f"Expected a percent string, got {value!r}")


class NetworkInfo(_Section):
    download_mbps: float = Field(..., alias='download')
    upload_mbps: float = Field(..., alias='upload')
    ping_ms: float = Field(..., alias='ping')
    error_rates: ErrorRates | None = Field(None, alias='errorRates')

    @field_validator('download_mbps', 'upload_mbps', 'ping_ms', mode='before')
    def round_values(cls, value: Any) -> float:
        return _rounded(value)


class FanInfo(_Section):
    """Fan speeds in RPM"""
    cpu: float
    case1: float
    case2: float

    @field_validator('cpu', 'case1', 'case2', mode='before')
    def round_values(cls, value: Any) -> float:
        return _rounded(value)


class UptimeInfo(_Section):
    days: int
    hours: int
    minutes: int

    @field_validator('days', 'hours', 'minutes', mode='before')
    def validate_parts(cls, value: Any) -> int | float:
        return _require_number(value)


class ProcessInfo(_Section):
    name: str
    cpu_percent: float = Field(..., alias='cpu')
    memory_percent: float = Field(..., alias='memory')

    @field_validator('cpu_percent', 'memory_percent', mode='before')
    def round_values(cls, value: Any) -> float:
        return _rounded(value)


class X86Temperature(_Section):
    kind: Literal[TemperatureKind.X86] = TemperatureKind.X86
    cpu: float | None = None
    gpu: float | None = None
    motherboard: float | None = None

    @field_validator('cpu', 'gpu', 'motherboard', mode='before')
    def round_readings(cls, value: Any) -> float | None:
        return _reading(value)


class ArmTemperature(_Section):
    kind: Literal[TemperatureKind.ARM] = TemperatureKind.ARM
    cpu: float | None = None
    rp1: float | None = None
    ssd: float | None = None

    @field_validator('cpu', 'rp1', 'ssd', mode='before')
    def round_readings(cls, value: Any) -> float | None:
        return _reading(value)


class UnknownTemperature(_Section):
    """Sensor layout matching neither known platform; readings kept by raw key"""
    kind: Literal[TemperatureKind.UNKNOWN] = TemperatureKind.UNKNOWN
    readings: dict[str, float | None] = Field(default_factory=dict)

    @field_validator('readings', mode='before')
    def round_readings(cls, value: Any) -> dict[str, float | None]:
        if not isinstance(value, dict):
            raise ValueError(f"Expected an object, got {value!r}")
        return {str(key): _reading(reading) for key, reading in value.items()}

    @property
    def cpu(self) -> float | None:
        return self.readings.get('cpu')


Temperature = Annotated[
    Union[X86Temperature, ArmTemperature, UnknownTemperature],
    Field(discriminator='kind')
]


class MetricsSnapshot(BaseModel):
    """
    One normalized reading of all metrics for one host.

    Sections the agent did not report are None. Every floating value has
    already been rounded to 2 decimal places.
    """
    model_config = ConfigDict(frozen=True)

    cpu: CpuInfo | None = None
    memory: MemoryInfo | None = None
    disk: DiskInfo | None = None
    network: NetworkInfo | None = None
    temperature: Temperature | None = None
    fan: FanInfo | None = None
    uptime: UptimeInfo | None = None
    processes: tuple[ProcessInfo, ...] = ()

    @property
    def top_process(self) -> ProcessInfo | None:
        """Most resource-intensive process as ordered by the agent"""
        return self.processes[0] if self.processes else None


class HostError(BaseModel):
    """Error marker standing in for a snapshot"""
    model_config = ConfigDict(frozen=True)

    kind: HostErrorKind
    detail: str = ""


class HostStatus(BaseModel):
    """
    Most recent observation of one host.

    Exactly one of snapshot and error is set. Replaced wholesale every
    poll cycle.
    """
    model_config = ConfigDict(frozen=True)

    host_id: str
    observed_at: int = Field(default_factory=get_current_timestamp, description="Millisecond timestamp")
    snapshot: MetricsSnapshot | None = None
    error: HostError | None = None

    @model_validator(mode='after')
    def validate_outcome(self) -> 'HostStatus':
        """Validate that the status is either a snapshot or an error"""
        if (self.snapshot is None) == (self.error is None):
            raise ValueError("HostStatus requires exactly one of snapshot or error")
        return self

    @classmethod
    def success(cls, host_id: str, snapshot: MetricsSnapshot) -> 'HostStatus':
        return cls(host_id=host_id, snapshot=snapshot)

    @classmethod
    def failure(cls, host_id: str, kind: HostErrorKind, detail: str = "") -> 'HostStatus':
        return cls(host_id=host_id, error=HostError(kind=kind, detail=detail))

    @property
    def online(self) -> bool:
        return self.snapshot is not None


class NetworkHistoryPoint(BaseModel):
    """One network throughput sample for charting"""
    model_config = ConfigDict(frozen=True)

    timestamp: datetime = Field(..., description="Local wall-clock time, second precision")
    download_mbps: float = 0.0
    upload_mbps: float = 0.0

    @field_validator('timestamp', mode='after')
    def truncate_timestamp(cls, value: datetime) -> datetime:
        return value.replace(microsecond=0)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def label(self) -> str:
        """24h clock label, e.g. '14:05:09'"""
        return format_clock(self.timestamp)
