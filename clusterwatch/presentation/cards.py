"""
Pure view-model builders for host cards.

Each helper is a plain function of normalized data; nothing here touches
the network or mutates state.
"""
from pydantic import BaseModel, ConfigDict

from clusterwatch.core.enums import HostErrorKind, PlatformKind, TemperatureLevel, UsageLevel
from clusterwatch.core.models import (
    ArmTemperature,
    DiskInfo,
    FanInfo,
    Host,
    HostStatus,
    MemoryInfo,
    UptimeInfo
)

NOT_AVAILABLE = "N/A"
OFFLINE = "Offline"


class HostCard(BaseModel):
    """Display-ready summary of one host"""
    model_config = ConfigDict(frozen=True)

    name: str
    address: str
    online: bool
    message: str | None = None
    error_kind: HostErrorKind | None = None
    cpu_percent: float = 0.0
    cpu_level: UsageLevel = UsageLevel.NORMAL
    cores: int = 0
    memory_percent: float = 0.0
    memory_level: UsageLevel = UsageLevel.NORMAL
    memory_text: str = NOT_AVAILABLE
    disk_percent: float = 0.0
    disk_level: UsageLevel = UsageLevel.NORMAL
    disk_text: str = NOT_AVAILABLE
    download_mbps: float = 0.0
    upload_mbps: float = 0.0
    ping_ms: float = 0.0
    rx_error_rate: str = "0.00"
    tx_error_rate: str = "0.00"
    temperature_c: float | None = None
    temperature_level: TemperatureLevel = TemperatureLevel.UNKNOWN
    fan_text: str | None = None
    uptime_text: str = NOT_AVAILABLE
    top_process: str | None = None


def usage_level(percent: float) -> UsageLevel:
    if percent > 80:
        return UsageLevel.CRITICAL
    if percent > 60:
        return UsageLevel.WARNING
    return UsageLevel.NORMAL


def temperature_level(temp: float | None) -> TemperatureLevel:
    if temp is None:
        return TemperatureLevel.UNKNOWN
    if temp <= 50:
        return TemperatureLevel.NORMAL
    if temp <= 65:
        return TemperatureLevel.WARM
    if temp <= 74:
        return TemperatureLevel.HOT
    return TemperatureLevel.CRITICAL


def format_uptime(uptime: UptimeInfo | None) -> str:
    if uptime is None:
        return NOT_AVAILABLE
    if uptime.days > 0:
        return f"{uptime.days}d {uptime.hours}h"
    if uptime.hours > 0:
        return f"{uptime.hours}h {uptime.minutes}m"
    return f"{uptime.minutes}m"


def format_memory(memory: MemoryInfo | None) -> str:
    """Used/total memory, reported in MB, shown in GB"""
    if memory is None:
        return NOT_AVAILABLE
    return f"{memory.used_mb / 1024:.1f}/{memory.total_mb / 1024:.1f}GB"


def _compact(value: float) -> str:
    """Two-place value without trailing zeros, e.g. 20.0 -> '20'"""
    return f"{value:.2f}".rstrip('0').rstrip('.')


def format_disk(disk: DiskInfo | None) -> str:
    if disk is None:
        return NOT_AVAILABLE
    return f"{_compact(disk.used_gb)}/{_compact(disk.total_gb)}GB"


def primary_temperature(temperature, platform: PlatformKind) -> float | None:
    """
    Reading to headline on the card.

    x86 hosts show the CPU sensor only; arm hosts fall back from CPU to
    RP1 to SSD. Zero is a real reading and is never skipped.
    """
    if temperature is None:
        return None
    if platform == PlatformKind.X86 or not isinstance(temperature, ArmTemperature):
        return temperature.cpu
    for reading in (temperature.cpu, temperature.rp1, temperature.ssd):
        if reading is not None:
            return reading
    return None


def fan_display(fan: FanInfo | None) -> str | None:
    """First spinning fan, or None when all are stopped"""
    if fan is None:
        return None
    for rpm in (fan.cpu, fan.case1, fan.case2):
        if rpm > 0:
            return f"{_compact(rpm)}RPM"
    return None


def short_process_name(name: str) -> str:
    """Executable name without arguments or directory, e.g. 'python3'"""
    parts = name.split()
    command = parts[0] if parts else name
    return command.split('/')[-1]


def build_card(host: Host, status: HostStatus | None) -> HostCard:
    """
    Build the card for a host from its latest status.

    Args:
        host: Host descriptor
        status: Latest status, None before the first cycle
    Returns:
        HostCard: Offline card for errors or missing status
    """
    if status is None or status.snapshot is None:
        return HostCard(
            name=host.name,
            address=host.address.split(':')[0],
            online=False,
            message=OFFLINE,
            error_kind=status.error.kind if status and status.error else None
        )

    snapshot = status.snapshot
    cpu = snapshot.cpu
    memory = snapshot.memory
    disk = snapshot.disk
    network = snapshot.network
    temp = primary_temperature(snapshot.temperature, host.platform)
    top = snapshot.top_process

    cpu_percent = cpu.usage_percent if cpu else 0.0
    memory_percent = memory.percent if memory else 0.0
    disk_percent = disk.percent if disk else 0.0

    return HostCard(
        name=host.name,
        address=host.address.split(':')[0],
        online=True,
        cpu_percent=cpu_percent,
        cpu_level=usage_level(cpu_percent),
        cores=cpu.core_count if cpu else 0,
        memory_percent=memory_percent,
        memory_level=usage_level(memory_percent),
        memory_text=format_memory(memory),
        disk_percent=disk_percent,
        disk_level=usage_level(disk_percent),
        disk_text=format_disk(disk),
        download_mbps=network.download_mbps if network else 0.0,
        upload_mbps=network.upload_mbps if network else 0.0,
        ping_ms=network.ping_ms if network else 0.0,
        rx_error_rate=network.error_rates.rx if network and network.error_rates else "0.00",
        tx_error_rate=network.error_rates.tx if network and network.error_rates else "0.00",
        temperature_c=temp,
        temperature_level=temperature_level(temp),
        fan_text=fan_display(snapshot.fan),
        uptime_text=format_uptime(snapshot.uptime),
        top_process=short_process_name(top.name) if top else None
    )


def build_cards(hosts, statuses) -> list[HostCard]:
    """Cards for every host, in host order"""
    return [build_card(host, statuses.get(host.host_id)) for host in hosts]
