# clusterwatch/metrics/normalizer.py

from typing import Any
from pydantic import BaseModel, ValidationError

from clusterwatch.core.exceptions import MalformedPayload
from clusterwatch.core.models import (
    ArmTemperature,
    CpuInfo,
    DiskInfo,
    FanInfo,
    MemoryInfo,
    MetricsSnapshot,
    NetworkInfo,
    ProcessInfo,
    UnknownTemperature,
    UptimeInfo,
    X86Temperature
)
from clusterwatch.utils.numbers import round2

__all__ = ['normalize', 'normalize_temperature', 'round2']

# Keys that identify a temperature layout; 'cpu' is shared by both
X86_TEMPERATURE_KEYS = frozenset({'gpu', 'motherboard'})
ARM_TEMPERATURE_KEYS = frozenset({'rp1', 'ssd'})
LAYOUT_TAG = 'kind'

_SECTIONS: dict[str, type[BaseModel]] = {
    'cpu': CpuInfo,
    'memory': MemoryInfo,
    'disk': DiskInfo,
    'network': NetworkInfo,
    'fan': FanInfo,
    'uptime': UptimeInfo,
}


def normalize_temperature(raw: Any) -> X86Temperature | ArmTemperature | UnknownTemperature | None:
    """
    Select the temperature layout by which sensor keys are present.

    Only x86 keys -> X86Temperature, only arm keys -> ArmTemperature,
    anything else -> UnknownTemperature. Absent sensors stay None.

    Raises:
        MalformedPayload: temperature is present but not an object
        ValidationError: a present reading is neither a number nor a
            missing-sensor marker
    """
    if raw is None:
        return None
    if not isinstance(raw, dict):
        raise MalformedPayload(f"temperature: expected an object, got {type(raw).__name__}")
    # Layout comes from sensor keys only; a payload "kind" is not a sensor
    raw = {key: value for key, value in raw.items() if key != LAYOUT_TAG}

    keys = raw.keys()
    has_x86 = not X86_TEMPERATURE_KEYS.isdisjoint(keys)
    has_arm = not ARM_TEMPERATURE_KEYS.isdisjoint(keys)

    if has_x86 and not has_arm:
        return X86Temperature.model_validate(raw)
    if has_arm and not has_x86:
        return ArmTemperature.model_validate(raw)
    return UnknownTemperature(readings=raw)


def _processes(raw: Any) -> tuple[ProcessInfo, ...]:
    if raw is None:
        return ()
    if not isinstance(raw, list):
        raise MalformedPayload(f"processes: expected a list, got {type(raw).__name__}")
    # Agent order is most intensive first; keep it
    return tuple(ProcessInfo.model_validate(process) for process in raw)


def normalize(raw: Any) -> MetricsSnapshot:
    """
    Convert a raw agent payload into a MetricsSnapshot.

    Pure and deterministic. Sections missing from the payload become None;
    a section that is present must carry all of its numeric fields.

    Args:
        raw: Decoded JSON body of GET /system
    Returns:
        MetricsSnapshot: Normalized snapshot with floats rounded to 2 places
    Raises:
        MalformedPayload: payload is not an object, or a present section is
            missing a required field or holds a non-numeric value
    """
    if not isinstance(raw, dict):
        raise MalformedPayload(f"Expected a JSON object, got {type(raw).__name__}")

    try:
        sections = {
            name: model.model_validate(raw[name])
            for name, model in _SECTIONS.items()
            if raw.get(name) is not None
        }
        return MetricsSnapshot(
            **sections,
            temperature=normalize_temperature(raw.get('temperature')),
            processes=_processes(raw.get('processes'))
        )
    except ValidationError as e:
        errors = "; ".join(
            f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}"
            for err in e.errors()
        )
        raise MalformedPayload(f"Invalid {e.title} payload: {errors}") from e
