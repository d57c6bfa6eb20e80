# tests/metrics/test_normalizer.py
import pytest

from clusterwatch.core.enums import TemperatureKind
from clusterwatch.core.exceptions import MalformedPayload
from clusterwatch.core.models import ArmTemperature, UnknownTemperature, X86Temperature
from clusterwatch.metrics.normalizer import normalize, normalize_temperature, round2


@pytest.mark.parametrize("value,expected", [
    (0.005, 0.01),
    (-0.005, -0.01),
    (40.005, 40.01),
    (1.005, 1.01),
    (2.675, 2.68),
    (45.678, 45.68),
    (0.004, 0.0),
    (30, 30.0),
])
def test_round2_half_away_from_zero(value, expected):
    assert round2(value) == expected

@pytest.mark.parametrize("value", [0.005, 1.23456, -7.995, 99.999, 1e9 + 0.125, 12345.6789])
def test_round2_idempotent(value):
    once = round2(value)
    assert round2(once) == once

def test_x86_payload(x86_payload):
    snapshot = normalize(x86_payload)

    assert isinstance(snapshot.temperature, X86Temperature)
    assert snapshot.temperature.kind == TemperatureKind.X86
    assert snapshot.temperature.cpu == 45.68
    assert snapshot.temperature.gpu == 50.1
    assert snapshot.temperature.motherboard == 30

    assert snapshot.cpu.usage_percent == 23.46
    assert snapshot.cpu.core_count == 8
    assert snapshot.cpu.temperature_c == 45.68
    assert snapshot.memory.used_mb == 6144.57
    assert snapshot.memory.percent == 37.5
    assert snapshot.disk.used_gb == 120.56
    assert snapshot.network.download_mbps == 12.35
    assert snapshot.network.ping_ms == 3.46
    assert snapshot.fan.cpu == 1200.46
    assert snapshot.uptime.days == 3

def test_arm_payload_keeps_missing_sensor(arm_payload):
    snapshot = normalize(arm_payload)

    assert isinstance(snapshot.temperature, ArmTemperature)
    assert snapshot.temperature.cpu == 40.01
    assert snapshot.temperature.rp1 == 38
    assert snapshot.temperature.ssd is None

def test_zero_reading_is_not_missing():
    temperature = normalize_temperature({"cpu": 0, "rp1": 0.0})
    assert temperature.cpu == 0.0
    assert temperature.rp1 == 0.0
    assert temperature.ssd is None

def test_not_available_marker_is_missing():
    temperature = normalize_temperature({"cpu": "N/A", "gpu": 61.111})
    assert isinstance(temperature, X86Temperature)
    assert temperature.cpu is None
    assert temperature.gpu == 61.11

@pytest.mark.parametrize("raw", [
    {"cpu": 41.2},
    {"cpu": 41.2, "nvme": 33.333},
    {"cpu": 41.2, "gpu": 50, "ssd": 30},
    {},
])
def test_unrecognized_temperature_shape(raw):
    temperature = normalize_temperature(raw)
    assert isinstance(temperature, UnknownTemperature)
    assert temperature.cpu == (41.2 if "cpu" in raw else None)

def test_unknown_shape_keeps_readings():
    temperature = normalize_temperature({"cpu": 41.2, "nvme": 33.333, "pch": None})
    assert temperature.readings == {"cpu": 41.2, "nvme": 33.33, "pch": None}

def test_totals_and_cores_pass_through(x86_payload):
    x86_payload["memory"]["total"] = 3906.123
    x86_payload["disk"]["total"] = 476.9375
    snapshot = normalize(x86_payload)

    assert snapshot.memory.total_mb == 3906.123
    assert snapshot.disk.total_gb == 476.9375
    assert snapshot.cpu.core_count == 8

def test_processes_keep_order_and_round(x86_payload):
    snapshot = normalize(x86_payload)

    assert [p.name for p in snapshot.processes] == ["/usr/bin/python3 worker.py", "nginx"]
    assert snapshot.processes[0].cpu_percent == 55.56
    assert snapshot.processes[1].cpu_percent == 1.0
    assert snapshot.top_process.name == "/usr/bin/python3 worker.py"

def test_error_rates_pass_through(x86_payload):
    snapshot = normalize(x86_payload)
    assert snapshot.network.error_rates.rx == "0.01"
    assert snapshot.network.error_rates.tx == "0.00"

def test_absent_sections_are_none():
    snapshot = normalize({"cpu": {"usage": 5, "cores": 2}})

    assert snapshot.cpu.usage_percent == 5
    assert snapshot.cpu.temperature_c is None
    assert snapshot.memory is None
    assert snapshot.network is None
    assert snapshot.temperature is None
    assert snapshot.processes == ()

def test_cpu_temperature_not_available(x86_payload):
    x86_payload["cpu"]["temperature"] = "N/A"
    assert normalize(x86_payload).cpu.temperature_c is None

@pytest.mark.parametrize("raw", [None, [], "ok", 42])
def test_non_object_payload(raw):
    with pytest.raises(MalformedPayload):
        normalize(raw)

def test_missing_required_field(x86_payload):
    del x86_payload["cpu"]["usage"]
    with pytest.raises(MalformedPayload, match="usage"):
        normalize(x86_payload)

@pytest.mark.parametrize("value", ["high", True, None, [1], float("nan")])
def test_non_numeric_field(x86_payload, value):
    x86_payload["memory"]["percentage"] = value
    with pytest.raises(MalformedPayload):
        normalize(x86_payload)

def test_number_beyond_float_range(x86_payload):
    x86_payload["memory"]["percentage"] = 10**400
    with pytest.raises(MalformedPayload, match="percent"):
        normalize(x86_payload)

def test_core_count_beyond_float_range(arm_payload):
    arm_payload["cpu"]["cores"] = -(10**400)
    with pytest.raises(MalformedPayload):
        normalize(arm_payload)

def test_temperature_kind_key_is_ignored(x86_payload):
    x86_payload["temperature"]["kind"] = "intel"
    temperature = normalize(x86_payload).temperature
    assert temperature.kind == TemperatureKind.X86
    assert temperature.gpu == 50.1

@pytest.mark.parametrize("raw,expected", [
    ({"kind": "pi5", "cpu": 44, "rp1": 39.5}, ArmTemperature),
    ({"kind": "x86", "cpu": 44, "nvme": 31}, UnknownTemperature),
])
def test_kind_key_does_not_select_layout(raw, expected):
    temperature = normalize_temperature(raw)
    assert isinstance(temperature, expected)
    assert temperature.cpu == 44
    if expected is UnknownTemperature:
        assert temperature.readings == {"cpu": 44, "nvme": 31}

def test_section_of_wrong_type(x86_payload):
    x86_payload["disk"] = [1, 2, 3]
    with pytest.raises(MalformedPayload):
        normalize(x86_payload)

def test_bad_temperature_reading(x86_payload):
    x86_payload["temperature"]["gpu"] = "warm"
    with pytest.raises(MalformedPayload):
        normalize(x86_payload)

def test_processes_must_be_list(x86_payload):
    x86_payload["processes"] = {"name": "init"}
    with pytest.raises(MalformedPayload):
        normalize(x86_payload)

def test_normalize_is_deterministic(x86_payload):
    assert normalize(x86_payload) == normalize(x86_payload)
