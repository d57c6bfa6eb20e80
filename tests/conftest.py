import copy
import sys
from pathlib import Path

import pytest
import pytest_asyncio
from aiohttp import web
from aiohttp.test_utils import TestServer

# Add project root to Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from clusterwatch.core.config import PollerConfig
from clusterwatch.core.enums import PlatformKind
from clusterwatch.core.models import Host

X86_PAYLOAD = {
    "cpu": {"usage": 23.456, "cores": 8, "temperature": 45.678},
    "memory": {"used": 6144.567, "total": 16384, "percentage": 37.504},
    "disk": {"used": 120.555, "total": 512, "percentage": 23.546},
    "network": {
        "download": 12.345,
        "upload": 1.234,
        "ping": 3.456,
        "errorRates": {"rx": "0.01", "tx": "0.00"}
    },
    "temperature": {"cpu": 45.678, "gpu": 50.1, "motherboard": 30},
    "fan": {"cpu": 1200.456, "case1": 800, "case2": 0},
    "uptime": {"days": 3, "hours": 4, "minutes": 5},
    "processes": [
        {"name": "/usr/bin/python3 worker.py", "cpu": 55.555, "memory": 10.123},
        {"name": "nginx", "cpu": 1.004, "memory": 0.5}
    ]
}

ARM_PAYLOAD = {
    "cpu": {"usage": 12.5, "cores": 4, "temperature": 40.005},
    "memory": {"used": 2048, "total": 8192, "percentage": 25},
    "disk": {"used": 20, "total": 64, "percentage": 31.25},
    "network": {
        "download": 0.5,
        "upload": 0.25,
        "ping": 1.5,
        "errorRates": {"rx": "0.00", "tx": "0.00"}
    },
    "temperature": {"cpu": 40.005, "rp1": 38, "ssd": None},
    "fan": {"cpu": 0, "case1": 0, "case2": 0},
    "uptime": {"days": 0, "hours": 2, "minutes": 30},
    "processes": []
}


@pytest.fixture
def x86_payload():
    return copy.deepcopy(X86_PAYLOAD)

@pytest.fixture
def arm_payload():
    return copy.deepcopy(ARM_PAYLOAD)

@pytest.fixture
def poller_config():
    return PollerConfig(
        scheme="http",
        timeout_ms=300,
        poll_interval_ms=50,
        prune_interval_ms=50
    )

@pytest_asyncio.fixture
async def agent_server():
    """Factory starting local agents; returns the address of each one"""
    servers: list[TestServer] = []

    async def start(handler) -> str:
        app = web.Application()
        app.router.add_get("/system", handler)
        server = TestServer(app)
        await server.start_server()
        servers.append(server)
        return f"{server.host}:{server.port}"

    yield start

    for server in servers:
        await server.close()


@pytest.fixture
def make_host():
    def factory(address: str, name: str = "node", platform: PlatformKind = PlatformKind.ARM) -> Host:
        return Host(name=name, address=address, platform=platform)
    return factory
