from contextlib import asynccontextmanager
from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse, Response
from prometheus_client import generate_latest

from clusterwatch.core.config import Config
from clusterwatch.presentation.cards import build_cards
from clusterwatch.utils.logger import LoggerSetup
from .service import ClusterMonitorService

config = Config()
LoggerSetup.configure(config.logging)
logger = LoggerSetup.setup(__name__)

# Service instance
service: ClusterMonitorService | None = None

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Service lifecycle manager"""
    global service

    try:
        service = ClusterMonitorService(config=config.poller)
        await service.start()

        yield  # Service is running

    except Exception as e:
        logger.error(f"Service initialization failed: {e}")
        raise

    finally:
        if service:
            await service.stop()

app = FastAPI(
    title="Clusterwatch",
    description="Live system metrics of the cluster hosts",
    version="1.0.0",
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["GET"],
    allow_headers=["*"],
)


def _require_service() -> ClusterMonitorService:
    if not service:
        raise HTTPException(status_code=503, detail="Service not initialized")
    return service


@app.get("/health")
async def health_check():
    """Health check endpoint"""
    current = _require_service()
    return {
        "status": "healthy",
        "service_status": current.status.value,
        "last_update": current.last_update
    }

@app.get("/status")
async def get_status():
    """Latest status of every host"""
    current = _require_service()
    return {
        host_id: status.model_dump(mode="json")
        for host_id, status in current.get_statuses().items()
    }

@app.get("/history")
async def get_history():
    """Network history of every host"""
    current = _require_service()
    return {
        host_id: [point.model_dump(mode="json") for point in points]
        for host_id, points in current.get_history().items()
    }

@app.get("/history/{host_id}")
async def get_host_history(host_id: str):
    """Network history of one host"""
    current = _require_service()
    if current.get_host(host_id) is None:
        raise HTTPException(status_code=404, detail=f"Unknown host {host_id}")
    return [point.model_dump(mode="json") for point in current.poller.history.read(host_id)]

@app.get("/cards")
async def get_cards():
    """Display-ready card for every host"""
    current = _require_service()
    return [card.model_dump(mode="json") for card in build_cards(current.hosts, current.get_statuses())]

@app.get("/metrics")
async def get_metrics():
    """Get Prometheus metrics"""
    current = _require_service()
    return Response(
        content=generate_latest(current.poller.metrics.registry),
        media_type="text/plain"
    )

@app.get("/report", response_class=PlainTextResponse)
async def get_report():
    """Human-readable service status"""
    return _require_service().get_service_status()

@app.exception_handler(Exception)
async def global_exception_handler(request, exc):
    """Global exception handler"""
    logger.error(f"Unhandled error: {exc}")
    return JSONResponse(
        status_code=500,
        content={"detail": "Internal server error"}
    )

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        app,
        host=config.api.host,
        port=config.api.port
    )
