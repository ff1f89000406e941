"""
palettekit service entry point.
"""
from contextlib import asynccontextmanager

from fastapi import FastAPI

from palettekit.api.v1 import router as v1_router
from palettekit.config import config
from palettekit.schemas import HealthResponse
from palettekit.utils.logging import get_logger
from palettekit.utils.metrics import get_metrics


@asynccontextmanager
async def lifespan(app: FastAPI):
    get_logger().info(f"{config.SERVICE_NAME} {config.VERSION} starting",
                      extra={"log_level": config.LOG_LEVEL})
    yield
    get_logger().info(f"{config.SERVICE_NAME} shutting down")


app = FastAPI(
    title="palettekit",
    description="K-means palette extraction over decoded colour samples",
    version=config.VERSION,
    lifespan=lifespan
)

app.include_router(v1_router)


@app.get("/healthz", response_model=HealthResponse)
def healthz() -> HealthResponse:
    """Liveness probe."""
    return HealthResponse(ok=True, version=config.VERSION, service=config.SERVICE_NAME)


@app.get("/metrics")
def metrics():
    """In-process clustering metrics."""
    return get_metrics().get_summary()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("palettekit.main:app", host="0.0.0.0", port=8000)
