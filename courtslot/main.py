# courtslot/main.py
import logging

from fastapi import APIRouter, FastAPI, Request
from fastapi.responses import JSONResponse, Response

from .core.config import settings
from .core.exceptions import DomainException
from .monitoring.prometheus_metrics import prometheus_metrics
from .routes.v1 import owner_bookings as owner_bookings_v1, player_bookings as player_bookings_v1

logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)

logger = logging.getLogger(__name__)


def create_app() -> FastAPI:
    app = FastAPI(
        title="courtslot",
        description="Court booking and time-slot scheduling API",
        version="0.1.0",
    )

    @app.exception_handler(DomainException)
    async def domain_exception_handler(request: Request, exc: DomainException) -> JSONResponse:
        logger.warning(f"{exc.code} on {request.method} {request.url.path}: {exc.message}")
        return JSONResponse(status_code=exc.status_code, content={"detail": exc.to_detail()})

    api_v1 = APIRouter(prefix="/api/v1")
    api_v1.include_router(owner_bookings_v1.router)
    api_v1.include_router(player_bookings_v1.router)
    app.include_router(api_v1)

    @app.get("/health", tags=["health"])
    def health() -> dict:
        return {"status": "ok", "environment": settings.environment}

    @app.get("/metrics", include_in_schema=False)
    def metrics() -> Response:
        return Response(
            content=prometheus_metrics.get_metrics(), media_type=prometheus_metrics.content_type
        )

    logger.info(f"courtslot API ready (environment={settings.environment})")
    return app


app = create_app()
