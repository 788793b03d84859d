"""FastAPI application entry point — WhatsApp Gateway"""

import time
import uuid
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from wagate import __version__
from wagate.api.errors import register_exception_handlers
from wagate.api.routes import router
from wagate.config import settings, validate_settings
from wagate.core.logging import log, setup_logging
from wagate.services.context import GatewayContext, context_from_settings


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    validate_settings()
    setup_logging(debug=settings.DEBUG, log_format=settings.LOG_FORMAT)
    log.info(f"Starting {settings.APP_NAME}...")
    log.info(f"Environment: {settings.current_env}")

    gateway: GatewayContext | None = getattr(app.state, "gateway", None)
    if gateway is None:
        gateway = context_from_settings(settings)
        app.state.gateway = gateway
    await gateway.start()

    log.info(f"Server running on port {settings.PORT}")
    log.info(f"- Access the web interface at http://localhost:{settings.PORT}")
    log.info(f"- QR code available at http://localhost:{settings.PORT}/qr when needed")

    yield

    log.info("Shutting down...")
    await gateway.stop()


def create_app(gateway: GatewayContext | None = None) -> FastAPI:
    app = FastAPI(
        title=settings.APP_NAME,
        description="HTTP/WebSocket gateway over a WhatsApp multi-device session",
        version=__version__,
        lifespan=lifespan,
        docs_url="/docs" if settings.DEBUG else None,
        redoc_url="/redoc" if settings.DEBUG else None,
    )
    if gateway is not None:
        app.state.gateway = gateway

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def logging_middleware(request: Request, call_next):
        """Log all requests."""
        request_id = str(uuid.uuid4())[:8]
        start_time = time.time()
        request.state.request_id = request_id

        with log.contextualize(request_id=request_id):
            log.info(
                "Request started",
                method=request.method,
                path=request.url.path,
            )
            response = await call_next(request)
            duration_ms = (time.time() - start_time) * 1000
            log.info(
                "Request completed",
                method=request.method,
                path=request.url.path,
                status_code=response.status_code,
                duration_ms=round(duration_ms, 2),
            )

        return response

    register_exception_handlers(app)
    app.include_router(router)

    @app.get("/health")
    async def health_check():
        """Health check endpoint."""
        return {"status": "healthy", "app": settings.APP_NAME}

    return app


app = create_app()


def run() -> None:
    """Console entry point: serve on HOST:PORT."""
    uvicorn.run("wagate.main:app", host=settings.HOST, port=settings.PORT)


if __name__ == "__main__":
    run()
