"""FastAPI application entry point."""
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager
from app.api.routes import router as api_router
from app.models import HealthResponse
from core.config import settings
from core.logging import configure_logging, get_logger
from incidents.client import PagerDutyClient
from incidents.view import IncidentView

# Configure logging
configure_logging()
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events."""
    # Startup
    logger.info("Starting Incident Board", version=settings.app_version)

    if not settings.has_credentials:
        logger.warning("PAGERDUTY_API_KEY is not set; incident requests will fail until it is configured")

    app.state.incident_view = IncidentView()
    app.state.pagerduty_client = PagerDutyClient.from_settings()

    yield

    # Shutdown
    client = getattr(app.state, "pagerduty_client", None)
    if client is not None:
        await client.aclose()
    logger.info("Shutting down Incident Board")


# Create FastAPI app
app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description="PagerDuty incident list with acknowledge and resolve actions.",
    lifespan=lifespan
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Configure appropriately for production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include API router
app.include_router(api_router)


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "name": settings.app_name,
        "version": settings.app_version,
        "status": "running",
        "docs": "/docs"
    }


@app.get("/health", response_model=HealthResponse)
async def health_check():
    """Health check endpoint."""
    view = getattr(app.state, "incident_view", None) or IncidentView()
    services = {
        "pagerduty": {
            "api_url": settings.pagerduty_api_url,
            "credential_configured": settings.has_credentials,
        },
        "incident_view": view.state.value,
    }
    if view.error is not None:
        services["incident_view_error"] = view.error.message

    return HealthResponse(
        status="healthy" if settings.has_credentials else "degraded",
        services=services
    )


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "app.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.debug
    )
