import random
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
import structlog

from cyberwatch.config import settings
from cyberwatch.errors import CyberWatchError, NotFoundError, ValidationError
from cyberwatch.api import ai, alerts, analytics, auth, threats, settings as settings_api
from cyberwatch.agents.flows import AIFlows, CompletionBackend
from cyberwatch.schemas.common import ErrorResponse, HealthResponse
from cyberwatch.services.alert_store import AlertStore
from cyberwatch.services.analytics_service import AnalyticsService
from cyberwatch.services.mock_data import MockDataGenerator
from cyberwatch.services.profile_service import ProfileService
from cyberwatch.services.session_service import SessionService
from cyberwatch.services.storage import JsonFileStorage, KeyValueStorage
from cyberwatch.services.threat_feed import ThreatFeed
from cyberwatch.services.validation import field_errors

structlog.configure(
    processors=[
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.JSONRenderer(),
    ]
)
logger = structlog.get_logger()


def _error_response(exc: CyberWatchError) -> JSONResponse:
    body = ErrorResponse(detail=exc.message, error_code=exc.error_code)
    if isinstance(exc, ValidationError):
        body.fields = exc.fields
    if isinstance(exc, NotFoundError):
        body.back_to = exc.back_to
    return JSONResponse(
        status_code=exc.status_code,
        content=body.model_dump(by_alias=True, exclude_none=True),
    )


def create_app(
    storage: KeyValueStorage | None = None,
    ai_backend: CompletionBackend | None = None,
    rng: random.Random | None = None,
) -> FastAPI:
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("Starting application", version=settings.app_version)

        generator = MockDataGenerator(rng or random.Random(settings.mock_seed))
        data = generator.generate(settings.mock_threat_count)
        kv = storage or JsonFileStorage(settings.storage_path)

        app.state.data = data
        app.state.feed = ThreatFeed(data.threats, settings.threat_page_size)
        app.state.alerts = AlertStore(data.alert_settings)
        app.state.session = SessionService(kv).init()
        app.state.profiles = ProfileService(kv, app.state.session, data.user_profile)
        app.state.analytics = AnalyticsService(data, app.state.feed, app.state.alerts)
        app.state.ai_flows = AIFlows(ai_backend)

        yield

        app.state.session.teardown()
        logger.info("Shutting down application")

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(CyberWatchError)
    async def cyberwatch_error_handler(request: Request, exc: CyberWatchError):
        if exc.status_code >= 500:
            logger.error("Request failed", path=request.url.path, error=exc.message, code=exc.error_code)
        else:
            logger.info("Request rejected", path=request.url.path, error=exc.message, code=exc.error_code)
        return _error_response(exc)

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        fields = field_errors(exc.errors(), from_request=True)
        logger.info("Request rejected", path=request.url.path, fields=sorted(fields))
        return _error_response(ValidationError("Invalid request", fields=fields))

    # Register API routers
    app.include_router(threats.router, prefix="/api/threats", tags=["threats"])
    app.include_router(alerts.router, prefix="/api/alerts", tags=["alerts"])
    app.include_router(ai.router, prefix="/api/ai", tags=["ai"])
    app.include_router(analytics.router, prefix="/api/analytics", tags=["analytics"])
    app.include_router(auth.router, prefix="/api/auth", tags=["auth"])
    app.include_router(settings_api.router, prefix="/api/settings", tags=["settings"])

    @app.get("/api/health", response_model=HealthResponse)
    async def health_check():
        return {"status": "healthy", "version": settings.app_version}

    return app


app = create_app()
