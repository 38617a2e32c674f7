"""
Storefront FastAPI Application
Builds the app around one Settings instance and the services wired from it
"""

import logging
import uuid
from datetime import datetime, timezone
from typing import Optional

import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.base import BaseHTTPMiddleware

from storefront import __version__
from storefront.api import api_router
from storefront.core.config import Settings, get_settings
from storefront.core.exceptions import register_exception_handlers
from storefront.core.logging_config import set_request_id, setup_logging
from storefront.core.security import TokenIssuer
from storefront.services.container import Services, build_aws_services

logger = logging.getLogger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"


class RequestIdMiddleware(BaseHTTPMiddleware):
    """Propagates or assigns a request id and exposes it to log records."""

    async def dispatch(self, request: Request, call_next):
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex
        set_request_id(request_id)
        try:
            response = await call_next(request)
        finally:
            set_request_id(None)
        response.headers[REQUEST_ID_HEADER] = request_id
        return response


def create_app(settings: Optional[Settings] = None, services: Optional[Services] = None) -> FastAPI:
    """
    Application factory.

    Args:
        settings: configuration; read from the environment when omitted
        services: pre-built services (tests); wired to AWS when omitted
    """
    settings = settings or get_settings()

    setup_logging(
        level=settings.LOG_LEVEL or ("INFO" if settings.is_production else "DEBUG"),
        log_format=settings.LOG_FORMAT or ("json" if settings.is_production else "text"),
    )

    token_issuer = TokenIssuer.from_settings(settings)
    if services is None:
        services = build_aws_services(settings, token_issuer)

    app = FastAPI(
        title=settings.PROJECT_NAME,
        version=__version__,
        docs_url=None if settings.is_production else "/docs",
        redoc_url=None,
    )
    app.state.settings = settings
    app.state.token_issuer = token_issuer
    app.state.services = services

    app.add_middleware(RequestIdMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["GET", "HEAD", "PUT", "PATCH", "POST", "DELETE"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)
    app.include_router(api_router, prefix=settings.API_PREFIX)

    @app.get("/health", tags=["health"])
    async def health_check():
        return {
            "status": "healthy",
            "service": "storefront-api",
            "version": __version__,
            "environment": settings.ENVIRONMENT,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }

    logger.info(f"{settings.PROJECT_NAME} ready (env={settings.ENVIRONMENT}, region={settings.AWS_REGION})")
    return app


def run() -> None:
    """Console entry point: serve with uvicorn."""
    settings = get_settings()
    uvicorn.run(create_app(settings), host=settings.HOST, port=settings.PORT, log_config=None)


if __name__ == "__main__":
    run()
