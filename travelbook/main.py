"""
Travelbook Service - FastAPI Application
Travel packages, bookings, user accounts, AI itineraries and the admin
console behind one HTTP API.

LLM Provider:
- LLM_PROVIDER if set
- else Gemini if GEMINI_API_KEY is set, then OpenAI if OPENAI_API_KEY is set
- else a local Ollama
"""

import logging
from contextlib import asynccontextmanager
from datetime import datetime
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from loguru import logger
from starlette.exceptions import HTTPException as StarletteHTTPException

from travelbook.api import admin_router, auth_router, bookings_router, itineraries_router, packages_router
from travelbook.config import Settings, settings
from travelbook.context import AppContext, build_context
from travelbook.exceptions import TravelbookError

# Configure logging for uvicorn
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)

SERVICE_NAME = "travelbook"
SERVICE_VERSION = "1.0.0"


def create_app(app_settings: Settings = settings, ctx: Optional[AppContext] = None) -> FastAPI:
    """
    Build the FastAPI application.

    A ready-made context can be passed in; otherwise one is built from
    `app_settings` at startup.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("=" * 50)
        logger.info("Starting Travelbook Service")
        logger.info("=" * 50)
        logger.info(f"Environment: {app_settings.API_ENV}")
        if getattr(app.state, "ctx", None) is None:
            app.state.ctx = build_context(app_settings)
        context: AppContext = app.state.ctx
        logger.info(f"Document store: {context.store.backend}")
        logger.info(f"Session store: {context.sessions.backend}")
        logger.info(f"LLM Provider: {context.llm.provider} ({context.llm.model})")
        logger.info(f"Photo search: {'enabled' if context.images.enabled else 'disabled'}")

        yield

        await context.close()
        logger.info("Travelbook Service shutdown complete")

    app = FastAPI(
        title="Travelbook Service",
        description="Travel packages, bookings and AI-generated itineraries.",
        version=SERVICE_VERSION,
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc"
    )
    if ctx is not None:
        app.state.ctx = ctx

    # CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=app_settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # ============================================
    # Error handlers
    # ============================================

    @app.exception_handler(TravelbookError)
    async def travelbook_error_handler(request: Request, exc: TravelbookError):
        if exc.status_code >= 500:
            logger.error(f"{request.method} {request.url.path} -> {exc.status_code}: {exc.detail or exc.message}")
        return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        if exc.status_code == 404:
            return JSONResponse(status_code=404, content={"detail": "Az oldal nem található."})
        return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail}, headers=exc.headers)

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.exception(f"Unhandled error on {request.method} {request.url.path}: {exc}")
        return JSONResponse(status_code=500, content={"detail": TravelbookError.default_message})

    # ============================================
    # Routes
    # ============================================

    app.include_router(auth_router)
    app.include_router(packages_router)
    app.include_router(bookings_router)
    app.include_router(itineraries_router)
    app.include_router(admin_router)

    @app.get("/")
    async def root():
        return {
            "service": SERVICE_NAME,
            "version": SERVICE_VERSION,
            "status": "running",
            "docs": "/docs",
        }

    @app.get("/health")
    async def health_check(request: Request):
        """Backend connectivity and LLM provider"""
        context: AppContext = request.app.state.ctx
        store_ok = context.store.ping()
        sessions_ok = context.sessions.ping()
        return {
            "status": "healthy" if store_ok and sessions_ok else "degraded",
            "service": SERVICE_NAME,
            "version": SERVICE_VERSION,
            "components": {
                "document_store": f"{context.store.backend} ({'ok' if store_ok else 'unreachable'})",
                "session_store": f"{context.sessions.backend} ({'ok' if sessions_ok else 'unreachable'})",
                "llm_provider": context.llm.provider,
                "llm_model": context.llm.model,
                "photo_search": "enabled" if context.images.enabled else "disabled",
            },
            "timestamp": datetime.now().isoformat()
        }

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "travelbook.main:app",
        host=settings.API_HOST,
        port=settings.API_PORT,
        reload=settings.API_ENV == "development"
    )
