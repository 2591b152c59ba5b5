"""
Rakugaki Gallery API - FastAPI backend for the doodle critique app.

Services (critique service, rate limiter, artwork store) are built once per
app in ``create_app`` and stored on ``app.state``; the lifespan starts their
background sweeps and shuts them down, along with the model client.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Optional

from dotenv import find_dotenv, load_dotenv
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from rakugaki import __version__
from rakugaki.api.routes import evaluate, works
from rakugaki.application.services.critique_service import CritiqueService
from rakugaki.config.settings import Settings, load_settings
from rakugaki.domain.errors import AppError, RateLimitExceeded, normalize_error
from rakugaki.infrastructure.llm.gemini_provider import GeminiVisionModel
from rakugaki.infrastructure.services.rate_limiter import RateLimiter, RateLimiterConfig
from rakugaki.infrastructure.stores.artwork_store import ArtworkStore
from rakugaki.utils.logging_config import clear_trace_id, configure_logging, set_trace_id

logger = logging.getLogger(__name__)

# Load local .env automatically so model keys are available in API mode.
load_dotenv(find_dotenv(usecwd=True), override=False)


def _build_critique_service(settings: Settings) -> CritiqueService:
    model = GeminiVisionModel(api_key=settings.gemini_api_key, model=settings.gemini_model)
    return CritiqueService(
        model,
        params=settings.generation_params,
        max_retries=settings.max_retries,
    )


@asynccontextmanager
async def _lifespan(app: FastAPI):
    app.state.rate_limiter.start_cleanup()
    app.state.artwork_store.start_cleanup()
    logger.info("Rakugaki API started")
    try:
        yield
    finally:
        # Each shutdown runs even if an earlier one fails.
        for name, shutdown in (
            ("rate limiter", app.state.rate_limiter.shutdown),
            ("artwork store", app.state.artwork_store.shutdown),
            ("critique service", app.state.critique_service.aclose),
        ):
            try:
                await shutdown()
            except Exception:
                logger.exception("Failed to shut down %s", name)
        logger.info("Rakugaki API stopped")


def _error_response(exc: AppError) -> JSONResponse:
    headers = {}
    if isinstance(exc, RateLimitExceeded):
        headers["Retry-After"] = str(exc.retry_after_seconds)
        headers["X-RateLimit-Remaining"] = str(exc.remaining)
    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "error": exc.user_message, "code": exc.code},
        headers=headers,
    )


async def _app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("%s %s failed code=%s: %s", request.method, request.url.path, exc.code, exc, exc_info=exc)
    else:
        logger.warning("%s %s rejected code=%s: %s", request.method, request.url.path, exc.code, exc)
    return _error_response(exc)


async def _unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    error = normalize_error(exc)
    logger.error(
        "%s %s raised %s code=%s: %s",
        request.method,
        request.url.path,
        type(exc).__name__,
        error.code,
        exc,
        exc_info=exc,
    )
    return _error_response(error)


def create_app(
    settings: Optional[Settings] = None,
    *,
    critique_service: Optional[CritiqueService] = None,
    rate_limiter: Optional[RateLimiter] = None,
    artwork_store: Optional[ArtworkStore] = None,
) -> FastAPI:
    settings = settings or load_settings()

    app = FastAPI(
        title="Rakugaki Gallery API",
        description="Turns doodles into gallery pieces with a fabricated art critique",
        version=__version__,
        lifespan=_lifespan,
    )

    app.state.settings = settings
    # Injected services are kept as-is; an empty store is falsy.
    if critique_service is None:
        critique_service = _build_critique_service(settings)
    if rate_limiter is None:
        rate_limiter = RateLimiter(
            RateLimiterConfig(
                max_requests=settings.rate_limit,
                window_ms=settings.rate_limit_window_ms,
                cleanup_interval_ms=settings.cleanup_interval_ms,
            )
        )
    if artwork_store is None:
        artwork_store = ArtworkStore(
            ttl_ms=settings.cache_ttl_ms,
            max_size=settings.cache_max_size,
            cleanup_interval_ms=settings.cleanup_interval_ms,
        )
    app.state.critique_service = critique_service
    app.state.rate_limiter = rate_limiter
    app.state.artwork_store = artwork_store

    # CORS for the web client
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-RateLimit-Remaining", "Retry-After", "X-Trace-Id"],
    )

    @app.middleware("http")
    async def _trace_id_middleware(request: Request, call_next):
        trace_id = set_trace_id(request.headers.get("x-trace-id"))
        try:
            response = await call_next(request)
        finally:
            clear_trace_id()
        response.headers["X-Trace-Id"] = trace_id
        return response

    app.add_exception_handler(AppError, _app_error_handler)
    app.add_exception_handler(Exception, _unhandled_error_handler)

    @app.get("/health")
    async def health_check():
        """Health check endpoint"""
        return {"status": "healthy", "version": __version__}

    app.include_router(evaluate.router, prefix="/api", tags=["Evaluate"])
    app.include_router(works.router, prefix="/api", tags=["Works"])
    return app


app = create_app()


def run(host: str = "0.0.0.0", port: int = 8000) -> None:
    import uvicorn

    configure_logging()
    uvicorn.run(app, host=host, port=port)


if __name__ == "__main__":
    run()
