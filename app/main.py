"""
Main FastAPI application for the Clash document comparison service.
Handles CORS, request logging middleware, error handling and router registration.
"""
import time
from datetime import datetime, timezone

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.analysis.exceptions import AnalysisConfigurationError
from app.api import routes
from app.config.settings import Settings
from app.logging.logger import Log
from app.processor.file_loader import FileLoader
from app.processor.processor import Processor, build_processor

VERSION = "1.0.0"


def create_app(settings: Settings | None = None, processor: Processor | None = None) -> FastAPI:
    """Entry point: load settings -> configure logging -> build processor -> wire routes.

    A missing provider credential does not stop the service; analysis
    requests are then answered with an explanatory result.
    """
    settings = settings if settings is not None else Settings()
    Log.configure(settings.log_level)

    app = FastAPI(
        title="Clash API",
        description=(
            "Upload up to five documents and ask one question. The documents are "
            "compared by an AI provider, which extracts one answer per document, "
            "flags conflicting values and recommends which one to trust."
        ),
        version=VERSION,
    )
    app.state.settings = settings
    app.state.file_loader = FileLoader(settings.max_file_size_bytes)
    app.state.configuration_error = None
    if processor is None:
        try:
            processor = build_processor(settings)
        except AnalysisConfigurationError as exc:
            Log.warning(f"Analysis is disabled until configured: {exc}")
            app.state.configuration_error = str(exc)
    app.state.processor = processor

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.get_allowed_origins(),
        allow_methods=["POST", "GET", "OPTIONS"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        """Log method, path, status and elapsed time; add ``X-Process-Time``."""
        t0 = time.monotonic()
        response = await call_next(request)
        elapsed_ms = round((time.monotonic() - t0) * 1000, 2)
        if request.url.path != "/api/health":
            Log.info(
                f"{request.method} {request.url.path} -> {response.status_code} "
                f"({elapsed_ms:.2f} ms)"
            )
        response.headers["X-Process-Time"] = f"{elapsed_ms}ms"
        return response

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        """Return a structured JSON error for any unhandled exception."""
        Log.error(f"Unhandled exception on {request.method} {request.url.path}: {exc}")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "detail": "Internal server error",
                "error": str(exc),
                "path": str(request.url.path),
                "timestamp": datetime.now(timezone.utc).isoformat(),
            },
        )

    app.include_router(routes.router, prefix="/api", tags=["Analysis"])

    @app.get("/", include_in_schema=False)
    async def root():
        return {
            "name": "Clash API",
            "version": VERSION,
            "docs": "/docs",
            "endpoints": {"analyze": "/api/analyze", "health": "/api/health"},
        }

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    _settings = Settings()
    uvicorn.run("app.main:app", host=_settings.host, port=_settings.port, log_level="info")
