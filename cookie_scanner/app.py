"""
Server entry point — FastAPI app setup and route configuration.
Exposes the scan API (start a scan, fetch a stored result, edit cookie
metadata) and serves the built client in production.
"""

from __future__ import annotations

import contextlib
import pathlib
from collections.abc import AsyncGenerator
from typing import Any

import dotenv
import fastapi
import pydantic
import uvicorn
from fastapi import staticfiles
from fastapi.middleware import cors
from starlette import responses

from cookie_scanner import config, rate_limit, storage
from cookie_scanner.models import scan
from cookie_scanner.pipeline import scan as scan_pipeline
from cookie_scanner.utils import errors, logger

dotenv.load_dotenv()

log = logger.create_logger("Server")

RATE_LIMIT_MESSAGE = "Too many scan requests, please try again later."


class ScanBody(pydantic.BaseModel):
    """Loosely typed ``POST /api/scan`` body; validated by :meth:`ScanRequest.create`."""

    url: Any = None
    additional_urls: Any = pydantic.Field(default=None, alias="additionalUrls")
    wait_time: Any = pydantic.Field(default=None, alias="waitTime")


def _error(status_code: int, message: str) -> responses.JSONResponse:
    return responses.JSONResponse(status_code=status_code, content={"error": message})


def create_app(settings: config.ScannerSettings | None = None) -> fastapi.FastAPI:
    """Build the FastAPI application with its own store and rate limiter."""
    settings = settings or config.get_settings()

    @contextlib.asynccontextmanager
    async def lifespan(_app: fastapi.FastAPI) -> AsyncGenerator[None]:
        log.section("Cookie Scanner Server Started")
        log.info("Environment", {"env": settings.environment})
        yield

    app = fastapi.FastAPI(title="Cookie Scanner", lifespan=lifespan)
    app.state.store = storage.ScanStore()
    app.state.limiter = rate_limit.SlidingWindowLimiter(
        settings.scan_rate_limit,
        settings.scan_rate_window_seconds,
    )

    # ========================================================================
    # Middleware
    # ========================================================================

    app.add_middleware(
        cors.CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # ========================================================================
    # API Routes
    # ========================================================================

    @app.post("/api/scan")
    async def start_scan(request: fastapi.Request, body: ScanBody | None = None) -> responses.JSONResponse:
        """Validate the request, run the scan and store the result."""
        client = request.client.host if request.client else "unknown"
        if not app.state.limiter.allow(client):
            log.warn("Scan rate limit exceeded", {"client": client})
            return _error(429, RATE_LIMIT_MESSAGE)

        body = body or ScanBody()
        try:
            scan_request = scan.ScanRequest.create(body.url, body.additional_urls, body.wait_time)
        except errors.ScanValidationError as exc:
            return _error(400, str(exc))

        log.info("Starting scan", {"url": scan_request.primary_url, "client": client})
        try:
            classified = await scan_pipeline.run_scan_request(scan_request)
        except errors.ScanError as exc:
            log.error("Scan failed", {"url": scan_request.primary_url, "error": str(exc)})
            return _error(500, f"Scan failed: {exc}")
        except Exception as exc:
            log.error("Unexpected scan error", {"url": scan_request.primary_url, "error": errors.get_error_message(exc)})
            return _error(500, f"Scan failed: {errors.get_error_message(exc)}")

        result = app.state.store.add(scan_request.primary_url, classified)
        log.success("Scan stored", {"id": result.id, "cookies": len(classified)})
        return responses.JSONResponse(content=result.model_dump(mode="json", by_alias=True))

    @app.get("/api/scan/{scan_id}")
    async def get_scan(scan_id: str) -> responses.JSONResponse:
        """Return a stored scan result."""
        result = app.state.store.get(scan_id)
        if result is None:
            return _error(404, "Scan result not found.")
        return responses.JSONResponse(content=result.model_dump(mode="json", by_alias=True))

    @app.put("/api/scan/{scan_id}/cookie")
    async def update_cookie(scan_id: str, body: scan.CookieUpdate) -> responses.JSONResponse:
        """Edit category, provider or description of one stored cookie."""
        if app.state.store.get(scan_id) is None:
            return _error(404, "Scan result not found.")
        if not body.name or not body.domain:
            return _error(400, "Cookie name and domain are required.")
        try:
            cookie = app.state.store.update_cookie(scan_id, body.name, body.domain, **body.changes())
        except storage.CookieNotFoundError:
            return _error(404, "Cookie not found.")
        except ValueError as exc:
            return _error(400, str(exc))
        return responses.JSONResponse(content=cookie.model_dump(mode="json", by_alias=True))

    # ========================================================================
    # Static File Serving (Production)
    # ========================================================================

    dist_path = pathlib.Path.cwd() / "client" / "dist"

    if settings.is_production and dist_path.exists():
        log.info("Serving static files", {"path": str(dist_path)})
        app.mount("/assets", staticfiles.StaticFiles(directory=str(dist_path / "assets")), name="assets")

        @app.get("/{full_path:path}")
        async def serve_spa(full_path: str) -> responses.FileResponse:
            """SPA fallback - serve index.html for all non-API routes."""
            file_path = dist_path / full_path
            if file_path.exists() and file_path.is_file():
                return responses.FileResponse(str(file_path))
            return responses.FileResponse(str(dist_path / "index.html"))

    return app


app = create_app()


# ============================================================================
# Start Server
# ============================================================================


def main() -> None:
    """Entry point for running the API server."""
    settings = config.get_settings()
    log.success(f"Server listening on {settings.host}:{settings.port}")
    uvicorn.run(
        "cookie_scanner.app:app",
        host=settings.host,
        port=settings.port,
        reload=not settings.is_production,
    )


if __name__ == "__main__":
    main()
