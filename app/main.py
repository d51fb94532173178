"""FastAPI entry point."""
from fastapi import FastAPI, Request
from fastapi.exception_handlers import http_exception_handler
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.base import BaseHTTPMiddleware

from app.api.v1.router import router as api_router
from geo_audit import __version__
from geo_audit.config.log_setup import configure_logging
from geo_audit.config.settings import settings

configure_logging()


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Add security headers to all responses."""

    # CSP for Swagger UI / ReDoc (needs CDN resources)
    API_DOCS_CSP = (
        "default-src 'self'; "
        "script-src 'self' 'unsafe-inline' https://cdn.jsdelivr.net; "
        "style-src 'self' 'unsafe-inline' https://cdn.jsdelivr.net; "
        "img-src 'self' data: https://cdn.jsdelivr.net https://fastapi.tiangolo.com; "
        "font-src 'self' https://cdn.jsdelivr.net; "
        "connect-src 'self'; "
        "frame-ancestors 'none'"
    )

    DEFAULT_CSP = "default-src 'none'; frame-ancestors 'none'"

    async def dispatch(self, request: Request, call_next):
        response = await call_next(request)

        if request.url.path in ("/api/docs", "/api/redoc", "/api/openapi.json"):
            response.headers["Content-Security-Policy"] = self.API_DOCS_CSP
        else:
            response.headers["Content-Security-Policy"] = self.DEFAULT_CSP

        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
        return response


app = FastAPI(
    title="GEO Audit API",
    description="""
Audit a single web page for generative engine optimization (GEO).

## Endpoints

1. `POST /api/v1/analyze` - Run a full audit and get the scored result
2. `POST /api/v1/generate-faq` - Build an FAQ page from question headings
3. `GET /api/v1/runs/{run_id}` - Fetch a stored audit result

## Errors

Errors use the `{"error": {"code", "message", "details"}}` envelope.
Blocked hosts return 403, robots.txt refusals 451 and fetch failures 502.
""",
    version=__version__,
    debug=settings.debug,
    docs_url="/api/docs",
    redoc_url="/api/redoc",
    openapi_url="/api/openapi.json",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=list(settings.api.cors_origins),
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["Content-Type"],
)
app.add_middleware(SecurityHeadersMiddleware)

app.include_router(api_router, prefix="/api/v1")


@app.exception_handler(StarletteHTTPException)
async def error_envelope_handler(request: Request, exc: StarletteHTTPException):
    """Serve structured API errors as the top-level body instead of under "detail"."""
    if isinstance(exc.detail, dict) and "error" in exc.detail:
        return JSONResponse(status_code=exc.status_code, content=exc.detail, headers=exc.headers)
    return await http_exception_handler(request, exc)
