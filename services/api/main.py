"""
Employee Project Manager - Backend API
FastAPI over a single Google Sheet (one row per employee project)

Run server:
uvicorn main:app --host 0.0.0.0 --port 8000
"""

from fastapi import FastAPI, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.middleware.sessions import SessionMiddleware
import contextvars
from functools import partial
import logging
import os
import time
import uuid

from core.errors import AppError, UpstreamFailure
from core.project_store import ProjectStore
from settings import get_settings

# ========== Request Context for Tracing ==========
request_id_var = contextvars.ContextVar('request_id', default=None)

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

# ============================================================================
# BACKEND CONFIGURATION
# ============================================================================
settings = get_settings()

# ============================================================================
# SPREADSHEET CLIENT (lazy, process-wide)
# ============================================================================

_sheets_client = None


# ---- DI helpers (used by routers/*) ----
def get_sheets_client(app_settings=None):
    """
    Build the Sheets/Drive client on first use. Construction talks to Google,
    so it never happens at import time.
    """
    global _sheets_client
    if _sheets_client is None:
        from adapters.sheets import GoogleSheetsClient

        cfg = app_settings or settings
        sa_json = cfg.resolved_google_sa_json()
        if not sa_json or not cfg.sheets_spreadsheet_id:
            raise UpstreamFailure(
                "Google Sheets is not configured",
                "Set GOOGLE_SA_JSON (or GOOGLE_SA_JSON_BASE64) and SHEETS_SPREADSHEET_ID",
            )
        try:
            logger.info("Initializing Google Sheets client...")
            _sheets_client = GoogleSheetsClient(
                google_sa_json=sa_json,
                spreadsheet_id=cfg.sheets_spreadsheet_id,
            )
            logger.info("✓ Google Sheets client initialized")
        except Exception as e:
            logger.error(f"✗ Failed to initialize Google Sheets: {e}")
            raise UpstreamFailure("Failed to connect to Google Sheets", str(e))
    return _sheets_client


def get_storage_adapter(app_settings=None) -> ProjectStore:
    """
    No remote call here: the store builds the client when it first reads or
    writes, so request validation always runs before Google is contacted.
    """
    return ProjectStore(client_factory=partial(get_sheets_client, app_settings))


# ============================================================================
# FASTAPI APP
# ============================================================================

app = FastAPI(
    title="Employee Project Manager API",
    description="Employee project tracking backed by Google Sheets, with HR reports",
    version="1.0",
    docs_url="/docs",
    redoc_url="/redoc"
)


# ========== Request Tracing Middleware ==========
@app.middleware("http")
async def request_tracing_middleware(request, call_next):
    """Add request_id and timing to all requests."""
    request_id = str(uuid.uuid4())[:8]
    request_id_var.set(request_id)
    started = time.time()

    response = await call_next(request)

    latency_ms = round((time.time() - started) * 1000, 2)
    logger.info(
        f"[{request_id}] {request.method} {request.url.path} -> {response.status_code} ({latency_ms} ms)"
    )

    response.headers["X-Request-ID"] = request_id
    return response


# Signed cookie session (SessionUser + OAuth state)
app.add_middleware(
    SessionMiddleware,
    secret_key=settings.session_secret,
    max_age=settings.session_max_age_seconds,
    same_site="lax",
)

# CORS
ALLOWED_ORIGINS = settings.get_origins_list()
app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ============================================================================
# ERROR HANDLING
# ============================================================================

@app.exception_handler(AppError)
async def app_error_handler(request, exc: AppError):
    if exc.status_code >= 500:
        logger.error(f"{exc.message}: {exc.details}")
    content = {"error": exc.message}
    if exc.details is not None:
        content["details"] = exc.details
    return JSONResponse(status_code=exc.status_code, content=content)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request, exc: RequestValidationError):
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"error": "Invalid request", "details": jsonable_encoder(exc.errors())},
    )


@app.exception_handler(Exception)
async def global_exception_handler(request, exc):
    logger.error(f"Unhandled exception: {str(exc)}", exc_info=True)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": "Internal server error"}
    )


# ============================================================================
# ENDPOINTS
# ============================================================================

@app.get("/healthz")
async def healthz():
    """
    Liveness probe.
    Returns 200 if the application is running.
    """
    return {
        "status": "ok",
        "timestamp": time.time(),
        "version": "1.0"
    }


@app.get("/readyz")
def readyz():
    """
    Readiness probe: the spreadsheet metadata must be reachable.
    Returns 200 if ready, 503 if not ready.
    """
    try:
        meta = get_sheets_client().get_metadata()
        return {
            "status": "ready",
            "spreadsheet": meta.get("title"),
            "timestamp": time.time()
        }
    except Exception as e:
        logger.error(f"Readiness check failed: {str(e)}")
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={
                "status": "not_ready",
                "error": str(e),
                "timestamp": time.time()
            }
        )


@app.get("/")
async def root():
    return {
        "name": settings.app_name,
        "docs": "/docs",
        "health": "/healthz",
    }


# ========== Routers ==========
from routers import auth as auth_router
app.include_router(auth_router.router)

from routers import projects as projects_router
app.include_router(projects_router.router)

from routers import sheets as sheets_router
app.include_router(sheets_router.router)

from routers import email as email_router
app.include_router(email_router.router)

from routers import cron as cron_router
app.include_router(cron_router.router)


@app.on_event("startup")
async def startup_event():
    logger.info(f"{settings.app_name} API starting up...")
    logger.info(f"Spreadsheet ID: {settings.sheets_spreadsheet_id or '(not set)'}")
    logger.info(f"HR recipients: {len(settings.get_hr_emails_list())}")
    logger.info(f"Allowed sign-in domains: {', '.join(settings.get_company_domains_list())}")
    logger.info(f"Allowed origins: {ALLOWED_ORIGINS}")


@app.on_event("shutdown")
async def shutdown_event():
    logger.info(f"{settings.app_name} API shutting down...")


if __name__ == "__main__":
    import uvicorn
    port = int(os.getenv("PORT", 8000))
    uvicorn.run("main:app", host="0.0.0.0", port=port, log_level="info")
