# aet_portal/main.py
"""
FastAPI application entry point.
Includes security middleware, error handlers, upload serving, and all routers.
"""

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from pydantic import ValidationError
from starlette.middleware.base import BaseHTTPMiddleware
from aet_portal.routers import admin, dashboard, health, licenses, users, vehicles
from aet_portal.database import SessionLocal, create_tables
from aet_portal.exceptions import AetError
from aet_portal.config import settings
from aet_portal.services.store import Store
from aet_portal.services.user_service import ensure_bootstrap_admin
from aet_portal.utils.logger import get_logger
import time

logger = get_logger(__name__)

app = FastAPI(
    title="AET Portal API",
    description="Transport license (AET) requests, tracking and issuance.",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
)

# ── CORS (web client served from another origin) ────────────────────────────
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],   # Restrict to the web client origin in production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ── API Key Middleware ───────────────────────────────────────────────────────
class APIKeyMiddleware(BaseHTTPMiddleware):
    """
    Optional shared secret between the auth gateway and this API.
    Health check and docs stay open. Set API_KEY in .env; leave empty to disable.
    """
    open_paths = {"/api/v1/health", "/docs", "/redoc", "/openapi.json"}

    async def dispatch(self, request: Request, call_next):
        if request.url.path in self.open_paths or not settings.API_KEY:
            return await call_next(request)

        api_key = request.headers.get("X-API-Key")
        if api_key != settings.API_KEY:
            return JSONResponse(
                status_code=status.HTTP_401_UNAUTHORIZED,
                content={"detail": "Invalid or missing API key"},
            )
        return await call_next(request)


if settings.API_KEY:
    app.add_middleware(APIKeyMiddleware)


# ── Request Timing Middleware ────────────────────────────────────────────────
@app.middleware("http")
async def log_requests(request: Request, call_next):
    start = time.time()
    response = await call_next(request)
    duration = round((time.time() - start) * 1000, 2)
    logger.debug(f"{request.method} {request.url.path} → {response.status_code} ({duration}ms)")
    return response


# ── Exception Handlers ───────────────────────────────────────────────────────
@app.exception_handler(AetError)
async def portal_error_handler(request: Request, exc: AetError):
    logger.info(f"{request.method} {request.url.path} → {exc.status_code} {type(exc).__name__}: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


@app.exception_handler(ValidationError)
async def form_validation_handler(request: Request, exc: ValidationError):
    """Models built by hand from multipart form fields — answer 400 like any bad input."""
    errors = "; ".join(
        f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}" for err in exc.errors()
    )
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"detail": errors})


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled exception on {request.url.path}: {exc}", exc_info=True)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Internal server error"},
    )


# ── Routers ──────────────────────────────────────────────────────────────────
app.include_router(health.router,    prefix="/api/v1", tags=["Health"])
app.include_router(users.router,     prefix="/api/v1", tags=["Users"])
app.include_router(vehicles.router,  prefix="/api/v1", tags=["Vehicles"])
app.include_router(licenses.router,  prefix="/api/v1", tags=["Licenses"])
app.include_router(dashboard.router, prefix="/api/v1", tags=["Dashboard"])
app.include_router(admin.router,     prefix="/api/v1", tags=["Admin"])

# Uploaded documents and issued licenses
app.mount("/uploads", StaticFiles(directory=settings.UPLOAD_DIR, check_dir=False), name="uploads")


# ── Startup ───────────────────────────────────────────────────────────────────
@app.on_event("startup")
async def startup():
    logger.info("🚀 AET Portal starting up...")
    create_tables()
    logger.info("✅ Database tables ready")

    db = SessionLocal()
    try:
        admin_user = ensure_bootstrap_admin(Store(db))
        if admin_user:
            logger.info(f"👤 Bootstrap admin: {admin_user.email} (id={admin_user.id})")
    finally:
        db.close()

    logger.info(f"📂 Uploads stored in {settings.UPLOAD_DIR}")
    logger.info(f"🌐 Listening on http://{settings.BACKEND_IP}:{settings.BACKEND_PORT}")
    logger.info("📖 API docs at /docs")


@app.on_event("shutdown")
async def shutdown():
    logger.info("🛑 AET Portal shutting down...")
