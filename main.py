"""
Internship Portal — FastAPI Application Entry Point

Registers all routers, applies middleware, and serves the API.
"""

import logging
import contextlib
import traceback
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware

from portal.config import settings
from portal.domain.errors import PortalError
from portal.routers import auth, faculty, principal, student, users

# ── Logging ───────────────────────────────────────────────────
logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s │ %(levelname)-8s │ %(name)s │ %(message)s",
)
logger = logging.getLogger(__name__)


@contextlib.asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    logger.info(f"🚀 {settings.app_name} is starting up")
    if settings.scheduler_enabled:
        from portal.scheduler import start_scheduler
        start_scheduler()
    yield
    # Shutdown
    if settings.scheduler_enabled:
        from portal.scheduler import shutdown_scheduler
        shutdown_scheduler()
    logger.info(f"🛑 {settings.app_name} is shutting down")


# ── App factory ───────────────────────────────────────────────
app = FastAPI(
    title="Internship Portal",
    description=(
        "College internship tracking for students, faculty mentors and "
        "principals, from self-identified internships to monthly reports."
    ),
    version="0.1.0",
    debug=settings.debug,
    lifespan=lifespan,
)

# ── CORS ──────────────────────────────────────────────────────
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["*"],
)


# ── Exception Handlers ───────────────────────────────────────
@app.exception_handler(PortalError)
async def portal_error_handler(request: Request, exc: PortalError):
    if exc.status_code == 403:
        logger.warning(f"Denied {request.method} {request.url.path}: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


# Ensures ALL unhandled errors return proper JSON with CORS headers
# (prevents the browser from seeing a raw connection error)
@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.error(
        f"Unhandled exception on {request.method} {request.url.path}: "
        f"{type(exc).__name__}: {exc}\n{traceback.format_exc()}"
    )
    return JSONResponse(
        status_code=500,
        content={"detail": f"Internal server error: {type(exc).__name__}"},
    )


# ── Routers ───────────────────────────────────────────────────
app.include_router(auth.router)
app.include_router(users.router)
app.include_router(faculty.router)
app.include_router(student.router)
app.include_router(principal.router)


# ── Health Check ──────────────────────────────────────────────
@app.get("/", tags=["Health"])
async def health_check():
    return {"status": "ok", "service": settings.app_name}
