# lotmanager/main.py
"""
FastAPI application entry point.
Includes request logging, the global error handler, and all routers.
"""

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware
from lotmanager.routers import trips, spaces, tariffs, stats, health
from lotmanager.database import create_tables
from lotmanager.config import settings
from lotmanager.utils.logger import get_logger
import time

logger = get_logger(__name__)

app = FastAPI(
    title="Lot Manager API",
    description="Parking lot entry/exit, space allocation and tariff billing.",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
)

# ── CORS (operator and admin dashboards call the API from the browser) ───────
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],   # Restrict to dashboard origin in production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ── Request Timing Middleware ────────────────────────────────────────────────
@app.middleware("http")
async def log_requests(request: Request, call_next):
    start = time.time()
    response = await call_next(request)
    duration = round((time.time() - start) * 1000, 2)
    logger.debug(f"{request.method} {request.url.path} → {response.status_code} ({duration}ms)")
    return response


# ── Global Exception Handler ─────────────────────────────────────────────────
@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled exception on {request.url.path}: {exc}", exc_info=True)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": "Internal server error", "code": "INTERNAL_ERROR"},
    )


# ── Routers ──────────────────────────────────────────────────────────────────
app.include_router(trips.router,   prefix="/api/v1", tags=["Entry/Exit"])
app.include_router(spaces.router,  prefix="/api/v1", tags=["Spaces"])
app.include_router(tariffs.router, prefix="/api/v1", tags=["Tariffs"])
app.include_router(stats.router,   prefix="/api/v1", tags=["Reports"])
app.include_router(health.router,  prefix="/api/v1", tags=["Health"])


# ── Startup ───────────────────────────────────────────────────────────────────
@app.on_event("startup")
async def startup():
    logger.info("Lot Manager starting up...")
    create_tables()
    logger.info("Database tables ready")
    ceilings = {name: group["capacity"] for name, group in settings.CAPACITY_GROUPS.items()}
    logger.info(f"Capacity groups: {ceilings}")
    logger.info(f"Listening on http://{settings.BACKEND_HOST}:{settings.BACKEND_PORT}")


@app.on_event("shutdown")
async def shutdown():
    logger.info("Lot Manager shutting down...")
