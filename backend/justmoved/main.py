"""
FastAPI app entrypoint.

Places proxy + cache for the relocation guide: lookups, filtered recommendations, cache cleanup.
"""
import logging
from contextlib import asynccontextmanager
from pathlib import Path

from apscheduler.schedulers.background import BackgroundScheduler
from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

# Load .env from backend/ before any app code
load_dotenv(Path(__file__).resolve().parent.parent / ".env")

from justmoved.api.routes import cache, places, recommendations
from justmoved.config import settings
from justmoved.core.constants import CACHE_SWEEP_JOB_ID
from justmoved.core.errors import PlacesError, places_error_handler, request_validation_handler
from justmoved.scheduler.cache_cleanup_job import run_cache_sweep_job

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    datefmt="%H:%M:%S",
)
# httpx logs full request URLs at INFO, which include the provider key
logging.getLogger("httpx").setLevel(logging.WARNING)
logger = logging.getLogger(__name__)

# Scheduler: sweep expired cache rows every cache_sweep_interval_hours
_scheduler = BackgroundScheduler()


@asynccontextmanager
async def lifespan(app: FastAPI):
    if settings.scheduler_enabled:
        _scheduler.add_job(
            run_cache_sweep_job,
            "interval",
            hours=settings.cache_sweep_interval_hours,
            id=CACHE_SWEEP_JOB_ID,
            replace_existing=True,
        )
        _scheduler.start()
        app.state.scheduler = _scheduler
        logger.info("Cache sweep scheduled every %sh", settings.cache_sweep_interval_hours)
    if not settings.google_places_api_key:
        logger.warning("GOOGLE_PLACES_API_KEY is not set; provider lookups will return 500")
    yield
    if settings.scheduler_enabled:
        _scheduler.shutdown(wait=False)


app = FastAPI(title="JustMoved Places API", version="0.1.0", lifespan=lifespan)

# CORS: every function answers pre-flight with a permissive origin
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origin_list(),
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["authorization", "x-client-info", "apikey", "content-type"],
)

app.add_exception_handler(PlacesError, places_error_handler)
app.add_exception_handler(RequestValidationError, request_validation_handler)


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    """Unexpected errors: JSON body with the message, status 500."""
    logger.exception("Unhandled error on %s: %s", request.url.path, exc)
    return JSONResponse(status_code=500, content={"error": str(exc)})


app.include_router(places.router, prefix="/places", tags=["places"])
app.include_router(recommendations.router, prefix="/recommendations", tags=["recommendations"])
app.include_router(cache.router, prefix="/cache", tags=["cache"])


@app.get("/", include_in_schema=False)
def root():
    """Root: point to API docs and health."""
    return {"message": "JustMoved Places API", "docs": "/docs", "health": "/health"}


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}
