from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from pytz import timezone

import config
import stores
from routes import games_router, health_router
from services.maintenance import delete_stale_games

logging.basicConfig(level=config.LOG_LEVEL)
logger = logging.getLogger(__name__)


# --- Scheduler setup ---
def create_scheduler() -> AsyncIOScheduler:
    scheduler = AsyncIOScheduler(timezone=timezone(config.TIMEZONE))
    scheduler.add_job(delete_stale_games, trigger="cron", hour=config.CLEANUP_HOUR, minute=0)
    return scheduler


@asynccontextmanager
async def lifespan(app: FastAPI):
    await stores.init_stores(config.DB_PATH)

    scheduler = None
    if config.CLEANUP_ENABLED:
        scheduler = create_scheduler()
        scheduler.start()
        logger.info(f"Stale game cleanup scheduled daily at {config.CLEANUP_HOUR:02d}:00 {config.TIMEZONE}")
    try:
        yield
    finally:
        if scheduler is not None:
            scheduler.shutdown(wait=False)
        await stores.close_stores()


# --- FastAPI setup ---
app = FastAPI(
    title="Battleship API",
    description="Two-player Battleship over REST. Authenticate with the X-Player-Token header.",
    version="1.0.0",
    docs_url="/api-docs",
    lifespan=lifespan,
)

# --- Middleware ---
app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ORIGINS,
    allow_methods=["POST", "GET"],
    allow_headers=["*"],
)


@app.exception_handler(RequestValidationError)
async def request_validation_error(request: Request, exc: RequestValidationError):
    """Malformed bodies are client errors like any other invalid input."""
    errors = exc.errors()
    first = errors[0] if errors else {}
    location = ".".join(str(p) for p in first.get("loc", ()) if p != "body")
    detail = f"{location}: {first.get('msg', 'invalid request')}" if location else first.get("msg", "invalid request")
    return JSONResponse(status_code=400, content={"detail": detail})


# --- Register routes ---
app.include_router(health_router)
app.include_router(games_router, prefix="/games")


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=config.PORT)
