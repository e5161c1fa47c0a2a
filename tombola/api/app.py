"""FastAPI app, CORS, and route registration."""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

# Configure logging in the worker process (so draw/playback INFO logs are visible with uvicorn --reload)
logging.basicConfig(
    level=logging.INFO,
    format="%(levelname)s: %(name)s: %(message)s",
)

from tombola.api.state import AppState, get_state
from tombola.config import WEB_ORIGIN, ensure_data_dir, ensure_media_dir

# Import routes after state to avoid circular imports
from tombola.api.routes import entries, game

__all__ = ["app", "AppState", "get_state"]


@asynccontextmanager
async def lifespan(app: FastAPI):
    ensure_data_dir()
    ensure_media_dir()
    state = get_state()
    logging.getLogger(__name__).info(
        "Tombola ready (capacity %d, media in %s)",
        state.session.registry.capacity,
        state.media_store.media_dir,
    )

    yield

    state.shutdown()


app = FastAPI(
    title="Tombola Audio API",
    description="Local REST API for the audio tombola: numbered clips and random draws",
    lifespan=lifespan,
)
app.add_middleware(
    CORSMiddleware,
    allow_origins=[WEB_ORIGIN],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(entries.router, prefix="/api/entries", tags=["entries"])
app.include_router(game.router, prefix="/api/game", tags=["game"])
