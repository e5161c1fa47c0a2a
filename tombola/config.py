"""Configuration: env, data paths, capacity, playback backend."""
import os
from pathlib import Path

from dotenv import load_dotenv

# Base paths (project root = parent of tombola package)
BASE_DIR = Path(__file__).resolve().parent.parent

# Load .env from project root so TOMBOLA_PLAYER_COMMAND etc. are set
load_dotenv(BASE_DIR / ".env")

DATA_DIR = Path(os.getenv("TOMBOLA_DATA_DIR", str(BASE_DIR / "data")))
MEDIA_DIR = DATA_DIR / "media"

# API
API_HOST = os.getenv("TOMBOLA_API_HOST", "0.0.0.0")
API_PORT = int(os.getenv("TOMBOLA_API_PORT", "8000"))
# CORS origin of the web front end (e.g. http://localhost:5173 for Vite dev)
WEB_ORIGIN = os.getenv("TOMBOLA_WEB_ORIGIN", "*")

# Board size: one number per clip
MAX_ENTRIES = int(os.getenv("TOMBOLA_MAX_ENTRIES", "90"))

# Accepted uploads (content type audio/* or one of these extensions)
AUDIO_EXTENSIONS = (".mp3", ".wav", ".ogg", ".oga", ".m4a", ".aac", ".flac", ".opus")

# Playback: command line player, file path is appended as last argument
PLAYER_COMMAND = os.getenv("TOMBOLA_PLAYER_COMMAND", "ffplay -nodisp -autoexit -loglevel quiet")

# Playback simulation (for development without an audio device)
SIMULATE_PLAYBACK = os.getenv("TOMBOLA_SIMULATE_PLAYBACK", "0").lower() in ("1", "true", "yes")
SIMULATED_CLIP_SEC = float(os.getenv("TOMBOLA_SIMULATED_CLIP_SEC", "1.0"))


def ensure_data_dir() -> None:
    DATA_DIR.mkdir(parents=True, exist_ok=True)


def ensure_media_dir() -> None:
    MEDIA_DIR.mkdir(parents=True, exist_ok=True)
