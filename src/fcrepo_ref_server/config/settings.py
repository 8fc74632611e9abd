import os
from pathlib import Path
from dotenv import load_dotenv

# Load .env file if present
BASE_DIR = Path(__file__).resolve().parent.parent
load_dotenv(BASE_DIR / ".env")

# --- Core Server Config ---
SERVER_HOST = os.getenv("FCREPO_SERVER_HOST", "0.0.0.0")
SERVER_PORT = int(os.getenv("FCREPO_SERVER_PORT", 8080))
DEBUG = os.getenv("FCREPO_DEBUG", "true").lower() == "true"
LOG_LEVEL = os.getenv("FCREPO_LOG_LEVEL", "INFO").upper()

# --- Repository layout ---
REST_PREFIX = "/rest"

# --- API Limits ---
MAX_CONTENT_SIZE_MB = int(os.getenv("FCREPO_MAX_CONTENT_MB", 50))

# --- Storage ---
STORAGE_BACKEND = os.getenv("FCREPO_STORAGE", "memory")  # memory only for now
