import os
import logging

from dotenv import load_dotenv

load_dotenv()

# --- API keys ---
# Server-side only; never sent to the browser.
API_KEY: str = os.getenv("API_KEY", "")

# --- Models ---
GEMINI_MODEL: str = os.getenv("GEMINI_MODEL", "gemini-2.5-flash")

# --- Server ---
PORT: int = int(os.getenv("PORT", "8000"))
LOG_LEVEL: str = os.getenv("LOG_LEVEL", "info").upper()
RELAY_PATH: str = "/api/gemini-proxy"

# --- Client ---
RELAY_BASE_URL: str = os.getenv("RELAY_BASE_URL", f"http://localhost:{PORT}")

# --- Timeouts ---
REQUEST_TIMEOUT: float = float(os.getenv("REQUEST_TIMEOUT", "60.0"))  # per HTTP request (seconds)

# --- LLM API ---
GEMINI_BASE_URL: str = os.getenv(
    "GEMINI_BASE_URL", "https://generativelanguage.googleapis.com/v1beta/openai/"
)


def configure_logging() -> None:
    level = getattr(logging, LOG_LEVEL, logging.INFO)
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
    )
