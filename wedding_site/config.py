import os
from dataclasses import dataclass
from pathlib import Path
from dotenv import load_dotenv

load_dotenv()

BASE_DIR = Path(__file__).resolve().parent.parent
DEFAULT_PUBLIC_DIR = BASE_DIR / "public"
DEFAULT_RSVP_STORAGE = BASE_DIR / "data" / "rsvps.json"
DEFAULT_PORT = 3000
DEFAULT_HOST = "0.0.0.0"

# 1MB is more than enough for an RSVP form
MAX_BODY_BYTES = 1_000_000


@dataclass(frozen=True)
class SiteContext:
    """Process-lifetime settings, built once at startup and handed to the app."""

    port: int
    host: str
    public_dir: Path
    rsvp_storage: Path
    max_body_bytes: int = MAX_BODY_BYTES


def _env_port(value):
    try:
        port = int(value)
    except (TypeError, ValueError):
        raise ValueError(f"PORT must be an integer, got {value!r}") from None
    if not 0 <= port <= 65535:
        raise ValueError(f"PORT out of range: {port}")
    return port


def load_context(environ=None):
    """Build the site context from the environment (.env already loaded)."""
    environ = os.environ if environ is None else environ
    port = environ.get("PORT") or DEFAULT_PORT
    public_dir = environ.get("PUBLIC_DIR") or DEFAULT_PUBLIC_DIR
    rsvp_storage = environ.get("RSVP_STORAGE") or DEFAULT_RSVP_STORAGE
    return SiteContext(
        port=_env_port(port),
        host=environ.get("HOST") or DEFAULT_HOST,
        public_dir=Path(public_dir).resolve(),
        rsvp_storage=Path(rsvp_storage).resolve(),
    )
