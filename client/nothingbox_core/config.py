"""
Paths, logging setup, config load/save, safe_print, server URL resolution.
"""

import os
import json
import sys
import logging
from pathlib import Path

from .constants import DEFAULT_API_URL


# ─── Paths ───────────────────────────────────────────────────────
# One data folder per OS user. NOTHINGBOX_HOME overrides it (tests, portable runs).
_FOLDER_NAME = "NothingBox"

if os.environ.get("NOTHINGBOX_HOME"):
    BASE_DIR = Path(os.environ["NOTHINGBOX_HOME"])
elif sys.platform == "win32":
    BASE_DIR = Path(os.environ.get("APPDATA", Path.home())) / _FOLDER_NAME
else:
    BASE_DIR = Path.home() / ".nothingbox"

BASE_DIR.mkdir(parents=True, exist_ok=True)

CONFIG_FILE = BASE_DIR / "config.json"
STORAGE_FILE = BASE_DIR / "storage.json"
LOG_FILE = BASE_DIR / "nothingbox.log"


# ─── Safe print (no crash when --noconsole) ──────────────────────

def safe_print(*args, **kwargs):
    try:
        print(*args, **kwargs)
    except Exception:
        pass


# ─── Logging ─────────────────────────────────────────────────────

try:
    if LOG_FILE.exists() and LOG_FILE.stat().st_size > 1_000_000:
        LOG_FILE.write_text("")
except OSError:
    pass

_LOG_FORMAT = "%(asctime)s [%(levelname)s] %(message)s"
_LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

log = logging.getLogger("nothingbox")
log.setLevel(logging.DEBUG)
log.propagate = False

if not log.handlers:
    file_handler = logging.FileHandler(str(LOG_FILE), encoding="utf-8")
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(logging.Formatter(_LOG_FORMAT, _LOG_DATE_FORMAT))
    log.addHandler(file_handler)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(logging.INFO)
    console_handler.setFormatter(logging.Formatter(_LOG_FORMAT, _LOG_DATE_FORMAT))
    log.addHandler(console_handler)


# ─── Config Management ──────────────────────────────────────────

def load_config():
    """Load config from disk. Returns dict (empty if missing or unreadable)."""
    if CONFIG_FILE.exists():
        try:
            with open(CONFIG_FILE, "r", encoding="utf-8") as f:
                data = json.load(f)
            if isinstance(data, dict):
                return data
            log.warning("Ignoring %s: expected a JSON object", CONFIG_FILE)
        except (json.JSONDecodeError, OSError) as e:
            log.warning("Could not read %s: %s", CONFIG_FILE, e)
    return {}


def resolve_server_url(config=None):
    """
    Base URL of the remote service.

    NOTHINGBOX_API_URL env var → "serverUrl" in config.json → local dev default.
    """
    url = os.environ.get("NOTHINGBOX_API_URL")
    if not url:
        if config is None:
            config = load_config()
        url = config.get("serverUrl") or DEFAULT_API_URL
    return url.strip().rstrip("/")
