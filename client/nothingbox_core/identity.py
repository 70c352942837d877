"""
Anonymous identity — one stable id per data folder.

storage.json is a tiny namespaced key/value file. If it can't be read or
written, a fresh id is generated on every call; the client keeps working,
it just won't be recognised as the same user next time.
"""

import json
import secrets
import string
import time

from .config import log, STORAGE_FILE
from .constants import STORAGE_KEY_USER_ID

_SUFFIX_ALPHABET = string.digits + string.ascii_lowercase
_SUFFIX_LEN = 9


def generate_identifier():
    """user_<epoch ms>_<9 base36 chars>."""
    suffix = "".join(secrets.choice(_SUFFIX_ALPHABET) for _ in range(_SUFFIX_LEN))
    return f"user_{int(time.time() * 1000)}_{suffix}"


class IdentityStore:

    def __init__(self, path=STORAGE_FILE, key=STORAGE_KEY_USER_ID):
        self._path = path
        self._key = key

    def _read(self):
        if not self._path.exists():
            return {}
        data = json.loads(self._path.read_text(encoding="utf-8"))
        if not isinstance(data, dict):
            raise ValueError(f"{self._path} does not hold a JSON object")
        return data

    def get_or_create_identifier(self):
        try:
            data = self._read()
        except (OSError, ValueError) as e:
            log.warning("Identity storage unreadable (%s) — using a one-off id", e)
            return generate_identifier()

        existing = data.get(self._key)
        if isinstance(existing, str) and existing:
            return existing

        identifier = generate_identifier()
        data[self._key] = identifier
        try:
            self._path.write_text(json.dumps(data, indent=2), encoding="utf-8")
        except OSError as e:
            log.warning("Identity storage not writable (%s) — id will not persist", e)
            return identifier

        log.info("Created new identity %s", identifier)
        return identifier
