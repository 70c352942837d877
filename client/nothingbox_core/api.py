"""
Remote service calls — user lookup/registration, time push, leaderboards.

All methods are blocking (called from worker threads, never from the Tk main
thread). Each is one request/response: no retry, no offline buffer. Failures
are raised as typed errors and handled by the caller.
"""

from urllib.parse import quote

import requests

from .config import log
from .constants import (
    API_TIMEOUT_USER, API_TIMEOUT_LOCATION, API_TIMEOUT_TIME,
    API_TIMEOUT_LEADERBOARD, SCOPE_GLOBAL, SCOPE_COUNTRY,
)
from .errors import ConflictError, NotFoundError, TransientError
from .models import LeaderboardEntry, Location, User
from . import http_client


def _segment(value):
    return quote(str(value), safe="")


class ServiceClient:

    def __init__(self, base_url, session=None):
        self.base_url = base_url.rstrip("/")
        self.http = session if session is not None else http_client.create_session()

    def close(self):
        self.http.close()

    # ─── Plumbing ────────────────────────────────────────────

    def _request(self, method, path, timeout, **kwargs):
        url = f"{self.base_url}{path}"
        try:
            resp = self.http.request(method, url, timeout=timeout, **kwargs)
        except requests.RequestException as e:
            raise TransientError(f"{method} {path} failed: {e}") from e

        if resp.status_code == 404:
            raise NotFoundError(f"{method} {path}: not found", status_code=404)
        if resp.status_code == 409:
            raise ConflictError(f"{method} {path}: conflict", status_code=409)
        if not 200 <= resp.status_code < 300:
            raise TransientError(
                f"{method} {path}: HTTP {resp.status_code} — {resp.text[:200]}",
                status_code=resp.status_code,
            )
        return resp

    @staticmethod
    def _json(resp):
        try:
            return resp.json()
        except ValueError as e:
            raise TransientError(
                f"Unreadable response body from {resp.url}", status_code=resp.status_code,
            ) from e

    # ─── Users ───────────────────────────────────────────────

    def fetch_user(self, user_id):
        """GET /users/{id}. Raises NotFoundError when the id is unknown."""
        resp = self._request("GET", f"/users/{_segment(user_id)}", API_TIMEOUT_USER)
        user = User.from_dict(self._json(resp))
        log.info("Loaded user %s (registered=%s, total=%ds)",
                 user.id, user.is_registered, user.total_time)
        return user

    def resolve_location(self):
        """GET /location — best-effort geolocation for the registration prompt."""
        resp = self._request("GET", "/location", API_TIMEOUT_LOCATION)
        return Location.from_dict(self._json(resp))

    def register_user(self, user_id, username=None, is_registered=False):
        """POST /users. Raises ConflictError when the username is taken."""
        payload = {"userId": user_id, "isRegistered": bool(is_registered)}
        if username is not None:
            payload["username"] = username

        resp = self._request("POST", "/users", API_TIMEOUT_USER, json=payload)
        user = User.from_dict(self._json(resp))
        log.info("Registered user %s (username=%s, registered=%s)",
                 user.id, user.username or "-", user.is_registered)
        return user

    def persist_time(self, user_id, time):
        """PUT /users/{id}/time — overwrites the server total (last write wins)."""
        self._request(
            "PUT", f"/users/{_segment(user_id)}/time", API_TIMEOUT_TIME,
            json={"time": int(time)},
        )

    # ─── Leaderboards ────────────────────────────────────────

    def fetch_leaderboard(self, scope, key=None):
        """
        Ordered entries for one scope, as sorted by the service.
        `key` is the country code and is required for the country scope.
        """
        if scope == SCOPE_GLOBAL:
            path = "/leaderboard/global"
        elif scope == SCOPE_COUNTRY:
            if not key:
                raise ValueError("country leaderboard needs a country code")
            path = f"/leaderboard/country/{_segment(key)}"
        else:
            raise ValueError(f"unknown leaderboard scope: {scope!r}")

        data = self._json(self._request("GET", path, API_TIMEOUT_LEADERBOARD))
        if not isinstance(data, list):
            raise TransientError(f"GET {path}: expected a list, got {type(data).__name__}")
        return [LeaderboardEntry.from_dict(item) for item in data]
