"""
SessionController — startup, registration, session clock, leaderboard sync.

Runs on the Tk main thread. Blocking service calls go through
BackgroundTasks; their completions come back here and are the only place
SessionState is written from. The view subscribes with on_change (re-render)
and on_notice (blocking message box).
"""

import time

from .clock import SessionClock
from .config import log
from .constants import (
    PERSIST_EVERY_TICKS, NOTICE_USERNAME_REQUIRED, NOTICE_REGISTERED,
    NOTICE_USERNAME_TAKEN, NOTICE_REGISTRATION_FAILED, NOTICE_REGISTER_FIRST,
)
from .errors import ConflictError, NotFoundError, RegistrationError
from .state import SessionState


def _noop(*_args):
    pass


class SessionController:

    def __init__(self, client, identity, coordinator, scheduler, tasks,
                 on_change=None, on_notice=None, monotonic=time.monotonic):
        self._client = client
        self._identity = identity
        self._coordinator = coordinator
        self._tasks = tasks
        self._on_change = on_change or _noop
        self._on_notice = on_notice or _noop
        self._clock = SessionClock(scheduler, self._on_tick, monotonic=monotonic)
        self._register_in_flight = False
        self._board_issued = 0
        self._board_applied = 0
        self.user_id = None
        self.state = SessionState()

    @property
    def clock(self):
        return self._clock

    def _changed(self):
        try:
            self._on_change()
        except Exception as e:
            log.error("on_change listener error: %s", e, exc_info=True)

    # ─── Startup ─────────────────────────────────────────────

    def initialize(self):
        """Resolve identity, look the user up, kick off the first leaderboard load."""
        self.user_id = self._identity.get_or_create_identifier()
        user_id = self.user_id
        log.info("Starting with identity %s", user_id)

        self._tasks.submit(lambda: self._lookup(user_id), self._on_lookup_done, name="user-lookup")
        self.refresh_leaderboards()

    def _lookup(self, user_id):
        """Worker: returns (user, None) or (None, location-or-None)."""
        try:
            return self._client.fetch_user(user_id), None
        except NotFoundError:
            log.info("No user for %s yet — registration required", user_id)
        except Exception as e:
            log.warning("User lookup failed: %s — falling back to registration", e)

        try:
            location = self._client.resolve_location()
        except Exception as e:
            log.info("Location lookup failed, registering without it: %s", e)
            location = None
        return None, location

    def _on_lookup_done(self, result, error):
        if error is not None:
            log.warning("User lookup failed: %s — falling back to registration", error)
            self.state.on_registration_needed()
        else:
            user, location = result
            if user is not None:
                self.state.on_user_loaded(user)
                self.refresh_leaderboards()
            else:
                self.state.on_registration_needed(location)
        self._changed()

    # ─── Registration ────────────────────────────────────────

    def register(self, username, is_registered, start_after=None):
        """
        Create the user for this identity, anonymously or with a username.
        A blank username for a named registration raises RegistrationError
        before any request is made. start_after defaults to is_registered
        ("Register & Start").
        """
        if start_after is None:
            start_after = is_registered
        name = (username or "").strip()
        if is_registered and not name:
            raise RegistrationError(NOTICE_USERNAME_REQUIRED)
        if self._register_in_flight:
            log.info("Registration already in flight — ignoring repeat submit")
            return

        if self.user_id is None:
            self.user_id = self._identity.get_or_create_identifier()
        user_id = self.user_id
        send_name = name if is_registered else None

        self._register_in_flight = True
        self._tasks.submit(
            lambda: self._client.register_user(user_id, send_name, is_registered),
            lambda result, error: self._on_register_done(result, error, is_registered, start_after),
            name="register",
        )

    def _on_register_done(self, user, error, is_registered, start_after):
        self._register_in_flight = False
        if isinstance(error, ConflictError):
            log.info("Username rejected by service (taken)")
            self._on_notice(NOTICE_USERNAME_TAKEN)
        elif error is not None:
            log.warning("Registration failed: %s", error)
            self._on_notice(NOTICE_REGISTRATION_FAILED)
        else:
            self.state.on_registered(user)
            self.refresh_leaderboards()
            if start_after:
                self.start()
            if is_registered:
                # Notices block in the view; the clock is already running.
                self._on_notice(NOTICE_REGISTERED)
        self._changed()

    def request_registration(self):
        """Anonymous user wants to register by name (prize eligibility)."""
        self.state.on_registration_needed()
        self._changed()

    def dismiss_registration(self):
        if self.state.user is not None:
            self.state.on_registration_dismissed()
            self._changed()

    # ─── Session clock ───────────────────────────────────────

    def start(self):
        """Idle → Active. Refused (and sent to registration) without a user."""
        if self.state.user is None:
            log.info("Start refused: no user yet")
            self.state.on_registration_needed()
            self._on_notice(NOTICE_REGISTER_FIRST)
            self._changed()
            return False

        if not self.state.is_active:
            self.state.begin_session()
            log.info("Session started at %ds", self.state.session_time)
        self._clock.start()
        self._changed()
        return True

    def _on_tick(self):
        current = self.state.advance()
        if current % PERSIST_EVERY_TICKS == 0:
            self._persist(current)
        self._changed()

    def _persist(self, value):
        """Fire-and-forget push. The clock never waits on it."""
        user_id = self.state.user.id
        self._tasks.submit(
            lambda: self._client.persist_time(user_id, value),
            lambda result, error: self._on_persist_done(value, error),
            name="persist-time",
        )

    def _on_persist_done(self, value, error):
        if error is not None:
            self.state.on_persist_failed()
            log.warning("Time push failed at %ds (%d failures so far): %s",
                        value, self.state.persist_failures, error)
            return

        last = self.state.last_persisted_time
        if last is not None and value < last:
            # Pushes aren't serialized; the server may now hold the older value.
            log.warning("Time push for %ds acknowledged after %ds", value, last)
        self.state.on_persisted(value)
        log.debug("Time push OK | time=%ds", value)
        self.refresh_leaderboards()

    # ─── Leaderboards ────────────────────────────────────────

    def refresh_leaderboards(self):
        user = self.state.user
        self._board_issued += 1
        seq = self._board_issued
        self._tasks.submit(lambda: self._coordinator.refresh(user),
                           lambda views, error: self._on_leaderboards_done(seq, views, error),
                           name="leaderboard")

    def _on_leaderboards_done(self, seq, views, error):
        if error is not None:
            log.warning("Leaderboard refresh failed: %s", error)
            return
        if seq < self._board_applied:
            log.debug("Dropping leaderboard refresh #%d (already showing #%d)", seq, self._board_applied)
            return
        self._board_applied = seq
        self.state.apply_leaderboards(views)
        self._changed()

    def switch_tab(self, tab):
        """Select a tab and refresh, even if it is already selected."""
        self.state.select_tab(tab)
        self.refresh_leaderboards()
        self._changed()

    def toggle_leaderboard(self):
        self.state.show_leaderboard = not self.state.show_leaderboard
        self._changed()

    # ─── Teardown ────────────────────────────────────────────

    def shutdown(self):
        """Release the tick timer. In-flight requests are left to finish."""
        self._clock.stop()
        log.info("Session closed at %ds (%d pushes ok, %d failed)",
                 self.state.session_time, self.state.persist_ok, self.state.persist_failures)
