"""
SessionState — single source of truth for the client.

All mutations happen on the Tkinter main thread through the transition
methods below. Replaces independent flags (loading, registration shown,
active) that could combine into an active session with no user.

  phase:  LOADING → REGISTERING → READY   (READY → REGISTERING for upgrades)
  clock:  IDLE → ACTIVE                   (only with a resolved user)
"""

from dataclasses import dataclass, field
from typing import List, Optional

from .constants import (
    PHASE_LOADING, PHASE_REGISTERING, PHASE_READY,
    CLOCK_IDLE, CLOCK_ACTIVE, SCOPES, SCOPE_GLOBAL, SCOPE_COUNTRY,
)
from .errors import InvalidTransition
from .models import LeaderboardEntry, Location, User


@dataclass
class SessionState:
    phase: str = PHASE_LOADING
    clock: str = CLOCK_IDLE
    user: Optional[User] = None
    location: Optional[Location] = None

    # ── Accrual ───────────────────────────────────────────────
    session_time: int = 0

    # ── Leaderboard panel ─────────────────────────────────────
    active_tab: str = SCOPE_GLOBAL
    show_leaderboard: bool = True
    global_board: List[LeaderboardEntry] = field(default_factory=list)
    country_board: List[LeaderboardEntry] = field(default_factory=list)

    # ── Time push bookkeeping ─────────────────────────────────
    persist_ok: int = 0
    persist_failures: int = 0
    last_persisted_time: Optional[int] = None

    @property
    def is_active(self) -> bool:
        return self.clock == CLOCK_ACTIVE

    @property
    def show_registration(self) -> bool:
        return self.phase == PHASE_REGISTERING

    @property
    def is_loading(self) -> bool:
        return self.phase == PHASE_LOADING

    def board_for(self, scope) -> List[LeaderboardEntry]:
        return self.country_board if scope == SCOPE_COUNTRY else self.global_board

    # ── Phase transitions ─────────────────────────────────────

    def on_user_loaded(self, user: User):
        """Existing user found at startup: resume their total."""
        self.user = user
        self.session_time = user.total_time
        self.phase = PHASE_READY

    def on_registration_needed(self, location: Optional[Location] = None):
        if location is not None:
            self.location = location
        self.phase = PHASE_REGISTERING

    def on_registered(self, user: User):
        """
        New user: start counting from the service's total (0 for a new id).
        An anonymous user upgrading keeps the time already accrued locally.
        """
        upgrading = self.user is not None and self.user.id == user.id
        self.user = user
        if not upgrading:
            self.session_time = user.total_time
        self.phase = PHASE_READY

    def on_registration_dismissed(self):
        """Back out of an upgrade prompt. Only possible with a user already."""
        if self.user is None:
            raise InvalidTransition("cannot leave registration without a user")
        self.phase = PHASE_READY

    # ── Clock transitions ─────────────────────────────────────

    def begin_session(self):
        if self.user is None:
            raise InvalidTransition("cannot start a session without a user")
        self.clock = CLOCK_ACTIVE
        self.show_leaderboard = False

    def advance(self) -> int:
        """One tick. The only writer of session_time."""
        if not self.is_active or self.user is None:
            raise InvalidTransition("tick outside an active session")
        self.session_time += 1
        return self.session_time

    # ── Leaderboard panel ─────────────────────────────────────

    def select_tab(self, tab):
        if tab not in SCOPES:
            raise ValueError(f"unknown leaderboard tab: {tab!r}")
        self.active_tab = tab

    def apply_leaderboards(self, views):
        self.global_board = list(views.get(SCOPE_GLOBAL, self.global_board))
        self.country_board = list(views.get(SCOPE_COUNTRY, self.country_board))

    # ── Time push results ─────────────────────────────────────

    def on_persisted(self, time_value):
        self.persist_ok += 1
        self.last_persisted_time = time_value

    def on_persist_failed(self):
        self.persist_failures += 1
