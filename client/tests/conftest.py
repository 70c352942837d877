import os
import tempfile

import pytest

# Point the data folder at a throwaway dir before nothingbox_core is imported
# (config.py creates it and opens the log file at import time).
os.environ["NOTHINGBOX_HOME"] = tempfile.mkdtemp(prefix="nothingbox-test-")

from nothingbox_core.errors import NotFoundError  # noqa: E402
from nothingbox_core.leaderboard import LeaderboardCoordinator  # noqa: E402
from nothingbox_core.models import LeaderboardEntry, Location, User  # noqa: E402


class ManualScheduler:
    """Stands in for tk.Tk's after()/after_cancel() with a hand-driven clock."""

    def __init__(self):
        self.now = 0.0
        self._pending = {}
        self._seq = 0

    def monotonic(self):
        return self.now

    def after(self, ms, callback):
        self._seq += 1
        after_id = f"after#{self._seq}"
        self._pending[after_id] = (self.now + ms / 1000.0, self._seq, callback)
        return after_id

    def after_cancel(self, after_id):
        self._pending.pop(after_id, None)

    @property
    def pending(self):
        return len(self._pending)

    def advance(self, seconds, lateness=0.0):
        """Move time forward, firing due callbacks in order. `lateness` delays each firing."""
        end = self.now + seconds
        while self._pending:
            after_id, (due, _seq, callback) = min(self._pending.items(), key=lambda kv: kv[1][:2])
            fire_at = due + lateness
            if fire_at > end:
                break
            del self._pending[after_id]
            self.now = max(self.now, fire_at)
            callback()
        self.now = end


class DeferredTasks:
    """BackgroundTasks double: work is queued and only runs on run_all()."""

    def __init__(self):
        self.queue = []
        self.names = []

    def submit(self, fn, on_done=None, name="task"):
        self.queue.append((fn, on_done, name))
        self.names.append(name)

    def run_next(self, index=0):
        fn, on_done, _name = self.queue.pop(index)
        result, error = None, None
        try:
            result = fn()
        except Exception as e:
            error = e
        if on_done is not None:
            on_done(result, error)

    def run_all(self, newest_first=False):
        """Run queued work to exhaustion; newest_first completes it out of order."""
        while self.queue:
            self.run_next(-1 if newest_first else 0)


class StubService:
    """In-memory service client recording every call."""

    def __init__(self):
        self.users = {}
        self.location = Location("Canada", "CA")
        self.location_error = None
        self.taken_usernames = set()
        self.register_error = None
        self.persist_error = None
        self.leaderboards = {"global": [], "country": {}}
        self.leaderboard_errors = {}
        self.calls = []
        self.base_url = "http://stub.test/api"

    def fetch_user(self, user_id):
        self.calls.append(("fetch_user", user_id))
        if user_id not in self.users:
            raise NotFoundError(f"no user {user_id}", status_code=404)
        return self.users[user_id]

    def resolve_location(self):
        self.calls.append(("resolve_location",))
        if self.location_error is not None:
            raise self.location_error
        return self.location

    def register_user(self, user_id, username=None, is_registered=False):
        self.calls.append(("register_user", user_id, username, is_registered))
        if self.register_error is not None:
            raise self.register_error
        if username is not None and username in self.taken_usernames:
            from nothingbox_core.errors import ConflictError
            raise ConflictError("taken", status_code=409)
        user = User(
            id=user_id,
            username=username,
            country=self.location.country,
            country_code=self.location.country_code,
            is_registered=is_registered,
            total_time=0,
        )
        self.users[user_id] = user
        return user

    def persist_time(self, user_id, time):
        self.calls.append(("persist_time", user_id, time))
        if self.persist_error is not None:
            raise self.persist_error

    def fetch_leaderboard(self, scope, key=None):
        self.calls.append(("fetch_leaderboard", scope, key))
        if scope in self.leaderboard_errors:
            raise self.leaderboard_errors[scope]
        if scope == "global":
            return list(self.leaderboards["global"])
        return list(self.leaderboards["country"].get(key, []))

    def calls_named(self, name):
        return [c for c in self.calls if c[0] == name]

    def close(self):
        pass


def make_entry(user_id, time, username=None, country="Canada", code="CA", registered=True):
    return LeaderboardEntry(
        user_id=user_id,
        username=username or user_id,
        country=country,
        country_code=code,
        time=time,
        registered=registered,
        last_update=None,
    )


class FixedIdentity:
    def __init__(self, identifier="user_1700000000000_abc123xyz"):
        self.identifier = identifier
        self.calls = 0

    def get_or_create_identifier(self):
        self.calls += 1
        return self.identifier


@pytest.fixture()
def scheduler():
    return ManualScheduler()


@pytest.fixture()
def tasks():
    return DeferredTasks()


@pytest.fixture()
def service():
    return StubService()


@pytest.fixture()
def identity():
    return FixedIdentity()


@pytest.fixture()
def notices():
    return []


@pytest.fixture()
def controller(service, identity, scheduler, tasks, notices):
    from nothingbox_core.controller import SessionController

    ctrl = SessionController(
        service,
        identity,
        LeaderboardCoordinator(service),
        scheduler=scheduler,
        tasks=tasks,
        on_notice=notices.append,
        monotonic=scheduler.monotonic,
    )
    return ctrl
