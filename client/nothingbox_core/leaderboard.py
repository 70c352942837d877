"""
LeaderboardCoordinator — fetches and caches the global and country views.

refresh() is blocking and runs on a worker thread. The two fetches go out
together and are awaited jointly; each one fails on its own and leaves its
cached view as it was.
"""

import threading
from concurrent.futures import ThreadPoolExecutor

from .config import log
from .constants import SCOPE_GLOBAL, SCOPE_COUNTRY


class LeaderboardCoordinator:

    def __init__(self, client):
        self._client = client
        self._lock = threading.Lock()
        self._views = {SCOPE_GLOBAL: [], SCOPE_COUNTRY: []}

    def refresh(self, user):
        """
        Fetch both views for `user` (may be None) and return the cache.
        With no user no country request is made and the country view comes
        back as [], but the cached country view is left alone.
        """
        with ThreadPoolExecutor(max_workers=2, thread_name_prefix="leaderboard") as pool:
            futures = {SCOPE_GLOBAL: pool.submit(self._client.fetch_leaderboard, SCOPE_GLOBAL)}
            if user is not None:
                futures[SCOPE_COUNTRY] = pool.submit(
                    self._client.fetch_leaderboard, SCOPE_COUNTRY, user.country_code,
                )

            results = {}
            for scope, future in futures.items():
                try:
                    results[scope] = future.result()
                except Exception as e:
                    log.warning("Leaderboard %s fetch failed — keeping cached view: %s", scope, e)

        with self._lock:
            self._views.update(results)
            views = {scope: list(entries) for scope, entries in self._views.items()}

        if user is None:
            views[SCOPE_COUNTRY] = []
        log.debug("Leaderboards refreshed: global=%d, country=%d",
                  len(views[SCOPE_GLOBAL]), len(views[SCOPE_COUNTRY]))
        return views
