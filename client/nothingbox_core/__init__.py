"""
nothingbox_core — The Nothing Box desktop client v1.0
=====================================================
Architecture: Tkinter main-thread event loop. Blocking HTTP on worker threads.

  constants.py    → Version, intervals, timeouts, state names, theme
  config.py       → Paths, logging, config load/save, server URL
  errors.py       → NotFound / Conflict / Transient / local validation errors
  models.py       → User, LeaderboardEntry, Location, format_time
  http_client.py  → Pooled requests.Session, no retries, CA bundle
  api.py          → ServiceClient (users, location, time push, leaderboards)
  identity.py     → IdentityStore (stable anonymous id in storage.json)
  clock.py        → SessionClock (drift-free 1s tick on root.after)
  leaderboard.py  → LeaderboardCoordinator (parallel fetch, stale-on-error cache)
  state.py        → SessionState dataclass (single source of truth)
  tasks.py        → BackgroundTasks (worker threads → main-thread completions)
  controller.py   → SessionController (startup, registration, accrual, sync)
  app.py          → NothingBoxApp (Tk window, rendering)
  runner.py       → main()
"""
