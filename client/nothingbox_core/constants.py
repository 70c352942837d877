"""
Constants, intervals, timeouts, state names, and theme colors.
"""

APP_VERSION = "1.0.0"
APP_TITLE = "The Nothing Box"

# ─── Remote service ──────────────────────────────────────────────
DEFAULT_API_URL = "http://localhost:3001/api"
API_TIMEOUT_USER = 15          # Seconds — user lookup / registration
API_TIMEOUT_LOCATION = 8       # Geolocation is best-effort, fail fast
API_TIMEOUT_TIME = 10          # Time push happens every 10s, keep it shorter
API_TIMEOUT_LEADERBOARD = 15

# ─── Session clock ───────────────────────────────────────────────
TICK_INTERVAL_SEC = 1          # One accrual tick per second
PERSIST_EVERY_TICKS = 10       # Push total time when session_time % 10 == 0
TASK_POLL_MS = 100             # How often the UI drains worker results

# ─── Identity storage ────────────────────────────────────────────
STORAGE_KEY_USER_ID = "nothingbox_userId"

# ─── Leaderboard scopes ──────────────────────────────────────────
SCOPE_GLOBAL = "global"
SCOPE_COUNTRY = "country"
SCOPES = (SCOPE_GLOBAL, SCOPE_COUNTRY)

# ─── Session phases / clock states ───────────────────────────────
PHASE_LOADING = "LOADING"
PHASE_REGISTERING = "REGISTERING"
PHASE_READY = "READY"

CLOCK_IDLE = "IDLE"
CLOCK_ACTIVE = "ACTIVE"

# ─── Notices (blocking messages shown by the view) ───────────────
NOTICE_USERNAME_REQUIRED = "Please enter a username"
NOTICE_REGISTERED = "Registered! You are now eligible for prizes!"
NOTICE_USERNAME_TAKEN = "Username already taken. Please choose another."
NOTICE_REGISTRATION_FAILED = "Registration failed. Please try again."
NOTICE_REGISTER_FIRST = "Please complete registration first!"

# ─── Theme colors ────────────────────────────────────────────────
THEME = {
    "bg":            "#ffffff",   # main area
    "bg_panel":      "#f9fafb",   # leaderboard sidebar
    "bg_card":       "#ffffff",   # leaderboard row
    "bg_you":        "#dbeafe",   # highlighted own row
    "bg_prize":      "#fefce8",   # register-to-win card
    "primary":       "#111827",   # dark button
    "primary_hover": "#1f2937",
    "text_primary":  "#111827",
    "text_secondary":"#4b5563",
    "text_muted":    "#9ca3af",
    "text_faint":    "#e5e7eb",   # the big "Nothing"
    "text_you":      "#1e3a8a",
    "border":        "#d1d5db",
    "gold":          "#eab308",
    "silver":        "#9ca3af",
    "bronze":        "#d97706",
}
