"""
NothingBoxApp — the Tkinter window.

Owns the Tk main loop. Everything is scheduled through root.after():
  _poll_tasks()   — runs finished worker completions          (every 100ms)
  SessionClock    — one accrual tick per second while active

The view only reads SessionState and calls SessionController actions.
It rebuilds a screen when the layout changes and otherwise just updates
the time label, so the per-second tick doesn't recreate widgets.
"""

import tkinter as tk
from tkinter import messagebox

from .constants import (
    APP_TITLE, APP_VERSION, TASK_POLL_MS, THEME, SCOPE_GLOBAL, SCOPE_COUNTRY,
)
from .config import log, safe_print
from .controller import SessionController
from .errors import RegistrationError
from .identity import IdentityStore
from .leaderboard import LeaderboardCoordinator
from .models import format_time
from .tasks import BackgroundTasks

_FONT = "Segoe UI"
_MONO = "Consolas"


def rank_label(index):
    """Medal text for the top three, #n after that."""
    if index == 0:
        return "1st"
    if index == 1:
        return "2nd"
    if index == 2:
        return "3rd"
    return f"#{index + 1}"


class NothingBoxApp:

    def __init__(self, client, identity=None):
        self._client = client
        self._identity = identity or IdentityStore()
        self._tasks = BackgroundTasks()
        self._root = None
        self.controller = None

        self._main = None
        self._sidebar = None
        self._time_label = None
        self._username_var = None
        self._layout_key = None
        self._board_key = None

    def run(self):
        """Start the client. Blocks on Tk mainloop. Call from main thread."""
        self._root = tk.Tk()
        self._root.title(APP_TITLE)
        self._root.geometry("1100x680")
        self._root.configure(bg=THEME["bg"])
        self._root.protocol("WM_DELETE_WINDOW", self.stop)

        self.controller = SessionController(
            self._client,
            self._identity,
            LeaderboardCoordinator(self._client),
            scheduler=self._root,
            tasks=self._tasks,
            on_change=self._render,
            on_notice=self._notice,
        )

        self._main = tk.Frame(self._root, bg=THEME["bg"])
        self._main.pack(side="left", fill="both", expand=True)
        self._sidebar = tk.Frame(self._root, bg=THEME["bg_panel"], width=380,
                                 highlightthickness=1, highlightbackground=THEME["border"])

        self._root.after(TASK_POLL_MS, self._poll_tasks)
        self.controller.initialize()
        self._render()

        log.info("v%s started (server=%s)", APP_VERSION, self._client.base_url)
        safe_print("Doing nothing.\n")

        try:
            self._root.mainloop()
        finally:
            self.controller.shutdown()
            self._client.close()
            log.info("NothingBoxApp shut down.")

    def stop(self):
        try:
            self._root.quit()
        except Exception as e:
            log.debug("stop: %s", e)

    # ─── Worker completions (every 100ms) ────────────────────

    def _poll_tasks(self):
        try:
            self._tasks.drain()
        except Exception as e:
            log.error("_poll_tasks error: %s", e, exc_info=True)
        self._root.after(TASK_POLL_MS, self._poll_tasks)

    def _notice(self, message):
        messagebox.showinfo(APP_TITLE, message, parent=self._root)

    # ─── Rendering ───────────────────────────────────────────

    def _render(self):
        if self._root is None:
            return
        state = self.controller.state
        user = state.user
        key = (
            state.phase, state.is_active, state.show_leaderboard, state.active_tab,
            user.id if user else None, user.is_registered if user else None,
            state.session_time > 0,
        )
        if key != self._layout_key:
            self._layout_key = key
            self._board_key = None
            self._rebuild()
        elif self._time_label is not None:
            self._time_label.config(text=self._time_text())

        board_key = (id(state.global_board), id(state.country_board))
        if state.show_leaderboard and not state.show_registration and board_key != self._board_key:
            self._board_key = board_key
            self._build_sidebar()

    def _time_text(self):
        state = self.controller.state
        if state.is_active:
            return format_time(state.session_time)
        return f"Total: {format_time(state.session_time)}"

    def _clear(self, frame):
        for child in frame.winfo_children():
            child.destroy()

    def _rebuild(self):
        state = self.controller.state
        self._clear(self._main)
        self._time_label = None

        if state.is_loading:
            tk.Label(self._main, text="Loading...", font=(_FONT, 20),
                     fg=THEME["text_muted"], bg=THEME["bg"]).place(relx=0.5, rely=0.5, anchor="center")
        elif state.show_registration:
            self._build_registration()
        elif state.is_active:
            self._build_active()
        else:
            self._build_idle()

        if state.show_leaderboard and not state.show_registration and not state.is_loading:
            self._sidebar.pack(side="right", fill="y")
            self._sidebar.pack_propagate(False)
        else:
            self._sidebar.pack_forget()

    def _build_registration(self):
        state = self.controller.state
        body = tk.Frame(self._main, bg=THEME["bg"])
        body.place(relx=0.5, rely=0.5, anchor="center")

        tk.Label(body, text=APP_TITLE, font=(_FONT, 32, "bold"),
                 fg=THEME["text_primary"], bg=THEME["bg"]).pack()
        tk.Label(body, text="Do nothing. Win prizes.", font=(_FONT, 13),
                 fg=THEME["text_secondary"], bg=THEME["bg"]).pack(pady=(0, 20))

        if state.location is not None and state.location.country:
            tk.Label(body, text=f"Auto-detected location: {state.location.country}",
                     font=(_FONT, 10), fg=THEME["text_you"], bg=THEME["bg_you"],
                     padx=12, pady=8).pack(fill="x", pady=(0, 14))

        if state.user is None:
            tk.Button(body, text="Continue as Anonymous\nPlay for fun, not eligible for prizes",
                      font=(_FONT, 11), justify="left", relief="solid", borderwidth=1,
                      bg=THEME["bg"], padx=14, pady=10, cursor="hand2",
                      command=lambda: self._submit_registration(False)).pack(fill="x")
            tk.Label(body, text="or", font=(_FONT, 10), fg=THEME["text_muted"],
                     bg=THEME["bg"]).pack(pady=8)

        card = tk.Frame(body, bg=THEME["bg_prize"], padx=14, pady=12,
                        highlightthickness=2, highlightbackground=THEME["gold"])
        card.pack(fill="x")
        tk.Label(card, text="Register to Win Prizes", font=(_FONT, 12, "bold"),
                 fg=THEME["text_primary"], bg=THEME["bg_prize"]).pack(anchor="w")
        tk.Label(card, text="Only registered users are eligible for prizes", font=(_FONT, 10),
                 fg=THEME["text_secondary"], bg=THEME["bg_prize"]).pack(anchor="w", pady=(0, 8))

        self._username_var = tk.StringVar()
        entry = tk.Entry(card, textvariable=self._username_var, font=(_FONT, 12),
                         relief="solid", borderwidth=1)
        entry.pack(fill="x", pady=(0, 8))
        entry.bind("<Return>", lambda _e: self._submit_registration(True))
        entry.focus_set()

        tk.Button(card, text="Register & Start", font=(_FONT, 12, "bold"),
                  bg=THEME["primary"], fg="white", activebackground=THEME["primary_hover"],
                  activeforeground="white", relief="flat", pady=8, cursor="hand2",
                  command=lambda: self._submit_registration(True)).pack(fill="x")

        if state.user is not None:
            tk.Button(body, text="Not now", font=(_FONT, 10), relief="flat", bg=THEME["bg"],
                      fg=THEME["text_secondary"], cursor="hand2",
                      command=self.controller.dismiss_registration).pack(pady=(10, 0))

        tk.Label(body, text="By participating, you agree to keep the app open and do absolutely nothing.",
                 font=(_FONT, 9), fg=THEME["text_muted"], bg=THEME["bg"]).pack(pady=(18, 0))

    def _submit_registration(self, is_registered):
        username = self._username_var.get() if self._username_var is not None else ""
        try:
            self.controller.register(username, is_registered)
        except RegistrationError as e:
            self._notice(str(e))

    def _build_idle(self):
        state = self.controller.state
        body = tk.Frame(self._main, bg=THEME["bg"])
        body.place(relx=0.5, rely=0.5, anchor="center")

        tk.Label(body, text="Nothing", font=(_FONT, 60, "bold"),
                 fg=THEME["text_faint"], bg=THEME["bg"]).pack()
        tk.Button(body, text="Start Doing Nothing", font=(_FONT, 16, "bold"),
                  bg=THEME["primary"], fg="white", activebackground=THEME["primary_hover"],
                  activeforeground="white", relief="flat", padx=30, pady=14, cursor="hand2",
                  command=self.controller.start).pack(pady=20)

        user = state.user
        if user is not None:
            tk.Label(body, text=f"{user.display_name} • {user.country}", font=(_FONT, 10),
                     fg=THEME["text_secondary"], bg=THEME["bg"]).pack()
            if state.session_time > 0:
                self._time_label = tk.Label(body, text=self._time_text(), font=(_MONO, 11),
                                            fg=THEME["text_primary"], bg=THEME["bg"])
                self._time_label.pack()

    def _build_active(self):
        body = tk.Frame(self._main, bg=THEME["bg"])
        body.place(relx=0.5, rely=0.5, anchor="center")

        self._time_label = tk.Label(body, text=self._time_text(), font=(_MONO, 56, "bold"),
                                    fg=THEME["text_primary"], bg=THEME["bg"])
        self._time_label.pack(pady=(0, 16))
        tk.Label(body, text="Keep doing nothing...", font=(_FONT, 14),
                 fg=THEME["text_secondary"], bg=THEME["bg"]).pack()
        tk.Label(body, text="Saving every 10 seconds", font=(_FONT, 10),
                 fg=THEME["text_muted"], bg=THEME["bg"]).pack(pady=(4, 0))

        tk.Button(self._main, text="Leaderboard", font=(_FONT, 10), relief="flat",
                  bg=THEME["bg_panel"], cursor="hand2",
                  command=self.controller.toggle_leaderboard).place(relx=0.98, rely=0.03, anchor="ne")

    # ─── Leaderboard sidebar ─────────────────────────────────

    def _build_sidebar(self):
        state = self.controller.state
        user = state.user
        self._clear(self._sidebar)

        header = tk.Frame(self._sidebar, bg=THEME["bg"], padx=16, pady=12)
        header.pack(fill="x")
        top = tk.Frame(header, bg=THEME["bg"])
        top.pack(fill="x")
        tk.Label(top, text="Leaderboard", font=(_FONT, 16, "bold"),
                 fg=THEME["text_primary"], bg=THEME["bg"]).pack(side="left")
        if user is not None and not user.is_registered:
            tk.Button(top, text="Register", font=(_FONT, 9, "bold"), bg=THEME["gold"],
                      fg="white", relief="flat", cursor="hand2",
                      command=self.controller.request_registration).pack(side="right")

        tabs = tk.Frame(header, bg=THEME["bg"])
        tabs.pack(fill="x", pady=(10, 0))
        for scope, title in ((SCOPE_GLOBAL, "Global"), (SCOPE_COUNTRY, "Country")):
            selected = state.active_tab == scope
            tk.Button(tabs, text=title, font=(_FONT, 10, "bold" if selected else "normal"),
                      bg=THEME["primary"] if selected else THEME["bg"],
                      fg="white" if selected else THEME["text_secondary"],
                      relief="flat", pady=6, cursor="hand2",
                      command=lambda s=scope: self.controller.switch_tab(s),
                      ).pack(side="left", fill="x", expand=True, padx=2)

        rows = tk.Frame(self._sidebar, bg=THEME["bg_panel"], padx=12, pady=10)
        rows.pack(fill="both", expand=True)

        entries = state.board_for(state.active_tab)
        if state.active_tab == SCOPE_COUNTRY:
            country = user.country if user and user.country else "Country"
            tk.Label(rows, text=country, font=(_FONT, 10, "bold"),
                     fg=THEME["text_secondary"], bg=THEME["bg_panel"]).pack(anchor="w", pady=(0, 6))
            empty = f"No scores from {user.country if user else 'your country'} yet. Be the first!"
        else:
            empty = "No scores yet. Be the first to do nothing!"

        if not entries:
            tk.Label(rows, text=empty, font=(_FONT, 10), fg=THEME["text_muted"],
                     bg=THEME["bg_panel"], wraplength=320).pack(pady=40)
            return

        medal = {0: THEME["gold"], 1: THEME["silver"], 2: THEME["bronze"]}
        for index, entry in enumerate(entries):
            mine = user is not None and entry.user_id == user.id
            bg = THEME["bg_you"] if mine else THEME["bg_card"]
            row = tk.Frame(rows, bg=bg, padx=10, pady=6)
            row.pack(fill="x", pady=2)
            tk.Label(row, text=rank_label(index), width=4, font=(_FONT, 10, "bold"),
                     fg=medal.get(index, THEME["text_muted"]), bg=bg).pack(side="left")
            name = entry.username + (" (You)" if mine else "") + (" *" if entry.registered else "")
            info = tk.Frame(row, bg=bg)
            info.pack(side="left", fill="x", expand=True)
            tk.Label(info, text=name, font=(_FONT, 10, "bold"), anchor="w",
                     fg=THEME["text_you"] if mine else THEME["text_primary"], bg=bg).pack(fill="x")
            if state.active_tab == SCOPE_GLOBAL:
                tk.Label(info, text=entry.country, font=(_FONT, 8), anchor="w",
                         fg=THEME["text_muted"], bg=bg).pack(fill="x")
            tk.Label(row, text=format_time(entry.time), font=(_MONO, 10),
                     fg=THEME["text_primary"], bg=bg).pack(side="right")
