"""
The Nothing Box — desktop client
================================
Start a session, do nothing, climb the leaderboard.

The client keeps an anonymous id in its data folder, looks you up on the
Nothing Box service, and pushes your accrued time every 10 seconds while a
session is running. Set NOTHINGBOX_API_URL to point it at another server.

Usage:
    python nothingbox.py
"""

from nothingbox_core.runner import main

if __name__ == "__main__":
    main()
