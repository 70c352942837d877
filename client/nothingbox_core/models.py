"""
User, LeaderboardEntry and Location records parsed from service JSON.

The service speaks camelCase; these are the client's read-only views of it.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class User:
    id: str
    username: Optional[str] = None
    country: str = ""
    country_code: str = ""
    is_registered: bool = False
    total_time: int = 0
    last_active: Optional[float] = None

    @classmethod
    def from_dict(cls, data):
        return cls(
            id=str(data.get("id") or data["userId"]),
            username=data.get("username"),
            country=data.get("country") or "",
            country_code=data.get("countryCode") or "",
            is_registered=bool(data.get("isRegistered", False)),
            total_time=int(data.get("totalTime") or 0),
            last_active=data.get("lastActive"),
        )

    @property
    def display_name(self) -> str:
        if self.is_registered and self.username:
            return self.username
        return "Anonymous"


@dataclass(frozen=True)
class LeaderboardEntry:
    user_id: str
    username: str
    country: str
    country_code: str
    time: int
    registered: bool
    last_update: Optional[float] = None

    @classmethod
    def from_dict(cls, data):
        return cls(
            user_id=str(data["userId"]),
            username=data.get("username") or "Anonymous",
            country=data.get("country") or "",
            country_code=data.get("countryCode") or "",
            time=int(data.get("time") or 0),
            registered=bool(data.get("registered", False)),
            last_update=data.get("lastUpdate"),
        )


@dataclass(frozen=True)
class Location:
    country: str
    country_code: str

    @classmethod
    def from_dict(cls, data):
        return cls(
            country=data.get("country") or "",
            country_code=data.get("countryCode") or "",
        )


def format_time(seconds):
    """1h 2m 3s style duration."""
    seconds = max(0, int(seconds))
    h = seconds // 3600
    m = (seconds % 3600) // 60
    s = seconds % 60
    return f"{h}h {m}m {s}s"
