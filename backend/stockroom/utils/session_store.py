from dataclasses import dataclass, asdict
from datetime import datetime, timedelta, timezone
from typing import Dict, Optional
import secrets
import threading

from stockroom.config import SESSION_IDLE_MINUTES


@dataclass(frozen=True)
class SessionUser:
    """Snapshot of a user taken at login. Not refreshed on later changes."""
    id: int
    name: str
    email: str
    role: str

    def to_dict(self):
        return asdict(self)


@dataclass
class _Entry:
    user: SessionUser
    expires_at: datetime


class SessionStore:
    """In-process session store keyed by an opaque random id.

    Entries expire after ``idle_minutes`` without a lookup. All access goes
    through one lock, so concurrent requests on different keys never see
    each other's partial writes.
    """

    def __init__(self, idle_minutes: int = SESSION_IDLE_MINUTES):
        self.idle = timedelta(minutes=idle_minutes)
        self._entries: Dict[str, _Entry] = {}
        self.lock = threading.Lock()

    def _now(self):
        return datetime.now(timezone.utc)

    def create(self, user: SessionUser) -> str:
        """Store a new session and return its id. The entry is readable as soon as this returns."""
        session_id = secrets.token_urlsafe(32)
        with self.lock:
            self._entries[session_id] = _Entry(user=user, expires_at=self._now() + self.idle)
        return session_id

    def get(self, session_id: Optional[str]) -> Optional[SessionUser]:
        """Look up a session and push its idle deadline forward."""
        if not session_id:
            return None
        now = self._now()
        with self.lock:
            entry = self._entries.get(session_id)
            if entry is None:
                return None
            if entry.expires_at <= now:
                del self._entries[session_id]
                return None
            entry.expires_at = now + self.idle
            return entry.user

    def destroy(self, session_id: Optional[str]) -> None:
        """Remove a session. Unknown ids are ignored."""
        if not session_id:
            return
        with self.lock:
            self._entries.pop(session_id, None)

    def purge_expired(self) -> int:
        """Drop every expired entry and return how many were removed."""
        now = self._now()
        with self.lock:
            expired = [sid for sid, entry in self._entries.items() if entry.expires_at <= now]
            for sid in expired:
                del self._entries[sid]
        return len(expired)

    def clear(self) -> None:
        with self.lock:
            self._entries.clear()

    def __len__(self):
        with self.lock:
            return len(self._entries)


# Process-wide store
session_store = SessionStore()
