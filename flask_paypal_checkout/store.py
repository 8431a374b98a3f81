"""Server-side session storage for checkout state.

The browser only carries an opaque session id (inside the framework's signed
session cookie); the cart itself lives here, keyed by that id.
"""

from __future__ import annotations

import threading
import time
from collections import OrderedDict
from datetime import timedelta
from typing import Any, Callable

#: Same as Flask's default ``PERMANENT_SESSION_LIFETIME``.
DEFAULT_LIFETIME = timedelta(days=31)


class SessionStore:
    """Key/value storage scoped by session id.

    Subclass this to back the checkout with Redis, a database, etc.
    """

    def get(self, session_id: str, key: str, default: Any = None) -> Any:
        raise NotImplementedError

    def set(self, session_id: str, key: str, value: Any) -> None:
        raise NotImplementedError

    def delete(self, session_id: str, key: str) -> None:
        raise NotImplementedError


class MemorySessionStore(SessionStore):
    """Process-local store: ``{session_id: {key: value}}``.

    Values do not survive a restart, which is all a hosted checkout needs
    between the create and return legs.  A session is dropped once
    *lifetime* passes without a write to it; the extension passes the app's
    ``PERMANENT_SESSION_LIFETIME``.

    Args:
        lifetime: Idle lifetime of a session, as a :class:`~datetime.timedelta`
            or in seconds.
        clock: Monotonic time source, in seconds.
    """

    def __init__(
        self,
        lifetime: timedelta | float = DEFAULT_LIFETIME,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if isinstance(lifetime, timedelta):
            lifetime = lifetime.total_seconds()
        self.lifetime = float(lifetime)
        self._clock = clock
        # Ordered by expiry: every write moves its session to the end.
        self._data: OrderedDict[str, tuple[float, dict[str, Any]]] = OrderedDict()
        # Quart views reach the store from run_sync worker threads.
        self._lock = threading.Lock()

    def _purge(self) -> None:
        now = self._clock()
        while self._data:
            session_id, (expires_at, _) = next(iter(self._data.items()))
            if expires_at > now:
                break
            del self._data[session_id]

    def get(self, session_id: str, key: str, default: Any = None) -> Any:
        with self._lock:
            self._purge()
            entry = self._data.get(session_id)
            if entry is None:
                return default
            return entry[1].get(key, default)

    def set(self, session_id: str, key: str, value: Any) -> None:
        with self._lock:
            self._purge()
            _, values = self._data.pop(session_id, (None, {}))
            values[key] = value
            self._data[session_id] = (self._clock() + self.lifetime, values)

    def delete(self, session_id: str, key: str) -> None:
        with self._lock:
            self._purge()
            entry = self._data.get(session_id)
            if entry is None:
                return
            values = entry[1]
            values.pop(key, None)
            if not values:
                del self._data[session_id]

    def __len__(self) -> int:
        with self._lock:
            self._purge()
            return len(self._data)
