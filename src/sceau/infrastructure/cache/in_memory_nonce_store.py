"""
In-memory nonce store.

Single-process only: state is lost on restart and not shared between
workers. Use RedisNonceStore when running several instances.
"""

import threading
import time
from typing import Callable, Dict

from sceau.domain.services.i_nonce_store import INonceStore


class InMemoryNonceStore(INonceStore):
    """
    Nonce store backed by process memory.

    Check-and-mark runs under a lock, so concurrent verifications of the
    same nonce cannot both succeed.
    """

    def __init__(
        self,
        require_issued: bool = True,
        clock: Callable[[], float] = time.monotonic,
    ):
        """
        Initialize store.

        Args:
            require_issued: Only accept nonces recorded by issue()
            clock: Monotonic time source (seconds)
        """
        self.require_issued = require_issued
        self._clock = clock
        self._issued: Dict[str, float] = {}
        self._consumed: Dict[str, float] = {}
        self._lock = threading.Lock()

    def _purge(self, now: float) -> None:
        for table in (self._issued, self._consumed):
            expired = [key for key, expiry in table.items() if expiry <= now]
            for key in expired:
                del table[key]

    async def issue(self, nonce: str, ttl_seconds: int) -> None:
        with self._lock:
            now = self._clock()
            self._purge(now)
            self._issued[nonce] = now + ttl_seconds

    async def consume(self, nonce: str, ttl_seconds: int) -> bool:
        with self._lock:
            now = self._clock()
            self._purge(now)

            if nonce in self._consumed:
                return False

            if self.require_issued:
                if nonce not in self._issued:
                    return False
                del self._issued[nonce]

            self._consumed[nonce] = now + ttl_seconds
            return True

    async def ping(self) -> bool:
        return True

    def __len__(self) -> int:
        with self._lock:
            self._purge(self._clock())
            return len(self._issued) + len(self._consumed)
