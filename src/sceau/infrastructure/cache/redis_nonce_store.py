"""Redis nonce store implementation."""

import asyncio
import time
from typing import Optional

import redis.asyncio as aioredis
from redis.exceptions import RedisError

from sceau.domain.exceptions import NonceStoreUnavailableError
from sceau.domain.services.i_nonce_store import INonceStore
from sceau.infrastructure.monitoring import get_logger
from sceau.infrastructure.monitoring import metrics

logger = get_logger(__name__)


class RedisNonceStore(INonceStore):
    """
    Nonce store using async redis library.

    Strict mode keeps issued nonces under "{prefix}issued:{nonce}" and
    consumes them with GETDEL, so only one caller ever sees the value.
    Lenient mode marks "{prefix}used:{nonce}" with SET NX EX.
    Both are single atomic Redis commands.
    """

    def __init__(
        self,
        host: str = "localhost",
        port: int = 6379,
        db: int = 0,
        password: Optional[str] = None,
        key_prefix: str = "sceau:nonce:",
        require_issued: bool = True,
        timeout: float = 2.0,
        client: Optional[aioredis.Redis] = None,
    ):
        """
        Initialize Redis nonce store configuration.

        Args:
            host: Redis server host
            port: Redis server port
            db: Redis database number (0-15)
            password: Redis password (None if no auth)
            key_prefix: Prefix for all nonce keys
            require_issued: Only accept nonces recorded by issue()
            timeout: Per-operation timeout in seconds
            client: Pre-built Redis client (skips connect)
        """
        self.host = host
        self.port = port
        self.db = db
        self.password = password if password else None
        self.key_prefix = key_prefix
        self.require_issued = require_issued
        self.timeout = timeout
        self._client: Optional[aioredis.Redis] = client

    async def connect(self) -> None:
        """Establish connection to Redis server."""
        if self._client is not None:
            return

        self._client = aioredis.from_url(
            f"redis://{self.host}:{self.port}/{self.db}",
            password=self.password,
            encoding="utf-8",
            decode_responses=True,
        )
        logger.info(f"Nonce store connected to redis://{self.host}:{self.port}")

    async def disconnect(self) -> None:
        """Close connection to Redis server."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    def _issued_key(self, nonce: str) -> str:
        return f"{self.key_prefix}issued:{nonce}"

    def _used_key(self, nonce: str) -> str:
        return f"{self.key_prefix}used:{nonce}"

    async def _run(self, operation: str, awaitable):
        start = time.time()
        try:
            return await asyncio.wait_for(awaitable, timeout=self.timeout)
        except asyncio.TimeoutError:
            raise NonceStoreUnavailableError(
                f"Nonce store {operation} timed out after {self.timeout}s"
            )
        except (RedisError, OSError) as e:
            raise NonceStoreUnavailableError(
                f"Nonce store {operation} failed: {e}"
            )
        finally:
            metrics.nonce_store_duration_seconds.labels(
                operation=operation
            ).observe(time.time() - start)

    async def issue(self, nonce: str, ttl_seconds: int) -> None:
        """
        Store issued nonce with expiration.

        Args:
            nonce: Freshly generated nonce
            ttl_seconds: How long the nonce stays redeemable
        """
        if not self.require_issued:
            return

        if self._client is None:
            await self.connect()

        await self._run(
            "issue",
            self._client.set(self._issued_key(nonce), "1", ex=ttl_seconds),
        )

    async def consume(self, nonce: str, ttl_seconds: int) -> bool:
        """
        Atomically consume nonce.

        Args:
            nonce: Nonce presented for verification
            ttl_seconds: How long to remember the consumption (lenient mode)

        Returns:
            True if this call consumed the nonce
        """
        if self._client is None:
            await self.connect()

        if self.require_issued:
            value = await self._run(
                "consume", self._client.getdel(self._issued_key(nonce))
            )
            return value is not None

        result = await self._run(
            "consume",
            self._client.set(self._used_key(nonce), "1", nx=True, ex=ttl_seconds),
        )
        return bool(result)

    async def ping(self) -> bool:
        """
        Check if Redis server is reachable.

        Returns:
            True if server responds
        """
        if self._client is None:
            await self.connect()

        try:
            await self._run("ping", self._client.ping())
            return True
        except NonceStoreUnavailableError:
            return False
