"""
Nonce store implementations.
"""

from sceau.infrastructure.cache.in_memory_nonce_store import InMemoryNonceStore
from sceau.infrastructure.cache.redis_nonce_store import RedisNonceStore

__all__ = [
    "InMemoryNonceStore",
    "RedisNonceStore",
]
