"""Redis implementation of CacheBackend."""

from __future__ import annotations

import logging

from redis import Redis

from car_search.ports.cache_backend import CacheBackend

logger = logging.getLogger(__name__)

_DELETE_BATCH_SIZE = 500


class RedisCacheBackend(CacheBackend):
    """
    CacheBackend on a synchronous Redis client.

    Expiry is delegated to Redis (``SET ... EX``). Prefix deletion walks the
    keyspace with SCAN rather than KEYS so it never blocks the server.
    """

    def __init__(self, client: Redis) -> None:
        self._client = client

    @classmethod
    def from_url(cls, url: str) -> RedisCacheBackend:
        return cls(Redis.from_url(url, encoding="utf-8", decode_responses=True))

    def get(self, key: str) -> str | None:
        return self._client.get(key)  # type: ignore[return-value]

    def set(self, key: str, value: str, ttl_seconds: int) -> None:
        self._client.set(key, value, ex=ttl_seconds)

    def delete(self, key: str) -> None:
        self._client.delete(key)

    def delete_prefix(self, prefix: str) -> int:
        deleted = 0
        batch: list[str] = []

        for key in self._client.scan_iter(match=f"{prefix}*", count=_DELETE_BATCH_SIZE):
            batch.append(key)
            if len(batch) >= _DELETE_BATCH_SIZE:
                deleted += int(self._client.delete(*batch))  # type: ignore[arg-type]
                batch = []

        if batch:
            deleted += int(self._client.delete(*batch))  # type: ignore[arg-type]

        logger.debug("Deleted cache keys by prefix", extra={"prefix": prefix, "deleted": deleted})
        return deleted
