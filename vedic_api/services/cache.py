"""Redis-backed response cache keyed by a content hash of the request."""

from __future__ import annotations

import hashlib
import json
import logging
import os
from typing import Any, Dict, Optional

import redis


logger = logging.getLogger(__name__)

DEFAULT_TTL_SECONDS = 3600
KEY_PREFIX = "panchang:"


class ResponseCache:
    """Thin wrapper over a redis client; one instance lives on ``app.state``.

    Values are stored as JSON strings with ``SETEX``. Without a client, or
    with a non-positive TTL, every lookup misses and nothing is stored.
    Redis failures are logged and treated as misses.
    """

    def __init__(
        self,
        client: Optional[redis.Redis] = None,
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        prefix: str = KEY_PREFIX,
    ) -> None:
        self.client = client
        self.ttl_seconds = ttl_seconds
        self.prefix = prefix

    @classmethod
    def from_env(cls) -> "ResponseCache":
        ttl = float(os.getenv("PANCHANG_CACHE_TTL_SECONDS", str(DEFAULT_TTL_SECONDS)))
        redis_url = os.getenv("REDIS_URL")
        client: Optional[redis.Redis] = None
        if redis_url:
            try:
                client = redis.Redis.from_url(redis_url, decode_responses=True)
            except (redis.RedisError, ValueError):
                logger.exception("panchang_cache_redis_init_failed", extra={"redis_url": redis_url})
        else:
            logger.info("panchang_cache_redis_url_missing")
        return cls(client=client, ttl_seconds=ttl)

    @property
    def enabled(self) -> bool:
        return self.client is not None and self.ttl_seconds > 0

    @staticmethod
    def key_for(payload: Dict[str, Any]) -> str:
        canonical = json.dumps(payload, sort_keys=True, separators=(",", ":"), default=str)
        return hashlib.sha256(canonical.encode("utf-8")).hexdigest()

    def get(self, key: str) -> Optional[str]:
        if not self.enabled:
            return None
        try:
            return self.client.get(self.prefix + key)
        except redis.RedisError:
            logger.exception("panchang_cache_get_failed", extra={"cache_key": key})
            return None

    def set(self, key: str, value: str) -> None:
        if not self.enabled:
            return
        try:
            self.client.setex(self.prefix + key, max(1, int(self.ttl_seconds)), value)
        except redis.RedisError:
            logger.exception("panchang_cache_set_failed", extra={"cache_key": key})

    def delete(self, key: str) -> None:
        if not self.enabled:
            return
        try:
            self.client.delete(self.prefix + key)
        except redis.RedisError:
            logger.exception("panchang_cache_delete_failed", extra={"cache_key": key})
