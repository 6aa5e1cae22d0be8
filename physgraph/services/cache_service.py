"""Redis-backed cache for computed network layouts."""

from __future__ import annotations

import json
from typing import Any

import redis.asyncio as aioredis
from pydantic import TypeAdapter, ValidationError
from redis.exceptions import RedisError

from physgraph.graph.models import PositionedNode
from physgraph.utils.logging import get_logger

logger = get_logger(__name__)

_LAYOUT_ADAPTER = TypeAdapter(list[PositionedNode])


class CacheService:
    """Shares network layouts between processes, keyed by model content key.

    Redis failures are logged and treated as a miss; the caller simulates.
    """

    def __init__(self, redis_url: str, ttl: int = 3600) -> None:
        self._client = aioredis.from_url(redis_url, decode_responses=True)
        self._ttl = ttl

    async def get(self, key: str) -> Any | None:
        try:
            raw = await self._client.get(key)
        except RedisError as exc:
            logger.warning("cache_get_failed", key=key, error=str(exc))
            return None
        if raw is None:
            return None
        try:
            return json.loads(raw)
        except json.JSONDecodeError:
            return raw

    async def set(self, key: str, value: Any, ttl: int | None = None) -> None:
        serialized = json.dumps(value) if not isinstance(value, str) else value
        try:
            await self._client.set(key, serialized, ex=ttl or self._ttl)
        except RedisError as exc:
            logger.warning("cache_set_failed", key=key, error=str(exc))

    async def get_network_layout(self, key: str) -> list[PositionedNode] | None:
        cached = await self.get(f"layout:network:{key}")
        if cached is None:
            return None
        try:
            return _LAYOUT_ADAPTER.validate_python(cached)
        except ValidationError as exc:
            logger.warning("cached_layout_invalid", key=key, error=str(exc))
            return None

    async def cache_network_layout(self, key: str, nodes: list[PositionedNode]) -> None:
        payload = _LAYOUT_ADAPTER.dump_python(nodes, mode="json")
        await self.set(f"layout:network:{key}", payload)

    async def close(self) -> None:
        await self._client.aclose()
