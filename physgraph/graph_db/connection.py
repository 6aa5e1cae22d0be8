"""Async Neo4j driver management for the persisted graph store."""

from __future__ import annotations

from typing import Any

from neo4j import AsyncDriver, AsyncGraphDatabase, AsyncManagedTransaction, AsyncSession

from physgraph.config import Settings
from physgraph.utils.logging import get_logger

logger = get_logger(__name__)


async def _collect(tx: AsyncManagedTransaction, query: str, params: dict[str, Any]) -> list[dict]:
    result = await tx.run(query, params)
    return [record.data() async for record in result]


class Neo4jConnection:
    """Owns the async driver used by the API lifespan and the scripts.

    Reads are auto-commit queries: an unreachable store fails straight
    through to the caller. Writes are idempotent MERGEs and run as managed
    transactions.
    """

    def __init__(self, settings: Settings) -> None:
        self._settings = settings
        self._driver: AsyncDriver | None = None

    async def connect(self) -> None:
        self._driver = AsyncGraphDatabase.driver(
            self._settings.NEO4J_URI,
            auth=(self._settings.NEO4J_USER, self._settings.NEO4J_PASSWORD),
            max_connection_pool_size=self._settings.NEO4J_POOL_SIZE,
            connection_timeout=self._settings.NEO4J_CONNECTION_TIMEOUT,
        )
        await self._driver.verify_connectivity()
        logger.info(
            "neo4j_connected",
            uri=self._settings.NEO4J_URI,
            database=self._settings.NEO4J_DATABASE,
        )

    async def close(self) -> None:
        if self._driver:
            await self._driver.close()
            self._driver = None
            logger.info("neo4j_disconnected")

    async def health_check(self) -> bool:
        rows = await self.execute_read("RETURN 1 AS ok")
        return bool(rows) and rows[0]["ok"] == 1

    @property
    def driver(self) -> AsyncDriver:
        if self._driver is None:
            raise RuntimeError("Neo4j driver not initialized, call connect() first")
        return self._driver

    def _session(self) -> AsyncSession:
        return self.driver.session(database=self._settings.NEO4J_DATABASE)

    async def execute_read(self, query: str, **params: Any) -> list[dict]:
        async with self._session() as session:
            result = await session.run(query, params)
            return [record.data() async for record in result]

    async def execute_write(self, query: str, **params: Any) -> list[dict]:
        async with self._session() as session:
            return await session.execute_write(_collect, query, params)
