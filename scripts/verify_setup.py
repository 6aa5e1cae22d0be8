"""Verify the store, the cache and a running API instance are reachable."""

from __future__ import annotations

import asyncio
import os
import sys

import httpx


async def check_neo4j() -> bool:
    uri = os.getenv("NEO4J_URI", "bolt://localhost:7687")
    user = os.getenv("NEO4J_USER", "neo4j")
    password = os.getenv("NEO4J_PASSWORD", "physgraph_dev")
    try:
        from neo4j import AsyncGraphDatabase

        driver = AsyncGraphDatabase.driver(uri, auth=(user, password))
        async with driver.session() as session:
            result = await session.run("MATCH (n:GraphNode) RETURN count(n) AS nodes")
            record = await result.single()
            assert record is not None
        await driver.close()
        print(f"[OK] Neo4j connection successful ({record['nodes']} graph nodes)")
        return True
    except Exception as exc:
        print(f"[FAIL] Neo4j: {exc}")
        return False


async def check_redis() -> bool:
    url = os.getenv("REDIS_URL", "redis://localhost:6379/0")
    try:
        from redis.asyncio import from_url

        client = from_url(url)
        pong = await client.ping()
        assert pong is True
        await client.aclose()
        print("[OK] Redis connection successful")
        return True
    except Exception as exc:
        print(f"[FAIL] Redis: {exc}")
        return False


async def check_api() -> bool:
    base_url = os.getenv("PHYSGRAPH_API_URL", "http://localhost:8000")
    try:
        async with httpx.AsyncClient(base_url=base_url, timeout=15) as client:
            resp = await client.get("/api/v1/ready")
            resp.raise_for_status()
            status = resp.json()
            print(f"[OK] API ready: {status.get('status')} (layout {status.get('layout')})")
            resp = await client.get("/api/v1/graph", params={"mode": "chronological"})
            resp.raise_for_status()
            print(f"  [OK] Chronological layout: {resp.json()['node_count']} nodes")
        return True
    except Exception as exc:
        print(f"[FAIL] API: {exc}")
        return False


async def main() -> None:
    print("=" * 50)
    print("physgraph: infrastructure verification")
    print("=" * 50)

    results = await asyncio.gather(
        check_neo4j(),
        check_redis(),
        check_api(),
    )

    print("=" * 50)
    passed = sum(results)
    total = len(results)
    print(f"Results: {passed}/{total} checks passed")
    if not all(results):
        print("Some checks failed. Review output above.")
        sys.exit(1)
    print("All systems operational.")


if __name__ == "__main__":
    asyncio.run(main())
