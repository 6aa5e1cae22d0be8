"""FastAPI application factory with lifespan events."""

from __future__ import annotations

import uuid
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from physgraph.api.dependencies import set_concepts, set_neo4j_conn, set_overview
from physgraph.api.router import api_router
from physgraph.config import get_settings
from physgraph.graph.builder import GraphModelBuilder
from physgraph.graph_db.connection import Neo4jConnection
from physgraph.graph_db.schema import init_schema
from physgraph.services.cache_service import CacheService
from physgraph.services.concept_service import ConceptService
from physgraph.services.graph_store import GraphStore
from physgraph.services.overview_service import GraphOverviewService
from physgraph.utils.exceptions import DataUnavailable
from physgraph.utils.logging import get_logger, setup_logging

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Manage application startup and shutdown resources."""
    settings = get_settings()
    setup_logging(settings.LOG_LEVEL, settings.LOG_FORMAT)

    # Neo4j
    neo4j_conn = Neo4jConnection(settings)
    await neo4j_conn.connect()
    await init_schema(neo4j_conn)
    set_neo4j_conn(neo4j_conn)

    store = GraphStore(neo4j_conn)
    cache = CacheService(settings.REDIS_URL, ttl=settings.LAYOUT_CACHE_TTL)
    overview = GraphOverviewService(GraphModelBuilder(store), settings, shared_cache=cache)
    set_overview(overview)
    set_concepts(ConceptService(store))

    # A failed first load leaves the overview unloaded until POST /graph/reload
    try:
        await overview.load()
    except DataUnavailable as exc:
        logger.warning("initial_graph_load_failed", error=str(exc))

    logger.info("app_started")
    yield

    # Shutdown
    await cache.close()
    await neo4j_conn.close()
    logger.info("app_stopped")


def create_app() -> FastAPI:
    settings = get_settings()
    setup_logging(settings.LOG_LEVEL, settings.LOG_FORMAT)

    application = FastAPI(
        title="physgraph",
        description="Physics wiki topic graph with chronological and network layouts",
        version="0.1.0",
        lifespan=lifespan,
    )

    application.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    application.include_router(api_router)

    @application.middleware("http")
    async def request_id_middleware(request: Request, call_next) -> Response:
        request_id = request.headers.get("X-Request-ID", str(uuid.uuid4()))
        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(request_id=request_id)
        response = await call_next(request)
        response.headers["X-Request-ID"] = request_id
        return response

    @application.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.error("unhandled_exception", error=str(exc), path=request.url.path)
        return JSONResponse(
            status_code=500,
            content={"detail": "Internal server error", "type": type(exc).__name__},
        )

    return application


app = create_app()
