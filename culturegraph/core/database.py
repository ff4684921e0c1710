"""Connectivity layer for the graph and text stores."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Optional

from elasticsearch import AsyncElasticsearch
from neo4j import AsyncDriver, AsyncGraphDatabase

from culturegraph.core.config import Settings, get_settings

if TYPE_CHECKING:
    from culturegraph.knowledge.graph.manager import GraphStoreGateway
    from culturegraph.knowledge.vector.search import TextStoreGateway

logger = logging.getLogger(__name__)


class DatabaseManager:
    """Owns the store clients for one process lifetime.

    Construct once at start-up, enter with ``async with`` (or call
    ``initialize``/``close``) and hand the gateways it builds to the
    components that need them.
    """

    def __init__(self, settings: Optional[Settings] = None) -> None:
        self.settings = settings or get_settings()
        self.neo4j: Optional[AsyncDriver] = None
        self.elasticsearch: Optional[AsyncElasticsearch] = None

    async def initialize(self) -> None:
        """Create clients for all backing services."""

        logger.info("Initializing culturegraph database manager")

        self.neo4j = AsyncGraphDatabase.driver(
            str(self.settings.NEO4J_URI),
            auth=(self.settings.NEO4J_USER, self.settings.NEO4J_PASSWORD),
            max_connection_pool_size=self.settings.NEO4J_MAX_CONNECTION_POOL_SIZE,
            connection_acquisition_timeout=self.settings.NEO4J_CONNECTION_ACQUISITION_TIMEOUT,
            connection_timeout=self.settings.NEO4J_CONNECTION_TIMEOUT,
            max_transaction_retry_time=self.settings.NEO4J_MAX_TRANSACTION_RETRY_TIME,
        )

        self.elasticsearch = AsyncElasticsearch(
            str(self.settings.ELASTICSEARCH_URL),
            request_timeout=self.settings.VECTOR_QUERY_TIMEOUT_SECONDS,
        )

        logger.info("Database manager initialized")

    async def close(self) -> None:
        """Tear down connections gracefully."""

        logger.info("Closing database connections")

        if self.neo4j is not None:
            await self.neo4j.close()
            self.neo4j = None

        if self.elasticsearch is not None:
            await self.elasticsearch.close()
            self.elasticsearch = None

    async def __aenter__(self) -> "DatabaseManager":
        await self.initialize()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    def graph_gateway(self) -> "GraphStoreGateway":
        from culturegraph.knowledge.graph.manager import GraphStoreGateway

        return GraphStoreGateway(self.neo4j, settings=self.settings)

    def text_gateway(self) -> "TextStoreGateway":
        from culturegraph.knowledge.vector.search import TextStoreGateway

        return TextStoreGateway(self.elasticsearch, settings=self.settings)
