"""Initial setup script for culturegraph infrastructure."""

from __future__ import annotations

import asyncio
import logging

from culturegraph.core.database import DatabaseManager
from culturegraph.core.observability import configure_logging, setup_tracing
from culturegraph.knowledge.ingestion import CulturalGraphLoader

logger = logging.getLogger(__name__)


async def main() -> None:
    configure_logging()
    setup_tracing()
    async with DatabaseManager() as database:
        graph = database.graph_gateway()
        status = await graph.check_connection()
        if not status.connected:
            logger.error("Neo4j unavailable: %s", status.error)
            return

        await database.text_gateway().ensure_indices()

        result = await CulturalGraphLoader(graph).initialize_cultural_graph()
        if not result.success:
            logger.error("Cultural graph initialization failed: %s", "; ".join(result.errors))
            return
        for error in result.errors:
            logger.warning("Skipped: %s", error)
        logger.info(
            "culturegraph setup complete: %d entities, %d relationships",
            result.entities,
            result.relationships,
        )


if __name__ == "__main__":
    asyncio.run(main())
