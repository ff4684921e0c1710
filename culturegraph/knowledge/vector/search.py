"""Keyword/similarity search over the Elasticsearch knowledge and document indices."""

from __future__ import annotations

import asyncio
import logging
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Mapping, Optional

from elasticsearch import AsyncElasticsearch
from opentelemetry import trace

from culturegraph.core.config import Settings, get_settings
from culturegraph.knowledge.graph.models import ConnectionStatus
from culturegraph.models.entity import CulturalKnowledgeInput, validate_payload
from culturegraph.utils.monitoring import record_backend_failure

logger = logging.getLogger(__name__)
tracer = trace.get_tracer(__name__)

KNOWLEDGE_MAPPINGS: Dict[str, Any] = {
    "properties": {
        "title": {"type": "text"},
        "content": {"type": "text"},
        "category": {"type": "keyword"},
        "region": {"type": "keyword"},
        "language": {"type": "keyword"},
        "tags": {"type": "text"},
        "source": {"type": "keyword"},
        "dateAdded": {"type": "date"},
    }
}

DOCUMENT_MAPPINGS: Dict[str, Any] = {
    "properties": {
        "fileName": {"type": "text"},
        "content": {"type": "text"},
        "fileType": {"type": "keyword"},
        "fileSize": {"type": "long"},
        "uploadDate": {"type": "date"},
    }
}


@dataclass
class TextSearchItem:
    id: str
    content: str
    score: Optional[float] = None
    metadata: Dict[str, Any] = field(default_factory=dict)


@dataclass
class TextSearchResponse:
    success: bool
    items: List[TextSearchItem] = field(default_factory=list)
    error: Optional[str] = None

    @property
    def total_results(self) -> int:
        return len(self.items)


class TextStoreGateway:
    """Best-effort access to the text store; failures come back as `success=False`."""

    def __init__(self, client: Optional[AsyncElasticsearch], settings: Optional[Settings] = None) -> None:
        self.client = client
        self.settings = settings or get_settings()

    async def search_knowledge(
        self,
        query: str,
        category: Optional[str] = None,
        limit: int = 5,
    ) -> TextSearchResponse:
        body: Dict[str, Any] = {
            "query": {
                "bool": {
                    "must": [
                        {
                            "multi_match": {
                                "query": query,
                                "fields": ["title^2", "content", "tags"],
                            }
                        }
                    ],
                    "filter": [{"term": {"category": category}}] if category else [],
                }
            },
            "size": limit,
        }
        return await self._search(self.settings.ELASTICSEARCH_KNOWLEDGE_INDEX, body)

    async def search_documents(self, query: str, limit: int = 5) -> TextSearchResponse:
        body = {
            "query": {
                "multi_match": {
                    "query": query,
                    "fields": ["content", "fileName"],
                }
            },
            "size": limit,
        }
        return await self._search(self.settings.ELASTICSEARCH_DOCUMENTS_INDEX, body)

    async def add_knowledge(self, payload: Mapping[str, Any]) -> Optional[str]:
        """Index a knowledge article and return its id, or None when the store rejected it."""

        knowledge = validate_payload(CulturalKnowledgeInput, payload)
        if self.client is None:
            logger.warning("Elasticsearch client unavailable; skipping knowledge indexing.")
            return None

        document_id = str(uuid.uuid4())
        document = knowledge.model_dump()
        document["dateAdded"] = datetime.now(timezone.utc).isoformat()
        try:
            await asyncio.wait_for(
                self.client.index(
                    index=self.settings.ELASTICSEARCH_KNOWLEDGE_INDEX,
                    id=document_id,
                    document=document,
                ),
                timeout=self.settings.VECTOR_QUERY_TIMEOUT_SECONDS,
            )
        except Exception as exc:
            record_backend_failure("elasticsearch")
            logger.error("Failed to index knowledge article %r: %s", knowledge.title, exc)
            return None
        logger.info("Indexed knowledge article %r as %s", knowledge.title, document_id)
        return document_id

    async def check_connection(self) -> ConnectionStatus:
        if self.client is None:
            return ConnectionStatus(connected=False, error="Elasticsearch client not initialized")
        try:
            info = await asyncio.wait_for(self.client.info(), timeout=self.settings.VECTOR_QUERY_TIMEOUT_SECONDS)
        except Exception as exc:
            record_backend_failure("elasticsearch")
            logger.warning("Elasticsearch connectivity check failed: %s", exc)
            return ConnectionStatus(connected=False, error=str(exc) or exc.__class__.__name__)
        version = (info.get("version") or {}).get("number")
        return ConnectionStatus(connected=True, version=version)

    async def ensure_indices(self) -> None:
        if self.client is None:
            logger.error("Elasticsearch client unavailable. Did initialization fail?")
            return
        for index, mappings in (
            (self.settings.ELASTICSEARCH_KNOWLEDGE_INDEX, KNOWLEDGE_MAPPINGS),
            (self.settings.ELASTICSEARCH_DOCUMENTS_INDEX, DOCUMENT_MAPPINGS),
        ):
            exists = await self.client.indices.exists(index=index)
            if not exists:
                await self.client.indices.create(index=index, mappings=mappings)
                logger.info("Created Elasticsearch index %s", index)

    async def _search(self, index: str, body: Dict[str, Any]) -> TextSearchResponse:
        if self.client is None:
            return TextSearchResponse(success=False, error="Elasticsearch client not initialized")

        with tracer.start_as_current_span("text.search"):
            try:
                response = await asyncio.wait_for(
                    self.client.search(index=index, query=body["query"], size=body["size"]),
                    timeout=self.settings.VECTOR_QUERY_TIMEOUT_SECONDS,
                )
            except asyncio.TimeoutError:
                record_backend_failure("elasticsearch")
                logger.error("Text search on %s timed out", index)
                return TextSearchResponse(success=False, error="Text search timed out")
            except Exception as exc:
                record_backend_failure("elasticsearch")
                logger.error("Text search failed: %s", exc)
                return TextSearchResponse(success=False, error=str(exc) or exc.__class__.__name__)

        hits = response["hits"]["hits"]
        items = []
        for hit in hits:
            source = dict(hit.get("_source") or {})
            items.append(
                TextSearchItem(
                    id=str(hit["_id"]),
                    content=str(source.pop("content", "") or ""),
                    score=hit.get("_score"),
                    metadata=source,
                )
            )
        return TextSearchResponse(success=True, items=items)
