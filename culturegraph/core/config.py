"""
Configuration management for the culturegraph retrieval engine.

This module centralizes environment-driven configuration using Pydantic's
`BaseSettings`. Components accept an explicit `Settings` instance and fall
back to the cached `get_settings()` result when none is given.
"""

from __future__ import annotations

from functools import lru_cache
from typing import List, Optional

from pydantic import AnyUrl, Field, PositiveInt, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_CONTEXT_RELATIONSHIP_TYPES = [
    "RELATED_TO",
    "ASSOCIATED_WITH",
    "PART_OF",
    "CELEBRATED_IN",
    "WORSHIPS",
    "ORIGINATED_FROM",
    "PERFORMED_DURING",
]


class Settings(BaseSettings):
    """Engine configuration sourced from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", case_sensitive=False)

    # General settings
    SERVICE_NAME: str = "culturegraph"
    SERVICE_VERSION: str = "0.1.0"
    DEBUG: bool = False
    ENVIRONMENT: str = Field("development", pattern=r"^(development|staging|production)$")
    LOG_LEVEL: str = Field("INFO", pattern=r"^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$")

    # Graph store
    NEO4J_URI: str = Field("bolt://localhost:7687", pattern=r"^(bolt|neo4j)(\+s|\+ssc)?://")
    NEO4J_USER: str = "neo4j"
    NEO4J_PASSWORD: str = "password"
    NEO4J_DATABASE: str = "neo4j"
    NEO4J_MAX_CONNECTION_POOL_SIZE: PositiveInt = 50
    NEO4J_CONNECTION_ACQUISITION_TIMEOUT: float = 30.0
    NEO4J_CONNECTION_TIMEOUT: float = 10.0
    NEO4J_MAX_TRANSACTION_RETRY_TIME: float = 30.0
    NEO4J_FULLTEXT_INDEX: str = "cultural_search"

    # Text / vector store
    ELASTICSEARCH_URL: AnyUrl = Field("http://localhost:9200")
    ELASTICSEARCH_KNOWLEDGE_INDEX: str = "cultural-knowledge"
    ELASTICSEARCH_DOCUMENTS_INDEX: str = "documents"

    # Timeouts
    GRAPH_QUERY_TIMEOUT_SECONDS: float = 10.0
    VECTOR_QUERY_TIMEOUT_SECONDS: float = 5.0
    QUERY_TIMEOUT_SECONDS: float = 30.0

    # Retrieval tuning
    GRAPH_TRAVERSAL_MAX_DEPTH: PositiveInt = 3
    GRAPH_TRAVERSAL_HARD_CAP: PositiveInt = 5
    GRAPH_REASONING_DEPTH: PositiveInt = 2
    GRAPH_MAX_RESULTS: PositiveInt = 10
    SEMANTIC_MIN_SCORE: float = Field(0.5, ge=0.0, le=1.0)
    CONTEXT_SEED_CANDIDATES: PositiveInt = 5
    CONTEXT_RELATIONSHIP_TYPES: str = ",".join(DEFAULT_CONTEXT_RELATIONSHIP_TYPES)
    HYBRID_GRAPH_WEIGHT: float = Field(0.6, ge=0.0, le=1.0)
    HYBRID_VECTOR_WEIGHT: float = Field(0.3, ge=0.0, le=1.0)
    # Reserved for plain-text scoring; not consumed by the combiner yet.
    HYBRID_TEXT_WEIGHT: float = Field(0.1, ge=0.0, le=1.0)
    RELEVANCE_NODE_WEIGHT: float = Field(0.2, ge=0.0)
    RELEVANCE_RELATIONSHIP_WEIGHT: float = Field(0.3, ge=0.0)
    RELEVANCE_PATH_WEIGHT: float = Field(0.1, ge=0.0)
    CONFIDENCE_FLOOR: float = Field(0.5, ge=0.0, le=1.0)
    VECTOR_SOURCE_RELEVANCE: float = Field(0.8, ge=0.0, le=1.0)

    # Query cache
    ENABLE_QUERY_CACHE: bool = True
    CACHE_TTL_SECONDS: float = 300.0
    CACHE_MAX_ENTRIES: PositiveInt = 1024

    # Tracing
    OTEL_EXPORTER_OTLP_ENDPOINT: Optional[AnyUrl] = None
    OTEL_EXPORTER_OTLP_HEADERS: Optional[str] = None

    @model_validator(mode="after")
    def _check_depths(self) -> "Settings":
        if self.GRAPH_TRAVERSAL_MAX_DEPTH > self.GRAPH_TRAVERSAL_HARD_CAP:
            raise ValueError("GRAPH_TRAVERSAL_MAX_DEPTH must not exceed GRAPH_TRAVERSAL_HARD_CAP")
        if self.GRAPH_REASONING_DEPTH > self.GRAPH_TRAVERSAL_HARD_CAP:
            raise ValueError("GRAPH_REASONING_DEPTH must not exceed GRAPH_TRAVERSAL_HARD_CAP")
        return self

    @property
    def context_relationship_types(self) -> List[str]:
        return [item.strip().upper() for item in self.CONTEXT_RELATIONSHIP_TYPES.split(",") if item.strip()]

    @property
    def hybrid_weights(self) -> dict[str, float]:
        return {
            "graph": self.HYBRID_GRAPH_WEIGHT,
            "vector": self.HYBRID_VECTOR_WEIGHT,
            "text": self.HYBRID_TEXT_WEIGHT,
        }


@lru_cache()
def get_settings() -> Settings:
    """Return a cached `Settings` instance."""

    return Settings()
