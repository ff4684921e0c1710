"""Inbound payloads for cultural entities, relationships and knowledge articles."""

from __future__ import annotations

from typing import Any, List, Mapping, Optional, Type, TypeVar

from pydantic import BaseModel, Field, ValidationError, field_validator

from culturegraph.core.exceptions import validation_error
from culturegraph.knowledge.graph.models import EntityType, RelationshipType

ModelT = TypeVar("ModelT", bound=BaseModel)


class CulturalEntityInput(BaseModel):
    """Create-or-update request for a `CulturalEntity`, keyed by `name`."""

    name: str = Field(..., description="Natural key of the entity")
    type: EntityType = Field(..., description="Entity kind")
    description: str = Field(..., description="Short description shown in answers")
    region: Optional[str] = Field(None, description="Geographic region where this is practiced")
    language: Optional[str] = Field(None, description="Primary language")
    significance: Optional[str] = Field(None, description="Cultural significance")
    category: Optional[str] = Field(None, description="Free-form grouping, e.g. religious or seasonal")
    popularity: int = Field(5, ge=0, description="Ranking hint")
    verified: bool = Field(False, description="Trust flag; user-added entities start unverified")

    @field_validator("name", "description")
    @classmethod
    def not_blank(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("must not be blank")
        return v.strip()

    def to_parameters(self) -> dict:
        return {
            "name": self.name,
            "type": self.type.value,
            "description": self.description,
            "region": self.region or "",
            "language": self.language or "",
            "significance": self.significance or "",
            "category": self.category or "",
            "popularity": self.popularity,
            "verified": self.verified,
        }


class CulturalRelationshipInput(BaseModel):
    """Directed edge between two entities referenced by name."""

    from_name: str = Field(..., description="Name of the start entity")
    to_name: str = Field(..., description="Name of the end entity")
    type: RelationshipType = Field(..., description="Relationship kind")
    strength: float = Field(0.5, ge=0.0, le=1.0, description="Edge weight")
    since: Optional[str] = None
    until: Optional[str] = None
    context: Optional[str] = None
    verified: bool = False

    def to_parameters(self) -> dict:
        return {
            "fromName": self.from_name,
            "toName": self.to_name,
            "strength": self.strength,
            "since": self.since,
            "until": self.until,
            "context": self.context,
            "verified": self.verified,
        }


class CulturalKnowledgeInput(BaseModel):
    """Knowledge article indexed in the text store."""

    title: str
    content: str
    category: str
    language: str
    source: str
    region: Optional[str] = None
    tags: List[str] = Field(default_factory=list)

    @field_validator("title", "content", "category", "language", "source")
    @classmethod
    def not_blank(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("must not be blank")
        return v


def validate_payload(model: Type[ModelT], payload: Any) -> ModelT:
    """Validate `payload` against `model`, raising `ValidationFailedError` naming the bad fields."""

    if isinstance(payload, model):
        return payload
    if not isinstance(payload, Mapping):
        raise validation_error(f"{model.__name__} payload must be a mapping", [])
    try:
        return model.model_validate(dict(payload))
    except ValidationError as exc:
        fields = sorted({".".join(str(part) for part in error["loc"]) for error in exc.errors()})
        raise validation_error(
            f"Invalid {model.__name__}: {', '.join(fields)}",
            fields,
        ) from exc


__all__ = [
    "CulturalEntityInput",
    "CulturalKnowledgeInput",
    "CulturalRelationshipInput",
    "validate_payload",
]
