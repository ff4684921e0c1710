"""Cultural graph loading."""

from .cultural import BulkLoadResult, CulturalGraphLoader, GraphInitializationResult

__all__ = ["BulkLoadResult", "CulturalGraphLoader", "GraphInitializationResult"]
