"""Hybrid graph + text retrieval engine for cultural knowledge."""

__version__ = "0.1.0"
