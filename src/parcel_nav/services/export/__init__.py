"""Export utilities for map clients."""

from .geojson import state_to_feature_collection

__all__ = [
    "state_to_feature_collection",
]
