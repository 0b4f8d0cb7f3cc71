"""Route group exports."""

from . import health, navigation, parcels

__all__ = ["health", "parcels", "navigation"]
