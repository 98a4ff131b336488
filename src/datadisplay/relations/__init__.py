"""Coordination of relation fetches made on behalf of the display core."""

from .coordinator import RelationKey, RelationRequestCoordinator, RelationResult

__all__ = ["RelationKey", "RelationRequestCoordinator", "RelationResult"]
