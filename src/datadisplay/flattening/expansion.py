"""Expand/collapse state for nested tables.

State is keyed by the parent's original index, so every expanded row of a
parent toggles together.
"""

from typing import Iterable

from pydantic import BaseModel, Field

from .schemas import FlattenResult


class ExpansionState(BaseModel):
    expanded: set[int] = Field(default_factory=set)

    def is_expanded(self, original_index: int) -> bool:
        return original_index in self.expanded

    def toggle(self, original_index: int) -> bool:
        """Flip one parent; returns the new state."""
        if original_index in self.expanded:
            self.expanded.discard(original_index)
            return False
        self.expanded.add(original_index)
        return True

    def expand_all(self, original_indexes: Iterable[int]) -> None:
        self.expanded.update(original_indexes)

    def expand_all_in(self, result: FlattenResult) -> None:
        """Expand every parent of ``result`` that has nested children."""
        self.expand_all(panel.original_index for panel in result.nested)

    def collapse_all(self) -> None:
        self.expanded.clear()

    def visible_panels(self, result: FlattenResult) -> list[int]:
        """Original indexes whose nested panel is currently shown."""
        return [p.original_index for p in result.nested if p.original_index in self.expanded]
