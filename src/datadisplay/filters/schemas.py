"""
Filter Schemas

Operator vocabulary, per-kind strategies and the filter items a user
authors against a table.
"""

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field

VALUELESS_OPERATORS = ("is_empty", "is_not_empty")
RANGE_OPERATOR = "between"
EXACT_OPERATOR = "eq"


class OperatorDescriptor(BaseModel):
    """One filter operator as offered to the user."""

    id: str = Field(description="Operator id, e.g. 'eq', 'contains', 'between'")
    label: str = Field(description="Human-readable operator name")
    symbol: Optional[str] = Field(default=None, description="Short symbol, e.g. '≥'")


class FilterStrategy(BaseModel):
    """Operators and default operator for one family of component kinds."""

    model_config = ConfigDict(populate_by_name=True)

    key: str = Field(default="custom", description="Strategy family: text, number, date, select, boolean")
    operators: list[OperatorDescriptor] = Field(default_factory=list)
    default_operator: str = Field(alias="defaultOperator")

    def operator_ids(self) -> list[str]:
        return [op.id for op in self.operators]

    def has_operator(self, operator_id: str) -> bool:
        return any(op.id == operator_id for op in self.operators)

    @property
    def supports_exact_toggle(self) -> bool:
        """Range-capable strategies offer an exact-value toggle."""
        return self.has_operator(RANGE_OPERATOR) and self.has_operator(EXACT_OPERATOR)


class StrategyDefinition(BaseModel):
    """A strategy plus the component kinds it applies to, as stored on disk."""

    model_config = ConfigDict(populate_by_name=True)

    key: str
    operators: list[OperatorDescriptor]
    default_operator: str = Field(alias="defaultOperator")
    kinds: list[str] = Field(default_factory=list)

    def to_strategy(self) -> FilterStrategy:
        return FilterStrategy(
            key=self.key,
            operators=self.operators,
            default_operator=self.default_operator,
        )


class FilterItem(BaseModel):
    """A filter being authored.

    ``value`` is a scalar, a ``{"from", "to"}`` range or a list (in/not_in).
    ``previous_to`` remembers the upper bound while the exact-value toggle
    is on, so switching back to a range does not lose it.
    """

    id: str = ""
    column: str
    operator: str
    value: Any = None
    previous_to: Any = None


class PersistedFilter(BaseModel):
    """Output contract for saved filters (no internal id)."""

    column: str
    operator: str
    value: Any = None
