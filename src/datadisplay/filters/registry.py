"""Filter strategy registry.

Maps a component kind to its filter operators and default operator:
- Strategy families and their kinds live in definitions/strategies.json
- Lazy loading with _loaded guard
- Unregistered kinds fall back to the text strategy, lookup never fails
- register() adds or overrides a kind at runtime
- Global singleton via get_filter_registry()
"""

import json
import logging
from pathlib import Path
from typing import Any, Optional, Union

from datadisplay.config import get_settings
from datadisplay.fields.schemas import FieldDescriptor, resolve_component

from .schemas import FilterStrategy, StrategyDefinition

logger = logging.getLogger(__name__)

DEFAULT_DEFINITIONS = Path(__file__).parent / "definitions" / "strategies.json"
FALLBACK_KEY = "text"


class FilterStrategyRegistry:
    """Registry of filter strategies keyed by lower-cased component kind."""

    def __init__(self, definitions_path: Optional[Path] = None):
        if definitions_path is None:
            definitions_path = get_settings().filter_definitions or DEFAULT_DEFINITIONS
        self.definitions_path = definitions_path
        self._strategies: dict[str, FilterStrategy] = {}
        self._families: dict[str, FilterStrategy] = {}
        self._fallback_key = FALLBACK_KEY
        self._loaded = False

    def load(self) -> None:
        """Load strategy families and their kinds from JSON."""
        if self._loaded:
            return

        self._loaded = True
        if not self.definitions_path.exists():
            logger.warning(f"Filter definitions not found: {self.definitions_path}")
            return

        try:
            with open(self.definitions_path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except Exception as e:
            logger.error(f"Failed to read filter definitions from {self.definitions_path}: {e}")
            return

        self._fallback_key = data.get("fallback", FALLBACK_KEY)
        for raw in data.get("strategies", []):
            try:
                definition = StrategyDefinition.model_validate(raw)
            except Exception as e:
                logger.error(f"Skipping invalid filter strategy {raw.get('key')}: {e}")
                continue
            strategy = definition.to_strategy()
            self._families[definition.key] = strategy
            for kind in definition.kinds:
                # explicit register() calls made before loading win
                self._strategies.setdefault(kind.lower(), strategy)

        logger.info(
            f"Loaded {len(self._families)} filter strategies covering {len(self._strategies)} kinds"
        )

    def fallback(self) -> FilterStrategy:
        """The text strategy used for every unregistered kind."""
        self.load()
        strategy = self._families.get(self._fallback_key)
        if strategy is None:
            strategy = FilterStrategy(key=FALLBACK_KEY, operators=[], default_operator="contains")
        return strategy

    def get(self, kind_or_field: Union[str, FieldDescriptor, None]) -> FilterStrategy:
        """Strategy for a component kind string or a field descriptor.

        The raw component string is tried first, then its canonical kind,
        then the text fallback.
        """
        self.load()
        if isinstance(kind_or_field, FieldDescriptor):
            raw = kind_or_field.component_key
        elif kind_or_field is None:
            raw = FALLBACK_KEY
        else:
            raw = str(kind_or_field).strip().lower()

        strategy = self._strategies.get(raw)
        if strategy is None:
            strategy = self._strategies.get(resolve_component(raw).value)
        if strategy is None:
            logger.debug(f"No filter strategy for '{raw}', using {self._fallback_key}")
            return self.fallback()
        return strategy

    def register(self, kind: str, strategy: Union[FilterStrategy, dict[str, Any]]) -> None:
        """Register or override the strategy for a component kind."""
        if not isinstance(kind, str) or not kind.strip():
            raise ValueError("Filter strategy kind must be a non-empty string")
        if isinstance(strategy, dict):
            strategy = FilterStrategy.model_validate(strategy)
        if not isinstance(strategy, FilterStrategy):
            raise ValueError(f"Expected FilterStrategy for '{kind}', got {type(strategy).__name__}")
        if strategy.operators and not strategy.has_operator(strategy.default_operator):
            raise ValueError(
                f"Default operator '{strategy.default_operator}' is not one of "
                f"{strategy.operator_ids()}"
            )
        self._strategies[kind.strip().lower()] = strategy
        logger.info(f"Registered filter strategy for '{kind}'")

    def families(self) -> dict[str, FilterStrategy]:
        """Strategy families keyed by family name."""
        self.load()
        return dict(self._families)

    def list_kinds(self) -> list[str]:
        self.load()
        return sorted(self._strategies.keys())

    def as_mapping(self) -> dict[str, FilterStrategy]:
        """Every registered kind with its strategy."""
        self.load()
        return {kind: self._strategies[kind] for kind in sorted(self._strategies)}

    def reload(self) -> None:
        """Drop loaded definitions and runtime registrations, then reload."""
        self._strategies.clear()
        self._families.clear()
        self._loaded = False
        self.load()


# Global registry instance
_registry: Optional[FilterStrategyRegistry] = None


def get_filter_registry() -> FilterStrategyRegistry:
    """Get the global filter strategy registry instance."""
    global _registry
    if _registry is None:
        _registry = FilterStrategyRegistry()
        _registry.load()
    return _registry


def set_filter_registry(registry: Optional[FilterStrategyRegistry]) -> None:
    """Replace (or with None, reset) the global registry."""
    global _registry
    _registry = registry
