"""Schema catalogue — loads and serves schemas from JSON/YAML files.

Follows the same pattern as the other registries:
- One schema per file in a definitions directory (*.json, *.yaml, *.yml)
- Lazy loading with _loaded guard
- In-memory dict keyed by schema id
- Global singleton via get_schema_catalog()

Lookup is tolerant: API payloads and stored catalogues sometimes disagree on
hyphenation ("line-item" vs "lineitem") or use a prefixed alias, so resolve()
falls back to hyphen-insensitive and substring matches.
"""

import json
import logging
from pathlib import Path
from typing import Iterable, Optional

import yaml

from datadisplay.config import get_settings

from .schemas import Schema, SchemaSummary

logger = logging.getLogger(__name__)

SCHEMA_FILE_PATTERNS = ("*.json", "*.yaml", "*.yml")


def _strip_hyphens(value: str) -> str:
    return value.replace("-", "")


def schema_ids_match(candidate: str, schema_id: str) -> bool:
    """Tolerant schema-id comparison.

    Equal, equal once hyphens are removed, or one contains the other.
    """
    if not candidate or not schema_id:
        return False
    if candidate == schema_id:
        return True
    if _strip_hyphens(candidate) == _strip_hyphens(schema_id):
        return True
    return candidate in schema_id or schema_id in candidate


class SchemaCatalog:
    """Catalogue of schemas, the graph that targetSchema references walk."""

    def __init__(
        self,
        definitions_dir: Optional[Path] = None,
        schemas: Optional[Iterable[Schema]] = None,
    ):
        self.definitions_dir = definitions_dir
        self._schemas: dict[str, Schema] = {}
        self._loaded = definitions_dir is None
        for schema in schemas or []:
            self._schemas[schema.id] = schema

    @classmethod
    def from_payloads(cls, payloads: Iterable[dict]) -> "SchemaCatalog":
        """Build a catalogue from already-parsed schema JSON payloads."""
        schemas = []
        for data in payloads:
            try:
                schemas.append(Schema.model_validate(data))
            except Exception as e:
                logger.error(f"Skipping invalid schema payload {data.get('id')!r}: {e}")
        return cls(schemas=schemas)

    def load(self) -> None:
        """Load all schema files from the definitions directory."""
        if self._loaded:
            return

        if self.definitions_dir is None or not self.definitions_dir.exists():
            logger.warning(f"Schema directory not found: {self.definitions_dir}")
            self._loaded = True
            return

        files: list[Path] = []
        for pattern in SCHEMA_FILE_PATTERNS:
            files.extend(self.definitions_dir.glob(pattern))

        for schema_file in sorted(files):
            try:
                with open(schema_file, "r") as f:
                    if schema_file.suffix == ".json":
                        data = json.load(f)
                    else:
                        data = yaml.safe_load(f)
                if data is None:
                    continue
                schema = Schema.model_validate(data)
                self._schemas[schema.id] = schema
                logger.debug(f"Loaded schema: {schema.id}")
            except Exception as e:
                logger.error(f"Failed to load schema from {schema_file}: {e}")

        self._loaded = True
        logger.info(f"Loaded {len(self._schemas)} schemas")

    def get(self, schema_id: str) -> Optional[Schema]:
        """Get a schema by exact id."""
        self.load()
        return self._schemas.get(schema_id)

    def resolve(self, schema_id: Optional[str]) -> Optional[Schema]:
        """Get a schema by id, tolerating aliasing between catalogues.

        Exact and hyphen-insensitive matches win over substring matches.
        """
        self.load()
        if not schema_id:
            return None
        exact = self._schemas.get(schema_id)
        if exact is not None:
            return exact
        stripped = _strip_hyphens(schema_id)
        for schema in self._schemas.values():
            if schema.id == stripped or _strip_hyphens(schema.id) == stripped:
                return schema
        for schema in self._schemas.values():
            if schema_id in schema.id or schema.id in schema_id:
                return schema
        return None

    def add(self, schema: Schema) -> None:
        """Add or replace a schema in memory."""
        self.load()
        self._schemas[schema.id] = schema

    def list_all(self) -> list[Schema]:
        self.load()
        return list(self._schemas.values())

    def list_ids(self) -> list[str]:
        self.load()
        return list(self._schemas.keys())

    def list_summaries(self) -> list[SchemaSummary]:
        self.load()
        return [
            SchemaSummary(id=s.id, label=s.label, field_count=len(s.fields))
            for s in sorted(self._schemas.values(), key=lambda s: s.id)
        ]

    def count(self) -> int:
        self.load()
        return len(self._schemas)

    def reload(self) -> None:
        """Force reload from disk."""
        if self.definitions_dir is None:
            return
        self._loaded = False
        self._schemas.clear()
        self.load()


# Global catalogue instance
_catalog: Optional[SchemaCatalog] = None


def get_schema_catalog() -> SchemaCatalog:
    """Get the global schema catalogue (directory from settings)."""
    global _catalog
    if _catalog is None:
        _catalog = SchemaCatalog(definitions_dir=get_settings().schema_dir)
        _catalog.load()
    return _catalog


def set_schema_catalog(catalog: Optional[SchemaCatalog]) -> None:
    """Replace the global catalogue (tests and embedding applications)."""
    global _catalog
    _catalog = catalog
