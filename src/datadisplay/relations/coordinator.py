"""Relation request coordination.

The display core never fetches. Whoever does fetch related rows hands their
fetch functions to a RelationRequestCoordinator, which guarantees:

- at most one in-flight fetch per RelationKey
- a repeat request for the last committed key is answered from memory
- when the grouped relation fetch fails (or comes back empty while target
  ids are known) entities are fetched one by one instead
- a result whose key is no longer current is discarded, not committed
"""

import asyncio
import logging
from typing import Any, Awaitable, Callable, Iterable, Optional

from pydantic import BaseModel, ConfigDict, Field

from datadisplay.fields.catalog import schema_ids_match

logger = logging.getLogger(__name__)

RELATION_TYPE_KEY = "__relationType"


class RelationKey(BaseModel):
    """Identity of one relation lookup."""

    model_config = ConfigDict(frozen=True)

    source_schema: str
    source_id: str
    target_schema: str
    relation_type: Optional[str] = None


class RelationResult(BaseModel):
    key: RelationKey
    entities: list[dict[str, Any]] = Field(default_factory=list)
    directions: list[str] = Field(default_factory=list)
    used_fallback: bool = False
    error: Optional[str] = None


RelationsFetcher = Callable[[RelationKey], Awaitable[list[dict[str, Any]]]]
EntityFetcher = Callable[[str, str], Awaitable[Optional[dict[str, Any]]]]


def _matching_groups(key: RelationKey, groups: Iterable[Any]) -> tuple[list[dict], list[str]]:
    entities: list[dict[str, Any]] = []
    directions: list[str] = []
    for group in groups or []:
        if not isinstance(group, dict):
            continue
        if not schema_ids_match(str(group.get("schema") or ""), key.target_schema):
            continue
        relation_type = group.get("relation_type")
        if key.relation_type and relation_type != key.relation_type:
            continue
        data = [d for d in group.get("data") or [] if isinstance(d, dict)]
        if not data:
            continue
        direction = group.get("direction")
        if direction and direction not in directions:
            directions.append(direction)
        entities.extend({**item, RELATION_TYPE_KEY: relation_type} for item in data)
    return entities, directions


class RelationRequestCoordinator:
    """De-duplicates and memoises relation fetches for one consuming context."""

    def __init__(self, fetch_relations: RelationsFetcher, fetch_entity: Optional[EntityFetcher] = None):
        self.fetch_relations = fetch_relations
        self.fetch_entity = fetch_entity
        self._in_flight: dict[RelationKey, asyncio.Task] = {}
        self._last_key: Optional[RelationKey] = None
        self._last_result: Optional[RelationResult] = None

    @property
    def last_key(self) -> Optional[RelationKey]:
        return self._last_key

    def is_in_flight(self, key: RelationKey) -> bool:
        return key in self._in_flight

    def invalidate(self) -> None:
        """Forget the memoised result so the next resolve fetches again."""
        self._last_key = None
        self._last_result = None

    async def _fetch_entities(self, key: RelationKey, target_ids: list[str]) -> list[dict[str, Any]]:
        if self.fetch_entity is None or not target_ids:
            return []
        results = await asyncio.gather(
            *(self.fetch_entity(key.target_schema, tid) for tid in target_ids),
            return_exceptions=True,
        )
        entities = []
        for target_id, result in zip(target_ids, results):
            if isinstance(result, Exception):
                logger.error(f"Error fetching {key.target_schema}/{target_id}: {result}")
                continue
            if isinstance(result, dict):
                entities.append({**result, RELATION_TYPE_KEY: key.relation_type or ""})
        return entities

    async def _fetch(self, key: RelationKey, target_ids: list[str]) -> RelationResult:
        try:
            groups = await self.fetch_relations(key)
        except Exception as e:
            logger.warning(f"Relation fetch failed for {key}: {e}; falling back to entity fetches")
            entities = await self._fetch_entities(key, target_ids)
            return RelationResult(key=key, entities=entities, used_fallback=True, error=str(e))

        entities, directions = _matching_groups(key, groups)
        if not entities and target_ids:
            entities = await self._fetch_entities(key, target_ids)
            return RelationResult(key=key, entities=entities, directions=directions, used_fallback=True)
        return RelationResult(key=key, entities=entities, directions=directions)

    async def resolve(
        self,
        key: RelationKey,
        target_ids: Optional[list[str]] = None,
        is_current: Optional[Callable[[RelationKey], bool]] = None,
    ) -> Optional[RelationResult]:
        """Related entities for ``key``.

        ``target_ids`` (known related ids, e.g. from relation metadata) feed
        the per-entity fallback. Returns None when ``is_current`` reports
        the key went stale while fetching.
        """
        if key == self._last_key and self._last_result is not None:
            return self._last_result

        task = self._in_flight.get(key)
        if task is None:
            task = asyncio.ensure_future(self._fetch(key, list(target_ids or [])))
            self._in_flight[key] = task
            task.add_done_callback(lambda t, k=key: self._forget(k, t))
        else:
            logger.debug(f"Joining in-flight relation fetch for {key}")

        # one caller being cancelled must not cancel the shared fetch
        result = await asyncio.shield(task)

        if is_current is not None and not is_current(key):
            logger.debug(f"Discarding stale relation result for {key}")
            return None

        self._last_key = key
        self._last_result = result
        return result

    def _forget(self, key: RelationKey, task: asyncio.Task) -> None:
        if self._in_flight.get(key) is task:
            del self._in_flight[key]
