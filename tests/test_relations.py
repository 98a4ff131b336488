"""Tests for the relation request coordinator."""

import asyncio

import pytest

from datadisplay.relations import RelationKey, RelationRequestCoordinator

KEY = RelationKey(source_schema="invoice", source_id="inv1", target_schema="customer", relation_type="OWNS")

GROUPS = [
    {
        "schema": "customer",
        "direction": "target",
        "relation_type": "OWNS",
        "data": [{"id": "c1", "name": "Acme"}],
    },
    {"schema": "customer", "direction": "source", "relation_type": "REFERS", "data": [{"id": "c2"}]},
    {"schema": "vendor", "direction": "target", "relation_type": "OWNS", "data": [{"id": "v1"}]},
]


class RecordingFetcher:
    def __init__(self, groups=None, error=None):
        self.groups = GROUPS if groups is None else groups
        self.error = error
        self.calls = []
        self.release = asyncio.Event()
        self.release.set()

    async def __call__(self, key):
        self.calls.append(key)
        await self.release.wait()
        if self.error is not None:
            raise self.error
        return self.groups


class TestDeduplication:
    async def test_concurrent_requests_share_one_fetch(self):
        fetcher = RecordingFetcher()
        fetcher.release.clear()
        coordinator = RelationRequestCoordinator(fetcher)

        first = asyncio.ensure_future(coordinator.resolve(KEY))
        second = asyncio.ensure_future(coordinator.resolve(KEY))
        await asyncio.sleep(0)
        assert coordinator.is_in_flight(KEY)

        fetcher.release.set()
        a, b = await asyncio.gather(first, second)
        assert len(fetcher.calls) == 1
        assert a.entities == b.entities
        await asyncio.sleep(0)
        assert not coordinator.is_in_flight(KEY)

    async def test_distinct_keys_fetch_separately(self):
        fetcher = RecordingFetcher()
        coordinator = RelationRequestCoordinator(fetcher)
        other = KEY.model_copy(update={"source_id": "inv2"})
        await asyncio.gather(coordinator.resolve(KEY), coordinator.resolve(other))
        assert len(fetcher.calls) == 2


class TestMemo:
    async def test_last_key_is_answered_from_memory(self):
        fetcher = RecordingFetcher()
        coordinator = RelationRequestCoordinator(fetcher)
        result = await coordinator.resolve(KEY)
        assert await coordinator.resolve(KEY) is result
        assert len(fetcher.calls) == 1
        assert coordinator.last_key == KEY

    async def test_invalidate_forces_refetch(self):
        fetcher = RecordingFetcher()
        coordinator = RelationRequestCoordinator(fetcher)
        await coordinator.resolve(KEY)
        coordinator.invalidate()
        await coordinator.resolve(KEY)
        assert len(fetcher.calls) == 2


class TestResults:
    async def test_groups_are_filtered_by_schema_and_relation_type(self):
        coordinator = RelationRequestCoordinator(RecordingFetcher())
        result = await coordinator.resolve(KEY)
        assert [e["id"] for e in result.entities] == ["c1"]
        assert result.entities[0]["__relationType"] == "OWNS"
        assert result.directions == ["target"]
        assert result.used_fallback is False

    async def test_any_relation_type_when_unspecified(self):
        coordinator = RelationRequestCoordinator(RecordingFetcher())
        key = KEY.model_copy(update={"relation_type": None})
        result = await coordinator.resolve(key)
        assert [e["id"] for e in result.entities] == ["c1", "c2"]
        assert result.directions == ["target", "source"]


class TestFallback:
    @staticmethod
    async def fetch_entity(schema, entity_id):
        if entity_id == "broken":
            raise ConnectionError("unreachable")
        return {"id": entity_id, "schema": schema}

    async def test_failed_relation_fetch_falls_back_to_entities(self):
        coordinator = RelationRequestCoordinator(
            RecordingFetcher(error=RuntimeError("boom")), self.fetch_entity
        )
        result = await coordinator.resolve(KEY, target_ids=["c1", "broken", "c3"])
        assert result.used_fallback is True
        assert result.error == "boom"
        assert [e["id"] for e in result.entities] == ["c1", "c3"]

    async def test_empty_relation_result_falls_back(self):
        coordinator = RelationRequestCoordinator(RecordingFetcher(groups=[]), self.fetch_entity)
        result = await coordinator.resolve(KEY, target_ids=["c9"])
        assert result.used_fallback is True
        assert [e["id"] for e in result.entities] == ["c9"]

    async def test_failure_without_entity_fetcher_gives_empty_result(self):
        coordinator = RelationRequestCoordinator(RecordingFetcher(error=RuntimeError("boom")))
        result = await coordinator.resolve(KEY, target_ids=["c1"])
        assert result.entities == []
        assert result.error == "boom"


class TestStaleness:
    async def test_stale_result_is_discarded(self):
        coordinator = RelationRequestCoordinator(RecordingFetcher())
        assert await coordinator.resolve(KEY, is_current=lambda key: False) is None
        assert coordinator.last_key is None

    async def test_current_result_is_committed(self):
        coordinator = RelationRequestCoordinator(RecordingFetcher())
        result = await coordinator.resolve(KEY, is_current=lambda key: key == KEY)
        assert result is not None
        assert coordinator.last_key == KEY


@pytest.mark.parametrize("relation_type", [None, "OWNS"])
def test_relation_key_is_hashable(relation_type):
    key = KEY.model_copy(update={"relation_type": relation_type})
    assert {key: 1}[key] == 1
