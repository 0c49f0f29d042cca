"""
Shard locator: probes every (year, section) pair in declared order, stops at the
first hit, and never takes a store outage for "not here".
"""
import pytest

from conftest import InMemoryDocumentStore
from models import Year, Section, ShardKey
from services.clearance_errors import ShardNotFoundError, StoreUnavailableError
from services.shard_locator import locate, probe_order

EXPECTED_ORDER = [
    f"students/{y}/{s}/S1"
    for y in ("I", "II", "III", "IV")
    for s in ("A", "B", "C", "D", "E", "F")
]


class TestProbeOrder:

    def test_probe_order_covers_24_shards_years_outer(self):
        shards = list(probe_order())
        assert len(shards) == 24
        assert shards[0] == ShardKey(year=Year.I, section=Section.A)
        assert shards[5] == ShardKey(year=Year.I, section=Section.F)
        assert shards[6] == ShardKey(year=Year.II, section=Section.A)
        assert shards[-1] == ShardKey(year=Year.IV, section=Section.F)

    @pytest.mark.asyncio
    async def test_locates_student_and_visits_shards_in_declared_order(self):
        store = InMemoryDocumentStore({"students/II/B/S1": {"name": "Asha", "rollNo": "21B01"}})
        shard = await locate(store, "S1")
        assert shard == ShardKey(year=Year.II, section=Section.B)
        visited = [path for _, path in store.calls]
        assert visited == EXPECTED_ORDER[:8]

    @pytest.mark.asyncio
    async def test_first_shard_in_order_wins_when_student_appears_twice(self):
        store = InMemoryDocumentStore({
            "students/III/A/S1": {"name": "Later"},
            "students/I/F/S1": {"name": "Earlier"},
        })
        shard = await locate(store, "S1")
        assert shard == ShardKey(year=Year.I, section=Section.F)
        assert len(store.calls) == 6


class TestNotFound:

    @pytest.mark.asyncio
    async def test_absent_student_raises_after_all_24_probes(self):
        store = InMemoryDocumentStore({"students/II/B/OTHER": {"name": "Someone"}})
        with pytest.raises(ShardNotFoundError) as exc:
            await locate(store, "S1")
        assert exc.value.error_code == "SHARD_NOT_FOUND"
        assert [path for _, path in store.calls] == EXPECTED_ORDER


class TestTransientErrors:

    @pytest.mark.asyncio
    async def test_store_outage_aborts_probing(self):
        """An outage at I/C must not be read as absence and skipped past."""
        store = InMemoryDocumentStore(
            {"students/II/B/S1": {"name": "Asha"}},
            failing_paths={"students/I/C/S1"},
        )
        with pytest.raises(StoreUnavailableError):
            await locate(store, "S1")
        assert [path for _, path in store.calls] == EXPECTED_ORDER[:3]
