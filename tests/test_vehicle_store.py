"""Tests for the Supabase vehicle queries and the in-memory VehicleStore."""

import asyncio
from unittest.mock import MagicMock, patch

import pytest
from postgrest.exceptions import APIError

from junkcar.errors import ConfigurationError, VehicleStoreError
from junkcar.models.vehicle import SoldDetails, VehicleStatus
from junkcar.storage.supabase_client import SupabaseClient, VehiclePage
from junkcar.storage.vehicle_store import VehicleStore


def make_rows(count, start=0):
    return [
        {
            "id": f"row-{i}",
            "year": 2000 + i,
            "make": "Honda",
            "model": "Civic",
            "vehicle_id": f"VIN{i}",
            "status": "yard",
            "created_at": "2024-03-15T10:00:00+00:00",
        }
        for i in range(start, start + count)
    ]


@pytest.fixture
def query():
    """Chainable mock of the PostgREST query builder."""
    builder = MagicMock()
    for method in ("select", "order", "or_", "limit", "range", "update", "eq"):
        getattr(builder, method).return_value = builder
    builder.execute.return_value = MagicMock(data=make_rows(2), count=5)
    return builder


@pytest.fixture
def supabase_client(mock_settings, query):
    client = MagicMock()
    client.table.return_value = query
    with patch("junkcar.storage.supabase_client.get_settings", return_value=mock_settings):
        yield SupabaseClient(client=client)


class TestSupabaseClient:
    """Tests for SupabaseClient vehicle queries."""

    @pytest.mark.unit
    def test_requires_credentials(self, mock_settings):
        mock_settings.supabase_enabled = False
        with patch("junkcar.storage.supabase_client.get_settings", return_value=mock_settings):
            with pytest.raises(ConfigurationError):
                SupabaseClient()

    @pytest.mark.unit
    def test_first_page(self, supabase_client, query):
        """Should request the first page newest-first with an exact count."""
        page = supabase_client.fetch_vehicles_page()

        query.select.assert_called_once_with("*", count="exact")
        query.order.assert_called_once_with("created_at", desc=True)
        query.range.assert_called_once_with(0, 1)
        query.or_.assert_not_called()
        assert [v.id for v in page.vehicles] == ["row-0", "row-1"]
        assert page.total_count == 5
        assert page.has_more is True

    @pytest.mark.unit
    def test_last_page_has_no_more(self, supabase_client, query):
        query.execute.return_value = MagicMock(data=make_rows(1, start=4), count=5)

        page = supabase_client.fetch_vehicles_page(page=3)

        query.range.assert_called_once_with(4, 5)
        assert page.has_more is False

    @pytest.mark.unit
    def test_search_bypasses_paging(self, supabase_client, query):
        """A search term should return every match up to the limit in one page."""
        page = supabase_client.fetch_vehicles_page(page=3, search_term=" Civic ")

        filter_arg = query.or_.call_args[0][0]
        assert "make.ilike.%civic%" in filter_arg
        assert "license_plate.ilike.%civic%" in filter_arg
        query.limit.assert_called_once_with(1000)
        query.range.assert_not_called()
        assert page.has_more is False

    @pytest.mark.unit
    def test_query_failure_raises_store_error(self, supabase_client, query):
        query.execute.side_effect = APIError({"message": "boom", "code": "500"})

        with pytest.raises(VehicleStoreError):
            supabase_client.fetch_vehicles_page()

    @pytest.mark.unit
    def test_invalid_rows_are_skipped(self, supabase_client, query):
        rows = make_rows(1) + [{"id": "bad", "status": "crushed"}]
        query.execute.return_value = MagicMock(data=rows, count=2)

        page = supabase_client.fetch_vehicles_page()

        assert [v.id for v in page.vehicles] == ["row-0"]

    @pytest.mark.unit
    def test_mark_sold_records_buyer(self, supabase_client, query):
        sold = SoldDetails(
            buyer_first_name="Maria",
            buyer_last_name="Lopez",
            sale_price="1000",
            sale_date="2024-03-11",
        )

        supabase_client.update_vehicle_status("row-0", VehicleStatus.SOLD, sold)

        data = query.update.call_args[0][0]
        assert data["status"] == "sold"
        assert data["buyer_name"] == "Maria Lopez"
        assert data["sale_price"] == "1000"
        assert "updated_at" in data
        query.eq.assert_called_once_with("id", "row-0")

    @pytest.mark.unit
    def test_other_status_clears_sale(self, supabase_client, query):
        supabase_client.update_vehicle_status("row-0", VehicleStatus.PICK_YOUR_PART)

        data = query.update.call_args[0][0]
        assert data["status"] == "pick-your-part"
        assert data["buyer_first_name"] is None
        assert data["sale_price"] is None
        assert data["sale_date"] is None


@pytest.fixture
def db():
    """Mock SupabaseClient for VehicleStore tests."""
    mock = MagicMock()
    mock.fetch_vehicles_page.return_value = VehiclePage(
        vehicles=[], total_count=0, has_more=False
    )
    mock.fetch_all_vehicles.return_value = []
    return mock


class TestVehicleStore:
    """Tests for VehicleStore paging and updates."""

    @pytest.mark.asyncio
    async def test_load_and_append_pages(self, db, make_vehicle):
        first = [make_vehicle(id="a"), make_vehicle(id="b")]
        second = [make_vehicle(id="c")]
        db.fetch_vehicles_page.side_effect = [
            VehiclePage(vehicles=first, total_count=3, has_more=True),
            VehiclePage(vehicles=second, total_count=3, has_more=False),
        ]
        store = VehicleStore(db=db)

        await store.load_page()
        vehicles = await store.load_more()

        assert [v.id for v in vehicles] == ["a", "b", "c"]
        assert store.current_page == 2
        assert store.has_more is False
        db.fetch_vehicles_page.assert_called_with(2, "")

    @pytest.mark.asyncio
    async def test_load_more_without_more_is_noop(self, db):
        store = VehicleStore(db=db)
        await store.load_page()

        await store.load_more()

        assert db.fetch_vehicles_page.call_count == 1

    @pytest.mark.asyncio
    async def test_search_replaces_vehicles(self, db, make_vehicle):
        db.fetch_vehicles_page.side_effect = [
            VehiclePage(vehicles=[make_vehicle(id="a")], total_count=10, has_more=True),
            VehiclePage(vehicles=[make_vehicle(id="z")], total_count=1, has_more=False),
        ]
        store = VehicleStore(db=db)
        await store.load_page()

        vehicles = await store.load_page(search_term="ford", append=True)

        assert [v.id for v in vehicles] == ["z"]
        assert store.search_term == "ford"

    @pytest.mark.asyncio
    async def test_failed_load_empties_store(self, db, make_vehicle):
        db.fetch_vehicles_page.side_effect = [
            VehiclePage(vehicles=[make_vehicle(id="a")], total_count=1, has_more=False),
            VehicleStoreError("connection refused"),
        ]
        store = VehicleStore(db=db)
        await store.load_page()

        with pytest.raises(VehicleStoreError):
            await store.load_page()

        assert store.vehicles == []
        assert store.is_loaded is True

    @pytest.mark.asyncio
    async def test_vehicles_are_copies(self, db, make_vehicle):
        db.fetch_all_vehicles.return_value = [make_vehicle(id="a", notes="original")]
        store = VehicleStore(db=db)
        await store.refresh()

        store.vehicles[0].notes = "changed"

        assert store.vehicles[0].notes == "original"

    @pytest.mark.asyncio
    async def test_update_status_refreshes(self, db, make_vehicle):
        db.fetch_all_vehicles.return_value = [make_vehicle(id="a", status="sold")]
        store = VehicleStore(db=db)

        updated = await store.update_status("a", VehicleStatus.SOLD)

        assert updated is True
        db.update_vehicle_status.assert_called_once_with("a", VehicleStatus.SOLD, None)
        assert store.vehicles[0].status == VehicleStatus.SOLD

    @pytest.mark.asyncio
    async def test_concurrent_update_is_skipped(self, db):
        """A second update for the same vehicle while one runs is skipped."""
        store = VehicleStore(db=db)

        results = await asyncio.gather(
            store.update_status("a", VehicleStatus.SA_RECYCLING),
            store.update_status("a", VehicleStatus.YARD),
        )

        assert results == [True, False]
        assert db.update_vehicle_status.call_count == 1

    @pytest.mark.asyncio
    async def test_failed_update_releases_guard(self, db):
        db.update_vehicle_status.side_effect = [VehicleStoreError("denied"), None]
        store = VehicleStore(db=db)

        with pytest.raises(VehicleStoreError):
            await store.update_status("a", VehicleStatus.YARD)

        assert await store.update_status("a", VehicleStatus.YARD) is True
