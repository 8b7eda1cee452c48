"""Pytest configuration and fixtures for junkcar tests."""

import json
from pathlib import Path
from tempfile import TemporaryDirectory
from unittest.mock import MagicMock

import pytest

from junkcar.models.vehicle import Vehicle


@pytest.fixture
def temp_dir():
    """Create a temporary directory for test files."""
    with TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def make_vehicle():
    """Factory fixture for creating vehicles with sensible defaults."""
    counter = {"n": 0}

    def _create(**overrides) -> Vehicle:
        counter["n"] += 1
        data = {
            "id": f"veh-{counter['n']}",
            "year": "2004",
            "make": "Honda",
            "model": "Civic",
            "vehicle_id": f"VIN{counter['n']:04d}",
            "status": "yard",
            "title_present": True,
            "created_at": "2024-03-15T10:00:00",
        }
        data.update(overrides)
        return Vehicle.model_validate(data)

    return _create


@pytest.fixture
def sample_vehicles(make_vehicle):
    """Small mixed inventory covering every status and paperwork case."""
    return [
        make_vehicle(
            id="civic",
            make="Honda",
            model="Civic",
            license_plate="7ABC123",
            status="sold",
            sale_price="1000",
            purchase_price="400",
            purchase_date="2024-03-01",
            sale_date="2024-03-11",
            buyer_first_name="Maria",
            buyer_last_name="Lopez",
            car_images=["https://img.example.com/civic-1.jpg"],
            created_at="2024-03-01T09:00:00",
        ),
        make_vehicle(
            id="accord",
            make="Honda",
            model="Accord",
            year="2009",
            status="yard",
            title_present=False,
            paperwork="registration",
            purchase_price="650",
            seller_name="Dale Carter",
            created_at="2024-03-10T15:30:00",
        ),
        make_vehicle(
            id="f150",
            make="Ford",
            model="F-150",
            year="1998",
            status="pick-your-part",
            paperwork="title",
            purchase_price="250",
            documents=[{"id": "d1", "name": "title.pdf", "url": "https://files.example.com/title.pdf"}],
            created_at="2024-03-20T08:00:00",
        ),
        make_vehicle(
            id="camry",
            make="Toyota",
            model="Camry",
            year="2012",
            status="sa-recycling",
            title_present=False,
            paperwork="title",
            created_at="2024-04-02T12:00:00",
        ),
    ]


@pytest.fixture
def vehicles_file(temp_dir, sample_vehicles):
    """JSON export of the sample inventory in the camelCase layout."""
    path = temp_dir / "vehicles.json"
    path.write_text(
        json.dumps([v.model_dump(mode="json", by_alias=True) for v in sample_vehicles])
    )
    return path


@pytest.fixture
def mock_settings(temp_dir):
    """Mock settings for testing without requiring environment variables."""
    settings = MagicMock()
    settings.supabase_url = "https://example.supabase.co"
    settings.supabase_key = "test-key"
    settings.supabase_enabled = True
    settings.vehicles_table = "vehicles"
    settings.vehicles_page_size = 2
    settings.search_result_limit = 1000
    settings.data_dir = temp_dir
    settings.saved_searches_file = temp_dir / "saved-searches.json"
    settings.log_level = "INFO"
    return settings
