import pytest
from fastapi.testclient import TestClient

from garage_booking.main import create_app
from garage_booking.services.db_service import Database

JANE_DOE = {
    "fullName": "Jane Doe",
    "phone": "555-0100",
    "carMake": "Toyota",
    "carModel": "Corolla",
    "timeSlot": "9-10am",
    "preferredDate": "2025-06-01",
    "servicesNeeded": ["Oil Change"],
}

@pytest.fixture
def jane():
    return dict(JANE_DOE)

@pytest.fixture
def database(tmp_path):
    db = Database(tmp_path / "bookings.db")
    db.init_schema()
    return db

@pytest.fixture
def conn(database):
    with database.connection() as conn:
        yield conn

@pytest.fixture
def client(database):
    # Context manager runs the lifespan, i.e. the startup schema bootstrap
    with TestClient(create_app(database)) as client:
        yield client

@pytest.fixture
def row_count(database):
    def _count():
        with database.connection() as conn:
            return conn.execute("SELECT COUNT(*) FROM service_bookings").fetchone()[0]
    return _count
