from unittest.mock import MagicMock, patch

import admin

BOOKINGS = [
    {
        "id": 3, "full_name": "Carl", "phone": "555-0003", "email": None,
        "car_make": "BMW", "car_model": "320d", "year_manufacture": 2018,
        "preferred_date": "2025-06-01", "time_slot": "9-10am",
        "services_needed": "Oil Change", "issue_description": None,
        "pickup_service": True, "created_at": "2025-05-20T10:00:02",
    },
    {
        "id": 2, "full_name": "Ben", "phone": "555-0002", "email": "ben@example.com",
        "car_make": "Audi", "car_model": "A4", "year_manufacture": None,
        "preferred_date": "2025-06-01", "time_slot": "9-10am",
        "services_needed": "Brake Inspection", "issue_description": "Squeaks",
        "pickup_service": False, "created_at": "2025-05-20T10:00:01",
    },
    {
        "id": 1, "full_name": "Anna", "phone": "555-0001", "email": None,
        "car_make": "Toyota", "car_model": "Corolla", "year_manufacture": 2010,
        "preferred_date": None, "time_slot": "2-3pm",
        "services_needed": "Oil Change, Tyre Swap", "issue_description": None,
        "pickup_service": False, "created_at": "2025-05-20T10:00:00",
    },
]

@patch("admin.requests.get")
def test_fetch_bookings(mock_get):
    mock_response = MagicMock()
    mock_response.json.return_value = BOOKINGS
    mock_get.return_value = mock_response

    assert admin.fetch_bookings("http://api.test/api/bookings") == BOOKINGS
    mock_get.assert_called_once_with("http://api.test/api/bookings", timeout=10)
    mock_response.raise_for_status.assert_called_once()

def test_bookings_frame_keeps_order_and_columns():
    df = admin.bookings_frame(BOOKINGS)

    assert list(df.columns) == list(admin.COLUMNS)
    assert list(df["id"]) == [3, 2, 1]
    assert str(df["created_at"].dtype).startswith("datetime64")

def test_bookings_frame_empty():
    df = admin.bookings_frame([])
    assert df.empty
    assert list(df.columns) == list(admin.COLUMNS)

def test_full_slots():
    df = admin.bookings_frame(BOOKINGS)
    assert admin.full_slots(df, capacity=2) == 1
    assert admin.full_slots(df, capacity=3) == 0
    assert admin.full_slots(admin.bookings_frame([])) == 0
