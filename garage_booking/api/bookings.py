import sqlite3
from typing import Iterator, List

from fastapi import APIRouter, Depends, Request, Response
from starlette.concurrency import run_in_threadpool

from garage_booking.models.booking import Booking, BookingResult
from garage_booking.services.booking_service import BookingService

router = APIRouter()

FORM_FIELDS = (
    "fullName", "phone", "email", "carMake", "carModel", "yearManufacture",
    "preferredDate", "timeSlot", "issueDescription", "pickupService",
)

def get_connection(request: Request) -> Iterator[sqlite3.Connection]:
    """One connection per request, closed once the response is sent."""
    with request.app.state.database.connection() as conn:
        yield conn

@router.post("/submit-booking", response_model=BookingResult, response_model_exclude_none=True)
async def submit_booking(request: Request, conn: sqlite3.Connection = Depends(get_connection)):
    form = await request.form()

    payload = {}
    for key in FORM_FIELDS:
        value = form.get(key)
        payload[key] = value if isinstance(value, str) else None
    # Checkboxes arrive as repeated keys, the public form sends one joined string
    payload["servicesNeeded"] = [value for value in form.getlist("servicesNeeded") if isinstance(value, str)]

    service = BookingService(conn)
    booking_id = await run_in_threadpool(service.submit_form, payload)

    return BookingResult(success=True, message="Booking submitted successfully!", booking_id=booking_id)

@router.get("/bookings", response_model=List[Booking])
def list_bookings(response: Response, conn: sqlite3.Connection = Depends(get_connection)):
    response.headers["Cache-Control"] = "no-cache, must-revalidate"
    return BookingService(conn).list_bookings()
