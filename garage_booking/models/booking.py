from typing import Optional, List
from datetime import date, datetime
from pydantic import BaseModel, Field

class BookingSubmission(BaseModel):
    """Normalized intake payload, ready to be written to `service_bookings`."""
    full_name: str
    phone: str
    email: Optional[str] = None
    car_make: str
    car_model: str
    year_manufacture: Optional[int] = None
    preferred_date: Optional[date] = None
    time_slot: str
    services_needed: str
    issue_description: Optional[str] = None
    pickup_service: bool = False

class Booking(BaseModel):
    id: int
    full_name: str
    phone: str
    email: Optional[str] = None
    car_make: str
    car_model: str
    year_manufacture: Optional[int] = None
    preferred_date: Optional[date] = None
    time_slot: str
    services_needed: str
    issue_description: Optional[str] = None
    pickup_service: bool = False
    created_at: datetime

class BookingResult(BaseModel):
    success: bool
    message: str
    booking_id: Optional[int] = Field(default=None)
    errors: Optional[List[str]] = Field(default=None)
