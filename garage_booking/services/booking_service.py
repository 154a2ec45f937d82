import re
import sqlite3
from datetime import datetime
from typing import List, Mapping, Optional, Sequence, Tuple, Union

from garage_booking.core.config import settings
from garage_booking.core.errors import CapacityConflict, StorageError, ValidationFailed
from garage_booking.core.logger import logger
from garage_booking.models.booking import Booking, BookingSubmission
from garage_booking.services.db_service import count_slot, fetch_bookings, insert_booking, transaction

FormValue = Union[str, Sequence[str], None]

SERVICES_SEPARATOR = ", "

# Bounds of an SQLite INTEGER column
SQLITE_INT_MIN = -2 ** 63
SQLITE_INT_MAX = 2 ** 63 - 1

# Same shape PHP's is_numeric() accepts: "2015", "+2015", "2015.0", "2e3"
NUMERIC_RE = re.compile(r"^[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?$")

REQUIRED_FIELDS = (
    ("fullName", "Full Name is required"),
    ("phone", "Phone number is required"),
    ("carMake", "Car make is required"),
    ("carModel", "Car model is required"),
    ("timeSlot", "Time slot is required"),
    ("servicesNeeded", "At least one service must be selected"),
)


def _clean(value: FormValue) -> Union[str, List[str], None]:
    if value is None:
        return None
    if isinstance(value, str):
        return value.strip()
    return [item.strip() for item in value if item and item.strip()]


def _optional(value: Union[str, List[str], None]) -> Optional[str]:
    if isinstance(value, list):
        value = SERVICES_SEPARATOR.join(value)
    return value or None


def parse_year(value: Optional[str]) -> Optional[int]:
    """A numeric-looking year becomes an int, anything else is dropped."""
    if not value or not NUMERIC_RE.match(value):
        return None
    try:
        year = int(float(value))
    except OverflowError:
        return None
    if not SQLITE_INT_MIN <= year <= SQLITE_INT_MAX:
        return None
    return year


def parse_pickup(value: Optional[str]) -> bool:
    return value == "yes"


def join_services(value: Union[str, List[str]]) -> str:
    if isinstance(value, list):
        return SERVICES_SEPARATOR.join(value)
    return value


def normalize_submission(form: Mapping[str, FormValue]) -> Tuple[Optional[BookingSubmission], List[str]]:
    """
    Turns raw form fields into a BookingSubmission.
    Every check runs, so the returned error list names all failing fields.
    Returns: (submission, []) on success or (None, errors).
    """
    fields = {key: _clean(form.get(key)) for key in (
        "fullName", "phone", "email", "carMake", "carModel", "yearManufacture",
        "preferredDate", "timeSlot", "servicesNeeded", "issueDescription", "pickupService",
    )}

    errors = [message for key, message in REQUIRED_FIELDS if not fields[key]]

    preferred_date = None
    raw_date = _optional(fields["preferredDate"])
    if raw_date:
        try:
            preferred_date = datetime.strptime(raw_date, "%Y-%m-%d").date()
        except ValueError:
            errors.append("Preferred date must be a valid date (YYYY-MM-DD)")

    if errors:
        return None, errors

    submission = BookingSubmission(
        full_name=_optional(fields["fullName"]),
        phone=_optional(fields["phone"]),
        email=_optional(fields["email"]),
        car_make=_optional(fields["carMake"]),
        car_model=_optional(fields["carModel"]),
        year_manufacture=parse_year(_optional(fields["yearManufacture"])),
        preferred_date=preferred_date,
        time_slot=_optional(fields["timeSlot"]),
        services_needed=join_services(fields["servicesNeeded"]),
        issue_description=_optional(fields["issueDescription"]),
        pickup_service=parse_pickup(_optional(fields["pickupService"])),
    )
    return submission, []


class BookingService:
    def __init__(self, conn: sqlite3.Connection, capacity: Optional[int] = None):
        self.conn = conn
        self.capacity = capacity if capacity is not None else settings.SLOT_CAPACITY

    def submit_form(self, form: Mapping[str, FormValue]) -> int:
        submission, errors = normalize_submission(form)
        if errors:
            logger.info(f"📝 Booking rejected, {len(errors)} invalid field(s): {errors}")
            raise ValidationFailed(errors)
        return self.submit(submission)

    def submit(self, submission: BookingSubmission) -> int:
        """
        Stores a validated booking and returns its new id.

        The slot count and the insert share one immediate transaction, so
        concurrent submissions for the same slot are serialized and the
        capacity can never be exceeded. Bookings without a preferred date
        belong to no slot and are not counted.
        """
        logger.info(f"📥 Booking request: {submission.full_name}, {submission.preferred_date} {submission.time_slot}")
        try:
            with transaction(self.conn):
                if submission.preferred_date is not None:
                    taken = count_slot(self.conn, submission.preferred_date, submission.time_slot)
                    if taken >= self.capacity:
                        logger.info(f"⛔ Slot {submission.preferred_date} {submission.time_slot} is full ({taken}/{self.capacity})")
                        raise CapacityConflict(submission.preferred_date, submission.time_slot)
                booking_id = insert_booking(self.conn, submission)
        except sqlite3.Error as e:
            logger.opt(exception=e).error(f"❌ DB Error (submit): {e}")
            raise StorageError() from e

        logger.info(f"✅ Booking {booking_id} saved")
        return booking_id

    def list_bookings(self) -> List[Booking]:
        try:
            rows = fetch_bookings(self.conn)
        except sqlite3.Error as e:
            logger.opt(exception=e).error(f"❌ DB Error (list_bookings): {e}")
            raise StorageError("Could not load bookings.") from e
        return [Booking(**row) for row in rows]
