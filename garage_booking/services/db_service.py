"""
SQLite storage for service bookings.

`Database` hands out one short-lived connection per unit of work through
``connection()``; nothing is kept open between requests.  The schema is
created once by ``init_schema()`` when the application starts.

Connections run in autocommit mode so that writes which must be atomic can
open an explicit ``BEGIN IMMEDIATE`` transaction via ``transaction()``.  An
immediate transaction takes SQLite's write lock up front, so a second writer
waits (up to ``timeout`` seconds) until the first one commits.
"""

import sqlite3
from contextlib import contextmanager
from datetime import date
from pathlib import Path
from typing import Iterator, List

from garage_booking.core.logger import logger
from garage_booking.models.booking import BookingSubmission

TABLE = "service_bookings"

SCHEMA = f"""
CREATE TABLE IF NOT EXISTS {TABLE} (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    full_name TEXT NOT NULL,
    phone TEXT NOT NULL,
    email TEXT DEFAULT NULL,
    car_make TEXT NOT NULL,
    car_model TEXT NOT NULL,
    year_manufacture INTEGER DEFAULT NULL,
    preferred_date DATE DEFAULT NULL,
    time_slot TEXT NOT NULL,
    services_needed TEXT NOT NULL,
    issue_description TEXT,
    pickup_service INTEGER NOT NULL DEFAULT 0,
    created_at TIMESTAMP NOT NULL DEFAULT (strftime('%Y-%m-%d %H:%M:%f', 'now'))
);

CREATE INDEX IF NOT EXISTS idx_{TABLE}_slot ON {TABLE}(preferred_date, time_slot);
"""


class Database:
    def __init__(self, path: str, timeout: float = 5.0):
        self.path = str(path)
        self.timeout = timeout

    def connect(self) -> sqlite3.Connection:
        # FastAPI may open the handle in one worker thread and use it in another
        conn = sqlite3.connect(
            self.path,
            timeout=self.timeout,
            isolation_level=None,
            check_same_thread=False,
        )
        conn.row_factory = sqlite3.Row
        return conn

    @contextmanager
    def connection(self) -> Iterator[sqlite3.Connection]:
        conn = self.connect()
        try:
            yield conn
        finally:
            conn.close()

    def init_schema(self) -> None:
        """Create the bookings table and slot index if they are missing."""
        Path(self.path).parent.mkdir(parents=True, exist_ok=True)
        with self.connection() as conn:
            conn.executescript(SCHEMA)
        logger.info(f"✅ Schema ready in {self.path}")


@contextmanager
def transaction(conn: sqlite3.Connection) -> Iterator[sqlite3.Connection]:
    conn.execute("BEGIN IMMEDIATE")
    try:
        yield conn
    except BaseException:
        conn.rollback()
        raise
    else:
        conn.commit()


def count_slot(conn: sqlite3.Connection, preferred_date: date, time_slot: str) -> int:
    row = conn.execute(
        f"SELECT COUNT(*) AS total FROM {TABLE} WHERE preferred_date = ? AND time_slot = ?",
        (preferred_date.isoformat(), time_slot),
    ).fetchone()
    return row["total"]


def insert_booking(conn: sqlite3.Connection, booking: BookingSubmission) -> int:
    cursor = conn.execute(
        f"""
        INSERT INTO {TABLE}
            (full_name, phone, email, car_make, car_model, year_manufacture,
             preferred_date, time_slot, services_needed, issue_description, pickup_service)
        VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
        """,
        (
            booking.full_name,
            booking.phone,
            booking.email,
            booking.car_make,
            booking.car_model,
            booking.year_manufacture,
            booking.preferred_date.isoformat() if booking.preferred_date else None,
            booking.time_slot,
            booking.services_needed,
            booking.issue_description,
            int(booking.pickup_service),
        ),
    )
    return cursor.lastrowid


def fetch_bookings(conn: sqlite3.Connection) -> List[dict]:
    """All bookings, newest first. `id` breaks ties between equal timestamps."""
    rows = conn.execute(f"SELECT * FROM {TABLE} ORDER BY created_at DESC, id DESC").fetchall()
    return [dict(row) for row in rows]
