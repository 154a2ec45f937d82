import streamlit as st
import pandas as pd
import requests
from typing import List, Optional

from garage_booking.core.config import settings

BOOKINGS_URL = f"{settings.API_BASE_URL.rstrip('/')}{settings.API_PREFIX}/bookings"

COLUMNS = {
    "id": "ID",
    "full_name": "Full Name",
    "phone": "Phone",
    "email": "Email",
    "car_make": "Car Make",
    "car_model": "Car Model",
    "year_manufacture": "Year",
    "preferred_date": "Date",
    "time_slot": "Time Slot",
    "services_needed": "Services",
    "pickup_service": "Pickup",
    "issue_description": "Message",
    "created_at": "Booking Time",
}

def fetch_bookings(url: str = BOOKINGS_URL, timeout: float = 10) -> List[dict]:
    """Full booking list from the API, newest first."""
    response = requests.get(url, timeout=timeout)
    response.raise_for_status()
    return response.json()

def bookings_frame(bookings: List[dict]) -> pd.DataFrame:
    df = pd.DataFrame(bookings, columns=list(COLUMNS))
    if not df.empty:
        df["created_at"] = pd.to_datetime(df["created_at"])
    return df

def full_slots(df: pd.DataFrame, capacity: int = settings.SLOT_CAPACITY) -> int:
    """Number of (date, time slot) pairs that have reached capacity."""
    dated = df.dropna(subset=["preferred_date"])
    if dated.empty:
        return 0
    per_slot = dated.groupby(["preferred_date", "time_slot"]).size()
    return int((per_slot >= capacity).sum())

def render_bookings(df: Optional[pd.DataFrame]):
    if df is None:
        return

    if df.empty:
        st.info("No bookings have been made yet.")
        return

    col1, col2, col3 = st.columns(3)
    col1.metric("Total bookings", len(df))
    col2.metric("Pickups requested", int(df["pickup_service"].sum()))
    col3.metric("Full slots", full_slots(df))

    st.dataframe(
        df,
        use_container_width=True,
        hide_index=True,
        column_config={
            **COLUMNS,
            "created_at": st.column_config.DatetimeColumn("Booking Time", format="D.M.YYYY HH:mm"),
            "pickup_service": st.column_config.CheckboxColumn("Pickup"),
        }
    )

@st.fragment(run_every=settings.ADMIN_REFRESH_SECONDS)
def live_bookings():
    # Each run replaces the whole table, nothing is diffed
    try:
        df = bookings_frame(fetch_bookings())
    except requests.RequestException as e:
        st.error(f"Failed to fetch booking data: {e}")
        df = None
    render_bookings(df)
    st.caption(f"Refreshing every {settings.ADMIN_REFRESH_SECONDS} s")

def main():
    st.set_page_config(
        page_title="Garage Admin",
        page_icon="🔧",
        layout="wide"
    )
    st.title("All Service Bookings")
    live_bookings()

    st.markdown("---")
    st.caption(f"{settings.PROJECT_NAME} • Admin Panel")

if __name__ == "__main__":
    main()
