import os
from datetime import date, timedelta

import streamlit as st

from tripplanner.client.api import ApiClient
from tripplanner.client.cache import SnapshotCache
from tripplanner.client.formatting import format_date_range, map_search_url
from tripplanner.client.http_store import HttpTripStore
from tripplanner.client.itinerary_client import ItineraryClient
from tripplanner.client.session import AuthSession
from tripplanner.client.trip_sync import TripSync
from tripplanner.core.errors import NotFound, TripPlannerError
from tripplanner.models.domain import ItineraryRequest, TravelerType, TripPayload

BACKEND_URL = os.getenv("BACKEND_URL", "http://localhost:8000")
TRIPS_CACHE_DIR = os.getenv("TRIPS_CACHE_DIR", ".cache/trips")


def get_clients() -> dict:
    if "clients" not in st.session_state:
        api = ApiClient(BACKEND_URL)
        store = HttpTripStore(api)
        sync = TripSync(store=store, cache=SnapshotCache(TRIPS_CACHE_DIR))
        auth = AuthSession(api)
        auth.on_auth_state_changed(lambda user: sync.set_user(user.user_id if user else None))
        st.session_state["clients"] = {
            "api": api,
            "store": store,
            "sync": sync,
            "auth": auth,
            "itinerary": ItineraryClient(api),
        }
    return st.session_state["clients"]


def show_error(exc: Exception) -> None:
    message = exc.message if isinstance(exc, TripPlannerError) else str(exc)
    st.session_state["error"] = message


def clear_error() -> None:
    st.session_state.pop("error", None)


def landing(auth: AuthSession) -> None:
    st.title("AI Travel Planner")
    mode = st.radio("Mode", ["Log in", "Sign up"], horizontal=True, label_visibility="collapsed")
    with st.form("auth_form"):
        email = st.text_input("Email")
        password = st.text_input("Password", type="password")
        submitted = st.form_submit_button(mode)
    if submitted:
        try:
            if mode == "Log in":
                auth.sign_in(email, password)
            else:
                auth.sign_up(email, password)
            clear_error()
            st.rerun()
        except TripPlannerError as exc:
            show_error(exc)


def generation_form(clients: dict) -> None:
    with st.sidebar.form("itinerary_form"):
        st.subheader("Plan a trip")
        title = st.text_input("Title (optional)")
        destination = st.text_input("Destination", placeholder="Lisbon")
        budget = st.text_input("Budget", placeholder="$1500")
        start_date = st.date_input("Start date", value=date.today() + timedelta(days=30))
        end_date = st.date_input("End date", value=date.today() + timedelta(days=34))
        traveler_type = st.selectbox(
            "Traveler type", options=[t.value for t in TravelerType], index=0
        )
        submitted = st.form_submit_button("Generate itinerary")

    form = {
        "title": title,
        "destination": destination,
        "budget": budget,
        "start_date": start_date.isoformat() if isinstance(start_date, date) else "",
        "end_date": end_date.isoformat() if isinstance(end_date, date) else "",
        "traveler_type": TravelerType.coerce(traveler_type).value,
    }
    if submitted:
        try:
            request = ItineraryRequest(
                destination=form["destination"],
                budget=form["budget"],
                start_date=form["start_date"],
                end_date=form["end_date"],
                traveler_type=form["traveler_type"],
            )
            st.session_state["itinerary"] = clients["itinerary"].generate(request)
            st.session_state["form"] = form
            clear_error()
        except TripPlannerError as exc:
            show_error(exc)


def itinerary_preview(sync: TripSync) -> None:
    itinerary = st.session_state.get("itinerary")
    if not itinerary:
        return
    st.subheader("Itinerary preview")
    st.markdown(itinerary)
    if st.button("Save trip"):
        form = st.session_state.get("form", {})
        try:
            sync.save_trip(
                TripPayload.from_form(
                    title=form.get("title", ""),
                    destination=form.get("destination", ""),
                    budget=form.get("budget", ""),
                    start_date=form.get("start_date", ""),
                    end_date=form.get("end_date", ""),
                    traveler_type=form.get("traveler_type"),
                    itinerary=itinerary,
                )
            )
            clear_error()
            st.toast("Trip saved to your library.")
        except TripPlannerError as exc:
            show_error(exc)


def trip_list(sync: TripSync) -> None:
    st.subheader("Saved trips")
    cols = st.columns([3, 1])
    query = cols[0].text_input("Search trips", value=sync.filter.query)
    favorites_only = cols[1].toggle("Favorites only", value=sync.filter.favorites_only)
    sync.set_filter(query=query, favorites_only=favorites_only)

    if sync.loading:
        st.caption("Loading trips...")
    if sync.error:
        st.warning(sync.error)
    if not sync.trips:
        st.caption("No trips yet.")

    for trip in sync.trips:
        with st.expander(f"{'★ ' if trip.favorite else ''}{trip.title}"):
            dates = format_date_range(trip.start_date, trip.end_date)
            st.caption(f"{trip.destination} • {trip.traveler_type.value} • {dates}")
            new_title = st.text_input("Title", value=trip.title, key=f"title-{trip.id}")
            actions = st.columns(4)
            try:
                if actions[0].button("Rename", key=f"rename-{trip.id}"):
                    sync.update_trip_title(trip.id, new_title or f"{trip.destination} itinerary")
                    st.toast("Title updated")
                label = "Unfavorite" if trip.favorite else "Favorite"
                if actions[1].button(label, key=f"fav-{trip.id}"):
                    sync.toggle_favorite(trip.id, not trip.favorite)
                if actions[2].button("Open", key=f"open-{trip.id}"):
                    st.session_state["open_trip"] = trip.id
                if actions[3].button("Delete", key=f"delete-{trip.id}"):
                    sync.delete_trip(trip.id)
                    st.toast("Trip deleted")
            except TripPlannerError as exc:
                show_error(exc)


def trip_detail(clients: dict, trip_id: str) -> None:
    sync: TripSync = clients["sync"]
    if st.button("← Back to dashboard"):
        st.session_state.pop("open_trip", None)
        st.rerun()
    try:
        trip = sync.get_trip(trip_id)
    except NotFound:
        st.info("Trip not found.")
        return
    except TripPlannerError as exc:
        st.error(exc.message)
        return

    st.header(trip.title)
    dates = format_date_range(trip.start_date, trip.end_date)
    st.caption(f"{trip.destination} • {trip.traveler_type.value} traveler • {dates}")
    cols = st.columns(3)
    cols[0].metric("Date range", dates)
    cols[1].metric("Budget", trip.budget)
    cols[2].metric("Traveler type", trip.traveler_type.value.title())
    if trip.cost_breakdown:
        st.markdown(f"**Cost breakdown:** {trip.cost_breakdown}")
    st.link_button("View on Map", map_search_url(trip.destination))

    if st.button("Regenerate itinerary"):
        try:
            itinerary = clients["itinerary"].generate(
                ItineraryRequest(
                    destination=trip.destination,
                    budget=trip.budget,
                    start_date=trip.start_date,
                    end_date=trip.end_date,
                    traveler_type=trip.traveler_type.value,
                )
            )
            sync.update_itinerary(trip.id, itinerary)
            clear_error()
            st.toast("Itinerary regenerated")
            st.rerun()
        except TripPlannerError as exc:
            show_error(exc)
    st.markdown(trip.itinerary)


st.set_page_config(page_title="AI Travel Planner", layout="wide")
clients = get_clients()
auth: AuthSession = clients["auth"]

if not auth.signed_in:
    landing(auth)
else:
    clients["store"].poll()
    st.sidebar.caption(f"Signed in as {auth.user.email}")
    if st.sidebar.button("Sign out"):
        auth.sign_out()
        st.session_state.pop("itinerary", None)
        st.rerun()
    open_trip = st.session_state.get("open_trip")
    if open_trip:
        trip_detail(clients, open_trip)
    else:
        st.title("Your trips")
        generation_form(clients)
        itinerary_preview(clients["sync"])
        trip_list(clients["sync"])

if st.session_state.get("error"):
    st.error(st.session_state["error"])
