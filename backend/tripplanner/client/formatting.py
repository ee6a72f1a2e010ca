from datetime import date
from urllib.parse import quote

MAPS_SEARCH_URL = "https://www.google.com/maps/search/?api=1&query={query}"


def format_date_range(start_date: str, end_date: str) -> str:
    if not start_date or not end_date:
        return "Flexible dates"
    try:
        start = date.fromisoformat(start_date)
        end = date.fromisoformat(end_date)
    except ValueError:
        return "Flexible dates"
    return f"{start.strftime('%d %b %Y')} → {end.strftime('%d %b %Y')}"


def map_search_url(destination: str) -> str:
    return MAPS_SEARCH_URL.format(query=quote(destination, safe=""))
