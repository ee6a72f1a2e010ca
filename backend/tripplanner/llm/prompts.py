ITINERARY_SYSTEM_PROMPT = (
    "You are an expert, concise travel planner. Respond with clean, readable "
    "bullet points and short paragraphs."
)

ITINERARY_SECTIONS = [
    "Overview",
    "Daily Schedule (per day bullets)",
    "Restaurants",
    "Transportation",
    "Tips",
    "Estimated Costs (per-day breakdown + total)",
    "Packing List (bullet list)",
    "Map Recommendations (top 5 points of interest with short description)",
]

ITINERARY_PROMPT_TEMPLATE = """Create a detailed travel itinerary for:
Destination: {destination}
Budget: {budget}
Dates: {start_date} to {end_date}
Traveler Type: {traveler_type}

Return sections with headings exactly like this:
{sections}

Keep it concise but specific; avoid long paragraphs."""


def build_itinerary_prompt(
    destination: str, budget: str, start_date: str, end_date: str, traveler_type: str
) -> str:
    sections = "\n".join(
        f"{index}) {title}" for index, title in enumerate(ITINERARY_SECTIONS, start=1)
    )
    return ITINERARY_PROMPT_TEMPLATE.format(
        destination=destination,
        budget=budget,
        start_date=start_date,
        end_date=end_date,
        traveler_type=traveler_type,
        sections=sections,
    )
