"""City → state/country normalization for Indian hospital locations.

Both the metro-area override and the city → state inference table are data:
extend the tables, not the functions.
"""
from typing import Any, Dict, Optional

METRO_REGION = "Delhi NCR"
METRO_COUNTRY = "India"
DEFAULT_COUNTRY = "India"
UNKNOWN_CITY = "Unknown City"
UNKNOWN_STATE = "Unknown State"
UNKNOWN_COUNTRY = "Unknown Country"

# A city name containing any of these collapses to the metro region.
METRO_CITY_TOKENS = ("delhi", "gurugram", "gurgaon", "noida", "faridabad", "ghaziabad")

# A state name containing any of these collapses to the metro region.
METRO_STATE_TOKENS = ("delhi", "ncr")

# (state tokens, city tokens): both sides must match.
METRO_STATE_CITY_PATTERNS = (
    (("haryana",), ("gurugram", "gurgaon", "faridabad")),
    (("uttar pradesh", "up"), ("noida", "ghaziabad", "greater noida")),
)

# Ordered (state, city names). Within each state the longer names come first so
# "navi mumbai" wins over "mumbai" and "greater noida" over "noida".
CITY_STATE_TABLE = (
    ("Delhi NCR", ("greater noida", "new delhi", "ghaziabad", "faridabad", "gurugram", "gurgaon", "delhi", "noida")),
    ("Maharashtra", ("navi mumbai", "aurangabad", "amaravati", "kolhapur", "solapur", "mumbai", "nashik", "nagpur", "akola", "thane", "pune")),
    ("Tamil Nadu", ("tiruchirappalli", "coimbatore", "chennai", "madurai", "vellore", "trichy", "salem")),
    ("Karnataka", ("bengaluru", "bangalore", "mangalore", "belgaum", "mysore", "hubli")),
    ("Telangana/Andhra Pradesh", ("visakhapatnam", "secunderabad", "vijayawada", "hyderabad", "warangal", "vizag")),
    ("West Bengal", ("durgapur", "siliguri", "asansol", "kolkata", "howrah")),
    ("Gujarat", ("gandhinagar", "ahmedabad", "bhavnagar", "jamnagar", "vadodara", "navsari", "bharuch", "rajkot", "surat")),
    ("Rajasthan", ("jodhpur", "udaipur", "bikaner", "jaipur", "ajmer", "kota")),
    ("Kerala", ("thiruvananthapuram", "kozhikode", "kochi")),
    ("Uttar Pradesh", ("prayagraj", "varanasi", "lucknow", "kanpur", "agra")),
    ("Chandigarh", ("chandigarh", "panchkula")),
    ("Odisha", ("bhubaneswar", "cuttack")),
    ("Madhya Pradesh", ("gwalior", "indore", "bhopal")),
    ("Bihar", ("muzaffarpur", "patna", "gaya")),
    ("Uttarakhand", ("dehradun", "haridwar", "roorkee")),
    ("Himachal Pradesh", ("shimla", "manali")),
    ("Jammu and Kashmir", ("srinagar", "jammu")),
    ("Assam", ("guwahati",)),
    ("Meghalaya", ("shillong",)),
    ("Nagaland", ("dimapur",)),
    ("Manipur", ("imphal",)),
    ("Mizoram", ("aizawl",)),
    ("Tripura", ("agartala",)),
    ("Goa", ("vasco da gama", "panaji", "margao")),
    ("Punjab", ("jalandhar", "amritsar", "ludhiana")),
    ("Jharkhand", ("jamshedpur", "dhanbad", "ranchi")),
)


def _clean(value: Optional[str]) -> str:
    return (value or "").strip()


def _contains_any(text: str, tokens) -> bool:
    return any(token in text for token in tokens)


def is_metro_area(city_name: Optional[str], state: Optional[str]) -> bool:
    city = _clean(city_name).lower()
    state_name = _clean(state).lower()

    if city and _contains_any(city, METRO_CITY_TOKENS):
        return True
    if state_name and _contains_any(state_name, METRO_STATE_TOKENS):
        return True
    for state_tokens, city_tokens in METRO_STATE_CITY_PATTERNS:
        if state_name and city and _contains_any(state_name, state_tokens) and _contains_any(city, city_tokens):
            return True
    return False


def infer_state_from_city(city_name: Optional[str]) -> str:
    """Best-effort state for a city name, ``Unknown State`` when none matches."""
    city = _clean(city_name).lower()
    if not city:
        return UNKNOWN_STATE
    for state, cities in CITY_STATE_TABLE:
        for candidate in cities:
            if candidate in city:
                return state
    return UNKNOWN_STATE


def normalize_city(city: Dict[str, Any]) -> Dict[str, Any]:
    """Return a copy of ``city`` with a canonical ``name``/``state``/``country``.

    Accepts ``name`` or ``city_name`` for the city.
    """
    name = _clean(city.get("name") or city.get("city_name")) or UNKNOWN_CITY
    state = _clean(city.get("state"))
    country = _clean(city.get("country"))

    normalized = {**city, "name": name}
    if is_metro_area(name, state):
        normalized["state"] = METRO_REGION
        normalized["country"] = METRO_COUNTRY
        return normalized

    normalized["state"] = state or UNKNOWN_STATE
    if country:
        normalized["country"] = country
    elif state and state != UNKNOWN_STATE:
        normalized["country"] = DEFAULT_COUNTRY
    else:
        normalized["country"] = UNKNOWN_COUNTRY
    return normalized
