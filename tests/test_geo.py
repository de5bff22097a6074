import pytest

from hospital_directory.services.geo import infer_state_from_city, normalize_city


def test_gurugram_in_haryana_collapses_to_delhi_ncr():
    city = normalize_city({"name": "Gurugram", "state": "Haryana"})
    assert city["name"] == "Gurugram"
    assert city["state"] == "Delhi NCR"
    assert city["country"] == "India"


@pytest.mark.parametrize("name,state", [
    ("New Delhi", "Delhi"),
    ("Noida", "Uttar Pradesh"),
    ("Faridabad", None),
    ("Ghaziabad", "Unknown State"),
    ("Sector 18", "NCR"),
])
def test_metro_area_tokens_win_over_source_state(name, state):
    city = normalize_city({"name": name, "state": state, "country": "Nepal"})
    assert (city["state"], city["country"]) == ("Delhi NCR", "India")


def test_city_name_alias_is_accepted():
    assert normalize_city({"city_name": "Pune", "state": "Maharashtra"})["name"] == "Pune"


def test_known_state_defaults_country_to_india():
    city = normalize_city({"name": "Pune", "state": "Maharashtra"})
    assert (city["state"], city["country"]) == ("Maharashtra", "India")


def test_missing_state_and_country_get_unknown_fallbacks():
    city = normalize_city({"name": "Atlantis"})
    assert (city["state"], city["country"]) == ("Unknown State", "Unknown Country")


def test_existing_country_is_kept():
    assert normalize_city({"name": "Dhaka", "state": "Dhaka", "country": "Bangladesh"})["country"] == "Bangladesh"


def test_missing_name_falls_back():
    assert normalize_city({})["name"] == "Unknown City"


def test_infer_state_checks_longer_names_first():
    assert infer_state_from_city("Navi Mumbai") == "Maharashtra"
    assert infer_state_from_city("Greater Noida West") == "Delhi NCR"
    assert infer_state_from_city("Bengaluru") == "Karnataka"


def test_infer_state_unknown():
    assert infer_state_from_city("Atlantis") == "Unknown State"
    assert infer_state_from_city(None) == "Unknown State"
