from hospital_directory.services.mappers import (
    generate_slug,
    map_accreditation,
    map_branch,
    map_city,
    map_doctor,
    map_hospital,
    map_specialist,
    map_standalone_hospital,
    map_treatment,
)


def test_branch_treatment_only_specialization():
    branch = map_branch({"_id": "b1", "treatment": ["t1"], "specialty": [], "department": []})
    assert branch["specialization"] == [{"id": "t1", "name": "ID Reference (Treatment)", "is_treatment": True}]


def test_branch_specialization_order_and_flags():
    branch = map_branch({
        "_id": "b1",
        "specialty": [{"_id": "s1", "specialty": "Cardiology"}],
        "treatment": [{"_id": "t1", "treatmentName": "Angioplasty"}],
        "department": [{"_id": "d1", "department": "Heart Institute"}],
    })
    names = [entry["name"] for entry in branch["specialization"]]
    assert names == ["Cardiology", "Angioplasty (Treatment)", "Heart Institute (Department)"]
    assert branch["specialization"][2]["is_department"] is True
    assert "is_treatment" not in branch["specialization"][0]


def test_branch_defaults_and_aliases():
    branch = map_branch({"id": "b1", "data": {"Branch Name": "Apollo Pune", "Total Beds": 250, "hospital": "h1"}})
    assert branch["name"] == "Apollo Pune"
    assert branch["slug"] == "apollo-pune"
    assert branch["total_beds"] == "250"
    assert branch["hospital_ids"] == ["h1"]
    assert branch["show_hospital"] is True
    assert map_branch({"id": "b2"})["name"] == "Unknown Branch"


def test_hospital_hidden_flag():
    assert map_hospital({"_id": "h1", "showHospital": "false"})["show_hospital"] is False
    assert map_hospital({"_id": "h1", "hospitalName": "Apollo"})["show_hospital"] is True


def test_standalone_hospital_from_branch():
    hospital = map_standalone_hospital({"_id": "b9", "branchName": "Sunrise Clinic", "branchLogo": "logo.png"})
    assert hospital["id"] == "standalone-b9"
    assert hospital["name"] == "Sunrise Clinic"
    assert hospital["is_standalone"] is True
    assert hospital["original_branch_id"] == "b9"
    assert hospital["logo"] == "logo.png"


def test_doctor_about_rich_text():
    doctor = map_doctor({
        "_id": "d1",
        "doctorName": "Dr. Rao",
        "aboutDoctor": {"nodes": [{"type": "PARAGRAPH", "nodes": [{"text": "Cardiologist"}]}]},
        "specialization": ["s1"],
    })
    assert doctor["about"] == "Cardiologist"
    assert doctor["about_html"] == "<p>Cardiologist</p>"
    assert doctor["specialization"] == [{"id": "s1", "name": "ID Reference"}]


def test_treatment_fields():
    treatment = map_treatment({"_id": "t1", "Treatment Name": "Knee Replacement", "averageCost": "4000", "popular": "true"})
    assert treatment["name"] == "Knee Replacement"
    assert treatment["starting_cost"] == "4000"
    assert treatment["cost"] == "4000"
    assert treatment["popular"] is True


def test_specialist_and_accreditation():
    specialist = map_specialist({"_id": "s1", "title": "Cardiology", "department": ["d1"], "treatment": ["t1"]})
    assert specialist["name"] == "Cardiology"
    assert [r["id"] for r in specialist["department"]] == ["d1"]
    assert map_accreditation({"_id": "a1"})["name"] == "Unknown Accreditation"


def test_city_uses_resolved_state_and_country():
    state_map = {"s1": {"id": "s1", "name": "Maharashtra", "country": [{"id": "c1", "name": "ID Reference"}]}}
    country_map = {"c1": {"id": "c1", "name": "India"}}
    city = map_city({"_id": "x", "cityName": "Pune", "state": ["s1"]}, state_map, country_map)
    assert (city["name"], city["state"], city["country"]) == ("Pune", "Maharashtra", "India")
    assert (city["state_id"], city["country_id"]) == ("s1", "c1")


def test_city_infers_state_when_unresolved():
    city = map_city({"_id": "x", "cityName": "Chennai", "state": ["missing"]})
    assert (city["state"], city["country"]) == ("Tamil Nadu", "India")


def test_city_metro_override_beats_resolved_state():
    state_map = {"s-hr": {"id": "s-hr", "name": "Haryana", "country": []}}
    city = map_city({"_id": "x", "cityName": "Gurugram", "state": ["s-hr"]}, state_map)
    assert (city["state"], city["country"]) == ("Delhi NCR", "India")


def test_slug():
    assert generate_slug("  Apollo Hospitals, Pune!! ") == "apollo-hospitals-pune"
    assert generate_slug(None) == ""
