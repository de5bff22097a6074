import pytest

from conftest import make_record


@pytest.fixture()
def api(client, directory):
    return client


def test_health(client):
    assert client.get("/health").json()["status"] == "ok"
    assert client.get("/api/health").status_code == 200


def test_list_hospitals(api):
    body = api.get("/api/hospitals").json()
    assert body["total"] == 2
    assert body["page"] == 0
    assert body["has_more"] is False
    apollo = body["items"][0]
    assert apollo["name"] == "Apollo Hospitals"
    branch = apollo["branches"][0]
    assert branch["city"][0]["state"] == "Maharashtra"
    assert branch["doctors"][0]["name"] == "Dr. Asha Rao"
    # extra entity fields survive the response model
    assert branch["doctors"][0]["specialization"][0]["name"] == "Cardiology"
    assert branch["specialization"][1] == {**branch["specialization"][1], "name": "Angioplasty (Treatment)", "is_treatment": True}


def test_list_hospitals_includes_standalone(api):
    body = api.get("/api/hospitals", params={"include_standalone": "true"}).json()
    assert [h["id"] for h in body["items"]][-1] == "standalone-b-3"


def test_list_hospitals_paging(api):
    body = api.get("/api/hospitals", params={"page": 1, "page_size": 1}).json()
    assert [h["id"] for h in body["items"]] == ["h-2"]
    assert body["total"] == 2


def test_text_filter_resolves_to_ids(api):
    body = api.get("/api/hospitals", params={"doctor_text": "vikram"}).json()
    assert [h["name"] for h in body["items"]] == ["Fortis Healthcare"]


def test_text_filter_with_no_match_short_circuits(api, directory):
    body = api.get("/api/hospitals", params={"city_text": "atlantis"}).json()
    assert body == {"items": [], "total": 0, "page": 0, "page_size": 20, "has_more": False}
    assert directory.calls_for("query_page", "HospitalMaster") == []
    assert directory.calls_for("find_by_ids") == []


def test_id_filter(api):
    body = api.get("/api/hospitals", params={"treatment_id": "t-angio"}).json()
    assert [h["id"] for h in body["items"]] == ["h-1"]


def test_q_matches_branch_city(api):
    body = api.get("/api/hospitals", params={"q": "gurugram"}).json()
    assert [h["id"] for h in body["items"]] == ["h-2"]


def test_invalid_paging_is_rejected(api):
    assert api.get("/api/hospitals", params={"page": -1}).status_code == 422
    assert api.get("/api/hospitals", params={"page_size": 1000}).status_code == 422


def test_root_failure_is_structured_500(api, directory):
    directory.fail("HospitalMaster", RuntimeError("connection refused"))
    response = api.get("/api/hospitals")
    assert response.status_code == 500
    assert response.json() == {"error": "Failed to fetch hospitals", "details": "connection refused"}


def test_reference_failure_degrades_to_stubs(api, directory):
    directory.fail("DoctorMaster", RuntimeError("doctor table down"))
    body = api.get("/api/hospitals").json()
    assert body["items"][0]["branches"][0]["doctors"] == [{"id": "d-1", "name": "ID Reference"}]


def test_hospital_by_slug(api):
    body = api.get("/api/hospitals/apollo-hospitals").json()
    assert body["id"] == "h-1"
    assert [b["id"] for b in body["branches"]] == ["b-1"]


def test_standalone_hospital_by_slug(api):
    assert api.get("/api/hospitals/sunrise-clinic").json()["id"] == "standalone-b-3"


def test_unknown_or_hidden_slug_is_404(api):
    assert api.get("/api/hospitals/nowhere").status_code == 404
    assert api.get("/api/hospitals/hidden-care").status_code == 404


def test_branches_unfiltered_pages_in_store(api, directory):
    body = api.get("/api/branches", params={"page_size": 2}).json()
    assert body["total"] == 3
    assert [b["id"] for b in body["items"]] == ["b-1", "b-2"]
    assert body["items"][0]["hospital_name"] == "Apollo Hospitals"
    assert directory.calls_for("query_page", "BranchesMaster") == [("query_page", "BranchesMaster", (None, 2, 0))]


def test_branches_filtered(api):
    body = api.get("/api/branches", params={"city_id": "city-pune"}).json()
    assert [b["id"] for b in body["items"]] == ["b-1", "b-3"]
    assert body["items"][1]["is_standalone"] is True


def test_branches_department_text(api):
    body = api.get("/api/branches", params={"department": "heart"}).json()
    assert [b["id"] for b in body["items"]] == ["b-1"]


def test_branches_short_circuit(api):
    body = api.get("/api/branches", params={"doctor": "nobody"}).json()
    assert body == {"items": [], "total": 0, "page": 0, "page_size": 30}


def test_treatments_sorted_and_filtered(api, directory):
    body = api.get("/api/treatments").json()
    assert [t["name"] for t in body["items"]] == ["Angioplasty", "Knee Replacement"]

    assert [t["id"] for t in api.get("/api/treatments", params={"q": "ortho"}).json()["items"]] == ["t-knee"]
    assert [t["id"] for t in api.get("/api/treatments", params={"category": "cardiac"}).json()["items"]] == ["t-angio"]
    assert [t["id"] for t in api.get("/api/treatments", params={"popular": "true"}).json()["items"]] == ["t-angio"]
    assert len(directory.calls_for("query_page", "TreatmentMaster")) == 1


def test_search_endpoint(api):
    body = api.post("/api/search", json={"view": "doctors", "query": "rao"}).json()
    assert [d["id"] for d in body["items"]] == ["d-1"]
    assert body["items"][0]["branch_name"] in ("Apollo Pune", "Sunrise Clinic")
    assert {o["id"] for o in body["options"]["city"]} == {"city-pune"}


def test_search_facet(api):
    body = api.post("/api/search", json={"view": "hospitals", "city": {"query": "guru"}}).json()
    assert [b["id"] for b in body["items"]] == ["b-2"]


def test_search_rejects_unknown_view(api):
    assert api.post("/api/search", json={"view": "clinics"}).status_code == 422


def test_cities_listing(api):
    body = api.get("/api/cities").json()
    assert body["total"] == 2
    assert body["page_size"] == 50
    pune = next(c for c in body["items"] if c["id"] == "city-pune")
    assert (pune["state"], pune["country"]) == ("Maharashtra", "India")
    assert pune["branches"] is None


def test_cities_with_branches(api):
    body = api.get("/api/cities", params={"with_branches": "true"}).json()
    assert [c["name"] for c in body["items"]] == ["Gurugram", "Pune"]
    gurugram, pune = body["items"]
    assert gurugram["state"] == "Delhi NCR"
    assert [b["id"] for b in pune["branches"]] == ["b-1", "b-3"]
    assert pune["branches_count"] == 2
    assert pune["hospitals"] == [{"id": "h-1", "name": "Apollo Hospitals"}]
    assert gurugram["hospitals"] == [{"id": "h-2", "name": "Fortis Healthcare"}]


def test_city_detail(api):
    body = api.get("/api/cities/city-ggn").json()
    assert body["name"] == "Gurugram"
    assert body["branches_count"] == 1
    assert body["branches"][0]["hospital_name"] == "Fortis Healthcare"


def test_unknown_city_is_404(api):
    assert api.get("/api/cities/nowhere").status_code == 404


def test_cities_failure_is_structured_500(api, directory):
    directory.fail("CityMaster", RuntimeError("city table down"))
    response = api.get("/api/cities")
    assert response.status_code == 500
    assert response.json() == {"error": "Failed to fetch cities", "details": "city table down"}


def test_branches_unfiltered_page_drops_hidden_records_after_paging(api, directory):
    directory.add("BranchesMaster", make_record(
        "b-hidden", {"branchName": "Closed Wing", "showHospital": False}, created_at="2024-04-01T00:00:00"
    ))
    body = api.get("/api/branches", params={"page_size": 2}).json()
    assert [b["id"] for b in body["items"]] == ["b-1"]
    assert body["total"] == 4
