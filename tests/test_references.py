from hospital_directory.services.references import (
    ID_REFERENCE,
    extract_hospital_ids,
    extract_ids,
    normalize_refs,
)


def test_string_ids_become_placeholder_stubs():
    assert normalize_refs(["d1", "d2"]) == [
        {"id": "d1", "name": ID_REFERENCE},
        {"id": "d2", "name": ID_REFERENCE},
    ]


def test_single_value_is_wrapped():
    assert normalize_refs("t1") == [{"id": "t1", "name": ID_REFERENCE}]
    assert normalize_refs(None) == []


def test_embedded_objects_keep_name_and_extras():
    refs = normalize_refs([{"_id": "c1", "cityName": "Pune", "state": "MH"}], "cityName")
    assert refs[0]["id"] == "c1"
    assert refs[0]["name"] == "Pune"
    assert refs[0]["state"] == "MH"


def test_object_without_id_is_dropped():
    assert normalize_refs([{"cityName": "Pune"}], "cityName") == []


def test_object_without_name_gets_placeholder():
    assert normalize_refs([{"_id": "x"}], "title") == [{"id": "x", "name": ID_REFERENCE, "_id": "x"}]


def test_falsy_entries_are_dropped():
    assert extract_ids(normalize_refs(["a", "", None, "b"])) == ["a", "b"]


def test_extract_ids_keeps_duplicates_and_invents_nothing():
    raw = ["a", {"_id": "b", "name": "B"}, "a", {"name": "no id"}]
    assert extract_ids(normalize_refs(raw)) == ["a", "b", "a"]


def test_hospital_ids_follow_alias_precedence():
    branch = {
        "data": {
            "Hospital Group Master": ["h-group"],
            "HospitalMaster_branches": [{"_id": "h-reverse"}],
            "hospital": "h-direct",
        }
    }
    assert extract_hospital_ids(branch) == ["h-direct", "h-reverse", "h-group"]


def test_hospital_ids_deduplicated():
    branch = {"hospital": ["h1"], "hospitalGroup": ["h1", "h2"]}
    assert extract_hospital_ids(branch) == ["h1", "h2"]
