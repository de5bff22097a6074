import time

import pytest
from fastapi.testclient import TestClient

from hospital_directory.core.config import Settings, get_settings
from hospital_directory.db.supabase_client import get_content_store
from hospital_directory.main import app
from hospital_directory.services.field_extractor import get_raw, get_record_id
from hospital_directory.services.resolver import BatchedResolver
from hospital_directory.utils.cache import TTLCache, get_cache


def make_record(record_id, data, created_at="2024-01-01T00:00:00"):
    return {"id": record_id, "created_at": created_at, "data": data}


class FakeContentStore:
    """In-memory content store that records every call."""

    def __init__(self):
        self.collections = {}
        self.calls = []
        self.failures = {}
        self.delays = {}

    def add(self, collection, *records):
        self.collections.setdefault(collection, []).extend(records)

    def fail(self, collection, error):
        self.failures[collection] = error

    def delay(self, collection, seconds):
        self.delays[collection] = seconds

    def calls_for(self, method=None, collection=None):
        return [
            call for call in self.calls
            if (method is None or call[0] == method) and (collection is None or call[1] == collection)
        ]

    def _before(self, method, collection, payload):
        self.calls.append((method, collection, payload))
        if collection in self.delays:
            time.sleep(self.delays[collection])
        if collection in self.failures:
            raise self.failures[collection]

    def find_by_ids(self, collection, ids, limit):
        self._before("find_by_ids", collection, list(ids))
        wanted = set(ids)
        return [r for r in self.collections.get(collection, []) if get_record_id(r) in wanted][:limit]

    def search_ids(self, collection, field, text, limit):
        self._before("search_ids", collection, (field, text))
        needle = text.casefold()
        return [
            get_record_id(r) for r in self.collections.get(collection, [])
            if needle in str(get_raw(r, field) or "").casefold()
        ][:limit]

    def query_page(self, collection, ids=None, limit=20, offset=0):
        self._before("query_page", collection, (ids, limit, offset))
        records = self.collections.get(collection, [])
        if ids is not None:
            records = [r for r in records if get_record_id(r) in set(ids)]
        records = sorted(records, key=lambda r: r.get("created_at") or "", reverse=True)
        return records[offset:offset + limit], len(records)


class FakeClock:
    def __init__(self, now=1000.0):
        self.now = now

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds


@pytest.fixture()
def settings():
    return Settings(supabase_url="", supabase_key="", fetch_timeout_seconds=0.2)


@pytest.fixture()
def store():
    return FakeContentStore()


@pytest.fixture()
def clock():
    return FakeClock()


@pytest.fixture()
def cache(clock):
    return TTLCache(ttl_seconds=600, clock=clock)


@pytest.fixture()
def resolver(store, cache, settings):
    return BatchedResolver(store, cache, settings)


@pytest.fixture()
def directory(store):
    """A small hospital graph spread over every collection."""
    store.add("CountryMaster", make_record("c-in", {"countryName": "India"}))
    store.add(
        "StateMaster",
        make_record("s-mh", {"state": "Maharashtra", "country": ["c-in"]}),
        make_record("s-hr", {"state": "Haryana", "country": ["c-in"]}),
    )
    store.add(
        "CityMaster",
        make_record("city-pune", {"cityName": "Pune", "state": ["s-mh"]}),
        make_record("city-ggn", {"cityName": "Gurugram", "state": ["s-hr"]}),
    )
    store.add("DepartmentMaster", make_record("dep-heart", {"department": "Heart Institute", "specialist": ["sp-cardio"]}))
    store.add(
        "TreatmentMaster",
        make_record("t-angio", {"treatmentName": "Angioplasty", "category": "Cardiac", "popular": True}),
        make_record("t-knee", {"treatmentName": "Knee Replacement", "category": "Orthopaedic"}),
    )
    store.add(
        "SpecialistsMaster",
        make_record("sp-cardio", {"specialty": "Cardiology", "department": ["dep-heart"], "treatment": ["t-angio"]}),
        make_record("sp-ortho", {"specialty": "Orthopaedics", "treatment": ["t-knee"]}),
    )
    store.add(
        "DoctorMaster",
        make_record("d-1", {"doctorName": "Dr. Asha Rao", "specialization": ["sp-cardio"]}),
        make_record("d-2", {"doctorName": "Dr. Vikram Shah", "specialization": ["sp-ortho"]}),
    )
    store.add("Accreditation", make_record("acc-jci", {"title": "JCI"}))
    store.add(
        "HospitalMaster",
        make_record("h-1", {"hospitalName": "Apollo Hospitals"}, created_at="2024-03-01T00:00:00"),
        make_record("h-2", {"hospitalName": "Fortis Healthcare"}, created_at="2024-02-01T00:00:00"),
        make_record("h-hidden", {"hospitalName": "Hidden Care", "showHospital": False}),
    )
    store.add(
        "BranchesMaster",
        make_record("b-1", {
            "branchName": "Apollo Pune",
            "hospital": ["h-1"],
            "city": ["city-pune"],
            "doctor": ["d-1"],
            "specialist": ["sp-cardio"],
            "specialty": ["sp-cardio"],
            "treatment": ["t-angio"],
            "accreditation": ["acc-jci"],
        }, created_at="2024-03-02T00:00:00"),
        make_record("b-2", {
            "branchName": "Fortis Gurugram",
            "HospitalMaster_branches": ["h-2"],
            "city": ["city-ggn"],
            "doctor": ["d-2"],
            "specialist": ["sp-ortho"],
            "treatment": ["t-knee"],
        }, created_at="2024-02-02T00:00:00"),
        make_record("b-3", {
            "branchName": "Sunrise Clinic",
            "city": ["city-pune"],
            "doctor": ["d-1"],
        }, created_at="2024-01-02T00:00:00"),
    )
    return store


@pytest.fixture()
def client(store, cache, settings):
    app.dependency_overrides[get_content_store] = lambda: store
    app.dependency_overrides[get_cache] = lambda: cache
    app.dependency_overrides[get_settings] = lambda: settings
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()
