"""
Shared test fixtures for injury-tracker-web.

Provides:
- backend: In-memory stand-in for the REST backend, with failure injection
- seeded_backend: backend pre-loaded with two athletes, injuries and treatments
- client: FastAPI TestClient with the gateway dependency overridden
"""

import copy
import os

# Keep tests off any real backend: must be set before package imports.
os.environ["API_BASE_URL"] = "http://backend.test/api"

import pytest

from injury_tracker.core.errors import ApiError, ErrorKind

ID_FIELDS = {
    "athletes": "athleteID",
    "injuries": "injuryID",
    "treatments": "treatmentID",
}

PARENT_SCOPES = {
    ("injuries", "athlete"): "athleteID",
    ("treatments", "injury"): "injuryID",
}


class FakeBackend:
    """
    Mimics ApiClient against in-memory tables.

    Records are returned as deep copies so views can never mutate the
    "server" state by accident. ``fail()`` makes a (method, path) pair raise.
    """

    def __init__(self):
        self.tables = {name: [] for name in ID_FIELDS}
        self.failures = {}
        self.calls = []
        self._next_id = 100

    def seed(self, resource, *records):
        self.tables[resource].extend(copy.deepcopy(list(records)))

    def fail(self, method, path, kind=ErrorKind.server_error, status_code=500):
        self.failures[(method, path)] = ApiError(
            kind, f"{method} {path} failed", status_code=status_code, method=method, url=path
        )

    def called(self, method, path):
        return any(m == method and p == path for m, p, _ in self.calls)

    def _not_found(self, method, path):
        return ApiError(ErrorKind.not_found, f"{method} {path} returned 404", status_code=404)

    def _find(self, resource, record_id):
        id_field = ID_FIELDS[resource]
        for idx, record in enumerate(self.tables[resource]):
            if str(record.get(id_field)) == str(record_id):
                return idx, record
        return None, None

    def request(self, method, path, *, json=None, params=None):
        path = "/" + path.strip("/")
        self.calls.append((method, path, copy.deepcopy(json)))
        if (method, path) in self.failures:
            raise self.failures[(method, path)]

        parts = path.strip("/").split("/")
        resource = parts[0]
        id_field = ID_FIELDS[resource]

        if method == "GET":
            if len(parts) == 1:
                return copy.deepcopy(self.tables[resource])
            if parts[1] == "search":
                term = (params or {}).get("term", "").lower()
                return [
                    copy.deepcopy(r)
                    for r in self.tables[resource]
                    if term in f"{r.get('firstName', '')} {r.get('lastName', '')}".lower()
                ]
            if len(parts) == 3:
                fk = PARENT_SCOPES[(resource, parts[1])]
                return [
                    copy.deepcopy(r)
                    for r in self.tables[resource]
                    if str(r.get(fk)) == parts[2]
                ]
            _, record = self._find(resource, parts[1])
            if record is None:
                raise self._not_found(method, path)
            return copy.deepcopy(record)

        if method == "POST":
            record = copy.deepcopy(json)
            record[id_field] = self._next_id
            self._next_id += 1
            self.tables[resource].append(record)
            return copy.deepcopy(record)

        if method == "PUT":
            idx, record = self._find(resource, parts[1])
            if record is None:
                raise self._not_found(method, path)
            self.tables[resource][idx] = {**record, **copy.deepcopy(json)}
            return None

        if method == "DELETE":
            idx, record = self._find(resource, parts[1])
            if record is None:
                raise self._not_found(method, path)
            del self.tables[resource][idx]
            return None

        raise AssertionError(f"unexpected method {method}")

    def get(self, path, params=None):
        return self.request("GET", path, params=params)

    def post(self, path, payload):
        return self.request("POST", path, json=payload)

    def put(self, path, payload):
        return self.request("PUT", path, json=payload)

    def delete(self, path):
        return self.request("DELETE", path)


ATHLETES = [
    {
        "athleteID": 1,
        "firstName": "Jo",
        "lastName": "Ann",
        "dateOfBirth": "2000-05-17T00:00:00",
        "sport": "Soccer",
        "teamName": "Rovers",
        "position": "Midfield",
        "jerseyNumber": 8,
        "status": "Injured",
    },
    {
        "athleteID": 2,
        "firstName": "Bo",
        "lastName": "Bee",
        "dateOfBirth": "1998-11-02T00:00:00",
        "sport": "Rugby",
        "teamName": "Lions",
        "position": "Wing",
        "jerseyNumber": 11,
        "status": "Active",
    },
]

INJURIES = [
    {
        "injuryID": 10,
        "athleteID": 1,
        "athleteName": "Jo Ann",
        "injuryType": "Sprain",
        "bodyPart": "Ankle",
        "dateOccurred": "2024-03-01T00:00:00",
        "severity": "Moderate",
        "status": "Recovering",
        "description": "Rolled ankle in training",
        "treatmentNotes": "",
        "expectedRecoveryDate": "2024-04-01T00:00:00",
    },
    {
        "injuryID": 11,
        "athleteID": 2,
        "athleteName": "Bo Bee",
        "injuryType": "Fracture",
        "bodyPart": "Wrist",
        "dateOccurred": "2024-02-10T00:00:00",
        "severity": "Severe",
        "status": "Active",
        "description": None,
        "treatmentNotes": "Cast applied",
        "expectedRecoveryDate": None,
    },
]

TREATMENTS = [
    {
        "treatmentID": 20,
        "injuryID": 10,
        "athleteID": 1,
        "athleteName": "Jo Ann",
        "injuryDescription": "Rolled ankle in training",
        "treatmentDate": "2024-03-02T00:00:00",
        "treatmentType": "Physical Therapy",
        "provider": "Dr. Smith",
        "facility": "City Clinic",
        "notes": "",
        "result": "Good - Significant Improvement",
        "recommendations": "Rest",
        "followUpRequired": True,
        "followUpDate": "2024-03-09T00:00:00",
    },
]


@pytest.fixture
def backend():
    return FakeBackend()


@pytest.fixture
def seeded_backend(backend):
    backend.seed("athletes", *ATHLETES)
    backend.seed("injuries", *INJURIES)
    backend.seed("treatments", *TREATMENTS)
    return backend


@pytest.fixture
def client(seeded_backend):
    """FastAPI TestClient whose gateway dependency is the in-memory backend."""
    from fastapi.testclient import TestClient
    from injury_tracker.core.api_client import get_api_client
    from injury_tracker.main import app

    app.dependency_overrides[get_api_client] = lambda: seeded_backend
    with TestClient(app, raise_server_exceptions=False, follow_redirects=False) as tc:
        yield tc
    app.dependency_overrides.clear()
