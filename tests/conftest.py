"""
Pytest configuration and shared fixtures.

Server tests run the real FastAPI app with the repository dependency
swapped for MemoryRepository, an in-process implementation of the same
EntityRepository contract (unique keys and conditional updates included).
"""

import copy
import itertools
from collections import defaultdict, namedtuple
from typing import Any, Dict, List, Optional

import pytest
from fastapi.testclient import TestClient

from jobportal.db.mongodb import UNIQUE_KEYS
from jobportal.db.repository import DuplicateEntityError, EntityRepository, get_repository
from jobportal.main import app


class MemoryRepository(EntityRepository):
    """Dict-backed EntityRepository for tests."""

    def __init__(self):
        self.collections: Dict[str, Dict[str, dict]] = defaultdict(dict)
        self._ids = itertools.count(1)

    def _check_unique(self, kind: str, doc: dict, exclude_id: Optional[str] = None):
        for fields in UNIQUE_KEYS.get(kind, []):
            key = tuple(doc.get(f) for f in fields)
            for other in self.collections[kind].values():
                if other["id"] != exclude_id and tuple(other.get(f) for f in fields) == key:
                    raise DuplicateEntityError(kind)

    def insert(self, kind: str, doc: Dict[str, Any]) -> dict:
        doc = copy.deepcopy(doc)
        doc["id"] = f"{next(self._ids):024x}"
        self._check_unique(kind, doc)
        self.collections[kind][doc["id"]] = doc
        return copy.deepcopy(doc)

    def get(self, kind: str, entity_id: str) -> Optional[dict]:
        doc = self.collections[kind].get(entity_id)
        return copy.deepcopy(doc) if doc else None

    def find(self, kind: str, query: Optional[Dict[str, Any]] = None) -> List[dict]:
        query = query or {}
        return [
            copy.deepcopy(doc) for doc in self.collections[kind].values()
            if all(doc.get(k) == v for k, v in query.items())
        ]

    def update(self, kind, entity_id, fields, expect=None) -> Optional[dict]:
        doc = self.collections[kind].get(entity_id)
        if doc is None or any(doc.get(k) != v for k, v in (expect or {}).items()):
            return None
        candidate = {**doc, **copy.deepcopy(fields)}
        self._check_unique(kind, candidate, exclude_id=entity_id)
        self.collections[kind][entity_id] = candidate
        return copy.deepcopy(candidate)

    def delete(self, kind: str, entity_id: str) -> bool:
        return self.collections[kind].pop(entity_id, None) is not None


Actor = namedtuple("Actor", ["client", "user"])

PASSWORD = "secret-pass-123"


@pytest.fixture
def repo() -> MemoryRepository:
    return MemoryRepository()


@pytest.fixture
def make_client(repo):
    """Factory for TestClients (one cookie jar each) sharing one repository."""
    app.dependency_overrides[get_repository] = lambda: repo
    clients = []

    def _make() -> TestClient:
        client = TestClient(app)
        clients.append(client)
        return client

    yield _make

    for client in clients:
        client.close()
    app.dependency_overrides.clear()


@pytest.fixture
def anonymous(make_client) -> TestClient:
    return make_client()


@pytest.fixture
def login_as(make_client):
    """Register a fresh account with the given role and log it in."""
    counter = itertools.count(1)

    def _login(role: str, email: Optional[str] = None) -> Actor:
        client = make_client()
        email = email or f"{role}{next(counter)}@example.com"
        resp = client.post("/api/v1/user/register", json={
            "fullname": f"Test {role.title()}",
            "email": email,
            "phone_number": "5550100",
            "password": PASSWORD,
            "role": role,
        })
        assert resp.status_code == 201, resp.text
        resp = client.post("/api/v1/user/login", json={"email": email, "password": PASSWORD, "role": role})
        assert resp.status_code == 200, resp.text
        return Actor(client, resp.json()["user"])

    return _login


@pytest.fixture
def recruiter(login_as) -> Actor:
    return login_as("recruiter")


@pytest.fixture
def other_recruiter(login_as) -> Actor:
    return login_as("recruiter")


@pytest.fixture
def applicant(login_as) -> Actor:
    return login_as("applicant")


@pytest.fixture
def make_company():
    counter = itertools.count(1)

    def _make(actor: Actor, name: Optional[str] = None) -> dict:
        resp = actor.client.post("/api/v1/company/register", json={
            "name": name or f"Acme {next(counter)}",
            "description": "We build things",
            "location": "Remote",
        })
        assert resp.status_code == 201, resp.text
        return resp.json()["company"]

    return _make


@pytest.fixture
def make_job():
    def _make(actor: Actor, company: dict, title: str = "Backend Engineer", description: str = "Python and MongoDB") -> dict:
        resp = actor.client.post("/api/v1/job", json={
            "title": title,
            "description": description,
            "requirements": "python, fastapi",
            "salary": 12,
            "location": "Bangalore",
            "job_type": "full-time",
            "experience_level": 2,
            "position": 3,
            "company_id": company["id"],
        })
        assert resp.status_code == 201, resp.text
        return resp.json()["job"]

    return _make


@pytest.fixture
def posted_job(recruiter, make_company, make_job) -> dict:
    return make_job(recruiter, make_company(recruiter))
