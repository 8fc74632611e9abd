# tests/conftest.py
from uuid import uuid4

import pytest
from fastapi.testclient import TestClient

from fcrepo_client import Content, Repository
from fcrepo_ref_server.main import app
from fcrepo_ref_server.infra.memory_storage import MemoryStore
from fcrepo_ref_server.infra.providers import get_storage

BASE_URL = "http://testserver"
REST_URL = BASE_URL + "/rest/"
DC = "http://purl.org/dc/elements/1.1/"


# ------------------ Helpers ------------------

def unique_id() -> str:
    return str(uuid4())

def text_content(value: str) -> Content:
    return Content.from_text(value, content_type="text/plain")

def insert_literal(predicate: str, value: str) -> str:
    return f"INSERT DATA {{ <> <{predicate}> '{value}' . }}"

def contains_property(predicate: str, value: str, triples) -> bool:
    for _, p, o in triples:
        if str(p).lower() == predicate.lower() and str(o).lower() == value.lower():
            return True
    return False


# ------------------ Per-test wiring ------------------

@pytest.fixture
def store() -> MemoryStore:
    return MemoryStore()

@pytest.fixture(autouse=True)
def _override_storage(store):
    """
    Give each test a fresh in-memory store by overriding the app dependency.
    """
    app.dependency_overrides[get_storage] = lambda: store
    try:
        yield
    finally:
        app.dependency_overrides.clear()

@pytest.fixture
def client() -> TestClient:
    return TestClient(app, base_url=BASE_URL)

@pytest.fixture
def repo(client) -> Repository:
    return Repository(REST_URL, http_client=client)
