import importlib

import pytest

from kv_store import InMemoryKeyValueStore
from records import CandidateRecord


@pytest.fixture
def app_module(monkeypatch):
    monkeypatch.setenv("STORE_BACKEND", "memory")
    monkeypatch.setenv("SCHOOL_EMAIL_DOMAIN", "school.edu")
    monkeypatch.setenv("DEFAULT_NATIONALITY", "Indian")

    import config
    importlib.reload(config)
    import app

    mod = importlib.reload(app)
    mod.app.config["TESTING"] = True
    return mod


@pytest.fixture
def client(app_module):
    return app_module.app.test_client()


@pytest.fixture
def store():
    return InMemoryKeyValueStore()


@pytest.fixture
def make_candidate():
    def _make(**overrides):
        data = {
            "first_name": "John",
            "last_name": "Doe",
            "class_name": "10",
            "section": "A",
            "roll_number": "101",
            "parent_name": "Jane Doe",
            "parent_phone": "9876543210",
        }
        data.update(overrides)
        return CandidateRecord(**data)

    return _make


@pytest.fixture
def spec_example_csv():
    return (
        "First Name,Last Name,Class,Section,Roll Number\n"
        "John,Doe,10,A,101\n"
        "Jane,Smith,10,A,101\n"
    )
