"""Pytest configuration and fixtures."""

import copy

import pytest
from fastapi.testclient import TestClient

from slidemark.api.config import get_settings
from slidemark.api.main import create_app
from slidemark.engine.policy import RenderPolicy
from slidemark.samples.store import SampleStore


@pytest.fixture(scope="session")
def sample_store() -> SampleStore:
    """Store over the bundled sample library."""
    return SampleStore()


@pytest.fixture
def load_sample(sample_store):
    """Load a bundled sample as a fresh, mutable copy."""
    def _load(name: str) -> dict:
        return copy.deepcopy(sample_store.get_or_raise(name))
    return _load


@pytest.fixture
def basic_deck(load_sample) -> dict:
    return load_sample("basic-deck")


@pytest.fixture
def corporate_deck(load_sample) -> dict:
    return load_sample("corporate-deck")


@pytest.fixture
def image_deck(load_sample) -> dict:
    return load_sample("image-deck")


@pytest.fixture
def minimal_deck(load_sample) -> dict:
    return load_sample("minimal-deck")


@pytest.fixture
def shapes_deck(load_sample) -> dict:
    return load_sample("shapes-demo")


@pytest.fixture
def master_deck(load_sample) -> dict:
    return load_sample("master-deck")


@pytest.fixture
def keyed_policy() -> RenderPolicy:
    return RenderPolicy.keyed()


@pytest.fixture
def mastered_policy() -> RenderPolicy:
    return RenderPolicy.mastered()


@pytest.fixture
def client() -> TestClient:
    """Create a test client for the FastAPI app."""
    return TestClient(create_app(get_settings()))
