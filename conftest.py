from pathlib import Path
import sys

import pytest

# Ensure project root is on sys.path before tests import components.*
ROOT = Path(__file__).resolve().parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))


@pytest.fixture
def store():
    from components.kvstore.store import InMemoryKeyValueStore

    return InMemoryKeyValueStore()


@pytest.fixture
def client(store):
    from fastapi.testclient import TestClient
    from components.kvstore.app import create_app

    return TestClient(create_app(store=store))
