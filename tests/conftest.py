# tests/conftest.py
import os
import tempfile
import pytest
from starlette.testclient import TestClient

_SESSION_DIR = tempfile.mkdtemp(prefix="casino-ledger-")
os.environ.setdefault("CASINO_LOG_DIR", os.path.join(_SESSION_DIR, "logs"))
os.environ["CASINO_DATA_FILE"] = os.path.join(_SESSION_DIR, "balances.json")   # <-- TEST-ONLY ledger
os.environ["CASINO_STATIC_DIR"] = os.path.join(_SESSION_DIR, "public")         # absent unless a test creates it

from casino_ledger.app import create_app
from casino_ledger import store

@pytest.fixture(scope="session")
def data_file():
    return os.environ["CASINO_DATA_FILE"]

@pytest.fixture(scope="session")
def app(data_file):
    store.reset_store()
    store.init_store()
    return create_app()

@pytest.fixture(autouse=True)
def clean_store(app):
    store.reset_store()
    store.truncate_all()   # isolation between tests
    yield
    store.reset_store()
    store.truncate_all()

@pytest.fixture()
def client(app):
    return TestClient(app)
