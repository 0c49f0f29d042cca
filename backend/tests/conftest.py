"""
Pytest configuration and shared test helpers for backend tests.
"""
import os
import sys
from pathlib import Path

# Skip MongoDB connection in the app lifespan when running under pytest.
os.environ.setdefault("PYTEST_RUNNING", "1")

BACKEND_DIR = Path(__file__).resolve().parent.parent
if str(BACKEND_DIR) not in sys.path:
    sys.path.insert(0, str(BACKEND_DIR))

import pytest

from database import DocumentStore, split_path
from services.clearance_errors import StoreUnavailableError


class InMemoryDocumentStore(DocumentStore):
    """DocumentStore over a dict of "a/b/c" paths, recording every read in order.

    failing_paths: paths whose read raises StoreUnavailableError.
    """

    def __init__(self, docs=None, failing_paths=None):
        self.docs = {}
        for path, doc in (docs or {}).items():
            self.put(path, doc)
        self.failing_paths = set(failing_paths or ())
        self.calls = []

    def put(self, path, doc):
        self.docs["/".join(split_path(path))] = dict(doc)

    def delete(self, path):
        self.docs.pop("/".join(split_path(path)), None)

    def reads_of(self, prefix):
        return [c for c in self.calls if c[1].startswith(prefix)]

    async def get(self, path):
        key = "/".join(split_path(path))
        self.calls.append(("get", key))
        if key in self.failing_paths:
            raise StoreUnavailableError(f"simulated outage reading {key}")
        doc = self.docs.get(key)
        if doc is None:
            return None
        return {**doc, "id": key.rsplit("/", 1)[1]}

    async def query_collection(self, path, order_by=None, descending=False, limit=None):
        prefix = "/".join(split_path(path))
        self.calls.append(("query", prefix))
        if prefix in self.failing_paths:
            raise StoreUnavailableError(f"simulated outage scanning {prefix}")
        docs = [
            {**doc, "id": key.rsplit("/", 1)[1]}
            for key, doc in self.docs.items()
            if key.rsplit("/", 1)[0] == prefix
        ]
        if order_by:
            field = "id" if order_by == "_id" else order_by
            docs.sort(key=lambda d: d.get(field) or "", reverse=descending)
        if limit:
            docs = docs[:limit]
        return docs


@pytest.fixture
def store():
    return InMemoryDocumentStore()


@pytest.fixture
def client():
    """Return a TestClient for the main FastAPI app (server:app). Use for unit-style API tests."""
    from fastapi.testclient import TestClient
    from server import app
    return TestClient(app)
