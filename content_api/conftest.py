import bson
import pytest
from bson import ObjectId
from fastapi.testclient import TestClient
from pymongo.errors import PyMongoError
from pymongo.results import DeleteResult, InsertOneResult

from content_api.config import ContentAPISettings
from content_api.main import create_app
from content_api.media.client import UploadedImage


def _matches(doc, query):
    return all(doc.get(key) == value for key, value in query.items())


class FakeCollection:
    """In-memory stand-in for the handful of pymongo calls the app makes"""

    def __init__(self):
        self.docs = []
        self.fail_on = set()

    def _maybe_fail(self, op):
        if op in self.fail_on:
            raise PyMongoError(f"{op} failed")

    def insert_one(self, doc):
        self._maybe_fail("insert_one")
        doc.setdefault("_id", ObjectId())
        bson.encode(doc)  # pymongo encodes before sending, so encoding errors surface here
        self.docs.append(dict(doc))
        return InsertOneResult(doc["_id"], True)

    def find(self, query=None):
        self._maybe_fail("find")
        return [dict(d) for d in self.docs if _matches(d, query or {})]

    def find_one(self, query):
        self._maybe_fail("find_one")
        found = self.find(query)
        return found[0] if found else None

    def delete_one(self, query):
        self._maybe_fail("delete_one")
        for doc in self.docs:
            if _matches(doc, query):
                self.docs.remove(doc)
                return DeleteResult({"n": 1}, True)
        return DeleteResult({"n": 0}, True)

    def count_documents(self, query):
        self._maybe_fail("count_documents")
        return len(self.find(query))

    def create_index(self, *a, **k):
        return None


class FakeDatabase:
    def __init__(self):
        self.collections = {}

    def __getitem__(self, name):
        return self.collections.setdefault(name, FakeCollection())

    def __getattr__(self, name):
        if name.startswith("_"):
            raise AttributeError(name)
        return self[name]


class FakeMediaClient:
    def __init__(self):
        self.uploads = []
        self.destroyed = []
        self.upload_error = None
        self.destroy_error = None

    async def upload(self, data, filename=None):
        if self.upload_error is not None:
            raise self.upload_error
        public_id = f"anando-computer/{len(self.uploads) + 1}"
        self.uploads.append((public_id, filename, len(data)))
        return UploadedImage(
            url=f"https://res.cloudinary.com/demo/image/upload/{public_id}.png",
            public_id=public_id,
        )

    async def destroy(self, public_id):
        if self.destroy_error is not None:
            raise self.destroy_error
        self.destroyed.append(public_id)
        return {"result": "ok"}


@pytest.fixture
def settings():
    return ContentAPISettings(_env_file=None, JWT_SECRET_KEY="test-secret")


@pytest.fixture
def fake_db():
    return FakeDatabase()


@pytest.fixture
def fake_media():
    return FakeMediaClient()


@pytest.fixture
def client(settings, fake_db, fake_media):
    app = create_app(settings=settings, database=fake_db, media_client=fake_media)
    with TestClient(app) as test_client:
        yield test_client
