"""Shared fixtures: an in-memory stand-in for the pymongo movie collection."""

import copy
from types import SimpleNamespace

import bson
import pytest
from bson import ObjectId
from fastapi.testclient import TestClient
from pymongo import ReturnDocument
from pymongo.errors import ServerSelectionTimeoutError, WriteError

from movies_api.main import create_app
from movies_api.movie_service import MovieService


class FakeCursor:
    def __init__(self, docs):
        self.docs = docs

    def limit(self, n):
        # the real driver sends the limit inside a BSON command
        bson.encode({"limit": n})
        return FakeCursor(self.docs[:n] if n else self.docs)

    def __iter__(self):
        return iter(self.docs)


class FakeCollection:
    """Implements the subset of ``pymongo.collection.Collection`` the service calls.

    Inserts are checked like the collection's ``$jsonSchema`` validator, and
    setting ``broken`` makes every call fail as an unreachable server would.
    """

    def __init__(self):
        self.docs = {}
        self.broken = False

    def _check(self):
        if self.broken:
            raise ServerSelectionTimeoutError("localhost:27017: connection refused")

    def insert_one(self, doc):
        self._check()
        if not doc.get("title") or not doc.get("description"):
            raise WriteError("Document failed validation", code=121)
        doc.setdefault("_id", ObjectId())
        self.docs[doc["_id"]] = copy.deepcopy(doc)
        return SimpleNamespace(inserted_id=doc["_id"])

    def find(self, filter=None):
        self._check()
        return FakeCursor([copy.deepcopy(doc) for doc in self.docs.values()])

    def find_one(self, filter):
        self._check()
        doc = self.docs.get(filter["_id"])
        return copy.deepcopy(doc) if doc else None

    def find_one_and_update(self, filter, update, return_document=ReturnDocument.BEFORE):
        self._check()
        doc = self.docs.get(filter["_id"])
        if doc is None:
            return None
        before = copy.deepcopy(doc)
        doc.update(update["$set"])
        return copy.deepcopy(doc) if return_document == ReturnDocument.AFTER else before

    def delete_one(self, filter):
        self._check()
        deleted = self.docs.pop(filter["_id"], None)
        return SimpleNamespace(deleted_count=1 if deleted else 0)


@pytest.fixture
def collection():
    return FakeCollection()


@pytest.fixture
def service(collection):
    return MovieService(collection)


@pytest.fixture
def client(service):
    with TestClient(create_app(service)) as test_client:
        yield test_client


@pytest.fixture
def create_movie(client):
    def _create(title="Inception", description="A mind-bending heist", **extra):
        response = client.post("/api/movies", json={"title": title, "description": description, **extra})
        assert response.status_code == 201
        return response.json()

    return _create
