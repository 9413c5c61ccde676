"""
Shared fixtures.

FakeCollection implements the slice of pymongo's Collection API the
services use, so no MongoDB server is needed.
"""

import copy
from types import SimpleNamespace

import pytest
from bson import ObjectId
from pymongo.errors import DuplicateKeyError, OperationFailure

from hireflow.core.auth import CallerIdentity
from hireflow.core.exceptions import DispatchFailureException
from hireflow.services.mongo_service import (
    UserService, HiringPostService, ApplicationService, NotificationService, InterviewSessionService
)
from hireflow.services.notification_service import NotificationChannel, NotificationDispatcher
from hireflow.services.status_service import ApplicationStatusService


class FakeCollection:
    def __init__(self, unique=()):
        self.docs = []
        self.fail_on = set()
        self.calls = []
        self.unique = unique

    def _check(self, operation):
        self.calls.append(operation)
        if operation in self.fail_on:
            raise OperationFailure(f"{operation} rejected")

    @staticmethod
    def _matches(doc, query):
        return all(doc.get(key) == value for key, value in (query or {}).items())

    def find_one(self, query=None):
        for doc in self.docs:
            if self._matches(doc, query):
                return copy.deepcopy(doc)
        return None

    def find(self, query=None, sort=None):
        results = [copy.deepcopy(d) for d in self.docs if self._matches(d, query)]
        for key, direction in reversed(sort or []):
            results.sort(key=lambda d: d.get(key), reverse=direction < 0)
        return results

    def insert_one(self, doc):
        self._check("insert_one")
        for key in self.unique:
            if any(d.get(key) == doc.get(key) for d in self.docs):
                raise DuplicateKeyError(f"duplicate {key}")
        doc.setdefault("_id", ObjectId())
        self.docs.append(copy.deepcopy(doc))
        return SimpleNamespace(inserted_id=doc["_id"])

    def update_one(self, query, update):
        self._check("update_one")
        for doc in self.docs:
            if self._matches(doc, query):
                doc.update(copy.deepcopy(update.get("$set", {})))
                return SimpleNamespace(matched_count=1, modified_count=1)
        return SimpleNamespace(matched_count=0, modified_count=0)

    def delete_one(self, query):
        self._check("delete_one")
        for doc in self.docs:
            if self._matches(doc, query):
                self.docs.remove(doc)
                return SimpleNamespace(deleted_count=1)
        return SimpleNamespace(deleted_count=0)

    def delete_many(self, query):
        self._check("delete_many")
        kept = [d for d in self.docs if not self._matches(d, query)]
        deleted = len(self.docs) - len(kept)
        self.docs = kept
        return SimpleNamespace(deleted_count=deleted)


class RecordingChannel(NotificationChannel):
    """Collects messages instead of delivering them."""

    name = "recording"

    def __init__(self, fail: bool = False):
        self.sent = []
        self.fail = fail

    def send(self, message):
        if self.fail:
            raise DispatchFailureException(self.name, "provider rejected the request")
        self.sent.append(message)


@pytest.fixture
def users():
    return UserService(collection=FakeCollection(unique=("email",)))


@pytest.fixture
def posts():
    return HiringPostService(collection=FakeCollection())


@pytest.fixture
def applications():
    return ApplicationService(collection=FakeCollection())


@pytest.fixture
def notifications():
    return NotificationService(collection=FakeCollection())


@pytest.fixture
def sessions():
    return InterviewSessionService(collection=FakeCollection())


@pytest.fixture
def channel():
    return RecordingChannel()


@pytest.fixture
def status_service(applications, posts, users, channel):
    return ApplicationStatusService(applications, posts, users, NotificationDispatcher(channel))


@pytest.fixture
def hr_user(users):
    return users.create(
        email="priya@acme.com",
        password_hash="x",
        name="Priya Shah",
        role="HR",
        companyName="Acme",
        companySize="51-200",
        hrRole="Talent Lead",
    )


@pytest.fixture
def candidate_user(users):
    return users.create(email="jane@x.com", password_hash="x", name="Jane Doe", role="candidate")


@pytest.fixture
def hr_caller(hr_user):
    return CallerIdentity(user_id=hr_user["id"], email=hr_user["email"], role="HR", name=hr_user["name"])


@pytest.fixture
def candidate_caller(candidate_user):
    return CallerIdentity(
        user_id=candidate_user["id"], email=candidate_user["email"], role="candidate", name=candidate_user["name"]
    )


@pytest.fixture
def post(posts, hr_user):
    return posts.create(
        hr_user["id"],
        "Acme",
        {
            "title": "Backend Engineer",
            "description": "Build APIs",
            "location": "Remote",
            "jobType": "full-time",
            "requirements": ["Python"],
            "responsibilities": ["Ship features"],
        },
    )


@pytest.fixture
def application(applications, candidate_user, post):
    """Application A1: pending, jane@x.com, Backend Engineer at Acme."""
    return applications.create(candidate_user, post, "http://localhost:8000/uploads/1-cv.pdf")
