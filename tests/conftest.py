import copy
import itertools
import json

import httpx
import pytest

from arena.judge.client import JudgeClient
from arena.session import SessionContext, session_manager

JUDGE_URL = "http://judge.test"

# ==================== IN-MEMORY MONGO ====================

class UpdateResult:
    def __init__(self, matched_count=0, modified_count=0, upserted_id=None):
        self.matched_count = matched_count
        self.modified_count = modified_count
        self.upserted_id = upserted_id


def _matches(doc, query):
    for key, cond in query.items():
        value = doc.get(key)
        if isinstance(cond, dict):
            if "$in" in cond and value not in cond["$in"]:
                return False
            if "$ne" in cond and value == cond["$ne"]:
                return False
        elif value != cond:
            return False
    return True


def _project(doc, projection):
    doc = copy.deepcopy(doc)
    if not projection:
        return doc
    include = [k for k, v in projection.items() if v and k != "_id"]
    if include:
        keep = set(include)
        if projection.get("_id", 1):
            keep.add("_id")
        return {k: v for k, v in doc.items() if k in keep}
    return {k: v for k, v in doc.items() if projection.get(k, 1)}


class FakeCursor:
    def __init__(self, docs):
        self.docs = docs

    def sort(self, key, direction=1):
        self.docs.sort(key=lambda d: d.get(key), reverse=direction == -1)
        return self

    def skip(self, n):
        self.docs = self.docs[n:]
        return self

    def limit(self, n):
        self.docs = self.docs[:n]
        return self

    async def to_list(self, length=None):
        return self.docs if length is None else self.docs[:length]


class FakeCollection:
    _ids = itertools.count(1)

    def __init__(self):
        self.docs = []
        self.update_calls = []

    async def find_one(self, query=None, projection=None, **kwargs):
        for doc in self.docs:
            if _matches(doc, query or {}):
                return _project(doc, projection)
        return None

    def find(self, query=None, projection=None):
        return FakeCursor([_project(d, projection) for d in self.docs if _matches(d, query or {})])

    async def insert_one(self, doc):
        doc = copy.deepcopy(doc)
        doc.setdefault("_id", next(self._ids))
        self.docs.append(doc)
        return doc["_id"]

    async def update_one(self, query, update, upsert=False):
        self.update_calls.append((copy.deepcopy(query), copy.deepcopy(update), upsert))

        for doc in self.docs:
            if _matches(doc, query):
                doc.update(copy.deepcopy(update.get("$set", {})))
                return UpdateResult(matched_count=1, modified_count=1)

        if not upsert:
            return UpdateResult()

        doc = {k: v for k, v in query.items() if not isinstance(v, dict)}
        doc.update(update.get("$setOnInsert", {}))
        doc.update(update.get("$set", {}))
        upserted_id = await self.insert_one(doc)
        return UpdateResult(upserted_id=upserted_id)

    async def count_documents(self, query):
        return sum(1 for d in self.docs if _matches(d, query))

    async def create_index(self, *args, **kwargs):
        return None


class FakeDatabase:
    def __init__(self):
        self._collections = {}

    def __getitem__(self, name):
        return self._collections.setdefault(name, FakeCollection())

    def __getattr__(self, name):
        if name.startswith("_"):
            raise AttributeError(name)
        return self[name]

    def seed(self, name, docs):
        self[name].docs.extend(copy.deepcopy(docs))

# ==================== SCRIPTED JUDGE ====================

class FakeJudgeServer:
    """
    Each script entry covers one submission: the list of status payloads
    returned by successive polls (the last one repeats).
    """

    def __init__(self, scripts=None, submit_status=201, poll_status=200):
        self.scripts = list(scripts or [])
        self.submit_status = submit_status
        self.poll_status = poll_status
        self.submissions = []
        self.polls = []
        self._pending = {}

    def handler(self, request: httpx.Request) -> httpx.Response:
        if request.method == "POST" and request.url.path == "/submissions":
            if self.submit_status >= 400:
                return httpx.Response(self.submit_status)
            body = json.loads(request.content)
            token = f"tok-{len(self.submissions) + 1}"
            self.submissions.append(body)
            self._pending[token] = list(self.scripts[len(self.submissions) - 1])
            return httpx.Response(self.submit_status, json={"token": token})

        if request.method == "GET" and request.url.path.startswith("/submissions/"):
            token = request.url.path.rsplit("/", 1)[1]
            self.polls.append(token)
            if self.poll_status >= 400:
                return httpx.Response(self.poll_status)
            queue = self._pending[token]
            payload = queue.pop(0) if len(queue) > 1 else queue[0]
            return httpx.Response(self.poll_status, json=payload)

        return httpx.Response(404)


def finished(status_id, stdout=None):
    return {"status": {"id": status_id, "description": ""}, "stdout": stdout}


def make_judge_client(server: FakeJudgeServer, max_attempts=10) -> JudgeClient:
    http_client = httpx.AsyncClient(transport=httpx.MockTransport(server.handler))
    return JudgeClient(http_client, base_url=JUDGE_URL, api_key="", poll_interval=0, max_attempts=max_attempts)

# ==================== FIXTURES ====================

@pytest.fixture
def fake_db():
    return FakeDatabase()


@pytest.fixture
def session():
    return SessionContext(user_id="user-1", username="asha", prn="PRN001", email="asha@example.com")


@pytest.fixture
def auth_headers(session):
    return {"Authorization": f"Bearer {session_manager.encode(session)}"}
