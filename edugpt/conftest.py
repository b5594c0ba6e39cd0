# edugpt/conftest.py
"""
공통 pytest 픽스처

Firestore와 Firebase Auth는 실제 서비스 대신 메모리 기반 테스트 더블로 대체합니다.
create_app('testing')은 Firebase Admin SDK를 초기화하지 않으므로, 반드시 아래 픽스처로
firestore.client / auth.verify_id_token 을 먼저 교체한 뒤 앱을 생성해야 합니다.
"""

import copy
import pytest
from google.api_core.exceptions import NotFound
from firebase_admin import firestore, auth as firebase_auth

from edugpt import create_app
from edugpt.utils.datetime_utils import DateTimeUtils


class FakeSnapshot:
    def __init__(self, doc_id, data):
        self.id = doc_id
        self._data = data

    @property
    def exists(self):
        return self._data is not None

    def to_dict(self):
        return copy.deepcopy(self._data) if self._data is not None else None


class FakeDocumentReference:
    def __init__(self, db, collection_name, doc_id):
        self._db = db
        self._collection = collection_name
        self.id = doc_id

    def get(self):
        self._db._record('get', self._collection, self.id)
        return FakeSnapshot(self.id, self._db.data(self._collection, self.id))

    def set(self, data, merge=False):
        self._db._record('set', self._collection, self.id)
        current = self._db._docs.setdefault(self._collection, {}).get(self.id)
        if merge and current is not None:
            self._db._docs[self._collection][self.id] = _merge(current, data)
        else:
            self._db._docs[self._collection][self.id] = _merge({}, data)

    def update(self, data):
        self._db._record('update', self._collection, self.id)
        current = self._db._docs.get(self._collection, {}).get(self.id)
        if current is None:
            raise NotFound(f"No document to update: {self._collection}/{self.id}")
        for key, value in data.items():
            current[key] = _resolve(current.get(key), value)


class FakeCollectionReference:
    def __init__(self, db, name):
        self._db = db
        self.id = name

    def document(self, doc_id):
        return FakeDocumentReference(self._db, self.id, doc_id)


class FakeFirestore:
    """
    collection().document().get/set/update 만 지원하는 메모리 기반 Firestore.
    SERVER_TIMESTAMP, ArrayUnion, Increment 를 실제 서버와 같은 의미로 적용합니다.
    """

    def __init__(self):
        self._docs = {}
        self.operations = []
        self.fail_on = set()

    def collection(self, name):
        return FakeCollectionReference(self, name)

    def seed(self, collection_name, doc_id, data):
        self._docs.setdefault(collection_name, {})[doc_id] = copy.deepcopy(data)

    def data(self, collection_name, doc_id):
        doc = self._docs.get(collection_name, {}).get(doc_id)
        return copy.deepcopy(doc) if doc is not None else None

    def ops(self, collection_name=None):
        return [op for op in self.operations if collection_name is None or op[1] == collection_name]

    def _record(self, op, collection_name, doc_id):
        if (op, collection_name) in self.fail_on:
            raise RuntimeError(f"Injected failure: {op} {collection_name}/{doc_id}")
        self.operations.append((op, collection_name, doc_id))


def _resolve(existing, value):
    if value is firestore.SERVER_TIMESTAMP:
        return DateTimeUtils.now()
    if isinstance(value, firestore.ArrayUnion):
        result = list(existing or [])
        for item in value.values:
            if item not in result:
                result.append(copy.deepcopy(item))
        return result
    if isinstance(value, firestore.Increment):
        return (existing or 0) + value.value
    return copy.deepcopy(value)


def _merge(current, data):
    merged = copy.deepcopy(current)
    for key, value in data.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _merge(merged[key], value)
        elif isinstance(value, dict):
            merged[key] = _merge({}, value)
        else:
            merged[key] = _resolve(merged.get(key), value)
    return merged


@pytest.fixture
def fake_db(monkeypatch):
    db = FakeFirestore()
    monkeypatch.setattr(firestore, 'client', lambda *args, **kwargs: db)
    return db


@pytest.fixture
def id_tokens(monkeypatch):
    """토큰 문자열 -> 디코딩된 클레임. 등록되지 않은 토큰은 InvalidIdTokenError."""
    tokens = {}

    def verify_id_token(token, *args, **kwargs):
        if token == 'expired-token':
            raise firebase_auth.ExpiredIdTokenError('Token expired', None)
        if token not in tokens:
            raise firebase_auth.InvalidIdTokenError('Invalid token')
        return dict(tokens[token])

    monkeypatch.setattr(firebase_auth, 'verify_id_token', verify_id_token)
    return tokens


@pytest.fixture
def app(fake_db, id_tokens):
    app = create_app('testing')
    yield app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def auth_headers(id_tokens):
    def make(uid='uid-123', email='a@b.com', name='Ann Lee', sign_in_provider='password'):
        token = f'token-{uid}'
        id_tokens[token] = {
            'uid': uid,
            'email': email,
            'name': name,
            'firebase': {'sign_in_provider': sign_in_provider}
        }
        return {'Authorization': f'Bearer {token}'}
    return make
