# beer_me_up/conftest.py
"""
테스트 공용 픽스처

FakeFirestore는 이 패키지가 사용하는 Firestore API 일부만 메모리에서 흉내 냅니다:
collection/document/get/set(merge)/add, where(FieldFilter)/order_by/start_after/limit/stream, on_snapshot.
"""

import copy
import uuid
from datetime import datetime
from types import SimpleNamespace

import pytest
from google.cloud.firestore_v1.watch import ChangeType

from beer_me_up.models.beer import Beer, BeerCategory, BeerStyle
from beer_me_up.utils.datetime_utils import DateTimeUtils

_OPERATORS = {
    '>': lambda a, b: a > b,
    '>=': lambda a, b: a >= b,
    '<': lambda a, b: a < b,
    '<=': lambda a, b: a <= b,
    '==': lambda a, b: a == b,
}


def _deep_merge(target: dict, updates: dict) -> dict:
    merged = copy.deepcopy(target)
    for key, value in updates.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = copy.deepcopy(value)
    return merged


class FakeDocumentSnapshot:
    def __init__(self, reference, data):
        self.reference = reference
        self.id = reference.id
        self._data = data

    @property
    def exists(self) -> bool:
        return self._data is not None

    def to_dict(self):
        return copy.deepcopy(self._data) if self._data is not None else None

    def get(self, field):
        return self._data.get(field)


class FakeDocumentReference:
    def __init__(self, db, path: str):
        self._db = db
        self.path = path
        self.id = path.rsplit('/', 1)[-1]
        self.parent_path = path.rsplit('/', 1)[0]

    def get(self):
        if self._db.failing_reads > 0:
            self._db.failing_reads -= 1
            raise RuntimeError(f"read failed: {self.path}")
        return FakeDocumentSnapshot(self, copy.deepcopy(self._db.documents.get(self.path)))

    def set(self, data, merge=False):
        if self._db.failing_write_path and self._db.failing_write_path in self.path:
            raise RuntimeError(f"write failed: {self.path}")
        if self._db.drop_writes:
            return

        existing = self._db.documents.get(self.path)
        if merge and existing is not None:
            self._db.documents[self.path] = _deep_merge(existing, data)
        else:
            self._db.documents[self.path] = copy.deepcopy(data)
        self._db.notify(self, ChangeType.ADDED if existing is None else ChangeType.MODIFIED)

    def collection(self, name: str):
        return FakeCollectionReference(self._db, f"{self.path}/{name}")


class FakeQuery:
    def __init__(self, db, collection_path, filters=(), order=None, cursor=None, limit_count=None):
        self._db = db
        self.collection_path = collection_path
        self._filters = tuple(filters)
        self._order = order
        self._cursor = cursor
        self._limit = limit_count

    def _copy(self, **overrides):
        params = dict(
            filters=self._filters, order=self._order, cursor=self._cursor, limit_count=self._limit,
        )
        params.update(overrides)
        return FakeQuery(self._db, self.collection_path, **params)

    def where(self, filter=None):
        return self._copy(filters=self._filters + (filter,))

    def order_by(self, field_path, direction='ASCENDING'):
        return self._copy(order=(field_path, direction))

    def start_after(self, values):
        return self._copy(cursor=values)

    def limit(self, count):
        return self._copy(limit_count=count)

    def matches(self, data) -> bool:
        for field_filter in self._filters:
            value = data.get(field_filter.field_path)
            if value is None or not _OPERATORS[field_filter.op_string](value, field_filter.value):
                return False
        return True

    def stream(self):
        snapshots = [
            FakeDocumentSnapshot(FakeDocumentReference(self._db, path), copy.deepcopy(data))
            for path, data in self._db.documents.items()
            if path.rsplit('/', 1)[0] == self.collection_path and self.matches(data)
        ]

        if self._order:
            field_path, direction = self._order
            descending = direction == 'DESCENDING'
            snapshots.sort(key=lambda snap: snap.get(field_path), reverse=descending)

            if self._cursor is not None:
                boundary = self._cursor[field_path]
                if descending:
                    snapshots = [s for s in snapshots if s.get(field_path) < boundary]
                else:
                    snapshots = [s for s in snapshots if s.get(field_path) > boundary]

        if self._limit is not None:
            snapshots = snapshots[:self._limit]
        return iter(snapshots)

    def get(self):
        return list(self.stream())

    def on_snapshot(self, callback):
        watch = FakeWatch(self, callback)
        self._db.watches.append(watch)
        return watch


class FakeCollectionReference(FakeQuery):
    def __init__(self, db, path: str):
        super().__init__(db, path)

    def document(self, document_id=None):
        return FakeDocumentReference(self._db, f"{self.collection_path}/{document_id or uuid.uuid4().hex}")

    def add(self, data):
        ref = self.document()
        ref.set(data)
        return DateTimeUtils.now(), ref


class FakeWatch:
    def __init__(self, query, callback):
        self.query = query
        self.callback = callback
        self.is_active = True
        self.unsubscribe_count = 0

    def unsubscribe(self):
        self.unsubscribe_count += 1
        self.is_active = False

    def push(self, change_type, snapshot):
        """서버에서 변경 이벤트가 도착한 것처럼 콜백을 호출합니다."""
        change = SimpleNamespace(type=change_type, document=snapshot, old_index=-1, new_index=0)
        self.callback([snapshot], [change], DateTimeUtils.now())

    def deliver(self, ref, change_type):
        if ref.parent_path != self.query.collection_path:
            return
        data = ref._db.documents.get(ref.path)
        if data is None or not self.query.matches(data):
            return
        self.push(change_type, FakeDocumentSnapshot(ref, copy.deepcopy(data)))


class FakeFirestore:
    def __init__(self):
        self.documents = {}
        self.watches = []
        self.failing_reads = 0
        self.failing_write_path = None
        self.drop_writes = False

    def collection(self, name: str):
        return FakeCollectionReference(self, name)

    def notify(self, ref, change_type):
        for watch in list(self.watches):
            if watch.is_active:
                watch.deliver(ref, change_type)

    def snapshot(self, path: str):
        return FakeDocumentReference(self, path).get()

    def children(self, collection_path: str):
        return {
            path: data for path, data in self.documents.items()
            if path.rsplit('/', 1)[0] == collection_path
        }


@pytest.fixture
def fake_db():
    return FakeFirestore()


@pytest.fixture
def current_user():
    return SimpleNamespace(uid='user-1')


@pytest.fixture
def ale_category():
    return BeerCategory(id=1, name='British Origin Ales')


@pytest.fixture
def pale_ale_style(ale_category):
    return BeerStyle(
        id=25,
        name='American-Style Pale Ale',
        short_name='American Pale',
        description='Hoppy and golden.',
        category=ale_category,
    )


@pytest.fixture
def sample_beer(pale_ale_style, ale_category):
    return Beer(
        id='oeGSxs',
        name='Naughty 90',
        description='An American-style IPA.',
        abv=6.5,
        thumbnail_url='https://example.com/icon.png',
        style=pale_ale_style,
        category=ale_category,
    )


@pytest.fixture
def plain_beer():
    return Beer(id='c4f2KE', name='House Lager')


def make_history_entry(beer_id: str, checkin_date: datetime) -> dict:
    return {
        'date': checkin_date,
        'beer': {
            'id': beer_id,
            'name': f'Beer {beer_id}',
            'description': None,
            'abv': None,
            'thumbnail_url': None,
            'style': None,
            'category': None,
        },
        'beer_id': beer_id,
        'beer_style_id': None,
        'beer_category_id': None,
        'beer_version': 1,
    }
