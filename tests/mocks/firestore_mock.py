"""
FakeFirestore: an async in-memory Firestore stand-in for unit tests.

One instance plays both roles the sync layer needs: the ``AsyncClient``
(collection(), document(), get/set/update/delete, add(), where/order_by/limit,
async stream(), batch()) and the watch ``Client`` (on_snapshot on documents
and queries).

SERVER_TIMESTAMP resolves to a fake clock that advances one second per write,
and Increment transforms are applied, so tests can inspect real values.
Failures are injected with ``fail(op, error)``.
"""

import copy
import operator
import uuid
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Dict, List, Optional

from google.api_core import exceptions as gcp_exceptions
from google.cloud import firestore

BASE_TIME = datetime(2024, 1, 1, tzinfo=timezone.utc)

_COMPARISONS = {
    "==": operator.eq,
    "!=": operator.ne,
    "<": operator.lt,
    "<=": operator.le,
    ">": operator.gt,
    ">=": operator.ge,
}


def at(seconds: int) -> datetime:
    """A timestamp ``seconds`` after the fake clock's start."""
    return BASE_TIME + timedelta(seconds=seconds)


class FakeWriteResult:
    def __init__(self, update_time: datetime):
        self.update_time = update_time


class FakeDocumentSnapshot:
    def __init__(self, doc_id: str, data: Optional[dict]):
        self.id = doc_id
        self.exists = data is not None
        self._data = copy.deepcopy(data) if data is not None else None

    def to_dict(self) -> Optional[dict]:
        return copy.deepcopy(self._data)


class FakeWatch:
    """Handle returned by on_snapshot; ``push()`` re-sends the current state."""

    def __init__(self, firestore_fake: "FakeFirestore", collection_name: str, snapshots_fn, callback):
        self._firestore = firestore_fake
        self.collection_name = collection_name
        self._snapshots_fn = snapshots_fn
        self.callback = callback
        self.unsubscribed = False

    def push(self) -> None:
        if not self.unsubscribed:
            self.callback(self._snapshots_fn(), [], self._firestore.now)

    def emit_raw(self, snapshots: List[Any]) -> None:
        self.callback(snapshots, [], self._firestore.now)

    def unsubscribe(self) -> None:
        self.unsubscribed = True


class FakeQuery:
    def __init__(self, firestore_fake: "FakeFirestore", collection_name: str, filters=(), orders=(), limit_count=None):
        self._firestore = firestore_fake
        self.collection_name = collection_name
        self.filters = list(filters)
        self.orders = list(orders)
        self.limit_count = limit_count

    def _copy(self, **changes) -> "FakeQuery":
        state = {"filters": self.filters, "orders": self.orders, "limit_count": self.limit_count, **changes}
        return FakeQuery(self._firestore, self.collection_name, **state)

    def where(self, filter=None):
        return self._copy(filters=[*self.filters, (filter.field_path, filter.op_string, filter.value)])

    def order_by(self, field_path: str, direction: str = firestore.Query.ASCENDING):
        return self._copy(orders=[*self.orders, (field_path, direction)])

    def limit(self, count: int):
        return self._copy(limit_count=count)

    def _matches(self, data: dict) -> bool:
        for field_path, op, value in self.filters:
            if op == "in":
                if data.get(field_path) not in value:
                    return False
            elif op == "array-contains":
                if value not in (data.get(field_path) or []):
                    return False
            elif field_path not in data or not _COMPARISONS[op](data[field_path], value):
                return False
        return True

    def results(self) -> List[FakeDocumentSnapshot]:
        documents = [
            (doc_id, data)
            for doc_id, data in self._firestore.documents(self.collection_name).items()
            if self._matches(data)
        ]
        for field_path, direction in reversed(self.orders):
            # Firestore drops documents missing an ordered field
            documents = [(doc_id, data) for doc_id, data in documents if field_path in data]
            documents.sort(key=lambda item: item[1][field_path], reverse=direction == firestore.Query.DESCENDING)
        if self.limit_count is not None:
            documents = documents[: self.limit_count]
        return [FakeDocumentSnapshot(doc_id, data) for doc_id, data in documents]

    async def stream(self):
        self._firestore.stream_calls.append(self)
        self._firestore.maybe_fail("stream", self.collection_name, self)
        for snapshot in self.results():
            yield snapshot

    def on_snapshot(self, callback) -> FakeWatch:
        return self._firestore.register_watch(self.collection_name, self.results, callback)


class FakeDocumentReference:
    def __init__(self, firestore_fake: "FakeFirestore", collection_name: str, doc_id: str):
        self._firestore = firestore_fake
        self.collection_name = collection_name
        self.id = doc_id

    def _snapshot(self) -> FakeDocumentSnapshot:
        return FakeDocumentSnapshot(self.id, self._firestore.documents(self.collection_name).get(self.id))

    async def get(self) -> FakeDocumentSnapshot:
        self._firestore.maybe_fail("get", self.collection_name, self)
        return self._snapshot()

    async def set(self, data: dict) -> FakeWriteResult:
        self._firestore.maybe_fail("set", self.collection_name, self)
        return self._firestore.apply_writes([("set", self, data)])

    async def update(self, data: dict) -> FakeWriteResult:
        self._firestore.maybe_fail("update", self.collection_name, self)
        return self._firestore.apply_writes([("update", self, data)])

    async def delete(self) -> FakeWriteResult:
        self._firestore.maybe_fail("delete", self.collection_name, self)
        return self._firestore.apply_writes([("delete", self, None)])

    def on_snapshot(self, callback) -> FakeWatch:
        return self._firestore.register_watch(self.collection_name, lambda: [self._snapshot()], callback)


class FakeCollectionReference(FakeQuery):
    def document(self, doc_id: Optional[str] = None) -> FakeDocumentReference:
        return FakeDocumentReference(self._firestore, self.collection_name, doc_id or uuid.uuid4().hex[:20])

    async def add(self, data: dict):
        self._firestore.maybe_fail("add", self.collection_name, self)
        doc_ref = self.document()
        write_result = self._firestore.apply_writes([("set", doc_ref, data)])
        return write_result.update_time, doc_ref


class FakeWriteBatch:
    def __init__(self, firestore_fake: "FakeFirestore"):
        self._firestore = firestore_fake
        self.writes = []

    def set(self, doc_ref: FakeDocumentReference, data: dict) -> None:
        self.writes.append(("set", doc_ref, data))

    def update(self, doc_ref: FakeDocumentReference, data: dict) -> None:
        self.writes.append(("update", doc_ref, data))

    def delete(self, doc_ref: FakeDocumentReference) -> None:
        self.writes.append(("delete", doc_ref, None))

    async def commit(self) -> List[FakeWriteResult]:
        self._firestore.maybe_fail("commit", None, self)
        write_result = self._firestore.apply_writes(self.writes)
        return [write_result for _ in self.writes]


class FakeFirestore:
    def __init__(self):
        self._collections: Dict[str, Dict[str, dict]] = {}
        self._failures: List[tuple] = []
        self._ticks = 0
        self.stream_calls: List[FakeQuery] = []
        self.watches: List[FakeWatch] = []

    # ---- client surface ----
    def collection(self, name: str) -> FakeCollectionReference:
        return FakeCollectionReference(self, name)

    def batch(self) -> FakeWriteBatch:
        return FakeWriteBatch(self)

    # ---- test helpers ----
    @property
    def now(self) -> datetime:
        return BASE_TIME + timedelta(seconds=self._ticks)

    def seed(self, collection_name: str, doc_id: str, data: dict) -> None:
        """Pre-populate a document for test setup."""
        self._collections.setdefault(collection_name, {})[doc_id] = copy.deepcopy(data)

    def documents(self, collection_name: str) -> Dict[str, dict]:
        return self._collections.get(collection_name, {})

    def stored(self, collection_name: str, doc_id: str) -> Optional[dict]:
        return copy.deepcopy(self.documents(collection_name).get(doc_id))

    def fail(
        self,
        op: str,
        error: Exception,
        collection_name: Optional[str] = None,
        when: Optional[Callable[[Any], bool]] = None,
    ) -> None:
        """Raise ``error`` for every matching ``op`` (get/set/update/delete/add/stream/commit)."""
        self._failures.append((op, error, collection_name, when))

    def clear_failures(self) -> None:
        self._failures.clear()

    def stream_calls_for(self, collection_name: str) -> List[FakeQuery]:
        return [query for query in self.stream_calls if query.collection_name == collection_name]

    # ---- internals ----
    def maybe_fail(self, op: str, collection_name: Optional[str], target: Any) -> None:
        for failing_op, error, failing_collection, when in self._failures:
            if failing_op != op:
                continue
            if failing_collection is not None and failing_collection != collection_name:
                continue
            if when is not None and not when(target):
                continue
            raise error

    def _resolve(self, value: Any, current: Any, commit_time: datetime) -> Any:
        if value is firestore.SERVER_TIMESTAMP:
            return commit_time
        if isinstance(value, firestore.Increment):
            return (current or 0) + value.value
        return copy.deepcopy(value)

    def apply_writes(self, writes: List[tuple]) -> FakeWriteResult:
        """Apply all writes atomically; nothing is written if any update targets a missing document."""
        for kind, doc_ref, _ in writes:
            if kind == "update" and doc_ref.id not in self.documents(doc_ref.collection_name):
                raise gcp_exceptions.NotFound(f"No document to update: {doc_ref.collection_name}/{doc_ref.id}")

        self._ticks += 1
        commit_time = self.now
        touched = set()
        for kind, doc_ref, data in writes:
            collection = self._collections.setdefault(doc_ref.collection_name, {})
            touched.add(doc_ref.collection_name)
            if kind == "delete":
                collection.pop(doc_ref.id, None)
            elif kind == "set":
                collection[doc_ref.id] = {key: self._resolve(value, None, commit_time) for key, value in data.items()}
            else:
                existing = collection[doc_ref.id]
                for key, value in data.items():
                    existing[key] = self._resolve(value, existing.get(key), commit_time)

        for watch in list(self.watches):
            if watch.collection_name in touched:
                watch.push()
        return FakeWriteResult(commit_time)

    def register_watch(self, collection_name: str, snapshots_fn, callback) -> FakeWatch:
        watch = FakeWatch(self, collection_name, snapshots_fn, callback)
        self.watches.append(watch)
        # initial snapshot, as the real watch stream sends one on attach
        watch.push()
        return watch
