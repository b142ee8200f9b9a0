"""
In-memory document store.

Implements the subset of the pymongo Collection API the services use
(find / find_one / insert_one / update_one / delete_one / count_documents)
so the API can run without a MongoDB server - in tests and with
STORE_BACKEND=memory for local front-end work.

Supported query operators: equality (dotted paths too), $eq, $ne, $gt, $gte,
$lt, $lte, $in, $nin, $regex (+ $options "i"). Supported update operators: $set, $inc.
Every operation holds the collection lock, which gives the same per-document
atomicity MongoDB provides.
"""

import copy
import re
import threading
from typing import Any, Dict, Iterable, List, Optional, Tuple

from bson import ObjectId
from pymongo.results import InsertOneResult, UpdateResult, DeleteResult

_MISSING = object()


def _get_path(doc: dict, path: str) -> Any:
    value: Any = doc
    for part in path.split("."):
        if not isinstance(value, dict) or part not in value:
            return _MISSING
        value = value[part]
    return value


def _set_path(doc: dict, path: str, value: Any) -> None:
    parts = path.split(".")
    target = doc
    for part in parts[:-1]:
        target = target.setdefault(part, {})
    target[parts[-1]] = value


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _comparable(a: Any, b: Any) -> bool:
    if _is_number(a) and _is_number(b):
        return True
    return type(a) is type(b) and not isinstance(a, (dict, list))


def _match_operator(value: Any, op: str, arg: Any, condition: dict) -> bool:
    if op == "$eq":
        return value is not _MISSING and value == arg
    if op == "$ne":
        return value is _MISSING or value != arg
    if op == "$in":
        return value is not _MISSING and value in arg
    if op == "$nin":
        return value is _MISSING or value not in arg
    if op in ("$gt", "$gte", "$lt", "$lte"):
        if value is _MISSING or not _comparable(value, arg):
            return False
        return {
            "$gt": value > arg,
            "$gte": value >= arg,
            "$lt": value < arg,
            "$lte": value <= arg,
        }[op]
    if op == "$regex":
        if not isinstance(value, str):
            return False
        flags = re.IGNORECASE if "i" in condition.get("$options", "") else 0
        return re.search(arg, value, flags) is not None
    if op == "$options":
        return True
    raise ValueError(f"Unsupported query operator: {op}")


def matches(doc: dict, query: Optional[dict]) -> bool:
    """True when the document satisfies every clause of the query."""
    for path, condition in (query or {}).items():
        value = _get_path(doc, path)
        if isinstance(condition, dict) and condition and all(k.startswith("$") for k in condition):
            if not all(_match_operator(value, op, arg, condition) for op, arg in condition.items()):
                return False
        elif value is _MISSING or value != condition:
            return False
    return True


def _sort_key(path: str):
    def key(doc: dict) -> Tuple[int, Any]:
        value = _get_path(doc, path)
        if value is _MISSING or value is None:
            return (0, 0)
        if _is_number(value):
            return (1, value)
        if isinstance(value, str):
            return (2, value)
        return (3, str(value))
    return key


class MemoryCollection:
    """Thread-safe list-of-dicts collection."""

    def __init__(self, name: str):
        self.name = name
        self._docs: List[dict] = []
        self._lock = threading.RLock()

    def _find_index(self, query: Optional[dict]) -> Optional[int]:
        for i, doc in enumerate(self._docs):
            if matches(doc, query):
                return i
        return None

    def find(
        self,
        filter: Optional[dict] = None,
        sort: Optional[Iterable[Tuple[str, int]]] = None,
        skip: int = 0,
        limit: int = 0,
    ) -> List[dict]:
        with self._lock:
            docs = [copy.deepcopy(d) for d in self._docs if matches(d, filter)]
        # Apply sort keys last-to-first so the first key wins (stable sort)
        for path, direction in reversed(list(sort or [])):
            docs.sort(key=_sort_key(path), reverse=direction < 0)
        if skip:
            docs = docs[skip:]
        if limit:
            docs = docs[:limit]
        return docs

    def find_one(self, filter: Optional[dict] = None) -> Optional[dict]:
        with self._lock:
            index = self._find_index(filter)
            return copy.deepcopy(self._docs[index]) if index is not None else None

    def insert_one(self, document: dict) -> InsertOneResult:
        if "_id" not in document:
            document["_id"] = ObjectId()
        with self._lock:
            if self._find_index({"_id": document["_id"]}) is not None:
                raise ValueError(f"Duplicate _id: {document['_id']}")
            self._docs.append(copy.deepcopy(document))
        return InsertOneResult(document["_id"], True)

    def update_one(self, filter: dict, update: Dict[str, dict]) -> UpdateResult:
        with self._lock:
            index = self._find_index(filter)
            if index is None:
                return UpdateResult({"n": 0, "nModified": 0, "ok": 1.0}, True)

            doc = self._docs[index]
            before = copy.deepcopy(doc)
            for op, fields in update.items():
                for path, value in fields.items():
                    if op == "$set":
                        _set_path(doc, path, copy.deepcopy(value))
                    elif op == "$inc":
                        current = _get_path(doc, path)
                        _set_path(doc, path, value if current is _MISSING else current + value)
                    else:
                        raise ValueError(f"Unsupported update operator: {op}")

            modified = 0 if doc == before else 1
            return UpdateResult({"n": 1, "nModified": modified, "ok": 1.0}, True)

    def delete_one(self, filter: dict) -> DeleteResult:
        with self._lock:
            index = self._find_index(filter)
            if index is None:
                return DeleteResult({"n": 0, "ok": 1.0}, True)
            del self._docs[index]
            return DeleteResult({"n": 1, "ok": 1.0}, True)

    def count_documents(self, filter: Optional[dict] = None) -> int:
        with self._lock:
            return sum(1 for d in self._docs if matches(d, filter))

    def create_index(self, keys, **kwargs) -> str:
        # Indexes are a no-op in memory
        if isinstance(keys, str):
            return f"{keys}_1"
        return "_".join(f"{k}_{d}" for k, d in keys)


class MemoryStore:
    """Store handle with the same shape as MongoStore."""

    def __init__(self, jobs_name: str = "jobs", applications_name: str = "job_applications"):
        self.jobs = MemoryCollection(jobs_name)
        self.applications = MemoryCollection(applications_name)

    def ping(self) -> bool:
        return True

    def init_indexes(self) -> None:
        pass

    def close(self) -> None:
        pass
