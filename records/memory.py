"""In-process record store used in development and tests."""

import copy
import itertools
import threading
from typing import Any, Optional

from .store import OnChange, RecordStore, Unsubscribe, split_path


def _get(tree: dict, parts: list[str]) -> Optional[Any]:
    node: Any = tree
    for part in parts:
        if not isinstance(node, dict) or part not in node:
            return None
        node = node[part]
    return node


def _prune(value: Any) -> Any:
    """Drop ``None`` leaves and empty containers, like the hosted database does."""

    if isinstance(value, dict):
        pruned = {str(k): _prune(v) for k, v in value.items()}
        pruned = {k: v for k, v in pruned.items() if v is not None}
        return pruned or None
    if isinstance(value, (list, tuple)):
        items = [_prune(v) for v in value]
        return items or None
    return value


def _set(tree: dict, parts: list[str], value: Any) -> None:
    if not parts:
        tree.clear()
        if isinstance(value, dict):
            tree.update(value)
        return
    node = tree
    trail = []
    for part in parts[:-1]:
        child = node.get(part)
        if not isinstance(child, dict):
            child = {}
            node[part] = child
        trail.append((node, part))
        node = child
    if value is None:
        node.pop(parts[-1], None)
    else:
        node[parts[-1]] = value
    # Remove parents left empty by a delete
    for parent, key in reversed(trail):
        if parent[key]:
            break
        del parent[key]


def _overlaps(a: list[str], b: list[str]) -> bool:
    n = min(len(a), len(b))
    return a[:n] == b[:n]


class InMemoryRecordStore(RecordStore):
    """Nested-dict store with synchronous change fan-out.

    Subscribers are notified for any write that touches their path, an
    ancestor of it, or a descendant of it.
    """

    def __init__(self, initial: Optional[dict] = None):
        self._tree: dict = _prune(copy.deepcopy(initial or {})) or {}
        self._lock = threading.RLock()
        self._subscribers: dict[int, tuple[list[str], OnChange]] = {}
        self._ids = itertools.count(1)

    def read(self, path: str) -> Optional[Any]:
        parts = split_path(path)
        with self._lock:
            return copy.deepcopy(_get(self._tree, parts))

    def write(self, path: str, value: Any) -> None:
        parts = split_path(path)
        with self._lock:
            _set(self._tree, parts, _prune(copy.deepcopy(value)))
        self._notify(parts)

    def update(self, path: str, values: dict) -> None:
        parts = split_path(path)
        with self._lock:
            for key, value in values.items():
                _set(self._tree, parts + split_path(key), _prune(copy.deepcopy(value)))
        self._notify(parts)

    def subscribe(self, path: str, on_change: OnChange) -> Unsubscribe:
        parts = split_path(path)
        with self._lock:
            sub_id = next(self._ids)
            self._subscribers[sub_id] = (parts, on_change)
            current = copy.deepcopy(_get(self._tree, parts))
        on_change(current)

        def unsubscribe() -> None:
            with self._lock:
                self._subscribers.pop(sub_id, None)

        return unsubscribe

    def _notify(self, changed: list[str]) -> None:
        with self._lock:
            targets = [
                (sub_id, parts, callback)
                for sub_id, (parts, callback) in self._subscribers.items()
                if _overlaps(parts, changed)
            ]
            snapshots = [(sub_id, copy.deepcopy(_get(self._tree, parts)), cb) for sub_id, parts, cb in targets]
        for sub_id, snapshot, callback in snapshots:
            # Skip subscribers released while earlier callbacks ran
            if sub_id in self._subscribers:
                callback(snapshot)
