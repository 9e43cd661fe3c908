"""Firebase Realtime Database backend over its REST and streaming API.

Reads and writes map to ``GET``/``PUT``/``PATCH`` on ``<db>/<path>.json``.
Subscriptions open a ``text/event-stream`` request on a daemon thread and
apply ``put``/``patch`` events to a local copy of the subscribed subtree, so
every callback receives the full value rather than a partial change.
"""

import copy
import json
import logging
import threading
from typing import Any, Iterable, Optional

import requests

from .memory import _get, _prune, _set
from .store import OnChange, RecordStore, RecordStoreError, Unsubscribe, split_path

logger = logging.getLogger("foodhub.records")

STREAM_READ_TIMEOUT = 90  # server sends keep-alive every 30s


def iter_sse_events(lines: Iterable[str]):
    """Yield ``(event, data)`` pairs from server-sent event lines."""

    event = None
    data: list[str] = []
    for line in lines:
        if line is None:
            continue
        if isinstance(line, bytes):
            line = line.decode("utf-8")
        if not line:
            if event is not None or data:
                yield event or "message", "\n".join(data)
            event, data = None, []
            continue
        if line.startswith(":"):
            continue
        field, _, value = line.partition(":")
        value = value[1:] if value.startswith(" ") else value
        if field == "event":
            event = value
        elif field == "data":
            data.append(value)
    if event is not None or data:
        yield event or "message", "\n".join(data)


class _Subscription:
    def __init__(self, store: "FirebaseRecordStore", path: str, on_change: OnChange):
        self.store = store
        self.path = path
        self.on_change = on_change
        self.tree: dict = {}
        self.stopped = False
        self.lock = threading.RLock()
        self.response: Optional[requests.Response] = None
        self.thread = threading.Thread(target=self.run, name=f"firebase-sub:{path}", daemon=True)

    def start(self) -> None:
        self.thread.start()

    def stop(self) -> None:
        with self.lock:
            self.stopped = True
            response = self.response
        if response is not None:
            try:
                response.close()
            except Exception:
                logger.debug("records.stream_close_failed", exc_info=True)

    def emit(self) -> None:
        with self.lock:
            if self.stopped:
                return
            self.on_change(copy.deepcopy(self.tree.get("value")))

    def apply(self, event: str, payload: Any) -> None:
        parts = ["value"] + split_path(payload.get("path", "/"))
        if event == "put":
            _set(self.tree, parts, _prune(payload.get("data")))
        else:
            for key, value in (payload.get("data") or {}).items():
                _set(self.tree, parts + split_path(key), _prune(value))
        self.emit()

    def run(self) -> None:
        try:
            response = self.store.session.get(
                self.store.url_for(self.path),
                params=self.store.params(),
                headers={"Accept": "text/event-stream"},
                stream=True,
                timeout=(self.store.timeout, STREAM_READ_TIMEOUT),
            )
            with self.lock:
                if self.stopped:
                    response.close()
                    return
                self.response = response
            response.raise_for_status()
            for event, data in iter_sse_events(response.iter_lines(decode_unicode=True)):
                if self.stopped:
                    break
                if event in ("put", "patch"):
                    self.apply(event, json.loads(data) if data else {})
                elif event in ("cancel", "auth_revoked"):
                    logger.warning(
                        "records.stream_closed_by_server",
                        extra={"event": "records.stream_closed_by_server", "path": self.path, "reason": event},
                    )
                    break
        except (requests.RequestException, ValueError, RecordStoreError):
            if not self.stopped:
                logger.exception(
                    "records.stream_failed", extra={"event": "records.stream_failed", "path": self.path}
                )
        finally:
            with self.lock:
                self.stopped = True


class FirebaseRecordStore(RecordStore):
    """Record store backed by a Firebase Realtime Database instance."""

    def __init__(
        self,
        *,
        database_url: str,
        auth_token: Optional[str] = None,
        timeout: float = 10,
        session: Optional[requests.Session] = None,
    ):
        if not database_url:
            raise RecordStoreError("FIREBASE_DATABASE_URL is not configured")
        self.database_url = database_url.rstrip("/")
        self.auth_token = auth_token
        self.timeout = timeout
        self.session = session or requests.Session()

    def url_for(self, path: str) -> str:
        parts = split_path(path)
        return f"{self.database_url}/{'/'.join(parts)}.json"

    def params(self) -> dict:
        return {"auth": self.auth_token} if self.auth_token else {}

    def _request(self, method: str, path: str, payload: Any = None) -> Any:
        try:
            resp = self.session.request(
                method,
                self.url_for(path),
                params=self.params(),
                data=None if payload is None else json.dumps(payload),
                timeout=self.timeout,
            )
            resp.raise_for_status()
            return resp.json() if resp.content else None
        except requests.RequestException as exc:
            raise RecordStoreError(f"{method} {path} failed: {exc}") from exc
        except ValueError as exc:
            raise RecordStoreError(f"{method} {path} returned invalid JSON") from exc

    def read(self, path: str) -> Optional[Any]:
        return self._request("GET", path)

    def write(self, path: str, value: Any) -> None:
        if value is None:
            self._request("DELETE", path)
            return
        self._request("PUT", path, value)

    def update(self, path: str, values: dict) -> None:
        self._request("PATCH", path, values)

    def subscribe(self, path: str, on_change: OnChange) -> Unsubscribe:
        sub = _Subscription(self, path, on_change)
        sub.start()
        return sub.stop
