"""Durable client-side slots holding the serialized cart.

A slot is a tiny key/value store that survives between sessions:
``get(key)``, ``set(key, value, ttl)``, ``delete(key)``. Over HTTP the slot is
the browser cookie jar; writes are buffered on the slot and flushed onto the
response with ``apply``.
"""

from datetime import timedelta
from typing import Optional

from django.conf import settings
from django.core import signing


class CorruptSlotError(ValueError):
    """Raised when a stored value cannot be trusted (e.g. bad signature)."""


class DurableSlot:
    def get(self, key: str) -> Optional[str]:
        raise NotImplementedError

    def set(self, key: str, value: str, ttl: timedelta) -> None:
        raise NotImplementedError

    def delete(self, key: str) -> None:
        raise NotImplementedError


class InMemorySlot(DurableSlot):
    """Process-local slot; expiry is recorded but not enforced."""

    def __init__(self, initial: Optional[dict] = None):
        self.values: dict[str, str] = dict(initial or {})
        self.ttls: dict[str, timedelta] = {}

    def get(self, key: str) -> Optional[str]:
        return self.values.get(key)

    def set(self, key: str, value: str, ttl: timedelta) -> None:
        self.values[key] = value
        self.ttls[key] = ttl

    def delete(self, key: str) -> None:
        self.values.pop(key, None)
        self.ttls.pop(key, None)


class CookieSlot(DurableSlot):
    """Signed-cookie slot bound to one request/response cycle.

    Reads see pending writes first. Only the last write per key reaches the
    response.
    """

    _DELETED = object()

    def __init__(self, request, *, salt: Optional[str] = None):
        self.request = request
        self.salt = salt or getattr(settings, "CART_COOKIE_SALT", "cart")
        self.pending: dict[str, tuple[object, Optional[timedelta]]] = {}

    def get(self, key: str) -> Optional[str]:
        if key in self.pending:
            value, _ = self.pending[key]
            return None if value is self._DELETED else value
        if not self.request.COOKIES.get(key):
            return None
        try:
            return self.request.get_signed_cookie(key, salt=self.salt)
        except signing.BadSignature as exc:
            raise CorruptSlotError(f"Bad signature for cookie {key}") from exc

    def set(self, key: str, value: str, ttl: timedelta) -> None:
        self.pending[key] = (value, ttl)

    def delete(self, key: str) -> None:
        self.pending[key] = (self._DELETED, None)

    def apply(self, response):
        """Write buffered changes onto ``response`` and return it."""

        for key, (value, ttl) in self.pending.items():
            if value is self._DELETED:
                response.delete_cookie(key, samesite="Lax")
            else:
                response.set_signed_cookie(
                    key,
                    value,
                    salt=self.salt,
                    max_age=int(ttl.total_seconds()),
                    httponly=True,
                    samesite="Lax",
                    secure=getattr(settings, "SESSION_COOKIE_SECURE", False),
                )
        self.pending.clear()
        return response
