"""Scoped throttling for the public (anonymous) endpoints.

Rates are looked up in settings on every request instead of once at import,
so ``override_settings`` in tests and per-environment settings modules both
take effect. A scope without a configured rate is not throttled.
"""

from django.conf import settings
from rest_framework.throttling import ScopedRateThrottle


class SettingsScopedRateThrottle(ScopedRateThrottle):
    def get_rate(self):
        rates = getattr(settings, "REST_FRAMEWORK", {}).get("DEFAULT_THROTTLE_RATES", {})
        return rates.get(self.scope)
