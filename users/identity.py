"""Who is making a request.

Cart and order endpoints need a signed-in user id; everything else about the
account lives in the auth backend and the profile record.
"""

from dataclasses import dataclass
from typing import Optional

from django.db import models


class AuthState(models.TextChoices):
    SIGNED_OUT = "signed_out", "Signed out"
    LOADING = "loading", "Loading"
    SIGNED_IN = "signed_in", "Signed in"


@dataclass(frozen=True)
class Identity:
    state: str
    user_id: Optional[int] = None
    email: Optional[str] = None

    @property
    def is_signed_in(self) -> bool:
        return self.state == AuthState.SIGNED_IN


def identity_for(request) -> Identity:
    """Resolve the caller's identity.

    A request that authentication has not run on yet reports ``loading``.
    """
    user = getattr(request, "user", None)
    if user is None:
        return Identity(AuthState.LOADING.value)
    if not user.is_authenticated:
        return Identity(AuthState.SIGNED_OUT.value)
    return Identity(AuthState.SIGNED_IN.value, user_id=user.id, email=user.email)
