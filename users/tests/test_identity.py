from types import SimpleNamespace

from django.contrib.auth.models import AnonymousUser
from users.identity import AuthState, identity_for


def test_request_before_authentication_is_loading():
    identity = identity_for(SimpleNamespace())
    assert identity.state == AuthState.LOADING
    assert not identity.is_signed_in


def test_anonymous_request_is_signed_out():
    identity = identity_for(SimpleNamespace(user=AnonymousUser()))
    assert identity.state == AuthState.SIGNED_OUT
    assert identity.user_id is None


def test_authenticated_request_is_signed_in():
    user = SimpleNamespace(is_authenticated=True, id=7, email="diner@example.com")
    identity = identity_for(SimpleNamespace(user=user))
    assert identity.is_signed_in
    assert (identity.user_id, identity.email) == (7, "diner@example.com")
