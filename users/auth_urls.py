"""Authentication routes grouped under /api/v1/auth.

Includes registration, JWT obtain (sign-in), refresh, sign-out (blacklist)
and the current auth state.
"""

from django.urls import path

from .views import RefreshView, SessionView, SignInView, SignOutView, register

urlpatterns = [
    path("register/", register, name="register"),
    path("signin/", SignInView.as_view(), name="signin"),
    path("refresh/", RefreshView.as_view(), name="token_refresh"),
    path("signout/", SignOutView.as_view(), name="signout"),
    path("session/", SessionView.as_view(), name="session"),
]
