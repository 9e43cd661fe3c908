"""Account routes grouped under /api/v1/account: profile and password change."""

from django.urls import path

from .views import PasswordChangeView, ProfileView

urlpatterns = [
    path("profile/", ProfileView.as_view(), name="profile"),
    path("password/", PasswordChangeView.as_view(), name="password_change"),
]
