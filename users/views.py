"""Users app API views.

Endpoints include:
- register: creates an account and its profile record.
- signin / refresh / signout: JWT pair lifecycle; sign-out also drops the
  caller's saved cart.
- session: the caller's auth state.
- profile: read and update the profile record.
- password: change the password with the current one.
"""

from cart.services import discard_cart
from cart.slots import CookieSlot
from drf_spectacular.utils import OpenApiExample, OpenApiResponse, extend_schema
from records.store import RecordStoreError
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes, throttle_classes
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework.throttling import ScopedRateThrottle
from rest_framework.views import APIView
from rest_framework_simplejwt.settings import api_settings as jwt_settings
from rest_framework_simplejwt.tokens import RefreshToken, TokenError
from rest_framework_simplejwt.views import TokenObtainPairView, TokenRefreshView

from .identity import identity_for
from .logging import log_auth_event
from .profiles import account_profile, create_profile, get_profile, update_profile
from .serializers import (
    EmailTokenObtainPairSerializer,
    PasswordChangeSerializer,
    ProfileSerializer,
    ProfileUpdateSerializer,
    RegistrationSerializer,
    SignOutSerializer,
)

PROFILE_UNAVAILABLE = "Profile is temporarily unavailable."


def _profile_response(user, profile: dict, code=status.HTTP_200_OK) -> Response:
    return Response(ProfileSerializer({"user_id": user.id, **profile}).data, status=code)


@extend_schema(
    tags=["User Endpoints"],
    summary="Register",
    request=RegistrationSerializer,
    responses={201: ProfileSerializer, 400: OpenApiResponse(description="Validation errors")},
    examples=[
        OpenApiExample(
            "Register",
            value={
                "email": "juan@example.com",
                "password": "S3cure-pass!",
                "first_name": "Juan",
                "last_name": "Dela Cruz",
                "mobile_number": "09171234567",
            },
            request_only=True,
        )
    ],
)
@api_view(["POST"])
@permission_classes([AllowAny])
@throttle_classes([ScopedRateThrottle])
def register(request):
    """Create an account and write its profile record."""
    serializer = RegistrationSerializer(data=request.data)
    if not serializer.is_valid():
        log_auth_event("register", request, status="invalid")
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    user = serializer.save()
    try:
        profile = create_profile(user=user, mobile_number=serializer.validated_data.get("mobile_number", ""))
    except RecordStoreError:
        log_auth_event("register", request, user=user, status="profile_failed")
        profile = account_profile(user)
    else:
        log_auth_event("register", request, user=user, status="success")
    return _profile_response(user, profile, status.HTTP_201_CREATED)


register.throttle_scope = "register"


class SessionView(APIView):
    """Report whether the caller is signed in."""

    permission_classes = [AllowAny]
    throttle_classes = [ScopedRateThrottle]
    throttle_scope = "profile"

    @extend_schema(
        tags=["User Endpoints"],
        summary="Current auth state",
        examples=[
            OpenApiExample(
                "Signed in", value={"state": "signed_in", "user_id": 1, "email": "juan@example.com"}
            )
        ],
    )
    def get(self, request):
        identity = identity_for(request)
        return Response({"state": identity.state, "user_id": identity.user_id, "email": identity.email})


class ProfileView(APIView):
    """Read or update the authenticated user's profile record."""

    permission_classes = [IsAuthenticated]
    throttle_classes = [ScopedRateThrottle]
    throttle_scope = "profile"

    @extend_schema(tags=["User Endpoints"], summary="Get profile", responses={200: ProfileSerializer})
    def get(self, request):
        try:
            profile = get_profile(user=request.user)
        except RecordStoreError:
            return Response({"detail": PROFILE_UNAVAILABLE}, status=status.HTTP_503_SERVICE_UNAVAILABLE)
        log_auth_event("profile", request, user=request.user)
        return _profile_response(request.user, profile)

    @extend_schema(
        tags=["User Endpoints"],
        summary="Update profile",
        request=ProfileUpdateSerializer,
        responses={200: ProfileSerializer},
    )
    def patch(self, request):
        serializer = ProfileUpdateSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        try:
            profile = update_profile(user=request.user, changes=serializer.validated_data)
        except RecordStoreError:
            log_auth_event("profile_update", request, user=request.user, status="failed")
            return Response({"detail": PROFILE_UNAVAILABLE}, status=status.HTTP_503_SERVICE_UNAVAILABLE)
        log_auth_event("profile_update", request, user=request.user)
        return _profile_response(request.user, profile)


class PasswordChangeView(APIView):
    """Change the password after checking the current one."""

    permission_classes = [IsAuthenticated]
    throttle_classes = [ScopedRateThrottle]
    throttle_scope = "password_change"

    @extend_schema(tags=["User Endpoints"], summary="Change password", request=PasswordChangeSerializer)
    def post(self, request):
        serializer = PasswordChangeSerializer(data=request.data, context={"user": request.user})
        if not serializer.is_valid():
            log_auth_event("password_change", request, user=request.user, status="invalid")
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
        request.user.set_password(serializer.validated_data["new_password"])
        request.user.save(update_fields=["password"])
        log_auth_event("password_change", request, user=request.user)
        return Response({"detail": "Password has been changed."})


class SignOutView(APIView):
    """Blacklist the refresh token and drop the user's saved cart."""

    throttle_classes = [ScopedRateThrottle]
    throttle_scope = "signout"
    permission_classes = [AllowAny]

    @extend_schema(tags=["User Endpoints"], request=SignOutSerializer)
    def post(self, request):
        serializer = SignOutSerializer(data=request.data)
        if not serializer.is_valid():
            return Response({"detail": "Refresh token is required."}, status=status.HTTP_400_BAD_REQUEST)
        try:
            token = RefreshToken(serializer.validated_data["refresh"])
            token.blacklist()
        except TokenError:
            log_auth_event("signout", request, status="invalid_token")
            return Response({"detail": "Invalid token."}, status=status.HTTP_400_BAD_REQUEST)
        user_id = token.payload.get(jwt_settings.USER_ID_CLAIM)
        slot = CookieSlot(request)
        discard_cart(slot=slot, user_id=user_id)
        log_auth_event("signout", request, status="success", extra={"user_id": user_id})
        return slot.apply(Response({"detail": "Signed out."}, status=status.HTTP_205_RESET_CONTENT))


class SignInView(TokenObtainPairView):
    throttle_classes = [ScopedRateThrottle]
    throttle_scope = "signin"
    serializer_class = EmailTokenObtainPairSerializer

    @extend_schema(tags=["User Endpoints"])
    def post(self, request, *args, **kwargs):
        resp = super().post(request, *args, **kwargs)
        status_label = "success" if resp.status_code == 200 else "failed"
        log_auth_event("signin", request, status=status_label)
        return resp


class RefreshView(TokenRefreshView):
    throttle_classes = [ScopedRateThrottle]
    throttle_scope = "token_refresh"

    @extend_schema(tags=["User Endpoints"])
    def post(self, request, *args, **kwargs):
        resp = super().post(request, *args, **kwargs)
        status_label = "success" if resp.status_code == 200 else "failed"
        log_auth_event("token_refresh", request, status=status_label)
        return resp
