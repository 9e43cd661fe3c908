"""Serializers for registration, sign-in and profile flows.

- RegistrationSerializer: creates an account with Django's password
  validators and a unique (case-insensitive) email.
- EmailTokenObtainPairSerializer: obtain JWTs with email and password.
- ProfileSerializer / ProfileUpdateSerializer: the profile record.
"""

from django.contrib.auth import get_user_model
from django.contrib.auth.password_validation import validate_password
from rest_framework import serializers
from rest_framework_simplejwt.tokens import RefreshToken

from .profiles import touch_last_login

User = get_user_model()

MOBILE_NUMBER_FIELD = dict(max_length=16, required=False, allow_blank=True)


class RegistrationSerializer(serializers.Serializer):
    """Action serializer to register a new user.

    The email doubles as the username. The password goes through
    ``set_password``.
    """

    email = serializers.EmailField()
    password = serializers.CharField(write_only=True)
    first_name = serializers.CharField(max_length=150, required=False, allow_blank=True, default="")
    last_name = serializers.CharField(max_length=150, required=False, allow_blank=True, default="")
    mobile_number = serializers.RegexField(r"^\+?\d{7,15}$", **MOBILE_NUMBER_FIELD)

    def validate_email(self, value: str) -> str:
        """Normalize and ensure the email is unique (case-insensitive)."""
        value = value.strip().lower()
        if User.objects.filter(email__iexact=value).exists() or User.objects.filter(username__iexact=value).exists():
            raise serializers.ValidationError("Email is already registered.")
        return value

    def validate_password(self, value: str) -> str:
        """Run Django's password validators against the provided password."""
        email = (self.initial_data.get("email") or "").strip().lower()
        validate_password(value, user=User(username=email, email=email))
        return value

    def create(self, validated_data):
        user = User(
            username=validated_data["email"],
            email=validated_data["email"],
            first_name=validated_data.get("first_name", ""),
            last_name=validated_data.get("last_name", ""),
        )
        user.set_password(validated_data["password"])
        user.save()
        return user


class SignOutSerializer(serializers.Serializer):
    """Request body for signing out: the refresh token to blacklist."""

    refresh = serializers.CharField()


class EmailTokenObtainPairSerializer(serializers.Serializer):
    """Obtain JWTs with email and password; records the sign-in time."""

    email = serializers.CharField()
    password = serializers.CharField(write_only=True)

    def validate(self, attrs):
        email = (attrs.get("email") or "").strip().lower()
        password = attrs.get("password") or ""
        if not email or not password:
            raise serializers.ValidationError({"detail": "email and password are required."})

        user = User.objects.filter(email__iexact=email).order_by("id").first()
        if not user or not user.check_password(password) or not user.is_active:
            raise serializers.ValidationError({"detail": "Invalid credentials."})

        self.user = user
        touch_last_login(user_id=user.id)
        refresh = RefreshToken.for_user(user)
        return {"access": str(refresh.access_token), "refresh": str(refresh)}


class ProfileSerializer(serializers.Serializer):
    user_id = serializers.IntegerField()
    email = serializers.EmailField()
    first_name = serializers.CharField(source="firstName", allow_blank=True)
    last_name = serializers.CharField(source="lastName", allow_blank=True)
    mobile_number = serializers.CharField(source="mobileNumber", allow_blank=True)
    created_at = serializers.CharField(source="createdAt", allow_null=True)
    last_login = serializers.CharField(source="lastLogin", allow_null=True)


class ProfileUpdateSerializer(serializers.Serializer):
    first_name = serializers.CharField(max_length=150, required=False, allow_blank=True)
    last_name = serializers.CharField(max_length=150, required=False, allow_blank=True)
    mobile_number = serializers.RegexField(r"^\+?\d{7,15}$", **MOBILE_NUMBER_FIELD)


class PasswordChangeSerializer(serializers.Serializer):
    current_password = serializers.CharField(write_only=True)
    new_password = serializers.CharField(write_only=True)
    confirm_password = serializers.CharField(write_only=True)

    def validate_current_password(self, value: str) -> str:
        if not self.context["user"].check_password(value):
            raise serializers.ValidationError("Current password is incorrect.")
        return value

    def validate(self, attrs):
        if attrs["new_password"] != attrs["confirm_password"]:
            raise serializers.ValidationError({"confirm_password": "Passwords do not match."})
        validate_password(attrs["new_password"], user=self.context["user"])
        return attrs
