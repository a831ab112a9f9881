"""Serializers for authentication flows (register, login, profile)."""

from typing import cast

from django.contrib.auth import get_user_model
from django.db import IntegrityError, transaction
from rest_framework import serializers
from rest_framework.exceptions import AuthenticationFailed

from access_control.roles import SELF_ASSIGNABLE_ROLES, Role
from core.exceptions import Conflict
from .managers import UserManager

User = get_user_model()


class RegisterSerializer(serializers.Serializer):
    """Validate and create an account with a self-assignable role."""

    name = serializers.CharField(max_length=150)
    email = serializers.EmailField()
    password = serializers.CharField(write_only=True, min_length=6, max_length=100)
    role = serializers.ChoiceField(
        choices=[(role.value, role.label) for role in SELF_ASSIGNABLE_ROLES],
        required=False,
        default=Role.READER.value,
        error_messages={"invalid_choice": "Role must be either AUTHOR or READER."},
    )

    @staticmethod
    def validate_email(value):
        """Normalise the address and reject ones already registered (409)."""
        email = UserManager.normalize_user_email(value)
        if User.objects.filter(email=email).exists():
            raise Conflict("An account with this email already exists.", code="duplicate_email")
        return email

    def create(self, validated_data):
        """Create the account with a hashed password."""
        manager = cast(UserManager, User.objects)
        try:
            with transaction.atomic():
                return manager.create_user(**validated_data)
        except IntegrityError as exc:
            raise Conflict("An account with this email already exists.", code="duplicate_email") from exc


class LoginSerializer(serializers.Serializer):
    """Authenticate a user via email/password using bcrypt verification."""

    email = serializers.EmailField()
    password = serializers.CharField(write_only=True)

    def validate(self, attrs):
        """Authenticate credentials and attach the user to validated_data."""
        email = UserManager.normalize_user_email(attrs.get("email"))
        password = attrs.get("password")
        try:
            user = User.objects.get(email=email)
        except User.DoesNotExist:
            raise AuthenticationFailed("Invalid credentials")

        if not user.is_active:
            raise AuthenticationFailed("User is inactive")

        if not UserManager.verify_password(user, password):
            raise AuthenticationFailed("Invalid credentials")

        attrs["user"] = user
        return attrs


class UserDetailSerializer(serializers.ModelSerializer):
    """Read-only account payload for responses."""

    class Meta:
        """Expose basic identity fields and role."""
        model = User
        fields = ["id", "email", "name", "role", "date_joined"]
        read_only_fields = fields
