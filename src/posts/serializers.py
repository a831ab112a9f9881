"""Serializers for post responses and create/update payloads."""

from django.contrib.auth import get_user_model
from rest_framework import serializers

from .models import SLUG_PATTERN, Post

User = get_user_model()

UPDATABLE_FIELDS = ("title", "content", "excerpt", "published")


class AuthorSummarySerializer(serializers.ModelSerializer):
    class Meta:
        model = User
        fields = ["id", "name", "email"]
        read_only_fields = fields


class PostSerializer(serializers.ModelSerializer):
    """Read payload: post fields plus a summary of the author."""

    author_id = serializers.CharField(read_only=True)
    author = AuthorSummarySerializer(read_only=True)

    class Meta:
        model = Post
        fields = [
            "id",
            "title",
            "slug",
            "content",
            "excerpt",
            "published",
            "author_id",
            "author",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class PostCreateSerializer(serializers.ModelSerializer):
    """Validate a new post. Slug uniqueness is enforced by the view (409, not 400)."""

    title = serializers.CharField(max_length=255)
    # Declared explicitly so ModelSerializer does not attach a UniqueValidator.
    slug = serializers.RegexField(
        SLUG_PATTERN,
        max_length=255,
        error_messages={
            "invalid": "Slug must contain only lowercase letters, numbers, and hyphens.",
        },
    )
    content = serializers.CharField()
    excerpt = serializers.CharField(required=False, allow_null=True, allow_blank=True)
    published = serializers.BooleanField(required=False, default=False)

    class Meta:
        model = Post
        fields = ["title", "slug", "content", "excerpt", "published"]

    def validate_excerpt(self, value):
        # Blank excerpts are stored as null.
        return value or None


class PostUpdateSerializer(serializers.ModelSerializer):
    """Partial update of title, content, excerpt, and published; nothing else."""

    title = serializers.CharField(max_length=255, required=False)
    content = serializers.CharField(required=False)
    excerpt = serializers.CharField(required=False, allow_null=True, allow_blank=True)
    published = serializers.BooleanField(required=False)

    class Meta:
        model = Post
        fields = list(UPDATABLE_FIELDS)

    def validate_excerpt(self, value):
        return value or None


def provided_update_fields(payload) -> list[str]:
    """Names of updatable fields present in a raw request body."""
    if not hasattr(payload, "keys"):
        return []
    return [field for field in UPDATABLE_FIELDS if field in payload]


__all__ = [
    "AuthorSummarySerializer",
    "PostSerializer",
    "PostCreateSerializer",
    "PostUpdateSerializer",
    "UPDATABLE_FIELDS",
    "provided_update_fields",
]
