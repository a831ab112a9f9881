"""Post model: slugged article owned by a single author."""

from django.conf import settings
from django.core.validators import RegexValidator
from django.db import models

from core.identifiers import OBJECT_ID_LENGTH, new_object_id

SLUG_PATTERN = r"^[a-z0-9-]+$"

slug_validator = RegexValidator(
    SLUG_PATTERN,
    "Slug must contain only lowercase letters, numbers, and hyphens.",
)


class Post(models.Model):
    """Draft or published post; ``author`` owns it for mutation and draft visibility."""

    id = models.CharField(
        primary_key=True, max_length=OBJECT_ID_LENGTH, default=new_object_id, editable=False
    )
    title = models.CharField(max_length=255)
    slug = models.CharField(max_length=255, unique=True, validators=[slug_validator])
    content = models.TextField()
    excerpt = models.TextField(null=True, blank=True)
    published = models.BooleanField(default=False)
    author = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="posts")
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["published", "-created_at"], name="post_published_created_idx"),
        ]

    def __str__(self) -> str:  # pragma: no cover - trivial
        return self.title


__all__ = ["Post", "SLUG_PATTERN", "slug_validator"]
