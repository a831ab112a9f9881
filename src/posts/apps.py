"""App configuration for the posts Django application."""

from django.apps import AppConfig


class PostsConfig(AppConfig):
    """Posts app holds the Post model, list filtering, and the post endpoints."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "posts"
