"""Post endpoints: list, retrieve, create, partial update, delete."""

import logging

from django.contrib.auth import get_user_model
from django.db import IntegrityError, transaction
from rest_framework import status
from rest_framework.exceptions import AuthenticationFailed, NotFound, ValidationError

from access_control.permissions import PostPermission
from access_control.policy import can_view_post
from authentication.identity import require_actor
from core.exceptions import Conflict
from core.identifiers import validate_object_id
from core.response import BaseViewSet, api_response
from .filters import build_post_filter, parse_post_query, post_ordering
from .models import Post
from .pagination import paginate, parse_page_params
from .serializers import (
    UPDATABLE_FIELDS,
    PostCreateSerializer,
    PostSerializer,
    PostUpdateSerializer,
    provided_update_fields,
)

logger = logging.getLogger(__name__)

User = get_user_model()


class NoFieldsProvided(ValidationError):
    default_detail = (
        f"Provide at least one field to update: {', '.join(UPDATABLE_FIELDS)}."
    )
    default_code = "no_fields_provided"


def _post_not_found() -> NotFound:
    # Hidden drafts answer exactly like missing posts.
    return NotFound("Post not found.")


def _duplicate_slug(slug: str) -> Conflict:
    return Conflict(f"A post with the slug '{slug}' already exists.", code="duplicate_slug")


class PostViewSet(BaseViewSet):
    """Posts are public when published; drafts belong to their author and ADMINs."""

    serializer_class = PostSerializer
    permission_classes = [PostPermission]
    queryset = Post.objects.select_related("author")

    def get_object(self) -> Post:
        """Look up the post named in the URL and apply object-level permissions."""
        post = self._find_post(self.kwargs.get(self.lookup_field))
        self.check_object_permissions(self.request, post)
        return post

    def _find_post(self, raw_id) -> Post:
        post_id = validate_object_id(raw_id)
        post = self.get_queryset().filter(pk=post_id).first()
        if post is None:
            raise _post_not_found()
        return post

    def list(self, request, *args, **kwargs):
        """Filtered, ordered, paginated posts. Published only unless asked otherwise."""
        query = parse_post_query(request.query_params)
        page, limit = parse_page_params(request.query_params)

        matching = self.get_queryset().filter(build_post_filter(query, request.user))
        pagination = paginate(page, limit, matching.count())
        if pagination.skip >= pagination.total_count:
            # Nothing left; an out-of-range offset never reaches the database.
            data = []
        else:
            window = matching.order_by(*post_ordering(query))[
                pagination.skip : pagination.skip + pagination.limit
            ]
            data = PostSerializer(window, many=True).data
        return api_response(data, count=len(data), pagination=pagination.as_metadata())

    def retrieve(self, request, *args, **kwargs):
        """Published posts for anyone; drafts only for the owner or an ADMIN."""
        post = self._find_post(kwargs.get(self.lookup_field))
        if not can_view_post(request.user, post.published, post.author_id):
            raise _post_not_found()
        return api_response(PostSerializer(post).data)

    def create(self, request, *args, **kwargs):
        """Create a post owned by the calling actor."""
        actor = require_actor(request.user)
        serializer = PostCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        slug = serializer.validated_data["slug"]

        # Fast path for a friendly message; the unique constraint below is
        # what actually guarantees uniqueness under concurrent creates.
        if Post.objects.filter(slug=slug).exists():
            logger.info("Rejected post create by %s: slug %s taken", actor.id, slug)
            raise _duplicate_slug(slug)

        if not User.objects.filter(pk=actor.id, is_active=True).exists():
            raise AuthenticationFailed("Account no longer exists or is inactive")

        try:
            with transaction.atomic():
                post = serializer.save(author_id=actor.id)
        except IntegrityError as exc:
            logger.info("Slug %s lost a concurrent create race", slug)
            raise _duplicate_slug(slug) from exc

        logger.info("Actor %s created post %s (published=%s)", actor.id, post.pk, post.published)
        post = self.get_queryset().get(pk=post.pk)
        return api_response(PostSerializer(post).data, status=status.HTTP_201_CREATED)

    def partial_update(self, request, *args, **kwargs):
        """Change only the provided fields among title, content, excerpt, published."""
        actor = require_actor(request.user)
        validate_object_id(kwargs.get(self.lookup_field))
        if not provided_update_fields(request.data):
            raise NoFieldsProvided()

        post = self.get_object()
        serializer = PostUpdateSerializer(post, data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        serializer.save()

        logger.info(
            "Actor %s updated post %s fields=%s",
            actor.id,
            post.pk,
            sorted(serializer.validated_data),
        )
        return api_response(PostSerializer(post).data)

    def destroy(self, request, *args, **kwargs):
        """Hard-delete a post; answers with the deleted id and title."""
        actor = require_actor(request.user)
        post = self.get_object()
        deleted = {"id": post.pk, "title": post.title}
        post.delete()
        logger.info("Actor %s deleted post %s", actor.id, deleted["id"])
        return api_response(deleted)


__all__ = ["PostViewSet", "NoFieldsProvided"]
