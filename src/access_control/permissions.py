"""DRF permission class applying the post authorization policy."""

import logging

from rest_framework import permissions

from .policy import can_create_post, can_mutate_post

logger = logging.getLogger(__name__)


class PostPermission(permissions.BasePermission):
    """Gate post endpoints on role and ownership.

    Reads are always let through here: draft visibility on a single post is
    decided by the view so that a hidden draft answers 404 instead of 403.
    Writes need an authenticated actor; DRF turns a failed check for an
    anonymous caller into 401 and for an authenticated one into 403.
    """

    message = "You do not have permission to perform this action on this resource."

    def has_permission(self, request, view) -> bool:
        if request.method in permissions.SAFE_METHODS:
            return True

        actor = getattr(request, "user", None)
        if not actor or not getattr(actor, "is_authenticated", False):
            return False

        if request.method == "POST":
            allowed = can_create_post(actor)
            if not allowed:
                self.message = "You do not have permission to create posts."
                logger.warning("Actor %s (%s) denied post creation", actor.id, actor.role)
            return allowed
        return True

    def has_object_permission(self, request, view, obj) -> bool:
        if request.method in permissions.SAFE_METHODS:
            return True

        actor = getattr(request, "user", None)
        allowed = can_mutate_post(actor, obj.author_id)
        if not allowed:
            verb = "delete" if request.method == "DELETE" else "edit"
            self.message = f"You do not have permission to {verb} this post."
            logger.warning(
                "Actor %s denied %s on post %s owned by %s",
                getattr(actor, "id", None),
                request.method,
                obj.pk,
                obj.author_id,
            )
        return allowed


__all__ = ["PostPermission"]
