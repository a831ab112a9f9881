"""Authorization decisions for posts.

Every function here is a deterministic boolean over an actor and resource
facts; nothing touches the database. Anonymous callers are passed in as
``authentication.identity.ANONYMOUS`` and always lack a role.
"""

from .roles import Role, at_least


def _role_of(actor):
    if actor is None or not getattr(actor, "is_authenticated", False):
        return None
    return getattr(actor, "role", None)


def is_admin(actor) -> bool:
    return _role_of(actor) == Role.ADMIN


def can_create_post(actor) -> bool:
    """AUTHOR and ADMIN may create posts."""
    role = _role_of(actor)
    return role is not None and at_least(role, Role.AUTHOR)


def can_mutate_post(actor, author_id) -> bool:
    """ADMIN may edit or delete any post; an AUTHOR only their own."""
    role = _role_of(actor)
    if role == Role.ADMIN:
        return True
    if role == Role.AUTHOR:
        return author_id is not None and str(actor.id) == str(author_id)
    return False


def can_view_draft(actor, author_id) -> bool:
    """Drafts are visible to the same actors that may mutate them."""
    return can_mutate_post(actor, author_id)


def can_view_post(actor, published: bool, author_id) -> bool:
    """Published posts are public; drafts fall back to :func:`can_view_draft`."""
    return published or can_view_draft(actor, author_id)


__all__ = ["is_admin", "can_create_post", "can_mutate_post", "can_view_draft", "can_view_post"]
