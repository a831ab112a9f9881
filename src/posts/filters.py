"""Translate post list query parameters into an ORM predicate and ordering.

Rules, applied in order:

1. an explicit ``published`` parameter filters on that value;
2. otherwise, unless ``includeUnpublished=true``, only published posts match;
3. ``authorId`` restricts to one author;
4. ``search`` matches case-insensitive substrings of title, content or
   excerpt. A multi-word term must match as a whole phrase *and* each word
   must match on its own.

List filtering does not look at per-row ownership: a caller asking for
unpublished posts sees every matching draft. ``POSTS_STRICT_DRAFT_LISTING``
narrows drafts to the caller's own unless the caller is an ADMIN.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping

from django.conf import settings
from django.db.models import Q

from access_control.policy import is_admin

SEARCH_FIELDS = ("title", "content", "excerpt")

# Ids are unique, so they break ties between equal timestamps.
DEFAULT_ORDERING = ["-created_at", "-id"]
SEARCH_ORDERING = ["title", "-created_at", "-id"]


@dataclass(frozen=True)
class PostQuery:
    """List parameters after loose string parsing."""

    published: bool | None = None
    author_id: str | None = None
    search: str | None = None
    include_unpublished: bool = False

    @property
    def search_words(self) -> list[str]:
        return self.search.split() if self.search else []


def _param(params: Mapping[str, str], *names: str) -> str | None:
    for name in names:
        value = params.get(name)
        if value is not None:
            return value
    return None


def parse_post_query(params: Mapping[str, str]) -> PostQuery:
    """Build a :class:`PostQuery` from request query parameters.

    ``published`` is True only for the literal ``"true"``; any other present
    value means False. ``includeUnpublished`` is likewise ``"true"`` or off.
    Blank ``authorId``/``search`` values are treated as absent.
    """
    published_raw = _param(params, "published")
    published = None if published_raw is None else published_raw == "true"

    author_id = (_param(params, "authorId", "author_id") or "").strip() or None
    search = (_param(params, "search") or "").strip() or None
    include_unpublished = _param(params, "includeUnpublished", "include_unpublished") == "true"

    return PostQuery(
        published=published,
        author_id=author_id,
        search=search,
        include_unpublished=include_unpublished,
    )


def _matches_any_field(term: str) -> Q:
    clause = Q()
    for field in SEARCH_FIELDS:
        clause |= Q(**{f"{field}__icontains": term})
    return clause


def build_search_filter(search: str | None) -> Q:
    """Predicate for a free-text search term; empty ``Q`` when there is none."""
    if not search or not search.strip():
        return Q()

    phrase = search.strip()
    words = phrase.split()
    if len(words) == 1:
        return _matches_any_field(phrase)

    predicate = _matches_any_field(phrase)
    for word in words:
        predicate &= _matches_any_field(word)
    return predicate


def build_post_filter(query: PostQuery, actor=None) -> Q:
    """Combine publish state, author scoping, and search into one predicate."""
    predicate = Q()

    if query.published is not None:
        predicate &= Q(published=query.published)
    elif not query.include_unpublished:
        predicate &= Q(published=True)

    if getattr(settings, "POSTS_STRICT_DRAFT_LISTING", False) and not is_admin(actor):
        predicate &= _own_drafts_only(actor)

    if query.author_id:
        predicate &= Q(author_id=query.author_id)

    return predicate & build_search_filter(query.search)


def _own_drafts_only(actor) -> Q:
    if actor is None or not getattr(actor, "is_authenticated", False):
        return Q(published=True)
    return Q(published=True) | Q(author_id=actor.id)


def post_ordering(query: PostQuery) -> list[str]:
    """Alphabetical by title when searching, newest first otherwise."""
    return list(SEARCH_ORDERING if query.search else DEFAULT_ORDERING)


__all__ = [
    "PostQuery",
    "parse_post_query",
    "build_search_filter",
    "build_post_filter",
    "post_ordering",
]
