"""Page arithmetic for post listings."""

from __future__ import annotations

import math
from dataclasses import asdict, dataclass
from typing import Mapping

from django.conf import settings
from rest_framework.exceptions import ValidationError

DEFAULT_PAGE = 1


class InvalidParameter(ValidationError):
    """A page or limit value that cannot be used to slice results."""

    default_code = "invalid_parameter"


@dataclass(frozen=True)
class Pagination:
    page: int
    limit: int
    total_count: int
    total_pages: int
    skip: int
    has_more: bool

    def as_metadata(self) -> dict:
        """Response metadata; ``skip`` is an internal detail and left out."""
        data = asdict(self)
        data.pop("skip")
        return data


def paginate(page: int, limit: int, total_count: int) -> Pagination:
    """Compute offset, page count, and has-more for a 1-indexed ``page``.

    Pages past the end are allowed and simply have nothing left to show.
    """
    if limit < 1:
        raise InvalidParameter({"limit": ["limit must be a positive integer."]})
    if page < 1:
        raise InvalidParameter({"page": ["page must be a positive integer."]})
    if total_count < 0:
        raise ValueError("total_count cannot be negative")

    total_pages = math.ceil(total_count / limit)
    return Pagination(
        page=page,
        limit=limit,
        total_count=total_count,
        total_pages=total_pages,
        skip=(page - 1) * limit,
        has_more=page < total_pages,
    )


def _to_int(raw: str | None, default: int) -> int:
    if raw is None:
        return default
    try:
        return int(str(raw).strip())
    except ValueError:
        return default


def parse_page_params(params: Mapping[str, str]) -> tuple[int, int]:
    """Read ``page``/``limit`` from query parameters.

    Missing or non-numeric values fall back to the defaults and ``limit`` is
    capped at ``POSTS_MAX_PAGE_SIZE``. Zero and negative numbers are passed
    through unchanged so :func:`paginate` can reject them.
    """
    page = _to_int(params.get("page"), DEFAULT_PAGE)
    limit = _to_int(params.get("limit"), settings.POSTS_PAGE_SIZE)
    return page, min(limit, settings.POSTS_MAX_PAGE_SIZE)


__all__ = ["InvalidParameter", "Pagination", "paginate", "parse_page_params"]
