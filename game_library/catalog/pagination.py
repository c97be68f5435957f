"""
Pagination over in-memory sequences.

All functions are pure: they never mutate their input and never raise
on bad numeric input. Page numbers and sizes usually arrive from query
strings that may be stale or hand-edited, so out-of-range values are
clamped to the nearest valid bound and unparseable values (``None``,
text, NaN, infinity) fall back to the defaults.
"""

from __future__ import annotations

from typing import Any, Iterable, Mapping, Sequence, TypeVar, Union

from ..config import (
    DEFAULT_PAGE,
    DEFAULT_PAGE_SIZE,
    MAX_PAGE_SIZE,
    MIN_PAGE,
    MIN_PAGE_SIZE,
)
from .schemas import PaginatedResponse, PaginationInfo, PaginationRequest

T = TypeVar("T")


def to_int(value: Any, default: int) -> int:
    """Parse ``value`` as an integer, or return ``default``.

    Decimal text such as ``"2.5"`` is truncated like a float would be.
    """
    if value is None or isinstance(value, bool):
        return default
    try:
        return int(value)
    except (TypeError, ValueError, OverflowError):
        pass
    try:
        return int(float(value))
    except (TypeError, ValueError, OverflowError):
        return default


def _clamp_page(page: Any) -> int:
    return max(MIN_PAGE, to_int(page, DEFAULT_PAGE))


def _clamp_page_size(page_size: Any) -> int:
    return min(MAX_PAGE_SIZE, max(MIN_PAGE_SIZE, to_int(page_size, DEFAULT_PAGE_SIZE)))


def paginate(
    items: Sequence[T],
    page: Any = DEFAULT_PAGE,
    page_size: Any = DEFAULT_PAGE_SIZE,
) -> PaginatedResponse:
    """Slice ``items`` into the requested page.

    Parameters
    ----------
    items : Sequence[T]
        The ordered items to page through. Sorting is the caller's job.
    page : int
        1-indexed page number. Values past the last page are clamped to
        the last page; an empty sequence always yields page 1.
    page_size : int
        Number of items per page, clamped to
        ``[MIN_PAGE_SIZE, MAX_PAGE_SIZE]``.

    Returns
    -------
    PaginatedResponse
        The page's items and a ``PaginationInfo`` describing the window.
        ``total_pages`` is 0 for an empty sequence.
    """
    size = _clamp_page_size(page_size)
    requested = _clamp_page(page)

    total = len(items)
    total_pages = -(-total // size)
    current = min(requested, total_pages or 1)

    start = (current - 1) * size
    end = start + size

    info = PaginationInfo(
        page=current,
        page_size=size,
        total=total,
        total_pages=total_pages,
        has_more=current < total_pages,
        has_previous=current > 1,
        next_page=current + 1 if current < total_pages else None,
        previous_page=current - 1 if current > 1 else None,
        start_index=start,
        end_index=min(end - 1, total - 1),
    )
    return PaginatedResponse(data=list(items[start:end]), pagination=info)


def validate_params(
    request: Union[PaginationRequest, Mapping[str, Any], None] = None,
) -> PaginationRequest:
    """Clamp a page request without needing the items in memory."""
    if request is None:
        page, page_size = None, None
    elif isinstance(request, PaginationRequest):
        page, page_size = request.page, request.page_size
    else:
        page, page_size = request.get("page"), request.get("page_size")
    return PaginationRequest(page=_clamp_page(page), page_size=_clamp_page_size(page_size))


def calculate_offset(page: Any, page_size: Any) -> int:
    """Return the zero-based offset of ``page`` for callers paging at the source."""
    return (_clamp_page(page) - 1) * _clamp_page_size(page_size)


def empty_response(page_size: int = DEFAULT_PAGE_SIZE) -> PaginatedResponse:
    return PaginatedResponse(
        data=[],
        pagination=PaginationInfo(
            page=1,
            page_size=page_size,
            total=0,
            total_pages=0,
            has_more=False,
            has_previous=False,
            next_page=None,
            previous_page=None,
            start_index=0,
            end_index=-1,
        ),
    )


def merge_responses(responses: Iterable[PaginatedResponse]) -> PaginatedResponse:
    """Flatten several already-paginated responses into one page.

    The result is a synthetic "page 1 of 1": data is concatenated in the
    given order and totals are summed. No re-sorting takes place.
    """
    responses = list(responses)
    if not responses:
        return empty_response()

    data = [item for response in responses for item in response.data]
    total = sum(response.pagination.total for response in responses)

    return PaginatedResponse(
        data=data,
        pagination=PaginationInfo(
            page=1,
            page_size=len(data),
            total=total,
            total_pages=1,
            has_more=False,
            has_previous=False,
            next_page=None,
            previous_page=None,
            start_index=0,
            end_index=len(data) - 1,
        ),
    )
