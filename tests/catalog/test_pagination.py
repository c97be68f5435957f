from __future__ import annotations

import pytest

from game_library.catalog.pagination import (
    calculate_offset,
    empty_response,
    merge_responses,
    paginate,
    to_int,
    validate_params,
)
from game_library.catalog.schemas import PaginationRequest
from game_library.config import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE


ITEMS = list(range(25))


def test_middle_page_slice_and_metadata() -> None:
    result = paginate(ITEMS, page=2, page_size=10)
    info = result.pagination

    assert result.data == list(range(10, 20))
    assert info.page == 2
    assert info.total == 25
    assert info.total_pages == 3
    assert info.start_index == 10
    assert info.end_index == 19
    assert info.has_more is True
    assert info.has_previous is True
    assert info.next_page == 3
    assert info.previous_page == 1


def test_page_past_the_end_is_clamped_to_last_page() -> None:
    clamped = paginate(ITEMS, page=99, page_size=10)
    last = paginate(ITEMS, page=3, page_size=10)

    assert clamped == last
    assert clamped.data == [20, 21, 22, 23, 24]
    assert clamped.pagination.has_more is False
    assert clamped.pagination.next_page is None
    assert clamped.pagination.end_index == 24


def test_empty_input_is_page_one_of_zero() -> None:
    result = paginate([], page=5, page_size=10)
    info = result.pagination

    assert result.data == []
    assert info.page == 1
    assert info.total_pages == 0
    assert info.has_more is False
    assert info.has_previous is False
    assert info.next_page is None
    assert info.previous_page is None
    assert info.start_index == 0
    assert info.end_index == -1


def test_first_page_has_no_previous() -> None:
    info = paginate(ITEMS, page=1, page_size=10).pagination

    assert info.has_previous is False
    assert info.previous_page is None
    assert info.next_page == 2


@pytest.mark.parametrize(
    "page, page_size, expected_page, expected_size",
    [
        (0, 10, 1, 10),
        (-4, 10, 1, 10),
        (2, 0, 2, 1),
        (2, -7, 2, 1),
        (1, 10_000, 1, MAX_PAGE_SIZE),
        (None, None, 1, DEFAULT_PAGE_SIZE),
        ("2", "5", 2, 5),
        ("abc", "xyz", 1, DEFAULT_PAGE_SIZE),
        ("2.5", "5.9", 2, 5),
        ("", "  ", 1, DEFAULT_PAGE_SIZE),
        (float("nan"), float("inf"), 1, DEFAULT_PAGE_SIZE),
    ],
)
def test_invalid_numbers_are_clamped(page, page_size, expected_page, expected_size) -> None:
    info = paginate(ITEMS, page=page, page_size=page_size).pagination

    assert info.page == expected_page
    assert info.page_size == expected_size


def test_input_sequence_is_not_modified() -> None:
    items = [3, 1, 2]
    paginate(items, page=1, page_size=2)
    assert items == [3, 1, 2]


def test_validate_params_clamps_without_items() -> None:
    assert validate_params({"page": -1, "page_size": 500}) == PaginationRequest(page=1, page_size=MAX_PAGE_SIZE)
    assert validate_params(PaginationRequest(page=4)) == PaginationRequest(page=4, page_size=DEFAULT_PAGE_SIZE)
    assert validate_params() == PaginationRequest(page=1, page_size=DEFAULT_PAGE_SIZE)


def test_calculate_offset() -> None:
    assert calculate_offset(3, 10) == 20
    assert calculate_offset(0, 10) == 0
    assert calculate_offset(2, 0) == 1
    assert calculate_offset(2, 1_000) == MAX_PAGE_SIZE


def test_merge_responses_flattens_into_single_page() -> None:
    first = paginate(ITEMS, page=1, page_size=5)
    second = paginate(["x", "y"], page=1, page_size=5)

    merged = merge_responses([first, second])

    assert merged.data == [0, 1, 2, 3, 4, "x", "y"]
    assert merged.pagination.total == 27
    assert merged.pagination.page == 1
    assert merged.pagination.total_pages == 1
    assert merged.pagination.page_size == 7
    assert merged.pagination.end_index == 6
    assert merged.pagination.has_more is False


def test_merge_of_nothing_is_empty_response() -> None:
    assert merge_responses([]) == empty_response()


def test_to_int_truncates_decimal_text() -> None:
    assert to_int("2.5", 7) == 2
    assert to_int("-3.9", 7) == -3
    assert to_int(4.99, 7) == 4
    assert to_int("1e3", 7) == 1000
    assert to_int("page two", 7) == 7
    assert to_int(True, 7) == 7
    assert to_int("nan", 7) == 7
    assert to_int("inf", 7) == 7
