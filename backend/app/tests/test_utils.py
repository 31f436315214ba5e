"""
Tests for pagination and response helpers.
"""
import math

import pytest

from app.core.utils import build_pagination, format_error, format_response, sanitize_string


@pytest.mark.parametrize("total", [0, 1, 9, 10, 11, 25, 100, 101])
@pytest.mark.parametrize("limit", [1, 3, 10, 100])
@pytest.mark.parametrize("page", [-1, 0, 1, 2, 5, 1000])
def test_pagination_bounds(total, limit, page):
    pagination = build_pagination(page, limit, total)

    assert pagination["total_pages"] == max(math.ceil(total / limit), 1)
    assert 1 <= pagination["current_page"] <= pagination["total_pages"]
    assert pagination["has_next_page"] == (pagination["current_page"] < pagination["total_pages"])
    assert pagination["has_previous_page"] == (pagination["current_page"] > 1)


def test_empty_result_has_one_page():
    pagination = build_pagination(1, 10, 0)
    assert pagination["total_pages"] == 1
    assert pagination["has_next_page"] is False


def test_format_response():
    response = format_response(data={"id": "AB12CD"}, message="Trip created")
    assert response["success"] is True
    assert response["data"] == {"id": "AB12CD"}
    assert "timestamp" in response


def test_format_response_without_data():
    assert "data" not in format_response(message="Service removed from trip")


def test_format_error():
    response = format_error("Trip ZZ not found", "NOT_FOUND")
    assert response == {
        "success": False,
        "code": "NOT_FOUND",
        "message": "Trip ZZ not found",
        "timestamp": response["timestamp"],
    }


@pytest.mark.parametrize("value, expected", [(None, None), ("", None), ("  ", None), (" ab ", "ab")])
def test_sanitize_string(value, expected):
    assert sanitize_string(value) == expected
