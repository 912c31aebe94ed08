"""Pagination - tests for page slicing, cursor detection and size clamping."""

from plub.core.pagination import clamp_size, has_cursor, slice_page


def test_slice_page_with_extra_row_is_not_last():
    page = slice_page([1, 2, 3, 4], size=3, total_elements=10)
    assert page.content == [1, 2, 3]
    assert page.last is False
    assert page.total_elements == 10


def test_slice_page_without_extra_row_is_last():
    page = slice_page([1, 2], size=3, total_elements=2)
    assert page.content == [1, 2]
    assert page.last is True


def test_has_cursor():
    assert has_cursor(None) is False
    assert has_cursor(0) is False
    assert has_cursor(12) is True


def test_clamp_size():
    assert clamp_size(None, 10) == 10
    assert clamp_size(0, 10) == 10
    assert clamp_size(25, 10) == 25
    assert clamp_size(1000, 10) == 100
