"""Unit tests for pagination."""

import pytest

from inbox_search.session import page_count, paginate


class TestPaginate:
    """Test suite for paginate."""

    def test_page_sizes(self) -> None:
        """Test that pages are full except the last."""
        items = list(range(45))

        sizes = [len(paginate(items, 20, page)) for page in range(3)]

        assert sizes == [20, 20, 5]
        assert paginate(items, 20, 2) == [40, 41, 42, 43, 44]

    def test_past_last_page_is_empty_not_clamped(self) -> None:
        """Test that pages past the end are empty rather than clamped."""
        assert paginate(list(range(45)), 20, 3) == []
        assert paginate(list(range(45)), 20, 99) == []

    def test_negative_page_is_empty(self) -> None:
        """Test that a negative page is empty."""
        assert paginate([1, 2, 3], 2, -1) == []

    def test_invalid_page_size(self) -> None:
        """Test that a page size below one raises ValueError."""
        with pytest.raises(ValueError):
            paginate([1], 0, 0)

    def test_page_count(self) -> None:
        """Test that page_count rounds up and is zero for no items."""
        assert page_count(45, 20) == 3
        assert page_count(40, 20) == 2
        assert page_count(0, 20) == 0
