"""
Tests for collection pagination and bulk batching.
"""

import pytest

from resourceful import (
    Page,
    ParameterError,
    paginate,
    paginate_bulk_operation,
    pagination_meta,
)
from resourceful.pagination import validate_batch_size, validate_page_params


class Query:
    """Collection that pages and batches itself."""

    def __init__(self):
        self.calls = []

    def paginate(self, page, per_page):
        self.calls.append(("paginate", page, per_page))
        return ["paged"]

    def find_in_batches(self, batch_size):
        self.calls.append(("find_in_batches", batch_size))
        yield [1, 2]
        yield [3]


class TestPageParams:
    """Test page parameter validation."""

    def test_defaults(self):
        params = validate_page_params()
        assert params.page == 1
        assert params.per_page == 25

    def test_strings_are_coerced(self):
        params = validate_page_params("3", "10")
        assert (params.page, params.per_page) == (3, 10)

    @pytest.mark.parametrize("page,per_page", [(0, 10), (-1, 10), ("abc", 10), (1, 0), (1, 1001)])
    def test_invalid(self, page, per_page):
        with pytest.raises(ParameterError, match="Invalid pagination parameters"):
            validate_page_params(page, per_page)

    def test_batch_size(self):
        assert validate_batch_size("50") == 50
        with pytest.raises(ParameterError, match="Invalid batch size"):
            validate_batch_size(0)
        with pytest.raises(ParameterError):
            validate_batch_size(10001)


class TestPaginate:
    """Test paginating collections."""

    def test_slices_a_list(self):
        page = paginate(list(range(1, 11)), page=2, per_page=3)

        assert isinstance(page, Page)
        assert list(page) == [4, 5, 6]
        assert page.current_page == 2
        assert page.total_pages == 4
        assert page.total_count == 10

    def test_last_partial_page(self):
        page = paginate(list(range(10)), page=4, per_page=3)
        assert list(page) == [9]

    def test_page_past_the_end_is_empty(self):
        page = paginate([1, 2], page=5, per_page=10)
        assert len(page) == 0
        assert page.total_pages == 1

    def test_default_page_size(self):
        assert len(paginate(list(range(100)))) == 25
        assert len(paginate(list(range(100)), default_per_page=40)) == 40

    def test_iterables(self):
        page = paginate(iter("abcdef"), page=2, per_page=4)
        assert list(page) == ["e", "f"]

    def test_delegates_to_collection(self):
        query = Query()
        assert paginate(query, page="2", per_page="5") == ["paged"]
        assert query.calls == [("paginate", 2, 5)]

    def test_empty_collection(self):
        page = paginate([])
        assert page.total_pages == 0
        assert page.total_count == 0


class TestPaginationMeta:
    """Test pagination metadata."""

    def test_page(self):
        meta = pagination_meta(paginate(list(range(7)), page=1, per_page=5))
        assert meta == {"current_page": 1, "total_pages": 2, "total_count": 7, "per_page": 5}

    def test_unpaged_collection(self):
        assert pagination_meta([1, 2, 3]) == {}


class TestBulkOperation:
    """Test batching bulk operations."""

    def test_chunks_iterables(self):
        batches = []
        results = paginate_bulk_operation(range(5), lambda batch: batches.append(batch) or len(batch),
                                          batch_size=2)

        assert batches == [[0, 1], [2, 3], [4]]
        assert results == [2, 2, 1]

    def test_delegates_to_find_in_batches(self):
        query = Query()
        assert paginate_bulk_operation(query, sum, batch_size=2) == [3, 3]
        assert query.calls == [("find_in_batches", 2)]

    def test_non_iterable_is_one_batch(self):
        assert paginate_bulk_operation(42, lambda batch: batch * 2) == [84]

    def test_empty_collection(self):
        assert paginate_bulk_operation([], len) == []

    def test_operation_required(self):
        with pytest.raises(ParameterError, match="operation is required"):
            paginate_bulk_operation([1], None)

    def test_invalid_batch_size(self):
        with pytest.raises(ParameterError):
            paginate_bulk_operation([1], len, batch_size="many")
