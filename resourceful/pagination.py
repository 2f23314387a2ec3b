"""
Pagination for resource collections.

Collections that know how to page themselves (anything with a
``paginate(page=, per_page=)`` method, such as a query object) are delegated
to. Plain sequences and iterables are sliced into a :class:`Page`.
"""

import logging
from collections.abc import Sequence
from itertools import islice
from typing import Any, Callable, Dict, Iterator, List

from pydantic import BaseModel, Field, ValidationError

from .exceptions import ParameterError

logger = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 25
MAX_PAGE_SIZE = 1000
DEFAULT_BULK_BATCH_SIZE = 100
MAX_BULK_BATCH_SIZE = 10000


class PaginationParams(BaseModel):
    """Validated page request."""

    page: int = Field(1, ge=1)
    per_page: int = Field(DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE)


class BatchParams(BaseModel):
    """Validated bulk operation batch size."""

    batch_size: int = Field(DEFAULT_BULK_BATCH_SIZE, ge=1, le=MAX_BULK_BATCH_SIZE)


class PageInfo(BaseModel):
    """Pagination metadata for API responses."""

    current_page: int = Field(ge=1)
    total_pages: int = Field(ge=0)
    total_count: int = Field(ge=0)
    per_page: int = Field(ge=1)


def _describe(error: ValidationError) -> str:
    return "; ".join(
        f"{'.'.join(str(part) for part in item['loc'])}: {item['msg']}" for item in error.errors()
    )


def validate_page_params(page: Any = None, per_page: Any = None,
                         default_per_page: int = DEFAULT_PAGE_SIZE) -> PaginationParams:
    """Validate raw page/per_page values, such as strings from a query string.

    Raises:
        ParameterError: If either value is not a positive integer, or
            per_page exceeds the maximum page size.
    """
    try:
        return PaginationParams(
            page=1 if page is None else page,
            per_page=default_per_page if per_page is None else per_page,
        )
    except ValidationError as e:
        raise ParameterError(f"Invalid pagination parameters: {_describe(e)}") from e


def validate_batch_size(batch_size: Any) -> int:
    try:
        return BatchParams(batch_size=batch_size).batch_size
    except ValidationError as e:
        raise ParameterError(f"Invalid batch size: {_describe(e)}") from e


class Page(Sequence):
    """One page of a sliced collection."""

    def __init__(self, items: List[Any], current_page: int, per_page: int, total_count: int):
        self.items = items
        self.current_page = current_page
        self.per_page = per_page
        self.total_count = total_count

    @property
    def total_pages(self) -> int:
        return (self.total_count + self.per_page - 1) // self.per_page

    def __getitem__(self, index):
        return self.items[index]

    def __len__(self) -> int:
        return len(self.items)

    def __iter__(self) -> Iterator[Any]:
        return iter(self.items)

    def __repr__(self) -> str:
        return f"Page({self.current_page}/{self.total_pages}, {len(self.items)} items)"


def paginate(collection: Any, page: Any = None, per_page: Any = None,
             default_per_page: int = DEFAULT_PAGE_SIZE) -> Any:
    """Return one page of ``collection``.

    Args:
        collection: Anything with a ``paginate`` method, a sequence, or an iterable.
        page: 1-based page number, defaults to 1.
        per_page: Page size, defaults to ``default_per_page``.
        default_per_page: Page size used when ``per_page`` is not given.

    Examples:
        paginate(posts)                       # first 25
        paginate(posts, page="2", per_page=10)
    """
    params = validate_page_params(page, per_page, default_per_page)

    paginator = getattr(collection, "paginate", None)
    if callable(paginator):
        return paginator(page=params.page, per_page=params.per_page)

    items = collection if isinstance(collection, Sequence) else list(collection)
    start = (params.page - 1) * params.per_page
    logger.debug(f"Slicing page {params.page} ({params.per_page} per page) of {len(items)} items")
    return Page(list(items[start:start + params.per_page]), params.page, params.per_page, len(items))


def pagination_meta(collection: Any) -> Dict[str, int]:
    """Pagination metadata for a paged collection, or ``{}`` if it is not paged."""
    fields = ("current_page", "total_pages", "total_count", "per_page")
    if not all(hasattr(collection, name) for name in fields):
        return {}
    info = PageInfo(**{name: getattr(collection, name) for name in fields})
    return info.model_dump()


def paginate_bulk_operation(collection: Any, operation: Callable[[Any], Any],
                            batch_size: Any = DEFAULT_BULK_BATCH_SIZE) -> List[Any]:
    """Run ``operation`` over ``collection`` in batches and collect the results.

    Collections with ``find_in_batches(batch_size=)`` are delegated to;
    iterables are chunked; anything else is processed as a single batch.
    """
    if operation is None or not callable(operation):
        raise ParameterError("An operation is required for bulk operations")
    size = validate_batch_size(batch_size)

    batcher = getattr(collection, "find_in_batches", None)
    if callable(batcher):
        return [operation(batch) for batch in batcher(batch_size=size)]

    try:
        iterator = iter(collection)
    except TypeError:
        return [operation(collection)]

    results = []
    while True:
        batch = list(islice(iterator, size))
        if not batch:
            break
        results.append(operation(batch))
    return results

