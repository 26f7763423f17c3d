"""
Page requests and sort orders for owner-scoped listings.

A page request is (zero-based page, size, sort orders). Sorting is always
made total: with no explicit sort the listing is ordered by amount
ascending, and ``id`` ascending is appended as the final tie-breaker unless
the caller already sorts by id.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional

from cashcard.core.errors import BadRequestError

SORTABLE_PROPERTIES = ("id", "amount", "owner")
ASC = "asc"
DESC = "desc"
# Largest offset the store is asked to skip; anything past it is an empty page.
MAX_OFFSET = 2**62


@dataclass(frozen=True)
class SortOrder:
    property: str
    direction: str = ASC

    @property
    def descending(self) -> bool:
        return self.direction == DESC

    def __str__(self) -> str:
        return f"{self.property},{self.direction}"


DEFAULT_SORT = (SortOrder("amount", ASC),)
TIE_BREAKER = SortOrder("id", ASC)


@dataclass(frozen=True)
class PageRequest:
    page: int
    size: int
    sort: tuple[SortOrder, ...] = ()

    @property
    def offset(self) -> int:
        return self.page * self.size

    @property
    def beyond_range(self) -> bool:
        return self.offset > MAX_OFFSET

    def orders(self) -> tuple[SortOrder, ...]:
        """Effective, total ordering used by the store."""
        orders = self.sort or DEFAULT_SORT
        if any(order.property == TIE_BREAKER.property for order in orders):
            return orders
        return orders + (TIE_BREAKER,)


def parse_sort(values: Optional[Iterable[str]]) -> tuple[SortOrder, ...]:
    """
    Parse ``sort`` query values.

    Each value is ``prop[,prop...][,asc|desc]``; the direction applies to
    every property listed in the same value. Values may repeat.
    """
    orders: list[SortOrder] = []
    seen: set[str] = set()
    for raw in values or ():
        parts = [p.strip() for p in (raw or "").split(",") if p.strip()]
        if not parts:
            continue
        direction = ASC
        if parts[-1].lower() in (ASC, DESC):
            direction = parts.pop().lower()
        if not parts:
            raise BadRequestError(f"sort value {raw!r} names no property")
        for prop in parts:
            if prop not in SORTABLE_PROPERTIES:
                raise BadRequestError(
                    f"cannot sort by {prop!r}; use one of {', '.join(SORTABLE_PROPERTIES)}"
                )
            if prop in seen:
                continue
            seen.add(prop)
            orders.append(SortOrder(prop, direction))
    return tuple(orders)


def build_page_request(
    page: Optional[int],
    size: Optional[int],
    sort: Optional[Iterable[str]] = None,
    *,
    default_size: int = 20,
    max_size: int = 2000,
) -> PageRequest:
    """Validate raw paging input; oversized pages are clamped to ``max_size``."""
    page_value = 0 if page is None else page
    size_value = default_size if size is None else size
    if page_value < 0:
        raise BadRequestError("page must be zero or greater")
    if size_value <= 0:
        raise BadRequestError("size must be greater than zero")
    return PageRequest(page=page_value, size=min(size_value, max_size), sort=parse_sort(sort))
