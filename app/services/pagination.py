from dataclasses import dataclass
import math


@dataclass(frozen=True)
class PageWindow:
    """Bounded slice of an ordered result set."""
    page: int
    limit: int
    offset: int
    max_page: int
    in_range: bool


def paginate(page: int, limit: int, total: int) -> PageWindow:
    """
    Turn a requested page into an (offset, limit) window.

    An empty result set is always in range, so callers can answer with an
    empty page. A page past the end of a non-empty set is out of range and
    callers treat it as a missing resource.

    Args:
        page: Page number (1-indexed)
        limit: Items per page
        total: Number of rows matching the query

    Returns:
        PageWindow with offset, limit, max page and range flag

    Raises:
        ValueError: If page or limit is below 1, or total is negative
    """
    if page < 1:
        raise ValueError(f"page must be >= 1, got {page}")
    if limit < 1:
        raise ValueError(f"limit must be >= 1, got {limit}")
    if total < 0:
        raise ValueError(f"total must be >= 0, got {total}")

    max_page = math.ceil(total / limit) if total > 0 else 0

    return PageWindow(
        page=page,
        limit=limit,
        offset=(page - 1) * limit,
        max_page=max_page,
        in_range=total == 0 or page <= max_page,
    )
