from __future__ import annotations

from enum import Enum

from board.models import ActivityType
from config.defaults import BOARD_PAGE_SIZE


class PageDirection(Enum):
    FIRST = "first"
    PREV = "prev"
    NEXT = "next"
    LAST = "last"


def total_pages(count: int, page_size: int = BOARD_PAGE_SIZE) -> int:
    n = max(0, int(count))
    size = max(1, int(page_size))
    return (n + size - 1) // size


class PaginationState:
    """Per-category page cursors for the board.

    Owned by whoever composes the bot and passed to the renderer and the paging
    handler. Cursors are in-memory only and start at page 0 after a restart.
    """

    def __init__(self, page_size: int = BOARD_PAGE_SIZE) -> None:
        self.page_size = max(1, int(page_size))
        self._pages: dict[ActivityType, int] = {}

    def _clamp(self, page: int, total_items: int) -> int:
        last = max(0, total_pages(total_items, self.page_size) - 1)
        return min(max(0, int(page)), last)

    def current_page(self, activity_type: ActivityType, total_items: int) -> int:
        page = self._clamp(self._pages.get(activity_type, 0), total_items)
        self._pages[activity_type] = page
        return page

    def advance(self, activity_type: ActivityType, total_items: int, direction: PageDirection) -> int:
        current = self.current_page(activity_type, total_items)
        pages = total_pages(total_items, self.page_size)
        if direction is PageDirection.FIRST:
            target = 0
        elif direction is PageDirection.PREV:
            target = max(0, current - 1)
        elif direction is PageDirection.NEXT:
            target = min(pages - 1, current + 1)
        else:
            target = max(0, pages - 1)
        page = self._clamp(target, total_items)
        self._pages[activity_type] = page
        return page
