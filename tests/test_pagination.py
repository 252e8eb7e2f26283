from __future__ import annotations

import unittest

from board.models import ActivityType
from board.pagination import PageDirection
from board.pagination import PaginationState
from board.pagination import total_pages


class TotalPagesTests(unittest.TestCase):
    def test_ceiling_division(self):
        self.assertEqual(total_pages(0), 0)
        self.assertEqual(total_pages(1), 1)
        self.assertEqual(total_pages(25), 1)
        self.assertEqual(total_pages(26), 2)
        self.assertEqual(total_pages(60, 25), 3)


class PaginationStateTests(unittest.TestCase):
    def test_cursor_starts_at_zero(self):
        state = PaginationState()
        self.assertEqual(state.current_page(ActivityType.EBK, 100), 0)

    def test_navigation_stays_in_range(self):
        state = PaginationState(page_size=25)
        t = ActivityType.OUR_TURN
        count = 60
        self.assertEqual(state.advance(t, count, PageDirection.PREV), 0)
        self.assertEqual(state.advance(t, count, PageDirection.NEXT), 1)
        self.assertEqual(state.advance(t, count, PageDirection.NEXT), 2)
        self.assertEqual(state.advance(t, count, PageDirection.NEXT), 2)
        self.assertEqual(state.advance(t, count, PageDirection.FIRST), 0)
        self.assertEqual(state.advance(t, count, PageDirection.LAST), 2)
        self.assertEqual(state.advance(t, count, PageDirection.PREV), 1)

    def test_every_direction_in_range_for_any_count(self):
        state = PaginationState(page_size=25)
        for count in (0, 1, 24, 25, 26, 50, 51, 200):
            pages = total_pages(count)
            for direction in PageDirection:
                page = state.advance(ActivityType.EBK, count, direction)
                self.assertGreaterEqual(page, 0)
                self.assertLessEqual(page, max(0, pages - 1))

    def test_cursor_clamped_when_list_shrinks(self):
        state = PaginationState(page_size=25)
        state.advance(ActivityType.NO_BEEF, 80, PageDirection.LAST)
        self.assertEqual(state.current_page(ActivityType.NO_BEEF, 80), 3)
        self.assertEqual(state.current_page(ActivityType.NO_BEEF, 30), 1)
        # The clamped value is written back.
        self.assertEqual(state.current_page(ActivityType.NO_BEEF, 80), 1)

    def test_categories_have_independent_cursors(self):
        state = PaginationState(page_size=10)
        state.advance(ActivityType.OUR_TURN, 50, PageDirection.LAST)
        self.assertEqual(state.current_page(ActivityType.OUR_TURN, 50), 4)
        self.assertEqual(state.current_page(ActivityType.OPPS_TURN, 50), 0)


if __name__ == "__main__":
    unittest.main()
