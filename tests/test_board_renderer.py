from __future__ import annotations

import unittest
from datetime import datetime, timedelta, timezone

from board.models import Activity
from board.models import ActivityType
from board.pagination import PageDirection
from board.pagination import PaginationState
from board.renderer import category_body
from board.renderer import format_activity_line
from board.renderer import format_display_date
from board.renderer import render_board
from board.renderer import render_category


def _activity(gang: str, activity_type: ActivityType, created_at: datetime, description: str = "") -> Activity:
    return Activity(
        id=f"id-{gang}",
        gang_name=gang,
        type=activity_type,
        description=description,
        created_at=created_at.isoformat(),
        created_by="1",
    )


def _many(n: int, activity_type: ActivityType = ActivityType.OUR_TURN) -> list[Activity]:
    base = datetime(2024, 1, 1, tzinfo=timezone.utc)
    return [_activity(f"Gang {i:03d}", activity_type, base + timedelta(minutes=i)) for i in range(n)]


class FormattingTests(unittest.TestCase):
    def test_date_uses_utc_plus_seven(self):
        late_utc = datetime(2024, 3, 1, 18, 30, tzinfo=timezone.utc)
        self.assertEqual(format_display_date(late_utc), "02/03/2024")
        self.assertEqual(format_display_date(datetime(2024, 3, 1, 16, 59, tzinfo=timezone.utc)), "01/03/2024")

    def test_line_with_and_without_description(self):
        created = datetime(2024, 3, 1, 1, 0, tzinfo=timezone.utc)
        self.assertEqual(
            format_activity_line(3, _activity("Crew", ActivityType.EBK, created, "by the docks")),
            "3. **Crew** [by the docks] (01/03/2024)",
        )
        self.assertEqual(
            format_activity_line(1, _activity("Crew", ActivityType.EBK, created)),
            "1. **Crew** (01/03/2024)",
        )

    def test_line_can_cut_name_and_description(self):
        created = datetime(2024, 3, 1, 1, 0, tzinfo=timezone.utc)
        activity = _activity("Southside Kings", ActivityType.EBK, created, "by the docks")
        self.assertEqual(
            format_activity_line(2, activity, description_limit=4),
            "2. **Southside Kings** [by …] (01/03/2024)",
        )
        self.assertEqual(
            format_activity_line(2, activity, name_limit=6, description_limit=0),
            "2. **South…** (01/03/2024)",
        )

    def test_category_body_keeps_every_row(self):
        view = render_category(ActivityType.OUR_TURN, _many(30), PaginationState())
        self.assertEqual(category_body(view), view.body)
        short = category_body(view, name_limit=4).split("\n")
        self.assertEqual(len(short), 25)
        self.assertTrue(short[0].startswith("1. **Gan…**"))
        self.assertTrue(short[-1].startswith("25. **"))


class RenderCategoryTests(unittest.TestCase):
    def test_empty_category_has_placeholder_and_no_controls(self):
        view = render_category(ActivityType.EBK, [], PaginationState())
        self.assertEqual(view.lines, ())
        self.assertEqual(view.body, "No activities in this category.")
        self.assertIsNone(view.controls)
        self.assertIsNone(view.footer)
        self.assertEqual(view.title, "EBK Activities")
        self.assertEqual(view.color, 0xFFA500)

    def test_exactly_one_page_has_no_controls(self):
        view = render_category(ActivityType.OUR_TURN, _many(25), PaginationState())
        self.assertEqual(len(view.lines), 25)
        self.assertIsNone(view.controls)

    def test_second_page_numbering_continues(self):
        state = PaginationState()
        activities = _many(26)
        state.advance(ActivityType.OUR_TURN, 26, PageDirection.NEXT)
        view = render_category(ActivityType.OUR_TURN, activities, state)
        self.assertEqual(view.lines, ("26. **Gang 025** (01/01/2024)",))
        self.assertEqual(view.footer, "Page 2/2 • 26 activities")
        self.assertFalse(view.controls.first_disabled)
        self.assertFalse(view.controls.prev_disabled)
        self.assertTrue(view.controls.next_disabled)
        self.assertTrue(view.controls.last_disabled)

    def test_first_page_controls(self):
        view = render_category(ActivityType.OUR_TURN, _many(60), PaginationState())
        self.assertEqual(view.footer, "Page 1/3 • 60 activities")
        self.assertTrue(view.controls.first_disabled)
        self.assertTrue(view.controls.prev_disabled)
        self.assertFalse(view.controls.next_disabled)
        self.assertFalse(view.controls.last_disabled)

    def test_ordering_is_by_creation_time_not_document_order(self):
        base = datetime(2024, 5, 1, tzinfo=timezone.utc)
        activities = [
            _activity("Newest", ActivityType.NO_BEEF, base + timedelta(days=2)),
            _activity("Oldest", ActivityType.NO_BEEF, base),
            _activity("Middle", ActivityType.NO_BEEF, base + timedelta(days=1)),
        ]
        view = render_category(ActivityType.NO_BEEF, activities, PaginationState())
        self.assertEqual([line.split("**")[1] for line in view.lines], ["Oldest", "Middle", "Newest"])

    def test_shrunk_list_clamps_cursor(self):
        state = PaginationState()
        state.advance(ActivityType.OUR_TURN, 60, PageDirection.LAST)
        view = render_category(ActivityType.OUR_TURN, _many(30), state)
        self.assertEqual(view.page, 1)
        self.assertEqual(view.total_pages, 2)


class RenderBoardTests(unittest.TestCase):
    def test_every_category_in_declared_order(self):
        views = render_board([], PaginationState())
        self.assertEqual([v.activity_type for v in views], list(ActivityType))
        self.assertEqual(
            [v.title for v in views],
            ["Our Turn Activities", "Opps Turn Activities", "EBK Activities", "No Beef Activities"],
        )

    def test_rendering_is_idempotent(self):
        activities = _many(40) + _many(3, ActivityType.EBK)
        state = PaginationState()
        state.advance(ActivityType.OUR_TURN, 40, PageDirection.NEXT)
        first = render_board(activities, state)
        second = render_board(activities, state)
        self.assertEqual(first, second)


if __name__ == "__main__":
    unittest.main()
