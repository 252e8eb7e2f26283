from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

from board.activity_store import sort_for_display
from board.models import Activity
from board.models import ActivityType
from board.pagination import PaginationState
from board.pagination import total_pages
from config.defaults import BOARD_UTC_OFFSET_HOURS
from config.defaults import EMPTY_CATEGORY_TEXT


BOARD_TZ = timezone(timedelta(hours=BOARD_UTC_OFFSET_HOURS))


@dataclass(frozen=True, slots=True)
class PagingControls:
    first_disabled: bool
    prev_disabled: bool
    next_disabled: bool
    last_disabled: bool


@dataclass(frozen=True, slots=True)
class CategoryView:
    activity_type: ActivityType
    title: str
    color: int
    lines: tuple[str, ...]
    body: str
    footer: str | None
    page: int
    total_pages: int
    count: int
    controls: PagingControls | None
    rows: tuple[Activity, ...] = ()
    first_position: int = 1


def format_display_date(value: datetime) -> str:
    local = value.astimezone(BOARD_TZ)
    return f"{local.day:02d}/{local.month:02d}/{local.year:04d}"


def format_board_date(activity: Activity) -> str:
    return format_display_date(activity.created_at_dt)


def shorten(text: str, limit: int | None) -> str:
    if limit is None or len(text) <= limit:
        return text
    if limit <= 0:
        return ""
    return text[: limit - 1] + "…"


def format_activity_line(
    position: int,
    activity: Activity,
    *,
    name_limit: int | None = None,
    description_limit: int | None = None,
) -> str:
    description = shorten(activity.description, description_limit)
    details = f" [{description}]" if description else ""
    return f"{position}. **{shorten(activity.gang_name, name_limit)}**{details} ({format_board_date(activity)})"


def category_body(
    view: CategoryView,
    *,
    name_limit: int | None = None,
    description_limit: int | None = None,
) -> str:
    """Body text for a view, optionally with names and descriptions cut short. Row count never changes."""
    if not view.rows:
        return EMPTY_CATEGORY_TEXT
    return "\n".join(
        format_activity_line(
            view.first_position + offset,
            activity,
            name_limit=name_limit,
            description_limit=description_limit,
        )
        for offset, activity in enumerate(view.rows)
    )


def render_category(
    activity_type: ActivityType,
    activities: list[Activity],
    pagination: PaginationState,
) -> CategoryView:
    rows = sort_for_display([a for a in activities if a.type is activity_type])
    count = len(rows)
    pages = total_pages(count, pagination.page_size)
    page = pagination.current_page(activity_type, count)

    start = page * pagination.page_size
    end = min(count, start + pagination.page_size)
    lines = tuple(format_activity_line(start + offset + 1, a) for offset, a in enumerate(rows[start:end]))

    controls: PagingControls | None = None
    footer: str | None = None
    if pages > 1:
        on_first = page == 0
        on_last = page == pages - 1
        controls = PagingControls(
            first_disabled=on_first,
            prev_disabled=on_first,
            next_disabled=on_last,
            last_disabled=on_last,
        )
        footer = f"Page {page + 1}/{pages} • {count} activities"

    return CategoryView(
        activity_type=activity_type,
        title=f"{activity_type.label} Activities",
        color=activity_type.color,
        lines=lines,
        body="\n".join(lines) if lines else EMPTY_CATEGORY_TEXT,
        footer=footer,
        page=page,
        total_pages=pages,
        count=count,
        controls=controls,
        rows=tuple(rows[start:end]),
        first_position=start + 1,
    )


def render_board(activities: list[Activity], pagination: PaginationState) -> list[CategoryView]:
    """Render every category in declared order. Reads cursors, never advances them."""
    return [render_category(activity_type, activities, pagination) for activity_type in ActivityType]
