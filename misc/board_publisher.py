from __future__ import annotations

from typing import Any

import discord

from board.activity_store import ActivityStore
from board.config_store import ConfigStore
from board.flow import PageTurn
from board.flow import TypeChosen
from board.flow import encode_token
from board.models import ActivityType
from board.pagination import PageDirection
from board.pagination import PaginationState
from board.renderer import CategoryView
from board.renderer import category_body
from board.renderer import render_board
from config.defaults import EMBED_DESCRIPTION_LIMIT
from config.defaults import EMBED_TOTAL_LIMIT


PAGE_BUTTONS = (
    (PageDirection.FIRST, "⏮"),
    (PageDirection.PREV, "◀"),
    (PageDirection.NEXT, "▶"),
    (PageDirection.LAST, "⏭"),
)

QUICKADD_STYLES = {
    ActivityType.OUR_TURN: discord.ButtonStyle.success,
    ActivityType.OPPS_TURN: discord.ButtonStyle.danger,
    ActivityType.EBK: discord.ButtonStyle.primary,
    ActivityType.NO_BEEF: discord.ButtonStyle.secondary,
}


def join_lines_within(lines: list[str], limit: int = EMBED_DESCRIPTION_LIMIT) -> str:
    """Join whole lines up to `limit` characters, ending with an "…and N more" marker when some are left out."""
    text = "\n".join(lines)
    if len(text) <= limit:
        return text
    kept: list[str] = []
    size = 0
    for index, line in enumerate(lines):
        left_after = len(lines) - index - 1
        added = len(line) + (1 if kept else 0)
        marker = len(f"\n…and {left_after} more") if left_after else 0
        if size + added + marker > limit:
            break
        kept.append(line)
        size += added
    omitted = len(lines) - len(kept)
    if not kept:
        return f"…and {omitted} more"
    return "\n".join(kept) + f"\n…and {omitted} more"


def _largest_fitting(low: int, high: int, fits) -> int | None:
    if not fits(low):
        return None
    while low < high:
        mid = (low + high + 1) // 2
        if fits(mid):
            low = mid
        else:
            high = mid - 1
    return low


def fit_board_bodies(views: list[CategoryView]) -> list[str]:
    """Category bodies that fit one message.

    Every row on the page stays listed. Descriptions are cut first, then gang
    names, with the same limit applied across all categories.
    """
    budget = EMBED_TOTAL_LIMIT - sum(len(cv.title) + len(cv.footer or "") for cv in views)

    def fits(bodies: list[str]) -> bool:
        return sum(len(b) for b in bodies) <= budget and all(len(b) <= EMBED_DESCRIPTION_LIMIT for b in bodies)

    def bodies_for(name_limit: int | None, description_limit: int | None) -> list[str]:
        return [category_body(cv, name_limit=name_limit, description_limit=description_limit) for cv in views]

    bodies = [cv.body for cv in views]
    if fits(bodies):
        return bodies

    rows = [a for cv in views for a in cv.rows]
    longest_description = max((len(a.description) for a in rows), default=0)
    description_limit = _largest_fitting(0, longest_description, lambda n: fits(bodies_for(None, n)))
    if description_limit is not None:
        return bodies_for(None, description_limit)

    longest_name = max((len(a.gang_name) for a in rows), default=2)
    name_limit = _largest_fitting(2, max(2, longest_name), lambda n: fits(bodies_for(n, 0)))
    if name_limit is not None:
        return bodies_for(name_limit, 0)

    # Only reachable with a page size far above the default.
    share = max(0, min(EMBED_DESCRIPTION_LIMIT, budget // max(1, len(views))))
    print(f"[Board] page too large for one message; trimming rows to {share} characters per category")
    return [join_lines_within(body.split("\n"), share) for body in bodies_for(2, 0)]


def build_board_embeds(views: list[CategoryView], *, timestamp=None) -> list[discord.Embed]:
    embeds: list[discord.Embed] = []
    for cv, body in zip(views, fit_board_bodies(views)):
        embed = discord.Embed(
            title=cv.title,
            description=body,
            colour=discord.Colour(cv.color),
            timestamp=timestamp,
        )
        if cv.footer:
            embed.set_footer(text=cv.footer)
        embeds.append(embed)
    return embeds


def add_quickadd_buttons(view: discord.ui.View, *, row: int | None = None) -> discord.ui.View:
    for activity_type in ActivityType:
        view.add_item(
            discord.ui.Button(
                label=f"+ {activity_type.label}",
                style=QUICKADD_STYLES.get(activity_type, discord.ButtonStyle.secondary),
                custom_id=encode_token(TypeChosen(activity_type)),
                row=row,
            )
        )
    return view


def build_board_view(views: list[CategoryView]) -> discord.ui.View:
    view = discord.ui.View(timeout=None)
    row = 0
    for cv in views:
        if cv.controls is None:
            continue
        disabled_flags = (
            cv.controls.first_disabled,
            cv.controls.prev_disabled,
            cv.controls.next_disabled,
            cv.controls.last_disabled,
        )
        for (direction, symbol), disabled in zip(PAGE_BUTTONS, disabled_flags):
            label = f"{symbol} {cv.activity_type.label}" if direction is PageDirection.FIRST else symbol
            view.add_item(
                discord.ui.Button(
                    label=label,
                    style=discord.ButtonStyle.secondary,
                    custom_id=encode_token(PageTurn(cv.activity_type, direction)),
                    disabled=disabled,
                    row=row,
                )
            )
        row += 1
    return add_quickadd_buttons(view, row=row)


async def resolve_channel(bot: Any, channel_id: int):
    channel = bot.get_channel(int(channel_id))
    if channel is not None:
        return channel
    try:
        return await bot.fetch_channel(int(channel_id))
    except (discord.NotFound, discord.Forbidden) as e:
        print(f"[Board] could not fetch channel {channel_id}: {e}")
        return None


class BoardPublisher:
    """Keeps the single tracked board message in sync with the activity document."""

    def __init__(
        self,
        *,
        activity_store: ActivityStore,
        config_store: ConfigStore,
        pagination: PaginationState,
    ) -> None:
        self.activity_store = activity_store
        self.config_store = config_store
        self.pagination = pagination

    async def render_payload(self) -> tuple[list[discord.Embed], discord.ui.View]:
        activities = await self.activity_store.list_all()
        views = render_board(activities, self.pagination)
        return build_board_embeds(views, timestamp=discord.utils.utcnow()), build_board_view(views)

    async def turn_page(self, activity_type: ActivityType, direction: PageDirection) -> tuple[list[discord.Embed], discord.ui.View]:
        activities = await self.activity_store.list_all()
        count = sum(1 for a in activities if a.type is activity_type)
        self.pagination.advance(activity_type, count, direction)
        views = render_board(activities, self.pagination)
        return build_board_embeds(views, timestamp=discord.utils.utcnow()), build_board_view(views)

    async def refresh(self, bot: Any) -> bool:
        try:
            config = await self.config_store.load()
            channel_id = config.activity_channel_id
            if channel_id is None:
                print("[Board] no activity channel set; use /channel type:activity first")
                return False

            channel = await resolve_channel(bot, channel_id)
            if channel is None:
                print(f"[Board] activity channel {channel_id} not found")
                return False

            embeds, view = await self.render_payload()
            if config.activity_message_id is not None:
                try:
                    message = await channel.fetch_message(config.activity_message_id)
                    await message.edit(embeds=embeds, view=view)
                    print(f"[Board] updated board message {config.activity_message_id}")
                    return True
                except discord.NotFound:
                    print(f"[Board] board message {config.activity_message_id} is gone; posting a replacement")

            message = await channel.send(embeds=embeds, view=view)
            await self.config_store.set_board_message(int(message.id))
            print(f"[Board] posted board message {message.id} in channel {channel_id}")
            return True
        except Exception as e:
            print(f"[Board] refresh error: {type(e).__name__}: {e}")
            return False
