from __future__ import annotations

from typing import Any

import discord
from discord import app_commands
from discord.ext import commands

from board.models import ActivityType
from config.defaults import CHOICE_LIMIT
from config.defaults import DESCRIPTION_MAX_LENGTH
from misc.commands.command_deps import CommandDeps
from misc.interaction_replies import reply_private


CHOICE_NAME_MAX = 100

ACTIVITY_TYPE_CHOICES = [
    app_commands.Choice(name=activity_type.label, value=activity_type.label)
    for activity_type in ActivityType
]


async def gang_name_choices(roster: Any, current: str) -> list[app_commands.Choice[str]]:
    names = await roster.search(current or "", limit=CHOICE_LIMIT)
    return [
        app_commands.Choice(name=name, value=name)
        for name in names
        if len(name) <= CHOICE_NAME_MAX
    ]


def register(bot: commands.Bot, *, deps: CommandDeps) -> None:
    @app_commands.command(name="activity", description="Log or update a gang activity on the board")
    @app_commands.describe(
        gangname="Gang the activity is about",
        activity_type="Board category",
        description="Optional details",
    )
    @app_commands.rename(activity_type="type")
    @app_commands.choices(activity_type=ACTIVITY_TYPE_CHOICES)
    async def activity(
        interaction: discord.Interaction,
        gangname: str,
        activity_type: app_commands.Choice[str],
        description: str | None = None,
    ):
        if description is not None and len(description) > DESCRIPTION_MAX_LENGTH:
            await reply_private(
                interaction,
                f"Descriptions must be {DESCRIPTION_MAX_LENGTH} characters or fewer.",
            )
            return
        await deps.add_flow.submit_direct(
            interaction,
            activity_type=ActivityType.from_label(activity_type.value),
            gang_name=gangname.strip(),
            description=description,
        )

    @activity.autocomplete("gangname")
    async def activity_gang_autocomplete(interaction: discord.Interaction, current: str):
        return await gang_name_choices(deps.roster, current)

    @app_commands.command(name="quickadd", description="Add an activity with buttons and forms")
    async def quickadd(interaction: discord.Interaction):
        await deps.add_flow.start_quickadd(interaction)

    bot.tree.add_command(activity)
    bot.tree.add_command(quickadd)
