from __future__ import annotations

import discord
from discord import app_commands
from discord.ext import commands

from config.defaults import GANG_LIST_COLOR
from config.defaults import GANG_NAME_MAX_LENGTH
from misc.board_publisher import join_lines_within
from misc.commands.command_deps import CommandDeps
from misc.commands.commands_activity import gang_name_choices
from misc.interaction_replies import reply_private


def build_gang_list_embed(names: list[str]) -> discord.Embed:
    embed = discord.Embed(
        title="Gang List",
        description=join_lines_within([f"{i}. {name}" for i, name in enumerate(names, start=1)]),
        colour=discord.Colour(GANG_LIST_COLOR),
    )
    embed.set_footer(text=f"{len(names)} gangs")
    return embed


def register(bot: commands.Bot, *, deps: CommandDeps) -> None:
    @app_commands.command(name="gangadd", description="Add a gang to the roster")
    @app_commands.describe(name="Gang name")
    async def gangadd(interaction: discord.Interaction, name: app_commands.Range[str, 1, GANG_NAME_MAX_LENGTH]):
        ok, msg = await deps.roster.add(name)
        if ok:
            print(f"[Commands] gangadd name={name.strip()!r} user={interaction.user.id}")
        await reply_private(interaction, msg)

    @app_commands.command(name="gangremove", description="Remove a gang from the roster")
    @app_commands.describe(name="Gang name")
    async def gangremove(interaction: discord.Interaction, name: str):
        ok, msg = await deps.roster.remove(name)
        if ok:
            print(f"[Commands] gangremove name={name!r} user={interaction.user.id}")
        await reply_private(interaction, msg)

    @gangremove.autocomplete("name")
    async def gangremove_autocomplete(interaction: discord.Interaction, current: str):
        return await gang_name_choices(deps.roster, current)

    @app_commands.command(name="gangs", description="List every gang on the roster")
    async def gangs(interaction: discord.Interaction):
        names = await deps.roster.list()
        if not names:
            await reply_private(interaction, "No gangs have been added yet. Use /gangadd to add gangs.")
            return
        await reply_private(interaction, embed=build_gang_list_embed(names))

    bot.tree.add_command(gangadd)
    bot.tree.add_command(gangremove)
    bot.tree.add_command(gangs)
