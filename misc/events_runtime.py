from __future__ import annotations

import discord
from discord import app_commands
from discord.ext import commands

from misc.interaction_replies import reply_generic_failure
from misc.runtime_deps import RuntimeBootDeps
from misc.runtime_deps import RuntimeDeps


FLOW_INTERACTION_TYPES = (
    discord.InteractionType.component,
    discord.InteractionType.modal_submit,
)


async def sync_command_tree(bot: commands.Bot, guild_id: int | None) -> int:
    if guild_id is not None:
        guild = discord.Object(id=int(guild_id))
        bot.tree.copy_global_to(guild=guild)
        synced = await bot.tree.sync(guild=guild)
        print(f"[Commands] synced {len(synced)} commands to guild {guild_id}")
    else:
        synced = await bot.tree.sync()
        print(f"[Commands] synced {len(synced)} global commands (may take up to an hour to appear)")
    return len(synced)


def register_runtime_events(
    bot: commands.Bot,
    *,
    deps: RuntimeDeps,
    boot: RuntimeBootDeps,
) -> None:
    @bot.event
    async def on_ready():
        print(f"Gangboard is online as {bot.user}")
        await deps.documents.ensure_defaults()

        if boot.sync_commands and not getattr(bot, "_commands_synced", False):
            try:
                await sync_command_tree(bot, boot.guild_id)
                bot._commands_synced = True
            except discord.HTTPException as e:
                print(f"[Commands] sync failed: {e}")

        activities = await deps.activity_store.list_all()
        print(f"[Board] loaded {len(activities)} activities")
        await deps.publisher.refresh(bot)

    @bot.event
    async def on_interaction(interaction: discord.Interaction):
        if interaction.type not in FLOW_INTERACTION_TYPES:
            return
        await deps.add_flow.handle_interaction(interaction)

    @bot.tree.error
    async def on_app_command_error(interaction: discord.Interaction, error: app_commands.AppCommandError):
        name = getattr(interaction.command, "name", None) or "unknown"
        await reply_generic_failure(interaction, f"/{name}", error)
