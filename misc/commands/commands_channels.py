from __future__ import annotations

import discord
from discord import app_commands
from discord.ext import commands

from misc.adhoc_modules.stream_announcer import is_youtube_link
from misc.board_publisher import resolve_channel
from misc.commands.command_deps import CommandDeps
from misc.interaction_replies import reply_private


CHANNEL_TYPE_CHOICES = [
    app_commands.Choice(name="Activity board", value="activity"),
    app_commands.Choice(name="Stream announcements", value="stream"),
]


def build_stream_embed(announcement) -> discord.Embed:
    return discord.Embed(
        title=announcement.title,
        description=announcement.description,
        url=announcement.url if announcement.url.lower().startswith(("http://", "https://")) else None,
        colour=discord.Colour(announcement.color),
        timestamp=discord.utils.utcnow(),
    )


def register(bot: commands.Bot, *, deps: CommandDeps) -> None:
    @app_commands.command(name="channel", description="Choose where the board or stream announcements are posted")
    @app_commands.describe(channel_type="What the channel is used for", channel="Target text channel")
    @app_commands.rename(channel_type="type")
    @app_commands.choices(channel_type=CHANNEL_TYPE_CHOICES)
    async def channel(
        interaction: discord.Interaction,
        channel_type: app_commands.Choice[str],
        channel: discord.TextChannel,
    ):
        if channel_type.value == "activity":
            await deps.config_store.set_activity_channel(channel.id)
            print(f"[Commands] activity channel set to {channel.id} by user={interaction.user.id}")
            await reply_private(interaction, f"Activities will now be posted and updated in {channel.mention}.")
            await deps.publisher.refresh(interaction.client)
            return
        if channel_type.value == "stream":
            await deps.config_store.set_stream_channel(channel.id)
            print(f"[Commands] stream channel set to {channel.id} by user={interaction.user.id}")
            await reply_private(interaction, f"Stream announcements will now be posted in {channel.mention}.")
            return
        await reply_private(interaction, f"Unknown channel type: {channel_type.value}")

    @app_commands.command(name="stream", description="Announce a YouTube livestream")
    @app_commands.describe(link="YouTube link to the stream")
    async def stream(interaction: discord.Interaction, link: str):
        if not is_youtube_link(link):
            await reply_private(interaction, "Please provide a valid YouTube link (youtube.com or youtu.be).")
            return

        config = await deps.config_store.load()
        if config.stream_channel_id is None:
            await reply_private(interaction, "No stream channel is set. Use /channel type:stream first.")
            return
        target = await resolve_channel(interaction.client, config.stream_channel_id)
        if target is None:
            await reply_private(interaction, "The stream channel could not be found. Set it again with /channel.")
            return

        announcement = deps.stream_announcer.render(user_mention=interaction.user.mention, link=link)
        await target.send(content=announcement.content, embed=build_stream_embed(announcement))
        print(f"[Stream] announced {announcement.url} in channel {config.stream_channel_id} for user={interaction.user.id}")
        await reply_private(interaction, f"Stream announced in {target.mention}.")

    bot.tree.add_command(channel)
    bot.tree.add_command(stream)
