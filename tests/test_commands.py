from __future__ import annotations

import tempfile
import unittest
from pathlib import Path
from types import SimpleNamespace

try:
    import discord
    from discord import app_commands
    from discord.ext import commands
except ModuleNotFoundError:
    discord = None
    app_commands = None
    commands = None

from board.config_store import ConfigStore
from board.documents import JsonDocumentStore
from board.models import ActivityType
from board.roster import GangRoster
from misc.adhoc_modules.stream_announcer import StreamAnnouncer

if commands is not None:
    from misc.commands.command_deps import CommandDeps
    from misc.commands.commands_activity import gang_name_choices
    from misc.commands.commands_activity import register as register_activity
    from misc.commands.commands_channels import register as register_channels
    from misc.commands.commands_gangs import build_gang_list_embed
    from misc.commands.commands_gangs import register as register_gangs


class _FakeResponse:
    def __init__(self):
        self.done = False
        self.messages: list[dict] = []

    def is_done(self) -> bool:
        return self.done

    async def send_message(self, content=None, **kwargs):
        self.done = True
        self.messages.append({"content": content, **kwargs})


class _FakeChannel:
    def __init__(self, channel_id: int):
        self.id = channel_id
        self.mention = f"<#{channel_id}>"
        self.sent: list[dict] = []

    async def send(self, **kwargs):
        self.sent.append(kwargs)


class _FakeClient:
    def __init__(self, channels=()):
        self._channels = {c.id: c for c in channels}

    def get_channel(self, channel_id: int):
        return self._channels.get(int(channel_id))

    async def fetch_channel(self, channel_id: int):
        raise discord.NotFound(SimpleNamespace(status=404, reason="Not Found"), "Unknown Channel")


def _interaction(client=None):
    return SimpleNamespace(
        user=SimpleNamespace(id=42, mention="<@42>"),
        client=client or _FakeClient(),
        response=_FakeResponse(),
        followup=SimpleNamespace(),
    )


class _RecordingFlow:
    def __init__(self):
        self.direct: list[dict] = []
        self.quickadds = 0

    async def submit_direct(self, interaction, **kwargs):
        self.direct.append(kwargs)

    async def start_quickadd(self, interaction):
        self.quickadds += 1


class _RecordingPublisher:
    def __init__(self):
        self.refreshes = 0

    async def refresh(self, bot) -> bool:
        self.refreshes += 1
        return True


class _ConfigThatMustNotBeRead:
    async def load(self):
        raise AssertionError("config should not be read for an invalid link")


@unittest.skipIf(commands is None, "discord.py not installed")
class BoardCommandsTests(unittest.IsolatedAsyncioTestCase):
    async def asyncSetUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        documents = JsonDocumentStore(Path(self._tmp.name))
        self.roster = GangRoster(documents)
        self.config = ConfigStore(documents)
        self.flow = _RecordingFlow()
        self.publisher = _RecordingPublisher()
        self.bot = self._bot(config_store=self.config)

    async def asyncTearDown(self):
        self._tmp.cleanup()

    def _bot(self, **overrides):
        bot = commands.Bot(command_prefix="!", intents=discord.Intents.none())
        values = dict(
            roster=self.roster,
            config_store=self.config,
            publisher=self.publisher,
            add_flow=self.flow,
            stream_announcer=StreamAnnouncer(templates_path=str(Path(self._tmp.name) / "missing.yml")),
        )
        values.update(overrides)
        deps = CommandDeps(**values)
        register_activity(bot, deps=deps)
        register_gangs(bot, deps=deps)
        register_channels(bot, deps=deps)
        return bot

    def _command(self, name: str):
        cmd = self.bot.tree.get_command(name)
        self.assertIsNotNone(cmd, name)
        return cmd

    async def test_all_commands_registered(self):
        names = {cmd.name for cmd in self.bot.tree.get_commands()}
        self.assertEqual(names, {"activity", "quickadd", "channel", "gangadd", "gangremove", "gangs", "stream"})

    async def test_gangadd_duplicate_is_rejected(self):
        first = _interaction()
        await self._command("gangadd").callback(first, name="Crew")
        self.assertEqual(first.response.messages[0]["content"], 'Gang "Crew" has been added to the list.')
        self.assertTrue(first.response.messages[0]["ephemeral"])

        second = _interaction()
        await self._command("gangadd").callback(second, name="Crew")
        self.assertEqual(second.response.messages[0]["content"], 'Gang "Crew" already exists.')
        self.assertEqual(await self.roster.list(), ["Crew"])

    async def test_gangremove_and_gangs(self):
        empty = _interaction()
        await self._command("gangs").callback(empty)
        self.assertEqual(
            empty.response.messages[0]["content"],
            "No gangs have been added yet. Use /gangadd to add gangs.",
        )

        await self.roster.add("Crew")
        await self.roster.add("Kings")
        removed = _interaction()
        await self._command("gangremove").callback(removed, name="Crew")
        self.assertEqual(removed.response.messages[0]["content"], 'Gang "Crew" has been removed from the list.')

        listing = _interaction()
        await self._command("gangs").callback(listing)
        embed = listing.response.messages[0]["embed"]
        self.assertEqual(embed.title, "Gang List")
        self.assertEqual(embed.description, "1. Kings")

    async def test_long_gang_list_ends_on_whole_line_with_count(self):
        names = [f"Gang {i:03d} " + "x" * 50 for i in range(100)]
        embed = build_gang_list_embed(names)
        self.assertLessEqual(len(embed.description), 4096)
        *rows, marker = embed.description.split("\n")
        self.assertEqual(rows, [f"{i}. {name}" for i, name in enumerate(names[: len(rows)], start=1)])
        self.assertEqual(marker, f"…and {100 - len(rows)} more")
        self.assertEqual(embed.footer.text, "100 gangs")

    async def test_autocomplete_choices(self):
        for name in ("Southside", "North", "south kings"):
            await self.roster.add(name)
        choices = await gang_name_choices(self.roster, "SOUTH")
        self.assertEqual([c.value for c in choices], ["Southside", "south kings"])

    async def test_activity_passes_through_to_flow(self):
        interaction = _interaction()
        await self._command("activity").callback(
            interaction,
            gangname=" Crew ",
            activity_type=app_commands.Choice(name="EBK", value="EBK"),
            description="by the docks",
        )
        self.assertEqual(
            self.flow.direct,
            [{"activity_type": ActivityType.EBK, "gang_name": "Crew", "description": "by the docks"}],
        )

    async def test_activity_rejects_long_description(self):
        interaction = _interaction()
        await self._command("activity").callback(
            interaction,
            gangname="Crew",
            activity_type=app_commands.Choice(name="EBK", value="EBK"),
            description="x" * 201,
        )
        self.assertEqual(self.flow.direct, [])
        self.assertIn("200", interaction.response.messages[0]["content"])

    async def test_quickadd_starts_flow(self):
        await self._command("quickadd").callback(_interaction())
        self.assertEqual(self.flow.quickadds, 1)

    async def test_channel_activity_resets_board_and_refreshes(self):
        await self.config.set_activity_channel(1)
        await self.config.set_board_message(99)
        interaction = _interaction()
        await self._command("channel").callback(
            interaction,
            channel_type=app_commands.Choice(name="Activity board", value="activity"),
            channel=SimpleNamespace(id=555, mention="<#555>"),
        )
        config = await self.config.load()
        self.assertEqual((config.activity_channel_id, config.activity_message_id), (555, None))
        self.assertEqual(
            interaction.response.messages[0]["content"],
            "Activities will now be posted and updated in <#555>.",
        )
        self.assertEqual(self.publisher.refreshes, 1)

    async def test_channel_stream(self):
        interaction = _interaction()
        await self._command("channel").callback(
            interaction,
            channel_type=app_commands.Choice(name="Stream announcements", value="stream"),
            channel=SimpleNamespace(id=777, mention="<#777>"),
        )
        self.assertEqual((await self.config.load()).stream_channel_id, 777)
        self.assertEqual(self.publisher.refreshes, 0)

    async def test_stream_rejects_non_youtube_before_config_lookup(self):
        self.bot = self._bot(config_store=_ConfigThatMustNotBeRead())
        interaction = _interaction()
        await self._command("stream").callback(interaction, link="https://twitch.tv/crew")
        self.assertIn("YouTube", interaction.response.messages[0]["content"])

    async def test_stream_without_channel_configured(self):
        interaction = _interaction()
        await self._command("stream").callback(interaction, link="https://youtu.be/abc")
        self.assertIn("No stream channel", interaction.response.messages[0]["content"])

    async def test_stream_with_missing_channel(self):
        await self.config.set_stream_channel(777)
        interaction = _interaction(_FakeClient())
        await self._command("stream").callback(interaction, link="https://youtu.be/abc")
        self.assertIn("could not be found", interaction.response.messages[0]["content"])

    async def test_stream_posts_announcement(self):
        await self.config.set_stream_channel(777)
        target = _FakeChannel(777)
        interaction = _interaction(_FakeClient([target]))
        await self._command("stream").callback(interaction, link="https://youtu.be/abc")

        self.assertEqual(len(target.sent), 1)
        self.assertIn("<@42>", target.sent[0]["content"])
        self.assertEqual(target.sent[0]["embed"].url, "https://youtu.be/abc")
        self.assertEqual(interaction.response.messages[0]["content"], "Stream announced in <#777>.")


if __name__ == "__main__":
    unittest.main()
