from __future__ import annotations

import importlib
import tempfile


def _try_import_or_skip(module_name: str, pip_name: str | None = None) -> bool:
    try:
        importlib.import_module(module_name)
        return True
    except ModuleNotFoundError:
        install_name = pip_name or module_name
        print(
            f"Smoke wiring check skipped: missing dependency '{module_name}'. "
            f"Install requirements and retry (e.g. `pip install {install_name}` "
            f"or `pip install -e .`)."
        )
        return False


def _main() -> int:
    if not _try_import_or_skip("discord", "discord.py"):
        return 0
    if not _try_import_or_skip("yaml", "PyYAML"):
        return 0

    import discord
    from discord.ext import commands
    from board.activity_store import ActivityStore
    from board.config_store import ConfigStore
    from board.documents import JsonDocumentStore
    from board.pagination import PaginationState
    from board.roster import GangRoster
    from misc.add_flow import AddFlowHandler
    from misc.adhoc_modules.stream_announcer import StreamAnnouncer
    from misc.adhoc_modules.stream_announcer import default_templates_path
    from misc.board_publisher import BoardPublisher
    from misc.runtime_wiring import wire_bot_runtime

    intents = discord.Intents.none()
    bot = commands.Bot(command_prefix="!", intents=intents)

    with tempfile.TemporaryDirectory() as tmp:
        documents = JsonDocumentStore(tmp)
        activity_store = ActivityStore(documents)
        roster = GangRoster(documents)
        config_store = ConfigStore(documents)
        publisher = BoardPublisher(
            activity_store=activity_store,
            config_store=config_store,
            pagination=PaginationState(),
        )
        wire_bot_runtime(
            bot,
            documents=documents,
            activity_store=activity_store,
            roster=roster,
            config_store=config_store,
            publisher=publisher,
            add_flow=AddFlowHandler(activity_store=activity_store, roster=roster, publisher=publisher),
            stream_announcer=StreamAnnouncer(templates_path=default_templates_path()),
            guild_id=None,
            sync_commands=False,
        )

    expected_commands = {
        "activity",
        "quickadd",
        "channel",
        "gangadd",
        "gangremove",
        "gangs",
        "stream",
    }
    existing_commands = {cmd.name for cmd in bot.tree.get_commands()}
    missing = sorted(expected_commands - existing_commands)
    if missing:
        raise RuntimeError(f"Missing expected commands: {missing}")

    if not hasattr(bot, "on_ready") or not hasattr(bot, "on_interaction"):
        raise RuntimeError("Runtime events were not registered")

    print("Smoke wiring check passed.")
    return 0


if __name__ == "__main__":
    raise SystemExit(_main())
