from __future__ import annotations

from misc.commands.command_deps import CommandDeps
from misc.commands.commands_activity import register as register_activity
from misc.commands.commands_channels import register as register_channels
from misc.commands.commands_gangs import register as register_gangs
from misc.events_runtime import register_runtime_events
from misc.runtime_deps import RuntimeBootDeps
from misc.runtime_deps import RuntimeDeps


def wire_bot_runtime(
    bot,
    *,
    documents,
    activity_store,
    roster,
    config_store,
    publisher,
    add_flow,
    stream_announcer,
    guild_id: int | None,
    sync_commands: bool = True,
) -> None:
    command_deps = CommandDeps(
        activity_store=activity_store,
        roster=roster,
        config_store=config_store,
        publisher=publisher,
        add_flow=add_flow,
        stream_announcer=stream_announcer,
    )

    register_activity(bot, deps=command_deps)
    register_gangs(bot, deps=command_deps)
    register_channels(bot, deps=command_deps)

    register_runtime_events(
        bot,
        deps=RuntimeDeps(
            documents=documents,
            activity_store=activity_store,
            publisher=publisher,
            add_flow=add_flow,
        ),
        boot=RuntimeBootDeps(
            guild_id=guild_id,
            sync_commands=sync_commands,
        ),
    )
