from __future__ import annotations

from typing import Any

from config.defaults import GENERIC_FAILURE_TEXT


async def reply_private(interaction: Any, content: str | None = None, *, embed=None, view=None) -> None:
    kwargs: dict[str, Any] = {"ephemeral": True}
    if embed is not None:
        kwargs["embed"] = embed
    if view is not None:
        kwargs["view"] = view
    if interaction.response.is_done():
        await interaction.followup.send(content, **kwargs)
    else:
        await interaction.response.send_message(content, **kwargs)


async def reply_generic_failure(interaction: Any, where: str, error: BaseException) -> None:
    print(f"[Interaction] {where} failed: {type(error).__name__}: {error}")
    try:
        await reply_private(interaction, GENERIC_FAILURE_TEXT)
    except Exception as e:
        print(f"[Interaction] could not report failure for {where}: {e}")
