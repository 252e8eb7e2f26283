from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class RuntimeDeps:
    # stores
    documents: Any
    activity_store: Any

    # board + interactive flow
    publisher: Any
    add_flow: Any


@dataclass(frozen=True)
class RuntimeBootDeps:
    guild_id: int | None
    sync_commands: bool = True
