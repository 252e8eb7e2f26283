from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class CommandDeps:
    # Stores
    activity_store: Any = None
    roster: Any = None
    config_store: Any = None

    # Board + interactive flow
    publisher: Any = None
    add_flow: Any = None

    # Ad-hoc modules
    stream_announcer: Any = None
