from __future__ import annotations

from typing import Any

from board.documents import JsonDocumentStore
from config.defaults import CHOICE_LIMIT
from config.defaults import GANGS_DOCUMENT
from config.defaults import GANG_NAME_MAX_LENGTH


def parse_gang_names(raw: Any) -> list[str]:
    if raw is None:
        return []
    if not isinstance(raw, list):
        print(f"[Store] {GANGS_DOCUMENT} document is not a list; treating as empty")
        return []
    seen: set[str] = set()
    out: list[str] = []
    for entry in raw:
        if not isinstance(entry, str) or not entry or entry in seen:
            continue
        seen.add(entry)
        out.append(entry)
    return out


def filter_gang_names(names: list[str], query: str | None, limit: int = CHOICE_LIMIT) -> list[str]:
    needle = (query or "").strip().lower()
    matches = [name for name in names if needle in name.lower()]
    return matches[: max(0, int(limit))]


def validate_gang_name(raw: str | None, existing: list[str]) -> tuple[bool, str]:
    """Return (True, trimmed_name) or (False, user-facing reason)."""
    name = (raw or "").strip()
    if not name:
        return (False, "Gang name cannot be empty.")
    if len(name) > GANG_NAME_MAX_LENGTH:
        return (False, f"Gang name must be {GANG_NAME_MAX_LENGTH} characters or fewer.")
    if name in existing:
        return (False, f'Gang "{name}" already exists.')
    return (True, name)


class GangRoster:
    def __init__(self, documents: JsonDocumentStore) -> None:
        self.documents = documents

    async def list(self) -> list[str]:
        return parse_gang_names(await self.documents.load(GANGS_DOCUMENT))

    async def contains(self, name: str) -> bool:
        return name in await self.list()

    async def search(self, query: str | None, limit: int = CHOICE_LIMIT) -> list[str]:
        return filter_gang_names(await self.list(), query, limit)

    async def add(self, raw_name: str | None) -> tuple[bool, str]:
        names = await self.list()
        ok, result = validate_gang_name(raw_name, names)
        if not ok:
            return (False, result)
        names.append(result)
        await self.documents.save(GANGS_DOCUMENT, names)
        return (True, f'Gang "{result}" has been added to the list.')

    async def remove(self, name: str | None) -> tuple[bool, str]:
        target = name or ""
        names = await self.list()
        if target not in names:
            return (False, f'Gang "{target}" not found.')
        # Activities that reference the gang stay on the board.
        await self.documents.save(GANGS_DOCUMENT, [n for n in names if n != target])
        return (True, f'Gang "{target}" has been removed from the list.')
