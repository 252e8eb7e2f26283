from __future__ import annotations

import asyncio
import json
import os
import tempfile
from pathlib import Path
from typing import Any

from config.defaults import ACTIVITIES_DOCUMENT
from config.defaults import CONFIG_DOCUMENT
from config.defaults import GANGS_DOCUMENT


DOCUMENT_DEFAULTS: dict[str, Any] = {
    ACTIVITIES_DOCUMENT: [],
    GANGS_DOCUMENT: [],
    CONFIG_DOCUMENT: {"channels": {}},
}


def _read_json_sync(path: Path) -> Any | None:
    if not path.exists():
        return None
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        print(f"[Store] could not parse {path.name}: {e}; using empty default")
        return None


def _write_json_sync(path: Path, payload: Any) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(prefix=f".{path.stem}-", suffix=".tmp", dir=str(path.parent))
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as handle:
            json.dump(payload, handle, indent=2, ensure_ascii=False)
        os.replace(tmp_name, path)
    except Exception:
        try:
            os.unlink(tmp_name)
        except OSError:
            pass
        raise


class JsonDocumentStore:
    """Whole-document JSON load/save for the three bot documents.

    Each single read or write is serialized per document, but nothing spans a
    load-modify-save sequence: concurrent writers race and the last save wins.
    """

    def __init__(self, data_dir: str | os.PathLike[str]) -> None:
        self.data_dir = Path(data_dir)
        self._locks: dict[str, asyncio.Lock] = {}

    def path_for(self, name: str) -> Path:
        if name not in DOCUMENT_DEFAULTS:
            raise ValueError(f"Unknown document: {name}")
        return self.data_dir / f"{name}.json"

    def _lock(self, name: str) -> asyncio.Lock:
        lock = self._locks.get(name)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[name] = lock
        return lock

    async def load(self, name: str) -> Any | None:
        path = self.path_for(name)
        async with self._lock(name):
            return await asyncio.to_thread(_read_json_sync, path)

    async def save(self, name: str, payload: Any) -> None:
        path = self.path_for(name)
        async with self._lock(name):
            await asyncio.to_thread(_write_json_sync, path, payload)

    async def ensure_defaults(self) -> list[str]:
        created: list[str] = []
        for name, default in DOCUMENT_DEFAULTS.items():
            if self.path_for(name).exists():
                continue
            await self.save(name, json.loads(json.dumps(default)))
            created.append(name)
        if created:
            print(f"[Store] created default documents: {', '.join(created)}")
        return created
