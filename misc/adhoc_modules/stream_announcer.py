from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml


YOUTUBE_MARKERS = ("youtube.com", "youtu.be")

DEFAULT_STREAM_TEMPLATE: dict[str, Any] = {
    "content": "{user} is live now! {link}",
    "title": "Live on YouTube",
    "description": "Come hang out in the stream: {link}",
    "color": 0xFF0000,
}


@dataclass(slots=True)
class StreamAnnouncement:
    content: str
    title: str
    description: str
    color: int
    url: str


def is_youtube_link(link: str | None) -> bool:
    text = (link or "").strip().lower()
    return any(marker in text for marker in YOUTUBE_MARKERS)


def _fill(template: str, *, user: str, link: str) -> str:
    # Only these two placeholders are substituted; other braces pass through.
    return template.replace("{user}", user).replace("{link}", link)


class StreamAnnouncer:
    def __init__(self, *, templates_path: str) -> None:
        self.templates_path = str(templates_path)
        self._template_cache: dict[str, Any] | None = None
        self._template_mtime: float | None = None

    def _read_template(self) -> dict[str, Any] | None:
        path = Path(self.templates_path)
        if not path.exists():
            print(f"[Stream] template file not found: {self.templates_path}; using built-in template")
            return None
        try:
            raw = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
        except (OSError, yaml.YAMLError) as e:
            print(f"[Stream] could not read {self.templates_path}: {e}; using built-in template")
            return None
        if not isinstance(raw, dict):
            print("[Stream] template file must contain a top-level mapping; using built-in template")
            return None
        announcement = raw.get("announcement")
        return announcement if isinstance(announcement, dict) else raw

    @staticmethod
    def _normalize_template(raw: dict[str, Any] | None) -> dict[str, Any]:
        raw = raw or {}
        out: dict[str, Any] = {}
        for key in ("content", "title", "description"):
            value = raw.get(key)
            out[key] = str(value).strip() if isinstance(value, str) and value.strip() else DEFAULT_STREAM_TEMPLATE[key]
        color = raw.get("color", DEFAULT_STREAM_TEMPLATE["color"])
        try:
            out["color"] = int(str(color).replace("#", "0x"), 0) if isinstance(color, str) else int(color)
        except (TypeError, ValueError):
            out["color"] = DEFAULT_STREAM_TEMPLATE["color"]
        return out

    def template(self, force_reload: bool = False) -> dict[str, Any]:
        path = Path(self.templates_path)
        mtime = path.stat().st_mtime if path.exists() else None
        if not force_reload and self._template_cache is not None and mtime == self._template_mtime:
            return self._template_cache
        data = self._normalize_template(self._read_template())
        self._template_cache = data
        self._template_mtime = mtime
        return data

    def render(self, *, user_mention: str, link: str) -> StreamAnnouncement:
        tpl = self.template()
        clean_link = (link or "").strip()
        return StreamAnnouncement(
            content=_fill(tpl["content"], user=user_mention, link=clean_link),
            title=_fill(tpl["title"], user=user_mention, link=clean_link),
            description=_fill(tpl["description"], user=user_mention, link=clean_link),
            color=int(tpl["color"]),
            url=clean_link,
        )


def default_templates_path() -> str:
    # <checkout>/config/stream_templates.yml
    here = Path(__file__).resolve().parents[2]
    return os.path.join(here, "config", "stream_templates.yml")
