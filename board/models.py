from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Any


class ActivityType(Enum):
    """Board categories in display order. Each carries its label, token code and color."""

    OUR_TURN = ("Our Turn", "our", 0x00FF00)
    OPPS_TURN = ("Opps Turn", "opp", 0xFF0000)
    EBK = ("EBK", "ebk", 0xFFA500)
    NO_BEEF = ("No Beef", "nob", 0x0000FF)

    def __init__(self, label: str, code: str, color: int) -> None:
        self.label = label
        self.code = code
        self.color = color

    @classmethod
    def from_label(cls, label: str) -> "ActivityType":
        clean = str(label or "").strip()
        for member in cls:
            if member.label == clean:
                return member
        raise ValueError(f"Unknown activity type: {label!r}")

    @classmethod
    def from_code(cls, code: str) -> "ActivityType":
        clean = str(code or "").strip()
        for member in cls:
            if member.code == clean:
                return member
        raise ValueError(f"Unknown activity type code: {code!r}")


def parse_iso_timestamp(value: str) -> datetime:
    text = str(value or "").strip()
    if not text:
        raise ValueError("Empty timestamp")
    # JSON written by older builds uses a trailing Z.
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    dt = datetime.fromisoformat(text)
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


def _optional_id(value: Any) -> int | None:
    if value is None or value == "":
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


@dataclass(slots=True)
class Activity:
    id: str
    gang_name: str
    type: ActivityType
    description: str
    created_at: str
    created_by: str
    updated_at: str | None = None
    updated_by: str | None = None

    @property
    def created_at_dt(self) -> datetime:
        return parse_iso_timestamp(self.created_at)

    @classmethod
    def from_dict(cls, raw: Any) -> "Activity":
        if not isinstance(raw, dict):
            raise ValueError("Activity entry must be an object")
        gang_name = raw.get("gangName")
        if not isinstance(gang_name, str) or not gang_name:
            raise ValueError("Activity entry is missing gangName")
        activity_id = str(raw.get("id") or "").strip()
        if not activity_id:
            raise ValueError(f"Activity for {gang_name!r} is missing id")
        created_at = str(raw.get("createdAt") or "")
        parse_iso_timestamp(created_at)
        description = raw.get("description")
        updated_at = raw.get("updatedAt")
        updated_by = raw.get("updatedBy")
        return cls(
            id=activity_id,
            gang_name=gang_name,
            type=ActivityType.from_label(str(raw.get("type") or "")),
            description=description if isinstance(description, str) else "",
            created_at=created_at,
            created_by=str(raw.get("createdBy") or ""),
            updated_at=str(updated_at) if updated_at else None,
            updated_by=str(updated_by) if updated_by else None,
        )

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {
            "id": self.id,
            "gangName": self.gang_name,
            "description": self.description,
            "type": self.type.label,
            "createdAt": self.created_at,
            "createdBy": self.created_by,
        }
        if self.updated_at is not None:
            out["updatedAt"] = self.updated_at
        if self.updated_by is not None:
            out["updatedBy"] = self.updated_by
        return out


@dataclass(slots=True)
class BoardConfig:
    activity_channel_id: int | None = None
    activity_message_id: int | None = None
    stream_channel_id: int | None = None

    @classmethod
    def from_dict(cls, raw: Any) -> "BoardConfig":
        channels = raw.get("channels") if isinstance(raw, dict) else None
        if not isinstance(channels, dict):
            return cls()
        activity = channels.get("activity") if isinstance(channels.get("activity"), dict) else {}
        stream = channels.get("stream") if isinstance(channels.get("stream"), dict) else {}
        return cls(
            activity_channel_id=_optional_id(activity.get("channelId")),
            activity_message_id=_optional_id(activity.get("messageId")),
            stream_channel_id=_optional_id(stream.get("channelId")),
        )

    def to_dict(self) -> dict[str, Any]:
        channels: dict[str, Any] = {}
        if self.activity_channel_id is not None:
            channels["activity"] = {
                "channelId": str(self.activity_channel_id),
                "messageId": str(self.activity_message_id) if self.activity_message_id is not None else None,
            }
        if self.stream_channel_id is not None:
            channels["stream"] = {"channelId": str(self.stream_channel_id)}
        return {"channels": channels}
