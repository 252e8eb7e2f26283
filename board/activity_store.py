from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import Any

from board.documents import JsonDocumentStore
from board.models import Activity
from board.models import ActivityType
from config.defaults import ACTIVITIES_DOCUMENT


def parse_activities(raw: Any) -> list[Activity]:
    if raw is None:
        return []
    if not isinstance(raw, list):
        print(f"[Store] {ACTIVITIES_DOCUMENT} document is not a list; treating as empty")
        return []
    out: list[Activity] = []
    for idx, entry in enumerate(raw):
        try:
            out.append(Activity.from_dict(entry))
        except ValueError as e:
            print(f"[Store] skipping malformed activity at index {idx}: {e}")
    return out


def sort_for_display(activities: list[Activity]) -> list[Activity]:
    # sorted() is stable, so equal createdAt values keep document order.
    return sorted(activities, key=lambda a: a.created_at_dt)


def upsert_activity(
    activities: list[Activity],
    *,
    gang_name: str,
    activity_type: ActivityType,
    description: str,
    actor_id: str,
    now: datetime,
    new_id: str,
) -> tuple[Activity, bool]:
    stamp = now.astimezone(timezone.utc).isoformat()
    for activity in activities:
        if activity.gang_name == gang_name:
            activity.type = activity_type
            activity.description = description
            activity.updated_at = stamp
            activity.updated_by = actor_id
            return activity, True

    activity = Activity(
        id=new_id,
        gang_name=gang_name,
        type=activity_type,
        description=description,
        created_at=stamp,
        created_by=actor_id,
    )
    activities.append(activity)
    return activity, False


class ActivityStore:
    def __init__(self, documents: JsonDocumentStore) -> None:
        self.documents = documents

    async def list_all(self) -> list[Activity]:
        return parse_activities(await self.documents.load(ACTIVITIES_DOCUMENT))

    async def list_by_type(self, activity_type: ActivityType) -> list[Activity]:
        activities = await self.list_all()
        return sort_for_display([a for a in activities if a.type is activity_type])

    async def upsert(
        self,
        gang_name: str,
        activity_type: ActivityType,
        description: str | None,
        actor_id: int | str,
        *,
        now: datetime | None = None,
    ) -> tuple[Activity, bool]:
        activities = await self.list_all()
        activity, was_update = upsert_activity(
            activities,
            gang_name=gang_name,
            activity_type=activity_type,
            description=description or "",
            actor_id=str(actor_id),
            now=now or datetime.now(timezone.utc),
            new_id=uuid.uuid4().hex,
        )
        await self.documents.save(ACTIVITIES_DOCUMENT, [a.to_dict() for a in activities])
        return activity, was_update
