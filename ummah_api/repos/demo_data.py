"""
In-memory collections backing demo mode.

Demo mode is used when no database is configured, and as the fallback
answer for reads whose live query failed. Records have the same keys as the
rows the database returns: `new_record` starts from every column of the
model with its column default applied.

The collections are mutated in place without locking.
"""

import time
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from typing import Any

from ummah_api.db.models import Base

Record = dict[str, Any]

DEMO_USER_ID = "8c661c6c-04a2-4323-a63a-895886883f7c"
DEMO_ADMIN_ID = "550e8400-e29b-41d4-a716-446655440002"


def blank_record(model: type[Base]) -> Record:
    """Return a dict with every column of `model`, set to its column default."""
    record: Record = {}
    for column in model.__table__.columns:
        default = column.default
        if default is None:
            record[column.name] = None
        elif default.is_callable:
            record[column.name] = default.arg(None)
        elif default.is_scalar:
            record[column.name] = default.arg
        else:
            record[column.name] = None
    return record


def newest_first(records: Iterable[Record], key: str = "created_at") -> list[Record]:
    return sorted(records, key=lambda r: r[key], reverse=True)


@dataclass
class DemoData:
    """Fixed demo collections plus whatever demo-mode writes have added."""

    users: list[Record] = field(default_factory=list)
    posts: list[Record] = field(default_factory=list)
    dua_requests: list[Record] = field(default_factory=list)
    comments: list[Record] = field(default_factory=list)
    likes: list[Record] = field(default_factory=list)
    bookmarks: list[Record] = field(default_factory=list)
    communities: list[Record] = field(default_factory=list)
    community_members: list[Record] = field(default_factory=list)
    events: list[Record] = field(default_factory=list)
    event_attendees: list[Record] = field(default_factory=list)
    reports: list[Record] = field(default_factory=list)
    clock: Callable[[], float] = time.time
    _last_id_ms: int = 0

    def next_id(self, kind: str) -> str:
        """Generate `demo-<kind>-<millis>`, never repeating a timestamp."""
        now_ms = int(self.clock() * 1000)
        if now_ms <= self._last_id_ms:
            now_ms = self._last_id_ms + 1
        self._last_id_ms = now_ms
        return f"demo-{kind}-{now_ms}"

    def new_record(
        self,
        model: type[Base],
        kind: str,
        data: Mapping[str, Any],
        **overrides: Any,
    ) -> Record:
        """Build a record for `model` from `data`, with a demo id and fresh timestamps."""
        now = datetime.now(UTC)
        record = blank_record(model)
        for stamp in ("created_at", "updated_at", "joined_at", "registered_at"):
            if stamp in record:
                record[stamp] = now
        record.update(data)
        record.update(overrides)
        record["id"] = self.next_id(kind)
        return record

    def find(self, collection: list[Record], **criteria: Any) -> Record | None:
        for record in collection:
            if all(record.get(k) == v for k, v in criteria.items()):
                return dict(record)
        return None

    def index_by_id(self, collection: list[Record]) -> dict[str, Record]:
        return {record["id"]: dict(record) for record in collection}

    @classmethod
    def seeded(cls) -> "DemoData":
        """Demo collections with two users and two posts."""
        now = datetime.now(UTC)
        one_hour_ago = now - timedelta(hours=1)
        two_hours_ago = now - timedelta(hours=2)

        users = [
            {
                "id": DEMO_USER_ID,
                "email": "demo@netlify.app",
                "name": "Demo User",
                "username": "demo_user",
                "avatar_url": None,
                "bio": "Netlify demo user",
                "location": "İstanbul",
                "website": None,
                "verified": True,
                "role": "user",
                "created_at": now,
                "updated_at": now,
            },
            {
                "id": DEMO_ADMIN_ID,
                "email": "admin@netlify.app",
                "name": "Admin User",
                "username": "admin",
                "avatar_url": None,
                "bio": "Netlify demo admin",
                "location": "İstanbul",
                "website": None,
                "verified": True,
                "role": "admin",
                "created_at": now,
                "updated_at": now,
            },
        ]
        posts = [
            {
                "id": "demo-post-1",
                "user_id": DEMO_USER_ID,
                "content": "Esselamü aleyküm kardeşlerim! Platformumuza hoş geldiniz. 🕌",
                "type": "text",
                "media_url": None,
                "category": "Selamlaşma",
                "tags": ["demo", "selam"],
                "likes_count": 15,
                "comments_count": 3,
                "shares_count": 2,
                "created_at": one_hour_ago,
                "updated_at": one_hour_ago,
            },
            {
                "id": "demo-post-2",
                "user_id": DEMO_ADMIN_ID,
                "content": "Herkesi güzel ahlak ve kardeşlikle dolu bu topluluğa davet ediyoruz. 🤲",
                "type": "text",
                "media_url": None,
                "category": "Duyuru",
                "tags": ["duyuru", "hoşgeldin"],
                "likes_count": 28,
                "comments_count": 7,
                "shares_count": 5,
                "created_at": two_hours_ago,
                "updated_at": two_hours_ago,
            },
        ]
        return cls(users=users, posts=posts)
