"""
Storage facade for the Ummah Social API.

`Storage` is the single data-access object the route layer talks to. It runs
in one of two modes, fixed at construction:

- live mode: queries go through a `QueryClient`
- demo mode (no client): answers come from `DemoData` collections

Both modes return the same record shapes (plain dicts with the table's
columns; joined reads add the author under `users`), so callers never branch
on the mode. Failure policy per operation class lives in `repos.fallback`.
"""

from collections.abc import Mapping
from datetime import UTC, datetime
from typing import Any

from sqlalchemy import ColumnElement, or_

from ummah_api.core.db import DatabaseConnection
from ummah_api.db.models import (
    Base,
    Bookmark,
    Comment,
    Community,
    CommunityMember,
    DuaRequest,
    Event,
    EventAttendee,
    Like,
    Post,
    Report,
    User,
    UserBan,
)
from ummah_api.domain.enums import BanType, CommunityRole, ReportStatus
from ummah_api.repos.client import QueryClient, Record
from ummah_api.repos.demo_data import DemoData, newest_first
from ummah_api.repos.fallback import attempt_or_default, read_with_fallback, write_or_raise

DEFAULT_LIMIT = 50


def _utcnow() -> datetime:
    return datetime.now(UTC)


def _with_author(record: Record, author: Record | None) -> Record:
    return {**record, "users": author}


def _target_matches(
    record: Record, user_id: str, post_id: str | None, dua_request_id: str | None
) -> bool:
    if record["user_id"] != user_id:
        return False
    if post_id and record["post_id"] != post_id:
        return False
    if dua_request_id and record["dua_request_id"] != dua_request_id:
        return False
    return True


def _enrich_report(
    report: Record,
    users: Mapping[str, Record],
    posts: Mapping[str, Record],
    dua_requests: Mapping[str, Record],
) -> Record:
    return {
        **report,
        "reporter": users.get(report["reporter_id"]),
        "reported_user": users.get(report["reported_user_id"]),
        "post": posts.get(report["post_id"]) if report["post_id"] else None,
        "dua_request": (
            dua_requests.get(report["dua_request_id"]) if report["dua_request_id"] else None
        ),
    }


class Storage:
    """
    Repository facade over users, content, interactions, communities,
    events and moderation data.

    Args:
        client: Query client for live mode; None selects demo mode
        demo_data: Demo collections (seeded defaults when omitted)
    """

    def __init__(self, client: QueryClient | None = None, demo_data: DemoData | None = None):
        self._client = client
        self.demo_mode = client is None
        self.demo = demo_data or DemoData.seeded()

    @classmethod
    def from_connection(cls, connection: DatabaseConnection) -> "Storage":
        return cls(client=connection.client)

    # ------------------------------------------------------------------
    # Query helpers (live mode only)
    # ------------------------------------------------------------------

    async def _first(self, model: type[Base], *where: ColumnElement[bool]) -> Record | None:
        rows = await self._client.select(model, *where, limit=1)
        return rows[0] if rows else None

    async def _joined(
        self,
        model: type[Base],
        author_column: ColumnElement[Any],
        *where: ColumnElement[bool],
        limit: int | None = None,
    ) -> list[Record]:
        rows = await self._client.select_with_author(
            model,
            author_column,
            *where,
            order_by=(model.created_at.desc(),),
            limit=limit,
        )
        return [_with_author(entity, author) for entity, author in rows]

    async def _joined_one(
        self, model: type[Base], author_column: ColumnElement[Any], *where: ColumnElement[bool]
    ) -> Record | None:
        rows = await self._joined(model, author_column, *where, limit=1)
        return rows[0] if rows else None

    async def _index(self, model: type[Base], ids: set[str]) -> dict[str, Record]:
        """Fetch rows of `model` by id in a single query, keyed by id."""
        if not ids:
            return {}
        rows = await self._client.select(model, model.id.in_(sorted(ids)))
        return {row["id"]: row for row in rows}

    # ------------------------------------------------------------------
    # Demo helpers
    # ------------------------------------------------------------------

    def _demo_author(self, user_id: str | None) -> Record | None:
        return self.demo.find(self.demo.users, id=user_id)

    def _demo_joined(
        self, records: list[Record], author_key: str, limit: int | None = None
    ) -> list[Record]:
        ordered = newest_first(records)
        if limit is not None:
            ordered = ordered[:limit]
        return [_with_author(dict(r), self._demo_author(r[author_key])) for r in ordered]

    def _demo_joined_one(
        self, records: list[Record], author_key: str, record_id: str
    ) -> Record | None:
        found = self.demo.find(records, id=record_id)
        if found is None:
            return None
        return _with_author(found, self._demo_author(found[author_key]))

    # ------------------------------------------------------------------
    # Users
    # ------------------------------------------------------------------

    async def get_user(self, user_id: str) -> Record | None:
        return await read_with_fallback(
            self.demo_mode,
            "get_user",
            live=lambda: self._first(User, User.id == user_id),
            demo=lambda: self.demo.find(self.demo.users, id=user_id),
        )

    async def get_user_by_username(self, username: str) -> Record | None:
        return await read_with_fallback(
            self.demo_mode,
            "get_user_by_username",
            live=lambda: self._first(User, User.username == username),
            demo=lambda: self.demo.find(self.demo.users, username=username),
        )

    async def get_user_by_email(self, email: str) -> Record | None:
        return await read_with_fallback(
            self.demo_mode,
            "get_user_by_email",
            live=lambda: self._first(User, User.email == email),
            demo=lambda: self.demo.find(self.demo.users, email=email),
        )

    async def create_user(self, data: Mapping[str, Any]) -> Record:
        def demo() -> Record:
            user = self.demo.new_record(User, "user", data)
            self.demo.users.append(user)
            return dict(user)

        return await write_or_raise(
            self.demo_mode,
            "create_user",
            live=lambda: self._client.insert(User, data),
            demo=demo,
        )

    async def update_user(self, user_id: str, data: Mapping[str, Any]) -> Record | None:
        """Apply a partial profile update; None when the user does not exist."""

        def demo() -> Record | None:
            for user in self.demo.users:
                if user["id"] == user_id:
                    user.update(data)
                    user["updated_at"] = _utcnow()
                    return dict(user)
            return None

        return await write_or_raise(
            self.demo_mode,
            "update_user",
            live=lambda: self._client.update(
                User, {**data, "updated_at": _utcnow()}, User.id == user_id
            ),
            demo=demo,
        )

    # ------------------------------------------------------------------
    # Posts
    # ------------------------------------------------------------------

    async def get_posts(self, limit: int = DEFAULT_LIMIT) -> list[Record]:
        """Newest posts first, each with its author under `users`."""
        return await read_with_fallback(
            self.demo_mode,
            "get_posts",
            live=lambda: self._joined(Post, Post.user_id, limit=limit),
            demo=lambda: self._demo_joined(self.demo.posts, "user_id", limit),
        )

    async def get_post_by_id(self, post_id: str) -> Record | None:
        return await read_with_fallback(
            self.demo_mode,
            "get_post_by_id",
            live=lambda: self._joined_one(Post, Post.user_id, Post.id == post_id),
            demo=lambda: self._demo_joined_one(self.demo.posts, "user_id", post_id),
        )

    async def create_post(self, data: Mapping[str, Any]) -> Record:
        def demo() -> Record:
            post = self.demo.new_record(
                Post, "post", data, likes_count=0, comments_count=0, shares_count=0
            )
            self.demo.posts.insert(0, post)
            return dict(post)

        return await write_or_raise(
            self.demo_mode,
            "create_post",
            live=lambda: self._client.insert(Post, data),
            demo=demo,
        )

    async def delete_post(self, post_id: str) -> bool:
        """Delete a post; False when it did not exist or the delete failed."""

        def demo() -> bool:
            for index, post in enumerate(self.demo.posts):
                if post["id"] == post_id:
                    del self.demo.posts[index]
                    return True
            return False

        async def live() -> bool:
            return await self._client.delete(Post, Post.id == post_id) > 0

        return await attempt_or_default(
            self.demo_mode, "delete_post", live=live, demo=demo, failed=False
        )

    # ------------------------------------------------------------------
    # Dua requests
    # ------------------------------------------------------------------

    async def get_dua_requests(self, limit: int = DEFAULT_LIMIT) -> list[Record]:
        return await read_with_fallback(
            self.demo_mode,
            "get_dua_requests",
            live=lambda: self._joined(DuaRequest, DuaRequest.user_id, limit=limit),
            demo=lambda: self._demo_joined(self.demo.dua_requests, "user_id", limit),
        )

    async def get_dua_request_by_id(self, dua_request_id: str) -> Record | None:
        return await read_with_fallback(
            self.demo_mode,
            "get_dua_request_by_id",
            live=lambda: self._joined_one(
                DuaRequest, DuaRequest.user_id, DuaRequest.id == dua_request_id
            ),
            demo=lambda: self._demo_joined_one(self.demo.dua_requests, "user_id", dua_request_id),
        )

    async def create_dua_request(self, data: Mapping[str, Any]) -> Record:
        def demo() -> Record:
            dua_request = self.demo.new_record(
                DuaRequest, "dua", data, prayers_count=0, comments_count=0
            )
            self.demo.dua_requests.insert(0, dua_request)
            return dict(dua_request)

        return await write_or_raise(
            self.demo_mode,
            "create_dua_request",
            live=lambda: self._client.insert(DuaRequest, data),
            demo=demo,
        )

    # ------------------------------------------------------------------
    # Comments
    # ------------------------------------------------------------------

    async def get_comments_by_post_id(self, post_id: str) -> list[Record]:
        return await read_with_fallback(
            self.demo_mode,
            "get_comments_by_post_id",
            live=lambda: self._joined(Comment, Comment.user_id, Comment.post_id == post_id),
            demo=lambda: self._demo_joined(
                [c for c in self.demo.comments if c["post_id"] == post_id], "user_id"
            ),
        )

    async def get_comments_by_dua_request_id(self, dua_request_id: str) -> list[Record]:
        return await read_with_fallback(
            self.demo_mode,
            "get_comments_by_dua_request_id",
            live=lambda: self._joined(
                Comment, Comment.user_id, Comment.dua_request_id == dua_request_id
            ),
            demo=lambda: self._demo_joined(
                [c for c in self.demo.comments if c["dua_request_id"] == dua_request_id],
                "user_id",
            ),
        )

    async def create_comment(self, data: Mapping[str, Any]) -> Record:
        def demo() -> Record:
            comment = self.demo.new_record(Comment, "comment", data)
            self.demo.comments.insert(0, comment)
            return dict(comment)

        return await write_or_raise(
            self.demo_mode,
            "create_comment",
            live=lambda: self._client.insert(Comment, data),
            demo=demo,
        )

    # ------------------------------------------------------------------
    # Likes and bookmarks
    # ------------------------------------------------------------------

    def _association_filter(
        self,
        model: type[Like] | type[Bookmark],
        user_id: str,
        post_id: str | None,
        dua_request_id: str | None,
    ) -> list[ColumnElement[bool]]:
        conditions = [model.user_id == user_id]
        if post_id:
            conditions.append(model.post_id == post_id)
        if dua_request_id:
            conditions.append(model.dua_request_id == dua_request_id)
        return conditions

    async def _get_association(
        self,
        operation: str,
        model: type[Like] | type[Bookmark],
        collection: list[Record],
        user_id: str,
        post_id: str | None,
        dua_request_id: str | None,
    ) -> Record | None:
        def demo() -> Record | None:
            for record in collection:
                if _target_matches(record, user_id, post_id, dua_request_id):
                    return dict(record)
            return None

        return await read_with_fallback(
            self.demo_mode,
            operation,
            live=lambda: self._first(
                model, *self._association_filter(model, user_id, post_id, dua_request_id)
            ),
            demo=demo,
        )

    async def _toggle(
        self,
        operation: str,
        model: type[Like] | type[Bookmark],
        kind: str,
        collection: list[Record],
        user_id: str,
        post_id: str | None,
        dua_request_id: str | None,
    ) -> bool:
        """
        Remove the association if it exists, otherwise create it.

        Returns True when the association was added. Not atomic: the unique
        constraints on the table are what prevent duplicates under races.
        """
        values = {
            "user_id": user_id,
            "post_id": post_id or None,
            "dua_request_id": dua_request_id or None,
        }

        def demo() -> bool:
            for index, record in enumerate(collection):
                if _target_matches(record, user_id, post_id, dua_request_id):
                    del collection[index]
                    return False
            collection.insert(0, self.demo.new_record(model, kind, values))
            return True

        async def live() -> bool:
            existing = await self._first(
                model, *self._association_filter(model, user_id, post_id, dua_request_id)
            )
            if existing is not None:
                await self._client.delete(model, model.id == existing["id"])
                return False
            await self._client.insert(model, values)
            return True

        return await attempt_or_default(
            self.demo_mode, operation, live=live, demo=demo, failed=False
        )

    async def get_user_like(
        self, user_id: str, post_id: str | None = None, dua_request_id: str | None = None
    ) -> Record | None:
        return await self._get_association(
            "get_user_like", Like, self.demo.likes, user_id, post_id, dua_request_id
        )

    async def toggle_like(
        self, user_id: str, post_id: str | None = None, dua_request_id: str | None = None
    ) -> dict[str, bool]:
        liked = await self._toggle(
            "toggle_like", Like, "like", self.demo.likes, user_id, post_id, dua_request_id
        )
        return {"liked": liked}

    async def get_user_bookmark(
        self, user_id: str, post_id: str | None = None, dua_request_id: str | None = None
    ) -> Record | None:
        return await self._get_association(
            "get_user_bookmark", Bookmark, self.demo.bookmarks, user_id, post_id, dua_request_id
        )

    async def toggle_bookmark(
        self, user_id: str, post_id: str | None = None, dua_request_id: str | None = None
    ) -> dict[str, bool]:
        bookmarked = await self._toggle(
            "toggle_bookmark",
            Bookmark,
            "bookmark",
            self.demo.bookmarks,
            user_id,
            post_id,
            dua_request_id,
        )
        return {"bookmarked": bookmarked}

    # ------------------------------------------------------------------
    # Communities
    # ------------------------------------------------------------------

    async def get_communities(self, limit: int = DEFAULT_LIMIT) -> list[Record]:
        return await read_with_fallback(
            self.demo_mode,
            "get_communities",
            live=lambda: self._joined(Community, Community.created_by, limit=limit),
            demo=lambda: self._demo_joined(self.demo.communities, "created_by", limit),
        )

    async def create_community(self, data: Mapping[str, Any]) -> Record:
        def demo() -> Record:
            community = self.demo.new_record(Community, "community", data, member_count=1)
            self.demo.communities.insert(0, community)
            return dict(community)

        return await write_or_raise(
            self.demo_mode,
            "create_community",
            live=lambda: self._client.insert(Community, data),
            demo=demo,
        )

    async def join_community(self, community_id: str, user_id: str) -> Record:
        values = {
            "community_id": community_id,
            "user_id": user_id,
            "role": CommunityRole.MEMBER.value,
        }

        def demo() -> Record:
            member = self.demo.new_record(CommunityMember, "member", values)
            self.demo.community_members.append(member)
            return dict(member)

        return await write_or_raise(
            self.demo_mode,
            "join_community",
            live=lambda: self._client.insert(CommunityMember, values),
            demo=demo,
        )

    # ------------------------------------------------------------------
    # Events
    # ------------------------------------------------------------------

    async def get_events(self, limit: int = DEFAULT_LIMIT) -> list[Record]:
        return await read_with_fallback(
            self.demo_mode,
            "get_events",
            live=lambda: self._joined(Event, Event.created_by, limit=limit),
            demo=lambda: self._demo_joined(self.demo.events, "created_by", limit),
        )

    async def create_event(self, data: Mapping[str, Any]) -> Record:
        def demo() -> Record:
            event = self.demo.new_record(Event, "event", data, attendees_count=0)
            self.demo.events.insert(0, event)
            return dict(event)

        return await write_or_raise(
            self.demo_mode,
            "create_event",
            live=lambda: self._client.insert(Event, data),
            demo=demo,
        )

    async def attend_event(self, event_id: str, user_id: str) -> Record:
        values = {"event_id": event_id, "user_id": user_id}

        def demo() -> Record:
            attendee = self.demo.new_record(EventAttendee, "attendee", values)
            self.demo.event_attendees.append(attendee)
            return dict(attendee)

        return await write_or_raise(
            self.demo_mode,
            "attend_event",
            live=lambda: self._client.insert(EventAttendee, values),
            demo=demo,
        )

    # ------------------------------------------------------------------
    # Reports
    # ------------------------------------------------------------------

    async def create_report(self, data: Mapping[str, Any]) -> Record:
        def demo() -> Record:
            report = self.demo.new_record(
                Report, "report", data, status=ReportStatus.PENDING.value
            )
            self.demo.reports.insert(0, report)
            return dict(report)

        return await write_or_raise(
            self.demo_mode,
            "create_report",
            live=lambda: self._client.insert(Report, data),
            demo=demo,
        )

    async def get_reports(self, limit: int = DEFAULT_LIMIT) -> list[Record]:
        """
        Newest reports first, enriched with `reporter`, `reported_user`,
        `post` and `dua_request`.

        Related rows are fetched with one `IN (...)` query per table rather
        than one lookup per report. The lookups do not share a transaction.
        """

        def demo() -> list[Record]:
            users = self.demo.index_by_id(self.demo.users)
            posts = self.demo.index_by_id(self.demo.posts)
            dua_requests = self.demo.index_by_id(self.demo.dua_requests)
            return [
                _enrich_report(dict(report), users, posts, dua_requests)
                for report in newest_first(self.demo.reports)[:limit]
            ]

        async def live() -> list[Record]:
            reports = await self._client.select(
                Report, order_by=(Report.created_at.desc(),), limit=limit
            )
            user_ids = {r["reporter_id"] for r in reports} | {
                r["reported_user_id"] for r in reports
            }
            users = await self._index(User, user_ids)
            posts = await self._index(Post, {r["post_id"] for r in reports if r["post_id"]})
            dua_requests = await self._index(
                DuaRequest, {r["dua_request_id"] for r in reports if r["dua_request_id"]}
            )
            return [_enrich_report(r, users, posts, dua_requests) for r in reports]

        return await read_with_fallback(self.demo_mode, "get_reports", live=live, demo=demo)

    async def update_report_status(
        self, report_id: str, status: str, admin_notes: str | None = None
    ) -> Record | None:
        """Move a report to `status`; admin notes are only overwritten when given."""
        values: dict[str, Any] = {"status": status, "updated_at": _utcnow()}
        if admin_notes is not None:
            values["admin_notes"] = admin_notes

        def demo() -> Record | None:
            for report in self.demo.reports:
                if report["id"] == report_id:
                    report.update(values)
                    return dict(report)
            return None

        return await write_or_raise(
            self.demo_mode,
            "update_report_status",
            live=lambda: self._client.update(Report, values, Report.id == report_id),
            demo=demo,
        )

    # ------------------------------------------------------------------
    # Bans (not supported in demo mode: nothing is stored, nobody is banned)
    # ------------------------------------------------------------------

    async def ban_user(self, data: Mapping[str, Any]) -> Record:
        return await write_or_raise(
            self.demo_mode,
            "ban_user",
            live=lambda: self._client.insert(UserBan, data),
            demo=lambda: self.demo.new_record(UserBan, "ban", data, is_active=True),
        )

    async def get_user_bans(self, user_id: str) -> list[Record]:
        """Active ban rows for the user, newest first (expired ones included)."""
        return await read_with_fallback(
            self.demo_mode,
            "get_user_bans",
            live=lambda: self._client.select(
                UserBan,
                UserBan.user_id == user_id,
                UserBan.is_active.is_(True),
                order_by=(UserBan.created_at.desc(),),
            ),
            demo=lambda: [],
        )

    async def is_user_banned(self, user_id: str) -> bool:
        """
        True if an active ban is in effect: permanent, or expiring strictly
        after now. Demo mode and query failures answer False.
        """

        async def live() -> bool:
            bans = await self._client.select(
                UserBan,
                UserBan.user_id == user_id,
                UserBan.is_active.is_(True),
                or_(
                    UserBan.ban_type == BanType.PERMANENT.value,
                    UserBan.expires_at > _utcnow(),
                ),
                limit=1,
            )
            return len(bans) > 0

        return await read_with_fallback(
            self.demo_mode, "is_user_banned", live=live, demo=lambda: False
        )

    # ------------------------------------------------------------------
    # Status
    # ------------------------------------------------------------------

    def get_database_status(self) -> dict[str, dict[str, Any]]:
        """Describe the storage mode. Performs no I/O."""
        if self.demo_mode:
            postgresql = {"status": "demo-mode", "enabled": False}
        else:
            postgresql = {"status": "connected", "enabled": True, "provider": "netlify"}
        return {
            "postgresql": postgresql,
            "netlify": {"status": "active", "enabled": True},
        }

    async def check_health(self) -> bool:
        """Probe the database with a trivial select. Never raises."""

        async def live() -> bool:
            await self._client.ping()
            return True

        return await attempt_or_default(
            self.demo_mode, "check_health", live=live, demo=lambda: True, failed=False
        )
