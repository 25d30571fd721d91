"""
Live-mode storage tests against an in-memory SQLite database.

The storage facade runs on the same SQLAlchemy query client it uses in
production; only the database engine differs.

Tests cover:
- Insert-returning creates and joined reads
- Ordering and limits
- Toggle alternation backed by real rows
- Batched report enrichment
- Active ban rules (permanent, temporary, expired, deactivated)
- Status descriptor and health probe
"""

from datetime import UTC, datetime, timedelta

import pytest

from ummah_api.repos.storage import Storage


async def _make_user(storage: Storage, username: str) -> dict:
    return await storage.create_user(
        {"email": f"{username}@example.com", "name": username.title(), "username": username}
    )


# ============================================================================
# Users
# ============================================================================


@pytest.mark.anyio
async def test_live_mode_is_set_with_client(live_storage: Storage) -> None:
    assert live_storage.demo_mode is False


@pytest.mark.anyio
async def test_create_user_then_lookup(live_storage: Storage) -> None:
    created = await _make_user(live_storage, "fatma")

    assert created["role"] == "user"
    assert created["verified"] is False
    assert len(created["id"]) == 36

    assert (await live_storage.get_user_by_username("fatma"))["id"] == created["id"]
    assert (await live_storage.get_user_by_email("fatma@example.com"))["id"] == created["id"]
    assert (await live_storage.get_user(created["id"]))["username"] == "fatma"
    assert await live_storage.get_user("missing") is None


@pytest.mark.anyio
async def test_create_user_duplicate_username_raises(live_storage: Storage) -> None:
    await _make_user(live_storage, "omer")
    with pytest.raises(Exception):
        await live_storage.create_user(
            {"email": "other@example.com", "name": "Other", "username": "omer"}
        )


@pytest.mark.anyio
async def test_update_user(live_storage: Storage) -> None:
    user = await _make_user(live_storage, "zeynep")

    updated = await live_storage.update_user(user["id"], {"location": "Konya"})

    assert updated["location"] == "Konya"
    assert updated["username"] == "zeynep"
    assert await live_storage.update_user("missing", {"location": "x"}) is None


# ============================================================================
# Posts
# ============================================================================


@pytest.mark.anyio
async def test_get_posts_newest_first_with_limit(live_storage: Storage) -> None:
    author = await _make_user(live_storage, "yusuf")
    base = datetime(2026, 1, 1, tzinfo=UTC)
    for i in range(3):
        await live_storage.create_post(
            {
                "user_id": author["id"],
                "content": f"post {i}",
                "created_at": base + timedelta(minutes=i),
            }
        )

    posts = await live_storage.get_posts(limit=2)

    assert [p["content"] for p in posts] == ["post 2", "post 1"]
    assert all(p["users"]["id"] == author["id"] for p in posts)


@pytest.mark.anyio
async def test_create_post_defaults(live_storage: Storage) -> None:
    author = await _make_user(live_storage, "hatice")

    post = await live_storage.create_post({"user_id": author["id"], "content": "Merhaba"})

    assert post["likes_count"] == 0
    assert post["comments_count"] == 0
    assert post["shares_count"] == 0
    assert post["tags"] == []
    assert "users" not in post

    fetched = await live_storage.get_post_by_id(post["id"])
    assert fetched["users"]["username"] == "hatice"


@pytest.mark.anyio
async def test_post_with_missing_author_has_no_users(live_storage: Storage) -> None:
    post = await live_storage.create_post({"user_id": "ghost", "content": "orphan"})
    fetched = await live_storage.get_post_by_id(post["id"])
    assert fetched["users"] is None


@pytest.mark.anyio
async def test_delete_post(live_storage: Storage) -> None:
    author = await _make_user(live_storage, "ibrahim")
    post = await live_storage.create_post({"user_id": author["id"], "content": "bye"})

    assert await live_storage.delete_post(post["id"]) is True
    assert await live_storage.get_post_by_id(post["id"]) is None
    assert await live_storage.delete_post(post["id"]) is False


# ============================================================================
# Dua Requests and Comments
# ============================================================================


@pytest.mark.anyio
async def test_dua_request_with_comments(live_storage: Storage) -> None:
    author = await _make_user(live_storage, "meryem")
    commenter = await _make_user(live_storage, "ahmet")
    dua = await live_storage.create_dua_request(
        {"user_id": author["id"], "title": "Sınav", "content": "Başarı için dua", "tags": ["okul"]}
    )

    await live_storage.create_comment(
        {"user_id": commenter["id"], "dua_request_id": dua["id"], "content": "Amin"}
    )

    listed = await live_storage.get_dua_requests()
    comments = await live_storage.get_comments_by_dua_request_id(dua["id"])

    assert listed[0]["id"] == dua["id"]
    assert listed[0]["tags"] == ["okul"]
    assert dua["prayers_count"] == 0
    assert [c["users"]["username"] for c in comments] == ["ahmet"]
    assert await live_storage.get_comments_by_post_id("other") == []


# ============================================================================
# Likes and Bookmarks
# ============================================================================


@pytest.mark.anyio
async def test_toggle_like_alternates(live_storage: Storage) -> None:
    user = await _make_user(live_storage, "ali")
    post = await live_storage.create_post({"user_id": user["id"], "content": "x"})

    assert await live_storage.toggle_like(user["id"], post_id=post["id"]) == {"liked": True}
    like = await live_storage.get_user_like(user["id"], post_id=post["id"])
    assert like["post_id"] == post["id"]
    assert like["dua_request_id"] is None

    assert await live_storage.toggle_like(user["id"], post_id=post["id"]) == {"liked": False}
    assert await live_storage.get_user_like(user["id"], post_id=post["id"]) is None


@pytest.mark.anyio
async def test_toggle_bookmark_alternates(live_storage: Storage) -> None:
    user = await _make_user(live_storage, "ayse")
    dua = await live_storage.create_dua_request(
        {"user_id": user["id"], "title": "t", "content": "c"}
    )

    first = await live_storage.toggle_bookmark(user["id"], dua_request_id=dua["id"])
    second = await live_storage.toggle_bookmark(user["id"], dua_request_id=dua["id"])
    third = await live_storage.toggle_bookmark(user["id"], dua_request_id=dua["id"])

    assert [first, second, third] == [
        {"bookmarked": True},
        {"bookmarked": False},
        {"bookmarked": True},
    ]


# ============================================================================
# Communities and Events
# ============================================================================


@pytest.mark.anyio
async def test_community_and_event_flow(live_storage: Storage) -> None:
    owner = await _make_user(live_storage, "hasan")
    member = await _make_user(live_storage, "huseyin")

    community = await live_storage.create_community({"name": "Kitap", "created_by": owner["id"]})
    membership = await live_storage.join_community(community["id"], member["id"])
    event = await live_storage.create_event(
        {
            "title": "Kitap okuma",
            "start_date": datetime(2026, 11, 1, 18, 0, tzinfo=UTC),
            "created_by": owner["id"],
        }
    )
    attendee = await live_storage.attend_event(event["id"], member["id"])

    assert community["member_count"] == 1
    assert membership["role"] == "member"
    assert event["attendees_count"] == 0
    assert attendee["user_id"] == member["id"]
    assert (await live_storage.get_communities())[0]["users"]["id"] == owner["id"]
    assert (await live_storage.get_events())[0]["users"]["id"] == owner["id"]


@pytest.mark.anyio
async def test_join_community_twice_raises(live_storage: Storage) -> None:
    owner = await _make_user(live_storage, "emre")
    community = await live_storage.create_community({"name": "C", "created_by": owner["id"]})
    await live_storage.join_community(community["id"], owner["id"])

    with pytest.raises(Exception):
        await live_storage.join_community(community["id"], owner["id"])


# ============================================================================
# Reports
# ============================================================================


@pytest.mark.anyio
async def test_get_reports_batches_enrichment(live_storage: Storage) -> None:
    reporter = await _make_user(live_storage, "reporter")
    reported = await _make_user(live_storage, "reported")
    post = await live_storage.create_post({"user_id": reported["id"], "content": "bad"})
    dua = await live_storage.create_dua_request(
        {"user_id": reported["id"], "title": "t", "content": "c"}
    )
    base = datetime(2026, 2, 1, tzinfo=UTC)

    await live_storage.create_report(
        {
            "reporter_id": reporter["id"],
            "reported_user_id": reported["id"],
            "post_id": post["id"],
            "reason": "spam",
            "created_at": base,
        }
    )
    await live_storage.create_report(
        {
            "reporter_id": reporter["id"],
            "reported_user_id": reported["id"],
            "dua_request_id": dua["id"],
            "reason": "offensive",
            "created_at": base + timedelta(hours=1),
        }
    )
    await live_storage.create_report(
        {
            "reporter_id": reporter["id"],
            "reported_user_id": reported["id"],
            "reason": "profile",
            "created_at": base + timedelta(hours=2),
        }
    )

    reports = await live_storage.get_reports()

    assert [r["reason"] for r in reports] == ["profile", "offensive", "spam"]
    assert all(r["status"] == "pending" for r in reports)
    assert all(r["reporter"]["username"] == "reporter" for r in reports)
    assert all(r["reported_user"]["username"] == "reported" for r in reports)
    assert reports[0]["post"] is None and reports[0]["dua_request"] is None
    assert reports[1]["dua_request"]["id"] == dua["id"] and reports[1]["post"] is None
    assert reports[2]["post"]["id"] == post["id"] and reports[2]["dua_request"] is None


@pytest.mark.anyio
async def test_update_report_status(live_storage: Storage) -> None:
    reporter = await _make_user(live_storage, "r1")
    reported = await _make_user(live_storage, "r2")
    report = await live_storage.create_report(
        {"reporter_id": reporter["id"], "reported_user_id": reported["id"], "reason": "spam"}
    )

    resolved = await live_storage.update_report_status(report["id"], "resolved", "Warned user")
    dismissed = await live_storage.update_report_status(report["id"], "dismissed")

    assert resolved["admin_notes"] == "Warned user"
    assert dismissed["status"] == "dismissed"
    assert dismissed["admin_notes"] == "Warned user"
    assert await live_storage.update_report_status("missing", "resolved") is None


# ============================================================================
# Bans
# ============================================================================


async def _ban(storage: Storage, user_id: str, admin_id: str, **overrides) -> dict:
    data = {
        "user_id": user_id,
        "banned_by": admin_id,
        "reason": "abuse",
        "ban_type": "temporary",
        "expires_at": datetime.now(UTC) + timedelta(days=1),
    }
    data.update(overrides)
    return await storage.ban_user(data)


@pytest.mark.anyio
async def test_permanent_ban_is_in_effect(live_storage: Storage) -> None:
    user = await _make_user(live_storage, "u1")
    admin = await _make_user(live_storage, "a1")

    ban = await _ban(live_storage, user["id"], admin["id"], ban_type="permanent", expires_at=None)

    assert ban["is_active"] is True
    assert await live_storage.is_user_banned(user["id"]) is True
    assert [b["id"] for b in await live_storage.get_user_bans(user["id"])] == [ban["id"]]


@pytest.mark.anyio
async def test_temporary_ban_in_future_is_in_effect(live_storage: Storage) -> None:
    user = await _make_user(live_storage, "u2")
    admin = await _make_user(live_storage, "a2")

    await _ban(live_storage, user["id"], admin["id"])

    assert await live_storage.is_user_banned(user["id"]) is True


@pytest.mark.anyio
async def test_expired_temporary_ban_is_not_in_effect(live_storage: Storage) -> None:
    user = await _make_user(live_storage, "u3")
    admin = await _make_user(live_storage, "a3")

    await _ban(
        live_storage, user["id"], admin["id"], expires_at=datetime.now(UTC) - timedelta(hours=1)
    )

    assert await live_storage.is_user_banned(user["id"]) is False
    # Still listed: the list shows active rows regardless of expiry
    assert len(await live_storage.get_user_bans(user["id"])) == 1


@pytest.mark.anyio
async def test_inactive_ban_is_not_in_effect(live_storage: Storage) -> None:
    user = await _make_user(live_storage, "u4")
    admin = await _make_user(live_storage, "a4")

    await _ban(
        live_storage,
        user["id"],
        admin["id"],
        ban_type="permanent",
        expires_at=None,
        is_active=False,
    )

    assert await live_storage.is_user_banned(user["id"]) is False
    assert await live_storage.get_user_bans(user["id"]) == []


@pytest.mark.anyio
async def test_user_without_bans(live_storage: Storage) -> None:
    user = await _make_user(live_storage, "u5")
    assert await live_storage.is_user_banned(user["id"]) is False


# ============================================================================
# Status
# ============================================================================


@pytest.mark.anyio
async def test_database_status_reports_connected(live_storage: Storage) -> None:
    assert live_storage.get_database_status() == {
        "postgresql": {"status": "connected", "enabled": True, "provider": "netlify"},
        "netlify": {"status": "active", "enabled": True},
    }


@pytest.mark.anyio
async def test_check_health(live_storage: Storage) -> None:
    assert await live_storage.check_health() is True
