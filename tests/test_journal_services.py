from datetime import date, datetime

import pytest
from sqlalchemy import select, update

from app.core.cache import DASHBOARD_VIEW, TODAY_VIEW, view_cache_key
from app.models.database_models.journal_entry import JournalEntry
from app.models.journal_models import ReflectionRead
from app.services.database.reflection_database_services import insert_reflection_if_absent
from app.services.journal_services import (
    clean_answer,
    get_dashboard_view,
    get_today_view,
    split_reflections,
    submit_entry,
)


def reflection(id, week_start):
    return ReflectionRead(id=id, week_start=week_start, content=f"reflection {id}")


def test_clean_answer_coerces_missing_values():
    assert clean_answer(None) == ""
    assert clean_answer("  kept  ") == "kept"


def test_split_reflections_recent_latest_is_current():
    reflections = [reflection(2, date(2024, 1, 8)), reflection(1, date(2024, 1, 1))]

    current, past = split_reflections(reflections, today=date(2024, 1, 10))

    assert current.id == 2
    assert [r.id for r in past] == [1]


def test_split_reflections_stale_latest_stays_in_past():
    reflections = [reflection(2, date(2024, 1, 8)), reflection(1, date(2024, 1, 1))]

    current, past = split_reflections(reflections, today=date(2024, 1, 20))

    assert current is None
    assert [r.id for r in past] == [2, 1]


def test_split_reflections_empty():
    assert split_reflections([], today=date(2024, 1, 20)) == (None, [])


@pytest.mark.asyncio
async def test_resubmitting_same_day_overwrites(db, user, fake_redis, monkeypatch):
    monkeypatch.setattr("app.services.journal_services.journal_today", lambda: date(2024, 4, 2))

    await submit_entry(db, fake_redis, user, "first", "", None)
    await submit_entry(db, fake_redis, user, "second", " meaningful ", "decide")

    result = await db.execute(select(JournalEntry).where(JournalEntry.user_id == user.id))
    rows = result.scalars().all()
    assert len(rows) == 1
    await db.refresh(rows[0])
    assert (rows[0].date, rows[0].answer_1, rows[0].answer_2, rows[0].answer_3) == (
        date(2024, 4, 2),
        "second",
        "meaningful",
        "decide",
    )


@pytest.mark.asyncio
async def test_submit_entry_invalidates_cached_views(db, user, fake_redis):
    fake_redis.store[view_cache_key(DASHBOARD_VIEW, user.id)] = "{}"
    fake_redis.store[view_cache_key(TODAY_VIEW, user.id)] = "{}"

    await submit_entry(db, fake_redis, user, "a", "b", "c")

    assert fake_redis.store == {}


@pytest.mark.asyncio
async def test_today_view_prefills_saved_answers(db, user, fake_redis, monkeypatch):
    monkeypatch.setattr("app.services.journal_services.journal_today", lambda: date(2024, 4, 2))
    await submit_entry(db, fake_redis, user, "light", "tea", "move")

    view = await get_today_view(db, fake_redis, user)

    assert (view.date, view.answer_1, view.answer_2, view.answer_3) == (date(2024, 4, 2), "light", "tea", "move")
    assert view_cache_key(TODAY_VIEW, user.id) in fake_redis.store


@pytest.mark.asyncio
async def test_dashboard_view_lists_reflections_and_entries(db, user, fake_redis, monkeypatch):
    monkeypatch.setattr("app.services.journal_services.journal_today", lambda: date(2024, 1, 10))
    await insert_reflection_if_absent(db, user.id, date(2023, 12, 20), "older")
    await insert_reflection_if_absent(db, user.id, date(2024, 1, 6), "this week")
    await submit_entry(db, fake_redis, user, "x", "y", "z")

    view = await get_dashboard_view(db, fake_redis, user)

    assert view.email == "reader@example.com"
    assert view.current_reflection.content == "this week"
    assert [r.content for r in view.past_reflections] == ["older"]
    assert len(view.entries) == 1

    cached = fake_redis.store[view_cache_key(DASHBOARD_VIEW, user.id)]
    assert "this week" in cached


def test_split_reflections_six_days_back_is_still_current():
    reflections = [reflection(2, date(2024, 1, 8)), reflection(1, date(2024, 1, 1))]

    current, past = split_reflections(reflections, today=date(2024, 1, 14))

    assert current.id == 2
    assert [r.id for r in past] == [1]


def test_split_reflections_seven_days_back_is_past():
    reflections = [reflection(2, date(2024, 1, 7)), reflection(1, date(2024, 1, 1))]

    current, past = split_reflections(reflections, today=date(2024, 1, 14))

    assert current is None
    assert [r.id for r in past] == [2, 1]


@pytest.mark.asyncio
async def test_cached_dashboard_is_rebuilt_on_a_new_day(db, user, fake_redis, monkeypatch):
    await insert_reflection_if_absent(db, user.id, date(2024, 1, 8), "week of the 8th")
    monkeypatch.setattr("app.services.journal_services.journal_today", lambda: date(2024, 1, 14))
    first = await get_dashboard_view(db, fake_redis, user)
    assert first.current_reflection.content == "week of the 8th"

    monkeypatch.setattr("app.services.journal_services.journal_today", lambda: date(2024, 1, 15))
    second = await get_dashboard_view(db, fake_redis, user)

    assert second.as_of == date(2024, 1, 15)
    assert second.current_reflection is None
    assert [r.content for r in second.past_reflections] == ["week of the 8th"]


@pytest.mark.asyncio
async def test_resubmitting_bumps_updated_at(db, user, fake_redis, monkeypatch):
    monkeypatch.setattr("app.services.journal_services.journal_today", lambda: date(2024, 4, 2))
    await submit_entry(db, fake_redis, user, "first", "", "")
    await db.execute(update(JournalEntry).where(JournalEntry.user_id == user.id).values(updated_at=datetime(2000, 1, 1)))
    await db.commit()

    await submit_entry(db, fake_redis, user, "second", "", "")

    result = await db.execute(select(JournalEntry).where(JournalEntry.user_id == user.id))
    entry = result.scalars().one()
    await db.refresh(entry)
    assert entry.updated_at > datetime(2000, 1, 1)
