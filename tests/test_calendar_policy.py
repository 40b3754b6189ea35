from datetime import date, datetime, timezone

import pytest
from chillthrive.core.clock import FixedClock
from chillthrive.db import models
from chillthrive.services.calendar_policy import CalendarPolicy
from chillthrive.services.errors import DuplicateBlockedDate, NotFound


def test_today_and_future_weekdays_are_bookable(db_session, clock):
    policy = CalendarPolicy(db_session, clock=clock, closed_weekday=6)

    assert policy.is_bookable(date(2025, 5, 20))
    assert policy.is_bookable(date(2025, 5, 21))


def test_past_dates_are_not_bookable(db_session, clock):
    policy = CalendarPolicy(db_session, clock=clock, closed_weekday=6)

    assert not policy.is_bookable(date(2025, 5, 19))


def test_closed_weekday_is_not_bookable(db_session, clock):
    policy = CalendarPolicy(db_session, clock=clock, closed_weekday=6)

    assert not policy.is_bookable(date(2025, 5, 25))
    assert policy.is_bookable(date(2025, 5, 26))


def test_blocked_date_is_not_bookable(db_session, clock):
    policy = CalendarPolicy(db_session, clock=clock, closed_weekday=6)
    policy.block_date(date(2025, 12, 25), "Christmas")

    assert not policy.is_bookable(date(2025, 12, 25))
    assert policy.is_bookable(date(2025, 12, 26))


def test_duplicate_blocked_date_is_rejected(db_session, clock):
    policy = CalendarPolicy(db_session, clock=clock)
    policy.block_date(date(2025, 12, 25))

    with pytest.raises(DuplicateBlockedDate):
        policy.block_date(date(2025, 12, 25), "again")

    assert db_session.query(models.BlockedDate).count() == 1


def test_unblock_date(db_session, clock):
    policy = CalendarPolicy(db_session, clock=clock, closed_weekday=6)
    blocked = policy.block_date(date(2025, 6, 3))
    policy.block_date(date(2025, 6, 2))

    assert [b.blocked_date for b in policy.list_blocked_dates()] == [
        date(2025, 6, 2),
        date(2025, 6, 3),
    ]

    policy.unblock_date(blocked.id)
    assert policy.is_bookable(date(2025, 6, 3))

    with pytest.raises(NotFound):
        policy.unblock_date(blocked.id)


def test_today_follows_the_studio_time_zone(db_session):
    # 20:00 UTC on 20 May is already 01:30 on 21 May in Kolkata
    late_evening = datetime(2025, 5, 20, 20, 0, tzinfo=timezone.utc)
    studio = CalendarPolicy(
        db_session, clock=FixedClock(late_evening, tz_name="Asia/Kolkata"), closed_weekday=6
    )
    utc = CalendarPolicy(db_session, clock=FixedClock(late_evening, tz_name="UTC"), closed_weekday=6)

    assert studio.clock.today() == date(2025, 5, 21)
    assert not studio.is_bookable(date(2025, 5, 20))
    assert utc.is_bookable(date(2025, 5, 20))
