from datetime import datetime, timezone

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from chillthrive.core.clock import FixedClock
from chillthrive.db.session import Base
from chillthrive.db import models


@pytest.fixture()
def db_session():
    engine = create_engine("sqlite+pysqlite:///:memory:", future=True)
    TestingSessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False)
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def clock():
    # Tuesday, 11:30 at the studio
    return FixedClock(datetime(2025, 5, 20, 6, 0, tzinfo=timezone.utc), tz_name="Asia/Kolkata")


@pytest.fixture()
def make_service(db_session):
    def factory(name="Ice Bath Therapy", price=1500, is_active=True):
        service = models.Service(name=name, price=price, duration_minutes=60, is_active=is_active)
        db_session.add(service)
        db_session.commit()
        db_session.refresh(service)
        return service

    return factory


@pytest.fixture()
def make_slot(db_session):
    def factory(slot_time="10:00 AM", capacity=1, is_active=True):
        slot = models.TimeSlot(slot_time=slot_time, capacity=capacity, is_active=is_active)
        db_session.add(slot)
        db_session.commit()
        db_session.refresh(slot)
        return slot

    return factory
