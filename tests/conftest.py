from datetime import date, datetime
from types import SimpleNamespace

import fakeredis
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from spa_booking.database import get_db
from spa_booking.main import app
from spa_booking.models.tables import (
    Base,
    Clients,
    Reservations,
    Rooms,
    Services,
    ServiceVariants,
    Therapists,
    WorkShifts,
)
from spa_booking.routers.reservations import get_lifecycle
from spa_booking.routers.slots import get_clock
from spa_booking.services import events
from spa_booking.services.scheduling import (
    ReservationLifecycle,
    ResourceLocks,
    SchedulingConfig,
)

DAY = date(2024, 6, 1)


class FrozenClock:
    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now


@pytest.fixture(autouse=True)
def fake_redis(monkeypatch):
    client = fakeredis.FakeRedis(decode_responses=True)
    monkeypatch.setattr(events, "redis_client", client)
    return client


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def db(engine):
    Session = sessionmaker(bind=engine, autocommit=False, autoflush=False)
    session = Session()
    yield session
    session.close()


@pytest.fixture
def clock():
    # The day before DAY, so DAY bookings are in the future
    return FrozenClock(datetime(2024, 5, 31, 9, 0))


@pytest.fixture
def config():
    return SchedulingConfig(slot_step_minutes=30, past_booking_grace_minutes=5)


def seed_salon(db):
    """Two therapists working 10:00-18:00 on DAY, two rooms, one service."""
    client = Clients(first_name="Ewa", last_name="Lis", phone="+48500100200")
    anna = Therapists(first_name="Anna", last_name="Nowak")
    bartek = Therapists(first_name="Bartek", last_name="Kowal")
    room_a = Rooms(name="Room A", display_order=1)
    room_b = Rooms(name="Room B", display_order=2)
    service = Services(name="Classic massage", category="massage")
    db.add_all([client, anna, bartek, room_a, room_b, service])
    db.flush()

    variant_60 = ServiceVariants(service_id=service.id, duration_minutes=60, regular_price=200.0)
    variant_90 = ServiceVariants(
        service_id=service.id, duration_minutes=90, regular_price=280.0, promo_price=250.0
    )
    db.add_all([variant_60, variant_90])
    for therapist in (anna, bartek):
        db.add(WorkShifts(
            therapist_id=therapist.id,
            date=DAY.isoformat(),
            start_minute=10 * 60,
            end_minute=18 * 60,
            status="working",
        ))
    db.commit()

    return SimpleNamespace(
        client=client,
        anna=anna,
        bartek=bartek,
        room_a=room_a,
        room_b=room_b,
        service=service,
        variant_60=variant_60,
        variant_90=variant_90,
    )


@pytest.fixture
def salon(db):
    return seed_salon(db)


@pytest.fixture
def make_reservation(db, salon):
    """Insert a reservation row directly, bypassing the lifecycle."""
    counter = iter(range(1, 1000))

    def _make(start, end, therapist=None, room=None, status="new", day=DAY):
        therapist = therapist or salon.anna
        room = room or salon.room_a
        reservation = Reservations(
            number=f"T-{next(counter):04d}",
            client_id=salon.client.id,
            therapist_id=therapist.id,
            room_id=room.id,
            service_id=salon.service.id,
            variant_id=salon.variant_60.id,
            date=day.isoformat(),
            start_minute=start,
            end_minute=end,
            duration_minutes=end - start,
            price=200.0,
            status=status,
            payment_status="unpaid",
        )
        db.add(reservation)
        db.commit()
        return reservation

    return _make


@pytest.fixture
def lifecycle(db, config, clock):
    return ReservationLifecycle(db, config=config, locks=ResourceLocks(), clock=clock)


@pytest.fixture
def api(db, config, clock):
    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_clock] = lambda: clock
    app.dependency_overrides[get_lifecycle] = lambda: ReservationLifecycle(
        db, config=config, clock=clock
    )
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


def hm(value: str) -> int:
    """ "HH:MM" → minutes from midnight."""
    hours, minutes = value.split(":")
    return int(hours) * 60 + int(minutes)
