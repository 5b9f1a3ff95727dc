"""
Tests for the resource calendar (busy / free view over reservations).
"""

from datetime import date

from spa_booking.services.scheduling import ResourceCalendar, ResourceKind, TimeRange

from conftest import DAY, hm

WORKING = TimeRange(hm("10:00"), hm("18:00"))


class TestBusyIntervals:
    def test_only_active_reservations_are_busy(self, db, salon, make_reservation):
        make_reservation(hm("10:00"), hm("11:00"), status="new")
        make_reservation(hm("11:00"), hm("12:00"), status="confirmed")
        make_reservation(hm("12:00"), hm("13:00"), status="in_progress")
        make_reservation(hm("13:00"), hm("14:00"), status="completed")
        make_reservation(hm("14:00"), hm("15:00"), status="cancelled")
        make_reservation(hm("15:00"), hm("16:00"), status="no_show")

        busy = ResourceCalendar(db).busy_intervals(ResourceKind.THERAPIST, salon.anna.id, DAY)
        assert busy == [
            TimeRange(hm("10:00"), hm("11:00")),
            TimeRange(hm("11:00"), hm("12:00")),
            TimeRange(hm("12:00"), hm("13:00")),
        ]

    def test_resources_are_independent(self, db, salon, make_reservation):
        make_reservation(hm("10:00"), hm("11:00"), therapist=salon.anna, room=salon.room_a)
        calendar = ResourceCalendar(db)

        assert calendar.busy_intervals(ResourceKind.THERAPIST, salon.bartek.id, DAY) == []
        assert calendar.busy_intervals(ResourceKind.ROOM, salon.room_b.id, DAY) == []
        assert len(calendar.busy_intervals(ResourceKind.ROOM, salon.room_a.id, DAY)) == 1


class TestIsFree:
    def test_overlap_and_abutting(self, db, salon, make_reservation):
        make_reservation(hm("10:00"), hm("11:00"))
        calendar = ResourceCalendar(db)

        assert not calendar.is_free(
            ResourceKind.THERAPIST, salon.anna.id, DAY, TimeRange(hm("10:30"), hm("11:30"))
        )
        assert calendar.is_free(
            ResourceKind.THERAPIST, salon.anna.id, DAY, TimeRange(hm("11:00"), hm("12:00"))
        )
        assert calendar.is_free(
            ResourceKind.THERAPIST, salon.anna.id, DAY, TimeRange(hm("09:00"), hm("10:00"))
        )

    def test_exclude_reservation(self, db, salon, make_reservation):
        reservation = make_reservation(hm("10:00"), hm("11:00"))
        calendar = ResourceCalendar(db)
        window = TimeRange(hm("10:30"), hm("11:30"))

        assert not calendar.is_free(ResourceKind.ROOM, salon.room_a.id, DAY, window)
        assert calendar.is_free(
            ResourceKind.ROOM, salon.room_a.id, DAY, window, exclude_reservation_id=reservation.id
        )

    def test_other_date_is_free(self, db, salon, make_reservation):
        make_reservation(hm("10:00"), hm("11:00"))

        assert ResourceCalendar(db).is_free(
            ResourceKind.THERAPIST, salon.anna.id, date(2024, 6, 2), TimeRange(hm("10:00"), hm("11:00"))
        )


class TestFreeSlots:
    def test_last_slot_fits_working_window(self, db, salon):
        slots = list(ResourceCalendar(db).free_slots(
            ResourceKind.THERAPIST, salon.anna.id, DAY, WORKING, 30, 90
        ))
        assert slots[0] == TimeRange(hm("10:00"), hm("11:30"))
        assert slots[-1] == TimeRange(hm("16:30"), hm("18:00"))
        assert len(slots) == 14

    def test_busy_interval_excluded(self, db, salon, make_reservation):
        make_reservation(hm("10:00"), hm("11:00"))
        starts = [
            w.start for w in ResourceCalendar(db).free_slots(
                ResourceKind.THERAPIST, salon.anna.id, DAY, WORKING, 30, 60
            )
        ]
        assert hm("10:00") not in starts
        assert hm("10:30") not in starts
        assert starts[0] == hm("11:00")

    def test_ascending_and_aligned(self, db, salon, make_reservation):
        make_reservation(hm("13:00"), hm("14:15"))
        slots = list(ResourceCalendar(db).free_slots(
            ResourceKind.THERAPIST, salon.anna.id, DAY, WORKING, 15, 45
        ))
        starts = [w.start for w in slots]
        assert starts == sorted(starts)
        assert all((s - WORKING.start) % 15 == 0 for s in starts)
        assert all(w.duration == 45 for w in slots)
        # 12:15-13:00 abuts the booking, 12:30-13:15 overlaps it
        assert hm("12:15") in starts
        assert hm("12:30") not in starts
        assert hm("14:15") in starts

    def test_restartable_and_reads_current_bookings(self, db, salon, make_reservation):
        slots = ResourceCalendar(db).free_slots(
            ResourceKind.THERAPIST, salon.anna.id, DAY, WORKING, 60, 60
        )
        first = list(slots)
        assert list(slots) == first
        assert len(first) == 8

        make_reservation(hm("12:00"), hm("13:00"))
        second = list(slots)
        assert len(second) == 7
        assert TimeRange(hm("12:00"), hm("13:00")) not in second

    def test_duration_longer_than_window(self, db, salon):
        slots = ResourceCalendar(db).free_slots(
            ResourceKind.THERAPIST, salon.anna.id, DAY, TimeRange(hm("10:00"), hm("11:00")), 30, 90
        )
        assert list(slots) == []
