import json
from datetime import datetime

from conftest import DAY


def _payload(salon, start="10:00", end=None, **overrides):
    payload = {
        "client_id": salon.client.id,
        "therapist_id": salon.anna.id,
        "room_id": salon.room_a.id,
        "variant_id": salon.variant_60.id,
        "date": DAY.isoformat(),
        "start_time": start,
        "source": "phone",
    }
    if end is not None:
        payload["end_time"] = end
    payload.update(overrides)
    return payload


def _create(api, salon, **kwargs):
    response = api.post("/reservations/", json=_payload(salon, **kwargs))
    assert response.status_code == 201, response.text
    return response.json()


class TestReservationsApi:
    def test_create(self, api, salon):
        body = _create(api, salon)

        assert body["number"].startswith("R-2024-")
        assert body["status"] == "new"
        assert body["payment_status"] == "unpaid"
        assert body["start_time"] == "10:00"
        assert body["end_time"] == "11:00"
        assert body["duration_minutes"] == 60
        assert body["price"] == 200.0
        assert body["source"] == "phone"

    def test_therapist_conflict(self, api, salon):
        _create(api, salon)
        response = api.post(
            "/reservations/",
            json=_payload(salon, "10:30", room_id=salon.room_b.id),
        )

        assert response.status_code == 409
        assert response.json()["code"] == "therapist_conflict"

    def test_room_conflict(self, api, salon):
        _create(api, salon)
        response = api.post(
            "/reservations/",
            json=_payload(salon, "10:00", therapist_id=salon.bartek.id),
        )

        assert response.status_code == 409
        assert response.json()["code"] == "room_conflict"

    def test_invalid_duration(self, api, salon):
        response = api.post("/reservations/", json=_payload(salon, "10:00", "11:30"))

        assert response.status_code == 422
        body = response.json()
        assert body["code"] == "invalid_duration"
        assert body["detail"]

    def test_outside_working_hours(self, api, salon):
        response = api.post("/reservations/", json=_payload(salon, "17:30"))

        assert response.status_code == 422
        assert response.json()["code"] == "outside_working_hours"

    def test_malformed_time(self, api, salon):
        response = api.post("/reservations/", json=_payload(salon, "25:00"))
        assert response.status_code == 422

    def test_end_before_start(self, api, salon):
        response = api.post("/reservations/", json=_payload(salon, "11:00", "10:00"))
        assert response.status_code == 422

    def test_unknown_client(self, api, salon):
        response = api.post("/reservations/", json=_payload(salon, client_id=999))

        assert response.status_code == 404
        assert response.json()["code"] == "not_found"

    def test_check(self, api, salon):
        ok = api.post("/reservations/check", json=_payload(salon))
        assert ok.status_code == 200
        assert ok.json()["available"] is True

        _create(api, salon)
        taken = api.post("/reservations/check", json=_payload(salon)).json()
        assert taken["available"] is False
        assert taken["code"] == "therapist_conflict"

        # check writes nothing
        assert len(api.get("/reservations/").json()) == 1

    def test_get_and_list(self, api, salon):
        created = _create(api, salon)
        _create(api, salon, start="12:00", therapist_id=salon.bartek.id)

        got = api.get(f"/reservations/{created['id']}")
        assert got.status_code == 200
        assert got.json()["number"] == created["number"]

        listed = api.get("/reservations/", params={"therapist_id": salon.bartek.id}).json()
        assert [r["start_time"] for r in listed] == ["12:00"]

        by_date = api.get("/reservations/", params={"date": DAY.isoformat()}).json()
        assert [r["start_time"] for r in by_date] == ["10:00", "12:00"]

        assert api.get("/reservations/999").status_code == 404

    def test_status_flow(self, api, salon):
        created = _create(api, salon)
        url = f"/reservations/{created['id']}/status"

        confirmed = api.post(url, json={"status": "confirmed"})
        assert confirmed.status_code == 200
        assert confirmed.json()["status"] == "confirmed"

        illegal = api.post(url, json={"status": "completed"})
        assert illegal.status_code == 409
        assert illegal.json()["code"] == "illegal_status_transition"

        assert api.get(f"/reservations/{created['id']}").json()["status"] == "confirmed"

    def test_unknown_status_value(self, api, salon):
        created = _create(api, salon)
        response = api.post(f"/reservations/{created['id']}/status", json={"status": "archived"})
        assert response.status_code == 422

    def test_status_of_unknown_reservation(self, api, salon):
        response = api.post("/reservations/999/status", json={"status": "confirmed"})

        assert response.status_code == 404
        assert response.json()["code"] == "not_found"

    def test_no_show_before_end(self, api, salon, clock):
        created = _create(api, salon)
        url = f"/reservations/{created['id']}/status"

        assert api.post(url, json={"status": "no_show"}).status_code == 409

        clock.now = datetime(2024, 6, 1, 11, 15)
        assert api.post(url, json={"status": "no_show"}).json()["status"] == "no_show"

    def test_cancel_frees_window(self, api, salon):
        created = _create(api, salon)

        cancelled = api.post(f"/reservations/{created['id']}/cancel")
        assert cancelled.status_code == 200
        assert cancelled.json()["status"] == "cancelled"

        _create(api, salon)

        again = api.post(f"/reservations/{created['id']}/cancel")
        assert again.status_code == 409

    def test_reschedule(self, api, salon):
        created = _create(api, salon)

        response = api.post(
            f"/reservations/{created['id']}/reschedule",
            json={"date": DAY.isoformat(), "start_time": "15:00"},
        )
        assert response.status_code == 200
        body = response.json()
        assert (body["start_time"], body["end_time"]) == ("15:00", "16:00")
        assert body["number"] == created["number"]

    def test_reschedule_conflict(self, api, salon):
        _create(api, salon, start="15:00")
        created = _create(api, salon)

        response = api.post(
            f"/reservations/{created['id']}/reschedule",
            json={"date": DAY.isoformat(), "start_time": "15:30"},
        )
        assert response.status_code == 409
        assert response.json()["code"] == "therapist_conflict"
        assert api.get(f"/reservations/{created['id']}").json()["start_time"] == "10:00"

    def test_payment(self, api, salon):
        created = _create(api, salon)

        response = api.post(
            f"/reservations/{created['id']}/payment",
            json={"payment_status": "paid", "payment_method": "card"},
        )
        assert response.status_code == 200
        body = response.json()
        assert body["payment_status"] == "paid"
        assert body["payment_method"] == "card"
        assert body["status"] == "new"

    def test_delete_not_allowed(self, api, salon):
        created = _create(api, salon)
        assert api.delete(f"/reservations/{created['id']}").status_code == 405

    def test_events_published(self, api, salon, fake_redis):
        created = _create(api, salon)
        api.post(f"/reservations/{created['id']}/cancel")

        types = [json.loads(e)["type"] for e in fake_redis.lrange("events:p2p", 0, -1)]
        assert types == [
            "reservation_created",
            "reservation_status_changed",
            "reservation_cancelled",
        ]


class TestSlotsApi:
    def test_day_slots(self, api, salon):
        _create(api, salon)

        response = api.get(
            "/slots/day",
            params={
                "variant_id": salon.variant_60.id,
                "therapist_id": salon.anna.id,
                "date": DAY.isoformat(),
            },
        )
        assert response.status_code == 200
        body = response.json()
        assert body["duration_minutes"] == 60
        assert body["slots"][0]["start_time"] == "11:00"
        assert body["slots"][0]["end_time"] == "12:00"
        assert body["slots"][0]["therapist_name"] == "Anna Nowak"
        assert body["slots"][-1]["start_time"] == "17:00"

    def test_same_day_offers_are_bookable(self, api, salon, clock):
        clock.now = datetime(2024, 6, 1, 15, 0)

        slots = api.get(
            "/slots/day",
            params={"variant_id": salon.variant_60.id, "date": DAY.isoformat()},
        ).json()["slots"]
        assert slots[0]["start_time"] == "15:00"

        first = slots[0]
        response = api.post("/reservations/", json=_payload(
            salon,
            first["start_time"],
            therapist_id=first["therapist_id"],
            room_id=first["room_id"],
        ))
        assert response.status_code == 201

    def test_unknown_variant(self, api, salon):
        response = api.get("/slots/day", params={"variant_id": 999, "date": DAY.isoformat()})
        assert response.status_code == 404
        assert response.json()["code"] == "not_found"

    def test_date_required(self, api, salon):
        response = api.get("/slots/day", params={"variant_id": salon.variant_60.id})
        assert response.status_code == 422


class TestShiftsApi:
    def test_create_and_duplicate(self, api, salon):
        payload = {
            "therapist_id": salon.anna.id,
            "date": "2024-06-02",
            "start_time": "09:00",
            "end_time": "15:00",
        }
        created = api.post("/shifts/", json=payload)
        assert created.status_code == 201
        assert created.json()["status"] == "working"
        assert created.json()["start_time"] == "09:00"

        duplicate = api.post("/shifts/", json=payload)
        assert duplicate.status_code == 409

    def test_shift_feeds_availability(self, api, salon):
        api.post("/shifts/", json={
            "therapist_id": salon.anna.id,
            "date": "2024-06-02",
            "start_time": "09:00",
            "end_time": "11:00",
        })

        slots = api.get("/slots/day", params={
            "variant_id": salon.variant_60.id,
            "date": "2024-06-02",
        }).json()["slots"]
        assert [s["start_time"] for s in slots] == ["09:00", "09:30", "10:00"]

    def test_invalid_shift(self, api, salon):
        response = api.post("/shifts/", json={
            "therapist_id": salon.anna.id,
            "date": "2024-06-02",
            "start_time": "15:00",
            "end_time": "09:00",
        })
        assert response.status_code == 422

    def test_patch_shift(self, api, salon):
        shift_id = api.get("/shifts/", params={
            "date": DAY.isoformat(),
            "therapist_id": salon.anna.id,
        }).json()[0]["id"]

        patched = api.patch(f"/shifts/{shift_id}", json={"status": "sick"})
        assert patched.status_code == 200
        assert patched.json()["status"] == "sick"

        bad = api.patch(f"/shifts/{shift_id}", json={"start_time": "19:00"})
        assert bad.status_code == 422

    def test_shift_for_unknown_therapist(self, api, salon):
        response = api.post("/shifts/", json={
            "therapist_id": 999,
            "date": "2024-06-02",
            "start_time": "09:00",
            "end_time": "15:00",
        })
        assert response.status_code == 404


class TestDirectoryApi:
    def test_rooms_crud(self, api, salon):
        created = api.post("/rooms/", json={"name": "Room C", "display_order": 3})
        assert created.status_code == 201
        room_id = created.json()["id"]

        names = [r["name"] for r in api.get("/rooms/").json()]
        assert names == ["Room A", "Room B", "Room C"]

        patched = api.patch(f"/rooms/{room_id}", json={"notes": "Sauna"})
        assert patched.json()["notes"] == "Sauna"

        assert api.delete(f"/rooms/{room_id}").status_code == 204
        assert "Room C" not in [r["name"] for r in api.get("/rooms/").json()]

    def test_room_name_unique(self, api, salon):
        response = api.post("/rooms/", json={"name": "Room A"})
        assert response.status_code == 409

        renamed = api.patch(f"/rooms/{salon.room_b.id}", json={"name": "Room A"})
        assert renamed.status_code == 409

    def test_required_fields_cannot_be_nulled(self, api, salon):
        assert api.patch(f"/rooms/{salon.room_a.id}", json={"name": None}).status_code == 422
        assert api.patch(f"/rooms/{salon.room_a.id}", json={"is_active": None}).status_code == 422
        assert api.patch(f"/therapists/{salon.anna.id}", json={"first_name": None}).status_code == 422
        assert api.patch(f"/clients/{salon.client.id}", json={"first_name": None}).status_code == 422
        assert api.patch(f"/services/{salon.service.id}", json={"name": None}).status_code == 422
        assert api.patch(
            f"/services/variants/{salon.variant_60.id}", json={"regular_price": None}
        ).status_code == 422

        # nullable columns still accept null
        cleared = api.patch(f"/rooms/{salon.room_a.id}", json={"notes": None})
        assert cleared.status_code == 200
        assert api.get(f"/rooms/{salon.room_a.id}").json()["name"] == "Room A"

    def test_room_busy(self, api, salon):
        _create(api, salon, start="12:00")
        _create(api, salon, start="10:00")

        response = api.get(f"/rooms/{salon.room_a.id}/busy", params={"date": DAY.isoformat()})
        assert response.status_code == 200
        assert response.json()["busy"] == [
            {"start_time": "10:00", "end_time": "11:00"},
            {"start_time": "12:00", "end_time": "13:00"},
        ]

        other = api.get(f"/rooms/{salon.room_b.id}/busy", params={"date": DAY.isoformat()})
        assert other.json()["busy"] == []

    def test_therapists(self, api, salon):
        created = api.post("/therapists/", json={"first_name": "Celina", "last_name": "Zajac"})
        assert created.status_code == 201
        assert created.json()["display_name"] == "Celina Zajac"

        names = [t["display_name"] for t in api.get("/therapists/").json()]
        assert "Anna Nowak" in names

    def test_therapist_schedule_must_be_object(self, api, salon):
        response = api.post("/therapists/", json={"first_name": "Celina", "work_schedule": "[1, 2]"})
        assert response.status_code == 422

        response = api.patch(f"/therapists/{salon.anna.id}", json={"work_schedule": "not json"})
        assert response.status_code == 422

    def test_working_window(self, api, salon):
        api.patch(
            f"/therapists/{salon.bartek.id}",
            json={"work_schedule": '{"sun": {"start": "12:00", "end": "16:00"}}'},
        )

        shift_day = api.get(
            f"/therapists/{salon.anna.id}/working-window", params={"date": DAY.isoformat()}
        ).json()
        assert shift_day == {
            "therapist_id": salon.anna.id,
            "date": DAY.isoformat(),
            "working": True,
            "start_time": "10:00",
            "end_time": "18:00",
        }

        # 2024-06-02 is a Sunday with no per-date shift
        template_day = api.get(
            f"/therapists/{salon.bartek.id}/working-window", params={"date": "2024-06-02"}
        ).json()
        assert (template_day["start_time"], template_day["end_time"]) == ("12:00", "16:00")

        off = api.get(
            f"/therapists/{salon.anna.id}/working-window", params={"date": "2024-06-02"}
        ).json()
        assert off["working"] is False
        assert off["start_time"] is None

    def test_variants(self, api, salon):
        response = api.get(f"/services/{salon.service.id}/variants")
        assert [v["duration_minutes"] for v in response.json()] == [60, 90]

        created = api.post(
            f"/services/{salon.service.id}/variants",
            json={"duration_minutes": 120, "regular_price": 350.0},
        )
        assert created.status_code == 201

        bad = api.post(
            f"/services/{salon.service.id}/variants",
            json={"duration_minutes": 0, "regular_price": 100.0},
        )
        assert bad.status_code == 422

    def test_health(self, api):
        response = api.get("/health")
        assert response.status_code == 200
        assert response.json() == {"database": "ok"}
