"""
Tests for the HTTP surface: routing, auth, status codes and payload shapes.
"""

from uuid import UUID, uuid4

from app.services.event_publisher import BOOKING_CREATED, BOOKING_PAID, BOOKING_STATUS_UPDATED
from app.services.notification_service import notification_service

API = "/api/v1"


async def create_booking(client, headers, campsite, people_count=4, equipment=None, start="2025-02-01", end="2025-02-03"):
    response = await client.post(
        f"{API}/booking",
        headers=headers,
        json={
            "campsite_id": str(campsite.public_id),
            "start_date": start,
            "end_date": end,
            "people_count": people_count,
            "equipment": equipment or [],
        },
    )
    return response


class TestHealthAndCatalogue:

    async def test_health(self, client):
        response = await client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"
        assert "X-Request-ID" in response.headers

    async def test_list_campsites(self, client, campsite):
        response = await client.get(f"{API}/booking/camps")
        assert response.status_code == 200
        body = response.json()
        assert body == [
            {
                "id": str(campsite.public_id),
                "name": "Pine Ridge",
                "description": None,
                "location": "North shore",
                "nightly_price": 10000,
                "daily_capacity": 10,
            }
        ]

    async def test_campsite_availability(self, client, campsite):
        response = await client.get(
            f"{API}/booking/camps/{campsite.public_id}/availability",
            params={"start_date": "2025-02-01", "end_date": "2025-02-03"},
        )
        assert response.status_code == 200
        body = response.json()
        assert body["available_capacity"] == 10
        assert body["days"] == [
            {"date": "2025-02-01", "used": 0, "remaining": 10},
            {"date": "2025-02-02", "used": 0, "remaining": 10},
        ]

    async def test_inverted_range_is_422(self, client, campsite):
        response = await client.get(
            f"{API}/booking/camps/{campsite.public_id}/availability",
            params={"start_date": "2025-02-03", "end_date": "2025-02-01"},
        )
        assert response.status_code == 422

    async def test_unknown_campsite_is_404(self, client):
        response = await client.get(
            f"{API}/booking/camps/{uuid4()}/availability",
            params={"start_date": "2025-02-01", "end_date": "2025-02-03"},
        )
        assert response.status_code == 404

    async def test_equipment_list_without_range(self, client, tent):
        response = await client.get(f"{API}/booking/equipment")
        assert response.status_code == 200
        assert response.json()[0]["available_stock"] == 5

    async def test_equipment_list_needs_both_dates(self, client, tent):
        response = await client.get(f"{API}/booking/equipment", params={"start_date": "2025-02-01"})
        assert response.status_code == 422


class TestBookingFlow:

    async def test_requires_authentication(self, client, campsite):
        response = await create_booking(client, {}, campsite)
        assert response.status_code == 401

    async def test_rejects_invalid_token(self, client, campsite):
        response = await create_booking(client, {"Authorization": "Bearer not-a-jwt"}, campsite)
        assert response.status_code == 401

    async def test_create_returns_public_identifiers(
        self, client, publisher, auth_headers, guest, campsite, tent
    ):
        response = await create_booking(
            client,
            auth_headers(guest),
            campsite,
            equipment=[{"equipment_id": str(tent.public_id), "quantity": 2, "nights": 1}],
        )

        assert response.status_code == 201
        body = response.json()
        UUID(body["id"])
        assert body["user_id"] == str(guest.public_id)
        assert body["campsite_id"] == str(campsite.public_id)
        assert body["status"] == "PENDING"
        assert body["nights"] == 2
        assert body["total_price"] == 180000
        assert body["equipment"][0]["equipment_id"] == str(tent.public_id)
        assert body["equipment"][0]["price"] == 100000
        assert publisher.names() == [BOOKING_CREATED]

    async def test_client_total_is_ignored(self, client, auth_headers, guest, campsite):
        response = await client.post(
            f"{API}/booking",
            headers=auth_headers(guest),
            json={
                "campsite_id": str(campsite.public_id),
                "start_date": "2025-02-01",
                "end_date": "2025-02-02",
                "people_count": 1,
                "total_price": 1,
            },
        )
        assert response.status_code == 201
        assert response.json()["total_price"] == 10000

    async def test_rental_nights_longer_than_stay_is_422(self, client, auth_headers, guest, campsite, tent):
        response = await create_booking(
            client,
            auth_headers(guest),
            campsite,
            equipment=[{"equipment_id": str(tent.public_id), "quantity": 1, "nights": 5}],
        )
        assert response.status_code == 422

    async def test_full_lifecycle(self, client, publisher, auth_headers, guest, admin, campsite):
        created = await create_booking(client, auth_headers(guest), campsite)
        booking_id = created.json()["id"]

        proof = await client.post(
            f"{API}/booking/{booking_id}/payment-proof",
            headers=auth_headers(guest),
            json={"reference": "uploads/proof.jpg"},
        )
        assert proof.status_code == 200
        assert proof.json()["payment_proof"] == "uploads/proof.jpg"

        for new_status, expected in [("PAID", "PAID"), ("CHECK_IN", "CHECK_IN"), ("CHECK_OUT", "CHECKOUT")]:
            response = await client.put(
                f"{API}/admin/bookings/{booking_id}/status",
                headers=auth_headers(admin),
                json={"status": new_status},
            )
            assert response.status_code == 200
            assert response.json()["status"] == expected

        assert publisher.names().count(BOOKING_STATUS_UPDATED) == 3
        assert publisher.names().count(BOOKING_PAID) == 1

        history = await client.get(f"{API}/booking/history", headers=auth_headers(guest))
        assert history.json()["total"] == 1
        assert history.json()["bookings"][0]["status"] == "CHECKOUT"

    async def test_paid_booking_shows_in_availability(self, client, auth_headers, guest, admin, campsite):
        created = await create_booking(client, auth_headers(guest), campsite, people_count=4)
        await client.put(
            f"{API}/admin/bookings/{created.json()['id']}/status",
            headers=auth_headers(admin),
            json={"status": "PAID"},
        )

        response = await client.get(
            f"{API}/booking/camps/{campsite.public_id}/availability",
            params={"start_date": "2025-02-01", "end_date": "2025-02-04"},
        )
        body = response.json()
        assert [day["used"] for day in body["days"]] == [4, 4, 0]
        assert body["available_capacity"] == 6

    async def test_capacity_exceeded_is_409_with_details(self, client, auth_headers, guest, admin, campsite):
        first = await create_booking(client, auth_headers(guest), campsite, people_count=6)
        second = await create_booking(client, auth_headers(guest), campsite, people_count=6)
        await client.put(
            f"{API}/admin/bookings/{first.json()['id']}/status",
            headers=auth_headers(admin),
            json={"status": "PAID"},
        )

        response = await client.put(
            f"{API}/admin/bookings/{second.json()['id']}/status",
            headers=auth_headers(admin),
            json={"status": "PAID"},
        )

        assert response.status_code == 409
        detail = response.json()["detail"]
        assert detail["resource"] == "campsite"
        assert detail["resource_id"] == str(campsite.public_id)
        assert detail["date"] == "2025-02-01"
        assert (detail["used"], detail["remaining"], detail["requested"]) == (6, 4, 6)

        listing = await client.get(
            f"{API}/admin/bookings", headers=auth_headers(admin), params={"status": "PENDING"}
        )
        assert [b["id"] for b in listing.json()["bookings"]] == [second.json()["id"]]

    async def test_replace_equipment(self, client, auth_headers, guest, campsite, tent, stove):
        created = await create_booking(
            client,
            auth_headers(guest),
            campsite,
            equipment=[{"equipment_id": str(tent.public_id), "quantity": 1}],
        )

        response = await client.put(
            f"{API}/booking/{created.json()['id']}/equipment",
            headers=auth_headers(guest),
            json={"equipment": [{"equipment_id": str(stove.public_id), "quantity": 2, "nights": 1}]},
        )

        assert response.status_code == 200
        body = response.json()
        assert [item["name"] for item in body["equipment"]] == ["Camping stove"]
        assert body["total_price"] == 80000 + 30000

    async def test_replace_equipment_of_someone_else_is_403(
        self, client, auth_headers, guest, other_guest, campsite
    ):
        created = await create_booking(client, auth_headers(guest), campsite)
        response = await client.put(
            f"{API}/booking/{created.json()['id']}/equipment",
            headers=auth_headers(other_guest),
            json={"equipment": []},
        )
        assert response.status_code == 403


class TestAdmin:

    async def test_guest_cannot_change_status(self, client, auth_headers, guest, campsite):
        created = await create_booking(client, auth_headers(guest), campsite)
        response = await client.put(
            f"{API}/admin/bookings/{created.json()['id']}/status",
            headers=auth_headers(guest),
            json={"status": "PAID"},
        )
        assert response.status_code == 403

    async def test_invalid_transition_is_422(self, client, auth_headers, guest, admin, campsite):
        created = await create_booking(client, auth_headers(guest), campsite)
        response = await client.put(
            f"{API}/admin/bookings/{created.json()['id']}/status",
            headers=auth_headers(admin),
            json={"status": "CHECKOUT"},
        )
        assert response.status_code == 422

    async def test_unknown_booking_is_404(self, client, auth_headers, admin):
        response = await client.put(
            f"{API}/admin/bookings/{uuid4()}/status",
            headers=auth_headers(admin),
            json={"status": "PAID"},
        )
        assert response.status_code == 404

    async def test_delete_unreferenced_equipment(self, client, auth_headers, admin, stove):
        response = await client.delete(f"{API}/admin/equipment/{stove.public_id}", headers=auth_headers(admin))
        assert response.status_code == 204

        listing = await client.get(f"{API}/booking/equipment")
        assert listing.json() == []

    async def test_delete_referenced_equipment_is_409(self, client, auth_headers, guest, admin, campsite, tent):
        await create_booking(
            client,
            auth_headers(guest),
            campsite,
            equipment=[{"equipment_id": str(tent.public_id), "quantity": 1}],
        )
        response = await client.delete(f"{API}/admin/equipment/{tent.public_id}", headers=auth_headers(admin))
        assert response.status_code == 409


class TestNotificationFeed:

    async def pay(self, client, auth_headers, guest, admin, campsite):
        created = await create_booking(client, auth_headers(guest), campsite)
        booking_id = created.json()["id"]
        await client.put(
            f"{API}/admin/bookings/{booking_id}/status",
            headers=auth_headers(admin),
            json={"status": "PAID"},
        )
        return booking_id

    async def test_paid_booking_appears_unread(self, client, auth_headers, guest, admin, campsite):
        booking_id = await self.pay(client, auth_headers, guest, admin, campsite)

        response = await client.get(f"{API}/admin/notifications", headers=auth_headers(admin))

        assert response.status_code == 200
        body = response.json()
        assert body["unread_count"] == 1
        [notification] = body["notifications"]
        assert notification["type"] == BOOKING_PAID
        assert notification["booking_id"] == booking_id
        assert notification["is_read"] is False

    async def test_mark_as_read(self, client, auth_headers, guest, admin, campsite):
        await self.pay(client, auth_headers, guest, admin, campsite)
        listing = await client.get(f"{API}/admin/notifications", headers=auth_headers(admin))
        notification_id = listing.json()["notifications"][0]["id"]

        response = await client.put(
            f"{API}/admin/notifications/{notification_id}/read", headers=auth_headers(admin)
        )
        assert response.status_code == 204

        again = await client.put(
            f"{API}/admin/notifications/{notification_id}/read", headers=auth_headers(admin)
        )
        assert again.status_code == 204

        body = (await client.get(f"{API}/admin/notifications", headers=auth_headers(admin))).json()
        assert body["unread_count"] == 0
        assert body["notifications"][0]["is_read"] is True

    async def test_unknown_notification_is_404(self, client, auth_headers, admin):
        response = await client.put(f"{API}/admin/notifications/{uuid4()}/read", headers=auth_headers(admin))
        assert response.status_code == 404

    async def test_guest_cannot_read_feed(self, client, auth_headers, guest):
        response = await client.get(f"{API}/admin/notifications", headers=auth_headers(guest))
        assert response.status_code == 403

    async def test_feed_is_capped_at_latest_twenty(self, client, session_factory, auth_headers, admin):
        async with session_factory() as session:
            for n in range(25):
                await notification_service.create_notification(session, f"note {n}", BOOKING_PAID)
            await session.commit()

        body = (await client.get(f"{API}/admin/notifications", headers=auth_headers(admin))).json()

        assert len(body["notifications"]) == 20
        assert body["notifications"][0]["message"] == "note 24"
        assert body["notifications"][0]["booking_id"] is None
        assert body["unread_count"] == 25
