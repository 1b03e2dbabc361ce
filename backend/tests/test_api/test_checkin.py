"""Tests for the kiosk check-in endpoints."""

from datetime import timedelta

from httpx import AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth.checkin_token import create_checkin_token
from app.core.exceptions import UNAUTHORIZED_DETAIL
from app.services import booking_service


class TestVerify:
    async def test_verify_returns_summary(self, client: AsyncClient, make_booking) -> None:
        booking = await make_booking(customer_name="Sofia Almeida", bags_large=1)

        response = await client.post(
            "/api/v1/checkin/verify", json={"token": create_checkin_token(booking.booking_ref)}
        )
        assert response.status_code == 200
        data = response.json()["booking"]
        assert data["booking_ref"] == booking.booking_ref
        assert data["customer_name"] == "Sofia Almeida"
        assert data["bags_large"] == 1
        assert data["status"] == "paid"
        assert "customer_email" not in data

    async def test_verify_expired_token(self, client: AsyncClient, make_booking) -> None:
        booking = await make_booking()
        token = create_checkin_token(booking.booking_ref, expires_delta=timedelta(seconds=-1))

        response = await client.post("/api/v1/checkin/verify", json={"token": token})
        assert response.status_code == 401
        assert response.json()["detail"] == UNAUTHORIZED_DETAIL

    async def test_verify_empty_token_is_422(self, client: AsyncClient) -> None:
        response = await client.post("/api/v1/checkin/verify", json={"token": ""})
        assert response.status_code == 422


class TestConfirm:
    async def test_confirm_without_staff_records_unknown(
        self, client: AsyncClient, db_session: AsyncSession, make_booking
    ) -> None:
        booking = await make_booking()
        booking_ref = booking.booking_ref

        response = await client.post(
            "/api/v1/checkin/confirm", json={"token": create_checkin_token(booking_ref)}
        )
        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["booking"]["status"] == "checked_in"

        db_session.expire_all()
        stored = await booking_service.get_booking(db_session, booking_ref)
        assert stored.checked_in_by == "unknown"
        assert stored.checked_in_at is not None

    async def test_confirm_with_staff_records_email(
        self, client: AsyncClient, auth_headers: dict, test_staff, make_booking
    ) -> None:
        booking = await make_booking()

        response = await client.post(
            "/api/v1/checkin/confirm",
            json={"token": create_checkin_token(booking.booking_ref)},
            headers=auth_headers,
        )
        assert response.status_code == 200

        fetched = await client.get(f"/api/v1/bookings/{booking.booking_ref}", headers=auth_headers)
        assert fetched.json()["checked_in_by"] == test_staff.email

    async def test_confirm_twice_is_400(self, client: AsyncClient, make_booking) -> None:
        booking = await make_booking()
        token = create_checkin_token(booking.booking_ref)

        first = await client.post("/api/v1/checkin/confirm", json={"token": token})
        assert first.status_code == 200

        second = await client.post("/api/v1/checkin/confirm", json={"token": token})
        assert second.status_code == 400

    async def test_confirm_archived_booking_is_401(
        self, client: AsyncClient, auth_headers: dict, make_booking
    ) -> None:
        booking = await make_booking(status="checked_in")
        token = create_checkin_token(booking.booking_ref)
        await client.post(
            f"/api/v1/bookings/{booking.booking_ref}/transition",
            json={"status": "picked_up"},
            headers=auth_headers,
        )

        response = await client.post("/api/v1/checkin/confirm", json={"token": token})
        assert response.status_code == 401
        assert response.json()["detail"] == UNAUTHORIZED_DETAIL
