"""Tests for the report summary endpoint."""

from datetime import date, time
from decimal import Decimal

import pytest
from httpx import AsyncClient

from app.utils.business_time import local_to_utc

REPORT_DAY = date(2026, 3, 15)


@pytest.fixture
async def report_bookings(make_booking, auth_headers: dict, client: AsyncClient) -> None:
    """Bookings spread across a day, a month and a year, in both stores."""

    async def _book(day: date, hour: int, amount: str, **overrides):
        drop_off = local_to_utc(day, time(hour))
        return await make_booking(
            drop_off_at=drop_off,
            pick_up_at=local_to_utc(day, time(hour + 6)),
            total_paid=Decimal(amount),
            **overrides,
        )

    await _book(REPORT_DAY, 9, "10.00")
    await _book(REPORT_DAY, 11, "20.00", status="cancelled")
    picked = await _book(REPORT_DAY, 12, "15.00", status="checked_in")
    await _book(date(2026, 3, 2), 10, "7.50")
    await _book(date(2026, 7, 1), 10, "30.00")
    await _book(date(2025, 12, 31), 10, "99.00")

    response = await client.post(
        f"/api/v1/bookings/{picked.booking_ref}/transition",
        json={"status": "picked_up"},
        headers=auth_headers,
    )
    assert response.status_code == 200


class TestReportSummary:
    async def test_day(self, client: AsyncClient, auth_headers: dict, report_bookings) -> None:
        response = await client.get(
            "/api/v1/reports/summary", params={"mode": "day", "date": "2026-03-15"}, headers=auth_headers
        )
        assert response.status_code == 200
        data = response.json()
        assert data["period_start"] == "2026-03-15"
        assert data["period_end"] == "2026-03-16"
        assert data["total_bookings"] == 3
        assert Decimal(str(data["revenue"])) == Decimal("25.00")
        assert data["by_status"] == {"paid": 1, "checked_in": 0, "picked_up": 1, "cancelled": 1}
        assert data["breakdown"]["active"]["count"] == 2
        assert data["breakdown"]["archived"]["count"] == 1
        assert Decimal(str(data["breakdown"]["archived"]["revenue"])) == Decimal("15.00")

    async def test_month(self, client: AsyncClient, auth_headers: dict, report_bookings) -> None:
        response = await client.get(
            "/api/v1/reports/summary", params={"mode": "month", "date": "2026-03-20"}, headers=auth_headers
        )
        data = response.json()
        assert data["period_start"] == "2026-03-01"
        assert data["period_end"] == "2026-04-01"
        assert data["total_bookings"] == 4
        assert Decimal(str(data["revenue"])) == Decimal("32.50")

    async def test_year(self, client: AsyncClient, auth_headers: dict, report_bookings) -> None:
        response = await client.get(
            "/api/v1/reports/summary", params={"mode": "year", "date": "2026-01-01"}, headers=auth_headers
        )
        data = response.json()
        assert data["period_start"] == "2026-01-01"
        assert data["period_end"] == "2027-01-01"
        assert data["total_bookings"] == 5
        assert Decimal(str(data["revenue"])) == Decimal("62.50")

    async def test_empty_period(self, client: AsyncClient, auth_headers: dict) -> None:
        response = await client.get(
            "/api/v1/reports/summary", params={"mode": "day", "date": "2020-01-01"}, headers=auth_headers
        )
        data = response.json()
        assert data["total_bookings"] == 0
        assert Decimal(str(data["revenue"])) == Decimal("0")

    async def test_unknown_mode(self, client: AsyncClient, auth_headers: dict) -> None:
        response = await client.get("/api/v1/reports/summary", params={"mode": "week"}, headers=auth_headers)
        assert response.status_code == 422

    async def test_requires_staff(self, client: AsyncClient) -> None:
        response = await client.get("/api/v1/reports/summary")
        assert response.status_code in (401, 403)
