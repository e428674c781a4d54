"""Integration tests for the customer-facing lookups."""

from datetime import UTC, date, datetime
from types import SimpleNamespace

import pytest
import pytest_check
from httpx import AsyncClient

from src.domain.orders import OrderStatus
from src.infrastructure.database.models import Company, Order, OrderTracking

EVENT = {
    "date": "02/03/2026",
    "time": "14:35",
    "location": "Petrolina/PE",
    "status": "Objeto em trânsito - por favor aguarde",
    "description": "Objeto em trânsito - por favor aguarde",
}


def _tracking() -> OrderTracking:
    return OrderTracking(
        id=3,
        order_id=12,
        order_number="PED00012",
        client_name="Ana",
        client_phone="74981138033",
        tracking_code="AA123456789BR",
        carrier="correios",
        status="in_transit",
        events=[EVENT],
        estimated_delivery=date(2026, 3, 5),
        last_update=datetime(2026, 3, 2, 15, 0, tzinfo=UTC),
    )


@pytest.mark.integration
class TestPublicTracking:
    async def test_lookup_by_code(
        self, client: AsyncClient, repos: SimpleNamespace
    ) -> None:
        repos.trackings.latest_by_code.return_value = _tracking()

        response = await client.get(
            "/api/v1/public/trackings", params={"code": " aa123456789br"}
        )

        assert response.status_code == 200
        body = response.json()
        with pytest_check.check:
            assert body["tracking_code"] == "AA123456789BR"
        with pytest_check.check:
            assert body["events"] == [EVENT]
        with pytest_check.check:
            assert "client_phone" not in body
        repos.trackings.latest_by_code.assert_awaited_once_with("AA123456789BR")

    async def test_short_code_is_400(self, client: AsyncClient) -> None:
        response = await client.get("/api/v1/public/trackings", params={"code": "AB"})

        assert response.status_code == 400
        assert response.json()["message"] == "Invalid tracking code format"

    async def test_unknown_code_is_404(
        self, client: AsyncClient, repos: SimpleNamespace
    ) -> None:
        repos.trackings.latest_by_code.return_value = None

        response = await client.get(
            "/api/v1/public/trackings", params={"code": "AA123456789BR"}
        )

        assert response.status_code == 404


@pytest.mark.integration
class TestPublicOrder:
    async def test_shipped_order(
        self, client: AsyncClient, repos: SimpleNamespace
    ) -> None:
        repos.orders.get_by_number.return_value = Order(
            id=12,
            number="PED00012",
            client_name="Ana",
            status=OrderStatus.SHIPPING,
            created_at=datetime(2026, 3, 1, 12, 0, tzinfo=UTC),
        )
        repos.trackings.latest_for_order.return_value = _tracking()
        repos.companies.get_profile.return_value = Company(
            id=1, name="Prime Print", logo_url=None
        )

        response = await client.get(
            "/api/v1/public/orders", params={"orderNumber": "PED00012"}
        )

        assert response.status_code == 200
        body = response.json()
        with pytest_check.check:
            assert body["order"]["number"] == "PED00012"
        with pytest_check.check:
            assert body["order"]["status"] == "shipping"
        with pytest_check.check:
            assert body["tracking"]["tracking_url"].endswith("objetos=AA123456789BR")
        with pytest_check.check:
            assert body["tracking"]["estimated_delivery"] == "2026-03-05"
        with pytest_check.check:
            assert body["company"] == {"name": "Prime Print", "logo_url": None}

    async def test_order_without_company_profile(
        self, client: AsyncClient, repos: SimpleNamespace
    ) -> None:
        repos.orders.get_by_number.return_value = Order(
            id=12,
            number="PED00012",
            client_name="Ana",
            status=OrderStatus.AWAITING_PAYMENT,
            created_at=datetime(2026, 3, 1, 12, 0, tzinfo=UTC),
        )
        repos.companies.get_profile.return_value = None

        response = await client.get(
            "/api/v1/public/orders", params={"orderNumber": "PED00012"}
        )

        assert response.status_code == 200
        assert response.json()["tracking"] is None
        assert response.json()["company"] is None

    async def test_missing_number_is_400(self, client: AsyncClient) -> None:
        response = await client.get("/api/v1/public/orders")

        assert response.status_code == 400

    async def test_unknown_order_is_404(
        self, client: AsyncClient, repos: SimpleNamespace
    ) -> None:
        repos.orders.get_by_number.return_value = None

        response = await client.get(
            "/api/v1/public/orders", params={"orderNumber": "PED99999"}
        )

        assert response.status_code == 404
