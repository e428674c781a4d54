"""Unit tests for the public order and tracking lookups."""

from unittest.mock import MagicMock

import pytest
import pytest_check

from src.core.config import TrackingConfig
from src.core.exceptions import NotFoundError, ValidationError
from src.domain.orders import OrderStatus
from src.infrastructure.database.models import Company, Order, OrderTracking
from src.services.lookup import PublicLookupService, normalize_tracking_code


@pytest.fixture
def service(
    order_repo: MagicMock, tracking_repo: MagicMock, company_repo: MagicMock
) -> PublicLookupService:
    company_repo.get_profile.return_value = Company(id=1, name="Prime Print")
    return PublicLookupService(
        order_repo,
        tracking_repo,
        company_repo,
        TrackingConfig(public_tracking_url="https://track.test/?objetos="),
    )


def _order(status: OrderStatus) -> Order:
    return Order(id=12, number="PED00012", client_name="Ana", status=status)


@pytest.mark.unit
class TestNormalizeTrackingCode:
    def test_upper_cases_and_trims(self) -> None:
        assert normalize_tracking_code("  aa123456789br ") == "AA123456789BR"

    @pytest.mark.parametrize("code", [None, "", "ab12", "A" * 31])
    def test_rejects_bad_codes(self, code: str | None) -> None:
        with pytest.raises(ValidationError):
            normalize_tracking_code(code)


@pytest.mark.unit
@pytest.mark.asyncio
class TestFindTracking:
    async def test_returns_latest_row(
        self, service: PublicLookupService, tracking_repo: MagicMock
    ) -> None:
        row = OrderTracking(id=3, tracking_code="AA123456789BR", status="in_transit")
        tracking_repo.latest_by_code.return_value = row

        assert await service.find_tracking("aa123456789br") is row
        tracking_repo.latest_by_code.assert_awaited_once_with("AA123456789BR")

    async def test_unknown_code(
        self, service: PublicLookupService, tracking_repo: MagicMock
    ) -> None:
        tracking_repo.latest_by_code.return_value = None

        with pytest.raises(NotFoundError, match="Tracking not found"):
            await service.find_tracking("AA123456789BR")


@pytest.mark.unit
@pytest.mark.asyncio
class TestFindOrder:
    async def test_shipped_order_includes_tracking(
        self,
        service: PublicLookupService,
        order_repo: MagicMock,
        tracking_repo: MagicMock,
    ) -> None:
        order_repo.get_by_number.return_value = _order(OrderStatus.SHIPPING)
        tracking = OrderTracking(id=3, tracking_code="AA123456789BR")
        tracking_repo.latest_for_order.return_value = tracking

        result = await service.find_order(" PED00012 ")

        with pytest_check.check:
            assert result.tracking is tracking
        with pytest_check.check:
            assert result.tracking_url == "https://track.test/?objetos=AA123456789BR"
        with pytest_check.check:
            assert result.company is not None and result.company.name == "Prime Print"
        order_repo.get_by_number.assert_awaited_once_with("PED00012")
        tracking_repo.latest_for_order.assert_awaited_once_with(12)

    async def test_order_in_production_has_no_tracking(
        self,
        service: PublicLookupService,
        order_repo: MagicMock,
        tracking_repo: MagicMock,
    ) -> None:
        order_repo.get_by_number.return_value = _order(OrderStatus.PRODUCTION)

        result = await service.find_order("PED00012")

        assert (result.tracking, result.tracking_url) == (None, None)
        tracking_repo.latest_for_order.assert_not_called()

    async def test_delivered_order_without_tracking_row(
        self,
        service: PublicLookupService,
        order_repo: MagicMock,
        tracking_repo: MagicMock,
    ) -> None:
        order_repo.get_by_number.return_value = _order(OrderStatus.DELIVERED)
        tracking_repo.latest_for_order.return_value = None

        result = await service.find_order("PED00012")

        assert result.tracking_url is None

    async def test_unknown_order(
        self, service: PublicLookupService, order_repo: MagicMock
    ) -> None:
        order_repo.get_by_number.return_value = None

        with pytest.raises(NotFoundError, match="Order not found"):
            await service.find_order("PED99999")

    @pytest.mark.parametrize("number", [None, "", "  "])
    async def test_number_required(
        self, service: PublicLookupService, number: str | None
    ) -> None:
        with pytest.raises(ValidationError):
            await service.find_order(number)
