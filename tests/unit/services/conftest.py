"""Repository doubles for service tests."""

from unittest.mock import MagicMock

import pytest
from pytest_mock import MockerFixture

from src.infrastructure.carriers import CarrierClient
from src.infrastructure.repositories import (
    AdminUserRepository,
    CompanyRepository,
    LoginAttemptRepository,
    OrderRepository,
    OrderTrackingRepository,
    UserRepository,
    VideoTestimonialRepository,
)


@pytest.fixture
def admin_repo(mocker: MockerFixture) -> MagicMock:
    return mocker.MagicMock(spec=AdminUserRepository)


@pytest.fixture
def user_repo(mocker: MockerFixture) -> MagicMock:
    return mocker.MagicMock(spec=UserRepository)


@pytest.fixture
def attempt_repo(mocker: MockerFixture) -> MagicMock:
    repo = mocker.MagicMock(spec=LoginAttemptRepository)
    repo.recent_failures.return_value = []
    return repo


@pytest.fixture
def testimonial_repo(mocker: MockerFixture) -> MagicMock:
    return mocker.MagicMock(spec=VideoTestimonialRepository)


@pytest.fixture
def order_repo(mocker: MockerFixture) -> MagicMock:
    return mocker.MagicMock(spec=OrderRepository)


@pytest.fixture
def tracking_repo(mocker: MockerFixture) -> MagicMock:
    return mocker.MagicMock(spec=OrderTrackingRepository)


@pytest.fixture
def company_repo(mocker: MockerFixture) -> MagicMock:
    return mocker.MagicMock(spec=CompanyRepository)


@pytest.fixture
def carrier(mocker: MockerFixture) -> MagicMock:
    return mocker.MagicMock(spec=CarrierClient)
