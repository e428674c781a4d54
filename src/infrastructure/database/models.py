"""SQLAlchemy models for every table the service owns."""

from datetime import date, datetime
from decimal import Decimal
from enum import StrEnum
from typing import Any

from sqlalchemy import (
    BigInteger,
    Boolean,
    Date,
    DateTime,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Text,
    func,
)
from sqlalchemy import Enum as SAEnum
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column, relationship

from src.domain.orders import OrderStatus
from src.domain.roles import AppRole
from src.domain.tracking import TrackingStatus
from src.infrastructure.database.base import BaseModel


def _pg_enum(enum_class: type[StrEnum], name: str) -> SAEnum:
    return SAEnum(
        enum_class,
        name=name,
        values_callable=lambda members: [member.value for member in members],
    )


class AdminUser(BaseModel):
    """Account of the admin panel, identified by username."""

    __tablename__ = "admin_users"

    username: Mapped[str] = mapped_column(String(100), unique=True, nullable=False)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)


class User(BaseModel):
    """Back-office user, identified by email."""

    __tablename__ = "users"

    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)

    roles: Mapped[list["UserRole"]] = relationship(
        back_populates="user", cascade="all, delete-orphan", lazy="selectin"
    )


class UserRole(BaseModel):
    """Role granted to a back-office user."""

    __tablename__ = "user_roles"

    user_id: Mapped[int] = mapped_column(
        BigInteger,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    role: Mapped[AppRole] = mapped_column(_pg_enum(AppRole, "app_role"), nullable=False)
    email: Mapped[str | None] = mapped_column(String(255))

    user: Mapped[User] = relationship(back_populates="roles")


class LoginAttempt(BaseModel):
    """One login attempt, kept to enforce the temporary lockout."""

    __tablename__ = "login_attempts"

    identifier: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    ip_address: Mapped[str | None] = mapped_column(String(64))
    success: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    attempted_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False, index=True
    )


class VideoTestimonial(BaseModel):
    """Customer video shown on the public site."""

    __tablename__ = "video_testimonials"

    title: Mapped[str] = mapped_column(String(255), nullable=False)
    video_url: Mapped[str] = mapped_column(Text, nullable=False)
    video_type: Mapped[str] = mapped_column(
        String(20), nullable=False, default="upload"
    )
    display_order: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)


class Order(BaseModel):
    """Customer order."""

    __tablename__ = "orders"

    number: Mapped[str] = mapped_column(String(20), unique=True, nullable=False)
    client_name: Mapped[str] = mapped_column(String(255), nullable=False)
    status: Mapped[OrderStatus] = mapped_column(
        _pg_enum(OrderStatus, "order_status"),
        nullable=False,
        default=OrderStatus.AWAITING_PAYMENT,
    )
    total: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False, default=0)

    trackings: Mapped[list["OrderTracking"]] = relationship(back_populates="order")


class OrderTracking(BaseModel):
    """Parcel shipped for an order and the carrier events seen so far."""

    __tablename__ = "order_trackings"

    order_id: Mapped[int | None] = mapped_column(
        BigInteger, ForeignKey("orders.id", ondelete="SET NULL"), index=True
    )
    order_number: Mapped[str | None] = mapped_column(String(20))
    client_name: Mapped[str | None] = mapped_column(String(255))
    client_phone: Mapped[str | None] = mapped_column(String(20))
    tracking_code: Mapped[str] = mapped_column(String(30), nullable=False, index=True)
    carrier: Mapped[str] = mapped_column(String(50), nullable=False, default="correios")
    status: Mapped[str] = mapped_column(
        String(30), nullable=False, default=TrackingStatus.PENDING.value
    )
    events: Mapped[list[dict[str, Any]]] = mapped_column(
        JSONB, nullable=False, default=list
    )
    estimated_delivery: Mapped[date | None] = mapped_column(Date)
    last_update: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))

    order: Mapped[Order | None] = relationship(back_populates="trackings")


class Company(BaseModel):
    """Company profile shown on public pages."""

    __tablename__ = "company"

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    logo_url: Mapped[str | None] = mapped_column(Text)
