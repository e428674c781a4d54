"""Normalisation of carrier tracking events and delivery status rules.

Carriers report events in different shapes. Both supported providers are
mapped onto :class:`TrackingEvent`, newest event first, filling missing
values with the same defaults the tracking page shows.
"""

from dataclasses import asdict, dataclass
from datetime import datetime
from enum import StrEnum
from typing import Any, Final
from zoneinfo import ZoneInfo

from src.core.types import ProviderPayload

DEFAULT_LOCATION: Final[str] = "Brasil"
DEFAULT_STATUS: Final[str] = "Atualização"
DEFAULT_DESCRIPTION: Final[str] = "Movimentação registrada"
BRAZIL_TZ: Final[ZoneInfo] = ZoneInfo("America/Sao_Paulo")


class TrackingStatus(StrEnum):
    """Delivery states stored on ``order_trackings.status``."""

    PENDING = "pending"
    IN_TRANSIT = "in_transit"
    OUT_FOR_DELIVERY = "out_for_delivery"
    DELIVERED = "delivered"


@dataclass(frozen=True, slots=True)
class TrackingEvent:
    """A single carrier event."""

    date: str
    time: str
    location: str
    status: str
    description: str

    def to_dict(self) -> dict[str, str]:
        return asdict(self)


def _today(now: datetime | None) -> str:
    return (now or datetime.now(BRAZIL_TZ)).strftime("%d/%m/%Y")


def event_from_linketrack(
    payload: ProviderPayload, now: datetime | None = None
) -> TrackingEvent:
    """Map a LinkTrack event (``data`` holds ``"dd/mm/yyyy HH:MM"``).

    Args:
        payload: One entry of the provider's ``eventos`` list.
        now: Reference time used when the event has no date.

    Returns:
        TrackingEvent: The normalised event.
    """
    date, _, time = (payload.get("data") or "").partition(" ")
    sub_status = payload.get("subStatus") or []
    status = payload.get("status") or ""
    return TrackingEvent(
        date=date or _today(now),
        time=time or payload.get("hora") or "",
        location=payload.get("local") or payload.get("cidade") or DEFAULT_LOCATION,
        status=status or DEFAULT_STATUS,
        description=(sub_status[0] if sub_status else "")
        or status
        or DEFAULT_DESCRIPTION,
    )


def _correios_location(unit: Any) -> str:
    if not isinstance(unit, dict):
        return DEFAULT_LOCATION
    address = unit.get("endereco")
    if isinstance(address, dict) and (city := address.get("cidade")):
        return f"{city}/{address.get('uf')}"
    return unit.get("nome") or DEFAULT_LOCATION


def event_from_correios(payload: ProviderPayload) -> TrackingEvent:
    """Map a Correios SRO event (``dtHrCriado`` is an ISO timestamp).

    Args:
        payload: One entry of ``objetos[0].eventos``.

    Returns:
        TrackingEvent: The normalised event, date and time in Brazil time.
    """
    created = datetime.fromisoformat(payload["dtHrCriado"])
    if created.tzinfo is not None:
        created = created.astimezone(BRAZIL_TZ)
    description = payload.get("descricao") or ""
    return TrackingEvent(
        date=created.strftime("%d/%m/%Y"),
        time=created.strftime("%H:%M"),
        location=_correios_location(payload.get("unidade")),
        status=description or DEFAULT_STATUS,
        description=description or DEFAULT_DESCRIPTION,
    )


def classify_status(
    events: list[TrackingEvent], fallback: TrackingStatus | str
) -> TrackingStatus | str:
    """Derive the delivery status from the newest event.

    Args:
        events: Normalised events, newest first.
        fallback: Status returned when events exist but match no rule.

    Returns:
        The classified status, ``pending`` when there are no events.
    """
    if not events:
        return TrackingStatus.PENDING
    latest = events[0].status.lower()
    if "entregue" in latest or "delivered" in latest:
        return TrackingStatus.DELIVERED
    if "saiu para entrega" in latest or "out for delivery" in latest:
        return TrackingStatus.OUT_FOR_DELIVERY
    if "trânsito" in latest or "transit" in latest:
        return TrackingStatus.IN_TRANSIT
    return fallback
