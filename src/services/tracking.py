"""Refreshing parcel trackings from the carriers.

A single check looks one code up and, when a tracking row id is given,
stores what was found. The batch refresh walks every undelivered tracking;
one failing row is counted and logged without stopping the others. Each
row is written inside its own savepoint, so a failed write is rolled back
alone and the rest of the batch still commits.
"""

from dataclasses import dataclass, field
from datetime import UTC, datetime

from loguru import logger

from src.core.exceptions import NotFoundError, ValidationError
from src.domain.tracking import TrackingEvent, TrackingStatus, classify_status
from src.infrastructure.carriers.client import CarrierClient
from src.infrastructure.database.models import OrderTracking
from src.infrastructure.repositories.orders import OrderTrackingRepository


@dataclass(frozen=True, slots=True)
class TrackingCheck:
    tracking_code: str
    status: str
    events: list[TrackingEvent]
    updated_at: datetime


@dataclass(slots=True)
class BatchResult:
    """Counters of a batch refresh."""

    total: int = 0
    updated: int = 0
    errors: int = 0
    notifications: list[str] = field(default_factory=list)


class TrackingService:
    def __init__(
        self, trackings: OrderTrackingRepository, carrier: CarrierClient
    ) -> None:
        self.trackings = trackings
        self.carrier = carrier

    async def check(
        self, tracking_code: str | None, tracking_id: int | None = None
    ) -> TrackingCheck:
        """Look a code up and optionally store the result on a tracking row.

        Args:
            tracking_code: Carrier tracking code.
            tracking_id: Row to update when events were found.

        Returns:
            TrackingCheck: Classified status and the events, newest first.

        Raises:
            ValidationError: If no code was given.
            NotFoundError: If ``tracking_id`` does not exist.
        """
        code = (tracking_code or "").strip()
        if not code:
            raise ValidationError("Tracking code is required")

        lookup = await self.carrier.lookup(code)
        status = str(classify_status(lookup.events, TrackingStatus.IN_TRANSIT))
        now = datetime.now(UTC)

        if tracking_id is not None and lookup.events:
            row = await self.trackings.update(
                tracking_id,
                {
                    "events": [event.to_dict() for event in lookup.events],
                    "status": status,
                    "last_update": now,
                },
            )
            if row is None:
                raise NotFoundError(
                    "Tracking not found", context={"tracking_id": tracking_id}
                )

        return TrackingCheck(
            tracking_code=code, status=status, events=lookup.events, updated_at=now
        )

    async def check_all(self) -> BatchResult:
        """Refresh every tracking that has not been delivered yet.

        Returns:
            BatchResult: How many rows were seen, updated and failed, plus a
                notification line for updated rows with a client phone.
        """
        pending = await self.trackings.list_undelivered()
        result = BatchResult(total=len(pending))

        for row in pending:
            # A rolled back row is expired; read what the log needs up front
            row_id, code = row.id, row.tracking_code
            with logger.contextualize(tracking_code=code):
                try:
                    refreshed = await self._refresh(row)
                except Exception:
                    result.errors += 1
                    logger.exception("Failed to refresh tracking {}", row_id)
                    continue
            if refreshed:
                result.updated += 1
                if row.client_phone:
                    result.notifications.append(
                        f"{row.client_name} ({code}): {row.status}"
                    )

        logger.info(
            "Tracking refresh finished: {} updated, {} errors of {}",
            result.updated,
            result.errors,
            result.total,
        )
        return result

    async def _refresh(self, row: OrderTracking) -> bool:
        lookup = await self.carrier.lookup(row.tracking_code)
        if not lookup.events:
            return False

        status = str(classify_status(lookup.events, row.status))
        if len(lookup.events) <= len(row.events or []) and status == row.status:
            return False

        async with self.trackings.savepoint():
            await self.trackings.update(
                row.id,
                {
                    "events": [event.to_dict() for event in lookup.events],
                    "status": status,
                    "last_update": datetime.now(UTC),
                },
            )
        return True
