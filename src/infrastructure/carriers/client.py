"""Parcel tracking lookups against LinkTrack with a Correios fallback.

LinkTrack is asked first when a token is configured. When it fails or
returns no events, the Correios SRO API is queried. Provider failures are
logged and reported as an empty event list; they never propagate, so a
flaky provider cannot fail a batch refresh.
"""

from dataclasses import dataclass, field
from typing import Any

import httpx
from loguru import logger

from src.core.config import TrackingConfig
from src.core.observability import trace_operation
from src.domain.tracking import (
    TrackingEvent,
    event_from_correios,
    event_from_linketrack,
)
from src.infrastructure.constants import CARRIER_USER_AGENT


@dataclass(slots=True)
class CarrierLookup:
    """Events found for a tracking code and the provider that returned them."""

    events: list[TrackingEvent] = field(default_factory=list)
    provider: str | None = None


class CarrierClient:
    """Fetches tracking events over HTTP.

    Args:
        http: Shared async HTTP client; its lifetime is managed by the caller.
        config: Provider endpoints and credentials.
    """

    def __init__(self, http: httpx.AsyncClient, config: TrackingConfig) -> None:
        self.http = http
        self.config = config

    async def _get_json(self, url: str, **kwargs: Any) -> Any:
        response = await self.http.get(url, **kwargs)
        response.raise_for_status()
        return response.json()

    async def fetch_linketrack(self, code: str) -> list[TrackingEvent]:
        """Query LinkTrack; returns no events when no token is configured."""
        if self.config.linketrack_token is None:
            return []

        data = await self._get_json(
            self.config.linketrack_url,
            params={
                "user": self.config.linketrack_user,
                "token": self.config.linketrack_token.get_secret_value(),
                "objeto": code,
            },
            headers={"Accept": "application/json"},
        )
        raw_events = data.get("eventos") if isinstance(data, dict) else None
        if not isinstance(raw_events, list):
            return []
        return [
            event_from_linketrack(event)
            for event in raw_events
            if isinstance(event, dict)
        ]

    async def fetch_correios(self, code: str) -> list[TrackingEvent]:
        """Query the Correios SRO API."""
        data = await self._get_json(
            f"{self.config.correios_url.rstrip('/')}/{code}",
            headers={"Accept": "application/json", "User-Agent": CARRIER_USER_AGENT},
        )
        objects = data.get("objetos") if isinstance(data, dict) else None
        if not isinstance(objects, list) or not objects:
            return []
        first = objects[0]
        raw_events = first.get("eventos") if isinstance(first, dict) else None
        if not isinstance(raw_events, list):
            return []
        return [
            event_from_correios(event)
            for event in raw_events
            if isinstance(event, dict)
        ]

    async def lookup(self, code: str) -> CarrierLookup:
        """Find events for ``code``, trying each provider in turn.

        Args:
            code: Carrier tracking code.

        Returns:
            CarrierLookup: Events newest first, empty when no provider answered.
        """
        providers = (
            ("linketrack", self.fetch_linketrack),
            ("correios", self.fetch_correios),
        )
        for name, fetch in providers:
            with trace_operation("carrier.lookup", provider=name):
                try:
                    events = await fetch(code)
                except (
                    httpx.HTTPError,
                    AttributeError,
                    KeyError,
                    TypeError,
                    ValueError,
                ) as e:
                    logger.warning(
                        "Tracking provider {} failed for {}: {}",
                        name,
                        code,
                        e,
                        provider=name,
                        tracking_code=code,
                    )
                    continue
            if events:
                logger.info(
                    "Found {} tracking events for {} via {}", len(events), code, name
                )
                return CarrierLookup(events=events, provider=name)

        return CarrierLookup()
