"""Unit tests for carrier event normalisation and status classification."""

from datetime import datetime

import pytest
import pytest_check

from src.domain.tracking import (
    BRAZIL_TZ,
    DEFAULT_DESCRIPTION,
    DEFAULT_LOCATION,
    DEFAULT_STATUS,
    TrackingEvent,
    TrackingStatus,
    classify_status,
    event_from_correios,
    event_from_linketrack,
)


def _event(status: str) -> TrackingEvent:
    return TrackingEvent(
        date="02/03/2026",
        time="10:00",
        location="Petrolina/PE",
        status=status,
        description=status,
    )


@pytest.mark.unit
class TestLinketrackEvents:
    def test_full_event(self) -> None:
        event = event_from_linketrack(
            {
                "data": "02/03/2026 14:35",
                "local": "Petrolina/PE",
                "status": "Objeto em trânsito",
                "subStatus": ["de Unidade de Tratamento para Agência"],
            }
        )
        assert event == TrackingEvent(
            date="02/03/2026",
            time="14:35",
            location="Petrolina/PE",
            status="Objeto em trânsito",
            description="de Unidade de Tratamento para Agência",
        )

    def test_missing_values_use_defaults(self) -> None:
        now = datetime(2026, 3, 2, 9, 0, tzinfo=BRAZIL_TZ)
        event = event_from_linketrack({}, now=now)
        with pytest_check.check:
            assert event.date == "02/03/2026"
        with pytest_check.check:
            assert event.location == DEFAULT_LOCATION
        with pytest_check.check:
            assert event.status == DEFAULT_STATUS
        with pytest_check.check:
            assert event.description == DEFAULT_DESCRIPTION

    def test_description_falls_back_to_status(self) -> None:
        event = event_from_linketrack(
            {"data": "01/03/2026 08:00", "cidade": "Recife", "status": "Postado"}
        )
        assert event.location == "Recife"
        assert event.description == "Postado"


@pytest.mark.unit
class TestCorreiosEvents:
    def test_event_is_converted_to_brazil_time(self) -> None:
        event = event_from_correios(
            {
                "dtHrCriado": "2026-03-02T17:35:00+00:00",
                "descricao": "Objeto entregue ao destinatário",
                "unidade": {"endereco": {"cidade": "Juazeiro", "uf": "BA"}},
            }
        )
        assert event == TrackingEvent(
            date="02/03/2026",
            time="14:35",
            location="Juazeiro/BA",
            status="Objeto entregue ao destinatário",
            description="Objeto entregue ao destinatário",
        )

    def test_naive_timestamp_and_unit_name(self) -> None:
        event = event_from_correios(
            {"dtHrCriado": "2026-03-01T08:10:00", "unidade": {"nome": "CDD Centro"}}
        )
        with pytest_check.check:
            assert (event.date, event.time) == ("01/03/2026", "08:10")
        with pytest_check.check:
            assert event.location == "CDD Centro"
        with pytest_check.check:
            assert event.status == DEFAULT_STATUS

    @pytest.mark.parametrize(
        "unit",
        [None, "Recife", {"endereco": "Recife"}, {"endereco": ["Recife"]}],
    )
    def test_unexpected_unit_shapes_use_default_location(self, unit: object) -> None:
        event = event_from_correios(
            {"dtHrCriado": "2026-03-01T08:10:00", "unidade": unit}
        )
        assert event.location == DEFAULT_LOCATION

    def test_to_dict(self) -> None:
        assert _event("Postado").to_dict() == {
            "date": "02/03/2026",
            "time": "10:00",
            "location": "Petrolina/PE",
            "status": "Postado",
            "description": "Postado",
        }


@pytest.mark.unit
class TestClassifyStatus:
    def test_no_events_is_pending(self) -> None:
        assert classify_status([], TrackingStatus.IN_TRANSIT) == TrackingStatus.PENDING

    @pytest.mark.parametrize(
        ("latest", "expected"),
        [
            ("Objeto entregue ao destinatário", TrackingStatus.DELIVERED),
            ("Delivered", TrackingStatus.DELIVERED),
            ("Objeto saiu para entrega ao destinatário", TrackingStatus.OUT_FOR_DELIVERY),
            ("Out for delivery", TrackingStatus.OUT_FOR_DELIVERY),
            ("Objeto em trânsito - por favor aguarde", TrackingStatus.IN_TRANSIT),
            ("In transit", TrackingStatus.IN_TRANSIT),
        ],
    )
    def test_latest_event_decides(self, latest: str, expected: TrackingStatus) -> None:
        events = [_event(latest), _event("Objeto postado")]
        assert classify_status(events, "pending") == expected

    def test_unknown_status_uses_fallback(self) -> None:
        events = [_event("Objeto postado")]
        assert classify_status(events, TrackingStatus.IN_TRANSIT) == "in_transit"
        assert classify_status(events, "out_for_delivery") == "out_for_delivery"
