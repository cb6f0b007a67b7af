"""HTTP flow tests for branch settings and availability checks."""

from datetime import datetime, timedelta, timezone
from decimal import Decimal
from pathlib import Path

from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker

from ordering_service.db import session as db_session
from ordering_service.db.base import Base
from ordering_service.main import app
from ordering_service.models import Order

WEEKDAY_NAMES = ("monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday")


def _build_test_engine(db_file: Path) -> Engine:
    return create_engine(
        f"sqlite:///{db_file}",
        connect_args={"check_same_thread": False},
    )


def _use_test_database(tmp_path: Path, monkeypatch, name: str) -> sessionmaker:
    engine = _build_test_engine(tmp_path / name)
    testing_session_local = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    Base.metadata.create_all(bind=engine)
    monkeypatch.setattr(db_session, "engine", engine)
    monkeypatch.setattr(db_session, "SessionLocal", testing_session_local)
    return testing_session_local


def _day_payload(**overrides) -> dict:
    payload = {
        "collectionAllowed": True,
        "deliveryAllowed": True,
        "tableOrderingAllowed": False,
        "defaultWindow": {"start": "11:45", "end": "21:50"},
        "breakWindow": None,
        "collection": {"leadTimeMinutes": 20},
        "delivery": {"leadTimeMinutes": 45},
        "tableOrdering": {"leadTimeMinutes": 0},
    }
    payload.update(overrides)
    return payload


def _create_branch_with_schedule(client: TestClient) -> int:
    created = client.post("/api/v1/branches", json={"name": "High Street", "timezone": "Europe/London"})
    assert created.status_code == 201
    branch_id = created.json()["id"]

    response = client.put(
        f"/api/v1/branches/{branch_id}/ordering-times",
        json={"days": {name: _day_payload() for name in WEEKDAY_NAMES}},
    )
    assert response.status_code == 200
    return branch_id


def _availability(client: TestClient, branch_id: int, service_type: str, at: str) -> dict:
    response = client.get(
        f"/api/v1/branches/{branch_id}/availability",
        params={"serviceType": service_type, "at": at},
    )
    assert response.status_code == 200
    return response.json()


def test_health_endpoint(tmp_path: Path, monkeypatch) -> None:
    _use_test_database(tmp_path, monkeypatch, "test_health.db")

    with TestClient(app) as client:
        response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_ordering_times_round_trip_in_camel_case(tmp_path: Path, monkeypatch) -> None:
    _use_test_database(tmp_path, monkeypatch, "test_ordering_times_api.db")

    with TestClient(app) as client:
        branch_id = _create_branch_with_schedule(client)
        response = client.get(f"/api/v1/branches/{branch_id}/ordering-times")

    assert response.status_code == 200
    monday = response.json()["days"]["monday"]
    assert monday["defaultWindow"] == {"start": "11:45", "end": "21:50"}
    assert monday["collection"]["leadTimeMinutes"] == 20
    assert monday["tableOrderingAllowed"] is False


def test_availability_before_and_during_opening_hours(tmp_path: Path, monkeypatch) -> None:
    _use_test_database(tmp_path, monkeypatch, "test_availability_hours.db")

    with TestClient(app) as client:
        branch_id = _create_branch_with_schedule(client)
        early = _availability(client, branch_id, "collection", "2024-12-23T11:00:00")
        open_now = _availability(client, branch_id, "collection", "2024-12-23T11:50:00")
        table = _availability(client, branch_id, "tableOrdering", "2024-12-23T11:50:00")

    assert early == {
        "available": False,
        "reason": "NotYetOpen",
        "nextAvailableInstant": "2024-12-23T11:45:00",
        "displayedReadyTime": None,
    }
    assert open_now["available"] is True
    assert open_now["reason"] == ""
    assert open_now["displayedReadyTime"] == "12:10"
    assert table["reason"] == "NoUpcomingSlot"
    assert table["nextAvailableInstant"] is None


def test_closed_dates_flow(tmp_path: Path, monkeypatch) -> None:
    _use_test_database(tmp_path, monkeypatch, "test_closed_dates_api.db")

    with TestClient(app) as client:
        branch_id = _create_branch_with_schedule(client)
        created = client.post(
            f"/api/v1/branches/{branch_id}/closed-dates",
            json={"date": "2024-12-25", "type": "single", "reason": "Christmas"},
        )
        assert created.status_code == 201
        closed_id = created.json()["id"]

        client.post(
            f"/api/v1/branches/{branch_id}/closed-dates",
            json={"date": "2024-01-01", "type": "single", "reason": "New Year"},
        )
        upcoming = client.get(f"/api/v1/branches/{branch_id}/closed-dates", params={"today": "2024-12-01"})
        everything = client.get(f"/api/v1/branches/{branch_id}/closed-dates", params={"includePast": "true"})

        closed = _availability(client, branch_id, "delivery", "2024-12-25T13:00:00")

        assert client.delete(f"/api/v1/branches/{branch_id}/closed-dates/{closed_id}").status_code == 200
        missing = client.delete(f"/api/v1/branches/{branch_id}/closed-dates/{closed_id}")
        reopened = _availability(client, branch_id, "delivery", "2024-12-25T13:00:00")
        cleared = client.delete(f"/api/v1/branches/{branch_id}/closed-dates")

    assert [item["reason"] for item in upcoming.json()] == ["Christmas"]
    assert len(everything.json()) == 2
    assert closed["reason"] == "ClosedDate"
    assert closed["nextAvailableInstant"] == "2024-12-26T11:45:00"
    assert missing.status_code == 404
    assert reopened["available"] is True
    assert cleared.json() == {"deleted": 1}


def test_invalid_range_closure_is_rejected(tmp_path: Path, monkeypatch) -> None:
    _use_test_database(tmp_path, monkeypatch, "test_closed_dates_validation.db")

    with TestClient(app) as client:
        branch_id = _create_branch_with_schedule(client)
        response = client.post(
            f"/api/v1/branches/{branch_id}/closed-dates",
            json={"date": "2024-08-14", "type": "range", "endDate": "2024-08-01", "reason": "Backwards"},
        )

    assert response.status_code == 422


def test_combined_restriction_throttles_after_cap(tmp_path: Path, monkeypatch) -> None:
    testing_session_local = _use_test_database(tmp_path, monkeypatch, "test_restrictions_api.db")
    cap = {"enabled": True, "orderTotal": 3, "windowSizeMinutes": 30}

    with TestClient(app) as client:
        branch_id = _create_branch_with_schedule(client)
        saved = client.put(
            f"/api/v1/branches/{branch_id}/restrictions",
            json={"type": "CombinedTotal", "combined": {name: cap for name in WEEKDAY_NAMES}},
        )
        assert saved.status_code == 200
        assert saved.json()["combined"]["monday"] == cap

        # 2024-12-23 12:00 in London is 12:00 UTC.
        now = datetime(2024, 12, 23, 12, 0, tzinfo=timezone.utc)
        with testing_session_local() as db:
            db.add_all(
                [
                    Order(branch_id=branch_id, service_type="delivery", total_amount=Decimal("12.00"), created_at=now - timedelta(minutes=15)),
                    Order(branch_id=branch_id, service_type="collection", total_amount=Decimal("8.50"), created_at=now - timedelta(minutes=10)),
                    Order(branch_id=branch_id, service_type="delivery", total_amount=Decimal("20.00"), created_at=now - timedelta(minutes=2)),
                ]
            )
            db.commit()

        throttled = _availability(client, branch_id, "collection", "2024-12-23T12:00:00")
        later = _availability(client, branch_id, "collection", "2024-12-23T12:15:00.000001")

    assert throttled["available"] is False
    assert throttled["reason"] == "ThroughputLimitReached"
    assert throttled["nextAvailableInstant"] == "2024-12-23T12:15:00.000001"
    assert later["available"] is True


def test_split_restriction_leaves_other_service_types_open(tmp_path: Path, monkeypatch) -> None:
    testing_session_local = _use_test_database(tmp_path, monkeypatch, "test_split_restrictions_api.db")
    tight = {"enabled": True, "orderTotal": 1, "windowSizeMinutes": 30}

    with TestClient(app) as client:
        branch_id = _create_branch_with_schedule(client)
        client.put(
            f"/api/v1/branches/{branch_id}/restrictions",
            json={"type": "SplitTotal", "delivery": {name: tight for name in WEEKDAY_NAMES}},
        )
        with testing_session_local() as db:
            db.add(
                Order(
                    branch_id=branch_id,
                    service_type="delivery",
                    total_amount=Decimal("30.00"),
                    created_at=datetime(2024, 12, 23, 11, 55, tzinfo=timezone.utc),
                )
            )
            db.commit()

        delivery = _availability(client, branch_id, "delivery", "2024-12-23T12:00:00")
        collection = _availability(client, branch_id, "collection", "2024-12-23T12:00:00")
        restrictions = client.get(f"/api/v1/branches/{branch_id}/restrictions")

    assert delivery["reason"] == "ThroughputLimitReached"
    assert delivery["nextAvailableInstant"] == "2024-12-23T12:25:00.000001"
    assert collection["available"] is True
    assert restrictions.json()["type"] == "SplitTotal"
    assert restrictions.json()["collection"] is None


def test_ordering_times_missing_weekday_is_rejected(tmp_path: Path, monkeypatch) -> None:
    _use_test_database(tmp_path, monkeypatch, "test_ordering_times_validation.db")

    with TestClient(app) as client:
        created = client.post("/api/v1/branches", json={"name": "High Street", "timezone": "Europe/London"})
        branch_id = created.json()["id"]
        response = client.put(
            f"/api/v1/branches/{branch_id}/ordering-times",
            json={"days": {name: _day_payload() for name in WEEKDAY_NAMES if name != "sunday"}},
        )
        break_outside = client.put(
            f"/api/v1/branches/{branch_id}/ordering-times",
            json={
                "days": {
                    name: _day_payload(breakWindow={"start": "21:00", "end": "23:00"}) for name in WEEKDAY_NAMES
                }
            },
        )

    assert response.status_code == 422
    assert break_outside.status_code == 422


def test_unknown_branch_and_invalid_timezone(tmp_path: Path, monkeypatch) -> None:
    _use_test_database(tmp_path, monkeypatch, "test_unknown_branch.db")

    with TestClient(app) as client:
        availability = client.get("/api/v1/branches/404/availability", params={"serviceType": "collection"})
        branch = client.get("/api/v1/branches/404")
        bad_timezone = client.post("/api/v1/branches", json={"name": "Nowhere", "timezone": "Mars/Olympus"})

    assert availability.status_code == 404
    assert branch.status_code == 404
    assert bad_timezone.status_code == 422


def test_branch_without_ordering_times_is_a_configuration_conflict(tmp_path: Path, monkeypatch) -> None:
    _use_test_database(tmp_path, monkeypatch, "test_configuration_invalid.db")

    with TestClient(app) as client:
        created = client.post("/api/v1/branches", json={"name": "Fresh", "timezone": "Europe/London"})
        branch_id = created.json()["id"]
        availability = client.get(
            f"/api/v1/branches/{branch_id}/availability",
            params={"serviceType": "delivery", "at": "2024-12-23T12:00:00"},
        )
        ordering_times = client.get(f"/api/v1/branches/{branch_id}/ordering-times")

    assert availability.status_code == 409
    assert availability.json() == {"detail": "ConfigurationInvalid"}
    assert ordering_times.status_code == 409


def test_lead_times_endpoint(tmp_path: Path, monkeypatch) -> None:
    _use_test_database(tmp_path, monkeypatch, "test_lead_times_api.db")

    with TestClient(app) as client:
        branch_id = _create_branch_with_schedule(client)
        response = client.get(f"/api/v1/branches/{branch_id}/lead-times", params={"at": "2024-12-23T11:50:00"})

    assert response.status_code == 200
    body = response.json()
    assert body["day"] == "monday"
    assert body["date"] == "2024-12-23"
    assert body["leadTimes"] == [
        {"serviceType": "collection", "allowed": True, "leadTimeMinutes": 20, "displayedTime": "12:10"},
        {"serviceType": "delivery", "allowed": True, "leadTimeMinutes": 45, "displayedTime": "12:35"},
        {"serviceType": "tableOrdering", "allowed": False, "leadTimeMinutes": 0, "displayedTime": "11:50"},
    ]
