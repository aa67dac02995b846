"""Tests for the webinar attendance reconciliation pipeline."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any
from unittest.mock import Mock

import pytest
from sqlalchemy.orm import Session

from attendance_sync.core.errors import AuthError, ConfigError, RemoteError, StoreError
from attendance_sync.core.result import Err
from attendance_sync.core.security import decode_provider_token
from attendance_sync.models.participant import Participant
from attendance_sync.services.reconciler import (
    AttendanceReconciler,
    ReconcilerConfig,
    ReconciliationState,
)
from attendance_sync.services.registration_store import RegistrationStore
from attendance_sync.services.zoom_client import ZoomClient

CONFIG = ReconcilerConfig(verification_token="xyz", webinar_custom_field="custom_12")


def _status(db: Session, participant: Participant) -> str:
    db.expire_all()
    return db.get(Participant, participant.id).status


def _reconciler(db: Session, session: Mock, config: ReconcilerConfig = CONFIG) -> AttendanceReconciler:
    return AttendanceReconciler(config, RegistrationStore(db), ZoomClient(session=session))


class TestReconcile:
    def test_marks_non_absentees_attended(
        self, db: Session, crm: dict[str, Any], page_factory, session_factory
    ) -> None:
        p = crm["participants"]
        session = session_factory(page_factory(1, ["BOB@example.com", "stranger@example.com"]))
        reconciler = _reconciler(db, session)

        result = reconciler.reconcile("xyz", crm["event"].id, "98765")

        assert {a.participant_id for a in result.attendees} == {p["alice"].id, p["carol"].id}
        assert result.absentee_count == 2
        assert _status(db, p["alice"]) == "Attended"
        assert _status(db, p["carol"]) == "Attended"
        assert _status(db, p["bob"]) == "Registered"
        assert _status(db, p["dave"]) == "Cancelled"
        assert _status(db, p["alice_other"]) == "Registered"
        assert reconciler.state is ReconciliationState.STATUSES_WRITTEN

    def test_absentee_on_later_page_is_never_marked(
        self, db: Session, crm: dict[str, Any], page_factory, session_factory
    ) -> None:
        p = crm["participants"]
        session = session_factory(
            page_factory(3, ["alice@example.com"]),
            page_factory(3, []),
            page_factory(3, ["carol@example.com"]),
        )

        result = _reconciler(db, session).reconcile("xyz", crm["event"].id, "98765")

        assert [a.participant_id for a in result.attendees] == [p["bob"].id]
        assert _status(db, p["carol"]) == "Registered"
        assert session.get.call_count == 3

    def test_no_absentees_marks_everyone(
        self, db: Session, crm: dict[str, Any], page_factory, session_factory
    ) -> None:
        p = crm["participants"]
        session = session_factory(page_factory(1, []))

        result = _reconciler(db, session).reconcile("xyz", crm["event"].id, "98765")

        assert len(result.attendees) == 3
        for name in ("alice", "bob", "carol"):
            assert _status(db, p[name]) == "Attended"

    def test_running_twice_is_idempotent(
        self, db: Session, crm: dict[str, Any], page_factory, session_factory
    ) -> None:
        session = session_factory(page_factory(1, ["bob@example.com"]), page_factory(1, ["bob@example.com"]))
        reconciler = _reconciler(db, session)

        first = reconciler.reconcile("xyz", crm["event"].id, "98765")
        second = reconciler.reconcile("xyz", crm["event"].id, "98765")

        assert first.attendees == second.attendees
        assert _status(db, crm["participants"]["alice"]) == "Attended"

    def test_token_minted_from_event_account(
        self, db: Session, crm: dict[str, Any], page_factory, session_factory
    ) -> None:
        session = session_factory(page_factory(1, []))
        now = datetime.now(timezone.utc)
        reconciler = AttendanceReconciler(
            CONFIG, RegistrationStore(db), ZoomClient(session=session), clock=lambda: now
        )

        reconciler.reconcile("xyz", crm["event"].id, "98765")

        bearer = session.get.call_args.kwargs["headers"]["Authorization"].removeprefix("Bearer ")
        claims = decode_provider_token(bearer, "secret-key")
        assert claims["iss"] == "api-key"
        assert claims["exp"] == int(now.timestamp()) + 3600


class TestReconcileFailures:
    def test_bad_token_touches_nothing(self) -> None:
        store = Mock()
        client = Mock()
        reconciler = AttendanceReconciler(CONFIG, store, client)

        with pytest.raises(AuthError):
            reconciler.reconcile("abc", 1, "98765")

        assert store.method_calls == []
        assert client.method_calls == []

    def test_unresolved_webinar_fails_fast(
        self, db: Session, crm: dict[str, Any], session_factory
    ) -> None:
        session = session_factory()

        with pytest.raises(ConfigError):
            _reconciler(db, session).reconcile("xyz", crm["event"].id, "00000")

        session.get.assert_not_called()

    def test_lenient_resolution_falls_back_to_request_event(
        self, db: Session, crm: dict[str, Any], page_factory, session_factory
    ) -> None:
        config = ReconcilerConfig(
            verification_token="xyz", webinar_custom_field=None, strict_event_resolution=False
        )
        session = session_factory(page_factory(1, []))

        result = _reconciler(db, session, config).reconcile("xyz", crm["other_event"].id, "98765")

        assert result.event_id == crm["other_event"].id
        assert [a.participant_id for a in result.attendees] == [crm["participants"]["alice_other"].id]

    def test_remote_failure_writes_nothing(
        self, db: Session, crm: dict[str, Any], page_factory, session_factory
    ) -> None:
        session = session_factory(page_factory(2, []), page_factory(0, [], status_code=500))

        with pytest.raises(RemoteError):
            _reconciler(db, session).reconcile("xyz", crm["event"].id, "98765")

        for participant in crm["participants"].values():
            assert _status(db, participant) != "Attended"

    def test_store_failure_aborts_mid_loop(
        self, db: Session, crm: dict[str, Any], page_factory, session_factory
    ) -> None:
        p = crm["participants"]
        store = RegistrationStore(db)
        real_set_status = store.set_status
        calls = []

        def flaky_set_status(participant_id: int, status: str):
            calls.append(participant_id)
            if len(calls) == 2:
                return Err(StoreError("database went away"))
            return real_set_status(participant_id, status)

        store.set_status = flaky_set_status
        reconciler = AttendanceReconciler(CONFIG, store, ZoomClient(session=session_factory(page_factory(1, []))))

        with pytest.raises(StoreError):
            reconciler.reconcile("xyz", crm["event"].id, "98765")

        # first write stays, nothing after the failure is attempted
        assert len(calls) == 2
        assert _status(db, p["alice"]) == "Attended"
        assert _status(db, p["carol"]) == "Registered"
        assert reconciler.state is ReconciliationState.RECONCILED
