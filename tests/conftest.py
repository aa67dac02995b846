"""Shared test fixtures."""

from __future__ import annotations

import os

# Settings are read at import time.
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["LOG_FILE"] = ""
os.environ["ZOOM_VERIFICATION_TOKEN"] = "xyz"
os.environ["WEBINAR_CUSTOM_FIELD"] = "custom_12"

from collections.abc import Iterator
from typing import Any
from unittest.mock import Mock

import pytest
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from attendance_sync.db.base import Base
from attendance_sync.models.event import Event, EventCustomValue, ZoomAccount
from attendance_sync.models.participant import Contact, Participant, ParticipantStatus

WEBINAR_ID = "98765"
BASE_URL = "https://zoom.test/v2"


@pytest.fixture
def engine() -> Iterator[Engine]:
    eng = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=eng)
    yield eng
    eng.dispose()


@pytest.fixture
def db(engine: Engine) -> Iterator[Session]:
    session = sessionmaker(bind=engine, autocommit=False, autoflush=False)()
    yield session
    session.close()


@pytest.fixture
def crm(db: Session) -> dict[str, Any]:
    """Event 1 linked to webinar 98765, plus a second event sharing a contact."""
    account = ZoomAccount(name="main", api_key="api-key", secret_key="secret-key", base_url=BASE_URL)
    event = Event(title="Spring webinar", zoom_account=account)
    other_event = Event(title="Autumn webinar", zoom_account=account)
    db.add_all([account, event, other_event])
    db.flush()
    db.add(EventCustomValue(event_id=event.id, field_name="custom_12", value=WEBINAR_ID))

    contacts = {
        "alice": Contact(display_name="Alice", email="alice@example.com"),
        "bob": Contact(display_name="Bob", email=" Bob@Example.com "),
        "carol": Contact(display_name="Carol", email="carol@example.com"),
        "dave": Contact(display_name="Dave", email="dave@example.com"),
        "erin": Contact(display_name="Erin", email=None),
    }
    db.add_all(contacts.values())
    db.flush()

    participants = {
        "alice": Participant(contact_id=contacts["alice"].id, event_id=event.id),
        "bob": Participant(contact_id=contacts["bob"].id, event_id=event.id),
        "carol": Participant(contact_id=contacts["carol"].id, event_id=event.id),
        "dave": Participant(
            contact_id=contacts["dave"].id,
            event_id=event.id,
            status=ParticipantStatus.CANCELLED.value,
        ),
        "erin": Participant(contact_id=contacts["erin"].id, event_id=event.id),
        "alice_other": Participant(contact_id=contacts["alice"].id, event_id=other_event.id),
    }
    db.add_all(participants.values())
    db.commit()

    return {
        "account": account,
        "event": event,
        "other_event": other_event,
        "contacts": contacts,
        "participants": participants,
    }


def page_response(page_count: int, emails: list[str], status_code: int = 200) -> Mock:
    response = Mock()
    response.status_code = status_code
    response.ok = 200 <= status_code < 300
    response.json.return_value = {
        "page_count": page_count,
        "page_size": 30,
        "total_records": len(emails),
        "registrants": [{"email": email, "first_name": "x"} for email in emails],
    }
    return response


def zoom_session(*responses: Any) -> Mock:
    """requests.Session stand-in returning the given responses in order."""
    session = Mock()
    session.get.side_effect = list(responses)
    return session


@pytest.fixture
def page_factory():
    return page_response


@pytest.fixture
def session_factory():
    return zoom_session
