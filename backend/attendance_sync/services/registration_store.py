import logging
from typing import Iterable, List, Optional
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from attendance_sync.core.config import settings
from attendance_sync.core.errors import ConfigError, StoreError
from attendance_sync.core.result import Ok, Err, Result
from attendance_sync.models.event import Event, EventCustomValue
from attendance_sync.models.participant import Contact, Participant, RECONCILABLE_STATUSES
from attendance_sync.schemas import ProviderSettings, Registrant
from attendance_sync.utils.email import normalize_email, normalize_emails

logger = logging.getLogger(__name__)

class RegistrationStore:
    """Reads and writes event participation in the CRM database"""

    def __init__(self, db: Session):
        self.db = db

    def resolve_event_id(self, custom_field: Optional[str], webinar_id: str) -> Result:
        """Find the event whose webinar custom field holds webinar_id"""
        if not custom_field:
            return Err(ConfigError("Webinar custom field is not configured."))

        try:
            event_id = self.db.execute(
                select(EventCustomValue.event_id)
                .where(EventCustomValue.field_name == custom_field)
                .where(EventCustomValue.value == str(webinar_id))
                .order_by(EventCustomValue.event_id)
                .limit(1)
            ).scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.error(f"❌ Event lookup failed: {e}")
            return Err(StoreError(f"Event lookup failed: {e}"))

        if event_id is None:
            return Err(ConfigError(f"No event has {custom_field} = {webinar_id}."))
        return Ok(event_id)

    def get_provider_settings(self, event_id: int) -> Result:
        """Zoom credentials of the account linked to the event"""
        try:
            event = self.db.get(Event, event_id)
        except SQLAlchemyError as e:
            logger.error(f"❌ Settings lookup failed: {e}")
            return Err(StoreError(f"Settings lookup failed: {e}"))

        if event is None:
            return Err(ConfigError(f"Event {event_id} not found."))
        account = event.zoom_account
        if account is None:
            return Err(ConfigError(f"Event {event_id} has no Zoom account configured."))

        return Ok(ProviderSettings(
            api_key=account.api_key,
            secret_key=account.secret_key,
            base_url=account.base_url or settings.ZOOM_DEFAULT_BASE_URL
        ))

    def select_registered_not_in(self, excluded_emails: Iterable[str], event_id: int) -> List[Registrant]:
        """
        Participants of the event whose email is not in excluded_emails.
        Both sides go through normalize_email.
        Raises StoreError.
        """
        excluded = normalize_emails(excluded_emails)

        query = (
            select(
                Participant.id,
                Participant.contact_id,
                Participant.event_id,
                Participant.status,
                Contact.email,
            )
            .join(Contact, Participant.contact_id == Contact.id)
            .where(Participant.event_id == event_id)
            .where(Participant.status.in_(RECONCILABLE_STATUSES))
            .where(Contact.email.is_not(None))
            .order_by(Participant.id)
        )

        try:
            rows = self.db.execute(query).all()
        except SQLAlchemyError as e:
            logger.error(f"❌ Registrant query failed: {e}")
            raise StoreError(f"Registrant query failed: {e}") from e

        registrants = []
        for row in rows:
            email = normalize_email(row.email)
            if email is None or email in excluded:
                continue
            registrants.append(Registrant(
                participant_id=row.id,
                contact_id=row.contact_id,
                email=row.email,
                event_id=row.event_id,
                status=row.status
            ))
        return registrants

    def set_status(self, participant_id: int, status: str) -> Result:
        """Update one participant's status and commit"""
        try:
            participant = self.db.get(Participant, participant_id)
            if participant is None:
                return Err(StoreError(f"Participant {participant_id} not found."))

            participant.status = status
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"❌ Status update failed for participant {participant_id}: {e}")
            return Err(StoreError(f"Status update failed for participant {participant_id}: {e}"))

        return Ok(participant_id)
