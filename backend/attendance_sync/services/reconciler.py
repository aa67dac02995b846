import enum
import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable, List, Optional
from attendance_sync.core.errors import ConfigError
from attendance_sync.core.security import mint_provider_token, verify_token
from attendance_sync.models.participant import ParticipantStatus
from attendance_sync.schemas import AttendeeResult
from attendance_sync.services.registration_store import RegistrationStore
from attendance_sync.services.zoom_client import ZoomClient
from attendance_sync.utils.email import normalize_emails

logger = logging.getLogger(__name__)

class ReconciliationState(str, enum.Enum):
    UNVERIFIED = "Unverified"
    CREDENTIAL_MINTED = "CredentialMinted"
    FETCHING_PAGES = "FetchingPages"
    RECONCILED = "Reconciled"
    STATUSES_WRITTEN = "StatusesWritten"

@dataclass(frozen=True)
class ReconcilerConfig:
    verification_token: Optional[str]
    webinar_custom_field: Optional[str]
    strict_event_resolution: bool = True

@dataclass
class ReconciliationResult:
    event_id: int
    webinar_id: str
    attendees: List[AttendeeResult] = field(default_factory=list)
    absentee_count: int = 0

class AttendanceReconciler:
    """
    Marks registrants of a finished webinar as Attended.

    verify token -> resolve event -> mint credential -> fetch every absentee
    page -> subtract absentees from registrants once -> write statuses.
    Any failure aborts the pass; statuses already written stay written.
    """

    def __init__(
        self,
        config: ReconcilerConfig,
        store: RegistrationStore,
        client: ZoomClient,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self.config = config
        self.store = store
        self.client = client
        self.clock = clock
        self.state = ReconciliationState.UNVERIFIED

    def _advance(self, state: ReconciliationState):
        logger.debug(f"Reconciliation {self.state.value} -> {state.value}")
        self.state = state

    def _resolve_event(self, webinar_id: str, fallback_event_id: int) -> int:
        resolved = self.store.resolve_event_id(self.config.webinar_custom_field, webinar_id)
        if resolved.ok:
            return resolved.value

        if self.config.strict_event_resolution or not isinstance(resolved.error, ConfigError):
            return resolved.unwrap()

        logger.warning(
            f"⚠️ {resolved.error.message} Using event {fallback_event_id} from the request."
        )
        return fallback_event_id

    def reconcile(self, verification_token: Optional[str], event_id: int, webinar_id: str) -> ReconciliationResult:
        self.state = ReconciliationState.UNVERIFIED
        verify_token(verification_token, self.config.verification_token)

        target_event_id = self._resolve_event(webinar_id, event_id)
        provider = self.store.get_provider_settings(event_id).unwrap()

        now = self.clock() if self.clock else None
        token = mint_provider_token(provider.api_key, provider.secret_key, now)
        self._advance(ReconciliationState.CREDENTIAL_MINTED)

        self._advance(ReconciliationState.FETCHING_PAGES)
        absentees = self.client.fetch_all_absentees(provider.base_url, webinar_id, token).unwrap()
        absentee_emails = normalize_emails(a.email for a in absentees)

        registrants = self.store.select_registered_not_in(absentee_emails, target_event_id)
        self._advance(ReconciliationState.RECONCILED)
        logger.info(
            f"Webinar {webinar_id} / event {target_event_id}: "
            f"{len(absentee_emails)} absentee(s), {len(registrants)} attendee(s)"
        )

        for registrant in registrants:
            self.store.set_status(registrant.participant_id, ParticipantStatus.ATTENDED.value).unwrap()
        self._advance(ReconciliationState.STATUSES_WRITTEN)

        logger.info(f"✅ Marked {len(registrants)} participant(s) Attended for event {target_event_id}")
        return ReconciliationResult(
            event_id=target_event_id,
            webinar_id=webinar_id,
            attendees=[r.to_attendee() for r in registrants],
            absentee_count=len(absentee_emails)
        )
