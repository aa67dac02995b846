from fastapi import APIRouter, Depends, Query
import logging
from attendance_sync.api.deps import get_reconciler
from attendance_sync.core.security import verify_token
from attendance_sync.schemas import (
    IgnoredEventResponse,
    ReconciliationResponse,
    WebinarEndedEvent,
)
from attendance_sync.services.reconciler import AttendanceReconciler

WEBINAR_ENDED = "webinar.ended"

router = APIRouter()
logger = logging.getLogger(__name__)

@router.post("/webhooks/zoom/webinar-ended", response_model=None)
def webinar_ended(
    body: WebinarEndedEvent,
    verification_token: str = Query(...),
    event_id: int = Query(...),
    reconciler: AttendanceReconciler = Depends(get_reconciler),
):
    """
    Zoom event subscription (webinar.ended).
    Marks every registrant of the event who is not a Zoom absentee as Attended.
    """
    if body.event and body.event != WEBINAR_ENDED:
        verify_token(verification_token, reconciler.config.verification_token)
        logger.info(f"Ignoring Zoom event {body.event}")
        return IgnoredEventResponse(event=body.event)

    logger.info(f"Webinar {body.webinar_id} ended, reconciling event {event_id}")
    result = reconciler.reconcile(verification_token, event_id, body.webinar_id)

    return ReconciliationResponse(
        count=len(result.attendees),
        values=result.attendees
    )
