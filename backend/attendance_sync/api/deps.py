from typing import Generator
from fastapi import Depends
from sqlalchemy.orm import Session
from attendance_sync.core.config import settings
from attendance_sync.db.session import get_db
from attendance_sync.services.reconciler import AttendanceReconciler, ReconcilerConfig
from attendance_sync.services.registration_store import RegistrationStore
from attendance_sync.services.zoom_client import ZoomClient

def get_reconciler_config() -> ReconcilerConfig:
    return ReconcilerConfig(
        verification_token=settings.ZOOM_VERIFICATION_TOKEN,
        webinar_custom_field=settings.WEBINAR_CUSTOM_FIELD,
        strict_event_resolution=settings.STRICT_EVENT_RESOLUTION
    )

def get_registration_store(db: Session = Depends(get_db)) -> RegistrationStore:
    return RegistrationStore(db)

def get_zoom_client() -> Generator:
    """Fresh client and HTTP session per webhook call"""
    client = ZoomClient()
    try:
        yield client
    finally:
        client.session.close()

def get_reconciler(
    config: ReconcilerConfig = Depends(get_reconciler_config),
    store: RegistrationStore = Depends(get_registration_store),
    client: ZoomClient = Depends(get_zoom_client),
) -> AttendanceReconciler:
    """Dependency building a reconciler for one webhook call"""
    return AttendanceReconciler(config, store, client)
