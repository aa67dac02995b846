from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import Optional, List, Union

# --- Zoom ---

class AbsenteeRecord(BaseModel):
    """Registrant Zoom reports as not having joined"""
    email: Optional[str] = None

    model_config = ConfigDict(extra="ignore")

class AbsenteePage(BaseModel):
    page_count: int = 0
    registrants: List[AbsenteeRecord] = []

    model_config = ConfigDict(extra="ignore")

class ProviderSettings(BaseModel):
    api_key: str
    secret_key: str
    base_url: str

# --- Webhook request ---

class WebinarObject(BaseModel):
    id: str

    model_config = ConfigDict(extra="ignore")

    @field_validator("id", mode="before")
    @classmethod
    def coerce_id(cls, value: Union[int, str]) -> str:
        # Zoom sends numeric webinar ids
        return str(value)

class WebinarPayload(BaseModel):
    object_: WebinarObject = Field(alias="object")

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

class WebinarEndedEvent(BaseModel):
    event: Optional[str] = None
    payload: WebinarPayload

    model_config = ConfigDict(extra="ignore")

    @property
    def webinar_id(self) -> str:
        return self.payload.object_.id

# --- CRM ---

class Registrant(BaseModel):
    participant_id: int
    contact_id: int
    email: str
    event_id: int
    status: str

    def to_attendee(self) -> "AttendeeResult":
        return AttendeeResult(
            email=self.email,
            contact_id=self.contact_id,
            participant_id=self.participant_id
        )

class AttendeeResult(BaseModel):
    email: str
    contact_id: int
    participant_id: int

# --- Responses (CRM API envelope) ---

class ReconciliationResponse(BaseModel):
    is_error: int = 0
    count: int
    values: List[AttendeeResult]

class IgnoredEventResponse(BaseModel):
    is_error: int = 0
    status: str = "ignored"
    event: Optional[str] = None

class ErrorResponse(BaseModel):
    is_error: int = 1
    error_message: str
    error_code: str
