import enum
from sqlalchemy import Column, String, Integer, ForeignKey
from sqlalchemy.orm import relationship
from attendance_sync.db.base import Base, BaseModel

class ParticipantStatus(str, enum.Enum):
    REGISTERED = "Registered"
    ATTENDED = "Attended"
    NO_SHOW = "No-show"
    CANCELLED = "Cancelled"

# Statuses that count as "registered for the event" when reconciling
RECONCILABLE_STATUSES = (ParticipantStatus.REGISTERED.value, ParticipantStatus.ATTENDED.value)

class Contact(Base, BaseModel):
    __tablename__ = "contacts"

    display_name = Column(String, nullable=False)
    email = Column(String, nullable=True, index=True)

    def __repr__(self):
        return f"<Contact {self.display_name} ({self.email})>"

class Participant(Base, BaseModel):
    __tablename__ = "participants"

    contact_id = Column(Integer, ForeignKey("contacts.id"), nullable=False)
    event_id = Column(Integer, ForeignKey("events.id"), nullable=False, index=True)
    status = Column(String, default=ParticipantStatus.REGISTERED.value, nullable=False)

    contact = relationship("Contact")

    def __repr__(self):
        return f"<Participant {self.id} event={self.event_id} status={self.status}>"
