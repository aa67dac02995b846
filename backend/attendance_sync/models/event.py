from sqlalchemy import Column, String, Integer, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship
from attendance_sync.db.base import Base, BaseModel

class ZoomAccount(Base, BaseModel):
    __tablename__ = "zoom_accounts"

    name = Column(String, nullable=False)
    api_key = Column(String, nullable=False)
    secret_key = Column(String, nullable=False)
    base_url = Column(String, nullable=True)  # falls back to ZOOM_DEFAULT_BASE_URL

    def __repr__(self):
        return f"<ZoomAccount {self.name}>"

class Event(Base, BaseModel):
    __tablename__ = "events"

    title = Column(String, nullable=False)
    zoom_account_id = Column(Integer, ForeignKey("zoom_accounts.id"), nullable=True)

    zoom_account = relationship("ZoomAccount")
    custom_values = relationship("EventCustomValue", back_populates="event")

    def __repr__(self):
        return f"<Event {self.id} {self.title}>"

class EventCustomValue(Base, BaseModel):
    """Custom field value attached to an event (e.g. custom_12 = webinar id)"""
    __tablename__ = "event_custom_values"
    __table_args__ = (UniqueConstraint("event_id", "field_name"),)

    event_id = Column(Integer, ForeignKey("events.id"), nullable=False)
    field_name = Column(String, nullable=False, index=True)
    value = Column(String, nullable=True, index=True)

    event = relationship("Event", back_populates="custom_values")
