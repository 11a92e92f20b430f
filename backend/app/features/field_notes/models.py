"""
Field note model.

A recorded outdoor trip with optional GPX route and attached photos.
"""

from sqlalchemy import Column, String, DateTime, Float, Text, JSON
from sqlalchemy.orm import relationship
import uuid

from app.models.base import Base, utcnow


class FieldNote(Base):
    """
    A recorded trip.

    distance (miles) and elevation_gain (feet) are stored once, either as
    supplied by the user or derived from the GPX upload.
    """

    __tablename__ = "field_notes"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))

    title = Column(Text, nullable=False)
    description = Column(Text, nullable=False)
    trip_type = Column(String(32), nullable=False, index=True)
    date = Column(DateTime, nullable=False, index=True)

    # Route statistics
    distance = Column(Float, nullable=True)
    elevation_gain = Column(Float, nullable=True)

    # {"coordinates": [[lon, lat], ...], "elevationProfile": [...]}
    gpx_data = Column(JSON(none_as_null=True), nullable=True)

    created_at = Column(DateTime, default=utcnow, nullable=False)

    photos = relationship(
        "Photo",
        back_populates="field_note",
        cascade="all, delete-orphan",
        lazy="selectin",
        order_by="Photo.created_at",
    )

    def __repr__(self):
        return f"<FieldNote {self.id} ({self.title})>"
