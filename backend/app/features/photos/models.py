"""
Photo model.

A photograph attached to a field note, with metadata read from EXIF.
"""

from sqlalchemy import Column, String, DateTime, Float, Integer, ForeignKey, Text
from sqlalchemy.orm import relationship
import uuid

from app.models.base import Base, utcnow


class Photo(Base):
    """Photo belonging to exactly one field note."""

    __tablename__ = "photos"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    field_note_id = Column(
        String(36),
        ForeignKey("field_notes.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    filename = Column(Text, nullable=False)
    url = Column(Text, nullable=False)

    # GPS
    latitude = Column(Float, nullable=True)
    longitude = Column(Float, nullable=True)
    elevation = Column(Float, nullable=True)

    # Capture info
    timestamp = Column(DateTime, nullable=True)
    camera = Column(Text, nullable=True)
    lens = Column(Text, nullable=True)
    aperture = Column(String(32), nullable=True)
    shutter_speed = Column(String(32), nullable=True)
    iso = Column(Integer, nullable=True)
    focal_length = Column(String(32), nullable=True)
    file_size = Column(String(32), nullable=True)

    created_at = Column(DateTime, default=utcnow, nullable=False)

    field_note = relationship("FieldNote", back_populates="photos")

    def __repr__(self):
        return f"<Photo {self.id} ({self.filename})>"
