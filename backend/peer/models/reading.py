"""Persisted sensor reading."""
from sqlalchemy import Boolean, Column, DateTime, Float, String

from peer.database import Base


class Reading(Base):
    """One environmental measurement uploaded by a device."""
    __tablename__ = "sensor_data"

    id = Column(String(64), primary_key=True)
    # Devices are implicit: any string seen here is a device.
    device_id = Column(String(255), nullable=False, default="", index=True)
    is_backed_up = Column("is_backedup", Boolean, nullable=False, default=False)
    temperature = Column(Float, nullable=False, default=0.0)
    humidity = Column(Float, nullable=False, default=0.0)
    ethylene_level = Column(Float, nullable=False, default=0.0)
    uploaded_by = Column(String(500), nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, index=True)

    def __repr__(self):
        return f"<Reading(id={self.id!r}, device_id={self.device_id!r}, created_at={self.created_at})>"
