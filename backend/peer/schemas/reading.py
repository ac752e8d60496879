"""Reading payloads as uploaded by devices and as presented to clients."""
from datetime import datetime, timezone

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator


def to_utc(dt: datetime) -> datetime:
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def to_epoch_seconds(dt: datetime) -> int:
    return int(to_utc(dt).timestamp())


class ReadingCreate(BaseModel):
    """Candidate reading from a device. Omitted fields take their zero value."""

    model_config = ConfigDict(populate_by_name=True)

    device_id: str = ""
    is_backed_up: bool = Field(
        default=False,
        validation_alias=AliasChoices("is_backedup", "is_backed_up"),
    )
    temperature: float = 0.0
    humidity: float = 0.0
    ethylene_level: float = 0.0
    uploaded_by: str = ""
    created_at: int = Field(default=0, description="Epoch seconds; 0 means 'use server time'")

    @field_validator("device_id", "uploaded_by", mode="before")
    @classmethod
    def null_as_empty(cls, value):
        return "" if value is None else value

    @field_validator("temperature", "humidity", "ethylene_level", "created_at", mode="before")
    @classmethod
    def null_as_zero(cls, value):
        return 0 if value is None else value

    @field_validator("is_backed_up", mode="before")
    @classmethod
    def null_as_false(cls, value):
        return False if value is None else value


class ReadingOut(BaseModel):
    """Presentation form: identical fields, `created_at` as epoch seconds."""

    id: str
    device_id: str
    is_backed_up: bool = Field(serialization_alias="is_backedup")
    temperature: float
    humidity: float
    ethylene_level: float
    uploaded_by: str
    created_at: int

    @classmethod
    def from_reading(cls, reading) -> "ReadingOut":
        return cls(
            id=reading.id,
            device_id=reading.device_id,
            is_backed_up=reading.is_backed_up,
            temperature=reading.temperature,
            humidity=reading.humidity,
            ethylene_level=reading.ethylene_level,
            uploaded_by=reading.uploaded_by,
            created_at=to_epoch_seconds(reading.created_at),
        )


class MessageResponse(BaseModel):
    message: str


class ErrorResponse(BaseModel):
    error: str
