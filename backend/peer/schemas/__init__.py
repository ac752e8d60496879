"""Pydantic request/response schemas."""
from peer.schemas.query import (
    DeviceListResponse,
    QueryFilter,
    SensorQueryResponse,
)
from peer.schemas.reading import (
    ErrorResponse,
    MessageResponse,
    ReadingCreate,
    ReadingOut,
)

__all__ = [
    "ReadingCreate", "ReadingOut", "MessageResponse", "ErrorResponse",
    "QueryFilter", "SensorQueryResponse", "DeviceListResponse",
]
