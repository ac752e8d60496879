"""Query filter parsing and aggregate responses."""
import re
from datetime import datetime, timezone
from typing import Any, List, Optional

from pydantic import BaseModel

from peer.schemas.reading import ReadingOut

_EPOCH_PATTERN = re.compile(r"[+-]?[0-9]+")

MAX_BOUND = datetime.max.replace(tzinfo=timezone.utc)
MIN_BOUND = datetime.min.replace(tzinfo=timezone.utc)


def parse_epoch(value: Any) -> Optional[int]:
    """Lenient epoch-seconds parsing: anything non-numeric or zero is unbounded."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value or None
    if isinstance(value, float):
        return int(value) if value.is_integer() and value else None
    if isinstance(value, str):
        if not _EPOCH_PATTERN.fullmatch(value):
            return None
        return int(value) or None
    return None


def _epoch_to_datetime(value: Optional[int]) -> Optional[datetime]:
    if value is None:
        return None
    try:
        return datetime.fromtimestamp(value, tz=timezone.utc)
    except (OverflowError, OSError, ValueError):
        # Clamp so an out-of-range bound still constrains the result.
        return MAX_BOUND if value > 0 else MIN_BOUND


class QueryFilter(BaseModel):
    """Conjunctive filter over readings; `None` means no constraint."""

    device_id: Optional[str] = None
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None

    @classmethod
    def from_raw(cls, device_id: Any = None, start_time: Any = None, end_time: Any = None) -> "QueryFilter":
        device = device_id if isinstance(device_id, str) and device_id != "" else None
        return cls(
            device_id=device,
            start_time=_epoch_to_datetime(parse_epoch(start_time)),
            end_time=_epoch_to_datetime(parse_epoch(end_time)),
        )


class SensorQueryResponse(BaseModel):
    average_temperature: float = 0.0
    average_humidity: float = 0.0
    average_ethylene_level: float = 0.0
    data: List[ReadingOut] = []


class DeviceListResponse(BaseModel):
    devices: List[str] = []
