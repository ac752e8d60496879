"""
Reading ingestion

Normalizes one uploaded reading and persists it with a single insert:
- id: UTC second-resolution timestamp plus a random suffix
- created_at: client epoch seconds when given and non-zero, else server time
- uploaded_by: client value, else a request header, else a fixed token
"""
import logging
from datetime import datetime, timezone
from typing import Callable, Optional
from uuid import uuid4

from peer.config import Settings
from peer.errors import ClientError
from peer.models import Reading
from peer.schemas.reading import ReadingCreate, to_utc
from peer.store import ReadingStore

logger = logging.getLogger("peer.ingest")

DEFAULT_UPLOADER = Settings.model_fields["default_uploader"].default


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def new_reading_id(now: datetime) -> str:
    """Time-ordered identifier; the suffix keeps same-second uploads distinct."""
    return f"{to_utc(now):%Y%m%d%H%M%S}-{uuid4().hex[:12]}"


def resolve_created_at(epoch_seconds: int, now: datetime, trust_client: bool = True) -> datetime:
    if not trust_client or not epoch_seconds:
        return to_utc(now)
    try:
        return datetime.fromtimestamp(epoch_seconds, tz=timezone.utc)
    except (OverflowError, OSError, ValueError) as exc:
        raise ClientError(f"created_at out of range: {epoch_seconds}") from exc


def resolve_uploaded_by(client_value: str, header_value: Optional[str], default: str = DEFAULT_UPLOADER) -> str:
    if client_value:
        return client_value
    if header_value:
        return header_value
    return default or DEFAULT_UPLOADER


def ingest_reading(
    store: ReadingStore,
    payload: ReadingCreate,
    *,
    uploader_hint: Optional[str] = None,
    default_uploader: str = DEFAULT_UPLOADER,
    trust_client_timestamp: bool = True,
    clock: Callable[[], datetime] = utcnow,
) -> Reading:
    now = clock()
    reading = Reading(
        id=new_reading_id(now),
        device_id=payload.device_id,
        is_backed_up=payload.is_backed_up,
        temperature=payload.temperature,
        humidity=payload.humidity,
        ethylene_level=payload.ethylene_level,
        uploaded_by=resolve_uploaded_by(payload.uploaded_by, uploader_hint, default_uploader),
        created_at=resolve_created_at(payload.created_at, now, trust_client_timestamp),
    )
    store.create(reading)
    logger.info("stored reading %s from device %r", reading.id, reading.device_id)
    return reading
