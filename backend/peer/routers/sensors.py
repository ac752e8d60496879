"""Sensor endpoints: reading upload, device listing, aggregate query.

Paths and the query parameter convention come from settings so that every
deployed firmware variant can talk to the same service.
"""
import json

from fastapi import APIRouter, Depends, Request, Response

from peer.config import Settings
from peer.dependencies import get_app_settings, get_store
from peer.errors import ClientError
from peer.schemas import (
    DeviceListResponse,
    ErrorResponse,
    MessageResponse,
    QueryFilter,
    ReadingCreate,
    SensorQueryResponse,
)
from peer.services import ingest_reading, list_devices, run_sensor_query
from peer.store import ReadingStore

INGEST_OK_MESSAGE = "Sensor data received and saved successfully"

ERROR_RESPONSES = {
    400: {"model": ErrorResponse},
    500: {"model": ErrorResponse},
}


def upload_reading(
    request: Request,
    response: Response,
    payload: ReadingCreate,
    store: ReadingStore = Depends(get_store),
    settings: Settings = Depends(get_app_settings),
):
    """Store one reading uploaded by a device."""
    response.headers["Connection"] = "close"
    ingest_reading(
        store,
        payload,
        uploader_hint=request.headers.get(settings.uploader_header),
        default_uploader=settings.default_uploader,
        trust_client_timestamp=settings.trust_client_timestamp,
    )
    return MessageResponse(message=INGEST_OK_MESSAGE)


def get_devices(store: ReadingStore = Depends(get_store)):
    """Distinct device ids that have uploaded at least one reading."""
    return DeviceListResponse(devices=list_devices(store))


async def query_filter_from_request(
    request: Request,
    settings: Settings = Depends(get_app_settings),
) -> QueryFilter:
    if settings.query_params_source == "query":
        params = request.query_params
        return QueryFilter.from_raw(
            params.get("device_id"), params.get("start_time"), params.get("end_time"),
        )

    body = await request.body()
    if not body.strip():
        return QueryFilter()
    try:
        raw = json.loads(body)
    except ValueError as exc:
        raise ClientError(f"invalid JSON body: {exc}") from exc
    if not isinstance(raw, dict):
        raise ClientError("query body must be a JSON object")
    return QueryFilter.from_raw(raw.get("device_id"), raw.get("start_time"), raw.get("end_time"))


def query_readings(
    query_filter: QueryFilter = Depends(query_filter_from_request),
    store: ReadingStore = Depends(get_store),
    settings: Settings = Depends(get_app_settings),
):
    """Filtered readings, newest first, with average measurements."""
    result = run_sensor_query(store, query_filter, settings.query_order)
    if not settings.include_averages:
        return {"data": [r.model_dump(by_alias=True) for r in result.data]}
    return result.to_response().model_dump(by_alias=True)


def build_sensor_router(settings: Settings) -> APIRouter:
    router = APIRouter(tags=["sensors"], responses=ERROR_RESPONSES)
    for path in settings.ingest_paths:
        router.add_api_route(path, upload_reading, methods=["POST"], response_model=MessageResponse)
    router.add_api_route(settings.devices_path, get_devices, methods=["GET"], response_model=DeviceListResponse)
    router.add_api_route(
        settings.query_path, query_readings, methods=["GET"],
        responses={200: {"model": SensorQueryResponse}},
    )
    return router
