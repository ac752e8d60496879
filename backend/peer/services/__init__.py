"""Request-scoped business logic: reading ingestion and aggregate queries."""
from peer.services.ingestion import ingest_reading, new_reading_id
from peer.services.query import SensorQueryResult, compute_averages, list_devices, run_sensor_query

__all__ = [
    "ingest_reading", "new_reading_id",
    "SensorQueryResult", "compute_averages", "list_devices", "run_sensor_query",
]
