"""Filtered reading retrieval and running averages."""
import logging
from dataclasses import dataclass, field
from typing import List, Sequence

from peer.models import Reading
from peer.schemas.query import QueryFilter, SensorQueryResponse
from peer.schemas.reading import ReadingOut
from peer.store import Order, ReadingStore

logger = logging.getLogger("peer.query")


@dataclass
class SensorQueryResult:
    average_temperature: float = 0.0
    average_humidity: float = 0.0
    average_ethylene_level: float = 0.0
    data: List[ReadingOut] = field(default_factory=list)

    def to_response(self) -> SensorQueryResponse:
        return SensorQueryResponse(
            average_temperature=self.average_temperature,
            average_humidity=self.average_humidity,
            average_ethylene_level=self.average_ethylene_level,
            data=self.data,
        )


def compute_averages(readings: Sequence[Reading]) -> tuple[float, float, float]:
    """Arithmetic means of temperature, humidity, ethylene; zeros for no rows."""
    count = len(readings)
    if count == 0:
        return 0.0, 0.0, 0.0

    total_temp = total_humidity = total_ethylene = 0.0
    for reading in readings:
        total_temp += reading.temperature
        total_humidity += reading.humidity
        total_ethylene += reading.ethylene_level
    return total_temp / count, total_humidity / count, total_ethylene / count


def run_sensor_query(store: ReadingStore, query_filter: QueryFilter, order: Order = "desc") -> SensorQueryResult:
    readings = store.find(query_filter, order)
    avg_temp, avg_humidity, avg_ethylene = compute_averages(readings)
    logger.debug(
        "query device=%r start=%s end=%s matched %d readings",
        query_filter.device_id, query_filter.start_time, query_filter.end_time, len(readings),
    )
    return SensorQueryResult(
        average_temperature=avg_temp,
        average_humidity=avg_humidity,
        average_ethylene_level=avg_ethylene,
        data=[ReadingOut.from_reading(r) for r in readings],
    )


def list_devices(store: ReadingStore) -> List[str]:
    return store.distinct_device_ids()
