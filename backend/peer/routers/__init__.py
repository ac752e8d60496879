from peer.routers.health import router as health_router
from peer.routers.sensors import build_sensor_router

__all__ = ["health_router", "build_sensor_router"]
