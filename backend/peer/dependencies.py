"""FastAPI dependencies resolving objects built once at startup."""
from fastapi import Request

from peer.config import Settings
from peer.store import ReadingStore


def get_store(request: Request) -> ReadingStore:
    return request.app.state.store


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings
