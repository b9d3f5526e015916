"""Request-scoped dependencies shared by routes."""
from fastapi import Request

from cheapeats.services.offline import OfflineManager


def get_offline_manager(request: Request) -> OfflineManager:
    """The process-wide manager created in the app lifespan."""
    return request.app.state.offline_manager
