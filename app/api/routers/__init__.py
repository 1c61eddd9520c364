"""
app/api/routers package marker.
"""

from app.api.routers.backup import router as backup_router
from app.api.routers.campaigns import router as campaigns_router
from app.api.routers.settings import router as settings_router
from app.api.routers.units import router as units_router

__all__ = [
    "backup_router",
    "campaigns_router",
    "settings_router",
    "units_router",
]
