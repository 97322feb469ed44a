"""
app/api/routers package marker.
"""

from app.api.routers.ingestion import router as ingestion_router

__all__ = [
    "ingestion_router",
]
