"""
Database module - document store handles (MongoDB or in-memory).
"""
from job_portal.core.config import Settings, get_settings
from job_portal.db.memory import MemoryStore
from job_portal.db.mongodb import MongoStore


def create_store(settings: Settings = None):
    """Build the store handle selected by STORE_BACKEND."""
    settings = settings or get_settings()
    if settings.store_backend == "memory":
        return MemoryStore(settings.jobs_collection, settings.applications_collection)
    if settings.store_backend == "mongo":
        return MongoStore(settings)
    raise ValueError(f"Unknown store backend: {settings.store_backend}")


__all__ = [
    "create_store",
    "MongoStore",
    "MemoryStore",
]
