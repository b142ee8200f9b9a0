"""
Schemas module - Request/Response schemas for API endpoints.
"""

from job_portal.schemas.schemas import (
    ApplicationStatus,
    TokenRequest,
    JobCreate,
    JobUpdate,
    ApplicationCreate,
    ApplicationStatusUpdate,
    InsertResponse,
    UpdateResponse,
    DeleteResponse,
)

__all__ = [
    "ApplicationStatus",
    "TokenRequest",
    "JobCreate",
    "JobUpdate",
    "ApplicationCreate",
    "ApplicationStatusUpdate",
    "InsertResponse",
    "UpdateResponse",
    "DeleteResponse",
]
