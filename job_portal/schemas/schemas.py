"""
Pydantic Schemas - Request/Response Validation

All API request and response schemas in one file for simplicity.
Job and application bodies allow extra fields: the front-end form decides
what a posting carries, the API only pins down the fields it relies on.
"""

from pydantic import AfterValidator, BaseModel, ConfigDict, Field, model_validator
from pydantic.networks import validate_email
from typing import Annotated, Any, Optional, List, Union
from enum import Enum


# ============================================================
# FIELD TYPES
# ============================================================

def _check_email(value: str) -> str:
    """
    Validate the address but keep it exactly as posted.
    Owner checks compare the signed email with raw query strings, so the
    normalised form (lowercased domain) must not leak into tokens or documents.
    """
    _, email = validate_email(value)
    if email.lower() != value.lower():
        raise ValueError("value is not a plain email address")
    return value


Email = Annotated[str, AfterValidator(_check_email)]


def _find_operator_key(value: Any) -> Optional[str]:
    """First key (at any depth) MongoDB would refuse as a field name."""
    if isinstance(value, dict):
        for key, item in value.items():
            if isinstance(key, str) and key.startswith("$"):
                return key
            nested = _find_operator_key(item)
            if nested:
                return nested
    elif isinstance(value, list):
        for item in value:
            nested = _find_operator_key(item)
            if nested:
                return nested
    return None


class DocumentBody(BaseModel):
    """Request body stored as a document; extra fields allowed, operator keys not."""
    model_config = ConfigDict(extra="allow")

    @model_validator(mode="before")
    @classmethod
    def reject_operator_keys(cls, data: Any) -> Any:
        key = _find_operator_key(data)
        if key:
            raise ValueError(f"field names may not start with '$': {key}")
        return data


# ============================================================
# ENUMS
# ============================================================

class ApplicationStatus(str, Enum):
    pending = "pending"
    interviewing = "interviewing"
    accepted = "accepted"
    rejected = "rejected"


TERMINAL_STATUSES = (ApplicationStatus.accepted.value, ApplicationStatus.rejected.value)


# ============================================================
# AUTH SCHEMAS
# ============================================================

class TokenRequest(BaseModel):
    """Principal claims to sign. Anything besides email is carried as-is."""
    model_config = ConfigDict(extra="allow")

    email: Email


class SuccessResponse(BaseModel):
    success: bool = True


# ============================================================
# JOB SCHEMAS
# ============================================================

class SalaryRange(BaseModel):
    min: Optional[Union[int, float]] = None
    max: Optional[Union[int, float]] = None
    currency: Optional[str] = None


class JobCreate(DocumentBody):

    title: str = Field(..., min_length=1, max_length=200)
    hr_email: Email
    hr_name: Optional[str] = None
    company: Optional[str] = None
    company_logo: Optional[str] = None
    location: Optional[str] = None
    jobType: Optional[str] = None
    category: Optional[str] = None
    description: Optional[str] = None
    applicationDeadline: Optional[str] = None
    salaryRange: Optional[SalaryRange] = None
    requirements: Optional[List[str]] = None
    responsibilities: Optional[List[str]] = None
    status: Optional[str] = None


class JobUpdate(DocumentBody):

    title: Optional[str] = Field(None, min_length=1, max_length=200)
    hr_name: Optional[str] = None
    company: Optional[str] = None
    company_logo: Optional[str] = None
    location: Optional[str] = None
    jobType: Optional[str] = None
    category: Optional[str] = None
    description: Optional[str] = None
    applicationDeadline: Optional[str] = None
    salaryRange: Optional[SalaryRange] = None
    requirements: Optional[List[str]] = None
    responsibilities: Optional[List[str]] = None
    status: Optional[str] = None


class CountResponse(BaseModel):
    count: int


# ============================================================
# APPLICATION SCHEMAS
# ============================================================

class ApplicationCreate(DocumentBody):

    job_id: str
    applicant_email: Email
    linkedIn: Optional[str] = None
    github: Optional[str] = None
    resume: Optional[str] = None


class ApplicationStatusUpdate(BaseModel):
    status: ApplicationStatus


# ============================================================
# STORE RESULT SCHEMAS (shape of the driver results)
# ============================================================

class InsertResponse(BaseModel):
    acknowledged: bool
    insertedId: str


class UpdateResponse(BaseModel):
    acknowledged: bool
    matchedCount: int
    modifiedCount: int


class DeleteResponse(BaseModel):
    acknowledged: bool
    deletedCount: int


# ============================================================
# GENERIC SCHEMAS
# ============================================================

class ErrorResponse(BaseModel):
    message: str
    status: int
