"""
Job Application Routes

GET /job-application?email=          - Signed-in applicant's applications, with job details
GET /job-applications/jobs/{job_id}  - Applications received for a job
POST /job-applications               - Apply (applicant_email must be the signed-in user)
PATCH /job-applications/{id}         - Set status (only the recruiter who owns the job)
"""

from fastapi import APIRouter, Depends, Query
from typing import Optional

from job_portal.api.deps import get_application_service
from job_portal.core.auth import get_current_principal, require_owner
from job_portal.core.errors import NotFound
from job_portal.services.mongo_service import ApplicationService
from job_portal.schemas.schemas import (
    ApplicationCreate, ApplicationStatusUpdate, InsertResponse, UpdateResponse
)

router = APIRouter(tags=["Job Applications"])


@router.get("/job-application")
def my_applications(
    email: Optional[str] = Query(None),
    principal: dict = Depends(get_current_principal),
    applications: ApplicationService = Depends(get_application_service),
):
    """Applications of `email` (must be the signed-in user), enriched with job title, location, company and logo."""
    require_owner(principal, email)
    return applications.list_for_applicant(email)


@router.get("/job-applications/jobs/{job_id}")
def applications_for_job(
    job_id: str,
    applications: ApplicationService = Depends(get_application_service),
):
    return applications.list_for_job(job_id)


@router.post("/job-applications", response_model=InsertResponse)
def apply_to_job(
    application: ApplicationCreate,
    principal: dict = Depends(get_current_principal),
    applications: ApplicationService = Depends(get_application_service),
):
    """
    Apply to a job. Applicants can only apply under their own email.
    Bumps the job's applicationCount by one.
    """
    require_owner(principal, application.applicant_email)
    result = applications.create(application.model_dump(exclude_none=True))
    return InsertResponse(acknowledged=result.acknowledged, insertedId=str(result.inserted_id))


@router.patch("/job-applications/{application_id}", response_model=UpdateResponse)
def update_application_status(
    application_id: str,
    update: ApplicationStatusUpdate,
    principal: dict = Depends(get_current_principal),
    applications: ApplicationService = Depends(get_application_service),
):
    """Change an application's status. Only the recruiter who posted the job may decide."""
    application = applications.get(application_id)
    if application is None:
        raise NotFound("application not found")

    job_id = application.get("job_id")
    job = applications.jobs.get(job_id) if isinstance(job_id, str) else None
    require_owner(principal, job.get("hr_email") if job else None)

    result = applications.update_status(application, update.status.value)
    return UpdateResponse(
        acknowledged=result.acknowledged,
        matchedCount=result.matched_count,
        modifiedCount=result.modified_count,
    )
