"""
Job Routes

GET /jobs             - List jobs (filter by owner, location, salary; sort; paginate)
GET /jobs/count       - Number of jobs matching the same filters
GET /jobs/myposted    - Jobs posted by the signed-in recruiter
GET /jobs/{job_id}    - Job details (null when it does not exist)
POST /jobs            - Post a job (hr_email must be the signed-in user)
PUT /jobs/{job_id}    - Update own job
DELETE /jobs/{job_id} - Delete own job
"""

from fastapi import APIRouter, Depends, Query
from typing import Optional

from job_portal.api.deps import get_job_service
from job_portal.core.auth import get_current_principal, require_owner
from job_portal.core.errors import NotFound
from job_portal.services.mongo_service import (
    JobService, build_job_query, build_job_sort, build_pagination
)
from job_portal.schemas.schemas import (
    JobCreate, JobUpdate, CountResponse, InsertResponse, UpdateResponse, DeleteResponse
)

router = APIRouter(prefix="/jobs", tags=["Jobs"])


@router.get("")
def list_jobs(
    email: Optional[str] = Query(None, description="Only jobs posted by this HR email"),
    sort: Optional[str] = Query(None, description="'true' sorts by minimum salary, highest first"),
    search: Optional[str] = Query(None, description="Search in location"),
    min_salary: Optional[str] = Query(None, alias="minSalary"),
    max_salary: Optional[str] = Query(None, alias="maxSalary"),
    page: Optional[str] = Query(None, description="Zero-based page number"),
    size: Optional[str] = Query(None, description="Page size"),
    jobs: JobService = Depends(get_job_service),
):
    """List jobs. Malformed numeric filters are ignored rather than rejected."""
    query = build_job_query(email, search, min_salary, max_salary)
    skip, limit = build_pagination(page, size)
    return jobs.list(query, sort=build_job_sort(sort), skip=skip, limit=limit)


@router.get("/count", response_model=CountResponse)
def count_jobs(
    email: Optional[str] = Query(None),
    search: Optional[str] = Query(None),
    min_salary: Optional[str] = Query(None, alias="minSalary"),
    max_salary: Optional[str] = Query(None, alias="maxSalary"),
    jobs: JobService = Depends(get_job_service),
):
    """Total for the pagination controls."""
    return CountResponse(count=jobs.count(build_job_query(email, search, min_salary, max_salary)))


@router.get("/myposted")
def my_posted_jobs(
    email: Optional[str] = Query(None),
    principal: dict = Depends(get_current_principal),
    jobs: JobService = Depends(get_job_service),
):
    """Jobs posted by `email`, which must be the signed-in user."""
    require_owner(principal, email)
    return jobs.list_by_owner(email)


@router.get("/{job_id}")
def get_job(job_id: str, jobs: JobService = Depends(get_job_service)):
    """Get details of a specific job."""
    return jobs.get(job_id)


@router.post("", response_model=InsertResponse)
def create_job(
    job: JobCreate,
    principal: dict = Depends(get_current_principal),
    jobs: JobService = Depends(get_job_service),
):
    """Post a new job. Recruiters can only post under their own email."""
    require_owner(principal, job.hr_email)
    result = jobs.create(job.model_dump(exclude_none=True))
    return InsertResponse(acknowledged=result.acknowledged, insertedId=str(result.inserted_id))


@router.put("/{job_id}", response_model=UpdateResponse)
def update_job(
    job_id: str,
    update: JobUpdate,
    principal: dict = Depends(get_current_principal),
    jobs: JobService = Depends(get_job_service),
):
    """Update a job posting. Only the recruiter who posted it can update."""
    existing = jobs.get(job_id)
    if existing is None:
        raise NotFound("job not found")
    require_owner(principal, existing.get("hr_email"))

    result = jobs.update(job_id, update.model_dump(exclude_none=True))
    return UpdateResponse(
        acknowledged=result.acknowledged,
        matchedCount=result.matched_count,
        modifiedCount=result.modified_count,
    )


@router.delete("/{job_id}", response_model=DeleteResponse)
def delete_job(
    job_id: str,
    principal: dict = Depends(get_current_principal),
    jobs: JobService = Depends(get_job_service),
):
    """Delete a job posting. Its applications are left in place."""
    existing = jobs.get(job_id)
    if existing is None:
        raise NotFound("job not found")
    require_owner(principal, existing.get("hr_email"))

    result = jobs.delete(job_id)
    return DeleteResponse(acknowledged=result.acknowledged, deletedCount=result.deleted_count)
