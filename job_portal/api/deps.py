"""
Route dependencies - services built on the store handle injected at startup.
"""

from fastapi import Depends, Request

from job_portal.services.mongo_service import JobService, ApplicationService


def get_store(request: Request):
    return request.app.state.store


def get_job_service(store=Depends(get_store)) -> JobService:
    return JobService(store.jobs)


def get_application_service(store=Depends(get_store)) -> ApplicationService:
    return ApplicationService(store.applications, store.jobs)
