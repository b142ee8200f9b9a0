"""
MongoDB Service - CRUD operations for the job-portal collections.

Collections:
1. jobs             - postings, owned by hr_email
2. job_applications - applications, owned by applicant_email, each pointing
                      at a job through job_id (string form of the job _id)

Services take their collections in the constructor, so they work the same
against pymongo collections and the in-memory store.
"""

import re
from typing import Optional, List, Dict, Any, Tuple

from bson import ObjectId
from pymongo.collection import Collection
from pymongo.results import InsertOneResult, UpdateResult, DeleteResult

from job_portal.core.errors import InvalidArgument, NotFound
from job_portal.core.log import get_logger
from job_portal.schemas.schemas import TERMINAL_STATUSES

logger = get_logger(__name__)

# Parent-job fields copied onto each application in the applicant's list
JOB_DISPLAY_FIELDS = ("title", "location", "company", "company_logo")

# Fields a job update can never overwrite
PROTECTED_JOB_FIELDS = ("_id", "hr_email", "applicationCount")


# ============================================================
# HELPERS
# ============================================================

def serialize_doc(doc: dict) -> dict:
    """Convert MongoDB document to JSON-serializable dict."""
    if doc is None:
        return None
    if "_id" in doc:
        doc["_id"] = str(doc["_id"])
    return doc


def serialize_docs(docs) -> list:
    """Convert list of MongoDB documents to JSON-serializable list."""
    return [serialize_doc(doc) for doc in docs]


def parse_object_id(value: str) -> ObjectId:
    """ObjectId from its hex string, InvalidArgument when malformed."""
    if not isinstance(value, str) or not ObjectId.is_valid(value):
        raise InvalidArgument(f"invalid id: {value!r}")
    return ObjectId(value)


def _positive_number(value: Optional[str]) -> Optional[float]:
    """Salary bound from a query string; blanks, NaN and <= 0 are ignored."""
    if value is None or not str(value).strip():
        return None
    try:
        number = float(value)
    except ValueError:
        return None
    if number != number or number <= 0:
        return None
    return int(number) if number.is_integer() else number


def _non_negative_int(value: Optional[str]) -> Optional[int]:
    if value is None:
        return None
    try:
        number = int(value)
    except (TypeError, ValueError):
        return None
    return number if number >= 0 else None


def build_job_query(
    email: Optional[str] = None,
    search: Optional[str] = None,
    min_salary: Optional[str] = None,
    max_salary: Optional[str] = None,
) -> Dict[str, Any]:
    """
    Translate the /jobs query string into a Mongo filter.

    - email     -> exact hr_email
    - search    -> case-insensitive substring of location
    - minSalary -> salaryRange.min >= value
    - maxSalary -> salaryRange.max <= value
    """
    query: Dict[str, Any] = {}
    if email:
        query["hr_email"] = email
    if search and search.strip():
        query["location"] = {"$regex": re.escape(search.strip()), "$options": "i"}

    minimum = _positive_number(min_salary)
    if minimum is not None:
        query["salaryRange.min"] = {"$gte": minimum}

    maximum = _positive_number(max_salary)
    if maximum is not None:
        query["salaryRange.max"] = {"$lte": maximum}

    return query


def build_job_sort(sort: Optional[str]) -> Optional[List[Tuple[str, int]]]:
    """sort=true orders by minimum salary, highest first."""
    if sort == "true":
        return [("salaryRange.min", -1)]
    return None


def build_pagination(page: Optional[str], size: Optional[str]) -> Tuple[int, int]:
    """(skip, limit) for zero-based page/size; (0, 0) means no pagination."""
    page_number = _non_negative_int(page)
    page_size = _non_negative_int(size)
    if page_number is None or not page_size:
        return 0, 0
    return page_number * page_size, page_size


# ============================================================
# JOBS COLLECTION
# ============================================================

class JobService:
    """
    Handles job postings.
    Ownership is checked by the route handlers; this layer only reads/writes.
    """

    def __init__(self, jobs: Collection):
        self.collection = jobs

    def list(
        self,
        query: Optional[dict] = None,
        sort: Optional[List[Tuple[str, int]]] = None,
        skip: int = 0,
        limit: int = 0,
    ) -> List[dict]:
        kwargs: Dict[str, Any] = {"skip": skip, "limit": limit}
        if sort:
            kwargs["sort"] = sort
        return serialize_docs(self.collection.find(query or {}, **kwargs))

    def count(self, query: Optional[dict] = None) -> int:
        return self.collection.count_documents(query or {})

    def list_by_owner(self, hr_email: str) -> List[dict]:
        return self.list({"hr_email": hr_email})

    def get(self, job_id: str) -> Optional[dict]:
        """Fetch a job by id; None when it does not exist."""
        doc = self.collection.find_one({"_id": parse_object_id(job_id)})
        return serialize_doc(doc)

    def create(self, job: dict) -> InsertOneResult:
        doc = {k: v for k, v in job.items() if k != "_id"}
        # Counter starts at zero; only the application flow moves it
        doc["applicationCount"] = 0
        result = self.collection.insert_one(doc)
        logger.info("Job %s posted by %s", result.inserted_id, doc.get("hr_email"))
        return result

    def update(self, job_id: str, fields: dict) -> UpdateResult:
        oid = parse_object_id(job_id)
        changes = {k: v for k, v in fields.items() if k not in PROTECTED_JOB_FIELDS}
        if not changes:
            raise InvalidArgument("no updatable fields supplied")
        result = self.collection.update_one({"_id": oid}, {"$set": changes})
        if result.matched_count == 0:
            raise NotFound("job not found")
        return result

    def delete(self, job_id: str) -> DeleteResult:
        result = self.collection.delete_one({"_id": parse_object_id(job_id)})
        if result.deleted_count == 0:
            raise NotFound("job not found")
        logger.info("Job %s deleted", job_id)
        return result

    def increment_application_count(self, oid: ObjectId) -> UpdateResult:
        """Single atomic $inc - concurrent applications never lose an update."""
        return self.collection.update_one({"_id": oid}, {"$inc": {"applicationCount": 1}})


# ============================================================
# JOB APPLICATIONS COLLECTION
# ============================================================

class ApplicationService:
    """
    Handles job applications.

    Creating an application is two store operations: insert the application,
    then $inc the parent job's applicationCount. They are not transactional;
    a crash in between leaves the count one short.
    """

    def __init__(self, applications: Collection, jobs: Collection):
        self.collection = applications
        self.jobs = JobService(jobs)

    def get(self, application_id: str) -> Optional[dict]:
        doc = self.collection.find_one({"_id": parse_object_id(application_id)})
        return serialize_doc(doc)

    def list_for_job(self, job_id: str) -> List[dict]:
        return serialize_docs(self.collection.find({"job_id": job_id}))

    def list_for_applicant(self, applicant_email: str) -> List[dict]:
        """
        Applications of one applicant, each enriched with display fields of
        its parent job. A missing or unparseable parent is skipped silently.
        """
        applications = serialize_docs(self.collection.find({"applicant_email": applicant_email}))
        for application in applications:
            job_id = application.get("job_id")
            if not isinstance(job_id, str) or not ObjectId.is_valid(job_id):
                continue
            job = self.jobs.collection.find_one({"_id": ObjectId(job_id)})
            if job:
                for field in JOB_DISPLAY_FIELDS:
                    if field in job:
                        application[field] = job[field]
        return applications

    def create(self, application: dict) -> InsertOneResult:
        oid = parse_object_id(application.get("job_id"))
        if self.jobs.collection.find_one({"_id": oid}) is None:
            raise NotFound("job not found")

        # Status always starts out pending (unset)
        doc = {k: v for k, v in application.items() if k not in ("_id", "status")}
        result = self.collection.insert_one(doc)
        self.jobs.increment_application_count(oid)
        logger.info(
            "Application %s for job %s by %s",
            result.inserted_id, doc["job_id"], doc.get("applicant_email"),
        )
        return result

    def update_status(self, application: dict, status: str) -> UpdateResult:
        """
        Move an application to a new status.
        Decided (accepted/rejected) applications cannot change again.
        """
        current = application.get("status")
        if current in TERMINAL_STATUSES and current != status:
            raise InvalidArgument(f"application already {current}")

        # The decided-state guard is part of the write filter, so a decision
        # made after `application` was read still wins.
        oid = parse_object_id(application["_id"])
        blocked = [s for s in TERMINAL_STATUSES if s != status]
        result = self.collection.update_one(
            {"_id": oid, "status": {"$nin": blocked}},
            {"$set": {"status": status}},
        )
        if result.matched_count == 0:
            stored = self.collection.find_one({"_id": oid})
            if stored is None:
                raise NotFound("application not found")
            raise InvalidArgument(f"application already {stored.get('status')}")
        logger.info("Application %s status %s -> %s", application["_id"], current, status)
        return result
