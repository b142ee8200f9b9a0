"""
MongoDB Connection Utility

MongoDB stores the two job-portal collections:
- jobs:             postings created by recruiters (owner: hr_email)
- job_applications: applications to those postings (owner: applicant_email)

The client is wrapped in a MongoStore handle that is created once at app
startup and injected into the handlers (app.state.store), so tests can swap
in the in-memory store from job_portal.db.memory.
"""
from pymongo import MongoClient
from pymongo.collection import Collection
from pymongo.database import Database
from pymongo.errors import PyMongoError

from job_portal.core.config import Settings, get_settings
from job_portal.core.log import get_logger

logger = get_logger(__name__)


class MongoStore:
    """Store handle: one client, two collections."""

    def __init__(self, settings: Settings = None, client: MongoClient = None):
        settings = settings or get_settings()
        # Connection pooling handled internally by pymongo
        self.client: MongoClient = client or MongoClient(
            settings.mongodb_uri,
            serverSelectionTimeoutMS=settings.mongodb_timeout_ms,
        )
        self.db: Database = self.client[settings.mongodb_db]
        self.jobs: Collection = self.db[settings.jobs_collection]
        self.applications: Collection = self.db[settings.applications_collection]

    def ping(self) -> bool:
        """
        Test if MongoDB is reachable.
        Returns True if connection successful, False otherwise.
        """
        try:
            # ping command checks connection
            self.client.admin.command("ping")
            return True
        except PyMongoError as e:
            logger.warning("MongoDB connection failed: %s", e)
            return False

    def init_indexes(self) -> None:
        """
        Create indexes for the lookups the handlers run.
        Call this once during app startup.
        """
        # Jobs by owner (GET /jobs?email=, /jobs/myposted)
        self.jobs.create_index("hr_email")
        # Salary filter + sort
        self.jobs.create_index("salaryRange.min")

        # Applications by applicant and by parent job
        self.applications.create_index("applicant_email")
        self.applications.create_index("job_id")

        logger.info("MongoDB indexes created successfully")

    def close(self) -> None:
        self.client.close()
