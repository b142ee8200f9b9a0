"""
Job Portal API
Recruiters post jobs, applicants apply, recruiters decide.

Architecture:
- FastAPI: HTTP surface, CORS, dependency-injected auth gate
- MongoDB: jobs and job_applications collections
- JWT in an httpOnly cookie: stateless authentication
"""

__version__ = "1.0.0"
