"""
Schemas module - Request/Response schemas for API endpoints.

Everything lives in jobportal.schemas.schemas; the enums are re-exported
here because both the server and the sync client use them.
"""

from jobportal.schemas.schemas import ApplicationStatus, JobType, UserRole

__all__ = ["ApplicationStatus", "JobType", "UserRole"]
