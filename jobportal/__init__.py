"""
Job Portal
Recruiters post jobs and review applicants; applicants browse and apply.

Architecture:
- MongoDB: users, companies, jobs, applications
- FastAPI: cookie-session REST API with one access gate for every check
- jobportal.client: async client, snapshot store, sync hooks and route guard
"""

__version__ = "1.0.0"
