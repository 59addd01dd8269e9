"""
MongoDB Connection Utility

MongoDB stores every job portal entity:
- users: accounts with a fixed role (applicant / recruiter)
- companies: owned by the recruiter who registered them
- jobs: owned by a company and its recruiter
- applications: one per (job, applicant) pair
"""
import logging

from pymongo import ASCENDING, MongoClient
from pymongo.database import Database
from pymongo.collection import Collection
from jobportal.core.config import get_settings

log = logging.getLogger(__name__)

settings = get_settings()

# Global client (connection pooling handled internally by pymongo)
_client: MongoClient = None
_db: Database = None


def get_mongo_client() -> MongoClient:
    """Get or create MongoDB client (singleton pattern)"""
    global _client
    if _client is None:
        _client = MongoClient(settings.mongodb_uri)
    return _client


def get_mongo_db() -> Database:
    """Get the job portal database"""
    global _db
    if _db is None:
        client = get_mongo_client()
        _db = client[settings.mongodb_db]
    return _db


def get_collection(name: str) -> Collection:
    """Get a specific collection by its name in COLLECTIONS."""
    db = get_mongo_db()
    return db[name]


def test_mongo_connection() -> bool:
    """
    Test if MongoDB is reachable.
    Returns True if connection successful, False otherwise.
    """
    try:
        client = get_mongo_client()
        # ping command checks connection
        client.admin.command('ping')
        return True
    except Exception as e:
        log.error(f"MongoDB connection failed: {e}")
        return False


# Collection name constants (avoid typos)
COLLECTIONS = {
    "users": "users",
    "companies": "companies",
    "jobs": "jobs",
    "applications": "applications",
}

# Unique keys per collection. The repository turns violations into
# DuplicateEntityError.
UNIQUE_KEYS = {
    "users": [("email",)],
    "companies": [("name",)],
    "applications": [("job", "applicant")],
}


def init_mongo_indexes():
    """
    Create indexes for lookups and uniqueness.
    Call this once during app startup.
    """
    db = get_mongo_db()

    for kind, keys in UNIQUE_KEYS.items():
        for fields in keys:
            db[COLLECTIONS[kind]].create_index(
                [(field, ASCENDING) for field in fields], unique=True
            )

    # Ownership lookups
    db[COLLECTIONS["companies"]].create_index("created_by")
    db[COLLECTIONS["jobs"]].create_index("created_by")
    db[COLLECTIONS["jobs"]].create_index("company")
    db[COLLECTIONS["applications"]].create_index("applicant")

    log.info("MongoDB indexes created successfully")
