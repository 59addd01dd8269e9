"""
Database module - MongoDB connection and the entity repository contract.
"""
from jobportal.db.mongodb import get_mongo_db, test_mongo_connection
from jobportal.db.repository import (
    DuplicateEntityError,
    EntityRepository,
    MongoRepository,
    get_repository,
)

__all__ = [
    "get_mongo_db",
    "test_mongo_connection",
    "DuplicateEntityError",
    "EntityRepository",
    "MongoRepository",
    "get_repository",
]
