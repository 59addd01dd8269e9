"""
Entity Repository - create/read/update/delete contract over the document store.

Routes and services only talk to EntityRepository; MongoRepository is the
production implementation. Documents go in and come out as plain dicts with
a string "id" key (Mongo's ObjectId never leaks past this module).
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

from bson import ObjectId
from bson.errors import InvalidId
from pymongo import ReturnDocument
from pymongo.errors import DuplicateKeyError

from jobportal.db.mongodb import COLLECTIONS, get_collection, init_mongo_indexes, test_mongo_connection

log = logging.getLogger(__name__)


class DuplicateEntityError(Exception):
    """A write would break a unique key (email, company name, job+applicant)."""

    def __init__(self, kind: str):
        super().__init__(f"Duplicate {kind} entity")
        self.kind = kind


class EntityRepository(ABC):
    """Storage contract for users, companies, jobs and applications."""

    @abstractmethod
    def insert(self, kind: str, doc: Dict[str, Any]) -> dict:
        """Store a new document and return it with its assigned id."""

    @abstractmethod
    def get(self, kind: str, entity_id: str) -> Optional[dict]:
        """Fetch one document by id, or None if it does not exist."""

    @abstractmethod
    def find(self, kind: str, query: Optional[Dict[str, Any]] = None) -> List[dict]:
        """Fetch every document whose fields equal the query values."""

    @abstractmethod
    def update(
        self,
        kind: str,
        entity_id: str,
        fields: Dict[str, Any],
        expect: Optional[Dict[str, Any]] = None,
    ) -> Optional[dict]:
        """
        Set fields on one document, atomically.

        If expect is given, the write only happens while the stored document
        still matches it. Returns the updated document, or None when nothing
        matched.
        """

    @abstractmethod
    def delete(self, kind: str, entity_id: str) -> bool:
        """Remove one document. Returns False if it did not exist."""

    def find_one(self, kind: str, query: Dict[str, Any]) -> Optional[dict]:
        docs = self.find(kind, query)
        return docs[0] if docs else None

    def ensure_indexes(self) -> None:
        pass

    def ping(self) -> bool:
        return True


# ============================================================
# HELPER: Convert ObjectId to string for JSON serialization
# ============================================================

def serialize_doc(doc: dict) -> Optional[dict]:
    """Convert MongoDB document to a dict keyed by string "id"."""
    if doc is None:
        return None
    doc = dict(doc)
    if "_id" in doc:
        doc["id"] = str(doc.pop("_id"))
    return doc


def serialize_docs(docs) -> list:
    """Convert MongoDB documents to a list of plain dicts."""
    return [serialize_doc(doc) for doc in docs]


def to_object_id(entity_id: str) -> Optional[ObjectId]:
    """Parse an id coming from a URL. Malformed ids simply match nothing."""
    # ObjectId(None) would mint a fresh id
    if entity_id is None:
        return None
    try:
        return ObjectId(entity_id)
    except (InvalidId, TypeError):
        return None


class MongoRepository(EntityRepository):
    """EntityRepository backed by pymongo collections."""

    def _collection(self, kind: str):
        return get_collection(COLLECTIONS[kind])

    def insert(self, kind: str, doc: Dict[str, Any]) -> dict:
        doc = {k: v for k, v in doc.items() if k != "id"}
        try:
            result = self._collection(kind).insert_one(doc)
        except DuplicateKeyError as e:
            raise DuplicateEntityError(kind) from e
        doc["_id"] = result.inserted_id
        return serialize_doc(doc)

    def get(self, kind: str, entity_id: str) -> Optional[dict]:
        oid = to_object_id(entity_id)
        if oid is None:
            return None
        return serialize_doc(self._collection(kind).find_one({"_id": oid}))

    def find(self, kind: str, query: Optional[Dict[str, Any]] = None) -> List[dict]:
        query = dict(query or {})
        if "id" in query:
            query["_id"] = to_object_id(query.pop("id"))
        return serialize_docs(self._collection(kind).find(query))

    def update(
        self,
        kind: str,
        entity_id: str,
        fields: Dict[str, Any],
        expect: Optional[Dict[str, Any]] = None,
    ) -> Optional[dict]:
        oid = to_object_id(entity_id)
        if oid is None:
            return None
        try:
            doc = self._collection(kind).find_one_and_update(
                {"_id": oid, **(expect or {})},
                {"$set": fields},
                return_document=ReturnDocument.AFTER,
            )
        except DuplicateKeyError as e:
            raise DuplicateEntityError(kind) from e
        return serialize_doc(doc)

    def delete(self, kind: str, entity_id: str) -> bool:
        oid = to_object_id(entity_id)
        if oid is None:
            return False
        result = self._collection(kind).delete_one({"_id": oid})
        return result.deleted_count > 0

    def ensure_indexes(self) -> None:
        init_mongo_indexes()

    def ping(self) -> bool:
        return test_mongo_connection()


_repository: Optional[EntityRepository] = None


def get_repository() -> EntityRepository:
    """
    FastAPI dependency - the process-wide repository.

    Tests swap it out with app.dependency_overrides[get_repository].
    """
    global _repository
    if _repository is None:
        _repository = MongoRepository()
    return _repository
