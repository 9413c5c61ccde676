"""
MongoDB Service - CRUD operations for document collections.

Collections in this database:
1. users              - Candidates and HR recruiters
2. hiring_posts       - Job postings owned by an HR user
3. applications       - Candidate submissions against a hiring post
4. notifications      - In-app decision notifications
5. interview_sessions - AI mock interview sessions

Documents are stored with camelCase keys (matching the API) and returned
with `_id` converted to a string `id`.
"""

from datetime import datetime, timezone
from typing import Optional, List, Dict, Any
from bson import ObjectId
from bson.errors import InvalidId
from loguru import logger
from pymongo import DESCENDING
from pymongo.collection import Collection
from pymongo.errors import DuplicateKeyError, PyMongoError

from hireflow.core.exceptions import InvalidRequestException, StorageFailureException
from hireflow.db.mongodb import get_collection, COLLECTIONS


# ============================================================
# HELPERS
# ============================================================

def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def to_object_id(value: str) -> Optional[ObjectId]:
    """Parse a string id. Malformed ids resolve to None (treated as not found)."""
    try:
        return ObjectId(value)
    except (InvalidId, TypeError):
        return None


def serialize_doc(doc: dict) -> Optional[dict]:
    """Convert MongoDB document to JSON-serializable dict with a string `id`."""
    if doc is None:
        return None
    if "_id" in doc:
        doc["id"] = str(doc.pop("_id"))
    return doc


def serialize_docs(docs) -> list:
    """Convert list of MongoDB documents to JSON-serializable list."""
    return [serialize_doc(doc) for doc in docs]


class MongoCollectionService:
    """Shared by-id helpers. Pass `collection` to bind a different backend."""

    collection_name: str = ""

    def __init__(self, collection: Collection = None):
        self.collection = collection if collection is not None else get_collection(
            COLLECTIONS[self.collection_name]
        )

    def get_by_id(self, doc_id: str) -> Optional[dict]:
        oid = to_object_id(doc_id)
        if oid is None:
            return None
        return serialize_doc(self.collection.find_one({"_id": oid}))

    def _insert(self, doc: dict) -> dict:
        try:
            result = self.collection.insert_one(doc)
        except DuplicateKeyError:
            raise
        except PyMongoError as e:
            raise StorageFailureException(f"insert:{self.collection_name}", str(e))
        doc["_id"] = result.inserted_id
        return serialize_doc(doc)

    def _update(self, doc_id: str, fields: Dict[str, Any], operation: str) -> bool:
        oid = to_object_id(doc_id)
        if oid is None:
            return False
        try:
            result = self.collection.update_one({"_id": oid}, {"$set": fields})
        except PyMongoError as e:
            raise StorageFailureException(operation, str(e))
        return result.matched_count > 0


# ============================================================
# USERS COLLECTION
# Candidates and HR recruiters share one collection, keyed by role
# ============================================================

class UserService(MongoCollectionService):

    collection_name = "users"

    def create(self, email: str, password_hash: str, name: str, role: str, **profile) -> dict:
        """
        Insert a user document.

        HR users carry companyName / companySize / hrRole / companyWebsite /
        linkedin in `profile`. Candidates start with zeroed interview stats.
        """
        doc = {
            "email": email,
            "passwordHash": password_hash,
            "name": name,
            "role": role,
            "isActive": True,
            "totalInterviews": 0,
            "averageScore": 0,
            "streakDays": 0,
            "badges": [],
            "createdAt": utcnow(),
        }
        doc.update({k: v for k, v in profile.items() if v is not None})
        try:
            return self._insert(doc)
        except DuplicateKeyError:
            raise InvalidRequestException("Email already registered")

    def get_by_email(self, email: str) -> Optional[dict]:
        return serialize_doc(self.collection.find_one({"email": email}))

    def update_profile(self, user_id: str, updates: Dict[str, Any]) -> bool:
        """Update only the provided profile fields."""
        return self._update(user_id, updates, "update_profile")

    def record_interview_score(self, user_id: str, total_score: float) -> Optional[dict]:
        """Increment totalInterviews and fold the score into the running average."""
        user = self.get_by_id(user_id)
        if not user:
            return None
        count = user.get("totalInterviews", 0) or 0
        average = user.get("averageScore", 0) or 0
        new_count = count + 1
        new_average = round((average * count + total_score) / new_count, 1)
        self._update(user_id, {"totalInterviews": new_count, "averageScore": new_average}, "record_interview_score")
        return {"totalInterviews": new_count, "averageScore": new_average}


# ============================================================
# HIRING POSTS COLLECTION
# ============================================================

class HiringPostService(MongoCollectionService):

    collection_name = "hiring_posts"

    def create(self, hr_id: str, company_name: str, data: Dict[str, Any]) -> dict:
        doc = dict(data)
        doc.update({
            "hrId": hr_id,
            "companyName": company_name,
            "status": "active",
            "createdAt": utcnow(),
        })
        return self._insert(doc)

    def get_by_hr(self, hr_id: str) -> List[dict]:
        """Posts owned by an HR user, newest first."""
        cursor = self.collection.find({"hrId": hr_id}, sort=[("createdAt", DESCENDING)])
        return serialize_docs(cursor)

    def get_active(self) -> List[dict]:
        """All active posts, newest first."""
        cursor = self.collection.find({"status": "active"}, sort=[("createdAt", DESCENDING)])
        return serialize_docs(cursor)

    def delete(self, post_id: str) -> bool:
        oid = to_object_id(post_id)
        if oid is None:
            return False
        try:
            result = self.collection.delete_one({"_id": oid})
        except PyMongoError as e:
            raise StorageFailureException("delete_post", str(e))
        return result.deleted_count > 0


# ============================================================
# APPLICATIONS COLLECTION
# The application store: fetch-by-id, fetch-by-recruiter, patch-by-id.
# No version token; concurrent writes to one record are last-write-wins.
# ============================================================

class ApplicationService(MongoCollectionService):

    collection_name = "applications"

    def create(
        self,
        candidate: dict,
        post: dict,
        resume_url: str,
        candidate_phone: str = None
    ) -> dict:
        """Insert a new application with status `pending`."""
        doc = {
            "candidateId": candidate["id"],
            "candidateName": candidate["name"],
            "candidateEmail": candidate["email"],
            "candidatePhone": candidate_phone or candidate.get("phone"),
            "jobTitle": post["title"],
            "postId": post["id"],
            "hrId": post["hrId"],
            "status": "pending",
            "resumeUrl": resume_url,
            "createdAt": utcnow(),
        }
        try:
            return self._insert(doc)
        except DuplicateKeyError:
            raise InvalidRequestException("You have already applied to this post")

    def exists_for_candidate(self, candidate_id: str, post_id: str) -> bool:
        return self.collection.find_one({"candidateId": candidate_id, "postId": post_id}) is not None

    def get_by_hr(self, hr_id: str, status: str = None, post_id: str = None) -> List[dict]:
        query = {"hrId": hr_id}
        if status:
            query["status"] = status
        if post_id:
            query["postId"] = post_id
        cursor = self.collection.find(query, sort=[("createdAt", DESCENDING)])
        return serialize_docs(cursor)

    def get_by_candidate(self, candidate_id: str) -> List[dict]:
        cursor = self.collection.find({"candidateId": candidate_id}, sort=[("createdAt", DESCENDING)])
        return serialize_docs(cursor)

    def set_status(self, application_id: str, status: str) -> bool:
        """
        Patch the status field.

        Raises StorageFailureException when the write is rejected; the write
        may or may not have landed in that case.
        """
        return self._update(
            application_id,
            {"status": status, "updatedAt": utcnow()},
            "set_application_status"
        )

    def delete_by_post(self, post_id: str) -> int:
        try:
            result = self.collection.delete_many({"postId": post_id})
        except PyMongoError as e:
            raise StorageFailureException("delete_applications", str(e))
        logger.info(f"Deleted {result.deleted_count} applications for post {post_id}")
        return result.deleted_count


# ============================================================
# NOTIFICATIONS COLLECTION
# Created once per qualifying transition; only `read` ever changes
# ============================================================

class NotificationService(MongoCollectionService):

    collection_name = "notifications"

    def create(self, user_id: str, title: str, message: str, notification_type: str) -> dict:
        doc = {
            "userId": user_id,
            "title": title,
            "message": message,
            "type": notification_type,
            "read": False,
            "createdAt": utcnow(),
        }
        return self._insert(doc)

    def get_by_user(self, user_id: str) -> List[dict]:
        cursor = self.collection.find({"userId": user_id}, sort=[("createdAt", DESCENDING)])
        return serialize_docs(cursor)

    def mark_as_read(self, notification_id: str) -> bool:
        return self._update(notification_id, {"read": True}, "mark_notification_read")


# ============================================================
# INTERVIEW SESSIONS COLLECTION
# ============================================================

class InterviewSessionService(MongoCollectionService):

    collection_name = "interview_sessions"

    def create(
        self,
        user_id: str,
        job_role: str,
        difficulty: str,
        round_type: str,
        questions: List[dict],
        resume_content: str = None
    ) -> dict:
        doc = {
            "userId": user_id,
            "jobRole": job_role,
            "difficulty": difficulty,
            "roundType": round_type,
            "questions": questions,
            "resumeContent": resume_content,
            "answers": {},
            "feedback": [],
            "totalScore": 0,
            "createdAt": utcnow(),
        }
        return self._insert(doc)

    def complete(
        self,
        session_id: str,
        answers: Dict[str, str],
        feedback: List[dict],
        total_score: float
    ) -> bool:
        return self._update(
            session_id,
            {
                "answers": answers,
                "feedback": feedback,
                "totalScore": total_score,
                "completedAt": utcnow(),
            },
            "complete_interview_session"
        )

    def get_by_user(self, user_id: str) -> List[dict]:
        cursor = self.collection.find({"userId": user_id}, sort=[("createdAt", DESCENDING)])
        return serialize_docs(cursor)

