"""
MongoDB Connection Utility

MongoDB stores every HireFlow record:
- users (candidates and HR recruiters)
- hiring_posts
- applications
- notifications
- interview_sessions
"""
from loguru import logger
from pymongo import MongoClient, ASCENDING, DESCENDING
from pymongo.database import Database
from pymongo.collection import Collection
from pymongo.errors import PyMongoError
from hireflow.core.config import get_settings

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
    """Get the hireflow database"""
    global _db
    if _db is None:
        client = get_mongo_client()
        _db = client[settings.mongodb_db]
    return _db


def get_collection(name: str) -> Collection:
    """Get a specific collection. Use the COLLECTIONS constants for names."""
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
    except PyMongoError as e:
        logger.warning(f"MongoDB connection failed: {e}")
        return False


# Collection name constants (avoid typos)
COLLECTIONS = {
    "users": "users",
    "hiring_posts": "hiring_posts",
    "applications": "applications",
    "notifications": "notifications",
    "interview_sessions": "interview_sessions"
}


def init_mongo_indexes():
    """
    Create indexes for the lookups the routes perform.
    Call this once during app startup.
    """
    db = get_mongo_db()

    db[COLLECTIONS["users"]].create_index("email", unique=True)

    db[COLLECTIONS["hiring_posts"]].create_index([("hrId", ASCENDING), ("createdAt", DESCENDING)])
    db[COLLECTIONS["hiring_posts"]].create_index([("status", ASCENDING), ("createdAt", DESCENDING)])

    # One application per candidate per post
    db[COLLECTIONS["applications"]].create_index([
        ("candidateId", ASCENDING),
        ("postId", ASCENDING)
    ], unique=True)
    db[COLLECTIONS["applications"]].create_index("hrId")
    db[COLLECTIONS["applications"]].create_index("postId")

    db[COLLECTIONS["notifications"]].create_index([("userId", ASCENDING), ("createdAt", DESCENDING)])
    db[COLLECTIONS["interview_sessions"]].create_index([("userId", ASCENDING), ("createdAt", DESCENDING)])

    logger.info("MongoDB indexes created successfully")
