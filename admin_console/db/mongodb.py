"""
MongoDB Connection Utility

MongoDB stores admin activity documents: one per admin action or
mutating admin request. Their `details` payload differs per action, so
they live outside the relational schema.
"""
from pymongo import MongoClient, ASCENDING, DESCENDING
from pymongo.database import Database
from pymongo.collection import Collection
from admin_console.core.config import get_settings
from admin_console.core.logging import get_logger

settings = get_settings()
logger = get_logger(__name__)

# Global client (connection pooling handled internally by pymongo)
_client: MongoClient = None
_db: Database = None


def get_mongo_client() -> MongoClient:
    """Get or create MongoDB client (singleton pattern)"""
    global _client
    if _client is None:
        _client = MongoClient(settings.mongodb_uri, serverSelectionTimeoutMS=2000)
    return _client


def get_mongo_db() -> Database:
    """Get the admin database"""
    global _db
    if _db is None:
        client = get_mongo_client()
        _db = client[settings.mongodb_db]
    return _db


def get_collection(name: str) -> Collection:
    """Get a specific collection."""
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
        logger.error("MongoDB connection failed: %s", e)
        return False


# Collection name constants (avoid typos)
COLLECTIONS = {
    "admin_activity": "admin_activity",
}


def init_mongo_indexes(collection: Collection = None):
    """
    Create indexes for the activity collection.
    Call this once during app startup.
    """
    coll = collection if collection is not None else get_collection(COLLECTIONS["admin_activity"])

    # Recent activity feed and audit log paging
    coll.create_index([("timestamp", DESCENDING)])
    coll.create_index([("admin_id", ASCENDING), ("timestamp", DESCENDING)])
    # Per-entity history on the user detail screen
    coll.create_index([("entity_type", ASCENDING), ("entity_id", ASCENDING)])

    logger.info("MongoDB indexes created successfully")
