"""
MongoDB Connection Module (v1.2.0)
Persistent closet storage using MongoDB.
"""
import logging

from closet_ai.config.settings import get_settings

logger = logging.getLogger(__name__)

# Global client
_client = None
_db = None


def connect() -> bool:
    """
    Connect to MongoDB.
    
    Returns:
        True if connected, False otherwise
    """
    global _client, _db
    
    settings = get_settings()
    
    try:
        from pymongo import MongoClient
        
        logger.info(f"Connecting to MongoDB: {settings.mongo_uri[:30]}...")
        
        _client = MongoClient(settings.mongo_uri, serverSelectionTimeoutMS=5000)
        
        # Test connection
        _client.admin.command('ping')
        
        _db = _client[settings.mongo_db_name]
        _ensure_indexes(_db)
        
        logger.info(f"Connected to MongoDB database: {settings.mongo_db_name}")
        return True
        
    except Exception as e:
        logger.warning(f"MongoDB connection failed: {e}")
        _client = None
        _db = None
        return False


def _ensure_indexes(db):
    """Create the per-user lookup indexes."""
    db["history"].create_index([("user_id", 1), ("created_at", -1)])
    db["favorites"].create_index([("user_id", 1), ("outfit.id", 1)], unique=True)
    db["wardrobe"].create_index([("user_id", 1), ("item.id", 1)], unique=True)
    db["pins"].create_index("user_id", unique=True)
    db["settings"].create_index("user_id", unique=True)


def get_collection(name: str):
    """Get a MongoDB collection (None when MongoDB is unavailable)."""
    global _db
    
    if _db is None:
        connect()
    
    if _db is None:
        return None
    
    return _db[name]


def health_check() -> dict:
    """Check MongoDB connection health."""
    global _client
    
    try:
        if _client is None:
            connect()
        
        if _client:
            _client.admin.command('ping')
            return {"status": "connected", "database": get_settings().mongo_db_name}
        else:
            return {"status": "disconnected", "reason": "client not initialized"}
            
    except Exception as e:
        return {"status": "disconnected", "reason": str(e)}


def disconnect():
    """Close the client (used on shutdown and in tests)."""
    global _client, _db
    if _client is not None:
        _client.close()
    _client = None
    _db = None
