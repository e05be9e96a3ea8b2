"""
History & Favorites Module (v1.2.0)
Generated-outfit history and saved outfits in MongoDB.

History is bounded per user and always read newest-first, which is the
order the generator expects.
"""
import logging
from typing import Optional, List

from closet_ai.config.settings import get_settings
from closet_ai.core.models import Outfit
from closet_ai.db import mongo

logger = logging.getLogger(__name__)


# ==================== OUTFIT HISTORY ====================

def get_outfit_history(user_id: str, limit: Optional[int] = None) -> List[Outfit]:
    """
    Get user's outfit history, newest-first.
    
    Args:
        user_id: Owner user ID
        limit: Max results (default: the history cap)
    
    Returns:
        List of outfits
    """
    limit = limit or get_settings().generation.history_limit
    
    try:
        collection = mongo.get_collection("history")
        if collection is None:
            return []
        
        cursor = collection.find(
            {"user_id": user_id},
            {"_id": 0, "outfit": 1}
        ).sort("created_at", -1).limit(limit)
        
        return [Outfit.from_dict(doc["outfit"]) for doc in cursor]
        
    except Exception as e:
        logger.error(f"Failed to get history for {user_id}: {e}")
        return []


def add_to_history(user_id: str, outfit: Outfit) -> bool:
    """
    Append an outfit to the user's history and trim it to the cap.
    
    Returns:
        True if stored
    """
    history_limit = get_settings().generation.history_limit
    
    try:
        collection = mongo.get_collection("history")
        if collection is None:
            return False
        
        collection.insert_one({
            "user_id": user_id,
            "outfit": outfit.to_dict(),
            "created_at": outfit.created_at,
        })
        
        # Trim everything older than the newest `history_limit` entries
        stale = collection.find(
            {"user_id": user_id},
            {"_id": 1}
        ).sort("created_at", -1).skip(history_limit)
        stale_ids = [doc["_id"] for doc in stale]
        if stale_ids:
            collection.delete_many({"_id": {"$in": stale_ids}})
            logger.info(f"Trimmed {len(stale_ids)} old history entries for {user_id}")
        
        return True
        
    except Exception as e:
        logger.error(f"Failed to add history for {user_id}: {e}")
        return False


def clear_history(user_id: str) -> int:
    """Delete a user's history. Returns the number of entries removed."""
    try:
        collection = mongo.get_collection("history")
        if collection is None:
            return 0
        
        return collection.delete_many({"user_id": user_id}).deleted_count
        
    except Exception as e:
        logger.error(f"Failed to clear history for {user_id}: {e}")
        return 0


# ==================== FAVORITES ====================

def save_favorite(user_id: str, outfit: Outfit, name: Optional[str] = None) -> Optional[Outfit]:
    """
    Save an outfit snapshot as a favorite.
    
    Saving the same outfit id twice returns the existing favorite.
    
    Returns:
        The saved outfit or None
    """
    try:
        collection = mongo.get_collection("favorites")
        if collection is None:
            return None
        
        existing = collection.find_one({"user_id": user_id, "outfit.id": outfit.id})
        if existing:
            logger.info(f"Favorite already exists: {outfit.id}")
            return Outfit.from_dict(existing["outfit"])
        
        if name:
            outfit.name = name
        
        collection.insert_one({
            "user_id": user_id,
            "outfit": outfit.to_dict(),
            "created_at": outfit.created_at,
        })
        logger.info(f"Favorite added: {outfit.id}")
        return outfit
        
    except Exception as e:
        logger.error(f"Failed to add favorite: {e}")
        return None


def get_favorites(user_id: str, limit: int = 50, offset: int = 0) -> List[Outfit]:
    """Get user's favorite outfits, newest-first."""
    try:
        collection = mongo.get_collection("favorites")
        if collection is None:
            return []
        
        cursor = collection.find(
            {"user_id": user_id},
            {"_id": 0, "outfit": 1}
        ).sort("created_at", -1).skip(offset).limit(limit)
        
        return [Outfit.from_dict(doc["outfit"]) for doc in cursor]
        
    except Exception as e:
        logger.error(f"Failed to get favorites: {e}")
        return []


def remove_favorite(user_id: str, outfit_id: str) -> bool:
    """Remove a favorite."""
    try:
        collection = mongo.get_collection("favorites")
        if collection is None:
            return False
        
        result = collection.delete_one({"user_id": user_id, "outfit.id": outfit_id})
        return result.deleted_count > 0
        
    except Exception as e:
        logger.error(f"Failed to remove favorite: {e}")
        return False
