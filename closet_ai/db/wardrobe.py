"""
Closet Store Module (v1.2.0)
A user's clothing items, category settings and pinned items.

Images are not stored here; `imageUri` is kept verbatim.
"""
import logging
from typing import Optional, List, Dict

from closet_ai.core.categories import default_enabled_categories
from closet_ai.core.models import ClothingItem
from closet_ai.db import mongo

logger = logging.getLogger(__name__)


# ==================== ITEMS ====================

def add_item(user_id: str, item: ClothingItem) -> Optional[ClothingItem]:
    """
    Add an item to the user's closet.
    
    Returns:
        The stored item or None
    """
    try:
        collection = mongo.get_collection("wardrobe")
        if collection is None:
            return None
        
        collection.update_one(
            {"user_id": user_id, "item.id": item.id},
            {"$set": {"user_id": user_id, "item": item.to_dict(), "created_at": item.created_at}},
            upsert=True
        )
        logger.info(f"Closet item saved: {item.id} ({item.category_id})")
        return item
        
    except Exception as e:
        logger.error(f"Failed to add closet item: {e}")
        return None


def remove_item(user_id: str, item_id: str) -> bool:
    """Remove an item; also drops any pin pointing at it."""
    try:
        collection = mongo.get_collection("wardrobe")
        if collection is None:
            return False
        
        result = collection.delete_one({"user_id": user_id, "item.id": item_id})
        if result.deleted_count == 0:
            return False
        
        pins = get_pinned_items(user_id)
        for category_id, pinned_id in pins.items():
            if pinned_id == item_id:
                unpin_item(user_id, category_id)
        return True
        
    except Exception as e:
        logger.error(f"Failed to remove closet item {item_id}: {e}")
        return False


def get_items(user_id: str) -> List[ClothingItem]:
    """Get all closet items, oldest first."""
    try:
        collection = mongo.get_collection("wardrobe")
        if collection is None:
            return []
        
        cursor = collection.find({"user_id": user_id}, {"_id": 0, "item": 1}).sort("created_at", 1)
        return [ClothingItem.from_dict(doc["item"]) for doc in cursor]
        
    except Exception as e:
        logger.error(f"Failed to get closet items for {user_id}: {e}")
        return []


def get_items_by_category(user_id: str, category_id: str) -> List[ClothingItem]:
    return [item for item in get_items(user_id) if item.category_id == category_id]


# ==================== CATEGORY SETTINGS ====================

def get_enabled_categories(user_id: str) -> Dict[str, bool]:
    """Stored enabled-category flags merged over the all-enabled default."""
    enabled = default_enabled_categories()
    
    try:
        collection = mongo.get_collection("settings")
        if collection is None:
            return enabled
        
        doc = collection.find_one({"user_id": user_id})
        if doc:
            enabled.update({key: bool(value) for key, value in doc.get("enabled_categories", {}).items()})
        return enabled
        
    except Exception as e:
        logger.error(f"Failed to get settings for {user_id}: {e}")
        return enabled


def set_category_enabled(user_id: str, category_id: str, enabled: bool) -> bool:
    try:
        collection = mongo.get_collection("settings")
        if collection is None:
            return False
        
        collection.update_one(
            {"user_id": user_id},
            {"$set": {f"enabled_categories.{category_id}": bool(enabled)}},
            upsert=True
        )
        return True
        
    except Exception as e:
        logger.error(f"Failed to update settings for {user_id}: {e}")
        return False


# ==================== PINS ====================

def get_pinned_items(user_id: str) -> Dict[str, str]:
    """Slot id -> pinned item id."""
    try:
        collection = mongo.get_collection("pins")
        if collection is None:
            return {}
        
        doc = collection.find_one({"user_id": user_id})
        return dict(doc.get("pins", {})) if doc else {}
        
    except Exception as e:
        logger.error(f"Failed to get pins for {user_id}: {e}")
        return {}


def pin_item(user_id: str, category_id: str, item_id: str) -> bool:
    try:
        collection = mongo.get_collection("pins")
        if collection is None:
            return False
        
        collection.update_one(
            {"user_id": user_id},
            {"$set": {f"pins.{category_id}": item_id}},
            upsert=True
        )
        logger.info(f"Pinned {item_id} to {category_id} for {user_id}")
        return True
        
    except Exception as e:
        logger.error(f"Failed to pin item: {e}")
        return False


def unpin_item(user_id: str, category_id: str) -> bool:
    try:
        collection = mongo.get_collection("pins")
        if collection is None:
            return False
        
        result = collection.update_one({"user_id": user_id}, {"$unset": {f"pins.{category_id}": ""}})
        return result.modified_count > 0
        
    except Exception as e:
        logger.error(f"Failed to unpin {category_id}: {e}")
        return False
