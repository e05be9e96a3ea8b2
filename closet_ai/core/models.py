"""
Wardrobe Data Model (v1.2.0)
Clothing items and outfits as the closet client stores them.
"""
import time
import uuid
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from closet_ai.core.categories import slot_ids
from closet_ai.core.validation import ValidationError, validate_category_id, validate_item_id


def _now_millis() -> int:
    return int(time.time() * 1000)


def _pick(data: Dict[str, Any], camel: str, snake: str, default: Any = None) -> Any:
    if camel in data:
        return data[camel]
    return data.get(snake, default)


@dataclass(frozen=True)
class ClothingItem:
    """An item in the user's closet."""
    id: str
    category_id: str
    name: str
    image_uri: str = ""
    tags: List[str] = field(default_factory=list)
    created_at: int = field(default_factory=_now_millis)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ClothingItem":
        """
        Build an item from a camelCase or snake_case dict.
        
        Raises:
            ValidationError: If the id is missing or the category is not an outfit slot
        """
        category_id = _pick(data, "categoryId", "category_id")
        if not category_id:
            raise ValidationError(f"Item {data.get('id')!r} has no category")
        
        return cls(
            id=validate_item_id(data.get("id")),
            category_id=validate_category_id(str(category_id)),
            name=str(data.get("name") or ""),
            image_uri=str(_pick(data, "imageUri", "image_uri", "") or ""),
            tags=[str(tag) for tag in (data.get("tags") or [])],
            created_at=int(_pick(data, "createdAt", "created_at", None) or _now_millis()),
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "categoryId": self.category_id,
            "name": self.name,
            "imageUri": self.image_uri,
            "tags": list(self.tags),
            "createdAt": self.created_at,
        }


@dataclass
class Outfit:
    """A generated or saved outfit: one item (or none) per slot."""
    id: str
    items: Dict[str, Optional[ClothingItem]]
    name: Optional[str] = None
    created_at: int = field(default_factory=_now_millis)

    @classmethod
    def create(cls, items: Dict[str, Optional[ClothingItem]], name: Optional[str] = None) -> "Outfit":
        """Stamp a new outfit with a fresh id and the current time."""
        return cls(id=uuid.uuid4().hex, items=dict(items), name=name)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Outfit":
        raw_items = data.get("items") or {}
        items: Dict[str, Optional[ClothingItem]] = {}
        for category_id, raw in raw_items.items():
            items[category_id] = ClothingItem.from_dict(raw) if raw else None
        
        return cls(
            id=str(data.get("id") or uuid.uuid4().hex),
            items=items,
            name=data.get("name"),
            created_at=int(_pick(data, "createdAt", "created_at", None) or _now_millis()),
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "items": outfit_items_to_dict(self.items),
            "createdAt": self.created_at,
        }

    def filled_slots(self) -> Dict[str, ClothingItem]:
        return {category_id: item for category_id, item in self.items.items() if item is not None}


def outfit_items_to_dict(items: Dict[str, Optional[ClothingItem]]) -> Dict[str, Optional[dict]]:
    """Serialize a slot map, emitting every schema slot."""
    result = {category_id: None for category_id in slot_ids()}
    for category_id, item in items.items():
        result[category_id] = item.to_dict() if item is not None else None
    return result


def items_from_dicts(raw_items: List[Dict[str, Any]]) -> List[ClothingItem]:
    return [ClothingItem.from_dict(raw) for raw in raw_items]


def outfits_from_dicts(raw_outfits: List[Dict[str, Any]]) -> List[Outfit]:
    return [Outfit.from_dict(raw) for raw in raw_outfits]
