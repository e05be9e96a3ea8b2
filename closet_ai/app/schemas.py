"""
API Schemas (v1.2.0)
Request bodies for the closet routes.

Items and outfits travel as the client stores them (camelCase dicts) and
are parsed by the core models, so validation errors carry domain messages.
"""
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


class GenerateRequest(BaseModel):
    """Input for outfit generation"""
    user_id: Optional[str] = Field(None, description="Load missing inputs from this user's closet")
    items: Optional[List[Dict[str, Any]]] = Field(None, description="Closet items")
    enabled_categories: Optional[Dict[str, bool]] = Field(None, description="Category id -> enabled")
    history: Optional[List[Dict[str, Any]]] = Field(None, description="Previous outfits, newest-first")
    theme: Optional[str] = Field(None, max_length=200, description="Styling theme, e.g. 'smart casual'")
    pinned_items: Optional[Dict[str, str]] = Field(None, description="Category id -> pinned item id")
    save_to_history: bool = Field(False, description="Append the result to the user's history")
    name: Optional[str] = Field(None, description="Optional outfit name")


class FavoriteCreate(BaseModel):
    """Outfit snapshot to save as favorite"""
    outfit: Dict[str, Any]
    name: Optional[str] = None


class PinRequest(BaseModel):
    item_id: str = Field(..., min_length=1)


class ItemCreate(BaseModel):
    """New closet item"""
    id: str = Field(..., min_length=1)
    categoryId: str = Field(..., min_length=1)
    name: str = ""
    imageUri: str = ""
    tags: List[str] = Field(default_factory=list)
    createdAt: Optional[int] = None
