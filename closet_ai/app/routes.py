"""
API Routes for Closet AI Service v1.2.0
Outfit generation plus the closet stores it reads from.
"""
import logging
from typing import Dict, Optional, List
from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import JSONResponse

from closet_ai import __version__
from closet_ai.app.schemas import FavoriteCreate, GenerateRequest, ItemCreate, PinRequest
from closet_ai.config import GenerationConfig, get_active_provider, get_provider_status, get_settings
from closet_ai.core.categories import categories_by_grid_position, closet_groups
from closet_ai.core.models import ClothingItem, Outfit, items_from_dicts, outfits_from_dicts
from closet_ai.core.orchestrator import generate_outfit
from closet_ai.core.validation import (
    ValidationError,
    validate_category_id,
    validate_enabled_categories,
    validate_pinned_items,
)
from closet_ai.db import mongo
from closet_ai.db import history as history_store
from closet_ai.db import wardrobe as wardrobe_store
from closet_ai.llm.stylist import AdvisoryClient, build_stylist_advisor
from closet_ai.observability import get_metrics, is_logging_enabled

logger = logging.getLogger(__name__)

router = APIRouter()


# ==================== DEPENDENCIES ====================

def get_advisory_client() -> Optional[AdvisoryClient]:
    """Stylist for the active provider (None when unconfigured)."""
    return build_stylist_advisor()


def get_generation_config() -> GenerationConfig:
    return get_settings().generation_config()


def _store_unavailable(what: str) -> HTTPException:
    return HTTPException(status_code=503, detail=f"Closet store unavailable: could not {what}")


# ==================== PUBLIC ENDPOINTS ====================

@router.get("/health")
async def health_check():
    """Health check with observability info."""
    metrics = get_metrics()
    
    return {
        "status": "ok",
        "version": __version__,
        "llm": get_provider_status(),
        "mongo": mongo.health_check(),
        "generation": get_settings().generation_config().to_dict(),
        "observability": {
            "logging_enabled": is_logging_enabled(),
            "total_generations": metrics["total_generations"],
            "advisory_ratio": metrics["advisory_ratio"],
        },
    }


@router.get("/metrics")
async def get_metrics_endpoint():
    """Get detailed metrics for monitoring."""
    return JSONResponse(content=get_metrics())


@router.get("/categories")
async def list_categories():
    """Category schema (grid order) and closet browsing groups."""
    return {
        "categories": [category.to_dict() for category in categories_by_grid_position()],
        "closet_groups": closet_groups(),
    }


# ==================== GENERATION ====================

@router.post("/outfits/generate")
async def generate(
    request: GenerateRequest,
    advisory_client: Optional[AdvisoryClient] = Depends(get_advisory_client),
    config: GenerationConfig = Depends(get_generation_config)
):
    """
    Generate one outfit.
    
    Inputs left out of the body are loaded from the user's closet when
    `user_id` is given. With `save_to_history` the outfit is appended to
    the user's history.
    """
    try:
        if request.items is not None:
            items = items_from_dicts(request.items)
        elif request.user_id:
            items = wardrobe_store.get_items(request.user_id)
        else:
            items = []
        
        if request.enabled_categories is not None:
            enabled = validate_enabled_categories(request.enabled_categories)
        elif request.user_id:
            enabled = wardrobe_store.get_enabled_categories(request.user_id)
        else:
            enabled = None
        
        if request.history is not None:
            history = outfits_from_dicts(request.history)
        elif request.user_id:
            history = history_store.get_outfit_history(request.user_id)
        else:
            history = []
        
        if request.pinned_items is not None:
            pinned = validate_pinned_items(request.pinned_items)
        elif request.user_id:
            pinned = wardrobe_store.get_pinned_items(request.user_id)
        else:
            pinned = {}
    except ValidationError as ve:
        raise HTTPException(status_code=ve.status_code, detail=ve.message)
    
    result = await generate_outfit(
        items,
        enabled,
        history,
        theme=request.theme,
        pinned_items=pinned,
        advisory_client=advisory_client,
        config=config,
        user_id=request.user_id,
        provider=get_active_provider() if advisory_client is not None else None,
    )
    outfit = result.to_outfit(name=request.name)
    
    saved = False
    if request.save_to_history and request.user_id:
        saved = history_store.add_to_history(request.user_id, outfit)
    
    return {
        "outfit": outfit.to_dict(),
        "source": result.source,
        "attempts": result.attempts,
        "reasoning": result.reasoning,
        "fallback_reason": result.fallback_reason,
        "fresh": result.fresh,
        "saved_to_history": saved,
    }


# ==================== HISTORY ====================

@router.get("/users/{user_id}/history")
async def get_history(
    user_id: str,
    limit: int = Query(50, ge=1, le=200, description="Max results")
):
    """User's outfit history, newest-first."""
    outfits = history_store.get_outfit_history(user_id, limit=limit)
    return {"history": [outfit.to_dict() for outfit in outfits], "count": len(outfits)}


@router.delete("/users/{user_id}/history")
async def delete_history(user_id: str):
    removed = history_store.clear_history(user_id)
    return {"removed": removed}


# ==================== FAVORITES ====================

@router.post("/users/{user_id}/favorites")
async def add_favorite_outfit(user_id: str, body: FavoriteCreate):
    """
    Save an outfit as favorite.
    
    The outfit is saved with its full snapshot for future reference.
    """
    try:
        outfit = Outfit.from_dict(body.outfit)
    except ValidationError as ve:
        raise HTTPException(status_code=ve.status_code, detail=ve.message)
    
    favorite = history_store.save_favorite(user_id, outfit, name=body.name)
    if favorite is None:
        raise _store_unavailable("save favorite")
    
    return JSONResponse(content=favorite.to_dict(), status_code=201)


@router.get("/users/{user_id}/favorites")
async def get_favorites_list(
    user_id: str,
    limit: int = Query(50, ge=1, le=100, description="Max results"),
    offset: int = Query(0, ge=0, description="Skip for pagination")
):
    favorites = history_store.get_favorites(user_id, limit=limit, offset=offset)
    return {
        "favorites": [outfit.to_dict() for outfit in favorites],
        "count": len(favorites),
        "limit": limit,
        "offset": offset
    }


@router.delete("/users/{user_id}/favorites/{outfit_id}")
async def delete_favorite(user_id: str, outfit_id: str):
    if not history_store.remove_favorite(user_id, outfit_id):
        raise HTTPException(status_code=404, detail="Favorite not found")
    return {"message": "Favorite removed"}


# ==================== PINS ====================

@router.get("/users/{user_id}/pins")
async def get_pins(user_id: str):
    return {"pinned_items": wardrobe_store.get_pinned_items(user_id)}


@router.put("/users/{user_id}/pins/{category_id}")
async def set_pin(user_id: str, category_id: str, body: PinRequest):
    """Pin an item into a slot for every future generation."""
    try:
        validate_category_id(category_id)
    except ValidationError as ve:
        raise HTTPException(status_code=ve.status_code, detail=ve.message)
    
    owned = {item.id: item for item in wardrobe_store.get_items(user_id)}
    item = owned.get(body.item_id)
    if item is None:
        raise HTTPException(status_code=404, detail="Item not found in closet")
    if item.category_id != category_id:
        raise HTTPException(
            status_code=400,
            detail=f"Item {item.id} belongs to {item.category_id}, not {category_id}"
        )
    
    if not wardrobe_store.pin_item(user_id, category_id, item.id):
        raise _store_unavailable("pin item")
    return {"pinned_items": wardrobe_store.get_pinned_items(user_id)}


@router.delete("/users/{user_id}/pins/{category_id}")
async def delete_pin(user_id: str, category_id: str):
    if not wardrobe_store.unpin_item(user_id, category_id):
        raise HTTPException(status_code=404, detail="Pin not found")
    return {"pinned_items": wardrobe_store.get_pinned_items(user_id)}


# ==================== CLOSET ITEMS ====================

@router.get("/users/{user_id}/items")
async def get_closet_items(
    user_id: str,
    category: Optional[str] = Query(None, description="Filter by category id")
):
    if category:
        items: List[ClothingItem] = wardrobe_store.get_items_by_category(user_id, category)
    else:
        items = wardrobe_store.get_items(user_id)
    return {"items": [item.to_dict() for item in items], "count": len(items)}


@router.post("/users/{user_id}/items")
async def add_closet_item(user_id: str, body: ItemCreate):
    try:
        validate_category_id(body.categoryId)
        item = ClothingItem.from_dict(body.model_dump(exclude_none=True))
    except ValidationError as ve:
        raise HTTPException(status_code=ve.status_code, detail=ve.message)
    
    if wardrobe_store.add_item(user_id, item) is None:
        raise _store_unavailable("add item")
    return JSONResponse(content=item.to_dict(), status_code=201)


@router.delete("/users/{user_id}/items/{item_id}")
async def delete_closet_item(user_id: str, item_id: str):
    if not wardrobe_store.remove_item(user_id, item_id):
        raise HTTPException(status_code=404, detail="Item not found")
    return {"message": "Item removed"}


# ==================== SETTINGS ====================

@router.get("/users/{user_id}/settings/categories")
async def get_category_settings(user_id: str):
    return {"enabled_categories": wardrobe_store.get_enabled_categories(user_id)}


@router.put("/users/{user_id}/settings/categories")
async def update_category_settings(user_id: str, body: Dict[str, bool]):
    """Set enabled flags for one or more categories."""
    try:
        updates = {validate_category_id(key): value for key, value in body.items()}
    except ValidationError as ve:
        raise HTTPException(status_code=ve.status_code, detail=ve.message)
    
    for category_id, enabled in updates.items():
        if not wardrobe_store.set_category_enabled(user_id, category_id, enabled):
            raise _store_unavailable("update settings")
    return {"enabled_categories": wardrobe_store.get_enabled_categories(user_id)}
