# Database module
from closet_ai.db.mongo import connect, disconnect, get_collection, health_check
from closet_ai.db.history import (
    get_outfit_history,
    add_to_history,
    clear_history,
    save_favorite,
    get_favorites,
    remove_favorite,
)
from closet_ai.db.wardrobe import (
    add_item,
    remove_item,
    get_items,
    get_items_by_category,
    get_enabled_categories,
    set_category_enabled,
    get_pinned_items,
    pin_item,
    unpin_item,
)
