"""
Closet AI Service v1.2.0
Outfit generation for a personal closet: stylist-assisted with a
variety-aware random fallback.

API ROUTES:
-----------
- /outfits/generate              - Generate one outfit
- /categories                    - Category schema
- /users/{user_id}/history       - Generated-outfit history
- /users/{user_id}/favorites     - Saved outfits
- /users/{user_id}/pins          - Pinned items
- /users/{user_id}/items         - Closet items
- /users/{user_id}/settings/...  - Enabled categories
- /health, /metrics              - Health and monitoring
"""
import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from closet_ai import __version__
from closet_ai.app.routes import router
from closet_ai.config import get_provider_status, get_settings, validate_provider_config
from closet_ai.db import mongo
from closet_ai.observability import is_logging_enabled

logging.basicConfig(level=logging.INFO, format="%(asctime)s - %(levelname)s - %(message)s")
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("=" * 50)
    logger.info(f"Closet AI Service v{__version__} Starting...")
    logger.info("=" * 50)
    
    mongo_connected = mongo.connect()
    logger.info(f"MongoDB: {'connected' if mongo_connected else 'disconnected'}")
    
    provider_status = get_provider_status()
    logger.info(f"Stylist provider: {provider_status.get('active_provider') or 'none (random only)'}")
    for warning in validate_provider_config():
        logger.warning(warning)
    
    logger.info(f"Generation config: {get_settings().generation_config().to_dict()}")
    logger.info(f"Logging: {'enabled' if is_logging_enabled() else 'disabled'}")
    logger.info("Service ready!")
    logger.info("=" * 50)
    
    yield
    
    logger.info("Service shutting down...")
    mongo.disconnect()


app = FastAPI(
    title="Closet AI Service",
    description="Stylist-assisted outfit generation with variety-aware fallback",
    version=__version__,
    lifespan=lifespan
)

app.add_middleware(CORSMiddleware, allow_origins=["*"], allow_methods=["*"], allow_headers=["*"])

app.include_router(router)
