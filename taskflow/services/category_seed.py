from __future__ import annotations

import logging

from ..schemas.category import CategoryCreate
from .category_service import CategoryService

logger = logging.getLogger(__name__)

DEFAULT_CATEGORIES: list[dict[str, str]] = [
    {"name": "Work", "color": "#6366f1", "icon": "Briefcase"},
    {"name": "Personal", "color": "#10b981", "icon": "User"},
    {"name": "Shopping", "color": "#f59e0b", "icon": "ShoppingCart"},
    {"name": "Health", "color": "#ef4444", "icon": "Heart"},
]


async def seed_default_categories(categories: CategoryService) -> int:
    if await categories.get_all():
        return 0

    for payload in DEFAULT_CATEGORIES:
        await categories.create(CategoryCreate(**payload))
    logger.info("Seeded %d default categories", len(DEFAULT_CATEGORIES))
    return len(DEFAULT_CATEGORIES)
