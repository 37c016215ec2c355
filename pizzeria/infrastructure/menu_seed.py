"""Menu Seeding — inserts the default catalogue into an empty menu_items table.

Invariants:
    - Idempotent: does nothing when at least one menu item exists
    - Never overwrites an edited catalogue

Design Decisions:
    - Seeded at startup from the lifespan (toggle: settings.seed_menu) because the
      menu resource is read-only over HTTP
"""

import logging

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from pizzeria.models.menu_item import MenuItem

logger = logging.getLogger(__name__)

DEFAULT_MENU = (
    ("Margherita", "Tomato, mozzarella, basil", 1000),
    ("Pepperoni", "Tomato, mozzarella, pepperoni", 1200),
    ("Quattro Formaggi", "Mozzarella, gorgonzola, parmesan, fontina", 1350),
    ("Hawaiian", "Tomato, mozzarella, ham, pineapple", 1250),
    ("Vegetariana", "Tomato, mozzarella, peppers, olives, mushrooms", 1150),
)


async def seed_menu(db: AsyncSession) -> int:
    """Insert DEFAULT_MENU when the table is empty. Returns rows inserted."""
    count = await db.scalar(select(func.count()).select_from(MenuItem))
    if count:
        return 0
    for name, description, price_cents in DEFAULT_MENU:
        db.add(MenuItem(
            name=name, description=description, price_cents=price_cents,
        ))
    await db.commit()
    logger.info(f"Seeded {len(DEFAULT_MENU)} menu items")
    return len(DEFAULT_MENU)
