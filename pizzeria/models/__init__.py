"""ORM Models — SQLAlchemy declarative models for all stored entities.

Invariants:
    - All models inherit from Base (db/base.py)
    - User is the owner of tokens and carts; both are keyed by the user's email

Design Decisions:
    - One file per entity for locality
    - All models imported here so SQLAlchemy resolves string-based relationship()
      references before any query runs
"""

from pizzeria.models.user import User  # noqa: F401
from pizzeria.models.token import Token  # noqa: F401
from pizzeria.models.menu_item import MenuItem  # noqa: F401
from pizzeria.models.cart import Cart  # noqa: F401
