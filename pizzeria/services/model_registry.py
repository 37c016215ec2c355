"""Model Registry — explicit resource name -> model factory mapping.

Invariants:
    - Every mapping is visible in build_registry: no getattr magic, no auto-discovery
    - The registry is immutable after construction
    - resolve() of an unknown name raises UnknownResourceError (a configuration
      error surfaced when a dispatcher is bound, never mid-request)

Design Decisions:
    - functools.partial binds settings and the clock into each model class so every
      factory shares the (verb, data, db) call shape
"""

from functools import partial
from types import MappingProxyType
from typing import Mapping

from pizzeria.config import Settings
from pizzeria.core.domain_types import ResourceName
from pizzeria.core.errors import UnknownResourceError
from pizzeria.core.repository_protocols import Clock, ModelFactory
from pizzeria.infrastructure.clock import now_ms
from pizzeria.services.cart_model import CartModel
from pizzeria.services.menu_model import MenuModel
from pizzeria.services.token_model import TokenModel
from pizzeria.services.user_model import UserModel


class ModelRegistry:
    """Read-only lookup from resource name to model factory."""

    def __init__(self, factories: Mapping[str, ModelFactory]):
        self._factories = MappingProxyType(dict(factories))

    def resolve(self, name: str) -> ModelFactory:
        factory = self._factories.get(name)
        if factory is None:
            raise UnknownResourceError(name)
        return factory

    def __contains__(self, name: object) -> bool:
        return name in self._factories

    @property
    def names(self) -> frozenset[str]:
        return frozenset(self._factories)


def build_registry(settings: Settings, clock: Clock = now_ms) -> ModelRegistry:
    """The application's resources. Adding one means editing this dict."""
    secret = settings.password_hash_secret
    return ModelRegistry({
        ResourceName.USERS.value: partial(
            UserModel,
            password_secret=secret,
            password_iterations=settings.password_hash_iterations,
        ),
        ResourceName.TOKENS.value: partial(
            TokenModel,
            ttl_seconds=settings.token_ttl_seconds,
            password_secret=secret,
            clock=clock,
        ),
        ResourceName.MENU.value: MenuModel,
        ResourceName.CARTS.value: CartModel,
    })
