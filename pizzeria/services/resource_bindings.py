"""Resource Bindings — which verbs each resource accepts, and the dispatchers for them.

Invariants:
    - Every binding names a resource present in the registry (checked at build time)
    - menu is read-only; users/tokens/carts accept all four verbs
    - users create is public so new customers can register before holding a token

Design Decisions:
    - Built once per process and shared: dispatchers hold no per-request state
"""

from pizzeria.config import Settings
from pizzeria.core.dispatch_types import ResourceBinding
from pizzeria.core.domain_types import ResourceName, Verb
from pizzeria.core.repository_protocols import Clock
from pizzeria.infrastructure.clock import now_ms
from pizzeria.services.authorizer import Authorizer
from pizzeria.services.dispatcher import Dispatcher
from pizzeria.services.model_registry import ModelRegistry, build_registry

DEFAULT_BINDINGS = (
    ResourceBinding(
        ResourceName.USERS.value, public_verbs=frozenset({Verb.CREATE}),
    ),
    ResourceBinding(ResourceName.TOKENS.value),
    ResourceBinding(
        ResourceName.MENU.value, allowed_verbs=frozenset({Verb.READ}),
    ),
    ResourceBinding(ResourceName.CARTS.value),
)


def build_dispatchers(
    registry: ModelRegistry,
    bindings: tuple[ResourceBinding, ...] = DEFAULT_BINDINGS,
    clock: Clock = now_ms,
) -> dict[str, Dispatcher]:
    """One dispatcher per binding, all sharing one authorizer."""
    authorizer = Authorizer(registry, clock=clock)
    return {
        binding.resource: Dispatcher(binding, registry, authorizer)
        for binding in bindings
    }


def build_application_dispatchers(
    settings: Settings, clock: Clock = now_ms,
) -> dict[str, Dispatcher]:
    return build_dispatchers(build_registry(settings, clock), clock=clock)
