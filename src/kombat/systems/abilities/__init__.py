from kombat.systems.abilities.base import (
    AbilityContext,
    AbilityOutcome,
    AbilityResolver,
    BoardAbilityResolver,
)
from kombat.systems.abilities.registry import (
    create_resolver_registry,
    register_resolver,
    register_resolvers,
    unregister_resolver,
    variant_key,
)

__all__ = [
    "AbilityContext",
    "AbilityOutcome",
    "AbilityResolver",
    "BoardAbilityResolver",
    "create_resolver_registry",
    "register_resolver",
    "register_resolvers",
    "unregister_resolver",
    "variant_key",
]
