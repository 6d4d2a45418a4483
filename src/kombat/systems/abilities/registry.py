from __future__ import annotations

import logging
from importlib import metadata
from typing import Dict, Iterable

from kombat.components.ability import AbilityVariant
from kombat.systems.abilities.annihilate import RandomNResolver, TypeAnnihilateResolver
from kombat.systems.abilities.area import AreaRandomResolver, PlusShapeResolver, TargetedAreaResolver
from kombat.systems.abilities.base import AbilityResolver
from kombat.systems.abilities.lines import ColumnRandomResolver, RowRandomResolver
from kombat.systems.abilities.transform import ConversionResolver, ScrambleResolver

logger = logging.getLogger(__name__)

_PLUGIN_GROUP = "kombat.ability_resolvers"
_plugin_loaded = False
_registry: Dict[str, AbilityResolver] = {}


def variant_key(variant: AbilityVariant | str) -> str:
    return variant.value if isinstance(variant, AbilityVariant) else str(variant)


def register_resolver(resolver: AbilityResolver) -> None:
    """Register a resolver provided by external content."""

    _registry[resolver.name] = resolver


def register_resolvers(resolvers: Iterable[AbilityResolver]) -> None:
    for resolver in resolvers:
        register_resolver(resolver)


def unregister_resolver(name: str) -> None:
    _registry.pop(name, None)


def _load_entry_point_resolvers() -> None:
    global _plugin_loaded
    if _plugin_loaded:
        return
    candidates = metadata.entry_points().select(group=_PLUGIN_GROUP)
    for entry_point in candidates:
        try:
            loaded = entry_point.load()
        except (ImportError, AttributeError) as exc:
            logger.warning("Skipping ability resolver plugin %s: %s", entry_point.name, exc)
            continue
        _register_from_object(loaded)
    _plugin_loaded = True


def _register_from_object(obj):
    if obj is None:
        return
    if hasattr(obj, "resolve") and hasattr(obj, "name"):
        register_resolver(obj)  # type: ignore[arg-type]
        return
    if callable(obj):
        _register_from_object(obj())
        return
    if isinstance(obj, dict):
        for value in obj.values():
            _register_from_object(value)
        return
    if isinstance(obj, (list, tuple, set, frozenset)):
        for item in obj:
            _register_from_object(item)
        return


def _builtin_resolvers() -> Dict[str, AbilityResolver]:
    resolvers: Iterable[AbilityResolver] = (
        AreaRandomResolver(),
        TargetedAreaResolver(),
        RowRandomResolver(),
        ColumnRandomResolver(),
        TypeAnnihilateResolver(),
        ConversionResolver(),
        ScrambleResolver(),
        PlusShapeResolver(),
        RandomNResolver(),
    )
    return {resolver.name: resolver for resolver in resolvers}


def create_resolver_registry(overrides: Dict[str, AbilityResolver] | None = None) -> Dict[str, AbilityResolver]:
    """Combine built-in, plugin, and override resolvers into a single map."""

    _load_entry_point_resolvers()
    combined: Dict[str, AbilityResolver] = _builtin_resolvers()
    combined.update(_registry)
    if overrides:
        combined.update(overrides)
    return combined


__all__ = [
    "create_resolver_registry",
    "register_resolver",
    "register_resolvers",
    "unregister_resolver",
    "variant_key",
]
