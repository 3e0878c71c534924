from __future__ import annotations

"""
Module Specifier Resolver.

Turns the walker's unit stream into a ResolutionMap: decides which types
apply to each unit module, composes the canonical specifier strings and
rejects naming collisions.
"""

import logging
from typing import Iterable, Optional, Sequence

from resolution_map_builder.domain.grammar import CollectionDef, GrammarConfig
from resolution_map_builder.domain.resolution_models import (
    DiscoveredUnit,
    ResolutionMap,
    UnitModule,
)

logger = logging.getLogger(__name__)


def compose_specifier(
        type_name: str,
        module_prefix: str,
        collection: str,
        name_path: Sequence[str],
) -> str:
    """
    Build a canonical specifier string.

    Example:
        compose_specifier("component", "my-app", "components", ["my-app", "page-banner"])
        -> "component:/my-app/components/my-app/page-banner"
    """
    return f"{type_name}:/{module_prefix}/{collection}/{'/'.join(name_path)}"


def resolve_module_type(
        module: UnitModule,
        collection: CollectionDef,
        grammar: GrammarConfig,
) -> Optional[str]:
    """
    Decide the type of one unit module.

    Returns:
        Optional[str]: The explicit type when the collection accepts it, the
        collection's default type when no type was signalled, else None.
    """
    if module.type_hint is None:
        return collection.default_type

    if module.type_hint in collection.types:
        return module.type_hint

    if module.type_hint in grammar.types:
        definitive = grammar.collection_for(module.type_hint).name
        logger.debug(
            f"'{module.module_path}': type '{module.type_hint}' belongs to "
            f"'{definitive}', not '{collection.name}'. Skipped."
        )
    return None


def resolve_units(units: Iterable[DiscoveredUnit], grammar: GrammarConfig) -> ResolutionMap:
    """
    Resolve every discovered unit into specifiers.

    Units of unresolvable collections contribute nothing themselves; their
    nested units arrive separately from the walker and are resolved normally.
    A unit with several qualifying module files yields one specifier each.

    Args:
        units: Walker output, in walk order.
        grammar: The grammar of this build.

    Returns:
        ResolutionMap: The populated map.

    Raises:
        SpecifierCollision: If two modules resolve to the same specifier.
    """
    resolution = ResolutionMap()

    for unit in units:
        if unit.unresolvable:
            resolution.record_unresolved(unit.collection)
            logger.debug(f"Not exposing '{unit.modules[0].module_path}' of unresolvable '{unit.collection}'")
            continue

        collection = grammar.collections[unit.collection]
        for module in unit.modules:
            type_name = resolve_module_type(module, collection, grammar)
            if type_name is None:
                logger.debug(f"No type applies to '{module.module_path}'. Skipped.")
                continue

            specifier = compose_specifier(
                type_name, grammar.module_prefix, unit.public_collection, unit.name_path
            )
            resolution.add(specifier, module.module_path)
            logger.debug(f"{specifier} -> {module.module_path}")

    return resolution
