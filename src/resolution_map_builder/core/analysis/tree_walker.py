from __future__ import annotations

"""
Component Source Tree Walker.

Traverses the scan root depth-first in name order and classifies every
directory as a group, a collection root or a unit, following the grammar.
Yields one DiscoveredUnit per unit found, including units of unresolvable
collections so their resolvable descendants are never missed.
"""

import logging
import os
from typing import Dict, Iterator, List, Optional, Tuple

from resolution_map_builder.domain.constants import (
    DECLARATION_SUFFIXES,
    HIDDEN_PREFIX,
    IGNORE_SENTINEL,
    MARKUP_EXTENSIONS,
    SOURCE_EXTENSIONS,
)
from resolution_map_builder.domain.errors import SourceTreeUnreadable
from resolution_map_builder.domain.grammar import GrammarConfig
from resolution_map_builder.domain.resolution_models import (
    DiscoveredUnit,
    UnitModule,
    WalkContext,
)
from resolution_map_builder.infra.fs import list_directory, to_module_path

logger = logging.getLogger(__name__)


# ==============================================================================
# PUBLIC API
# ==============================================================================

def walk_source_tree(root: str, grammar: GrammarConfig) -> Iterator[DiscoveredUnit]:
    """
    Walk a source tree and yield its units lazily.

    The root is listed eagerly so an unreadable root fails at call time;
    everything below it is visited on demand.

    Args:
        root: Absolute scan root.
        grammar: Grammar deciding which directories are groups/collections.

    Returns:
        Iterator[DiscoveredUnit]: Units in deterministic walk order.

    Raises:
        SourceTreeUnreadable: If the root cannot be listed.
    """
    try:
        entries = list_directory(root)
    except OSError as e:
        raise SourceTreeUnreadable(f"Cannot read source tree '{root}': {e}") from e

    logger.debug(f"Walking source tree: {root}")
    return _walk_top_level(entries, grammar)


def is_ignored(name: str) -> bool:
    """Entries prefixed with the ignore sentinel (or hidden) are never visited."""
    return name.startswith(IGNORE_SENTINEL) or name.startswith(HIDDEN_PREFIX)


def classify_file(file_name: str) -> Optional[Tuple[str, Optional[str]]]:
    """
    Classify a file name for unit discovery.

    Args:
        file_name: Base name of the file.

    Returns:
        Optional[Tuple[str, Optional[str]]]: (stem, type hint) for recognised
        files, where a None hint means "use the default type"; None for files
        that never define a unit.
    """
    if file_name.endswith(DECLARATION_SUFFIXES):
        return None

    stem, ext = os.path.splitext(file_name)
    if not stem:
        return None
    if ext in MARKUP_EXTENSIONS:
        return stem, MARKUP_EXTENSIONS[ext]
    if ext in SOURCE_EXTENSIONS:
        return stem, None
    return None


# ==============================================================================
# TRAVERSAL
# ==============================================================================

def _walk_top_level(entries: List[os.DirEntry], grammar: GrammarConfig) -> Iterator[DiscoveredUnit]:
    groups = grammar.group_names()
    ungrouped = grammar.ungrouped_collections()

    for entry in entries:
        if is_ignored(entry.name) or not entry.is_dir(follow_symlinks=False):
            continue

        if entry.name in groups:
            yield from _walk_group(entry.path, entry.name, grammar)
        elif entry.name in ungrouped:
            ctx = WalkContext.for_collection_root(ungrouped[entry.name], (entry.name,))
            yield from _walk_level(entry.path, ctx, grammar)


def _walk_group(path: str, group: str, grammar: GrammarConfig) -> Iterator[DiscoveredUnit]:
    """Enter every collection directory declared for this group."""
    members = grammar.collections_in_group(group)

    for entry in _safe_list(path):
        if is_ignored(entry.name) or not entry.is_dir(follow_symlinks=False):
            continue
        collection = members.get(entry.name)
        if collection is None:
            continue
        ctx = WalkContext.for_collection_root(collection, (group, entry.name), group=group)
        yield from _walk_level(entry.path, ctx, grammar)


def _walk_level(path: str, ctx: WalkContext, grammar: GrammarConfig) -> Iterator[DiscoveredUnit]:
    """
    Visit one directory inside a collection.

    Files named after a type of the governing collection mark the enclosing
    unit directory; other recognised files are units of their own. Sibling
    files sharing a stem form a single unit. Sub-directories are private
    collections, nested units, or, below an unresolvable collection, a way
    back into a resolvable collection. Symlinked directories are not followed.
    """
    own_modules: List[UnitModule] = []
    file_units: Dict[str, List[UnitModule]] = {}
    subdirs: List[os.DirEntry] = []

    for entry in _safe_list(path):
        if is_ignored(entry.name):
            logger.debug(f"Ignoring '{entry.path}'")
            continue
        if entry.is_dir(follow_symlinks=False):
            subdirs.append(entry)
            continue

        classified = classify_file(entry.name)
        if classified is None:
            continue
        stem, type_hint = classified
        module_path = to_module_path(ctx.rel_dir, stem)

        if ctx.unit_dir and stem in ctx.collection.types:
            own_modules.append(UnitModule(type_hint=stem, module_path=module_path))
        else:
            file_units.setdefault(stem, []).append(UnitModule(type_hint=type_hint, module_path=module_path))

    if own_modules:
        yield _make_unit(ctx, ctx.namespace, own_modules)

    for stem in sorted(file_units):
        yield _make_unit(ctx, ctx.namespace + (stem,), file_units[stem])

    for entry in subdirs:
        if grammar.is_private(entry.name, ctx.collection.name):
            child = ctx.enter_private(entry.name, grammar.collections[entry.name])
        elif ctx.collection.unresolvable and _is_resolvable(entry.name, grammar):
            child = ctx.enter_collection(entry.name, grammar.collections[entry.name])
        else:
            child = ctx.descend_unit(entry.name)
        yield from _walk_level(entry.path, child, grammar)


# ==============================================================================
# PRIVATE HELPERS
# ==============================================================================

def _make_unit(ctx: WalkContext, name_path: Tuple[str, ...], modules: List[UnitModule]) -> DiscoveredUnit:
    return DiscoveredUnit(
        name_path=name_path,
        collection=ctx.collection.name,
        public_collection=ctx.public_collection,
        group=ctx.group,
        modules=tuple(modules),
        unresolvable=ctx.collection.unresolvable,
    )


def _is_resolvable(name: str, grammar: GrammarConfig) -> bool:
    collection = grammar.collections.get(name)
    return collection is not None and not collection.unresolvable


def _safe_list(path: str) -> List[os.DirEntry]:
    """List a nested directory; unreadable sub-directories are skipped."""
    try:
        return list_directory(path)
    except OSError as e:
        logger.warning(f"Skipping unreadable directory '{path}': {e}")
        return []
