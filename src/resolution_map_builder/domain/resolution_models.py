from __future__ import annotations

"""
Resolution Domain Data Models.

Defines the transient structures exchanged between the tree walker and the
specifier resolver, the ResolutionMap accumulator owned by a single build,
and the BuildResult returned to callers.
"""

from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Dict, List, Mapping, Optional, Set, Tuple

from resolution_map_builder.domain.errors import SpecifierCollision
from resolution_map_builder.domain.grammar import CollectionDef

# -----------------------------------------------------------------------------
# WALK STATE
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class WalkContext:
    """
    Immutable state threaded through each recursive walk step.

    Attributes:
        group: Group directory the walk started from, if any.
        collection: Collection governing the units at this level.
        public_collection: Collection name that appears in specifiers.
        namespace: Names of the owning units, outermost first.
        rel_dir: Directory segments from the scan root to this level.
        unit_dir: Whether this level is a unit's own directory.
    """
    group: Optional[str]
    collection: CollectionDef
    public_collection: str
    namespace: Tuple[str, ...] = ()
    rel_dir: Tuple[str, ...] = ()
    unit_dir: bool = False

    @classmethod
    def for_collection_root(
            cls,
            collection: CollectionDef,
            rel_dir: Tuple[str, ...],
            group: Optional[str] = None,
    ) -> WalkContext:
        return cls(group=group, collection=collection, public_collection=collection.name, rel_dir=rel_dir)

    def descend_unit(self, dir_name: str) -> WalkContext:
        """
        Step into a unit directory.

        Its name joins the namespace, unless the unit belongs to an
        unresolvable collection: such units never address their descendants.
        """
        namespace = self.namespace
        if not self.collection.unresolvable:
            namespace = namespace + (dir_name,)
        return replace(
            self,
            namespace=namespace,
            rel_dir=self.rel_dir + (dir_name,),
            unit_dir=True,
        )

    def enter_private(self, dir_name: str, collection: CollectionDef) -> WalkContext:
        """Step into a private collection: the namespace is unchanged."""
        return replace(
            self,
            collection=collection,
            rel_dir=self.rel_dir + (dir_name,),
            unit_dir=False,
        )

    def enter_collection(self, dir_name: str, collection: CollectionDef) -> WalkContext:
        """Leave an unresolvable collection for a resolvable one named by the directory."""
        return replace(
            self,
            collection=collection,
            public_collection=collection.name,
            rel_dir=self.rel_dir + (dir_name,),
            unit_dir=False,
        )


@dataclass(frozen=True)
class UnitModule:
    """
    One module file belonging to a unit.

    Attributes:
        type_hint: Type signalled by the file, or None when the default applies.
        module_path: Extension-less POSIX path relative to the scan root.
    """
    type_hint: Optional[str]
    module_path: str


@dataclass(frozen=True)
class DiscoveredUnit:
    """
    A unit found by the walker, ready for specifier resolution.

    Attributes:
        name_path: Names of the resolvable owning units followed by the unit's own name.
        collection: Name of the governing collection.
        public_collection: Collection name used in specifiers.
        group: Group directory the unit was found under.
        modules: Module files of the unit, in discovery order.
        unresolvable: Whether the governing collection is unresolvable.
    """
    name_path: Tuple[str, ...]
    collection: str
    public_collection: str
    group: Optional[str]
    modules: Tuple[UnitModule, ...]
    unresolvable: bool = False

# -----------------------------------------------------------------------------
# RESOLUTION ACCUMULATOR
# -----------------------------------------------------------------------------

class ResolutionMap:
    """
    Specifier to module path mapping built by exactly one walk.

    Insertion order is discovery order. A specifier can be registered once;
    a second claim raises SpecifierCollision.
    """

    def __init__(self) -> None:
        self._mapping: Dict[str, str] = {}
        self._unresolved: Set[str] = set()

    def add(self, specifier: str, module_path: str) -> None:
        existing = self._mapping.get(specifier)
        if existing is not None:
            raise SpecifierCollision(specifier, existing, module_path)
        self._mapping[specifier] = module_path

    def record_unresolved(self, collection_name: str) -> None:
        self._unresolved.add(collection_name)

    @property
    def mapping(self) -> Mapping[str, str]:
        return MappingProxyType(self._mapping)

    @property
    def specifiers(self) -> List[str]:
        return list(self._mapping)

    @property
    def unresolved_collections(self) -> Set[str]:
        return set(self._unresolved)

    def sorted_specifiers(self) -> List[str]:
        return sorted(self._mapping)

    def __len__(self) -> int:
        return len(self._mapping)

# -----------------------------------------------------------------------------
# BUILD RESULT
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class BuildResult:
    """
    Outcome of one successful build.

    Attributes:
        scan_root: Absolute directory that was walked.
        output_path: Root of the output tree.
        generated_files: Artifact kind ('declaration', 'module_map') to path.
        mapping: Final specifier to module path mapping.
        specifiers: Resolved specifiers when requested, else None.
        unresolved_collections: Unresolvable collections that were walked.
    """
    scan_root: str
    output_path: str
    generated_files: Dict[str, str] = field(default_factory=dict)
    mapping: Dict[str, str] = field(default_factory=dict)
    specifiers: Optional[List[str]] = None
    unresolved_collections: List[str] = field(default_factory=list)
