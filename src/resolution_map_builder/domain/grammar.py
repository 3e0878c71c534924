from __future__ import annotations

"""
Type/Collection Grammar Model.

Immutable in-memory form of the module configuration: the module prefix, the
declared types and the collections they live in. The grammar is validated once
at construction so that no inconsistency can surface in the middle of a walk.
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, FrozenSet, List, Mapping, Optional

from resolution_map_builder.domain.errors import ConfigurationInvalid

# -----------------------------------------------------------------------------
# GRAMMAR DEFINITIONS
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class TypeDef:
    """
    A module type such as 'component' or 'template'.

    Attributes:
        name: Type identifier used as the specifier scheme.
        definitive_collection: The collection this type canonically belongs to.
    """
    name: str
    definitive_collection: str


@dataclass(frozen=True)
class CollectionDef:
    """
    A named grouping of units such as 'components' or 'utils'.

    Attributes:
        name: Collection identifier (also its directory name).
        types: Types its member units may take.
        group: Optional namespace directory the collection lives under.
        default_type: Type used when a unit carries no explicit type signal.
        private_collections: Collections that may be nested inside its units.
        unresolvable: Whether direct members are excluded from the map.
    """
    name: str
    types: FrozenSet[str] = frozenset()
    group: Optional[str] = None
    default_type: Optional[str] = None
    private_collections: FrozenSet[str] = frozenset()
    unresolvable: bool = False


@dataclass(frozen=True)
class GrammarConfig:
    """
    Complete, validated grammar for one build invocation.

    Attributes:
        module_prefix: Namespace prepended to every specifier path.
        types: Read-only mapping of type name to definition.
        collections: Read-only mapping of collection name to definition.
    """
    module_prefix: str
    types: Mapping[str, TypeDef] = field(default_factory=dict)
    collections: Mapping[str, CollectionDef] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "types", MappingProxyType(dict(self.types)))
        object.__setattr__(self, "collections", MappingProxyType(dict(self.collections)))
        _validate(self)

    # -------------------------------------------------------------------------
    # Lookups
    # -------------------------------------------------------------------------

    def collection_for(self, type_name: str) -> CollectionDef:
        """
        Return the definitive collection of a type.

        Raises:
            ConfigurationInvalid: If the type is not declared.
        """
        type_def = self.types.get(type_name)
        if type_def is None:
            raise ConfigurationInvalid(f"Unknown type '{type_name}'")
        return self.collections[type_def.definitive_collection]

    def is_private(self, collection_name: str, parent_collection_name: str) -> bool:
        """Check whether a collection may be nested privately inside another."""
        parent = self.collections.get(parent_collection_name)
        if parent is None:
            return False
        return collection_name in parent.private_collections

    def group_names(self) -> FrozenSet[str]:
        return frozenset(c.group for c in self.collections.values() if c.group)

    def collections_in_group(self, group: str) -> Dict[str, CollectionDef]:
        return {n: c for n, c in self.collections.items() if c.group == group}

    def ungrouped_collections(self) -> Dict[str, CollectionDef]:
        return {n: c for n, c in self.collections.items() if not c.group}

    # -------------------------------------------------------------------------
    # Serialization
    # -------------------------------------------------------------------------

    @classmethod
    def from_dict(cls, module_prefix: Any, module_configuration: Any) -> GrammarConfig:
        """
        Build a grammar from the JSON (camelCase) module configuration.

        Args:
            module_prefix: Value of 'modulePrefix'.
            module_configuration: Object holding 'types' and 'collections'.

        Returns:
            GrammarConfig: The validated grammar.

        Raises:
            ConfigurationInvalid: If the structure or references are invalid.
        """
        if not isinstance(module_configuration, dict):
            raise ConfigurationInvalid("Module configuration must be an object")

        raw_types = module_configuration.get("types") or {}
        raw_collections = module_configuration.get("collections") or {}
        if not isinstance(raw_types, dict) or not isinstance(raw_collections, dict):
            raise ConfigurationInvalid("'types' and 'collections' must be objects")

        types: Dict[str, TypeDef] = {}
        for name, raw in raw_types.items():
            if not isinstance(raw, dict) or "definitiveCollection" not in raw:
                raise ConfigurationInvalid(f"Type '{name}' has no definitiveCollection")
            types[name] = TypeDef(name=name, definitive_collection=raw["definitiveCollection"])

        collections: Dict[str, CollectionDef] = {}
        for name, raw in raw_collections.items():
            if not isinstance(raw, dict):
                raise ConfigurationInvalid(f"Collection '{name}' must be an object")
            collections[name] = CollectionDef(
                name=name,
                types=frozenset(_as_name_list(raw.get("types"), f"{name}.types")),
                group=raw.get("group") or None,
                default_type=raw.get("defaultType") or None,
                private_collections=frozenset(
                    _as_name_list(raw.get("privateCollections"), f"{name}.privateCollections")
                ),
                unresolvable=bool(raw.get("unresolvable", False)),
            )

        return cls(module_prefix=module_prefix, types=types, collections=collections)

    def to_dict(self) -> Dict[str, Any]:
        """Render the grammar back into its JSON (flat) form."""
        collections: Dict[str, Any] = {}
        for name, c in self.collections.items():
            entry: Dict[str, Any] = {"types": sorted(c.types)}
            if c.group:
                entry["group"] = c.group
            if c.default_type:
                entry["defaultType"] = c.default_type
            if c.private_collections:
                entry["privateCollections"] = sorted(c.private_collections)
            if c.unresolvable:
                entry["unresolvable"] = True
            collections[name] = entry

        return {
            "modulePrefix": self.module_prefix,
            "types": {n: {"definitiveCollection": t.definitive_collection} for n, t in self.types.items()},
            "collections": collections,
        }

# -----------------------------------------------------------------------------
# PRIVATE HELPERS
# -----------------------------------------------------------------------------

def _as_name_list(value: Any, where: str) -> List[str]:
    if value is None:
        return []
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise ConfigurationInvalid(f"'{where}' must be a list of names")
    return value


def _validate(grammar: GrammarConfig) -> None:
    """Check every cross reference of the grammar, failing on the first error."""
    if not isinstance(grammar.module_prefix, str) or not grammar.module_prefix:
        raise ConfigurationInvalid("modulePrefix must be a non-empty string")

    for type_def in grammar.types.values():
        if type_def.definitive_collection not in grammar.collections:
            raise ConfigurationInvalid(
                f"Type '{type_def.name}' references unknown collection "
                f"'{type_def.definitive_collection}'"
            )

    for coll in grammar.collections.values():
        for type_name in sorted(coll.types):
            if type_name not in grammar.types:
                raise ConfigurationInvalid(
                    f"Collection '{coll.name}' references unknown type '{type_name}'"
                )
        if coll.default_type is not None and coll.default_type not in coll.types:
            raise ConfigurationInvalid(
                f"Collection '{coll.name}' default type '{coll.default_type}' "
                f"is not one of its types"
            )
        for private_name in sorted(coll.private_collections):
            if private_name not in grammar.collections:
                raise ConfigurationInvalid(
                    f"Collection '{coll.name}' references unknown private "
                    f"collection '{private_name}'"
                )
