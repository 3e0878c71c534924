from __future__ import annotations

"""
Unit tests for the Module Specifier Resolver.

Verifies type selection (explicit, default, rejected), unresolvable
collections, specifier composition and collision handling.
"""

from pathlib import Path
from typing import Any, Dict, List

import pytest

from resolution_map_builder.core.analysis.specifier_resolver import (
    compose_specifier,
    resolve_module_type,
    resolve_units,
)
from resolution_map_builder.core.analysis.tree_walker import walk_source_tree
from resolution_map_builder.domain.errors import SpecifierCollision
from resolution_map_builder.domain.grammar import GrammarConfig
from resolution_map_builder.domain.resolution_models import DiscoveredUnit, UnitModule


@pytest.fixture
def grammar(module_configuration: Dict[str, Any]) -> GrammarConfig:
    return GrammarConfig.from_dict("my-app", module_configuration)


def _unit(name_path, modules, collection="components", unresolvable=False) -> DiscoveredUnit:
    return DiscoveredUnit(
        name_path=tuple(name_path),
        collection=collection,
        public_collection="components",
        group="ui",
        modules=tuple(UnitModule(hint, path) for hint, path in modules),
        unresolvable=unresolvable,
    )


def test_compose_specifier() -> None:
    assert compose_specifier("component", "my-app", "components", ["my-app", "page-banner"]) == (
        "component:/my-app/components/my-app/page-banner"
    )


def test_resolve_module_type(grammar: GrammarConfig) -> None:
    components = grammar.collections["components"]
    main = grammar.collections["main"]

    assert resolve_module_type(UnitModule(None, "x"), components, grammar) == "component"
    assert resolve_module_type(UnitModule("template", "x"), components, grammar) == "template"
    # Main declares no default type
    assert resolve_module_type(UnitModule(None, "x"), main, grammar) is None
    # Type known to the grammar but foreign to the collection
    assert resolve_module_type(UnitModule("template", "x"), main, grammar) is None
    assert resolve_module_type(UnitModule("unknown", "x"), components, grammar) is None


def test_fixture_resolves_to_expected_specifiers(
        source_fixture: Path, grammar: GrammarConfig, expected_specifiers: List[str]
) -> None:
    resolution = resolve_units(walk_source_tree(str(source_fixture / "src"), grammar), grammar)

    assert resolution.sorted_specifiers() == expected_specifiers
    assert resolution.mapping["component:/my-app/components/my-app"] == "ui/components/my-app/component"
    assert resolution.mapping["template:/my-app/components/text-editor"] == "ui/components/text-editor"


def test_multiple_types_emit_one_specifier_each(grammar: GrammarConfig) -> None:
    unit = _unit(["card"], [("component", "ui/components/card/component"), ("template", "ui/components/card/template")])

    resolution = resolve_units([unit], grammar)

    assert resolution.specifiers == [
        "component:/my-app/components/card",
        "template:/my-app/components/card",
    ]


def test_unresolvable_units_are_skipped_but_descendants_resolve(grammar: GrammarConfig) -> None:
    units = [
        _unit(["my-app", "format-date"], [(None, "ui/components/my-app/utils/format-date")],
              collection="utils", unresolvable=True),
        _unit(["my-app", "widget"], [(None, "ui/components/my-app/utils/format-date/components/widget")]),
    ]

    resolution = resolve_units(units, grammar)

    assert resolution.specifiers == ["component:/my-app/components/my-app/widget"]
    assert resolution.unresolved_collections == {"utils"}


def test_collision_fails_fast(grammar: GrammarConfig) -> None:
    units = [
        _unit(["card"], [(None, "ui/components/card")]),
        _unit(["card"], [("component", "ui/components/card/component")]),
    ]

    with pytest.raises(SpecifierCollision) as exc_info:
        resolve_units(units, grammar)

    assert exc_info.value.specifier == "component:/my-app/components/card"


def test_resolution_is_idempotent(source_fixture: Path, grammar: GrammarConfig) -> None:
    root = str(source_fixture / "src")

    first = resolve_units(walk_source_tree(root, grammar), grammar)
    second = resolve_units(walk_source_tree(root, grammar), grammar)

    assert dict(first.mapping) == dict(second.mapping)
    assert first.specifiers == second.specifiers


def test_walked_units_below_unresolvable_collection_resolve(
        tmp_path: Path, grammar: GrammarConfig, make_tree
) -> None:
    make_tree(tmp_path, {"ui": {"components": {"my-app": {
        "component.ts": "",
        "utils": {
            "helper": {"components": {"widget": {"component.ts": ""}}},
            "other": {"component.ts": "", "template.hbs": ""},
        },
    }}}})

    resolution = resolve_units(walk_source_tree(str(tmp_path), grammar), grammar)

    assert resolution.sorted_specifiers() == [
        "component:/my-app/components/my-app",
        "component:/my-app/components/my-app/widget",
    ]
    assert resolution.mapping["component:/my-app/components/my-app/widget"] == (
        "ui/components/my-app/utils/helper/components/widget/component"
    )
    assert resolution.unresolved_collections == {"utils"}
