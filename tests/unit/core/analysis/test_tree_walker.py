from __future__ import annotations

"""
Unit tests for the Component Source Tree Walker.

Verifies file classification, ignore rules, unit grouping, nesting through
private collections and deterministic ordering.
"""

from pathlib import Path
from typing import Any, Dict, List
from unittest.mock import patch

import pytest

from resolution_map_builder.core.analysis.tree_walker import (
    classify_file,
    is_ignored,
    walk_source_tree,
)
from resolution_map_builder.domain.errors import SourceTreeUnreadable
from resolution_map_builder.domain.grammar import GrammarConfig
from resolution_map_builder.domain.resolution_models import DiscoveredUnit, UnitModule
from resolution_map_builder.infra.fs import list_directory as real_list_directory


@pytest.fixture
def grammar(module_configuration: Dict[str, Any]) -> GrammarConfig:
    return GrammarConfig.from_dict("my-app", module_configuration)


def _by_name(units: List[DiscoveredUnit]) -> Dict[str, DiscoveredUnit]:
    return {"/".join(u.name_path): u for u in units}


@pytest.mark.parametrize("file_name, expected", [
    ("component.ts", ("component", None)),
    ("text-editor.js", ("text-editor", None)),
    ("template.hbs", ("template", "template")),
    ("ignore-me.d.ts", None),
    ("README.md", None),
    ("index.html", None),
])
def test_classify_file(file_name: str, expected) -> None:
    assert classify_file(file_name) == expected


@pytest.mark.parametrize("name, ignored", [
    ("-utils", True),
    (".git", True),
    ("utils", False),
    ("my-app", False),
])
def test_is_ignored(name: str, ignored: bool) -> None:
    assert is_ignored(name) is ignored


def test_walks_fixture_units(source_fixture: Path, grammar: GrammarConfig) -> None:
    units = list(walk_source_tree(str(source_fixture / "src"), grammar))
    by_name = _by_name(units)

    assert set(by_name) == {
        "my-app",
        "text-editor",
        "my-app/page-banner",
        "my-app/page-banner/titleize",
    }

    my_app = by_name["my-app"]
    assert my_app.group == "ui"
    assert my_app.public_collection == "components"
    assert [(m.type_hint, m.module_path) for m in my_app.modules] == [
        ("component", "ui/components/my-app/component"),
        ("template", "ui/components/my-app/template"),
    ]

    text_editor = by_name["text-editor"]
    assert [(m.type_hint, m.module_path) for m in text_editor.modules] == [
        ("template", "ui/components/text-editor"),
        (None, "ui/components/text-editor"),
    ]

    titleize = by_name["my-app/page-banner/titleize"]
    assert [m.type_hint for m in titleize.modules] == [None]
    assert titleize.modules[0].module_path == "ui/components/my-app/page-banner/titleize"


def test_sentinel_entries_are_not_descended(source_fixture: Path, grammar: GrammarConfig) -> None:
    units = list(walk_source_tree(str(source_fixture / "src"), grammar))
    paths = [m.module_path for u in units for m in u.modules]

    assert not any("ignore-me" in p for p in paths)
    assert not any("README" in p for p in paths)


def test_walk_order_is_deterministic(source_fixture: Path, grammar: GrammarConfig) -> None:
    root = str(source_fixture / "src")

    first = [u.name_path for u in walk_source_tree(root, grammar)]
    second = [u.name_path for u in walk_source_tree(root, grammar)]

    assert first == second
    # Own markers first, then file units, then nested directories
    assert first == [
        ("text-editor",),
        ("my-app",),
        ("my-app", "page-banner"),
        ("my-app", "page-banner", "titleize"),
    ]


def test_private_collection_units_keep_owner_namespace(tmp_path: Path, grammar: GrammarConfig, make_tree) -> None:
    make_tree(tmp_path, {
        "ui": {"components": {"my-app": {
            "component.ts": "",
            "utils": {
                "format-date.ts": "",
                "deep": {"nested.ts": ""},
            },
        }}},
    })

    units = _by_name(list(walk_source_tree(str(tmp_path), grammar)))

    format_date = units["my-app/format-date"]
    assert format_date.collection == "utils"
    assert format_date.public_collection == "components"
    assert format_date.unresolvable
    assert format_date.modules[0].module_path == "ui/components/my-app/utils/format-date"

    nested = units["my-app/nested"]
    assert nested.collection == "utils"
    assert nested.modules[0].module_path == "ui/components/my-app/utils/deep/nested"


def test_ungrouped_collection_at_top_level(tmp_path: Path, grammar: GrammarConfig, make_tree) -> None:
    make_tree(tmp_path, {
        "main": {"application.ts": "", "renderer.ts": ""},
        "unrelated": {"thing.ts": ""},
        "index.ts": "",
    })

    units = list(walk_source_tree(str(tmp_path), grammar))

    assert [u.name_path for u in units] == [("application",), ("renderer",)]
    assert all(u.group is None and u.collection == "main" for u in units)


def test_group_ignores_foreign_collections(tmp_path: Path, grammar: GrammarConfig, make_tree) -> None:
    make_tree(tmp_path, {"ui": {"main": {"application.ts": ""}, "styles": {"app.ts": ""}}})

    assert list(walk_source_tree(str(tmp_path), grammar)) == []


def test_empty_tree_yields_nothing(tmp_path: Path, grammar: GrammarConfig) -> None:
    assert list(walk_source_tree(str(tmp_path), grammar)) == []


def test_missing_root_fails_eagerly(tmp_path: Path, grammar: GrammarConfig) -> None:
    with pytest.raises(SourceTreeUnreadable):
        walk_source_tree(str(tmp_path / "missing"), grammar)


def test_unreadable_subdirectory_is_skipped(tmp_path: Path, grammar: GrammarConfig, make_tree) -> None:
    make_tree(tmp_path, {"ui": {"components": {"a.ts": "", "broken": {"b.ts": ""}}}})
    broken = str(tmp_path / "ui" / "components" / "broken")

    def fake_list(path: str):
        if path == broken:
            raise PermissionError("denied")
        return real_list_directory(path)

    with patch("resolution_map_builder.core.analysis.tree_walker.list_directory", side_effect=fake_list):
        units = list(walk_source_tree(str(tmp_path), grammar))

    assert [u.name_path for u in units] == [("a",)]


def test_resolvable_collection_below_unresolvable_one(tmp_path: Path, grammar: GrammarConfig, make_tree) -> None:
    make_tree(tmp_path, {"ui": {"components": {"my-app": {
        "component.ts": "",
        "utils": {"helper": {
            "index.ts": "",
            "components": {"widget": {"component.ts": ""}},
        }},
    }}}})

    units = list(walk_source_tree(str(tmp_path), grammar))
    widget = [u for u in units if not u.unresolvable and u.name_path == ("my-app", "widget")]

    assert len(widget) == 1
    assert widget[0].collection == "components"
    assert widget[0].public_collection == "components"
    assert widget[0].modules == (
        UnitModule("component", "ui/components/my-app/utils/helper/components/widget/component"),
    )
    assert [u.collection for u in units if u.unresolvable] == ["utils"]


def test_directory_symlinks_are_not_followed(tmp_path: Path, grammar: GrammarConfig, make_tree) -> None:
    make_tree(tmp_path, {"ui": {"components": {"my-app": {"component.ts": ""}}}})
    my_app = tmp_path / "ui" / "components" / "my-app"
    try:
        (my_app / "loop").symlink_to(my_app, target_is_directory=True)
    except (OSError, NotImplementedError):
        pytest.skip("symlinks not supported here")

    units = list(walk_source_tree(str(tmp_path), grammar))

    assert [u.name_path for u in units] == [("my-app",)]
