from __future__ import annotations

"""
Global Pytest Configuration and Fixtures.

This module sets up the testing environment, including:
1. Path manipulation to ensure the 'src' directory is importable.
2. Shared grammar dictionaries and an on-disk component source tree.
"""

import json
import os
import sys
from pathlib import Path
from typing import Any, Dict, List

import pytest

# -----------------------------------------------------------------------------
# Path Configuration
# -----------------------------------------------------------------------------
_SRC_PATH = os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "src"))
if _SRC_PATH not in sys.path:
    sys.path.insert(0, _SRC_PATH)


EXPECTED_FIXTURE_SPECIFIERS: List[str] = sorted([
    "component:/my-app/components/my-app",
    "template:/my-app/components/my-app",

    "component:/my-app/components/text-editor",
    "template:/my-app/components/text-editor",

    "component:/my-app/components/my-app/page-banner",
    "template:/my-app/components/my-app/page-banner",
    "component:/my-app/components/my-app/page-banner/titleize",
])


def write_tree(root: Path, spec: Dict[str, Any]) -> None:
    """Materialize a nested {name: content-or-dict} description on disk."""
    root.mkdir(parents=True, exist_ok=True)
    for name, content in spec.items():
        target = root / name
        if isinstance(content, dict):
            write_tree(target, content)
        else:
            target.write_text(content, encoding="utf-8")


# -----------------------------------------------------------------------------
# Shared Fixtures
# -----------------------------------------------------------------------------
@pytest.fixture
def module_configuration() -> Dict[str, Any]:
    """Types and collections of a typical component application."""
    return {
        "types": {
            "application": {"definitiveCollection": "main"},
            "component": {"definitiveCollection": "components"},
            "renderer": {"definitiveCollection": "main"},
            "template": {"definitiveCollection": "components"},
            "util": {"definitiveCollection": "utils"},
        },
        "collections": {
            "main": {
                "types": ["application", "renderer"],
            },
            "components": {
                "group": "ui",
                "types": ["component", "template"],
                "defaultType": "component",
                "privateCollections": ["utils"],
            },
            "utils": {
                "unresolvable": True,
            },
        },
    }


@pytest.fixture
def config_root(tmp_path: Path, module_configuration: Dict[str, Any]) -> Path:
    """Directory holding an 'environment.json' in the nested shape."""
    root = tmp_path / "config-fixture"
    root.mkdir()
    environment = {
        "modulePrefix": "my-app",
        "environment": "development",
        "moduleConfiguration": module_configuration,
    }
    (root / "environment.json").write_text(json.dumps(environment, indent=2), encoding="utf-8")
    return root


@pytest.fixture
def source_fixture(tmp_path: Path) -> Path:
    """
    Source tree with a nested component, a flat component and ignored entries.

    Returns the fixture root; the component tree lives under '<root>/src'.
    """
    root = tmp_path / "src-fixture"
    write_tree(root, {
        "src": {
            "ui": {
                "components": {
                    "my-app": {
                        "README.md": "## My-App Component\n",
                        "component.ts": "",
                        "page-banner": {
                            "-utils": {
                                "ignore-me.ts": "",
                            },
                            "component.ts": "",
                            "ignore-me.d.ts": "",
                            "template.hbs": "",
                            "titleize.ts": "",
                        },
                        "template.hbs": "",
                    },
                    "text-editor.hbs": "",
                    "text-editor.ts": "",
                },
                "index.html": "<html>\n    <head></head>\n    <body></body>\n</html>\n",
            },
        },
    })
    return root


@pytest.fixture
def expected_specifiers() -> List[str]:
    """Specifiers the source fixture must resolve to, sorted."""
    return list(EXPECTED_FIXTURE_SPECIFIERS)


@pytest.fixture
def make_tree():
    """Expose write_tree to tests that build their own layouts."""
    return write_tree
