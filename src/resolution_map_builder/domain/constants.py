from __future__ import annotations

"""
Global Constants and File Classification Tables.

Centralizes the naming rules the walker applies to every directory entry and
the fixed layout of the emitted artifacts.
"""

from typing import Dict, Tuple

# -----------------------------------------------------------------------------
# IGNORE RULES
# -----------------------------------------------------------------------------

IGNORE_SENTINEL: str = "-"
HIDDEN_PREFIX: str = "."

# -----------------------------------------------------------------------------
# FILE CLASSIFICATION
# -----------------------------------------------------------------------------

# Source files carry no type signal of their own; the collection default applies.
SOURCE_EXTENSIONS: Tuple[str, ...] = (".ts", ".js")

# Markup files imply a type regardless of their stem.
MARKUP_EXTENSIONS: Dict[str, str] = {
    ".hbs": "template",
}

# Declaration-only stubs never define a unit.
DECLARATION_SUFFIXES: Tuple[str, ...] = (".d.ts",)

# -----------------------------------------------------------------------------
# OUTPUT LAYOUT
# -----------------------------------------------------------------------------

OUTPUT_SUBDIR: str = "config"
DECLARATION_FILENAME: str = "module-map.d.ts"
MODULE_MAP_FILENAME: str = "module-map.js"

# Keys accepted in config files
NESTED_CONFIG_KEY: str = "moduleConfiguration"
MODULE_PREFIX_KEY: str = "modulePrefix"
