from __future__ import annotations

"""
Artifact Emitter.

Renders the resolution mapping into the two generated artifacts (a type
declaration stub and a runtime mapping module) and commits them under the
fixed 'config/' directory of the output tree. Both files are staged first and
swapped in together, so a failed build never leaves half an output behind.
"""

import json
import logging
import os
import re
import shutil
import tempfile
from typing import Dict, List, Mapping, Optional, Set, Tuple

from resolution_map_builder.domain.constants import (
    DECLARATION_FILENAME,
    MODULE_MAP_FILENAME,
    OUTPUT_SUBDIR,
)
from resolution_map_builder.domain.errors import EmissionError

logger = logging.getLogger(__name__)

_GENERATED_HEADER = "// Generated by resolution-map-builder. Do not edit."
_BINDING_UNSAFE_RX = re.compile(r"[^A-Za-z0-9_$]")

# -----------------------------------------------------------------------------
# RENDERING
# -----------------------------------------------------------------------------

def render_declaration(mapping: Mapping[str, str]) -> str:
    """
    Render the declaration stub listing every specifier key.

    Args:
        mapping: Specifier to module path mapping.

    Returns:
        str: TypeScript declaration source.
    """
    lines = [_GENERATED_HEADER, "export interface ModuleMap {"]
    for specifier in mapping:
        lines.append(f"  {json.dumps(specifier)}: any;")
    lines.append("}")
    lines.append("declare const map: ModuleMap;")
    lines.append("export default map;")
    return "\n".join(lines) + "\n"


def render_module_map(mapping: Mapping[str, str]) -> str:
    """
    Render the runtime mapping module.

    Each module path is imported once, relative to the 'config/' directory,
    and the default export maps every specifier to its imported binding.

    Args:
        mapping: Specifier to module path mapping.

    Returns:
        str: JavaScript module source.
    """
    bindings: Dict[str, str] = {}
    taken: Set[str] = set()
    imports = []

    for module_path in mapping.values():
        if module_path in bindings:
            continue
        name = _binding_name(module_path, taken)
        bindings[module_path] = name
        imports.append(f"import {{ default as {name} }} from {json.dumps('../' + module_path)};")

    lines = [_GENERATED_HEADER]
    lines.extend(imports)
    if imports:
        lines.append("")

    if not mapping:
        lines.append("export default {};")
    else:
        lines.append("export default {")
        for specifier, module_path in mapping.items():
            lines.append(f"  {json.dumps(specifier)}: {bindings[module_path]},")
        lines.append("};")
    return "\n".join(lines) + "\n"

# -----------------------------------------------------------------------------
# PERSISTENCE
# -----------------------------------------------------------------------------

def emit_artifacts(mapping: Mapping[str, str], output_root: str) -> Dict[str, str]:
    """
    Write both artifacts into '<output_root>/config/' as one unit.

    Only the two artifact files are touched; anything else living in
    'config/' (an environment.json, for instance) is left alone.

    Args:
        mapping: Specifier to module path mapping.
        output_root: Root of the output tree.

    Returns:
        Dict[str, str]: Artifact kind ('declaration', 'module_map') to path.

    Raises:
        EmissionError: If either artifact cannot be committed. Previously
                       generated artifacts, if any, are restored.
    """
    contents = {
        DECLARATION_FILENAME: render_declaration(mapping),
        MODULE_MAP_FILENAME: render_module_map(mapping),
    }
    target_dir = os.path.join(output_root, OUTPUT_SUBDIR)

    try:
        os.makedirs(target_dir, exist_ok=True)
        staging_root = tempfile.mkdtemp(prefix=".module-map-", dir=output_root)
    except OSError as e:
        raise EmissionError(f"Failed to prepare output directory '{target_dir}': {e}") from e

    logger.debug(f"Using staging directory: {staging_root}")
    try:
        staged: Dict[str, str] = {}
        for file_name, content in contents.items():
            staged[file_name] = os.path.join(staging_root, file_name)
            _write_text(staged[file_name], content)
        _commit_files(staged, target_dir, os.path.join(staging_root, "previous"))
    except OSError as e:
        raise EmissionError(f"Failed to emit module map into '{target_dir}': {e}") from e
    finally:
        shutil.rmtree(staging_root, ignore_errors=True)

    generated = {
        "declaration": os.path.join(target_dir, DECLARATION_FILENAME),
        "module_map": os.path.join(target_dir, MODULE_MAP_FILENAME),
    }
    logger.info(f"Module map written to {target_dir} ({len(mapping)} specifiers)")
    return generated

# -----------------------------------------------------------------------------
# PRIVATE HELPERS
# -----------------------------------------------------------------------------

def _binding_name(module_path: str, taken: Set[str]) -> str:
    """Derive a unique JavaScript identifier from a module path."""
    base = f"__{_BINDING_UNSAFE_RX.sub('_', module_path)}__"
    name = base
    counter = 1
    while name in taken:
        name = f"{base}{counter}"
        counter += 1
    taken.add(name)
    return name


def _write_text(path: str, content: str) -> None:
    with open(path, "w", encoding="utf-8", newline="\n") as f:
        f.write(content)


def _commit_files(staged: Dict[str, str], target_dir: str, backup_dir: str) -> None:
    """
    Move staged artifacts over their targets one by one.

    Each existing target is parked in backup_dir first; if any move fails,
    the targets already touched are put back the way they were.
    """
    os.makedirs(backup_dir)
    touched: List[Tuple[str, Optional[str]]] = []

    try:
        for file_name, staged_path in staged.items():
            target = os.path.join(target_dir, file_name)
            backup: Optional[str] = None
            if os.path.exists(target):
                backup = os.path.join(backup_dir, file_name)
                os.replace(target, backup)
            touched.append((target, backup))
            os.replace(staged_path, target)
    except OSError:
        _restore_files(touched)
        raise


def _restore_files(touched: List[Tuple[str, Optional[str]]]) -> None:
    for target, backup in reversed(touched):
        try:
            if backup is not None:
                os.replace(backup, target)
            elif os.path.exists(target):
                os.remove(target)
        except OSError as e:
            logger.error(f"Could not restore '{target}': {e}")
