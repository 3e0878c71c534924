from __future__ import annotations

"""
Core build orchestration.

This module coordinates one resolution-map build:
1. Loads the grammar (config file or caller defaults).
2. Resolves the scan root (source path plus optional base directory).
3. Walks the tree and resolves specifiers into a fresh ResolutionMap.
4. Emits the declaration stub and mapping module.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from resolution_map_builder.core.analysis.specifier_resolver import resolve_units
from resolution_map_builder.core.analysis.tree_walker import walk_source_tree
from resolution_map_builder.core.pipeline.emitter import emit_artifacts
from resolution_map_builder.core.services.config_loader import load_grammar
from resolution_map_builder.domain.grammar import GrammarConfig
from resolution_map_builder.domain.resolution_models import BuildResult, ResolutionMap
from resolution_map_builder.infra.fs import normalize_path, resolve_scan_root

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BuildOptions:
    """
    Builder options.

    Attributes:
        base_dir: Sub-path of the source tree to start scanning from.
        config_path: Config file name relative to the config root.
        default_module_prefix: Prefix used when no config file provides one.
        default_module_configuration: Types/collections used when no config
                                      file provides them.
        log_specifiers: Expose the resolved specifiers after each build.
    """
    base_dir: Optional[str] = None
    config_path: Optional[str] = None
    default_module_prefix: Optional[str] = None
    default_module_configuration: Optional[Dict[str, Any]] = None
    log_specifiers: bool = False


def build_resolution_map(scan_root: str, grammar: GrammarConfig) -> ResolutionMap:
    """Walk one tree and resolve it against the grammar."""
    return resolve_units(walk_source_tree(scan_root, grammar), grammar)


class ResolutionMapBuilder:
    """
    Generates the module map for a component source tree.

    Each call to build() loads the grammar, walks the tree and writes the
    artifacts from scratch; nothing is carried over between builds except
    the last exposed specifier list.

    Attributes:
        src_path: Source tree root.
        config_root: Directory holding the config file.
        options: Build options.
        specifiers: Resolved specifiers of the last build, populated only
                    when options.log_specifiers is set.
    """

    def __init__(self, src_path: str, config_root: str, options: Optional[BuildOptions] = None):
        self.src_path = src_path
        self.config_root = config_root
        self.options = options or BuildOptions()
        self.specifiers: Optional[List[str]] = None

    def load_grammar(self) -> GrammarConfig:
        return load_grammar(
            normalize_path(self.config_root, "."),
            self.options.config_path,
            default_module_prefix=self.options.default_module_prefix,
            default_module_configuration=self.options.default_module_configuration,
        )

    def build(self, output_path: str) -> BuildResult:
        """
        Run a complete build.

        Args:
            output_path: Root of the output tree; artifacts land in 'config/'.

        Returns:
            BuildResult: Summary of the generated map.

        Raises:
            ResolutionMapError: On any fatal failure; nothing is emitted then.
        """
        grammar = self.load_grammar()
        scan_root = resolve_scan_root(self.src_path, self.options.base_dir)
        logger.info(f"Building module map for: {scan_root}")

        resolution = build_resolution_map(scan_root, grammar)
        logger.info(f"Resolved {len(resolution)} specifiers")

        output_root = normalize_path(output_path, ".")
        generated = emit_artifacts(resolution.mapping, output_root)

        specifiers: Optional[List[str]] = None
        if self.options.log_specifiers:
            specifiers = resolution.specifiers
            for specifier in resolution.sorted_specifiers():
                logger.info(f"  {specifier}")
        self.specifiers = specifiers

        return BuildResult(
            scan_root=scan_root,
            output_path=output_root,
            generated_files=generated,
            mapping=dict(resolution.mapping),
            specifiers=specifiers,
            unresolved_collections=sorted(resolution.unresolved_collections),
        )
