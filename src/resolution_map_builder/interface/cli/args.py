from __future__ import annotations

"""
CLI Argument Definition and Mapping.

Defines the command-line schema and translates the parsed argparse namespace
into BuildOptions for the builder.
"""

import argparse
import json
from typing import Any, Dict, Optional

from resolution_map_builder.core.pipeline.engine import BuildOptions
from resolution_map_builder.domain.errors import ConfigurationParseError

# -----------------------------------------------------------------------------
# ARGUMENT DEFINITION
# -----------------------------------------------------------------------------

def build_parser() -> argparse.ArgumentParser:
    """
    Construct the argument parser for the resolution-map-builder CLI.

    Returns:
        argparse.ArgumentParser: Configured parser instance.
    """
    p = argparse.ArgumentParser(
        prog="resolution-map-builder",
        description="Generate a module map (specifier -> module path) for a component source tree.",
    )

    # --- Path Management ---
    p.add_argument(
        "src_path",
        help="Source tree to scan.",
    )
    p.add_argument(
        "-o", "--output",
        dest="output_path",
        required=True,
        help="Output root; artifacts are written to <output>/config/.",
    )
    p.add_argument(
        "--base-dir",
        dest="base_dir",
        default=None,
        help="Sub-path of the source tree to start scanning from.",
    )

    # --- Grammar Configuration ---
    p.add_argument(
        "--config-root",
        dest="config_root",
        default=".",
        help="Directory holding the config file (default: current directory).",
    )
    p.add_argument(
        "--config-path",
        dest="config_path",
        default=None,
        help="Config file name relative to --config-root.",
    )
    p.add_argument(
        "--module-prefix",
        dest="default_module_prefix",
        default=None,
        help="Module prefix used when the config file provides none.",
    )
    p.add_argument(
        "--module-config",
        dest="module_config_file",
        default=None,
        help="JSON file with the types/collections used when the config file provides none.",
    )

    # --- Diagnostics ---
    p.add_argument(
        "--log-specifiers",
        action="store_true",
        help="Log every resolved specifier.",
    )
    p.add_argument(
        "--dump-config",
        action="store_true",
        help="Print the effective grammar as JSON and exit.",
    )
    p.add_argument(
        "--json",
        dest="json_output",
        action="store_true",
        help="Print the build result as JSON.",
    )
    p.add_argument(
        "--debug",
        action="store_true",
        help="Elevate logging verbosity to DEBUG.",
    )
    p.add_argument(
        "--log-file",
        dest="log_file",
        default=None,
        help="Also write the build log to this file.",
    )

    return p

# -----------------------------------------------------------------------------
# ARGUMENT MAPPING
# -----------------------------------------------------------------------------

def args_to_options(args: argparse.Namespace) -> BuildOptions:
    """
    Translate the argparse Namespace into builder options.

    Args:
        args: Parsed command-line arguments.

    Returns:
        BuildOptions: Options for ResolutionMapBuilder.

    Raises:
        ConfigurationParseError: If --module-config is not a readable JSON object.
    """
    return BuildOptions(
        base_dir=args.base_dir,
        config_path=args.config_path,
        default_module_prefix=args.default_module_prefix,
        default_module_configuration=_read_module_config(args.module_config_file),
        log_specifiers=bool(args.log_specifiers or args.json_output),
    )

# -----------------------------------------------------------------------------
# HELPERS
# -----------------------------------------------------------------------------

def _read_module_config(path: Optional[str]) -> Optional[Dict[str, Any]]:
    if not path:
        return None
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise ConfigurationParseError(f"Cannot read module configuration '{path}': {e}") from e
    if not isinstance(data, dict):
        raise ConfigurationParseError(f"Module configuration '{path}' must contain a JSON object")
    return data
