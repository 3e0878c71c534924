from __future__ import annotations

"""
Grammar Configuration Loader.

Reads the JSON module configuration from disk, classifies it as one of the
supported shapes (flat or nested under 'moduleConfiguration'), merges caller
defaults into missing parts and normalizes the result into a GrammarConfig.
"""

import json
import logging
import os
from dataclasses import dataclass
from typing import Any, Dict, Optional, Union

from resolution_map_builder.domain.constants import MODULE_PREFIX_KEY, NESTED_CONFIG_KEY
from resolution_map_builder.domain.errors import (
    ConfigurationInvalid,
    ConfigurationMissing,
    ConfigurationParseError,
)
from resolution_map_builder.domain.grammar import GrammarConfig

logger = logging.getLogger(__name__)

# -----------------------------------------------------------------------------
# CONFIG SHAPES
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class FlatConfigShape:
    """{"modulePrefix": ..., "types": {...}, "collections": {...}}"""
    module_prefix: Optional[str]
    types: Dict[str, Any]
    collections: Dict[str, Any]


@dataclass(frozen=True)
class NestedConfigShape:
    """{"modulePrefix": ..., "moduleConfiguration": {"types": ..., "collections": ...}}"""
    module_prefix: Optional[str]
    module_configuration: Dict[str, Any]


ConfigShape = Union[FlatConfigShape, NestedConfigShape]

# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def read_config_file(config_root: str, config_path: Optional[str]) -> Optional[Dict[str, Any]]:
    """
    Read and parse the config file if it exists.

    Args:
        config_root: Directory the config path is relative to.
        config_path: Relative file name, or None when no file is expected.

    Returns:
        Optional[Dict[str, Any]]: Parsed JSON object, or None if absent.

    Raises:
        ConfigurationParseError: If the file is not a valid JSON object.
    """
    if not config_path:
        return None

    full_path = os.path.join(config_root, config_path)
    if not os.path.isfile(full_path):
        logger.debug(f"Config file not found at '{full_path}'. Falling back to defaults.")
        return None

    try:
        with open(full_path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise ConfigurationParseError(f"Malformed JSON in '{full_path}': {e}") from e
    except OSError as e:
        raise ConfigurationParseError(f"Cannot read config '{full_path}': {e}") from e

    if not isinstance(data, dict):
        raise ConfigurationParseError(
            f"Config '{full_path}' must contain a JSON object, got {type(data).__name__}"
        )

    logger.debug(f"Loaded module configuration from '{full_path}'")
    return data


def detect_config_shape(data: Dict[str, Any]) -> ConfigShape:
    """
    Classify a parsed config object.

    Raises:
        ConfigurationInvalid: If the module configuration is not an object.
    """
    module_prefix = data.get(MODULE_PREFIX_KEY)
    if NESTED_CONFIG_KEY in data:
        nested = data[NESTED_CONFIG_KEY]
        if not isinstance(nested, dict):
            raise ConfigurationInvalid(f"'{NESTED_CONFIG_KEY}' must be an object")
        return NestedConfigShape(module_prefix=module_prefix, module_configuration=nested)

    return FlatConfigShape(
        module_prefix=module_prefix,
        types=data.get("types") or {},
        collections=data.get("collections") or {},
    )


def normalize_config_shape(shape: ConfigShape) -> Dict[str, Any]:
    """Turn either shape into {'modulePrefix', 'moduleConfiguration'}."""
    if isinstance(shape, NestedConfigShape):
        module_configuration = shape.module_configuration
    else:
        module_configuration = {"types": shape.types, "collections": shape.collections}
        if not shape.types and not shape.collections:
            module_configuration = None
    return {MODULE_PREFIX_KEY: shape.module_prefix, NESTED_CONFIG_KEY: module_configuration}


def load_grammar(
        config_root: str,
        config_path: Optional[str],
        default_module_prefix: Optional[str] = None,
        default_module_configuration: Optional[Dict[str, Any]] = None,
) -> GrammarConfig:
    """
    Load the grammar for one build.

    Values from the config file take precedence; caller defaults fill
    whatever the file does not provide.

    Args:
        config_root: Directory holding the config file.
        config_path: Config file name relative to config_root.
        default_module_prefix: Prefix used when the file provides none.
        default_module_configuration: Types/collections used when the file
                                      provides none.

    Returns:
        GrammarConfig: The validated grammar.

    Raises:
        ConfigurationMissing: If neither file nor defaults define the grammar.
        ConfigurationParseError: If the file is malformed.
        ConfigurationInvalid: If the grammar is inconsistent.
    """
    data = read_config_file(config_root, config_path)

    module_prefix: Optional[str] = None
    module_configuration: Optional[Dict[str, Any]] = None
    if data is not None:
        normalized = normalize_config_shape(detect_config_shape(data))
        module_prefix = normalized[MODULE_PREFIX_KEY]
        module_configuration = normalized[NESTED_CONFIG_KEY]

    if not module_prefix:
        module_prefix = default_module_prefix
    if module_configuration is None:
        module_configuration = default_module_configuration

    if not module_prefix or module_configuration is None:
        source = os.path.join(config_root, config_path) if config_path else "<none>"
        raise ConfigurationMissing(
            f"No module configuration found (config file: {source}) "
            f"and no defaults were supplied"
        )

    grammar = GrammarConfig.from_dict(module_prefix, module_configuration)
    logger.debug(
        f"Grammar ready: prefix='{grammar.module_prefix}', "
        f"{len(grammar.types)} types, {len(grammar.collections)} collections"
    )
    return grammar
