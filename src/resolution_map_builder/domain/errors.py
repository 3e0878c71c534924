from __future__ import annotations

"""
Resolution Map Error Taxonomy.

Every failure raised by the build is fatal for the current invocation and
derives from ResolutionMapError, so interface layers can map the whole family
to a single exit path. Nothing in this hierarchy is retried internally.
"""


class ResolutionMapError(Exception):
    """Base class for all build failures."""


# -----------------------------------------------------------------------------
# CONFIGURATION FAILURES
# -----------------------------------------------------------------------------

class ConfigurationMissing(ResolutionMapError):
    """Neither a config file nor caller defaults provide the grammar."""


class ConfigurationParseError(ResolutionMapError):
    """The config file exists but is not a JSON object."""


class ConfigurationInvalid(ResolutionMapError):
    """The grammar references a type or collection that does not exist."""


# -----------------------------------------------------------------------------
# WALK, RESOLUTION AND OUTPUT FAILURES
# -----------------------------------------------------------------------------

class SourceTreeUnreadable(ResolutionMapError, OSError):
    """The scan root is missing or cannot be listed."""


class SpecifierCollision(ResolutionMapError):
    """
    Two module files resolved to the same specifier.

    Attributes:
        specifier: The contested specifier.
        existing_path: Module path registered first.
        new_path: Module path that attempted to claim the same specifier.
    """

    def __init__(self, specifier: str, existing_path: str, new_path: str):
        super().__init__(
            f"Specifier '{specifier}' is claimed by both "
            f"'{existing_path}' and '{new_path}'"
        )
        self.specifier = specifier
        self.existing_path = existing_path
        self.new_path = new_path


class EmissionError(ResolutionMapError, OSError):
    """The generated artifacts could not be committed to the output tree."""
