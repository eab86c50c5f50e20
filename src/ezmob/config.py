"""
Configuration model for the EZMob importer.
"""

import os

from pydantic import BaseModel, Field

DEBUG_SOURCE_PLACEHOLDER = (
    "Imported with EZMob Importer in Debug Mode.\n"
    "Turn debug mode off with /ezmob d and re-import to import source text."
)

_TRUTHY = {"1", "true", "yes", "on"}


def _env_flag(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in _TRUTHY


class ImporterConfig(BaseModel):
    """Settings controlling how stat blocks are parsed and imported.

    Only ``debug`` and ``verbose`` change at runtime (through the ``ezmob``
    command); everything else is fixed for the life of the process.
    """

    # Logging
    debug: bool = Field(
        default=False,
        description="Emit debug traces and replace stored source text with a placeholder"
    )
    verbose: bool = Field(
        default=False,
        description="Emit INFO progress messages in addition to warnings and errors"
    )

    # Import behavior
    replace_existing: bool = Field(
        default=True,
        description="Update an existing bestiary entry of the same name instead of creating a new one"
    )
    default_stability: int = Field(
        default=99,
        description="Stability written to the bestiary when the stat block provided none"
    )
    default_free_strike: int = Field(
        default=1,
        ge=1,
        description="Free strike written to the bestiary when the stat block provided none"
    )

    # Parsing
    legacy_marker: str = Field(
        default="#sun#",
        min_length=1,
        description="Marker whose presence in the sanitized text selects the legacy parser"
    )
    creature_sizes: list[str] = Field(
        default_factory=lambda: ["1T", "1S", "1M", "1L", "2", "3", "4", "5"],
        description="Size codes accepted on the size line, compared case-insensitively"
    )
    debug_source_placeholder: str = Field(
        default=DEBUG_SOURCE_PLACEHOLDER,
        description="Text stored as the import source while in debug mode"
    )

    @classmethod
    def from_env(cls) -> "ImporterConfig":
        """Build a config from ``EZMOB_*`` environment variables."""
        return cls(
            debug=_env_flag("EZMOB_DEBUG", False),
            verbose=_env_flag("EZMOB_VERBOSE", False),
            replace_existing=_env_flag("EZMOB_REPLACE_EXISTING", True),
        )

    def valid_size(self, size: str | None) -> str | None:
        """Return the canonical size code matching *size*, or None."""
        if not size:
            return None
        for code in self.creature_sizes:
            if code.lower() == size.lower():
                return code
        return None
