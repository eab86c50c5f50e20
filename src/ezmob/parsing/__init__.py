"""
Stat block parsers.

- ``legacy`` / ``retail``: the two monster stat block formats
- ``malice``: monster group malice features
"""

from .cursor import LineCursor
from .legacy import LEGACY_FORMAT
from .malice import MaliceGroupParser, find_malice_groups
from .monster import MonsterFormat, MonsterParser, find_monsters, parse_monster, validate_ability
from .patterns import CATALOG, PatternCatalog
from .retail import RETAIL_FORMAT
from .targeting import resolve_target_distance

__all__ = [
    "CATALOG",
    "LEGACY_FORMAT",
    "RETAIL_FORMAT",
    "LineCursor",
    "MaliceGroupParser",
    "MonsterFormat",
    "MonsterParser",
    "PatternCatalog",
    "find_malice_groups",
    "find_monsters",
    "parse_monster",
    "resolve_target_distance",
    "validate_ability",
]
