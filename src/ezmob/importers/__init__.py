"""
Import of parsed records into the host.

- ``MonsterImporter``: monsters into the bestiary, with their features and abilities
- ``AbilityImporter``: one ability onto its host representation
- ``MaliceGroupImporter``: monster groups with their malice abilities
"""

from .ability import AbilityImporter
from .base import ImportedEntry, ImportReport, ImportWarning, NotImported
from .group import MaliceGroupImporter
from .monster import MonsterImporter

__all__ = [
    "AbilityImporter",
    "ImportedEntry",
    "ImportReport",
    "ImportWarning",
    "MaliceGroupImporter",
    "MonsterImporter",
    "NotImported",
]
