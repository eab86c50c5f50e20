"""
Persists parsed monster groups.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from ..logutils import ImportLog
from ..models import MonsterGroup
from ..utils import summarize_names

if TYPE_CHECKING:
    from ..host import ImportHost


class MaliceGroupImporter:
    """Hands a parsed ``MonsterGroup`` to the host.

    Groups are only ever created; ``MaliceGroupParser`` has already
    refused any group the host knows about.
    """

    def __init__(self, host: "ImportHost", log: ImportLog):
        self.host = host
        self.log = log

    def run(self, group: MonsterGroup) -> MonsterGroup:
        with self.log.section(f"Monster group import for [{group.name}]"):
            self.log.debug("MALICE ABILITIES [%s]", summarize_names(group.malice_abilities))
            self.host.persist_monster_group(group)
            self.log.impl(
                f"Imported monster group [{group.name}] with {len(group.malice_abilities)} malice abilities."
            )
        return group
