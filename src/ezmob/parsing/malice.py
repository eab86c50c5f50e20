"""
Monster group malice feature parsing.

A malice block looks like:

    Goblin Malice Basic Malice Features
    At the start of any goblin's turn, you can spend Malice ...
    Goblin Mode 3 Malice
    Each goblin in the encounter gains a +2 bonus to speed ...

The first line names the group; every "<Name> N Malice" line starts a
malice ability whose description runs until the next such line.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from ..entities import EntityKind
from ..logutils import ImportLog
from ..models import MaliceAbility, MonsterBlock, MonsterGroup
from ..utils import to_int
from .cursor import LineCursor
from .fields import MaliceAbilityFields, extract
from .monster import find_monsters
from .patterns import CATALOG, PatternCatalog

if TYPE_CHECKING:
    from ..host import ImportHost

BODY_START = 2


def find_malice_groups(text: str, catalog: PatternCatalog = CATALOG) -> list[MonsterBlock]:
    """Split *text* into malice blocks, one per group header."""
    return find_monsters(text, catalog.malice.header)


class MaliceGroupParser:
    """Parses one malice block into a ``MonsterGroup``.

    A group that already exists on the host is never parsed or
    overwritten. Abilities with the same name (case-insensitive) merge
    into one entry; the later block replaces the earlier description.
    """

    def __init__(
        self,
        entry: MonsterBlock,
        host: "ImportHost",
        log: ImportLog,
        catalog: PatternCatalog = CATALOG,
    ):
        self.entry = entry
        self.name = entry.name
        self.host = host
        self.log = log
        self.catalog = catalog
        self.cursor = LineCursor(entry.lines)
        self.group: MonsterGroup | None = None
        self.is_importable = True

    def parse(self) -> bool:
        with self.log.section(f"Parsing monster group [{self.name}]"):
            if self.host.lookup_existing_entity(EntityKind.MONSTER_GROUP, self.name) is not None:
                self.log.warn(f"Monster group [{self.name}] exists. Not importing.")
                self.is_importable = False
            else:
                self.group = MonsterGroup(name=self.name)
                self._parse_body(self.group)

            self.log.debug("MALICEPARSER PARSE COMPLETE [%s] importable [%s]", self.name, self.is_importable)
        return self.is_importable

    def _parse_body(self, group: MonsterGroup) -> None:
        malice = self.host.lookup_existing_entity(EntityKind.CHARACTER_RESOURCE, "Malice")
        malice_id = getattr(malice, "id", None)
        pattern = self.catalog.malice.ability

        self.cursor.seek(BODY_START)
        while not self.cursor.at_end:
            line = self.cursor.next_line()
            fields = extract(pattern, line, MaliceAbilityFields)
            if fields is None:
                continue

            name = (fields["name"] or "").strip()
            ability = self._find_ability(group, name)
            if ability is None:
                ability = MaliceAbility(name=name)
                group.malice_abilities.append(ability)

            ability.description = ""
            ability.resource_cost = malice_id
            ability.resource_number = to_int(fields["malice"]) or 0
            self._parse_ability(ability)

        self.is_importable = any(a.description for a in group.malice_abilities)
        if self.is_importable:
            self.log.info("Body parse successful.")
        else:
            self.log.warn(f"No malice feature text found for monster group [{self.name}].")

    def _find_ability(self, group: MonsterGroup, name: str) -> MaliceAbility | None:
        for ability in group.malice_abilities:
            if ability.name.lower() == name.lower():
                return ability
        return None

    def _parse_ability(self, ability: MaliceAbility) -> None:
        pattern = self.catalog.malice.ability
        with self.log.section(f"Parse Ability [{ability.name}]"):
            while not self.cursor.at_end:
                line = self.cursor.next_line()
                if pattern.search(line):
                    self.cursor.push_back()
                    break
                if not line:
                    continue
                if ability.description:
                    ability.description += "\n"
                ability.description += line
