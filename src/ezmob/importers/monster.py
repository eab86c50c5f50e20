"""
Maps a parsed ``Monster`` onto a host ``BestiaryEntry`` and persists it.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from ..config import ImporterConfig
from ..entities import (
    BestiaryEntry,
    EntityKind,
    ImportedAbility,
    ImportedFeature,
    MonsterProperties,
)
from ..logutils import ImportLog
from ..models import Monster, SourceBlock
from .ability import AbilityImporter

if TYPE_CHECKING:
    from ..host import ImportHost


class MonsterImporter:
    """Imports one parsed monster into the host's bestiary.

    The monster's folder is created on demand and the monster is linked
    to the monster group of the same name when there is one. An existing
    entry of the same name is updated in place (``replace_existing``)
    unless its stored import source is flagged ``override``.

    Attributes:
        entry: The bestiary entry written by the last ``run``, if any.
        protected: True when ``run`` refused to overwrite a protected entry.
    """

    def __init__(
        self,
        host: "ImportHost",
        log: ImportLog,
        config: ImporterConfig | None = None,
    ):
        self.host = host
        self.log = log
        self.config = config or ImporterConfig()
        self.entry: BestiaryEntry | None = None
        self.protected = False

    def run(self, monster: Monster, source: str | None) -> BestiaryEntry | None:
        """Import *monster*; return the persisted entry or None when protected."""
        self.entry = None
        self.protected = False

        with self.log.section(f"Monster import for [{monster.name}]"):
            folder_id = self._validate_folder(monster)
            group_id = self._monster_group_id(monster)

            entry = self._create_bestiary_entry(monster, source, folder_id, group_id)
            if entry is not None:
                self.log.impl(f"Importing monster [{monster.name}] into folder [{monster.folder_name or '(root)'}].")
                self.host.persist_monster(entry)
                self.entry = entry

        return self.entry

    def _validate_folder(self, monster: Monster) -> str | None:
        """Find or create the folder named after the monster's first keyword."""
        folder_name = monster.folder_name or ""
        self.log.debug("VALIDATEFOLDER:: [%s]", folder_name)

        if not folder_name:
            self.log.warn("Folder name can't be found in import.")
            return None

        folder = self.host.lookup_existing_entity(EntityKind.MONSTER_FOLDER, folder_name)
        if folder is None:
            self.log.debug("VALIDATEFOLDER:: CREATE FOLDER [%s]", folder_name)
            folder = self.host.create_entity(EntityKind.MONSTER_FOLDER, folder_name)
            self.host.persist_monster_folder(folder)
        else:
            self.log.debug("VALIDATEFOLDER:: FOUND FOLDER [%s]", getattr(folder, "id", None))

        self.log.info(f"Importing monster into folder [{folder_name}]")
        return getattr(folder, "id", None)

    def _monster_group_id(self, monster: Monster) -> str | None:
        if not monster.folder_name:
            return None
        group = self.host.lookup_existing_entity(EntityKind.MONSTER_GROUP, monster.folder_name)
        group_id = getattr(group, "id", None)
        if group_id:
            self.log.debug("SETMONSTERGROUP:: SETTING:: [%s] [%s]", monster.folder_name, group_id)
        return group_id

    def _create_bestiary_entry(
        self,
        monster: Monster,
        source: str | None,
        folder_id: str | None,
        group_id: str | None,
    ) -> BestiaryEntry | None:
        entry: BestiaryEntry | None = None

        with self.log.section(f"Create bestiary entry for [{monster.name}]"):
            if self.config.replace_existing:
                existing = self.host.lookup_existing_entity(EntityKind.MONSTER, monster.name)
                if isinstance(existing, BestiaryEntry):
                    self.log.info(f"Monster [{monster.name}] exists. Checking override.")
                    if existing.is_protected:
                        self.log.warn(f"[{monster.name}] bestiary entry is protected from overwrite. Not importing.")
                        self.protected = True
                        return None
                    entry = existing

            if entry is None:
                self.log.impl("New monster. Creating token.")
                entry = self.host.create_entity(EntityKind.MONSTER, monster.name)

            entry.name = monster.name
            entry.parent_folder = folder_id
            entry.properties = self._map_properties(monster, source, group_id, entry)

        return entry

    def _map_properties(
        self,
        monster: Monster,
        source: str | None,
        group_id: str | None,
        entry: BestiaryEntry,
    ) -> MonsterProperties:
        config = self.config
        return MonsterProperties(
            name=monster.name,
            group_id=group_id,
            monster_category=monster.folder_name or "Monster",
            monster_type=monster.name,
            role=monster.role,
            minion=monster.is_minion,
            cr=monster.level,
            ev=monster.ev,
            keywords=set(monster.keywords),
            creature_size=monster.size,
            stability=monster.stability if monster.stability is not None else config.default_stability,
            max_hitpoints=monster.stamina,
            max_hitpoints_roll=monster.stamina,
            resistances=[r.model_copy(deep=True) for r in monster.resistances],
            walking_speed=monster.speed,
            movement_speeds=dict(monster.movement_speeds),
            attributes=monster.characteristics,
            opportunity_attack=monster.free_strike or config.default_free_strike,
            with_captain=monster.with_captain,
            character_features=self._import_features(monster),
            innate_activated_abilities=self._import_abilities(monster, entry),
            import_source=self._import_source(source),
        )

    def _import_features(self, monster: Monster) -> list[ImportedFeature]:
        features: list[ImportedFeature] = []

        with self.log.section("Importing features"):
            for parsed in monster.features:
                guid = self.host.generate_identity()
                feature = ImportedFeature(
                    guid=guid,
                    name=parsed.name,
                    description=parsed.description,
                    domains={f"CharacterFeature:{guid}": True},
                )

                template = self.host.resolve_feature_template(feature.name, feature.description)
                if template is not None:
                    feature.implementation = template.implementation
                    feature.modifiers = [m.model_copy(deep=True) for m in template.modifiers]
                    for modifier in feature.modifiers:
                        modifier.description = feature.description

                self.log.impl(f"Adding Feature [{feature.name}].")
                features.append(feature)

        return features

    def _import_abilities(self, monster: Monster, entry: BestiaryEntry) -> list[ImportedAbility]:
        abilities: list[ImportedAbility] = []

        with self.log.section("Import Abilities"):
            for ability in monster.abilities:
                with self.log.section(f"Ability [{ability.name}]"):
                    if not ability.is_importable:
                        self.log.warn(f"Ability [{ability.name}] is not importable.")
                        continue

                    self.log.impl(f"Importing Ability [{ability.name}].")
                    imported = AbilityImporter(self.host, self.log, entry).run(ability)
                    if imported is not None:
                        abilities.append(imported)

        return abilities

    def _import_source(self, source: str | None) -> SourceBlock:
        if self.config.debug:
            return SourceBlock(data=self.config.debug_source_placeholder)
        return SourceBlock(data=source or "")
