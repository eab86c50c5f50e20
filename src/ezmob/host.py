"""
Collaborator interface between the importer and the game host.

The parsers and importers never touch storage directly. Everything they
need from the host (existing-entity lookups, new identities, template
matching, persistence and the log window) goes through ``ImportHost``.
``InMemoryHost`` is the reference implementation used by the MCP server
and the tests.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Protocol

import shortuuid
import yaml

from .entities import (
    BestiaryEntry,
    CharacterResource,
    DamageType,
    EffectTemplate,
    Entity,
    EntityKind,
    FeatureTemplate,
    MonsterFolder,
    StandardAbility,
)
from .logutils import Status
from .models import MonsterGroup

logger = logging.getLogger("ezmob")

DEFAULTS_PATH = Path(__file__).parent / "data" / "host_defaults.yaml"


class EZMobError(Exception):
    """Base class for errors raised by the EZMob package."""


class HostError(EZMobError):
    """Raised by a host implementation for misuse, e.g. an unknown entity kind."""


class ImportHost(Protocol):
    """Services the embedding host supplies to the importer."""

    def lookup_existing_entity(self, kind: EntityKind, name: str) -> object | None:
        """Return the entity of *kind* named *name* (case-insensitive), or None."""
        ...

    def create_entity(self, kind: EntityKind, name: str) -> object:
        """Create a new, unsaved entity of *kind* with a generated identity."""
        ...

    def generate_identity(self) -> str:
        ...

    def resolve_effect_template(
        self, context: BestiaryEntry | None, ability_name: str, description: str
    ) -> EffectTemplate | None:
        ...

    def resolve_feature_template(self, name: str, description: str) -> FeatureTemplate | None:
        ...

    def persist_monster(self, entry: BestiaryEntry) -> None:
        ...

    def persist_monster_group(self, group: MonsterGroup) -> None:
        ...

    def persist_monster_folder(self, folder: MonsterFolder) -> None:
        ...

    def log(self, message: str, status: Status) -> None:
        """Show an already indented message in the host's log window."""
        ...


_KIND_MODELS: dict[EntityKind, type] = {
    EntityKind.MONSTER: BestiaryEntry,
    EntityKind.MONSTER_GROUP: MonsterGroup,
    EntityKind.MONSTER_FOLDER: MonsterFolder,
    EntityKind.CHARACTER_RESOURCE: CharacterResource,
    EntityKind.DAMAGE_TYPE: DamageType,
    EntityKind.STANDARD_ABILITY: StandardAbility,
}

# Top-level keys of a host seed file and the table each fills
_SEED_KEYS: dict[str, EntityKind] = {
    "damage_types": EntityKind.DAMAGE_TYPE,
    "character_resources": EntityKind.CHARACTER_RESOURCE,
    "standard_abilities": EntityKind.STANDARD_ABILITY,
}


class InMemoryHost:
    """Dictionary-backed ``ImportHost``.

    Entities are keyed per kind by lower-cased name, so lookups are
    case-insensitive and the last persisted entity of a name wins.
    Log messages are kept in ``messages`` in addition to the logger.
    """

    def __init__(self) -> None:
        self.tables: dict[EntityKind, dict[str, object]] = {kind: {} for kind in EntityKind}
        self.effect_templates: list[EffectTemplate] = []
        self.feature_templates: list[FeatureTemplate] = []
        self.messages: list[tuple[str, Status]] = []

    # ------------------------------------------------------------------
    # Seeding
    # ------------------------------------------------------------------

    @classmethod
    def with_defaults(cls) -> "InMemoryHost":
        """Create a host seeded with the packaged default tables."""
        host = cls()
        host.load_yaml(DEFAULTS_PATH)
        return host

    def load_yaml(self, path: Path) -> None:
        """Load lookup tables and templates from a YAML seed file.

        Expected YAML format:
            damage_types:
              - name: fire
            character_resources:
              - name: Malice
            standard_abilities:
              - name: Ability Power Roll
                behaviors:
                  - kind: power_roll
            effect_templates:
              - name: Push
                pattern: "push \\d+"
            feature_templates:
              - name: Crafty
                pattern: "doesn't provoke opportunity attacks"

        Entries without an ``id`` get a generated one.

        Args:
            path: Path to YAML file

        Raises:
            FileNotFoundError: If the YAML file doesn't exist
            yaml.YAMLError: If the YAML is malformed
            ValueError: If no known top-level key is present
        """
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)

        known = set(_SEED_KEYS) | {"effect_templates", "feature_templates"}
        if not data or not known.intersection(data):
            raise ValueError(f"YAML file must contain at least one of: {', '.join(sorted(known))}")

        for key, kind in _SEED_KEYS.items():
            model = _KIND_MODELS[kind]
            for item in data.get(key) or []:
                item = dict(item)
                item.setdefault("id", self.generate_identity())
                self._store(kind, model(**item))

        for item in data.get("effect_templates") or []:
            self.effect_templates.append(EffectTemplate(**item))
        for item in data.get("feature_templates") or []:
            self.feature_templates.append(FeatureTemplate(**item))

        logger.info(
            f"Loaded host seed {path}: "
            + ", ".join(f"{len(self.tables[kind])} {kind.value}" for kind in _SEED_KEYS.values())
            + f", {len(self.effect_templates)} effect templates, {len(self.feature_templates)} feature templates"
        )

    # ------------------------------------------------------------------
    # ImportHost
    # ------------------------------------------------------------------

    def lookup_existing_entity(self, kind: EntityKind, name: str) -> object | None:
        return self._table(kind).get((name or "").lower())

    def create_entity(self, kind: EntityKind, name: str) -> object:
        model = _KIND_MODELS.get(kind)
        if model is None:
            raise HostError(f"Unknown entity kind: {kind}")
        return model(id=self.generate_identity(), name=name)

    def generate_identity(self) -> str:
        return shortuuid.random(length=8)

    def resolve_effect_template(
        self, context: BestiaryEntry | None, ability_name: str, description: str
    ) -> EffectTemplate | None:
        for template in self.effect_templates:
            if template.matches(description):
                return template
        return None

    def resolve_feature_template(self, name: str, description: str) -> FeatureTemplate | None:
        for template in self.feature_templates:
            if template.matches(description):
                return template
        return None

    def persist_monster(self, entry: BestiaryEntry) -> None:
        self._store(EntityKind.MONSTER, entry)

    def persist_monster_group(self, group: MonsterGroup) -> None:
        if group.id is None:
            group.id = self.generate_identity()
        self._store(EntityKind.MONSTER_GROUP, group)

    def persist_monster_folder(self, folder: MonsterFolder) -> None:
        self._store(EntityKind.MONSTER_FOLDER, folder)

    def log(self, message: str, status: Status) -> None:
        self.messages.append((message, status))

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def all(self, kind: EntityKind) -> list[object]:
        """Every stored entity of *kind*."""
        return list(self._table(kind).values())

    def _table(self, kind: EntityKind) -> dict[str, object]:
        try:
            return self.tables[EntityKind(kind)]
        except ValueError as e:
            raise HostError(f"Unknown entity kind: {kind}") from e

    def _store(self, kind: EntityKind, entity: Entity | MonsterGroup) -> None:
        self._table(kind)[entity.name.lower()] = entity
