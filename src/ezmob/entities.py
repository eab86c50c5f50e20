"""
Host-side entity records.

These mirror the shapes the game host stores: bestiary entries with
their monster properties, imported abilities and features, and the
lookup tables (resources, damage types, standard abilities, templates)
the importers consult.
"""

from __future__ import annotations

import re
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field

from .models import Characteristic, ResistanceEntry, SourceBlock, TargetFilter, TargetType


class EntityKind(str, Enum):
    """Tables an ``ImportHost`` can look entities up in."""
    MONSTER = "monster"
    MONSTER_GROUP = "monsterGroup"
    MONSTER_FOLDER = "monsterFolder"
    CHARACTER_RESOURCE = "characterResource"
    DAMAGE_TYPE = "damageType"
    STANDARD_ABILITY = "standardAbility"


class Entity(BaseModel):
    id: str
    name: str


class MonsterFolder(Entity):
    description: str = ""


class CharacterResource(Entity):
    """A spendable resource or action slot (Malice, Main Action, ...)."""


class DamageType(Entity):
    pass


# ---------------------------------------------------------------------------
# Behaviors and templates
# ---------------------------------------------------------------------------


class Behavior(BaseModel):
    """One step of an activated ability's implementation."""
    kind: str = Field(description="Behavior type, e.g. 'power_roll' or 'invoke_ability'")
    roll: str | None = None
    tiers: list[str | None] = Field(default_factory=lambda: [None, None, None])
    resistance_roll: bool = False
    resistance_attr: str | None = None
    custom_ability: ImportedAbility | None = None


class StandardAbility(Entity):
    """A built-in ability whose behaviors imported abilities copy."""
    behaviors: list[Behavior] = Field(default_factory=list)


class UsageLimit(BaseModel):
    charges: str = "1"
    multicharge: bool = False
    resource_refresh_type: str = "encounter"
    resource_id: str


class ImportedAbility(BaseModel):
    """An activated ability as stored on a bestiary entry."""
    guid: str | None = None
    name: str
    keywords: set[str] = Field(default_factory=set)
    flavor: str = ""
    description: str = ""
    categorization: str = "Signature Ability"
    behaviors: list[Behavior] = Field(default_factory=list)
    resource_cost: str | None = None
    resource_number: int | None = None
    action_resource_id: str | None = None
    villain_action: str | None = None
    usage_limit: UsageLimit | None = None
    target_type: TargetType | None = None
    range: int | None = None
    num_targets: int | None = None
    radius: int | None = None
    target_filter: TargetFilter | None = None
    self_target: bool | None = None
    melee_range: int | None = None
    effect_implemented: bool = True


class Modifier(BaseModel):
    name: str
    description: str = ""
    behavior: str | None = None
    value: Any = None


class ImportedFeature(BaseModel):
    """A monster trait as stored on a bestiary entry."""
    guid: str
    name: str
    description: str = ""
    domains: dict[str, bool] = Field(default_factory=dict)
    source: str = "Trait"
    modifiers: list[Modifier] = Field(default_factory=list)
    implementation: int | None = None


class EffectTemplate(BaseModel):
    """A known ability effect, matched against effect text.

    ``pattern`` is a case-insensitive regular expression searched in the
    effect description.
    """
    name: str
    pattern: str
    behaviors: list[Behavior] = Field(default_factory=list)
    insert_at_start: bool = False
    invoke_surrounding_ability: bool = False

    def matches(self, description: str) -> bool:
        return re.search(self.pattern, description or "", re.IGNORECASE) is not None


class FeatureTemplate(BaseModel):
    """A known monster trait, matched against the trait's description."""
    name: str
    pattern: str
    modifiers: list[Modifier] = Field(default_factory=list)
    implementation: int | None = None

    def matches(self, description: str) -> bool:
        return re.search(self.pattern, description or "", re.IGNORECASE) is not None


# ---------------------------------------------------------------------------
# Bestiary
# ---------------------------------------------------------------------------


class MonsterProperties(BaseModel):
    """Monster statistics as the host stores them."""
    name: str = ""
    group_id: str | None = None
    monster_category: str = "Monster"
    monster_type: str = ""
    role: str | None = None
    minion: bool = False
    cr: int | None = None
    ev: int | None = None
    keywords: set[str] = Field(default_factory=set)
    creature_size: str | None = None
    stability: int = 99
    max_hitpoints: int | None = None
    max_hitpoints_roll: int | None = None
    resistances: list[ResistanceEntry] = Field(default_factory=list)
    walking_speed: int | None = None
    movement_speeds: dict[str, int] = Field(default_factory=dict)
    attributes: dict[str, Characteristic] | None = None
    opportunity_attack: int = 1
    with_captain: str | None = None
    character_features: list[ImportedFeature] = Field(default_factory=list)
    innate_activated_abilities: list[ImportedAbility] = Field(default_factory=list)
    import_source: SourceBlock | None = None


class BestiaryEntry(Entity):
    parent_folder: str | None = None
    properties: MonsterProperties = Field(default_factory=MonsterProperties)

    @property
    def is_protected(self) -> bool:
        """True when a previous import flagged this entry as not to be overwritten."""
        return self.properties.import_source is not None and self.properties.import_source.override


Behavior.model_rebuild()
StandardAbility.model_rebuild()
ImportedAbility.model_rebuild()
