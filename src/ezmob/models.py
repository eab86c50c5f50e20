"""
Canonical records produced by the stat block parsers.

These are created fresh for every parse, filled in by the parser that
owns them and then handed read-only to the importers.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field


class ActionType(str, Enum):
    """Action economy slot an ability uses."""
    MAIN_ACTION = "Main Action"
    MANEUVER = "Maneuver"
    TRIGGERED_ACTION = "Triggered Action"
    FREE_TRIGGERED_ACTION = "Free Triggered Action"
    FREE_ACTION = "Free Action"

    @classmethod
    def from_text(cls, text: str | None) -> "ActionType | None":
        """Case-insensitive lookup; a bare "action" means a main action."""
        if not text:
            return None
        key = " ".join(text.split()).lower()
        if key == "action":
            return cls.MAIN_ACTION
        for member in cls:
            if member.value.lower() == key:
                return member
        return None


class Categorization(str, Enum):
    SIGNATURE = "Signature Ability"
    HEROIC = "Heroic Ability"
    TRIGGER = "Trigger"
    VILLAIN_ACTION = "Villain Action"


class RollType(str, Enum):
    POWER = "power"
    RESIST = "resist"


class TargetType(str, Enum):
    TARGET = "target"
    ALL = "all"
    CUBE = "cube"
    LINE = "line"


class TargetFilter(str, Enum):
    ENEMY = "Enemy"
    NOT_ENEMY = "not Enemy"


class Characteristic(BaseModel):
    """A single characteristic score."""
    base_value: int = Field(ge=-100, le=100)


class ResistanceEntry(BaseModel):
    """Damage reduction against a damage type or a keyword.

    Immunities carry a positive ``dr`` and weaknesses a negative one.
    Unknown damage types are kept as keywords with ``damage_type`` "all".
    """
    damage_type: str = "all"
    keywords: set[str] | None = None
    apply: str = "Damage Reduction"
    dr: int


class Feature(BaseModel):
    """A named trait of a monster."""
    name: str
    description: str = ""


class MaliceEntry(BaseModel):
    """An extra effect an ability gains when malice is spent."""
    name: str
    description: str = ""


class RollTable(BaseModel):
    tier1: str | None = None
    tier2: str | None = None
    tier3: str | None = None

    def missing_tiers(self) -> list[int]:
        """Tier numbers with no text."""
        return [
            i for i, tier in enumerate((self.tier1, self.tier2, self.tier3), start=1)
            if not tier
        ]


class AbilityRoll(BaseModel):
    """Power roll or resistance roll of an ability."""
    roll: str | None = Field(default=None, description="Dice expression, e.g. '2d10 + 2'")
    type: RollType | None = None
    resist_attr: str | None = Field(default=None, description="Characteristic code tested by a resistance roll")
    roll_table: RollTable = Field(default_factory=RollTable)


class TargetDistance(BaseModel):
    """Targeting geometry derived from an ability's target and distance text.

    All fields are unset when the target text yields no geometry
    (self, special, or unrecognized targets).
    """
    target_type: TargetType | None = None
    range: int | None = None
    num_targets: int | None = Field(default=None, description="Number of targets")
    radius: int | None = None
    target_filter: TargetFilter | None = None
    self_target: bool | None = None
    melee_range: int | None = None

    @property
    def has_geometry(self) -> bool:
        return self.target_type is not None


class Ability(BaseModel):
    """A parsed monster ability."""
    name: str
    action: ActionType | None = None
    categorization: Categorization = Categorization.SIGNATURE
    signature: bool = False
    villain_action: str | None = None
    cost: int = Field(default=0, ge=0)
    target: str = "1 creature or object"
    distance: str = "1"
    effect: str | None = None
    special: str | None = None
    trigger: str | None = None
    keywords: str | None = None
    malice: list[MaliceEntry] = Field(default_factory=list)
    roll: AbilityRoll | None = None
    target_distance: TargetDistance = Field(default_factory=TargetDistance)
    is_importable: bool = True

    def ensure_roll(self) -> AbilityRoll:
        if self.roll is None:
            self.roll = AbilityRoll()
        return self.roll


class Monster(BaseModel):
    """A parsed monster stat block.

    Header fields stay ``None`` when their line failed to parse; the
    parser reports that through its importable flag instead.
    """
    name: str
    level: int | None = Field(default=None, ge=1)
    role: str | None = None
    is_minion: bool = False
    keywords: set[str] = Field(default_factory=set)
    folder_name: str | None = None
    ev: int | None = Field(default=None, gt=0)
    stamina: int | None = Field(default=None, gt=0)
    resistances: list[ResistanceEntry] = Field(default_factory=list)
    speed: int | None = Field(default=None, gt=0)
    size: str | None = None
    stability: int | None = None
    movement_speeds: dict[str, int] = Field(default_factory=dict)
    characteristics: dict[str, Characteristic] | None = None
    free_strike: int | None = None
    with_captain: str | None = None
    features: list[Feature] = Field(default_factory=list)
    abilities: list[Ability] = Field(default_factory=list)


class SourceBlock(BaseModel):
    """Original text kept alongside an imported entry."""
    type: str = "mcdm"
    data: str = ""
    override: bool = Field(
        default=False,
        description="When set on an existing entry, re-imports never overwrite it"
    )


class MonsterBlock(BaseModel):
    """A segment of input text belonging to one stat block."""
    name: str
    lines: list[str] = Field(default_factory=list)


class MaliceAbility(BaseModel):
    """A monster-group malice feature."""
    name: str
    description: str = ""
    resource_cost: str | None = Field(default=None, description="Identity of the Malice resource")
    resource_number: int = 0


class MonsterGroup(BaseModel):
    """A monster group with its shared malice features."""
    id: str | None = None
    name: str
    malice_abilities: list[MaliceAbility] = Field(default_factory=list)
