"""
Field extraction from pattern matches.

``extract`` returns the named captures of a match as a plain dict, or
None when the pattern does not match. The TypedDicts below name the
capture set of each pattern shape so call sites read fields by a known
key; groups that did not participate in the match are None.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import TypedDict, TypeVar, cast

from .patterns import NamedPattern

T = TypeVar("T")


class NameFields(TypedDict):
    name: str | None
    level: str | None
    minion: str | None
    role: str | None


class KeywordsEvFields(TypedDict):
    keywords: str | None
    ev: str | None


class StaminaFields(TypedDict):
    stamina: str | None


class ImmunityFields(TypedDict):
    immunity: str | None


class WeaknessFields(TypedDict):
    weakness: str | None


class SpeedSizeStabilityFields(TypedDict):
    speed: str | None
    move_type: str | None
    size: str | None
    stability: str | None


class TraitsFreeStrikeFields(TypedDict):
    with_captain: str | None
    free_strike: str | None


class CharacteristicFields(TypedDict):
    mgt: str | None
    agl: str | None
    rea: str | None
    inu: str | None
    prs: str | None


class SsssfsFields(TypedDict):
    size: str | None
    speed: str | None
    stamina: str | None
    stability: str | None
    free_strike: str | None


class ImmunityWeaknessFields(TypedDict):
    immunities: str | None
    weaknesses: str | None


class MovementCaptainFields(TypedDict):
    movement: str | None
    with_captain: str | None


class LegacyAbilityFields(TypedDict):
    name: str | None
    action: str | None
    signature: str | None
    vp: str | None


class RetailAbilityFields(TypedDict):
    name: str | None
    roll: str | None
    signature: str | None
    villain_action: str | None
    malice: str | None


class RollFields(TypedDict):
    roll: str | None


class DescriptionFields(TypedDict):
    """Shape shared by keyword, target, effect, special and trigger lines."""
    description: str | None


class NamedDescriptionFields(TypedDict):
    """Shape shared by features, solo features and malice lines."""
    name: str | None
    description: str | None


class TierFields(TypedDict):
    effect: str | None


class DistanceTargetFields(TypedDict):
    distance: str | None
    target: str | None


class KeywordsActionFields(TypedDict):
    keywords: str | None
    action: str | None


class MaliceAbilityFields(TypedDict):
    name: str | None
    malice: str | None


class NumberedTargetFields(TypedDict):
    number: str | None
    type: str | None
    weight: str | None


class MeleeOrRangedFields(TypedDict):
    melee: str | None
    ranged: str | None


class RangeFields(TypedDict):
    range: str | None


class CubeFields(TypedDict):
    radius: str | None
    range: str | None


class LineFields(TypedDict):
    length: str | None
    width: str | None
    range: str | None


class BurstFields(TypedDict):
    radius: str | None


class DigitsFields(TypedDict):
    digits: str | None


class ResistAttributeFields(TypedDict):
    stat: str | None


class ResistanceEntryFields(TypedDict):
    damage_type: str | None
    value: str | None


def extract(pattern: NamedPattern, line: str | None, shape: type[T] | None = None) -> T | None:
    """Apply *pattern* to *line* and return its named captures.

    Args:
        pattern: Catalog pattern to apply.
        line: Text to search; None is treated as "".
        shape: TypedDict describing the captures, for typed access.

    Returns:
        A dict of capture name to captured text (None for groups that
        did not participate), or None when there is no match.
    """
    match = pattern.search(line or "")
    if match is None:
        return None
    return cast(T, match.groupdict())


def matches_any(patterns: Iterable[NamedPattern], line: str) -> NamedPattern | None:
    """Return the first pattern in *patterns* that matches *line*."""
    for pattern in patterns:
        if pattern.search(line):
            return pattern
    return None


def first_match(patterns: Iterable[NamedPattern], line: str) -> tuple[str, dict[str, str | None]] | None:
    """Return ``(pattern name, captures)`` of the first matching pattern."""
    for pattern in patterns:
        match = pattern.search(line)
        if match is not None:
            return pattern.name, match.groupdict()
    return None
