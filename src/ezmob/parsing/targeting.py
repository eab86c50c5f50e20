"""
Target and distance resolution for parsed abilities.

Turns the free-text ``target`` and ``distance`` of an ability into a
``TargetDistance``. Branches are tried in a fixed order: numbered
targets, then the area allow-list, then the ignore list; anything else
is reported as an unrecognized target.
"""

from __future__ import annotations

from ..logutils import ImportLog
from ..models import Ability, TargetDistance, TargetFilter, TargetType
from ..utils import to_int
from .fields import (
    BurstFields,
    CubeFields,
    DigitsFields,
    LineFields,
    MeleeOrRangedFields,
    NumberedTargetFields,
    RangeFields,
    extract,
)
from .patterns import TARGETING, TargetingPatterns

DEFAULT_TARGET = "1 creature or object"
DEFAULT_DISTANCE = "1"

NUMBER_WORDS = {
    "a": 1, "an": 1, "one": 1, "two": 2, "three": 3, "four": 4, "five": 5,
    "six": 6, "seven": 7, "eight": 8, "nine": 9, "ten": 10,
}

# Target phrases resolved against the distance as an area
AREA_TARGETS = frozenset({
    "all allies in the burst",
    "all allies",
    "all creatures and objects in the burst",
    "all creatures and objects",
    "all creatures",
    "all enemies and objects",
    "all enemies in the burst",
    "all enemies in the cube",
    "all enemies",
    "each ally",
    "each creature in the area",
    "each creature or object in the area",
    "each creature",
    "each enemy and object in each area",
    "each enemy and object in the area",
    "each enemy and object in the burst",
    "each enemy in the area",
    "each enemy in the cube",
    "each enemy",
    "self and each ally",
})

IGNORED_TARGETS = frozenset({"self", "special"})


def resolve_target_distance(
    ability: Ability,
    log: ImportLog,
    patterns: TargetingPatterns = TARGETING,
) -> TargetDistance:
    """Fill in ``ability.target_distance`` from its target and distance text.

    Also normalizes ``ability.target`` and ``ability.distance`` in place:
    missing values get defaults, "Range N" style distances collapse to
    "N" and "triggering creature" targets become "1 creature".

    Returns:
        The resolved geometry, also stored on the ability.
    """
    with log.section("Parsing Ability Distance and Target"):
        if not ability.target:
            log.warn("Target missing from import. Using default.")
            ability.target = DEFAULT_TARGET

        if not ability.distance:
            log.warn("Distance missing from import. Using default.")
            ability.distance = DEFAULT_DISTANCE
        else:
            collapsed = extract(patterns.distance_range, ability.distance, RangeFields)
            if collapsed is not None:
                log.info(f"Distance: parsed from [{ability.distance}] to [{collapsed['range']}].")
                ability.distance = collapsed["range"] or ability.distance

        if "triggering creature" in ability.target.lower():
            ability.target = "1 creature"

        target = ability.target.lower()
        numbered = extract(patterns.numbered_targets, ability.target, NumberedTargetFields)
        if numbered is not None:
            result = _numbered_targets(ability.distance, numbered, log, patterns)
        elif target in AREA_TARGETS:
            result = _area_targets(ability.distance, ability.target, log, patterns)
        else:
            result = TargetDistance()
            if target not in IGNORED_TARGETS:
                log.warn(f"Unrecognized target [{ability.target}].")

        log.debug("TARGETDISTANCE:: [%s] %s", ability.name, result.model_dump(exclude_none=True))

    ability.target_distance = result
    return result


def _numbered_targets(
    distance: str,
    numbered: NumberedTargetFields,
    log: ImportLog,
    patterns: TargetingPatterns,
) -> TargetDistance:
    result = TargetDistance(target_type=TargetType.TARGET)

    digits = extract(patterns.first_digits, distance, DigitsFields)
    first = to_int(digits["digits"]) if digits is not None else None
    if first is None:
        log.warn(f"Unrecognized target distance [{distance}]")
        first = 1
    result.range = first

    dual = extract(patterns.melee_or_ranged, distance, MeleeOrRangedFields)
    if dual is not None:
        result.range = to_int(dual["ranged"])
        result.melee_range = to_int(dual["melee"])

    number = (numbered["number"] or "").lower()
    result.num_targets = NUMBER_WORDS.get(number, to_int(number))

    noun = (numbered["type"] or "").lower()
    if noun in ("enemy", "enemies"):
        result.target_filter = TargetFilter.ENEMY
    elif noun in ("ally", "allies"):
        result.target_filter = TargetFilter.NOT_ENEMY
    return result


def _area_targets(
    distance: str,
    target: str,
    log: ImportLog,
    patterns: TargetingPatterns,
) -> TargetDistance:
    result = TargetDistance()

    flat = extract(patterns.flat_range, distance, RangeFields)
    cube = extract(patterns.cube, distance, CubeFields) if flat is None else None
    line = extract(patterns.line, distance, LineFields) if flat is None and cube is None else None

    if flat is not None:
        result.target_type = TargetType.ALL
        result.range = to_int(flat["range"])
        result.num_targets = 1
    elif cube is not None:
        result.target_type = TargetType.CUBE
        result.num_targets = 1
        result.radius = to_int(cube["radius"])
        result.range = to_int(cube["range"])
    elif line is not None:
        if to_int(line["range"]) != 1:
            log.warn("Do not currently support line abilities with range other than 1.")
        result.target_type = TargetType.LINE
        result.num_targets = 1
        result.radius = to_int(line["width"])
        result.range = to_int(line["length"])
    else:
        burst = extract(patterns.burst, distance, BurstFields)
        if burst is not None:
            result.target_type = TargetType.ALL
            result.range = to_int(burst["radius"])
            result.num_targets = 1
        else:
            log.warn(f"Unrecognized target distance [{distance}] with target [{target}].")

    lowered = target.lower()
    if "allies" in lowered:
        result.target_filter = TargetFilter.NOT_ENEMY
    elif "enem" in lowered:
        result.target_filter = TargetFilter.ENEMY
    elif lowered in ("each ally", "all allies"):
        result.target_filter = TargetFilter.NOT_ENEMY
    elif lowered == "self and each ally":
        result.target_filter = TargetFilter.NOT_ENEMY
        result.self_target = True
    return result

