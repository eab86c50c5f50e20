"""
Pattern catalog for the stat block parsers.

Every pattern is compiled once, case-insensitive, and matched with
search semantics; anchoring is expressed in the pattern itself. The
ender tuples reference the same compiled objects as the sections they
are built from.
"""

from __future__ import annotations

import re
from dataclasses import dataclass


@dataclass(frozen=True)
class NamedPattern:
    """A compiled pattern and the name it is reported under."""
    name: str
    regex: re.Pattern[str]

    def search(self, line: str) -> re.Match[str] | None:
        return self.regex.search(line or "")


def _p(name: str, source: str) -> NamedPattern:
    return NamedPattern(name, re.compile(source, re.IGNORECASE))


@dataclass(frozen=True)
class AbilityPatterns:
    name: NamedPattern
    body: tuple[NamedPattern, ...]
    roll: NamedPattern | None = None

    def body_pattern(self, key: str) -> NamedPattern:
        for pattern in self.body:
            if pattern.name == key:
                return pattern
        raise KeyError(key)


@dataclass(frozen=True)
class FormatPatterns:
    """All patterns of one stat block format."""
    name: str
    header: dict[str, NamedPattern]
    ability: AbilityPatterns
    feature: NamedPattern
    enders: tuple[NamedPattern, ...] = ()
    solo_name: NamedPattern | None = None
    solo_feature: NamedPattern | None = None


@dataclass(frozen=True)
class MalicePatterns:
    header: NamedPattern
    ability: NamedPattern


@dataclass(frozen=True)
class TargetingPatterns:
    distance_range: NamedPattern
    numbered_targets: NamedPattern
    melee_or_ranged: NamedPattern
    flat_range: NamedPattern
    cube: NamedPattern
    line: NamedPattern
    burst: NamedPattern
    first_digits: NamedPattern


@dataclass(frozen=True)
class PatternCatalog:
    legacy: FormatPatterns
    retail: FormatPatterns
    malice: MalicePatterns
    targeting: TargetingPatterns
    resist_attribute: NamedPattern
    resistance_entry: NamedPattern

    def for_format(self, name: str) -> FormatPatterns:
        if name == "legacy":
            return self.legacy
        if name == "retail":
            return self.retail
        raise KeyError(name)


# ---------------------------------------------------------------------------
# Shared header lines
# ---------------------------------------------------------------------------

_NAME = _p(
    "name",
    r"^(?P<name>.*)\s+(?:level|lvl) (?P<level>[0-9]+)(?P<minion> minion)? (?P<role>.+)$",
)
_KEYWORDS_EV = _p(
    "keywords_ev",
    r"^(?P<keywords>.*)\s+ev (?P<ev>[0-9]+)(?: for .+ minions)?$",
)

# ---------------------------------------------------------------------------
# Legacy
# ---------------------------------------------------------------------------

_LEGACY_HEADER = {
    "name": _NAME,
    "keywords_ev": _KEYWORDS_EV,
    "stamina": _p("stamina", r"stamina.*?:?\s*(?P<stamina>[0-9]+)"),
    "immunities": _p("immunities", r".*immunity.*?:?\s*(?P<immunity>.*?)(?:\s+weakness.*)?$"),
    "weaknesses": _p("weaknesses", r".*weakness.*?:?\s*(?P<weakness>.*)$"),
    "speed_size_stability": _p(
        "speed_size_stability",
        r"speed\s*:?\s*(?P<speed>[0-9]+)(?:\s+\((?P<move_type>[A-Za-z, ]+)\))?"
        r"\s+size\s*:?\s*(?P<size>[0-9]+[LMST]?)\s*/\s*stability\s*:?\s*(?P<stability>[0-9]+|all)$",
    ),
    "traits_free_strike": _p(
        "traits_free_strike",
        r"^(?:with captain(?:\s*:)?\s*(?P<with_captain>.*?)\s*)?free strike(?:\s*:)?\s*(?P<free_strike>[0-9]+)$",
    ),
    "characteristics": _p(
        "characteristics",
        r"^(?:might|mgt|m) \+?(?P<mgt>[0-9-]+)\s*"
        r"(?:agility|agl|a) \+?(?P<agl>[0-9+-]+)\s*"
        r"(?:reason|rea|r) \+?(?P<rea>[0-9+-]+)\s*"
        r"(?:intuition|inu|i) \+?(?P<inu>[0-9+-]+)\s*"
        r"(?:presence|prs|p) \+?(?P<prs>[0-9+-]+)$",
    ),
}

_LEGACY_ABILITY = AbilityPatterns(
    name=_p(
        "ability",
        r"^(?P<name>[^<]+)\s*\((?P<action>action|main action|triggered action|maneuver|free action"
        r"|free triggered action|villain action 1|villain action 2|villain action 3)\)"
        r".*?(?P<signature>signature)?(?:(?P<vp>[0-9]+) (?:vp|malice))?$",
    ),
    roll=_p("roll", r"^.*(?P<roll>2d10\s*[+-]\s*[0-9]+).*$"),
    body=(
        _p("keywords", r"^keywords:?\s+(?P<description>.*)$"),
        _p("distance_target", r"^distance:?\s+(?P<distance>(?:(?!\s*target).)*?)\s*(?:target:?\s+(?P<target>.*))?$"),
        _p("target", r"^target:?\s+(?P<description>.*)$"),
        _p("tier1", r"^(?:(?:#diamond#|#sun#)\s*(?:#lte#|<=|\u2264)\s*)?11\s+(?P<effect>.*)$"),
        _p("tier2", r"^(?:#star#\s*)?12-16\s+(?P<effect>.*)$"),
        _p("tier3", r"^(?:(?:#diamond#|#sun#)\s*)?17\+?\s+(?P<effect>.*)$"),
        _p("effect", r"^effect:?\s+(?P<description>.*)$"),
        _p("special", r"^special:?\s+(?P<description>.*)$"),
        _p("trigger", r"^trigger:?\s+(?P<description>.*)$"),
        _p("malice", r"^(?P<name>[0-9]+\+?\s+malice):?\s+(?P<description>.*)$"),
    ),
)

_LEGACY_FEATURE = _p("feature", r"^(?P<name>[^:]+):\s*(?P<description>.+)$")

LEGACY = FormatPatterns(
    name="legacy",
    header=_LEGACY_HEADER,
    ability=_LEGACY_ABILITY,
    feature=_LEGACY_FEATURE,
    enders=(_NAME, _LEGACY_ABILITY.name, _LEGACY_FEATURE, *_LEGACY_ABILITY.body),
)

# ---------------------------------------------------------------------------
# Retail
# ---------------------------------------------------------------------------

_RETAIL_HEADER = {
    "name": _NAME,
    "keywords_ev": _KEYWORDS_EV,
    "ssssfs": _p(
        "ssssfs",
        r"^\s*(?P<size>[0-9]+[a-zA-Z]?)\s+(?P<speed>[0-9]+)\s+(?P<stamina>[0-9]+)"
        r"\s+(?P<stability>[0-9]+)\s+(?P<free_strike>[0-9]+)$",
    ),
    "immunity_weakness": _p(
        "immunity_weakness",
        r"^\s*Immunity:\s+(?P<immunities>.*?)\s+Weakness:\s+(?P<weaknesses>.*)$",
    ),
    "movement_captain": _p(
        "movement_captain",
        r"^Movement:\s*(?P<movement>.*?)(?:\s+With Captain:\s*(?P<with_captain>.*?))?\s*$",
    ),
    "characteristics": _p(
        "characteristics",
        r"^(?:might|m\s+ight|mgt|m) \+?(?P<mgt>[0-9-]+)\s*"
        r"(?:agility|a\s+gility|agl|a) \+?(?P<agl>[0-9+-]+)\s*"
        r"(?:reason|r\s+eason|rea|r) \+?(?P<rea>[0-9+-]+)\s*"
        r"(?:intuition|i\s+ntuition|inu|i) \+?(?P<inu>[0-9+-]+)\s*"
        r"(?:presence|p\s+resence|prs|p) \+?(?P<prs>[0-9+-]+)$",
    ),
}

_RETAIL_ABILITY = AbilityPatterns(
    name=_p(
        "ability",
        r"^[abdmrs!]\s+(?P<name>.*?)"
        r"(?=\s+(?:\d+d\d+|Signature Ability|Villain Action|\d+\s+Malice)|$)"
        r"(?:\s+(?P<roll>\d+d\d+(?:\s*[+-]\s*\d+)?))?"
        r"(?:\s+(?P<signature>Signature Ability))?"
        r"(?:\s+Villain Action\s+(?P<villain_action>\d+))?"
        r"(?:\s+(?P<malice>\d+)\s+Malice)?\s*$",
    ),
    body=(
        _p("tier1", r"^(?:1|%C3%A1|\u00e1)\s+(?!Malice:)(?P<effect>.*)$"),
        _p("tier2", r"^(?:2|%C3%A9|\u00e9)\s+(?!Malice:)(?P<effect>.*)$"),
        _p("tier3", r"^(?:3|%C3%AD|\u00ed)\s+(?!Malice:)(?P<effect>.*)$"),
        _p("malice", r"^(?P<name>\d+\+?\s+Malice):\s+(?P<description>.*)$"),
        _p("effect", r"^effect:?\s+(?P<description>.*)$"),
        _p("special", r"^special:?\s+(?P<description>.*)$"),
        _p("trigger", r"^trigger:?\s+(?P<description>.*)$"),
        _p("distance_target", r"^e\s+(?P<distance>.*?)\s+x\s+(?P<target>.*)$"),
        _p(
            "keywords_action",
            r"^(?P<keywords>(?:[a-zA-Z]+|-|\u2014)(?:,\s*(?:[a-zA-Z]+|-|\u2014))*)"
            r"(?:\s+(?P<action>Free triggered action|Triggered action|Main action|Maneuver))?$",
        ),
    ),
)

_RETAIL_FEATURE = _p("feature", r"^t\s+(?P<name>.*)$")
_RETAIL_SOLO_NAME = _p("solo", r"^d\s+(?P<solo>(?!.*Villain Action\s+\d+$).*)$")
_RETAIL_SOLO_FEATURE = _p("solo_feature", r"^(?P<name>[^:]+):\s*(?P<description>.+)$")

RETAIL = FormatPatterns(
    name="retail",
    header=_RETAIL_HEADER,
    ability=_RETAIL_ABILITY,
    feature=_RETAIL_FEATURE,
    enders=(_NAME, _RETAIL_FEATURE, _RETAIL_ABILITY.name, *_RETAIL_ABILITY.body, _RETAIL_SOLO_FEATURE),
    solo_name=_RETAIL_SOLO_NAME,
    solo_feature=_RETAIL_SOLO_FEATURE,
)

# ---------------------------------------------------------------------------
# Malice groups and targeting
# ---------------------------------------------------------------------------

MALICE = MalicePatterns(
    header=_p("malice_header", r"^(?P<name>.+?)\s+malice.*malice features$"),
    ability=_p("malice_ability", r"^\s*(?P<name>[^0-9]+?)\s+(?P<malice>[0-9]+)\+? Malice"),
)

TARGETING = TargetingPatterns(
    distance_range=_p("distance_range", r"^(?:Range|Reach|Melee) (?P<range>[0-9]+)$"),
    numbered_targets=_p(
        "numbered_targets",
        r"\b(?P<number>[0-9]+|One|Two|Three|Four|Five|Six|Seven|Eight|Nine|Ten|A|An) "
        r"(?P<type>creatures|creature|allies|ally|enemies|enemy)(?: or objects?)?"
        r"(?:of weight (?P<weight>[0-9]+) or lower)?(?: per minion)?",
    ),
    melee_or_ranged=_p("melee_or_ranged", r"^Melee (?P<melee>[0-9]+) or Ranged? (?P<ranged>[0-9]+)"),
    flat_range=_p("flat_range", r"^\s*(?P<range>\d+)\s*$"),
    cube=_p("cube", r"(?P<radius>\d+)\s+cube within (?P<range>\d+)(?: squares?)?"),
    line=_p("line", r"(?P<length>\d+)\s*by\s*(?P<width>\d+)\s*line within (?P<range>\d+)(?: squares?)?"),
    burst=_p("burst", r"(?P<radius>\d+)\s*burst"),
    first_digits=_p("first_digits", r"(?P<digits>\d+)"),
)

RESIST_ATTRIBUTE = _p(
    "resist_attribute",
    r"makes?\s+an?\s+(?P<stat>Might|Agility|Reason|Intuition|Presence|MGT|AGI|AGL|REA|INU|PRS|M|A|R|I|P)\s+test",
)

# One "<damage type> <value>" item of an immunity or weakness list
RESISTANCE_ENTRY = _p("resistance_entry", r"^\s*(?P<damage_type>[A-Za-z]+)\s+(?P<value>-?\d+)\s*$")

CATALOG = PatternCatalog(
    legacy=LEGACY,
    retail=RETAIL,
    malice=MALICE,
    targeting=TARGETING,
    resist_attribute=RESIST_ATTRIBUTE,
    resistance_entry=RESISTANCE_ENTRY,
)
