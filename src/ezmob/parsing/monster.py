"""
Shared monster stat block parsing.

A stat block is parsed by a ``MonsterParser`` driving a ``MonsterFormat``:
a header strategy reading fixed-position lines and a body strategy
classifying the remaining lines into features and abilities. The free
functions here are the pieces both formats share; they take the
``ParseContext`` explicitly instead of living on a base class.

Nothing in this module raises for malformed text. A bad header line
marks the monster as not importable and parsing carries on, so one pass
reports every problem in the block.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol

from ..config import ImporterConfig
from ..entities import EntityKind
from ..logutils import ImportLog
from ..models import (
    Ability,
    Characteristic,
    MaliceEntry,
    Monster,
    MonsterBlock,
    ResistanceEntry,
    RollType,
)
from ..utils import csv_to_flags, to_int, to_title_case
from .cursor import LineCursor, normalize
from .fields import (
    CharacteristicFields,
    KeywordsEvFields,
    NameFields,
    ResistanceEntryFields,
    ResistAttributeFields,
    extract,
    first_match,
    matches_any,
)
from .patterns import CATALOG, FormatPatterns, NamedPattern, PatternCatalog
from .targeting import resolve_target_distance

if TYPE_CHECKING:
    from ..host import ImportHost

CHARACTERISTICS = ("mgt", "agl", "rea", "inu", "prs")

RESIST_ATTRIBUTE_CODES = {
    "might": "mgt", "mgt": "mgt", "m": "mgt",
    "agility": "agl", "agi": "agl", "agl": "agl", "a": "agl",
    "reason": "rea", "rea": "rea", "r": "rea",
    "intuition": "inu", "inu": "inu", "i": "inu",
    "presence": "prs", "prs": "prs", "p": "prs",
}

# Sentinel for a stability that was not parsed
STABILITY_UNSET = -100

ROLL_TIERS = ("tier1", "tier2", "tier3")


@dataclass
class ParseContext:
    """State of one stat block parse, threaded through the strategies."""
    cursor: LineCursor
    patterns: FormatPatterns
    monster: Monster
    log: ImportLog
    host: "ImportHost"
    config: ImporterConfig
    catalog: PatternCatalog = CATALOG
    importable: bool = True

    def invalidate(self, message: str) -> None:
        """Mark the monster as not importable and say why."""
        self.importable = False
        self.log.warn(message)


class HeaderParser(Protocol):
    def parse_header(self, ctx: ParseContext) -> None:
        ...


class BodyParser(Protocol):
    def parse_body(self, ctx: ParseContext) -> None:
        ...


@dataclass(frozen=True)
class MonsterFormat:
    """A stat block format: its patterns and its header and body strategies.

    Attributes:
        name: "legacy" or "retail".
        patterns: Pattern set of the format.
        header: Reads the fixed-position header lines.
        body: Reads features and abilities.
        body_start: 1-based line number where the body begins.
    """
    name: str
    patterns: FormatPatterns
    header: HeaderParser
    body: BodyParser
    body_start: int

    def find_monsters(self, text: str) -> list[MonsterBlock]:
        return find_monsters(text, self.patterns.header["name"])


def find_monsters(text: str, header_pattern: NamedPattern) -> list[MonsterBlock]:
    """Split *text* into stat blocks.

    Every line whose normalized text matches *header_pattern* starts a
    new block named after the title-cased ``name`` capture; following
    lines belong to the most recent block. Lines before the first header
    are dropped.
    """
    blocks: list[MonsterBlock] = []
    current: MonsterBlock | None = None

    for raw in (text or "").splitlines():
        fields = extract(header_pattern, normalize(raw), NameFields)
        name = (fields["name"] or "").strip() if fields is not None else ""
        if name:
            current = MonsterBlock(name=to_title_case(name), lines=[raw])
            blocks.append(current)
        elif current is not None:
            current.lines.append(raw)

    return blocks


class MonsterParser:
    """Parses one ``MonsterBlock`` with the given format.

    Example:
        parser = MonsterParser(block, LEGACY_FORMAT, host, log)
        if parser.parse():
            importer.run(parser.monster, parser.source)
    """

    def __init__(
        self,
        entry: MonsterBlock,
        fmt: MonsterFormat,
        host: "ImportHost",
        log: ImportLog,
        config: ImporterConfig | None = None,
        catalog: PatternCatalog = CATALOG,
    ):
        self.entry = entry
        self.format = fmt
        self.context = ParseContext(
            cursor=LineCursor(entry.lines),
            patterns=fmt.patterns,
            monster=Monster(name=entry.name),
            log=log,
            host=host,
            config=config or ImporterConfig(),
            catalog=catalog,
        )

    @property
    def monster(self) -> Monster:
        return self.context.monster

    @property
    def is_importable(self) -> bool:
        return self.context.importable

    @property
    def source(self) -> str:
        """The block's original text."""
        return self.context.cursor.full_text()

    def parse(self) -> bool:
        """Parse header then body; return whether the monster is importable."""
        log = self.context.log
        with log.section(f"Parsing monster [{self.entry.name}]"):
            self.monster.name = self.entry.name
            self._parse_header()
            self._parse_body()
            log.debug(
                "MONSTERPARSER PARSE COMPLETE [%s] importable [%s]",
                self.entry.name, self.context.importable,
            )
        return self.context.importable

    def _parse_header(self) -> None:
        self.format.header.parse_header(self.context)
        if self.context.importable:
            self.context.log.info("Header parse successful.")

    def _parse_body(self) -> None:
        self.context.cursor.seek(self.format.body_start)
        self.format.body.parse_body(self.context)
        if self.context.importable:
            self.context.log.info("Body parse successful.")


def parse_monster(
    entry: MonsterBlock,
    fmt: MonsterFormat,
    host: "ImportHost",
    log: ImportLog,
    config: ImporterConfig | None = None,
) -> tuple[Monster | None, str | None]:
    """Parse *entry*; return ``(monster, source text)`` or ``(None, None)``."""
    parser = MonsterParser(entry, fmt, host, log, config)
    if parser.parse():
        return parser.monster, parser.source
    return None, None


# ---------------------------------------------------------------------------
# Header lines shared by both formats
# ---------------------------------------------------------------------------


def parse_name_line(ctx: ParseContext, number: int) -> None:
    """Level, role and minion flag from the "<name> Level N <role>" line."""
    line = ctx.cursor.peek_at(number)
    fields = extract(ctx.patterns.header["name"], line, NameFields)
    level = to_int(fields["level"]) if fields is not None else None
    role = (fields["role"] or "").strip() if fields is not None else ""

    if fields is None or level is None or level < 1 or not role:
        ctx.invalidate(f"Bad header for monster {ctx.monster.name}")
        ctx.log.debug("PARSEHEADER BADHEADER [%s]", line)
        return

    ctx.monster.level = level
    ctx.monster.role = to_title_case(role)
    ctx.monster.is_minion = fields["minion"] is not None


def parse_keywords_ev_line(ctx: ParseContext, number: int) -> None:
    """Keywords, folder name and EV from the "<keywords> EV N" line."""
    line = ctx.cursor.peek_at(number)
    fields = extract(ctx.patterns.header["keywords_ev"], line, KeywordsEvFields)
    ev = to_int(fields["ev"]) if fields is not None else None
    keywords = (fields["keywords"] or "").strip() if fields is not None else ""

    if ev is None or ev <= 0 or not keywords:
        ctx.invalidate(f"Bad Keywords-EV line for monster {ctx.monster.name}.")
        ctx.log.debug("PARSEHEADER BADKEYWORDSEV [%s]", line)
        return

    ctx.monster.keywords = csv_to_flags(keywords)
    ctx.monster.folder_name = keywords.replace(",", " ").split()[0]
    ctx.monster.ev = ev


def parse_characteristics_line(ctx: ParseContext, number: int) -> None:
    """All five characteristics, or none of them."""
    line = ctx.cursor.peek_at(number)
    fields = extract(ctx.patterns.header["characteristics"], line, CharacteristicFields)
    if validate_characteristics(fields):
        ctx.monster.characteristics = map_characteristics(fields)
    else:
        ctx.invalidate(f"Bad Characteristics line for monster {ctx.monster.name}.")
        ctx.log.debug("PARSEHEADER BADCHARACTERISTICS [%s]", line)


def validate_characteristics(fields: CharacteristicFields | None) -> bool:
    """True when every characteristic is present and within [-100, 100]."""
    if fields is None:
        return False
    for key in CHARACTERISTICS:
        value = to_int(fields.get(key))
        if value is None or value < -100 or value > 100:
            return False
    return True


def map_characteristics(fields: CharacteristicFields) -> dict[str, Characteristic]:
    return {key: Characteristic(base_value=to_int(fields.get(key))) for key in CHARACTERISTICS}


def map_move_speeds(move_types: str | None, speed: int | None) -> dict[str, int]:
    """Map each listed movement type to *speed*.

    ``move_types`` is a comma or space separated list; "-" placeholders
    are skipped.
    """
    tokens = (move_types or "").replace(",", " ").split()
    return {token: speed or 0 for token in tokens if token not in ("-", "\u2014")}


def parse_immunities(ctx: ParseContext, raw: str | None, multiplier: int) -> None:
    """Append resistances for a list like "acid 2, fire 3".

    *multiplier* is 1 for immunities and -1 for weaknesses. Damage types
    the host doesn't know become keyword resistances.
    """
    if not raw or len(raw) < 3:
        return

    for item in raw.split(","):
        fields = extract(ctx.catalog.resistance_entry, item, ResistanceEntryFields)
        if fields is None:
            continue
        name = fields["damage_type"] or ""
        dr = to_int(fields["value"]) * multiplier

        known = ctx.host.lookup_existing_entity(EntityKind.DAMAGE_TYPE, name)
        if known is not None:
            entry = ResistanceEntry(damage_type=getattr(known, "name", name).lower(), dr=dr)
        else:
            ctx.log.info(f"Damage type [{name}] not found. Importing as keyword.")
            entry = ResistanceEntry(damage_type="all", keywords={name}, dr=dr)
        ctx.monster.resistances.append(entry)


# ---------------------------------------------------------------------------
# Body helpers
# ---------------------------------------------------------------------------


def parse_feature(
    ctx: ParseContext,
    name: str,
    description: str,
    enders: Iterable[NamedPattern] | None = None,
) -> str:
    """Accumulate free text following a feature, effect or malice line.

    Lines are appended to *description*, separated by a single space,
    until a blank line (consumed), a line matching one of *enders*
    (pushed back) or the end of the block.

    Returns:
        The accumulated description.
    """
    enders = tuple(enders if enders is not None else ctx.patterns.enders)
    cursor = ctx.cursor

    with ctx.log.section(f"Parse Feature [{name}]"):
        while not cursor.at_end:
            line = cursor.next_line()
            if line == "":
                break
            if matches_any(enders, line) is not None:
                cursor.push_back()
                break
            if description and not description.endswith(" "):
                description += " "
            description += line

    return description


def parse_ability_lines(
    ctx: ParseContext,
    ability: Ability,
    on_line: Callable[[str, dict[str, str | None]], bool],
) -> None:
    """Read the lines following an ability's name line.

    Each line is classified by the first matching ability body pattern.
    Roll tiers, distance/target, effect, special, trigger and malice lines
    are handled here; any other key is passed to *on_line*, which returns
    False for keys it doesn't handle either. A line matching nothing ends
    the ability and is pushed back.
    """
    cursor = ctx.cursor
    body = ctx.patterns.ability.body

    while not cursor.at_end:
        line = cursor.next_line()
        if line == "":
            break

        hit = first_match(body, line)
        if hit is None:
            cursor.push_back()
            break

        key, fields = hit
        ctx.log.debug("PARSEABILITY MATCH [%s] %s", key, fields)
        if key in ROLL_TIERS:
            setattr(ability.ensure_roll().roll_table, key, fields["effect"])
        elif key == "distance_target":
            ability.distance = (fields["distance"] or "").strip()
            ability.target = (fields["target"] or "").strip()
        elif key in ("effect", "special", "trigger"):
            setattr(ability, key, parse_feature(ctx, key, fields["description"] or ""))
        elif key == "malice":
            name = (fields["name"] or "").strip()
            description = parse_feature(ctx, name, fields["description"] or "")
            ability.malice.append(MaliceEntry(name=name, description=description))
        elif not on_line(key, fields):
            ctx.log.error(f"Matched key [{key}] not processed.")


def extract_resist_attribute(text: str | None, catalog: PatternCatalog = CATALOG) -> str | None:
    """Characteristic code of a "makes a <characteristic> test" clause."""
    if not text:
        return None
    fields = extract(catalog.resist_attribute, text, ResistAttributeFields)
    if fields is None or not fields["stat"]:
        return None
    return RESIST_ATTRIBUTE_CODES.get(fields["stat"].lower())


def validate_ability(ability: Ability, log: ImportLog, catalog: PatternCatalog = CATALOG) -> bool:
    """Check an ability is complete enough to import.

    Resolves the ability's target geometry, types its roll as a power
    roll (literal dice captured) or a resistance roll (characteristic
    found in the effect text) and requires all three roll tiers whenever
    there is a roll. Sets and returns ``ability.is_importable``.
    """
    ability.is_importable = True

    if not ability.name:
        ability.is_importable = False
        log.warn("Invalid Ability - Name not found.")

    if ability.action is None:
        ability.is_importable = False
        log.warn(f"Invalid Ability [{ability.name}] - No Action.")

    resolve_target_distance(ability, log, catalog.targeting)

    roll = ability.roll
    if roll is not None:
        if roll.roll:
            roll.type = RollType.POWER
        else:
            roll.type = None
            attribute = extract_resist_attribute(ability.effect, catalog)
            if attribute:
                roll.type = RollType.RESIST
                roll.resist_attr = attribute
                log.debug("RESISTROLL:: validate [%s] [%s]", ability.name, attribute)
            else:
                ability.is_importable = False
                log.warn(f"Invalid Ability [{ability.name}] - Roll resistance without attribute.")

        for tier in roll.roll_table.missing_tiers():
            ability.is_importable = False
            log.warn(f"Invalid Ability [{ability.name}] - Roll Table missing Tier {tier}.")

    return ability.is_importable


def finish_ability(ctx: ParseContext, ability: Ability) -> None:
    """Validate a parsed ability and keep it on the monster if it passed."""
    valid = validate_ability(ability, ctx.log, ctx.catalog)
    ctx.log.info(f"Ability [{ability.name}] Valid = [{valid}].")
    if valid:
        ctx.monster.abilities.append(ability)
