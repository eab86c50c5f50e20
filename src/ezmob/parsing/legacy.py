"""
Legacy stat block format.

Header lines:
    1. <Name> Level N [Minion] <Role>
    2. <Keywords> EV N
    3. Stamina N Immunity ... Weakness ...
    4. Speed N (move types) Size S / Stability N
    5. [With Captain ...] Free Strike N
    6. Might +N Agility +N Reason +N Intuition +N Presence +N

The body starts on line 7 with "Name: description" features and
"Name (Action) 2d10 + N" abilities.
"""

from __future__ import annotations

from ..models import Ability, ActionType, Categorization, Feature
from ..utils import to_int, to_title_case
from .fields import (
    ImmunityFields,
    LegacyAbilityFields,
    NamedDescriptionFields,
    RollFields,
    SpeedSizeStabilityFields,
    StaminaFields,
    TraitsFreeStrikeFields,
    WeaknessFields,
    extract,
)
from .monster import (
    STABILITY_UNSET,
    MonsterFormat,
    ParseContext,
    finish_ability,
    map_move_speeds,
    parse_ability_lines,
    parse_characteristics_line,
    parse_feature,
    parse_immunities,
    parse_keywords_ev_line,
    parse_name_line,
)
from .patterns import LEGACY


class LegacyHeader:
    """Reads header lines 1-6 of a legacy stat block."""

    def parse_header(self, ctx: ParseContext) -> None:
        ctx.log.debug("LEGACYPARSER PARSEHEADER for [%s]", ctx.monster.name)
        parse_name_line(ctx, 1)
        parse_keywords_ev_line(ctx, 2)
        self._parse_stamina_immunity_line(ctx)
        self._parse_speed_size_stability_line(ctx)
        self._parse_traits_free_strike_line(ctx)
        parse_characteristics_line(ctx, 6)

    def _parse_stamina_immunity_line(self, ctx: ParseContext) -> None:
        line = ctx.cursor.peek_at(3)
        header = ctx.patterns.header

        fields = extract(header["stamina"], line, StaminaFields)
        stamina = to_int(fields["stamina"]) if fields is not None else None
        if stamina is not None and stamina > 0:
            ctx.monster.stamina = stamina
        else:
            ctx.invalidate(f"Bad Stamina-Immunities line for monster {ctx.monster.name}.")
            ctx.log.debug("PARSEHEADER BADSTAMIMM [%s]", line)

        immunity = extract(header["immunities"], line, ImmunityFields)
        if immunity is not None:
            parse_immunities(ctx, immunity["immunity"], 1)

        weakness = extract(header["weaknesses"], line, WeaknessFields)
        if weakness is not None:
            parse_immunities(ctx, weakness["weakness"], -1)

    def _parse_speed_size_stability_line(self, ctx: ParseContext) -> None:
        line = ctx.cursor.peek_at(4)
        fields = extract(ctx.patterns.header["speed_size_stability"], line, SpeedSizeStabilityFields)

        speed = size = stability = None
        if fields is not None:
            speed = to_int(fields["speed"])
            size = ctx.config.valid_size(fields["size"])
            stability = to_int(fields["stability"])
        ctx.log.debug("SPEED [%s] SIZE [%s] STABILITY [%s]", speed, size, stability)

        if speed is None or speed <= 0 or size is None or stability is None or stability <= STABILITY_UNSET:
            ctx.invalidate(f"Bad Speed-Stability line for monster {ctx.monster.name}.")
            ctx.log.debug("PARSEHEADER BADSPEEDSTABIL [%s]", line)
            return

        ctx.monster.speed = speed
        ctx.monster.size = size
        ctx.monster.stability = stability
        ctx.monster.movement_speeds = map_move_speeds(fields["move_type"], speed)

    def _parse_traits_free_strike_line(self, ctx: ParseContext) -> None:
        line = ctx.cursor.peek_at(5)
        fields = extract(ctx.patterns.header["traits_free_strike"], line, TraitsFreeStrikeFields)
        free_strike = to_int(fields["free_strike"]) if fields is not None else None

        if free_strike is None or free_strike <= 0:
            ctx.invalidate(f"Bad Traits - Free Strike line for monster {ctx.monster.name}.")
            ctx.log.debug("PARSEHEADER BADTRAITSFREESTRIKE [%s]", line)
            return

        ctx.monster.free_strike = free_strike
        ctx.monster.with_captain = (fields["with_captain"] or "").strip() or None


class LegacyBody:
    """Reads features and abilities from line 7 onward."""

    def parse_body(self, ctx: ParseContext) -> None:
        patterns = ctx.patterns
        cursor = ctx.cursor
        ctx.log.debug("PARSEBODY start at_end [%s] lines [%d].", cursor.at_end, len(cursor))

        while not cursor.at_end:
            line = cursor.next_line()
            ctx.log.debug("PARSEBODY BODYLINE [%s]", line)

            feature = extract(patterns.feature, line, NamedDescriptionFields)
            if feature is not None:
                name = (feature["name"] or "").strip()
                description = parse_feature(ctx, name, feature["description"] or "")
                ctx.monster.features.append(Feature(name=name, description=description))
                continue

            ability = extract(patterns.ability.name, line, LegacyAbilityFields)
            if ability is not None:
                self._parse_ability(ctx, ability, line)

    def _parse_ability(self, ctx: ParseContext, fields: LegacyAbilityFields, line: str) -> None:
        action_text = " ".join((fields["action"] or "").lower().split())
        is_villain_action = action_text.startswith("villain action")
        cost = to_int(fields["vp"]) or 0

        if is_villain_action or fields["vp"] is not None:
            categorization = Categorization.HEROIC
        elif action_text.startswith("triggered action"):
            categorization = Categorization.TRIGGER
        else:
            categorization = Categorization.SIGNATURE

        ability = Ability(
            name=(fields["name"] or "").strip(),
            action=ActionType.MAIN_ACTION if is_villain_action else ActionType.from_text(action_text),
            categorization=categorization,
            villain_action=to_title_case(action_text) if is_villain_action else None,
            signature=fields["signature"] is not None,
            cost=cost,
        )

        with ctx.log.section(f"Parse Ability [{ability.name}]"):
            # Power roll on the name line, if there is one
            roll = extract(ctx.patterns.ability.roll, line, RollFields)
            if roll is not None and roll["roll"]:
                ability.ensure_roll().roll = roll["roll"]

            parse_ability_lines(ctx, ability, lambda key, captures: self._on_line(ctx, ability, key, captures))
            finish_ability(ctx, ability)

    def _on_line(self, ctx: ParseContext, ability: Ability, key: str, fields: dict[str, str | None]) -> bool:
        if key == "keywords":
            ability.keywords = fields["description"]
        elif key == "target":
            ability.target = parse_feature(ctx, key, fields["description"] or "")
        else:
            return False
        return True


LEGACY_FORMAT = MonsterFormat(
    name="legacy",
    patterns=LEGACY,
    header=LegacyHeader(),
    body=LegacyBody(),
    body_start=7,
)
