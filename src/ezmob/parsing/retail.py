"""
Retail stat block format.

Header lines:
    1. <Name> Level N [Minion] <Role>
    2. <Keywords> EV N
    3. <Size> <Speed> <Stamina> <Stability> <Free Strike>
    4. column legend (ignored)
    5. Immunity: ... Weakness: ...
    6. Movement: ... [With Captain: ...]
    7. Might +N Agility +N Reason +N Intuition +N Presence +N

The body starts on line 8. Features start with "t <name>", abilities
with a one-letter icon code ("a Sword Stab 2d10 + 2 Signature Ability")
and solo blocks with "d <text>" followed by "Name: description" lines.
"""

from __future__ import annotations

from ..models import Ability, ActionType, Categorization, Feature
from ..utils import to_int
from .fields import (
    ImmunityWeaknessFields,
    MovementCaptainFields,
    NamedDescriptionFields,
    RetailAbilityFields,
    SsssfsFields,
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
from .patterns import RETAIL


class RetailHeader:
    """Reads header lines 1-3 and 5-7 of a retail stat block."""

    def parse_header(self, ctx: ParseContext) -> None:
        ctx.log.debug("RETAILPARSER PARSEHEADER for [%s]", ctx.monster.name)
        parse_name_line(ctx, 1)
        parse_keywords_ev_line(ctx, 2)
        self._parse_ssssfs_line(ctx)
        self._parse_immunity_weakness_line(ctx)
        self._parse_movement_captain_line(ctx)
        parse_characteristics_line(ctx, 7)

    def _parse_ssssfs_line(self, ctx: ParseContext) -> None:
        line = ctx.cursor.peek_at(3)
        fields = extract(ctx.patterns.header["ssssfs"], line, SsssfsFields)

        values: dict[str, int | None] = {}
        size = None
        if fields is not None:
            values = {key: to_int(fields[key]) for key in ("stamina", "speed", "stability", "free_strike")}
            size = ctx.config.valid_size(fields["size"])

        stability = values.get("stability")
        if (
            (values.get("stamina") or 0) <= 0
            or (values.get("speed") or 0) <= 0
            or size is None
            or stability is None
            or stability <= STABILITY_UNSET
            or (values.get("free_strike") or 0) <= 0
        ):
            ctx.invalidate(f"Bad Size/Speed/Stam/Stab/FS line for monster {ctx.monster.name}.")
            ctx.log.debug("RETAILPARSER PARSEHEADER BADSSSSFS [%s]", line)
            return

        ctx.monster.stamina = values["stamina"]
        ctx.monster.speed = values["speed"]
        ctx.monster.size = size
        ctx.monster.stability = stability
        ctx.monster.free_strike = values["free_strike"]

    def _parse_immunity_weakness_line(self, ctx: ParseContext) -> None:
        line = ctx.cursor.peek_at(5)
        fields = extract(ctx.patterns.header["immunity_weakness"], line, ImmunityWeaknessFields)
        ctx.log.debug("RETAILPARSER IMMUNITYWEAKNESS [%s] %s", line, fields)
        if fields is not None:
            parse_immunities(ctx, fields["immunities"], 1)
            parse_immunities(ctx, fields["weaknesses"], -1)

    def _parse_movement_captain_line(self, ctx: ParseContext) -> None:
        line = ctx.cursor.peek_at(6)
        fields = extract(ctx.patterns.header["movement_captain"], line, MovementCaptainFields)
        if fields is None:
            ctx.invalidate(f"Bad movement / captain for {ctx.monster.name}")
            ctx.log.debug("RETAILPARSER PARSEHEADER BADMOVECAPTAIN [%s]", line)
            return

        ctx.monster.movement_speeds = map_move_speeds(fields["movement"], ctx.monster.speed)
        ctx.monster.with_captain = (fields["with_captain"] or "").strip() or None


class RetailBody:
    """Reads features, solo blocks and abilities from line 8 onward."""

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
                ctx.monster.features.append(Feature(name=name, description=parse_feature(ctx, name, "")))
            elif patterns.solo_name is not None and patterns.solo_name.search(line):
                self._parse_solo_features(ctx)
            else:
                ability = extract(patterns.ability.name, line, RetailAbilityFields)
                if ability is not None:
                    self._parse_ability(ctx, ability)

    def _parse_solo_features(self, ctx: ParseContext) -> None:
        """Collect the "Name: description" features following a solo line."""
        cursor = ctx.cursor
        while not cursor.at_end:
            line = cursor.next_line()
            ctx.log.debug("PARSEBODY SOLOLINE [%s]", line)

            fields = extract(ctx.patterns.solo_feature, line, NamedDescriptionFields)
            if fields is None:
                cursor.push_back()
                break

            name = (fields["name"] or "").strip()
            description = parse_feature(ctx, name, fields["description"] or "")
            ctx.monster.features.append(Feature(name=name, description=description))

    def _parse_ability(self, ctx: ParseContext, fields: RetailAbilityFields) -> None:
        malice = to_int(fields["malice"]) or 0
        villain = to_int(fields["villain_action"]) or 0

        if malice > 0:
            categorization = Categorization.HEROIC
        elif villain > 0:
            categorization = Categorization.VILLAIN_ACTION
        else:
            categorization = Categorization.SIGNATURE

        ability = Ability(
            name=(fields["name"] or "").strip(),
            action=ActionType.MAIN_ACTION,
            categorization=categorization,
            villain_action=f"Villain Action {villain}" if villain > 0 else None,
            signature=bool(fields["signature"]),
            cost=malice,
        )
        if fields["roll"]:
            ability.ensure_roll().roll = fields["roll"]

        with ctx.log.section(f"Parse Ability [{ability.name}]"):
            parse_ability_lines(ctx, ability, lambda key, captures: self._on_line(ability, key, captures))
            finish_ability(ctx, ability)

    def _on_line(self, ability: Ability, key: str, fields: dict[str, str | None]) -> bool:
        if key != "keywords_action":
            return False

        ability.keywords = fields["keywords"]
        action = fields["action"]
        if action:
            ability.action = ActionType.from_text(action) or ability.action
            if "trigger" in action.lower():
                ability.categorization = Categorization.TRIGGER
        return True


RETAIL_FORMAT = MonsterFormat(
    name="retail",
    patterns=RETAIL,
    header=RetailHeader(),
    body=RetailBody(),
    body_start=8,
)
