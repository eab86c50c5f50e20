"""
Tests for the legacy stat block parser.
"""

from ezmob.logutils import ImportLog
from ezmob.models import ActionType, Categorization, MonsterBlock, RollType, TargetType
from ezmob.parsing import LEGACY_FORMAT, MonsterParser, find_monsters, parse_monster
from ezmob.parsing.patterns import LEGACY
from ezmob.pipeline import import_text


def _parse(text: str, host, log: ImportLog | None = None) -> MonsterParser:
    blocks = find_monsters(text, LEGACY.header["name"])
    assert len(blocks) == 1
    parser = MonsterParser(blocks[0], LEGACY_FORMAT, host, log or ImportLog())
    parser.parse()
    return parser


class TestFindMonsters:
    """Segmentation of input text into stat blocks."""

    def test_single_block(self, legacy_text: str) -> None:
        blocks = find_monsters(legacy_text, LEGACY.header["name"])
        assert [b.name for b in blocks] == ["Goblin Warrior"]
        assert blocks[0].lines[0] == "GOBLIN WARRIOR LEVEL 1 HARRIER"

    def test_text_before_first_header_is_dropped(self, legacy_text: str) -> None:
        blocks = find_monsters("Some preamble\n\n" + legacy_text, LEGACY.header["name"])
        assert len(blocks) == 1
        assert blocks[0].lines[0] == "GOBLIN WARRIOR LEVEL 1 HARRIER"

    def test_multiple_blocks(self, legacy_text: str) -> None:
        text = legacy_text + "\n" + legacy_text.replace("GOBLIN WARRIOR", "GOBLIN SPEARMAN")
        blocks = find_monsters(text, LEGACY.header["name"])
        assert [b.name for b in blocks] == ["Goblin Warrior", "Goblin Spearman"]

    def test_no_headers(self) -> None:
        assert find_monsters("nothing to see here\nat all", LEGACY.header["name"]) == []
        assert find_monsters("", LEGACY.header["name"]) == []


class TestLegacyHeader:
    """Header lines 1-6."""

    def test_header_fields(self, legacy_text: str, host) -> None:
        parser = _parse(legacy_text, host)
        monster = parser.monster

        assert parser.is_importable is True
        assert monster.name == "Goblin Warrior"
        assert monster.level == 1
        assert monster.role == "Harrier"
        assert monster.is_minion is False
        assert monster.keywords == {"Goblin", "Humanoid"}
        assert monster.folder_name == "Goblin"
        assert monster.ev == 3
        assert monster.stamina == 15
        assert monster.speed == 6
        assert monster.movement_speeds == {"climb": 6}
        assert monster.size == "1S"
        assert monster.stability == 0
        assert monster.free_strike == 1
        assert monster.with_captain is None
        assert {k: v.base_value for k, v in monster.characteristics.items()} == {
            "mgt": -1, "agl": 2, "rea": 0, "inu": 0, "prs": -1,
        }

    def test_immunities(self, legacy_text: str, host) -> None:
        monster = _parse(legacy_text, host).monster
        assert [(r.damage_type, r.dr) for r in monster.resistances] == [("fire", 2), ("poison", 3)]

    def test_weaknesses_are_negative(self, legacy_text: str, host) -> None:
        text = legacy_text.replace("Immunity: fire 2, poison 3", "Weakness: acid 2, fire 3")
        monster = _parse(text, host).monster
        assert [(r.damage_type, r.dr) for r in monster.resistances] == [("acid", -2), ("fire", -3)]

    def test_unknown_damage_type_becomes_keyword(self, legacy_text: str, host) -> None:
        text = legacy_text.replace("Immunity: fire 2, poison 3", "Immunity: magic 4")
        parser = _parse(text, host)
        assert parser.is_importable is True
        [entry] = parser.monster.resistances
        assert entry.damage_type == "all"
        assert entry.keywords == {"magic"}
        assert entry.dr == 4

    def test_with_captain(self, legacy_text: str, host) -> None:
        text = legacy_text.replace("Free Strike: 1", "With Captain: +1 damage bonus to strikes Free Strike: 2")
        monster = _parse(text, host).monster
        assert monster.with_captain == "+1 damage bonus to strikes"
        assert monster.free_strike == 2

    def test_level_zero_invalidates(self, legacy_text: str, host) -> None:
        log = ImportLog()
        parser = _parse(legacy_text.replace("LEVEL 1", "LEVEL 0"), host, log)
        assert parser.is_importable is False
        assert "!!!! Bad header for monster Goblin Warrior" in log.warnings

    def test_bad_line_keeps_parsing(self, legacy_text: str, host) -> None:
        log = ImportLog()
        parser = _parse(legacy_text.replace("Stamina: 15", "Stamina: 0"), host, log)
        assert parser.is_importable is False
        assert parser.monster.stamina is None
        # Later lines are still read
        assert parser.monster.speed == 6
        assert len(parser.monster.resistances) == 2
        assert len(parser.monster.abilities) == 1

    def test_stability_all_is_invalid(self, legacy_text: str, host) -> None:
        parser = _parse(legacy_text.replace("Stability: 0", "Stability: all"), host)
        assert parser.is_importable is False
        assert parser.monster.stability is None

    def test_bad_size_is_invalid(self, legacy_text: str, host) -> None:
        parser = _parse(legacy_text.replace("Size: 1S", "Size: 9X"), host)
        assert parser.is_importable is False

    def test_characteristics_are_all_or_nothing(self, legacy_text: str, host) -> None:
        parser = _parse(legacy_text.replace("Presence -1", "Presence 101"), host)
        assert parser.is_importable is False
        assert parser.monster.characteristics is None

    def test_missing_characteristic_invalidates(self, legacy_text: str, host) -> None:
        log = ImportLog()
        parser = _parse(legacy_text.replace(" Presence -1", ""), host, log)
        assert parser.is_importable is False
        assert parser.monster.characteristics is None
        assert "!!!! Bad Characteristics line for monster Goblin Warrior." in log.warnings

    def test_missing_role_invalidates(self, legacy_text: str, host) -> None:
        log = ImportLog()
        lines = ["GOBLIN WARRIOR LEVEL 1"] + legacy_text.splitlines()[1:]
        parser = MonsterParser(MonsterBlock(name="Goblin Warrior", lines=lines), LEGACY_FORMAT, host, log)

        assert parser.parse() is False
        assert parser.monster.role is None
        assert "!!!! Bad header for monster Goblin Warrior" in log.warnings

    def test_header_without_role_is_not_imported(self, legacy_text: str, host) -> None:
        text = legacy_text.replace("GOBLIN WARRIOR LEVEL 1 HARRIER", "GOBLIN WARRIOR LEVEL 1")
        report = import_text(text, host)
        assert report.status == "failed"
        assert report.imported == []


class TestLegacyBody:
    """Features and abilities from line 7."""

    def test_feature(self, legacy_text: str, host) -> None:
        monster = _parse(legacy_text, host).monster
        assert len(monster.features) == 1
        assert monster.features[0].name == "Crafty"
        assert monster.features[0].description == "The goblin doesn't provoke opportunity attacks by moving."

    def test_multi_line_feature_stops_at_blank_line(self, legacy_text: str, host) -> None:
        text = legacy_text.replace(
            "attacks by moving.\n",
            "attacks\nby moving.\n",
        )
        monster = _parse(text, host).monster
        assert monster.features[0].description == "The goblin doesn't provoke opportunity attacks by moving."
        assert len(monster.abilities) == 1

    def test_signature_ability(self, legacy_text: str, host) -> None:
        ability = _parse(legacy_text, host).monster.abilities[0]

        assert ability.name == "Spear Charge"
        assert ability.action is ActionType.MAIN_ACTION
        assert ability.categorization is Categorization.SIGNATURE
        assert ability.signature is True
        assert ability.cost == 0
        assert ability.keywords == "Charge, Melee, Strike, Weapon"
        assert ability.distance == "1"
        assert ability.target == "One creature"
        assert ability.is_importable is True

        assert ability.roll.roll == "2d10 + 2"
        assert ability.roll.type is RollType.POWER
        table = ability.roll.roll_table
        assert (table.tier1, table.tier2, table.tier3) == ("3 damage", "4 damage", "5 damage")

        geometry = ability.target_distance
        assert geometry.target_type is TargetType.TARGET
        assert geometry.num_targets == 1
        assert geometry.range == 1

    def test_missing_tier_excludes_ability(self, legacy_text: str, host) -> None:
        log = ImportLog()
        parser = _parse(legacy_text.replace("#star# 12-16 4 damage\n", ""), host, log)
        assert parser.monster.abilities == []
        assert "!!!! Invalid Ability [Spear Charge] - Roll Table missing Tier 2." in log.warnings

    def test_effect_and_malice(self, legacy_text: str, host) -> None:
        text = legacy_text + "Effect: The target is slowed.\n3 Malice: The target is also prone.\n"
        ability = _parse(text, host).monster.abilities[0]
        assert ability.effect == "The target is slowed."
        assert [(m.name, m.description) for m in ability.malice] == [("3 Malice", "The target is also prone.")]

    def test_villain_action(self, legacy_text: str, host) -> None:
        text = legacy_text + (
            "\nWar Cry (Villain Action 1)\n"
            "Keywords: Area\n"
            "Distance: 5 burst Target: Each enemy\n"
            "Effect: Each target is frightened.\n"
        )
        abilities = _parse(text, host).monster.abilities
        war_cry = abilities[1]
        assert war_cry.name == "War Cry"
        assert war_cry.action is ActionType.MAIN_ACTION
        assert war_cry.villain_action == "Villain Action 1"
        assert war_cry.categorization is Categorization.HEROIC
        assert war_cry.roll is None
        assert war_cry.target_distance.target_type is TargetType.ALL
        assert war_cry.target_distance.range == 5

    def test_triggered_action(self, legacy_text: str, host) -> None:
        text = legacy_text + (
            "\nSidestep (Triggered Action)\n"
            "Keywords: -\n"
            "Distance: Self Target: Self\n"
            "Trigger: The goblin is targeted by a strike.\n"
            "Effect: The goblin shifts 1 square.\n"
        )
        sidestep = _parse(text, host).monster.abilities[1]
        assert sidestep.action is ActionType.TRIGGERED_ACTION
        assert sidestep.categorization is Categorization.TRIGGER
        assert sidestep.trigger == "The goblin is targeted by a strike."
        assert sidestep.target_distance.has_geometry is False


class TestParseMonster:
    """The parse_monster convenience wrapper."""

    def test_returns_monster_and_source(self, legacy_text: str, host) -> None:
        block = find_monsters(legacy_text, LEGACY.header["name"])[0]
        monster, source = parse_monster(block, LEGACY_FORMAT, host, ImportLog())
        assert monster.name == "Goblin Warrior"
        assert source.startswith("GOBLIN WARRIOR LEVEL 1 HARRIER\nGoblin, Humanoid EV 3")

    def test_invalid_block_returns_nothing(self, legacy_text: str, host) -> None:
        block = find_monsters(legacy_text.replace("EV 3", "EV 0"), LEGACY.header["name"])[0]
        assert parse_monster(block, LEGACY_FORMAT, host, ImportLog()) == (None, None)

    def test_parsing_twice_gives_identical_records(self, legacy_text: str, host) -> None:
        first = _parse(legacy_text, host).monster
        second = _parse(legacy_text, host).monster
        assert first == second
