"""
Tests for monster group malice parsing.
"""

from ezmob.entities import EntityKind
from ezmob.logutils import ImportLog
from ezmob.models import MonsterGroup
from ezmob.parsing import MaliceGroupParser, find_malice_groups


def _parser(text: str, host, log: ImportLog | None = None) -> MaliceGroupParser:
    blocks = find_malice_groups(text)
    assert len(blocks) == 1
    return MaliceGroupParser(blocks[0], host, log or ImportLog())


class TestFindMaliceGroups:
    """Segmentation of malice text into groups."""

    def test_group_name_from_header(self, malice_text: str) -> None:
        blocks = find_malice_groups(malice_text)
        assert [b.name for b in blocks] == ["Goblin"]
        assert len(blocks[0].lines) == 6

    def test_two_groups(self, malice_text: str) -> None:
        text = malice_text + "\n" + malice_text.replace("Goblin Malice", "Kobold Malice")
        assert [b.name for b in find_malice_groups(text)] == ["Goblin", "Kobold"]

    def test_text_without_header(self) -> None:
        assert find_malice_groups("Goblin Mode 3 Malice\nSome text.") == []


class TestMaliceGroupParser:
    """Parsing one malice block."""

    def test_abilities(self, malice_text: str, host) -> None:
        parser = _parser(malice_text, host)
        assert parser.parse() is True

        group = parser.group
        assert group.name == "Goblin"
        assert [(a.name, a.resource_number) for a in group.malice_abilities] == [
            ("Goblin Mode", 3),
            ("Tiny Stabs", 5),
        ]
        assert group.malice_abilities[1].description == (
            "One goblin acting this turn makes a free strike against each adjacent enemy."
        )

    def test_resource_cost_is_the_malice_resource(self, malice_text: str, host) -> None:
        malice = host.lookup_existing_entity(EntityKind.CHARACTER_RESOURCE, "Malice")
        parser = _parser(malice_text, host)
        parser.parse()
        assert {a.resource_cost for a in parser.group.malice_abilities} == {malice.id}

    def test_introduction_line_is_skipped(self, malice_text: str, host) -> None:
        parser = _parser(malice_text, host)
        parser.parse()
        assert "At the start" not in parser.group.malice_abilities[0].description

    def test_multi_line_description(self, malice_text: str, host) -> None:
        text = malice_text.replace(
            "until the end of the round.\n",
            "until the end of the round.\n\nThis stacks with other bonuses.\n",
        )
        parser = _parser(text, host)
        parser.parse()
        assert parser.group.malice_abilities[0].description == (
            "Each goblin in the encounter gains a +2 bonus to speed until the end of the round.\n"
            "This stacks with other bonuses."
        )

    def test_same_name_merges_case_insensitively(self, malice_text: str, host) -> None:
        text = malice_text + "GOBLIN MODE 4 Malice\nEvery goblin can shift 1 square.\n"
        parser = _parser(text, host)
        parser.parse()

        abilities = parser.group.malice_abilities
        assert [a.name for a in abilities] == ["Goblin Mode", "Tiny Stabs"]
        assert abilities[0].resource_number == 4
        assert abilities[0].description == "Every goblin can shift 1 square."

    def test_existing_group_is_not_parsed(self, malice_text: str, host) -> None:
        host.persist_monster_group(MonsterGroup(name="goblin"))
        log = ImportLog()
        parser = _parser(malice_text, host, log)

        assert parser.parse() is False
        assert parser.group is None
        assert "!!!! Monster group [Goblin] exists. Not importing." in log.warnings

    def test_no_descriptions_is_not_importable(self, host) -> None:
        log = ImportLog()
        parser = _parser("Goblin Malice Basic Malice Features\nGoblin Mode 3 Malice\n", host, log)

        assert parser.parse() is False
        assert [a.name for a in parser.group.malice_abilities] == ["Goblin Mode"]
        assert "!!!! No malice feature text found for monster group [Goblin]." in log.warnings
