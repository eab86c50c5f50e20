"""
Tests for the pattern catalog and field extraction.
"""

import pytest

from ezmob.parsing.fields import (
    CharacteristicFields,
    KeywordsEvFields,
    NameFields,
    RetailAbilityFields,
    SpeedSizeStabilityFields,
    extract,
    first_match,
    matches_any,
)
from ezmob.parsing.patterns import CATALOG, LEGACY, MALICE, RETAIL


class TestSharedHeaderPatterns:
    """Name and keywords/EV lines, shared by both formats."""

    def test_name_line(self) -> None:
        fields = extract(LEGACY.header["name"], "Goblin Warrior Level 1 Harrier", NameFields)
        assert fields is not None
        assert fields["name"] == "Goblin Warrior"
        assert fields["level"] == "1"
        assert fields["minion"] is None
        assert fields["role"] == "Harrier"

    def test_name_line_minion(self) -> None:
        fields = extract(RETAIL.header["name"], "Goblin Spinecleaver Level 1 Minion Brute", NameFields)
        assert fields is not None
        assert fields["minion"] == " Minion"
        assert fields["role"] == "Brute"

    def test_name_line_is_case_insensitive(self) -> None:
        fields = extract(LEGACY.header["name"], "GOBLIN WARRIOR LVL 2 HARRIER", NameFields)
        assert fields is not None
        assert fields["level"] == "2"

    def test_keywords_ev_line(self) -> None:
        fields = extract(LEGACY.header["keywords_ev"], "Goblin, Humanoid EV 3 for four minions", KeywordsEvFields)
        assert fields is not None
        assert fields["keywords"] == "Goblin, Humanoid"
        assert fields["ev"] == "3"

    def test_no_match_returns_none(self) -> None:
        assert extract(LEGACY.header["name"], "Might +2 Agility +1", NameFields) is None
        assert extract(LEGACY.header["name"], None, NameFields) is None


class TestLegacyPatterns:
    """Legacy header and body patterns."""

    def test_speed_size_stability(self) -> None:
        fields = extract(
            LEGACY.header["speed_size_stability"],
            "Speed: 5 (fly, hover) Size: 1M / Stability: 2",
            SpeedSizeStabilityFields,
        )
        assert fields is not None
        assert fields["speed"] == "5"
        assert fields["move_type"] == "fly, hover"
        assert fields["size"] == "1M"
        assert fields["stability"] == "2"

    def test_immunity_stops_before_weakness(self) -> None:
        fields = extract(LEGACY.header["immunities"], "Stamina: 40 Immunity: fire 5 Weakness: cold 3")
        assert fields is not None
        assert fields["immunity"] == "fire 5"

    def test_characteristics(self) -> None:
        fields = extract(
            LEGACY.header["characteristics"],
            "Might -1 Agility +2 Reason +0 Intuition +0 Presence -1",
            CharacteristicFields,
        )
        assert fields is not None
        assert (fields["mgt"], fields["agl"], fields["rea"], fields["inu"], fields["prs"]) == (
            "-1", "2", "0", "0", "-1",
        )

    def test_villain_action_ability(self) -> None:
        fields = extract(LEGACY.ability.name, "Shadow Chains (Villain Action 2)")
        assert fields is not None
        assert fields["name"].strip() == "Shadow Chains"
        assert fields["action"] == "Villain Action 2"

    def test_ability_with_vp_cost(self) -> None:
        fields = extract(LEGACY.ability.name, "Fire Blast (Main Action) 2d10 + 3 3 VP")
        assert fields is not None
        assert fields["vp"] == "3"

    def test_body_patterns_first_match_wins(self) -> None:
        key, fields = first_match(LEGACY.ability.body, "Distance: Ranged 10 Target: Two creatures")
        assert key == "distance_target"
        assert fields["distance"] == "Ranged 10"
        assert fields["target"] == "Two creatures"

    def test_tier_markers(self) -> None:
        assert first_match(LEGACY.ability.body, "#sun# #lte# 11 3 damage")[0] == "tier1"
        assert first_match(LEGACY.ability.body, "#star# 12-16 4 damage")[0] == "tier2"
        assert first_match(LEGACY.ability.body, "#sun# 17+ 5 damage")[0] == "tier3"

    def test_enders_include_the_name_line(self) -> None:
        assert matches_any(LEGACY.enders, "Goblin Sniper Level 1 Artillery") is LEGACY.header["name"]
        assert matches_any(LEGACY.enders, "just some prose") is None


class TestRetailPatterns:
    """Retail header and body patterns."""

    def test_ssssfs_line(self) -> None:
        fields = extract(RETAIL.header["ssssfs"], "1S 6 15 0 2")
        assert fields == {"size": "1S", "speed": "6", "stamina": "15", "stability": "0", "free_strike": "2"}

    def test_movement_with_captain(self) -> None:
        fields = extract(RETAIL.header["movement_captain"], "Movement: climb With Captain: Edge on strikes")
        assert fields is not None
        assert fields["movement"] == "climb"
        assert fields["with_captain"] == "Edge on strikes"

    def test_movement_without_captain(self) -> None:
        fields = extract(RETAIL.header["movement_captain"], "Movement: -")
        assert fields is not None
        assert fields["movement"] == "-"
        assert fields["with_captain"] is None

    def test_ability_line_with_roll_and_signature(self) -> None:
        fields = extract(RETAIL.ability.name, "a Sword Stab 2d10 + 2 Signature Ability", RetailAbilityFields)
        assert fields is not None
        assert fields["name"] == "Sword Stab"
        assert fields["roll"] == "2d10 + 2"
        assert fields["signature"] == "Signature Ability"
        assert fields["malice"] is None

    def test_ability_line_with_malice_cost(self) -> None:
        fields = extract(RETAIL.ability.name, "r Bloody Bolt 2d10 + 3 5 Malice", RetailAbilityFields)
        assert fields is not None
        assert fields["name"] == "Bloody Bolt"
        assert fields["malice"] == "5"

    def test_ability_line_villain_action(self) -> None:
        fields = extract(RETAIL.ability.name, "d Get Them! Villain Action 1", RetailAbilityFields)
        assert fields is not None
        assert fields["name"] == "Get Them!"
        assert fields["villain_action"] == "1"

    def test_solo_line_excludes_villain_actions(self) -> None:
        assert RETAIL.solo_name.search("d Solo Monster") is not None
        assert RETAIL.solo_name.search("d Get Them! Villain Action 1") is None

    def test_keywords_action_line(self) -> None:
        key, fields = first_match(RETAIL.ability.body, "Melee, Strike, Weapon Main action")
        assert key == "keywords_action"
        assert fields["keywords"] == "Melee, Strike, Weapon"
        assert fields["action"] == "Main action"

    def test_tier_line_is_not_a_malice_line(self) -> None:
        assert first_match(RETAIL.ability.body, "2 Malice: The target is also bleeding.")[0] == "malice"
        assert first_match(RETAIL.ability.body, "2 6 damage")[0] == "tier2"


class TestCatalog:
    """Catalog lookups and the malice and targeting patterns."""

    def test_for_format(self) -> None:
        assert CATALOG.for_format("legacy") is LEGACY
        assert CATALOG.for_format("retail") is RETAIL
        with pytest.raises(KeyError):
            CATALOG.for_format("homebrew")

    def test_body_pattern_lookup(self) -> None:
        assert LEGACY.ability.body_pattern("effect").name == "effect"
        with pytest.raises(KeyError):
            LEGACY.ability.body_pattern("missing")

    def test_malice_header_and_ability(self) -> None:
        header = extract(MALICE.header, "Goblin Malice Basic Malice Features")
        assert header is not None
        assert header["name"] == "Goblin"

        ability = extract(MALICE.ability, "Goblin Mode 3 Malice")
        assert ability is not None
        assert ability["name"] == "Goblin Mode"
        assert ability["malice"] == "3"

    def test_resist_attribute(self) -> None:
        fields = extract(CATALOG.resist_attribute, "The target makes an Agility test.")
        assert fields is not None
        assert fields["stat"] == "Agility"
