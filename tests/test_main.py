"""
Tests for the MCP tool functions in main.py.
"""

import json

import pytest

from ezmob import main as m
from ezmob.config import ImporterConfig
from ezmob.host import InMemoryHost


def _call(tool, *args, **kwargs):
    # Decorated tools expose the plain function as .fn
    return getattr(tool, "fn", tool)(*args, **kwargs)


@pytest.fixture(autouse=True)
def fresh_server_state(monkeypatch: pytest.MonkeyPatch) -> InMemoryHost:
    """Give every test its own host and config."""
    host = InMemoryHost.with_defaults()
    monkeypatch.setattr(m, "host", host)
    monkeypatch.setattr(m, "config", ImporterConfig())
    return host


class TestImportTools:
    """import_monsters and import_malice."""

    def test_import_monsters_returns_report(self, legacy_text: str) -> None:
        result = _call(m.import_monsters, legacy_text)
        assert result.startswith("EZMob Import Report (legacy)\nStatus: SUCCESS")
        assert "  - Goblin Warrior: Level 1 Harrier" in result

    def test_import_monsters_empty(self) -> None:
        result = _call(m.import_monsters, "")
        assert "Status: FAILED" in result
        assert "No text found in input!" in result

    def test_import_malice(self, malice_text: str) -> None:
        result = _call(m.import_malice, malice_text)
        assert result.startswith("EZMob Import Report (malice)")
        assert "  - Goblin: Goblin Mode, Tiny Stabs" in result


class TestQueryTools:
    """parse_monsters and list_bestiary."""

    def test_parse_monsters_returns_json(self, retail_text: str) -> None:
        data = json.loads(_call(m.parse_monsters, retail_text))
        assert data["source_format"] == "retail"
        assert [monster["name"] for monster in data["monsters"]] == ["Goblin Assassin"]
        assert data["monsters"][0]["abilities"][0]["roll"]["roll"] == "2d10 + 2"

    def test_list_bestiary(self, legacy_text: str, retail_text: str) -> None:
        assert _call(m.list_bestiary) == "No monsters imported yet."

        _call(m.import_monsters, legacy_text)
        _call(m.import_monsters, retail_text)
        assert _call(m.list_bestiary) == (
            "Bestiary (2 monsters):\n"
            "  Goblin: Goblin Assassin, Goblin Warrior"
        )


class TestFlagsTool:
    """The ezmob flag toggle."""

    def test_toggle(self) -> None:
        assert _call(m.ezmob, "d") == "[d]ebug: True [v]erbose: False"
        assert _call(m.ezmob, "dv") == "[d]ebug: False [v]erbose: True"
        assert m.config.verbose is True

    def test_no_flags(self) -> None:
        assert _call(m.ezmob) == "[d]ebug: False [v]erbose: False"
