"""
Pytest configuration and fixtures for ezmob tests.
"""

import sys
from pathlib import Path

import pytest

# Add src directory to Python path to allow importing ezmob
src_path = Path(__file__).parent.parent / "src"
if str(src_path) not in sys.path:
    sys.path.insert(0, str(src_path))

from ezmob.config import ImporterConfig  # noqa: E402
from ezmob.host import InMemoryHost  # noqa: E402
from ezmob.logutils import ImportLog  # noqa: E402


LEGACY_GOBLIN_WARRIOR = """\
GOBLIN WARRIOR LEVEL 1 HARRIER
Goblin, Humanoid EV 3
Stamina: 15 Immunity: fire 2, poison 3
Speed: 6 (climb) Size: 1S / Stability: 0
Free Strike: 1
Might -1 Agility +2 Reason +0 Intuition +0 Presence -1
Crafty: The goblin doesn't provoke opportunity attacks by moving.

Spear Charge (Main Action) 2d10 + 2 Signature
Keywords: Charge, Melee, Strike, Weapon
Distance: Melee 1 Target: One creature
#sun# #lte# 11 3 damage
#star# 12-16 4 damage
#sun# 17+ 5 damage
"""

RETAIL_GOBLIN_ASSASSIN = """\
Goblin Assassin Level 1 Horde Ambusher
Goblin, Humanoid EV 3
1S 6 15 0 2
Size Speed Stamina Stability Free Strike
Immunity: - Weakness: -
Movement: climb With Captain: Edge on strikes
Might -2 Agility +2 Reason 0 Intuition 0 Presence -1
t Crafty
The assassin doesn't provoke opportunity attacks by moving.

a Sword Stab 2d10 + 2 Signature Ability
Melee, Strike, Weapon Main action
e Melee 1 x One creature or object
1 4 damage
2 6 damage
3 7 damage
Effect: The assassin hides.
"""

GOBLIN_MALICE = """\
Goblin Malice Basic Malice Features
At the start of any goblin's turn, you can spend Malice to activate one of the following features.
Goblin Mode 3 Malice
Each goblin in the encounter gains a +2 bonus to speed until the end of the round.
Tiny Stabs 5 Malice
One goblin acting this turn makes a free strike against each adjacent enemy.
"""


@pytest.fixture
def legacy_text():
    """A legacy stat block with one feature and one signature ability."""
    return LEGACY_GOBLIN_WARRIOR


@pytest.fixture
def retail_text():
    """A retail stat block with one feature and one signature ability."""
    return RETAIL_GOBLIN_ASSASSIN


@pytest.fixture
def malice_text():
    """A malice block with two malice abilities."""
    return GOBLIN_MALICE


@pytest.fixture
def host():
    """A host seeded with the packaged default tables."""
    return InMemoryHost.with_defaults()


@pytest.fixture
def config():
    """Default importer settings."""
    return ImporterConfig()


@pytest.fixture
def log():
    """A verbose import log, so INFO messages are recorded too."""
    return ImportLog(verbose=True)
