"""
EZMob - MCDM monster stat block importer, with an MCP server built on FastMCP 2.8.0+.
"""

from .config import ImporterConfig
from .host import EZMobError, HostError, ImportHost, InMemoryHost
from .importers import ImportReport
from .models import *
from .pipeline import ParseResult, import_malice_text, import_text, parse_text

try:
    from importlib.metadata import version as _get_version
    __version__ = _get_version("ezmob")
except Exception:
    __version__ = "0.1.0"  # Fallback if metadata unavailable
__all__ = [
    "EZMobError",
    "HostError",
    "ImportHost",
    "ImportReport",
    "ImporterConfig",
    "InMemoryHost",
    "ParseResult",
    "import_malice_text",
    "import_text",
    "parse_text",
]
