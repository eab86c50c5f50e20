"""
EZMob MCP Server
Imports MCDM monster stat blocks and monster group malice from plain text.
"""

import json
import logging
import os
from pathlib import Path
from typing import Annotated

from dotenv import load_dotenv
from fastmcp import FastMCP
from pydantic import Field

from .config import ImporterConfig
from .entities import EntityKind
from .host import InMemoryHost
from .logutils import toggle_flags
from .pipeline import import_malice_text, import_text, parse_text

logger = logging.getLogger("ezmob")

logging.basicConfig(
    level=logging.INFO,
    )

if not load_dotenv():
    logger.debug(".env file not found, using environment and defaults.")

config = ImporterConfig.from_env()
logger.debug(f"Importer config: {config.model_dump(exclude={'debug_source_placeholder'})}")

host = InMemoryHost.with_defaults()
seed_path = os.getenv("EZMOB_HOST_SEED")
if seed_path:
    host.load_yaml(Path(seed_path))

mcp = FastMCP(
    name="ezmob"
)

logger.debug("Server initialized, registering tools")


# ----------------------------------------------------------------------
# Tools
# ----------------------------------------------------------------------

@mcp.tool
def import_monsters(
    text: Annotated[str, Field(description="""
        One or more monster stat blocks pasted as plain text. Legacy stat blocks are
        recognized by their sun glyph; everything else is read as the retail format.
        """)],
) -> str:
    """Import monster stat blocks into the bestiary."""
    report = import_text(text, host, config)
    return report.format()


@mcp.tool
def import_malice(
    text: Annotated[str, Field(description="One or more '<Group> Malice ... Malice Features' blocks as plain text")],
) -> str:
    """Create monster groups with their malice abilities.

    Groups that already exist are left untouched.
    """
    report = import_malice_text(text, host, config)
    return report.format()


@mcp.tool
def parse_monsters(
    text: Annotated[str, Field(description="Monster stat blocks as plain text")],
) -> str:
    """Parse monster stat blocks and return the parsed records as JSON without importing them."""
    result = parse_text(text, host, config)
    return json.dumps(result.model_dump(mode="json"), indent=2)


@mcp.tool
def list_bestiary() -> str:
    """List the monsters imported so far, grouped by folder."""
    folders = {getattr(f, "id", None): getattr(f, "name", "") for f in host.all(EntityKind.MONSTER_FOLDER)}
    monsters = host.all(EntityKind.MONSTER)
    if not monsters:
        return "No monsters imported yet."

    grouped: dict[str, list[str]] = {}
    for entry in monsters:
        folder = folders.get(getattr(entry, "parent_folder", None)) or "(root)"
        grouped.setdefault(folder, []).append(entry.name)

    lines = [f"Bestiary ({len(monsters)} monsters):"]
    for folder in sorted(grouped):
        lines.append(f"  {folder}: {', '.join(sorted(grouped[folder]))}")
    return "\n".join(lines)


@mcp.tool
def ezmob(
    args: Annotated[str, Field(description="Flags to toggle: 'd' for debug, 'v' for verbose; both may be given")] = "",
) -> str:
    """Toggle the importer's debug and verbose logging."""
    return toggle_flags(config, args)


def main() -> None:
    """Main entry point for the EZMob MCP Server."""
    mcp.run()

if __name__ == "__main__":
    main()
