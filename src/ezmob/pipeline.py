"""
Top-level import entry points.

Each call pre-processes the input (``sanitize_text`` unless the caller
supplies its own filter), picks the parser, splits the text into
blocks and runs every block through parsing and import. A block that
fails never stops its siblings; its problems end up in the returned
``ImportReport``.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING

from pydantic import BaseModel, Field

from .config import ImporterConfig
from .importers import ImportedEntry, ImportReport, MaliceGroupImporter, MonsterImporter, NotImported
from .logutils import ImportLog, LogSink
from .models import Monster
from .parsing import LEGACY_FORMAT, RETAIL_FORMAT, MaliceGroupParser, MonsterFormat, MonsterParser, find_malice_groups
from .utils import sanitize_text, summarize_names

if TYPE_CHECKING:
    from .host import ImportHost

NO_TEXT_MESSAGE = "No text found in input!"

# Pre-processing applied to raw input before format detection
TextFilter = Callable[[str], str]


class ParseResult(BaseModel):
    """Canonical records parsed from a text, without importing them."""

    source_format: str = Field(description='"legacy" or "retail"')
    monsters: list[Monster] = Field(default_factory=list, description="Monsters that passed validation")
    rejected: list[str] = Field(default_factory=list, description="Names of blocks that failed validation")
    warnings: list[str] = Field(default_factory=list, description="Warnings logged while parsing")


def detect_format(text: str, config: ImporterConfig) -> MonsterFormat:
    """Legacy when the sanitized text contains the legacy marker, retail otherwise."""
    return LEGACY_FORMAT if config.legacy_marker in text else RETAIL_FORMAT


def _empty_input(log: ImportLog, report: ImportReport) -> ImportReport:
    mark = log.mark()
    log.warn(NO_TEXT_MESSAGE)
    log.debug("No text found in input file!")
    report.add_warnings("input", log.warnings_since(mark))
    report.status = "failed"
    return report


def _monster_summary(monster: Monster) -> str:
    kind = "Minion " if monster.is_minion else ""
    return (
        f"Level {monster.level} {kind}{monster.role}, "
        f"{len(monster.features)} features, {len(monster.abilities)} abilities"
    )


def import_text(
    text: str | None,
    host: "ImportHost",
    config: ImporterConfig | None = None,
    sink: LogSink | None = None,
    preprocess: TextFilter = sanitize_text,
) -> ImportReport:
    """Parse every monster stat block in *text* and import it into *host*.

    Args:
        text: Raw pasted text, one or more stat blocks.
        host: Collaborator receiving lookups and persisted entities.
        config: Importer settings; defaults apply when omitted.
        sink: Optional callable receiving every emitted log line.
        preprocess: Text filter run before format detection.

    Returns:
        Report listing imported monsters, warnings and rejected blocks.
    """
    config = config or ImporterConfig()
    log = ImportLog.from_config(config, sink)
    report = ImportReport()

    text = preprocess(text or "")
    if not text.strip():
        return _empty_input(log, report)

    fmt = detect_format(text, config)
    report.source_format = fmt.name
    label = fmt.name.title()

    log.impl(f"EZMOB {label} importer starting.")
    log.debug("SANITIZED\n%s", text)

    blocks = fmt.find_monsters(text)
    log.debug("MONSTERS %s", summarize_names(blocks))
    log.impl(f"Found monsters: {len(blocks)}.")

    if blocks:
        importer = MonsterImporter(host, log, config)
        with log.section("Monster import"):
            for block in blocks:
                mark = log.mark()
                parser = MonsterParser(block, fmt, host, log, config)

                if not parser.parse():
                    log.error(f"Unable to parse Monster [{block.name}].")
                    report.not_imported.append(NotImported(entry=block.name, reason="failed validation"))
                elif importer.run(parser.monster, parser.source) is None:
                    report.not_imported.append(NotImported(entry=block.name, reason="protected from overwrite"))
                else:
                    report.imported.append(
                        ImportedEntry(name=block.name, summary=_monster_summary(parser.monster))
                    )

                report.add_warnings(block.name, log.warnings_since(mark))

    log.info(f"EZMOB {label} importer complete.")
    return report.finalize()


def import_malice_text(
    text: str | None,
    host: "ImportHost",
    config: ImporterConfig | None = None,
    sink: LogSink | None = None,
    preprocess: TextFilter = sanitize_text,
) -> ImportReport:
    """Parse every malice block in *text* and create its monster group on *host*.

    Groups the host already knows are reported as not imported; they are
    never overwritten.
    """
    config = config or ImporterConfig()
    log = ImportLog.from_config(config, sink)
    report = ImportReport(source_format="malice")

    text = preprocess(text or "")
    if not text.strip():
        return _empty_input(log, report)

    log.impl("EZMOB Malice importer starting.")
    blocks = find_malice_groups(text)
    log.impl(f"Found monster groups: {len(blocks)}.")

    importer = MaliceGroupImporter(host, log)
    for block in blocks:
        mark = log.mark()
        parser = MaliceGroupParser(block, host, log)

        if parser.parse() and parser.group is not None:
            group = importer.run(parser.group)
            report.imported.append(
                ImportedEntry(
                    name=group.name,
                    kind="monster group",
                    summary=summarize_names(group.malice_abilities),
                )
            )
        else:
            reason = "already exists" if parser.group is None else "failed validation"
            report.not_imported.append(NotImported(entry=block.name, reason=reason))

        report.add_warnings(block.name, log.warnings_since(mark))

    log.info("EZMOB Malice importer complete.")
    return report.finalize()


def parse_text(
    text: str | None,
    host: "ImportHost",
    config: ImporterConfig | None = None,
    sink: LogSink | None = None,
    preprocess: TextFilter = sanitize_text,
) -> ParseResult:
    """Parse *text* into canonical records without importing anything.

    *host* is only consulted for lookups (damage types); nothing is
    persisted, so parsing the same text twice gives the same records.
    """
    config = config or ImporterConfig()
    log = ImportLog.from_config(config, sink)

    text = preprocess(text or "")
    if not text.strip():
        log.warn(NO_TEXT_MESSAGE)
        return ParseResult(source_format=RETAIL_FORMAT.name, warnings=log.warnings)

    fmt = detect_format(text, config)
    result = ParseResult(source_format=fmt.name)

    for block in fmt.find_monsters(text):
        parser = MonsterParser(block, fmt, host, log, config)
        if parser.parse():
            result.monsters.append(parser.monster)
        else:
            result.rejected.append(block.name)

    result.warnings = log.warnings
    return result
