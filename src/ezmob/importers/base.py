"""
Report models for an import run.
"""

from __future__ import annotations

from pydantic import BaseModel, Field


class ImportedEntry(BaseModel):
    """An entity that was successfully imported."""

    name: str = Field(description="Entity name")
    kind: str = Field(default="monster", description='"monster" or "monster group"')
    summary: str = Field(default="", description="Brief summary of the imported entity")


class ImportWarning(BaseModel):
    """A warning generated during import."""

    entry: str = Field(description="Entity that triggered the warning")
    message: str = Field(description="Human-readable warning message")


class NotImported(BaseModel):
    """An entity that could not be imported."""

    entry: str = Field(description="Entity name that was not imported")
    reason: str = Field(description="Reason why the entity was not imported")


class ImportReport(BaseModel):
    """Structured import report with status, imported entries, warnings and rejections."""

    status: str = Field(
        default="success",
        description='Import status: "success", "success_with_warnings", or "failed"',
    )
    source_format: str | None = Field(default=None, description='Detected input format: "legacy", "retail" or "malice"')
    imported: list[ImportedEntry] = Field(
        default_factory=list,
        description="Entities successfully imported with summaries",
    )
    warnings: list[ImportWarning] = Field(
        default_factory=list,
        description="Non-fatal issues encountered during import",
    )
    not_imported: list[NotImported] = Field(
        default_factory=list,
        description="Entities that could not be imported with reasons",
    )

    def add_warnings(self, entry: str, messages: list[str]) -> None:
        for message in messages:
            self.warnings.append(ImportWarning(entry=entry, message=message.removeprefix("!!!! ")))

    def finalize(self) -> "ImportReport":
        """Set ``status`` from the collected entries and return self."""
        if not self.imported:
            self.status = "failed"
        elif self.warnings or self.not_imported:
            self.status = "success_with_warnings"
        else:
            self.status = "success"
        return self

    def format(self) -> str:
        """Format the report as a readable text block.

        Returns:
            Multi-line formatted string suitable for MCP tool response.
        """
        lines: list[str] = []

        # Header
        title = f"EZMob Import Report ({self.source_format})" if self.source_format else "EZMob Import Report"
        lines.append(title)
        status_display = self.status.upper().replace("_", " ")
        lines.append(f"Status: {status_display}")
        lines.append("")

        # Imported entries
        if self.imported:
            lines.append(f"Imported ({len(self.imported)}):")
            for entry in self.imported:
                line = f"  - {entry.name}"
                if entry.summary:
                    line += f": {entry.summary}"
                lines.append(line)
            lines.append("")

        # Warnings, grouped by entity
        if self.warnings:
            lines.append(f"Warnings ({len(self.warnings)}):")
            grouped: dict[str, list[str]] = {}
            for w in self.warnings:
                grouped.setdefault(w.entry, []).append(w.message)
            for entry, messages in grouped.items():
                lines.append(f"  {entry}:")
                for message in messages:
                    lines.append(f"    - {message}")
            lines.append("")

        # Not imported
        if self.not_imported:
            lines.append(f"Not Imported ({len(self.not_imported)}):")
            for ni in self.not_imported:
                lines.append(f"  - {ni.entry}: {ni.reason}")
            lines.append("")

        return "\n".join(lines).rstrip()
