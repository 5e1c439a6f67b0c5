from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from uselsp.completion import CompletionEntry, CompletionResolution
from uselsp.diagnostics import Finding


class PositionDTO(BaseModel):
    line: int
    character: int


class FindingDTO(BaseModel):
    severity: str
    start: PositionDTO
    end: PositionDTO
    message: str
    source: str

    @classmethod
    def from_finding(cls, finding: Finding) -> FindingDTO:
        return cls(
            severity=finding.severity.name.lower(),
            start=PositionDTO(line=finding.start.line, character=finding.start.character),
            end=PositionDTO(line=finding.end.line, character=finding.end.character),
            message=finding.message,
            source=finding.source,
        )


class FileCheckDTO(BaseModel):
    path: str
    findings: List[FindingDTO] = []


class CheckResponse(BaseModel):
    files: List[FileCheckDTO] = []
    errors: List[str] = []

    @property
    def finding_count(self) -> int:
        return sum(len(item.findings) for item in self.files)


class CompletionEntryDTO(BaseModel):
    id: int
    label: str
    category: str

    @classmethod
    def from_entry(cls, entry: CompletionEntry) -> CompletionEntryDTO:
        return cls(id=entry.id, label=entry.label, category=entry.category.value)


class CompletionResolutionDTO(BaseModel):
    id: int
    label: str
    category: Optional[str] = None
    insert_text: str
    insert_format: str
    sort_text: Optional[str] = None
    documentation: str

    @classmethod
    def from_resolution(
        cls, entry_id: int, resolution: CompletionResolution
    ) -> CompletionResolutionDTO:
        return cls(
            id=entry_id,
            label=resolution.label,
            category=resolution.category.value if resolution.category is not None else None,
            insert_text=resolution.insert_text,
            insert_format=resolution.insert_format.value,
            sort_text=resolution.sort_text,
            documentation=resolution.documentation,
        )


class InitializationOptions(BaseModel):
    """`initializationOptions` a client may send with `initialize`."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    log_level: Optional[str] = Field(default=None, alias="logLevel")
