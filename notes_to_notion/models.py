from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Optional, Tuple

from .errors import CompositeExportError, ExportError


@dataclass(frozen=True)
class Document:
    '''A note to export'''

    id: str
    title: str
    body: str


@dataclass(frozen=True)
class ConversionResult:
    '''Create-page body for a single note'''

    document_id: str
    payload: Dict


@dataclass(frozen=True)
class SubmissionOutcome:
    '''Page created in Notion for a given note'''

    document_id: str
    notion_id: str
    url: Optional[str] = None


@dataclass(frozen=True)
class ExportResult:
    created: Tuple[SubmissionOutcome, ...] = field(default_factory=tuple)
    errors: Tuple[ExportError, ...] = field(default_factory=tuple)

    @property
    def ok(self) -> bool:
        return not self.errors

    @property
    def error(self) -> Optional[CompositeExportError]:
        """Return every per-note failure wrapped in one error, or None when the batch succeeded."""

        if not self.errors:
            return None
        return CompositeExportError(self.errors)
