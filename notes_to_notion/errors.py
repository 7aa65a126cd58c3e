from __future__ import annotations

from typing import Iterable, Optional, Tuple


class ExportError(RuntimeError):
    """Raised (or collected) when a single note could not be exported."""

    def __init__(self, message: str, document_id: Optional[str] = None) -> None:
        super().__init__(message)
        self.document_id = document_id


class CompositeExportError(ExportError):
    """Aggregates every per-note failure of a batch export."""

    def __init__(self, errors: Iterable[ExportError]) -> None:
        self.errors: Tuple[ExportError, ...] = tuple(errors)
        lines = [f"{len(self.errors)} note(s) failed to export"]
        lines.extend(f"  - {err}" for err in self.errors)
        super().__init__("\n".join(lines))
