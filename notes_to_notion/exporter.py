from __future__ import annotations

import asyncio
import inspect
import json
import logging
from typing import Dict, List, Optional, Sequence, Tuple, Union

from .blocks import MAX_CHILD_BLOCKS, markdown_to_blocks, plain_rich_text
from .config import ConfigField, PodConfig
from .errors import ExportError
from .models import ConversionResult, Document, ExportResult, SubmissionOutcome
from .rate_limiter import RateLimiter


logger = logging.getLogger(__name__)


def build_page_payload(document: Document, parent_page_id: str) -> Dict:
    """Assemble the JSON body for creating a Notion page under the parent page."""

    children = markdown_to_blocks(document.body)
    if len(children) > MAX_CHILD_BLOCKS:
        logger.warning(
            "Truncating %s from %d to %d blocks", document.id, len(children), MAX_CHILD_BLOCKS
        )
        children = children[:MAX_CHILD_BLOCKS]

    return {
        "parent": {"page_id": parent_page_id}
        ,"properties": {
            "title": {"title": plain_rich_text(document.title)}
        }
        ,"children": children
    }


class NotionExportPod:
    """Exports notes as child pages of one Notion page.

    Pages are created concurrently, one task per note, with every request
    passing through the pod's rate limiter first. A failing note never stops
    the others; its error is collected and returned next to the pages that
    were created.
    """

    def __init__(
        self
        ,config: PodConfig
        ,client
        ,*
        ,limiter: Optional[RateLimiter] = None
        ,debug_logger: Optional[logging.Logger] = None
    ) -> None:
        self.config = config
        self.client = client
        self.limiter = limiter or RateLimiter()
        self.debug_logger = debug_logger

    async def export_note(self, document: Document) -> ExportResult:
        return await self.export_notes([document])

    async def export_notes(self, documents: Sequence[Document]) -> ExportResult:
        """Convert and upload every note, reporting created pages and failures together."""

        conversions, conversion_errors = self.convert_notes(documents)
        created, submission_errors = await self.create_pages(conversions)
        errors = conversion_errors + submission_errors

        if errors:
            logger.warning(
                "Exported %d of %d notes, %d failed", len(created), len(documents), len(errors)
            )
        else:
            logger.info("Exported %d notes", len(created))
        return ExportResult(created=tuple(created), errors=tuple(errors))

    def convert_note(self, document: Document) -> ConversionResult:
        return ConversionResult(
            document_id=document.id
            ,payload=build_page_payload(document, self.config.parent_page_id)
        )

    def convert_notes(
        self, documents: Sequence[Document]
    ) -> Tuple[List[ConversionResult], List[ExportError]]:
        """Convert each note; a note that cannot be converted becomes a failed item."""

        conversions: List[ConversionResult] = []
        errors: List[ExportError] = []
        for document in documents:
            try:
                conversions.append(self.convert_note(document))
            except Exception as exc:
                logger.warning("Could not convert %s: %s", document.id, exc)
                error = ExportError(f"{document.id}: conversion failed: {exc}", document_id=document.id)
                error.__cause__ = exc
                errors.append(error)
        return conversions, errors

    async def create_pages(
        self, conversions: Sequence[ConversionResult]
    ) -> Tuple[List[SubmissionOutcome], List[ExportError]]:
        results = await asyncio.gather(*(self._create_page(entry) for entry in conversions))

        created: List[SubmissionOutcome] = []
        errors: List[ExportError] = []
        for result in results:
            if isinstance(result, ExportError):
                errors.append(result)
            else:
                created.append(result)
        return created, errors

    async def _create_page(self, entry: ConversionResult) -> Union[SubmissionOutcome, ExportError]:
        try:
            await self.limiter.acquire(1)
            if self.debug_logger:
                self.debug_logger.info(
                    "Sending payload for %s:\n%s", entry.document_id, json.dumps(entry.payload, indent=2)
                )
            response = await self._call_create_page(entry.payload)
            if self.debug_logger:
                self.debug_logger.info(
                    "Response for %s:\n%s", entry.document_id, json.dumps(response, indent=2, default=str)
                )
            notion_id = response["id"]
        except Exception as exc:
            logger.warning("Notion create failed for %s: %s", entry.document_id, exc)
            error = ExportError(f"{entry.document_id}: {exc}", document_id=entry.document_id)
            error.__cause__ = exc
            return error

        outcome = SubmissionOutcome(
            document_id=entry.document_id
            ,notion_id=notion_id
            ,url=response.get("url")
        )
        logger.info("Created Notion page %s for %s", outcome.notion_id, outcome.document_id)
        return outcome

    async def _call_create_page(self, payload: Dict) -> Dict:
        create_page = self.client.create_page
        if inspect.iscoroutinefunction(create_page):
            return await create_page(payload)
        return await asyncio.to_thread(create_page, payload)

    @staticmethod
    def config_schema() -> Dict[str, ConfigField]:
        """Declare the fields a Notion export pod needs."""

        return {
            "connection_id": ConfigField(
                description="ID of the Notion Connected Service"
                ,type="string"
                ,required=True
            )
            ,"parent_page_id": ConfigField(
                description="ID of parent page in notion"
                ,type="string"
                ,required=True
            )
        }
