"""Publish a parsed export to OneNote as one notebook, one section and its pages."""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Optional

from .converter import convert_export
from .enex_parser import parse_enex_file
from .models import Export, PageRequest
from .normalizer import TitleNormalizer
from .onenote_client import OneNoteClient
from .storage import PayloadStore

logger = logging.getLogger(__name__)

PageCallback = Callable[[PageRequest], None]


@dataclass
class ImportResult:
    """Result of publishing one export."""

    export_name: str
    notebook_name: str
    section_name: str
    notebook_id: Optional[str] = None
    section_id: Optional[str] = None
    pages_created: int = 0
    attachments_sent: int = 0
    responses: list[dict] = field(default_factory=list)
    dry_run: bool = False

    def summary(self) -> str:
        """Get a summary string of the import."""
        prefix = "[dry-run] " if self.dry_run else ""
        return (
            f"{prefix}{self.pages_created} page(s) with "
            f"{self.attachments_sent} attachment(s) in "
            f"{self.notebook_name}/{self.section_name}"
        )


def publish_export(
    export: Export,
    client: Optional[OneNoteClient],
    notebook_name: Optional[str] = None,
    section_name: Optional[str] = None,
    dry_run: bool = False,
    on_page: Optional[PageCallback] = None,
) -> ImportResult:
    """
    Normalize, transform and publish every note of export.

    The notebook is created first, then the section, then one page per
    note in export order. A failing call raises and stops the run; pages
    created before it are kept.

    Args:
        export: Parsed export whose payloads are still live
        client: OneNote client, may be None for a dry run
        notebook_name: Notebook display name (default: export name)
        section_name: Section display name (default: export name)
        dry_run: If True, build the page requests without calling the API
        on_page: Called after each page is handled
    """
    if client is None and not dry_run:
        raise ValueError("A OneNote client is required unless dry_run is set")

    result = ImportResult(
        export_name=export.name,
        notebook_name=notebook_name or export.name,
        section_name=section_name or export.name,
        dry_run=dry_run,
    )

    TitleNormalizer().normalize(export)

    if not dry_run:
        result.notebook_id = client.create_notebook(result.notebook_name)
        result.section_id = client.create_section(result.notebook_id, result.section_name)

    for page in convert_export(export):
        if not dry_run:
            result.responses.append(client.create_page(result.section_id, page))
            logger.info("Created page %r (%d attachment(s))", page.title, len(page.attachments))
        result.pages_created += 1
        result.attachments_sent += len(page.attachments)
        if on_page is not None:
            on_page(page)

    return result


def run_import(
    enex_path: Path | str,
    client: Optional[OneNoteClient],
    notebook_name: Optional[str] = None,
    section_name: Optional[str] = None,
    dry_run: bool = False,
    temp_dir: Optional[Path] = None,
    on_page: Optional[PageCallback] = None,
) -> ImportResult:
    """Parse an ENEX file and publish it, releasing decoded payloads afterwards."""
    store = PayloadStore(temp_dir)
    try:
        export = parse_enex_file(enex_path, store)
        return publish_export(
            export,
            client,
            notebook_name=notebook_name,
            section_name=section_name,
            dry_run=dry_run,
            on_page=on_page,
        )
    finally:
        store.release_all()
