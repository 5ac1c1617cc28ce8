"""Evernote to OneNote import tool."""

__version__ = "1.0.0"

from .converter import ContentTransformer, convert_export, convert_note, strip_wrapper
from .enex_parser import count_notes_in_enex, parse_enex_file
from .errors import ConfigurationError, EnexParseError, EvernoteImportError, OneNoteError
from .importer import ImportResult, publish_export, run_import
from .models import (
    Attachment,
    Export,
    Note,
    NoteAttributes,
    PageRequest,
    Resource,
    ResourceAttributes,
)
from .normalizer import TitleNormalizer, normalize_titles
from .onenote_client import OneNoteClient, build_page_html
from .storage import PayloadStore, TempPayload

__all__ = [
    "Attachment",
    "ConfigurationError",
    "ContentTransformer",
    "EnexParseError",
    "EvernoteImportError",
    "Export",
    "ImportResult",
    "Note",
    "NoteAttributes",
    "OneNoteClient",
    "OneNoteError",
    "PageRequest",
    "PayloadStore",
    "Resource",
    "ResourceAttributes",
    "TempPayload",
    "TitleNormalizer",
    "build_page_html",
    "convert_export",
    "convert_note",
    "count_notes_in_enex",
    "normalize_titles",
    "parse_enex_file",
    "publish_export",
    "run_import",
    "strip_wrapper",
]
