"""ENEX file parser for Evernote exports."""

import base64
import binascii
import logging
import re
from datetime import datetime, timezone
from pathlib import Path

from lxml import etree

from .errors import EnexParseError
from .models import Export, Note, NoteAttributes, Resource, ResourceAttributes
from .storage import PayloadStore

logger = logging.getLogger(__name__)

ENEX_DATETIME_FORMAT = "%Y%m%dT%H%M%SZ"
ENEX_DATETIME_RE = re.compile(r"^\d{8}T\d{6}Z$")


def parse_enex_datetime(dt_string: str | None, field_name: str = "date") -> datetime:
    """Parse Evernote datetime format (YYYYMMDDTHHMMSSZ) as UTC.

    Timestamps are mandatory, so a missing or malformed value raises
    EnexParseError instead of defaulting.
    """
    if not dt_string:
        raise EnexParseError(f"Missing <{field_name}> timestamp")
    value = dt_string.strip()
    if not ENEX_DATETIME_RE.match(value):
        raise EnexParseError(f"Malformed <{field_name}> timestamp: {dt_string!r}")
    try:
        # Format: 20231215T143022Z
        return datetime.strptime(value, ENEX_DATETIME_FORMAT).replace(tzinfo=timezone.utc)
    except ValueError as e:
        raise EnexParseError(f"Malformed <{field_name}> timestamp: {dt_string!r}") from e


def _child_text(elem: etree._Element, tag: str) -> str | None:
    child = elem.find(tag)
    if child is None:
        return None
    return child.text or ""


def _parse_float(value: str | None) -> float:
    if value is None:
        return 0.0
    try:
        return float(value)
    except ValueError:
        return 0.0


def _parse_int(value: str | None) -> int:
    if value is None:
        return 0
    try:
        return int(value)
    except ValueError:
        return 0


def parse_note_attributes(attrs_elem: etree._Element) -> NoteAttributes:
    """Parse a note-attributes element. Every field is optional."""
    return NoteAttributes(
        latitude=_parse_float(_child_text(attrs_elem, "latitude")),
        longitude=_parse_float(_child_text(attrs_elem, "longitude")),
        altitude=_parse_float(_child_text(attrs_elem, "altitude")),
        author=_child_text(attrs_elem, "author"),
        source_url=_child_text(attrs_elem, "source-url"),
    )


def parse_resource(resource_elem: etree._Element, store: PayloadStore) -> Resource:
    """Parse a resource element, writing base64 data through the store."""
    resource = Resource(
        mime=_child_text(resource_elem, "mime"),
        width=_parse_int(_child_text(resource_elem, "width")),
        height=_parse_int(_child_text(resource_elem, "height")),
    )

    resource_attrs = resource_elem.find("resource-attributes")
    if resource_attrs is not None:
        resource.attributes = ResourceAttributes(
            file_name=_child_text(resource_attrs, "file-name"),
            source_url=_child_text(resource_attrs, "source-url"),
        )

    data_elem = resource_elem.find("data")
    if data_elem is None:
        return resource

    if data_elem.get("encoding") != "base64":
        logger.debug("Resource data is not base64 encoded, keeping no payload")
        return resource

    try:
        data = base64.b64decode(data_elem.text or "")
    except (binascii.Error, ValueError):
        logger.warning("Could not decode base64 resource data (%s), keeping no payload", resource.mime)
        return resource

    resource.payload = store.write(data)
    return resource


def parse_note(note_elem: etree._Element, store: PayloadStore) -> Note:
    """Parse a note element into a Note object."""
    title = _child_text(note_elem, "title") or ""
    content = _child_text(note_elem, "content") or ""

    created = parse_enex_datetime(_child_text(note_elem, "created"), "created")
    updated = parse_enex_datetime(_child_text(note_elem, "updated"), "updated")

    # Tags come from a single comma-separated field
    tag_text = _child_text(note_elem, "tag")
    tags = tag_text.split(",") if tag_text else []

    attributes = None
    note_attrs = note_elem.find("note-attributes")
    if note_attrs is not None:
        attributes = parse_note_attributes(note_attrs)

    resources = [parse_resource(resource_elem, store) for resource_elem in note_elem.iter("resource")]

    return Note(
        title=title,
        content=content,
        created=created,
        updated=updated,
        tags=tags,
        attributes=attributes,
        resources=resources,
    )


def _load_tree(file_path: Path) -> etree._Element:
    if not file_path.exists():
        raise FileNotFoundError(f"ENEX file not found: {file_path}")

    # Use huge_tree parser to handle very large text nodes (base64 attachments)
    parser = etree.XMLParser(huge_tree=True)
    try:
        tree = etree.parse(str(file_path), parser)
    except etree.XMLSyntaxError as e:
        raise EnexParseError(f"Malformed ENEX document {file_path}: {e}") from e
    return tree.getroot()


def parse_enex_file(file_path: Path | str, store: PayloadStore) -> Export:
    """
    Parse an ENEX file into an Export.

    Every <note> element anywhere in the document is read, in document
    order. Base64 resource data is written to temporary files owned by
    store; the caller releases them once publishing is done.
    """
    file_path = Path(file_path)
    root = _load_tree(file_path)

    export = Export(name=file_path.stem)
    for note_elem in root.iter("note"):
        export.notes.append(parse_note(note_elem, store))

    logger.info("Parsed %d note(s) from %s", len(export.notes), file_path.name)
    return export


def count_notes_in_enex(file_path: Path | str) -> int:
    """Count the number of notes in an ENEX file without decoding resources."""
    root = _load_tree(Path(file_path))
    return sum(1 for _ in root.iter("note"))
