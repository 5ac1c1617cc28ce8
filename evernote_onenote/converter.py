"""Convert ENML (Evernote Markup Language) note content to OneNote XHTML."""

import logging
import re
from typing import Iterator

from lxml import etree

from .models import Attachment, Export, Note, PageRequest

logger = logging.getLogger(__name__)

# Image types OneNote can render inline from a multipart part
SUPPORTED_MEDIA_TYPES = ("image/jpeg", "image/png", "image/gif")

# HTML entities that ENML notes use but XML does not predefine
ENTITY_REPLACEMENTS = {
    "&nbsp;": "&#160;",
    "&ensp;": "&#8194;",
    "&emsp;": "&#8195;",
    "&copy;": "&#169;",
    "&reg;": "&#174;",
}

WRAPPER_START = "<en-note>"
WRAPPER_END = "</en-note>"

XML_DECLARATION_RE = re.compile(r"<\?xml[^?]*\?>")
DOCTYPE_RE = re.compile(r"<!DOCTYPE[^>]*>")


def replace_entities(content: str) -> str:
    """Replace HTML-only character entities with numeric references."""
    for entity, replacement in ENTITY_REPLACEMENTS.items():
        content = content.replace(entity, replacement)
    return content


def strip_wrapper(content: str) -> str:
    """Remove the en-note tags if, and only if, they enclose all of content."""
    if content.startswith(WRAPPER_START) and content.endswith(WRAPPER_END):
        return content[len(WRAPPER_START) : len(content) - len(WRAPPER_END)]
    return content


class ContentTransformer:
    """Rewrites the en-media references of one note into img elements."""

    def __init__(self, note: Note):
        self.note = note
        # Hashes of rewritten en-media elements, in document order
        self.media_hashes: list[str] = []

    def convert(self) -> str:
        """Convert the note's ENML content to XHTML body content."""
        content = replace_entities(self.note.content)
        content = XML_DECLARATION_RE.sub("", content)
        content = DOCTYPE_RE.sub("", content)
        content = content.strip()

        if not content:
            return ""

        try:
            parser = etree.XMLParser(huge_tree=True)
            root = etree.fromstring(content.encode("utf-8"), parser)
        except etree.XMLSyntaxError as e:
            logger.warning("Content of %r is not well-formed, passing it through: %s", self.note.title, e)
            return content

        for element in list(root.iter("en-media")):
            self._handle_media(element)

        # lxml writes an empty en-note as <en-note/>, which strip_wrapper would keep
        if root.tag == "en-note" and not root.attrib and len(root) == 0 and not root.text:
            return ""

        return strip_wrapper(etree.tostring(root, encoding="unicode"))

    def _handle_media(self, element: etree._Element) -> None:
        """Turn an en-media element into an img referencing a multipart part."""
        media_type = element.get("type", "")
        if media_type not in SUPPORTED_MEDIA_TYPES:
            logger.debug("Skipping en-media of type %r in %r", media_type, self.note.title)
            return

        media_hash = element.get("hash")
        if not media_hash:
            logger.debug("Skipping en-media without hash in %r", self.note.title)
            return

        self.media_hashes.append(media_hash)
        element.tag = "img"
        element.set("src", f"name:{media_hash}")
        del element.attrib["hash"]

    def build_attachments(self) -> list[Attachment]:
        """Pair the note's resources with the rewritten media references.

        A resource matches the first recorded hash that occurs in its
        source URL. Resources without a match are left out.
        """
        attachments = []
        for resource in self.note.resources:
            source_url = resource.source_url
            if not source_url:
                continue

            media_hash = next((h for h in self.media_hashes if h in source_url), None)
            if media_hash is None:
                continue

            if resource.payload is None:
                logger.debug("Resource for %s has no decoded payload, skipping", media_hash)
                continue

            attachments.append(
                Attachment(
                    name=media_hash,
                    content_type=resource.mime or "application/octet-stream",
                    payload=resource.payload,
                    width=resource.width,
                    height=resource.height,
                )
            )
        return attachments


def convert_note(note: Note) -> PageRequest:
    """Convert an Evernote note to a OneNote page request."""
    transformer = ContentTransformer(note)
    content = transformer.convert()

    return PageRequest(
        title=note.title,
        content=content,
        created=note.created,
        source_url=note.source_url,
        attachments=transformer.build_attachments(),
    )


def convert_export(export: Export) -> Iterator[PageRequest]:
    """Yield one page request per note, in the export's note order."""
    for note in export.notes:
        yield convert_note(note)
